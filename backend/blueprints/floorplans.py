"""Floorplans blueprint for Flask API."""
from flask import Blueprint, Response
from ..models import db, Floorplan
from ..base.generic_crud import GenericCRUD
from ..utils import validate_foreign_key, cascade_delete_floorplan
from shared.validation import ValidationError
from shared.schemas import FloorplanCreate, FloorplanSummary, FloorplanDetail, decode_pdf_data
bp = Blueprint('floorplans', __name__, url_prefix='/api')


class FloorplanCRUD(GenericCRUD):
    """CRUD operations for Floorplan model.

    Listings omit the PDF body; only the detail and raw document routes carry it.
    """

    def __init__(self):
        super().__init__(
            model=Floorplan,
            create_schema=FloorplanCreate,
            update_schema=FloorplanCreate,
            response_schema=FloorplanSummary,
            logger_name='floorplans',
            pre_create_hook=self.check_project,
            cascade_delete_func=cascade_delete_floorplan,
        )

    @staticmethod
    def check_project(validated_data):
        project_id = validated_data['project_id']
        if not validate_foreign_key('projects', project_id):
            raise ValidationError(f'project_id {project_id} does not exist')
        return validated_data

    def get_detail(self, resource_id):
        floorplan = db.get_or_404(self.model, resource_id)
        return FloorplanDetail.model_validate(floorplan).model_dump(mode='json')

    def get_document(self, resource_id):
        """Return the stored PDF as a binary response."""
        floorplan = db.get_or_404(self.model, resource_id)
        pdf_bytes = decode_pdf_data(floorplan.pdf_data)
        return Response(
            pdf_bytes,
            mimetype='application/pdf',
            headers={'Content-Disposition': f'inline; filename="floorplan-{floorplan.id}.pdf"'},
        )


floorplan_crud = FloorplanCRUD()


@bp.route('/projects/<int:project_id>/floorplans', methods=['GET'])
def get_project_floorplans(project_id):
    """List floorplans of a project (metadata only)."""
    return floorplan_crud.get_list(project_id=project_id)


@bp.route('/floorplans/<int:floorplan_id>', methods=['GET'])
def get_floorplan(floorplan_id):
    """Get single floorplan with its base64 PDF body."""
    return floorplan_crud.get_detail(floorplan_id)


@bp.route('/floorplans/<int:floorplan_id>/pdf', methods=['GET'])
def get_floorplan_pdf(floorplan_id):
    """Download the floorplan document."""
    return floorplan_crud.get_document(floorplan_id)


@bp.route('/floorplans', methods=['POST'])
def create_floorplan():
    """Upload a new floorplan."""
    return floorplan_crud.create()


@bp.route('/floorplans/<int:floorplan_id>', methods=['DELETE'])
def delete_floorplan(floorplan_id):
    """Delete a floorplan and its markers."""
    return floorplan_crud.delete(floorplan_id)
