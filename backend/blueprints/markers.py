"""Floorplan markers blueprint for Flask API."""
from flask import Blueprint, request
from ..models import db, Floorplan, FloorplanMarker
from ..base.generic_crud import GenericCRUD
from ..utils import validate_foreign_key
from shared.validation import ValidationError
from shared.schemas import MarkerCreate, MarkerUpdate, Marker
bp = Blueprint('markers', __name__, url_prefix='/api')


def check_placement(validated_data, resource=None):
    """Reject markers pointing at a missing floorplan or a page it does not have."""
    floorplan_id = validated_data['floorplan_id']
    if not validate_foreign_key('floorplans', floorplan_id):
        raise ValidationError(f'floorplan_id {floorplan_id} does not exist')

    floorplan = db.session.get(Floorplan, floorplan_id)
    page = validated_data.get('page', 1)
    if page > (floorplan.page_count or 1):
        raise ValidationError(f'page {page} is out of range for floorplan {floorplan_id}')
    return validated_data


marker_crud = GenericCRUD(
    model=FloorplanMarker,
    create_schema=MarkerCreate,
    update_schema=MarkerUpdate,
    response_schema=Marker,
    logger_name='markers',
    pre_create_hook=check_placement,
    pre_update_hook=check_placement,
)


@bp.route('/floorplans/<int:floorplan_id>/markers', methods=['GET'])
def get_floorplan_markers(floorplan_id):
    """List every marker of a floorplan across all pages.

    An optional ``page`` query argument narrows the listing to one page.
    """
    db.get_or_404(Floorplan, floorplan_id)
    filters = {'floorplan_id': floorplan_id}
    page = request.args.get('page', type=int)
    if page is not None:
        filters['page'] = page
    return marker_crud.get_list(**filters)


@bp.route('/floorplan-markers/<int:marker_id>', methods=['GET'])
def get_marker(marker_id):
    """Get single marker by ID."""
    return marker_crud.get_detail(marker_id)


@bp.route('/floorplan-markers', methods=['POST'])
def create_marker():
    """Place a new marker."""
    return marker_crud.create()


@bp.route('/floorplan-markers/<int:marker_id>', methods=['PUT'])
def update_marker(marker_id):
    """Replace a marker record; floorplan_id, page, marker_type and equipment_id are required."""
    return marker_crud.update(marker_id)


@bp.route('/floorplan-markers/<int:marker_id>', methods=['DELETE'])
def delete_marker(marker_id):
    """Delete a marker."""
    return marker_crud.delete(marker_id)
