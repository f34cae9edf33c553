"""Equipment blueprint for Flask API.

Access points, cameras, elevators and intercoms share one set of routes,
registered once per kind.
"""
from flask import Blueprint
from ..models import EQUIPMENT_MODELS
from ..base.generic_crud import GenericCRUD, register_crud_routes
from ..utils import validate_foreign_key
from shared.enums import EquipmentType
from shared.validation import ValidationError
from shared.schemas import AccessPointCreate, CameraCreate, ElevatorCreate, IntercomCreate
bp = Blueprint('equipment', __name__, url_prefix='/api')

EQUIPMENT_SCHEMAS = {
    EquipmentType.ACCESS_POINT: AccessPointCreate,
    EquipmentType.CAMERA: CameraCreate,
    EquipmentType.ELEVATOR: ElevatorCreate,
    EquipmentType.INTERCOM: IntercomCreate,
}


def check_project(validated_data, resource=None):
    project_id = validated_data['project_id']
    if not validate_foreign_key('projects', project_id):
        raise ValidationError(f'project_id {project_id} does not exist')
    return validated_data


equipment_cruds = {}
for equipment_type, schema in EQUIPMENT_SCHEMAS.items():
    model = EQUIPMENT_MODELS[equipment_type]
    equipment_cruds[equipment_type] = GenericCRUD(
        model=model,
        create_schema=schema,
        update_schema=schema,
        logger_name=model.__tablename__,
        pre_create_hook=check_project,
        pre_update_hook=check_project,
    )
    register_crud_routes(bp, equipment_cruds[equipment_type], equipment_type.value)
