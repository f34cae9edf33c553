from flask_sqlalchemy import SQLAlchemy
import logging
from shared.models import (
    Base, Project, Floorplan, FloorplanMarker, AccessPoint, Camera, Elevator, Intercom
)
from shared.enums import EquipmentType

logger = logging.getLogger(__name__)
db = SQLAlchemy(model_class=Base)

EQUIPMENT_MODELS = {
    EquipmentType.ACCESS_POINT: AccessPoint,
    EquipmentType.CAMERA: Camera,
    EquipmentType.ELEVATOR: Elevator,
    EquipmentType.INTERCOM: Intercom,
}
