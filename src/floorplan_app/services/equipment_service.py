"""Equipment records referenced by floorplan markers."""
import logging

from shared.enums import EquipmentType, MarkerType

EQUIPMENT_TYPE_FIELDS = {
    EquipmentType.ACCESS_POINT: 'quick_config',
    EquipmentType.CAMERA: 'camera_type',
    EquipmentType.ELEVATOR: 'elevator_type',
    EquipmentType.INTERCOM: 'intercom_type',
}

DEFAULT_LOCATIONS = {
    MarkerType.ACCESS_POINT: 'Access Point (floorplan marker)',
    MarkerType.CAMERA: 'Camera (floorplan marker)',
    MarkerType.ELEVATOR: 'Elevator (floorplan marker)',
    MarkerType.INTERCOM: 'Intercom (floorplan marker)',
}


class EquipmentService:
    """Creates and removes equipment records through the REST API."""

    def __init__(self, api):
        self.api = api
        self.logger = logging.getLogger(self.__class__.__name__)

    def list_for_project(self, equipment_type, project_id):
        equipment_type = EquipmentType(equipment_type)
        return self.api.call('GET', f'/api/projects/{project_id}/{equipment_type.value}') or []

    def create(self, equipment_type, project_id, location, **fields):
        """Create an equipment record and return it."""
        equipment_type = EquipmentType(equipment_type)
        body = {'project_id': project_id, 'location': location, **fields}
        body.setdefault(EQUIPMENT_TYPE_FIELDS[equipment_type], 'Standard')
        record = self.api.call('POST', f'/api/{equipment_type.value}', json=body)
        self.logger.info(f"Created {equipment_type.value}/{record['id']} in project {project_id}")
        return record

    def provision(self, marker_type, project_id, location=None) -> int:
        """Create the equipment behind a new marker and return its id.

        Raises:
            ValueError: ``marker_type`` is a note, which has no equipment.
            TransportError: the API rejected the record.
        """
        marker_type = MarkerType(marker_type)
        equipment_type = EquipmentType.for_marker(marker_type)
        if equipment_type is None:
            raise ValueError(f"{marker_type.value} markers do not reference equipment")
        record = self.create(equipment_type, project_id, location or DEFAULT_LOCATIONS[marker_type])
        return record['id']

    def delete(self, equipment_type, equipment_id):
        equipment_type = EquipmentType(equipment_type)
        self.api.call('DELETE', f'/api/{equipment_type.value}/{equipment_id}')
        self.logger.info(f"Deleted {equipment_type.value}/{equipment_id}")
