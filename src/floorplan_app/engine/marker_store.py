"""Local marker collection backed by the persistence API."""
import logging
from typing import Dict, List, Optional

from pydantic import ValidationError as PydanticValidationError

from shared.enums import MarkerType, EquipmentType, NOTE_EQUIPMENT_ID, NEW_EQUIPMENT_ID
from shared.schemas import Marker, DEFAULT_NOTE_LABEL
from shared.validation import Validator, ValidationError, format_pydantic_errors
from ..errors import IncompleteUpdateError, OrphanedEquipmentError, TransportError
from .coordinates import clamp_percent

MARKERS_ENDPOINT = '/api/floorplan-markers'


def parse_marker(record) -> Marker:
    """Build a Marker from an API record."""
    try:
        return Marker.model_validate(record)
    except PydanticValidationError as e:
        raise ValidationError(f"Invalid marker record: {format_pydantic_errors(e)}")


class MarkerStore:
    """Holds the markers of the displayed floorplan and mediates every write.

    Local state only changes after the API confirms a create, update or
    delete. When an ``equipment_service`` is configured, drafts for equipment
    markers with ``equipment_id == 0`` first get a new equipment record.
    """

    def __init__(self, api, equipment_service=None, project_id=None, duplicate_offset=2.0):
        self.api = api
        self.equipment_service = equipment_service
        self.project_id = project_id
        self.duplicate_offset = duplicate_offset
        self.floorplan_id: Optional[int] = None
        self.markers: List[Marker] = []
        self.logger = logging.getLogger(self.__class__.__name__)

    def load(self, floorplan_id) -> List[Marker]:
        """Fetch every marker of a floorplan, across all pages.

        Raises:
            FetchError: the request failed; the local collection is unchanged.
        """
        records = self.api.call('GET', f'/api/floorplans/{floorplan_id}/markers') or []
        markers = [parse_marker(record) for record in records]
        self.floorplan_id = floorplan_id
        self.markers[:] = markers
        self.logger.info(f"Loaded {len(markers)} markers for floorplan {floorplan_id}")
        return list(self.markers)

    def get(self, marker_id) -> Optional[Marker]:
        return next((m for m in self.markers if m.id == marker_id), None)

    def for_page(self, page) -> List[Marker]:
        return [m for m in self.markers if m.page == page]

    def create(self, draft) -> Marker:
        """Persist a new marker and add it to the local collection.

        Raises:
            ValidationError: a required field is missing; nothing was sent.
            TransportError: the API rejected the marker or was unreachable.
            OrphanedEquipmentError: equipment was created, the marker failed
                and the equipment could not be removed again.
        """
        data = dict(draft)
        Validator.validate_marker_draft(data)
        body = self._normalize(data)

        equipment_type = EquipmentType.for_marker(body['marker_type'])
        if (equipment_type is not None and body['equipment_id'] == NEW_EQUIPMENT_ID
                and self.equipment_service is not None):
            record = self._create_with_equipment(body, equipment_type, data.get('location'))
        else:
            record = self.api.call('POST', MARKERS_ENDPOINT, json=body)

        marker = parse_marker(record)
        self._replace_local(marker)
        self.logger.info(f"Created {marker.marker_type.value} marker {marker.id} on floorplan {marker.floorplan_id} page {marker.page}")
        return marker

    def update(self, marker_id, fields) -> Marker:
        """Send a full-record update for one marker.

        The required fields are taken from the local record when ``fields``
        does not carry them.

        Raises:
            IncompleteUpdateError: a required field is known neither locally nor in ``fields``.
            ValidationError: a value is out of range, such as a page below 1.
            TransportError: the API rejected the update; local state is unchanged.
        """
        current = self.get(marker_id)
        body = current.wire_fields() if current is not None else {}
        body.update(fields)

        missing = [name for name in Validator.MARKER_UPDATE_REQUIRED_FIELDS if body.get(name) is None]
        if missing:
            raise IncompleteUpdateError(missing)
        Validator.validate_marker_update(body)

        body = self._normalize(body)
        record = self.api.call('PUT', f'{MARKERS_ENDPOINT}/{marker_id}', json=body)
        marker = parse_marker(record)
        self._replace_local(marker)
        self.logger.info(f"Updated marker {marker_id}: {sorted(fields)}")
        return marker

    def remove(self, marker_id) -> None:
        """Delete a marker; it leaves the local collection once the API confirms."""
        self.api.call('DELETE', f'{MARKERS_ENDPOINT}/{marker_id}')
        self.markers[:] = [m for m in self.markers if m.id != marker_id]
        self.logger.info(f"Deleted marker {marker_id}")

    def duplicate(self, marker: Marker) -> Marker:
        """Create a copy of ``marker`` nudged down and to the right.

        Equipment markers get ``equipment_id = 0`` so new equipment is minted
        for the copy; a non-empty label gets a " (Copy)" suffix.
        """
        draft = {
            'floorplan_id': marker.floorplan_id,
            'page': marker.page,
            'marker_type': marker.marker_type,
            'equipment_id': NOTE_EQUIPMENT_ID if marker.is_note else NEW_EQUIPMENT_ID,
            'position_x': min(100.0, marker.position_x + self.duplicate_offset),
            'position_y': min(100.0, marker.position_y + self.duplicate_offset),
            'label': f"{marker.label} (Copy)" if marker.label else None,
            'width': marker.width,
            'height': marker.height,
        }
        return self.create(draft)

    def _create_with_equipment(self, body, equipment_type, location) -> Dict:
        if self.project_id is None:
            raise ValidationError("project_id is required to create equipment for a marker")

        equipment_id = self.equipment_service.provision(
            body['marker_type'], self.project_id, location or body.get('label'))
        body = {**body, 'equipment_id': equipment_id}
        try:
            return self.api.call('POST', MARKERS_ENDPOINT, json=body)
        except TransportError as marker_error:
            self.logger.error(f"Marker creation failed after creating {equipment_type.value}/{equipment_id}, rolling back: {marker_error}")
            try:
                self.equipment_service.delete(equipment_type, equipment_id)
            except TransportError as cleanup_error:
                self.logger.error(f"Rollback of {equipment_type.value}/{equipment_id} failed: {cleanup_error}")
                raise OrphanedEquipmentError(equipment_type, equipment_id) from marker_error
            raise

    @staticmethod
    def _normalize(data) -> Dict:
        """Shape a draft or update into the wire body, enforcing marker invariants."""
        marker_type = MarkerType(data['marker_type'])
        body = {
            'floorplan_id': data['floorplan_id'],
            'page': data['page'] if data.get('page') is not None else 1,
            'marker_type': marker_type.value,
            'equipment_id': data['equipment_id'],
            'label': data.get('label'),
        }
        if marker_type == MarkerType.NOTE:
            body['equipment_id'] = NOTE_EQUIPMENT_ID
            body['label'] = body['label'] or DEFAULT_NOTE_LABEL
        for axis in ('position_x', 'position_y'):
            if data.get(axis) is not None:
                body[axis] = clamp_percent(float(data[axis]))
        for dimension in ('width', 'height'):
            if data.get(dimension) is not None:
                body[dimension] = int(data[dimension])
        return body

    def _replace_local(self, marker):
        for index, existing in enumerate(self.markers):
            if existing.id == marker.id:
                self.markers[index] = marker
                return
        self.markers.append(marker)
