"""Exceptions raised by the floorplan marker engine and its services."""
from shared.validation import ValidationError


class FloorplanError(Exception):
    """Base class for client-side floorplan errors."""
    pass


class LayoutNotReady(FloorplanError):
    """The reference container has no measurable size yet; retry after layout."""
    pass


class IncompleteUpdateError(ValidationError):
    """A marker update is missing a field the full-record endpoint requires."""

    def __init__(self, missing):
        self.missing = tuple(missing)
        super().__init__(f"Marker update is missing required fields: {', '.join(self.missing)}")


class TransportError(FloorplanError):
    """A request to the persistence API failed or was rejected."""

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.status_code = status_code


class FetchError(TransportError):
    """A read from the persistence API failed."""
    pass


class OrphanedEquipmentError(FloorplanError):
    """Equipment was created for a marker that could not be saved, and cleanup failed."""

    def __init__(self, equipment_type, equipment_id):
        self.equipment_type = equipment_type
        self.equipment_id = equipment_id
        super().__init__(f"Equipment {equipment_type.value}/{equipment_id} was created but its marker was not, "
                         f"and the equipment record could not be removed")
