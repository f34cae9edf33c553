import enum


class MarkerType(str, enum.Enum):
    """Kinds of annotation that can be placed on a floorplan page.

    Used in FloorplanMarker model and by the client engine for sequence labels.
    """
    ACCESS_POINT = "access_point"
    CAMERA = "camera"
    ELEVATOR = "elevator"
    INTERCOM = "intercom"
    NOTE = "note"

    @property
    def is_note(self):
        return self is MarkerType.NOTE


class EquipmentType(str, enum.Enum):
    """Equipment record kinds a marker may reference.

    Values are the REST collection names used by the backend.
    """
    ACCESS_POINT = "access-points"
    CAMERA = "cameras"
    ELEVATOR = "elevators"
    INTERCOM = "intercoms"

    @classmethod
    def for_marker(cls, marker_type):
        """Return the equipment kind behind a marker type, or None for notes."""
        marker_type = MarkerType(marker_type)
        return {
            MarkerType.ACCESS_POINT: cls.ACCESS_POINT,
            MarkerType.CAMERA: cls.CAMERA,
            MarkerType.ELEVATOR: cls.ELEVATOR,
            MarkerType.INTERCOM: cls.INTERCOM,
        }.get(marker_type)


class ViewerMode(str, enum.Enum):
    """Interaction mode of the floorplan display.

    Gates which pointer actions are active.
    """
    SELECT = "select"
    PAN = "pan"
    ADD_MARKER = "add_marker"
    DRAW = "draw"


# Sentinel equipment ids
NOTE_EQUIPMENT_ID = -1
NEW_EQUIPMENT_ID = 0
