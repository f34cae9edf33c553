"""Turn the marker collection into drawable items for the viewer."""
from dataclasses import dataclass
from typing import List, Optional, Tuple

from shared.enums import MarkerType
from shared.schemas import DEFAULT_NOTE_LABEL
from .coordinates import PixelPosition, Rect, to_pixels
from .sequence import sequence_labels

EQUIPMENT_MARKER_SIZE = 36
NOTE_MARKER_SIZE = (150, 40)
ACTIVE_Z_INDEX = 1000
DEFAULT_Z_INDEX = 100

MARKER_COLORS = {
    MarkerType.ACCESS_POINT: '#FF4D4F',
    MarkerType.CAMERA: '#1890FF',
    MarkerType.ELEVATOR: '#722ED1',
    MarkerType.INTERCOM: '#13C2C2',
    MarkerType.NOTE: '#FAAD14',
}


@dataclass
class RenderedMarker:
    marker_id: int
    marker_type: MarkerType
    position: PixelPosition
    size: Tuple[int, int]
    color: str
    text: str
    z_index: int
    active: bool = False


def marker_size(marker, scale=1.0, equipment_size=EQUIPMENT_MARKER_SIZE, note_size=NOTE_MARKER_SIZE) -> Tuple[int, int]:
    """Stored size of a marker, or the default for its type.

    Only equipment markers follow the viewer's marker scale.
    """
    if marker.width and marker.height:
        return marker.width, marker.height
    if MarkerType(marker.marker_type) == MarkerType.NOTE:
        return note_size
    side = int(round(equipment_size * scale))
    return side, side


def build_render_list(markers, rect: Rect, controller=None, scale=1.0,
                      equipment_size=EQUIPMENT_MARKER_SIZE, note_size=NOTE_MARKER_SIZE) -> List[RenderedMarker]:
    """Lay out ``markers`` inside ``rect``, drawing the active marker last.

    Raises:
        LayoutNotReady: ``rect`` has zero width or height.
    """
    markers = list(markers)
    labels = sequence_labels(markers)
    items = []
    for marker in markers:
        marker_type = MarkerType(marker.marker_type)
        size = marker_size(marker, scale, equipment_size, note_size)
        position = (marker.position_x, marker.position_y)
        active = False
        if controller is not None:
            position = controller.rendered_position(marker)
            size = controller.rendered_size(marker, size)
            active = controller.is_active(marker.id)

        if marker_type == MarkerType.NOTE:
            text = marker.label or DEFAULT_NOTE_LABEL
        else:
            text = labels[marker.id]

        items.append(RenderedMarker(
            marker_id=marker.id,
            marker_type=marker_type,
            position=to_pixels(position, rect),
            size=size,
            color=MARKER_COLORS[marker_type],
            text=text,
            z_index=ACTIVE_Z_INDEX if active else DEFAULT_Z_INDEX,
            active=active,
        ))

    items.sort(key=lambda item: (item.z_index, item.marker_id))
    return items


def find_marker_at(items: List[RenderedMarker], x: float, y: float) -> Optional[RenderedMarker]:
    """Topmost rendered marker under a container-relative point (markers are centred on their position)."""
    for item in reversed(items):
        width, height = item.size
        if abs(x - item.position.left) <= width / 2 and abs(y - item.position.top) <= height / 2:
            return item
    return None
