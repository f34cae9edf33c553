"""Marker interaction handlers for the floorplan viewer.

This module turns viewer events (clicks, pointer gestures, dialog submits)
into marker engine calls and reports every failure to the user.
"""

import logging
from shared.enums import MarkerType, ViewerMode, NOTE_EQUIPMENT_ID, NEW_EQUIPMENT_ID
from shared.validation import ValidationError
from ..errors import FloorplanError, FetchError, LayoutNotReady
from ..engine.coordinates import to_percent
from ..engine.render import build_render_list, find_marker_at, marker_size


class MarkerHandler:
    """Handles marker placement, editing and pointer gestures.

    Store and controller errors are caught here, logged and appended to
    ``app.state.notifications``; methods return None or False on failure.

    Attributes:
        app: Reference to the FloorplanApp instance
        logger: Logger instance for this handler
    """

    def __init__(self, app):
        self.app = app
        self.logger = logging.getLogger(self.__class__.__name__)

    @property
    def state(self):
        return self.app.state

    @property
    def store(self):
        return self.app.marker_store

    @property
    def controller(self):
        return self.app.controller

    def _report(self, action, error):
        message = f"Failed to {action}: {error}"
        if isinstance(error, ValidationError):
            self.logger.warning(message)
        else:
            self.logger.error(message)
        self.state.notify(message)

    def set_mode(self, mode):
        """Switch viewer mode; leaving add-marker mode drops any pending placement."""
        self.state.mode = ViewerMode(mode)
        if self.state.mode != ViewerMode.ADD_MARKER:
            self.state.pending_placement = None

    def select_floorplan(self, floorplan):
        """Show a floorplan record (as returned by the floorplan listing) and load its markers."""
        try:
            self.store.load(floorplan['id'])
        except (FetchError, ValidationError) as e:
            self._report(f"load markers for floorplan {floorplan['id']}", e)
            return False

        self.state.reset_floorplan_state()
        self.state.current_floorplan_id = floorplan['id']
        self.state.current_project_id = floorplan.get('project_id', self.state.current_project_id)
        self.state.page_count = floorplan.get('page_count') or 1
        self.store.project_id = self.state.current_project_id
        self.logger.info(f"Selected floorplan {floorplan['id']} ({len(self.store.markers)} markers)")
        return True

    def change_page(self, page):
        page = max(1, min(self.state.page_count, int(page)))
        self.state.current_page = page
        self.state.pending_placement = None
        return page

    def handle_container_click(self, event, rect):
        """Record where a new marker goes. Only active in add-marker mode."""
        if self.state.mode != ViewerMode.ADD_MARKER:
            return None
        try:
            point = to_percent(event, rect)
        except LayoutNotReady as e:
            self.state.pending_placement = None
            self._report("place marker", e)
            return None
        self.state.pending_placement = point
        self.logger.debug(f"Pending placement at {point}")
        return point

    def submit_placement(self, marker_type, label=None, equipment_id=None, location=None):
        """Create a marker at the pending placement position."""
        point = self.state.pending_placement
        if point is None:
            self.state.notify("Click on the floorplan to choose where the marker goes")
            return None

        marker_type = MarkerType(marker_type)
        if equipment_id is None:
            equipment_id = NOTE_EQUIPMENT_ID if marker_type.is_note else NEW_EQUIPMENT_ID
        draft = {
            'floorplan_id': self.state.current_floorplan_id,
            'page': self.state.current_page,
            'marker_type': marker_type,
            'equipment_id': equipment_id,
            'position_x': point.x,
            'position_y': point.y,
            'label': label,
            'location': location,
        }
        try:
            marker = self.store.create(draft)
        except (ValidationError, FloorplanError) as e:
            self._report(f"add {marker_type.value} marker", e)
            return None

        self.state.pending_placement = None
        self.state.mode = ViewerMode.SELECT
        return marker

    def cancel_placement(self):
        self.state.pending_placement = None
        self.state.mode = ViewerMode.SELECT

    def duplicate_marker(self, marker_id):
        marker = self.store.get(marker_id)
        if marker is None:
            self.state.notify(f"Marker {marker_id} is not on this floorplan")
            return None
        try:
            return self.store.duplicate(marker)
        except (ValidationError, FloorplanError) as e:
            self._report(f"duplicate marker {marker_id}", e)
            return None

    def delete_marker(self, marker_id):
        try:
            self.store.remove(marker_id)
        except FloorplanError as e:
            self._report(f"delete marker {marker_id}", e)
            return False
        return True

    def update_label(self, marker_id, label):
        try:
            return self.store.update(marker_id, {'label': label})
        except (ValidationError, FloorplanError) as e:
            self._report(f"update marker {marker_id}", e)
            return None

    def pointer_down(self, event, rect, marker_id=None):
        """Start dragging ``marker_id``, or the marker under the pointer."""
        if marker_id is None:
            hit = find_marker_at(self.render(rect), event.client_x - rect.left, event.client_y - rect.top)
            if hit is None:
                return False
            marker_id = hit.marker_id
        try:
            return self.controller.begin_drag(marker_id, event, rect, self.state.mode)
        except LayoutNotReady as e:
            self._report(f"move marker {marker_id}", e)
            return False

    def resize_handle_down(self, marker_id, event):
        marker = self.store.get(marker_id)
        if marker is None:
            return False
        size = marker_size(marker, self.state.marker_scale, **self._size_defaults())
        return self.controller.begin_resize(marker_id, event, size, self.state.mode)

    def pointer_move(self, event):
        self.controller.pointer_move(event)

    def pointer_up(self, event=None):
        """Global pointer-up: ends any drag or resize wherever the pointer is released."""
        session = self.controller.session
        try:
            return self.controller.pointer_up(event)
        except (ValidationError, FloorplanError) as e:
            self._report(f"save marker {session.marker_id}", e)
            return None

    def render(self, rect):
        """Drawable markers of the current page, or an empty list before layout."""
        try:
            return build_render_list(
                self.store.for_page(self.state.current_page),
                rect,
                controller=self.controller,
                scale=self.state.marker_scale,
                **self._size_defaults(),
            )
        except LayoutNotReady as e:
            self.logger.debug(f"Render deferred: {e}")
            return []

    def _size_defaults(self):
        config = self.app.config
        return {
            'equipment_size': config.equipment_marker_size,
            'note_size': (config.note_marker_width, config.note_marker_height),
        }
