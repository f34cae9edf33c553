"""Viewer state for the floorplan marker client."""
from dataclasses import dataclass, field
from typing import Optional, List

from shared.enums import ViewerMode
from .engine.coordinates import Point


@dataclass
class ViewerState:
    """State of the floorplan viewer, owned by the marker handler.

    Replaces module- and window-level temporaries: everything an action
    handler needs between events lives here.
    """
    # Current selection state
    current_project_id: Optional[int] = None
    current_floorplan_id: Optional[int] = None
    current_page: int = 1
    page_count: int = 1

    # Interaction state
    mode: ViewerMode = ViewerMode.SELECT
    pending_placement: Optional[Point] = None
    marker_scale: float = 1.0

    # User-visible messages, newest last
    notifications: List[str] = field(default_factory=list)

    def notify(self, message):
        self.notifications.append(message)

    def reset_floorplan_state(self):
        """Reset page and placement state when switching floorplans."""
        self.current_page = 1
        self.page_count = 1
        self.pending_placement = None
