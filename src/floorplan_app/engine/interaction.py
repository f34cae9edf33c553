"""Pointer-driven drag and resize of a single marker."""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Tuple

from shared.enums import ViewerMode
from shared.validation import ValidationError
from ..errors import LayoutNotReady, TransportError
from .coordinates import Point, PointerEvent, Rect, to_percent

MIN_MARKER_SIZE = 20


class FrameScheduler:
    """Runs a callback on the next display frame."""

    def request(self, callback: Callable[[], None]):
        raise NotImplementedError


class ImmediateFrameScheduler(FrameScheduler):
    """Runs callbacks straight away, for hosts without a frame clock."""

    def request(self, callback):
        callback()


class ManualFrameScheduler(FrameScheduler):
    """Queues callbacks until ``run_pending`` is called, one call per frame."""

    def __init__(self):
        self.pending: List[Callable[[], None]] = []

    def request(self, callback):
        self.pending.append(callback)

    def run_pending(self) -> int:
        callbacks, self.pending = self.pending, []
        for callback in callbacks:
            callback()
        return len(callbacks)


class SessionKind(str, Enum):
    DRAG = 'drag'
    RESIZE = 'resize'


@dataclass
class InteractionSession:
    """The one marker currently being dragged or resized."""
    kind: SessionKind
    marker_id: int
    start_pointer: PointerEvent
    start_position: Point
    start_size: Tuple[int, int]
    rect: Optional[Rect] = None
    latest_event: Optional[PointerEvent] = None
    preview_position: Optional[Point] = None
    preview_size: Optional[Tuple[int, int]] = None
    frame_requested: bool = False

    @property
    def moved(self) -> bool:
        return self.latest_event is not None and self.latest_event != self.start_pointer


class DragResizeController:
    """Single-slot state machine for moving and resizing markers.

    Pointer moves only record the latest event; the preview is recomputed
    once per frame through ``scheduler``. Pointer-up commits the position of
    the up event itself through ``MarkerStore.update``, unless the rounded
    position or size ends up equal to the starting one. If the commit fails
    the preview is dropped, so the marker renders at its last confirmed
    state, and the error propagates to the caller.
    """

    def __init__(self, store, scheduler: Optional[FrameScheduler] = None, min_size=MIN_MARKER_SIZE,
                 skip_unchanged_commits=True, on_preview: Optional[Callable[[int], None]] = None):
        self.store = store
        self.scheduler = scheduler or ImmediateFrameScheduler()
        self.min_size = min_size
        self.skip_unchanged_commits = skip_unchanged_commits
        self.on_preview = on_preview
        self.session: Optional[InteractionSession] = None
        self.logger = logging.getLogger(self.__class__.__name__)

    @classmethod
    def from_config(cls, store, config, scheduler=None, on_preview=None):
        return cls(store, scheduler=scheduler, min_size=config.min_marker_size,
                   skip_unchanged_commits=config.skip_unchanged_commits, on_preview=on_preview)

    @property
    def active(self) -> bool:
        return self.session is not None

    def is_active(self, marker_id) -> bool:
        return self.session is not None and self.session.marker_id == marker_id

    def begin_drag(self, marker_id, event: PointerEvent, rect: Rect, mode=ViewerMode.SELECT) -> bool:
        """Start dragging a marker. Returns False when the pointer-down is ignored."""
        if ViewerMode(mode) != ViewerMode.SELECT:
            self.logger.debug(f"Drag on marker {marker_id} ignored in {ViewerMode(mode).value} mode")
            return False
        if not rect.is_laid_out:
            raise LayoutNotReady(f"Cannot drag marker {marker_id} before the container is laid out")
        return self._begin(SessionKind.DRAG, marker_id, event, rect=rect)

    def begin_resize(self, marker_id, event: PointerEvent, size, mode=ViewerMode.SELECT) -> bool:
        """Start resizing a marker from its current rendered ``size`` (width, height)."""
        if ViewerMode(mode) == ViewerMode.ADD_MARKER:
            self.logger.debug(f"Resize on marker {marker_id} ignored while placing a marker")
            return False
        return self._begin(SessionKind.RESIZE, marker_id, event, size=size)

    def _begin(self, kind, marker_id, event, rect=None, size=None) -> bool:
        if self.session is not None:
            self.logger.debug(f"Ignoring {kind.value} on marker {marker_id}: marker {self.session.marker_id} is active")
            return False

        marker = self.store.get(marker_id)
        if marker is None:
            self.logger.warning(f"Cannot {kind.value} unknown marker {marker_id}")
            return False

        width, height = size if size is not None else (marker.width or self.min_size, marker.height or self.min_size)
        self.session = InteractionSession(
            kind=kind,
            marker_id=marker_id,
            start_pointer=event,
            start_position=Point(marker.position_x, marker.position_y),
            start_size=(int(width), int(height)),
            rect=rect,
        )
        self.logger.debug(f"Started {kind.value} on marker {marker_id}")
        return True

    def pointer_move(self, event: PointerEvent):
        """Record a pointer move; the preview is refreshed on the next frame."""
        session = self.session
        if session is None:
            return
        session.latest_event = event
        if not session.frame_requested:
            session.frame_requested = True
            self.scheduler.request(lambda: self._flush_preview(session))

    def _flush_preview(self, session):
        # a frame requested by a session that has since ended must not repaint
        if session is not self.session:
            return
        session.frame_requested = False
        self._apply(session, session.latest_event)
        self.logger.debug(f"Preview {session.kind.value} of marker {session.marker_id}: "
                          f"{session.preview_position or session.preview_size}")
        self._notify(session.marker_id)

    def _apply(self, session, event):
        if session.kind == SessionKind.DRAG:
            session.preview_position = to_percent(event, session.rect)
        else:
            dx = event.client_x - session.start_pointer.client_x
            dy = event.client_y - session.start_pointer.client_y
            start_width, start_height = session.start_size
            session.preview_size = (
                max(self.min_size, int(round(start_width + dx))),
                max(self.min_size, int(round(start_height + dy))),
            )

    def pointer_up(self, event: Optional[PointerEvent] = None):
        """End the active session and commit its final state.

        ``event`` is the pointer-up event, wherever it happened; without one
        the last recorded move is used. Returns the updated marker, or None
        when nothing was committed.

        Raises:
            TransportError: the commit failed; the preview has been reverted.
            LayoutNotReady: the container lost its size during the drag.
        """
        session = self.session
        if session is None:
            return None
        self.session = None

        if event is not None:
            session.latest_event = event
        if session.latest_event is None or (self.skip_unchanged_commits and not session.moved):
            self.logger.debug(f"No movement on marker {session.marker_id}, nothing to commit")
            self._notify(session.marker_id)
            return None

        try:
            self._apply(session, session.latest_event)
        except LayoutNotReady:
            self._notify(session.marker_id)
            raise

        if self.skip_unchanged_commits and self._unchanged(session):
            self.logger.debug(f"Marker {session.marker_id} ended where it started, nothing to commit")
            self._notify(session.marker_id)
            return None

        if session.kind == SessionKind.DRAG:
            fields = {'position_x': session.preview_position.x, 'position_y': session.preview_position.y}
        else:
            fields = {'width': session.preview_size[0], 'height': session.preview_size[1]}

        try:
            marker = self.store.update(session.marker_id, fields)
        except (TransportError, ValidationError) as e:
            self.logger.warning(f"Commit of {session.kind.value} on marker {session.marker_id} failed, reverting: {e}")
            raise
        finally:
            self._notify(session.marker_id)
        return marker

    @staticmethod
    def _unchanged(session) -> bool:
        if session.kind == SessionKind.DRAG:
            return session.preview_position == session.start_position
        return session.preview_size == session.start_size

    def rendered_position(self, marker) -> Point:
        """Position to draw ``marker`` at, including any live drag preview."""
        session = self.session
        if session is not None and session.marker_id == marker.id and session.preview_position is not None:
            return session.preview_position
        return Point(marker.position_x, marker.position_y)

    def rendered_size(self, marker, default) -> Tuple[int, int]:
        """Size to draw ``marker`` at, including any live resize preview."""
        session = self.session
        if session is not None and session.marker_id == marker.id and session.preview_size is not None:
            return session.preview_size
        return default

    def _notify(self, marker_id):
        if self.on_preview is not None:
            self.on_preview(marker_id)
