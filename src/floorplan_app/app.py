"""Floorplan marker client - composition root."""
import logging

from .config_manager import ConfigManager
from .logging_config import setup_logging
from .state import ViewerState
from .services.api_service import APIService
from .services.equipment_service import EquipmentService
from .services.floorplan_service import FloorplanService
from .engine.marker_store import MarkerStore
from .engine.interaction import DragResizeController
from .handlers.marker_handler import MarkerHandler


class FloorplanApp:
    """Builds and holds the client's services, engine and handlers.

    ``session`` (a requests.Session) and ``scheduler`` (a FrameScheduler) can
    be injected by the host or by tests.
    """

    def __init__(self, config=None, session=None, scheduler=None, configure_logging=True, on_preview=None):
        if configure_logging:
            setup_logging()
        self.logger = logging.getLogger(self.__class__.__name__)

        self.config = config or ConfigManager()
        self.logger.info(f"Configuration loaded: API URL={self.config.api_base_url}")

        self.state = ViewerState(marker_scale=self.config.equipment_marker_scale)

        self.api_service = APIService.from_config(self.config, session=session)
        self.equipment_service = EquipmentService(self.api_service)
        self.floorplan_service = FloorplanService(self.api_service, max_pdf_size_mb=self.config.max_pdf_size_mb)

        self.marker_store = MarkerStore(
            self.api_service,
            equipment_service=self.equipment_service,
            duplicate_offset=self.config.duplicate_offset,
        )
        self.controller = DragResizeController.from_config(
            self.marker_store, self.config, scheduler=scheduler, on_preview=on_preview)

        self.marker_handler = MarkerHandler(self)
        self.logger.info("Floorplan client initialized")

    def open_project(self, project_id):
        """Make ``project_id`` current and return its floorplans."""
        floorplans = self.floorplan_service.list_for_project(project_id)
        self.state.current_project_id = project_id
        self.marker_store.project_id = project_id
        return floorplans
