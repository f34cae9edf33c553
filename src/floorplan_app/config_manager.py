"""Configuration Manager for the floorplan marker client."""
import logging
from typing import Optional
from pydantic import ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class ConfigManager(BaseSettings):
    """Manages application configuration settings using Pydantic BaseSettings.

    Every setting can be overridden with a ``FLOORPLAN_``-prefixed environment
    variable. A value that fails to parse keeps the default.
    """

    # API settings
    api_base_url: str = 'http://localhost:5000'
    api_timeout: float = 10.0  # seconds
    api_max_retries: int = 1  # CRUD failures are surfaced, not retried
    api_retry_delay: float = 1.0
    api_access_token: Optional[str] = None

    # Marker geometry (logical pixels / percentage points)
    duplicate_offset: float = 2.0
    min_marker_size: int = 20
    equipment_marker_size: int = 36
    note_marker_width: int = 150
    note_marker_height: int = 40
    equipment_marker_scale: float = 1.0

    # Interaction settings
    skip_unchanged_commits: bool = True

    # Floorplan documents
    max_pdf_size_mb: int = 25

    model_config = SettingsConfigDict(env_prefix='FLOORPLAN_', case_sensitive=False)

    @field_validator('*', mode='wrap')
    @classmethod
    def fall_back_to_default(cls, value, handler, info):
        try:
            return handler(value)
        except ValidationError:
            default = cls.model_fields[info.field_name].default
            logger.warning(f"Invalid value {value!r} for {info.field_name}, using default {default!r}")
            return default

    @field_validator('equipment_marker_scale')
    @classmethod
    def clamp_marker_scale(cls, v):
        return max(0.5, min(2.0, v))

    def get(self, key, default=None):
        """Get a configuration value."""
        return getattr(self, key, default)

    def set(self, key, value):
        """Set a configuration value."""
        setattr(self, key, value)

    def get_all(self):
        """Get all configuration values as dictionary."""
        return self.model_dump()
