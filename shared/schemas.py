"""Pydantic schemas for validation and serialization."""
import base64
import binascii
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, field_validator, model_validator, ConfigDict
import bleach
from shared.enums import MarkerType, NOTE_EQUIPMENT_ID
from shared.validation import ValidationError

PDF_SIGNATURE = b'%PDF-'
DEFAULT_NOTE_LABEL = 'Note'


def validate_string_length(value: str, field_name: str, min_length: int = 0, max_length: Optional[int] = None) -> str:
    """Validate string length constraints."""
    if not isinstance(value, str):
        raise ValidationError(f"Validation failed: {field_name} must be a string")
    value = value.strip()
    if len(value) < min_length:
        raise ValidationError(f"Validation failed: {field_name} must be at least {min_length} characters")
    if max_length and len(value) > max_length:
        raise ValidationError(f"Validation failed: {field_name} must be no more than {max_length} characters")
    return value


def sanitize_html(text: str) -> str:
    """Secure HTML sanitization using bleach library."""
    if not text:
        return text
    if '<' not in text and '>' not in text and '&' not in text:
        return text

    allowed_tags = ['p', 'br', 'strong', 'em', 'u']
    return bleach.clean(text, tags=allowed_tags, attributes={}, strip=True)


def decode_pdf_data(value: str) -> bytes:
    """Decode a base64 floorplan body and check it is a PDF document."""
    try:
        raw = base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError):
        raise ValidationError("Validation failed: pdf_data must be valid base64")
    if not raw.startswith(PDF_SIGNATURE):
        raise ValidationError("Validation failed: pdf_data is not a PDF document")
    return raw


# Project Schemas
class ProjectCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    client: Optional[str] = Field(default="", max_length=200)
    site_address: Optional[str] = Field(default="", max_length=500)

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        return validate_string_length(v, 'name', 1, 200)

    @field_validator('client', 'site_address')
    @classmethod
    def sanitize_text_fields(cls, v):
        return sanitize_html(v) if v else ""


class ProjectResponse(ProjectCreate):
    id: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


# Floorplan Schemas
class FloorplanCreate(BaseModel):
    project_id: int = Field(..., gt=0)
    name: str = Field(..., min_length=1, max_length=200)
    pdf_data: str = Field(..., min_length=1)
    page_count: int = Field(default=1, ge=1)

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        return sanitize_html(validate_string_length(v, 'name', 1, 200))

    @field_validator('pdf_data')
    @classmethod
    def validate_pdf(cls, v):
        decode_pdf_data(v)
        return v


class FloorplanSummary(BaseModel):
    id: int
    project_id: int
    name: str
    page_count: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class FloorplanDetail(FloorplanSummary):
    pdf_data: str


# Marker Schemas
class MarkerBase(BaseModel):
    floorplan_id: int = Field(..., gt=0)
    page: int = Field(default=1, ge=1)
    marker_type: MarkerType
    equipment_id: int = Field(..., ge=NOTE_EQUIPMENT_ID)
    position_x: float = Field(..., ge=0, le=100)
    position_y: float = Field(..., ge=0, le=100)
    label: Optional[str] = Field(None, max_length=500)
    width: Optional[int] = Field(None, ge=1)
    height: Optional[int] = Field(None, ge=1)

    @field_validator('label')
    @classmethod
    def sanitize_label(cls, v):
        if v:
            return sanitize_html(v.strip())
        return v

    @model_validator(mode='after')
    def validate_note_equipment(self):
        if self.marker_type == MarkerType.NOTE and self.equipment_id != NOTE_EQUIPMENT_ID:
            raise ValueError('note markers must have equipment_id -1')
        if self.marker_type != MarkerType.NOTE and self.equipment_id == NOTE_EQUIPMENT_ID:
            raise ValueError(f'{self.marker_type.value} markers must reference equipment')
        return self


class MarkerCreate(MarkerBase):
    pass


class MarkerUpdate(MarkerBase):
    """Full-record update: the required fields are resent on every PUT."""

    page: int = Field(..., ge=1)
    position_x: Optional[float] = Field(None, ge=0, le=100)
    position_y: Optional[float] = Field(None, ge=0, le=100)

    @model_validator(mode='after')
    def reject_null_positions(self):
        for name in ('position_x', 'position_y'):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f'{name} cannot be null')
        return self


class Marker(MarkerBase):
    id: int
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    @property
    def is_note(self):
        return self.marker_type == MarkerType.NOTE

    def wire_fields(self):
        """Fields accepted by the create/update endpoints."""
        return self.model_dump(mode='json', exclude={'id', 'created_at'})


# Equipment Schemas
class EquipmentBase(BaseModel):
    project_id: int = Field(..., gt=0)
    location: str = Field(..., min_length=1, max_length=300)
    notes: Optional[str] = Field(default="", max_length=2000)

    @field_validator('location')
    @classmethod
    def validate_location(cls, v):
        return sanitize_html(validate_string_length(v, 'location', 1, 300))

    @field_validator('notes')
    @classmethod
    def sanitize_notes(cls, v):
        return sanitize_html(v) if v else ""


class AccessPointCreate(EquipmentBase):
    quick_config: str = Field(default="Standard", max_length=100)
    reader_type: Optional[str] = Field(default="", max_length=100)
    lock_type: Optional[str] = Field(default="", max_length=100)


class CameraCreate(EquipmentBase):
    camera_type: str = Field(default="Standard", max_length=100)
    mounting_type: Optional[str] = Field(default="", max_length=100)


class ElevatorCreate(EquipmentBase):
    elevator_type: str = Field(default="Standard", max_length=100)
    floor_count: Optional[int] = Field(None, ge=1)


class IntercomCreate(EquipmentBase):
    intercom_type: str = Field(default="Standard", max_length=100)
