from datetime import datetime
from zoneinfo import ZoneInfo
from sqlalchemy import Column, Integer, String, Float, Text, DateTime, ForeignKey, Index, Enum, CheckConstraint, text
from sqlalchemy.orm import relationship, declarative_base
from shared.enums import MarkerType

Base = declarative_base()

# Global timezone configuration - Eastern Time (US/Eastern)
# Uses zoneinfo for proper DST handling (EST/EDT)
APP_TIMEZONE = ZoneInfo('America/New_York')


def now():
    """Return current datetime in application timezone (Eastern Time, timezone-aware).

    Note: When stored in SQLite, timezone info is stripped (SQLite limitation).
    All stored datetimes should be treated as Eastern Time, even though they're stored naive.
    """
    return datetime.now(APP_TIMEZONE)


class TimestampMixin:
    """Mixin providing created/updated timestamps."""

    created_at = Column(DateTime, default=now)
    updated_at = Column(DateTime, default=now, onupdate=now)


class Project(Base, TimestampMixin):
    __tablename__ = 'projects'
    id = Column(Integer, primary_key=True, nullable=False)
    name = Column(String(200), nullable=False, server_default="")
    client = Column(String(200), server_default="")
    site_address = Column(Text, server_default="")
    floorplans = relationship('Floorplan', backref='project', lazy='select', cascade="all, delete-orphan")
    access_points = relationship('AccessPoint', backref='project', lazy='select', cascade="all, delete-orphan")
    cameras = relationship('Camera', backref='project', lazy='select', cascade="all, delete-orphan")
    elevators = relationship('Elevator', backref='project', lazy='select', cascade="all, delete-orphan")
    intercoms = relationship('Intercom', backref='project', lazy='select', cascade="all, delete-orphan")


class Floorplan(Base, TimestampMixin):
    __tablename__ = 'floorplans'
    id = Column(Integer, primary_key=True, nullable=False)
    project_id = Column(Integer, ForeignKey('projects.id', ondelete='CASCADE'), nullable=False, index=True)
    name = Column(String(200), nullable=False, server_default="Untitled Floorplan")
    pdf_data = Column(Text, nullable=False, server_default="")  # base64 encoded PDF
    page_count = Column(Integer, default=1, server_default="1")
    markers = relationship('FloorplanMarker', backref='floorplan', lazy='select', cascade="all, delete-orphan")

    __table_args__ = (
        CheckConstraint('page_count >= 1', name='chk_floorplan_page_count'),
    )


class FloorplanMarker(Base):
    __tablename__ = 'floorplan_markers'
    id = Column(Integer, primary_key=True, nullable=False)
    floorplan_id = Column(Integer, ForeignKey('floorplans.id', ondelete='CASCADE'), nullable=False, index=True)
    page = Column(Integer, default=1, nullable=False, server_default="1")
    marker_type = Column(Enum(MarkerType), nullable=False)
    equipment_id = Column(Integer, nullable=False)
    position_x = Column(Float, nullable=False)  # percentage of container width
    position_y = Column(Float, nullable=False)  # percentage of container height
    label = Column(Text)
    width = Column(Integer)
    height = Column(Integer)
    created_at = Column(DateTime, default=now)

    __table_args__ = (
        CheckConstraint('position_x >= 0.0 AND position_x <= 100.0', name='chk_marker_position_x_range'),
        CheckConstraint('position_y >= 0.0 AND position_y <= 100.0', name='chk_marker_position_y_range'),
        CheckConstraint('page >= 1', name='chk_marker_page'),
        CheckConstraint("marker_type != 'NOTE' OR equipment_id = -1", name='chk_note_equipment_id'),
    )

Index('idx_marker_floorplan_page', FloorplanMarker.floorplan_id, FloorplanMarker.page)


class EquipmentMixin(TimestampMixin):
    """Columns common to every equipment record."""

    location = Column(String(300), nullable=False, server_default="")
    notes = Column(Text, server_default="")


class AccessPoint(Base, EquipmentMixin):
    __tablename__ = 'access_points'
    id = Column(Integer, primary_key=True, nullable=False)
    project_id = Column(Integer, ForeignKey('projects.id', ondelete='CASCADE'), nullable=False, index=True)
    quick_config = Column(String(100), nullable=False, server_default=text("'Standard'"))
    reader_type = Column(String(100), server_default="")
    lock_type = Column(String(100), server_default="")


class Camera(Base, EquipmentMixin):
    __tablename__ = 'cameras'
    id = Column(Integer, primary_key=True, nullable=False)
    project_id = Column(Integer, ForeignKey('projects.id', ondelete='CASCADE'), nullable=False, index=True)
    camera_type = Column(String(100), nullable=False, server_default=text("'Standard'"))
    mounting_type = Column(String(100), server_default="")


class Elevator(Base, EquipmentMixin):
    __tablename__ = 'elevators'
    id = Column(Integer, primary_key=True, nullable=False)
    project_id = Column(Integer, ForeignKey('projects.id', ondelete='CASCADE'), nullable=False, index=True)
    elevator_type = Column(String(100), nullable=False, server_default=text("'Standard'"))
    floor_count = Column(Integer)


class Intercom(Base, EquipmentMixin):
    __tablename__ = 'intercoms'
    id = Column(Integer, primary_key=True, nullable=False)
    project_id = Column(Integer, ForeignKey('projects.id', ondelete='CASCADE'), nullable=False, index=True)
    intercom_type = Column(String(100), nullable=False, server_default=text("'Standard'"))
