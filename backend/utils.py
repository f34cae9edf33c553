"""Backend utility functions for the Floorplan Markers application."""
from flask import jsonify
from .models import db, Project, Floorplan, FloorplanMarker, EQUIPMENT_MODELS
import logging


logger = logging.getLogger(__name__)


def api_error(message, status_code=400, log_level='warning', details=None):
    """
    Standardized API error response with consistent logging.

    Args:
        message (str): Error message for the client
        status_code (int): HTTP status code
        log_level (str): Logging level ('debug', 'info', 'warning', 'error', 'critical')
        details (dict, optional): Additional details for logging

    Returns:
        Flask response: JSON error response
    """
    log_func = getattr(logger, log_level, logger.warning)
    if details:
        log_func(f"API Error ({status_code}): {message} - Details: {details}")
    else:
        log_func(f"API Error ({status_code}): {message}")

    return jsonify({'error': message}), status_code


def validate_foreign_key(table_name, value):
    """
    Validate that a foreign key reference exists.

    Args:
        table_name (str): Name of the table being referenced
        value: The primary key to check for existence

    Returns:
        bool: True if reference exists or value is None, False otherwise
    """
    if value is None:
        return True

    models = {
        'projects': Project,
        'floorplans': Floorplan,
    }
    model = models.get(table_name)
    if model is None:
        logger.warning(f"Unknown table for FK validation: {table_name}")
        return False
    return db.session.get(model, value) is not None


def cascade_delete_floorplan(floorplan_id):
    """
    Delete a floorplan and every marker placed on it.

    Equipment records referenced by the markers are left alone; they belong to
    the project, not to the drawing.

    Returns:
        dict: Summary of deleted records
    """
    floorplan = db.session.get(Floorplan, floorplan_id)
    marker_count = db.session.query(FloorplanMarker).filter_by(floorplan_id=floorplan_id).delete()
    db.session.delete(floorplan)
    logger.info(f"Cascade deleted floorplan {floorplan_id} with {marker_count} markers")
    return {'floorplans': 1, 'markers': marker_count}


def cascade_delete_project(project_id):
    """
    Delete a project with its floorplans, markers and equipment.

    Returns:
        dict: Summary of deleted records
    """
    summary = {'projects': 1, 'floorplans': 0, 'markers': 0}

    floorplan_ids = db.session.execute(
        db.select(Floorplan.id).filter_by(project_id=project_id)
    ).scalars().all()
    for floorplan_id in floorplan_ids:
        floorplan_summary = cascade_delete_floorplan(floorplan_id)
        summary['floorplans'] += floorplan_summary['floorplans']
        summary['markers'] += floorplan_summary['markers']

    for equipment_type, model in EQUIPMENT_MODELS.items():
        summary[equipment_type.value] = db.session.query(model).filter_by(project_id=project_id).delete()

    db.session.delete(db.session.get(Project, project_id))
    logger.info(f"Cascade deleted project {project_id}: {summary}")
    return summary
