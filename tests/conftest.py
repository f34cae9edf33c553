"""Pytest configuration and fixtures for Floorplan Markers tests."""
import base64
import pytest
import tempfile
import os
from unittest.mock import Mock
from backend.app import create_app
from backend.models import db

PDF_BYTES = b'%PDF-1.4\n1 0 obj\n<< /Type /Catalog >>\nendobj\n%%EOF\n'


@pytest.fixture
def app(monkeypatch):
    """Create and configure a test app instance."""
    monkeypatch.setenv('LOG_TO_FILE', 'false')

    # Create temporary database for testing
    db_fd, db_path = tempfile.mkstemp()

    test_config = {
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': f'sqlite:///{db_path}',
        'SQLALCHEMY_TRACK_MODIFICATIONS': False,
    }

    app = create_app(test_config)

    with app.app_context():
        db.create_all()

    yield app

    # Cleanup
    with app.app_context():
        db.engine.dispose()
    os.close(db_fd)
    os.unlink(db_path)


@pytest.fixture
def client(app):
    """A test client for the app."""
    return app.test_client()


@pytest.fixture
def runner(app):
    """A test runner for the app's Click commands."""
    return app.test_cli_runner()


@pytest.fixture
def pdf_base64():
    return base64.b64encode(PDF_BYTES).decode('ascii')


@pytest.fixture
def floorplan(client, pdf_base64):
    """A project with a two-page floorplan, created through the API."""
    project = client.post('/api/projects', json={'name': 'HQ Building'}).get_json()
    floorplan = client.post('/api/floorplans', json={
        'project_id': project['id'],
        'name': 'Ground floor',
        'pdf_data': pdf_base64,
        'page_count': 2,
    }).get_json()
    return floorplan


@pytest.fixture
def mock_api():
    """APIService double; ``call`` returns whatever each test configures."""
    api = Mock()
    api.call = Mock()
    return api


def marker_record(marker_id, **overrides):
    """A marker record as the API returns it."""
    record = {
        'id': marker_id,
        'floorplan_id': 1,
        'page': 1,
        'marker_type': 'access_point',
        'equipment_id': 10 + marker_id,
        'position_x': 25.0,
        'position_y': 40.0,
        'label': None,
        'width': None,
        'height': None,
        'created_at': '2024-05-01T10:00:00',
    }
    record.update(overrides)
    return record


@pytest.fixture
def make_record():
    return marker_record
