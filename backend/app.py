"""Flask application factory for the Floorplan Markers backend."""
from flask import Flask
import logging
from pathlib import Path
from .models import db
from .blueprints import projects, floorplans, markers, equipment
from .cli import init_db_command
from .logging_config import setup_logging
from .utils import api_error

logger = logging.getLogger(__name__)


def create_app(test_config=None):
    """Flask application factory for the Floorplan Markers backend.

    Creates and configures a Flask application instance with:
    - SQLAlchemy database integration
    - Blueprint registration for API endpoints
    - CLI command registration
    - Logging configuration

    Args:
        test_config (dict, optional): Configuration overrides for testing

    Returns:
        Flask: Configured Flask application instance
    """
    setup_logging()
    logger.info("Starting Flask application initialization")

    app = Flask(__name__, instance_relative_config=True)
    logger.debug(f"Flask app created with instance path: {app.instance_path}")

    if test_config is None:
        config_loaded = app.config.from_pyfile('config.py', silent=True)
        if config_loaded:
            logger.info("Loaded configuration from instance/config.py")
        else:
            logger.debug("No instance config file found, using defaults")
    else:
        app.config.from_mapping(test_config)
        logger.info("Loaded test configuration")

    try:
        Path(app.instance_path).mkdir(parents=True, exist_ok=True)
    except OSError:
        logger.debug(f"Instance directory already exists: {app.instance_path}")

    # Only set default database URI if not already set (e.g., by tests)
    if 'SQLALCHEMY_DATABASE_URI' not in app.config:
        DB_NAME = 'floorplans.db'
        app.config['SQLALCHEMY_DATABASE_URI'] = f'sqlite:///{DB_NAME}'
        logger.info(f"Configured database URI: {app.config['SQLALCHEMY_DATABASE_URI']}")
    else:
        logger.info(f"Using existing database URI: {app.config['SQLALCHEMY_DATABASE_URI']}")
    app.config['SQLALCHEMY_TRACK_MODIFICATIONS'] = False
    # base64 PDFs are posted as JSON
    app.config.setdefault('MAX_CONTENT_LENGTH', 50 * 1024 * 1024)

    db.init_app(app)
    logger.info("SQLAlchemy database initialized")

    logger.info("Registering API blueprints")
    app.register_blueprint(projects.bp)
    app.register_blueprint(floorplans.bp)
    app.register_blueprint(markers.bp)
    app.register_blueprint(equipment.bp)
    logger.info("All API blueprints registered successfully")

    app.cli.add_command(init_db_command)
    logger.info("CLI commands registered: init-db")

    @app.errorhandler(404)
    def not_found(error):
        return api_error('Resource not found', 404, log_level='info')

    @app.errorhandler(413)
    def too_large(error):
        return api_error('Request body is too large', 413)

    logger.info("Flask application initialization completed successfully")
    return app


if __name__ == '__main__':
    app = create_app()
    app.run(debug=True)
