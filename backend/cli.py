import click
import logging
from flask.cli import with_appcontext
from .models import db

logger = logging.getLogger(__name__)


@click.command('init-db')
@click.option('--drop', is_flag=True, help='Drop existing tables first.')
@with_appcontext
def init_db_command(drop):
    """Create the database tables."""
    if drop:
        logger.warning("Dropping all database tables")
        db.drop_all()
    logger.info("Creating database tables and schema")
    db.create_all()
    logger.info("Database tables created successfully")
    click.echo('Initialized the database.')
