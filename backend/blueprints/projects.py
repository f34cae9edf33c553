"""Projects blueprint for Flask API."""
from flask import Blueprint
from ..models import Project
from ..base.generic_crud import GenericCRUD
from ..utils import cascade_delete_project
from shared.schemas import ProjectCreate, ProjectResponse
bp = Blueprint('projects', __name__, url_prefix='/api')


project_crud = GenericCRUD(
    model=Project,
    create_schema=ProjectCreate,
    update_schema=ProjectCreate,
    response_schema=ProjectResponse,
    logger_name='projects',
    cascade_delete_func=cascade_delete_project,
)


@bp.route('/projects', methods=['GET'])
def get_projects():
    """List all projects."""
    return project_crud.get_list()


@bp.route('/projects/<int:project_id>', methods=['GET'])
def get_project(project_id):
    """Get single project by ID."""
    return project_crud.get_detail(project_id)


@bp.route('/projects', methods=['POST'])
def create_project():
    """Create a new project."""
    return project_crud.create()


@bp.route('/projects/<int:project_id>', methods=['PUT'])
def update_project(project_id):
    """Update an existing project."""
    return project_crud.update(project_id)


@bp.route('/projects/<int:project_id>', methods=['DELETE'])
def delete_project(project_id):
    """Delete a project with its floorplans, markers and equipment."""
    return project_crud.delete(project_id)
