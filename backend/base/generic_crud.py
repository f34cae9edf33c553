"""Generic CRUD class that works with Pydantic schemas to eliminate boilerplate."""
from flask import jsonify, request
from shared.validation import ValidationError, format_pydantic_errors
from ..models import db
from pydantic import ValidationError as PydanticValidationError
import logging
from typing import Optional, Callable, Any, Dict


class GenericCRUD:
    """Generic CRUD class that automatically handles Pydantic validation and serialization.

    Create and update both answer with the full serialized record, which is
    what the marker client relies on to reconcile its local collection.

    Usage:
        crud = GenericCRUD(
            model=Camera,
            create_schema=CameraCreate,
            update_schema=CameraCreate,
            response_schema=None,
            logger_name='cameras'
        )
    """

    def __init__(
        self,
        model: type,
        create_schema: type,
        update_schema: type,
        response_schema: Optional[type] = None,
        logger_name: Optional[str] = None,
        pre_create_hook: Optional[Callable[[Dict], Dict]] = None,
        pre_update_hook: Optional[Callable[[Dict, Any], Dict]] = None,
        cascade_delete_func: Optional[Callable[[int], Dict]] = None
    ):
        """Initialize generic CRUD class.

        Args:
            model: SQLAlchemy model class
            create_schema: Pydantic schema for creation (e.g., MarkerCreate)
            update_schema: Pydantic schema for full-record updates (e.g., MarkerUpdate)
            response_schema: Pydantic schema for responses; when omitted the
                           model's columns are serialized directly
            logger_name: Optional logger name (defaults to model table name)
            pre_create_hook: Optional function to run after Pydantic validation but before creation.
                           Takes validated_data dict, returns modified dict.
            pre_update_hook: Optional function to run after Pydantic validation but before update.
                           Takes (validated_data, resource) tuple, returns modified dict.
            cascade_delete_func: Optional function to handle cascade deletion.
                               Takes resource_id, returns summary dict.
        """
        self.model = model
        self.create_schema = create_schema
        self.update_schema = update_schema
        self.response_schema = response_schema
        self.pre_create_hook = pre_create_hook
        self.pre_update_hook = pre_update_hook
        self.cascade_delete_func = cascade_delete_func
        self.logger = logging.getLogger(logger_name or model.__tablename__)

    def get_list(self, order_by=None, **filters):
        """Get all resources matching the given column filters.

        Returns:
            Flask JSON response with a list of serialized resources
        """
        query = db.select(self.model).filter_by(**filters).order_by(order_by if order_by is not None else self.model.id)
        items = [self.serialize(item) for item in db.session.execute(query).scalars()]
        return jsonify(items)

    def get_detail(self, resource_id):
        """Get single resource by ID.

        Args:
            resource_id: Primary key ID of the resource

        Returns:
            Flask JSON response with resource data
        """
        resource = db.get_or_404(self.model, resource_id)
        return jsonify(self.serialize(resource))

    def create(self):
        """Create a new resource with automatic Pydantic validation.

        Returns:
            Flask JSON response with the created resource
        """
        try:
            data = self.get_json_data()
            validated_data = self.validate_create_data(data)

            if self.pre_create_hook:
                validated_data = self.pre_create_hook(validated_data)

            resource = self.model(**validated_data)
            db.session.add(resource)
            db.session.commit()

            self.logger.info(f"Created {self.get_singular_name()}: {resource.id}")
            return jsonify(self.serialize(resource)), 201

        except ValidationError as e:
            self.logger.warning(f"Validation error in {self.get_singular_name()} creation: {e}")
            db.session.rollback()
            return jsonify({'error': str(e)}), 400
        except Exception as e:
            self.logger.error(f"Failed to create {self.get_singular_name()}: {e}", exc_info=True)
            db.session.rollback()
            return jsonify({'error': f'Failed to create {self.get_singular_name()}'}), 500

    def update(self, resource_id):
        """Update an existing resource with automatic Pydantic validation.

        Args:
            resource_id: Primary key ID of the resource

        Returns:
            Flask JSON response with the updated resource
        """
        resource = db.get_or_404(self.model, resource_id)
        try:
            data = self.get_json_data()
            validated_data = self.validate_update_data(data)

            if self.pre_update_hook:
                validated_data = self.pre_update_hook(validated_data, resource)

            for key, value in validated_data.items():
                setattr(resource, key, value)

            db.session.commit()

            self.logger.info(f"Updated {self.get_singular_name()}: {resource_id}")
            return jsonify(self.serialize(resource))

        except ValidationError as e:
            self.logger.warning(f"Validation error in {self.get_singular_name()} update: {e}")
            db.session.rollback()
            return jsonify({'error': str(e)}), 400
        except Exception as e:
            self.logger.error(f"Failed to update {self.get_singular_name()}: {e}", exc_info=True)
            db.session.rollback()
            return jsonify({'error': f'Failed to update {self.get_singular_name()}'}), 500

    def delete(self, resource_id):
        """Delete a resource.

        Args:
            resource_id: Primary key ID of the resource

        Returns:
            Flask JSON response with deletion summary
        """
        resource = db.get_or_404(self.model, resource_id)
        try:
            if self.cascade_delete_func:
                summary = self.cascade_delete_func(resource_id)
            else:
                db.session.delete(resource)
                summary = {}

            db.session.commit()

            self.logger.info(f"Deleted {self.get_singular_name()}: {resource_id}")
            return jsonify({
                'message': f'{self.get_singular_name().title()} deleted successfully',
                'summary': summary
            })
        except Exception as e:
            self.logger.error(f"Failed to delete {self.get_singular_name()}: {e}", exc_info=True)
            db.session.rollback()
            return jsonify({'error': f'Failed to delete {self.get_singular_name()}'}), 500

    def serialize(self, resource):
        """Serialize resource using the Pydantic response schema or its columns.

        Args:
            resource: SQLAlchemy model instance

        Returns:
            Dictionary representation of the resource
        """
        if self.response_schema is not None:
            return self.response_schema.model_validate(resource).model_dump(mode='json')

        result = {}
        for column in resource.__table__.columns:
            value = getattr(resource, column.name)
            if hasattr(value, 'isoformat'):
                result[column.name] = value.isoformat()
            elif hasattr(value, 'value'):
                result[column.name] = value.value
            else:
                result[column.name] = value
        return result

    def validate_create_data(self, data):
        """Validate data for creation using Pydantic schema.

        Raises:
            ValidationError: If validation fails
        """
        try:
            validated = self.create_schema(**data)
            return validated.model_dump(exclude_none=True)
        except PydanticValidationError as e:
            raise ValidationError(format_pydantic_errors(e))

    def validate_update_data(self, data):
        """Validate data for a full-record update using Pydantic schema.

        Required fields are enforced by the schema; optional fields only
        change when the request sets them, including to null.

        Raises:
            ValidationError: If validation fails
        """
        try:
            validated = self.update_schema(**data)
            return validated.model_dump(exclude_unset=True)
        except PydanticValidationError as e:
            raise ValidationError(format_pydantic_errors(e))

    def get_json_data(self):
        """Get and validate JSON data from request.

        Raises:
            ValidationError: If JSON is invalid or not a dict
        """
        data = request.get_json(silent=True)
        if data is None:
            raise ValidationError('Request body must contain valid JSON')
        if not isinstance(data, dict):
            raise ValidationError('Request data must be a JSON object')
        return data

    def get_singular_name(self):
        """Get singular resource name for messages (e.g., 'camera')."""
        table_name = self.model.__tablename__
        if table_name.endswith('s'):
            return table_name[:-1]
        return table_name


def register_crud_routes(bp, crud_instance, resource_name, parent_name='projects', parent_key='project_id'):
    """Register standard CRUD routes for a blueprint.

    Args:
        bp: Flask Blueprint instance
        crud_instance: GenericCRUD instance
        resource_name: URL name of the resource (e.g., 'access-points')
        parent_name: URL name of the owning collection
        parent_key: Column holding the owner's id

    This function registers:
        GET /api/{parent_name}/<id>/{resource_name} - List resources of one owner
        GET /api/{resource_name}/<id> - Get single resource
        POST /api/{resource_name} - Create resource
        PUT /api/{resource_name}/<id> - Update resource
        DELETE /api/{resource_name}/<id> - Delete resource
    """
    endpoint = resource_name.replace('-', '_')

    def get_list(parent_id):
        return crud_instance.get_list(**{parent_key: parent_id})

    bp.add_url_rule(f'/{parent_name}/<int:parent_id>/{resource_name}', f'{endpoint}_list',
                    get_list, methods=['GET'])
    bp.add_url_rule(f'/{resource_name}/<int:resource_id>', f'{endpoint}_detail',
                    crud_instance.get_detail, methods=['GET'])
    bp.add_url_rule(f'/{resource_name}', f'{endpoint}_create',
                    crud_instance.create, methods=['POST'])
    bp.add_url_rule(f'/{resource_name}/<int:resource_id>', f'{endpoint}_update',
                    crud_instance.update, methods=['PUT'])
    bp.add_url_rule(f'/{resource_name}/<int:resource_id>', f'{endpoint}_delete',
                    crud_instance.delete, methods=['DELETE'])
