"""Input validation utilities."""
from shared.enums import MarkerType


class ValidationError(Exception):
    """Raised when input validation fails."""
    pass


def format_pydantic_errors(exc):
    """Flatten a pydantic ValidationError into a single readable message."""
    errors = []
    for error in exc.errors():
        field = '.'.join(str(x) for x in error['loc'])
        msg = error['msg']
        errors.append(f"{field}: {msg}" if field else msg)
    return '; '.join(errors)


class Validator:
    """Input validation utilities."""

    MARKER_REQUIRED_FIELDS = ('floorplan_id', 'marker_type', 'equipment_id', 'position_x', 'position_y')
    MARKER_UPDATE_REQUIRED_FIELDS = ('floorplan_id', 'page', 'marker_type', 'equipment_id')

    @staticmethod
    def validate_required(value, field_name):
        """Validate that a required field is not empty."""
        if value is None or (isinstance(value, str) and not value.strip()):
            raise ValidationError(f"{field_name} is required")
        return value

    @staticmethod
    def validate_numeric_range(value, field_name, min_val=None, max_val=None):
        """Validate numeric value within range."""
        try:
            num_val = float(value)

            if min_val is not None and num_val < min_val:
                raise ValidationError(f"{field_name} must be at least {min_val}")

            if max_val is not None and num_val > max_val:
                raise ValidationError(f"{field_name} must be no more than {max_val}")

            return num_val
        except (ValueError, TypeError):
            raise ValidationError(f"{field_name} must be a valid number")

    @staticmethod
    def validate_choice(value, field_name, valid_choices):
        """Validate that value is in list of valid choices."""
        if value not in valid_choices:
            raise ValidationError(f"{field_name} must be one of: {', '.join(str(c) for c in valid_choices)}")
        return value

    @staticmethod
    def validate_marker_draft(data):
        """Check a marker draft before it is sent anywhere.

        Every field in MARKER_REQUIRED_FIELDS must be present and non-null,
        the marker type must be known and positions must be numeric.
        """
        for field_name in Validator.MARKER_REQUIRED_FIELDS:
            Validator.validate_required(data.get(field_name), field_name)

        Validator.validate_choice(data['marker_type'], 'marker_type', [t.value for t in MarkerType])
        Validator.validate_numeric_range(data['position_x'], 'position_x')
        Validator.validate_numeric_range(data['position_y'], 'position_y')

        page = data.get('page')
        if page is not None:
            Validator.validate_numeric_range(page, 'page', 1)
        return data

    @staticmethod
    def validate_marker_update(data):
        """Check the value ranges of a full-record marker update."""
        Validator.validate_choice(data['marker_type'], 'marker_type', [t.value for t in MarkerType])
        Validator.validate_numeric_range(data['page'], 'page', 1)
        for field_name in ('position_x', 'position_y', 'width', 'height'):
            if data.get(field_name) is not None:
                Validator.validate_numeric_range(data[field_name], field_name)
        return data
