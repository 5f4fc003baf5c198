"""
Validation helpers

Schema validation for data crossing a boundary: AI responses and imported
JSON backups. If data does not match its schema, fail fast and log.
"""

import logging
from typing import Any, TypeVar

from pydantic import BaseModel, TypeAdapter, ValidationError

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


class SchemaValidationError(Exception):
    """Raised when schema validation fails."""

    def __init__(self, message: str, schema_name: str, errors: list[dict[str, Any]]) -> None:
        super().__init__(message)
        self.schema_name = schema_name
        self.errors = errors


def validate_schema(schema_class: type[T], data: Any) -> T:
    """
    Validate data against a Pydantic schema.

    Args:
        schema_class: The Pydantic model class to validate against
        data: The data to validate

    Returns:
        Validated Pydantic model instance

    Raises:
        SchemaValidationError: If validation fails
    """
    try:
        return schema_class.model_validate(data)
    except ValidationError as e:
        logger.error(
            f"Schema validation failed for {schema_class.__name__}: {e.errors()}"
        )
        raise SchemaValidationError(
            message=f"Schema validation failed for {schema_class.__name__}",
            schema_name=schema_class.__name__,
            errors=e.errors()
        ) from e


def validate_with_adapter(adapter: TypeAdapter, data: Any, name: str) -> Any:
    """Same as ``validate_schema`` for non-model types (dataset dicts)."""
    try:
        return adapter.validate_python(data)
    except ValidationError as e:
        logger.error(f"Schema validation failed for {name}: {e.errors()}")
        raise SchemaValidationError(
            message=f"Schema validation failed for {name}",
            schema_name=name,
            errors=e.errors()
        ) from e
