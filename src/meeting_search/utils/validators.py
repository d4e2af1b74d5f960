"""Input validation utilities."""

from typing import Any, Dict, Mapping

from pydantic import ValidationError as PydanticValidationError

from ..models.query import MAX_LIMIT, SearchQuery, SearchQueryModel
from ..core.exceptions import ValidationError


def validate_query(query: SearchQuery) -> None:
    """
    Validate query object.

    Args:
        query: Query to validate

    Raises:
        ValidationError: If query is invalid
    """
    if not isinstance(query, SearchQuery):
        raise ValidationError("Invalid query type")

    if query.limit <= 0:
        raise ValidationError("Limit must be positive")

    if query.limit > MAX_LIMIT:
        raise ValidationError(f"Limit cannot exceed {MAX_LIMIT}")

    for name in ("attendee_email", "start_date", "end_date",
                 "workspace_id", "folder_name", "content_query"):
        value = getattr(query, name)
        if value is not None and not isinstance(value, str):
            raise ValidationError(f"{name} must be a string")


def query_from_params(params: Mapping[str, Any]) -> SearchQuery:
    """
    Build a validated query from tool-style parameters.

    Args:
        params: Mapping with the exposed query fields

    Returns:
        Validated SearchQuery

    Raises:
        ValidationError: If any parameter is invalid
    """
    try:
        model = SearchQueryModel(**dict(params))
    except PydanticValidationError as e:
        raise ValidationError(f"Invalid search parameters: {e}") from e
    return model.to_query()


def require_document_id(document_id: Any) -> str:
    """Validate a document id argument for direct lookups."""
    if not isinstance(document_id, str) or not document_id.strip():
        raise ValidationError("Document ID is required")
    return document_id.strip()


def summarize_params(params: Dict[str, Any]) -> str:
    """Compact rendering of query parameters for log lines."""
    return ", ".join(f"{k}={v!r}" for k, v in params.items() if v not in (None, False))
