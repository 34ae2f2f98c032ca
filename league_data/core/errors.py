"""
Domain-specific exceptions for the league data-access layer.

These exceptions represent caller-visible failures of repository operations
and are mapped to HTTP status codes by the API layer that consumes them.
Store-level failures (connectivity, constraint violations) are not wrapped:
they propagate from SQLAlchemy unchanged.
"""

from typing import Any


class LeagueDataError(Exception):
    """Base exception for all league data-access errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class NotFoundError(LeagueDataError):
    """
    Raised when a required single entity does not exist.

    Examples:
    - Team ID not found while resolving the division that owns it
    - Team found but its division link does not resolve

    Collection lookups never raise this; they return an empty list.

    HTTP Status: 404 Not Found
    """

    pass


class InvalidArgumentError(LeagueDataError):
    """
    Raised when a repository operation receives an unusable argument.

    Examples:
    - None passed as the entity to add/update/delete
    - None passed as the predicate of a query
    - Unknown relationship name in an eager-load path
    - Restoring a record type that has no soft-delete capability

    HTTP Status: 400 Bad Request
    """

    pass


# HTTP Status Code Mapping
ERROR_STATUS_MAP = {
    InvalidArgumentError: 400,
    NotFoundError: 404,
}


def get_status_code(error: Exception) -> int:
    """
    Get the HTTP status code for a given exception.

    Args:
        error: The exception instance

    Returns:
        HTTP status code (defaults to 500 for unknown errors)
    """
    return ERROR_STATUS_MAP.get(type(error), 500)
