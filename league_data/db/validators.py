"""Reusable SQLAlchemy validators for the league models.

SQLite does not enforce VARCHAR lengths, so the length and range limits of
the schema are checked on assignment as well to keep behavior identical
across stores.
"""


def validate_bounded_text(
    key: str, value: str | None, max_length: int, required: bool
) -> str | None:
    """Validate a name-like text attribute.

    This validator is meant to be called from a model's @validates hook.

    Args:
        key: The attribute name being validated
        value: Assigned value
        max_length: Maximum number of characters
        required: Whether None or blank values are rejected

    Returns:
        The value with surrounding whitespace removed

    Raises:
        ValueError: If the value is missing, blank, or too long
    """
    if value is None:
        if required:
            raise ValueError(f"{key} is required")
        return None

    if not isinstance(value, str):
        raise ValueError(f"{key} must be a string, got {type(value).__name__}")

    stripped = value.strip()
    if required and not stripped:
        raise ValueError(f"{key} cannot be blank")
    if len(stripped) > max_length:
        raise ValueError(f"{key} cannot exceed {max_length} characters")
    return stripped


def validate_range(
    key: str, value: int | float | None, low: float, high: float
) -> int | float | None:
    """Validate that a numeric attribute lies within [low, high].

    None passes through; nullability is enforced by the column definition.

    Raises:
        ValueError: If the value is outside the range
    """
    if value is None:
        return None
    if not low <= value <= high:
        raise ValueError(f"{key} must be between {low} and {high}, got {value}")
    return value
