"""Small validation and formatting helpers for configuration values."""

from typing import Annotated

from pydantic import Field


__all__ = [
    "NonEmptyStr",
    "PositiveTimeout",
    "mask_credential",
    "parse_comma_separated",
]


PositiveTimeout = Annotated[float, Field(gt=0, description="Timeout value in seconds")]
NonEmptyStr = Annotated[str, Field(min_length=1, description="Non-empty string")]


def parse_comma_separated(
    value: str | list[str],
    strip: bool = True,
    filter_empty: bool = True,
    max_items: int | None = None,
) -> list[str]:
    """Parse comma-separated string into list of values.

    Args:
        value: Comma-separated string or list
        strip: Whether to strip whitespace from each item
        filter_empty: Whether to filter out empty strings
        max_items: Maximum number of items allowed (default: None, no limit)

    Returns:
        List of parsed values

    Raises:
        ValueError: If max_items is exceeded
    """
    if isinstance(value, list):
        items = value
    else:
        items = value.split(",")

    if max_items is not None and len(items) > max_items:
        raise ValueError(f"Too many items: got {len(items)}, maximum is {max_items}")

    if strip:
        items = [item.strip() for item in items]

    if filter_empty:
        items = [item for item in items if item]

    return items


def mask_credential(credential: str, visible: int = 4) -> str:
    """Mask an API key for logs and status output.

    Keeps the last ``visible`` characters so operators can tell keys apart.
    """
    if len(credential) <= visible * 2:
        return "*" * len(credential)
    return f"...{credential[-visible:]}"
