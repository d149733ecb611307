"""Utility functions for API endpoints."""

import math
from typing import Any, Optional

from fastapi import Request

from content_bridge.core.errors import ValidationError


def coerce_int(value: Any, default: int) -> int:
    """
    Parse a query parameter as an integer.

    Args:
        value: Raw parameter value, possibly ``None``
        default: Value used when the parameter is absent or unparsable

    Returns:
        The parsed integer or ``default``
    """
    if value is None or value == "":
        return default
    try:
        return int(str(value).strip())
    except ValueError:
        return default


def clamp(value: int, lower: int, upper: int) -> int:
    """Clamp ``value`` into ``[lower, upper]``."""
    return max(lower, min(upper, value))


def calculate_offset(page: int, limit: int) -> int:
    """Offset of the first item on ``page`` (1-based)."""
    return (page - 1) * limit


def calculate_total_pages(total_items: int, limit: int) -> int:
    """Number of pages needed for ``total_items``; 0 when there are none."""
    return math.ceil(total_items / limit)


def build_canonical_url(base_url: str, path_template: str, item_id: int) -> str:
    """
    Build the absolute canonical URL of a content item.

    Args:
        base_url: Public base URL of the site
        path_template: Path with an ``{id}`` placeholder
        item_id: Content item id

    Returns:
        Absolute URL string
    """
    path = path_template.format(id=item_id)
    return f"{base_url.rstrip('/')}/{path.lstrip('/')}"


async def read_json_body(request: Request) -> Optional[Any]:
    """
    Decode a request body as JSON.

    Returns ``None`` for an empty body.

    Raises:
        ValidationError: If the body is not valid JSON
    """
    raw = await request.body()
    if not raw.strip():
        return None
    try:
        return await request.json()
    except ValueError as exc:
        raise ValidationError("Invalid payload: malformed JSON") from exc
