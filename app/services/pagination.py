from typing import Any, Tuple

from app.config import DEFAULT_PAGE_LIMIT, MAX_PAGE_LIMIT, MAX_SQL_INTEGER


def _to_int(value: Any, default: int) -> int:
    if value is None or isinstance(value, bool):
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def clamp_pagination(
    limit: Any = None,
    offset: Any = None,
    default_limit: int = DEFAULT_PAGE_LIMIT,
    max_limit: int = MAX_PAGE_LIMIT,
) -> Tuple[int, int]:
    """
    Normalize limit/offset instead of rejecting them.

    Unparseable values fall back to defaults, limit is clamped to
    [1, max_limit] and offset to [0, MAX_SQL_INTEGER].
    """
    limit = _to_int(limit, default_limit)
    offset = _to_int(offset, 0)
    return max(1, min(limit, max_limit)), min(max(0, offset), MAX_SQL_INTEGER)
