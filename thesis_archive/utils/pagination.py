"""
Pagination helpers shared by the listing endpoints.

Every paginated response uses the envelope
``{data, total, page, limit, totalPages}``.
"""
import math
from typing import Any, Dict, List, Optional, Tuple, Union

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import Select

from thesis_archive.core.config import settings

DEFAULT_PAGE = 1


def coerce_positive_int(value: Union[str, int, None], default: int) -> int:
    """
    Turn a raw query value into a positive integer.

    Missing, non-numeric, zero and negative values all fall back to
    ``default``; a request never fails because of its paging parameters.
    """
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value if value > 0 else default
    text = str(value).strip()
    try:
        number = int(text)
    except ValueError:
        return default
    return number if number > 0 else default


def resolve_page_params(
    page: Union[str, int, None] = None,
    limit: Union[str, int, None] = None,
) -> Tuple[int, int]:
    """Page number and page size; the size is capped at MAX_PAGE_SIZE"""
    return (
        coerce_positive_int(page, DEFAULT_PAGE),
        min(coerce_positive_int(limit, settings.DEFAULT_PAGE_SIZE), settings.MAX_PAGE_SIZE),
    )


def total_pages(total: int, limit: int) -> int:
    """ceil(total / limit); 0 for an empty result"""
    if total <= 0:
        return 0
    return math.ceil(total / limit)


def page_offset(page: int, limit: int) -> int:
    return (page - 1) * limit


def build_page(data: List[Any], total: int, page: int, limit: int) -> Dict[str, Any]:
    return {
        "data": data,
        "total": total,
        "page": page,
        "limit": limit,
        "totalPages": total_pages(total, limit),
    }


async def paginate(
    db: AsyncSession,
    query: Select,
    page: int,
    limit: int,
    count_query: Optional[Select] = None,
) -> Dict[str, Any]:
    """
    Run ``query`` for one page and count the full result.

    The count runs over the unordered query as a subquery unless
    ``count_query`` is given. Pages past the end come back empty without a
    second query. ``data`` holds ORM objects; callers serialize.
    """
    if count_query is None:
        count_query = select(func.count()).select_from(query.order_by(None).subquery())

    total = (await db.execute(count_query)).scalar() or 0

    offset = page_offset(page, limit)
    # Past the last page: nothing to fetch, and the offset may not fit an SQL integer
    if offset >= total:
        return build_page([], total, page, limit)

    result = await db.execute(query.offset(offset).limit(limit))
    items = list(result.scalars().all())

    return build_page(items, total, page, limit)
