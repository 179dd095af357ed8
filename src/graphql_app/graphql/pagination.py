"""
Page-number based pagination.

A cursor is the decimal string of a 1-based page number. Clients pass the
cursor they received to get the following page; nothing stops them from
making one up, and rows inserted between two requests shift page contents.
"""

import re
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from .errors import InvalidCursorError, InvalidPageSizeError

T = TypeVar("T")

FIRST_PAGE = 1

# Row offsets and page numbers are bound to a signed 64-bit database integer
MAX_DB_INTEGER = 2**63 - 1

_CURSOR_RE = re.compile(r"[0-9]+")


def parse_cursor(cursor: str | None) -> int:
    """Return the page number encoded in ``cursor`` (page 1 when absent)."""
    if cursor is None:
        return FIRST_PAGE
    if not _CURSOR_RE.fullmatch(cursor):
        raise InvalidCursorError(cursor)
    try:
        page_number = int(cursor)
    except ValueError:
        # Past the interpreter limit on integer string length
        raise InvalidCursorError(cursor) from None
    if not FIRST_PAGE <= page_number <= MAX_DB_INTEGER:
        raise InvalidCursorError(cursor)
    return page_number


def cursor_for_page(page_number: int) -> str:
    return str(page_number)


def validate_page_size(page_size: int) -> int:
    if page_size < 1:
        raise InvalidPageSizeError(page_size)
    return page_size


def page_offset(page_number: int, per_page: int) -> int:
    return (page_number - 1) * per_page


@dataclass
class Page(Generic[T]):
    """Rows of one page plus the facts needed to build a connection."""

    items: list[T]
    page_number: int
    per_page: int
    total_count: int
    has_next_page: bool

    @property
    def next_page_cursor(self) -> str:
        return cursor_for_page(self.page_number + 1)

    @property
    def total_pages(self) -> int:
        return -(-self.total_count // self.per_page)


async def count_rows(session: AsyncSession, base_query: Select[Any]) -> int:
    stmt = select(func.count()).select_from(base_query.order_by(None).subquery())
    result = await session.execute(stmt)
    return result.scalar_one()


async def load_page(
    session: AsyncSession, base_query: Select[Any], page_number: int, per_page: int
) -> list[Any]:
    offset = page_offset(page_number, per_page)
    if offset > MAX_DB_INTEGER:
        return []
    stmt = base_query.limit(per_page).offset(offset)
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def load_and_count(
    session: AsyncSession, base_query: Select[Any], page_number: int, per_page: int
) -> tuple[list[Any], int]:
    """Load one page of ``base_query`` and the total number of rows it matches."""
    items = await load_page(session, base_query, page_number, per_page)
    total_count = await count_rows(session, base_query)
    return items, total_count


async def has_page_after(
    session: AsyncSession, base_query: Select[Any], page_number: int, per_page: int
) -> bool:
    """Check for a row past the end of the given page with a single-row query."""
    offset = page_offset(page_number + 1, per_page)
    if offset > MAX_DB_INTEGER:
        return False
    stmt = base_query.limit(1).offset(offset)
    result = await session.execute(stmt)
    return result.first() is not None


async def paginate(
    session: AsyncSession, base_query: Select[Any], page_number: int, per_page: int
) -> Page[Any]:
    """Fetch one page of ``base_query``, its total count and a next-page lookahead."""
    items, total_count = await load_and_count(session, base_query, page_number, per_page)
    has_next_page = await has_page_after(session, base_query, page_number, per_page)
    return Page(
        items=items,
        page_number=page_number,
        per_page=per_page,
        total_count=total_count,
        has_next_page=has_next_page,
    )
