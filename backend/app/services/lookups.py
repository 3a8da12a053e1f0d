"""
Tasklane Backend — Entity Lookup Helpers
==========================================

What:  Resolve a logical id to its stored record, or fail loudly.
Who:   Every query and mutation handler in board_service.
How:   One indexed equality query on the record's `id` column.

Uniqueness of `id` is guaranteed by the unique index, so a lookup matches
zero or one row. Zero rows raises NotFoundError. If the index were ever
missing and two rows matched, scalar_one_or_none() raises
MultipleResultsFound, which the service layer reports as a DatabaseError.
"""

from typing import Type, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import NotFoundError
from app.models import Board, BoardColumn, Item

RecordT = TypeVar("RecordT", Board, BoardColumn, Item)


async def _ensure_exists(
    db: AsyncSession,
    model: Type[RecordT],
    kind: str,
    logical_id: str,
    for_update: bool = False,
) -> RecordT:
    query = select(model).where(model.id == logical_id)
    if for_update:
        # No-op on SQLite; a row lock on PostgreSQL
        query = query.with_for_update()

    result = await db.execute(query)
    record = result.scalar_one_or_none()

    if record is None:
        raise NotFoundError(resource=kind, resource_id=logical_id)
    return record


async def ensure_board_exists(
    db: AsyncSession, board_id: str, for_update: bool = False
) -> Board:
    """
    Resolve a board by logical id.

    Args:
        db: Async database session
        board_id: Logical board id
        for_update: Lock the board row until the transaction ends. Used by
            handlers that read an aggregate of the board (column count)
            and then write based on it.

    Raises:
        NotFoundError: No board has this id ("missing board <id>")
    """
    return await _ensure_exists(db, Board, "board", board_id, for_update=for_update)


async def ensure_column_exists(db: AsyncSession, column_id: str) -> BoardColumn:
    """Resolve a column by logical id; NotFoundError ("missing column <id>") if absent."""
    return await _ensure_exists(db, BoardColumn, "column", column_id)


async def ensure_item_exists(db: AsyncSession, item_id: str) -> Item:
    """Resolve an item by logical id; NotFoundError ("missing item <id>") if absent."""
    return await _ensure_exists(db, Item, "item", item_id)
