"""
Tasklane Backend — Board Service (Queries, Mutations, Bootstrap)
==================================================================

What:  Every operation on the board → column → item hierarchy.
Why:   Keeps the data-integrity rules in one place, independent of HTTP.
How:   Resolve logical ids through the lookup helpers, then read or write
       the resolved ORM records. Handlers only flush; the request's session
       dependency commits or rolls back the whole handler as one transaction.
Who:   Called by the boards, columns, items and admin routers, and by the
       startup hook (seed).

Operation Inventory:
    Queries:    get_boards, get_board
    Mutations:  create_column, update_column, delete_column,
                create_item, update_item, delete_item, update_board
    Bootstrap:  seed, clear
    Cascade:    cascade_delete (shared by every delete)

Cascade rules (dependents are removed before their parent):
    Board   → its items, then its columns
    Column  → its items
    Item    → nothing
"""

import logging
import uuid
from collections import defaultdict
from contextlib import contextmanager
from typing import Dict, Iterator, List, Sequence, Tuple, Type, Union

from sqlalchemy import delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import DatabaseError
from app.models import Board, BoardColumn, Item
from app.schemas.board import (
    BoardView,
    ColumnRecord,
    DeleteColumn,
    DeleteItem,
    ItemRecord,
    NewColumn,
    UpdateBoard,
    UpdateColumn,
)
from app.services.lookups import (
    ensure_board_exists,
    ensure_column_exists,
    ensure_item_exists,
)

logger = logging.getLogger(__name__)

# The board that seed() and clear() guarantee
DEFAULT_BOARD = {"id": "1", "name": "1st Board", "color": "#e0e0e0"}

Record = Union[Board, BoardColumn, Item]

# (dependent model, attribute holding the parent's logical id), in delete order
CASCADE_RULES: Dict[Type[Record], List[Tuple[type, str]]] = {
    Board: [(Item, "board_id"), (BoardColumn, "board_id")],
    BoardColumn: [(Item, "column_id")],
    Item: [],
}


@contextmanager
def _database_errors(operation: str, **context) -> Iterator[None]:
    """
    Translate SQLAlchemy failures into DatabaseError.

    Application errors (NotFoundError) pass through untouched.
    """
    try:
        yield
    except SQLAlchemyError as e:
        logger.error("Database error during %s: %s", operation, str(e), exc_info=True)
        raise DatabaseError(
            message=f"Could not {operation}. Please try again.",
            context={"operation": operation, "error_type": type(e).__name__, **context},
        )


def _column_record(column: BoardColumn) -> ColumnRecord:
    return ColumnRecord(
        id=column.id,
        board_id=column.board_id,
        name=column.name,
        order=column.order,
    )


def _item_record(item: Item) -> ItemRecord:
    return ItemRecord(
        id=item.id,
        title=item.title,
        content=item.content,
        order=item.order,
        column_id=item.column_id,
        board_id=item.board_id,
    )


def _board_view(
    board: Board,
    columns: Sequence[BoardColumn],
    items: Sequence[Item],
) -> BoardView:
    return BoardView(
        id=board.id,
        name=board.name,
        color=board.color,
        columns=[_column_record(c) for c in columns],
        items=[_item_record(i) for i in items],
    )


class BoardService:
    """
    Business logic for boards, columns and items.

    Stateless: every method receives the request's AsyncSession.

    Error Handling Strategy:
        NotFoundError from the lookup helpers propagates as-is (→ 404).
        SQLAlchemy errors are logged and wrapped in DatabaseError (→ 500).
    """

    # ── Queries ───────────────────────────────────────────────────────────

    async def get_board(self, db: AsyncSession, board_id: str) -> BoardView:
        """
        Assemble the full view of one board.

        Query plan:
            1. boards  WHERE id = :id        → uq_boards_id
            2. columns WHERE board_id = :id  → idx_columns_board_id
            3. items   WHERE board_id = :id  → idx_items_board_id

        Raises:
            NotFoundError: The board does not exist
        """
        with _database_errors("load the board", board_id=board_id):
            board = await ensure_board_exists(db, board_id)

            columns = await db.execute(
                select(BoardColumn).where(BoardColumn.board_id == board_id)
            )
            items = await db.execute(
                select(Item).where(Item.board_id == board_id)
            )

            return _board_view(board, columns.scalars().all(), items.scalars().all())

    async def get_boards(self, db: AsyncSession) -> List[BoardView]:
        """
        Assemble the full view of every board.

        Three queries in total regardless of the number of boards: the
        columns and items of all boards are fetched with one IN query each
        and grouped in memory. No pagination.
        """
        with _database_errors("load boards"):
            boards = (await db.execute(select(Board))).scalars().all()
            if not boards:
                return []

            board_ids = [board.id for board in boards]
            columns = await db.execute(
                select(BoardColumn).where(BoardColumn.board_id.in_(board_ids))
            )
            items = await db.execute(
                select(Item).where(Item.board_id.in_(board_ids))
            )

            columns_by_board: Dict[str, List[BoardColumn]] = defaultdict(list)
            for column in columns.scalars():
                columns_by_board[column.board_id].append(column)

            items_by_board: Dict[str, List[Item]] = defaultdict(list)
            for item in items.scalars():
                items_by_board[item.board_id].append(item)

            return [
                _board_view(board, columns_by_board[board.id], items_by_board[board.id])
                for board in boards
            ]

    # ── Column Mutations ──────────────────────────────────────────────────

    async def create_column(self, db: AsyncSession, payload: NewColumn) -> ColumnRecord:
        """
        Append a new column to a board.

        The column gets a fresh UUID id and order = (existing columns) + 1.
        The board row is locked before counting, so on PostgreSQL two
        concurrent creations for the same board take turns instead of both
        reading the same count. Orders are never renumbered, so after a
        delete the new order can repeat a surviving column's order.

        Raises:
            NotFoundError: The board does not exist
        """
        with _database_errors("create the column", board_id=payload.board_id):
            await ensure_board_exists(db, payload.board_id, for_update=True)

            count = await db.execute(
                select(func.count())
                .select_from(BoardColumn)
                .where(BoardColumn.board_id == payload.board_id)
            )

            column = BoardColumn(
                id=str(uuid.uuid4()),
                board_id=payload.board_id,
                name=payload.name,
                order=count.scalar_one() + 1,
            )
            db.add(column)
            await db.flush()

        logger.info(
            "Column %s created on board %s (order=%d)",
            column.id, column.board_id, column.order,
        )
        return _column_record(column)

    async def update_column(self, db: AsyncSession, patch: UpdateColumn) -> None:
        """
        Patch a column's name and/or order.

        Only fields present in the request are written; `id` and `board_id`
        select the column and are never changed.

        Raises:
            NotFoundError: The board or the column does not exist
        """
        with _database_errors("update the column", column_id=patch.id):
            await ensure_board_exists(db, patch.board_id)
            column = await ensure_column_exists(db, patch.id)

            changes = patch.model_dump(exclude={"id", "board_id"}, exclude_none=True)
            for field, value in changes.items():
                setattr(column, field, value)
            await db.flush()

        logger.info("Column %s updated: %s", patch.id, sorted(changes))

    async def delete_column(self, db: AsyncSession, key: DeleteColumn) -> None:
        """
        Delete a column and every item whose column_id is the column's id.

        Items of other columns on the same board are untouched.

        Raises:
            NotFoundError: The board or the column does not exist
        """
        with _database_errors("delete the column", column_id=key.id):
            await ensure_board_exists(db, key.board_id)
            column = await ensure_column_exists(db, key.id)
            await self.cascade_delete(db, column)

    # ── Item Mutations ────────────────────────────────────────────────────

    async def create_item(self, db: AsyncSession, item: ItemRecord) -> None:
        """
        Insert an item exactly as supplied (the caller chooses id and order).

        Only the board is checked. The column reference and the
        column/board consistency are the caller's responsibility.

        Raises:
            NotFoundError: The board does not exist
            DatabaseError: The id is already taken (unique index)
        """
        with _database_errors("create the item", item_id=item.id):
            await ensure_board_exists(db, item.board_id)
            db.add(Item(**item.model_dump()))
            await db.flush()

        logger.info("Item %s created in column %s", item.id, item.column_id)

    async def update_item(self, db: AsyncSession, item: ItemRecord) -> None:
        """
        Replace every field of an existing item with the supplied shape.

        An omitted `content` clears the stored content. Changing
        `column_id` moves the item to another column.

        Raises:
            NotFoundError: The board or the item does not exist
        """
        with _database_errors("update the item", item_id=item.id):
            await ensure_board_exists(db, item.board_id)
            record = await ensure_item_exists(db, item.id)

            for field, value in item.model_dump().items():
                setattr(record, field, value)
            await db.flush()

        logger.info("Item %s updated", item.id)

    async def delete_item(self, db: AsyncSession, key: DeleteItem) -> None:
        """
        Raises:
            NotFoundError: The board or the item does not exist
        """
        with _database_errors("delete the item", item_id=key.id):
            await ensure_board_exists(db, key.board_id)
            item = await ensure_item_exists(db, key.id)
            await self.cascade_delete(db, item)

    # ── Board Mutations ───────────────────────────────────────────────────

    async def update_board(self, db: AsyncSession, patch: UpdateBoard) -> None:
        """
        Patch a board's name and/or color; absent fields keep their value.

        Raises:
            NotFoundError: The board does not exist
        """
        with _database_errors("update the board", board_id=patch.id):
            board = await ensure_board_exists(db, patch.id)

            changes = patch.model_dump(exclude={"id"}, exclude_none=True)
            for field, value in changes.items():
                setattr(board, field, value)
            await db.flush()

        logger.info("Board %s updated: %s", patch.id, sorted(changes))

    # ── Cascade ───────────────────────────────────────────────────────────

    async def cascade_delete(self, db: AsyncSession, record: Record) -> None:
        """
        Delete a record after deleting everything that depends on it.

        The dependents of each kind are listed in CASCADE_RULES; every
        delete in this service goes through here, so a record can never be
        removed while leaving rows that point at its logical id.
        """
        for model, parent_attr in CASCADE_RULES[type(record)]:
            result = await db.execute(
                delete(model).where(getattr(model, parent_attr) == record.id)
            )
            if result.rowcount:
                logger.info(
                    "Cascade: removed %d %s row(s) of %s %s",
                    result.rowcount, model.__tablename__,
                    type(record).__tablename__, record.id,
                )

        await db.delete(record)
        await db.flush()
        logger.info("Deleted %s %s", type(record).__tablename__, record.id)

    # ── Bootstrap / Reset ─────────────────────────────────────────────────

    async def seed(self, db: AsyncSession) -> bool:
        """
        Insert the default board if no board exists. Idempotent.

        Returns:
            True if the default board was inserted, False if boards existed
        """
        with _database_errors("seed boards"):
            count = await db.execute(select(func.count()).select_from(Board))
            if count.scalar_one() > 0:
                return False

            db.add(Board(**DEFAULT_BOARD))
            await db.flush()

        logger.info("Seeded default board %s", DEFAULT_BOARD["id"])
        return True

    async def clear(self, db: AsyncSession) -> None:
        """
        Delete every board (with its columns and items) and reinstate the
        default board. For test/reset use only.
        """
        with _database_errors("clear boards"):
            boards = (await db.execute(select(Board))).scalars().all()
            for board in boards:
                await self.cascade_delete(db, board)

            db.add(Board(**DEFAULT_BOARD))
            await db.flush()

        logger.warning("Cleared %d board(s); default board reinstated", len(boards))


# ── Singleton Instance ────────────────────────────────────────────────────
board_service = BoardService()
