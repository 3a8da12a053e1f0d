"""
Tasklane Backend — Item Model
===============================

What:  ORM model for the `items` table (the cards of a board).

Items carry both `column_id` and a denormalized `board_id`, so a board view
can fetch all of its items with one indexed query, without joining through
columns. Keeping `board_id` equal to the column's board is the caller's job.

Query Patterns:
    - Resolve logical id:  WHERE id = :id         → uq_items_id
    - Items of a board:    WHERE board_id = :id   → idx_items_board_id
    - Items of a column:   WHERE column_id = :id  → idx_items_column_id
                           (cascade on column delete)
"""

from typing import Optional

from sqlalchemy import Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base
from app.models.mixins import StorageFieldsMixin


class Item(StorageFieldsMixin, Base):
    """A card. Owned by one column, denormalized with its board's id."""

    __tablename__ = "items"

    id: Mapped[str] = mapped_column(String(255), nullable=False)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    content: Mapped[Optional[str]] = mapped_column(Text, nullable=True, default=None)
    order: Mapped[int] = mapped_column(Integer, nullable=False)
    column_id: Mapped[str] = mapped_column(String(255), nullable=False)
    board_id: Mapped[str] = mapped_column(String(255), nullable=False)

    __table_args__ = (
        Index("uq_items_id", "id", unique=True),
        Index("idx_items_board_id", "board_id"),
        Index("idx_items_column_id", "column_id"),
    )

    def __repr__(self) -> str:
        return (
            f"<Item(id='{self.id}', column_id='{self.column_id}', "
            f"order={self.order})>"
        )
