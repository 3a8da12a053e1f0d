"""
Tasklane Backend — Column Model
=================================

What:  ORM model for the `columns` table.

Why `board_id` is not a foreign key:
    Parent references are indexed plain columns. Consistency between a
    column and its board is supplied by the caller (handlers check that the
    board exists before writing), not declared in the schema.

Query Patterns:
    - Resolve logical id:  WHERE id = :id        → uq_columns_id
    - Columns of a board:  WHERE board_id = :id  → idx_columns_board_id
"""

from sqlalchemy import Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base
from app.models.mixins import StorageFieldsMixin


class BoardColumn(StorageFieldsMixin, Base):
    """A column of a board. `order` is 1-based and assigned at creation."""

    __tablename__ = "columns"

    id: Mapped[str] = mapped_column(String(255), nullable=False)
    board_id: Mapped[str] = mapped_column(String(255), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    order: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        comment="Display position; never renumbered on delete",
    )

    __table_args__ = (
        Index("uq_columns_id", "id", unique=True),
        Index("idx_columns_board_id", "board_id"),
    )

    def __repr__(self) -> str:
        return (
            f"<BoardColumn(id='{self.id}', board_id='{self.board_id}', "
            f"order={self.order})>"
        )
