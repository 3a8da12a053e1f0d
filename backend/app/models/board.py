"""
Tasklane Backend — Board Model
================================

What:  ORM model for the `boards` table, the root of the hierarchy.
Who:   Resolved by the lookup helpers; created only by seed() and clear().

Query Patterns:
    - Resolve logical id: SELECT ... WHERE id = :id
      → Uses uq_boards_id (unique)
    - List boards: SELECT ... (no pagination)
"""

from sqlalchemy import Index, String
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base
from app.models.mixins import StorageFieldsMixin


class Board(StorageFieldsMixin, Base):
    """A kanban board. Owns columns and items through their board_id."""

    __tablename__ = "boards"

    id: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Logical id chosen by the application",
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    color: Mapped[str] = mapped_column(String(32), nullable=False)

    __table_args__ = (
        Index("uq_boards_id", "id", unique=True),
    )

    def __repr__(self) -> str:
        return f"<Board(id='{self.id}', name='{self.name}')>"
