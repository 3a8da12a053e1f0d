"""Create boards, columns and items tables

Revision ID: 001
Revises: None
Create Date: 2026-10-19 00:00:00.000000+00:00

What:  Creates the three record kinds of a board and their indexes.
How:   Each table has a storage-internal UUID `pk` and a logical `id` with a
       unique index. Parent references (board_id, column_id) are indexed
       plain columns, not foreign keys.

Rollback: downgrade() drops all three tables (all data lost).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _storage_columns():
    return [
        sa.Column(
            "pk",
            postgresql.UUID(as_uuid=True),
            server_default=sa.text("gen_random_uuid()"),
            nullable=False,
            comment="Storage-internal key, never exposed to clients",
        ),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
            comment="When this record was inserted (UTC)",
        ),
    ]


def upgrade() -> None:
    op.create_table(
        "boards",
        *_storage_columns(),
        sa.Column("id", sa.String(255), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("color", sa.String(32), nullable=False),
        sa.PrimaryKeyConstraint("pk"),
    )
    op.create_index("uq_boards_id", "boards", ["id"], unique=True)

    op.create_table(
        "columns",
        *_storage_columns(),
        sa.Column("id", sa.String(255), nullable=False),
        sa.Column("board_id", sa.String(255), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column(
            "order",
            sa.Integer(),
            nullable=False,
            comment="Display position; never renumbered on delete",
        ),
        sa.PrimaryKeyConstraint("pk"),
    )
    op.create_index("uq_columns_id", "columns", ["id"], unique=True)
    op.create_index("idx_columns_board_id", "columns", ["board_id"])

    op.create_table(
        "items",
        *_storage_columns(),
        sa.Column("id", sa.String(255), nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("content", sa.Text(), nullable=True),
        sa.Column("order", sa.Integer(), nullable=False),
        sa.Column("column_id", sa.String(255), nullable=False),
        sa.Column("board_id", sa.String(255), nullable=False),
        sa.PrimaryKeyConstraint("pk"),
    )
    op.create_index("uq_items_id", "items", ["id"], unique=True)
    op.create_index("idx_items_board_id", "items", ["board_id"])
    op.create_index("idx_items_column_id", "items", ["column_id"])


def downgrade() -> None:
    """Drop all board tables. Destructive: every board, column and item is lost."""
    op.drop_index("idx_items_column_id", table_name="items")
    op.drop_index("idx_items_board_id", table_name="items")
    op.drop_index("uq_items_id", table_name="items")
    op.drop_table("items")

    op.drop_index("idx_columns_board_id", table_name="columns")
    op.drop_index("uq_columns_id", table_name="columns")
    op.drop_table("columns")

    op.drop_index("uq_boards_id", table_name="boards")
    op.drop_table("boards")
