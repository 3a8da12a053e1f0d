"""
Tasklane Backend — Board/Column/Item Schemas
==============================================

What:  Pydantic models defining the API contract for boards, columns and items.
How:   The three record shapes come first; the request shapes are derived
       from their fields (partial-update, delete-key and creation shapes).
       FastAPI validates request bodies against these and rejects mismatches
       with 422 before any handler runs.

Wire format:
    Keys are camelCase on the wire (boardId, columnId) and snake_case in
    Python. Every model accepts either spelling on input.

Storage-internal fields (pk, created_at) appear in none of these models,
which is what strips them from every response.
"""

from typing import Annotated, List, Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


# Application-chosen logical id; never the storage-internal key
LogicalId = Annotated[str, Field(min_length=1)]


class CamelModel(BaseModel):
    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "from_attributes": True,
    }


# ══════════════════════════════════════════════════════════════════════════
# Record Shapes
# ══════════════════════════════════════════════════════════════════════════


class BoardRecord(CamelModel):
    id: LogicalId
    name: str
    color: str


class ColumnRecord(CamelModel):
    id: LogicalId
    board_id: LogicalId
    name: str
    order: int


class ItemRecord(CamelModel):
    """
    Full Item shape. Used both as the create/update request body and as the
    item entry of a board view, so what a client writes is what it reads back.
    """
    id: LogicalId
    title: str
    content: Optional[str] = None
    order: int
    column_id: LogicalId
    board_id: LogicalId


# ══════════════════════════════════════════════════════════════════════════
# Request Shapes
# ══════════════════════════════════════════════════════════════════════════


class NewColumn(CamelModel):
    """Body of POST /api/columns. The id and order are assigned server-side."""
    board_id: LogicalId
    name: str


class UpdateColumn(CamelModel):
    """
    Body of PATCH /api/columns.

    Only the optional fields that are present (and not null) are written;
    `id` and `board_id` select the column.
    """
    id: LogicalId
    board_id: LogicalId
    name: Optional[str] = None
    order: Optional[int] = None


class DeleteColumn(CamelModel):
    id: LogicalId
    board_id: LogicalId


class DeleteItem(CamelModel):
    id: LogicalId
    board_id: LogicalId


class UpdateBoard(CamelModel):
    """Body of PATCH /api/boards. Absent fields keep their stored value."""
    id: LogicalId
    name: Optional[str] = None
    color: Optional[str] = None


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class BoardView(BoardRecord):
    """
    Denormalized board returned by GET /api/boards and GET /api/boards/{id}.

    Columns and items come in whatever order the index yields them;
    clients sort by `order` for display.
    """
    columns: List[ColumnRecord] = Field(default_factory=list)
    items: List[ItemRecord] = Field(default_factory=list)
