"""
Tasklane Backend — Column Route Handlers
==========================================

What:  POST /api/columns, PATCH /api/columns,
       DELETE /api/boards/{board_id}/columns/{column_id}.

All three return 204 No Content. Clients re-read the board view to see
the assigned id and order of a new column.
"""

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.schemas.board import DeleteColumn, NewColumn, UpdateColumn
from app.schemas.common import ErrorResponse
from app.services.board_service import board_service

router = APIRouter(prefix="/api", tags=["Columns"])

NOT_FOUND = {404: {"description": "Board or column not found", "model": ErrorResponse}}


@router.post(
    "/columns",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses=NOT_FOUND,
    summary="Append a column to a board",
)
async def create_column(
    payload: NewColumn,
    db: AsyncSession = Depends(get_db_session),
) -> None:
    await board_service.create_column(db, payload)


@router.patch(
    "/columns",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses=NOT_FOUND,
    summary="Rename or reorder a column",
)
async def update_column(
    patch: UpdateColumn,
    db: AsyncSession = Depends(get_db_session),
) -> None:
    await board_service.update_column(db, patch)


@router.delete(
    "/boards/{board_id}/columns/{column_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses=NOT_FOUND,
    summary="Delete a column and all of its items",
)
async def delete_column(
    board_id: str,
    column_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> None:
    await board_service.delete_column(db, DeleteColumn(id=column_id, board_id=board_id))
