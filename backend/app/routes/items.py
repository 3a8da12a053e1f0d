"""
Tasklane Backend — Item Route Handlers
========================================

What:  POST /api/items (create), PUT /api/items (full replacement),
       DELETE /api/boards/{board_id}/items/{item_id}.

Create and update take the full item shape: the client chooses the id and
the order, and keeps boardId consistent with the item's column.
"""

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.schemas.board import DeleteItem, ItemRecord
from app.schemas.common import ErrorResponse
from app.services.board_service import board_service

router = APIRouter(prefix="/api", tags=["Items"])

NOT_FOUND = {404: {"description": "Board or item not found", "model": ErrorResponse}}


@router.post(
    "/items",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses=NOT_FOUND,
    summary="Create an item",
)
async def create_item(
    item: ItemRecord,
    db: AsyncSession = Depends(get_db_session),
) -> None:
    await board_service.create_item(db, item)


@router.put(
    "/items",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses=NOT_FOUND,
    summary="Replace an item",
)
async def update_item(
    item: ItemRecord,
    db: AsyncSession = Depends(get_db_session),
) -> None:
    """An omitted `content` clears the item's content."""
    await board_service.update_item(db, item)


@router.delete(
    "/boards/{board_id}/items/{item_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses=NOT_FOUND,
    summary="Delete an item",
)
async def delete_item(
    board_id: str,
    item_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> None:
    await board_service.delete_item(db, DeleteItem(id=item_id, board_id=board_id))
