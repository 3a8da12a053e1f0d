"""
Tasklane Backend — Board Route Handlers
=========================================

What:  GET /api/boards, GET /api/boards/{board_id}, PATCH /api/boards.
How:   Thin wrappers over BoardService; the session dependency commits
       on success and rolls back on any error.

Response shape:
    Board views omit `content` on items that have none, so an item read
    back through a board view compares equal to the body it was created with.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.schemas.board import BoardView, UpdateBoard
from app.schemas.common import ErrorResponse
from app.services.board_service import board_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Boards"])


@router.get(
    "/boards",
    response_model=List[BoardView],
    response_model_exclude_none=True,
    responses={
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="List every board with its columns and items",
)
async def get_boards(
    db: AsyncSession = Depends(get_db_session),
) -> List[BoardView]:
    """
    No pagination: every board is returned in full. Column and item lists
    are unsorted; clients order them by `order`.
    """
    return await board_service.get_boards(db)


@router.get(
    "/boards/{board_id}",
    response_model=BoardView,
    response_model_exclude_none=True,
    responses={
        404: {"description": "Board not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Get one board with its columns and items",
)
async def get_board(
    board_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> BoardView:
    return await board_service.get_board(db, board_id)


@router.patch(
    "/boards",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={
        404: {"description": "Board not found", "model": ErrorResponse},
    },
    summary="Rename or recolor a board",
)
async def update_board(
    patch: UpdateBoard,
    db: AsyncSession = Depends(get_db_session),
) -> None:
    await board_service.update_board(db, patch)
