"""
Tasklane Backend — Admin Route Handlers
=========================================

What:  POST /api/admin/seed and POST /api/admin/clear.
Who:   Test harnesses and operators resetting a development database.
When:  Mounted only when ENABLE_ADMIN_ROUTES is true (see main.create_app).

clear() deletes every board together with its columns and items. Never
enable these routes on an instance that serves end users.
"""

import logging

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.services.board_service import board_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin", tags=["Admin"])


@router.post(
    "/seed",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Insert the default board if no board exists",
)
async def seed(db: AsyncSession = Depends(get_db_session)) -> None:
    await board_service.seed(db)


@router.post(
    "/clear",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Wipe all boards and reinstate the default board",
)
async def clear(db: AsyncSession = Depends(get_db_session)) -> None:
    logger.warning("Admin clear requested")
    await board_service.clear(db)
