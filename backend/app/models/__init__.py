"""
Tasklane Backend — ORM Models
===============================

Three record kinds make up a board:

    Board ──< BoardColumn ──< Item
      └──────────────────────<┘   (items carry board_id too)

Each record has a logical `id` chosen by the application and a
storage-internal `pk`. Lookups always go through `id`.
"""

from app.models.board import Board
from app.models.column import BoardColumn
from app.models.item import Item

__all__ = ["Board", "BoardColumn", "Item"]
