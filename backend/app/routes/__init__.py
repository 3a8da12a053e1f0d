"""
Tasklane Backend — API Routes Package
=======================================

Route Inventory:
    - boards.py:   GET   /api/boards
                   GET   /api/boards/{board_id}
                   PATCH /api/boards
    - columns.py:  POST  /api/columns
                   PATCH /api/columns
                   DELETE /api/boards/{board_id}/columns/{column_id}
    - items.py:    POST  /api/items
                   PUT   /api/items
                   DELETE /api/boards/{board_id}/items/{item_id}
    - admin.py:    POST  /api/admin/seed, POST /api/admin/clear (opt-in)
    - health.py:   GET   /health

Routes are thin: extract the request shape, call BoardService, let the
global exception handlers turn NotFoundError/DatabaseError into responses.
"""
