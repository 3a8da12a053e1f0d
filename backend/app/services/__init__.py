"""
Tasklane Backend — Services Layer
===================================

Service Inventory:
    - lookups: resolve a logical id to a stored record or raise NotFoundError
    - BoardService: board views, column/item/board mutations, cascading
      deletes, seed/clear bootstrap
"""
