"""
Repositories package — data-access layer for the SQL document store.

Convention:
    - One file per table (documents.py)
    - All functions accept `AsyncSession` as the first argument
    - Use `flush()` internally; commit/rollback belongs to the caller
      (SQLDocumentStore opens one transaction per store operation)
"""
