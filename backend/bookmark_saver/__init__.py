"""
Bookmark Saver Backend — Application Package Initializer
========================================================

What: Marks the `bookmark_saver` directory as a Python package.
Why:  Enables module imports like `from bookmark_saver.config import settings`.
Who:  Used implicitly by Python's import system and explicitly by pytest and uvicorn.

Architecture Note:
    This backend follows a layered architecture:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← Validation, filter building
    ├─────────────────────────────────────┤
    │            Schemas (Data)           │  ← Pydantic entity + API contracts
    ├─────────────────────────────────────┤
    │   Database (Store + Gateway)        │  ← Motor client, collection-scoped ops
    └─────────────────────────────────────┘

    The gateway never remembers a "current collection": every call names the
    collection it targets, so concurrent requests cannot interfere.
"""

__version__ = "1.0.0"
