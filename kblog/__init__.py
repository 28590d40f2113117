"""
KBlog Backend — Application Package Initializer
================================================

What: Marks the `kblog` directory as a Python package.
Why:  Enables module imports like `from kblog.config import settings`.
Who:  Used implicitly by Python's import system and explicitly by pytest and uvicorn.

Architecture Note:
    The backend is a thin layered REST service:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │     Repositories (Blog Store)       │  ← Identity, CRUD, filtering
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← Pydantic entities + ORM tables
    ├─────────────────────────────────────┤
    │   Storage (in-memory or SQLAlchemy) │  ← Selected by STORAGE_BACKEND
    └─────────────────────────────────────┘

    Routes never touch storage directly: they receive the BlogStore built at
    startup and call exactly one repository operation per request.
"""

__version__ = "1.0.0"
