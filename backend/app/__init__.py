"""
VisitorBook Backend: Application Package Initializer
====================================================

What: Marks the `app` directory as a Python package.
Who:  Imported by uvicorn (`uvicorn app.main:app`) and by pytest.

Architecture Note:
    The backend follows a layered layout:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← Validation, error translation
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Explicit store handle
    └─────────────────────────────────────┘

    Routes never touch SQL; services never touch HTTP status codes.
"""

__version__ = "1.0.0"
