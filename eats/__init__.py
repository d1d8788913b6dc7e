"""
Eats Server: Application Package
===================================

What: Food-place suggestion service with a requested → approved moderation flow.
Who:  Imported by uvicorn (`eats.main:app`), Alembic, and pytest.

Architecture Note:
    ┌─────────────────────────────────────┐
    │      Routes (Request Handler)       │  ← HTTP parsing, validation, JSON
    ├─────────────────────────────────────┤
    │      Services (Record Store)        │  ← SQL for the `places` table
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async engine, per-request sessions
    └─────────────────────────────────────┘

    Routes never build SQL; the store never sees HTTP.
"""

__version__ = "1.0.0"
