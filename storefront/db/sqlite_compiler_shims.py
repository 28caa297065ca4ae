"""SQLite compilation shim for the PostgreSQL JSONB type.

Lets ``Base.metadata.create_all()`` and the Alembic migrations run against
the SQLite databases used in tests. JSONB is stored as generic JSON text;
no JSONB operators are emulated.

Usage: imported for side-effects by storefront.db.models.
"""
from __future__ import annotations

from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.ext.compiler import compiles


@compiles(JSONB, "sqlite")
def _compile_jsonb_sqlite(element, compiler, **kw):  # pragma: no cover - trivial
    return "JSON"
