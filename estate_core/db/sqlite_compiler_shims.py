"""SQLite compilation shim for the PostgreSQL JSONB type.

Installs a compiler for JSONB when the active dialect is SQLite so that the
declarative metadata (activity snapshots) can be created in test runs that
substitute an in-memory SQLite database. JSONB operators are not emulated.

Usage: Imported for side-effects by estate_core.db.models.
"""
from __future__ import annotations

from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.ext.compiler import compiles


@compiles(JSONB, "sqlite")
def _compile_jsonb_sqlite(element, compiler, **kw):  # pragma: no cover - trivial
    # Stored as TEXT-backed JSON; snapshots are opaque so no operators are needed.
    return "JSON"
