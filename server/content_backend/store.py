"""
Remote store abstraction: a SQLAlchemy-backed implementation, an in-memory
test implementation, and an always-failing stand-in for unconfigured
development environments.
"""

from __future__ import annotations

import copy
from datetime import datetime, timezone
from typing import Dict, Literal, Optional, Protocol

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    create_engine,
    delete,
    insert,
    select,
    update,
)
from sqlalchemy.exc import SQLAlchemyError

PostShape = Literal["rich", "legacy"]


class StoreError(Exception):
    """Raised for any failure reported by the backing store."""


class RemoteStore(Protocol):
    """Row operations the content layer needs from the backing store."""

    def select(
        self,
        table: str,
        *,
        filters: Optional[dict] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
    ) -> list[dict]:
        ...

    def select_one(self, table: str, *, filters: dict) -> Optional[dict]:
        ...

    def upsert(self, table: str, rows: list[dict], *, on_conflict: str) -> None:
        ...

    def delete(self, table: str, *, filters: dict) -> None:
        ...


def _matches(row: dict, filters: Optional[dict]) -> bool:
    if not filters:
        return True
    return all(row.get(key) == value for key, value in filters.items())


def _sort_key(value):
    # None sorts first, like NULLS FIRST on an ascending index.
    return (value is not None, value)


class InMemoryRemoteStore:
    """Simple in-memory store for development and tests."""

    def __init__(self):
        self.tables: Dict[str, list[dict]] = {}

    def select(
        self,
        table: str,
        *,
        filters: Optional[dict] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
    ) -> list[dict]:
        rows = [
            copy.deepcopy(row)
            for row in self.tables.get(table, [])
            if _matches(row, filters)
        ]
        if order_by:
            rows.sort(key=lambda row: _sort_key(row.get(order_by)), reverse=descending)
        return rows

    def select_one(self, table: str, *, filters: dict) -> Optional[dict]:
        rows = self.select(table, filters=filters)
        if len(rows) > 1:
            raise StoreError(f"Expected at most one row from {table}, got {len(rows)}")
        return rows[0] if rows else None

    def upsert(self, table: str, rows: list[dict], *, on_conflict: str) -> None:
        existing = self.tables.setdefault(table, [])
        for row in rows:
            if on_conflict not in row:
                raise StoreError(f"Row for {table} is missing conflict key {on_conflict}")
            current = next(
                (r for r in existing if r.get(on_conflict) == row[on_conflict]), None
            )
            if current is None:
                existing.append(copy.deepcopy(row))
            else:
                current.update(copy.deepcopy(row))

    def delete(self, table: str, *, filters: dict) -> None:
        if not filters:
            raise StoreError("Refusing to delete without filters")
        rows = self.tables.get(table, [])
        self.tables[table] = [row for row in rows if not _matches(row, filters)]


class UnavailableRemoteStore:
    """
    Store used when no database is configured. Every call fails, so reads
    exercise their bundled fallbacks and writes surface the problem.
    """

    message = "Missing database credentials (fallback mode)"

    def select(self, table: str, **kwargs) -> list[dict]:
        raise StoreError(self.message)

    def select_one(self, table: str, **kwargs) -> Optional[dict]:
        raise StoreError(self.message)

    def upsert(self, table: str, rows: list[dict], **kwargs) -> None:
        raise StoreError(self.message)

    def delete(self, table: str, **kwargs) -> None:
        raise StoreError(self.message)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def build_metadata(post_shape: PostShape = "rich") -> MetaData:
    """Table definitions; `posts` takes one of the two supported shapes."""
    metadata = MetaData()

    Table(
        "site_content",
        metadata,
        Column("id", Integer, primary_key=True),
        Column("hero_title", Text, nullable=False, default=""),
        Column("hero_subtitle", Text, nullable=False, default=""),
        Column("about_text", Text, nullable=False, default=""),
        Column("methodology_text", Text, nullable=False, default=""),
        Column("contact_email", String, nullable=False, default=""),
        Column("contact_phone", String, nullable=False, default=""),
        Column("organization_name", String, nullable=False, default=""),
        Column("logo_url", Text, nullable=True),
        Column("global_schedule_status", Text, nullable=True),
    )

    Table(
        "group_offerings",
        metadata,
        Column("id", String, primary_key=True),
        Column("title", String, nullable=False),
        Column("description", Text, nullable=False, default=""),
        Column("long_description", Text, nullable=True),
        Column("benefits", JSON, nullable=False, default=list),
        Column("type", String, nullable=False),
        Column("schedule", String, nullable=False, default=""),
        Column("facilitator", String, nullable=False, default=""),
        Column("image", Text, nullable=False, default=""),
        Column("active", Boolean, nullable=False, default=False),
        Column("focus", String, nullable=False, default=""),
    )

    if post_shape == "legacy":
        Table(
            "posts",
            metadata,
            Column("id", String, primary_key=True),
            Column("title", String, nullable=False),
            Column("body", Text, nullable=False, default=""),
            Column("published", Boolean, nullable=False, default=False),
            Column("created_at", DateTime(timezone=True), nullable=False, default=_utcnow),
        )
    else:
        Table(
            "posts",
            metadata,
            Column("id", String, primary_key=True),
            Column("title", String, nullable=False),
            Column("excerpt", Text, nullable=False, default=""),
            Column("content", Text, nullable=False, default=""),
            Column("author", String, nullable=False, default=""),
            Column("publish_date", String, nullable=False, default=""),
            Column("image_url", Text, nullable=False, default=""),
            Column("tags", JSON, nullable=False, default=list),
        )

    Table(
        "admin_users",
        metadata,
        Column("user_id", String, primary_key=True),
    )

    Table(
        "auth_users",
        metadata,
        Column("id", String, primary_key=True),
        Column("email", String, nullable=False, unique=True, index=True),
        Column("password_hash", String, nullable=False),
        Column("created_at", DateTime(timezone=True), nullable=False, default=_utcnow),
    )

    Table(
        "auth_sessions",
        metadata,
        Column("access_token", String, primary_key=True),
        Column("user_id", String, nullable=False, index=True),
        Column("email", String, nullable=False),
        Column("recovery", Boolean, nullable=False, default=False),
        Column("created_at", DateTime(timezone=True), nullable=False, default=_utcnow),
    )

    return metadata


class SqlRemoteStore:
    """
    SQLAlchemy-backed implementation. Accepts any SQLAlchemy URL (e.g., Postgres or SQLite for tests).
    """

    def __init__(self, database_url: str, post_shape: PostShape = "rich"):
        if not database_url:
            raise ValueError("DATABASE_URL is required for SqlRemoteStore")
        self.engine = create_engine(
            database_url,
            future=True,
            pool_pre_ping=True,
            pool_recycle=1800,
        )
        self.metadata = build_metadata(post_shape)
        self.metadata.create_all(self.engine)

    def _table(self, name: str) -> Table:
        table = self.metadata.tables.get(name)
        if table is None:
            raise StoreError(f"Unknown table: {name}")
        return table

    @staticmethod
    def _where(table: Table, filters: Optional[dict]) -> list:
        clauses = []
        for key, value in (filters or {}).items():
            if key not in table.c:
                raise StoreError(f"Unknown column {table.name}.{key}")
            clauses.append(table.c[key] == value)
        return clauses

    @staticmethod
    def _known_columns(table: Table, row: dict) -> dict:
        return {key: value for key, value in row.items() if key in table.c}

    def select(
        self,
        table: str,
        *,
        filters: Optional[dict] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
    ) -> list[dict]:
        t = self._table(table)
        stmt = select(t).where(*self._where(t, filters))
        if order_by:
            if order_by not in t.c:
                raise StoreError(f"Unknown column {table}.{order_by}")
            column = t.c[order_by]
            stmt = stmt.order_by(column.desc() if descending else column.asc())
        try:
            with self.engine.connect() as conn:
                return [dict(row) for row in conn.execute(stmt).mappings()]
        except SQLAlchemyError as exc:
            raise StoreError(str(exc)) from exc

    def select_one(self, table: str, *, filters: dict) -> Optional[dict]:
        t = self._table(table)
        stmt = select(t).where(*self._where(t, filters)).limit(2)
        try:
            with self.engine.connect() as conn:
                rows = [dict(row) for row in conn.execute(stmt).mappings()]
        except SQLAlchemyError as exc:
            raise StoreError(str(exc)) from exc
        if len(rows) > 1:
            raise StoreError(f"Expected at most one row from {table}")
        return rows[0] if rows else None

    def upsert(self, table: str, rows: list[dict], *, on_conflict: str) -> None:
        t = self._table(table)
        if on_conflict not in t.c:
            raise StoreError(f"Unknown conflict column {table}.{on_conflict}")
        key_column = t.c[on_conflict]
        try:
            # One transaction for the whole batch.
            with self.engine.begin() as conn:
                for row in rows:
                    values = self._known_columns(t, row)
                    if on_conflict not in values:
                        raise StoreError(
                            f"Row for {table} is missing conflict key {on_conflict}"
                        )
                    key = values[on_conflict]
                    exists = conn.execute(
                        select(key_column).where(key_column == key)
                    ).first()
                    if exists:
                        conn.execute(
                            update(t).where(key_column == key).values(**values)
                        )
                    else:
                        conn.execute(insert(t).values(**values))
        except SQLAlchemyError as exc:
            raise StoreError(str(exc)) from exc

    def delete(self, table: str, *, filters: dict) -> None:
        t = self._table(table)
        if not filters:
            raise StoreError("Refusing to delete without filters")
        try:
            with self.engine.begin() as conn:
                conn.execute(delete(t).where(*self._where(t, filters)))
        except SQLAlchemyError as exc:
            raise StoreError(str(exc)) from exc
