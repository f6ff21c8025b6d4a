"""Shared building blocks for the record stores."""

import asyncio
from collections.abc import Callable, Iterable
from datetime import UTC, datetime
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import ColumnElement, Table, insert, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ConflictException

Record = dict[str, Any]


class SQLRepository:
    """Base class for stores backed by a SQLAlchemy Core table."""

    table: Table
    duplicate_message = "Record already exists"

    def __init__(self, db: AsyncSession):
        """Initialize repository with database session."""
        self.db = db

    async def _insert(self, values: Record) -> Record:
        stmt = insert(self.table).values(**values).returning(self.table)
        row = await self._write(stmt)
        return dict(row)

    async def _get(self, record_id: UUID) -> Record | None:
        stmt = select(self.table).where(self.table.c.id == record_id)
        result = await self.db.execute(stmt)
        row = result.mappings().first()
        return dict(row) if row else None

    async def _first(self, *conditions: ColumnElement[bool]) -> Record | None:
        stmt = select(self.table).where(*conditions).limit(1)
        result = await self.db.execute(stmt)
        row = result.mappings().first()
        return dict(row) if row else None

    async def _select(self, *conditions: ColumnElement[bool], order_by: Any) -> list[Record]:
        stmt = select(self.table).where(*conditions).order_by(order_by)
        result = await self.db.execute(stmt)
        return [dict(row) for row in result.mappings().all()]

    async def _update(self, record_id: UUID, values: Record) -> Record | None:
        stmt = (
            update(self.table)
            .where(self.table.c.id == record_id)
            .values(**values, updated_at=datetime.now(UTC))
            .returning(self.table)
        )
        row = await self._write(stmt)
        return dict(row) if row else None

    async def _write(self, stmt: Any) -> Any:
        """Execute a write, commit it and return the first returned row."""
        try:
            result = await self.db.execute(stmt)
            row = result.mappings().first()
            await self.db.commit()
        except IntegrityError as exc:
            await self.db.rollback()
            raise self.translate_integrity_error(exc) from exc
        return row

    def translate_integrity_error(self, exc: IntegrityError) -> Exception:
        """Map a constraint violation to an application error."""
        if "unique constraint" in str(exc.orig).lower():
            return ConflictException(self.duplicate_message)
        return exc


class InMemoryTable:
    """
    Dict-backed table used by the in-memory stores.

    Mirrors the store-maintained parts of the SQL tables: generated ids,
    server defaults, ``created_at``/``updated_at`` and unique columns.
    Records are copied on the way in and out.
    """

    def __init__(
        self,
        defaults: Record | None = None,
        unique: Iterable[str] = (),
        duplicate_message: str = "Record already exists",
    ):
        self._rows: dict[UUID, Record] = {}
        self.defaults = defaults or {}
        self.unique = tuple(unique)
        self.duplicate_message = duplicate_message

    async def insert(self, values: Record) -> Record:
        await asyncio.sleep(0)
        now = datetime.now(UTC)
        row = {**self.defaults, **values, "id": uuid4(), "created_at": now, "updated_at": now}
        self._check_unique(row)
        self._rows[row["id"]] = row
        return dict(row)

    async def get(self, record_id: UUID) -> Record | None:
        await asyncio.sleep(0)
        row = self._rows.get(record_id)
        return dict(row) if row else None

    async def first(self, predicate: Callable[[Record], bool]) -> Record | None:
        await asyncio.sleep(0)
        for row in self._rows.values():
            if predicate(row):
                return dict(row)
        return None

    async def select(
        self,
        predicate: Callable[[Record], bool],
        key: Callable[[Record], Any],
        reverse: bool = False,
    ) -> list[Record]:
        await asyncio.sleep(0)
        rows = [dict(row) for row in self._rows.values() if predicate(row)]
        return sorted(rows, key=key, reverse=reverse)

    async def update(self, record_id: UUID, values: Record) -> Record | None:
        await asyncio.sleep(0)
        row = self._rows.get(record_id)
        if row is None:
            return None
        candidate = {**row, **values, "updated_at": datetime.now(UTC)}
        self._check_unique(candidate)
        self._rows[record_id] = candidate
        return dict(candidate)

    def _check_unique(self, candidate: Record) -> None:
        for column in self.unique:
            for row in self._rows.values():
                if row["id"] != candidate["id"] and row[column] == candidate[column]:
                    raise ConflictException(self.duplicate_message)

    def __len__(self) -> int:
        return len(self._rows)
