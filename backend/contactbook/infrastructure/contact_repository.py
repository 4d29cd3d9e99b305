"""SQL Contact Store — ContactStore implementation over an AsyncSession.

Invariants:
    - Every statement is filtered by user_id (row-level ownership)
    - query() orders by created_at descending
    - update()/delete() touching zero rows raise PersistenceError ("no such record")
    - update() never writes id, user_id or created_at
    - Every SQLAlchemyError is rolled back and mapped to PersistenceError

Design Decisions:
    - Commit per call: each mutation is an independent round trip (no batching)
    - Bulk UPDATE/DELETE statements over load-then-mutate: one query, and rowcount
      doubles as the existence check
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy import delete, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from contactbook.core.domain_types import (
    ContactFields, ContactId, ContactRecord, UserId,
)
from contactbook.core.errors import ErrorContext, PersistenceError
from contactbook.models.contact import Contact

logger = logging.getLogger(__name__)


def to_record(row: Contact) -> ContactRecord:
    """ORM row → immutable domain record."""
    return ContactRecord(
        id=ContactId(row.id),
        owner=UserId(row.user_id),
        name=row.name,
        email=row.email,
        phone=row.phone,
        company=row.company,
        notes=row.notes,
        created_at=row.created_at,
    )


class SqlContactStore:
    """Contact persistence backed by the contacts table."""

    def __init__(self, db: AsyncSession):
        self.db = db

    @asynccontextmanager
    async def _guard(
        self, operation: str, contact_id: ContactId | None = None,
    ) -> AsyncIterator[None]:
        try:
            yield
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(
                f"Contact store {operation} failed: {e}",
                extra={
                    "operation": operation,
                    "contact_id": str(contact_id) if contact_id else None,
                },
            )
            raise PersistenceError(
                "Database operation failed", operation,
                ErrorContext(contact_id=str(contact_id) if contact_id else None),
            )

    async def query(self, owner_id: UserId) -> list[ContactRecord]:
        async with self._guard("list"):
            result = await self.db.execute(
                select(Contact)
                .where(Contact.user_id == owner_id)
                .order_by(Contact.created_at.desc())
                .execution_options(populate_existing=True),
            )
            return [to_record(row) for row in result.scalars().all()]

    async def insert(
        self, owner_id: UserId, fields: ContactFields,
    ) -> ContactRecord:
        async with self._guard("create"):
            row = Contact(user_id=owner_id, **fields.as_dict())
            self.db.add(row)
            await self.db.commit()
            await self.db.refresh(row)
            return to_record(row)

    async def update(
        self, owner_id: UserId, contact_id: ContactId, fields: ContactFields,
    ) -> None:
        async with self._guard("update", contact_id):
            result = await self.db.execute(
                update(Contact)
                .where(Contact.id == contact_id, Contact.user_id == owner_id)
                .values(**fields.as_dict()),
            )
            await self.db.commit()
        if result.rowcount == 0:
            raise _no_such_record("update", contact_id)

    async def delete(self, owner_id: UserId, contact_id: ContactId) -> None:
        async with self._guard("delete", contact_id):
            result = await self.db.execute(
                delete(Contact)
                .where(Contact.id == contact_id, Contact.user_id == owner_id),
            )
            await self.db.commit()
        if result.rowcount == 0:
            raise _no_such_record("delete", contact_id)


def _no_such_record(operation: str, contact_id: ContactId) -> PersistenceError:
    return PersistenceError(
        "no such record", operation, ErrorContext(contact_id=str(contact_id)),
    )
