"""Transactional get/list/create/update/delete helpers shared by the routers.

Every helper runs in its own ``session.begin()`` block and raises
:mod:`agora.exceptions` errors instead of leaking SQLAlchemy ones.
"""

from collections.abc import Callable, Sequence
from typing import Any, TypeVar
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError

from agora.database import AsyncSession
from agora.exceptions import NotFoundError, translate_integrity_error
from agora.models import (
    Base,
    Event,
    Organizer,
    Ticket,
    TicketTier,
    Transaction,
    User,
)

ModelT = TypeVar('ModelT', bound=Base)

LABELS = {
    User: 'User',
    Organizer: 'Organizer',
    Event: 'Event',
    TicketTier: 'Ticket tier',
    Ticket: 'Ticket',
    Transaction: 'Transaction',
}


def not_found(model: type[Base]) -> NotFoundError:
    return NotFoundError(f'{LABELS[model]} was not found')


async def get_record(
    session: AsyncSession, model: type[ModelT], record_id: UUID
) -> ModelT:
    async with session.begin():
        record = await session.scalar(
            select(model).where(model.id == record_id)
        )

    if record is None:
        raise not_found(model)

    return record


async def list_records(
    session: AsyncSession,
    model: type[ModelT],
    *criteria: Any,
    order_by: Any = None,
    limit: int = 50,
    offset: int = 0,
) -> Sequence[ModelT]:
    stmt = select(model).where(*criteria)
    stmt = stmt.order_by(
        order_by if order_by is not None else model.created_at, model.id
    )

    async with session.begin():
        records = await session.scalars(stmt.limit(limit).offset(offset))

    return records.all()


async def create_record(session: AsyncSession, record: ModelT) -> ModelT:
    try:
        async with session.begin():
            session.add(record)
    except IntegrityError as exc:
        raise translate_integrity_error(exc) from exc

    return record


async def update_record(
    session: AsyncSession,
    model: type[ModelT],
    record_id: UUID,
    values: dict[str, Any],
    check: Callable[[ModelT], None] | None = None,
) -> ModelT:
    """Apply ``values`` to a locked row; ``check`` may veto the result."""
    try:
        async with session.begin():
            record = await session.scalar(
                select(model)
                .where(model.id == record_id)
                .with_for_update()
                .execution_options(populate_existing=True)
            )
            if record is None:
                raise not_found(model)

            for field, value in values.items():
                setattr(record, field, value)

            if check is not None:
                check(record)
    except IntegrityError as exc:
        raise translate_integrity_error(exc) from exc

    return record


async def delete_record(
    session: AsyncSession, model: type[ModelT], record_id: UUID
) -> None:
    async with session.begin():
        result = await session.execute(
            delete(model).where(model.id == record_id)
        )

    if result.rowcount == 0:
        raise not_found(model)
