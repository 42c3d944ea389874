"""Ticket inventory and payment lifecycle.

``ticket_tiers.available_quantity`` is only ever changed by single
conditional UPDATE statements, so concurrent purchases cannot oversell a
tier and released tickets cannot push it above ``total_quantity``. Status
changes are conditional on the current status for the same reason: a
request that loses a race gets a :class:`ConflictError`.

Operations touching both a ticket and its transaction lock the ticket row
first.
"""

import logging
from typing import Any
from uuid import UUID

from sqlalchemy import and_, delete, exists, select, update
from sqlalchemy.exc import IntegrityError

from agora.crud import not_found
from agora.database import AsyncSession
from agora.exceptions import (
    ConflictError,
    ValidationError,
    translate_integrity_error,
)
from agora.models import (
    Ticket,
    TicketStatus,
    TicketTier,
    Transaction,
    TransactionStatus,
)
from agora.schemas import MAX_QUANTITY, TicketRequestPurchase

logger = logging.getLogger(__name__)

POPULATE_EXISTING = {'populate_existing': True}


async def _update_returning(session: AsyncSession, stmt) -> Any:
    return await session.scalar(
        stmt.returning(stmt.entity_description['entity']),
        execution_options=POPULATE_EXISTING,
    )


async def _reserve(
    session: AsyncSession, ticket_tier_id: UUID, quantity: int
) -> TicketTier | None:
    return await _update_returning(
        session,
        update(TicketTier)
        .where(
            and_(
                TicketTier.id == ticket_tier_id,
                TicketTier.available_quantity >= quantity,
            )
        )
        .values(available_quantity=TicketTier.available_quantity - quantity),
    )


async def _release(
    session: AsyncSession, ticket_tier_id: UUID, quantity: int = 1
) -> TicketTier | None:
    return await _update_returning(
        session,
        update(TicketTier)
        .where(
            and_(
                TicketTier.id == ticket_tier_id,
                TicketTier.available_quantity + quantity
                <= TicketTier.total_quantity,
            )
        )
        .values(available_quantity=TicketTier.available_quantity + quantity),
    )


async def _transition(
    session: AsyncSession,
    model: type[Ticket] | type[Transaction],
    record_id: UUID,
    current: TicketStatus | TransactionStatus,
    target: TicketStatus | TransactionStatus,
    *criteria: Any,
    conflict_detail: str | None = None,
    **values: Any,
):
    record = await _update_returning(
        session,
        update(model)
        .where(model.id == record_id, model.status == current, *criteria)
        .values(status=target, **values),
    )

    if record is None:
        status = await session.scalar(
            select(model.status).where(model.id == record_id)
        )
        if status is None:
            raise not_found(model)
        if status != current or conflict_detail is None:
            conflict_detail = f'{model.__name__} is not {current.value}'
        raise ConflictError(conflict_detail)

    logger.info(
        '%s %s moved from %s to %s',
        model.__name__,
        record_id,
        current.value,
        target.value,
    )
    return record


async def purchase_tickets(
    session: AsyncSession, purchase: TicketRequestPurchase
) -> list[Ticket]:
    """Reserve ``purchase.quantity`` tickets and open a pending payment each.

    The whole purchase is one database transaction: if the buyer does not
    exist the reserved inventory is rolled back with the tickets.
    """
    try:
        async with session.begin():
            tier_id = await session.scalar(
                select(TicketTier.id).where(
                    TicketTier.id == purchase.ticket_tier_id
                )
            )
            if tier_id is None:
                raise not_found(TicketTier)

            tier = await _reserve(session, tier_id, purchase.quantity)
            if tier is None:
                logger.info(
                    'Ticket tier %s cannot supply %d ticket(s)',
                    tier_id,
                    purchase.quantity,
                )
                raise ConflictError('Not enough tickets available')

            tickets = [
                Ticket(
                    user_id=purchase.user_id,
                    ticket_tier_id=tier.id,
                    status=TicketStatus.ACTIVE,
                    transaction=Transaction(
                        amount=tier.price,
                        currency=purchase.currency,
                        status=TransactionStatus.PENDING,
                    ),
                )
                for _ in range(purchase.quantity)
            ]
            session.add_all(tickets)
    except IntegrityError as exc:
        raise translate_integrity_error(exc) from exc

    logger.info(
        'User %s purchased %d ticket(s) from tier %s, %d left',
        purchase.user_id,
        purchase.quantity,
        tier.id,
        tier.available_quantity,
    )
    return tickets


async def cancel_ticket(session: AsyncSession, ticket_id: UUID) -> Ticket:
    async with session.begin():
        ticket = await _transition(
            session,
            Ticket,
            ticket_id,
            TicketStatus.ACTIVE,
            TicketStatus.CANCELLED,
        )
        await _release(session, ticket.ticket_tier_id)
        await session.execute(
            update(Transaction)
            .where(
                Transaction.ticket_id == ticket.id,
                Transaction.status == TransactionStatus.PENDING,
            )
            .values(status=TransactionStatus.FAILED)
        )

    return ticket


async def use_ticket(session: AsyncSession, ticket_id: UUID) -> Ticket:
    payment_completed = (
        exists()
        .where(
            Transaction.ticket_id == Ticket.id,
            Transaction.status == TransactionStatus.COMPLETED,
        )
        .correlate(Ticket)
    )

    async with session.begin():
        ticket = await _transition(
            session,
            Ticket,
            ticket_id,
            TicketStatus.ACTIVE,
            TicketStatus.USED,
            payment_completed,
            conflict_detail='Ticket payment is not completed',
        )

    return ticket


async def delete_ticket(session: AsyncSession, ticket_id: UUID) -> None:
    async with session.begin():
        result = await session.execute(
            delete(Ticket)
            .where(Ticket.id == ticket_id)
            .returning(Ticket.status, Ticket.ticket_tier_id)
        )
        deleted = result.one_or_none()
        if deleted is None:
            raise not_found(Ticket)

        if deleted.status == TicketStatus.ACTIVE:
            await _release(session, deleted.ticket_tier_id)


async def confirm_transaction(
    session: AsyncSession, transaction_id: UUID, stellar_transaction_hash: str
) -> Transaction:
    async with session.begin():
        transaction = await _transition(
            session,
            Transaction,
            transaction_id,
            TransactionStatus.PENDING,
            TransactionStatus.COMPLETED,
            stellar_transaction_hash=stellar_transaction_hash,
        )

    return transaction


async def fail_transaction(
    session: AsyncSession, transaction_id: UUID
) -> Transaction:
    """Mark a pending payment failed and give its ticket back to the tier."""
    async with session.begin():
        ticket_id = await session.scalar(
            select(Transaction.ticket_id).where(
                Transaction.id == transaction_id
            )
        )
        if ticket_id is None:
            raise not_found(Transaction)
        await session.execute(
            select(Ticket.id).where(Ticket.id == ticket_id).with_for_update()
        )

        transaction = await _transition(
            session,
            Transaction,
            transaction_id,
            TransactionStatus.PENDING,
            TransactionStatus.FAILED,
        )
        ticket = await _update_returning(
            session,
            update(Ticket)
            .where(
                Ticket.id == ticket_id,
                Ticket.status == TicketStatus.ACTIVE,
            )
            .values(status=TicketStatus.CANCELLED),
        )
        if ticket is not None:
            await _release(session, ticket.ticket_tier_id)
            logger.info(
                'Ticket %s cancelled after failed payment %s',
                ticket.id,
                transaction.id,
            )

    return transaction


async def restock_tier(
    session: AsyncSession, ticket_tier_id: UUID, quantity: int
) -> TicketTier:
    async with session.begin():
        tier = await _update_returning(
            session,
            update(TicketTier)
            .where(
                TicketTier.id == ticket_tier_id,
                TicketTier.total_quantity <= MAX_QUANTITY - quantity,
                TicketTier.available_quantity <= MAX_QUANTITY - quantity,
            )
            .values(
                total_quantity=TicketTier.total_quantity + quantity,
                available_quantity=TicketTier.available_quantity + quantity,
            ),
        )
        if tier is None:
            tier_id = await session.scalar(
                select(TicketTier.id).where(TicketTier.id == ticket_tier_id)
            )
            if tier_id is None:
                raise not_found(TicketTier)
            raise ValidationError(
                'Restock exceeds the maximum ticket tier capacity'
            )

    logger.info('Ticket tier %s restocked by %d', ticket_tier_id, quantity)
    return tier
