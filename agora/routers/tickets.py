from http import HTTPStatus
from uuid import UUID

from fastapi import APIRouter

from agora import crud, inventory
from agora.dependencies import LimitQuery, OffsetQuery, SessionDep
from agora.models import Ticket
from agora.schemas import (
    ListTickets,
    PurchaseResponse,
    TicketRequestPurchase,
    TicketResponse,
)

router = APIRouter(prefix='/tickets', tags=['tickets'])


@router.get('', response_model=ListTickets)
async def list_tickets(
    session: SessionDep,
    user_id: UUID | None = None,
    ticket_tier_id: UUID | None = None,
    limit: LimitQuery = 50,
    offset: OffsetQuery = 0,
):
    criteria = []
    if user_id is not None:
        criteria.append(Ticket.user_id == user_id)
    if ticket_tier_id is not None:
        criteria.append(Ticket.ticket_tier_id == ticket_tier_id)

    tickets = await crud.list_records(
        session, Ticket, *criteria, limit=limit, offset=offset
    )

    return {'tickets': tickets}


@router.post(
    '/purchase',
    response_model=PurchaseResponse,
    status_code=HTTPStatus.CREATED,
)
async def purchase_tickets(
    session: SessionDep, purchase_in: TicketRequestPurchase
):
    tickets = await inventory.purchase_tickets(session, purchase_in)

    return {'tickets': tickets}


@router.get('/{ticket_id}', response_model=TicketResponse)
async def get_ticket(session: SessionDep, ticket_id: UUID):
    return await crud.get_record(session, Ticket, ticket_id)


@router.post('/{ticket_id}/cancel', response_model=TicketResponse)
async def cancel_ticket(session: SessionDep, ticket_id: UUID):
    return await inventory.cancel_ticket(session, ticket_id)


@router.post('/{ticket_id}/use', response_model=TicketResponse)
async def use_ticket(session: SessionDep, ticket_id: UUID):
    return await inventory.use_ticket(session, ticket_id)


@router.delete('/{ticket_id}', status_code=HTTPStatus.NO_CONTENT)
async def delete_ticket(session: SessionDep, ticket_id: UUID):
    await inventory.delete_ticket(session, ticket_id)
