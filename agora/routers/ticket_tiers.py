from http import HTTPStatus
from uuid import UUID

from fastapi import APIRouter

from agora import crud, inventory
from agora.dependencies import LimitQuery, OffsetQuery, SessionDep
from agora.models import TicketTier
from agora.schemas import (
    ListTicketTiers,
    TicketTierRequestCreate,
    TicketTierRequestRestock,
    TicketTierRequestUpdate,
    TicketTierResponse,
)

router = APIRouter(prefix='/ticket-tiers', tags=['ticket tiers'])


@router.get('', response_model=ListTicketTiers)
async def list_ticket_tiers(
    session: SessionDep,
    event_id: UUID | None = None,
    limit: LimitQuery = 50,
    offset: OffsetQuery = 0,
):
    criteria = []
    if event_id is not None:
        criteria.append(TicketTier.event_id == event_id)

    ticket_tiers = await crud.list_records(
        session,
        TicketTier,
        *criteria,
        order_by=TicketTier.price,
        limit=limit,
        offset=offset,
    )

    return {'ticket_tiers': ticket_tiers}


@router.post(
    '', response_model=TicketTierResponse, status_code=HTTPStatus.CREATED
)
async def create_ticket_tier(
    session: SessionDep, ticket_tier_in: TicketTierRequestCreate
):
    return await crud.create_record(
        session, TicketTier(**ticket_tier_in.model_dump())
    )


@router.get('/{ticket_tier_id}', response_model=TicketTierResponse)
async def get_ticket_tier(session: SessionDep, ticket_tier_id: UUID):
    return await crud.get_record(session, TicketTier, ticket_tier_id)


@router.patch('/{ticket_tier_id}', response_model=TicketTierResponse)
async def update_ticket_tier(
    session: SessionDep,
    ticket_tier_id: UUID,
    ticket_tier_in: TicketTierRequestUpdate,
):
    return await crud.update_record(
        session,
        TicketTier,
        ticket_tier_id,
        ticket_tier_in.model_dump(exclude_unset=True),
    )


@router.post('/{ticket_tier_id}/restock', response_model=TicketTierResponse)
async def restock_ticket_tier(
    session: SessionDep,
    ticket_tier_id: UUID,
    restock_in: TicketTierRequestRestock,
):
    return await inventory.restock_tier(
        session, ticket_tier_id, restock_in.quantity
    )


@router.delete('/{ticket_tier_id}', status_code=HTTPStatus.NO_CONTENT)
async def delete_ticket_tier(session: SessionDep, ticket_tier_id: UUID):
    await crud.delete_record(session, TicketTier, ticket_tier_id)
