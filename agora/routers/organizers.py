from http import HTTPStatus
from uuid import UUID

from fastapi import APIRouter

from agora import crud
from agora.dependencies import LimitQuery, OffsetQuery, SessionDep
from agora.models import Organizer
from agora.schemas import (
    ListOrganizerCards,
    ListOrganizers,
    OrganizerRequestCreate,
    OrganizerRequestUpdate,
    OrganizerResponse,
)
from agora.showcase import FEATURED_ORGANIZERS

router = APIRouter(prefix='/organizers', tags=['organizers'])


@router.get('/featured', response_model=ListOrganizerCards)
async def list_featured_organizers():
    return {'organizers': FEATURED_ORGANIZERS}


@router.get('', response_model=ListOrganizers)
async def list_organizers(
    session: SessionDep, limit: LimitQuery = 50, offset: OffsetQuery = 0
):
    organizers = await crud.list_records(
        session, Organizer, limit=limit, offset=offset
    )

    return {'organizers': organizers}


@router.post(
    '', response_model=OrganizerResponse, status_code=HTTPStatus.CREATED
)
async def create_organizer(
    session: SessionDep, organizer_in: OrganizerRequestCreate
):
    return await crud.create_record(
        session, Organizer(**organizer_in.model_dump())
    )


@router.get('/{organizer_id}', response_model=OrganizerResponse)
async def get_organizer(session: SessionDep, organizer_id: UUID):
    return await crud.get_record(session, Organizer, organizer_id)


@router.patch('/{organizer_id}', response_model=OrganizerResponse)
async def update_organizer(
    session: SessionDep,
    organizer_id: UUID,
    organizer_in: OrganizerRequestUpdate,
):
    return await crud.update_record(
        session,
        Organizer,
        organizer_id,
        organizer_in.model_dump(exclude_unset=True),
    )


@router.delete('/{organizer_id}', status_code=HTTPStatus.NO_CONTENT)
async def delete_organizer(session: SessionDep, organizer_id: UUID):
    await crud.delete_record(session, Organizer, organizer_id)
