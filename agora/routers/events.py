from http import HTTPStatus
from uuid import UUID

from fastapi import APIRouter

from agora import crud
from agora.dependencies import LimitQuery, OffsetQuery, SessionDep
from agora.exceptions import ValidationError
from agora.models import Event
from agora.schemas import (
    EventRequestCreate,
    EventRequestUpdate,
    EventResponse,
    ListEvents,
)

router = APIRouter(prefix='/events', tags=['events'])


def check_schedule(event: Event) -> None:
    if event.end_time is not None and event.end_time < event.start_time:
        raise ValidationError('end_time must not be before start_time')


@router.get('', response_model=ListEvents)
async def list_events(
    session: SessionDep,
    organizer_id: UUID | None = None,
    limit: LimitQuery = 50,
    offset: OffsetQuery = 0,
):
    criteria = []
    if organizer_id is not None:
        criteria.append(Event.organizer_id == organizer_id)

    events = await crud.list_records(
        session,
        Event,
        *criteria,
        order_by=Event.start_time,
        limit=limit,
        offset=offset,
    )

    return {'events': events}


@router.post('', response_model=EventResponse, status_code=HTTPStatus.CREATED)
async def create_event(session: SessionDep, event_in: EventRequestCreate):
    return await crud.create_record(session, Event(**event_in.model_dump()))


@router.get('/{event_id}', response_model=EventResponse)
async def get_event(session: SessionDep, event_id: UUID):
    return await crud.get_record(session, Event, event_id)


@router.patch('/{event_id}', response_model=EventResponse)
async def update_event(
    session: SessionDep, event_id: UUID, event_in: EventRequestUpdate
):
    return await crud.update_record(
        session,
        Event,
        event_id,
        event_in.model_dump(exclude_unset=True),
        check=check_schedule,
    )


@router.delete('/{event_id}', status_code=HTTPStatus.NO_CONTENT)
async def delete_event(session: SessionDep, event_id: UUID):
    await crud.delete_record(session, Event, event_id)
