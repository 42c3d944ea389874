from http import HTTPStatus
from uuid import UUID

from fastapi import APIRouter

from agora import crud
from agora.dependencies import LimitQuery, OffsetQuery, SessionDep
from agora.models import User
from agora.schemas import (
    ListUsers,
    UserRequestCreate,
    UserRequestUpdate,
    UserResponse,
)

router = APIRouter(prefix='/users', tags=['users'])


@router.get('', response_model=ListUsers)
async def list_users(
    session: SessionDep, limit: LimitQuery = 50, offset: OffsetQuery = 0
):
    users = await crud.list_records(
        session, User, limit=limit, offset=offset
    )

    return {'users': users}


@router.post('', response_model=UserResponse, status_code=HTTPStatus.CREATED)
async def create_user(session: SessionDep, user_in: UserRequestCreate):
    return await crud.create_record(session, User(**user_in.model_dump()))


@router.get('/{user_id}', response_model=UserResponse)
async def get_user(session: SessionDep, user_id: UUID):
    return await crud.get_record(session, User, user_id)


@router.patch('/{user_id}', response_model=UserResponse)
async def update_user(
    session: SessionDep, user_id: UUID, user_in: UserRequestUpdate
):
    return await crud.update_record(
        session, User, user_id, user_in.model_dump(exclude_unset=True)
    )


@router.delete('/{user_id}', status_code=HTTPStatus.NO_CONTENT)
async def delete_user(session: SessionDep, user_id: UUID):
    await crud.delete_record(session, User, user_id)
