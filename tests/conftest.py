import os
import typing
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from testcontainers.postgres import PostgresContainer

from agora.app import app
from agora.database import get_session
from agora.inventory import purchase_tickets
from agora.models import (
    Event,
    Organizer,
    Ticket,
    TicketTier,
    User,
    table_register,
)
from agora.schemas import TicketRequestPurchase


@pytest.fixture(scope='session')
def anyio_backend() -> str:
    return 'asyncio'


@pytest.fixture(scope='session')
def database_url(
    anyio_backend: typing.Literal['asyncio'],
) -> typing.Generator[str, None, None]:
    if url := os.environ.get('TEST_DATABASE_URL'):
        yield url
        return

    with PostgresContainer('postgres:16', driver='asyncpg') as postgres:
        yield postgres.get_connection_url()


@pytest.fixture
async def async_engine(
    database_url: str,
) -> typing.AsyncGenerator[AsyncEngine, None]:
    async_engine = create_async_engine(database_url, pool_pre_ping=True)

    async with async_engine.begin() as conn:
        await conn.run_sync(table_register.metadata.drop_all)
        await conn.run_sync(table_register.metadata.create_all)

    yield async_engine

    await async_engine.dispose()


@pytest.fixture
def session_factory(
    async_engine: AsyncEngine,
) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        autoflush=False,
        bind=async_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@pytest.fixture
async def async_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> typing.AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture
async def async_client(
    async_session: AsyncSession,
) -> typing.AsyncGenerator[AsyncClient, None]:
    app.dependency_overrides[get_session] = lambda: async_session
    _transport = ASGITransport(app=app)

    async with AsyncClient(
        transport=_transport, base_url='http://test', follow_redirects=True
    ) as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
async def user(async_session: AsyncSession) -> User:
    new_user = User(name='Ada Obi', email='ada@example.com')

    async with async_session.begin():
        async_session.add(new_user)

    return new_user


@pytest.fixture
async def organizer(async_session: AsyncSession) -> Organizer:
    new_organizer = Organizer(
        name='Stellar West Africa',
        description='Community meetups',
        contact_email='hello@stellarwestafrica.org',
    )

    async with async_session.begin():
        async_session.add(new_organizer)

    return new_organizer


@pytest.fixture
async def event(async_session: AsyncSession, organizer: Organizer) -> Event:
    start_time = datetime(2026, 11, 20, 18, 0, tzinfo=timezone.utc)
    new_event = Event(
        organizer_id=organizer.id,
        title='Lagos Builders Night',
        location='Lagos',
        start_time=start_time,
        end_time=start_time + timedelta(hours=4),
    )

    async with async_session.begin():
        async_session.add(new_event)

    return new_event


@pytest.fixture
async def ticket_tier(async_session: AsyncSession, event: Event) -> TicketTier:
    new_tier = TicketTier(
        event_id=event.id,
        name='General',
        price=Decimal('25.00'),
        total_quantity=3,
        available_quantity=3,
    )

    async with async_session.begin():
        async_session.add(new_tier)

    return new_tier


@pytest.fixture
def fetch(async_session: AsyncSession):
    """Re-read a row from the database, bypassing the identity map."""

    async def _fetch(model, record_id):
        async with async_session.begin():
            return await async_session.scalar(
                select(model)
                .where(model.id == record_id)
                .execution_options(populate_existing=True)
            )

    return _fetch


@pytest.fixture
async def purchased_ticket(
    async_session: AsyncSession, user: User, ticket_tier: TicketTier
) -> Ticket:
    purchase = TicketRequestPurchase(
        user_id=user.id, ticket_tier_id=ticket_tier.id
    )
    (ticket,) = await purchase_tickets(async_session, purchase)

    return ticket
