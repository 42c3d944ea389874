from http import HTTPStatus
from uuid import uuid4

import pytest
from httpx import AsyncClient

from agora.models import Ticket, TicketTier

pytestmark = pytest.mark.anyio


async def test_confirm_transaction_success(
    async_client: AsyncClient, purchased_ticket: Ticket
):
    transaction_id = purchased_ticket.transaction.id

    response = await async_client.post(
        f'/transactions/{transaction_id}/confirm',
        json={'stellar_transaction_hash': 'f00dfeed'},
    )

    assert response.status_code == HTTPStatus.OK
    body = response.json()
    assert body['status'] == 'completed'
    assert body['stellar_transaction_hash'] == 'f00dfeed'
    assert body['ticket_id'] == str(purchased_ticket.id)


async def test_confirm_transaction_requires_hash(
    async_client: AsyncClient, purchased_ticket: Ticket
):
    response = await async_client.post(
        f'/transactions/{purchased_ticket.transaction.id}/confirm',
        json={'stellar_transaction_hash': ''},
    )

    assert response.status_code == HTTPStatus.UNPROCESSABLE_ENTITY


async def test_confirm_transaction_twice(
    async_client: AsyncClient, purchased_ticket: Ticket
):
    transaction_id = purchased_ticket.transaction.id
    await async_client.post(
        f'/transactions/{transaction_id}/confirm',
        json={'stellar_transaction_hash': 'f00dfeed'},
    )

    response = await async_client.post(
        f'/transactions/{transaction_id}/confirm',
        json={'stellar_transaction_hash': 'beefcafe'},
    )

    assert response.status_code == HTTPStatus.CONFLICT
    assert response.json()['detail'] == 'Transaction is not pending'


async def test_confirm_transaction_when_not_found(async_client: AsyncClient):
    response = await async_client.post(
        f'/transactions/{uuid4()}/confirm',
        json={'stellar_transaction_hash': 'f00dfeed'},
    )

    assert response.status_code == HTTPStatus.NOT_FOUND
    assert response.json()['detail'] == 'Transaction was not found'


async def test_fail_transaction_cancels_ticket(
    async_client: AsyncClient,
    ticket_tier: TicketTier,
    purchased_ticket: Ticket,
    fetch,
):
    ticket_id, tier_id = purchased_ticket.id, ticket_tier.id

    response = await async_client.post(
        f'/transactions/{purchased_ticket.transaction.id}/fail'
    )

    assert response.status_code == HTTPStatus.OK
    assert response.json()['status'] == 'failed'
    assert (await fetch(Ticket, ticket_id)).status == 'cancelled'
    assert (await fetch(TicketTier, tier_id)).available_quantity == 3


async def test_fail_completed_transaction(
    async_client: AsyncClient, purchased_ticket: Ticket, fetch
):
    ticket_id = purchased_ticket.id
    transaction_id = purchased_ticket.transaction.id
    await async_client.post(
        f'/transactions/{transaction_id}/confirm',
        json={'stellar_transaction_hash': 'f00dfeed'},
    )

    response = await async_client.post(f'/transactions/{transaction_id}/fail')

    assert response.status_code == HTTPStatus.CONFLICT
    assert (await fetch(Ticket, ticket_id)).status == 'active'


async def test_cancelled_ticket_keeps_completed_transaction(
    async_client: AsyncClient, purchased_ticket: Ticket
):
    transaction_id = purchased_ticket.transaction.id
    await async_client.post(
        f'/transactions/{transaction_id}/confirm',
        json={'stellar_transaction_hash': 'f00dfeed'},
    )

    await async_client.post(f'/tickets/{purchased_ticket.id}/cancel')
    response = await async_client.get(f'/transactions/{transaction_id}')

    assert response.status_code == HTTPStatus.OK
    assert response.json()['status'] == 'completed'


async def test_list_transactions_by_status(
    async_client: AsyncClient, purchased_ticket: Ticket
):
    response = await async_client.get(
        '/transactions', params={'status': 'pending'}
    )

    assert response.status_code == HTTPStatus.OK
    assert [item['id'] for item in response.json()['transactions']] == [
        str(purchased_ticket.transaction.id)
    ]

    response = await async_client.get(
        '/transactions', params={'status': 'completed'}
    )

    assert response.json()['transactions'] == []

    response = await async_client.get(
        '/transactions', params={'status': 'refunded'}
    )

    assert response.status_code == HTTPStatus.UNPROCESSABLE_ENTITY
