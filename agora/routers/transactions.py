from uuid import UUID

from fastapi import APIRouter

from agora import crud, inventory
from agora.dependencies import LimitQuery, OffsetQuery, SessionDep
from agora.models import Transaction, TransactionStatus
from agora.schemas import (
    ListTransactions,
    TransactionRequestConfirm,
    TransactionResponse,
)

router = APIRouter(prefix='/transactions', tags=['transactions'])


@router.get('', response_model=ListTransactions)
async def list_transactions(
    session: SessionDep,
    ticket_id: UUID | None = None,
    status: TransactionStatus | None = None,
    limit: LimitQuery = 50,
    offset: OffsetQuery = 0,
):
    criteria = []
    if ticket_id is not None:
        criteria.append(Transaction.ticket_id == ticket_id)
    if status is not None:
        criteria.append(Transaction.status == status)

    transactions = await crud.list_records(
        session, Transaction, *criteria, limit=limit, offset=offset
    )

    return {'transactions': transactions}


@router.get('/{transaction_id}', response_model=TransactionResponse)
async def get_transaction(session: SessionDep, transaction_id: UUID):
    return await crud.get_record(session, Transaction, transaction_id)


@router.post('/{transaction_id}/confirm', response_model=TransactionResponse)
async def confirm_transaction(
    session: SessionDep,
    transaction_id: UUID,
    confirm_in: TransactionRequestConfirm,
):
    return await inventory.confirm_transaction(
        session, transaction_id, confirm_in.stellar_transaction_hash
    )


@router.post('/{transaction_id}/fail', response_model=TransactionResponse)
async def fail_transaction(session: SessionDep, transaction_id: UUID):
    return await inventory.fail_transaction(session, transaction_id)
