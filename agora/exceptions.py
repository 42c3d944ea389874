import logging
from http import HTTPStatus

from sqlalchemy.exc import IntegrityError

logger = logging.getLogger(__name__)

UNIQUE_VIOLATION = '23505'
FOREIGN_KEY_VIOLATION = '23503'
NOT_NULL_VIOLATION = '23502'
CHECK_VIOLATION = '23514'

CONSTRAINT_MESSAGES = {
    'users_email_key': 'Email is already registered',
    'events_organizer_id_fkey': 'Organizer was not found',
    'ticket_tiers_event_id_fkey': 'Event was not found',
    'tickets_user_id_fkey': 'User was not found',
    'tickets_ticket_tier_id_fkey': 'Ticket tier was not found',
    'transactions_ticket_id_fkey': 'Ticket was not found',
}


class AgoraError(Exception):
    status_code = HTTPStatus.INTERNAL_SERVER_ERROR
    code = 'INTERNAL_SERVER_ERROR'

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class ValidationError(AgoraError):
    status_code = HTTPStatus.BAD_REQUEST
    code = 'VALIDATION_ERROR'


class NotFoundError(AgoraError):
    status_code = HTTPStatus.NOT_FOUND
    code = 'NOT_FOUND'


class ConflictError(AgoraError):
    status_code = HTTPStatus.CONFLICT
    code = 'CONFLICT'


class DatabaseError(AgoraError):
    code = 'DATABASE_ERROR'

    def __init__(self, detail: str = 'A database error occurred'):
        super().__init__(detail)


def translate_integrity_error(exc: IntegrityError) -> AgoraError:
    """Map a database integrity failure onto the matching domain error."""
    sqlstate = getattr(exc.orig, 'sqlstate', None)
    # only the asyncpg exception wrapped by the adapter names the constraint
    driver_error = getattr(exc.orig, '__cause__', None)
    constraint = getattr(driver_error, 'constraint_name', None)
    message = CONSTRAINT_MESSAGES.get(constraint)

    if sqlstate == UNIQUE_VIOLATION:
        return ConflictError(message or 'Record already exists')
    if sqlstate == FOREIGN_KEY_VIOLATION:
        return NotFoundError(message or 'Referenced record was not found')
    if sqlstate in {NOT_NULL_VIOLATION, CHECK_VIOLATION}:
        return ValidationError(message or 'Record violates a constraint')

    logger.error('Unhandled integrity error: %s', exc)
    return DatabaseError()
