import enum
import uuid
from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    DDL,
    DateTime,
    Enum,
    FetchedValue,
    ForeignKey,
    MetaData,
    Numeric,
    Text,
    event,
    func,
    text,
)
from sqlalchemy.ext.asyncio import AsyncAttrs
from sqlalchemy.orm import (
    DeclarativeBase,
    Mapped,
    mapped_column,
    relationship,
)

NAMING_CONVENTION = {
    'pk': '%(table_name)s_pkey',
    'uq': '%(table_name)s_%(column_0_name)s_key',
    'fk': '%(table_name)s_%(column_0_name)s_fkey',
    'ck': '%(table_name)s_%(constraint_name)s_check',
    'ix': 'ix_%(table_name)s_%(column_0_name)s',
}


class Base(DeclarativeBase, AsyncAttrs):
    metadata = MetaData(naming_convention=NAMING_CONVENTION)


table_register = Base.registry


class TicketStatus(str, enum.Enum):
    ACTIVE = 'active'
    USED = 'used'
    CANCELLED = 'cancelled'


class TransactionStatus(str, enum.Enum):
    PENDING = 'pending'
    COMPLETED = 'completed'
    FAILED = 'failed'


def _status_type(enum_class: type[enum.Enum], name: str) -> Enum:
    return Enum(
        enum_class,
        name=name,
        native_enum=False,
        create_constraint=True,
        length=16,
        validate_strings=True,
        values_callable=lambda members: [member.value for member in members],
    )


class Record:
    """Columns shared by every table.

    The primary key is generated by ``uuid_generate_v4()`` and
    ``updated_at`` is maintained by the ``update_updated_at_column``
    trigger, so both are read back from the database after each write.
    """

    __mapper_args__ = {'eager_defaults': True}

    id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True, server_default=text('uuid_generate_v4()')
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        server_onupdate=FetchedValue(),
    )


class User(Record, Base):
    __tablename__ = 'users'

    name: Mapped[str] = mapped_column(Text)
    email: Mapped[str] = mapped_column(Text, unique=True)

    tickets: Mapped[list['Ticket']] = relationship(
        back_populates='user', passive_deletes=True
    )


class Organizer(Record, Base):
    __tablename__ = 'organizers'

    name: Mapped[str] = mapped_column(Text)
    description: Mapped[str | None] = mapped_column(Text)
    contact_email: Mapped[str] = mapped_column(Text)

    events: Mapped[list['Event']] = relationship(
        back_populates='organizer', passive_deletes=True
    )


class Event(Record, Base):
    __tablename__ = 'events'

    organizer_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey('organizers.id', ondelete='CASCADE'), index=True
    )
    title: Mapped[str] = mapped_column(Text)
    description: Mapped[str | None] = mapped_column(Text)
    location: Mapped[str] = mapped_column(Text)
    start_time: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    end_time: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    organizer: Mapped[Organizer] = relationship(back_populates='events')
    ticket_tiers: Mapped[list['TicketTier']] = relationship(
        back_populates='event', passive_deletes=True
    )


class TicketTier(Record, Base):
    __tablename__ = 'ticket_tiers'

    event_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey('events.id', ondelete='CASCADE'), index=True
    )
    name: Mapped[str] = mapped_column(Text)
    description: Mapped[str | None] = mapped_column(Text)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2))
    # No CHECK ties available_quantity to total_quantity; agora.inventory
    # keeps 0 <= available_quantity <= total_quantity.
    total_quantity: Mapped[int]
    available_quantity: Mapped[int]

    event: Mapped[Event] = relationship(back_populates='ticket_tiers')
    tickets: Mapped[list['Ticket']] = relationship(
        back_populates='ticket_tier', passive_deletes=True
    )


class Ticket(Record, Base):
    __tablename__ = 'tickets'

    user_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey('users.id', ondelete='CASCADE'), index=True
    )
    ticket_tier_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey('ticket_tiers.id', ondelete='CASCADE'), index=True
    )
    status: Mapped[TicketStatus] = mapped_column(
        _status_type(TicketStatus, 'ticket_status'),
        default=TicketStatus.ACTIVE,
    )
    qr_code: Mapped[str | None] = mapped_column(Text)

    user: Mapped[User] = relationship(back_populates='tickets')
    ticket_tier: Mapped[TicketTier] = relationship(back_populates='tickets')
    transaction: Mapped['Transaction'] = relationship(
        back_populates='ticket', passive_deletes=True
    )


class Transaction(Record, Base):
    __tablename__ = 'transactions'

    ticket_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey('tickets.id', ondelete='CASCADE'), index=True
    )
    amount: Mapped[Decimal] = mapped_column(Numeric(10, 2))
    currency: Mapped[str] = mapped_column(
        Text, default='USD', server_default='USD'
    )
    status: Mapped[TransactionStatus] = mapped_column(
        _status_type(TransactionStatus, 'transaction_status'),
        default=TransactionStatus.PENDING,
    )
    stellar_transaction_hash: Mapped[str | None] = mapped_column(Text)

    ticket: Mapped[Ticket] = relationship(back_populates='transaction')


UUID_EXTENSION = DDL('CREATE EXTENSION IF NOT EXISTS "uuid-ossp"')

UPDATED_AT_FUNCTION = DDL(
    """
    CREATE OR REPLACE FUNCTION update_updated_at_column()
    RETURNS TRIGGER AS $$
    BEGIN
        NEW.updated_at = NOW();
        RETURN NEW;
    END;
    $$ LANGUAGE plpgsql
    """
)

UPDATED_AT_TRIGGER = DDL(
    'CREATE TRIGGER update_%(table)s_updated_at '
    'BEFORE UPDATE ON %(table)s '
    'FOR EACH ROW EXECUTE PROCEDURE update_updated_at_column()'
)

event.listen(
    Base.metadata,
    'before_create',
    UUID_EXTENSION.execute_if(dialect='postgresql'),
)
event.listen(
    Base.metadata,
    'before_create',
    UPDATED_AT_FUNCTION.execute_if(dialect='postgresql'),
)

for _table in Base.metadata.sorted_tables:
    if 'updated_at' in _table.c:
        event.listen(
            _table,
            'after_create',
            UPDATED_AT_TRIGGER.execute_if(dialect='postgresql'),
        )
