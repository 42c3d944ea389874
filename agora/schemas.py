from datetime import datetime
from decimal import Decimal
from typing import Annotated
from uuid import UUID

from pydantic import (
    AwareDatetime,
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    field_validator,
    model_validator,
)

from agora.models import TicketStatus, TransactionStatus

Money = Annotated[Decimal, Field(ge=0, max_digits=10, decimal_places=2)]
Currency = Annotated[str, Field(pattern=r'^[A-Z]{3}$')]
NonEmptyStr = Annotated[str, Field(min_length=1)]
# tier quantities are stored in INTEGER columns
MAX_QUANTITY = 2**31 - 1
Quantity = Annotated[int, Field(ge=0, le=MAX_QUANTITY)]


class RecordResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    created_at: datetime
    updated_at: datetime


class UserBase(BaseModel):
    name: NonEmptyStr
    email: EmailStr


class UserRequestCreate(UserBase):
    pass


class UserRequestUpdate(BaseModel):
    name: NonEmptyStr | None = None
    email: EmailStr | None = None


class UserResponse(UserBase, RecordResponse):
    pass


class ListUsers(BaseModel):
    users: list[UserResponse]


class OrganizerBase(BaseModel):
    name: NonEmptyStr
    description: str | None = None
    contact_email: EmailStr


class OrganizerRequestCreate(OrganizerBase):
    pass


class OrganizerRequestUpdate(BaseModel):
    name: NonEmptyStr | None = None
    description: str | None = None
    contact_email: EmailStr | None = None


class OrganizerResponse(OrganizerBase, RecordResponse):
    pass


class ListOrganizers(BaseModel):
    organizers: list[OrganizerResponse]


class OrganizerCard(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    description: str
    image: str


class ListOrganizerCards(BaseModel):
    organizers: list[OrganizerCard]


class EventBase(BaseModel):
    title: NonEmptyStr
    description: str | None = None
    location: NonEmptyStr
    start_time: AwareDatetime
    end_time: AwareDatetime | None = None


class EventRequestCreate(EventBase):
    organizer_id: UUID

    @model_validator(mode='after')
    def check_schedule(self):
        if self.end_time is not None and self.end_time < self.start_time:
            raise ValueError('end_time must not be before start_time')
        return self


class EventRequestUpdate(BaseModel):
    title: NonEmptyStr | None = None
    description: str | None = None
    location: NonEmptyStr | None = None
    start_time: AwareDatetime | None = None
    end_time: AwareDatetime | None = None

    @field_validator('title', 'location', 'start_time')
    @classmethod
    def reject_null(cls, value):
        if value is None:
            raise ValueError('must not be null')
        return value


class EventResponse(EventBase, RecordResponse):
    organizer_id: UUID


class ListEvents(BaseModel):
    events: list[EventResponse]


class TicketTierBase(BaseModel):
    name: NonEmptyStr
    description: str | None = None
    price: Money


class TicketTierRequestCreate(TicketTierBase):
    event_id: UUID
    total_quantity: Quantity
    available_quantity: Quantity | None = None

    @model_validator(mode='after')
    def check_quantities(self):
        if self.available_quantity is None:
            self.available_quantity = self.total_quantity
        elif self.available_quantity > self.total_quantity:
            raise ValueError(
                'available_quantity must not exceed total_quantity'
            )
        return self


class TicketTierRequestUpdate(BaseModel):
    name: NonEmptyStr | None = None
    description: str | None = None
    price: Money | None = None


class TicketTierRequestRestock(BaseModel):
    quantity: int = Field(ge=1, le=MAX_QUANTITY)


class TicketTierResponse(TicketTierBase, RecordResponse):
    event_id: UUID
    total_quantity: int
    available_quantity: int


class ListTicketTiers(BaseModel):
    ticket_tiers: list[TicketTierResponse]


class TransactionResponse(RecordResponse):
    ticket_id: UUID
    amount: Decimal
    currency: str
    status: TransactionStatus
    stellar_transaction_hash: str | None


class TransactionRequestConfirm(BaseModel):
    stellar_transaction_hash: NonEmptyStr


class ListTransactions(BaseModel):
    transactions: list[TransactionResponse]


class TicketResponse(RecordResponse):
    user_id: UUID
    ticket_tier_id: UUID
    status: TicketStatus
    qr_code: str | None


class TicketPurchased(TicketResponse):
    transaction: TransactionResponse


class TicketRequestPurchase(BaseModel):
    user_id: UUID
    ticket_tier_id: UUID
    quantity: int = Field(default=1, ge=1, le=20)
    currency: Currency = 'USD'


class PurchaseResponse(BaseModel):
    tickets: list[TicketPurchased]


class ListTickets(BaseModel):
    tickets: list[TicketResponse]
