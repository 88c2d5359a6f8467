"""Invoice domain models.

Attributes are snake_case in Python. The persisted document and the HTTP
payloads use camelCase (createdAt, paymentTerms, postCode, ...), so every
model accepts either spelling on input and dumps with aliases.

Amounts are plain numbers; no currency or rounding model is applied.
"""

from datetime import datetime, timedelta, timezone
from enum import Enum

from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel

from utils.timezone import to_utc

# Upper bounds keep every derived date and amount representable.
MAX_PAYMENT_TERMS_DAYS = 36500
MAX_QUANTITY = 1e9
MAX_PRICE = 1e9
LATEST_CREATED_AT = datetime.max.replace(tzinfo=timezone.utc) - timedelta(days=MAX_PAYMENT_TERMS_DAYS)

_CAMEL_CONFIG = {
    "alias_generator": to_camel,
    "populate_by_name": True,
    "extra": "ignore",
}


class InvoiceStatus(str, Enum):
    """Invoice lifecycle status."""

    DRAFT = "draft"
    PENDING = "pending"
    PAID = "paid"


class Address(BaseModel):
    """Postal address embedded in an invoice. Owned by the invoice, no identity of its own."""

    street: str | None = Field(None, max_length=255)
    city: str | None = Field(None, max_length=100)
    post_code: str | None = Field(None, max_length=20)
    country: str | None = Field(None, max_length=100)

    model_config = _CAMEL_CONFIG


class LineItem(BaseModel):
    """One billed line. `total` is always recomputed as quantity * price."""

    name: str | None = Field(None, max_length=500)
    quantity: float | None = Field(None, ge=0, le=MAX_QUANTITY)
    price: float | None = Field(None, ge=0, le=MAX_PRICE)
    total: float | None = None

    model_config = _CAMEL_CONFIG


class InvoiceFields(BaseModel):
    """
    A candidate invoice state. Every field is optional.

    Used both for caller payloads (create/update) and as the merged input
    handed to the derivation engine.
    """

    id: str | None = None
    status: InvoiceStatus | None = None
    created_at: datetime | None = None
    payment_due: datetime | None = None
    payment_terms: int | None = Field(None, ge=0, le=MAX_PAYMENT_TERMS_DAYS)
    description: str | None = Field(None, max_length=2000)
    client_name: str | None = Field(None, max_length=255)
    client_email: str | None = Field(None, max_length=255)
    sender_address: Address | None = None
    client_address: Address | None = None
    items: list[LineItem] | None = None
    total: float | None = None

    model_config = _CAMEL_CONFIG

    @field_validator("created_at", "payment_due")
    @classmethod
    def require_aware(cls, value: datetime | None) -> datetime | None:
        """Timestamps must carry a timezone; they are normalized to UTC."""
        if value is None:
            return None
        try:
            return to_utc(value)
        except OverflowError:
            raise ValueError("Timestamp out of range")

    @field_validator("created_at")
    @classmethod
    def limit_created_at(cls, value: datetime | None) -> datetime | None:
        if value is not None and value > LATEST_CREATED_AT:
            raise ValueError(f"createdAt must not be later than {LATEST_CREATED_AT.date()}")
        return value


class Invoice(BaseModel):
    """Full invoice entity as stored, with every derived field populated."""

    id: str
    status: InvoiceStatus
    created_at: datetime
    payment_due: datetime | None = None
    payment_terms: int | None = None
    description: str | None = None
    client_name: str | None = None
    client_email: str | None = None
    sender_address: Address | None = None
    client_address: Address | None = None
    items: list[LineItem] = Field(default_factory=list)
    total: float = 0

    model_config = _CAMEL_CONFIG

    @property
    def is_paid(self) -> bool:
        """Whether invoice has been marked as paid."""
        return self.status == InvoiceStatus.PAID

    def to_document(self) -> dict:
        """JSON-ready camelCase document, as persisted and returned over HTTP."""
        return self.model_dump(mode="json", by_alias=True)
