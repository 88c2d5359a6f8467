"""
Invoice derivation engine.

Turns a merged candidate invoice into the invoice that gets stored:
assigns the id, recomputes line totals and the invoice total, derives the
payment due date and enforces the fields required once an invoice leaves
draft. Every call recomputes everything from the candidate; nothing is
tracked between calls.

The engine is pure. It performs no I/O and reads no module state; the
clock and the id generator are injected so callers and tests control them.
"""

import secrets
import string
from dataclasses import dataclass
from datetime import timedelta
from typing import Callable

from core.models import Address, Invoice, InvoiceFields, InvoiceStatus, LineItem
from utils.timezone import Clock, now_utc

# Statuses that must carry complete billing data.
STRICT_STATUSES = frozenset({InvoiceStatus.PENDING, InvoiceStatus.PAID})

# Wire names, in the order they are reported.
REQUIRED_FIELDS = (
    "description",
    "paymentTerms",
    "clientName",
    "clientEmail",
    "senderAddress.street",
    "clientAddress.street",
    "items",
    "total",
)


@dataclass(frozen=True)
class MissingFields:
    """Derivation outcome for a pending/paid invoice that lacks required data."""

    status: InvoiceStatus
    fields: tuple[str, ...]


def generate_invoice_id(letters: int = 2, digits: int = 4) -> str:
    """
    Random invoice id: uppercase letters followed by digits.

    The default shape gives ids like "RT3080". Uniqueness against stored
    invoices is checked by the caller.
    """
    prefix = "".join(secrets.choice(string.ascii_uppercase) for _ in range(letters))
    number = "".join(secrets.choice(string.digits) for _ in range(digits))
    return f"{prefix}{number}"


def line_total(item: LineItem) -> float:
    """quantity * price, with a missing quantity or price counting as zero."""
    return (item.quantity or 0) * (item.price or 0)


def _is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


def _street_missing(address: Address | None) -> bool:
    return address is None or _is_blank(address.street)


def find_missing_fields(invoice: Invoice) -> list[str]:
    """
    Required fields absent from an invoice, using wire names.

    Blank strings count as absent. paymentTerms is absent only when null,
    and total must be strictly positive.
    """
    checks = {
        "description": _is_blank(invoice.description),
        "paymentTerms": invoice.payment_terms is None,
        "clientName": _is_blank(invoice.client_name),
        "clientEmail": _is_blank(invoice.client_email),
        "senderAddress.street": _street_missing(invoice.sender_address),
        "clientAddress.street": _street_missing(invoice.client_address),
        "items": not invoice.items,
        "total": not invoice.total or invoice.total <= 0,
    }
    return [name for name in REQUIRED_FIELDS if checks[name]]


def derive(
    candidate: InvoiceFields,
    is_new: bool,
    *,
    clock: Clock = now_utc,
    id_factory: Callable[[], str] = generate_invoice_id,
) -> Invoice | MissingFields:
    """
    Derive a complete invoice from a candidate state.

    Args:
        candidate: Merged invoice fields (payload over existing record)
        is_new: True on first creation; only then may an id be generated
        clock: Source of "now" for a missing createdAt
        id_factory: Source of fresh invoice ids

    Returns:
        The fully derived Invoice, or MissingFields naming every required
        field that is absent when status is pending or paid.

    Raises:
        ValueError: If an existing invoice (is_new=False) arrives without an id
    """
    invoice_id = candidate.id
    if invoice_id is None:
        if not is_new:
            raise ValueError("Existing invoice has no id")
        invoice_id = id_factory()

    items = [
        item.model_copy(update={"total": line_total(item)})
        for item in candidate.items or []
    ]
    total = sum((item.total for item in items), 0.0)

    created_at = candidate.created_at if candidate.created_at is not None else clock()
    payment_due = None
    if candidate.payment_terms is not None:
        payment_due = created_at + timedelta(days=candidate.payment_terms)

    invoice = Invoice(
        id=invoice_id,
        status=candidate.status or InvoiceStatus.DRAFT,
        created_at=created_at,
        payment_due=payment_due,
        payment_terms=candidate.payment_terms,
        description=candidate.description,
        client_name=candidate.client_name,
        client_email=candidate.client_email,
        sender_address=candidate.sender_address,
        client_address=candidate.client_address,
        items=items,
        total=total,
    )

    if invoice.status in STRICT_STATUSES:
        missing = find_missing_fields(invoice)
        if missing:
            return MissingFields(status=invoice.status, fields=tuple(missing))

    return invoice
