"""
Invoice service: the write path between callers and the invoice store.

Every write merges the caller's fields into the current record, runs the
full derivation, and only then touches storage. A rejected derivation
leaves the stored invoice exactly as it was.

Concurrent updates to the same invoice are last-write-wins; no version
check is made between the read and the write-back.
"""

import logging
from functools import partial
from typing import Any, Callable

from core.config import InvoiceConfig
from core.derivation import MissingFields, derive, generate_invoice_id
from core.exceptions import InvoiceNotFoundError, MissingFieldsError, StorageError
from core.models import Invoice, InvoiceFields, InvoiceStatus
from core.store import InvoiceStore
from utils.timezone import Clock, now_utc

logger = logging.getLogger(__name__)

# Never taken from a caller payload: id is generated, createdAt is fixed at creation.
_CREATE_PROTECTED = {"id"}
_UPDATE_PROTECTED = {"id", "created_at"}


class InvoiceService:
    """Service for invoice operations."""

    def __init__(
        self,
        store: InvoiceStore,
        config: InvoiceConfig | None = None,
        clock: Clock = now_utc,
        id_factory: Callable[[], str] | None = None,
    ):
        self.store = store
        self.config = config or InvoiceConfig()
        self.clock = clock
        self.id_factory = id_factory or partial(
            generate_invoice_id, self.config.id_letters, self.config.id_digits
        )

    def _derive(self, candidate: InvoiceFields, is_new: bool) -> Invoice:
        """Run the derivation engine, turning a MissingFields outcome into an exception."""
        result = derive(candidate, is_new, clock=self.clock, id_factory=self.id_factory)
        if isinstance(result, MissingFields):
            logger.warning(
                f"Rejected {result.status.value} invoice, missing: {', '.join(result.fields)}"
            )
            raise MissingFieldsError(result.status.value, list(result.fields))
        return result

    def _load(self, invoice_id: str) -> InvoiceFields:
        document = self.store.find_one(invoice_id)
        if document is None:
            raise InvoiceNotFoundError(invoice_id)
        return InvoiceFields.model_validate(document)

    def _save_existing(self, invoice_id: str, changes: dict[str, Any]) -> Invoice:
        """Shallow-merge changes over the stored invoice, re-derive, write back."""
        current = self._load(invoice_id)
        candidate = InvoiceFields.model_validate({**current.model_dump(), **changes})

        invoice = self._derive(candidate, is_new=False)
        self.store.update(invoice_id, invoice.to_document())
        return invoice

    def create(self, data: InvoiceFields) -> Invoice:
        """
        Create an invoice.

        Unspecified fields start from an empty draft with the configured
        default payment terms.

        Args:
            data: Caller-supplied invoice fields

        Returns:
            Created invoice with generated id and derived totals/due date

        Raises:
            MissingFieldsError: If status is pending/paid and required data is absent
            StorageError: If the store fails, or no unused id could be generated
        """
        payload = data.model_dump(exclude_unset=True, exclude=_CREATE_PROTECTED)
        candidate = InvoiceFields.model_validate({
            "status": InvoiceStatus.DRAFT,
            "payment_terms": self.config.default_payment_terms,
            **payload,
        })

        for _ in range(self.config.id_generation_attempts):
            invoice = self._derive(candidate, is_new=True)
            if self.store.find_one(invoice.id) is None:
                break
            logger.warning(f"Generated invoice id {invoice.id} already in use, retrying")
        else:
            raise StorageError("Could not generate an unused invoice id")

        self.store.insert(invoice.to_document())
        logger.info(f"Invoice {invoice.id} created ({invoice.status.value})")
        return invoice

    def update(self, invoice_id: str, data: InvoiceFields) -> Invoice:
        """
        Update an invoice with the fields present in data.

        Fields not sent keep their stored values. Addresses and items are
        replaced whole when sent. The id and createdAt never change.

        Raises:
            InvoiceNotFoundError: If no invoice has this id
            MissingFieldsError: If the resulting status requires absent data
        """
        changes = data.model_dump(exclude_unset=True, exclude=_UPDATE_PROTECTED)
        invoice = self._save_existing(invoice_id, changes)
        logger.info(f"Invoice {invoice_id} updated ({invoice.status.value})")
        return invoice

    def mark_as_paid(self, invoice_id: str) -> Invoice:
        """
        Set status to paid, with the same validation as any other write.

        Raises:
            InvoiceNotFoundError: If no invoice has this id
            MissingFieldsError: If the invoice lacks data required for paid
        """
        invoice = self._save_existing(invoice_id, {"status": InvoiceStatus.PAID})
        logger.info(f"Invoice {invoice_id} marked as paid")
        return invoice

    def delete(self, invoice_id: str) -> None:
        """
        Delete an invoice permanently.

        Raises:
            InvoiceNotFoundError: If no invoice has this id
        """
        if not self.store.delete(invoice_id):
            raise InvoiceNotFoundError(invoice_id)
        logger.info(f"Invoice {invoice_id} deleted")

    def get(self, invoice_id: str) -> Invoice:
        """
        Get invoice by id.

        Raises:
            InvoiceNotFoundError: If no invoice has this id
        """
        document = self.store.find_one(invoice_id)
        if document is None:
            raise InvoiceNotFoundError(invoice_id)
        return Invoice.model_validate(document)

    def list_all(self, status: InvoiceStatus | str | None = None) -> list[Invoice]:
        """
        List invoices, optionally only those with exactly this status.

        Any string is accepted as a filter; one that is not a known status
        simply matches nothing.

        Returns:
            Invoices in insertion order
        """
        if isinstance(status, InvoiceStatus):
            status = status.value
        filters = {"status": status} if status is not None else {}
        return [Invoice.model_validate(doc) for doc in self.store.find(filters)]
