"""Typed exceptions for invoice operations."""


class InvoiceError(Exception):
    """Base class for invoice operation failures."""


class InvoiceNotFoundError(InvoiceError):
    """Operation referenced an invoice id that does not exist."""

    def __init__(self, invoice_id: str):
        self.invoice_id = invoice_id
        super().__init__(f"Invoice {invoice_id} not found")


class MissingFieldsError(InvoiceError):
    """
    Status requires fields the invoice does not have.

    Carries every missing field name so the caller can fix them all at once.
    """

    def __init__(self, status: str, fields: list[str]):
        self.status = status
        self.fields = list(fields)
        super().__init__(
            f"Invoices with status '{status}' require: {', '.join(self.fields)}"
        )


class StorageError(InvoiceError):
    """Document store unavailable or rejected the operation. Not retried."""
