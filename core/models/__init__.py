"""Core domain models."""

from core.models.invoice import Address, Invoice, InvoiceFields, InvoiceStatus, LineItem

__all__ = [
    # Invoice
    "Invoice", "InvoiceFields", "InvoiceStatus",
    # Embedded values
    "Address", "LineItem",
]
