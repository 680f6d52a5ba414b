"""SQLAlchemy-backed repository implementations."""

from .invoice_repository import SqlInvoiceRepository

__all__ = [
    "SqlInvoiceRepository",
]
