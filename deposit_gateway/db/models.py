"""SQLAlchemy ORM models."""
from sqlalchemy import Column, DateTime, String, Text
from sqlalchemy.sql import func

from deposit_gateway.infrastructure.database.base import Base


class InvoiceModel(Base):
    __tablename__ = "invoices"

    account = Column(String(64), primary_key=True)
    recipient = Column(String(64), nullable=False, index=True)
    order_id = Column(Text, nullable=False)
    status = Column(String(20), nullable=False, default="unpaid", index=True)  # unpaid, paid
    amount = Column(String(64), nullable=False)
    paid_amount = Column(String(64))
    currency = Column(String(16))
    callback = Column(Text)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    paid_at = Column(DateTime(timezone=True))
    withdrawal_status = Column(String(20))  # pending, completed
    withdrawal_amount = Column(String(64))
    withdrawal_tx = Column(String(128))
    withdrawal_updated_at = Column(DateTime(timezone=True))
