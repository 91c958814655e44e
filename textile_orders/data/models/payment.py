from sqlalchemy import Column, Integer, ForeignKey, Numeric, String, DateTime
from sqlalchemy.orm import relationship
from datetime import datetime, timezone

from textile_orders.data.database import Base


class PaymentModel(Base):
    __tablename__ = "payments"

    id = Column(Integer, primary_key=True)
    sales_order_id = Column(Integer, ForeignKey("sales_orders.id", ondelete="CASCADE"), nullable=False)

    amount = Column(Numeric(12, 2), nullable=False)
    mode = Column(String, nullable=False, default="CASH")  # CASH, CHEQUE, ONLINE
    reference_number = Column(String, nullable=True)
    description = Column(String, nullable=True)
    transaction_date = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    order = relationship("SalesOrderModel", back_populates="payments")
    cheque = relationship(
        "ChequeTransactionModel",
        back_populates="payment",
        uselist=False,
        cascade="all, delete-orphan",
    )


class ChequeTransactionModel(Base):
    __tablename__ = "cheque_transactions"

    id = Column(Integer, primary_key=True)
    payment_id = Column(Integer, ForeignKey("payments.id", ondelete="CASCADE"), nullable=False, unique=True)

    cheque_number = Column(String, nullable=False)
    bank = Column(String, nullable=False)
    branch = Column(String, nullable=True)
    amount = Column(Numeric(12, 2), nullable=False)
    status = Column(String, nullable=False, default="PENDING")  # PENDING, CLEARED, BOUNCED
    issue_date = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    payment = relationship("PaymentModel", back_populates="cheque")
