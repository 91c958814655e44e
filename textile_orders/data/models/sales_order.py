from sqlalchemy import Column, Integer, String, DateTime, Date, Numeric
from sqlalchemy.orm import relationship
from datetime import datetime, timezone

from textile_orders.data.database import Base

class SalesOrderModel(Base):
    __tablename__ = "sales_orders"

    id = Column(Integer, primary_key=True)
    order_number = Column(String, nullable=False, unique=True)

    customer_name = Column(String, nullable=False)
    customer_id = Column(Integer, nullable=True)
    delivery_date = Column(Date, nullable=True)
    delivery_address = Column(String, nullable=True)
    remarks = Column(String, nullable=True)

    payment_status = Column(String, nullable=False, default="PENDING")  # PENDING, PARTIAL, PAID, CANCELLED
    payment_mode = Column(String, nullable=True)
    discount = Column(Numeric(12, 2), nullable=False, default=0)
    tax = Column(Numeric(12, 2), nullable=False, default=0)
    total = Column(Numeric(12, 2), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    items = relationship(
        "SalesOrderItemModel",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="SalesOrderItemModel.position",
    )
    payments = relationship("PaymentModel", back_populates="order", cascade="all, delete-orphan")
