#textile_orders/data/models/draft.py
from sqlalchemy import Column, Integer, String, DateTime, Date, Numeric, ForeignKey
from sqlalchemy.orm import relationship

from textile_orders.data.database import Base


class DraftOrderModel(Base):
    __tablename__ = "draft_orders"

    id = Column(Integer, primary_key=True)

    status = Column(String, nullable=False, default="ACTIVE")  # ACTIVE, SUBMITTED, CANCELLED, EXPIRED
    version = Column(Integer, nullable=False, default=1)
    expires_at = Column(DateTime(timezone=True), nullable=False)

    customer_name = Column(String, nullable=False)
    customer_id = Column(Integer, nullable=True)
    delivery_date = Column(Date, nullable=True)
    delivery_address = Column(String, nullable=True)
    remarks = Column(String, nullable=True)

    order_discount = Column(Numeric(12, 2), nullable=False, default=0)
    order_tax = Column(Numeric(12, 2), nullable=False, default=0)

    payment_status = Column(String, nullable=False, default="PENDING")
    payment_amount = Column(Numeric(12, 2), nullable=False, default=0)
    payment_mode = Column(String, nullable=False, default="CASH")
    cheque_number = Column(String, nullable=True)
    bank = Column(String, nullable=True)
    branch = Column(String, nullable=True)
    cheque_status = Column(String, nullable=True)

    submitted_order_id = Column(Integer, ForeignKey("sales_orders.id"), nullable=True)

    items = relationship(
        "DraftItemModel",
        back_populates="draft",
        cascade="all, delete-orphan",
        order_by="DraftItemModel.position",
    )
