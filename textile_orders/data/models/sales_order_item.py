from sqlalchemy import Column, Integer, ForeignKey, Numeric, String
from sqlalchemy.orm import relationship

from textile_orders.data.database import Base


class SalesOrderItemModel(Base):
    __tablename__ = "sales_order_items"

    id = Column(Integer, primary_key=True)
    sales_order_id = Column(Integer, ForeignKey("sales_orders.id", ondelete="CASCADE"), nullable=False)
    position = Column(Integer, nullable=False)

    product_type = Column(String, nullable=False)
    product_id = Column(Integer, nullable=False)
    display_name = Column(String, nullable=True)
    inventory_reference = Column(Integer, nullable=True)

    quantity = Column(Integer, nullable=False)
    unit_price = Column(Numeric(12, 2), nullable=False)
    discount = Column(Numeric(12, 2), nullable=False, default=0)
    tax = Column(Numeric(12, 2), nullable=False, default=0)
    subtotal = Column(Numeric(12, 2), nullable=False)

    order = relationship("SalesOrderModel", back_populates="items")
