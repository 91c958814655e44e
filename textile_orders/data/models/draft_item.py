from sqlalchemy import Column, Integer, ForeignKey, Numeric, String
from sqlalchemy.orm import relationship

from textile_orders.data.database import Base


class DraftItemModel(Base):
    __tablename__ = "draft_items"

    id = Column(Integer, primary_key=True)
    draft_id = Column(Integer, ForeignKey("draft_orders.id", ondelete="CASCADE"), nullable=False)
    position = Column(Integer, nullable=False)

    product_type = Column(String, nullable=False)  # THREAD, FABRIC
    product_id = Column(Integer, nullable=False)
    display_name = Column(String, nullable=False, default="")
    inventory_reference = Column(Integer, nullable=True)

    quantity = Column(Integer, nullable=False)
    available_quantity = Column(Integer, nullable=False)
    unit_price = Column(Numeric(12, 2), nullable=False)
    discount = Column(Numeric(12, 2), nullable=False, default=0)
    tax = Column(Numeric(12, 2), nullable=False, default=0)
    subtotal = Column(Numeric(12, 2), nullable=False)

    draft = relationship("DraftOrderModel", back_populates="items")
