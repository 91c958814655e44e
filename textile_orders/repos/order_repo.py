# textile_orders/repos/order_repo.py
from sqlalchemy import select
from sqlalchemy.orm import Session
from textile_orders.data.models.sales_order import SalesOrderModel


class OrderRepo:
    def __init__(self, db: Session):
        self.db = db

    def add_order(self, order: SalesOrderModel) -> SalesOrderModel:
        #flush only, the caller owns the transaction (draft is closed in the same commit)
        self.db.add(order)
        self.db.flush()
        return order

    def get_order(self, order_id: int) -> SalesOrderModel | None:
        return self.db.get(SalesOrderModel, order_id)

    def order_number_exists(self, order_number: str) -> bool:
        return self.db.execute(
            select(SalesOrderModel.id).where(SalesOrderModel.order_number == order_number)
        ).first() is not None

    def rollback(self) -> None:
        self.db.rollback()
