#import all models so SQLAlchemy registers them in Base.metadata

from textile_orders.data.models.draft import DraftOrderModel
from textile_orders.data.models.draft_item import DraftItemModel
from textile_orders.data.models.sales_order import SalesOrderModel
from textile_orders.data.models.sales_order_item import SalesOrderItemModel
from textile_orders.data.models.payment import PaymentModel, ChequeTransactionModel

__all__ = [
    "DraftOrderModel",
    "DraftItemModel",
    "SalesOrderModel",
    "SalesOrderItemModel",
    "PaymentModel",
    "ChequeTransactionModel",
]
