# textile_orders/services/order_service.py
import random
from datetime import datetime, timezone

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from textile_orders.data.models.payment import ChequeTransactionModel, PaymentModel
from textile_orders.data.models.sales_order import SalesOrderModel
from textile_orders.data.models.sales_order_item import SalesOrderItemModel
from textile_orders.domain.errors import SubmissionError
from textile_orders.domain.payment import PaymentMode
from textile_orders.domain.schemas import OrderOut
from textile_orders.domain.session import OrderPayload, SubmissionResult
from textile_orders.repos.order_repo import OrderRepo
from textile_orders.services.notification_service import NotificationService
from textile_orders.utils.logging import get_logger

logger = get_logger(__name__)

ORDER_NUMBER_ATTEMPTS = 5


class OrderService:
    """
    Order submission side: turns a finalized payload into a stored sales order
    with its items, payment and cheque records.
    """

    def __init__(self, db: Session, notification_service: NotificationService | None = None):
        self.db = db
        self.repo = OrderRepo(db)
        self.notification_service = notification_service or NotificationService()

    def submit_order(self, payload: OrderPayload) -> SubmissionResult:
        """
        Use Case: store a sales order (Command).

        1. Rejects duplicate product lines
        2. Generates a unique order number
        3. Creates order, items, payment and cheque rows in the caller's transaction
        """
        seen = set()
        for item in payload.items:
            if item.product.key in seen:
                raise SubmissionError(
                    f"Duplicate item detected: {item.product.product_type.value} with ID "
                    f"{item.product.product_id}. Please combine quantities instead."
                )
            seen.add(item.product.key)

        if payload.total <= 0:
            raise SubmissionError("Total sale amount must be greater than 0")

        order_number = self._new_order_number()
        customer = payload.customer

        order = SalesOrderModel(
            order_number=order_number,
            customer_name=customer.name,
            customer_id=customer.customer_id,
            delivery_date=customer.delivery_date,
            delivery_address=customer.delivery_address,
            remarks=customer.remarks,
            payment_status=payload.payment_status.value,
            payment_mode=payload.payment_mode.value,
            discount=payload.order_adjustments.order_discount,
            tax=payload.order_adjustments.order_tax,
            total=payload.total,
            items=[
                SalesOrderItemModel(
                    position=position,
                    product_type=item.product.product_type.value,
                    product_id=item.product.product_id,
                    display_name=item.product.display_name,
                    inventory_reference=item.product.inventory_reference,
                    quantity=item.quantity,
                    unit_price=item.unit_price,
                    discount=item.item_discount,
                    tax=item.item_tax,
                    subtotal=item.subtotal,
                )
                for position, item in enumerate(payload.items)
            ],
        )

        #payment row only when money actually changed hands
        if payload.payment_amount > 0:
            payment = PaymentModel(
                amount=payload.payment_amount,
                mode=payload.payment_mode.value,
                reference_number=order_number,
                description=f"Payment for Order #{order_number}",
            )
            cheque = payload.cheque_details
            if payload.payment_mode == PaymentMode.CHEQUE and cheque is not None:
                payment.cheque = ChequeTransactionModel(
                    cheque_number=cheque.cheque_number,
                    bank=cheque.bank,
                    branch=cheque.branch or "",
                    amount=payload.payment_amount,
                    status=cheque.status.value,
                )
            order.payments.append(payment)

        try:
            created = self.repo.add_order(order)
        except SQLAlchemyError as e:
            self.repo.rollback()
            logger.error(f"Failed to store sales order {order_number}: {e}")
            raise SubmissionError("Failed to create sales order") from e

        logger.info(
            f"Sales order {order_number} stored with {len(payload.items)} items, "
            f"total {payload.total}, payment {payload.payment_status.value} {payload.payment_amount}"
        )
        return SubmissionResult(ok=True, order_id=created.id, order_number=order_number)

    def notify(self, order_id: int, order_number: str, customer_name: str) -> None:
        self.notification_service.send_order_notification(order_id, order_number, customer_name)

    def get_order(self, order_id: int) -> OrderOut:
        """
        Use Case: fetch a submitted order (Query).
        """
        order = self.repo.get_order(order_id)

        if not order:
            raise ValueError("Order not found")

        return OrderOut.model_validate(order)

    def _new_order_number(self) -> str:
        for _ in range(ORDER_NUMBER_ATTEMPTS):
            timestamp = datetime.now(timezone.utc).strftime("%Y%m%d%H%M%S")
            candidate = f"SO-{timestamp}-{random.randint(0, 9999):04d}"
            if not self.repo.order_number_exists(candidate):
                return candidate
            logger.warning(f"Order number {candidate} already taken, generating another")
        raise SubmissionError("Could not generate a unique order number")
