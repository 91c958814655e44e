# textile_orders/services/notification_service.py
from textile_orders.celery_worker import celery_app
from textile_orders.utils.logging import get_logger

logger = get_logger(__name__)


class NotificationService:
    """
    Order notifications, processed asynchronously by Celery.
    """

    @staticmethod
    def send_order_notification(order_id: int, order_number: str, customer_name: str):
        send_order_notification_task.delay(order_id, order_number, customer_name)


@celery_app.task(name="textile_orders.services.notification_service.send_order_notification_task")
def send_order_notification_task(order_id: int, order_number: str, customer_name: str):
    """
    Only logs for now. Invoice rendering and delivery live outside this service.
    """
    logger.info(f"[NOTIFICATION] Order {order_number} (id {order_id}) created for {customer_name}")

    return {"order_id": order_id, "order_number": order_number, "status": "sent"}
