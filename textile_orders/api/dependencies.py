# textile_orders/api/dependencies.py
from fastapi import Depends
from sqlalchemy.orm import Session

from textile_orders.data.database import get_db
from textile_orders.services.catalog_client import CatalogClient
from textile_orders.services.draft_service import DraftService
from textile_orders.services.lock_service import LockService
from textile_orders.services.notification_service import NotificationService
from textile_orders.services.order_service import OrderService


def get_catalog_client() -> CatalogClient:
    return CatalogClient()


def get_lock_service() -> LockService:
    return LockService()


def get_notification_service() -> NotificationService:
    return NotificationService()


def get_order_service(
    db: Session = Depends(get_db),
    notification_service: NotificationService = Depends(get_notification_service),
) -> OrderService:
    return OrderService(db, notification_service=notification_service)


def get_draft_service(
    db: Session = Depends(get_db),
    catalog_client: CatalogClient = Depends(get_catalog_client),
    lock_service: LockService = Depends(get_lock_service),
    order_service: OrderService = Depends(get_order_service),
) -> DraftService:
    return DraftService(
        db=db,
        catalog_client=catalog_client,
        lock_service=lock_service,
        order_service=order_service,
    )
