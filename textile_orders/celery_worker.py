# textile_orders/celery_worker.py
from celery import Celery

from textile_orders.utils.settings import CELERY_BROKER_URL, CELERY_RESULT_BACKEND

celery_app = Celery(
    "textile_orders",
    broker=CELERY_BROKER_URL,
    backend=CELERY_RESULT_BACKEND,
)

# tasks must be imported explicitly so celery registers them
celery_app.conf.imports = (
    "textile_orders.tasks.expire",
    "textile_orders.services.notification_service",
)

celery_app.conf.beat_schedule = {
    "expire-drafts-every-minute": {
        "task": "textile_orders.tasks.expire.expire_drafts_task",
        "schedule": 60.0,  # every 60 seconds
    },
}

celery_app.conf.timezone = "UTC"
