# textile_orders/tasks/expire.py
from datetime import datetime, timezone

from redis.exceptions import RedisError

from textile_orders.celery_worker import celery_app
from textile_orders.data import database
from textile_orders.repos.draft_repo import DraftRepo
from textile_orders.services.lock_service import LockService
from textile_orders.utils.logging import get_logger

logger = get_logger(__name__)


def expire_drafts(db, lock_service, now: datetime | None = None) -> int:
    """Marks abandoned drafts EXPIRED and drops any leftover submit guard."""
    repo = DraftRepo(db)
    now = now or datetime.now(timezone.utc)

    drafts = repo.get_expired_drafts(now)
    logger.info(f"Found {len(drafts)} drafts to expire")

    for draft in drafts:
        draft.status = "EXPIRED"
        draft.version = draft.version + 1

        try:
            lock_service.force_release(draft.id)
        except RedisError as e:
            logger.warning(f"Failed to release submit lock for draft {draft.id}: {e}")

    repo.commit()
    return len(drafts)


@celery_app.task(name="textile_orders.tasks.expire.expire_drafts_task")
def expire_drafts_task():
    logger.info("Expire drafts task started")

    db = database.SessionLocal()
    try:
        return expire_drafts(db, LockService())
    finally:
        db.close()
