import uuid

import redis
from textile_orders.utils.retry import redis_retry
from textile_orders.utils.settings import REDIS_URL
from textile_orders.utils.logging import get_logger

logger = get_logger(__name__)

#compare and delete in one Lua call, redis runs scripts atomically
#so nobody can slip in between GET and DEL
_RELEASE_LUA = """
if redis.call('GET', KEYS[1]) == ARGV[1] then
    return redis.call('DEL', KEYS[1])
else
    return 0
end
"""


class LockService:
    """
    Guard for order submission: one in-flight submit per draft across all workers.
    The key expires by itself, so a crashed worker never blocks the draft for good.
    """

    def __init__(self, url: str | None = None):
        self.redis = redis.Redis.from_url(
            url or REDIS_URL,
            decode_responses=True,
        )

    @staticmethod
    def _key(draft_id: int) -> str:
        return f"draft:{draft_id}:submit"

    @redis_retry()
    def acquire_submit_lock(self, draft_id: int, ttl: int) -> str | None:
        key = self._key(draft_id)
        token = uuid.uuid4().hex
        logger.info(f"Acquire lock {key}")
        #SET draft:1:submit <token> NX EX 30
        ok = self.redis.set(name=key, value=token, nx=True, ex=ttl)
        return token if ok else None

    @redis_retry()
    def release_submit_lock(self, draft_id: int, token: str) -> bool:
        key = self._key(draft_id)
        logger.info(f"Release lock {key}")
        res = self.redis.eval(_RELEASE_LUA, 1, key, token)
        return bool(res)

    @redis_retry()
    def force_release(self, draft_id: int) -> bool:
        return bool(self.redis.delete(self._key(draft_id)))
