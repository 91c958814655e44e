# textile_orders/utils/retry.py
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type
import requests
import redis


def backoff_retry(exc_types, attempts: int = 3, base: float = 0.3, max_wait: float = 3):
    """Retry on the given exception types with exponential backoff, then re-raise."""
    return retry(
        reraise=True,
        stop=stop_after_attempt(attempts),
        wait=wait_exponential(multiplier=base, min=base, max=max_wait),
        retry=retry_if_exception_type(exc_types),
    )


#catalog lookups are read-only so they are safe to repeat
def http_retry():
    return backoff_retry(requests.RequestException)


def redis_retry():
    return backoff_retry(redis.RedisError, base=0.2, max_wait=2)
