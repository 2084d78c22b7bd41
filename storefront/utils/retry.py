# storefront/utils/retry.py
import logging

import redis
import requests
from tenacity import before_sleep_log, retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from storefront.utils.logging import get_logger
from storefront.utils.settings import RETRY_ATTEMPTS

logger = get_logger(__name__)


def _retry_on(exc_types, attempts: int, multiplier: float, max_wait: float):
    return retry(
        reraise=True,
        stop=stop_after_attempt(attempts),
        wait=wait_exponential(multiplier=multiplier, min=multiplier, max=max_wait),
        retry=retry_if_exception_type(exc_types),
        before_sleep=before_sleep_log(logger, logging.WARNING),
    )


def http_retry(attempts: int = RETRY_ATTEMPTS):
    """Katalog produktow: timeouty i bledy polaczenia (404 nie jest wyjatkiem)."""
    return _retry_on(requests.RequestException, attempts, multiplier=0.3, max_wait=3)


def redis_retry(attempts: int = RETRY_ATTEMPTS):
    """RedisStore: zerwane polaczenie z Redisem przy odczycie/zapisie koszyka."""
    return _retry_on((redis.ConnectionError, redis.TimeoutError), attempts, multiplier=0.2, max_wait=2)
