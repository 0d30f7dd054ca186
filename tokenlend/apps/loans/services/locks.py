import os
import random
import time
import logging
from contextlib import contextmanager
from typing import Optional
from redis import Redis
from django.conf import settings

from tokenlend.errors import LoanInProgressError

logger = logging.getLogger(__name__)

LOCK = "lend:loan:lock:{address}"

# atomic unlock (delete only if token matches the current value)
# returns 1 if deleted, 0 otherwise
_UNLOCK_LUA = """
if redis.call('get', KEYS[1]) == ARGV[1] then
  return redis.call('del', KEYS[1])
else
  return 0
end
"""


class UserLoanLock:
    """Serializes loan requests per wallet across processes."""

    def __init__(self, r: Optional[Redis] = None, ttl: Optional[int] = None):
        self.r = r or Redis.from_url(settings.LOAN_LOCK_REDIS_URL)
        self.ttl = ttl or settings.LOAN_LOCK_TTL

    @contextmanager
    def hold(
        self,
        address: str,
        *,
        retries: int = 4,
        backoff_base: float = 0.05,
    ):
        """
        Acquire the wallet's lock with retries, raising LoanInProgressError
        when another request keeps holding it.

        Exponential backoff with jitter; the lock expires after `ttl` seconds
        so a crashed worker cannot block the wallet forever.
        """
        key = LOCK.format(address=address.lower())
        token = f"{time.time()}:{os.getpid()}:{random.random()}"

        acquired = False
        attempt = 0
        while attempt <= retries:
            if self.r.set(key, token, nx=True, ex=self.ttl):
                acquired = True
                break
            time.sleep(backoff_base * (2**attempt) * (0.5 + random.random()))
            attempt += 1

        if not acquired:
            logger.warning(f"Loan lock busy for {address}")
            raise LoanInProgressError()

        try:
            yield
        finally:
            try:
                self.r.eval(_UNLOCK_LUA, 1, key, token)
            except Exception as e:
                # the key still expires after ttl
                logger.warning(f"Failed to release loan lock for {address}: {e}")
