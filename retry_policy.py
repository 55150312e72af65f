import asyncio
import logging
from typing import Callable, Optional, Tuple, Type, TypeVar, Generic

from utils.exceptions import StoreUnavailable

logger = logging.getLogger(__name__)

T = TypeVar('T')


class RetryPolicy(Generic[T]):
    def __init__(
        self,
        max_retries: int = 3,
        delay: float = 1.0,
        backoff_factor: float = 2.0,
        retry_on: Tuple[Type[BaseException], ...] = (StoreUnavailable,),
    ):
        self.max_retries = max_retries
        self.delay = delay
        self.backoff_factor = backoff_factor
        self.retry_on = retry_on

    async def execute_with_retry(self, func: Callable[..., T], *args, **kwargs) -> T:
        current_delay = self.delay
        for attempt in range(self.max_retries + 1):
            try:
                return await func(*args, **kwargs)
            except self.retry_on as e:
                if attempt < self.max_retries:
                    logger.warning(f"Attempt {attempt + 1} failed ({e}), retrying in {current_delay}s")
                    await asyncio.sleep(current_delay)
                    current_delay *= self.backoff_factor
                else:
                    raise


async def wait_for_store(store, retry_policy: Optional[RetryPolicy] = None) -> None:
    """Create the schema, retrying while the store is unreachable."""
    policy = retry_policy or RetryPolicy()
    await policy.execute_with_retry(store.create_schema)
