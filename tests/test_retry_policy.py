import pytest
import asyncio
from retry_policy import RetryPolicy, wait_for_store
from utils.exceptions import StoreUnavailable

@pytest.mark.asyncio
async def test_success_no_retry():
    calls = []
    async def func(x):
        calls.append(x)
        return x * 2
    policy = RetryPolicy(max_retries=2, delay=0.01)
    result = await policy.execute_with_retry(func, 3)
    assert result == 6
    assert calls == [3]

@pytest.mark.asyncio
async def test_retry_then_success():
    calls = []
    async def func(x):
        if len(calls) < 2:
            calls.append('fail')
            raise StoreUnavailable()
        calls.append(x)
        return x * 2
    policy = RetryPolicy(max_retries=3, delay=0.01)
    result = await policy.execute_with_retry(func, 5)
    assert result == 10
    assert calls == ['fail', 'fail', 5]

@pytest.mark.asyncio
async def test_give_up_after_max_retries():
    calls = []
    async def func():
        calls.append('fail')
        raise StoreUnavailable()
    policy = RetryPolicy(max_retries=2, delay=0.01)
    with pytest.raises(StoreUnavailable):
        await policy.execute_with_retry(func)
    assert calls == ['fail', 'fail', 'fail']

@pytest.mark.asyncio
async def test_other_errors_are_not_retried():
    calls = []
    async def func():
        calls.append('fail')
        raise ValueError("bad input")
    policy = RetryPolicy(max_retries=3, delay=0.01)
    with pytest.raises(ValueError):
        await policy.execute_with_retry(func)
    assert calls == ['fail']

@pytest.mark.asyncio
async def test_backoff_delay(monkeypatch):
    delays = []
    orig_sleep = asyncio.sleep
    async def fake_sleep(secs):
        delays.append(secs)
        await orig_sleep(0)  # 실제로는 바로 통과
    monkeypatch.setattr(asyncio, "sleep", fake_sleep)
    calls = []
    async def func():
        if len(calls) < 3:
            calls.append('fail')
            raise StoreUnavailable()
        return 42
    policy = RetryPolicy(max_retries=3, delay=0.1, backoff_factor=2)
    result = await policy.execute_with_retry(func)
    assert result == 42
    assert delays == [0.1, 0.2, 0.4]

@pytest.mark.asyncio
async def test_wait_for_store_creates_schema():
    class FlakyStore:
        def __init__(self):
            self.attempts = 0
        async def create_schema(self):
            self.attempts += 1
            if self.attempts < 2:
                raise StoreUnavailable()
    store = FlakyStore()
    await wait_for_store(store, RetryPolicy(max_retries=2, delay=0.01))
    assert store.attempts == 2
