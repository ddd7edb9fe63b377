# tools/retry_orchestrator.py
"""
HealthBite AI — Retry Orchestrator
==================================
Runs an async request function with bounded retries and exponential
backoff. Exhausting the budget is a normal outcome, not an exception:
callers inspect RetryOutcome.succeeded and switch to their offline
fallback.

Delay before attempt k (k >= 1, zero-based) is base_delay_ms * 2**(k-1),
so with the defaults the sleeps are 1000 ms then 2000 ms.
"""

import asyncio
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, List, Optional

from tools.gemini_client import GeminiConfig


@dataclass
class RetryOutcome:
    succeeded: bool
    value: Any = None
    attempts: int = 0
    errors: List[str] = field(default_factory=list)
    total_delay_ms: int = 0


def backoff_delay_ms(attempt: int, base_delay_ms: int) -> int:
    """Delay to wait before the given zero-based attempt."""
    if attempt <= 0:
        return 0
    return base_delay_ms * 2 ** (attempt - 1)


class RetryOrchestrator:
    """
    Bounded retry loop around a zero-argument coroutine function.

    Example:
        >>> orchestrator = RetryOrchestrator(GeminiConfig(max_retries=3))
        >>> outcome = asyncio.run(orchestrator.call_with_retry(fetch))
        >>> outcome.succeeded, outcome.attempts
        (True, 1)
    """

    def __init__(
        self,
        config: Optional[GeminiConfig] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep
    ):
        self.config = config or GeminiConfig()
        self._sleep = sleep

    async def call_with_retry(
        self,
        request_fn: Callable[[], Awaitable[Any]],
        label: str = "request"
    ) -> RetryOutcome:
        outcome = RetryOutcome(succeeded=False)
        max_retries = self.config.max_retries

        for attempt in range(max_retries):
            delay_ms = backoff_delay_ms(attempt, self.config.base_delay_ms)
            if delay_ms:
                print(f"🔁 Retrying {label} in {delay_ms} ms (attempt {attempt + 1}/{max_retries})")
                await self._sleep(delay_ms / 1000)
                outcome.total_delay_ms += delay_ms

            outcome.attempts = attempt + 1
            try:
                outcome.value = await request_fn()
                outcome.succeeded = True
                return outcome
            except Exception as e:
                outcome.errors.append(f"{type(e).__name__}: {e}")
                print(f"⚠️ {label} attempt {attempt + 1}/{max_retries} failed: {e}")

        print(f"❌ {label} failed after {max_retries} attempts")
        return outcome


__all__ = ["RetryOutcome", "RetryOrchestrator", "backoff_delay_ms"]
