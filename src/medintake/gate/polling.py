"""Client-side polling of the completion gate with capped exponential backoff."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Awaitable, Callable

from medintake.exceptions import ProcessingTimeout
from medintake.gate.completion import UploadCompletionGate
from medintake.models import CompletionResult

if TYPE_CHECKING:
    from medintake.core.config import PollingConfig

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class BackoffPolicy:
    initial_delay: float = 5.0
    multiplier: float = 2.0
    max_delay: float = 60.0
    max_attempts: int = 10

    @classmethod
    def from_config(cls, config: PollingConfig) -> BackoffPolicy:
        return cls(
            initial_delay=config.initial_delay,
            multiplier=config.multiplier,
            max_delay=config.max_delay,
            max_attempts=config.max_attempts,
        )

    def delay(self, attempt: int) -> float:
        """Seconds to wait after the ``attempt``-th (0-based) unsuccessful check."""
        return min(self.initial_delay * self.multiplier**attempt, self.max_delay)


async def wait_for_completion(
    gate: UploadCompletionGate,
    patient_id: str,
    document_ids: list[int],
    policy: BackoffPolicy | None = None,
    *,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> CompletionResult:
    """Call the gate until the batch is no longer "still processing".

    Raises:
        ProcessingTimeout: Documents were still unprocessed after
            ``policy.max_attempts`` checks.
    """
    policy = policy or BackoffPolicy()
    result: CompletionResult | None = None
    for attempt in range(policy.max_attempts):
        result = await gate.check_and_trigger(patient_id, document_ids)
        if not result.still_processing:
            return result
        if attempt + 1 < policy.max_attempts:
            wait = policy.delay(attempt)
            log.info(
                "Documents %s still processing, checking again in %.1fs (attempt %d/%d)",
                result.unprocessed_ids,
                wait,
                attempt + 1,
                policy.max_attempts,
            )
            await sleep(wait)

    unprocessed = list(result.unprocessed_ids or []) if result else []
    raise ProcessingTimeout(
        f"Documents still processing after {policy.max_attempts} attempts",
        attempts=policy.max_attempts,
        unprocessed_ids=unprocessed,
    )
