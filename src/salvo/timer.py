import asyncio
import logging
from concurrent.futures import Executor
from dataclasses import dataclass

from .errors import ActionError
from .models import Sampler, TimedOutcome
from .utils import now

logger = logging.getLogger(__name__)


@dataclass
class Timer:
    """Wall-clock timing of one action invocation."""

    start: float | None = None
    duration: float = 0.0

    async def observe(
        self, sampler: Sampler, executor: Executor | None = None
    ) -> tuple[float, ActionError | None]:
        """Invoke ``sampler``'s action once and time it.

        Returns ``(duration_seconds, error)``. ``error`` is the action's
        :class:`ActionError` as raised, or ``None`` on success. Any other
        exception is fatal and propagates to the caller untimed.
        """
        action = sampler.action
        error: ActionError | None = None
        self.start = now()
        try:
            if action.blocking:
                loop = asyncio.get_running_loop()
                await loop.run_in_executor(executor, action.call)
            else:
                await action.execute()
        except ActionError as e:
            error = e
        finally:
            self.duration = now() - self.start

        if error is not None:
            logger.debug(f"[{sampler.name}] failed after {self.duration:.4f}s: {error}")
        return self.duration, error

    async def outcome(
        self, sampler: Sampler, executor: Executor | None = None
    ) -> TimedOutcome:
        duration, error = await self.observe(sampler, executor)
        return TimedOutcome(duration=duration, error=error)
