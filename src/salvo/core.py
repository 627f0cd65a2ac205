import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor

from rich.console import Console
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
)

from .listeners import Listener
from .models import Sampler, Summary
from .timer import Timer

logger = logging.getLogger(__name__)


class ThreadGroup:
    """Drives ``freq`` invocations of one sampler into a listener.

    ``num_of_threads == 1`` runs every invocation in order on the calling
    task. Larger values start that many workers fed from a one-slot queue.
    """

    def __init__(
        self,
        sampler: Sampler,
        freq: int,
        num_of_threads: int = 1,
        grace_period_s: float = 0.0,
        use_progress_bar: bool = False,
    ) -> None:
        if freq < 0:
            raise ValueError(f"freq must be >= 0, got {freq}")
        if num_of_threads < 1:
            raise ValueError(f"num_of_threads must be >= 1, got {num_of_threads}")
        if grace_period_s < 0:
            raise ValueError(f"grace_period_s must be >= 0, got {grace_period_s}")

        self.sampler = sampler
        self.freq = freq
        self.num_of_threads = num_of_threads
        self.grace_period_s = grace_period_s
        self.use_progress_bar = use_progress_bar

        self._progress: Progress | None = None
        self._task_id = None

    @property
    def sequential(self) -> bool:
        return self.num_of_threads == 1

    # ────────────────────────────────
    # Main Runner
    # ────────────────────────────────

    async def start(self, listener: Listener) -> Summary:
        logger.info(
            f"Starting {self.sampler.name}: freq={self.freq}, "
            f"num_of_threads={self.num_of_threads}"
        )

        self._start_progress()
        executor = None
        if self.sampler.action.blocking:
            executor = ThreadPoolExecutor(
                max_workers=self.num_of_threads,
                thread_name_prefix=f"salvo-{self.sampler.name}",
            )
        try:
            if self.sequential:
                await self._run_sequential(listener, executor)
            else:
                await self._run_pooled(listener, executor)
        finally:
            self._stop_progress()
            if executor is not None:
                executor.shutdown(wait=True)

        summary = listener.exit()
        logger.info(
            f"Run completed: {self.sampler.name} {summary.count} samples, "
            f"{summary.error_count} errors"
        )
        return summary

    async def _observe(self, sampler: Sampler, listener: Listener, executor) -> None:
        outcome = await Timer().outcome(sampler, executor)
        listener.record(sampler, outcome)
        if self._progress is not None:
            self._progress.advance(self._task_id)

    async def _run_sequential(self, listener: Listener, executor) -> None:
        for _ in range(self.freq):
            await self._observe(self.sampler, listener, executor)

    async def _run_pooled(self, listener: Listener, executor) -> None:
        q: asyncio.Queue = asyncio.Queue(maxsize=1)

        async def worker(worker_id: int):
            while True:
                sampler = await q.get()
                try:
                    if sampler is None:
                        break
                    await self._observe(sampler, listener, executor)
                finally:
                    q.task_done()
            logger.debug(f"Worker {worker_id} stopped")

        async def dispatch():
            for _ in range(self.freq):
                await q.put(self.sampler)
            # every dispatched unit has been recorded once join() returns
            await q.join()
            if self.grace_period_s > 0:
                logger.debug(f"Grace period {self.grace_period_s}s before summary")
                await asyncio.sleep(self.grace_period_s)
            for _ in workers:
                await q.put(None)

        workers = [asyncio.create_task(worker(i)) for i in range(self.num_of_threads)]
        dispatcher = asyncio.create_task(dispatch())
        tasks = [dispatcher, *workers]
        try:
            await asyncio.gather(*tasks)
        except BaseException:
            for t in tasks:
                t.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

    # ────────────────────────────────
    # Progress Bar
    # ────────────────────────────────

    def _start_progress(self) -> None:
        if not self.use_progress_bar:
            return
        self._progress = Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            MofNCompleteColumn(),
            TimeElapsedColumn(),
            # stdout carries the report; the bar lives on stderr with the logs
            console=Console(stderr=True),
            redirect_stdout=False,
        )
        self._progress.start()
        self._task_id = self._progress.add_task(
            f"[cyan]{self.sampler.name}", total=self.freq
        )

    def _stop_progress(self) -> None:
        if self._progress is not None:
            self._progress.stop()
            self._progress = None
            self._task_id = None
