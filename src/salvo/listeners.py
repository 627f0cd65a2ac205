import logging
import threading
from abc import ABC, abstractmethod

from .metrics import compute_summary
from .models import MetricsCallback, Sampler, Summary, TimedOutcome
from .rendering import render_sample, render_summary

logger = logging.getLogger(__name__)


class Listener(ABC):
    """Receives every timed outcome of a run, then reduces them once."""

    @abstractmethod
    def record(self, sampler: Sampler, outcome: TimedOutcome) -> None:
        """Store one outcome. May be called concurrently."""

    @abstractmethod
    def exit(self) -> Summary:
        """Reduce the recorded outcomes. Called exactly once, after all records."""


class StdoutListener(Listener):
    """In-memory report that prints each duration and the final summary."""

    def __init__(
        self,
        metrics_callback: MetricsCallback | None = None,
        echo_samples: bool = True,
    ) -> None:
        self.metrics_callback = metrics_callback
        self.echo_samples = echo_samples
        self._lock = threading.Lock()
        self._entries: list[TimedOutcome] = []
        self._summary: Summary | None = None

    @property
    def entries(self) -> list[TimedOutcome]:
        with self._lock:
            return list(self._entries)

    def record(self, sampler: Sampler, outcome: TimedOutcome) -> None:
        with self._lock:
            if self._summary is not None:
                raise RuntimeError(f"record() after exit() for sampler {sampler.name!r}")
            self._entries.append(outcome)
            if self.echo_samples:
                print(render_sample(outcome.duration))

    def exit(self) -> Summary:
        with self._lock:
            if self._summary is not None:
                raise RuntimeError("exit() called more than once")
            self._summary = compute_summary(self._entries, self.metrics_callback)

        print(render_summary(self._summary))
        return self._summary
