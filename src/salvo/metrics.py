import logging
import math
from collections.abc import Iterable
from .models import MetricsCallback, Summary, TimedOutcome

logger = logging.getLogger(__name__)


def compute_summary(
    outcomes: Iterable[TimedOutcome],
    metrics_callback: MetricsCallback | None = None,
) -> Summary:
    count = 0
    error_count = 0
    durations: list[float] = []
    lo: float | None = None
    hi: float | None = None

    for outcome in outcomes:
        count += 1
        if outcome.failed:
            error_count += 1
        d = outcome.duration
        # min and max are updated independently; a new max may also be a new min
        if hi is None or d > hi:
            hi = d
        if lo is None or d < lo:
            lo = d
        durations.append(d)

    logger.debug(f"Computing summary: count={count}, errors={error_count}")

    if not count:
        summary = Summary(count=0, error_count=0, min=None, max=None, avg_ms=None)
        logger.info("No samples recorded. Returning empty summary.")
    else:
        total = math.fsum(durations)
        # truncate the total to whole milliseconds before dividing
        avg_ms = int(total * 1000) // count
        summary = Summary(
            count=count,
            error_count=error_count,
            min=lo,
            max=hi,
            avg_ms=avg_ms,
        )
        logger.info(
            f"Summary computed: count={count}, errors={error_count}, "
            f"min={lo:.4f}s, max={hi:.4f}s, avg={avg_ms}ms"
        )

    if metrics_callback:
        metrics_callback(summary.to_dict())

    return summary
