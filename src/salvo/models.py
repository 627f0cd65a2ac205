from dataclasses import dataclass
from typing import Any, TYPE_CHECKING
from collections.abc import Callable

if TYPE_CHECKING:
    from .actions import Action
    from .errors import ActionError


@dataclass(frozen=True)
class Sampler:
    name: str
    action: "Action"


@dataclass(frozen=True)
class TimedOutcome:
    duration: float
    error: "ActionError | None" = None

    @property
    def failed(self) -> bool:
        return self.error is not None


@dataclass
class Summary:
    count: int
    error_count: int
    min: float | None
    max: float | None
    avg_ms: int | None

    @property
    def empty(self) -> bool:
        return self.count == 0

    def to_dict(self) -> dict[str, Any]:
        def ms(value: float | None) -> float | None:
            return None if value is None else round(value * 1000.0, 3)

        return {
            "count": self.count,
            "error_count": self.error_count,
            "min_ms": ms(self.min),
            "max_ms": ms(self.max),
            "avg_ms": self.avg_ms,
        }


# Metrics callback: callable accepting summary dict
MetricsCallback = Callable[[dict[str, Any]], None]
