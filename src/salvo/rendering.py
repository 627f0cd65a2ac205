from .models import Summary
from .utils import format_duration


def render_sample(duration: float) -> str:
    return format_duration(duration)


def render_summary(summary: Summary) -> str:
    lines = [f"error_count: {summary.error_count}"]
    if summary.empty:
        lines.append("min: n/a")
        lines.append("max: n/a")
        lines.append("avg: n/a (no samples)")
        return "\n".join(lines)

    lines.append(f"min: {format_duration(summary.min)}")
    lines.append(f"max: {format_duration(summary.max)}")
    lines.append(f"avg: {summary.avg_ms}")
    return "\n".join(lines)
