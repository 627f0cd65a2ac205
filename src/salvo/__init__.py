__all__ = [
    "Action",
    "HttpPostAction",
    "RServeAction",
    "Sampler",
    "TimedOutcome",
    "Summary",
    "Timer",
    "Listener",
    "StdoutListener",
    "ThreadGroup",
    "compute_summary",
    "load_config",
]


from .actions import Action, HttpPostAction, RServeAction
from .config import load_config
from .core import ThreadGroup
from .listeners import Listener, StdoutListener
from .metrics import compute_summary
from .models import Sampler, Summary, TimedOutcome
from .timer import Timer
