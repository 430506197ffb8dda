from .timers import Deadline, Timer

__all__ = [
    "Timer",
    "Deadline",
]
