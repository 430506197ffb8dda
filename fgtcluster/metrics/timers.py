"""
Таймеры для замеров шагов кластеризации и контроля лимита времени.

Оба класса опираются на time.perf_counter(), который не зависит от
перевода системных часов.
"""
from __future__ import annotations
import time
from typing import Any, Optional


class Timer:
    """
    Контекстный менеджер, измеряющий время выполнения блока.

    Пример:
        with Timer() as t:
            engine.assign(X, clusters)
        t.elapsed  # секунды
    """

    def __init__(self) -> None:
        self.start: float = 0.0
        self.end: float = 0.0
        self.elapsed: float = 0.0

    def __enter__(self) -> Timer:
        self.start = time.perf_counter()
        return self

    def __exit__(self, *args: Any) -> None:
        self.end = time.perf_counter()
        self.elapsed = self.end - self.start


class Deadline:
    """
    Момент времени, после которого кластеризацию следует прервать.

    Deadline(None) никогда не истекает.
    """

    def __init__(self, seconds: Optional[float]) -> None:
        self.seconds = seconds
        self.start = time.perf_counter()

    @property
    def spent(self) -> float:
        return time.perf_counter() - self.start

    def expired(self) -> bool:
        if self.seconds is None:
            return False
        return self.spent > self.seconds
