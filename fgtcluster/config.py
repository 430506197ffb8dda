from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Backend(str, Enum):
    NUMPY = "numpy"
    THREADING = "threading"
    MULTIPROCESSING = "multiprocessing"


@dataclass(frozen=True)
class ClusteringConfig:
    """
    Параметры запуска кластеризации.

    - backend: движок (однопоточный NumPy, пул потоков, пул процессов);
    - n_workers: число воркеров для параллельных движков;
    - chunk_size: размер диапазона точек на воркер (None: поровну);
    - max_iters: предел числа итераций;
    - timeout: предел времени в секундах (None: без ограничения);
    - strict: бросать ConvergenceNotReached при исчерпании max_iters.
    """

    backend: Backend = Backend.NUMPY
    n_workers: int = 4
    chunk_size: Optional[int] = None
    max_iters: int = 300
    timeout: Optional[float] = None
    strict: bool = True

    def __post_init__(self) -> None:
        # Допускаем строковые значения ("threading") наравне с Enum
        object.__setattr__(self, "backend", Backend(self.backend))
        if int(self.n_workers) < 1:
            raise ValueError("n_workers must be positive")
        if self.chunk_size is not None and int(self.chunk_size) <= 0:
            raise ValueError("chunk_size must be positive")
        if int(self.max_iters) < 1:
            raise ValueError("max_iters must be positive")
        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("timeout must be positive")
