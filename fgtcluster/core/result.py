from __future__ import annotations

from dataclasses import dataclass

import numpy as np


def _frozen(arr: np.ndarray) -> np.ndarray:
    out = np.array(arr, copy=True)
    out.setflags(write=False)
    return out


@dataclass(frozen=True)
class AssignmentPass:
    """Результат одного прохода назначения: метки и слитые частичные суммы."""

    labels: np.ndarray  # (N,) int64
    sums: np.ndarray  # (K, D) float64, сумма координат по кластерам
    counts: np.ndarray  # (K,) int64
    error: float  # сумма квадратов расстояний до назначенных центроидов


@dataclass(frozen=True, eq=False)
class Clustering:
    """
    Итог кластеризации, передаётся вызывающему коду.

    Массивы доступны только для чтения: потребитель (например, быстрое
    преобразование Гаусса) использует clusters и radii как неизменяемый
    снимок.

    - max_radius: максимум по radii;
    - labels: (R,) индекс кластера каждой точки;
    - clusters: (K, C) итоговые центроиды;
    - counts: (K,) число точек в каждом кластере;
    - radii: (K,) максимальное расстояние точки до центроида своего
      кластера; 0.0 для пустого кластера;
    - error: сумма квадратов расстояний последнего прохода;
    - n_iters: число выполненных итераций;
    - converged: выполнен ли критерий |error - old_error| <= epsilon.
    """

    max_radius: float
    labels: np.ndarray
    clusters: np.ndarray
    counts: np.ndarray
    radii: np.ndarray
    error: float = 0.0
    n_iters: int = 0
    converged: bool = True

    @classmethod
    def build(
        cls,
        *,
        labels: np.ndarray,
        clusters: np.ndarray,
        counts: np.ndarray,
        radii: np.ndarray,
        error: float,
        n_iters: int,
        converged: bool,
    ) -> Clustering:
        """Собирает результат из рабочих буферов движка (с копированием)."""
        return cls(
            max_radius=float(np.max(radii)),
            labels=_frozen(labels),
            clusters=_frozen(clusters),
            counts=_frozen(counts),
            radii=_frozen(radii),
            error=float(error),
            n_iters=int(n_iters),
            converged=bool(converged),
        )

    @property
    def nclusters(self) -> int:
        return int(self.clusters.shape[0])
