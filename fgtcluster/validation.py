"""
Проверка входных данных кластеризации.

Все проверки выполняются до начала итераций, чтобы некорректные входы
приводили к явной ошибке, а не к NaN, бесконечному циклу или индексам
за пределами диапазона.
"""

from __future__ import annotations

import math
import numbers
from typing import Tuple

import numpy as np

from fgtcluster.errors import (
    DimensionMismatch,
    EmptyPointSet,
    InvalidClusterCount,
    NonFiniteInput,
    NonPositiveTolerance,
)


def validate_inputs(
    points: np.ndarray,
    nclusters: int,
    epsilon: float,
    starting_clusters: np.ndarray,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Проверяет и нормализует входы.

    Args:
        points: Матрица точек (R, C)
        nclusters: Количество кластеров K
        epsilon: Порог сходимости по изменению ошибки
        starting_clusters: Начальные центроиды (K, C)

    Returns:
        Пара (points, clusters): C-contiguous float64 массивы; clusters:
        всегда собственная копия, которую движок может изменять.

    Raises:
        EmptyPointSet, InvalidClusterCount, NonPositiveTolerance,
        DimensionMismatch, NonFiniteInput
    """
    X = np.ascontiguousarray(points, dtype=np.float64)
    if X.ndim != 2:
        raise DimensionMismatch(f"points must be a 2-D array, got ndim={X.ndim}")
    R, C = X.shape
    if R == 0:
        raise EmptyPointSet("points must contain at least one row")
    if C == 0:
        raise DimensionMismatch("points must have at least one column")

    if isinstance(nclusters, bool) or not isinstance(nclusters, numbers.Integral):
        raise InvalidClusterCount(f"nclusters must be an integer, got {nclusters!r}")
    K = int(nclusters)
    if K <= 0 or K > R:
        raise InvalidClusterCount(
            f"nclusters must satisfy 0 < K <= {R}, got K={K}"
        )

    if not isinstance(epsilon, numbers.Real) or not math.isfinite(epsilon) or epsilon <= 0:
        raise NonPositiveTolerance(f"epsilon must be positive and finite, got {epsilon!r}")

    clusters = np.array(starting_clusters, dtype=np.float64, copy=True, order="C")
    if clusters.shape != (K, C):
        raise DimensionMismatch(
            f"starting_clusters must have shape ({K}, {C}), got {clusters.shape}"
        )

    if not np.all(np.isfinite(X)):
        raise NonFiniteInput("points contain NaN or infinite values")
    if not np.all(np.isfinite(clusters)):
        raise NonFiniteInput("starting_clusters contain NaN or infinite values")

    return X, clusters
