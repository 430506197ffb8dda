"""
Точка входа библиотеки: кластеризация для быстрого преобразования Гаусса.

Пример:
    result = cluster(points, nclusters=2, epsilon=1e-6,
                     starting_clusters=points[:2])
    result.clusters, result.radii, result.max_radius
"""

from __future__ import annotations

import logging
import threading

import numpy as np

from fgtcluster.config import Backend, ClusteringConfig
from fgtcluster.core.base import ClusteringBase
from fgtcluster.core.cpu_multiprocessing import ClusteringCPUMultiprocessing
from fgtcluster.core.cpu_numpy import ClusteringCPUNumpy
from fgtcluster.core.cpu_threading import ClusteringCPUThreading
from fgtcluster.core.result import Clustering


def make_engine(
    nclusters: int,
    epsilon: float,
    config: ClusteringConfig | None = None,
    logger: logging.Logger | None = None,
) -> ClusteringBase:
    """Создаёт движок кластеризации по конфигурации."""
    config = config or ClusteringConfig()
    common = dict(
        n_clusters=nclusters,
        epsilon=epsilon,
        max_iters=config.max_iters,
        timeout=config.timeout,
        strict=config.strict,
        logger=logger,
    )

    if config.backend is Backend.NUMPY:
        return ClusteringCPUNumpy(**common)
    if config.backend is Backend.THREADING:
        return ClusteringCPUThreading(
            n_workers=config.n_workers, chunk_size=config.chunk_size, **common
        )
    if config.backend is Backend.MULTIPROCESSING:
        return ClusteringCPUMultiprocessing(
            n_workers=config.n_workers, chunk_size=config.chunk_size, **common
        )
    raise ValueError(f"Unknown backend: {config.backend!r}")


def cluster(
    points: np.ndarray,
    nclusters: int,
    epsilon: float,
    starting_clusters: np.ndarray,
    config: ClusteringConfig | None = None,
    logger: logging.Logger | None = None,
    cancel: threading.Event | None = None,
) -> Clustering:
    """
    Разбивает точки на nclusters кластеров итерационным k-means.

    Args:
        points: (R, C) точки; не изменяются
        nclusters: количество кластеров K, 0 < K <= R
        epsilon: порог сходимости по изменению суммарной ошибки, > 0
        starting_clusters: (K, C) начальные центроиды (выбирает вызывающий)
        config: движок, число воркеров, лимиты; по умолчанию ClusteringConfig()
        logger: логгер для отчёта об итерациях (None: без логов)
        cancel: событие кооперативной отмены, проверяется перед каждой итерацией

    Returns:
        Clustering с max_radius, labels, clusters, counts, radii.

    Raises:
        InvalidClusterCount, EmptyPointSet, NonPositiveTolerance,
        DimensionMismatch, NonFiniteInput: некорректные входы
        ConvergenceNotReached: исчерпан config.max_iters (при config.strict)
        ClusteringCancelled: отмена или истёк config.timeout
    """
    engine = make_engine(nclusters, epsilon, config=config, logger=logger)
    return engine.fit(points, starting_clusters, cancel=cancel)
