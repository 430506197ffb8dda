"""
Вычислительные ядра, общие для всех движков.

Каждая функция работает с непрерывным диапазоном точек (чанком) и не
трогает разделяемое состояние: частичные результаты сливаются вызывающим
кодом.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

import numpy as np


def make_chunks(N: int, n_workers: int, chunk_size: Optional[int] = None) -> List[slice]:
    """
    Разбиение диапазона [0, N) на непересекающиеся непрерывные отрезки.

    Без chunk_size: n_workers отрезков почти равной длины; пустые
    отрезки отбрасываются (если воркеров больше, чем точек).
    """
    if chunk_size is None:
        bounds = np.linspace(0, N, num=max(1, int(n_workers)) + 1).astype(np.int64)
        chunks = [slice(int(a), int(b)) for a, b in zip(bounds[:-1], bounds[1:])]
    else:
        cs = int(chunk_size)
        if cs <= 0:
            raise ValueError("chunk_size must be positive")
        chunks = [slice(i, min(i + cs, N)) for i in range(0, N, cs)]
    return [s for s in chunks if s.stop > s.start]


def nearest_centroids(X: np.ndarray, centroids: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """
    Ближайший центроид для каждой точки по квадрату евклидова расстояния.

    np.argmin возвращает первый минимум, т.е. при равенстве выигрывает
    кластер с меньшим индексом.

    Returns:
        (labels (M,) int64, min_distances (M,) float64)
    """
    # (M, K, D) → (M, K)
    diff = X[:, None, :] - centroids[None, :, :]
    distances = np.einsum("mkd,mkd->mk", diff, diff)
    labels = np.argmin(distances, axis=1).astype(np.int64, copy=False)
    min_distances = distances[np.arange(X.shape[0]), labels]
    return labels, min_distances


def accumulate(
    X: np.ndarray, labels: np.ndarray, K: int
) -> Tuple[np.ndarray, np.ndarray]:
    """Частичная редукция чанка: (sums[K,D], counts[K])."""
    D = X.shape[1]
    sums = np.zeros((K, D), dtype=np.float64)
    np.add.at(sums, labels, X)
    counts = np.bincount(labels, minlength=K).astype(np.int64, copy=False)
    return sums, counts


def assign_chunk(
    X: np.ndarray, centroids: np.ndarray
) -> Tuple[np.ndarray, np.ndarray, np.ndarray, float]:
    """Назначение + накопление для одного чанка: (labels, sums, counts, error)."""
    labels, min_distances = nearest_centroids(X, centroids)
    sums, counts = accumulate(X, labels, centroids.shape[0])
    return labels, sums, counts, float(np.sum(min_distances))


def update_centroids(sums: np.ndarray, counts: np.ndarray) -> np.ndarray:
    """
    Новые центроиды = сумма / количество.

    Для пустого кластера центроид остаётся равным накопленной сумме, т.е.
    нулю: переинициализация пустых кластеров не выполняется.
    """
    centroids = sums.copy()
    non_empty = counts > 0
    centroids[non_empty] = sums[non_empty] / counts[non_empty, None]
    return centroids


def point_distances(X: np.ndarray, centroids: np.ndarray, labels: np.ndarray) -> np.ndarray:
    """Евклидово расстояние каждой точки до центроида своего кластера."""
    diff = X - centroids[labels]
    return np.sqrt(np.einsum("md,md->m", diff, diff))


def chunk_radii(
    X: np.ndarray, centroids: np.ndarray, labels: np.ndarray
) -> np.ndarray:
    """
    Частичные радиусы кластеров по чанку.

    Пустые (в этом чанке) кластеры получают 0.0, поэтому слияние чанков:
    поэлементный np.maximum.
    """
    radii = np.zeros(centroids.shape[0], dtype=np.float64)
    np.maximum.at(radii, labels, point_distances(X, centroids, labels))
    return radii
