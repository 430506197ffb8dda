from __future__ import annotations

from multiprocessing import Pool, RawArray, cpu_count
from typing import Any, List, Optional, Tuple

import numpy as np

from fgtcluster.core.base import ClusteringBase
from fgtcluster.core.kernels import assign_chunk, chunk_radii, make_chunks
from fgtcluster.core.result import AssignmentPass


# --- Глобальное состояние: shared X в воркерах ---
_SHARED_X_BUF: RawArray | None = None
_SHARED_X_SHAPE: Tuple[int, int] | None = None


def _init_shared_X(raw: RawArray, shape: Tuple[int, int]) -> None:
    """Инициализатор пула: регистрирует shared X."""
    global _SHARED_X_BUF, _SHARED_X_SHAPE
    _SHARED_X_BUF = raw
    _SHARED_X_SHAPE = shape


def _get_shared_X() -> np.ndarray:
    """NumPy-представление shared X (только чтение)."""
    assert _SHARED_X_BUF is not None and _SHARED_X_SHAPE is not None
    arr = np.frombuffer(_SHARED_X_BUF, dtype=np.float64)
    return arr.reshape(_SHARED_X_SHAPE)


def _assign_chunk_worker(
    args: Tuple[slice, np.ndarray]
) -> Tuple[np.ndarray, np.ndarray, np.ndarray, float]:
    """Назначение + частичные суммы для чанка; X читается из shared."""
    chunk, centroids = args
    return assign_chunk(_get_shared_X()[chunk], centroids)


def _radius_chunk_worker(args: Tuple[slice, np.ndarray, np.ndarray]) -> np.ndarray:
    """Частичные радиусы для чанка."""
    chunk, centroids, labels_chunk = args
    return chunk_radii(_get_shared_X()[chunk], centroids, labels_chunk)


class ClusteringCPUMultiprocessing(ClusteringBase):
    """Движок на пуле процессов с shared X (пул создаётся один раз на fit)."""

    def __init__(
        self,
        n_clusters: int,
        epsilon: float,
        n_workers: int = 4,
        chunk_size: Optional[int] = None,
        max_iters: int = 300,
        timeout: float | None = None,
        strict: bool = True,
        logger: Any | None = None,
    ) -> None:
        super().__init__(
            n_clusters=n_clusters,
            epsilon=epsilon,
            max_iters=max_iters,
            timeout=timeout,
            strict=strict,
            logger=logger,
        )
        if int(n_workers) < 1:
            raise ValueError("n_workers must be positive")
        self.n_workers = int(n_workers)
        self.chunk_size = chunk_size

        self._pool: Optional[Pool] = None
        self._chunks: Optional[List[slice]] = None

    # --- Пул и разбиение ---

    def _setup(self, X: np.ndarray) -> None:
        n_procs = max(1, min(self.n_workers, cpu_count()))
        self._chunks = make_chunks(X.shape[0], n_procs, self.chunk_size)

        # Копируем X один раз в shared RawArray (float64)
        raw = RawArray("d", int(X.size))
        shared_view = np.frombuffer(raw, dtype=np.float64).reshape(X.shape)
        shared_view[:] = X

        self._pool = Pool(
            processes=min(n_procs, len(self._chunks)),
            initializer=_init_shared_X,
            initargs=(raw, X.shape),
        )

    def _teardown(self) -> None:
        if self._pool is not None:
            self._pool.close()
            self._pool.join()
        self._pool = None
        self._chunks = None

    # ---------- Assignment (parallel over chunks) + merge in parent ----------

    def assign(self, X: np.ndarray, clusters: np.ndarray) -> AssignmentPass:
        assert self._pool is not None and self._chunks is not None
        N = X.shape[0]
        K, D = clusters.shape

        partials = self._pool.map(
            _assign_chunk_worker, [(chunk, clusters) for chunk in self._chunks]
        )

        labels = np.empty(N, dtype=np.int64)
        sums = np.zeros((K, D), dtype=np.float64)
        counts = np.zeros(K, dtype=np.int64)
        error = 0.0

        # Частичные суммы сливает только родительский процесс
        for chunk, (lbl, local_sums, local_counts, local_error) in zip(
            self._chunks, partials
        ):
            labels[chunk] = lbl
            sums += local_sums
            counts += local_counts
            error += local_error

        return AssignmentPass(labels=labels, sums=sums, counts=counts, error=error)

    def compute_radii(
        self, X: np.ndarray, clusters: np.ndarray, labels: np.ndarray
    ) -> np.ndarray:
        assert self._pool is not None and self._chunks is not None
        partials = self._pool.map(
            _radius_chunk_worker,
            [(chunk, clusters, labels[chunk]) for chunk in self._chunks],
        )
        radii = np.zeros(clusters.shape[0], dtype=np.float64)
        for partial in partials:
            np.maximum(radii, partial, out=radii)
        return radii
