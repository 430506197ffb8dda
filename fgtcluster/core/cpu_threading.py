from __future__ import annotations

import threading
from typing import Any, Callable, List, Optional

import numpy as np

from fgtcluster.core.base import ClusteringBase
from fgtcluster.core.kernels import assign_chunk, chunk_radii, make_chunks
from fgtcluster.core.result import AssignmentPass

# work(X_chunk, chunk) -> partial; merge(partial) вызывается в порядке чанков
WorkFn = Callable[[np.ndarray, slice], Any]
MergeFn = Callable[[Any], None]


class _ForkJoinPool:
    """
    Фиксированный пул из n_threads потоков над списком чанков.

    Поток i обслуживает чанки i, i + n_threads, ...; наборы чанков не
    пересекаются, поэтому записи по диапазонам точек не конфликтуют.

    Один проход (run) устроен так:
    1. вызывающий поток готовит общие буферы (единственный писатель);
    2. барьер start: воркеры считают частичные результаты по своим чанкам
       и кладут их под замком в ячейку своего чанка;
    3. барьер done: после него все частичные результаты готовы;
    4. вызывающий поток сливает их в порядке чанков, поэтому результат
       при фиксированном разбиении не зависит от порядка потоков.

    NumPy отпускает GIL на векторных операциях, поэтому чанки
    обрабатываются действительно параллельно.
    """

    def __init__(self, X: np.ndarray, chunks: List[slice], n_threads: int) -> None:
        self._X = X
        self._chunks = chunks
        n_threads = max(1, min(int(n_threads), len(chunks)))
        parties = n_threads + 1
        self._start = threading.Barrier(parties)
        self._done = threading.Barrier(parties)
        self._lock = threading.Lock()

        self._work: Optional[WorkFn] = None
        self._partials: List[Any] = []
        self._errors: List[BaseException] = []
        self._stopping = False

        self._threads = [
            threading.Thread(
                target=self._worker,
                args=(list(range(i, len(chunks), n_threads)),),
                name=f"fgtcluster-worker-{i}",
                daemon=True,
            )
            for i in range(n_threads)
        ]
        for t in self._threads:
            t.start()

    @property
    def n_workers(self) -> int:
        return len(self._threads)

    def _worker(self, indices: List[int]) -> None:
        try:
            while True:
                self._start.wait()
                if self._stopping:
                    return
                assert self._work is not None
                try:
                    for j in indices:
                        chunk = self._chunks[j]
                        partial = self._work(self._X[chunk], chunk)
                        with self._lock:
                            self._partials[j] = partial
                except BaseException as exc:  # пробрасывается в run()
                    with self._lock:
                        self._errors.append(exc)
                # барьер проходим всегда, иначе остальные участники зависнут
                self._done.wait()
        except threading.BrokenBarrierError:
            # пул закрыт или прерван вызывающим потоком
            return

    def run(self, work: WorkFn, merge: MergeFn) -> None:
        """Один fork-join проход; первая ошибка воркера пробрасывается."""
        self._work = work
        self._partials = [None] * len(self._chunks)
        self._errors = []
        try:
            self._start.wait()
            self._done.wait()
        except BaseException:
            # например KeyboardInterrupt на барьере: воркеры не должны ждать вечно
            self._abort()
            raise
        if self._errors:
            raise self._errors[0]
        for partial in self._partials:
            merge(partial)

    def _abort(self) -> None:
        self._stopping = True
        self._start.abort()
        self._done.abort()

    def close(self) -> None:
        self._abort()
        for t in self._threads:
            t.join()


class ClusteringCPUThreading(ClusteringBase):
    """
    Движок на пуле потоков (fork-join по диапазонам точек).

    Потоков не больше n_workers; у каждого свои частичные суммы и
    счётчики по чанкам, метки пишутся в непересекающиеся диапазоны без
    блокировок. Частичные результаты сливаются в порядке чанков, поэтому
    при одном и том же разбиении результат воспроизводим бит-в-бит. При
    другом разбиении (n_workers без chunk_size) порядок сложения меняется,
    и ошибка с центроидами могут отличаться в последних битах.
    """

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

        # Пул живёт ровно один fit
        self._pool: Optional[_ForkJoinPool] = None

    def _setup(self, X: np.ndarray) -> None:
        chunks = make_chunks(X.shape[0], self.n_workers, self.chunk_size)
        self._pool = _ForkJoinPool(X, chunks, self.n_workers)

    def _teardown(self) -> None:
        if self._pool is not None:
            self._pool.close()
        self._pool = None

    # ---------- Assignment + merge ----------

    def assign(self, X: np.ndarray, clusters: np.ndarray) -> AssignmentPass:
        assert self._pool is not None
        N = X.shape[0]
        K, D = clusters.shape

        # Сброс общих аккумуляторов: единственный писатель до барьера start
        labels = np.empty(N, dtype=np.int64)
        sums = np.zeros((K, D), dtype=np.float64)
        counts = np.zeros(K, dtype=np.int64)
        error = 0.0

        def work(X_chunk: np.ndarray, chunk: slice) -> Any:
            lbl, local_sums, local_counts, local_error = assign_chunk(X_chunk, clusters)
            labels[chunk] = lbl
            return local_sums, local_counts, local_error

        def merge(partial: Any) -> None:
            nonlocal error
            local_sums, local_counts, local_error = partial
            sums[...] += local_sums
            counts[...] += local_counts
            error += local_error

        self._pool.run(work, merge)
        return AssignmentPass(labels=labels, sums=sums, counts=counts, error=error)

    # ---------- Radii (parallel max-reduction) ----------

    def compute_radii(
        self, X: np.ndarray, clusters: np.ndarray, labels: np.ndarray
    ) -> np.ndarray:
        assert self._pool is not None
        radii = np.zeros(clusters.shape[0], dtype=np.float64)

        def work(X_chunk: np.ndarray, chunk: slice) -> np.ndarray:
            return chunk_radii(X_chunk, clusters, labels[chunk])

        def merge(partial: np.ndarray) -> None:
            np.maximum(radii, partial, out=radii)

        self._pool.run(work, merge)
        return radii
