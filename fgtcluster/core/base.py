from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from typing import Any

import numpy as np

from fgtcluster.core.kernels import chunk_radii, update_centroids
from fgtcluster.core.result import AssignmentPass, Clustering
from fgtcluster.errors import ClusteringCancelled, ConvergenceNotReached
from fgtcluster.metrics.timers import Deadline, Timer
from fgtcluster.utils.logging import format_problem_prefix
from fgtcluster.validation import validate_inputs


class ClusteringBase(ABC):
    """
    Базовый класс движков кластеризации.

    Отвечает за цикл итераций, шаг обновления центроидов, критерий
    сходимости, лимиты (итерации, время, отмена) и сбор таймингов:
    - T_назначения: время шага assign (назначение + слияние сумм);
    - T_обновления: время пересчёта центроидов;
    - T_итерации: сумма двух предыдущих;
    - T_радиусов: время финального прохода по радиусам.

    Конкретные движки реализуют только assign (и, при желании,
    параллельный compute_radii) и управляют своими воркерами через
    _setup/_teardown.
    """

    def __init__(
        self,
        n_clusters: int,
        epsilon: float,
        max_iters: int = 300,
        timeout: float | None = None,
        strict: bool = True,
        logger: Any | None = None,
    ):
        if max_iters < 1:
            raise ValueError("max_iters must be positive")

        self.K = n_clusters
        self.epsilon = epsilon  # Порог сходимости (изменение суммарной ошибки)
        self.max_iters = max_iters
        self.timeout = timeout
        self.strict = strict
        self.logger = logger

        self.result: Clustering | None = None

        # агрегированные тайминги за один вызов fit(...)
        self.t_assign_total: float = 0.0
        self.t_update_total: float = 0.0
        self.t_iter_total: float = 0.0
        self.t_radius: float = 0.0

        self.n_iters_actual: int = 0

    def fit(
        self,
        points: np.ndarray,
        starting_clusters: np.ndarray,
        cancel: threading.Event | None = None,
    ) -> Clustering:
        """
        Основной цикл: (назначение → слияние → обновление → проверка)*,
        затем проход по радиусам.

        Итерации продолжаются, пока |error - old_error| > epsilon; на
        первой итерации old_error = 0. Цикл ограничен max_iters; при
        исчерпании лимита результат помечается converged=False и, если
        strict, бросается ConvergenceNotReached.

        Raises:
            ClusteringError: ошибки валидации входов (см. validate_inputs)
            ConvergenceNotReached: лимит итераций исчерпан (strict=True)
            ClusteringCancelled: установлен cancel или истёк timeout
        """
        X, clusters = validate_inputs(points, self.K, self.epsilon, starting_clusters)
        N, D = X.shape
        prefix = format_problem_prefix(N, D, self.K)

        # сбрасываем накопленные тайминги для нового запуска
        self.t_assign_total = 0.0
        self.t_update_total = 0.0
        self.t_iter_total = 0.0
        self.t_radius = 0.0
        self.n_iters_actual = 0
        self.result = None

        deadline = Deadline(self.timeout)
        error = 0.0
        converged = False
        assignment: AssignmentPass | None = None

        self._setup(X)
        try:
            for i in range(self.max_iters):
                if cancel is not None and cancel.is_set():
                    raise ClusteringCancelled(
                        f"Clustering cancelled after {i} iterations"
                    )

                old_error = error

                with Timer() as t_assign:
                    assignment = self.assign(X, clusters)
                with Timer() as t_update:
                    clusters = update_centroids(assignment.sums, assignment.counts)
                error = assignment.error

                t_iter_elapsed = t_assign.elapsed + t_update.elapsed
                self.t_assign_total += t_assign.elapsed
                self.t_update_total += t_update.elapsed
                self.t_iter_total += t_iter_elapsed
                self.n_iters_actual = i + 1

                change = abs(error - old_error)
                converged = not change > self.epsilon

                if self.logger and (i == 0 or (i + 1) % 10 == 0 or converged):
                    status = " (converged)" if converged else ""
                    self.logger.info(
                        f"{prefix} Iteration {i + 1}/{self.max_iters}{status} "
                        f"(T_assign={t_assign.elapsed:.6f}s, "
                        f"T_update={t_update.elapsed:.6f}s, "
                        f"error={error:.6e}, change={change:.2e})"
                    )

                if converged:
                    break

                if deadline.expired():
                    raise ClusteringCancelled(
                        f"Clustering timed out after {i + 1} iterations "
                        f"({deadline.spent:.3f}s > {self.timeout}s)"
                    )

            assert assignment is not None
            with Timer() as t_radius:
                radii = self.compute_radii(X, clusters, assignment.labels)
            self.t_radius = t_radius.elapsed
        except ClusteringCancelled as exc:
            if self.logger:
                self.logger.warning(f"{prefix} {exc}")
            raise
        finally:
            self._teardown()

        self.result = Clustering.build(
            labels=assignment.labels,
            clusters=clusters,
            counts=assignment.counts,
            radii=radii,
            error=error,
            n_iters=self.n_iters_actual,
            converged=converged,
        )

        if self.logger:
            self.logger.info(
                f"{prefix} Radii computed in {self.t_radius:.6f}s "
                f"(max_radius={self.result.max_radius:.6e})"
            )

        if not converged:
            message = (
                f"Convergence not reached after {self.max_iters} iterations "
                f"(change={change:.2e} > epsilon={self.epsilon:.2e})"
            )
            if self.logger:
                self.logger.warning(f"{prefix} {message}")
            if self.strict:
                raise ConvergenceNotReached(message, self.result)

        return self.result

    def _setup(self, X: np.ndarray) -> None:
        """Запуск воркеров на время одного fit (по умолчанию: ничего)."""

    def _teardown(self) -> None:
        """Освобождение воркеров; вызывается всегда, в том числе при ошибке."""

    @abstractmethod
    def assign(self, X: np.ndarray, clusters: np.ndarray) -> AssignmentPass:
        """Шаг назначения точек кластерам со слиянием частичных сумм."""
        raise NotImplementedError

    def compute_radii(
        self, X: np.ndarray, clusters: np.ndarray, labels: np.ndarray
    ) -> np.ndarray:
        """Радиус каждого кластера; 0.0 для пустых кластеров."""
        return chunk_radii(X, clusters, labels)
