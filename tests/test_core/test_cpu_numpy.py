"""
Unit-тесты однопоточного NumPy движка.
"""

import numpy as np
import pytest

from fgtcluster.core.cpu_numpy import ClusteringCPUNumpy


def _squared_distances(X, clusters):
    diff = X[:, None, :] - clusters[None, :, :]
    return np.sum(diff * diff, axis=2)


class TestClusteringCPUNumpy:
    """Тесты базовой функциональности NumPy движка."""

    def test_four_points_scenario(self, four_points):
        X, starting_clusters = four_points
        model = ClusteringCPUNumpy(n_clusters=2, epsilon=1e-6)

        result = model.fit(X, starting_clusters)

        np.testing.assert_allclose(result.clusters, [[0.0, 0.5], [10.0, 0.5]])
        np.testing.assert_array_equal(result.labels, [0, 0, 1, 1])
        np.testing.assert_array_equal(result.counts, [2, 2])
        np.testing.assert_allclose(result.radii, [0.5, 0.5])
        assert result.max_radius == 0.5
        assert result.converged
        # ошибка: 2.0 → 1.0 → 1.0
        assert result.n_iters == 3
        assert result.error == pytest.approx(1.0)

    def test_one_point_per_cluster(self):
        """K == R: одна итерация, нулевая ошибка и нулевые радиусы."""
        X = np.array([[0.0, 0.0], [1.0, 2.0], [5.0, -1.0]])
        model = ClusteringCPUNumpy(n_clusters=3, epsilon=1e-9)

        result = model.fit(X, X)

        assert result.n_iters == 1
        assert result.error == 0.0
        np.testing.assert_array_equal(result.labels, [0, 1, 2])
        np.testing.assert_array_equal(result.counts, [1, 1, 1])
        np.testing.assert_array_equal(result.radii, [0.0, 0.0, 0.0])
        assert result.max_radius == 0.0

    def test_empty_cluster_becomes_zero(self):
        """Центроид пустого кластера становится нулевым, без NaN."""
        X = np.array([[4.0, 5.0], [5.0, 5.0], [6.0, 5.0]])
        starting_clusters = np.array([[5.0, 5.0], [100.0, 100.0]])
        model = ClusteringCPUNumpy(n_clusters=2, epsilon=1e-6)

        result = model.fit(X, starting_clusters)

        np.testing.assert_array_equal(result.clusters[1], [0.0, 0.0])
        np.testing.assert_allclose(result.clusters[0], [5.0, 5.0])
        np.testing.assert_array_equal(result.counts, [3, 0])
        np.testing.assert_allclose(result.radii, [1.0, 0.0])
        assert result.max_radius == 1.0

    def test_result_properties(self, small_dataset):
        X, starting_clusters = small_dataset
        model = ClusteringCPUNumpy(n_clusters=2, epsilon=1e-9)

        result = model.fit(X, starting_clusters)

        # метки: ближайший центроид
        expected = np.argmin(_squared_distances(X, result.clusters), axis=1)
        np.testing.assert_array_equal(result.labels, expected)
        assert np.all((result.labels >= 0) & (result.labels < 2))

        assert result.counts.sum() == X.shape[0]
        np.testing.assert_array_equal(
            result.counts, np.bincount(result.labels, minlength=2)
        )

        # радиусы ограничивают расстояние каждой точки до своего центроида
        assert np.all(result.radii >= 0)
        distances = np.linalg.norm(X - result.clusters[result.labels], axis=1)
        assert np.all(distances <= result.radii[result.labels] + 1e-12)
        assert result.max_radius == np.max(result.radii)

    def test_deterministic(self, medium_dataset):
        X, starting_clusters = medium_dataset

        first = ClusteringCPUNumpy(n_clusters=3, epsilon=1e-9).fit(X, starting_clusters)
        second = ClusteringCPUNumpy(n_clusters=3, epsilon=1e-9).fit(X, starting_clusters)

        np.testing.assert_array_equal(first.labels, second.labels)
        np.testing.assert_array_equal(first.clusters, second.clusters)
        np.testing.assert_array_equal(first.radii, second.radii)
        assert first.error == second.error

    def test_inputs_not_mutated(self, small_dataset):
        X, starting_clusters = small_dataset
        X_before = X.copy()
        clusters_before = starting_clusters.copy()

        ClusteringCPUNumpy(n_clusters=2, epsilon=1e-9).fit(X, starting_clusters)

        np.testing.assert_array_equal(X, X_before)
        np.testing.assert_array_equal(starting_clusters, clusters_before)

    def test_result_is_read_only(self, four_points):
        X, starting_clusters = four_points

        result = ClusteringCPUNumpy(n_clusters=2, epsilon=1e-6).fit(X, starting_clusters)

        with pytest.raises(ValueError):
            result.clusters[0, 0] = 1.0
        with pytest.raises(ValueError):
            result.radii[0] = 1.0

    def test_timings_collected(self, medium_dataset):
        X, starting_clusters = medium_dataset
        model = ClusteringCPUNumpy(n_clusters=3, epsilon=1e-9)

        model.fit(X, starting_clusters)

        assert model.n_iters_actual >= 1
        assert model.t_assign_total > 0
        assert model.t_update_total > 0
        assert model.t_radius > 0
        assert abs(model.t_iter_total - (model.t_assign_total + model.t_update_total)) < 1e-6
        assert model.result is not None
        assert model.result.clusters.shape == (3, 10)
        assert model.result.clusters.dtype == np.float64

    def test_invalid_max_iters(self):
        with pytest.raises(ValueError):
            ClusteringCPUNumpy(n_clusters=2, epsilon=1e-6, max_iters=0)
