"""
Общие фикстуры для всех тестов.
"""

import numpy as np
import pytest


@pytest.fixture
def small_dataset():
    """Фикстура с небольшим тестовым датасетом (2D, 2 кластера)."""
    rng = np.random.default_rng(42)
    # Два явно разделённых кластера
    cluster1 = rng.standard_normal((30, 2)) + [0, 0]
    cluster2 = rng.standard_normal((30, 2)) + [8, 8]
    X = np.vstack([cluster1, cluster2])
    starting_clusters = np.array([
        [-1.0, -1.0],
        [9.0, 9.0],
    ])
    return X, starting_clusters


@pytest.fixture
def medium_dataset():
    """Фикстура со средним тестовым датасетом (10D, 3 кластера)."""
    rng = np.random.default_rng(42)
    cluster1 = rng.standard_normal((50, 10)) + [0] * 10
    cluster2 = rng.standard_normal((50, 10)) + [8] * 10
    cluster3 = rng.standard_normal((50, 10)) + [-8] * 10
    X = np.vstack([cluster1, cluster2, cluster3])
    starting_clusters = np.array([
        [-1.0] * 10,
        [9.0] * 10,
        [-9.0] * 10,
    ])
    return X, starting_clusters


@pytest.fixture
def four_points():
    """Четыре точки, два кластера: известный ответ (0, 0.5) и (10, 0.5)."""
    X = np.array([
        [0.0, 0.0],
        [0.0, 1.0],
        [10.0, 0.0],
        [10.0, 1.0],
    ])
    starting_clusters = np.array([
        [0.0, 0.0],
        [10.0, 0.0],
    ])
    return X, starting_clusters


@pytest.fixture
def simple_2d_dataset():
    """Фикстура с очень простым 2D датасетом для базовых тестов."""
    X = np.array([
        [0.0, 0.0],
        [1.0, 1.0],
        [2.0, 2.0],
        [10.0, 10.0],
        [11.0, 11.0],
        [12.0, 12.0],
    ])
    starting_clusters = np.array([
        [0.5, 0.5],
        [11.0, 11.0],
    ])
    return X, starting_clusters
