# core/cpu_numpy.py
from __future__ import annotations

import numpy as np

from .base import ClusteringBase
from .kernels import assign_chunk
from .result import AssignmentPass


class ClusteringCPUNumpy(ClusteringBase):
    """Однопоточный движок на NumPy (baseline, воспроизводим бит-в-бит)."""

    def assign(self, X: np.ndarray, clusters: np.ndarray) -> AssignmentPass:
        labels, sums, counts, error = assign_chunk(X, clusters)
        return AssignmentPass(labels=labels, sums=sums, counts=counts, error=error)
