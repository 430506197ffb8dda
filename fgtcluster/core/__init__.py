from .base import ClusteringBase
from .cpu_numpy import ClusteringCPUNumpy
from .cpu_threading import ClusteringCPUThreading
from .cpu_multiprocessing import ClusteringCPUMultiprocessing
from .result import AssignmentPass, Clustering

__all__ = [
    "ClusteringBase",
    "ClusteringCPUNumpy",
    "ClusteringCPUThreading",
    "ClusteringCPUMultiprocessing",
    "AssignmentPass",
    "Clustering",
]
