from .api import cluster, make_engine
from .config import Backend, ClusteringConfig
from .core.result import Clustering
from .errors import (
    ClusteringCancelled,
    ClusteringError,
    ConvergenceNotReached,
    DimensionMismatch,
    EmptyPointSet,
    InvalidClusterCount,
    NonFiniteInput,
    NonPositiveTolerance,
)

__all__ = [
    "cluster",
    "make_engine",
    "Backend",
    "ClusteringConfig",
    "Clustering",
    "ClusteringError",
    "InvalidClusterCount",
    "EmptyPointSet",
    "NonPositiveTolerance",
    "DimensionMismatch",
    "NonFiniteInput",
    "ConvergenceNotReached",
    "ClusteringCancelled",
]
