"""
Иерархия исключений кластеризации.

Все ошибки наследуются от :class:`ClusteringError`; ошибки входных данных
дополнительно являются ``ValueError``, ошибки хода вычислений:
``RuntimeError``.
"""

from __future__ import annotations

from typing import Any


class ClusteringError(Exception):
    """Базовое исключение пакета fgtcluster."""


class InvalidClusterCount(ClusteringError, ValueError):
    """K <= 0, K > R или K не является целым числом."""


class EmptyPointSet(ClusteringError, ValueError):
    """Пустое множество точек (R == 0)."""


class NonPositiveTolerance(ClusteringError, ValueError):
    """Порог сходимости epsilon <= 0 или не конечен."""


class DimensionMismatch(ClusteringError, ValueError):
    """Формы points / starting_clusters не согласованы."""


class NonFiniteInput(ClusteringError, ValueError):
    """NaN или inf во входных координатах."""


class ConvergenceNotReached(ClusteringError, RuntimeError):
    """
    Исчерпан лимит итераций, а изменение ошибки всё ещё больше epsilon.

    Последний (несошедшийся) результат доступен в атрибуте ``result``.
    """

    def __init__(self, message: str, result: Any | None = None) -> None:
        super().__init__(message)
        self.result = result


class ClusteringCancelled(ClusteringError, RuntimeError):
    """Кластеризация прервана по событию отмены или по таймауту."""
