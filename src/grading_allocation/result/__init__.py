from __future__ import annotations

from .aggregator import ScoreAggregator, average_score
from .model import MarkEntry, Result
from .reconciler import ResultReconciler, expected_graders

__all__ = [
    "MarkEntry",
    "Result",
    "ResultReconciler",
    "ScoreAggregator",
    "average_score",
    "expected_graders",
]
