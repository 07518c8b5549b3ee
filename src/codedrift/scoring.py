"""Health score aggregation."""

from __future__ import annotations

import threading
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from .config import ThresholdConfig, WeightConfig
from .models import AnalysisResults, HealthScore

MAX_COMPLEXITY_PENALTY = 20.0
MAX_DEPENDENCY_PENALTY = 15.0
BOUNDARY_PENALTY = 10.0
DEAD_CODE_PENALTY = 5.0
COVERAGE_SCORE = 100.0


def round_half_up(value: float, places: str = "0.1") -> float:
    """Decimal rounding, so 91.25 becomes 91.3 rather than banker's 91.2."""
    return float(Decimal(str(value)).quantize(Decimal(places), rounding=ROUND_HALF_UP))


def _clamp(value: float) -> float:
    return max(0.0, min(100.0, value))


class HealthScorer:
    """Turns analysis results into sub-scores and a weighted total.

    Stateless: the previous total is always passed in.
    """

    def __init__(
        self,
        weights: Optional[WeightConfig] = None,
        thresholds: Optional[ThresholdConfig] = None,
    ):
        self.weights = weights or WeightConfig()
        self.thresholds = thresholds or ThresholdConfig()

    def complexity_score(self, results: AnalysisResults) -> float:
        threshold = self.thresholds.max_complexity
        penalty = 0.0
        for fn in results.functions:
            if fn.complexity > threshold:
                excess = fn.complexity - threshold
                penalty += min(excess / threshold * MAX_COMPLEXITY_PENALTY, MAX_COMPLEXITY_PENALTY)
        return _clamp(100.0 - penalty)

    def deps_score(self, results: AnalysisResults) -> float:
        max_days = self.thresholds.max_stale_days
        penalty = 0.0
        for dep in results.dependencies:
            if dep.is_penalized:
                penalty += min(dep.stale_days / max_days * MAX_DEPENDENCY_PENALTY, MAX_DEPENDENCY_PENALTY)
        return _clamp(100.0 - penalty)

    def boundaries_score(self, results: AnalysisResults) -> float:
        return _clamp(100.0 - BOUNDARY_PENALTY * len(results.violations))

    def dead_code_score(self, results: AnalysisResults) -> float:
        return _clamp(100.0 - DEAD_CODE_PENALTY * len(results.dead_code))

    def calculate(self, results: AnalysisResults, previous: Optional[float] = None) -> HealthScore:
        """Score ``results``; delta is 0.0 when there is no previous total."""
        complexity = self.complexity_score(results)
        deps = self.deps_score(results)
        boundaries = self.boundaries_score(results)
        dead_code = self.dead_code_score(results)
        coverage = COVERAGE_SCORE

        w = self.weights
        total = round_half_up(
            complexity * w.complexity
            + deps * w.deps
            + boundaries * w.boundaries
            + dead_code * w.dead_code
            + coverage * w.coverage
        )
        delta = round_half_up(total - previous) if previous is not None else 0.0

        return HealthScore(
            complexity=complexity,
            deps=deps,
            boundaries=boundaries,
            dead_code=dead_code,
            coverage=coverage,
            total=total,
            delta=delta,
        )


class ScoreTracker:
    """Remembers the last total across runs of one session."""

    def __init__(self, scorer: Optional[HealthScorer] = None, previous: Optional[float] = None):
        self.scorer = scorer or HealthScorer()
        self._previous = previous
        self._lock = threading.Lock()

    @property
    def previous(self) -> Optional[float]:
        with self._lock:
            return self._previous

    def update(self, results: AnalysisResults) -> HealthScore:
        with self._lock:
            score = self.scorer.calculate(results, self._previous)
            self._previous = score.total
            return score

    def reset(self) -> None:
        with self._lock:
            self._previous = None
