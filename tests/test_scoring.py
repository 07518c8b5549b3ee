"""Tests for health scoring."""

import pytest

from codedrift.config import ThresholdConfig, WeightConfig
from codedrift.models import (
    AnalysisResults,
    BoundaryViolation,
    DeadFunctionRecord,
    DependencyRecord,
    DependencyStatus,
    FunctionRecord,
)
from codedrift.scoring import HealthScorer, ScoreTracker, round_half_up


def _results(**kwargs) -> AnalysisResults:
    return AnalysisResults(language="go", **kwargs)


def _dep(status: DependencyStatus, days: int) -> DependencyRecord:
    return DependencyRecord("pkg", "1.0", "2.0", days, status)


class TestRounding:
    def test_half_up(self):
        assert round_half_up(91.25) == 91.3
        assert round_half_up(91.24) == 91.2
        assert round_half_up(-0.05) == -0.1


class TestSubScores:
    """Each metric on its own."""

    def test_clean_project_scores_100(self):
        score = HealthScorer().calculate(_results())
        assert score.total == 100.0
        assert score.coverage == 100.0
        assert score.delta == 0.0

    def test_complexity_penalty_proportional_and_capped(self):
        results = _results(
            functions=[
                FunctionRecord("a.go", "huge", 1, 60),
                FunctionRecord("a.go", "over", 10, 18),
                FunctionRecord("a.go", "fine", 20, 15),
            ]
        )
        assert HealthScorer().complexity_score(results) == pytest.approx(76.0)

    def test_dependency_penalty(self):
        results = _results(
            dependencies=[
                _dep(DependencyStatus.STALE, 45),
                _dep(DependencyStatus.OUTDATED, 400),
                _dep(DependencyStatus.UNKNOWN, 0),
                _dep(DependencyStatus.CURRENT, 0),
            ]
        )
        assert HealthScorer().deps_score(results) == pytest.approx(77.5)

    def test_boundaries_clamped_at_zero(self):
        violations = [BoundaryViolation("a.go", i, "a", "b", "b") for i in range(11)]
        assert HealthScorer().boundaries_score(_results(violations=violations)) == 0.0

    def test_dead_code(self):
        dead = [DeadFunctionRecord("a.go", f"F{i}", i) for i in range(3)]
        assert HealthScorer().dead_code_score(_results(dead_code=dead)) == 85.0

    def test_custom_threshold(self):
        scorer = HealthScorer(thresholds=ThresholdConfig(max_complexity=10))
        results = _results(functions=[FunctionRecord("a.go", "f", 1, 15)])
        assert scorer.complexity_score(results) == pytest.approx(90.0)


class TestTotal:
    def test_weighted_total(self):
        results = _results(functions=[FunctionRecord("a.go", "huge", 1, 60)])
        assert HealthScorer().calculate(results).total == 94.0

    def test_custom_weights(self):
        weights = WeightConfig(complexity=1.0, deps=0.0, boundaries=0.0, dead_code=0.0, coverage=0.0)
        results = _results(functions=[FunctionRecord("a.go", "huge", 1, 60)])
        assert HealthScorer(weights=weights).calculate(results).total == 80.0

    def test_delta_against_previous(self):
        results = _results(functions=[FunctionRecord("a.go", "huge", 1, 60)])
        assert HealthScorer().calculate(results, previous=90.0).delta == 4.0
        assert HealthScorer().calculate(results, previous=96.5).delta == -2.5

    def test_to_dict(self):
        data = HealthScorer().calculate(_results()).to_dict()
        assert set(data) == {"complexity", "deps", "boundaries", "dead_code", "coverage", "total", "delta"}


class TestScoreTracker:
    """Delta tracking across runs."""

    def test_first_update_has_no_delta(self):
        tracker = ScoreTracker()
        assert tracker.previous is None
        score = tracker.update(_results())
        assert score.delta == 0.0
        assert tracker.previous == 100.0

    def test_delta_follows_last_total(self):
        tracker = ScoreTracker()
        tracker.update(_results())
        dead = [DeadFunctionRecord("a.go", "F", 1), DeadFunctionRecord("a.go", "G", 5)]
        worse = tracker.update(_results(dead_code=dead))
        assert worse.total == 98.5
        assert worse.delta == -1.5

    def test_seeded_previous(self):
        tracker = ScoreTracker(previous=50.0)
        assert tracker.update(_results()).delta == 50.0

    def test_reset_forgets_previous(self):
        tracker = ScoreTracker()
        tracker.update(_results())
        tracker.reset()
        assert tracker.previous is None
        assert tracker.update(_results()).delta == 0.0
