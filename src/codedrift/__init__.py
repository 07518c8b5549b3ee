"""
codedrift - codebase health drift across eight ecosystems.

Scores a source tree on per-function cyclomatic complexity, dependency
freshness, import-boundary violations and unreferenced public functions,
and combines them into one weighted 0-100 health score.
"""

__version__ = "0.1.0"

from .api import analyze
from .config import DriftConfig, load_config
from .engine import DriftEngine
from .models import AnalysisResults, HealthScore
from .scoring import HealthScorer, ScoreTracker

__all__ = [
    "analyze",  # One-shot entry point
    "DriftEngine",  # Full and incremental runs
    "DriftConfig",
    "load_config",
    "AnalysisResults",
    "HealthScore",
    "HealthScorer",
    "ScoreTracker",
]
