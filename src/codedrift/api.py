"""Public API for codedrift.

Example:
    >>> from codedrift import analyze
    >>> results, score = analyze("/path/to/service")
    >>> score.total
    87.5

    >>> # Compare with an earlier total and tighten the complexity threshold
    >>> results, score = analyze(
    ...     "/path/to/service",
    ...     previous=87.5,
    ...     thresholds={"max_complexity": 10},
    ... )
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

from .config import DriftConfig, load_config
from .engine import DriftEngine
from .logging_config import get_logger
from .models import AnalysisResults, HealthScore
from .scoring import HealthScorer

logger = get_logger(__name__)


def analyze(
    path: str = ".",
    config_file: Optional[Path] = None,
    previous: Optional[float] = None,
    **overrides: Any,
) -> tuple[AnalysisResults, HealthScore]:
    """Run one full analysis and score it.

    Args:
        path: Project root (default: current directory)
        config_file: Optional explicit config file path
        previous: Earlier total for the score delta
        **overrides: Configuration overrides (language="go", boundaries=[...], ...)

    Returns:
        (AnalysisResults, HealthScore)

    Raises:
        ConfigurationError: If configuration is invalid
        FileDiscoveryError: If ``path`` is not a readable directory
    """
    config = load_config(config_file, root=path, **overrides)
    return analyze_with_config(config, previous=previous)


def analyze_with_config(
    config: DriftConfig, previous: Optional[float] = None
) -> tuple[AnalysisResults, HealthScore]:
    results = DriftEngine(config).run()
    score = HealthScorer(config.weights, config.thresholds).calculate(results, previous)
    logger.info(f"Health score {score.total} (delta {score.delta:+.1f})")
    return results, score
