"""Per-language analyzers behind one contract."""

from .base import HeuristicAnalyzer, Language, LanguageAnalyzer
from .boundaries import BoundaryRule
from .heuristic import HeuristicProfile
from .languages import create_analyzer, detect_language, parse_language

__all__ = [
    "BoundaryRule",
    "HeuristicAnalyzer",
    "HeuristicProfile",
    "Language",
    "LanguageAnalyzer",
    "create_analyzer",
    "detect_language",
    "parse_language",
]
