"""Exception hierarchy for codedrift."""

from .analysis import (
    AnalysisError,
    FileDiscoveryError,
    FileParseError,
    ManifestError,
    ManifestNotFoundError,
    ManifestParseError,
    RegistryError,
    UnsupportedLanguageError,
)
from .base import DriftError
from .config import ConfigurationError, InvalidConfigError

__all__ = [
    "DriftError",
    "AnalysisError",
    "FileDiscoveryError",
    "FileParseError",
    "UnsupportedLanguageError",
    "ManifestError",
    "ManifestNotFoundError",
    "ManifestParseError",
    "RegistryError",
    "ConfigurationError",
    "InvalidConfigError",
]
