"""Language detection and the analyzer factory."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from ..dependencies.manifests import find_csproj
from ..dependencies.resolver import DependencyResolver
from ..exceptions import UnsupportedLanguageError
from ..logging_config import get_logger
from .base import Language, LanguageAnalyzer
from .csharp import CSharpAnalyzer
from .go import GoAnalyzer
from .java import JavaAnalyzer
from .php import PHPAnalyzer
from .python import PythonAnalyzer
from .ruby import RubyAnalyzer
from .rust import RustAnalyzer
from .typescript import TypeScriptAnalyzer

logger = get_logger(__name__)

# First match wins.
MANIFEST_MARKERS: list[tuple[str, Language]] = [
    ("go.mod", Language.GO),
    ("package.json", Language.TYPESCRIPT),
    ("pyproject.toml", Language.PYTHON),
    ("requirements.txt", Language.PYTHON),
    ("Cargo.toml", Language.RUST),
    ("pom.xml", Language.JAVA),
    ("build.gradle", Language.JAVA),
    ("Gemfile", Language.RUBY),
    ("composer.json", Language.PHP),
]

ANALYZERS: dict[Language, type[LanguageAnalyzer]] = {
    Language.GO: GoAnalyzer,
    Language.TYPESCRIPT: TypeScriptAnalyzer,
    Language.PYTHON: PythonAnalyzer,
    Language.RUST: RustAnalyzer,
    Language.JAVA: JavaAnalyzer,
    Language.RUBY: RubyAnalyzer,
    Language.PHP: PHPAnalyzer,
    Language.CSHARP: CSharpAnalyzer,
    Language.UNKNOWN: GoAnalyzer,
}

_missing = set(Language) - set(ANALYZERS)
if _missing:
    raise RuntimeError(f"No analyzer registered for: {sorted(lang.value for lang in _missing)}")

_ALIASES = {
    "golang": Language.GO,
    "ts": Language.TYPESCRIPT,
    "javascript": Language.TYPESCRIPT,
    "js": Language.TYPESCRIPT,
    "py": Language.PYTHON,
    "rs": Language.RUST,
    "rb": Language.RUBY,
    "cs": Language.CSHARP,
    "c#": Language.CSHARP,
    "dotnet": Language.CSHARP,
}


def detect_language(root: Path) -> Language:
    """Infer the ecosystem from the manifests present in ``root``."""
    for marker, language in MANIFEST_MARKERS:
        if (root / marker).is_file():
            logger.info(f"Detected {language.value} from {marker}")
            return language
    if find_csproj(root):
        logger.info("Detected csharp from *.csproj")
        return Language.CSHARP
    logger.info(f"No manifest found in {root}, language unknown")
    return Language.UNKNOWN


def parse_language(name: str) -> Language:
    """Map a configured language name (or alias) to a Language.

    Raises:
        UnsupportedLanguageError: If the name is not recognised
    """
    key = name.strip().lower()
    if key in _ALIASES:
        return _ALIASES[key]
    try:
        return Language(key)
    except ValueError:
        supported = [lang.value for lang in Language if lang is not Language.UNKNOWN]
        raise UnsupportedLanguageError(name, supported)


def create_analyzer(
    language: Language, resolver: Optional[DependencyResolver] = None
) -> LanguageAnalyzer:
    """Build the analyzer for ``language``; UNKNOWN gets the Go analyzer."""
    return ANALYZERS[language](resolver=resolver)
