"""Analyzer contract shared by every language."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable
from enum import Enum
from pathlib import Path
from typing import Optional

from ..dependencies.resolver import DependencyResolver
from ..logging_config import get_logger
from ..models import BoundaryViolation, DeadFunctionRecord, DependencyRecord, FunctionRecord
from .boundaries import check_imports, parse_rules
from .deadcode import TextCrossReference
from .discovery import is_excluded, is_skipped, read_source, walk_files
from .heuristic import HeuristicProfile, detect_functions, extract_imports, span_complexity

logger = get_logger(__name__)


class Language(str, Enum):
    GO = "go"
    TYPESCRIPT = "typescript"
    PYTHON = "python"
    RUST = "rust"
    JAVA = "java"
    RUBY = "ruby"
    PHP = "php"
    CSHARP = "csharp"
    UNKNOWN = "unknown"


class LanguageAnalyzer(ABC):
    """One ecosystem's view of a source tree.

    File-level methods never raise for a bad file: unreadable files are
    skipped and logged at debug level. Only :meth:`analyze_deps` raises,
    with :class:`~codedrift.exceptions.ManifestError`, when the manifest is
    missing or undecodable.
    """

    language: Language
    profile: HeuristicProfile

    def __init__(self, resolver: Optional[DependencyResolver] = None):
        self.resolver = resolver or DependencyResolver()

    @property
    def extensions(self) -> tuple[str, ...]:
        return self.profile.extensions

    def find_files(self, root: Path, exclude: Iterable[str]) -> list[Path]:
        return walk_files(
            root,
            exclude=set(exclude) | set(self.profile.excluded_dirs),
            extensions=self.extensions,
            skip_fragments=self.profile.skip_fragments,
        )

    def owns(self, path: Path, root: Path, exclude: Iterable[str]) -> bool:
        """Whether discovery would have returned ``path``."""
        if path.suffix not in self.extensions:
            return False
        if is_excluded(path, root, set(exclude) | set(self.profile.excluded_dirs)):
            return False
        return not is_skipped(path, root, self.profile.skip_fragments)

    @abstractmethod
    def analyze_complexity(self, files: list[Path]) -> tuple[list[FunctionRecord], int]:
        """Return per-function complexity and the number of functions seen."""

    @abstractmethod
    def analyze_deps(self, root: Path) -> list[DependencyRecord]:
        """Resolve declared dependencies against the ecosystem registry.

        Raises:
            ManifestError: If no manifest exists or it cannot be parsed
        """

    @abstractmethod
    def extract_imports(self, path: Path, content: str) -> list[tuple[int, str]]:
        """Return (line, import path) pairs for one file."""

    @abstractmethod
    def analyze_dead_code(self, files: list[Path]) -> list[DeadFunctionRecord]:
        """Return public functions that nothing calls."""

    def analyze_imports(
        self, files: list[Path], rules: Iterable[str], root: Path
    ) -> list[BoundaryViolation]:
        parsed = parse_rules(rules)
        if not parsed:
            return []

        violations: list[BoundaryViolation] = []
        for path in files:
            content = read_source(path)
            if content is None:
                continue
            violations.extend(check_imports(path, root, self.extract_imports(path, content), parsed))
        return violations


def profile_functions(path: Path, lines: list[str], profile: HeuristicProfile) -> list[FunctionRecord]:
    """Heuristic function records for one file."""
    records = []
    for span in detect_functions(lines, profile):
        simple = span.name.rsplit(".", 1)[-1]
        if profile.skip_name_prefixes and simple.startswith(profile.skip_name_prefixes):
            continue
        records.append(
            FunctionRecord(
                file=path.name,
                name=span.name,
                line=span.line,
                complexity=span_complexity(lines, span, profile),
            )
        )
    return records


class HeuristicAnalyzer(LanguageAnalyzer):
    """Analyzer driven entirely by a :class:`HeuristicProfile`.

    Subclasses set ``language`` and ``profile`` and implement
    :meth:`analyze_deps`.
    """

    def analyze_complexity(self, files: list[Path]) -> tuple[list[FunctionRecord], int]:
        functions: list[FunctionRecord] = []
        for path in files:
            content = read_source(path)
            if content is None:
                continue
            functions.extend(profile_functions(path, content.splitlines(), self.profile))
        return functions, len(functions)

    def extract_imports(self, path: Path, content: str) -> list[tuple[int, str]]:
        return extract_imports(content.splitlines(), self.profile)

    def analyze_dead_code(self, files: list[Path]) -> list[DeadFunctionRecord]:
        xref = TextCrossReference(self.profile)
        for path in files:
            content = read_source(path)
            if content is None:
                continue
            xref.add(path, content)
        return xref.dead()
