"""Analysis orchestration: one full run or one changed file at a time."""

from __future__ import annotations

import os
import threading
from collections.abc import Callable
from pathlib import Path
from typing import Optional, TypeVar, Union

from .analyzers import LanguageAnalyzer, create_analyzer, detect_language, parse_language
from .config import DriftConfig
from .dependencies import DependencyResolver
from .exceptions import FileDiscoveryError
from .logging_config import get_logger
from .models import AnalysisResults

logger = get_logger(__name__)

T = TypeVar("T")


class DriftEngine:
    """Runs an analyzer over the configured root.

    Runs are serialized: a watcher calling :meth:`handle_change` while a
    full run is in progress waits for it.

    Args:
        config: Run configuration
        analyzer: Analyzer to use instead of detecting one
        resolver: Dependency resolver handed to the created analyzer
    """

    def __init__(
        self,
        config: DriftConfig,
        analyzer: Optional[LanguageAnalyzer] = None,
        resolver: Optional[DependencyResolver] = None,
    ):
        self.config = config
        self.root = config.root_path
        self._lock = threading.Lock()

        if analyzer is not None:
            self.language = analyzer.language
            self.analyzer = analyzer
        else:
            if config.language:
                self.language = parse_language(config.language)
            else:
                self.language = detect_language(self.root)
            self.analyzer = create_analyzer(
                self.language, resolver or DependencyResolver.from_config(config)
            )
        logger.debug(f"Using {type(self.analyzer).__name__} for {self.root}")

    @property
    def extensions(self) -> tuple[str, ...]:
        """File suffixes the analyzer owns, for filtering watcher events."""
        return self.analyzer.extensions

    def run(self) -> AnalysisResults:
        """Full analysis of the tree.

        Raises:
            FileDiscoveryError: If the root is not a readable directory
        """
        with self._lock:
            return self._run()

    def _run(self) -> AnalysisResults:
        if not self.root.is_dir():
            raise FileDiscoveryError(self.root, "not a directory")
        if not os.access(self.root, os.R_OK | os.X_OK):
            raise FileDiscoveryError(self.root, "permission denied")

        files = self.analyzer.find_files(self.root, self.config.exclude)
        results = AnalysisResults(language=self.language.value, file_count=len(files))

        functions, total = self._step(
            "complexity", lambda: self.analyzer.analyze_complexity(files), ([], 0)
        )
        results.functions = list(functions)
        results.function_count = total
        results.dependencies = self._step(
            "dependencies", lambda: self.analyzer.analyze_deps(self.root), []
        )
        results.violations = self._step(
            "boundaries",
            lambda: self.analyzer.analyze_imports(files, self.config.boundaries, self.root),
            [],
        )
        results.dead_code = self._step(
            "dead code", lambda: self.analyzer.analyze_dead_code(files), []
        )
        results.sort_functions()

        logger.info(
            f"Analyzed {results.file_count} files: {results.function_count} functions, "
            f"{len(results.dependencies)} dependencies, {len(results.violations)} violations, "
            f"{len(results.dead_code)} dead functions"
        )
        return results

    def run_single(self, path: Union[str, Path]) -> AnalysisResults:
        """Complexity of one changed file.

        Returns an empty aggregate for files discovery would not pick up:
        foreign extensions, excluded directories, tests, missing files.
        """
        path = Path(path)
        if not path.is_absolute():
            path = self.root / path
        path = path.resolve()

        with self._lock:
            results = AnalysisResults(language=self.language.value)
            if not path.is_file() or not self.analyzer.owns(path, self.root, self.config.exclude):
                logger.debug(f"Ignoring change to {path}")
                return results

            functions, total = self._step(
                "complexity", lambda: self.analyzer.analyze_complexity([path]), ([], 0)
            )
            results.file_count = 1
            results.functions = list(functions)
            results.function_count = total
            results.sort_functions()
            return results

    def handle_change(self, path: Union[str, Path], incremental: bool = False) -> AnalysisResults:
        """Re-run after a file change reported by an external watcher."""
        if incremental:
            return self.run_single(path)
        return self.run()

    def _step(self, name: str, step: Callable[[], T], empty: T) -> T:
        try:
            return step()
        except Exception as e:
            logger.warning(f"Skipping {name}: {e}")
            return empty
