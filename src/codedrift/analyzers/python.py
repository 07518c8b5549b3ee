"""Python analyzer, built on the standard library syntax tree.

Files that ``ast`` rejects (syntax errors, Python 2 sources) are not
dropped: complexity falls back to indentation-based spans and imports and
calls to regex extraction, the same way the other languages are read.
"""

from __future__ import annotations

import ast
from pathlib import Path
from typing import Optional

from ..dependencies.manifests import parse_python_manifest
from ..dependencies.registries import PyPIRegistry
from ..exceptions import FileParseError
from ..logging_config import get_logger
from ..models import DeadFunctionRecord, DependencyRecord, FunctionRecord
from .base import LanguageAnalyzer, Language, profile_functions
from .complexity import module_complexity
from .deadcode import PythonCrossReference
from .discovery import read_source
from .heuristic import INDENT, HeuristicProfile, compiled, decisions, extract_imports

logger = get_logger(__name__)

PYTHON_PROFILE = HeuristicProfile(
    name="python",
    function_pattern=r"^\s*(?:async\s+)?def\s+(\w+)",
    span_mode=INDENT,
    complexity_patterns=decisions(
        r"\bif\b",
        r"\belif\b",
        r"\bfor\b",
        r"\bwhile\b",
        r"\bexcept\b",
        r"\band\b",
        r"\bor\b",
        r"^\s*case\s+(?!_\s*:)",
    ),
    import_patterns=(r"^import\s+([\w.]+)", r"^from\s+(\.*[\w.]*)\s+import\b"),
    comment_prefixes=("#",),
    extensions=(".py",),
    excluded_dirs=("__pycache__", ".venv", "venv", "env", ".tox", ".eggs", ".mypy_cache"),
    skip_fragments=("/test_", "_test.py", "/conftest.py"),
)


def parse_module(path: Path, content: str) -> ast.Module:
    """Parse one file.

    Raises:
        FileParseError: If the source is not valid Python
    """
    try:
        return ast.parse(content, filename=str(path))
    except (SyntaxError, ValueError) as e:
        raise FileParseError(path, "python", str(e))


class PythonAnalyzer(LanguageAnalyzer):
    language = Language.PYTHON
    profile = PYTHON_PROFILE

    def _parse(self, path: Path, content: str) -> Optional[ast.Module]:
        try:
            return parse_module(path, content)
        except FileParseError as e:
            logger.debug(f"Falling back to text heuristics: {e}")
            return None

    def analyze_complexity(self, files: list[Path]) -> tuple[list[FunctionRecord], int]:
        functions: list[FunctionRecord] = []
        for path in files:
            content = read_source(path)
            if content is None:
                continue
            tree = self._parse(path, content)
            if tree is None:
                functions.extend(profile_functions(path, content.splitlines(), self.profile))
                continue
            functions.extend(
                FunctionRecord(path.name, fn.name, fn.line, fn.complexity)
                for fn in module_complexity(tree)
            )
        return functions, len(functions)

    def analyze_deps(self, root: Path) -> list[DependencyRecord]:
        return self.resolver.resolve(parse_python_manifest(root), PyPIRegistry)

    def extract_imports(self, path: Path, content: str) -> list[tuple[int, str]]:
        tree = self._parse(path, content)
        if tree is None:
            return extract_imports(content.splitlines(), self.profile)

        imports: list[tuple[int, str]] = []
        for node in ast.walk(tree):
            if isinstance(node, ast.Import):
                imports.extend((node.lineno, alias.name) for alias in node.names)
            elif isinstance(node, ast.ImportFrom):
                imports.append((node.lineno, "." * node.level + (node.module or "")))
        imports.sort(key=lambda item: item[0])
        return imports

    def analyze_dead_code(self, files: list[Path]) -> list[DeadFunctionRecord]:
        xref = PythonCrossReference()
        call_patterns = [compiled(p) for p in self.profile.call_patterns]
        for path in files:
            content = read_source(path)
            if content is None:
                continue
            tree = self._parse(path, content)
            if tree is not None:
                xref.add(path, tree, content)
                continue
            calls = {m.group(1) for regex in call_patterns for m in regex.finditer(content)}
            xref.add_unparsed(content, calls)
        return xref.dead()
