"""Cross-referencing of declared public functions against call sites.

Two strategies: a text one driven by a profile's export and call patterns,
and an exact one over Python syntax trees. Both report findings in
declaration order.
"""

from __future__ import annotations

import ast
from dataclasses import dataclass
from pathlib import Path

from ..models import DeadFunctionRecord
from .complexity import iter_functions
from .heuristic import HeuristicProfile, compiled, is_comment

ENTRY_POINTS = frozenset({"main", "init", "Main", "constructor", "initialize", "__init__"})
ENTRY_PREFIXES = ("test", "Test", "Benchmark", "Example")


def is_entry_point(name: str) -> bool:
    return name in ENTRY_POINTS or name.startswith(ENTRY_PREFIXES)


@dataclass(frozen=True)
class Declaration:
    file: str
    name: str
    line: int


class TextCrossReference:
    """Collects declarations and call sites file by file, then reports.

    Call identifiers come from the profile's call patterns. A declaration's
    own ``name(`` is not a call. As a safety net, a name whose raw text
    appears more than once across all sources counts as referenced.
    """

    def __init__(self, profile: HeuristicProfile):
        self.profile = profile
        self._export = compiled(profile.export_pattern) if profile.export_pattern else None
        self._calls = [compiled(p) for p in profile.call_patterns]
        self.declared: dict[str, Declaration] = {}
        self.called: set[str] = set()
        self._sources: list[str] = []

    def add(self, path: Path, content: str) -> None:
        self._sources.append(content)
        for idx, line in enumerate(content.splitlines()):
            if is_comment(line, self.profile.comment_prefixes):
                continue
            stripped = line.strip()

            declared_at = None
            if self._export is not None:
                match = self._export.search(stripped)
                if match and match.group(1):
                    name = match.group(1)
                    declared_at = match.start(1)
                    if not is_entry_point(name) and name not in self.declared:
                        self.declared[name] = Declaration(path.name, name, idx + 1)

            for regex in self._calls:
                for call in regex.finditer(stripped):
                    if call.start(1) == declared_at:
                        continue
                    self.called.add(call.group(1))

    def dead(self) -> list[DeadFunctionRecord]:
        corpus = "\n".join(self._sources)
        return [
            DeadFunctionRecord(decl.file, decl.name, decl.line)
            for decl in self.declared.values()
            if decl.name not in self.called and corpus.count(decl.name) <= 1
        ]


class PythonCrossReference:
    """Exact dead-code detection over parsed Python modules.

    Declared: public module functions and methods (``Class.method``),
    excluding ``main`` and ``test*``. Called: every ``ast.Call`` target,
    by bare name or attribute. A declaration is dead when neither its
    qualified nor its simple name is called and its simple name appears
    at most once across all sources. References that are not calls
    (callbacks, dict dispatch, properties) are caught by that count.
    """

    def __init__(self) -> None:
        self.declared: dict[str, Declaration] = {}
        self.called: set[str] = set()
        self._sources: list[str] = []

    def add(self, path: Path, tree: ast.Module, source: str) -> None:
        self._sources.append(source)
        for qualified, node in iter_functions(tree):
            simple = node.name
            if simple.startswith("_") or simple == "main" or simple.startswith("test"):
                continue
            if qualified not in self.declared:
                self.declared[qualified] = Declaration(path.name, qualified, node.lineno)

        for node in ast.walk(tree):
            if not isinstance(node, ast.Call):
                continue
            func = node.func
            if isinstance(func, ast.Name):
                self.called.add(func.id)
            elif isinstance(func, ast.Attribute):
                self.called.add(func.attr)
                if isinstance(func.value, ast.Name):
                    self.called.add(f"{func.value.id}.{func.attr}")

    def add_unparsed(self, source: str, calls: set[str]) -> None:
        """Record a file ``ast`` rejected: its text and regex-found calls."""
        self._sources.append(source)
        self.called.update(calls)

    def dead(self) -> list[DeadFunctionRecord]:
        corpus = "\n".join(self._sources)
        dead = []
        for qualified, decl in self.declared.items():
            simple = qualified.rsplit(".", 1)[-1]
            if qualified in self.called or simple in self.called:
                continue
            if corpus.count(simple) > 1:
                continue
            dead.append(DeadFunctionRecord(decl.file, decl.name, decl.line))
        return dead
