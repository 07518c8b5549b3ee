"""PHP analyzer."""

from pathlib import Path

from ..dependencies.manifests import parse_composer_json
from ..dependencies.registries import PackagistRegistry
from ..models import DependencyRecord
from .base import HeuristicAnalyzer, Language
from .heuristic import BRACE, TERNARY, HeuristicProfile, decisions

PHP_PROFILE = HeuristicProfile(
    name="php",
    function_pattern=r"(?:public|private|protected|static|abstract|final|\s)*function\s+(\w+)\s*\(",
    span_mode=BRACE,
    reject_statement_lines=True,
    complexity_patterns=decisions(
        r"\bif\b",
        r"\belseif\b",
        r"\bfor\b",
        r"\bforeach\b",
        r"\bwhile\b",
        r"\bcase\b",
        r"\bcatch\b",
        r"&&",
        r"\|\|",
        r"\?\?",
        r"\?->",
        TERNARY,
    ),
    import_patterns=(
        r"^use\s+(\S+);",
        r"""^require_once\s*\(?\s*['"]([^'"]+)['"]""",
        r"""^include\s*\(?\s*['"]([^'"]+)['"]""",
    ),
    export_pattern=r"public\s+(?:static\s+)?function\s+(\w+)",
    call_patterns=(r"\b(\w+)\(", r"->(\w+)\(", r"::(\w+)\("),
    comment_prefixes=("//", "#", "/*", "*"),
    extensions=(".php",),
    excluded_dirs=("vendor", "cache", ".phpunit.cache", "storage"),
    skip_fragments=("Test.php", "Tests.php", "/test/", "/tests/"),
)


class PHPAnalyzer(HeuristicAnalyzer):
    language = Language.PHP
    profile = PHP_PROFILE

    def analyze_deps(self, root: Path) -> list[DependencyRecord]:
        return self.resolver.resolve(parse_composer_json(root), PackagistRegistry)
