"""Java analyzer."""

from pathlib import Path

from ..dependencies.manifests import parse_java_manifest
from ..dependencies.registries import MavenCentralRegistry
from ..models import DependencyRecord
from .base import HeuristicAnalyzer, Language
from .heuristic import BRACE, NOT_A_TYPE, TERNARY, HeuristicProfile, decisions

JAVA_PROFILE = HeuristicProfile(
    name="java",
    function_pattern=(
        r"(?:public|private|protected|static|final|synchronized|\s)+"
        + NOT_A_TYPE
        + r"[\w<>\[\]]+\s+(\w+)\s*\("
    ),
    span_mode=BRACE,
    reject_statement_lines=True,
    complexity_patterns=decisions(
        r"\bif\b",
        r"\bfor\b",
        r"\bwhile\b",
        r"\bcase\b",
        r"\bcatch\b",
        r"&&",
        r"\|\|",
        TERNARY,
    ),
    import_patterns=(r"^import\s+(?:static\s+)?(\S+);",),
    export_pattern=r"public\s+(?:static\s+)?(?:final\s+)?(?:[\w<>\[\]]+\s+)?(\w+)\s*\(",
    comment_prefixes=("//", "/*", "*"),
    extensions=(".java",),
    excluded_dirs=("target", "build", ".gradle", ".idea", "bin", "out"),
    skip_fragments=("Test.java", "Tests.java", "IT.java"),
)


class JavaAnalyzer(HeuristicAnalyzer):
    language = Language.JAVA
    profile = JAVA_PROFILE

    def analyze_deps(self, root: Path) -> list[DependencyRecord]:
        return self.resolver.resolve(parse_java_manifest(root), MavenCentralRegistry)
