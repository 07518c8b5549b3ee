"""C# analyzer."""

from pathlib import Path

from ..dependencies.manifests import parse_csproj
from ..dependencies.registries import NuGetRegistry
from ..models import DependencyRecord
from .base import HeuristicAnalyzer, Language
from .heuristic import BRACE, NOT_A_TYPE, TERNARY, HeuristicProfile, decisions

CSHARP_PROFILE = HeuristicProfile(
    name="csharp",
    function_pattern=(
        r"(?:public|private|protected|internal|static|async|virtual|override|abstract|sealed|\s)+"
        + NOT_A_TYPE
        + r"[\w<>\[\]?]+\s+(\w+)\s*\("
    ),
    span_mode=BRACE,
    reject_statement_lines=True,
    complexity_patterns=decisions(
        r"\bif\b",
        r"\bfor\b",
        r"\bforeach\b",
        r"\bwhile\b",
        r"\bcase\b",
        r"\bcatch\b",
        r"&&",
        r"\|\|",
        r"\?\?",
        r"\?\.",
        TERNARY,
    ),
    import_patterns=(r"^using\s+static\s+([^\s;]+);", r"^using\s+([\w.]+);"),
    export_pattern=(
        r"public\s+(?:static\s+)?(?:async\s+)?(?:virtual\s+)?(?:override\s+)?"
        r"(?:[\w<>\[\]?]+\s+)?(\w+)\s*\("
    ),
    call_patterns=(r"\b(\w+)\(", r"\.(\w+)\("),
    comment_prefixes=("//", "/*", "*"),
    extensions=(".cs",),
    excluded_dirs=("bin", "obj", ".vs", "packages", "TestResults"),
    skip_fragments=("Tests.cs", "Test.cs", ".Tests/", ".Test/"),
)


class CSharpAnalyzer(HeuristicAnalyzer):
    language = Language.CSHARP
    profile = CSHARP_PROFILE

    def analyze_deps(self, root: Path) -> list[DependencyRecord]:
        return self.resolver.resolve(parse_csproj(root), NuGetRegistry)
