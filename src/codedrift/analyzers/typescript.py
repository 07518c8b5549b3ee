"""TypeScript and JavaScript analyzer."""

from pathlib import Path

from ..dependencies.manifests import parse_package_json
from ..dependencies.registries import NpmRegistry
from ..models import DependencyRecord
from .base import HeuristicAnalyzer, Language
from .heuristic import BRACE, TERNARY, HeuristicProfile, decisions

TYPESCRIPT_PROFILE = HeuristicProfile(
    name="typescript",
    # function foo(  |  foo = (  |  foo(...) {
    function_pattern=(
        r"(?:^|\s)(?:export\s+)?(?:async\s+)?"
        r"(?:function\s+(\w+)"
        r"|(\w+)\s*(?::\s*\w+)?\s*=\s*(?:async\s*)?\("
        r"|(\w+)\s*\([^)]*\)\s*(?::\s*\w+)?\s*\{)"
    ),
    name_groups=(1, 2, 3),
    span_mode=BRACE,
    reject_statement_lines=True,
    complexity_patterns=decisions(
        r"\bif\s*\(",
        r"\bfor\s*(?:await\s*)?\(",
        r"\bwhile\s*\(",
        r"\bcase\s+[^:]+:",
        r"\bcatch\b",
        r"&&",
        r"\|\|",
        r"\?\?",
        r"\?\.(?=[\w\[(])",
        TERNARY,
    ),
    import_patterns=(
        r"""^import\s+.*\s+from\s+['"]([^'"]+)['"]""",
        r"""^import\s+['"]([^'"]+)['"]""",
        r"""\brequire\s*\(\s*['"]([^'"]+)['"]\s*\)""",
    ),
    export_pattern=r"^export\s+(?:default\s+)?(?:async\s+)?(?:function|const|let|var|class)\s+(\w+)",
    comment_prefixes=("//", "/*", "*"),
    extensions=(".ts", ".tsx", ".js", ".jsx"),
    excluded_dirs=("node_modules", "dist", "build", ".next", "coverage"),
    skip_fragments=(".test.", ".spec.", "/__tests__/", "/__mocks__/", ".d.ts"),
)


class TypeScriptAnalyzer(HeuristicAnalyzer):
    language = Language.TYPESCRIPT
    profile = TYPESCRIPT_PROFILE

    def analyze_deps(self, root: Path) -> list[DependencyRecord]:
        return self.resolver.resolve(parse_package_json(root), NpmRegistry)
