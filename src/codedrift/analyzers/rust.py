"""Rust analyzer."""

from pathlib import Path

from ..dependencies.manifests import parse_cargo_toml
from ..dependencies.registries import CratesRegistry
from ..models import DependencyRecord
from .base import HeuristicAnalyzer, Language
from .heuristic import BRACE, HeuristicProfile, decisions

RUST_PROFILE = HeuristicProfile(
    name="rust",
    function_pattern=r"(?:pub(?:\([^)]*\))?\s+)?(?:const\s+)?(?:async\s+)?(?:unsafe\s+)?fn\s+(\w+)",
    span_mode=BRACE,
    reject_statement_lines=True,
    complexity_patterns=decisions(
        r"\bif\b",
        r"\bfor\b",
        r"\bwhile\b",
        r"\bloop\b",
        # match arm, except the catch-all `_ =>`
        r"^(?!\s*_\s*=>).*=>",
        r"&&",
        r"\|\|",
        r"\?[;.)]",
    ),
    import_patterns=(
        r"^use\s+(\S+);",
        r"^pub\s+use\s+(\S+);",
        r"^extern\s+crate\s+(\w+);",
    ),
    export_pattern=r"^pub(?:\([^)]*\))?\s+(?:const\s+)?(?:async\s+)?(?:unsafe\s+)?fn\s+(\w+)",
    comment_prefixes=("//", "/*"),
    extensions=(".rs",),
    excluded_dirs=("target",),
)


class RustAnalyzer(HeuristicAnalyzer):
    language = Language.RUST
    profile = RUST_PROFILE

    def analyze_deps(self, root: Path) -> list[DependencyRecord]:
        return self.resolver.resolve(parse_cargo_toml(root), CratesRegistry)
