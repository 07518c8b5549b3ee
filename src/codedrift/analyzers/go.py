"""Go analyzer."""

from pathlib import Path

from ..dependencies.manifests import parse_go_mod
from ..dependencies.registries import GoProxyRegistry
from ..models import DependencyRecord
from .base import HeuristicAnalyzer, Language
from .heuristic import BRACE, HeuristicProfile, decisions

GO_PROFILE = HeuristicProfile(
    name="go",
    # optional receiver: (s *Server), (Server), (s *Stack[T])
    function_pattern=(
        r"^func\s+(?:\(\s*(?:\w+\s+)?\*?\s*(\w+)(?:\[[^\]]*\])?\s*\)\s*)?(\w+)\s*[\[(]"
    ),
    name_groups=(2,),
    qualifier_group=1,
    span_mode=BRACE,
    complexity_patterns=decisions(r"\bif\b", r"\bfor\b", r"\bcase\b", r"&&", r"\|\|"),
    import_patterns=(r'^import\s+(?:[\w.]+\s+)?"([^"]+)"',),
    import_block_open=r"^import\s*\($",
    import_block_item=r'^(?:[\w.]+\s+)?"([^"]+)"',
    export_pattern=r"^func\s+(?:\([^)]*\)\s*)?([A-Z]\w*)\s*[\[(]",
    comment_prefixes=("//", "/*"),
    extensions=(".go",),
    skip_fragments=("_test.go",),
)


class GoAnalyzer(HeuristicAnalyzer):
    language = Language.GO
    profile = GO_PROFILE

    def analyze_deps(self, root: Path) -> list[DependencyRecord]:
        return self.resolver.resolve(parse_go_mod(root), GoProxyRegistry)
