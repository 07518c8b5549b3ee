"""Ruby analyzer."""

from pathlib import Path

from ..dependencies.manifests import parse_gemfile
from ..dependencies.registries import RubyGemsRegistry
from ..models import DependencyRecord
from .base import HeuristicAnalyzer, Language
from .heuristic import KEYWORD, TERNARY, HeuristicProfile, decisions

RUBY_PROFILE = HeuristicProfile(
    name="ruby",
    function_pattern=r"^(\s*)def\s+(self\.)?(\w+[?!=]?)",
    name_groups=(3,),
    qualifier_group=2,
    qualifier_separator="",
    span_mode=KEYWORD,
    skip_name_prefixes=("_",),
    complexity_patterns=decisions(
        r"\bif\b",
        r"\belsif\b",
        r"\bunless\b",
        r"\bfor\b",
        r"\bwhile\b",
        r"\buntil\b",
        r"\bwhen\b",
        r"\brescue\b",
        r"&&",
        r"\|\|",
        r"\band\b",
        r"\bor\b",
        r"&\.",
        TERNARY,
    ),
    import_patterns=(
        r"""^require\s+['"]([^'"]+)['"]""",
        r"""^require_relative\s+['"]([^'"]+)['"]""",
    ),
    export_pattern=r"^def\s+(?:self\.)?(\w+[?!=]?)",
    call_patterns=(r"\b(\w+[?!]?)\(", r"\.(\w+[?!]?)"),
    comment_prefixes=("#",),
    extensions=(".rb",),
    excluded_dirs=(".bundle", "vendor", "tmp", ".ruby-lsp"),
    skip_fragments=("_test.rb", "_spec.rb", "/spec/", "/test/"),
)


class RubyAnalyzer(HeuristicAnalyzer):
    language = Language.RUBY
    profile = RUBY_PROFILE

    def analyze_deps(self, root: Path) -> list[DependencyRecord]:
        return self.resolver.resolve(parse_gemfile(root), RubyGemsRegistry)
