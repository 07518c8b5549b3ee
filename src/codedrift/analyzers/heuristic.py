"""Text heuristics shared by the regex-driven analyzers.

A language is described by a :class:`HeuristicProfile`: how a function
signature looks, how its body ends, which tokens are decision points, and
how imports, exports and calls are spelled. Nothing here parses source.
Braces inside strings, keywords inside comments at the end of a line and
similar cases are miscounted, which is accepted.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

BRACE = "brace"
INDENT = "indent"
KEYWORD = "keyword"

ANONYMOUS = "anonymous"

# `cond ? a : b`; the `?` must be followed by whitespace, so `?.`, `??` and `x?: T` are not counted
TERNARY = r"(?<!\?)\?\s[^:;?]*:"

# `throw new Foo(` and `return new Foo(` are calls, not typed signatures
NOT_A_TYPE = r"(?!(?:new|throw|return|else)\b)"

# Control-flow keywords that signature patterns pick up as names.
RESERVED_NAMES = frozenset(
    {
        "if",
        "else",
        "elif",
        "for",
        "foreach",
        "while",
        "do",
        "switch",
        "case",
        "catch",
        "try",
        "return",
        "new",
        "throw",
        "typeof",
        "await",
        "function",
        "using",
        "lock",
        "fixed",
        "sizeof",
        "synchronized",
        "match",
    }
)


@dataclass(frozen=True)
class HeuristicProfile:
    """Everything the heuristic analyzer needs to know about a language.

    Attributes:
        name: Language tag the profile belongs to
        function_pattern: Signature regex, searched on each raw line
        name_groups: Capture groups tried in order for the function name
        span_mode: BRACE, INDENT or KEYWORD
        complexity_patterns: (regex, weight) pairs; each occurrence adds weight
        import_patterns: Regexes over stripped lines; group 1 is the path
        import_block_open: Regex opening a multi-line import block
        import_block_item: Regex for one entry inside that block
        export_pattern: Regex over stripped lines; group 1 is the public name
        call_patterns: Regexes whose group 1 is a called identifier
        comment_prefixes: Prefixes that mark a whole line as comment
        reserved_names: Captured names that are not functions
        reject_statement_lines: Drop signatures on lines ending in ";"
        skip_name_prefixes: Functions whose name starts with these are not listed
        qualifier_group: Capture group holding a receiver or "self." qualifier
        qualifier_separator: Joins qualifier and name
        extensions: File suffixes owned by the language
        excluded_dirs: Directory basenames skipped in addition to the config
        skip_fragments: Path fragments (root-relative, "/"-prefixed) that skip a file
    """

    name: str
    function_pattern: str
    name_groups: tuple[int, ...] = (1,)
    span_mode: str = BRACE
    complexity_patterns: tuple[tuple[str, int], ...] = ()
    import_patterns: tuple[str, ...] = ()
    import_block_open: Optional[str] = None
    import_block_item: Optional[str] = None
    export_pattern: Optional[str] = None
    call_patterns: tuple[str, ...] = (r"\b(\w+)\(",)
    comment_prefixes: tuple[str, ...] = ("//", "/*")
    reserved_names: frozenset[str] = RESERVED_NAMES
    reject_statement_lines: bool = False
    skip_name_prefixes: tuple[str, ...] = ()
    qualifier_group: Optional[int] = None
    qualifier_separator: str = "."
    extensions: tuple[str, ...] = ()
    excluded_dirs: tuple[str, ...] = ()
    skip_fragments: tuple[str, ...] = ()


def decisions(*patterns: str) -> tuple[tuple[str, int], ...]:
    """Weight-1 complexity patterns."""
    return tuple((pattern, 1) for pattern in patterns)


@lru_cache(maxsize=None)
def compiled(pattern: str) -> re.Pattern[str]:
    return re.compile(pattern)


@dataclass(frozen=True)
class FunctionSpan:
    """A detected function: name and inclusive 0-based line range."""

    name: str
    start: int
    end: int

    @property
    def line(self) -> int:
        return self.start + 1


def indent_of(line: str) -> int:
    expanded = line.expandtabs(4)
    return len(expanded) - len(expanded.lstrip())


def is_comment(line: str, prefixes: tuple[str, ...]) -> bool:
    return line.strip().startswith(prefixes)


# ── Span trackers ──────────────────────────────────────────────────


class BraceSpan:
    """Ends on the line where brace depth returns to zero after opening."""

    def find_end(self, lines: list[str], start: int) -> int:
        depth = 0
        opened = False
        for i in range(start, len(lines)):
            for ch in lines[i]:
                if ch == "{":
                    depth += 1
                    opened = True
                elif ch == "}":
                    depth -= 1
                    if opened and depth <= 0:
                        return i
        return len(lines) - 1


class IndentSpan:
    """Ends before the first later line indented no deeper than the signature."""

    def find_end(self, lines: list[str], start: int) -> int:
        base = indent_of(lines[start])
        end = start
        for i in range(start + 1, len(lines)):
            stripped = lines[i].strip()
            if not stripped:
                continue
            # closing brackets of a multi-line signature sit at the def's indent
            if indent_of(lines[i]) <= base and not stripped.startswith((")", "]", "}")):
                break
            end = i
        return end


_RUBY_ONE_LINER = re.compile(r"^\s*def\s.*;\s*end\s*$")
_RUBY_ENDLESS = re.compile(r"^\s*def\s+(?:self\.)?\w+[?!]?\s*(?:\([^)]*\))?\s*=(?!=)")
_RUBY_OPENER = re.compile(r"\b(?:def|class|module|do|begin)\b")
_RUBY_CONDITIONAL = re.compile(r"^(?:if|unless|while|until|for|case)\b")
_RUBY_END = re.compile(r"^end\b")
_RUBY_TRAILING_END = re.compile(r"\bend\b")


class KeywordSpan:
    """Ruby-style ``def ... end`` tracking.

    Depth starts at 1 for the ``def``. Nested block openers and leading
    conditionals open a level, ``end`` closes one. Modifier conditionals
    (``return if x``) and one-line forms (``if x then y end``) open nothing.
    """

    def find_end(self, lines: list[str], start: int) -> int:
        signature = lines[start]
        if _RUBY_ONE_LINER.match(signature) or _RUBY_ENDLESS.match(signature):
            return start

        base = indent_of(signature)
        depth = 1
        for i in range(start + 1, len(lines)):
            stripped = lines[i].strip()
            if not stripped or stripped.startswith("#"):
                continue
            indent = indent_of(lines[i])

            if _RUBY_END.match(stripped):
                depth -= 1
                if indent <= base and depth <= 0:
                    return i
            elif _RUBY_CONDITIONAL.match(stripped):
                if not stripped.endswith("end") and " then " not in stripped:
                    depth += 1
            elif (
                indent > base
                and _RUBY_OPENER.search(stripped)
                and not _RUBY_TRAILING_END.search(stripped)
            ):
                depth += 1
        return len(lines) - 1


SPAN_TRACKERS = {
    BRACE: BraceSpan(),
    INDENT: IndentSpan(),
    KEYWORD: KeywordSpan(),
}


# ── Detection ──────────────────────────────────────────────────────


def detect_functions(lines: list[str], profile: HeuristicProfile) -> list[FunctionSpan]:
    """Find function signatures and the line range of each body."""
    pattern = compiled(profile.function_pattern)
    tracker = SPAN_TRACKERS[profile.span_mode]
    spans: list[FunctionSpan] = []

    for idx, line in enumerate(lines):
        if is_comment(line, profile.comment_prefixes):
            continue
        match = pattern.search(line)
        if not match:
            continue
        if profile.reject_statement_lines and line.rstrip().endswith(";"):
            continue

        name = _first_group(match, profile.name_groups) or ANONYMOUS
        if name in profile.reserved_names:
            continue

        if profile.qualifier_group is not None:
            qualifier = match.group(profile.qualifier_group)
            if qualifier:
                name = f"{qualifier}{profile.qualifier_separator}{name}"

        spans.append(FunctionSpan(name, idx, tracker.find_end(lines, idx)))

    return spans


def _first_group(match: re.Match[str], groups: tuple[int, ...]) -> Optional[str]:
    for group in groups:
        value = match.group(group)
        if value:
            return value
    return None


def span_complexity(lines: list[str], span: FunctionSpan, profile: HeuristicProfile) -> int:
    """1 plus weighted decision-point occurrences over the span.

    Nested inline functions inside the span are counted with it.
    """
    patterns = [(compiled(p), weight) for p, weight in profile.complexity_patterns]
    complexity = 1
    for line in lines[span.start : span.end + 1]:
        if is_comment(line, profile.comment_prefixes):
            continue
        for regex, weight in patterns:
            complexity += weight * len(regex.findall(line))
    return complexity


def extract_imports(lines: list[str], profile: HeuristicProfile) -> list[tuple[int, str]]:
    """Return (1-based line, import path) pairs."""
    patterns = [compiled(p) for p in profile.import_patterns]
    block_open = compiled(profile.import_block_open) if profile.import_block_open else None
    block_item = compiled(profile.import_block_item) if profile.import_block_item else None

    imports: list[tuple[int, str]] = []
    in_block = False
    for idx, line in enumerate(lines):
        stripped = line.strip()

        if in_block:
            if stripped.startswith(")"):
                in_block = False
                continue
            item = block_item.search(stripped) if block_item else None
            if item:
                imports.append((idx + 1, item.group(1)))
            continue

        if block_open is not None and block_open.search(stripped):
            in_block = True
            continue

        for regex in patterns:
            match = regex.search(stripped)
            if match:
                imports.append((idx + 1, match.group(1)))

    return imports
