"""Import boundary rules of the form ``"from -> to"``."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ..logging_config import get_logger
from ..models import BoundaryViolation

logger = get_logger(__name__)


@dataclass(frozen=True)
class BoundaryRule:
    """Code under ``source`` must not import anything containing ``target``."""

    source: str
    target: str

    @classmethod
    def parse(cls, rule: str) -> Optional["BoundaryRule"]:
        """Parse ``"from -> to"``; returns None for malformed rules."""
        parts = [part.strip() for part in rule.split("->")]
        if len(parts) != 2 or not parts[0] or not parts[1]:
            logger.warning(f"Ignoring malformed boundary rule: {rule!r}")
            return None
        return cls(parts[0], parts[1])

    def matches_path(self, relative_dir: str) -> bool:
        # raw prefix: "pkg/apiv2" is inside "pkg/api"
        return relative_dir == self.source or relative_dir.startswith(self.source)

    def forbids(self, import_path: str) -> bool:
        return self.target in import_path


def parse_rules(rules: Iterable[str]) -> list[BoundaryRule]:
    parsed = (BoundaryRule.parse(rule) for rule in rules)
    return [rule for rule in parsed if rule is not None]


def relative_dir(path: Path, root: Path) -> str:
    """Posix directory of ``path`` relative to ``root``; "." for root files."""
    try:
        return path.parent.relative_to(root).as_posix()
    except ValueError:
        return path.parent.as_posix()


def check_imports(
    path: Path,
    root: Path,
    imports: list[tuple[int, str]],
    rules: list[BoundaryRule],
) -> list[BoundaryViolation]:
    """Evaluate every rule against every import of one file."""
    directory = relative_dir(path, root)
    violations = []
    for rule in rules:
        if not rule.matches_path(directory):
            continue
        for line, import_path in imports:
            if rule.forbids(import_path):
                violations.append(
                    BoundaryViolation(
                        file=path.name,
                        line=line,
                        rule_from=rule.source,
                        rule_to=rule.target,
                        import_path=import_path,
                    )
                )
    return violations
