"""Result models shared by the analyzers, the engine and the scorer."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any


@dataclass(frozen=True)
class FunctionRecord:
    file: str  # basename
    name: str  # qualified where the language allows (Type.method)
    line: int  # 1-based declaration line
    complexity: int  # always >= 1


class DependencyStatus(str, Enum):
    """Staleness classification. UNKNOWN means the lookup failed."""

    CURRENT = "current"
    STALE = "stale"
    OUTDATED = "outdated"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class DependencyRecord:
    name: str
    current_version: str
    latest_version: str
    stale_days: int
    status: DependencyStatus

    @property
    def is_penalized(self) -> bool:
        """Stale and outdated dependencies cost score; current and unknown do not."""
        return self.status in (DependencyStatus.STALE, DependencyStatus.OUTDATED)


@dataclass(frozen=True)
class BoundaryViolation:
    file: str
    line: int
    rule_from: str
    rule_to: str
    import_path: str


@dataclass(frozen=True)
class DeadFunctionRecord:
    file: str
    name: str
    line: int


@dataclass
class AnalysisResults:
    """Aggregate of one analysis run.

    A full run fills every list. An incremental single-file run only
    fills ``functions`` and leaves merging to the caller.
    """

    language: str
    file_count: int = 0
    function_count: int = 0
    functions: list[FunctionRecord] = field(default_factory=list)
    dependencies: list[DependencyRecord] = field(default_factory=list)
    violations: list[BoundaryViolation] = field(default_factory=list)
    dead_code: list[DeadFunctionRecord] = field(default_factory=list)

    def sort_functions(self) -> None:
        """Order functions by complexity, highest first. Ties keep discovery order."""
        self.functions.sort(key=lambda fn: fn.complexity, reverse=True)

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["dependencies"] = [
            {**asdict(dep), "status": dep.status.value} for dep in self.dependencies
        ]
        return data


@dataclass(frozen=True)
class HealthScore:
    complexity: float
    deps: float
    boundaries: float
    dead_code: float
    coverage: float
    total: float  # weighted, one decimal
    delta: float = 0.0  # total - previous total, 0.0 on the first score

    def to_dict(self) -> dict[str, float]:
        return asdict(self)
