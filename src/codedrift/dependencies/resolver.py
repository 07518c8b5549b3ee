"""Concurrent resolution of declared dependencies into freshness records."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Optional

import httpx

from ..exceptions import RegistryError
from ..logging_config import get_logger
from ..models import DependencyRecord, DependencyStatus
from .manifests import DependencySpec
from .registries import DEFAULT_TIMEOUT, Registry, RegistryClient

if TYPE_CHECKING:
    from ..config import DriftConfig

logger = get_logger(__name__)

RegistryFactory = Callable[[RegistryClient], Registry]

UNKNOWN_VERSION = "?"
DEFAULT_WORKERS = 8


def classify(
    current: str,
    latest: str,
    published_at: Optional[datetime] = None,
    max_stale_days: int = 90,
    default_stale_days: int = 30,
    now: Optional[datetime] = None,
) -> tuple[DependencyStatus, int]:
    """Classify a dependency by how long its latest release has been out.

    An unpinned dependency (empty ``current``) tracks latest and is current.
    Without a publish timestamp the staleness is ``default_stale_days``.

    Returns:
        (status, stale_days)
    """
    if not current or current == latest:
        return DependencyStatus.CURRENT, 0

    if published_at is not None:
        now = now or datetime.now(timezone.utc)
        stale_days = max((now - published_at).days, 0)
    else:
        stale_days = default_stale_days

    if stale_days <= max_stale_days:
        return DependencyStatus.STALE, stale_days
    return DependencyStatus.OUTDATED, stale_days


class DependencyResolver:
    """Looks up every spec once on a bounded worker pool.

    Output order equals input order. A failed lookup yields an ``unknown``
    record for that dependency only.
    """

    def __init__(
        self,
        max_workers: int = DEFAULT_WORKERS,
        timeout: float = DEFAULT_TIMEOUT,
        max_stale_days: int = 90,
        default_stale_days: int = 30,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.max_workers = max_workers
        self.timeout = timeout
        self.max_stale_days = max_stale_days
        self.default_stale_days = default_stale_days
        self.transport = transport

    @classmethod
    def from_config(cls, config: "DriftConfig") -> "DependencyResolver":
        return cls(
            max_workers=config.registry_workers,
            timeout=config.registry_timeout_seconds,
            max_stale_days=config.thresholds.max_stale_days,
            default_stale_days=config.thresholds.default_stale_days,
        )

    def resolve(
        self, specs: Sequence[DependencySpec], registry_factory: RegistryFactory
    ) -> list[DependencyRecord]:
        if not specs:
            return []

        with RegistryClient(timeout=self.timeout, transport=self.transport) as client:
            registry = registry_factory(client)
            workers = min(self.max_workers, len(specs))
            with ThreadPoolExecutor(max_workers=workers) as pool:
                records = list(pool.map(lambda spec: self._lookup(registry, spec), specs))

        unknown = sum(1 for r in records if r.status is DependencyStatus.UNKNOWN)
        logger.info(f"Resolved {len(records)} dependencies ({unknown} unknown)")
        return records

    def _lookup(self, registry: Registry, spec: DependencySpec) -> DependencyRecord:
        try:
            release = registry.latest(spec)
        except RegistryError as e:
            logger.warning(f"Lookup failed for {spec.name}: {e}")
            return self._unknown(spec)
        except Exception as e:
            logger.warning(f"Unexpected error looking up {spec.name}: {e}")
            return self._unknown(spec)

        status, stale_days = classify(
            spec.version,
            release.version,
            release.published_at,
            max_stale_days=self.max_stale_days,
            default_stale_days=self.default_stale_days,
        )
        return DependencyRecord(
            name=spec.name,
            current_version=spec.version,
            latest_version=release.version,
            stale_days=stale_days,
            status=status,
        )

    @staticmethod
    def _unknown(spec: DependencySpec) -> DependencyRecord:
        return DependencyRecord(
            name=spec.name,
            current_version=spec.version,
            latest_version=UNKNOWN_VERSION,
            stale_days=0,
            status=DependencyStatus.UNKNOWN,
        )
