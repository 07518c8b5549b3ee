"""Package registry lookups.

Every registry answers one question: what is the latest release of this
package, and when was it published (if the registry says). HTTP goes
through :class:`RegistryClient`; any transport, status or decoding failure
surfaces as :class:`~codedrift.exceptions.RegistryError`.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Optional
from urllib.parse import quote

import httpx

from ..exceptions import RegistryError
from ..logging_config import get_logger
from .manifests import DependencySpec

logger = get_logger(__name__)

DEFAULT_TIMEOUT = 5.0
USER_AGENT = "codedrift (dependency freshness check)"


@dataclass(frozen=True)
class Release:
    version: str
    published_at: Optional[datetime] = None


class RegistryClient:
    """Thin synchronous HTTP client shared by the registries of one run.

    No retries: a failed request fails the lookup it belongs to.
    """

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._client = httpx.Client(
            timeout=timeout,
            headers={"User-Agent": USER_AGENT, "Accept": "application/json"},
            follow_redirects=True,
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "RegistryClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def get_json(self, url: str, params: Optional[dict[str, Any]] = None) -> Any:
        try:
            response = self._client.get(url, params=params)
        except httpx.RequestError as exc:
            raise RegistryError(url, str(exc)) from exc
        if response.status_code >= 400:
            raise RegistryError(url, f"HTTP {response.status_code}", status_code=response.status_code)
        try:
            return response.json()
        except ValueError as exc:
            raise RegistryError(url, f"invalid JSON: {exc}", status_code=response.status_code) from exc


_FRACTION = re.compile(r"(\.\d{6})\d+")


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse an RFC 3339 timestamp as published by the Go proxy and npm."""
    if not isinstance(value, str) or not value:
        return None
    text = _FRACTION.sub(r"\1", value.strip())
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        logger.debug(f"Unparseable publish time: {value!r}")
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _dig(data: Any, url: str, *keys: Any) -> Any:
    """Walk nested keys/indexes, raising RegistryError on a missing step."""
    current = data
    for key in keys:
        try:
            current = current[key]
        except (KeyError, IndexError, TypeError):
            raise RegistryError(url, f"missing field {key!r} in response")
    if current in (None, ""):
        raise RegistryError(url, f"empty field {keys[-1]!r} in response")
    return current


class Registry(ABC):
    """Latest-release lookup for one ecosystem."""

    def __init__(self, client: RegistryClient):
        self.client = client

    @abstractmethod
    def latest(self, spec: DependencySpec) -> Release:
        """Return the latest release of ``spec``.

        Raises:
            RegistryError: If the lookup fails for any reason
        """


def escape_module_path(module: str) -> str:
    """Go module proxy case encoding: ``github.com/BurntSushi/toml`` -> ``github.com/!burnt!sushi/toml``."""
    return re.sub(r"[A-Z]", lambda m: "!" + m.group(0).lower(), module)


class GoProxyRegistry(Registry):
    BASE_URL = "https://proxy.golang.org"

    def latest(self, spec: DependencySpec) -> Release:
        url = f"{self.BASE_URL}/{escape_module_path(spec.key)}/@latest"
        data = self.client.get_json(url)
        return Release(_dig(data, url, "Version"), parse_timestamp(data.get("Time")))


class NpmRegistry(Registry):
    BASE_URL = "https://registry.npmjs.org"

    def latest(self, spec: DependencySpec) -> Release:
        url = f"{self.BASE_URL}/{quote(spec.key, safe='@')}"
        data = self.client.get_json(url)
        version = _dig(data, url, "dist-tags", "latest")
        published = (data.get("time") or {}).get(version)
        return Release(version, parse_timestamp(published))


class PyPIRegistry(Registry):
    BASE_URL = "https://pypi.org/pypi"

    def latest(self, spec: DependencySpec) -> Release:
        url = f"{self.BASE_URL}/{spec.key}/json"
        return Release(_dig(self.client.get_json(url), url, "info", "version"))


class CratesRegistry(Registry):
    BASE_URL = "https://crates.io/api/v1/crates"

    def latest(self, spec: DependencySpec) -> Release:
        url = f"{self.BASE_URL}/{spec.key}"
        crate = _dig(self.client.get_json(url), url, "crate")
        version = crate.get("max_stable_version") or crate.get("max_version")
        if not version:
            raise RegistryError(url, "no published version")
        return Release(version)


class MavenCentralRegistry(Registry):
    BASE_URL = "https://search.maven.org/solrsearch/select"

    def latest(self, spec: DependencySpec) -> Release:
        group, _, artifact = spec.key.partition(":")
        params = {"q": f'g:"{group}" AND a:"{artifact}"', "rows": 1, "wt": "json"}
        data = self.client.get_json(self.BASE_URL, params=params)
        return Release(_dig(data, self.BASE_URL, "response", "docs", 0, "latestVersion"))


class RubyGemsRegistry(Registry):
    BASE_URL = "https://rubygems.org/api/v1/gems"

    def latest(self, spec: DependencySpec) -> Release:
        url = f"{self.BASE_URL}/{spec.key}.json"
        return Release(_dig(self.client.get_json(url), url, "version"))


class PackagistRegistry(Registry):
    BASE_URL = "https://repo.packagist.org/p2"

    def latest(self, spec: DependencySpec) -> Release:
        url = f"{self.BASE_URL}/{spec.key}.json"
        releases = _dig(self.client.get_json(url), url, "packages", spec.key)
        for release in releases:
            version = str(release.get("version", ""))
            if version and "dev" not in version:
                return Release(version.lstrip("v"))
        raise RegistryError(url, "no stable version")


class NuGetRegistry(Registry):
    BASE_URL = "https://api.nuget.org/v3-flatcontainer"

    def latest(self, spec: DependencySpec) -> Release:
        url = f"{self.BASE_URL}/{spec.key.lower()}/index.json"
        versions = _dig(self.client.get_json(url), url, "versions")
        if not versions:
            raise RegistryError(url, "no published version")
        stable = [v for v in versions if "-" not in v]
        return Release((stable or versions)[-1])
