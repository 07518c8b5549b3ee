"""Dependency manifest parsers, one per ecosystem.

Each parser takes the project root and returns the declared direct
dependencies as :class:`DependencySpec` values in manifest order.

Raises:
    ManifestNotFoundError: No manifest for the ecosystem in the root
    ManifestParseError: The manifest exists but cannot be decoded
"""

from __future__ import annotations

import json
import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from ..config import load_toml_file
from ..exceptions import ConfigurationError, ManifestNotFoundError, ManifestParseError
from ..logging_config import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class DependencySpec:
    """A declared dependency.

    Attributes:
        name: Display name (the last path segment for Go modules)
        version: Declared version with range prefixes removed; "" when unpinned
        package: Registry lookup key (full module path, "group:artifact", ...)
    """

    name: str
    version: str
    package: str = ""

    @property
    def key(self) -> str:
        return self.package or self.name


_RANGE_PREFIX = re.compile(r"^(?:~>|[\^~>=<!v]|\s)+")


def clean_version(version: str) -> str:
    """Strip range operators so ``^1.2.0``, ``~> 3.1`` and ``>=2.0,<3`` become plain versions."""
    first = version.split(",")[0].split("||")[0].strip()
    cleaned = _RANGE_PREFIX.sub("", first).strip()
    if cleaned in ("*", "latest"):
        return ""
    return cleaned


def _require(root: Path, *names: str) -> Path:
    for name in names:
        path = root / name
        if path.is_file():
            logger.debug(f"Reading manifest {path}")
            return path
    raise ManifestNotFoundError(root, list(names))


def _read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ManifestParseError(path, str(e))


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(_read_text(path))
    except json.JSONDecodeError as e:
        raise ManifestParseError(path, str(e))
    if not isinstance(data, dict):
        raise ManifestParseError(path, "top-level value is not an object")
    return data


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        return load_toml_file(path)
    except (ConfigurationError, ValueError, OSError) as e:
        raise ManifestParseError(path, str(e))


def _read_xml(path: Path) -> ET.Element:
    try:
        return ET.fromstring(_read_text(path))
    except ET.ParseError as e:
        raise ManifestParseError(path, str(e))


def _local(tag: str) -> str:
    """Tag name without its XML namespace."""
    return tag.rsplit("}", 1)[-1]


# ── Go ─────────────────────────────────────────────────────────────

_GO_REQUIRE_LINE = re.compile(r"^require\s+(\S+)\s+(\S+)")
_GO_REQUIRE_ENTRY = re.compile(r"^(\S+)\s+(v\S+)")


def parse_go_mod(root: Path) -> list[DependencySpec]:
    """Direct requirements of go.mod; ``// indirect`` entries are skipped."""
    path = _require(root, "go.mod")
    specs = []
    in_block = False
    for raw in _read_text(path).splitlines():
        line = raw.strip()
        if line.startswith("require ("):
            in_block = True
            continue
        if in_block and line.startswith(")"):
            in_block = False
            continue
        if "// indirect" in line:
            continue

        match = _GO_REQUIRE_ENTRY.match(line) if in_block else _GO_REQUIRE_LINE.match(line)
        if match:
            module, version = match.group(1), match.group(2)
            specs.append(DependencySpec(module.rsplit("/", 1)[-1], version, module))
    return specs


# ── JavaScript / TypeScript ────────────────────────────────────────


def parse_package_json(root: Path) -> list[DependencySpec]:
    path = _require(root, "package.json")
    deps = _read_json(path).get("dependencies") or {}
    return [DependencySpec(name, clean_version(str(version))) for name, version in deps.items()]


# ── Python ─────────────────────────────────────────────────────────

_REQUIREMENT = re.compile(
    r"^\s*([A-Za-z0-9][A-Za-z0-9._-]*)\s*(?:\[[^\]]*\])?\s*(?:(==|>=|<=|~=|!=|>|<)\s*([^,;\s]+))?"
)


def parse_requirement(requirement: str) -> DependencySpec | None:
    """Parse a PEP 508 string such as ``httpx[http2]>=0.27; python_version>'3.8'``."""
    match = _REQUIREMENT.match(requirement)
    if not match:
        return None
    return DependencySpec(match.group(1), match.group(3) or "")


def parse_python_manifest(root: Path) -> list[DependencySpec]:
    """requirements.txt when present, otherwise pyproject.toml."""
    requirements = root / "requirements.txt"
    if requirements.is_file():
        return _parse_requirements_txt(requirements)
    return _parse_pyproject(_require(root, "requirements.txt", "pyproject.toml"))


def _parse_requirements_txt(path: Path) -> list[DependencySpec]:
    specs = []
    for raw in _read_text(path).splitlines():
        line = raw.split(" #", 1)[0].strip()
        if not line or line.startswith(("#", "-")):
            continue
        spec = parse_requirement(line)
        if spec is not None:
            specs.append(spec)
    return specs


def _parse_pyproject(path: Path) -> list[DependencySpec]:
    data = _read_toml(path)
    specs = []

    for requirement in data.get("project", {}).get("dependencies", []):
        spec = parse_requirement(str(requirement))
        if spec is not None:
            specs.append(spec)

    poetry = data.get("tool", {}).get("poetry", {}).get("dependencies", {})
    for name, value in poetry.items():
        if name.lower() == "python":
            continue
        version = value.get("version", "") if isinstance(value, dict) else str(value)
        specs.append(DependencySpec(name, clean_version(version)))

    return specs


# ── Rust ───────────────────────────────────────────────────────────


def parse_cargo_toml(root: Path) -> list[DependencySpec]:
    path = _require(root, "Cargo.toml")
    deps = _read_toml(path).get("dependencies", {})
    specs = []
    for name, value in deps.items():
        version = value.get("version", "") if isinstance(value, dict) else str(value)
        specs.append(DependencySpec(name, clean_version(version)))
    return specs


# ── Java ───────────────────────────────────────────────────────────

_GRADLE_DEPENDENCY = re.compile(
    r"""(?:implementation|api|compile|testImplementation)\s+['"]([^:]+):([^:]+):([^'"]+)['"]"""
)


def parse_java_manifest(root: Path) -> list[DependencySpec]:
    """pom.xml when present, otherwise build.gradle."""
    path = _require(root, "pom.xml", "build.gradle")
    if path.name == "pom.xml":
        return _parse_pom(path)

    specs = []
    for match in _GRADLE_DEPENDENCY.finditer(_read_text(path)):
        group, artifact, version = match.groups()
        key = f"{group}:{artifact}"
        specs.append(DependencySpec(key, version, key))
    return specs


def _parse_pom(path: Path) -> list[DependencySpec]:
    specs = []
    for element in _read_xml(path).iter():
        if _local(element.tag) != "dependency":
            continue
        fields = {_local(child.tag): (child.text or "").strip() for child in element}
        version = fields.get("version", "")
        # unset or property-interpolated versions cannot be compared
        if not version or version.startswith("${"):
            continue
        key = f"{fields.get('groupId', '')}:{fields.get('artifactId', '')}"
        specs.append(DependencySpec(key, version, key))
    return specs


# ── Ruby ───────────────────────────────────────────────────────────

_GEM = re.compile(r"""^\s*gem\s+['"]([^'"]+)['"](?:\s*,\s*['"]([^'"]+)['"])?""")


def parse_gemfile(root: Path) -> list[DependencySpec]:
    path = _require(root, "Gemfile")
    specs = []
    for line in _read_text(path).splitlines():
        match = _GEM.match(line)
        if match:
            version = (match.group(2) or "").lstrip("~>= ")
            specs.append(DependencySpec(match.group(1), version))
    return specs


# ── PHP ────────────────────────────────────────────────────────────


def parse_composer_json(root: Path) -> list[DependencySpec]:
    path = _require(root, "composer.json")
    require = _read_json(path).get("require") or {}
    return [
        DependencySpec(name, clean_version(str(version)))
        for name, version in require.items()
        if name != "php" and not name.startswith("ext-")
    ]


# ── C# ─────────────────────────────────────────────────────────────


def find_csproj(root: Path) -> list[Path]:
    """Project files at the root or one directory deep."""
    return sorted(root.glob("*.csproj")) + sorted(root.glob("*/*.csproj"))


def parse_csproj(root: Path) -> list[DependencySpec]:
    projects = find_csproj(root)
    if not projects:
        raise ManifestNotFoundError(root, ["*.csproj", "*/*.csproj"])

    specs = []
    for project in projects:
        for element in _read_xml(project).iter():
            if _local(element.tag) != "PackageReference":
                continue
            name = element.get("Include")
            if not name:
                continue
            version = element.get("Version")
            if version is None:
                child = next((c for c in element if _local(c.tag) == "Version"), None)
                version = (child.text or "").strip() if child is not None else ""
            specs.append(DependencySpec(name, clean_version(version)))
    return specs
