"""Analysis-related exceptions: discovery, parsing, manifests, registries."""

from pathlib import Path
from typing import List, Optional

from .base import DriftError


class AnalysisError(DriftError):
    """Base class for analysis-related errors."""

    pass


class FileDiscoveryError(AnalysisError):
    """Raised when the project tree cannot be enumerated. Fatal to a run."""

    def __init__(self, root: Path, reason: str):
        super().__init__(
            f"Cannot enumerate source files under {root}",
            details={"root": str(root), "reason": reason},
        )
        self.root = root
        self.reason = reason


class FileParseError(AnalysisError):
    """Raised when a single source file cannot be read or parsed."""

    def __init__(self, filepath: Path, language: str, reason: str):
        super().__init__(
            f"Failed to parse {language} file: {filepath}",
            details={"filepath": str(filepath), "language": language, "reason": reason},
        )
        self.filepath = filepath
        self.language = language
        self.reason = reason


class UnsupportedLanguageError(AnalysisError):
    """Raised when an explicitly configured language is not known."""

    def __init__(self, language: str, supported_languages: List[str]):
        super().__init__(
            f"Unsupported language: {language}",
            details={"language": language, "supported": ", ".join(supported_languages)},
        )
        self.language = language
        self.supported_languages = supported_languages


class ManifestError(AnalysisError):
    """Base class for dependency manifest problems."""

    def __init__(self, message: str, manifest: Optional[Path] = None, reason: str = ""):
        details = {}
        if manifest is not None:
            details["manifest"] = str(manifest)
        if reason:
            details["reason"] = reason
        super().__init__(message, details=details)
        self.manifest = manifest
        self.reason = reason


class ManifestNotFoundError(ManifestError):
    """Raised when the project root holds no manifest for the ecosystem."""

    def __init__(self, root: Path, expected: List[str]):
        super().__init__(
            f"No dependency manifest found in {root}",
            reason="expected one of: " + ", ".join(expected),
        )
        self.root = root
        self.expected = expected


class ManifestParseError(ManifestError):
    """Raised when a manifest exists but cannot be decoded."""

    def __init__(self, manifest: Path, reason: str):
        super().__init__(f"Cannot parse manifest {manifest.name}", manifest=manifest, reason=reason)


class RegistryError(AnalysisError):
    """Raised when a package registry lookup fails (network, HTTP, decoding)."""

    def __init__(self, url: str, reason: str, status_code: Optional[int] = None):
        details = {"url": url, "reason": reason}
        if status_code is not None:
            details["status"] = str(status_code)
        super().__init__("Registry lookup failed", details=details)
        self.url = url
        self.reason = reason
        self.status_code = status_code
