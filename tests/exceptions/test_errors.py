"""Tests for the exception hierarchy."""

from pathlib import Path

import pytest

from codedrift.exceptions import (
    AnalysisError,
    ConfigurationError,
    DriftError,
    FileDiscoveryError,
    InvalidConfigError,
    ManifestError,
    ManifestNotFoundError,
    ManifestParseError,
    RegistryError,
)


class TestHierarchy:
    @pytest.mark.parametrize(
        "error",
        [
            FileDiscoveryError(Path("/src"), "not a directory"),
            ManifestNotFoundError(Path("/src"), ["go.mod"]),
            ManifestParseError(Path("/src/package.json"), "Expecting value"),
            RegistryError("https://pypi.org/pypi/x/json", "HTTP 404", status_code=404),
        ],
    )
    def test_analysis_errors(self, error):
        assert isinstance(error, AnalysisError)
        assert isinstance(error, DriftError)

    def test_manifest_errors_share_base(self):
        assert issubclass(ManifestNotFoundError, ManifestError)
        assert issubclass(ManifestParseError, ManifestError)

    def test_config_errors(self):
        error = InvalidConfigError("registry_workers", 0, "must be at least 1")
        assert isinstance(error, ConfigurationError)
        assert error.details["reason"] == "must be at least 1"


class TestMessages:
    def test_details_rendered(self):
        error = RegistryError("https://crates.io/api/v1/crates/x", "HTTP 500", status_code=500)
        assert str(error) == (
            "Registry lookup failed (url=https://crates.io/api/v1/crates/x, reason=HTTP 500, status=500)"
        )

    def test_plain_message(self):
        assert str(DriftError("boom")) == "boom"

    def test_manifest_not_found_lists_expected(self):
        error = ManifestNotFoundError(Path("/src"), ["requirements.txt", "pyproject.toml"])
        assert error.details == {"reason": "expected one of: requirements.txt, pyproject.toml"}
        assert error.manifest is None
