"""Tests for registry lookups against a mocked transport."""

from datetime import datetime, timezone

import httpx
import pytest

from codedrift.dependencies.manifests import DependencySpec
from codedrift.dependencies.registries import (
    CratesRegistry,
    GoProxyRegistry,
    MavenCentralRegistry,
    NpmRegistry,
    NuGetRegistry,
    PackagistRegistry,
    PyPIRegistry,
    RegistryClient,
    RubyGemsRegistry,
    escape_module_path,
    parse_timestamp,
)
from codedrift.exceptions import RegistryError


def _client(routes):
    """RegistryClient answering from a {url path: json body} map, 404 otherwise."""
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        body = routes.get(request.url.path)
        if body is None:
            return httpx.Response(404)
        return httpx.Response(200, json=body)

    client = RegistryClient(transport=httpx.MockTransport(handler))
    client.seen = seen
    return client


class TestRegistryClient:
    def test_http_error_status(self):
        client = _client({})
        with pytest.raises(RegistryError) as exc_info:
            client.get_json("https://registry.example/missing")
        assert exc_info.value.status_code == 404

    def test_invalid_json(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(200, text="<html>"))
        with RegistryClient(transport=transport) as client:
            with pytest.raises(RegistryError, match="Registry lookup failed"):
                client.get_json("https://registry.example/x")

    def test_transport_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with RegistryClient(transport=httpx.MockTransport(handler)) as client:
            with pytest.raises(RegistryError) as exc_info:
                client.get_json("https://registry.example/x")
        assert exc_info.value.status_code is None
        assert "connection refused" in exc_info.value.reason

    def test_sends_user_agent(self):
        client = _client({"/x": {}})
        client.get_json("https://registry.example/x")
        assert client.seen[0].headers["User-Agent"].startswith("codedrift")


class TestTimestamps:
    def test_zulu_with_nanoseconds(self):
        parsed = parse_timestamp("2023-11-02T17:26:12.123456789Z")
        assert parsed == datetime(2023, 11, 2, 17, 26, 12, 123456, tzinfo=timezone.utc)

    def test_naive_assumed_utc(self):
        assert parse_timestamp("2024-01-01T00:00:00").tzinfo is timezone.utc

    def test_garbage(self):
        assert parse_timestamp("yesterday") is None
        assert parse_timestamp(None) is None


class TestRegistries:
    """One happy path per ecosystem plus the interesting selection rules."""

    def test_go_proxy(self):
        assert escape_module_path("github.com/BurntSushi/toml") == "github.com/!burnt!sushi/toml"
        client = _client(
            {"/github.com/!burnt!sushi/toml/@latest": {"Version": "v1.3.2", "Time": "2023-06-08T06:47:14Z"}}
        )
        release = GoProxyRegistry(client).latest(
            DependencySpec("toml", "v1.2.0", "github.com/BurntSushi/toml")
        )
        assert release.version == "v1.3.2"
        assert release.published_at == datetime(2023, 6, 8, 6, 47, 14, tzinfo=timezone.utc)

    def test_npm_scoped_package(self):
        client = _client(
            {
                "/@types/node": {
                    "dist-tags": {"latest": "20.10.0"},
                    "time": {"20.10.0": "2023-11-28T10:00:00.000Z"},
                }
            }
        )
        release = NpmRegistry(client).latest(DependencySpec("@types/node", "20.0.0"))
        assert release.version == "20.10.0"
        assert release.published_at.year == 2023
        assert client.seen[0].url.raw_path == b"/@types%2Fnode"

    def test_npm_missing_time_is_none(self):
        client = _client({"/react": {"dist-tags": {"latest": "18.2.0"}}})
        assert NpmRegistry(client).latest(DependencySpec("react", "18.0.0")).published_at is None

    def test_pypi(self):
        client = _client({"/pypi/httpx/json": {"info": {"version": "0.27.0"}}})
        assert PyPIRegistry(client).latest(DependencySpec("httpx", "0.24.0")).version == "0.27.0"

    def test_crates_prefers_stable(self):
        client = _client(
            {"/api/v1/crates/serde": {"crate": {"max_version": "2.0.0-rc1", "max_stable_version": "1.0.193"}}}
        )
        assert CratesRegistry(client).latest(DependencySpec("serde", "1.0")).version == "1.0.193"

    def test_maven_search_params(self):
        client = _client(
            {"/solrsearch/select": {"response": {"docs": [{"latestVersion": "33.0.0-jre"}]}}}
        )
        key = "com.google.guava:guava"
        assert MavenCentralRegistry(client).latest(DependencySpec(key, "32.1.2-jre", key)).version == "33.0.0-jre"
        params = client.seen[0].url.params
        assert params["q"] == 'g:"com.google.guava" AND a:"guava"'
        assert params["rows"] == "1"

    def test_maven_no_results(self):
        client = _client({"/solrsearch/select": {"response": {"docs": []}}})
        with pytest.raises(RegistryError):
            MavenCentralRegistry(client).latest(DependencySpec("a:b", "1", "a:b"))

    def test_rubygems(self):
        client = _client({"/api/v1/gems/rails.json": {"version": "7.1.2"}})
        assert RubyGemsRegistry(client).latest(DependencySpec("rails", "7.0.4")).version == "7.1.2"

    def test_packagist_skips_dev_versions(self):
        client = _client(
            {
                "/p2/monolog/monolog.json": {
                    "packages": {
                        "monolog/monolog": [
                            {"version": "dev-main"},
                            {"version": "v3.5.0"},
                            {"version": "3.4.0"},
                        ]
                    }
                }
            }
        )
        assert PackagistRegistry(client).latest(DependencySpec("monolog/monolog", "3.0")).version == "3.5.0"

    def test_nuget_last_stable(self):
        client = _client(
            {"/v3-flatcontainer/newtonsoft.json/index.json": {"versions": ["12.0.3", "13.0.3", "14.0.0-beta1"]}}
        )
        assert NuGetRegistry(client).latest(DependencySpec("Newtonsoft.Json", "12.0.3")).version == "13.0.3"

    def test_nuget_prerelease_only(self):
        client = _client({"/v3-flatcontainer/pre/index.json": {"versions": ["1.0.0-alpha", "1.0.0-beta"]}})
        assert NuGetRegistry(client).latest(DependencySpec("Pre", "")).version == "1.0.0-beta"

    def test_missing_package(self):
        with pytest.raises(RegistryError):
            PyPIRegistry(_client({})).latest(DependencySpec("nope", "1.0"))
