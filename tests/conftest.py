"""Shared fixtures for codedrift tests."""

import textwrap
from pathlib import Path

import httpx
import pytest

from codedrift.dependencies import DependencyResolver


@pytest.fixture
def write(tmp_path):
    """Write a dedented file under tmp_path and return its path."""

    def _write(relative: str, content: str = "") -> Path:
        path = tmp_path / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(textwrap.dedent(content).lstrip("\n"), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def offline_resolver():
    """Resolver whose registries all answer 404, so no test touches the network."""
    transport = httpx.MockTransport(lambda request: httpx.Response(404))
    return DependencyResolver(max_workers=2, transport=transport)
