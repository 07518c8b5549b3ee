"""Tests for the command line interface."""

import json
import logging

import pytest
from typer.testing import CliRunner

from codedrift import __version__
from codedrift.cli import app

runner = CliRunner()


@pytest.fixture
def project(tmp_path, write, monkeypatch):
    """A manifest-free Go tree, so no registry is contacted."""
    monkeypatch.chdir(tmp_path)
    write(
        "svc/handler.go",
        """
        package svc

        func Handle(ok bool) {
            if ok {
                helper()
            }
        }

        func helper() {
        }

        func Serve() {
        }
        """,
    )
    return tmp_path


class TestReport:
    def test_rich_report(self, project):
        result = runner.invoke(app, ["report", str(project), "--language", "go", "--quiet"])
        assert result.exit_code == 0
        assert "Health score" in result.stdout
        assert "Complexity" in result.stdout
        assert "Handle" in result.stdout

    def test_json_report(self, project):
        result = runner.invoke(app, ["report", str(project), "-l", "go", "--json", "--quiet"])
        assert result.exit_code == 0

        data = json.loads(result.stdout)
        assert set(data) == {"results", "score"}
        assert data["results"]["language"] == "go"
        assert data["results"]["function_count"] == 3
        assert data["results"]["dead_code"] == [
            {"file": "handler.go", "name": "Handle", "line": 3},
            {"file": "handler.go", "name": "Serve", "line": 12},
        ]
        assert data["score"]["dead_code"] == 90.0

    def test_config_file_option(self, project, write):
        config = write("ci.toml", 'language = "go"\nboundaries = ["svc -> fmt"]\n')
        write("svc/log.go", 'package svc\n\nimport "fmt"\n')
        result = runner.invoke(app, ["report", str(project), "--config", str(config), "--json", "-q"])
        assert result.exit_code == 0
        assert json.loads(result.stdout)["results"]["violations"][0]["import_path"] == "fmt"

    def test_unsupported_language_exits_2(self, project):
        result = runner.invoke(app, ["report", str(project), "--language", "cobol", "--quiet"])
        assert result.exit_code == 2
        assert "Unsupported language" in result.stdout

    def test_missing_path_is_usage_error(self, tmp_path):
        result = runner.invoke(app, ["report", str(tmp_path / "missing")])
        assert result.exit_code == 2


class TestCheck:
    """CI gate."""

    def test_passes_above_threshold(self, project):
        result = runner.invoke(app, ["check", str(project), "-l", "go", "--fail-under", "50", "-q"])
        assert result.exit_code == 0
        assert "OK" in result.stdout

    def test_fails_below_threshold(self, project):
        result = runner.invoke(app, ["check", str(project), "-l", "go", "--fail-under", "99.5", "-q"])
        assert result.exit_code == 1
        assert "FAIL" in result.stdout

    def test_threshold_from_config(self, project, write):
        write("drift.toml", 'language = "go"\n\n[thresholds]\nmin_score = 99.5\n')
        result = runner.invoke(app, ["check", str(project), "-q"])
        assert result.exit_code == 1

    def test_json_still_gates(self, project):
        result = runner.invoke(app, ["check", str(project), "-l", "go", "--fail-under", "99.5", "--json", "-q"])
        assert result.exit_code == 1
        assert json.loads(result.stdout)["score"]["total"] == 98.5


class TestVerbosity:
    """Logging follows the resolved configuration, flags first."""

    def test_environment_quiets_logging(self, project, monkeypatch):
        monkeypatch.setenv("DRIFT_VERBOSITY", "quiet")
        result = runner.invoke(app, ["report", str(project), "-l", "go", "--json"])
        assert result.exit_code == 0
        assert logging.getLogger("codedrift").level == logging.ERROR

    def test_config_file_verbosity(self, project, write):
        write("drift.toml", 'language = "go"\nverbosity = "verbose"\n')
        result = runner.invoke(app, ["report", str(project), "--json"])
        assert result.exit_code == 0
        assert logging.getLogger("codedrift").level == logging.DEBUG

    def test_flag_beats_environment(self, project, monkeypatch):
        monkeypatch.setenv("DRIFT_VERBOSITY", "quiet")
        result = runner.invoke(app, ["check", str(project), "-l", "go", "--fail-under", "50", "--verbose"])
        assert result.exit_code == 0
        assert logging.getLogger("codedrift").level == logging.DEBUG

    def test_default_is_warnings(self, project):
        result = runner.invoke(app, ["report", str(project), "-l", "go", "--json"])
        assert result.exit_code == 0
        assert logging.getLogger("codedrift").level == logging.WARNING


def test_version():
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.stdout
