"""Tests for source file discovery."""

from codedrift.analyzers.discovery import is_excluded, read_source, walk_files
from codedrift.analyzers.go import GoAnalyzer
from codedrift.analyzers.python import PythonAnalyzer
from codedrift.analyzers.typescript import TypeScriptAnalyzer


class TestWalkFiles:
    """os.walk-based enumeration."""

    def test_sorted_and_filtered_by_extension(self, tmp_path, write):
        write("b.go", "package b")
        write("a.go", "package a")
        write("sub/c.go", "package c")
        write("notes.md", "# notes")

        files = walk_files(tmp_path, exclude=[], extensions=[".go"])
        assert [f.relative_to(tmp_path).as_posix() for f in files] == ["a.go", "b.go", "sub/c.go"]

    def test_excluded_basename_pruned_at_any_depth(self, tmp_path, write):
        write("main.go", "package main")
        write("vendor/lib.go", "package lib")
        write("pkg/vendor/deep.go", "package deep")

        files = walk_files(tmp_path, exclude=["vendor"], extensions=[".go"])
        assert [f.name for f in files] == ["main.go"]

    def test_skip_fragments_are_root_relative(self, tmp_path, write):
        write("handler.go", "package x")
        write("handler_test.go", "package x")

        files = walk_files(tmp_path, exclude=[], extensions=[".go"], skip_fragments=["_test.go"])
        assert [f.name for f in files] == ["handler.go"]

    def test_repeated_walks_are_identical(self, tmp_path, write):
        for name in ("z.go", "m.go", "a/b.go", "a/a.go"):
            write(name, "package x")
        first = walk_files(tmp_path, exclude=[], extensions=[".go"])
        second = walk_files(tmp_path, exclude=[], extensions=[".go"])
        assert first == second


class TestLanguageDiscovery:
    """Per-language excluded directories and test-file skipping."""

    def test_python_skips_tests_and_virtualenvs(self, tmp_path, write):
        write("app/service.py", "x = 1")
        write("app/test_service.py", "x = 1")
        write("conftest.py", "x = 1")
        write("venv/lib/site.py", "x = 1")
        write("app/contest.py", "x = 1")

        files = PythonAnalyzer().find_files(tmp_path, exclude=[])
        assert [f.name for f in files] == ["contest.py", "service.py"]

    def test_typescript_skips_specs_and_declarations(self, tmp_path, write):
        write("src/app.ts", "")
        write("src/app.spec.ts", "")
        write("src/types.d.ts", "")
        write("src/__tests__/x.ts", "")
        write("node_modules/pkg/index.js", "")
        write("src/view.jsx", "")

        files = TypeScriptAnalyzer().find_files(tmp_path, exclude=[])
        assert [f.name for f in files] == ["app.ts", "view.jsx"]

    def test_owns_matches_discovery(self, tmp_path, write):
        analyzer = GoAnalyzer()
        kept = write("cmd/main.go", "package main")
        test_file = write("cmd/main_test.go", "package main")
        vendored = write("vendor/x/y.go", "package y")
        foreign = write("README.md", "")

        assert analyzer.owns(kept, tmp_path, ["vendor"])
        assert not analyzer.owns(test_file, tmp_path, ["vendor"])
        assert not analyzer.owns(vendored, tmp_path, ["vendor"])
        assert not analyzer.owns(foreign, tmp_path, ["vendor"])


class TestHelpers:
    def test_is_excluded_checks_parent_directories_only(self, tmp_path):
        assert is_excluded(tmp_path / "build" / "x.go", tmp_path, ["build"])
        assert not is_excluded(tmp_path / "build.go", tmp_path, ["build.go"])

    def test_read_source_missing_file(self, tmp_path):
        assert read_source(tmp_path / "missing.go") is None
