"""Unit tests for file filtering, exclusion logic and the project scan."""

import os
import tempfile
from pathlib import Path

from complyscan.config import SECURITY_SCAN_EXTENSIONS
from complyscan.utils import scan_project, walk_project_files


def _create_test_structure(files: dict[str, str]) -> str:
    """Create a temporary directory with the given files and contents."""
    tmpdir = tempfile.mkdtemp(prefix="complyscan_filter_")
    for path, content in files.items():
        full_path = os.path.join(tmpdir, path)
        os.makedirs(os.path.dirname(full_path), exist_ok=True)
        with open(full_path, "w") as f:
            f.write(content)
    return tmpdir


_JS = frozenset(SECURITY_SCAN_EXTENSIONS)


class TestFileFiltering:
    """Tests for file walker exclusions."""

    def test_ignores_lockfiles(self) -> None:
        """Lock files should be excluded from the scan."""
        project = _create_test_structure(
            {
                "package.json": "{}",
                "package-lock.json": "{}",
                "yarn.lock": "",
                "src/index.js": "",
            }
        )
        result = walk_project_files(Path(project))

        filenames = [os.path.basename(f) for f in result.files]
        assert "index.js" in filenames
        assert "package.json" in filenames
        assert "package-lock.json" not in filenames
        assert "yarn.lock" not in filenames

    def test_ignores_node_modules(self) -> None:
        """Files under node_modules and build output should never be walked."""
        project = _create_test_structure(
            {
                "node_modules/lodash/index.js": "",
                "dist/bundle.js": "",
                "src/app.js": "",
            }
        )
        result = walk_project_files(Path(project))

        assert [os.path.basename(f) for f in result.files] == ["app.js"]

    def test_extension_filter(self) -> None:
        """Only files with a listed extension are collected."""
        project = _create_test_structure(
            {
                "README.md": "# readme",
                "src/app.ts": "",
                "src/style.css": "",
            }
        )
        result = walk_project_files(Path(project), scan_extensions=_JS)

        assert [os.path.basename(f) for f in result.files] == ["app.ts"]

    def test_walk_order_is_sorted(self) -> None:
        """Repeated walks return files in the same, sorted order."""
        project = _create_test_structure(
            {"b.js": "", "a.js": "", "src/c.js": ""}
        )
        first = walk_project_files(Path(project))
        second = walk_project_files(Path(project))

        rel = [Path(f).relative_to(project).as_posix() for f in first.files]
        assert rel == ["a.js", "b.js", "src/c.js"]
        assert first.files == second.files

    def test_max_files_truncates(self) -> None:
        """The walk stops at the file cap and reports truncation."""
        project = _create_test_structure({"a.js": "", "b.js": "", "c.js": ""})
        result = walk_project_files(Path(project), max_files=2)

        assert result.files_scanned == 2
        assert result.truncated is True

    def test_expired_deadline_truncates(self) -> None:
        """A deadline already in the past stops the walk before any file."""
        project = _create_test_structure({"a.js": ""})
        result = walk_project_files(Path(project), deadline=0.0)

        assert result.files == []
        assert result.truncated is True


class TestScanProject:
    """Tests for the single shared project scan."""

    def test_reads_contents_with_relative_paths(self) -> None:
        """Scanned files carry POSIX paths relative to the root."""
        project = _create_test_structure({"src/lib/db.js": "db.query(sql)"})
        scan = scan_project(project, max_files=10, scan_extensions=_JS)

        assert scan.files_scanned == 1
        assert scan.files[0].path == "src/lib/db.js"
        assert scan.files[0].content == "db.query(sql)"
        assert scan.truncated is False

    def test_collects_markers_and_manifests(self) -> None:
        """Project markers are detected even when not scanned as source."""
        project = _create_test_structure(
            {
                ".env": "SECRET=1",
                ".gitignore": "node_modules\n.env\n",
                "package.json": '{"name": "demo"}',
                ".github/workflows/ci.yml": "on: push",
                "index.js": "",
            }
        )
        scan = scan_project(project, max_files=10, scan_extensions=_JS)

        assert scan.has_marker(".env")
        assert scan.has_marker("package.json")
        assert scan.has_marker(".github/workflows")
        assert not scan.has_marker("yarn.lock")
        assert ".env" in scan.manifest(".gitignore")
        assert scan.manifest("package.json") == '{"name": "demo"}'
        assert scan.manifest("renovate.json") == ""

    def test_missing_root_returns_empty_scan(self) -> None:
        """A root that does not exist yields an empty scan instead of an error."""
        missing = os.path.join(tempfile.mkdtemp(prefix="complyscan_filter_"), "nope")
        scan = scan_project(missing, max_files=10, scan_extensions=_JS)

        assert scan.files == ()
        assert scan.markers == frozenset()
        assert scan.files_scanned == 0

    def test_file_cap_marks_scan_truncated(self) -> None:
        """Hitting max_files is reported on the scan data."""
        project = _create_test_structure({f"f{i}.js": "" for i in range(5)})
        scan = scan_project(project, max_files=3, scan_extensions=_JS)

        assert scan.files_scanned == 3
        assert scan.truncated is True

    def test_files_with_suffix(self) -> None:
        """Files can be selected by suffix from the shared scan."""
        project = _create_test_structure(
            {"index.html": "<html></html>", "app.css": "body {}", "App.tsx": ""}
        )
        scan = scan_project(
            project, max_files=10, scan_extensions=frozenset({".html", ".css", ".tsx"})
        )

        assert [f.path for f in scan.files_with_suffix({".html", ".tsx"})] == [
            "App.tsx",
            "index.html",
        ]
