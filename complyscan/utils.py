"""ComplyScan utility helpers: path validation and the project file scanner."""

from __future__ import annotations

import logging
import os
import time
from dataclasses import dataclass, field
from pathlib import Path

from complyscan.config import (
    DEFAULT_IGNORE_DIRS,
    DEFAULT_IGNORE_FILES,
    MANIFEST_FILES,
    MAX_FILE_BYTES,
    PROJECT_MARKERS,
)

logger = logging.getLogger(__name__)


def validate_path(path: str) -> Path:
    """Resolve and validate that *path* points to an existing directory.

    Args:
        path: Raw path string from the CLI.

    Returns:
        Resolved ``Path`` object.

    Raises:
        FileNotFoundError: If the path does not exist.
        NotADirectoryError: If the path is not a directory.
    """
    resolved = Path(path).resolve()

    if not resolved.exists():
        raise FileNotFoundError(f"Path does not exist: {resolved}")

    if not resolved.is_dir():
        raise NotADirectoryError(f"Path is not a directory: {resolved}")

    return resolved


class FileWalkResult:
    """Container returned by :func:`walk_project_files`.

    Attributes:
        files: List of absolute file paths that matched the scan criteria.
        files_scanned: Total number of files that were inspected.
        truncated: ``True`` when the walk stopped at the file cap or deadline.
    """

    __slots__ = ("files", "files_scanned", "truncated")

    def __init__(self) -> None:
        self.files: list[str] = []
        self.files_scanned: int = 0
        self.truncated: bool = False


def walk_project_files(
    root_path: Path,
    *,
    ignore_dirs: set[str] | None = None,
    scan_extensions: set[str] | frozenset[str] | None = None,
    max_files: int | None = None,
    deadline: float | None = None,
) -> FileWalkResult:
    """Walk a project directory and collect scannable file paths.

    Directories and files are visited in sorted order so repeated walks over
    an unchanged tree return the same list.  Paths resolving to an already
    collected file (symlinks) are skipped.

    Args:
        root_path: Root directory to walk.
        ignore_dirs: Optional set of directory names to skip.
        scan_extensions: Optional set of file extensions to include.
        max_files: Stop after collecting this many files.
        deadline: ``time.monotonic()`` value after which the walk stops.

    Returns:
        A :class:`FileWalkResult` with the matching file paths and count.
    """
    _ignore_dirs = (
        ignore_dirs if ignore_dirs is not None else set(DEFAULT_IGNORE_DIRS)
    )
    _extensions = scan_extensions

    result = FileWalkResult()
    seen: set[str] = set()

    for dirpath, dirnames, filenames in os.walk(root_path):
        # Prune ignored directories in-place so os.walk skips them
        dirnames[:] = sorted(d for d in dirnames if d not in _ignore_dirs)

        for filename in sorted(filenames):
            if filename in DEFAULT_IGNORE_FILES:
                continue

            ext = os.path.splitext(filename)[1].lower()
            if _extensions is not None and ext not in _extensions:
                continue

            full_path = os.path.join(dirpath, filename)
            real = os.path.realpath(full_path)
            if real in seen:
                continue
            seen.add(real)

            if max_files is not None and result.files_scanned >= max_files:
                result.truncated = True
                return result
            if deadline is not None and time.monotonic() > deadline:
                result.truncated = True
                return result

            result.files.append(full_path)
            result.files_scanned += 1

    return result


def read_text(path: Path | str, limit: int = MAX_FILE_BYTES) -> str | None:
    """Read up to *limit* bytes of *path* as UTF-8, or ``None`` on error."""
    try:
        with open(path, "rb") as fh:
            data = fh.read(limit)
    except OSError:
        return None
    return data.decode("utf-8", errors="ignore")


# ---------------------------------------------------------------------------
# Scan data shared by all detectors
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SourceFile:
    """One scanned file.

    Attributes:
        path: POSIX path relative to the scan root.
        content: Text content (possibly truncated to ``MAX_FILE_BYTES``).
    """

    path: str
    content: str

    @property
    def suffix(self) -> str:
        return os.path.splitext(self.path)[1].lower()


@dataclass(frozen=True)
class ScanData:
    """Immutable result of scanning a project once.

    Attributes:
        root: Scan root directory.
        files: Scanned source files in walk order.
        markers: Project-level paths (from ``PROJECT_MARKERS``) that exist.
        manifests: Text of the ``MANIFEST_FILES`` that exist.
        truncated: ``True`` if the file cap or the deadline cut the walk short.
    """

    root: Path
    files: tuple[SourceFile, ...] = ()
    markers: frozenset[str] = frozenset()
    manifests: dict[str, str] = field(default_factory=dict)
    truncated: bool = False

    @property
    def files_scanned(self) -> int:
        return len(self.files)

    def has_marker(self, *paths: str) -> bool:
        """Return ``True`` if any of *paths* exists in the project."""
        return any(p in self.markers for p in paths)

    def manifest(self, path: str) -> str:
        return self.manifests.get(path, "")

    def files_with_suffix(self, suffixes: set[str] | frozenset[str]) -> list[SourceFile]:
        return [f for f in self.files if f.suffix in suffixes]


def scan_project(
    root_path: Path | str,
    *,
    max_files: int,
    scan_extensions: set[str] | frozenset[str],
    deadline: float | None = None,
) -> ScanData:
    """Scan *root_path* once and return the data every detector consumes.

    Never raises for a missing or unreadable root: the result is simply
    empty, so detectors report "not applicable" or zero matches.
    """
    root = Path(root_path)
    if not root.is_dir():
        logger.warning("Scan root %s does not exist or is not a directory", root)
        return ScanData(root=root)

    walk = walk_project_files(
        root,
        scan_extensions=scan_extensions,
        max_files=max_files,
        deadline=deadline,
    )
    if walk.truncated:
        logger.info("File scan truncated after %d files", walk.files_scanned)

    files: list[SourceFile] = []
    for filepath in walk.files:
        content = read_text(filepath)
        if content is None:
            logger.debug("Skipping unreadable file %s", filepath)
            continue
        rel = Path(filepath).relative_to(root).as_posix()
        files.append(SourceFile(path=rel, content=content))

    markers = frozenset(m for m in PROJECT_MARKERS if (root / m).exists())
    manifests: dict[str, str] = {}
    for name in MANIFEST_FILES:
        if name in markers:
            text = read_text(root / name)
            if text is not None:
                manifests[name] = text

    return ScanData(
        root=root,
        files=tuple(files),
        markers=markers,
        manifests=manifests,
        truncated=walk.truncated,
    )
