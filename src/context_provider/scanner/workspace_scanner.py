"""Workspace scanner: discover, filter, and load eligible text files."""

import logging
import mimetypes
import os
import stat
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator, Optional

from context_provider.config import ScanSettings
from context_provider.errors import RecoverableFileError, WorkspaceNotFoundError
from context_provider.models import FileRecord
from context_provider.scanner.filters import (
    IgnoreRuleSet,
    is_hidden,
    should_include,
    within_size_limit,
)
from context_provider.utils.binary import decode_text

logger = logging.getLogger(__name__)


class WorkspaceScanner:
    """Scanner for a local workspace directory."""

    def __init__(self, workspace: Path | str, settings: Optional[ScanSettings] = None):
        self.workspace = Path(workspace)
        self.settings = settings or ScanSettings()

    def scan_files(self) -> list[FileRecord]:
        """Scan the workspace and return eligible files sorted by relative path.

        Raises:
            WorkspaceNotFoundError: If the root is missing or unreadable.
        """
        records = sorted(self.iter_files(), key=lambda r: r.relative_path)
        logger.info("Found %d processable files", len(records))
        return records

    def iter_files(self) -> Iterator[FileRecord]:
        """Yield eligible files one at a time.

        Order is the walk order: each directory's files by name, then its
        subdirectories by name.
        """
        root = self._check_root()

        # Rules are rebuilt on every scan so edits to ignore files take effect.
        rules = IgnoreRuleSet.build(root, self.settings.exclude_patterns or ())

        for full_path, rel_path in self._walk(root, rules):
            if not should_include(rel_path, rules, self.settings.include_extensions or ()):
                continue

            try:
                record = self._load(full_path, rel_path)
            except RecoverableFileError as exc:
                logger.warning("Skipping %s: %s", exc.path, exc.reason)
                continue

            if record is not None:
                yield record

    def _check_root(self) -> Path:
        root = self.workspace
        if not root.exists():
            raise WorkspaceNotFoundError(root)
        if not root.is_dir():
            raise WorkspaceNotFoundError(root, "is not a directory")
        try:
            with os.scandir(root):
                pass
        except OSError as exc:
            raise WorkspaceNotFoundError(root, f"cannot be read ({exc.strerror})") from exc
        return root.resolve()

    def _walk(self, root: Path, rules: IgnoreRuleSet) -> Iterator[tuple[Path, str]]:
        """Yield (absolute path, POSIX relative path) for every candidate file."""

        def on_error(exc: OSError) -> None:
            logger.warning("Cannot list %s: %s", exc.filename, exc.strerror)

        for dirpath, dirnames, filenames in os.walk(root, onerror=on_error):
            current = Path(dirpath)
            rel_dir = current.relative_to(root).as_posix()
            rel_dir = "" if rel_dir == "." else rel_dir + "/"

            # Sorting in place fixes the traversal order and prunes the walk.
            dirnames[:] = sorted(
                d for d in dirnames
                if not is_hidden(d) and not rules.prunes_directory(rel_dir + d)
            )
            for filename in sorted(filenames):
                yield current / filename, rel_dir + filename

    def _load(self, full_path: Path, rel_path: str) -> Optional[FileRecord]:
        """Stat, size-check, read, and decode one file.

        Returns None for files that are legitimately excluded (too large,
        not regular, binary). Raises RecoverableFileError for I/O failures.
        """
        try:
            info = full_path.lstat()
        except OSError as exc:
            raise RecoverableFileError(rel_path, f"cannot stat ({exc.strerror})") from exc

        if not stat.S_ISREG(info.st_mode):
            logger.debug("Skipping non-regular file: %s", rel_path)
            return None

        if not within_size_limit(info.st_size, self.settings.max_file_size):
            logger.info("Skipping large file: %s (%s)", rel_path, format_bytes(info.st_size))
            return None

        try:
            raw = full_path.read_bytes()
        except OSError as exc:
            raise RecoverableFileError(rel_path, f"cannot read ({exc.strerror})") from exc

        content = decode_text(raw)
        if content is None:
            logger.debug("Skipping binary or non-UTF-8 file: %s", rel_path)
            return None

        extension = full_path.suffix.lower()
        return FileRecord(
            absolute_path=str(full_path),
            relative_path=rel_path,
            content=content,
            size_bytes=info.st_size,
            extension=extension,
            last_modified=datetime.fromtimestamp(info.st_mtime, tz=timezone.utc).isoformat(),
            mime_type=mimetypes.guess_type(rel_path)[0] or "text/plain",
        )


def scan_files(workspace: Path | str, settings: Optional[ScanSettings] = None) -> list[FileRecord]:
    """Scan a workspace with the given settings."""
    return WorkspaceScanner(workspace, settings).scan_files()


def format_bytes(size: int) -> str:
    """Human-readable byte count, e.g. ``1.5 MB``."""
    if size == 0:
        return "0 Bytes"
    value = float(size)
    for unit in ("Bytes", "KB", "MB", "GB"):
        if value < 1024 or unit == "GB":
            return f"{value:.2f}".rstrip("0").rstrip(".") + f" {unit}"
        value /= 1024
    return f"{size} Bytes"
