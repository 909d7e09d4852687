"""Ignore rules and per-path eligibility checks for the workspace scanner."""

import logging
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import Iterable

import pathspec

from context_provider.config import normalize_extension

logger = logging.getLogger(__name__)

IGNORE_FILENAMES = (".gitignore", ".contextignore")


@dataclass(frozen=True)
class IgnoreRuleSet:
    """Combined exclusion patterns for one scan.

    Patterns follow .gitignore semantics: ``*`` matches within a path
    segment, ``dir/**`` covers everything below ``dir``, and a leading
    ``!`` re-includes a path excluded by an earlier rule.
    """

    patterns: tuple[str, ...]
    sources: tuple[str, ...] = ()
    _spec: pathspec.GitIgnoreSpec = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_spec", pathspec.GitIgnoreSpec.from_lines(self.patterns))

    @classmethod
    def build(cls, root: Path | str, base_patterns: Iterable[str]) -> "IgnoreRuleSet":
        """Static patterns first, then .gitignore, then .contextignore."""
        root = Path(root)
        patterns = list(base_patterns)
        sources = []

        for filename in IGNORE_FILENAMES:
            ignore_file = root / filename
            if not ignore_file.is_file():
                continue
            try:
                lines = ignore_file.read_text(encoding="utf-8").splitlines()
            except (OSError, UnicodeDecodeError) as exc:
                logger.warning("Could not read %s: %s", filename, exc)
                continue
            patterns.extend(lines)
            sources.append(filename)
            logger.info("Loaded %s patterns", filename)

        return cls(patterns=tuple(patterns), sources=tuple(sources))

    @property
    def has_negations(self) -> bool:
        return any(p.lstrip().startswith("!") for p in self.patterns)

    def ignores(self, rel_path: str) -> bool:
        """Check a workspace-relative POSIX path against the rules."""
        return self._spec.match_file(rel_path)

    def prunes_directory(self, rel_dir: str) -> bool:
        """Check if a directory can be skipped without visiting its files.

        Only safe when no rule can re-include something beneath it.
        """
        if self.has_negations:
            return False
        return self._spec.match_file(rel_dir.rstrip("/") + "/")


def is_text_by_extension(extension: str, allow_list: Iterable[str]) -> bool:
    """Check an extension against the allow-list, case-insensitively."""
    return normalize_extension(extension) in {normalize_extension(e) for e in allow_list}


def is_hidden(rel_path: str) -> bool:
    """Dotfiles and anything inside a dot-directory."""
    return any(part.startswith(".") for part in PurePosixPath(rel_path).parts)


def within_size_limit(size_bytes: int, max_file_size: int) -> bool:
    return size_bytes <= max_file_size


def should_include(
    rel_path: str,
    rules: IgnoreRuleSet,
    include_extensions: Iterable[str],
) -> bool:
    """Path-level checks that need no filesystem access.

    Size, file type, and content checks happen in the scanner once the
    path has passed here.
    """
    if is_hidden(rel_path):
        return False
    if rules.ignores(rel_path):
        return False
    return is_text_by_extension(PurePosixPath(rel_path).suffix, include_extensions)
