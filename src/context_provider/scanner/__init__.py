"""Workspace scanning and file filtering."""

from context_provider.scanner.filters import (
    IgnoreRuleSet,
    is_text_by_extension,
    should_include,
)
from context_provider.scanner.workspace_scanner import WorkspaceScanner, scan_files

__all__ = [
    "WorkspaceScanner",
    "scan_files",
    "IgnoreRuleSet",
    "should_include",
    "is_text_by_extension",
]
