"""Persistence of embedding results."""

from context_provider.storage.writer import RunMetadata, read_results, write_results

__all__ = ["RunMetadata", "write_results", "read_results"]
