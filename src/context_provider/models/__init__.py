"""Data models for context-provider."""

from context_provider.models.document import (
    Chunk,
    ChunkMetadata,
    EmbeddingResult,
    FileRecord,
)

__all__ = ["FileRecord", "Chunk", "ChunkMetadata", "EmbeddingResult"]
