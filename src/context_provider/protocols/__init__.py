"""Protocol definitions for extensible components."""

from context_provider.protocols.chunker import ChunkingStrategy
from context_provider.protocols.embedder import EmbeddingProvider

__all__ = ["EmbeddingProvider", "ChunkingStrategy"]
