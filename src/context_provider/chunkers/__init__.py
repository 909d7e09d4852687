"""Chunking strategies."""

from context_provider.chunkers.sentence_chunker import (
    SentenceChunker,
    chunk_text,
    estimate_tokens,
)

__all__ = ["SentenceChunker", "chunk_text", "estimate_tokens"]
