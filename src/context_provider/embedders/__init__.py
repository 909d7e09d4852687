"""Embedding providers for vector generation."""

from context_provider.config import ModelConfig
from context_provider.embedders.callable_embedder import CallableEmbedder
from context_provider.embedders.sentence_transformer import SentenceTransformerEmbedder


def create_embedder(config: ModelConfig) -> SentenceTransformerEmbedder:
    """Build the default embedder for a model configuration (not yet loaded)."""
    return SentenceTransformerEmbedder(
        model_name=config.model,
        cache_dir=config.cache_dir,
        quantized=config.quantized,
    )


__all__ = ["SentenceTransformerEmbedder", "CallableEmbedder", "create_embedder"]
