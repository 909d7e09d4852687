"""SentenceTransformer-based embedding provider."""

import logging
from pathlib import Path
from typing import Optional

import numpy as np
from sentence_transformers import SentenceTransformer

from context_provider.config import DEFAULT_MODEL
from context_provider.errors import ModelLoadError

logger = logging.getLogger(__name__)


class SentenceTransformerEmbedder:
    """Embedding provider using sentence-transformers library.

    Uses all-MiniLM-L6-v2 by default - a fast, lightweight model
    that mean-pools token embeddings into a 384-dimensional vector.
    """

    DEFAULT_MODEL = DEFAULT_MODEL

    def __init__(
        self,
        model_name: Optional[str] = None,
        cache_dir: Optional[Path | str] = None,
        quantized: bool = False,
    ):
        """Initialize the embedder.

        Args:
            model_name: Name of the sentence-transformers model to use.
                       Defaults to all-MiniLM-L6-v2.
            cache_dir: Directory for downloaded model files. Defaults to
                       the sentence-transformers cache.
            quantized: Apply dynamic int8 quantization to Linear layers
                       after loading (CPU inference).
        """
        self._model_name = model_name or self.DEFAULT_MODEL
        self._cache_dir = Path(cache_dir).expanduser() if cache_dir else None
        self._quantized = quantized
        self._model: SentenceTransformer | None = None

    def load(self) -> None:
        """Load the model if it is not loaded yet.

        Raises:
            ModelLoadError: If the model cannot be downloaded or built.
        """
        if self._model is not None:
            return

        logger.info("Loading embedding model: %s", self._model_name)
        cache_folder = None
        if self._cache_dir is not None:
            self._cache_dir.mkdir(parents=True, exist_ok=True)
            cache_folder = str(self._cache_dir)

        try:
            model = SentenceTransformer(self._model_name, cache_folder=cache_folder)
            if self._quantized:
                model = self._quantize(model)
        except Exception as exc:
            raise ModelLoadError(self._model_name, exc) from exc

        self._model = model
        logger.info("Model loaded successfully")

    @staticmethod
    def _quantize(model: SentenceTransformer) -> SentenceTransformer:
        import torch

        return torch.quantization.quantize_dynamic(
            model, {torch.nn.Linear}, dtype=torch.qint8
        )

    @property
    def model(self) -> SentenceTransformer:
        """Lazy-load the model on first access."""
        self.load()
        assert self._model is not None
        return self._model

    @property
    def dimension(self) -> int:
        """Return the embedding dimension."""
        return self.model.get_sentence_embedding_dimension() or 0

    @property
    def model_name(self) -> str:
        """Return identifier for the model used."""
        return self._model_name

    def embed(self, text: str) -> np.ndarray:
        """Generate the embedding for one text.

        Args:
            text: Text to embed

        Returns:
            numpy array of shape (embedding_dim,)
        """
        embedding = self.model.encode(
            text,
            convert_to_numpy=True,
            normalize_embeddings=True,  # For cosine similarity
            show_progress_bar=False,
        )
        return np.asarray(embedding, dtype=np.float32)
