"""Protocol for embedding model providers."""

from typing import Protocol, runtime_checkable

import numpy as np


@runtime_checkable
class EmbeddingProvider(Protocol):
    """Protocol for embedding model providers.

    Allows swapping between local models (sentence-transformers),
    API-based models, or plain callables in tests.
    """

    @property
    def dimension(self) -> int:
        """Return the embedding dimension."""
        ...

    @property
    def model_name(self) -> str:
        """Return identifier for the model used."""
        ...

    def load(self) -> None:
        """Initialize the model; raises ModelLoadError on failure."""
        ...

    def embed(self, text: str) -> np.ndarray:
        """Embed one text.

        Returns: 1-D float32 array, mean pooled and L2-normalized
        """
        ...
