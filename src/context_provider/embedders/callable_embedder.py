"""Adapter turning a plain ``embed(text)`` callable into an EmbeddingProvider."""

from typing import Callable, Sequence

import numpy as np

EmbedFunction = Callable[[str], Sequence[float] | np.ndarray]


class CallableEmbedder:
    """Wrap any callable returning a vector, L2-normalizing its output."""

    def __init__(self, func: EmbedFunction, model_name: str = "callable"):
        self._func = func
        self._model_name = model_name
        self._dimension = 0

    def load(self) -> None:
        """Nothing to load; the callable is ready as given."""

    @property
    def dimension(self) -> int:
        """Return the embedding dimension (0 until the first call)."""
        return self._dimension

    @property
    def model_name(self) -> str:
        return self._model_name

    def embed(self, text: str) -> np.ndarray:
        vector = np.asarray(self._func(text), dtype=np.float32).reshape(-1)
        if vector.size == 0:
            raise ValueError("Embedding function returned an empty vector")
        if self._dimension and vector.size != self._dimension:
            raise ValueError(
                f"Embedding dimension changed from {self._dimension} to {vector.size}"
            )
        self._dimension = int(vector.size)

        norm = np.linalg.norm(vector)
        if norm > 0:
            vector = vector / norm
        return vector
