"""Protocol for text chunking strategies."""

from typing import Protocol, runtime_checkable

from context_provider.models import Chunk


@runtime_checkable
class ChunkingStrategy(Protocol):
    """Protocol for text chunking strategies.

    Chunks come back in file order with ``index`` 0..n-1 and ``total`` n.
    """

    def chunk(self, text: str, file_path: str) -> list[Chunk]:
        """Split text into chunks with metadata."""
        ...
