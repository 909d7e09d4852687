"""Core data models for scanned files, chunks, and embedding results."""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class FileRecord:
    """One eligible text file loaded by the workspace scanner."""

    absolute_path: str
    relative_path: str  # stable identifier in output
    content: str
    size_bytes: int
    extension: str
    last_modified: str  # ISO-8601, UTC
    mime_type: str


@dataclass(frozen=True)
class Chunk:
    """A chunk of file text with its position in the file's chunk sequence."""

    text: str
    file_path: str
    index: int
    total: int


@dataclass(frozen=True)
class ChunkMetadata:
    """File metadata carried alongside each embedded chunk."""

    size_bytes: int
    extension: str
    last_modified: str
    chunk_index: int
    chunk_size: int  # characters


@dataclass(frozen=True)
class EmbeddingResult:
    """A chunk of text paired with its embedding vector."""

    file_path: str
    chunk_index: int
    total_chunks: int
    text: str
    embedding: list[float] = field(repr=False)
    metadata: ChunkMetadata

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON record layout used by embeddings.json."""
        return {
            "file": self.file_path,
            "chunk": self.chunk_index,
            "totalChunks": self.total_chunks,
            "text": self.text,
            "embedding": list(self.embedding),
            "metadata": {
                "size": self.metadata.size_bytes,
                "extension": self.metadata.extension,
                "lastModified": self.metadata.last_modified,
                "chunkIndex": self.metadata.chunk_index,
                "chunkSize": self.metadata.chunk_size,
            },
        }
