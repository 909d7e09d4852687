"""Chunk scanned files and embed every chunk."""

import logging
from dataclasses import dataclass, field
from typing import Iterable, Iterator, Optional

from context_provider.chunkers import SentenceChunker
from context_provider.config import DEFAULT_MAX_TOKENS, DEFAULT_OVERLAP
from context_provider.errors import ModelLoadError
from context_provider.models import ChunkMetadata, EmbeddingResult, FileRecord
from context_provider.protocols import ChunkingStrategy, EmbeddingProvider

logger = logging.getLogger(__name__)


@dataclass
class ProcessingSummary:
    """Counters for the most recent pipeline run."""

    files_seen: int = 0
    chunks_embedded: int = 0
    failed_files: list[str] = field(default_factory=list)
    empty_files: list[str] = field(default_factory=list)

    @property
    def files_failed(self) -> int:
        return len(self.failed_files)


class EmbeddingPipeline:
    """Turn FileRecords into EmbeddingResults, one file at a time.

    A failure anywhere in a file (chunking or any chunk's embedding call)
    drops that whole file with a warning. Chunks already embedded for it
    are discarded too, so a file is either fully present in the output or
    absent.
    """

    def __init__(
        self,
        embedder: EmbeddingProvider,
        chunker: Optional[ChunkingStrategy] = None,
    ):
        self.embedder = embedder
        self.chunker = chunker or SentenceChunker()
        self.summary = ProcessingSummary()

    def process_files(self, records: Iterable[FileRecord]) -> list[EmbeddingResult]:
        """Embed all files and return results in file order, then chunk order.

        Raises:
            ModelLoadError: If the embedding model cannot be initialized.
        """
        results = list(self.iter_results(records))
        logger.info(
            "Generated embeddings for %d chunks from %d files (%d failed)",
            self.summary.chunks_embedded,
            self.summary.files_seen,
            self.summary.files_failed,
        )
        return results

    def iter_results(self, records: Iterable[FileRecord]) -> Iterator[EmbeddingResult]:
        """Yield results as each file completes, in the same order as
        ``process_files``.
        """
        self.summary = ProcessingSummary()
        self._load_model()

        records = list(records)
        for position, record in enumerate(records, 1):
            self.summary.files_seen += 1
            logger.debug(
                "Processing file %d/%d: %s", position, len(records), record.relative_path
            )
            try:
                file_results = self._process_file(record)
            except Exception as exc:
                self.summary.failed_files.append(record.relative_path)
                logger.warning("Error processing file %s: %s", record.relative_path, exc)
                continue

            if not file_results:
                self.summary.empty_files.append(record.relative_path)
                logger.warning("No chunks for %s", record.relative_path)
                continue

            self.summary.chunks_embedded += len(file_results)
            yield from file_results

    def _load_model(self) -> None:
        try:
            self.embedder.load()
        except ModelLoadError:
            raise
        except Exception as exc:
            raise ModelLoadError(self.embedder.model_name, exc) from exc

    def _process_file(self, record: FileRecord) -> list[EmbeddingResult]:
        results = []
        for chunk in self.chunker.chunk(record.content, record.relative_path):
            vector = self.embedder.embed(chunk.text)
            embedding = [float(x) for x in vector]
            if not embedding:
                raise ValueError(f"empty embedding for chunk {chunk.index}")

            results.append(
                EmbeddingResult(
                    file_path=record.relative_path,
                    chunk_index=chunk.index,
                    total_chunks=chunk.total,
                    text=chunk.text,
                    embedding=embedding,
                    metadata=ChunkMetadata(
                        size_bytes=record.size_bytes,
                        extension=record.extension,
                        last_modified=record.last_modified,
                        chunk_index=chunk.index,
                        chunk_size=len(chunk.text),
                    ),
                )
            )
        return results


def process_files(
    records: Iterable[FileRecord],
    embedder: EmbeddingProvider,
    max_tokens: int = DEFAULT_MAX_TOKENS,
    overlap: int = DEFAULT_OVERLAP,
) -> list[EmbeddingResult]:
    """Run the pipeline once with a sentence chunker."""
    chunker = SentenceChunker(max_tokens=max_tokens, overlap_tokens=overlap)
    return EmbeddingPipeline(embedder, chunker).process_files(records)
