"""JSON output for embedding runs."""

import json
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Sequence

from context_provider.models import EmbeddingResult

EMBEDDINGS_FILENAME = "embeddings.json"
METADATA_FILENAME = "metadata.json"


@dataclass(frozen=True)
class RunMetadata:
    """Describes one processing run, stored next to the embeddings."""

    workspace: str
    model: str
    total_files: int
    max_tokens: int
    overlap: int
    model_cache: str
    processed_at: str = ""

    def to_dict(self, total_chunks: int) -> dict[str, Any]:
        return {
            "workspace": self.workspace,
            "model": self.model,
            "processedAt": self.processed_at or datetime.now(timezone.utc).isoformat(),
            "totalFiles": self.total_files,
            "totalChunks": total_chunks,
            "maxTokens": self.max_tokens,
            "overlap": self.overlap,
            "modelCache": self.model_cache,
        }


def write_results(
    output_dir: Path | str,
    results: Sequence[EmbeddingResult],
    metadata: RunMetadata,
) -> tuple[Path, Path]:
    """Write embeddings.json and metadata.json into output_dir.

    Returns:
        Paths of the embeddings file and the metadata file
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    embeddings_path = output_dir / EMBEDDINGS_FILENAME
    metadata_path = output_dir / METADATA_FILENAME

    with open(embeddings_path, "w", encoding="utf-8") as fh:
        json.dump([r.to_dict() for r in results], fh, indent=2, ensure_ascii=False)
    with open(metadata_path, "w", encoding="utf-8") as fh:
        json.dump(metadata.to_dict(total_chunks=len(results)), fh, indent=2)

    return embeddings_path, metadata_path


def read_results(output_dir: Path | str) -> list[dict[str, Any]]:
    """Load the records of a previous run's embeddings.json."""
    path = Path(output_dir) / EMBEDDINGS_FILENAME
    with open(path, encoding="utf-8") as fh:
        return json.load(fh)
