"""context-provider: turn a workspace into embedded text chunks."""

from context_provider.chunkers import SentenceChunker, chunk_text, estimate_tokens
from context_provider.config import ModelConfig, ScanSettings, WorkspaceConfig
from context_provider.models import Chunk, EmbeddingResult, FileRecord
from context_provider.pipeline import EmbeddingPipeline, process_files
from context_provider.scanner import WorkspaceScanner, scan_files

__version__ = "1.0.0"

__all__ = [
    "ScanSettings",
    "ModelConfig",
    "WorkspaceConfig",
    "FileRecord",
    "Chunk",
    "EmbeddingResult",
    "WorkspaceScanner",
    "scan_files",
    "SentenceChunker",
    "chunk_text",
    "estimate_tokens",
    "EmbeddingPipeline",
    "process_files",
]
