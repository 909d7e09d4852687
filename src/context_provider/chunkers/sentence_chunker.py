"""Sentence-based chunking with an approximate token budget."""

import math
import re

from context_provider.config import DEFAULT_MAX_TOKENS, DEFAULT_OVERLAP
from context_provider.models import Chunk

# Terminal punctuation; runs like "?!" or "..." count as one delimiter.
SENTENCE_DELIMITER = re.compile(r"[.!?]+")

CHARS_PER_TOKEN = 4


def estimate_tokens(text: str) -> int:
    """Approximate token count: one token per four characters, rounded up.

    This is not a tokenizer; it only drives chunk boundaries.
    """
    return math.ceil(len(text) / CHARS_PER_TOKEN)


def split_sentences(text: str) -> list[str]:
    """Split on terminal punctuation, dropping the delimiters and blank units."""
    return [unit.strip() for unit in SENTENCE_DELIMITER.split(text) if unit.strip()]


def overlap_tail(text: str, overlap_tokens: int) -> str:
    """Last ``overlap_tokens`` words of ``text``, with a trailing space.

    Counts words, not tokens, so the real overlap is only roughly
    ``overlap_tokens``.
    """
    if overlap_tokens <= 0:
        return ""
    words = text.split()
    if not words:
        return ""
    return " ".join(words[-overlap_tokens:]) + " "


def chunk_text(
    text: str,
    max_tokens: int = DEFAULT_MAX_TOKENS,
    overlap_tokens: int = DEFAULT_OVERLAP,
) -> list[str]:
    """Split text into overlapping chunks of at most ~max_tokens each.

    Sentences accumulate into a buffer. When the next sentence would push
    the buffer over budget, the buffer is closed as a chunk and the next
    one starts with the closed chunk's word tail plus that sentence. A
    single sentence longer than the budget still becomes one chunk.

    Text that never needs splitting comes back as one chunk, the trimmed
    input with its own punctuation. Once a split happens, every sentence
    in the output ends in ". " whatever its original terminator was, so
    "?" and "!" do not survive in multi-chunk output.

    Non-empty text is never dropped, even without any sentences. Empty
    text yields no chunks.
    """
    if not text:
        return []

    chunks: list[str] = []
    buffer = ""
    buffer_tokens = 0

    for sentence in split_sentences(text):
        sentence_tokens = estimate_tokens(sentence)

        if buffer and buffer_tokens + sentence_tokens > max_tokens:
            closed = buffer.rstrip()
            chunks.append(closed)
            buffer = overlap_tail(closed, overlap_tokens) + sentence + ". "
            buffer_tokens = estimate_tokens(buffer)
        else:
            buffer += sentence + ". "
            buffer_tokens += sentence_tokens

    if not chunks:
        trimmed = text.strip()
        return [trimmed] if trimmed else [text]

    if buffer.strip():
        chunks.append(buffer.rstrip())
    return chunks


class SentenceChunker:
    """Default chunking: sentence accumulation under a token budget, with
    a word-based overlap carried into each following chunk.
    """

    def __init__(
        self,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        overlap_tokens: int = DEFAULT_OVERLAP,
    ):
        if max_tokens <= 0:
            raise ValueError(f"max_tokens must be > 0, got {max_tokens}")
        if overlap_tokens < 0:
            raise ValueError(f"overlap_tokens must be >= 0, got {overlap_tokens}")
        self.max_tokens = max_tokens
        self.overlap_tokens = overlap_tokens

    def chunk(self, text: str, file_path: str) -> list[Chunk]:
        """Split text into chunks with index and total filled in.

        Args:
            text: The text content to chunk
            file_path: Path to the source file (for metadata)

        Returns:
            List of Chunk objects, indexed from 0
        """
        pieces = chunk_text(text, self.max_tokens, self.overlap_tokens)
        total = len(pieces)
        return [
            Chunk(text=piece, file_path=file_path, index=idx, total=total)
            for idx, piece in enumerate(pieces)
        ]
