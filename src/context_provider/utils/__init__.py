"""Utility functions for context-provider."""

from context_provider.utils.binary import decode_text, is_binary

__all__ = ["is_binary", "decode_text"]
