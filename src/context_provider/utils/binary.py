"""Binary content detection."""


def is_binary(content: str) -> bool:
    """Detect binary content in decoded text.

    A NUL character never appears in the text files we index, so its
    presence is treated as the binary signal.
    """
    return "\x00" in content


def decode_text(raw: bytes) -> str | None:
    """Decode raw bytes as UTF-8, returning None when they are not text."""
    try:
        content = raw.decode("utf-8")
    except UnicodeDecodeError:
        return None
    if is_binary(content):
        return None
    return content
