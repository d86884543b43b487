"""
Message Chunker

Splits a rendered message into pieces that fit a webhook's per-message
size limit, breaking on newlines where possible.
"""

DISCORD_MESSAGE_LIMIT = 2000


def chunk_message(content: str, limit: int = DISCORD_MESSAGE_LIMIT) -> list[str]:
    """
    Split content into chunks of at most limit characters.

    Each split happens after the last newline at or before limit; lines
    longer than limit are hard-broken at limit. Whitespace around split
    points is dropped and empty chunks are never returned.

    Args:
        content: Full message text
        limit: Maximum characters per chunk

    Returns:
        Ordered list of non-empty chunks

    Raises:
        ValueError: If limit is smaller than 1
    """
    if limit < 1:
        raise ValueError(f"Chunk limit must be positive, got {limit}")

    chunks: list[str] = []
    remaining = content.strip()

    while len(remaining) > limit:
        split_index = remaining.rfind("\n", 0, limit + 1)
        if split_index <= 0:
            split_index = limit

        chunk = remaining[:split_index].rstrip()
        if chunk:
            chunks.append(chunk)
        remaining = remaining[split_index:].lstrip()

    if remaining:
        chunks.append(remaining)

    return chunks
