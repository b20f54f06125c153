"""Split text that exceeds a provider's length limit into ordered chunks.

Sentence boundaries are preferred: the text is cut at whitespace that follows
terminal punctuation (``. ! ? …`` and their CJK / Arabic equivalents). Any
sentence that is still too long is hard-split into ``max_length`` pieces.
The pieces are then greedily packed back together, joined by single spaces,
so that each chunk is as full as possible without exceeding the limit.

Example:
    >>> split_text("One. Two. Three.", 9)
    ['One. Two.', 'Three.']
"""

import logging
import re

from multitts.errors import ErrorCode, TTSError
from multitts.events.telemetry import Telemetry

logger = logging.getLogger(__name__)

_SENTENCE_BOUNDARY = re.compile(r"(?<=[.!?…。！？؟])\s+")


def split_text(
    text: str,
    max_length: int,
    *,
    telemetry: Telemetry | None = None,
    provider: str | None = None,
) -> list[str]:
    """Split *text* into chunks of at most *max_length* characters.

    Returns an empty list for blank text and ``[text.strip()]`` when the
    trimmed text already fits. Emits a ``text.split`` event when more than
    one chunk is produced.

    Raises:
        TTSError: If *text* is not a string or *max_length* is not a
            positive integer.
    """
    if not isinstance(text, str):
        raise TTSError(ErrorCode.ERROR, "text must be a string", provider=provider)
    if isinstance(max_length, bool) or not isinstance(max_length, int) or max_length <= 0:
        raise TTSError(
            ErrorCode.ERROR, "max_length must be a positive integer", provider=provider
        )

    text = text.strip()
    if not text:
        return []
    if len(text) <= max_length:
        return [text]

    pieces: list[str] = []
    for sentence in _SENTENCE_BOUNDARY.split(text):
        pieces.extend(_split_oversized(sentence, max_length))

    chunks = _pack(pieces, max_length)

    if len(chunks) > 1:
        logger.debug(
            "Split %d chars into %d chunks (max_length=%d)",
            len(text),
            len(chunks),
            max_length,
        )
        if telemetry is not None:
            telemetry.text_split(
                len(chunks),
                original_length=len(text),
                chunk_size=max_length,
                total_length=sum(len(chunk) for chunk in chunks),
                provider=provider,
            )

    return chunks


def _split_oversized(sentence: str, max_length: int) -> list[str]:
    """Hard-split a sentence longer than *max_length* into fixed-size pieces."""
    sentence = sentence.strip()
    if len(sentence) <= max_length:
        return [sentence]
    return [sentence[i:i + max_length] for i in range(0, len(sentence), max_length)]


def _pack(pieces: list[str], max_length: int) -> list[str]:
    """Greedily join pieces with single spaces while they fit in *max_length*."""
    chunks: list[str] = []
    current = ""

    for piece in pieces:
        piece = piece.strip()
        if not piece:
            continue
        if not current and len(piece) <= max_length:
            current = piece
        elif len(current) + 1 + len(piece) <= max_length:
            current = f"{current} {piece}"
        else:
            if current:
                chunks.append(current)
            current = piece

    if current:
        chunks.append(current)
    return chunks
