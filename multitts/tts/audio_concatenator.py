"""Byte-level concatenation of audio segments.

Segments are appended in order with no container awareness. This is valid
for formats where sequential concatenation still plays back (MP3, raw PCM,
ulaw); choosing such a format is the caller's responsibility.
"""

from typing import Any, Sequence

from multitts.errors import ErrorCode, TTSError

_BYTES_TYPES = (bytes, bytearray, memoryview)


def concatenate(segments: Sequence[Any]) -> bytes:
    """Join *segments* into one buffer.

    Raises:
        TTSError: If *segments* is not a list/tuple or any element is not bytes.
    """
    if not isinstance(segments, (list, tuple)):
        raise TTSError(ErrorCode.ERROR, "segments must be a list of bytes")
    if not segments:
        return b""
    if not all(isinstance(segment, _BYTES_TYPES) for segment in segments):
        raise TTSError(ErrorCode.ERROR, "all segments must be bytes")
    if len(segments) == 1:
        return segments[0]
    return b"".join(segments)
