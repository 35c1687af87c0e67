"""Span and sub-range helpers shared by obfuscators and writers."""

from typing import Optional, Sequence, Tuple

from httpmask.errors import IndexOutOfRangeError, require_not_none


def check_start_and_end(text: Sequence, start: int, end: Optional[int]) -> Tuple[int, int]:
    """
    Validate a [start, end) span of text.

    Args:
        text: Text (or any sized sequence) the span refers to
        start: Start index, inclusive
        end: End index, exclusive; None means len(text)

    Returns:
        Tuple of (start, end) with end resolved

    Raises:
        NullArgumentError: If text is None
        IndexOutOfRangeError: If start < 0, end > len(text) or start > end
    """
    require_not_none(text, "text")
    length = len(text)
    if end is None:
        end = length
    if start < 0 or end > length or start > end:
        raise IndexOutOfRangeError(
            f"start: {start}, end: {end}, length: {length}"
        )
    return start, end


def check_offset_and_length(text: Sequence, offset: int, length: Optional[int]) -> Tuple[int, int]:
    """
    Validate an offset/length sub-range and convert it to a [start, end) span.

    Args:
        text: Text or character sequence the range refers to
        offset: Start offset
        length: Number of elements; None means everything after offset

    Returns:
        Tuple of (start, end)

    Raises:
        IndexOutOfRangeError: If offset or length is negative or the range
            exceeds the bounds of text
    """
    require_not_none(text, "text")
    size = len(text)
    if length is None:
        length = size - offset
    if offset < 0 or length < 0 or offset + length > size:
        raise IndexOutOfRangeError(
            f"offset: {offset}, length: {length}, size: {size}"
        )
    return offset, offset + length


def index_of(text: str, char: str, start: int, end: int) -> int:
    """Index of char in text[start:end], or -1."""
    return text.find(char, start, end)
