"""Text sinks used by obfuscators: output limiting and deferred obfuscation."""

import io
import logging
from typing import Iterable, Optional, Sequence, TextIO, Union

from httpmask.errors import require_not_none
from httpmask.support.ranges import check_offset_and_length, check_start_and_end

logger = logging.getLogger(__name__)


class LimitAppendable:
    """
    Wraps a destination and stops writing once limit characters were written.

    Writes beyond the limit are cut off and counted as exceeding it; all later
    writes are dropped. A limit of None never truncates. The caller checks
    limit_exceeded afterwards and writes any truncation indicator to the
    destination directly.
    """

    def __init__(self, destination: TextIO, limit: Optional[int]):
        self._destination = destination
        self._remaining = limit
        self.limit_exceeded = False

    def write(self, text: str) -> int:
        if self.limit_exceeded or not text:
            return len(text)
        if self._remaining is None:
            self._destination.write(text)
            return len(text)
        if len(text) <= self._remaining:
            self._destination.write(text)
            self._remaining -= len(text)
        else:
            if self._remaining > 0:
                self._destination.write(text[:self._remaining])
            self._remaining = 0
            self.limit_exceeded = True
        return len(text)


class CachingObfuscatingWriter:
    """
    Writer that buffers everything written to it and obfuscates it on close.

    Whether a value must be masked depends on text that may only arrive in a
    later write, so the whole text is collected first and handed to the
    obfuscator once, when the writer is closed.

    Closing is idempotent: only the first close obfuscates. Writing or
    flushing a closed writer raises ValueError, like a closed file.

    Not thread-safe; use one writer per session.

    Example:
        >>> out = io.StringIO()
        >>> with obfuscator.stream_to(out) as w:
        ...     w.write("password=")
        ...     w.write("secret")
        >>> out.getvalue()
        'password=******'
    """

    def __init__(self, obfuscator, destination: TextIO, close_destination: bool = False):
        """
        Initialize writer.

        Args:
            obfuscator: Obfuscator applied to the buffered text on close
            destination: Text sink receiving the obfuscated text
            close_destination: Whether close() also closes destination
                (it is always flushed when it supports flushing)
        """
        self._obfuscator = require_not_none(obfuscator, "obfuscator")
        self._destination = require_not_none(destination, "destination")
        self._close_destination = close_destination
        self._buffer: Optional[io.StringIO] = io.StringIO()

    @property
    def closed(self) -> bool:
        return self._buffer is None

    def _ensure_open(self) -> None:
        if self._buffer is None:
            raise ValueError("I/O operation on closed writer")

    def write(self, text: str) -> int:
        """
        Buffer text.

        Returns:
            Number of characters written
        """
        require_not_none(text, "text")
        self._ensure_open()
        return self._buffer.write(text)

    def write_char(self, char: Union[str, int]) -> None:
        """Buffer a single character, given as a one-character string or a code point."""
        require_not_none(char, "char")
        if isinstance(char, int):
            char = chr(char)
        elif not isinstance(char, str) or len(char) != 1:
            raise ValueError(f"Expected a single character, got {char!r}")
        self._ensure_open()
        self._buffer.write(char)

    def write_chars(self, chars: Sequence[str], offset: int = 0, length: Optional[int] = None) -> None:
        """
        Buffer length characters of chars, starting at offset.

        Args:
            chars: Sequence of characters (a list of one-character strings or a str)
            offset: Index of the first character to write
            length: Number of characters to write (default: up to the end)

        Raises:
            IndexOutOfRangeError: If offset or length is negative, or
                offset + length exceeds len(chars)
        """
        start, end = check_offset_and_length(chars, offset, length)
        self._ensure_open()
        self._buffer.write("".join(chars[start:end]))

    def append(self, text: str, start: int = 0, end: Optional[int] = None) -> "CachingObfuscatingWriter":
        """
        Buffer the [start, end) span of text.

        Returns:
            This writer, so calls can be chained

        Raises:
            IndexOutOfRangeError: If the span is invalid
        """
        start, end = check_start_and_end(text, start, end)
        self._ensure_open()
        self._buffer.write(text[start:end])
        return self

    def writelines(self, lines: Iterable[str]) -> None:
        for line in lines:
            self.write(line)

    def flush(self) -> None:
        """
        Does not emit anything.

        Parameter boundaries are not known until the writer is closed.
        """
        self._ensure_open()

    def close(self) -> None:
        """Obfuscate the buffered text into the destination, once."""
        if self._buffer is None:
            return
        text = self._buffer.getvalue()
        self._buffer = None
        logger.debug("Obfuscating %d buffered characters", len(text))
        try:
            self._obfuscator.obfuscate_text_to(text, self._destination)
        finally:
            try:
                flush = getattr(self._destination, "flush", None)
                if flush is not None:
                    flush()
            finally:
                if self._close_destination:
                    self._destination.close()

    def __enter__(self) -> "CachingObfuscatingWriter":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
