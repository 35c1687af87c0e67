"""
Obfuscator capability and the basic masking strategies.

An obfuscator turns a text value into a masked representation. Concrete
strategies only implement _obfuscate_range; the public entry points for
whole texts, spans, destinations, streams and writers are shared.
"""

import io
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional, TextIO

from httpmask.errors import IllegalConfigurationError, require_not_none
from httpmask.support.ranges import check_start_and_end
from httpmask.support.writers import CachingObfuscatingWriter


class Obfuscator(ABC):
    """Base class for all obfuscators."""

    @abstractmethod
    def _obfuscate_range(self, text: str, start: int, end: int, destination: TextIO) -> None:
        """
        Write the obfuscated form of text[start:end] to destination.

        The span has already been validated.
        """

    def obfuscate_text(self, text: str, start: int = 0, end: Optional[int] = None) -> str:
        """
        Obfuscate text, or the [start, end) span of it.

        Args:
            text: Text to obfuscate
            start: Start index, inclusive
            end: End index, exclusive (default: end of text)

        Returns:
            Obfuscated text

        Raises:
            NullArgumentError: If text is None
            IndexOutOfRangeError: If the span is invalid
        """
        start, end = check_start_and_end(text, start, end)
        buffer = io.StringIO()
        self._obfuscate_range(text, start, end, buffer)
        return buffer.getvalue()

    def obfuscate_text_to(
        self,
        text: str,
        destination: TextIO,
        start: int = 0,
        end: Optional[int] = None
    ) -> None:
        """
        Obfuscate text, or the [start, end) span of it, into destination.

        Args:
            text: Text to obfuscate
            destination: Text sink with a write(str) method
            start: Start index, inclusive
            end: End index, exclusive (default: end of text)

        Raises:
            NullArgumentError: If text or destination is None
            IndexOutOfRangeError: If the span is invalid
            OSError: If writing to destination fails
        """
        start, end = check_start_and_end(text, start, end)
        require_not_none(destination, "destination")
        self._obfuscate_range(text, start, end, destination)

    def obfuscate_stream(self, source: TextIO, destination: TextIO) -> None:
        """
        Obfuscate the full contents of a text stream into destination.

        Args:
            source: Text stream with a read() method; read until exhausted
            destination: Text sink with a write(str) method
        """
        require_not_none(source, "source")
        require_not_none(destination, "destination")
        text = source.read()
        self._obfuscate_range(text, 0, len(text), destination)

    def stream_to(self, destination: TextIO, close_destination: bool = False) -> CachingObfuscatingWriter:
        """
        Open a writer that obfuscates everything written to it.

        Nothing reaches destination before the writer is closed.

        Args:
            destination: Text sink receiving the obfuscated text
            close_destination: Whether closing the writer closes destination

        Returns:
            CachingObfuscatingWriter bound to this obfuscator
        """
        require_not_none(destination, "destination")
        return CachingObfuscatingWriter(self, destination, close_destination=close_destination)

    def obfuscate_object(self, value: Any) -> "Obfuscated":
        """Wrap value so that its string form is obfuscated."""
        require_not_none(value, "value")
        return Obfuscated(value, self)


class Obfuscated:
    """
    A value paired with the obfuscator for its string representation.

    The original value stays available through the value property;
    str() returns the obfuscated text.
    """

    __slots__ = ("_value", "_obfuscator")

    def __init__(self, value: Any, obfuscator: Obfuscator):
        self._value = require_not_none(value, "value")
        self._obfuscator = require_not_none(obfuscator, "obfuscator")

    @property
    def value(self) -> Any:
        """The original, unobfuscated value."""
        return self._value

    def __str__(self) -> str:
        return self._obfuscator.obfuscate_text(str(self._value))

    def __repr__(self) -> str:
        return f"Obfuscated({str(self)!r})"

    def __eq__(self, other) -> bool:
        if not isinstance(other, Obfuscated):
            return NotImplemented
        return self._value == other._value

    def __hash__(self) -> int:
        return hash(self._value)


def _check_mask_char(mask_char: str) -> None:
    if not isinstance(mask_char, str) or len(mask_char) != 1:
        raise IllegalConfigurationError(f"mask_char must be a single character: {mask_char!r}")


@dataclass(frozen=True)
class _AllObfuscator(Obfuscator):
    mask_char: str = "*"

    def __post_init__(self):
        _check_mask_char(self.mask_char)

    def _obfuscate_range(self, text, start, end, destination):
        destination.write(self.mask_char * (end - start))


@dataclass(frozen=True)
class _FixedLengthObfuscator(Obfuscator):
    length: int
    mask_char: str = "*"

    def __post_init__(self):
        if not isinstance(self.length, int) or self.length < 0:
            raise IllegalConfigurationError(f"length must be a non-negative integer: {self.length!r}")
        _check_mask_char(self.mask_char)

    def _obfuscate_range(self, text, start, end, destination):
        destination.write(self.mask_char * self.length)


@dataclass(frozen=True)
class _FixedValueObfuscator(Obfuscator):
    value: str

    def _obfuscate_range(self, text, start, end, destination):
        destination.write(self.value)


class _NoneObfuscator(Obfuscator):

    def _obfuscate_range(self, text, start, end, destination):
        destination.write(text[start:end])

    def __repr__(self) -> str:
        return "none()"


_NONE = _NoneObfuscator()


def all(mask_char: str = "*") -> Obfuscator:
    """Obfuscator that replaces every character with mask_char."""
    return _AllObfuscator(mask_char)


def fixed_length(length: int, mask_char: str = "*") -> Obfuscator:
    """
    Obfuscator that replaces any text with length copies of mask_char.

    Hides the length of the original value as well as its contents.

    Raises:
        IllegalConfigurationError: If length is negative
    """
    return _FixedLengthObfuscator(length, mask_char)


def fixed_value(value: str) -> Obfuscator:
    """Obfuscator that replaces any text with a constant value."""
    return _FixedValueObfuscator(require_not_none(value, "value"))


def none() -> Obfuscator:
    """Obfuscator that leaves text unchanged."""
    return _NONE
