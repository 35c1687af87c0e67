"""
Obfuscation of request parameters in query strings and form data.

Parameters are key=value pairs separated by '&', with percent-encoded names
and values. Only the values of registered parameters are touched; everything
else is copied through exactly as given.
"""

import logging
from typing import Any, Callable, Optional, TextIO, TypeVar

from httpmask.errors import IllegalConfigurationError, require_not_none
from httpmask.obfuscator import Obfuscated, Obfuscator, none
from httpmask.support import encoding as percent
from httpmask.support.mapping import CaseSensitivity, MapBuilder, ObfuscatorMap
from httpmask.support.ranges import index_of
from httpmask.support.writers import LimitAppendable

logger = logging.getLogger(__name__)

DEFAULT_TRUNCATED_INDICATOR = "... (total: %d)"

# Characters pulled from a source per read in stream mode
_READ_SIZE = 4096

R = TypeVar("R")


class RequestParameterObfuscator(Obfuscator):
    """
    Obfuscator for request parameter strings (key1=value1&key2=value2...).

    Instances are immutable and safe to share between threads. Create them
    with RequestParameterObfuscator.builder().
    """

    def __init__(self, builder: "Builder"):
        self._obfuscators: ObfuscatorMap = builder._obfuscators.build()
        self._encoding: str = builder._encoding
        self._limit: Optional[int] = builder._limit
        self._truncated_indicator: Optional[str] = builder._truncated_indicator

    @staticmethod
    def builder() -> "Builder":
        return Builder()

    @property
    def encoding(self) -> str:
        return self._encoding

    @property
    def limit(self) -> Optional[int]:
        return self._limit

    @property
    def truncated_indicator(self) -> Optional[str]:
        return self._truncated_indicator

    def _obfuscate_range(self, text: str, start: int, end: int, destination: TextIO) -> None:
        total = end - start
        appendable = LimitAppendable(destination, self._limit)
        while not appendable.limit_exceeded:
            index = index_of(text, "&", start, end)
            if index == -1:
                # remainder
                self._obfuscate_parameter(text, start, end, appendable)
                break
            self._obfuscate_parameter(text, start, index, appendable)
            appendable.write("&")
            start = index + 1
        if appendable.limit_exceeded:
            self._append_truncated_indicator(total, destination)

    def obfuscate_stream(self, source: TextIO, destination: TextIO) -> None:
        """
        Obfuscate a parameter string read from source into destination.

        Each parameter is written as soon as its terminating '&' has been
        read. With a limit, the rest of source is still read (and discarded)
        after the limit is reached, so the total length can be reported.

        Args:
            source: Text stream with a read(size) method
            destination: Text sink with a write(str) method

        Raises:
            NullArgumentError: If source or destination is None
            DecodingError: If a name or a masked value is not valid percent-encoding
            OSError: If reading or writing fails
        """
        require_not_none(source, "source")
        require_not_none(destination, "destination")

        appendable = LimitAppendable(destination, self._limit)
        segment = []
        total = 0
        while True:
            chunk = source.read(_READ_SIZE)
            if not chunk:
                break
            total += len(chunk)
            for c in chunk:
                if appendable.limit_exceeded:
                    # keep reading to count the remaining input
                    break
                if c == "&":
                    self._obfuscate_segment(segment, appendable)
                    segment.clear()
                    appendable.write("&")
                else:
                    segment.append(c)
        if appendable.limit_exceeded:
            self._append_truncated_indicator(total, destination)
        else:
            # remainder
            self._obfuscate_segment(segment, appendable)
            if appendable.limit_exceeded:
                self._append_truncated_indicator(total, destination)

    def _obfuscate_segment(self, segment, destination) -> None:
        text = "".join(segment)
        self._obfuscate_parameter(text, 0, len(text), destination)

    def _obfuscate_parameter(self, text: str, start: int, end: int, destination) -> None:
        index = index_of(text, "=", start, end)
        if index == -1:
            # no value so nothing to mask
            destination.write(text[start:end])
            return

        name = percent.decode(text[start:index], self._encoding)
        obfuscator = self._obfuscators.get(name)
        if obfuscator is None:
            destination.write(text[start:end])
            return

        value = percent.decode(text[index + 1:end], self._encoding)
        destination.write(text[start:index + 1])
        obfuscated = obfuscator.obfuscate_text(value)
        destination.write(percent.encode(obfuscated, self._encoding))

    def _append_truncated_indicator(self, total: int, destination: TextIO) -> None:
        if self._truncated_indicator is not None:
            destination.write(self._truncated_indicator % total)

    def obfuscator(self, name: str) -> Obfuscator:
        """The obfuscator registered for a parameter, or none() if there is none."""
        require_not_none(name, "name")
        return self._obfuscators.get(name, none())

    def obfuscate_parameter(self, name: str, value: str, destination: Optional[TextIO] = None) -> Optional[str]:
        """
        Obfuscate the value of a single parameter.

        The value is taken as is: it is not parsed, percent-decoded or
        percent-encoded, and no limit applies.

        Args:
            name: Parameter name
            value: Parameter value
            destination: Optional text sink; if given, the result is written
                to it and None is returned

        Returns:
            Obfuscated value if no destination was given

        Raises:
            NullArgumentError: If name or value is None
        """
        require_not_none(value, "value")
        obfuscator = self.obfuscator(name)
        if destination is None:
            return obfuscator.obfuscate_text(value)
        obfuscator.obfuscate_text_to(value, destination)
        return None

    def obfuscate_parameter_value(self, name: str, value: Any) -> Obfuscated:
        """
        Wrap a parameter value so that its string form is obfuscated.

        The wrapper's value property returns the given value itself.
        """
        return self.obfuscator(name).obfuscate_object(value)

    def __eq__(self, other) -> bool:
        if not isinstance(other, RequestParameterObfuscator):
            return NotImplemented
        return (
            self._obfuscators == other._obfuscators
            and self._encoding == other._encoding
            and self._limit == other._limit
            and self._truncated_indicator == other._truncated_indicator
        )

    def __hash__(self) -> int:
        return hash((self._obfuscators, self._encoding, self._limit, self._truncated_indicator))

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(obfuscators={self._obfuscators!r}, "
            f"encoding={self._encoding!r}, limit={self._limit!r}, "
            f"truncated_indicator={self._truncated_indicator!r})"
        )


class Builder:
    """Builder for RequestParameterObfuscator."""

    def __init__(self):
        self._obfuscators = MapBuilder()
        self._encoding = percent.DEFAULT_ENCODING
        self._limit: Optional[int] = None
        self._truncated_indicator: Optional[str] = DEFAULT_TRUNCATED_INDICATOR

    def with_parameter(
        self,
        parameter: str,
        obfuscator: Obfuscator,
        case_sensitivity: Optional[CaseSensitivity] = None
    ) -> "Builder":
        """
        Add a parameter to obfuscate.

        Args:
            parameter: Parameter name
            obfuscator: Obfuscator for the parameter's value
            case_sensitivity: How the name is matched (default: the builder's
                current default, initially case sensitive)

        Returns:
            This builder

        Raises:
            NullArgumentError: If parameter or obfuscator is None
            DuplicateKeyError: If the parameter was already added with the
                same case sensitivity
        """
        self._obfuscators.with_entry(parameter, obfuscator, case_sensitivity)
        return self

    def case_sensitive_by_default(self) -> "Builder":
        """Match parameters added from now on case sensitively."""
        self._obfuscators.case_sensitive_by_default()
        return self

    def case_insensitive_by_default(self) -> "Builder":
        """Match parameters added from now on case insensitively."""
        self._obfuscators.case_insensitive_by_default()
        return self

    def with_encoding(self, encoding: str) -> "Builder":
        """
        Set the encoding used for percent-decoding and encoding. Default is UTF-8.

        Raises:
            NullArgumentError: If encoding is None
            EncodingError: If the encoding is unknown
        """
        require_not_none(encoding, "encoding")
        self._encoding = percent.resolve_encoding(encoding)
        return self

    def limit_to(self, limit: int) -> "LimitBuilder":
        """
        Limit the length of obfuscated output.

        Args:
            limit: Maximum number of output characters, not counting the
                truncation indicator

        Returns:
            LimitBuilder for configuring the truncation indicator

        Raises:
            IllegalConfigurationError: If limit is negative
        """
        require_not_none(limit, "limit")
        if limit < 0:
            raise IllegalConfigurationError(f"limit must not be negative: {limit}")
        self._limit = limit
        return LimitBuilder(self)

    def transform(self, f: Callable[["Builder"], R]) -> R:
        """Apply f to this builder and return its result."""
        return f(self)

    def build(self) -> RequestParameterObfuscator:
        obfuscator = RequestParameterObfuscator(self)
        logger.debug(
            "Built request parameter obfuscator: %d parameters, encoding %s, limit %s",
            len(obfuscator._obfuscators),
            obfuscator.encoding,
            obfuscator.limit if obfuscator.limit is not None else "none",
        )
        return obfuscator


class LimitBuilder:
    """Builder step for output limits; other calls go back to the main builder."""

    def __init__(self, builder: Builder):
        self._builder = builder

    def with_truncated_indicator(self, indicator: Optional[str]) -> "LimitBuilder":
        """
        Set the indicator appended when output is truncated.

        The indicator is a %-format string with one integer placeholder, which
        receives the total length of the input. Default is
        '... (total: %d)'. None means nothing is appended.

        Raises:
            IllegalConfigurationError: If indicator cannot be formatted with
                a single integer
        """
        if indicator is not None:
            try:
                indicator % 0
            except (TypeError, ValueError) as e:
                raise IllegalConfigurationError(f"Invalid truncated indicator {indicator!r}: {e}") from e
        self._builder._truncated_indicator = indicator
        return self

    def with_parameter(
        self,
        parameter: str,
        obfuscator: Obfuscator,
        case_sensitivity: Optional[CaseSensitivity] = None
    ) -> Builder:
        return self._builder.with_parameter(parameter, obfuscator, case_sensitivity)

    def case_sensitive_by_default(self) -> Builder:
        return self._builder.case_sensitive_by_default()

    def case_insensitive_by_default(self) -> Builder:
        return self._builder.case_insensitive_by_default()

    def with_encoding(self, encoding: str) -> Builder:
        return self._builder.with_encoding(encoding)

    def limit_to(self, limit: int) -> "LimitBuilder":
        return self._builder.limit_to(limit)

    def transform(self, f: Callable[["LimitBuilder"], R]) -> R:
        return f(self)

    def build(self) -> RequestParameterObfuscator:
        return self._builder.build()
