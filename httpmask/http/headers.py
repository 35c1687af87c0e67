"""Obfuscation of HTTP header values by header name."""

import logging
from typing import Any, Callable, Iterable, List, Mapping, Optional, TextIO, Tuple, TypeVar, Union

from httpmask.errors import require_not_none
from httpmask.obfuscator import Obfuscated, Obfuscator, none
from httpmask.support.mapping import CaseSensitivity, MapBuilder, ObfuscatorMap

logger = logging.getLogger(__name__)

R = TypeVar("R")

HeaderItems = Union[Mapping[str, str], Iterable[Tuple[str, str]]]


class HeaderObfuscator:
    """
    Obfuscates header values based on the header name.

    Header names are always matched case insensitively. Values are masked as
    a whole; they are not parsed or percent-decoded.
    """

    def __init__(self, builder: "Builder"):
        self._obfuscators: ObfuscatorMap = builder._obfuscators.build()

    @staticmethod
    def builder() -> "Builder":
        return Builder()

    def obfuscator(self, name: str) -> Obfuscator:
        """The obfuscator registered for a header, or none() if there is none."""
        require_not_none(name, "name")
        return self._obfuscators.get(name, none())

    def obfuscate_header(self, name: str, value: str, destination: Optional[TextIO] = None) -> Optional[str]:
        """
        Obfuscate the value of a header.

        Args:
            name: Header name
            value: Header value
            destination: Optional text sink; if given, the result is written
                to it and None is returned

        Returns:
            Obfuscated value if no destination was given

        Raises:
            NullArgumentError: If name or value is None
        """
        obfuscator = self.obfuscator(name)
        require_not_none(value, "value")
        if destination is None:
            return obfuscator.obfuscate_text(value)
        obfuscator.obfuscate_text_to(value, destination)
        return None

    def obfuscate_header_value(self, name: str, value: Any) -> Obfuscated:
        """Wrap a header value so that its string form is obfuscated."""
        return self.obfuscator(name).obfuscate_object(value)

    def obfuscate_headers(self, headers: HeaderItems) -> List[Tuple[str, str]]:
        """
        Obfuscate all values of a set of headers.

        Args:
            headers: Mapping of names to values, or (name, value) pairs;
                repeated names are allowed in the pair form

        Returns:
            List of (name, obfuscated value) pairs in input order
        """
        require_not_none(headers, "headers")
        items = headers.items() if isinstance(headers, Mapping) else headers
        return [(name, self.obfuscate_header(name, value)) for name, value in items]

    def __eq__(self, other) -> bool:
        if not isinstance(other, HeaderObfuscator):
            return NotImplemented
        return self._obfuscators == other._obfuscators

    def __hash__(self) -> int:
        return hash(self._obfuscators)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(obfuscators={self._obfuscators!r})"


class Builder:
    """Builder for HeaderObfuscator."""

    def __init__(self):
        self._obfuscators = MapBuilder()

    def with_header(self, header: str, obfuscator: Obfuscator) -> "Builder":
        """
        Add a header to obfuscate.

        Raises:
            NullArgumentError: If header or obfuscator is None
            DuplicateKeyError: If a header with the same name (ignoring case)
                was already added
        """
        self._obfuscators.with_entry(header, obfuscator, CaseSensitivity.CASE_INSENSITIVE)
        return self

    def transform(self, f: Callable[["Builder"], R]) -> R:
        """Apply f to this builder and return its result."""
        return f(self)

    def build(self) -> HeaderObfuscator:
        obfuscator = HeaderObfuscator(self)
        logger.debug("Built header obfuscator: %d headers", len(obfuscator._obfuscators))
        return obfuscator
