"""Logging filter that masks query strings of URLs in log messages."""

import logging
import re

from httpmask.errors import DecodingError
from httpmask.http.parameters import RequestParameterObfuscator

# scheme://authority/path?query, stopping at whitespace, quotes or a fragment
_URL_QUERY = re.compile(r"(https?://[^\s?#\"'<>]*\?)([^\s#\"'<>]*)", re.IGNORECASE)

MALFORMED_QUERY = "<malformed query>"


class QueryStringFilter(logging.Filter):
    """
    Mask the query of every http(s) URL in a record's message.

    The message is interpolated first, so URLs passed as %-arguments are
    masked too. Records are never dropped.

    Example:
        >>> handler.addFilter(QueryStringFilter(parameters))
    """

    def __init__(self, parameters: RequestParameterObfuscator, name: str = ""):
        super().__init__(name)
        self.parameters = parameters

    def _mask(self, match: re.Match) -> str:
        try:
            return match.group(1) + self.parameters.obfuscate_text(match.group(2))
        except DecodingError:
            # Raising here would abort the logging call; hide the whole query instead
            return match.group(1) + MALFORMED_QUERY

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        masked = _URL_QUERY.sub(self._mask, message)
        if masked != message:
            record.msg = masked
            record.args = None
        return True
