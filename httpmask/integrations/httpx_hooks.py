"""
httpx event hooks that log requests with sensitive parameters masked.

httpx's own debug logging prints full URLs, credentials included. These
hooks log the request line (and optionally headers and form bodies) after
masking, so httpx's logger can stay at WARNING.

Example:
    >>> parameters = RequestParameterObfuscator.builder().with_parameter('password', all()).build()
    >>> client = httpx.Client(event_hooks={'request': [request_logger(parameters)]})
"""

import logging
from typing import List, Optional, Tuple, Union
from urllib.parse import urlsplit, urlunsplit

import httpx

from httpmask.http.headers import HeaderItems, HeaderObfuscator
from httpmask.http.parameters import RequestParameterObfuscator

logger = logging.getLogger(__name__)

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


def mask_url(url: Union[httpx.URL, str], parameters: RequestParameterObfuscator) -> str:
    """
    Mask the query string of a URL.

    Args:
        url: httpx.URL or URL string
        parameters: Obfuscator applied to the query string

    Returns:
        URL string with its query masked; scheme, host, path and fragment
        are left as they are
    """
    parts = urlsplit(str(url))
    if not parts.query:
        return str(url)
    return urlunsplit(parts._replace(query=parameters.obfuscate_text(parts.query)))


def mask_headers(
    headers: Union[httpx.Headers, HeaderItems],
    header_obfuscator: HeaderObfuscator
) -> List[Tuple[str, str]]:
    """
    Mask header values.

    Args:
        headers: httpx.Headers, a mapping, or (name, value) pairs
        header_obfuscator: Obfuscator selecting masks by header name

    Returns:
        List of (name, masked value) pairs; repeated headers are kept
    """
    if isinstance(headers, httpx.Headers):
        headers = headers.multi_items()
    return header_obfuscator.obfuscate_headers(headers)


def _form_body(request: httpx.Request) -> Optional[str]:
    content_type = request.headers.get("content-type", "")
    if not content_type.startswith(FORM_CONTENT_TYPE):
        return None
    try:
        content = request.content
    except httpx.RequestNotRead:
        # Streaming body; reading it here would consume it
        return None
    return content.decode("ascii", errors="replace")


def _log_request(
    request: httpx.Request,
    parameters: RequestParameterObfuscator,
    headers: Optional[HeaderObfuscator],
    log: logging.Logger,
    level: int,
    log_form_body: bool
) -> None:
    if not log.isEnabledFor(level):
        return

    log.log(level, "%s %s", request.method, mask_url(request.url, parameters))

    if headers is not None:
        for name, value in mask_headers(request.headers, headers):
            log.log(level, "  %s: %s", name, value)

    if log_form_body:
        body = _form_body(request)
        if body:
            log.log(level, "  body: %s", parameters.obfuscate_text(body))


def request_logger(
    parameters: RequestParameterObfuscator,
    headers: Optional[HeaderObfuscator] = None,
    log: Optional[logging.Logger] = None,
    level: int = logging.DEBUG,
    log_form_body: bool = False
):
    """
    Create a request event hook for httpx.Client.

    Args:
        parameters: Obfuscator for query strings and form bodies
        headers: Optional header obfuscator; headers are only logged if given
        log: Logger to write to (default: this module's logger)
        level: Log level for request lines
        log_form_body: Also log url-encoded form bodies, masked

    Returns:
        Callable taking an httpx.Request
    """
    log = log or logger

    def log_request(request: httpx.Request) -> None:
        _log_request(request, parameters, headers, log, level, log_form_body)

    return log_request


def async_request_logger(
    parameters: RequestParameterObfuscator,
    headers: Optional[HeaderObfuscator] = None,
    log: Optional[logging.Logger] = None,
    level: int = logging.DEBUG,
    log_form_body: bool = False
):
    """Create a request event hook for httpx.AsyncClient; see request_logger."""
    log = log or logger

    async def log_request(request: httpx.Request) -> None:
        _log_request(request, parameters, headers, log, level, log_form_body)

    return log_request
