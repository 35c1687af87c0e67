"""
Percent-encoding primitives for URL-encoded parameter strings.

Decoding follows the form-encoding rules: '+' becomes a space and every '%'
must start a two-digit hex escape. Encoding leaves ASCII letters, digits and
'.', '-', '*', '_' as they are and turns spaces into '+'.

Error messages report positions only, never the text itself, because the
text is usually the very value that must not end up in a log.
"""

import codecs
import re
from urllib.parse import quote_plus, unquote_plus

from httpmask.errors import DecodingError, EncodingError

DEFAULT_ENCODING = "utf-8"

_SAFE = "*"
_MALFORMED_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


def resolve_encoding(encoding: str) -> str:
    """
    Resolve a codec name to its canonical form.

    Args:
        encoding: Codec name, e.g. 'UTF-8' or 'latin-1'

    Returns:
        Canonical codec name as reported by codecs.lookup

    Raises:
        EncodingError: If the codec is unknown
    """
    try:
        return codecs.lookup(encoding).name
    except LookupError as e:
        raise EncodingError(f"Unsupported encoding: {encoding}") from e


def decode(text: str, encoding: str = DEFAULT_ENCODING) -> str:
    """
    Percent-decode form-encoded text.

    Args:
        text: Percent-encoded text
        encoding: Codec used to turn escaped bytes into characters

    Returns:
        Decoded text

    Raises:
        DecodingError: If an escape is incomplete, not hexadecimal, or the
            escaped bytes are not valid in the given encoding
    """
    match = _MALFORMED_ESCAPE.search(text)
    if match:
        raise DecodingError(f"Malformed percent-encoding at index {match.start()}")
    try:
        return unquote_plus(text, encoding=encoding, errors="strict")
    except UnicodeDecodeError as e:
        raise DecodingError(
            f"Escaped bytes are not valid {encoding} (byte offset {e.start})"
        ) from e


def encode(text: str, encoding: str = DEFAULT_ENCODING) -> str:
    """
    Percent-encode text for use as a form-encoded value.

    Args:
        text: Text to encode
        encoding: Codec used to turn characters into escaped bytes

    Returns:
        Encoded text

    Raises:
        EncodingError: If text contains characters the encoding cannot represent
    """
    try:
        encoded = quote_plus(text, safe=_SAFE, encoding=encoding, errors="strict")
    except UnicodeEncodeError as e:
        raise EncodingError(
            f"Character at index {e.start} cannot be encoded as {encoding}"
        ) from e
    # quote_plus always leaves '~' alone
    return encoded.replace("~", "%7E")
