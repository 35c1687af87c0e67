"""
httpmask - masks sensitive request parameters and header values before logging

Obfuscates URL-encoded query and form parameter strings and HTTP header
values, leaving everything that is not sensitive exactly as it was.
"""

__version__ = "0.3.0"

from httpmask.errors import (
    DecodingError,
    DuplicateKeyError,
    EncodingError,
    IllegalConfigurationError,
    IndexOutOfRangeError,
    NullArgumentError,
    ObfuscationError,
)
from httpmask.http import HeaderObfuscator, RequestParameterObfuscator
from httpmask.obfuscator import Obfuscated, Obfuscator
from httpmask.support.mapping import CaseSensitivity

__all__ = [
    "CaseSensitivity",
    "DecodingError",
    "DuplicateKeyError",
    "EncodingError",
    "HeaderObfuscator",
    "IllegalConfigurationError",
    "IndexOutOfRangeError",
    "NullArgumentError",
    "Obfuscated",
    "ObfuscationError",
    "Obfuscator",
    "RequestParameterObfuscator",
]
