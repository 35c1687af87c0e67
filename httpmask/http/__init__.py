"""Obfuscators for HTTP request parameters and headers."""

from .headers import HeaderObfuscator
from .parameters import RequestParameterObfuscator

__all__ = [
    'HeaderObfuscator',
    'RequestParameterObfuscator',
]
