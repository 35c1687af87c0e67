"""Error taxonomy for obfuscation."""


class ObfuscationError(Exception):
    """Base exception for obfuscation errors."""
    pass


class NullArgumentError(ObfuscationError, TypeError):
    """A required argument was None."""
    pass


class DuplicateKeyError(ObfuscationError, ValueError):
    """An entry with the same name and case sensitivity already exists."""
    pass


class IllegalConfigurationError(ObfuscationError, ValueError):
    """Invalid builder or strategy configuration (e.g. a negative limit)."""
    pass


class DecodingError(ObfuscationError, ValueError):
    """Malformed percent-encoding."""
    pass


class EncodingError(ObfuscationError, ValueError):
    """Unknown character encoding, or text that cannot be encoded with it."""
    pass


class IndexOutOfRangeError(ObfuscationError, IndexError):
    """Invalid span or sub-range arguments."""
    pass


def require_not_none(value, name: str):
    """
    Return value, failing fast if it is None.

    Args:
        value: Argument value to check
        name: Argument name used in the error message

    Returns:
        The given value

    Raises:
        NullArgumentError: If value is None
    """
    if value is None:
        raise NullArgumentError(f"{name} must not be None")
    return value
