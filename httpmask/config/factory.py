"""Build obfuscators from a validated configuration dictionary."""

import logging
from typing import Any, Dict, Iterable, Optional, Union

from httpmask import obfuscator as obfuscators
from httpmask.http.headers import HeaderObfuscator
from httpmask.http.parameters import DEFAULT_TRUNCATED_INDICATOR, RequestParameterObfuscator
from httpmask.obfuscator import Obfuscator
from httpmask.support.mapping import CaseSensitivity

logger = logging.getLogger(__name__)


def build_obfuscator(definition: Union[str, Dict[str, Any]]) -> Obfuscator:
    """
    Create an obfuscator from its configuration.

    Args:
        definition: 'all', 'none', or a mapping with 'type' and options
            ('mask_char', 'length', 'value')

    Returns:
        Obfuscator instance
    """
    if isinstance(definition, str):
        definition = {'type': definition}

    obfuscator_type = definition.get('type', 'all')
    mask_char = definition.get('mask_char', '*')

    if obfuscator_type == 'all':
        return obfuscators.all(mask_char)
    if obfuscator_type == 'none':
        return obfuscators.none()
    if obfuscator_type == 'fixed_length':
        return obfuscators.fixed_length(definition['length'], mask_char)
    if obfuscator_type == 'fixed_value':
        return obfuscators.fixed_value(definition['value'])
    raise ValueError(f"Unknown obfuscator type: {obfuscator_type}")


def _case_sensitivity(definition: Any) -> Optional[CaseSensitivity]:
    if isinstance(definition, dict) and 'case_sensitive' in definition:
        if definition['case_sensitive']:
            return CaseSensitivity.CASE_SENSITIVE
        return CaseSensitivity.CASE_INSENSITIVE
    return None


def build_parameter_obfuscator(
    config: Dict[str, Any],
    extra_parameters: Iterable[str] = ()
) -> RequestParameterObfuscator:
    """
    Build a RequestParameterObfuscator from configuration.

    Args:
        config: Validated configuration dictionary
        extra_parameters: Additional parameter names to mask with all()

    Returns:
        Configured RequestParameterObfuscator

    Raises:
        DuplicateKeyError: If two parameters collide under their case sensitivity
    """
    extra_parameters = list(extra_parameters)
    builder = RequestParameterObfuscator.builder()

    if config.get('encoding'):
        builder.with_encoding(config['encoding'])

    if config.get('case_sensitive_by_default', True):
        builder.case_sensitive_by_default()
    else:
        builder.case_insensitive_by_default()

    parameters = config.get('parameters') or {}
    for name, definition in parameters.items():
        builder.with_parameter(name, build_obfuscator(definition), _case_sensitivity(definition))

    for name in extra_parameters:
        if name not in parameters:
            builder.with_parameter(name, obfuscators.all())

    if config.get('limit') is not None:
        builder.limit_to(config['limit']).with_truncated_indicator(
            config.get('truncated_indicator', DEFAULT_TRUNCATED_INDICATOR)
        )

    logger.info(
        "Masking parameters: %s",
        ", ".join(list(parameters) + [p for p in extra_parameters if p not in parameters]) or "(none)"
    )
    return builder.build()


def build_header_obfuscator(config: Dict[str, Any]) -> HeaderObfuscator:
    """
    Build a HeaderObfuscator from configuration.

    Args:
        config: Validated configuration dictionary

    Returns:
        Configured HeaderObfuscator
    """
    builder = HeaderObfuscator.builder()
    headers = config.get('headers') or {}
    for name, definition in headers.items():
        builder.with_header(name, build_obfuscator(definition))

    logger.info("Masking headers: %s", ", ".join(headers) or "(none)")
    return builder.build()
