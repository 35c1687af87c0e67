"""Configuration validation."""

import codecs
import logging
from typing import Dict, Any, List

from httpmask.support.mapping import fold_case

logger = logging.getLogger(__name__)

VALID_OBFUSCATOR_TYPES = ['all', 'none', 'fixed_length', 'fixed_value']
VALID_LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']


class ValidationError(Exception):
    """Configuration validation errors."""
    pass


def validate_config(config: Dict[str, Any]) -> None:
    """
    Validate configuration structure and values.

    Args:
        config: Configuration dictionary from loader

    Raises:
        ValidationError: If configuration is invalid
    """
    errors = []

    # Validate top-level engine options
    errors.extend(_validate_engine(config))

    # Validate parameters section
    errors.extend(_validate_entries(config.get('parameters', {}), 'parameters', allow_case=True))

    # Validate headers section
    errors.extend(_validate_entries(config.get('headers', {}), 'headers', allow_case=False))

    # Validate logging section
    errors.extend(_validate_logging(config.get('logging', {})))

    if errors:
        raise ValidationError(
            "Configuration validation failed:\n  - " + "\n  - ".join(errors)
        )


def _validate_engine(config: Dict[str, Any]) -> List[str]:
    """Validate encoding, default case sensitivity and limit options."""
    errors = []

    if 'encoding' in config:
        encoding = config['encoding']
        if not isinstance(encoding, str):
            errors.append("encoding must be a string")
        else:
            try:
                codecs.lookup(encoding)
            except LookupError:
                errors.append(f"encoding is not supported: {encoding}")

    if 'case_sensitive_by_default' in config:
        if not isinstance(config['case_sensitive_by_default'], bool):
            errors.append("case_sensitive_by_default must be a boolean")

    if config.get('limit') is not None:
        limit = config['limit']
        if not isinstance(limit, int) or isinstance(limit, bool) or limit < 0:
            errors.append("limit must be a non-negative integer")

    if 'truncated_indicator' in config:
        indicator = config['truncated_indicator']
        if indicator is not None:
            if not isinstance(indicator, str):
                errors.append("truncated_indicator must be a string or null")
            else:
                try:
                    indicator % 0
                except (TypeError, ValueError):
                    errors.append(
                        "truncated_indicator must contain exactly one integer placeholder (%d)"
                    )
        if config.get('limit') is None:
            logger.warning("truncated_indicator has no effect without a limit")

    return errors


def _validate_entries(section: Any, section_name: str, allow_case: bool) -> List[str]:
    """Validate a parameters or headers section."""
    errors = []

    if section is None:
        return errors
    if not isinstance(section, dict):
        return [f"{section_name} must be a mapping of names to obfuscators"]

    seen = {}
    for name, definition in section.items():
        if not isinstance(name, str):
            errors.append(f"{section_name} names must be strings: {name!r}")
            continue
        prefix = f"{section_name}.{name}"
        errors.extend(_validate_obfuscator(definition, prefix, allow_case))

        # Headers always match case insensitively
        if not allow_case:
            folded = fold_case(name)
            if folded in seen:
                errors.append(f"{prefix} duplicates {section_name}.{seen[folded]} (names are case insensitive)")
            else:
                seen[folded] = name

    return errors


def _validate_obfuscator(definition: Any, prefix: str, allow_case: bool) -> List[str]:
    """Validate a single obfuscator definition."""
    errors = []

    if isinstance(definition, str):
        if definition not in ('all', 'none'):
            errors.append(f"{prefix} must be 'all', 'none' or a mapping with a type")
        return errors

    if not isinstance(definition, dict):
        errors.append(f"{prefix} must be a string or a mapping")
        return errors

    obfuscator_type = definition.get('type', 'all')
    if obfuscator_type not in VALID_OBFUSCATOR_TYPES:
        errors.append(
            f"{prefix}.type must be one of: {', '.join(VALID_OBFUSCATOR_TYPES)}"
        )

    if 'mask_char' in definition:
        mask_char = definition['mask_char']
        if not isinstance(mask_char, str) or len(mask_char) != 1:
            errors.append(f"{prefix}.mask_char must be a single character")

    if obfuscator_type == 'fixed_length':
        length = definition.get('length')
        if not isinstance(length, int) or isinstance(length, bool) or length < 0:
            errors.append(f"{prefix}.length must be a non-negative integer")

    if obfuscator_type == 'fixed_value':
        if not isinstance(definition.get('value'), str):
            errors.append(f"{prefix}.value must be a string")

    if 'case_sensitive' in definition:
        if not allow_case:
            errors.append(f"{prefix}.case_sensitive is not supported (headers are case insensitive)")
        elif not isinstance(definition['case_sensitive'], bool):
            errors.append(f"{prefix}.case_sensitive must be a boolean")

    return errors


def _validate_logging(section: Dict[str, Any]) -> List[str]:
    """Validate logging section."""
    errors = []

    if not isinstance(section, dict):
        return ["logging must be a mapping"]

    if 'level' in section:
        level = section['level']
        if not isinstance(level, str) or level.upper() not in VALID_LOG_LEVELS:
            errors.append(
                f"logging.level must be one of: {', '.join(VALID_LOG_LEVELS)}"
            )

    if 'console' in section and not isinstance(section['console'], bool):
        errors.append("logging.console must be a boolean")

    if section.get('file') is not None and not isinstance(section['file'], str):
        errors.append("logging.file must be a string path")

    return errors
