"""
Shared pytest fixtures and utilities for the httpmask test suite.
"""

from pathlib import Path
from typing import Dict, Any, Callable, Optional

import pytest
import yaml

from httpmask.http.headers import HeaderObfuscator
from httpmask.http.parameters import RequestParameterObfuscator
from httpmask.obfuscator import all


@pytest.fixture
def parameters() -> RequestParameterObfuscator:
    """
    Parameter obfuscator masking 'password' and 'token' completely.
    """
    return (
        RequestParameterObfuscator.builder()
        .with_parameter("password", all())
        .with_parameter("token", all())
        .build()
    )


@pytest.fixture
def headers() -> HeaderObfuscator:
    """
    Header obfuscator masking the Authorization header completely.
    """
    return HeaderObfuscator.builder().with_header("authorization", all()).build()


@pytest.fixture
def make_config(tmp_path: Path) -> Callable[[Dict[str, Any]], Path]:
    """
    Create a httpmask.yaml in a temp directory.

    Usage:
        path = make_config({"limit": 100})
    """

    def _builder(overrides: Optional[Dict[str, Any]] = None) -> Path:
        base = {
            "encoding": "utf-8",
            "case_sensitive_by_default": True,
            "parameters": {
                "password": "all",
                "token": {"type": "fixed_length", "length": 8},
            },
            "headers": {
                "authorization": "all",
            },
            "logging": {"level": "WARNING", "console": False},
        }
        if overrides:
            base = merge_dicts(base, overrides)

        cfg_path = tmp_path / "httpmask.yaml"
        cfg_path.write_text(yaml.safe_dump(base))
        return cfg_path

    return _builder


def merge_dicts(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """
    Shallow+deep merge helper for fixture config dictionaries.
    """
    result: Dict[str, Any] = dict(base)
    for key, value in override.items():
        if (
            key in result
            and isinstance(result[key], dict)
            and isinstance(value, dict)
        ):
            result[key] = merge_dicts(result[key], value)
        else:
            result[key] = value
    return result
