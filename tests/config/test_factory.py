import logging

import pytest

from httpmask.config.factory import build_header_obfuscator, build_obfuscator, build_parameter_obfuscator
from httpmask.errors import DuplicateKeyError
from httpmask.obfuscator import all as mask_all, fixed_length, fixed_value, none


@pytest.mark.unit
@pytest.mark.parametrize("definition,expected", [
    ("all", mask_all()),
    ("none", none()),
    ({"type": "all", "mask_char": "#"}, mask_all("#")),
    ({"mask_char": "x"}, mask_all("x")),
    ({"type": "fixed_length", "length": 5}, fixed_length(5)),
    ({"type": "fixed_length", "length": 2, "mask_char": "-"}, fixed_length(2, "-")),
    ({"type": "fixed_value", "value": "<hidden>"}, fixed_value("<hidden>")),
])
def test_build_obfuscator(definition, expected):
    assert build_obfuscator(definition) == expected


@pytest.mark.unit
def test_build_obfuscator_unknown_type():
    with pytest.raises(ValueError):
        build_obfuscator({"type": "rot13"})


@pytest.mark.unit
def test_build_parameter_obfuscator():
    config = {
        "parameters": {
            "password": "all",
            "token": {"type": "fixed_length", "length": 3},
        },
    }
    obfuscator = build_parameter_obfuscator(config)

    assert obfuscator.obfuscate_text("password=secret&token=abcdef&page=1") == \
        "password=******&token=***&page=1"
    assert obfuscator.limit is None


@pytest.mark.unit
def test_build_parameter_obfuscator_case_sensitivity():
    config = {
        "case_sensitive_by_default": False,
        "parameters": {
            "password": "all",
            "Token": {"type": "all", "case_sensitive": True},
        },
    }
    obfuscator = build_parameter_obfuscator(config)

    assert obfuscator.obfuscate_text("PASSWORD=ab&token=cd&Token=ef") == "PASSWORD=**&token=cd&Token=**"


@pytest.mark.unit
def test_build_parameter_obfuscator_extra_parameters(caplog):
    caplog.set_level(logging.INFO, logger="httpmask.config.factory")
    config = {"parameters": {"password": "none"}}
    obfuscator = build_parameter_obfuscator(config, extra_parameters=["password", "pin"])

    # Configured entries win over extra names
    assert obfuscator.obfuscate_text("password=ab&pin=1234") == "password=ab&pin=****"
    assert "Masking parameters: password, pin" in caplog.text


@pytest.mark.unit
def test_build_parameter_obfuscator_limit_and_encoding():
    config = {
        "encoding": "iso8859-1",
        "limit": 10,
        "truncated_indicator": " [%d]",
        "parameters": {"password": "all"},
    }
    obfuscator = build_parameter_obfuscator(config)

    assert obfuscator.encoding == "iso8859-1"
    assert obfuscator.limit == 10
    assert obfuscator.truncated_indicator == " [%d]"
    assert obfuscator.obfuscate_text("user=alice&password=x") == "user=alice [21]"
    assert obfuscator.obfuscate_text("password=%E9") == "password=*"


@pytest.mark.unit
def test_build_parameter_obfuscator_null_indicator():
    config = {"limit": 4, "truncated_indicator": None, "parameters": {}}
    obfuscator = build_parameter_obfuscator(config)
    assert obfuscator.obfuscate_text("a=123456") == "a=12"


@pytest.mark.unit
def test_build_parameter_obfuscator_duplicate_names():
    config = {
        "case_sensitive_by_default": False,
        "parameters": {"password": "all", "PASSWORD": "all"},
    }
    with pytest.raises(DuplicateKeyError):
        build_parameter_obfuscator(config)


@pytest.mark.unit
def test_build_header_obfuscator():
    config = {"headers": {"Authorization": "all", "cookie": {"type": "fixed_value", "value": "<hidden>"}}}
    obfuscator = build_header_obfuscator(config)

    assert obfuscator.obfuscate_header("authorization", "Bearer x") == "********"
    assert obfuscator.obfuscate_header("Cookie", "a=b") == "<hidden>"
    assert obfuscator.obfuscate_header("Accept", "*/*") == "*/*"


@pytest.mark.unit
def test_build_from_empty_config():
    parameters = build_parameter_obfuscator({})
    headers = build_header_obfuscator({"headers": None})

    assert parameters.obfuscate_text("password=x") == "password=x"
    assert headers.obfuscate_header("authorization", "x") == "x"
