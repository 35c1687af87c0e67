import pytest

from httpmask.config.validator import validate_config, ValidationError


def _base_config() -> dict:
    return {
        "encoding": "utf-8",
        "case_sensitive_by_default": False,
        "limit": 200,
        "truncated_indicator": "... (%d total)",
        "parameters": {
            "password": "all",
            "token": {"type": "fixed_length", "length": 8, "mask_char": "#"},
            "Session": {"type": "all", "case_sensitive": True},
            "debug": "none",
        },
        "headers": {
            "authorization": "all",
            "cookie": {"type": "fixed_value", "value": "<hidden>"},
        },
        "logging": {"level": "info", "console": True, "file": None},
    }


@pytest.mark.unit
def test_validate_config_accepts_valid_config():
    validate_config(_base_config())  # Should not raise


@pytest.mark.unit
def test_validate_config_accepts_minimal_config():
    validate_config({})
    validate_config({"parameters": None, "headers": None})


@pytest.mark.unit
def test_validate_config_collects_errors():
    cfg = _base_config()
    cfg["encoding"] = "no-such-codec"
    cfg["case_sensitive_by_default"] = "yes"
    cfg["limit"] = -5
    cfg["truncated_indicator"] = "no placeholder"
    cfg["parameters"]["password"] = "mask"
    cfg["parameters"]["token"] = {"type": "fixed_length", "length": -1, "mask_char": "##"}
    cfg["parameters"]["Session"]["case_sensitive"] = "no"
    cfg["parameters"]["other"] = {"type": "rot13"}
    cfg["parameters"]["listed"] = ["all"]
    cfg["headers"]["cookie"] = {"type": "fixed_value"}
    cfg["headers"]["x-api-key"] = {"type": "all", "case_sensitive": True}
    cfg["headers"]["Authorization"] = "all"
    cfg["logging"]["level"] = "LOUD"
    cfg["logging"]["console"] = "yes"
    cfg["logging"]["file"] = 123

    with pytest.raises(ValidationError) as exc:
        validate_config(cfg)

    msg = str(exc.value)
    assert "encoding is not supported: no-such-codec" in msg
    assert "case_sensitive_by_default must be a boolean" in msg
    assert "limit must be a non-negative integer" in msg
    assert "truncated_indicator must contain exactly one integer placeholder" in msg
    assert "parameters.password must be 'all', 'none' or a mapping with a type" in msg
    assert "parameters.token.length must be a non-negative integer" in msg
    assert "parameters.token.mask_char must be a single character" in msg
    assert "parameters.Session.case_sensitive must be a boolean" in msg
    assert "parameters.other.type must be one of" in msg
    assert "parameters.listed must be a string or a mapping" in msg
    assert "headers.cookie.value must be a string" in msg
    assert "headers.x-api-key.case_sensitive is not supported" in msg
    assert "headers.Authorization duplicates headers.authorization" in msg
    assert "logging.level must be one of" in msg
    assert "logging.console must be a boolean" in msg
    assert "logging.file must be a string path" in msg


@pytest.mark.unit
def test_validate_config_rejects_non_mapping_sections():
    with pytest.raises(ValidationError) as exc:
        validate_config({"parameters": ["password"], "logging": "verbose"})
    msg = str(exc.value)
    assert "parameters must be a mapping" in msg
    assert "logging must be a mapping" in msg


@pytest.mark.unit
def test_validate_config_rejects_boolean_limit():
    with pytest.raises(ValidationError):
        validate_config({"limit": True})
