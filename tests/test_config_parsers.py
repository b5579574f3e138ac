"""
Tests for the textual-parse contracts in env_config.parsers.

These are deliberately stricter than Python's builtins: whitespace padding,
digit separators and loose boolean spellings are all rejected.
"""

from decimal import Decimal
from pathlib import Path

import pytest

from env_config.errors import UnsupportedFieldType
from env_config.parsers import (
    get_parser,
    is_supported,
    parse_bool,
    parse_decimal,
    parse_float,
    parse_int,
    parse_path,
    parse_str,
    register_parser,
)


def test_parse_bool_accepts_exact_literals():
    assert parse_bool("true") is True
    assert parse_bool("false") is False


@pytest.mark.parametrize("value", ["True", "TRUE", "tRuE", "fAlSe", "1", "0", "yes", "", " true"])
def test_parse_bool_rejects_everything_else(value):
    with pytest.raises(ValueError):
        parse_bool(value)


@pytest.mark.parametrize("value, expected", [("0", 0), ("42", 42), ("-7", -7), ("+7", 7), ("007", 7)])
def test_parse_int_valid(value, expected):
    assert parse_int(value) == expected


@pytest.mark.parametrize("value", ["", " 1", "1 ", "1_000", "1.0", "0x10", "٣", "+", "--1"])
def test_parse_int_invalid(value):
    """Non-ASCII digits (e.g. Arabic-Indic three) are rejected too."""
    with pytest.raises(ValueError):
        parse_int(value)


def test_parse_float():
    assert parse_float("1.5") == pytest.approx(1.5)
    assert parse_float("-2e3") == pytest.approx(-2000.0)

    with pytest.raises(ValueError):
        parse_float(" 1.5")
    with pytest.raises(ValueError):
        parse_float("one")


def test_parse_decimal():
    assert parse_decimal("0.10") == Decimal("0.10")

    with pytest.raises(ValueError):
        parse_decimal("ten cents")
    with pytest.raises(ValueError):
        parse_decimal("0.10\n")


def test_parse_str_is_identity():
    assert parse_str("  spaced out  ") == "  spaced out  "


def test_parse_path():
    assert parse_path("/var/lib/app") == Path("/var/lib/app")

    with pytest.raises(ValueError):
        parse_path("")


def test_builtin_types_are_registered():
    for field_type in (bool, int, float, str, Decimal, Path):
        assert is_supported(field_type)


def test_get_parser_unknown_type():
    with pytest.raises(UnsupportedFieldType) as excinfo:
        get_parser(complex)

    assert excinfo.value.field_type is complex
    assert "complex" in str(excinfo.value)


def test_register_parser_as_decorator():
    """
    Scenario: an application adds its own type.

    Expected: the decorator registers the parser and returns it unchanged.
    """
    class Port(int):
        pass

    @register_parser(Port)
    def parse_port(value: str) -> Port:
        port = parse_int(value)
        if not 0 < port < 65536:
            raise ValueError(f"port out of range: {port}")
        return Port(port)

    assert get_parser(Port) is parse_port
    assert parse_port("8080") == 8080
    with pytest.raises(ValueError):
        parse_port("70000")


def test_register_parser_direct_call():
    class Level(str):
        pass

    def parse_level(value: str) -> Level:
        return Level(value.lower())

    assert register_parser(Level, parse_level) is parse_level
    assert is_supported(Level)
