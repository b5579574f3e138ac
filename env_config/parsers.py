"""
Textual-parse contracts: how a piece of text becomes a typed value.

**Conceptual**: Every field type a config class may use needs exactly one
rule that turns the variable's text into a value, or rejects it. This module
keeps those rules in a registry keyed by type, so the converter in
``from_env_var`` is written once and works for any registered type.

**Contract for a parser**:
  - Input: the variable's value as ``str`` (already known to be valid text).
  - Output: the typed value.
  - Failure: raise ``ValueError`` for any text that does not conform.
  - Deterministic: the same text always gives the same result.

**Why strict parsers?** Python's builtins are forgiving (``int(" 7 ")`` is 7,
``bool("false")`` is True). A config loader should be the opposite: a typo in
a deployment manifest must fail loudly at startup instead of silently
turning into a different value.

Adding a type:
    >>> from env_config.parsers import register_parser
    >>> @register_parser(Color)
    ... def parse_color(value: str) -> Color:
    ...     return Color.from_hex(value)
"""

import re
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from env_config.errors import UnsupportedFieldType

Parser = Callable[[str], Any]

_INT_PATTERN = re.compile(r"[+-]?[0-9]+")

_PARSERS: Dict[Any, Parser] = {}


def parse_bool(value: str) -> bool:
    """
    Parse a boolean, accepting exactly "true" or "false".

    Case matters: "True", "TRUE" and "tRuE" are all rejected. So are the
    usual shell-isms ("1", "yes", "on").
    """
    if value == "true":
        return True
    if value == "false":
        return False
    raise ValueError(f"expected 'true' or 'false', got {value!r}")


def parse_int(value: str) -> int:
    """Parse an optionally signed run of ASCII digits (no spaces, no '_')."""
    if not _INT_PATTERN.fullmatch(value):
        raise ValueError(f"invalid integer literal: {value!r}")
    return int(value)


def _reject_padding(value: str) -> None:
    if value != value.strip():
        raise ValueError(f"value has leading or trailing whitespace: {value!r}")


def parse_float(value: str) -> float:
    _reject_padding(value)
    return float(value)


def parse_decimal(value: str) -> Decimal:
    _reject_padding(value)
    try:
        return Decimal(value)
    except InvalidOperation:
        raise ValueError(f"invalid decimal literal: {value!r}") from None


def parse_str(value: str) -> str:
    return value


def parse_path(value: str) -> Path:
    # Path("") is Path("."), which would silently point at the cwd
    if not value:
        raise ValueError("path must not be empty")
    return Path(value)


def register_parser(field_type: Any, func: Optional[Parser] = None):
    """
    Register the textual-parse contract for ``field_type``.

    Can be called directly (``register_parser(Color, parse_color)``) or used
    as a decorator (``@register_parser(Color)``). Registering a type again
    replaces the previous parser.

    Args:
        field_type: The annotation that config fields will use.
        func: Callable taking ``str`` and returning the value, raising
              ValueError on bad input.

    Returns:
        ``func`` (or a decorator when ``func`` is omitted).
    """
    if func is None:
        def decorator(f: Parser) -> Parser:
            _PARSERS[field_type] = f
            return f
        return decorator

    _PARSERS[field_type] = func
    return func


def get_parser(field_type: Any) -> Parser:
    """
    Look up the parser for ``field_type``.

    Raises:
        UnsupportedFieldType: If no parser is registered for the type.
    """
    try:
        return _PARSERS[field_type]
    except (KeyError, TypeError):
        # TypeError: unhashable annotations such as some typing constructs
        raise UnsupportedFieldType(field_type) from None


def is_supported(field_type: Any) -> bool:
    try:
        return field_type in _PARSERS
    except TypeError:
        return False


register_parser(bool, parse_bool)
register_parser(int, parse_int)
register_parser(float, parse_float)
register_parser(Decimal, parse_decimal)
register_parser(str, parse_str)
register_parser(Path, parse_path)
