"""
Per-field converter: one environment variable in, one typed value out.

**Conceptual**: This is the leaf layer. It knows nothing about config
classes, prefixes or which fields are mandatory; it answers a single question
for a single variable: "is it set, and if so, what value of type T is it?"

The assembler in ``env_config.assembly`` calls this once per field.
"""

from typing import Any, Optional

from env_config.errors import NotParsable, NotUnicode
from env_config.lookup import EnvMapping, NonText, Text, lookup_env_var
from env_config.parsers import get_parser


def from_env_var(target_type: Any, env_var_name: str, environ: Optional[EnvMapping] = None) -> Optional[Any]:
    """
    Read ``env_var_name`` and convert it to ``target_type``.

    **Functionally**:
      - Variable absent -> ``None`` (absence is not an error at this level).
      - Variable holds non-UTF-8 bytes -> ``NotUnicode``.
      - Variable holds text the type's parser rejects -> ``NotParsable``.
      - Otherwise -> the parsed value.

    **Thread safety**: Reading the process environment concurrently is only
    safe while no thread modifies it (``os.environ[...] = ...``,
    ``os.putenv``). Callers that mutate the environment at runtime must
    serialize that themselves; this function does not lock.

    Args:
        target_type: A type with a registered parser (see ``env_config.parsers``).
        env_var_name: Exact variable name to read.
        environ: Optional mapping to read instead of the process environment.

    Returns:
        The parsed value, or None if the variable is not set.

    Raises:
        NotUnicode: The variable's bytes are not valid UTF-8.
        NotParsable: The variable's text is not a valid ``target_type``.
        UnsupportedFieldType: No parser is registered for ``target_type``.

    Usage example:
        >>> # DEBUG=true
        >>> from_env_var(bool, "DEBUG")
        True
        >>> from_env_var(bool, "NOT_SET_ANYWHERE") is None
        True
    """
    parse = get_parser(target_type)
    result = lookup_env_var(env_var_name, environ)

    if isinstance(result, NonText):
        raise NotUnicode(env_var_name, result.raw)
    if not isinstance(result, Text):
        return None

    try:
        return parse(result.value)
    except ValueError:
        raise NotParsable(env_var_name, result.value) from None
