"""
Exceptions raised while reading configuration from environment variables.

**Conceptual**: There are two different questions a caller asks when config
loading fails:
  1. "What was wrong with this one variable?" (converter-level detail).
  2. "Why could the whole config object not be built?" (assembly outcome).

The hierarchy mirrors those two levels:

    EnvConfigError
    ├── EnvVarError                 one variable's value is unusable
    │   ├── NotUnicode              value bytes are not valid UTF-8
    │   └── NotParsable             value is text but not a valid T
    ├── ConfigError                 assembly of a config class failed
    │   ├── InvalidValue            wraps an EnvVarError
    │   └── MandatoryNotSet         a required variable is absent
    └── ConfigDefinitionError       the config class itself is malformed
        └── UnsupportedFieldType

Every exception carries its details as attributes (never only inside the
message), so callers can build their own diagnostics without re-deriving
variable names. Exceptions compare equal when their details are equal, which
keeps test assertions short.
"""

from typing import Any, Tuple


class EnvConfigError(Exception):
    """
    Base exception for everything this package raises.

    Catch this to handle every env-config failure in one place, or catch a
    subclass for fine-grained handling.
    """

    def _details(self) -> Tuple[Any, ...]:
        return tuple(self.args)

    def __eq__(self, other: object) -> bool:
        if type(self) is not type(other):
            return NotImplemented
        return self._details() == other._details()

    def __hash__(self) -> int:
        return hash((type(self), self._details()))


class EnvVarError(EnvConfigError):
    """
    A single environment variable is set but its value cannot be used.

    Attributes:
        env_var_name: Name of the offending variable.
    """

    def __init__(self, env_var_name: str, *details: Any):
        super().__init__(env_var_name, *details)
        self.env_var_name = env_var_name


class NotUnicode(EnvVarError):
    """
    Raised when a variable's raw bytes are not valid UTF-8 text.

    **Conceptual**: On POSIX the environment is a bag of bytes, not strings.
    Anything can end up in there (e.g. a Latin-1 path exported from an old
    shell script). We refuse to guess an encoding and hand the raw bytes back
    to the caller instead.

    Attributes:
        env_var_name: Name of the offending variable.
        raw_value: The exact bytes found in the environment.
    """

    def __init__(self, env_var_name: str, raw_value: bytes):
        super().__init__(env_var_name, raw_value)
        self.raw_value = raw_value

    def __str__(self) -> str:
        return f"{self.env_var_name} is not valid unicode: {self.raw_value!r}"


class NotParsable(EnvVarError):
    """
    Raised when a variable holds text that the target type rejects.

    **Recovery**: Check the value of the variable, e.g. booleans must be
    exactly "true" or "false" (lowercase).

    Attributes:
        env_var_name: Name of the offending variable.
        value: The exact text found in the environment.
    """

    def __init__(self, env_var_name: str, value: str):
        super().__init__(env_var_name, value)
        self.value = value

    def __str__(self) -> str:
        return f"{self.env_var_name} has an unparsable value: {self.value!r}"


class ConfigError(EnvConfigError):
    """
    Base exception for a failed assembly of a config class.

    Only one ConfigError is ever raised per ``from_env()`` call: assembly
    stops at the first field that fails.

    Attributes:
        env_var_name: Variable that stopped assembly.
    """

    env_var_name: str


class InvalidValue(ConfigError):
    """
    A variable is set but unusable (not unicode or not parsable).

    Attributes:
        detail: The underlying NotUnicode or NotParsable error.
    """

    def __init__(self, detail: EnvVarError):
        super().__init__(detail)
        self.detail = detail
        self.env_var_name = detail.env_var_name

    def __str__(self) -> str:
        return f"invalid value: {self.detail}"


class MandatoryNotSet(ConfigError):
    """
    A non-optional field's variable is absent from the environment.

    **Recovery**: Export the variable, or declare the field ``Optional[...]``
    if the application can run without it.
    """

    def __init__(self, env_var_name: str):
        super().__init__(env_var_name)
        self.env_var_name = env_var_name

    def __str__(self) -> str:
        return f"{self.env_var_name} is mandatory but not set"


class ConfigDefinitionError(EnvConfigError, TypeError):
    """
    The config class cannot be mapped onto environment variables.

    Raised while the class is being decorated, never while reading the
    environment: a malformed config class is a programming error and should
    fail at import time.
    """
    pass


class UnsupportedFieldType(ConfigDefinitionError):
    """No textual-parse contract is registered for ``field_type``."""

    def __init__(self, field_type: Any):
        super().__init__(field_type)
        self.field_type = field_type

    def __str__(self) -> str:
        name = getattr(self.field_type, "__name__", repr(self.field_type))
        return f"no parser registered for type {name}"
