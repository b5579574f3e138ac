"""
Typed configuration objects populated from environment variables.

Declare a frozen dataclass, decorate it with ``@env_config`` and call
``from_env()``. Every field is read from one variable; ``Optional[...]``
fields may be unset, all others are mandatory. Failures name the exact
variable and value that caused them.
"""

from env_config.assembly import (
    FieldSpec,
    derive_env_var_name,
    env_config,
    field_plan,
    from_env,
    is_env_config,
)
from env_config.converter import from_env_var
from env_config.errors import (
    ConfigDefinitionError,
    ConfigError,
    EnvConfigError,
    EnvVarError,
    InvalidValue,
    MandatoryNotSet,
    NotParsable,
    NotUnicode,
    UnsupportedFieldType,
)
from env_config.parsers import register_parser

__all__ = [
    "ConfigDefinitionError",
    "ConfigError",
    "EnvConfigError",
    "EnvVarError",
    "FieldSpec",
    "InvalidValue",
    "MandatoryNotSet",
    "NotParsable",
    "NotUnicode",
    "UnsupportedFieldType",
    "derive_env_var_name",
    "env_config",
    "field_plan",
    "from_env",
    "from_env_var",
    "is_env_config",
    "register_parser",
]
