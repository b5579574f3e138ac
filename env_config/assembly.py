"""
Structure assembler: build a whole config object from the environment.

**Conceptual**: A config class is a frozen dataclass whose fields each map to
one environment variable. The ``@env_config`` decorator walks the dataclass
fields once, at class-definition time, and records a *field plan*: for every
field its variable name, target type and whether it may be absent.
``from_env()`` then replays that plan against the environment.

**Naming rule** (exact, no other transformation):
  - ``PREFIX_FIELDNAME`` when the class has a prefix,
  - ``FIELDNAME`` otherwise,
where FIELDNAME is the field identifier upper-cased.

**Mandatory vs optional**: a field annotated ``Optional[X]`` (or ``X | None``)
may be absent and then holds ``None``. Every other field is mandatory and its
absence raises ``MandatoryNotSet``.

**Fail fast**: fields are read in declaration order and the first failure is
raised. There is no partial object and no list of all problems.

Usage example:
    >>> from dataclasses import dataclass
    >>> from typing import Optional
    >>> from env_config import env_config
    >>>
    >>> @env_config(prefix="APP")
    ... @dataclass(frozen=True)
    ... class AppConfig:
    ...     debug: bool                 # APP_DEBUG, required
    ...     workers: Optional[int]      # APP_WORKERS, may be unset
    >>>
    >>> config = AppConfig.from_env()
"""

import dataclasses
import logging
import types
import typing
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple, Type, TypeVar, Union

from env_config.converter import from_env_var
from env_config.errors import (
    ConfigDefinitionError,
    EnvVarError,
    InvalidValue,
    MandatoryNotSet,
    UnsupportedFieldType,
)
from env_config.lookup import EnvMapping
from env_config.parsers import get_parser

logger = logging.getLogger(__name__)

T = TypeVar("T")

_PLAN_ATTR = "__env_config_plan__"
_PREFIX_ATTR = "__env_config_prefix__"

_UNION_TYPES = tuple(t for t in (Union, getattr(types, "UnionType", None)) if t is not None)


@dataclass(frozen=True)
class FieldSpec:
    """
    How one dataclass field is read from the environment.

    Attributes:
        name: Field identifier on the dataclass.
        env_var_name: Variable looked up for this field.
        target_type: Type handed to the parser (inner type for optional fields).
        optional: True if absence yields None instead of an error.
    """
    name: str
    env_var_name: str
    target_type: Any
    optional: bool


def derive_env_var_name(field_name: str, prefix: Optional[str] = None) -> str:
    """
    Compute the environment variable name for a field.

    Pure and total: no environment access, defined for every input.

    Examples:
        >>> derive_env_var_name("some_mandatory_bool", "TEST")
        'TEST_SOME_MANDATORY_BOOL'
        >>> derive_env_var_name("debug")
        'DEBUG'
    """
    upper = field_name.upper()
    if prefix is None:
        return upper
    return f"{prefix}_{upper}"


def unwrap_optional(annotation: Any) -> Tuple[Any, bool]:
    """
    Split ``Optional[X]`` into ``(X, True)``; anything else is ``(annotation, False)``.

    Raises:
        ConfigDefinitionError: For a Union with more than one non-None member,
            since there is no way to tell which parser to use.
    """
    if typing.get_origin(annotation) not in _UNION_TYPES:
        return annotation, False

    members = typing.get_args(annotation)
    inner = [m for m in members if m is not type(None)]
    if len(inner) == 1 and len(members) == 2:
        return inner[0], True
    raise ConfigDefinitionError(
        f"unsupported union type {annotation!r}: only Optional[X] is allowed"
    )


def _build_plan(cls: type, prefix: Optional[str]) -> Tuple[FieldSpec, ...]:
    if not dataclasses.is_dataclass(cls):
        raise ConfigDefinitionError(
            f"{cls!r} is not a dataclass; apply @env_config above @dataclass"
        )

    fields = dataclasses.fields(cls)
    if not fields:
        raise ConfigDefinitionError(f"{cls.__name__} has no fields to read from the environment")

    try:
        hints = typing.get_type_hints(cls)
    except NameError as e:
        raise ConfigDefinitionError(f"{cls.__name__} has an unresolvable annotation: {e}") from e

    plan = []
    seen: Dict[str, str] = {}

    for f in fields:
        if not f.init:
            raise ConfigDefinitionError(
                f"{cls.__name__}.{f.name} has init=False and cannot be set from the environment"
            )
        if f.default is not dataclasses.MISSING or f.default_factory is not dataclasses.MISSING:
            raise ConfigDefinitionError(
                f"{cls.__name__}.{f.name} has a default value; defaults are not supported, "
                "use Optional[...] for variables that may be unset"
            )

        target_type, optional = unwrap_optional(hints[f.name])
        try:
            get_parser(target_type)
        except UnsupportedFieldType as e:
            raise ConfigDefinitionError(f"{cls.__name__}.{f.name}: {e}") from None

        env_var_name = derive_env_var_name(f.name, prefix)
        if env_var_name in seen:
            raise ConfigDefinitionError(
                f"{cls.__name__}.{f.name} and {cls.__name__}.{seen[env_var_name]} "
                f"both map to {env_var_name}"
            )
        seen[env_var_name] = f.name

        logger.debug(
            "%s.%s <- %s (%s)",
            cls.__name__,
            f.name,
            env_var_name,
            "optional" if optional else "mandatory",
        )
        plan.append(FieldSpec(f.name, env_var_name, target_type, optional))

    return tuple(plan)


def env_config(cls: Optional[type] = None, *, prefix: Optional[str] = None):
    """
    Class decorator turning a dataclass into an environment-backed config class.

    Validates the class immediately (malformed classes fail at import time,
    not at startup), stores its field plan and adds a ``from_env`` classmethod.

    Args:
        cls: The dataclass (when used as bare ``@env_config``).
        prefix: Optional prefix shared by every variable of this class.

    Raises:
        ConfigDefinitionError: If the class cannot be mapped onto variables
            (not a dataclass, no fields, unsupported field type, default
            values, init=False fields, two fields with the same variable
            name, or a non-string prefix). Unknown keyword arguments raise
            TypeError from the call itself.
    """
    if cls is not None and not isinstance(cls, type):
        raise ConfigDefinitionError(
            f"@env_config takes keyword arguments only, e.g. @env_config(prefix=...), got {cls!r}"
        )
    if prefix is not None and not isinstance(prefix, str):
        raise ConfigDefinitionError(f"prefix must be a string, got {prefix!r}")

    def wrap(target: Type[T]) -> Type[T]:
        if "from_env" in vars(target):
            raise ConfigDefinitionError(f"{target.__name__} already defines from_env")

        setattr(target, _PLAN_ATTR, _build_plan(target, prefix))
        setattr(target, _PREFIX_ATTR, prefix)
        target.from_env = classmethod(from_env)
        return target

    if cls is None:
        return wrap
    return wrap(cls)


def is_env_config(cls: Any) -> bool:
    """True if ``cls`` itself (not just a base class) was decorated with @env_config."""
    return isinstance(cls, type) and _PLAN_ATTR in vars(cls)


def field_plan(cls: type) -> Tuple[FieldSpec, ...]:
    """
    Return the field plan recorded for an ``@env_config`` class.

    Raises:
        ConfigDefinitionError: If ``cls`` was not decorated with @env_config.
    """
    if not is_env_config(cls):
        raise ConfigDefinitionError(f"{cls!r} is not an @env_config class")
    return vars(cls)[_PLAN_ATTR]


def config_prefix(cls: type) -> Optional[str]:
    field_plan(cls)
    return vars(cls)[_PREFIX_ATTR]


def from_env(cls: Type[T], environ: Optional[EnvMapping] = None) -> T:
    """
    Build an instance of ``cls`` from environment variables.

    **Functionally**: For each field, in declaration order:
      - read and parse its variable via ``from_env_var``;
      - optional field: keep the result as-is (``None`` when unset);
      - mandatory field: ``None`` means the variable is missing.

    Args:
        cls: An ``@env_config`` class.
        environ: Optional mapping to read instead of the process environment.

    Returns:
        A fully populated instance of ``cls``.

    Raises:
        InvalidValue: A variable is set but not unicode or not parsable.
        MandatoryNotSet: A mandatory field's variable is not set.
        ConfigDefinitionError: ``cls`` is not an @env_config class.
    """
    values: Dict[str, Any] = {}

    for spec in field_plan(cls):
        try:
            value = from_env_var(spec.target_type, spec.env_var_name, environ)
        except EnvVarError as e:
            logger.debug("%s: invalid value in %s", cls.__name__, spec.env_var_name)
            raise InvalidValue(e) from e

        if value is None and not spec.optional:
            logger.debug("%s: mandatory %s not set", cls.__name__, spec.env_var_name)
            raise MandatoryNotSet(spec.env_var_name)

        values[spec.name] = value

    return cls(**values)
