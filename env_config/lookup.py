"""
Raw environment lookup with an honest answer about encoding.

**Conceptual**: ``os.environ.get()`` hides an awkward fact. On POSIX the
environment holds bytes, and Python decodes them with ``surrogateescape`` so
that invalid UTF-8 sneaks through as lone surrogate characters. Parsing such
a string would produce confusing errors far away from the real cause.

``lookup_env_var`` therefore answers with one of three outcomes:
  - ``ABSENT``: the variable is not set.
  - ``NonText(raw)``: the variable is set but its bytes are not valid UTF-8.
  - ``Text(value)``: the variable is set and is valid text.

Callers may pass an explicit ``environ`` mapping (e.g. a snapshot dict in
tests). Values in that mapping may be ``str`` or ``bytes``.
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional, Union

EnvMapping = Mapping[str, Union[str, bytes]]


@dataclass(frozen=True)
class Absent:
    pass


@dataclass(frozen=True)
class NonText:
    raw: bytes


@dataclass(frozen=True)
class Text:
    value: str


RawLookupResult = Union[Absent, NonText, Text]

ABSENT = Absent()


def _classify(value: Union[str, bytes]) -> RawLookupResult:
    if isinstance(value, bytes):
        try:
            return Text(value.decode("utf-8"))
        except UnicodeDecodeError:
            return NonText(value)

    try:
        value.encode("utf-8")
    except UnicodeEncodeError:
        pass
    else:
        return Text(value)

    # lone surrogates: undecodable bytes from surrogateescape decoding, or an
    # unpaired UTF-16 surrogate (Windows), kept in WTF-8 form
    try:
        return NonText(value.encode("utf-8", "surrogateescape"))
    except UnicodeEncodeError:
        return NonText(value.encode("utf-8", "surrogatepass"))


def lookup_env_var(env_var_name: str, environ: Optional[EnvMapping] = None) -> RawLookupResult:
    """
    Read one variable from ``environ`` or from the process environment.

    When reading the process environment on a platform that stores it as
    bytes, ``os.environb`` is consulted so the raw bytes are seen exactly as
    the parent process set them.

    Args:
        env_var_name: Exact variable name; never transformed.
        environ: Optional mapping to read instead of the process environment.

    Returns:
        ABSENT, NonText(raw) or Text(value).
    """
    if environ is not None:
        value = environ.get(env_var_name)
    elif os.supports_bytes_environ:
        value = os.environb.get(os.fsencode(env_var_name))
    else:
        value = os.environ.get(env_var_name)

    if value is None:
        return ABSENT
    return _classify(value)
