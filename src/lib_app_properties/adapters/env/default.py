"""Environment variable and system property providers.

Purpose
-------
Supply the two read-only lookups consumed by
:class:`lib_app_properties.application.expressions.ExpressionResolver`:
process environment variables for ``${env:...}`` and system-level properties
for ``${prop:...}``.

Key behaviours
--------------
* :func:`default_environment` hands out the live :data:`os.environ` unless a
  mapping is injected (tests inject plain dictionaries).
* :class:`SystemProperties` exposes interpreter and host facts under dotted
  names (``user.home``, ``os.name`` ...) with caller overrides layered on top.
* :func:`parse_assignments` turns ``key=value`` strings (CLI ``-D`` options)
  into a dictionary.
"""

from __future__ import annotations

import getpass
import os
import platform
import tempfile
from collections.abc import Mapping
from pathlib import Path
from typing import Iterable, Iterator


def default_environment(environ: Mapping[str, str] | None = None) -> Mapping[str, str]:
    """Return *environ* or the live process environment.

    Examples
    --------
    >>> default_environment({"A": "1"})["A"]
    '1'
    >>> default_environment() is os.environ
    True
    """

    return os.environ if environ is None else environ


class SystemProperties(Mapping[str, str]):
    """Read-only mapping of interpreter/host facts plus caller overrides.

    Why
    ----
    Values that describe the running process (home directory, OS name, line
    separator) are handy in placeholders and should not require exporting
    environment variables.

    Parameters
    ----------
    overrides:
        Values that replace or extend the detected defaults.

    Examples
    --------
    >>> props = SystemProperties({"app.mode": "test", "os.name": "Plan9"})
    >>> props["app.mode"], props["os.name"]
    ('test', 'Plan9')
    >>> "user.dir" in props
    True
    >>> props.get("missing") is None
    True
    """

    def __init__(self, overrides: Mapping[str, str] | None = None) -> None:
        values = _detect_defaults()
        values.update(overrides or {})
        self._values = values

    def __getitem__(self, key: str) -> str:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def with_overrides(self, overrides: Mapping[str, str]) -> SystemProperties:
        """Return a new instance with *overrides* applied on top of this one."""

        merged = dict(self._values)
        merged.update(overrides)
        clone = SystemProperties.__new__(SystemProperties)
        clone._values = merged
        return clone


def parse_assignments(entries: Iterable[str]) -> dict[str, str]:
    """Parse ``key=value`` strings into a dictionary; later entries win.

    Raises
    ------
    ValueError
        When an entry lacks ``=`` or has an empty key.

    Examples
    --------
    >>> parse_assignments(["app.mode=test", "empty="])
    {'app.mode': 'test', 'empty': ''}
    """

    collected: dict[str, str] = {}
    for entry in entries:
        key, separator, value = entry.partition("=")
        key = key.strip()
        if not separator or not key:
            raise ValueError(f"Expected key=value, got {entry!r}")
        collected[key] = value
    return collected


def _detect_defaults() -> dict[str, str]:
    """Collect process facts that never require I/O beyond ``getcwd``."""

    return {
        "user.dir": str(Path.cwd()),
        "user.home": str(Path.home()),
        "user.name": _user_name(),
        "os.name": platform.system(),
        "os.arch": platform.machine(),
        "os.version": platform.release(),
        "python.version": platform.python_version(),
        "file.separator": os.sep,
        "path.separator": os.pathsep,
        "line.separator": os.linesep,
        "tmp.dir": tempfile.gettempdir(),
    }


def _user_name() -> str:
    try:
        return getpass.getuser()
    except (KeyError, OSError):
        return ""
