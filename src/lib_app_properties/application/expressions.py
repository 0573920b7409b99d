"""Placeholder expression evaluation.

Purpose
-------
Rewrite ``${env:NAME}`` and ``${prop:NAME}`` placeholders embedded in raw
property values using injected environment and system-property lookups.

Contents
--------
* :data:`PLACEHOLDER_PATTERN` – the placeholder grammar.
* :class:`ExpressionResolver` – substitution loop with a hardening bound.
* :func:`find_placeholders` – diagnostic helper listing placeholders in a value.

System Role
-----------
Called by :class:`lib_app_properties.core.ApplicationProperties` on the first
read of each key. The resolver is not a template engine: substituted values are
inserted verbatim. Because every pass rescans the whole string, a substituted
value that itself looks like a placeholder is picked up on the next pass; the
pass bound stops self-referencing values from looping forever.
"""

from __future__ import annotations

import re
from typing import Final, Mapping

from ..domain.errors import ExpansionLimitExceeded, UnresolvedReferenceError
from ..observability import log_debug, log_warning

PLACEHOLDER_PATTERN: Final[re.Pattern[str]] = re.compile(r"\$\{(\w*?(env|prop)\w*?):(.+?)\}")
"""``${<word chars>env|prop<word chars>:<name>}``; the name is non-empty and ends at the first ``}`` after it."""

DEFAULT_MAX_PASSES: Final[int] = 100

ENV: Final[str] = "env"
PROP: Final[str] = "prop"


def find_placeholders(value: str) -> list[str]:
    """Return every placeholder substring in *value*, left to right.

    Examples
    --------
    >>> find_placeholders("jdbc:${env:DB_HOST}:${sysprop:db.port}/app")
    ['${env:DB_HOST}', '${sysprop:db.port}']
    >>> find_placeholders("plain")
    []
    """

    return [match.group(0) for match in PLACEHOLDER_PATTERN.finditer(value)]


class ExpressionResolver:
    """Substitute placeholders against environment variables and system properties.

    Parameters
    ----------
    environment:
        Lookup used for ``env`` placeholders (usually :data:`os.environ`).
    system_properties:
        Lookup used for ``prop`` placeholders.
    max_passes:
        Substitutions allowed for one value beyond the placeholders its raw
        text already holds; only nested placeholders consume this budget.

    Examples
    --------
    >>> resolver = ExpressionResolver({"USER": "ada"}, {"user.home": "/home/ada"})
    >>> resolver.resolve("greeting", "hi ${env:USER}, home=${prop:user.home}")
    'hi ada, home=/home/ada'
    >>> resolver.resolve("missing", "${env:NOPE}")
    Traceback (most recent call last):
    ...
    lib_app_properties.domain.errors.UnresolvedReferenceError: Failed to resolve property 'missing': no value found for ${env:NOPE}
    """

    def __init__(
        self,
        environment: Mapping[str, str],
        system_properties: Mapping[str, str],
        *,
        max_passes: int = DEFAULT_MAX_PASSES,
    ) -> None:
        if max_passes < 1:
            raise ValueError("max_passes must be at least 1")
        self._environment = environment
        self._system_properties = system_properties
        self._max_passes = max_passes

    def resolve(self, name: str, raw: str) -> str:
        """Return *raw* with every placeholder replaced.

        Parameters
        ----------
        name:
            Property being resolved, used in error messages and logs.
        raw:
            Stored value to evaluate.

        Raises
        ------
        UnresolvedReferenceError
            When a placeholder's referenced value is absent.
        ExpansionLimitExceeded
            When substituted values keep introducing placeholders beyond
            ``max_passes`` extra substitutions.
        """

        value = raw
        passes = 0
        limit = self._max_passes + len(find_placeholders(raw))
        match = PLACEHOLDER_PATTERN.search(value)
        while match is not None:
            if passes >= limit:
                raise ExpansionLimitExceeded(
                    f"Property '{name}' still contains placeholders after {passes} substitutions"
                )
            passes += 1
            value = self._substitute(name, value, match)
            match = PLACEHOLDER_PATTERN.search(value)
        if passes:
            log_debug("property_evaluated", source="resolver", path=None, name=name, substitutions=passes)
        return value

    def _substitute(self, name: str, value: str, match: re.Match[str]) -> str:
        """Replace the single placeholder *match* inside *value*."""

        placeholder = match.group(0)
        replacement = self._lookup(match.group(2), match.group(3))
        if replacement is None:
            raise UnresolvedReferenceError(name, placeholder)
        if replacement == "":
            log_warning("property_reference_empty", source="resolver", path=None, name=name, placeholder=placeholder)
        return value[: match.start()] + replacement + value[match.end() :]

    def _lookup(self, kind: str, key: str) -> str | None:
        lookup = self._environment if kind == ENV else self._system_properties
        return lookup.get(key)
