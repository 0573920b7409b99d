"""Hosting-container context adapter.

Purpose
-------
Provide the narrow :class:`lib_app_properties.domain.config.HostingContainer`
capability for applications deployed inside a web container (Tomcat-style
layouts with ``CATALINA_BASE``). Only the context path and the lookup of the
base-directory settings are exposed.

Contents
--------
* :class:`ContainerContext` – context path plus a settings lookup that defaults
  to the live process environment.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Mapping


@dataclass(frozen=True)
class ContainerContext:
    """Identity and settings of the hosting container.

    Parameters
    ----------
    context_path:
        Mount path of the application, e.g. ``"/shop"``.
    settings:
        Where ``CATALINA_COMMON``/``CATALINA_BASE`` are read from. Defaults to
        :data:`os.environ`.

    Examples
    --------
    >>> ctx = ContainerContext("/shop", settings={"CATALINA_BASE": "/opt/tomcat", "CATALINA_COMMON": ""})
    >>> ctx.lookup("CATALINA_BASE")
    '/opt/tomcat'
    >>> ctx.lookup("CATALINA_COMMON") is None
    True
    """

    context_path: str
    settings: Mapping[str, str] = field(default_factory=lambda: os.environ, repr=False)

    def lookup(self, name: str) -> str | None:
        """Return the non-empty value of *name* or ``None``."""

        value = self.settings.get(name)
        return value or None
