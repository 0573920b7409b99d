"""Domain-level configuration value object.

Purpose
-------
Describe *how* properties are to be located: the base file name, an optional
override suffix, whether bundled root defaults load first, whether per-source
records are kept, the ordered list of extra paths, and an optional hosting
container. The module performs no I/O.

Contents
--------
* :class:`HostingContainer` – narrow capability protocol for web containers.
* :class:`PropertiesConfig` – immutable configuration with one validation point.
* Constants for default names and the container base-directory settings.

System Role
-----------
:class:`lib_app_properties.core.ApplicationProperties` receives a
``PropertiesConfig`` and derives a private copy through :meth:`with_paths`; the
loader reads nothing but this object to decide the load order.
"""

from __future__ import annotations

import posixpath
from dataclasses import dataclass, field, replace
from typing import Any, Final, Iterable, Protocol, runtime_checkable

from .errors import ConfigurationError
from .path_spec import PathSpec, PathType, parse_path_spec

DEFAULT_PROPERTIES_BASE_FILENAME: Final[str] = "application"
DEFAULT_PROPERTIES_EXTENSION: Final[str] = ".properties"
DEFAULT_PROPERTIES_FILENAME: Final[str] = DEFAULT_PROPERTIES_BASE_FILENAME + DEFAULT_PROPERTIES_EXTENSION

CATALINA_COMMON: Final[str] = "CATALINA_COMMON"
CATALINA_BASE: Final[str] = "CATALINA_BASE"
BASE_DIRECTORY_SETTINGS: Final[tuple[str, ...]] = (CATALINA_COMMON, CATALINA_BASE)

DEFAULT_SERVLET_PARENT_DIR: Final[str] = "conf"
DEFAULT_SERVLET_SUB_DIR: Final[str] = "apps"


@runtime_checkable
class HostingContainer(Protocol):
    """The two things the library needs from a hosting web container.

    ``context_path`` is the mount path of the application (``"/shop"``).
    :meth:`lookup` reads the external settings that locate the container's
    base directory.
    """

    context_path: str

    def lookup(self, name: str) -> str | None:
        """Return the value of setting *name*, or ``None`` when unset."""


@dataclass(frozen=True, slots=True)
class PropertiesConfig:
    """Immutable description of where properties come from.

    Parameters
    ----------
    file_name:
        Base properties file name. ``None``/empty means ``application.properties``,
        or the container context name when a container is configured.
    override_suffix:
        Optional suffix (``"-prod"``) producing a sibling file loaded right after
        each base file (``application-prod.properties``).
    load_defaults_from_root:
        Load the base (and suffixed) file from the classpath root first.
    record_sources:
        Keep a per-source record of the key/values each file contributed.
    paths:
        Ordered raw path strings. Duplicates are dropped, first occurrence wins.
    container:
        Optional hosting-container capability. When given and ``paths`` is
        empty, ``servlet:conf/apps/<context name>`` becomes the only path.
    resource_package:
        Package anchoring the classpath root. ``None`` searches ``sys.path``.

    Examples
    --------
    >>> cfg = PropertiesConfig(override_suffix="-unittest", paths=("conf", "conf"))
    >>> cfg.paths
    ('conf',)
    >>> cfg.suffixed_file_name
    'application-unittest.properties'
    >>> cfg.with_paths("classpath:extra").paths
    ('conf', 'classpath:extra')
    >>> cfg.paths
    ('conf',)
    """

    file_name: str | None = None
    override_suffix: str | None = None
    load_defaults_from_root: bool = True
    record_sources: bool = False
    paths: tuple[str, ...] = ()
    container: HostingContainer | None = field(default=None, compare=False)
    resource_package: str | None = None

    def __post_init__(self) -> None:
        """Normalise optional fields and deduplicate ``paths``.

        Side Effects
        ------------
        Mutates the dataclass fields via ``object.__setattr__`` during
        initialisation only.
        """

        paths = _unique(self.paths)
        if self.container is not None and not paths:
            paths = (self.servlet_default_path(),)
        object.__setattr__(self, "paths", paths)
        object.__setattr__(self, "file_name", self.file_name or None)
        object.__setattr__(self, "override_suffix", self.override_suffix or None)

    @property
    def properties_file_name(self) -> str:
        """Return the effective base file name."""

        if self.file_name:
            return self.file_name
        if self.container is not None:
            return self.context_name()
        return DEFAULT_PROPERTIES_FILENAME

    @property
    def suffixed_file_name(self) -> str | None:
        """Return ``{stem}{suffix}.{ext}`` or ``None`` when no suffix is configured.

        Examples
        --------
        >>> PropertiesConfig(file_name="myapp.properties", override_suffix="-conf").suffixed_file_name
        'myapp-conf.properties'
        >>> PropertiesConfig().suffixed_file_name is None
        True
        """

        if not self.override_suffix:
            return None
        base = posixpath.basename(self.properties_file_name)
        stem, dot, extension = base.rpartition(".")
        if not dot:
            stem, extension = base, ""
        return f"{stem}{self.override_suffix}.{extension}"

    def with_paths(self, *paths: str) -> PropertiesConfig:
        """Return a copy with *paths* appended; ``self`` is never mutated."""

        return replace(self, paths=self.paths + tuple(p for p in paths if p))

    def path_specs(self) -> list[PathSpec]:
        """Parse every configured path, defaulting unprefixed ones per container presence."""

        container_configured = self.container is not None
        return [parse_path_spec(raw, container_configured=container_configured) for raw in self.paths]

    def context_name(self) -> str:
        """Return the container context path without its leading slash.

        Raises
        ------
        ConfigurationError
            When no container is configured or its context path is empty.
        """

        container = self._require_container()
        name = container.context_path[1:] if container.context_path.startswith("/") else container.context_path
        if not name:
            raise ConfigurationError("Hosting container context path must not be empty")
        return name

    def servlet_default_path(self) -> str:
        """Return ``servlet:conf/apps/<context name>``, the default container path."""

        location = posixpath.join(DEFAULT_SERVLET_PARENT_DIR, DEFAULT_SERVLET_SUB_DIR, self.context_name())
        return f"{PathType.SERVLET.value}{location}"

    def container_base_directory(self) -> str:
        """Return the first non-empty value of ``CATALINA_COMMON`` then ``CATALINA_BASE``.

        Raises
        ------
        ConfigurationError
            When no container is configured or neither setting is present.
        """

        container = self._require_container()
        for name in BASE_DIRECTORY_SETTINGS:
            value = container.lookup(name)
            if value:
                return value
        raise ConfigurationError(f"Failed to find {CATALINA_COMMON} or {CATALINA_BASE} settings.")

    def describe(self) -> dict[str, Any]:
        """Return a plain dictionary summarising the configuration for logs and summaries."""

        return {
            "file_name": self.properties_file_name,
            "suffixed_file_name": self.suffixed_file_name,
            "load_defaults_from_root": self.load_defaults_from_root,
            "record_sources": self.record_sources,
            "paths": list(self.paths),
            "container": self.container.context_path if self.container is not None else None,
            "resource_package": self.resource_package,
        }

    def _require_container(self) -> HostingContainer:
        if self.container is None:
            raise ConfigurationError("A hosting container context is required but none was configured")
        return self.container


def _unique(paths: Iterable[str]) -> tuple[str, ...]:
    """Drop duplicate and empty entries while preserving first-seen order."""

    return tuple(dict.fromkeys(p for p in paths if p))
