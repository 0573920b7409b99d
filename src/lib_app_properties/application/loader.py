"""Application-layer layered source loader.

Purpose
-------
Turn a :class:`~lib_app_properties.domain.config.PropertiesConfig` into a
:class:`~lib_app_properties.domain.store.PropertyStore` by loading every
candidate source in a fixed order and overlaying each onto an accumulator.

Contents
    - ``load_properties``: public entry point driven by a simple loop.
    - ``plan_sources``: the ordered ``(path type, location, file name)`` plan.
    - ``_read_source`` / ``_read_classpath`` / ``_read_filesystem`` /
      ``_read_servlet``: one tiny reader per path type.

System Role
-----------
Precedence is ``classpath root`` < ``root suffixed`` < each configured path in
order, each immediately followed by its suffixed sibling. Any failure aborts
the whole load; nothing partially merged escapes.
"""

from __future__ import annotations

import posixpath
from pathlib import Path
from typing import Iterator

from ..domain.config import PropertiesConfig
from ..domain.errors import ConfigurationError, InvalidFormat, SourceNotFound
from ..domain.path_spec import PathType
from ..domain.store import PropertyStore, PropertyStoreBuilder
from ..observability import log_debug, log_error, log_info, make_event
from .ports import FileSystemProvider, LoadedSource, PropertiesParser, ResourceProvider

NO_SOURCES_MESSAGE = (
    "Failed to find any properties files because load_defaults_from_root=False "
    "and no file paths were given to search through"
)


def plan_sources(config: PropertiesConfig) -> Iterator[tuple[PathType, str, str]]:
    """Yield ``(path_type, location, file_name)`` in overlay order.

    Raises
    ------
    ConfigurationError
        When root defaults are disabled and no paths are configured.
    InvalidPathType
        When a configured path carries an unknown prefix.

    Examples
    --------
    >>> cfg = PropertiesConfig(override_suffix="-dev", paths=("conf",))
    >>> [(str(kind), location, name) for kind, location, name in plan_sources(cfg)]  # doctest: +NORMALIZE_WHITESPACE
    [('classpath:', '', 'application.properties'),
     ('classpath:', '', 'application-dev.properties'),
     ('file:', 'conf', 'application.properties'),
     ('file:', 'conf', 'application-dev.properties')]
    """

    if not config.load_defaults_from_root and not config.paths:
        raise ConfigurationError(NO_SOURCES_MESSAGE)
    names = [config.properties_file_name]
    if config.suffixed_file_name is not None:
        names.append(config.suffixed_file_name)
    specs = config.path_specs()
    if config.load_defaults_from_root:
        for name in names:
            yield PathType.CLASSPATH, "", name
    for spec in specs:
        for name in names:
            yield spec.path_type, spec.location, name


def load_properties(
    config: PropertiesConfig,
    *,
    resources: ResourceProvider,
    filesystem: FileSystemProvider,
    parser: PropertiesParser,
) -> PropertyStore:
    """Load and merge every source described by *config*.

    Parameters
    ----------
    config:
        What to load and in which order.
    resources / filesystem:
        Providers for classpath resources and working-directory files. Servlet
        sources are read through *filesystem* using absolute paths.
    parser:
        Decodes each payload into key/value pairs.

    Returns
    -------
    PropertyStore
        Final merged values plus source records when ``config.record_sources``.

    Raises
    ------
    ConfigurationError / InvalidPathType / SourceNotFound
        At the first failing source; see :mod:`lib_app_properties.domain.errors`.

    Side Effects
    ------------
    Emits ``source_loaded`` debug events and a ``properties_merged`` info event.
    """

    builder = PropertyStoreBuilder(record_sources=config.record_sources)
    plan = list(plan_sources(config))
    for path_type, location, file_name in plan:
        loaded = _read_source(config, path_type, location, file_name, resources, filesystem)
        try:
            properties = parser.parse(loaded.payload, identifier=loaded.identifier)
        except InvalidFormat as exc:
            log_error("source_invalid", **make_event(str(path_type), loaded.identifier, {"error": str(exc)}))
            raise SourceNotFound(str(path_type), file_name, location) from exc
        log_debug("source_loaded", **make_event(str(path_type), loaded.identifier, {"keys": len(properties)}))
        builder.overlay(loaded.identifier, properties)
    store = builder.build()
    log_info("properties_merged", source="final", path=None, total_sources=len(plan), keys=len(store))
    return store


def _read_source(
    config: PropertiesConfig,
    path_type: PathType,
    location: str,
    file_name: str,
    resources: ResourceProvider,
    filesystem: FileSystemProvider,
) -> LoadedSource:
    """Dispatch to the reader for *path_type*, translating OS errors into ``SourceNotFound``."""

    try:
        if path_type is PathType.CLASSPATH:
            return _read_classpath(resources, location, file_name)
        if path_type is PathType.SERVLET:
            return _read_servlet(config, filesystem, location, file_name)
        return _read_filesystem(filesystem, location, file_name)
    except OSError as exc:
        log_debug("source_missing", **make_event(str(path_type), None, {"location": location, "file": file_name}))
        raise SourceNotFound(str(path_type), file_name, location) from exc


def _read_classpath(resources: ResourceProvider, location: str, file_name: str) -> LoadedSource:
    return resources.read(posixpath.join(location, file_name))


def _read_filesystem(filesystem: FileSystemProvider, location: str, file_name: str) -> LoadedSource:
    return filesystem.read(str(Path(location) / file_name))


def _read_servlet(
    config: PropertiesConfig,
    filesystem: FileSystemProvider,
    location: str,
    file_name: str,
) -> LoadedSource:
    """Read ``{container base dir}/location/file_name``; the base dir must be configured."""

    base_directory = Path(config.container_base_directory())
    target = base_directory / location.lstrip("/\\") / file_name
    return filesystem.read(str(target.absolute()))
