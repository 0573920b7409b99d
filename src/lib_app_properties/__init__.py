"""Public package surface for ``lib_app_properties``.

Layered ``key=value`` application properties with ``${env:...}`` and
``${prop:...}`` placeholders. Import :class:`ApplicationProperties` (or the
:func:`read_properties` shortcut) together with :class:`PropertiesConfig`;
the error taxonomy lives alongside for ``except`` clauses.
"""

from __future__ import annotations

from .adapters.container.default import ContainerContext
from .adapters.env.default import SystemProperties
from .core import ApplicationProperties, read_properties
from .domain.config import PropertiesConfig
from .domain.errors import (
    ConfigurationError,
    ExpansionLimitExceeded,
    InvalidFormat,
    InvalidPathType,
    PropertiesError,
    SourceNotFound,
    UnresolvedReferenceError,
)
from .domain.path_spec import PathSpec, PathType, parse_path_spec
from .domain.store import PropertyStore, SourceRecord
from .observability import bind_trace_id, get_logger

__all__ = [
    "ApplicationProperties",
    "ConfigurationError",
    "ContainerContext",
    "ExpansionLimitExceeded",
    "InvalidFormat",
    "InvalidPathType",
    "PathSpec",
    "PathType",
    "PropertiesConfig",
    "PropertiesError",
    "PropertyStore",
    "SourceNotFound",
    "SourceRecord",
    "SystemProperties",
    "UnresolvedReferenceError",
    "bind_trace_id",
    "get_logger",
    "parse_path_spec",
    "read_properties",
]
