"""Application-layer ports describing collaborator responsibilities.

Purpose
-------
Define the structural contracts the loader and resolver depend on so the
composition root can wire real adapters in production and in-memory fakes in
tests.

Contents
--------
* :class:`LoadedSource` – identifier plus raw bytes of one source.
* :class:`ResourceProvider` – reads bundled (classpath) resources.
* :class:`FileSystemProvider` – reads files relative to the working directory.
* :class:`PropertiesParser` – turns raw bytes into key/value pairs.
* :class:`HostingContainer` – re-exported container capability.

System Role
-----------
These protocols enforce Dependency Inversion: :mod:`..application.loader` only
talks to these abstractions. Environment variables and system properties are
plain ``Mapping[str, str]`` lookups and need no dedicated port.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Protocol, runtime_checkable

from ..domain.config import HostingContainer


@dataclass(frozen=True, slots=True)
class LoadedSource:
    """Raw payload of one source and the identifier recorded for it."""

    identifier: str
    payload: bytes


@runtime_checkable
class ResourceProvider(Protocol):
    """Resolve a path relative to the classpath root into readable bytes.

    Implementations raise :class:`FileNotFoundError` (or another
    :class:`OSError`) when the resource is absent or unreadable.
    """

    def read(self, relative_path: str) -> LoadedSource:
        """Return the resource at *relative_path*."""


@runtime_checkable
class FileSystemProvider(Protocol):
    """Resolve a path (relative to the working directory, or absolute) into bytes."""

    def read(self, relative_path: str) -> LoadedSource:
        """Return the file at *relative_path*."""


@runtime_checkable
class PropertiesParser(Protocol):
    """Decode and parse the line-oriented ``key=value`` format.

    Implementations raise :class:`~lib_app_properties.domain.errors.InvalidFormat`
    when *payload* cannot be decoded.
    """

    def parse(self, payload: bytes, *, identifier: str) -> Mapping[str, str]:
        """Return key/value pairs in file order."""


__all__ = [
    "FileSystemProvider",
    "HostingContainer",
    "LoadedSource",
    "PropertiesParser",
    "ResourceProvider",
]
