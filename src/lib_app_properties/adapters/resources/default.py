"""Bundled resource lookup (the ``classpath:`` source type).

Purpose
-------
Implement :class:`lib_app_properties.application.ports.ResourceProvider`.
Python has no classpath; the closest equivalents are package data reachable
through :mod:`importlib.resources` and the directories listed on
:data:`sys.path`. The provider supports both.

Contents
--------
* :class:`ClasspathResourceProvider` – resolves ``location/file`` either inside
  an anchor package or along the interpreter search path.

System Role
-----------
Used by :func:`lib_app_properties.application.loader.load_properties` for the
classpath-root defaults and for every ``classpath:`` path.
"""

from __future__ import annotations

import sys
from importlib import resources
from pathlib import Path, PurePosixPath
from typing import Iterable

from ...application.ports import LoadedSource
from ...observability import log_debug


class ClasspathResourceProvider:
    """Resolve resource paths relative to a package or to ``sys.path`` entries.

    Parameters
    ----------
    package:
        Importable package name whose data files form the classpath root.
        ``None`` searches *search_path* instead.
    search_path:
        Directories to scan in order when no package is given. Defaults to
        :data:`sys.path` as it is at read time.

    Examples
    --------
    >>> from tempfile import TemporaryDirectory
    >>> tmp = TemporaryDirectory()
    >>> _ = (Path(tmp.name) / "application.properties").write_text("a=1", encoding="utf-8")
    >>> provider = ClasspathResourceProvider(search_path=[tmp.name])
    >>> provider.read("application.properties").payload
    b'a=1'
    >>> tmp.cleanup()
    """

    def __init__(self, package: str | None = None, *, search_path: Iterable[str] | None = None) -> None:
        self.package = package
        self._search_path = list(search_path) if search_path is not None else None

    def read(self, relative_path: str) -> LoadedSource:
        """Return the resource at *relative_path*.

        Raises
        ------
        FileNotFoundError
            When no matching resource exists.
        """

        parts = _split_resource_path(relative_path)
        if self.package is not None:
            loaded = self._read_package(parts)
        else:
            loaded = self._read_search_path(parts)
        log_debug("resource_read", source="classpath:", path=loaded.identifier, size=len(loaded.payload))
        return loaded

    def _read_package(self, parts: tuple[str, ...]) -> LoadedSource:
        try:
            traversable = resources.files(self.package)
        except ModuleNotFoundError as exc:
            raise FileNotFoundError(f"Resource package not importable: {self.package}") from exc
        target = traversable.joinpath(*parts) if parts else traversable
        if not target.is_file():
            raise FileNotFoundError(f"Resource not found in package {self.package}: {'/'.join(parts)}")
        return LoadedSource(identifier=str(target), payload=target.read_bytes())

    def _read_search_path(self, parts: tuple[str, ...]) -> LoadedSource:
        search_path = self._search_path if self._search_path is not None else sys.path
        for entry in search_path:
            candidate = Path(entry or ".").joinpath(*parts)
            if candidate.is_file():
                return LoadedSource(identifier=str(candidate.resolve()), payload=candidate.read_bytes())
        raise FileNotFoundError(f"Resource not found on search path: {'/'.join(parts)}")


def _split_resource_path(relative_path: str) -> tuple[str, ...]:
    """Split a ``/``-separated resource path, ignoring empty and ``.`` segments.

    Examples
    --------
    >>> _split_resource_path("conf/./application.properties")
    ('conf', 'application.properties')
    >>> _split_resource_path("/application.properties")
    ('application.properties',)
    """

    normalized = relative_path.replace("\\", "/")
    return tuple(part for part in PurePosixPath(normalized).parts if part not in ("", ".", "/"))
