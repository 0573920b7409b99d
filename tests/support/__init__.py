"""Shared sandbox helpers for the ``lib_app_properties`` test-suite.

The sandbox lays out three isolated roots under ``tmp_path`` that mirror the
three source kinds: a ``classpath`` directory served through
:class:`ClasspathResourceProvider`, a ``work`` directory used as the working
directory for ``file:`` paths, and a ``catalina`` directory acting as the
container base for ``servlet:`` paths.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

from lib_app_properties import ApplicationProperties, PropertiesConfig
from lib_app_properties.adapters.container.default import ContainerContext
from lib_app_properties.adapters.resources.default import ClasspathResourceProvider
from lib_app_properties.application.ports import LoadedSource

LAYERS = ("classpath", "work", "catalina")


@dataclass
class PropertiesSandbox:
    """Temporary directory tree plus helpers to build and load configurations."""

    root: Path
    environment: dict[str, str] = field(default_factory=dict)
    system_properties: dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        for layer in LAYERS:
            (self.root / layer).mkdir(parents=True, exist_ok=True)

    @property
    def classpath(self) -> Path:
        return self.root / "classpath"

    @property
    def work(self) -> Path:
        return self.root / "work"

    @property
    def catalina(self) -> Path:
        return self.root / "catalina"

    def write(self, layer: str, relative: str, *, content: str) -> Path:
        """Write *content* to ``<layer>/<relative>`` and return the absolute path."""

        if layer not in LAYERS:
            raise ValueError(f"Unknown sandbox layer: {layer}")
        path = self.root / layer / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    def resources(self) -> ClasspathResourceProvider:
        return ClasspathResourceProvider(search_path=[str(self.classpath)])

    def container(self, context_path: str = "/shop", **settings: str) -> ContainerContext:
        """Return a container whose base directory is the sandbox ``catalina`` root by default."""

        values = {"CATALINA_BASE": str(self.catalina)}
        values.update(settings)
        return ContainerContext(context_path, settings=values)

    def load(self, config: PropertiesConfig | None = None, *paths: str, **overrides: Any) -> ApplicationProperties:
        """Construct :class:`ApplicationProperties` wired to the sandbox roots."""

        options: dict[str, Any] = {
            "environment": self.environment,
            "system_properties": self.system_properties,
            "resources": self.resources(),
            "cwd": self.work,
        }
        options.update(overrides)
        return ApplicationProperties(config, *paths, **options)


def create_properties_sandbox(
    tmp_path: Path,
    *,
    environment: Mapping[str, str] | None = None,
    system_properties: Mapping[str, str] | None = None,
) -> PropertiesSandbox:
    """Return a fresh :class:`PropertiesSandbox` rooted at *tmp_path*."""

    return PropertiesSandbox(
        root=tmp_path,
        environment=dict(environment or {}),
        system_properties=dict(system_properties or {}),
    )


class InMemoryProvider:
    """Resource/filesystem provider backed by a dictionary of path to text."""

    def __init__(self, files: Mapping[str, str] | None = None) -> None:
        self.files = dict(files or {})
        self.requests: list[str] = []

    def read(self, relative_path: str) -> LoadedSource:
        key = relative_path.replace("\\", "/")
        self.requests.append(key)
        if key not in self.files:
            raise FileNotFoundError(key)
        return LoadedSource(identifier=f"memory:{key}", payload=self.files[key].encode("utf-8"))


class ExplodingProvider:
    """Provider that fails the test if any read is attempted."""

    def read(self, relative_path: str) -> LoadedSource:
        raise AssertionError(f"unexpected read of {relative_path}")


__all__ = [
    "ExplodingProvider",
    "InMemoryProvider",
    "PropertiesSandbox",
    "create_properties_sandbox",
]
