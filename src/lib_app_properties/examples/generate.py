"""Example properties tree generation.

Purpose
-------
Produce a small, reproducible directory layout that demonstrates override
order and placeholders. Used by the ``generate-examples`` CLI command, by
documentation, and by tests.

Contents
    - ``ExampleSpec``: dataclass capturing a relative path and text content.
    - ``generate_examples``: public orchestration expressed through helper
      verbs.
    - ``_build_specs``: yields the example files.
    - ``_write_spec`` / ``_should_write`` / ``_ensure_parent``: tiny filesystem
      helpers that narrate how files are written.

Layout
------
``<destination>/application.properties`` and its suffixed sibling act as the
classpath root (point a :class:`~lib_app_properties.adapters.resources.default.ClasspathResourceProvider`
at *destination*); ``<destination>/conf/`` holds the working-directory
overrides; with *context* given, ``<destination>/catalina/conf/apps/<context>/``
holds the container overrides (set ``CATALINA_BASE`` to ``<destination>/catalina``).
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

from ..domain.config import (
    DEFAULT_PROPERTIES_FILENAME,
    DEFAULT_SERVLET_PARENT_DIR,
    DEFAULT_SERVLET_SUB_DIR,
    PropertiesConfig,
)

CATALINA_DIRECTORY = "catalina"


@dataclass(slots=True)
class ExampleSpec:
    """Describe a single example file to be written to disk.

    Attributes
    ----------
    relative_path:
        Path relative to the destination directory.
    content:
        File contents (UTF-8 text) including explanatory comments.
    """

    relative_path: Path
    content: str


def generate_examples(
    destination: str | Path,
    *,
    file_name: str = DEFAULT_PROPERTIES_FILENAME,
    suffix: str = "-local",
    context: str | None = None,
    force: bool = False,
) -> list[Path]:
    """Write the example properties files under *destination*.

    Parameters
    ----------
    destination:
        Directory that will receive the generated structure.
    file_name / suffix:
        Base file name and override suffix used for every layer. An empty
        suffix writes the base files only.
    context:
        Optional container context name; adds a ``catalina`` tree when given.
    force:
        When ``True`` existing files are overwritten; otherwise they are skipped.

    Returns
    -------
    list[Path]
        File paths written during this invocation.

    Examples
    --------
    >>> from tempfile import TemporaryDirectory
    >>> tmp = TemporaryDirectory()
    >>> generated = generate_examples(tmp.name)
    >>> sorted(path.relative_to(tmp.name).as_posix() for path in generated)
    ['application-local.properties', 'application.properties', 'conf/application-local.properties', 'conf/application.properties']
    >>> generate_examples(tmp.name)
    []
    >>> tmp.cleanup()
    """

    dest = Path(destination)
    specs = _build_specs(file_name=file_name, suffix=suffix, context=context)
    return _write_examples(dest, specs, force)


def _write_examples(destination: Path, specs: Iterator[ExampleSpec], force: bool) -> list[Path]:
    """Write all ``specs`` under *destination* honouring the *force* flag."""

    written: list[Path] = []
    for spec in specs:
        path = destination / spec.relative_path
        if not _should_write(path, force):
            continue
        _ensure_parent(path)
        _write_spec(path, spec)
        written.append(path)
    return written


def _write_spec(path: Path, spec: ExampleSpec) -> None:
    path.write_text(spec.content, encoding="utf-8")


def _should_write(path: Path, force: bool) -> bool:
    return force or not path.exists()


def _ensure_parent(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)


def _build_specs(*, file_name: str, suffix: str, context: str | None) -> Iterator[ExampleSpec]:
    """Yield one :class:`ExampleSpec` per layer, lowest precedence first."""

    suffixed = PropertiesConfig(file_name=file_name, override_suffix=suffix).suffixed_file_name
    yield ExampleSpec(
        Path(file_name),
        "# Bundled defaults (classpath root)\n"
        "layer=classpath\n"
        "service.endpoint=https://api.example.com\n"
        "service.timeout=10\n"
        "service.user=${env:USER}\n"
        "service.home=${prop:user.home}\n"
        "banner=Welcome\\\\nto the demo\n",
    )
    if suffixed is not None:
        yield ExampleSpec(
            Path(suffixed),
            f"# Suffixed defaults ({suffix}) override the bundled file\nlayer=classpath{suffix}\nservice.timeout=15\n",
        )
    yield ExampleSpec(
        Path("conf") / file_name,
        "# Working-directory overrides (file:conf)\nlayer=conf\nservice.retries=3\nfeature.enabled=true\n",
    )
    if suffixed is not None:
        yield ExampleSpec(
            Path("conf") / suffixed,
            f"# Suffixed working-directory overrides win over everything above\nlayer=conf{suffix}\nservice.timeout=20\n",
        )
    if context:
        apps = Path(CATALINA_DIRECTORY) / DEFAULT_SERVLET_PARENT_DIR / DEFAULT_SERVLET_SUB_DIR / context
        yield ExampleSpec(
            apps / file_name,
            f"# Container overrides for context /{context}\nlayer=servlet\nservice.endpoint=https://{context}.example.com\n",
        )
        if suffixed is not None:
            yield ExampleSpec(
                apps / suffixed,
                f"# Suffixed container overrides\nlayer=servlet{suffix}\n",
            )
