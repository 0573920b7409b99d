"""Composition root and typed accessors for ``lib_app_properties``.

Purpose
-------
Provide the single entry point that wires the resource/filesystem providers,
the properties parser, the layered loader, and the expression resolver, and
exposes the merged result through memoising, typed accessors.

Contents
--------
* :class:`ApplicationProperties` – loads everything at construction, then
  answers ``get`` / ``get_long`` / ``get_integer`` / ``get_boolean``.
* :func:`read_properties` – keyword-only convenience wrapper.

System Role
-----------
Construction is synchronous and fail-fast: any configuration or source error
aborts it. Afterwards the merged store is read-only and the per-key resolution
cache is filled lazily on first access.

Caching
-------
The resolution cache is keyed by property name only. The first successful (or
missing) resolution of a name wins for the lifetime of the instance: later
calls return the cached value regardless of the ``default``,
``decode_escaped_newlines`` or ``evaluate`` arguments they pass. The cache is
not guarded by a lock; concurrent first reads of one key from several threads
need external synchronisation.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Final, Iterator, Mapping

from .adapters.env.default import SystemProperties, default_environment
from .adapters.file_loaders.properties import PropertiesFileLoader
from .adapters.filesystem.default import WorkingDirectoryProvider
from .adapters.resources.default import ClasspathResourceProvider
from .application.expressions import DEFAULT_MAX_PASSES, ExpressionResolver
from .application.loader import load_properties
from .application.ports import FileSystemProvider, PropertiesParser, ResourceProvider
from .domain.config import PropertiesConfig
from .domain.store import PropertyStore, SourceRecord
from .observability import bind_trace_id, log_debug, log_warning

ESCAPED_NEWLINE: Final[str] = "\\n"

INTEGER_RANGE: Final[tuple[int, int]] = (-(2**31), 2**31 - 1)
LONG_RANGE: Final[tuple[int, int]] = (-(2**63), 2**63 - 1)


class ApplicationProperties:
    """Layered, placeholder-aware application properties.

    Parameters
    ----------
    config:
        Where to load from. ``None`` uses :class:`PropertiesConfig` defaults
        (``application.properties`` from the classpath root).
    *paths:
        Extra raw paths appended to a private copy of *config*; the given
        config is never mutated.
    environment / system_properties:
        Lookups for ``${env:...}`` and ``${prop:...}`` placeholders. Default to
        the live process environment and a fresh :class:`SystemProperties`.
    resources / filesystem / parser:
        Collaborators used by the loader. Defaults honour
        ``config.resource_package`` and *cwd*.
    cwd:
        Working directory for relative ``file:`` paths.
    max_passes:
        Bound on placeholder substitution passes per value.

    Raises
    ------
    ConfigurationError / InvalidPathType / SourceNotFound
        When the configured sources cannot be loaded.

    Examples
    --------
    >>> from tempfile import TemporaryDirectory
    >>> tmp = TemporaryDirectory()
    >>> conf = Path(tmp.name) / "conf"
    >>> conf.mkdir()
    >>> _ = (conf / "application.properties").write_text("greeting=hello ${env:WHO}", encoding="utf-8")
    >>> cfg = PropertiesConfig(load_defaults_from_root=False)
    >>> props = ApplicationProperties(cfg, "conf", cwd=tmp.name, environment={"WHO": "world"})
    >>> props.get("greeting")
    'hello world'
    >>> props.get_integer("missing", "5")
    5
    >>> tmp.cleanup()
    """

    def __init__(
        self,
        config: PropertiesConfig | None = None,
        *paths: str,
        environment: Mapping[str, str] | None = None,
        system_properties: Mapping[str, str] | None = None,
        resources: ResourceProvider | None = None,
        filesystem: FileSystemProvider | None = None,
        parser: PropertiesParser | None = None,
        cwd: str | Path | None = None,
        max_passes: int = DEFAULT_MAX_PASSES,
    ) -> None:
        base = config if config is not None else PropertiesConfig()
        self.config: PropertiesConfig = base.with_paths(*paths)
        self._resolver = ExpressionResolver(
            default_environment(environment),
            system_properties if system_properties is not None else SystemProperties(),
            max_passes=max_passes,
        )
        self._cache: dict[str, str | None] = {}
        bind_trace_id(None)
        self._store = load_properties(
            self.config,
            resources=resources or ClasspathResourceProvider(self.config.resource_package),
            filesystem=filesystem or WorkingDirectoryProvider(cwd),
            parser=parser or PropertiesFileLoader(),
        )

    @property
    def store(self) -> PropertyStore:
        """The merged, read-only property store."""

        return self._store

    @property
    def properties_file_name(self) -> str:
        return self.config.properties_file_name

    @property
    def suffixed_file_name(self) -> str | None:
        return self.config.suffixed_file_name

    def get(
        self,
        name: str,
        default: str | None = None,
        *,
        decode_escaped_newlines: bool = True,
        evaluate: bool = True,
    ) -> str | None:
        """Return the resolved value of *name*.

        The raw value falls back to *default* when absent or empty. Placeholders
        are evaluated when *evaluate* is true; literal ``\\n`` sequences become
        newlines when *decode_escaped_newlines* is true. The outcome is cached
        under *name*; see the module docstring for the first-resolution-wins
        rule.

        Raises
        ------
        UnresolvedReferenceError
            When a placeholder cannot be resolved. Nothing is cached then.
        ExpansionLimitExceeded
            When placeholder substitution does not settle.
        """

        if name in self._cache:
            return self._cache[name]
        raw = self._store.lookup(name)
        if not raw:
            raw = default
        if raw is None:
            log_warning("property_missing", source="accessor", path=None, name=name)
            self._cache[name] = None
            return None
        value = self._resolver.resolve(name, raw) if evaluate else raw
        if decode_escaped_newlines:
            value = value.replace(ESCAPED_NEWLINE, "\n")
        self._cache[name] = value
        return value

    def get_long(self, name: str, default: str | None = None, *, evaluate: bool = True) -> int | None:
        """Return *name* as a signed 64-bit integer, falling back to *default*, then ``None``.

        Surrounding whitespace is ignored, so ``" 42 "`` parses as ``42``
        rather than falling back to *default*.
        """

        return self._get_number(name, default, evaluate, LONG_RANGE, "long")

    def get_integer(self, name: str, default: str | None = None, *, evaluate: bool = True) -> int | None:
        """Return *name* as a signed 32-bit integer, falling back to *default*, then ``None``.

        Surrounding whitespace is ignored as in :meth:`get_long`; values
        outside the 32-bit range count as unparseable.
        """

        return self._get_number(name, default, evaluate, INTEGER_RANGE, "integer")

    def get_boolean(self, name: str, default: str = "", *, evaluate: bool = True) -> bool:
        """Return ``True`` only when the resolved value equals ``"true"`` ignoring case."""

        value = self.get(name, default, evaluate=evaluate)
        return value is not None and value.lower() == "true"

    def raw(self, name: str) -> str | None:
        """Return the stored value of *name* without evaluation, defaulting or caching."""

        return self._store.lookup(name)

    def items(self) -> Iterator[tuple[str, str]]:
        """Yield the final raw key/value pairs."""

        return self._store.items()

    def sources(self) -> tuple[SourceRecord, ...]:
        """Return per-source records in load order (empty unless ``record_sources``)."""

        return self._store.sources()

    def describe_properties(self) -> list[str]:
        """Return one ``key: value`` line per final property."""

        return [f"{key}: {value}" for key, value in self._store.items()]

    def describe_sources(self) -> list[str]:
        """Return ``Source file N: <id>`` headers each followed by indented ``key=value`` lines."""

        lines: list[str] = []
        for index, record in enumerate(self._store.sources(), start=1):
            lines.append(f"Source file {index}: {record.identifier}")
            lines.extend(f"    {key}={value}" for key, value in record.properties.items())
        return lines

    def print_all_properties(self, emit: Callable[[str], Any] = print) -> None:
        """Feed :meth:`describe_properties` lines into *emit*."""

        for line in self.describe_properties():
            emit(line)

    def print_all_sources(self, emit: Callable[[str], Any] = print) -> None:
        """Feed :meth:`describe_sources` lines into *emit*."""

        for line in self.describe_sources():
            emit(line)

    def summary(self) -> dict[str, Any]:
        """Return the configuration plus loaded sources as plain data."""

        return {
            "config": self.config.describe(),
            "keys": len(self._store),
            "sources": {record.identifier: dict(record.properties) for record in self._store.sources()},
        }

    def __str__(self) -> str:
        summary = self.summary()
        return (
            f"properties_file_name={self.properties_file_name}, "
            f"suffixed_file_name={self.suffixed_file_name}, "
            f"config={summary['config']}, sources={summary['sources']}"
        )

    def __repr__(self) -> str:
        return f"ApplicationProperties(file_name={self.properties_file_name!r}, keys={len(self._store)})"

    def _get_number(
        self,
        name: str,
        default: str | None,
        evaluate: bool,
        bounds: tuple[int, int],
        kind: str,
    ) -> int | None:
        value = self.get(name, default, evaluate=evaluate)
        parsed = _parse_int(value, bounds)
        if parsed is not None:
            return parsed
        fallback = _parse_int(default, bounds)
        if fallback is not None:
            log_debug("property_number_fallback", source="accessor", path=None, name=name, kind=kind)
            return fallback
        if value is not None:
            log_warning("property_not_a_number", source="accessor", path=None, name=name, kind=kind, value=value)
        return None


def _parse_int(value: str | None, bounds: tuple[int, int]) -> int | None:
    """Parse a decimal integer within *bounds*, returning ``None`` on any failure.

    Examples
    --------
    >>> _parse_int("+42", INTEGER_RANGE), _parse_int("2147483648", INTEGER_RANGE), _parse_int("abc", LONG_RANGE)
    (42, None, None)
    """

    if value is None:
        return None
    text = value.strip()
    digits = text[1:] if text[:1] in "+-" else text
    if not digits.isascii() or not digits.isdigit():
        return None
    number = int(text)
    low, high = bounds
    return number if low <= number <= high else None


def read_properties(
    *,
    file_name: str | None = None,
    override_suffix: str | None = None,
    paths: tuple[str, ...] | list[str] = (),
    load_defaults_from_root: bool = True,
    record_sources: bool = False,
    resource_package: str | None = None,
    environment: Mapping[str, str] | None = None,
    system_properties: Mapping[str, str] | None = None,
    cwd: str | Path | None = None,
) -> ApplicationProperties:
    """Build a :class:`PropertiesConfig` from keywords and load it.

    Examples
    --------
    >>> read_properties(load_defaults_from_root=False)
    Traceback (most recent call last):
    ...
    lib_app_properties.domain.errors.ConfigurationError: Failed to find any properties files because load_defaults_from_root=False and no file paths were given to search through
    """

    config = PropertiesConfig(
        file_name=file_name,
        override_suffix=override_suffix,
        load_defaults_from_root=load_defaults_from_root,
        record_sources=record_sources,
        paths=tuple(paths),
        resource_package=resource_package,
    )
    return ApplicationProperties(
        config,
        environment=environment,
        system_properties=system_properties,
        cwd=cwd,
    )


__all__ = [
    "ApplicationProperties",
    "read_properties",
]
