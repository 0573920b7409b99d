"""Merged property store.

Purpose
-------
Hold the final ``key -> value`` mapping produced by the layered loader plus,
optionally, one :class:`SourceRecord` per loaded source in load order. The
store is written exactly once (through :class:`PropertyStoreBuilder`) and is
read-only afterwards.

Contents
--------
* :class:`SourceRecord` – identifier plus the key/values one source contributed.
* :class:`PropertyStore` – narrow read API (``lookup``, ``items``, ``sources``).
* :class:`PropertyStoreBuilder` – write side used only while loading.

System Role
-----------
The store deliberately does not implement ``MutableMapping`` (nor
``Mapping``): callers get lookups and enumeration, never mutation, and never
dictionary-style ``get`` that could be confused with the evaluating accessor.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterator, Mapping


@dataclass(frozen=True, slots=True)
class SourceRecord:
    """The exact key/value subset parsed from one source.

    Attributes
    ----------
    identifier:
        Absolute file path or resource identifier of the source.
    properties:
        Read-only mapping in file order.
    """

    identifier: str
    properties: Mapping[str, str]

    def __post_init__(self) -> None:
        object.__setattr__(self, "properties", MappingProxyType(dict(self.properties)))


class PropertyStore:
    """Read-only view over merged properties and their per-source records.

    Examples
    --------
    >>> builder = PropertyStoreBuilder(record_sources=True)
    >>> builder.overlay("defaults", {"host": "localhost", "port": "80"})
    >>> builder.overlay("override", {"port": "8080"})
    >>> store = builder.build()
    >>> store.lookup("port")
    '8080'
    >>> store.lookup("missing") is None
    True
    >>> [record.identifier for record in store.sources()]
    ['defaults', 'override']
    """

    __slots__ = ("_data", "_sources")

    def __init__(self, data: Mapping[str, str], sources: tuple[SourceRecord, ...] = ()) -> None:
        self._data: Mapping[str, str] = MappingProxyType(dict(data))
        self._sources = tuple(sources)

    def lookup(self, key: str) -> str | None:
        """Return the raw stored value for *key* (no evaluation, no defaulting)."""

        return self._data.get(key)

    def items(self) -> Iterator[tuple[str, str]]:
        """Yield the final key/value pairs in first-insertion order."""

        return iter(self._data.items())

    def keys(self) -> Iterator[str]:
        """Yield every stored key."""

        return iter(self._data)

    def sources(self) -> tuple[SourceRecord, ...]:
        """Return source records in load order; empty unless recording was enabled."""

        return self._sources

    def as_dict(self) -> dict[str, str]:
        """Return a mutable copy of the merged properties."""

        return dict(self._data)

    def to_json(self, *, indent: int | None = None) -> str:
        """Serialise the merged properties to JSON.

        Examples
        --------
        >>> PropertyStore({"a": "1"}).to_json()
        '{"a":"1"}'
        """

        return json.dumps(self.as_dict(), indent=indent, separators=(",", ":"), ensure_ascii=False)

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"PropertyStore(keys={len(self._data)}, sources={len(self._sources)})"


class PropertyStoreBuilder:
    """Accumulate sources with strict last-writer-wins semantics, then freeze."""

    def __init__(self, *, record_sources: bool = False) -> None:
        self._record_sources = record_sources
        self._data: dict[str, str] = {}
        self._sources: list[SourceRecord] = []

    def overlay(self, identifier: str, properties: Mapping[str, str]) -> None:
        """Overwrite existing keys with *properties* and record the source when enabled."""

        self._data.update(properties)
        if self._record_sources:
            self._sources.append(SourceRecord(identifier, properties))

    def build(self) -> PropertyStore:
        """Return the immutable :class:`PropertyStore` for everything overlaid so far."""

        return PropertyStore(self._data, tuple(self._sources))
