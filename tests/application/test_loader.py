"""Layered loading: overlay order, the empty-sources guard, and source errors."""

from __future__ import annotations

from pathlib import Path

import pytest
from hypothesis import given
from hypothesis import strategies as st

from lib_app_properties.adapters.container.default import ContainerContext
from lib_app_properties.adapters.file_loaders.properties import PropertiesFileLoader
from lib_app_properties.adapters.filesystem.default import WorkingDirectoryProvider
from lib_app_properties.application.loader import NO_SOURCES_MESSAGE, load_properties, plan_sources
from lib_app_properties.domain.config import PropertiesConfig
from lib_app_properties.domain.errors import ConfigurationError, InvalidFormat, InvalidPathType, SourceNotFound
from lib_app_properties.domain.path_spec import PathType
from tests.support import ExplodingProvider, InMemoryProvider


def _load(config: PropertiesConfig, resources=None, filesystem=None):
    return load_properties(
        config,
        resources=resources or InMemoryProvider(),
        filesystem=filesystem or InMemoryProvider(),
        parser=PropertiesFileLoader(),
    )


def test_override_order_across_layers() -> None:
    """Root defaults, their suffixed sibling, then each path with its sibling."""

    resources = InMemoryProvider(
        {
            "application.properties": "x=1\nroot=yes\n",
            "application-unittest.properties": "x=2\n",
        }
    )
    filesystem = InMemoryProvider(
        {
            "conf/application.properties": "x=3\n",
            "conf/application-unittest.properties": "x=4\nconf=yes\n",
        }
    )
    config = PropertiesConfig(override_suffix="-unittest", paths=("conf",))
    store = _load(config, resources, filesystem)
    assert store.lookup("x") == "4"
    assert store.lookup("root") == "yes"
    assert store.lookup("conf") == "yes"
    assert resources.requests == ["application.properties", "application-unittest.properties"]
    assert filesystem.requests == ["conf/application.properties", "conf/application-unittest.properties"]


def test_later_path_wins_over_earlier_path() -> None:
    resources = InMemoryProvider({"application.properties": "x=root\n", "extra/application.properties": "x=cp\n"})
    filesystem = InMemoryProvider({"conf/application.properties": "x=file\n"})
    config = PropertiesConfig(paths=("conf", "classpath:extra"))
    assert _load(config, resources, filesystem).lookup("x") == "cp"


def test_empty_sources_guard_runs_before_any_io() -> None:
    config = PropertiesConfig(load_defaults_from_root=False)
    with pytest.raises(ConfigurationError) as excinfo:
        _load(config, ExplodingProvider(), ExplodingProvider())
    assert str(excinfo.value) == NO_SOURCES_MESSAGE


def test_invalid_prefix_rejected_before_any_io() -> None:
    config = PropertiesConfig(paths=("conf", "ftp:remote"))
    with pytest.raises(InvalidPathType):
        _load(config, ExplodingProvider(), ExplodingProvider())


def test_missing_source_names_type_file_and_location() -> None:
    resources = InMemoryProvider({"application.properties": "a=1\n"})
    config = PropertiesConfig(paths=("conf",))
    with pytest.raises(SourceNotFound) as excinfo:
        _load(config, resources, InMemoryProvider())
    error = excinfo.value
    assert (error.path_type, error.file_name, error.location) == ("file:", "application.properties", "conf")
    assert isinstance(error.__cause__, FileNotFoundError)


def test_missing_suffixed_sibling_is_fatal() -> None:
    resources = InMemoryProvider({"application.properties": "a=1\n"})
    config = PropertiesConfig(override_suffix="-prod")
    with pytest.raises(SourceNotFound, match="application-prod.properties"):
        _load(config, resources)


def test_undecodable_source_reported_as_source_error() -> None:
    class BinaryProvider(InMemoryProvider):
        def read(self, relative_path):
            loaded = super().read(relative_path)
            return type(loaded)(loaded.identifier, b"\xff\xfe=broken")

    resources = BinaryProvider({"application.properties": "ignored"})
    with pytest.raises(SourceNotFound) as excinfo:
        _load(PropertiesConfig(), resources)
    assert isinstance(excinfo.value.__cause__, InvalidFormat)


def test_record_sources_keeps_each_file_subset() -> None:
    resources = InMemoryProvider({"application.properties": "a=1\nb=1\n"})
    filesystem = InMemoryProvider({"conf/application.properties": "b=2\n"})
    config = PropertiesConfig(paths=("conf",), record_sources=True)
    records = _load(config, resources, filesystem).sources()
    assert [record.identifier for record in records] == [
        "memory:application.properties",
        "memory:conf/application.properties",
    ]
    assert dict(records[0].properties) == {"a": "1", "b": "1"}
    assert dict(records[1].properties) == {"b": "2"}


def test_sources_not_recorded_by_default() -> None:
    resources = InMemoryProvider({"application.properties": "a=1\n"})
    assert _load(PropertiesConfig(), resources).sources() == ()


def test_servlet_source_resolved_against_container_base(tmp_path: Path) -> None:
    base = tmp_path / "tomcat"
    target = base / "conf" / "apps" / "shop" / "shop"
    target.parent.mkdir(parents=True)
    target.write_text("served=yes\n", encoding="utf-8")
    container = ContainerContext("/shop", settings={"CATALINA_BASE": str(base)})
    config = PropertiesConfig(load_defaults_from_root=False, container=container)
    store = _load(config, ExplodingProvider(), WorkingDirectoryProvider(tmp_path / "elsewhere"))
    assert store.lookup("served") == "yes"


def test_servlet_source_without_base_directory_is_configuration_error(tmp_path: Path) -> None:
    container = ContainerContext("/shop", settings={})
    config = PropertiesConfig(load_defaults_from_root=False, container=container)
    with pytest.raises(ConfigurationError, match="CATALINA_COMMON or CATALINA_BASE"):
        _load(config, ExplodingProvider(), WorkingDirectoryProvider(tmp_path))


def test_servlet_missing_file_uses_servlet_prefix(tmp_path: Path) -> None:
    container = ContainerContext("/shop", settings={"CATALINA_BASE": str(tmp_path)})
    config = PropertiesConfig(load_defaults_from_root=False, container=container)
    with pytest.raises(SourceNotFound) as excinfo:
        _load(config, ExplodingProvider(), WorkingDirectoryProvider(tmp_path))
    assert excinfo.value.path_type == "servlet:"
    assert excinfo.value.location == "conf/apps/shop"


def test_plan_without_root_defaults() -> None:
    config = PropertiesConfig(load_defaults_from_root=False, paths=("classpath:conf",))
    assert list(plan_sources(config)) == [(PathType.CLASSPATH, "conf", "application.properties")]


@given(st.lists(st.sampled_from(["a", "b", "c"]), min_size=1, max_size=4, unique=True))
def test_each_path_contributes_base_then_suffixed(locations: list[str]) -> None:
    config = PropertiesConfig(load_defaults_from_root=False, override_suffix="-x", paths=tuple(locations))
    plan = [(location, name) for _, location, name in plan_sources(config)]
    expected = [
        (location, name) for location in locations for name in ("application.properties", "application-x.properties")
    ]
    assert plan == expected
