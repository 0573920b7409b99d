"""End-to-end behaviour of :class:`ApplicationProperties` against real files."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from lib_app_properties import (
    ApplicationProperties,
    ConfigurationError,
    PropertiesConfig,
    SourceNotFound,
    UnresolvedReferenceError,
    read_properties,
)
from tests.support import ExplodingProvider, PropertiesSandbox, create_properties_sandbox


@pytest.fixture()
def sandbox(tmp_path: Path) -> PropertiesSandbox:
    return create_properties_sandbox(
        tmp_path,
        environment={"VAR": "x", "HOST": "db.internal"},
        system_properties={"p": "y", "user.home": "/home/ada"},
    )


def _single_file(sandbox: PropertiesSandbox, body: str) -> ApplicationProperties:
    sandbox.write("classpath", "application.properties", content=body)
    return sandbox.load()


def test_override_order_end_to_end(sandbox: PropertiesSandbox) -> None:
    sandbox.write("classpath", "application.properties", content="x=1\n")
    sandbox.write("classpath", "application-unittest.properties", content="x=2\n")
    sandbox.write("work", "conf/application.properties", content="x=3\n")
    sandbox.write("work", "conf/application-unittest.properties", content="x=4\n")
    props = sandbox.load(PropertiesConfig(override_suffix="-unittest"), "conf")
    assert props.get("x") == "4"
    assert props.suffixed_file_name == "application-unittest.properties"


def test_extra_paths_do_not_mutate_given_config(sandbox: PropertiesSandbox) -> None:
    sandbox.write("classpath", "application.properties", content="a=1\n")
    sandbox.write("work", "conf/application.properties", content="a=2\n")
    config = PropertiesConfig()
    props = sandbox.load(config, "conf")
    assert props.get("a") == "2"
    assert config.paths == ()
    assert props.config.paths == ("conf",)


def test_cache_is_first_resolution_wins(sandbox: PropertiesSandbox) -> None:
    props = _single_file(sandbox, "other=1\n")
    assert props.get_integer("n", "5") == 5
    assert props.get_integer("n", "9") == 5
    assert props.get("n", "9") == "5"


def test_cache_ignores_later_flags(sandbox: PropertiesSandbox) -> None:
    props = _single_file(sandbox, "v=${env:VAR}\n")
    assert props.get("v", evaluate=False) == "${env:VAR}"
    assert props.get("v") == "${env:VAR}"


def test_missing_key_is_cached_as_none(sandbox: PropertiesSandbox, caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.WARNING, logger="lib_app_properties")
    props = _single_file(sandbox, "a=1\n")
    assert props.get("absent") is None
    assert props.get("absent", "late default") is None
    assert [r.getMessage() for r in caplog.records].count("property_missing") == 1


def test_empty_value_uses_default(sandbox: PropertiesSandbox) -> None:
    props = _single_file(sandbox, "blank=\n")
    assert props.get("blank", "fallback") == "fallback"


def test_env_and_prop_substitution(sandbox: PropertiesSandbox) -> None:
    props = _single_file(sandbox, "v=a${env:VAR}b${prop:p}c\nurl=jdbc://${env:HOST}\n")
    assert props.get("v") == "axbyc"
    assert props.get("url") == "jdbc://db.internal"
    assert props.raw("v") == "a${env:VAR}b${prop:p}c"


def test_placeholders_in_defaults_are_evaluated(sandbox: PropertiesSandbox) -> None:
    props = _single_file(sandbox, "a=1\n")
    assert props.get("home", "${prop:user.home}/app") == "/home/ada/app"


def test_unresolved_reference_is_not_cached(sandbox: PropertiesSandbox) -> None:
    props = _single_file(sandbox, "r=${env:DOES_NOT_EXIST}\n")
    for _ in range(2):
        with pytest.raises(UnresolvedReferenceError) as excinfo:
            props.get("r")
        assert "r" in str(excinfo.value)
        assert "${env:DOES_NOT_EXIST}" in str(excinfo.value)


def test_escaped_newline_decoding(sandbox: PropertiesSandbox) -> None:
    props = _single_file(sandbox, "m=one\\\\ntwo\nkeep=one\\\\ntwo\n")
    assert props.get("m") == "one\ntwo"
    assert props.get("keep", decode_escaped_newlines=False) == "one\\ntwo"


def test_numeric_fallback(sandbox: PropertiesSandbox) -> None:
    props = _single_file(sandbox, "n=abc\nbig=2147483648\nspaced= 42 \n")
    assert props.get_integer("n", "7") == 7
    assert props.get_long("missing") is None
    assert props.get_integer("big", "1") == 1
    assert props.get_long("big") == 2147483648
    assert props.get_integer("spaced") == 42


def test_numeric_without_usable_default(sandbox: PropertiesSandbox, caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.WARNING, logger="lib_app_properties")
    props = _single_file(sandbox, "n=abc\n")
    assert props.get_integer("n", "also-bad") is None
    assert any(r.getMessage() == "property_not_a_number" for r in caplog.records)


def test_boolean_semantics(sandbox: PropertiesSandbox) -> None:
    props = _single_file(sandbox, "t=TRUE\nf=yes\n")
    assert props.get_boolean("t") is True
    assert props.get_boolean("f") is False
    assert props.get_boolean("missing") is False
    assert props.get_boolean("missing-with-default", "True") is True


def test_sources_and_describe_lines(sandbox: PropertiesSandbox) -> None:
    base = sandbox.write("classpath", "application.properties", content="a=1\nb=1\n")
    override = sandbox.write("work", "conf/application.properties", content="b=2\n")
    props = sandbox.load(PropertiesConfig(record_sources=True), "conf")
    assert [record.identifier for record in props.sources()] == [str(base.resolve()), str(override.absolute())]
    assert props.describe_properties() == ["a: 1", "b: 2"]
    assert props.describe_sources() == [
        f"Source file 1: {base.resolve()}",
        "    a=1",
        "    b=1",
        f"Source file 2: {override.absolute()}",
        "    b=2",
    ]
    collected: list[str] = []
    props.print_all_properties(collected.append)
    assert collected == ["a: 1", "b: 2"]
    assert "sources=" in str(props)
    assert props.summary()["keys"] == 2


def test_empty_sources_guard(sandbox: PropertiesSandbox) -> None:
    with pytest.raises(ConfigurationError, match="load_defaults_from_root=False"):
        sandbox.load(
            PropertiesConfig(load_defaults_from_root=False),
            resources=ExplodingProvider(),
            filesystem=ExplodingProvider(),
        )


def test_missing_root_defaults_abort_construction(sandbox: PropertiesSandbox) -> None:
    with pytest.raises(SourceNotFound, match="classpath:"):
        sandbox.load()


def test_container_deployment(sandbox: PropertiesSandbox) -> None:
    sandbox.write("classpath", "shop", content="origin=bundle\nname=shop\n")
    sandbox.write("catalina", "conf/apps/shop/shop", content="origin=container\n")
    props = sandbox.load(PropertiesConfig(container=sandbox.container("/shop")))
    assert props.get("origin") == "container"
    assert props.get("name") == "shop"


def test_read_properties_shortcut(tmp_path: Path) -> None:
    (tmp_path / "conf").mkdir()
    (tmp_path / "conf" / "application.properties").write_text("user=${env:WHO}\n", encoding="utf-8")
    props = read_properties(
        paths=["conf"],
        load_defaults_from_root=False,
        environment={"WHO": "ada"},
        cwd=tmp_path,
    )
    assert props.get("user") == "ada"
