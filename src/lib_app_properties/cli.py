"""CLI adapter for ``lib_app_properties`` built on ``lib_cli_exit_tools``.

Purpose
-------
Let operators inspect how layered properties resolve without writing Python:
which sources were loaded, which value won, and what a placeholder evaluates
to on this machine.

Contents
--------
* :data:`CLICK_CONTEXT_SETTINGS` – shared Click settings ensuring ``-h`` works.
* :func:`cli` – root command wiring traceback handling into ``lib_cli_exit_tools``.
* :func:`cli_info` – prints distribution metadata.
* :func:`cli_read` – loads properties and prints final values (and sources).
* :func:`cli_get` – resolves one property with typed conversion.
* :func:`cli_parse_path` – shows how a raw path string is interpreted.
* :func:`cli_generate_examples` – scaffolds an example properties tree.
* :func:`main` – entry point used by ``console_scripts`` registration.

System Role
-----------
Outermost layer: it builds a :class:`PropertiesConfig`, invokes the
composition root, and never reaches into adapter internals beyond choosing
providers.
"""

from __future__ import annotations

import json
import sys
from importlib import metadata
from pathlib import Path
from typing import Final, Optional, Sequence

import lib_cli_exit_tools
import rich_click as click

from .adapters.env.default import SystemProperties, parse_assignments
from .core import ApplicationProperties
from .domain.config import PropertiesConfig
from .domain.path_spec import parse_path_spec, split_path
from .examples import generate_examples as _generate_examples

CLICK_CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}
_TRACEBACK_SUMMARY_LIMIT: Final[int] = 500
_TRACEBACK_VERBOSE_LIMIT: Final[int] = 10_000

VALUE_TYPES: Final[tuple[str, ...]] = ("string", "int", "long", "bool")


def _resolve_version() -> str:
    """Return the installed package version, ``"0.0.0"`` when metadata is unavailable."""

    try:
        return metadata.version("lib_app_properties")
    except metadata.PackageNotFoundError:
        return "0.0.0"


def _source_options(func):
    """Attach the options shared by commands that load properties."""

    options = [
        click.option("--file-name", default=None, help="Base properties file name (default application.properties)"),
        click.option("--suffix", default=None, help="Override suffix, e.g. -prod loads application-prod.properties"),
        click.option(
            "--defaults/--no-defaults",
            default=True,
            show_default=True,
            help="Load the base file from the classpath root first",
        ),
        click.option(
            "--resource-package",
            default=None,
            help="Package anchoring the classpath root (default: search sys.path)",
        ),
        click.option("--path", "paths", multiple=True, help="Extra path, optionally prefixed classpath:/file:/servlet:"),
        click.option("-D", "defines", multiple=True, help="System property key=value (repeatable)"),
        click.option(
            "--cwd",
            type=click.Path(path_type=Path, exists=True, file_okay=False, dir_okay=True),
            default=None,
            help="Working directory for relative file: paths",
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func


@click.group(
    help="Layered application properties reader",
    context_settings=CLICK_CONTEXT_SETTINGS,
    invoke_without_command=False,
)
@click.version_option(
    version=_resolve_version(),
    prog_name="lib_app_properties",
    message="lib_app_properties version %(version)s",
)
@click.option(
    "--traceback/--no-traceback",
    is_flag=True,
    default=False,
    help="Show full Python traceback on errors",
)
@click.pass_context
def cli(ctx: click.Context, traceback: bool) -> None:
    """Root command storing the traceback preference for all subcommands.

    Side Effects
        Mutates ``lib_cli_exit_tools.config.traceback`` and
        ``lib_cli_exit_tools.config.traceback_force_color``.
    """

    ctx.ensure_object(dict)
    ctx.obj["traceback"] = traceback
    lib_cli_exit_tools.config.traceback = traceback
    lib_cli_exit_tools.config.traceback_force_color = traceback


@cli.command("info", context_settings=CLICK_CONTEXT_SETTINGS)
def cli_info() -> None:
    """Print basic distribution metadata so users can confirm installation."""

    try:
        meta = metadata.metadata("lib_app_properties")
    except metadata.PackageNotFoundError:
        click.echo("lib_app_properties (metadata unavailable)")
        return
    click.echo(f"Info for {meta.get('Name', 'lib_app_properties')}:")
    click.echo(f"  Version         : {meta.get('Version', _resolve_version())}")
    click.echo(f"  Requires-Python : {meta.get('Requires-Python', '>=3.10')}")
    summary = meta.get("Summary")
    if summary:
        click.echo(f"  Summary         : {summary}")
    for entry in meta.get_all("Project-URL") or []:
        click.echo(f"  {entry}")


@cli.command("read", context_settings=CLICK_CONTEXT_SETTINGS)
@_source_options
@click.option("--sources/--no-sources", default=False, help="Also list what each source file contributed")
@click.option("--json", "as_json", is_flag=True, default=False, help="Print the final values as JSON")
@click.option("--indent", type=int, default=None, help="Pretty-print JSON output with the provided indent size")
def cli_read(
    file_name: Optional[str],
    suffix: Optional[str],
    defaults: bool,
    resource_package: Optional[str],
    paths: Sequence[str],
    defines: Sequence[str],
    cwd: Optional[Path],
    sources: bool,
    as_json: bool,
    indent: Optional[int],
) -> None:
    """Load layered properties and print the final raw values.

    With ``--sources`` the per-file listing is printed first (text mode) or
    included under ``"sources"`` (JSON mode).
    """

    props = _load(file_name, suffix, defaults, resource_package, paths, defines, cwd, record_sources=sources)
    if as_json:
        if sources:
            payload = {
                "properties": props.store.as_dict(),
                "sources": [{"source": r.identifier, "properties": dict(r.properties)} for r in props.sources()],
            }
            click.echo(json.dumps(payload, indent=indent, separators=(",", ":"), ensure_ascii=False))
        else:
            click.echo(props.store.to_json(indent=indent))
        return
    if sources:
        click.echo("Properties per file")
        props.print_all_sources(click.echo)
        click.echo("Final property values")
    props.print_all_properties(click.echo)


@cli.command("get", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument("name")
@_source_options
@click.option("--default", "default", default=None, help="Fallback value when the property is missing or empty")
@click.option(
    "--type",
    "value_type",
    type=click.Choice(VALUE_TYPES, case_sensitive=False),
    default="string",
    show_default=True,
    help="Conversion applied to the resolved value",
)
@click.option("--raw", is_flag=True, default=False, help="Skip ${env:...}/${prop:...} evaluation")
def cli_get(
    name: str,
    file_name: Optional[str],
    suffix: Optional[str],
    defaults: bool,
    resource_package: Optional[str],
    paths: Sequence[str],
    defines: Sequence[str],
    cwd: Optional[Path],
    default: Optional[str],
    value_type: str,
    raw: bool,
) -> None:
    """Resolve property NAME and print it; missing values exit with code 1."""

    props = _load(file_name, suffix, defaults, resource_package, paths, defines, cwd)
    evaluate = not raw
    kind = value_type.lower()
    value: object
    if kind == "int":
        value = props.get_integer(name, default, evaluate=evaluate)
    elif kind == "long":
        value = props.get_long(name, default, evaluate=evaluate)
    elif kind == "bool":
        value = props.get_boolean(name, default or "", evaluate=evaluate)
    else:
        value = props.get(name, default, evaluate=evaluate)
    if value is None:
        click.echo(f"{name} is not set", err=True)
        raise SystemExit(1)
    if isinstance(value, bool):
        click.echo("true" if value else "false")
        return
    click.echo(str(value))


@cli.command("parse-path", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument("raw")
@click.option("--servlet", is_flag=True, default=False, help="Pretend a hosting container is configured")
def cli_parse_path(raw: str, servlet: bool) -> None:
    """Show the source type and location a raw path string resolves to.

    Examples
    --------
    >>> from click.testing import CliRunner
    >>> result = CliRunner().invoke(cli, ["parse-path", "classpath:conf"])
    >>> json.loads(result.output)["type"]
    'classpath:'
    """

    prefix, _ = split_path(raw)
    spec = parse_path_spec(raw, container_configured=servlet)
    click.echo(json.dumps({"prefix": prefix, "type": spec.path_type.value, "location": spec.location}))


@cli.command("generate-examples", context_settings=CLICK_CONTEXT_SETTINGS)
@click.option(
    "--destination",
    type=click.Path(path_type=Path, file_okay=False, dir_okay=True, resolve_path=True),
    required=True,
    help="Directory that will receive the example tree",
)
@click.option("--file-name", default="application.properties", show_default=True, help="Base properties file name")
@click.option("--suffix", default="-local", show_default=True, help="Override suffix used by the examples")
@click.option("--context", default=None, help="Also write a container tree for this context name")
@click.option(
    "--force/--no-force",
    default=False,
    help="Overwrite existing example files if set",
    show_default=True,
)
def cli_generate_examples(
    destination: Path,
    file_name: str,
    suffix: str,
    context: Optional[str],
    force: bool,
) -> None:
    """Generate example properties files under *destination*."""

    created = _generate_examples(destination, file_name=file_name, suffix=suffix, context=context, force=force)
    click.echo(json.dumps([str(path) for path in created], indent=2))


def _load(
    file_name: Optional[str],
    suffix: Optional[str],
    defaults: bool,
    resource_package: Optional[str],
    paths: Sequence[str],
    defines: Sequence[str],
    cwd: Optional[Path],
    *,
    record_sources: bool = False,
) -> ApplicationProperties:
    """Build the config from CLI options and load it."""

    try:
        overrides = parse_assignments(defines)
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="-D") from exc
    config = PropertiesConfig(
        file_name=file_name,
        override_suffix=suffix,
        load_defaults_from_root=defaults,
        record_sources=record_sources,
        paths=tuple(paths),
        resource_package=resource_package,
    )
    return ApplicationProperties(config, system_properties=SystemProperties().with_overrides(overrides), cwd=cwd)


def main(argv: Optional[Sequence[str]] = None, *, restore_traceback: bool = True) -> int:
    """Execute the CLI with shared exit handling and return the exit code."""

    previous_traceback = getattr(lib_cli_exit_tools.config, "traceback", False)
    previous_force_color = getattr(lib_cli_exit_tools.config, "traceback_force_color", False)
    try:
        try:
            return lib_cli_exit_tools.run_cli(
                cli,
                argv=list(argv) if argv is not None else None,
                prog_name="lib_app_properties",
            )
        except BaseException as exc:  # noqa: BLE001 - funnel through shared printers
            lib_cli_exit_tools.print_exception_message(
                trace_back=lib_cli_exit_tools.config.traceback,
                length_limit=(
                    _TRACEBACK_VERBOSE_LIMIT if lib_cli_exit_tools.config.traceback else _TRACEBACK_SUMMARY_LIMIT
                ),
            )
            return lib_cli_exit_tools.get_system_exit_code(exc)
    finally:
        if restore_traceback:
            lib_cli_exit_tools.config.traceback = previous_traceback
            lib_cli_exit_tools.config.traceback_force_color = previous_force_color


if __name__ == "__main__":  # pragma: no cover - exercised via console entry point
    raise SystemExit(main(sys.argv[1:]))
