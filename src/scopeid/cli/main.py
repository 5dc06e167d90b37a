"""scopeid CLI entry point."""

from __future__ import annotations

import functools
from pathlib import Path
from typing import TYPE_CHECKING

import click

from scopeid.core.errors import UniqueIdGenerationError

if TYPE_CHECKING:
    from collections.abc import Callable

    from scopeid.core.generator import UniqueIdGenerator

    GeneratorFactory = Callable[[], UniqueIdGenerator]


@click.group()
@click.version_option(package_name="scopeid")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=Path(".scopeid/config.yaml"),
    help="YAML config file.",
)
@click.option(
    "--data-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory holding the scope counters (overrides config).",
)
@click.option("--batch-size", type=int, default=None, help="Ids reserved per store write.")
@click.option("--json-logs", is_flag=True, default=False, help="Output logs as JSON.")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    help="Log level.",
)
@click.option(
    "--metrics-port",
    type=int,
    default=0,
    help="Prometheus metrics port (0=disabled).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    config_path: Path,
    data_dir: Path | None,
    batch_size: int | None,
    json_logs: bool,
    log_level: str,
    metrics_port: int,
) -> None:
    """Batched unique ids per scope from the command line."""
    # Built on first use so --help never touches logging, config or the store.
    ctx.obj = functools.partial(
        _build_generator, config_path, data_dir, batch_size, json_logs, log_level, metrics_port
    )


def _build_generator(
    config_path: Path,
    data_dir: Path | None,
    batch_size: int | None,
    json_logs: bool,
    log_level: str,
    metrics_port: int,
) -> UniqueIdGenerator:
    """Configure logging and metrics, load config, and create the generator."""
    from scopeid.core.config import build_store, load_config, make_generator_config
    from scopeid.core.generator import UniqueIdGenerator
    from scopeid.core.logging import configure_logging

    configure_logging(json_output=json_logs, level=log_level)

    if metrics_port > 0:
        from scopeid.metrics.server import start_metrics_server

        start_metrics_server(metrics_port)

    raw = load_config(config_path)
    if batch_size is not None:
        raw["batch_size"] = batch_size
    if data_dir is not None:
        raw["store"] = {**(raw.get("store") or {}), "kind": "file", "data_dir": str(data_dir)}

    try:
        config = make_generator_config(raw)
    except UniqueIdGenerationError as exc:
        raise click.UsageError(str(exc)) from exc

    return UniqueIdGenerator.from_config(build_store(config), config)


@cli.command("next")
@click.argument("scope")
@click.option("--count", "-n", type=click.IntRange(min=1), default=1, help="How many ids to issue.")
@click.pass_obj
def next_(make_generator: GeneratorFactory, scope: str, count: int) -> None:
    """Issue the next id(s) for SCOPE."""
    generator = make_generator()
    for _ in range(count):
        click.echo(_call(generator.next_id, scope))


@cli.command()
@click.argument("scope")
@click.pass_obj
def last(make_generator: GeneratorFactory, scope: str) -> None:
    """Show the last id issued for SCOPE."""
    click.echo(_call(make_generator().last_id, scope))


@cli.command()
@click.argument("scope")
@click.argument("value", type=int)
@click.pass_obj
def seed(make_generator: GeneratorFactory, scope: str, value: int) -> None:
    """Rebase SCOPE so its next id is VALUE."""
    _call(make_generator().set_seed, scope, value)
    click.echo(f"Seeded {scope} at {value}.")


def _call(func, *args):
    """Run a generator operation, turning its errors into a clean exit."""
    try:
        return func(*args)
    except (UniqueIdGenerationError, ValueError) as exc:
        click.echo(f"Error: {exc}", err=True)
        raise SystemExit(1) from None
