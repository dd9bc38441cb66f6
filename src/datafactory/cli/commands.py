"""CLI commands for DataFactory."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from pathlib import Path
from typing import Any

import click
from click.core import ParameterSource
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from datafactory.config import DEFAULT_CONFIG_FILE, DataFactoryConfig, load_config
from datafactory.engine import FactoryEngine, find_factory_files
from datafactory.errors import DataFactoryError, ModelNotFoundError
from datafactory.stores import resolve_store

console = Console()


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity level."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


class HealthCheck:
    """A single check with a name and a function returning (success, message)."""

    def __init__(self, name: str, check_fn: Callable[[], tuple[bool, str]]) -> None:
        self.name = name
        self.check_fn = check_fn

    def run(self) -> tuple[bool, str]:
        """Run the check; exceptions count as failures."""
        try:
            return self.check_fn()
        except DataFactoryError as e:
            return False, e.message
        except Exception as e:
            return False, f"{type(e).__name__}: {e}"


def get_health_checks(config: DataFactoryConfig, root_dir: Path) -> list[HealthCheck]:
    """Build the checks for one configuration."""
    checks: list[HealthCheck] = []

    for factory_path in config.factories:
        checks.append(
            HealthCheck(f"factories: {factory_path}", _check_factory_path(root_dir, factory_path))
        )

    if config.custom_store:
        checks.append(HealthCheck(f"customStore: {config.custom_store}", _check_custom_store(config)))

    checks.append(HealthCheck("factory files load", lambda: _check_load(config, root_dir)))
    return checks


def _check_factory_path(root_dir: Path, factory_path: str) -> Callable[[], tuple[bool, str]]:
    def check() -> tuple[bool, str]:
        realpath = (root_dir / factory_path).resolve()
        if not realpath.exists():
            return False, f"{realpath} does not exist"
        return True, f"{len(find_factory_files(realpath))} file(s) in {realpath}"

    return check


def _check_custom_store(config: DataFactoryConfig) -> Callable[[], tuple[bool, str]]:
    def check() -> tuple[bool, str]:
        store = resolve_store(config.custom_store)
        if callable(getattr(store, "create", None)):
            store = store.create()
        return True, type(store).__name__

    return check


def _check_load(config: DataFactoryConfig, root_dir: Path) -> tuple[bool, str]:
    engine = _load_engine(config, root_dir)
    return True, f"{len(engine.definitions())} definition(s)"


def _load_engine(config: DataFactoryConfig, root_dir: Path) -> FactoryEngine:
    """Load factory files into an engine detached from any database."""
    engine = FactoryEngine()
    for factory_path in config.factories:
        engine.load_factories((root_dir / factory_path).resolve())
    return engine


def _describe_model(engine: FactoryEngine, name: str) -> str:
    try:
        model = engine.get_definition(name).model
    except ModelNotFoundError:
        return "unresolved"
    return f"{model.__module__}.{model.__qualname__}"


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(dir_okay=False),
    default=DEFAULT_CONFIG_FILE,
    show_default=True,
    help="Path to config file",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool, config_path: str) -> None:
    """DataFactory - test data factories for pytest."""
    ctx.ensure_object(dict)
    setup_logging(verbose)

    path = Path(config_path)
    try:
        config = load_config(
            path,
            required=ctx.get_parameter_source("config_path") is not ParameterSource.DEFAULT,
        )
    except DataFactoryError as e:
        console.print(f"[red]{escape(e.format_verbose())}[/red]")
        raise SystemExit(1) from e

    ctx.obj["config"] = config
    ctx.obj["root_dir"] = path.resolve().parent
    ctx.obj["verbose"] = verbose


@cli.command()
@click.option("--json", "output_json", is_flag=True, help="Output results as JSON")
@click.pass_context
def doctor(ctx: click.Context, output_json: bool) -> None:
    """Check that the configuration can start a test session.

    Exit codes:
        0 - All checks passed
        1 - One or more checks failed
    """
    checks = get_health_checks(ctx.obj["config"], ctx.obj["root_dir"])
    results = []
    for check in checks:
        success, message = check.run()
        results.append({"name": check.name, "success": success, "message": message})

    failed = sum(1 for r in results if not r["success"])

    if output_json:
        click.echo(json.dumps({"checks": results, "ready": failed == 0}, indent=2))
        raise SystemExit(0 if failed == 0 else 1)

    table = Table(title="DataFactory Health Check", show_header=True, header_style="bold")
    table.add_column("Status", justify="center", width=6)
    table.add_column("Check")
    table.add_column("Details")
    for r in results:
        if r["success"]:
            table.add_row("[green]OK[/green]", escape(r["name"]), escape(r["message"]))
        else:
            table.add_row("[red]FAIL[/red]", escape(r["name"]), f"[red]{escape(r['message'])}[/red]")
    console.print(table)

    if failed:
        console.print(f"[red]{failed} check(s) failed[/red]")
        raise SystemExit(1)
    console.print("[green]All checks passed - Ready to use![/green]")


@cli.command("list")
@click.option("--json", "output_json", is_flag=True, help="Output results as JSON")
@click.pass_context
def list_definitions(ctx: click.Context, output_json: bool) -> None:
    """List the blueprints defined by the configured factory files."""
    try:
        engine = _load_engine(ctx.obj["config"], ctx.obj["root_dir"])
    except DataFactoryError as e:
        console.print(f"[red]{escape(e.format_verbose())}[/red]")
        raise SystemExit(1) from e

    rows: list[dict[str, Any]] = [
        {
            "name": name,
            "model": _describe_model(engine, name),
            "fields": list(engine.get_definition(name).definitions),
        }
        for name in engine.definitions()
    ]

    if output_json:
        click.echo(json.dumps(rows, indent=2))
        return

    if not rows:
        console.print("[yellow]No definitions found[/yellow]")
        return

    table = Table(title="Definitions", show_header=True, header_style="bold")
    table.add_column("Name", style="cyan")
    table.add_column("Model")
    table.add_column("Fields")
    for row in rows:
        table.add_row(row["name"], row["model"], ", ".join(row["fields"]))
    console.print(table)
