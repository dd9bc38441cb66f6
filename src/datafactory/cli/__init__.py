"""DataFactory CLI - Command line interface for DataFactory."""

from __future__ import annotations

from datafactory.cli.commands import HealthCheck, cli, doctor, get_health_checks, list_definitions


def main() -> None:
    """Main entry point for the datafactory CLI."""
    cli()


__all__ = [
    "main",
    "cli",
    "doctor",
    "list_definitions",
    "HealthCheck",
    "get_health_checks",
]
