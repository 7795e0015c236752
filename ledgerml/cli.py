"""
ledgerml CLI - deploy trained classifiers to a ledger.
"""

import json
import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from .config import Config, get_config, set_config
from .deployment.cli import register_commands

console = Console()

# Settable with `ledgerml config set`
_SETTABLE = {
    "account": str,
    "artifacts_dir": Path,
    "to_float": float,
    "gateway.host": str,
    "gateway.port": int,
    "gateway.scheme": str,
    "gateway.timeout": float,
    "gateway.poll_interval": float,
    "gateway.receipt_timeout": float,
}


def setup_logging(verbose: bool = False):
    """Set up logging configuration."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[logging.StreamHandler()]
    )


@click.group()
@click.option('-v', '--verbose', is_flag=True, help='Enable verbose output')
@click.option('--data-dir', type=click.Path(file_okay=False), help='Data directory')
@click.pass_context
def main(ctx, verbose, data_dir):
    """ledgerml - trained classifiers on a ledger"""
    ctx.ensure_object(dict)
    ctx.obj['verbose'] = verbose
    setup_logging(verbose)
    if data_dir:
        set_config(Config.load(Path(data_dir)))


@main.group()
def config():
    """Configuration commands."""
    pass


@config.command('show')
@click.option('--json', 'as_json', is_flag=True, help='Print raw JSON')
def config_show(as_json: bool):
    """Show the current configuration."""

    cfg = get_config()

    if as_json:
        click.echo(json.dumps(cfg.to_dict(), indent=2))
        return

    table = Table(show_header=False, box=None)
    table.add_column("Key", style="dim")
    table.add_column("Value")

    table.add_row("Account", cfg.account or "[dim]not set[/dim]")
    table.add_row("Gateway", cfg.gateway.base_url)
    table.add_row("Contracts", str(cfg.contracts_dir))
    table.add_row("Scale factor", f"{cfg.to_float:g}")
    table.add_row("Data Directory", str(cfg.data_dir))

    console.print(table)


@config.command('set')
@click.argument('key', type=click.Choice(sorted(_SETTABLE)))
@click.argument('value')
def config_set(key: str, value: str):
    """Set a configuration value."""

    cfg = get_config()
    try:
        parsed = _SETTABLE[key](value)
    except ValueError:
        console.print(f"[red]Invalid value for {key}: {value}[/red]")
        sys.exit(1)

    target = cfg
    name = key
    if key.startswith("gateway."):
        target = cfg.gateway
        name = key.split(".", 1)[1]
    setattr(target, name, parsed)
    cfg.save()

    console.print(f"[green]✓ {key} = {parsed}[/green]")


register_commands(main)


if __name__ == "__main__":
    main()
