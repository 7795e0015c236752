"""
CLI commands for model deployment.

Integrates with the ledgerml CLI to plan and run deployments.
"""

import asyncio
import json
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

import click
from rich.console import Console
from rich.table import Table

from ..config import get_config
from ..errors import DeploymentError
from ..ledger.gateway import GatewayLedger
from ..models import load_model
from .artifacts import ArtifactRegistry
from .deployer import ModelDeployer, plan_deployment
from .hooks import DeployOptions, DeploymentHooks, Severity

console = Console()

_STYLES = {
    Severity.INFO: "cyan",
    Severity.SUCCESS: "bold green",
    Severity.WARNING: "yellow",
    Severity.ERROR: "bold red",
}


def run_async(coro):
    """Run an async function."""
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(coro)
    else:
        return loop.run_until_complete(coro)


class DeploymentHistory:
    """Addresses and transaction hashes of past deployments, as JSON."""

    def __init__(self, path: Path):
        self.path = path

    def load(self) -> List[Dict[str, Any]]:
        if not self.path.exists():
            return []
        with open(self.path, 'r') as f:
            return json.load(f)

    def append(self, entry: Dict[str, Any]) -> None:
        entries = self.load()
        entries.append(entry)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, 'w') as f:
            json.dump(entries, f, indent=2)


class ConsoleHooks(DeploymentHooks):
    """Prints notifications with rich and records results in the history."""

    def __init__(self, history: DeploymentHistory, model_file: str, account: str):
        self.history = history
        self.entry: Dict[str, Any] = {
            "model_file": model_file,
            "account": account,
            "started_at": datetime.now().isoformat(),
        }
        self._pending: Dict[int, str] = {}
        self._counter = 0

    def notify(self, message: str, severity: Severity = Severity.INFO) -> Any:
        self._counter += 1
        style = _STYLES[severity]
        console.print(f"[{style}]{message}[/{style}]")
        if severity is Severity.INFO:
            self._pending[self._counter] = message
        return self._counter

    def dismiss_notification(self, key: Any) -> None:
        self._pending.pop(key, None)

    def save_transaction_hash(self, kind: str, transaction_hash: str) -> None:
        self.entry[f"{kind}_transaction_hash"] = transaction_hash

    def save_address(self, kind: str, address: str) -> None:
        self.entry[f"{kind}_address"] = address
        self.history.append(dict(self.entry))


@click.group()
def model():
    """Model deployment commands."""
    pass


@model.command('plan')
@click.argument('model_file', type=click.Path(exists=True, dir_okay=False))
@click.option('--verbose', '-v', is_flag=True, help='Show every write, not just a summary')
def plan_model(model_file: str, verbose: bool):
    """Show the writes a deployment would issue, without sending anything."""

    config = get_config()

    try:
        loaded = load_model(Path(model_file))
        plan = plan_deployment(loaded, config.to_float)
    except DeploymentError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)

    console.print(f"\n[bold]Deployment plan for {loaded.type}[/bold]\n")

    table = Table()
    table.add_column("#", justify="right", style="dim")
    table.add_column("Phase")
    table.add_column("Method", style="cyan")
    table.add_column("Class")
    table.add_column("Chunk")

    phases = (
        [("genesis", plan.genesis)]
        + [("register", w) for w in plan.registrations]
        + [("extend", w) for w in plan.extensions]
    )
    rows = phases if verbose else phases[:20]
    for i, (phase, write) in enumerate(rows, start=1):
        table.add_row(str(i), phase, write.method, write.label or "-", str(write.chunk or "-"))

    console.print(table)
    if not verbose and len(phases) > 20:
        console.print(f"[dim]... {len(phases) - 20} more writes (use --verbose)[/dim]")
    console.print(
        f"\n[dim]Total: {len(plan)} writes "
        f"(1 genesis, {len(plan.registrations)} registrations, {len(plan.extensions)} uploads)[/dim]"
    )


@model.command('deploy')
@click.argument('model_file', type=click.Path(exists=True, dir_okay=False))
@click.option('--account', '-a', help='Deploying account (defaults to config)')
@click.option('--contracts', type=click.Path(file_okay=False), help='Compiled contracts directory')
@click.option('--host', help='Gateway host (defaults to config)')
@click.option('--port', type=int, help='Gateway port (defaults to config)')
def deploy_model(
    model_file: str,
    account: Optional[str],
    contracts: Optional[str],
    host: Optional[str],
    port: Optional[int],
):
    """Deploy a trained model to the ledger."""

    config = get_config()
    account = account or config.account
    if not account:
        console.print("[red]No account. Pass --account or run 'ledgerml config set account <address>'.[/red]")
        sys.exit(1)

    if host:
        config.gateway.host = host
    if port:
        config.gateway.port = port

    contracts_dir = Path(contracts) if contracts else config.contracts_dir
    hooks = ConsoleHooks(DeploymentHistory(config.deployments_path), model_file, account)

    console.print(f"\n[bold blue]Deploying {model_file}[/bold blue]")
    console.print(f"   Gateway: {config.gateway.base_url}")
    console.print(f"   Account: {account}\n")

    async def do_deploy():
        ledger = GatewayLedger(config.gateway)
        try:
            deployer = ModelDeployer(ledger, ArtifactRegistry(contracts_dir))
            return await deployer.deploy_model(
                load_model(Path(model_file)),
                DeployOptions(account=account, to_float=config.to_float, hooks=hooks),
            )
        finally:
            await ledger.close()

    try:
        deployed = run_async(do_deploy())
    except DeploymentError as e:
        console.print(f"\n[bold red]✗ Deployment failed:[/bold red] {e}")
        if hooks.entry.get("model_address"):
            console.print(
                f"[yellow]The contract at {hooks.entry['model_address']} is only partially "
                "deployed.[/yellow]"
            )
        sys.exit(1)

    table = Table(show_header=False, box=None)
    table.add_column("Key", style="dim")
    table.add_column("Value")
    table.add_row("Address", f"[cyan]{deployed.address}[/cyan]")
    table.add_row("Contract", deployed.contract.artifact.name)
    table.add_row("Transaction", deployed.transaction_hash)
    table.add_row("Writes", str(deployed.operations))
    table.add_row("Gas used", f"{deployed.gas_used:,}")

    console.print()
    console.print(table)
    console.print()


@model.command('history')
def history():
    """List past deployments."""

    config = get_config()
    entries = DeploymentHistory(config.deployments_path).load()

    if not entries:
        console.print("[yellow]No deployments yet.[/yellow]")
        return

    table = Table()
    table.add_column("Started")
    table.add_column("Model")
    table.add_column("Address", style="cyan")
    table.add_column("Transaction", style="dim")

    for entry in entries:
        table.add_row(
            entry.get("started_at", "-")[:19],
            entry.get("model_file", "-"),
            entry.get("model_address", "-"),
            entry.get("model_transaction_hash", "-"),
        )

    console.print(table)


# Function to register with main CLI
def register_commands(cli):
    """Register model commands with the main CLI."""
    cli.add_command(model)
