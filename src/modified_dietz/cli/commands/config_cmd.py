"""Configuration commands."""

from dataclasses import replace
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from ...core.config import config_path, get_config, save_config
from ...core.exceptions import ModifiedDietzError

app = typer.Typer(help="Show or change defaults")
console = Console()


@app.command("show")
def show():
    """Show the current configuration."""
    cfg = get_config()
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("Key", style="dim")
    table.add_column("Value")
    table.add_row("epsilon", f"{cfg.epsilon:g}")
    table.add_row("currency", cfg.currency)
    table.add_row("decimals", str(cfg.decimals))
    console.print(table)
    console.print(f"[dim]{config_path()}[/dim]")


@app.command("set")
def set_config(
    epsilon: Optional[float] = typer.Option(None, "--epsilon", "-e", help="Default epsilon, within [0, 1]"),
    currency: Optional[str] = typer.Option(None, "--currency", "-c", help="Currency label for display"),
    decimals: Optional[int] = typer.Option(None, "--decimals", "-d", min=0, max=10, help="Decimals for amounts"),
):
    """Update and persist configuration values."""
    cfg = get_config()
    changes = {}
    if epsilon is not None:
        changes["epsilon"] = epsilon
    if currency is not None:
        changes["currency"] = currency.upper()
    if decimals is not None:
        changes["decimals"] = decimals
    if not changes:
        console.print("[yellow]Nothing to change.[/yellow]")
        return

    try:
        save_config(replace(cfg, **changes))
    except ModifiedDietzError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    console.print("[green]✓[/green] Configuration saved")
