"""Return calculation command."""

import json
import math
from pathlib import Path
from typing import Optional

import typer
from rich import box
from rich.console import Console
from rich.table import Table

from ...core.config import get_config
from ...core.exceptions import CashflowImportError, ModifiedDietzError
from ...core.finance import MarketValueDelta, ModifiedDietz, Period
from ...importers.csv_flows import load_cashflows, parse_flow_arg, parse_timestamp

console = Console()


def _collect_flows(flows_csv: Optional[Path], flow_args: list[str]) -> dict:
    flows = load_cashflows(flows_csv) if flows_csv is not None else {}
    for arg in flow_args:
        ts, amount = parse_flow_arg(arg)
        if ts in flows:
            raise CashflowImportError(f"Duplicate cash flow timestamp {ts.isoformat()}")
        flows[ts] = amount
    return flows


def _json_number(v: float):
    """nan and ±inf have no JSON form; emit null."""
    return v if math.isfinite(v) else None


def _as_dict(md: ModifiedDietz) -> dict:
    return {
        "period": {"start": md.period.start.isoformat(), "end": md.period.end.isoformat()},
        "adjusted_period": {
            "start": md.adjusted_period.start.isoformat(),
            "end": md.adjusted_period.end.isoformat(),
        },
        "market_value": {
            "start": _json_number(md.market_value.start),
            "end": _json_number(md.market_value.end),
        },
        "epsilon": md.epsilon,
        "net_cashflows": {
            ts.isoformat(): _json_number(md.net_cashflow_map[ts]) for ts in md.ordered_cashflow_dates
        },
        "net_cashflow_total": _json_number(md.net_cashflow_total),
        "adjusted_net_cashflow": _json_number(md.adjusted_net_cashflow),
        "gain_or_loss": _json_number(md.gain_or_loss),
        "average_capital": _json_number(md.average_capital),
        "performance": _json_number(md.performance),
    }


def _print_result(md: ModifiedDietz, currency: str, decimals: int) -> None:
    def money(v: float) -> str:
        return f"{currency} {v:,.{decimals}f}"

    console.print(f"\n[bold]Modified Dietz — {md.period}[/bold]\n")

    if md.net_cashflow_map:
        flows = Table(title="Net Cash Flows", box=box.SIMPLE)
        flows.add_column("Date")
        flows.add_column("Amount", justify="right")
        flows.add_column("Weight", justify="right")
        for ts in md.ordered_cashflow_dates:
            amount = md.net_cashflow_map[ts]
            color = "green" if amount >= 0 else "red"
            flows.add_row(ts.isoformat(), f"[{color}]{money(amount)}[/{color}]", f"{md.weight(ts):.4f}")
        console.print(flows)

    dropped = len(md.raw_cashflow_map) - len(md.net_cashflow_map)
    if dropped:
        console.print(f"[dim]{dropped} cash flow(s) outside the period or ≤ {md.epsilon:g} ignored[/dim]\n")

    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("Label", style="dim")
    table.add_column("Value", justify="right")
    table.add_row("Start Value", money(md.market_value.start))
    table.add_row("End Value", money(md.market_value.end))
    table.add_row("Net Cash Flow", money(md.net_cashflow_total))
    table.add_row("Weighted Cash Flow", money(md.adjusted_net_cashflow))
    table.add_row("Gain / Loss", money(md.gain_or_loss))
    table.add_row("Average Capital", money(md.average_capital))
    if md.adjusted_period != md.period:
        table.add_row("Adjusted Period", str(md.adjusted_period))

    perf = md.performance
    if not math.isfinite(perf):
        table.add_row("[bold]Return[/bold]", f"[yellow]{perf}[/yellow] (average capital is zero)")
    else:
        color = "green" if perf >= 0 else "red"
        table.add_row("[bold]Return[/bold]", f"[bold {color}]{perf * 100:+.2f}%[/bold {color}]")

    console.print(table)
    console.print()


def calc(
    start: str = typer.Argument(..., help="Period start (exclusive), ISO-8601"),
    end: str = typer.Argument(..., help="Period end (inclusive), ISO-8601"),
    start_value: float = typer.Argument(..., help="Market value at period start"),
    end_value: float = typer.Argument(..., help="Market value at period end"),
    flows_csv: Optional[Path] = typer.Option(None, "--flows", "-f", help="CSV with Date,Amount columns"),
    flow: list[str] = typer.Option([], "--flow", help="Single cash flow as TIMESTAMP=AMOUNT (repeatable)"),
    epsilon: Optional[float] = typer.Option(None, "--epsilon", "-e", help="Ignore flows with |amount| ≤ epsilon"),
    as_json: bool = typer.Option(False, "--json", help="Print the result as JSON"),
):
    """Calculate the Modified Dietz return for one period."""
    cfg = get_config()
    try:
        period = Period(start=parse_timestamp(start), end=parse_timestamp(end))
        flows = _collect_flows(flows_csv, flow)
        md = ModifiedDietz(
            period,
            MarketValueDelta(start=start_value, end=end_value),
            flows,
            epsilon=cfg.epsilon if epsilon is None else epsilon,
        )
    except ModifiedDietzError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    if as_json:
        typer.echo(json.dumps(_as_dict(md), indent=2, allow_nan=False))
        return
    _print_result(md, cfg.currency, cfg.decimals)
