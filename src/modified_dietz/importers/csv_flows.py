"""Cash-flow CSV importer.

Expected layout (header names are case-insensitive):

    Date,Amount
    2020-06-16T00:00:00Z,-10.00
    2020-06-20T09:30:00Z,EUR 1,250.00

Positive amounts are contributions, negative amounts withdrawals. Dates
are ISO-8601; a trailing ``Z`` or a missing offset both mean UTC.
"""

import csv
import logging
from datetime import datetime, timezone
from pathlib import Path

from ..core.exceptions import CashflowImportError

logger = logging.getLogger(__name__)

_CURRENCY_PREFIXES = ("EUR ", "USD ", "GBP ", "CHF ")
_CURRENCY_SYMBOLS = "€$£"


def parse_timestamp(text: str) -> datetime:
    """Parse an ISO-8601 timestamp into an aware UTC-or-offset datetime."""
    try:
        dt = datetime.fromisoformat(text.strip().replace("Z", "+00:00"))
    except ValueError:
        raise CashflowImportError(f"Unparseable date {text!r}")
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def parse_amount(text: str) -> float:
    cleaned = text.strip()
    for prefix in _CURRENCY_PREFIXES:
        if cleaned.startswith(prefix):
            cleaned = cleaned[len(prefix):]
    for symbol in _CURRENCY_SYMBOLS:
        cleaned = cleaned.replace(symbol, "")
    cleaned = cleaned.replace(",", "").strip()
    try:
        return float(cleaned)
    except ValueError:
        raise CashflowImportError(f"Unparseable amount {text!r}")


def parse_flow_arg(arg: str) -> tuple[datetime, float]:
    """Parse a single ``TIMESTAMP=AMOUNT`` command-line flow."""
    ts, sep, amount = arg.rpartition("=")
    if not sep or not ts:
        raise CashflowImportError(f"Expected TIMESTAMP=AMOUNT, got {arg!r}")
    return parse_timestamp(ts), parse_amount(amount)


def load_cashflows(path: Path) -> dict[datetime, float]:
    """Read a Date,Amount CSV into a cash-flow map.

    Args:
        path: CSV file with a header row.

    Returns:
        Dict mapping timestamp to signed amount. Empty if the file has no rows.

    Raises:
        CashflowImportError: missing file or columns, a malformed row, or a
            timestamp that appears twice.
    """
    if not path.exists():
        raise CashflowImportError(f"File not found: {path}")

    try:
        with open(path, newline="", encoding="utf-8-sig") as f:
            flows = _read_rows(csv.DictReader(f), path)
    except (UnicodeDecodeError, OSError, csv.Error) as e:
        raise CashflowImportError(f"{path.name}: {e}") from e

    logger.debug("Loaded %d cash flows from %s", len(flows), path)
    return flows


def _read_rows(reader: csv.DictReader, path: Path) -> dict[datetime, float]:
    columns = {name.strip().lower(): name for name in (reader.fieldnames or [])}
    if "date" not in columns or "amount" not in columns:
        raise CashflowImportError(f"{path.name}: expected 'Date' and 'Amount' columns")
    date_col, amount_col = columns["date"], columns["amount"]

    flows: dict[datetime, float] = {}
    for lineno, row in enumerate(reader, 2):
        date_str = (row.get(date_col) or "").strip()
        amount_str = (row.get(amount_col) or "").strip()
        if not date_str and not amount_str:
            continue
        try:
            ts = parse_timestamp(date_str)
            amount = parse_amount(amount_str)
        except CashflowImportError as e:
            raise CashflowImportError(f"{path.name} line {lineno}: {e}")
        if ts in flows:
            raise CashflowImportError(f"{path.name} line {lineno}: duplicate timestamp {date_str}")
        flows[ts] = amount
    return flows
