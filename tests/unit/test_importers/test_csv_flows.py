"""Tests for importers.csv_flows."""

import textwrap
from datetime import datetime, timedelta, timezone

import pytest

from modified_dietz.core.exceptions import CashflowImportError
from modified_dietz.importers.csv_flows import (
    load_cashflows,
    parse_amount,
    parse_flow_arg,
    parse_timestamp,
)


def _write(tmp_path, body, name="flows.csv"):
    path = tmp_path / name
    path.write_text(textwrap.dedent(body), encoding="utf-8")
    return path


class TestParseTimestamp:
    def test_zulu(self):
        assert parse_timestamp("2020-06-16T00:00:00Z") == datetime(2020, 6, 16, tzinfo=timezone.utc)

    def test_naive_is_utc(self):
        assert parse_timestamp("2020-06-16T00:00:00").tzinfo == timezone.utc

    def test_offset_kept(self):
        dt = parse_timestamp("2020-06-16T02:00:00+02:00")
        assert dt.utcoffset() == timedelta(hours=2)
        assert dt == datetime(2020, 6, 16, tzinfo=timezone.utc)

    def test_date_only(self):
        assert parse_timestamp("2020-06-16") == datetime(2020, 6, 16, tzinfo=timezone.utc)

    def test_garbage(self):
        with pytest.raises(CashflowImportError):
            parse_timestamp("16/06/2020")


class TestParseAmount:
    @pytest.mark.parametrize(
        "text, expected",
        [
            ("-10", -10.0),
            ("1250.50", 1250.5),
            ("EUR 1,250.00", 1250.0),
            ("€-33,000", -33000.0),
            (" $ 42 ", 42.0),
        ],
    )
    def test_valid(self, text, expected):
        assert parse_amount(text) == expected

    def test_invalid(self):
        with pytest.raises(CashflowImportError):
            parse_amount("ten")


class TestParseFlowArg:
    def test_valid(self):
        ts, amount = parse_flow_arg("2020-06-16T00:00:00Z=-10")
        assert ts == datetime(2020, 6, 16, tzinfo=timezone.utc)
        assert amount == -10.0

    def test_missing_separator(self):
        with pytest.raises(CashflowImportError):
            parse_flow_arg("2020-06-16T00:00:00Z")

    def test_missing_timestamp(self):
        with pytest.raises(CashflowImportError):
            parse_flow_arg("=5")


class TestLoadCashflows:
    def test_basic(self, tmp_path):
        path = _write(tmp_path, """\
            Date,Amount
            2020-06-07T12:00:00Z,-1095
            2020-06-13T12:00:00Z,EUR 350.00
        """)
        flows = load_cashflows(path)
        assert flows == {
            datetime(2020, 6, 7, 12, tzinfo=timezone.utc): -1095.0,
            datetime(2020, 6, 13, 12, tzinfo=timezone.utc): 350.0,
        }

    def test_header_case_and_extra_columns(self, tmp_path):
        path = _write(tmp_path, """\
            note,DATE,amount
            top-up,2020-06-07,100
        """)
        assert load_cashflows(path) == {datetime(2020, 6, 7, tzinfo=timezone.utc): 100.0}

    def test_blank_rows_skipped(self, tmp_path):
        path = _write(tmp_path, "Date,Amount\n2020-06-07,100\n,\n")
        assert len(load_cashflows(path)) == 1

    def test_header_only(self, tmp_path):
        path = _write(tmp_path, "Date,Amount\n")
        assert load_cashflows(path) == {}

    def test_missing_column(self, tmp_path):
        path = _write(tmp_path, "Date,Value\n2020-06-07,100\n")
        with pytest.raises(CashflowImportError, match="'Date' and 'Amount'"):
            load_cashflows(path)

    def test_bad_row_reports_line(self, tmp_path):
        path = _write(tmp_path, "Date,Amount\n2020-06-07,100\nyesterday,5\n")
        with pytest.raises(CashflowImportError, match="line 3"):
            load_cashflows(path)

    def test_duplicate_timestamp(self, tmp_path):
        path = _write(tmp_path, "Date,Amount\n2020-06-07T00:00:00Z,100\n2020-06-07,5\n")
        with pytest.raises(CashflowImportError, match="duplicate"):
            load_cashflows(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(CashflowImportError, match="not found"):
            load_cashflows(tmp_path / "nope.csv")

    def test_not_utf8(self, tmp_path):
        path = tmp_path / "flows.csv"
        path.write_bytes(b"Date,Amount\n2020-06-10,\xff\xfe10\n")
        with pytest.raises(CashflowImportError, match="flows.csv"):
            load_cashflows(path)

    def test_directory_instead_of_file(self, tmp_path):
        with pytest.raises(CashflowImportError):
            load_cashflows(tmp_path)
