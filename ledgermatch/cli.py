"""Command line entry point that reconciles CSV ledgers and prints a report."""

from __future__ import annotations

import argparse
import sys
import time
from datetime import datetime, timedelta, timezone
from decimal import ROUND_HALF_UP, Decimal

from .csv_reader import CsvLedgerReader
from .domain import ReconciliationSummary
from .engine import ReconciliationEngine
from .usecase import ReconciliationError, ReconciliationUsecase


def _log(message: str) -> None:
    print(f"{datetime.now():%Y/%m/%d %H:%M:%S} {message}", file=sys.stderr)


def _fixed(value: Decimal) -> str:
    """Two decimals, halves rounded away from zero, never a negative zero."""
    rounded = value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    return format(abs(rounded) if rounded == 0 else rounded, "f")


def _rfc3339(moment: datetime) -> str:
    moment = moment.replace(microsecond=0, tzinfo=moment.tzinfo or timezone.utc)
    text = moment.isoformat()
    return text[:-6] + "Z" if moment.utcoffset() == timedelta(0) else text


def format_summary(summary: ReconciliationSummary) -> str:
    """Render the reconciliation report as text."""
    unmatched_sys = summary.unmatched_system_transactions
    lines = [
        "",
        "--- Reconciliation Report ---",
        f"Processing Time: {summary.processing_duration_seconds:.2f} seconds",
        "",
        "[Summary]",
        f"Total System Transactions Processed: {summary.total_system_transactions}",
        f"Total Bank Transactions Processed:   {summary.total_bank_transactions}",
        f"Matched Transactions:                {summary.matched_transactions}",
        f"Unmatched System Transactions:       {len(unmatched_sys)}",
        f"Unmatched Bank Transactions:         {summary.unmatched_bank_count()}",
        f"Total Amount Discrepancy:            {_fixed(summary.amount_discrepancy_total)}",
    ]
    if unmatched_sys:
        lines += ["", "[Unmatched System Transactions]"]
        lines += [
            f"- ID: {tx.id}, Amount: {_fixed(tx.amount)}, "
            f"Type: {tx.type}, Time: {_rfc3339(tx.transaction_time)}"
            for tx in unmatched_sys
        ]
    if summary.unmatched_bank_transactions:
        lines += ["", "[Unmatched Bank Transactions]"]
        for bank, txs in summary.unmatched_bank_transactions.items():
            lines.append(f"  Bank: {bank}")
            lines += [
                f"  - ID: {tx.id}, Amount: {_fixed(abs(tx.amount))} "
                f"({'DEBIT' if tx.amount < 0 else 'CREDIT'}), Date: {tx.date:%Y-%m-%d}"
                for tx in txs
            ]
    lines += ["", "--- End of Report ---"]
    return "\n".join(lines) + "\n"


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ledgermatch", description="Reconcile system transactions against bank statements."
    )
    for name, help_text in (
        ("sys", "Path to system transactions CSV. (Required)"),
        ("bank", "Comma-separated paths to bank statement CSVs. (Required)"),
        ("start", "Start date for reconciliation (YYYY-MM-DD). (Required)"),
        ("end", "End date for reconciliation (YYYY-MM-DD). (Required)"),
    ):
        parser.add_argument(f"-{name}", f"--{name}", dest=name, default="", help=help_text)
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run the reconciler and print its report; return the exit status."""
    started = time.perf_counter()
    parser = _build_parser()
    args = parser.parse_args(argv)

    if not (args.sys and args.bank and args.start and args.end):
        print("Error: All flags are required.")
        parser.print_help(sys.stderr)
        return 1

    dates = {}
    for label in ("start", "end"):
        try:
            parsed = datetime.strptime(getattr(args, label), "%Y-%m-%d")
        except ValueError as exc:
            _log(f"Invalid {label} date format: {exc}. Please use YYYY-MM-DD.")
            return 1
        dates[label] = parsed.replace(tzinfo=timezone.utc)

    csv_reader = CsvLedgerReader()
    reconciler = ReconciliationUsecase(csv_reader, csv_reader, ReconciliationEngine())

    _log("Starting reconciliation process...")
    try:
        summary = reconciler.perform_reconciliation(
            args.sys, args.bank.split(","), dates["start"], dates["end"]
        )
    except ReconciliationError as exc:
        _log(f"Reconciliation failed: {exc}")
        return 1
    _log("Reconciliation process completed successfully.")
    summary.processing_duration_seconds = time.perf_counter() - started

    sys.stdout.write(format_summary(summary))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())