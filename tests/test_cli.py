from datetime import datetime, timezone
from decimal import Decimal

import pytest

from ledgermatch.cli import format_summary, main
from ledgermatch.csv_reader import CsvLedgerReader
from ledgermatch.domain import (
    BankTransaction,
    ReconciliationSummary,
    SystemTransaction,
    TransactionType,
)
from ledgermatch.usecase import ReconciliationUsecase

SYSTEM_CSV = (
    "trxID,amount,type,transactionTime\n"
    "SYS-001,50000.00,CREDIT,2023-01-23T10:00:00Z\n"
    "SYS-002,125000.00,DEBIT,2023-01-23T11:00:00Z\n"
)
BANK_CSV = (
    "unique_identifier,amount,date\n"
    "BNK-A-100,50000.00,2023-01-23\n"
    "BNK-FEE-X,-15000.00,2023-01-24\n"
)


@pytest.fixture
def ledger_files(tmp_path):
    sys_path = tmp_path / "system.csv"
    bank_path = tmp_path / "bank_a.csv"
    sys_path.write_text(SYSTEM_CSV, encoding="utf-8")
    bank_path.write_text(BANK_CSV, encoding="utf-8")
    return str(sys_path), str(bank_path)


def test_empty_report_frame():
    text = format_summary(ReconciliationSummary())
    assert text.startswith("\n--- Reconciliation Report ---\n")
    assert text.endswith("\n--- End of Report ---\n")
    assert "[Unmatched System Transactions]" not in text
    assert "[Unmatched Bank Transactions]" not in text
    assert "Total Amount Discrepancy:            0.00\n" in text


def test_unmatched_system_line():
    tx = SystemTransaction(
        "S1", Decimal("100.5"), TransactionType.DEBIT,
        datetime(2023, 1, 2, 3, 4, 5, tzinfo=timezone.utc),
    )
    summary = ReconciliationSummary(total_system_transactions=1, unmatched_system_transactions=[tx])
    lines = format_summary(summary).splitlines()
    assert "[Unmatched System Transactions]" in lines
    assert "- ID: S1, Amount: 100.50, Type: DEBIT, Time: 2023-01-02T03:04:05Z" in lines


def test_unmatched_bank_line_uses_absolute_amount():
    tx = BankTransaction("B1", Decimal("-42.1"), datetime(2023, 1, 3, tzinfo=timezone.utc), "bank.csv")
    summary = ReconciliationSummary(unmatched_bank_transactions={"bank.csv": [tx]})
    lines = format_summary(summary).splitlines()
    bank_index = lines.index("  Bank: bank.csv")
    assert lines[bank_index + 1] == "  - ID: B1, Amount: 42.10 (DEBIT), Date: 2023-01-03"
    assert f"Unmatched Bank Transactions:         {summary.unmatched_bank_count()}" in lines


def test_counts_reflect_summary():
    summary = ReconciliationSummary(
        total_system_transactions=7,
        total_bank_transactions=9,
        matched_transactions=5,
    )
    lines = format_summary(summary).splitlines()
    assert "Total System Transactions Processed: 7" in lines
    assert "Total Bank Transactions Processed:   9" in lines
    assert "Matched Transactions:                5" in lines


def test_missing_flags(capsys):
    assert main(["-sys", "system.csv"]) == 1
    assert "Error: All flags are required." in capsys.readouterr().out


def test_invalid_start_date(capsys, ledger_files):
    sys_path, bank_path = ledger_files
    code = main(["-sys", sys_path, "-bank", bank_path, "-start", "2023/01/01", "-end", "2023-01-31"])
    assert code == 1
    assert "Invalid start date format" in capsys.readouterr().err


def test_missing_file_fails(capsys, tmp_path, ledger_files):
    sys_path, _ = ledger_files
    missing = str(tmp_path / "missing.csv")
    code = main(["-sys", sys_path, "-bank", missing, "-start", "2023-01-01", "-end", "2023-01-31"])
    assert code == 1
    assert "Reconciliation failed: failed to read bank statements" in capsys.readouterr().err


def test_full_run(capsys, ledger_files):
    sys_path, bank_path = ledger_files
    code = main(["--sys", sys_path, "--bank", bank_path, "--start", "2023-01-01", "--end", "2023-01-31"])
    out = capsys.readouterr().out
    assert code == 0

    start = datetime(2023, 1, 1, tzinfo=timezone.utc)
    end = datetime(2023, 1, 31, tzinfo=timezone.utc)
    reader = CsvLedgerReader()
    expected = ReconciliationUsecase(reader, reader).perform_reconciliation(
        sys_path, [bank_path], start, end
    )
    lines = out.splitlines()
    assert f"Matched Transactions:                {expected.matched_transactions}" in lines
    assert "  Bank: bank_a.csv" in lines
    assert out.endswith("--- End of Report ---\n")