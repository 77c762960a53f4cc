"""CSV readers for system transaction exports and bank statements."""

from __future__ import annotations

import csv
import os
import re
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Iterator, Sequence

from .domain import BankTransaction, SystemTransaction, TransactionType

_AMOUNT = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)


class LedgerReadError(Exception):
    """A ledger file could not be opened or is not valid CSV."""


def _as_utc(moment: datetime) -> datetime:
    return moment.replace(tzinfo=timezone.utc) if moment.tzinfo is None else moment


def _parse_time(text: str, *formats: str) -> datetime | None:
    for fmt in formats:
        try:
            return _as_utc(datetime.strptime(text, fmt))
        except ValueError:
            pass
    return None


def _parse_amount(text: str) -> Decimal | None:
    return Decimal(text) if _AMOUNT.fullmatch(text) else None


def _read_rows(path: str, kind: str, min_fields: int) -> Iterator[list[str]]:
    """Yield the data rows of a CSV file, skipping its header line."""
    try:
        handle = open(path, newline="", encoding="utf-8", errors="replace")
    except OSError as exc:
        raise LedgerReadError(f"could not open {kind} file '{path}': {exc}") from exc

    with handle:
        reader = csv.reader(handle, strict=True, skipinitialspace=True)
        rows = (row for row in reader if row)
        try:
            width = len(next(rows))
        except (StopIteration, csv.Error) as exc:
            raise LedgerReadError(f"could not read header from '{path}': {exc or 'empty file'}") from None
        try:
            for row in rows:
                if len(row) != width or len(row) < min_fields:
                    raise csv.Error(f"record on line {reader.line_num}: wrong number of fields")
                yield row
        except csv.Error as exc:
            raise LedgerReadError(f"error reading record from '{path}': {exc}") from exc


class CsvLedgerReader:
    """Reads ledgers from CSV; unparsable or out-of-range rows are skipped."""

    def read_system_transactions(
        self, file_path: str, start_date: datetime, end_date: datetime
    ) -> list[SystemTransaction]:
        """Read ``id,amount,type,transactionTime`` rows; the end date covers its whole day."""
        start = _as_utc(start_date)
        end_exclusive = _as_utc(end_date) + timedelta(days=1)
        transactions = []
        for tx_id, raw_amount, raw_type, raw_time, *_ in _read_rows(file_path, "system transaction", 4):
            tx_time = _parse_time(raw_time, "%Y-%m-%dT%H:%M:%S%z", "%Y-%m-%dT%H:%M:%S.%f%z")
            amount = _parse_amount(raw_amount)
            if tx_time is None or not start <= tx_time < end_exclusive or amount is None:
                continue
            tx_type = TransactionType(raw_type) if raw_type in TransactionType._value2member_map_ else raw_type
            transactions.append(SystemTransaction(tx_id, amount, tx_type, tx_time))
        return transactions

    def read_bank_transactions(
        self, file_paths: Sequence[str], start_date: datetime, end_date: datetime
    ) -> list[BankTransaction]:
        """Read ``id,amount,date`` rows from every statement in parallel, labelled by file name."""
        paths = list(file_paths)
        if not paths:
            return []
        with ThreadPoolExecutor(max_workers=len(paths)) as pool:
            results = list(pool.map(lambda p: self._read_statement(p, start_date, end_date), paths))
        return [tx for statement in results for tx in statement]

    def _read_statement(
        self, file_path: str, start_date: datetime, end_date: datetime
    ) -> list[BankTransaction]:
        bank_name = os.path.basename(file_path)
        start, end = _as_utc(start_date), _as_utc(end_date)
        transactions = []
        for tx_id, raw_amount, raw_day, *_ in _read_rows(file_path, "bank statement", 3):
            day = _parse_time(raw_day, "%Y-%m-%d")
            amount = _parse_amount(raw_amount)
            if day is None or not start <= day <= end or amount is None:
                continue
            transactions.append(BankTransaction(tx_id, amount, day, bank_name))
        return transactions