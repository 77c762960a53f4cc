"""Loads both ledgers concurrently and runs the reconciliation engine."""

from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor
from datetime import datetime
from typing import Sequence

from .domain import BankStatementReader, ReconciliationSummary, TransactionDataReader
from .engine import ReconciliationEngine


class ReconciliationError(Exception):
    """One of the ledgers could not be read."""


def _failure(future: Future) -> Exception | None:
    exc = future.exception()
    if exc is not None and not isinstance(exc, Exception):
        raise exc
    return exc


class ReconciliationUsecase:
    """Reads system and bank data and reconciles them."""

    def __init__(
        self,
        sys_reader: TransactionDataReader,
        bank_reader: BankStatementReader,
        engine: ReconciliationEngine | None = None,
    ) -> None:
        self._sys_reader = sys_reader
        self._bank_reader = bank_reader
        self._engine = engine if engine is not None else ReconciliationEngine()

    def perform_reconciliation(
        self,
        sys_tx_path: str,
        bank_tx_paths: Sequence[str],
        start: datetime,
        end: datetime,
    ) -> ReconciliationSummary:
        """Read both sources in parallel and reconcile them.

        Raises ReconciliationError if either source fails; a system-side
        failure is reported first.
        """
        with ThreadPoolExecutor(max_workers=2) as pool:
            sys_future = pool.submit(
                self._sys_reader.read_system_transactions, sys_tx_path, start, end
            )
            bank_future = pool.submit(
                self._bank_reader.read_bank_transactions, list(bank_tx_paths), start, end
            )

        sys_exc = _failure(sys_future)
        if sys_exc is not None:
            raise ReconciliationError(f"failed to read system transactions: {sys_exc}") from sys_exc
        bank_exc = _failure(bank_future)
        if bank_exc is not None:
            raise ReconciliationError(f"failed to read bank statements: {bank_exc}") from bank_exc

        return self._engine.reconcile(sys_future.result(), bank_future.result())