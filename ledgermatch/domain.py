"""Core data types shared by the readers, the engine and the command line."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Protocol, Sequence


class TransactionType(str, Enum):
    """Direction of a ledger movement."""

    DEBIT = "DEBIT"
    CREDIT = "CREDIT"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class SystemTransaction:
    id: str
    amount: Decimal
    type: TransactionType | str
    transaction_time: datetime


@dataclass(frozen=True)
class BankTransaction:
    """A bank statement line; negative amounts are debits."""

    id: str
    amount: Decimal
    date: datetime
    bank_name: str = ""


@dataclass
class ReconciliationSummary:
    total_system_transactions: int = 0
    total_bank_transactions: int = 0
    matched_transactions: int = 0
    unmatched_system_transactions: list[SystemTransaction] = field(default_factory=list)
    unmatched_bank_transactions: dict[str, list[BankTransaction]] = field(default_factory=dict)
    amount_discrepancy_total: Decimal = field(default_factory=Decimal)
    processing_duration_seconds: float = 0.0

    def unmatched_bank_count(self) -> int:
        """Number of unmatched bank transactions across all banks."""
        return sum(len(txs) for txs in self.unmatched_bank_transactions.values())


class TransactionDataReader(Protocol):
    def read_system_transactions(
        self, file_path: str, start_date: datetime, end_date: datetime
    ) -> list[SystemTransaction]: ...


class BankStatementReader(Protocol):
    def read_bank_transactions(
        self, file_paths: Sequence[str], start_date: datetime, end_date: datetime
    ) -> list[BankTransaction]: ...