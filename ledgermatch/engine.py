"""Best-fit matching of system transactions against bank transactions."""

from __future__ import annotations

from collections import defaultdict
from datetime import datetime, timezone
from decimal import Decimal
from typing import Iterable

from .domain import (
    BankTransaction,
    ReconciliationSummary,
    SystemTransaction,
    TransactionType,
)

DISCREPANCY_THRESHOLD = Decimal(1000)


def _type_label(tx_type: TransactionType | str) -> str:
    return tx_type.value if isinstance(tx_type, TransactionType) else str(tx_type)


def _day_label(moment: datetime) -> str:
    """Truncate to a whole UTC day, then render the date in the moment's own zone."""
    if moment.tzinfo is None:
        return moment.date().isoformat()
    utc = moment.astimezone(timezone.utc)
    midnight = utc.replace(hour=0, minute=0, second=0, microsecond=0)
    return midnight.astimezone(moment.tzinfo).date().isoformat()


def _match_key(moment: datetime, tx_type: TransactionType | str) -> str:
    return f"{_day_label(moment)}:{_type_label(tx_type)}"


def _bank_type(tx: BankTransaction) -> TransactionType:
    return TransactionType.DEBIT if tx.amount < 0 else TransactionType.CREDIT


class ReconciliationEngine:
    """Pairs transactions of the same day and direction by closest amount."""

    def reconcile(
        self,
        system_txs: Iterable[SystemTransaction],
        bank_txs: Iterable[BankTransaction],
    ) -> ReconciliationSummary:
        """Match the transactions and summarise what matched and what did not."""
        system_txs = list(system_txs)
        bank_txs = list(bank_txs)

        system_groups: dict[str, list[SystemTransaction]] = defaultdict(list)
        for tx in system_txs:
            system_groups[_match_key(tx.transaction_time, tx.type)].append(tx)

        bank_groups: dict[str, list[BankTransaction]] = defaultdict(list)
        for tx in bank_txs:
            bank_groups[_match_key(tx.date, _bank_type(tx))].append(tx)

        summary = ReconciliationSummary(
            total_system_transactions=len(system_txs),
            total_bank_transactions=len(bank_txs),
        )

        matched_system: set[str] = set()
        matched_bank: set[str] = set()

        for key, group in system_groups.items():
            candidates = bank_groups.get(key)
            if not candidates:
                continue
            used = [False] * len(candidates)

            for system_tx in group:
                best_index = None
                min_difference = DISCREPANCY_THRESHOLD
                for index, (bank_tx, taken) in enumerate(zip(candidates, used)):
                    if taken:
                        continue
                    difference = abs(system_tx.amount - abs(bank_tx.amount))
                    if difference < min_difference:
                        min_difference = difference
                        best_index = index

                if best_index is not None:
                    summary.matched_transactions += 1
                    summary.amount_discrepancy_total += min_difference
                    matched_system.add(system_tx.id)
                    matched_bank.add(candidates[best_index].id)
                    used[best_index] = True

        summary.unmatched_system_transactions = [
            tx for tx in system_txs if tx.id not in matched_system
        ]
        for tx in bank_txs:
            if tx.id not in matched_bank:
                summary.unmatched_bank_transactions.setdefault(tx.bank_name, []).append(tx)

        return summary