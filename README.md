# ledgermatch

Reconcile the transactions recorded by an internal system against one or
more bank statements. The report shows what matched, what did not, and the
total amount discrepancy across matched pairs.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Input files

**System transactions** are a CSV file with a header row and the columns
`trxID,amount,type,transactionTime`. The `type` column is `DEBIT` or
`CREDIT`, and `transactionTime` is an RFC 3339 timestamp such as
`2023-01-23T09:15:00Z`:

```
trxID,amount,type,transactionTime
SYS-001,50000.00,CREDIT,2023-01-23T09:15:00Z
SYS-002,125000.00,DEBIT,2023-01-23T14:30:00Z
```

**Bank statements** are one CSV file per bank, with a header row and the
columns `unique_identifier,amount,date`. Negative amounts are debits and
positive amounts are credits. The `date` column is `YYYY-MM-DD`. The file
name, without its directory, is used as the bank's name in the report.

```
unique_identifier,amount,date
BNK-A-100,50000.00,2023-01-23
BNK-A-101,-125500.00,2023-01-23
```

These rows are skipped without an error:

- rows whose date or amount cannot be parsed;
- rows that fall outside the reconciliation period.

These problems stop the run with an error:

- a file that cannot be opened;
- a file that has no header;
- a file that holds malformed CSV, including a row whose number of fields differs from the header's.

## Command line

```
ledgermatch -sys system.csv -bank bank_a.csv,bank_b.csv -start 2023-01-01 -end 2023-01-31
```

| Option | Long form | Value |
| --- | --- | --- |
| `-sys` | `--sys` | the system transactions file |
| `-bank` | `--bank` | a comma-separated list of statement files |
| `-start` | `--start` | the first day of the period, as `YYYY-MM-DD` |
| `-end` | `--end` | the last day of the period, as `YYYY-MM-DD` |

All four options are required. Both dates are inclusive: system
transactions at any time on the end day are included.

The report is printed to standard output. Progress and error messages go to
standard error. The exit status is 0 on success and 1 in these cases:

- an option is missing;
- a date is malformed;
- a file cannot be read.

## How matching works

Transactions are grouped by day and direction: debit or credit. A bank
transaction's direction comes from the sign of its amount.

Within each group, each system transaction is paired with the unused bank
transaction whose absolute amount is closest to its own. A pair is only
made if the difference is below 1000. The differences of all matched pairs
are added up to give the total amount discrepancy.

Unmatched bank transactions are listed per bank.

## Library use

```python
from datetime import datetime, timezone

from ledgermatch.cli import format_summary
from ledgermatch.csv_reader import CsvLedgerReader
from ledgermatch.engine import ReconciliationEngine
from ledgermatch.usecase import ReconciliationUsecase

reader = CsvLedgerReader()
usecase = ReconciliationUsecase(reader, reader, ReconciliationEngine())
summary = usecase.perform_reconciliation(
    "system.csv",
    ["bank_a.csv", "bank_b.csv"],
    datetime(2023, 1, 1, tzinfo=timezone.utc),
    datetime(2023, 1, 31, tzinfo=timezone.utc),
)
print(summary.matched_transactions, summary.unmatched_bank_count())
print(format_summary(summary))
```

### Calling the engine directly

`ReconciliationEngine.reconcile` accepts lists of `SystemTransaction` and
`BankTransaction` objects from `ledgermatch.domain`. It returns a
`ReconciliationSummary`.

### Custom readers

`ReconciliationUsecase` accepts any objects that provide these methods:

- `read_system_transactions(file_path, start_date, end_date)`;
- `read_bank_transactions(file_paths, start_date, end_date)`.

Both sources are read in parallel. If either reader raises,
`perform_reconciliation` raises `ReconciliationError`, and a failure on the
system side is reported first.

`CsvLedgerReader` raises `LedgerReadError` for files it cannot read.