import csv
import logging
import re
from decimal import Decimal
from typing import Dict, Iterator, Optional

from errors import InvalidInput
from models import Transaction, TransactionType

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("type", "client", "tx")
MAX_CLIENT_ID = 2**16 - 1
MAX_TRANSACTION_ID = 2**32 - 1
PLAIN_DECIMAL = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)", re.ASCII)


def read_transactions(filepath: str) -> Iterator[Transaction]:
    """
    Stream transactions from a CSV file in file order.

    Rows are decoded one at a time as the caller consumes them, so a
    malformed row only surfaces once every row before it has been handed out.
    """
    reader = None
    try:
        with open(filepath, "r", newline="", encoding="utf-8") as f:
            reader = csv.DictReader(f, skipinitialspace=True)
            if reader.fieldnames is None:
                logger.info(f"{filepath}: empty input")
                return
            reader.fieldnames = [name.strip().lower() for name in reader.fieldnames]

            missing = [column for column in REQUIRED_COLUMNS if column not in reader.fieldnames]
            if missing:
                raise InvalidInput(f"missing column(s) {', '.join(missing)} in header", reader.line_num)

            for row in reader:
                yield parse_csv_row(row, reader.line_num)
    except OSError as e:
        raise InvalidInput(f"cannot read {filepath}: {e}") from e
    except (csv.Error, UnicodeDecodeError) as e:
        raise InvalidInput(str(e), reader.line_num if reader is not None else None) from e


def parse_csv_row(row: Dict[Optional[str], object], line_number: Optional[int] = None) -> Transaction:
    """Parse CSV row into Transaction."""
    # Short rows fill missing columns with None, long rows collect extras under the None key
    normalized = {
        k: v.strip()
        for k, v in row.items()
        if k is not None and isinstance(v, str)
    }

    for column in REQUIRED_COLUMNS:
        if not normalized.get(column):
            raise InvalidInput(f"missing value for '{column}'", line_number)

    try:
        transaction_type = TransactionType(normalized["type"].lower())
    except ValueError:
        raise InvalidInput(f"unknown transaction type '{normalized['type']}'", line_number) from None

    client_id = _parse_id(normalized["client"], "client", MAX_CLIENT_ID, line_number)
    transaction_id = _parse_id(normalized["tx"], "tx", MAX_TRANSACTION_ID, line_number)

    amount = None
    amount_str = normalized.get("amount", "")
    if amount_str:
        amount = _parse_amount(amount_str, line_number)

    return Transaction(
        transaction_type=transaction_type,
        client_id=client_id,
        transaction_id=transaction_id,
        amount=amount,
    )


def _parse_id(value: str, column: str, upper_bound: int, line_number: Optional[int]) -> int:
    if not (value.isascii() and value.isdigit()):
        raise InvalidInput(f"invalid {column} id '{value}'", line_number)
    parsed = int(value)
    if parsed > upper_bound:
        raise InvalidInput(f"{column} id {parsed} out of range 0..{upper_bound}", line_number)
    return parsed


def _parse_amount(value: str, line_number: Optional[int]) -> Decimal:
    # Plain digits only: no exponents, underscores or special values
    if not PLAIN_DECIMAL.fullmatch(value):
        raise InvalidInput(f"invalid amount '{value}'", line_number)
    # Decimal from the literal text keeps the exact value, no float round-trip
    return Decimal(value)
