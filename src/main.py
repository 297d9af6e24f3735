import csv
import logging
import os
import sys
from decimal import Decimal
from typing import Iterable, List, Optional, TextIO

from errors import ProcessingError
from models import AccountSnapshot
from payments_engine import PaymentsEngine

logger = logging.getLogger(__name__)

LOG_LEVEL_ENV_VAR = "PAYMENTS_LOG_LEVEL"
DEFAULT_LOG_LEVEL = logging.WARNING
OUTPUT_HEADER = ["client", "available", "held", "total", "locked"]


def configure_logging() -> None:
    level_name = os.environ.get(LOG_LEVEL_ENV_VAR, "").upper()
    level = logging.getLevelName(level_name) if level_name else DEFAULT_LOG_LEVEL
    if not isinstance(level, int):
        level = DEFAULT_LOG_LEVEL

    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )


def format_decimal(value: Decimal) -> str:
    """Format decimal without exponent notation or trailing zeros."""
    normalized = value.normalize()
    if normalized.is_zero():
        return "0"
    return f"{normalized:f}"


def write_accounts(accounts: Iterable[AccountSnapshot], stream: TextIO) -> None:
    writer = csv.writer(stream, lineterminator="\n")
    writer.writerow(OUTPUT_HEADER)
    for account in sorted(accounts, key=lambda a: a.client_id):
        writer.writerow([
            account.client_id,
            format_decimal(account.available),
            format_decimal(account.held),
            format_decimal(account.total),
            str(account.locked).lower(),
        ])


def main(argv: Optional[List[str]] = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    configure_logging()

    if len(args) != 1:
        print("Usage: payments-ledger <transactions.csv>", file=sys.stderr)
        return 1

    engine = PaymentsEngine()
    try:
        engine.process_file(args[0])
    except ProcessingError as e:
        logger.error(f"Aborting after {engine.stats.processed} records")
        print(f"Error occurred: {e}", file=sys.stderr)
        return 1

    write_accounts(engine.snapshot(), sys.stdout)
    return 0


if __name__ == "__main__":
    sys.exit(main())
