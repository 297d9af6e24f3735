import logging
from typing import Dict, Iterable, List

from models import AccountSnapshot, ClientAccount, ProcessingResult, ProcessingStats, Transaction
from state_manager import StateManager
from transaction_feed import read_transactions
from transaction_processor import TransactionProcessor

logger = logging.getLogger(__name__)


class PaymentsEngine:
    """
    Ledger of client accounts fed from a transaction log.
    Records are applied strictly one at a time, in feed order.
    """

    def __init__(self):
        self._state = StateManager()
        self._processor = TransactionProcessor(self._state)
        self._stats = ProcessingStats()

    @property
    def stats(self) -> ProcessingStats:
        return self._stats

    def apply(self, transaction: Transaction) -> ProcessingResult:
        """Apply a single record. ProcessingError propagates to the caller."""
        result = self._processor.process_transaction(transaction)
        self._stats.record(result)
        return result

    def process_transactions(self, transactions: Iterable[Transaction]) -> Dict[int, ClientAccount]:
        for transaction in transactions:
            self.apply(transaction)
        return self._state.get_all_accounts()

    def process_file(self, filepath: str) -> Dict[int, ClientAccount]:
        """Process CSV file and return final account states."""
        logger.info(f"Processing transactions from {filepath}")
        accounts = self.process_transactions(read_transactions(filepath))
        logger.info(
            f"Processed: {self._stats.processed}, "
            f"Applied: {self._stats.applied}, "
            f"Ignored: {self._stats.ignored}, "
            f"Accounts: {len(accounts)}"
        )
        return accounts

    def get_all_accounts(self) -> Dict[int, ClientAccount]:
        return self._state.get_all_accounts()

    def snapshot(self) -> List[AccountSnapshot]:
        return self._state.snapshot()
