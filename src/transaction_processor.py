import logging
from decimal import Decimal
from typing import Optional

from errors import AmountMissing, AmountNotPositive
from models import (
    ClientAccount,
    DisputeStatus,
    ProcessingResult,
    StoredTransaction,
    StoredTransactionType,
    Transaction,
    TransactionType,
)
from state_manager import StateManager

logger = logging.getLogger(__name__)


class TransactionProcessor:
    """
    Applies transactions to client accounts.
    Returns ProcessingResult to tell applied records from business no-ops.
    Raises ProcessingError subclasses for records that invalidate the log.
    """

    def __init__(self, state: StateManager):
        self._state = state

    def process_transaction(self, transaction: Transaction) -> ProcessingResult:
        """
        Process a single transaction.

        Returns:
            APPLIED: The account changed
            IGNORED: Nothing happened (locked account, insufficient funds,
                unknown tx id, or a dispute step in the wrong state)

        Raises:
            AmountMissing: Deposit or withdrawal without an amount
            AmountNotPositive: Deposit or withdrawal with amount <= 0
        """
        account = self._state.get_or_create_account(transaction.client_id)

        if account.locked:
            logger.debug(f"{transaction}: account {account.client_id} is locked, ignoring")
            return ProcessingResult.IGNORED

        match transaction.transaction_type:
            case TransactionType.DEPOSIT:
                return self._handle_deposit(account, transaction)
            case TransactionType.WITHDRAWAL:
                return self._handle_withdrawal(account, transaction)
            case TransactionType.DISPUTE:
                return self._handle_dispute(account, transaction)
            case TransactionType.RESOLVE:
                return self._handle_resolve(account, transaction)
            case TransactionType.CHARGEBACK:
                return self._handle_chargeback(account, transaction)

    def _handle_deposit(self, account: ClientAccount, transaction: Transaction) -> ProcessingResult:
        amount = self._validated_amount(transaction)
        account.credit(amount)
        self._record(account, transaction, StoredTransactionType.DEPOSIT, amount)
        return ProcessingResult.APPLIED

    def _handle_withdrawal(self, account: ClientAccount, transaction: Transaction) -> ProcessingResult:
        amount = self._validated_amount(transaction)
        if account.available < amount:
            logger.info(f"Withdrawal tx {transaction.transaction_id}: insufficient funds for client {account.client_id} (available {account.available}, requested {amount})")
            return ProcessingResult.IGNORED

        account.debit(amount)
        self._record(account, transaction, StoredTransactionType.WITHDRAWAL, amount)
        return ProcessingResult.APPLIED

    def _handle_dispute(self, account: ClientAccount, transaction: Transaction) -> ProcessingResult:
        original = self._find_in_status(account, transaction, DisputeStatus.NONE)
        if original is None:
            return ProcessingResult.IGNORED

        original.dispute_status = DisputeStatus.OPEN
        # A disputed withdrawal has nothing left in available to freeze
        if original.is_deposit:
            account.hold(original.amount)
        return ProcessingResult.APPLIED

    def _handle_resolve(self, account: ClientAccount, transaction: Transaction) -> ProcessingResult:
        original = self._find_in_status(account, transaction, DisputeStatus.OPEN)
        if original is None:
            return ProcessingResult.IGNORED

        original.dispute_status = DisputeStatus.NONE
        if original.is_deposit:
            account.release_hold(original.amount)
        return ProcessingResult.APPLIED

    def _handle_chargeback(self, account: ClientAccount, transaction: Transaction) -> ProcessingResult:
        original = self._find_in_status(account, transaction, DisputeStatus.OPEN)
        if original is None:
            return ProcessingResult.IGNORED

        original.dispute_status = DisputeStatus.CHARGEBACK
        account.locked = True

        match original.transaction_type:
            case StoredTransactionType.DEPOSIT:
                account.remove_held(original.amount)
            case StoredTransactionType.WITHDRAWAL:
                account.credit(original.amount)

        logger.info(f"Chargeback for tx {transaction.transaction_id}: client {account.client_id} locked")
        return ProcessingResult.APPLIED

    def _validated_amount(self, transaction: Transaction) -> Decimal:
        if transaction.amount is None:
            raise AmountMissing(transaction.transaction_id)
        if transaction.amount <= 0:
            raise AmountNotPositive(transaction.amount)
        return transaction.amount

    def _record(
        self,
        account: ClientAccount,
        transaction: Transaction,
        transaction_type: StoredTransactionType,
        amount: Decimal,
    ) -> None:
        # TODO: decide whether a reused tx id should abort the run instead of replacing the earlier record
        if transaction.transaction_id in account.transactions:
            logger.warning(f"Client {account.client_id}: tx {transaction.transaction_id} already recorded, replacing it with {transaction_type.value} of {amount}")
        account.transactions[transaction.transaction_id] = StoredTransaction(transaction_type, amount)

    def _find_in_status(
        self,
        account: ClientAccount,
        transaction: Transaction,
        status: DisputeStatus,
    ) -> Optional[StoredTransaction]:
        """Look up the referenced transaction, provided it is in the given dispute status."""
        original = account.transactions.get(transaction.transaction_id)

        if original is None:
            logger.info(f"{transaction.transaction_type.value.capitalize()} for tx {transaction.transaction_id}: transaction not found for client {account.client_id}")
            return None

        if original.dispute_status is not status:
            logger.info(f"{transaction.transaction_type.value.capitalize()} for tx {transaction.transaction_id}: dispute status is {original.dispute_status.value}, expected {status.value}")
            return None

        return original
