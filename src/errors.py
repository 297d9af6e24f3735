from decimal import Decimal
from typing import Optional


class ProcessingError(Exception):
    """Fatal fault that aborts processing of the whole transaction log."""


class InvalidInput(ProcessingError):
    def __init__(self, reason: str, line_number: Optional[int] = None):
        self.reason = reason
        self.line_number = line_number
        location = f" (line {line_number})" if line_number is not None else ""
        super().__init__(f"Error parsing CSV input{location}: {reason}")


class AmountMissing(ProcessingError):
    def __init__(self, transaction_id: int):
        self.transaction_id = transaction_id
        super().__init__(f"Missing amount field in transaction with id: {transaction_id}")


class AmountNotPositive(ProcessingError):
    def __init__(self, amount: Decimal):
        self.amount = amount
        super().__init__(f"Amount must be positive: {amount}")
