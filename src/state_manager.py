from typing import Dict, List

from models import AccountSnapshot, ClientAccount


class StateManager:
    """
    Owns every client account, keyed by client id.
    Each account carries its own transaction history for dispute lookups.
    """

    def __init__(self):
        self._accounts: Dict[int, ClientAccount] = {}

    def get_or_create_account(self, client_id: int) -> ClientAccount:
        """Get existing account or create new one."""
        if client_id not in self._accounts:
            self._accounts[client_id] = ClientAccount(client_id=client_id)
        return self._accounts[client_id]

    def get_all_accounts(self) -> Dict[int, ClientAccount]:
        """Return all accounts (for final output)."""
        return dict(self._accounts)

    def snapshot(self) -> List[AccountSnapshot]:
        """Read-only view of every account's balances and lock state."""
        return [AccountSnapshot.from_account(account) for account in self._accounts.values()]
