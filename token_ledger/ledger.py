"""
Balance Ledger

Owns the mapping from account address to balance and the aggregate total
supply. Balances are never negative; plain transfers move existing units
between accounts and only the supply controller changes the total.
"""

from typing import Dict, Any

from .validation import MAX_UINT256
from .errors import InsufficientBalance, AmountOverflow
from .storage import StateStore


class BalanceLedger:
    """
    Account balances plus total supply, stored in an injected state store
    """

    def __init__(self, store: StateStore):
        self.store = store
        self.table_name = "balances"
        self.supply_table = "supply"
        self._supply_key = "total"

    def balance_of(self, account: str) -> int:
        """Balance of an account; 0 for accounts never touched"""
        record = self.store.load(self.table_name, account)
        if record is None:
            return 0
        return int(record['balance'])

    def total_supply(self) -> int:
        record = self.store.load(self.supply_table, self._supply_key)
        if record is None:
            return 0
        return int(record['total_supply'])

    def require_balance(self, account: str, amount: int) -> None:
        """
        Check that an account can cover a debit without touching state

        Raises:
            InsufficientBalance: If amount exceeds the current balance
        """
        available = self.balance_of(account)
        if amount > available:
            raise InsufficientBalance(account, available, amount)

    def credit(self, account: str, amount: int) -> int:
        """Add units to an account, returning the new balance"""
        current = self.balance_of(account)
        if current + amount > MAX_UINT256:
            raise AmountOverflow(f"Balance of {account}", current, amount)
        new_balance = current + amount
        self._save_balance(account, new_balance)
        return new_balance

    def debit(self, account: str, amount: int) -> int:
        """Remove units from an account, returning the new balance"""
        self.require_balance(account, amount)
        new_balance = self.balance_of(account) - amount
        self._save_balance(account, new_balance)
        return new_balance

    def increase_supply(self, amount: int) -> int:
        current = self.total_supply()
        if current + amount > MAX_UINT256:
            raise AmountOverflow("Total supply", current, amount)
        self._save_supply(current + amount)
        return current + amount

    def decrease_supply(self, amount: int) -> int:
        current = self.total_supply()
        # Supply covers every balance, so this only trips if state is corrupt
        if amount > current:
            raise ValueError(f"Total supply {current} cannot cover burn of {amount}")
        self._save_supply(current - amount)
        return current - amount

    def accounts(self) -> Dict[str, int]:
        """Snapshot of every account that has ever held a balance"""
        return {
            record['account']: int(record['balance'])
            for record in self.store.load_all(self.table_name)
        }

    def holder_count(self) -> int:
        """Number of accounts with a non-zero balance"""
        return sum(1 for balance in self.accounts().values() if balance > 0)

    def verify_supply(self) -> Dict[str, Any]:
        """
        Check that total supply equals the sum of all balances and that no
        balance is negative

        Returns:
            Dictionary with check results
        """
        balances = self.accounts()
        total = self.total_supply()
        sum_of_balances = sum(balances.values())
        negative = [account for account, balance in balances.items() if balance < 0]

        return {
            'valid': total == sum_of_balances and not negative,
            'total_supply': total,
            'sum_of_balances': sum_of_balances,
            'negative_balances': negative,
            'account_count': len(balances)
        }

    def _save_balance(self, account: str, balance: int) -> None:
        self.store.save(self.table_name, account, {
            'account': account,
            'balance': str(balance)
        })

    def _save_supply(self, total: int) -> None:
        self.store.save(self.supply_table, self._supply_key, {
            'total_supply': str(total)
        })
