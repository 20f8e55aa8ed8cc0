"""
Allowance Registry

Owns the (owner, spender) -> remaining-spend mapping. approve() is an
absolute set; increase/decrease are relative to the current value. An
allowance record persists once created, even at zero.
"""

from typing import Dict, Tuple
import json

from .validation import MAX_UINT256, is_null_address, require_amount
from .errors import (
    InvalidApprover, InvalidSpender, InsufficientAllowance,
    AllowanceUnderflow, AmountOverflow
)
from .storage import StateStore


class AllowanceRegistry:
    """Delegated spending rights, stored in an injected state store"""

    def __init__(self, store: StateStore):
        self.store = store
        self.table_name = "allowances"

    @staticmethod
    def _key(owner: str, spender: str) -> str:
        # Unambiguous for any characters in either address
        return json.dumps([owner, spender])

    def allowance(self, owner: str, spender: str) -> int:
        """Remaining amount spender may draw from owner; 0 if never approved"""
        record = self.store.load(self.table_name, self._key(owner, spender))
        if record is None:
            return 0
        return int(record['amount'])

    def approve(self, owner: str, spender: str, amount: int) -> int:
        """
        Set the allowance to exactly ``amount``, overwriting any prior value

        Raises:
            InvalidApprover: If owner is the null address
            InvalidSpender: If spender is the null address
        """
        require_amount(amount)
        self._require_parties(owner, spender)
        self._save(owner, spender, amount)
        return amount

    def increase_allowance(self, owner: str, spender: str, delta: int) -> int:
        require_amount(delta)
        self._require_parties(owner, spender)
        current = self.allowance(owner, spender)
        if current + delta > MAX_UINT256:
            raise AmountOverflow(f"Allowance of {spender} on {owner}", current, delta)
        self._save(owner, spender, current + delta)
        return current + delta

    def decrease_allowance(self, owner: str, spender: str, delta: int) -> int:
        require_amount(delta)
        self._require_parties(owner, spender)
        current = self.allowance(owner, spender)
        if delta > current:
            raise AllowanceUnderflow(owner, spender, current, delta)
        self._save(owner, spender, current - delta)
        return current - delta

    def require_allowance(self, owner: str, spender: str, amount: int) -> None:
        available = self.allowance(owner, spender)
        if amount > available:
            raise InsufficientAllowance(owner, spender, available, amount)

    def spend(self, owner: str, spender: str, amount: int) -> int:
        """
        Consume ``amount`` of the allowance for a delegated transfer or burn.
        The full amount is always deducted; there is no unlimited allowance.
        Spending zero writes nothing, so it never creates a record for a
        pair that was not approved.

        Returns:
            Remaining allowance
        """
        require_amount(amount)
        self.require_allowance(owner, spender, amount)
        record = self.store.load(self.table_name, self._key(owner, spender))
        if record is None or amount == 0:
            return self.allowance(owner, spender)
        remaining = int(record['amount']) - amount
        self._save(owner, spender, remaining)
        return remaining

    def allowances_of(self, owner: str) -> Dict[str, int]:
        """All spenders ever approved by an owner, with their remaining amounts"""
        return {
            record['spender']: int(record['amount'])
            for record in self.store.load_all(self.table_name)
            if record['owner'] == owner
        }

    def all_allowances(self) -> Dict[Tuple[str, str], int]:
        return {
            (record["owner"], record["spender"]): int(record['amount'])
            for record in self.store.load_all(self.table_name)
        }

    def _require_parties(self, owner: str, spender: str) -> None:
        if is_null_address(owner):
            raise InvalidApprover()
        if is_null_address(spender):
            raise InvalidSpender()

    def _save(self, owner: str, spender: str, amount: int) -> None:
        self.store.save(self.table_name, self._key(owner, spender), {
            'owner': owner,
            'spender': spender,
            'amount': str(amount)
        })
