"""
Transfer Engine

Validates and applies movement of existing units between accounts, directly
or through a spender's allowance. Every precondition is checked before any
state changes, in a fixed order that callers may rely on for failure reasons:
amount domain, addresses, balance, allowance. Mutations run inside one store
transaction so they commit together or not at all.
"""

from .validation import is_null_address, require_amount
from .errors import InvalidRecipient, InvalidSender, InvalidSpender
from .ledger import BalanceLedger
from .allowances import AllowanceRegistry
from .events import TransferEvent


class TransferEngine:
    """Moves units between accounts without changing total supply"""

    def __init__(self, ledger: BalanceLedger, allowances: AllowanceRegistry):
        self.ledger = ledger
        self.allowances = allowances
        self.store = ledger.store

    def transfer(self, caller: str, to: str, value: int) -> TransferEvent:
        """
        Move ``value`` units from the caller to ``to``

        Returns:
            TransferEvent describing the committed movement

        Raises:
            InvalidAmount: If value is not a valid amount
            InvalidSender: If caller is the null address
            InvalidRecipient: If to is the null address
            InsufficientBalance: If caller holds less than value
        """
        require_amount(value)
        if is_null_address(caller):
            raise InvalidSender()
        if is_null_address(to):
            raise InvalidRecipient()
        self.ledger.require_balance(caller, value)

        with self.store.atomic():
            self.ledger.debit(caller, value)
            self.ledger.credit(to, value)

        return TransferEvent(caller, to, value)

    def transfer_from(self, caller: str, from_: str, to: str, value: int) -> TransferEvent:
        """
        Move ``value`` units from ``from_`` to ``to`` on behalf of the caller,
        consuming the caller's allowance on ``from_``

        Raises:
            InvalidAmount: If value is not a valid amount
            InvalidSender: If from_ is the null address
            InvalidRecipient: If to is the null address
            InvalidSpender: If the caller is the null address
            InsufficientBalance: If from_ holds less than value
            InsufficientAllowance: If caller may not spend value from from_
        """
        require_amount(value)
        if is_null_address(from_):
            raise InvalidSender()
        if is_null_address(to):
            raise InvalidRecipient()
        if is_null_address(caller):
            raise InvalidSpender()
        self.ledger.require_balance(from_, value)
        self.allowances.require_allowance(from_, caller, value)

        with self.store.atomic():
            self.ledger.debit(from_, value)
            self.ledger.credit(to, value)
            self.allowances.spend(from_, caller, value)

        return TransferEvent(from_, to, value)
