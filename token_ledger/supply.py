"""
Supply Controller

Issues (mint) and retires (burn) units. These are the only operations that
change total supply; each one moves the total and a single balance by the
same amount inside one store transaction.
"""

from .validation import ZERO_ADDRESS, MAX_UINT256, is_null_address, require_amount
from .errors import InvalidRecipient, InvalidSender, InvalidSpender, AmountOverflow
from .ledger import BalanceLedger
from .allowances import AllowanceRegistry
from .events import TransferEvent


class SupplyController:
    """Mints and burns units"""

    def __init__(self, ledger: BalanceLedger, allowances: AllowanceRegistry):
        self.ledger = ledger
        self.allowances = allowances
        self.store = ledger.store

    def mint(self, to: str, amount: int) -> TransferEvent:
        """
        Create ``amount`` new units and credit them to ``to``

        Raises:
            InvalidAmount: If amount is not a valid amount
            InvalidRecipient: If to is the null address
            AmountOverflow: If total supply would exceed 2**256 - 1
        """
        require_amount(amount)
        if is_null_address(to):
            raise InvalidRecipient()
        current = self.ledger.total_supply()
        if current + amount > MAX_UINT256:
            raise AmountOverflow("Total supply", current, amount)

        with self.store.atomic():
            self.ledger.increase_supply(amount)
            self.ledger.credit(to, amount)

        return TransferEvent(ZERO_ADDRESS, to, amount)

    def burn(self, caller: str, amount: int) -> TransferEvent:
        """
        Destroy ``amount`` units held by the caller

        Raises:
            InvalidAmount: If amount is not a valid amount
            InvalidSender: If caller is the null address
            InsufficientBalance: If caller holds less than amount
        """
        require_amount(amount)
        if is_null_address(caller):
            raise InvalidSender()
        self.ledger.require_balance(caller, amount)

        with self.store.atomic():
            self.ledger.debit(caller, amount)
            self.ledger.decrease_supply(amount)

        return TransferEvent(caller, ZERO_ADDRESS, amount)

    def burn_from(self, caller: str, owner: str, amount: int) -> TransferEvent:
        """
        Destroy ``amount`` units held by ``owner``, consuming the caller's
        allowance on ``owner``
        """
        require_amount(amount)
        if is_null_address(owner):
            raise InvalidSender()
        if is_null_address(caller):
            raise InvalidSpender()
        self.ledger.require_balance(owner, amount)
        self.allowances.require_allowance(owner, caller, amount)

        with self.store.atomic():
            self.allowances.spend(owner, caller, amount)
            self.ledger.debit(owner, amount)
            self.ledger.decrease_supply(amount)

        return TransferEvent(owner, ZERO_ADDRESS, amount)

    def issue_initial_supply(self, deployer: str, initial_supply_units: int, decimals: int) -> TransferEvent:
        """
        Credit the whole initial supply, scaled by 10**decimals, to the deployer.
        Only called once, while the token is being constructed.
        """
        require_amount(initial_supply_units)
        actual_supply = initial_supply_units * 10 ** decimals
        if actual_supply > MAX_UINT256:
            raise AmountOverflow("Initial supply", 0, actual_supply)
        return self.mint(deployer, actual_supply)
