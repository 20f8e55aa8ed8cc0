"""
Token Module

The public operation surface of a fungible token. A Token wires a balance
ledger, allowance registry, transfer engine and supply controller over one
injected state store, and publishes every committed change to an event
emitter.

Every mutating operation:
- holds the token lock, so exactly one operation is in flight,
- runs inside a store transaction that rolls back on any error,
- emits its events only after that transaction commits,
- returns True, or raises a TokenError subclass leaving state unchanged.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, FrozenSet, List, Optional
import threading

from .validation import is_null_address
from .errors import TokenError, InvalidMetadata, InvalidOwner, InvalidRecipient, Unauthorized
from .storage import StateStore, InMemoryStateStore
from .ledger import BalanceLedger
from .allowances import AllowanceRegistry
from .transfers import TransferEngine
from .supply import SupplyController
from .events import EventEmitter, ApprovalEvent, LedgerEvent
from .logging_config import get_logger, log_action

# 10**78 exceeds 2**256 - 1, so larger precisions cannot hold even one unit
MAX_DECIMALS = 77


class MintPolicy(Enum):
    """Who may call mint()"""
    OWNER = "owner"  # Only the current owner
    OPEN = "open"    # Any caller


class Capability(Enum):
    """Optional behaviours a token instance supports"""
    TRANSFERABLE = "transferable"
    BURNABLE = "burnable"
    OWNER_GATED = "owner_gated"


@dataclass(frozen=True)
class TokenMetadata:
    """Immutable token descriptors fixed at construction"""
    name: str
    symbol: str
    decimals: int

    def __post_init__(self):
        if not isinstance(self.name, str) or not self.name.strip():
            raise InvalidMetadata("Token name must be a non-empty string")
        if not isinstance(self.symbol, str) or not self.symbol.strip():
            raise InvalidMetadata("Token symbol must be a non-empty string")
        if (isinstance(self.decimals, bool) or not isinstance(self.decimals, int)
                or not 0 <= self.decimals <= MAX_DECIMALS):
            raise InvalidMetadata(f"Decimals must be an integer in [0, {MAX_DECIMALS}], got {self.decimals!r}")

    def to_dict(self) -> Dict[str, Any]:
        return {'name': self.name, 'symbol': self.symbol, 'decimals': self.decimals}


class Token:
    """
    Fungible token with direct and delegated transfers, mint and burn
    """

    def __init__(
        self,
        name: str,
        symbol: str,
        decimals: int,
        initial_supply_units: int,
        deployer: str,
        store: Optional[StateStore] = None,
        emitter: Optional[EventEmitter] = None,
        mint_policy: MintPolicy = MintPolicy.OWNER
    ):
        """
        Construct a token and issue its initial supply

        Args:
            name: Display name
            symbol: Display symbol
            decimals: Number of decimal places one display unit is split into
            initial_supply_units: Initial supply in display units; the
                deployer receives initial_supply_units * 10**decimals
            deployer: Address of the constructing identity, who becomes owner
            store: State store, fresh InMemoryStateStore if omitted
            emitter: Event log, fresh EventEmitter if omitted
            mint_policy: Who may mint after construction

        Raises:
            InvalidMetadata: If name, symbol or decimals are invalid
            InvalidAmount: If initial_supply_units is not a valid amount
            InvalidRecipient: If deployer is the null address
            AmountOverflow: If the scaled initial supply exceeds 2**256 - 1
        """
        self._metadata = TokenMetadata(name=name, symbol=symbol, decimals=decimals)
        if is_null_address(deployer):
            raise InvalidRecipient("Deployer cannot be the null address")

        self.store = store if store is not None else InMemoryStateStore()
        self.emitter = emitter if emitter is not None else EventEmitter()
        self.mint_policy = MintPolicy(mint_policy)
        self.logger = get_logger("token_ledger.token")
        self._lock = threading.RLock()
        self._ownership_table = "ownership"

        self.ledger = BalanceLedger(self.store)
        self.allowances = AllowanceRegistry(self.store)
        self.transfers = TransferEngine(self.ledger, self.allowances)
        self.supply = SupplyController(self.ledger, self.allowances)

        if self.store.count(self.ledger.supply_table) > 0:
            raise ValueError("State store already holds a token ledger")

        def construct() -> List[LedgerEvent]:
            self._set_owner(deployer)
            return [self.supply.issue_initial_supply(deployer, initial_supply_units, decimals)]

        self._execute("deploy", deployer, construct, extra={
            **self._metadata.to_dict(),
            "initial_supply_units": str(initial_supply_units),
            "mint_policy": self.mint_policy.value
        })

    # Metadata (immutable)

    @property
    def metadata(self) -> TokenMetadata:
        return self._metadata

    @property
    def name(self) -> str:
        return self._metadata.name

    @property
    def symbol(self) -> str:
        return self._metadata.symbol

    @property
    def decimals(self) -> int:
        return self._metadata.decimals

    @property
    def capabilities(self) -> FrozenSet[Capability]:
        caps = {Capability.TRANSFERABLE, Capability.BURNABLE}
        if self.mint_policy == MintPolicy.OWNER:
            caps.add(Capability.OWNER_GATED)
        return frozenset(caps)

    # Reads

    @property
    def owner(self) -> Optional[str]:
        """Current owner, None once ownership is renounced"""
        with self._lock:
            record = self.store.load(self._ownership_table, "owner")
            return record['owner'] if record else None

    def total_supply(self) -> int:
        with self._lock:
            return self.ledger.total_supply()

    def balance_of(self, account: str) -> int:
        with self._lock:
            return self.ledger.balance_of(account)

    def allowance(self, owner: str, spender: str) -> int:
        with self._lock:
            return self.allowances.allowance(owner, spender)

    # Transfers

    def transfer(self, caller: str, to: str, value: int) -> bool:
        """Move value units from caller to ``to``"""
        return self._execute(
            "transfer", caller,
            lambda: [self.transfers.transfer(caller, to, value)],
            extra={"to": to, "value": str(value)}
        )

    def transfer_from(self, caller: str, from_: str, to: str, value: int) -> bool:
        """Move value units from ``from_`` to ``to`` using caller's allowance"""
        return self._execute(
            "transfer_from", caller,
            lambda: [self.transfers.transfer_from(caller, from_, to, value)],
            extra={"from": from_, "to": to, "value": str(value)}
        )

    # Allowances

    def approve(self, caller: str, spender: str, value: int) -> bool:
        """Set spender's allowance on the caller to exactly value"""
        return self._execute(
            "approve", caller,
            lambda: [ApprovalEvent(caller, spender, self.allowances.approve(caller, spender, value))],
            extra={"spender": spender, "value": str(value)}
        )

    def increase_allowance(self, caller: str, spender: str, delta: int) -> bool:
        return self._execute(
            "increase_allowance", caller,
            lambda: [ApprovalEvent(caller, spender, self.allowances.increase_allowance(caller, spender, delta))],
            extra={"spender": spender, "delta": str(delta)}
        )

    def decrease_allowance(self, caller: str, spender: str, delta: int) -> bool:
        return self._execute(
            "decrease_allowance", caller,
            lambda: [ApprovalEvent(caller, spender, self.allowances.decrease_allowance(caller, spender, delta))],
            extra={"spender": spender, "delta": str(delta)}
        )

    # Supply

    def mint(self, caller: str, to: str, amount: int) -> bool:
        """
        Create amount new units for ``to``

        Raises:
            Unauthorized: If minting is owner-gated and caller is not the owner
        """
        def operation() -> List[LedgerEvent]:
            if self.mint_policy == MintPolicy.OWNER:
                self._require_owner(caller, "mint")
            return [self.supply.mint(to, amount)]

        return self._execute("mint", caller, operation, extra={"to": to, "amount": str(amount)})

    def burn(self, caller: str, amount: int) -> bool:
        """Destroy amount units held by the caller"""
        return self._execute(
            "burn", caller,
            lambda: [self.supply.burn(caller, amount)],
            extra={"amount": str(amount)}
        )

    def burn_from(self, caller: str, owner: str, amount: int) -> bool:
        """Destroy amount units held by ``owner`` using caller's allowance"""
        return self._execute(
            "burn_from", caller,
            lambda: [self.supply.burn_from(caller, owner, amount)],
            extra={"owner": owner, "amount": str(amount)}
        )

    # Ownership

    def transfer_ownership(self, caller: str, new_owner: str) -> bool:
        def operation() -> List[LedgerEvent]:
            self._require_owner(caller, "transfer ownership")
            if is_null_address(new_owner):
                raise InvalidOwner()
            self._set_owner(new_owner)
            return []

        return self._execute("transfer_ownership", caller, operation, extra={"new_owner": new_owner})

    def renounce_ownership(self, caller: str) -> bool:
        """Give up ownership for good; owner-gated minting is disabled afterwards"""
        def operation() -> List[LedgerEvent]:
            self._require_owner(caller, "renounce ownership")
            self.store.delete(self._ownership_table, "owner")
            return []

        return self._execute("renounce_ownership", caller, operation)

    # Invariants

    def check_invariants(self) -> Dict[str, Any]:
        """
        Check supply conservation and non-negative balances and allowances

        Returns:
            Dictionary with check results
        """
        with self._lock:
            result = self.ledger.verify_supply()
            negative_allowances = [
                list(pair) for pair, amount in self.allowances.all_allowances().items()
                if amount < 0
            ]
            result['negative_allowances'] = negative_allowances
            result['valid'] = result['valid'] and not negative_allowances
            return result

    # Internals

    def _require_owner(self, caller: str, action: str) -> None:
        owner = self.owner
        if owner is None or caller != owner:
            raise Unauthorized(caller, action)

    def _set_owner(self, owner: str) -> None:
        self.store.save(self._ownership_table, "owner", {'owner': owner})

    def _execute(
        self,
        action: str,
        caller: str,
        operation: Callable[[], List[LedgerEvent]],
        extra: Optional[Dict[str, Any]] = None
    ) -> bool:
        """
        Run one operation as an atomic unit and publish its events

        Raises:
            TokenError: Whatever the operation raised, after rollback
        """
        with self._lock:
            try:
                with self.store.atomic():
                    events = operation()
            except TokenError as e:
                log_action(
                    self.logger, "warning", f"{action} rejected: {e.reason}",
                    user_id=caller, action=action, resource=f"token:{self.symbol}",
                    extra={**(extra or {}), **e.to_dict()}
                )
                raise

            self.emitter.emit_all(events)

            log_action(
                self.logger, "info", f"{action} committed",
                user_id=caller, action=action, resource=f"token:{self.symbol}",
                extra=extra
            )
            return True
