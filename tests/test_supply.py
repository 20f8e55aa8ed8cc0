"""
Test suite for the supply controller

Tests mint, burn, delegated burn and the initial supply issue.
"""

import pytest

from token_ledger.storage import InMemoryStateStore
from token_ledger.ledger import BalanceLedger
from token_ledger.allowances import AllowanceRegistry
from token_ledger.supply import SupplyController
from token_ledger.events import TransferEvent
from token_ledger.validation import ZERO_ADDRESS, MAX_UINT256
from token_ledger.errors import (
    InvalidRecipient, InvalidSender, InvalidSpender, InsufficientBalance,
    InsufficientAllowance, AmountOverflow
)


HOLDER = "0x0000000000000000000000000000000000001111"
SPENDER = "0x0000000000000000000000000000000000002222"


class TestSupplyController:
    """Test supply controller functionality"""

    def setup_method(self):
        """Set up test fixtures"""
        self.store = InMemoryStateStore()
        self.ledger = BalanceLedger(self.store)
        self.allowances = AllowanceRegistry(self.store)
        self.supply = SupplyController(self.ledger, self.allowances)

    def test_mint(self):
        """Test minting raises supply and balance by the same amount"""
        event = self.supply.mint(HOLDER, 500)

        assert event == TransferEvent(ZERO_ADDRESS, HOLDER, 500)
        assert self.ledger.total_supply() == 500
        assert self.ledger.balance_of(HOLDER) == 500
        assert self.ledger.verify_supply()['valid']

    def test_mint_to_null_address(self):
        with pytest.raises(InvalidRecipient):
            self.supply.mint(ZERO_ADDRESS, 500)
        assert self.ledger.total_supply() == 0

    def test_mint_overflow(self):
        """Test that supply is capped at 2**256 - 1"""
        self.supply.mint(HOLDER, MAX_UINT256)

        with pytest.raises(AmountOverflow):
            self.supply.mint(SPENDER, 1)

        assert self.ledger.total_supply() == MAX_UINT256
        assert self.ledger.balance_of(SPENDER) == 0

    def test_burn(self):
        """Test burning lowers supply and balance by the same amount"""
        self.supply.mint(HOLDER, 500)

        event = self.supply.burn(HOLDER, 200)

        assert event == TransferEvent(HOLDER, ZERO_ADDRESS, 200)
        assert self.ledger.total_supply() == 300
        assert self.ledger.balance_of(HOLDER) == 300

    def test_burn_more_than_balance(self):
        self.supply.mint(HOLDER, 10)
        before = self.store.get_all_data()

        with pytest.raises(InsufficientBalance):
            self.supply.burn(HOLDER, 11)

        assert self.store.get_all_data() == before

    def test_burn_null_caller(self):
        with pytest.raises(InvalidSender):
            self.supply.burn(ZERO_ADDRESS, 0)

    def test_burn_from_null_caller(self):
        """Test that the null address can never burn through an allowance"""
        self.supply.mint(HOLDER, 100)
        before = self.store.get_all_data()

        with pytest.raises(InvalidSpender):
            self.supply.burn_from(ZERO_ADDRESS, HOLDER, 0)

        assert self.store.get_all_data() == before

    def test_zero_burn_from_without_approval(self):
        self.supply.mint(HOLDER, 100)

        self.supply.burn_from(SPENDER, HOLDER, 0)

        assert self.allowances.allowances_of(HOLDER) == {}
        assert self.ledger.total_supply() == 100

    def test_burn_from(self):
        """Test a delegated burn consumes the allowance"""
        self.supply.mint(HOLDER, 100)
        self.allowances.approve(HOLDER, SPENDER, 60)

        event = self.supply.burn_from(SPENDER, HOLDER, 60)

        assert event == TransferEvent(HOLDER, ZERO_ADDRESS, 60)
        assert self.ledger.balance_of(HOLDER) == 40
        assert self.ledger.total_supply() == 40
        assert self.allowances.allowance(HOLDER, SPENDER) == 0

    def test_burn_from_insufficient_allowance(self):
        self.supply.mint(HOLDER, 100)
        self.allowances.approve(HOLDER, SPENDER, 10)
        before = self.store.get_all_data()

        with pytest.raises(InsufficientAllowance):
            self.supply.burn_from(SPENDER, HOLDER, 11)

        assert self.store.get_all_data() == before

    def test_burn_from_null_owner(self):
        with pytest.raises(InvalidSender):
            self.supply.burn_from(SPENDER, ZERO_ADDRESS, 1)

    def test_issue_initial_supply(self):
        """Test the initial supply is scaled by 10**decimals"""
        event = self.supply.issue_initial_supply(HOLDER, 1_000_000, 18)

        assert event.value == 1_000_000 * 10 ** 18
        assert self.ledger.balance_of(HOLDER) == 10 ** 24
        assert self.ledger.total_supply() == 10 ** 24

    def test_issue_initial_supply_overflow(self):
        with pytest.raises(AmountOverflow):
            self.supply.issue_initial_supply(HOLDER, 10 ** 10, 77)
        assert self.ledger.total_supply() == 0
