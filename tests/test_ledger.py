"""
Test suite for the balance ledger

Tests balances, credit/debit primitives, supply bookkeeping and the supply
conservation check.
CRITICAL: Validates that balances never go negative.
"""

import pytest

from token_ledger.storage import InMemoryStateStore
from token_ledger.ledger import BalanceLedger
from token_ledger.validation import MAX_UINT256
from token_ledger.errors import InsufficientBalance, AmountOverflow


ALICE = "0xa11ce00000000000000000000000000000000001"
BOB = "0xb0b0000000000000000000000000000000000002"


class TestBalanceLedger:
    """Test balance ledger operations"""

    def setup_method(self):
        """Set up test fixtures"""
        self.store = InMemoryStateStore()
        self.ledger = BalanceLedger(self.store)

    def test_unseen_account_has_zero_balance(self):
        """Test that never-touched accounts read as zero"""
        assert self.ledger.balance_of(ALICE) == 0
        assert self.ledger.total_supply() == 0
        assert self.ledger.accounts() == {}

    def test_credit_and_debit(self):
        """Test crediting and debiting an account"""
        assert self.ledger.credit(ALICE, 100) == 100
        assert self.ledger.debit(ALICE, 30) == 70
        assert self.ledger.balance_of(ALICE) == 70

    def test_credit_does_not_touch_supply(self):
        """Test that credit/debit leave total supply alone"""
        self.ledger.credit(ALICE, 100)
        assert self.ledger.total_supply() == 0

    def test_debit_to_exactly_zero(self):
        """Test that an account can be emptied and still exists"""
        self.ledger.credit(ALICE, 50)
        self.ledger.debit(ALICE, 50)

        assert self.ledger.balance_of(ALICE) == 0
        assert self.ledger.accounts() == {ALICE: 0}
        assert self.ledger.holder_count() == 0

    def test_debit_more_than_balance(self):
        """Test that overdrawing raises and changes nothing"""
        self.ledger.credit(ALICE, 10)

        with pytest.raises(InsufficientBalance) as exc_info:
            self.ledger.debit(ALICE, 11)

        assert exc_info.value.account == ALICE
        assert exc_info.value.available == 10
        assert exc_info.value.requested == 11
        assert self.ledger.balance_of(ALICE) == 10

    def test_require_balance(self):
        """Test the validation-only balance check"""
        self.ledger.credit(ALICE, 10)
        self.ledger.require_balance(ALICE, 10)

        with pytest.raises(InsufficientBalance):
            self.ledger.require_balance(BOB, 1)

    def test_credit_overflow(self):
        """Test that balances cannot exceed 2**256 - 1"""
        self.ledger.credit(ALICE, MAX_UINT256)

        with pytest.raises(AmountOverflow):
            self.ledger.credit(ALICE, 1)
        assert self.ledger.balance_of(ALICE) == MAX_UINT256

    def test_supply_changes(self):
        """Test increasing and decreasing total supply"""
        assert self.ledger.increase_supply(500) == 500
        assert self.ledger.decrease_supply(200) == 300
        assert self.ledger.total_supply() == 300

        with pytest.raises(AmountOverflow):
            self.ledger.increase_supply(MAX_UINT256)

    def test_verify_supply(self):
        """Test the supply conservation check"""
        self.ledger.increase_supply(100)
        self.ledger.credit(ALICE, 60)
        self.ledger.credit(BOB, 40)

        result = self.ledger.verify_supply()
        assert result['valid']
        assert result['total_supply'] == 100
        assert result['sum_of_balances'] == 100
        assert result['account_count'] == 2
        assert self.ledger.holder_count() == 2

    def test_verify_supply_detects_mismatch(self):
        """Test that a direct credit without supply breaks conservation"""
        self.ledger.credit(ALICE, 5)

        result = self.ledger.verify_supply()
        assert not result['valid']
        assert result['sum_of_balances'] == 5
        assert result['total_supply'] == 0
