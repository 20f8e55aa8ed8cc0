"""
Token Ledger Errors

Every rejected operation raises one of these. They subclass ValueError so
callers that treat rule violations as bad input keep working, and each carries
a stable machine-readable ``reason`` code.
"""

from typing import Any, Dict, Optional


class TokenError(ValueError):
    """Base class for all ledger rule violations"""
    reason = "token_error"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for logging"""
        return {"reason": self.reason, "message": str(self)}


# Identity violations

class InvalidRecipient(TokenError):
    reason = "invalid_recipient"

    def __init__(self, message: str = "Recipient cannot be the null address"):
        super().__init__(message)


class InvalidSender(TokenError):
    reason = "invalid_sender"

    def __init__(self, message: str = "Sender cannot be the null address"):
        super().__init__(message)


class InvalidSpender(TokenError):
    reason = "invalid_spender"

    def __init__(self, message: str = "Spender cannot be the null address"):
        super().__init__(message)


class InvalidApprover(TokenError):
    reason = "invalid_approver"

    def __init__(self, message: str = "Approver cannot be the null address"):
        super().__init__(message)


class InvalidOwner(TokenError):
    reason = "invalid_owner"

    def __init__(self, message: str = "New owner cannot be the null address"):
        super().__init__(message)


# Quantity violations

class InsufficientBalance(TokenError):
    """Raised when a debit would take a balance below zero"""
    reason = "insufficient_balance"

    def __init__(self, account: str, available: int, requested: int):
        self.account = account
        self.available = available
        self.requested = requested
        super().__init__(
            f"Insufficient balance for {account}: "
            f"available={available}, requested={requested}"
        )

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        result.update({
            "account": self.account,
            "available": str(self.available),
            "requested": str(self.requested)
        })
        return result


class InsufficientAllowance(TokenError):
    """Raised when a delegated spend exceeds the remaining allowance"""
    reason = "insufficient_allowance"

    def __init__(self, owner: str, spender: str, available: int, requested: int):
        self.owner = owner
        self.spender = spender
        self.available = available
        self.requested = requested
        super().__init__(
            f"Insufficient allowance for {spender} on {owner}: "
            f"available={available}, requested={requested}"
        )

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        result.update({
            "owner": self.owner,
            "spender": self.spender,
            "available": str(self.available),
            "requested": str(self.requested)
        })
        return result


class AllowanceUnderflow(TokenError):
    """Raised when decreasing an allowance by more than its current value"""
    reason = "allowance_underflow"

    def __init__(self, owner: str, spender: str, current: int, delta: int):
        self.owner = owner
        self.spender = spender
        self.current = current
        self.delta = delta
        super().__init__(
            f"Decreased allowance below zero for {spender} on {owner}: "
            f"current={current}, delta={delta}"
        )


class InvalidAmount(TokenError):
    reason = "invalid_amount"

    def __init__(self, amount: Any):
        self.amount = amount
        super().__init__(f"Amount must be an integer in [0, 2**256 - 1], got {amount!r}")


class AmountOverflow(TokenError):
    reason = "amount_overflow"

    def __init__(self, what: str, current: int, delta: int):
        self.what = what
        self.current = current
        self.delta = delta
        super().__init__(f"{what} would exceed 2**256 - 1: current={current}, delta={delta}")


# Construction and authorization

class InvalidMetadata(TokenError):
    reason = "invalid_metadata"


class Unauthorized(TokenError):
    reason = "unauthorized"

    def __init__(self, caller: Optional[str], action: str):
        self.caller = caller
        self.action = action
        super().__init__(f"Caller {caller} is not allowed to {action}")
