"""
Identity and amount validation.

Addresses are opaque strings supplied by the hosting environment. One value,
ZERO_ADDRESS, is reserved as the null identity: the origin of minted units
and the destination of burned ones. Amounts are plain ints in
[0, MAX_UINT256].
"""

from typing import Optional

from .errors import InvalidAmount

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"

MAX_UINT256 = 2 ** 256 - 1


def is_null_address(address: Optional[str]) -> bool:
    """Check whether an address is the null identity"""
    return address is None or address == "" or address == ZERO_ADDRESS


def is_valid_amount(amount) -> bool:
    # bool is an int subclass but never a valid amount
    if isinstance(amount, bool) or not isinstance(amount, int):
        return False
    return 0 <= amount <= MAX_UINT256


def require_amount(amount) -> int:
    """
    Raises:
        InvalidAmount: If amount is not an int in [0, MAX_UINT256]
    """
    if not is_valid_amount(amount):
        raise InvalidAmount(amount)
    return amount
