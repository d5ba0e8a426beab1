"""Capabilities the pool consumes from external ledgers.

The pool never reaches into a ledger beyond these methods. Any object
implementing them (an in-memory FungibleToken, an adapter over a real
chain) can back a pool.
"""

from typing import Protocol, runtime_checkable


class LedgerError(Exception):
    """Base error for ledger operations."""

    pass


class InsufficientBalance(LedgerError):
    """Payer's balance is below the transfer amount."""

    pass


class InsufficientAllowance(LedgerError):
    """Spender's allowance from the owner is below the transfer amount."""

    pass


@runtime_checkable
class AssetLedger(Protocol):
    """Transferable asset held in pool custody.

    Both transfers are all-or-nothing: on failure they raise a LedgerError
    and move nothing.
    """

    @property
    def address(self) -> str:
        """Asset identifier."""
        ...

    def balance_of(self, account: str) -> int: ...

    def transfer(self, sender: str, recipient: str, amount: int) -> None:
        """Move amount from sender's own balance to recipient."""
        ...

    def transfer_from(self, spender: str, owner: str, recipient: str, amount: int) -> None:
        """Move amount from owner to recipient using spender's allowance."""
        ...


@runtime_checkable
class ClaimLedger(Protocol):
    """Ledger of LP claims. The pool only mints, burns and reads."""

    def mint(self, recipient: str, amount: int) -> None: ...

    def burn(self, owner: str, amount: int) -> None: ...

    def total_supply(self) -> int: ...

    def balance_of(self, account: str) -> int: ...
