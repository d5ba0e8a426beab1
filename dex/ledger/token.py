"""In-memory fungible token ledger.

FungibleToken backs both the pooled assets and the LP claims: it
implements the AssetLedger and ClaimLedger capabilities, plus the
approve/allowance surface callers need before depositing.
"""

from __future__ import annotations

import hashlib
import threading
from collections.abc import Callable

import structlog

from dex.ledger.base import InsufficientAllowance, InsufficientBalance
from dex.models.types import normalize_address
from dex.safe_int import UINT256_MAX, S

logger = structlog.get_logger()

# Called as hook(sender, recipient, amount) before a transfer moves funds.
# Raising from a hook aborts the transfer.
TransferHook = Callable[[str, str, int], None]


def derive_token_address(name: str, symbol: str, salt: int = 0) -> str:
    """Deterministic 20-byte address for a token created in-process."""
    digest = hashlib.sha256(f"{name}:{symbol}:{salt}".encode()).hexdigest()
    return "0x" + digest[:40]


class FungibleToken:
    """ERC20-style balance and allowance table.

    Notes:
    - Accounts are normalized lowercase addresses.
    - Zero balances are omitted to keep the table sparse.
    - An allowance of UINT256_MAX is treated as unlimited and is not
      decremented by transfer_from.
    """

    def __init__(
        self,
        name: str,
        symbol: str,
        decimals: int = 18,
        address: str | None = None,
    ) -> None:
        self.name = name
        self.symbol = symbol
        self.decimals = decimals
        self._address = normalize_address(
            address or derive_token_address(name, symbol), validate=True
        )
        self._balances: dict[str, int] = {}
        self._allowances: dict[tuple[str, str], int] = {}
        self._total_supply = 0
        self._hooks: list[TransferHook] = []
        self._lock = threading.RLock()

    @property
    def address(self) -> str:
        return self._address

    # --- Reads ---

    def balance_of(self, account: str) -> int:
        with self._lock:
            return self._balances.get(normalize_address(account), 0)

    def total_supply(self) -> int:
        with self._lock:
            return self._total_supply

    def allowance(self, owner: str, spender: str) -> int:
        with self._lock:
            return self._allowances.get((normalize_address(owner), normalize_address(spender)), 0)

    def get_all_balances(self) -> dict[str, int]:
        with self._lock:
            return dict(self._balances)

    # --- Hooks ---

    def add_transfer_hook(self, hook: TransferHook) -> None:
        """Register a callback run before every transfer and transfer_from."""
        self._hooks.append(hook)

    def remove_transfer_hook(self, hook: TransferHook) -> None:
        self._hooks.remove(hook)

    def _run_hooks(self, sender: str, recipient: str, amount: int) -> None:
        for hook in list(self._hooks):
            hook(sender, recipient, amount)

    # --- Mutations ---

    def approve(self, owner: str, spender: str, amount: int) -> None:
        """Set spender's allowance over owner's balance."""
        value = S(amount).value
        with self._lock:
            self._allowances[(normalize_address(owner), normalize_address(spender))] = value

    def transfer(self, sender: str, recipient: str, amount: int) -> None:
        """Move amount from sender to recipient.

        Raises:
            InsufficientBalance: If sender's balance is below amount
        """
        sender = normalize_address(sender)
        recipient = normalize_address(recipient)
        self._run_hooks(sender, recipient, amount)
        with self._lock:
            self._move(sender, recipient, amount)

    def transfer_from(self, spender: str, owner: str, recipient: str, amount: int) -> None:
        """Move amount from owner to recipient, spending spender's allowance.

        Raises:
            InsufficientAllowance: If the allowance is below amount
            InsufficientBalance: If owner's balance is below amount
        """
        spender = normalize_address(spender)
        owner = normalize_address(owner)
        recipient = normalize_address(recipient)
        self._run_hooks(owner, recipient, amount)
        with self._lock:
            key = (owner, spender)
            allowed = self._allowances.get(key, 0)
            if allowed < amount:
                raise InsufficientAllowance(
                    f"{self.symbol}: allowance {allowed} of {spender} over {owner} < {amount}"
                )
            self._move(owner, recipient, amount)
            if allowed != UINT256_MAX:
                self._allowances[key] = allowed - amount

    def mint(self, recipient: str, amount: int) -> None:
        """Create amount new units for recipient."""
        recipient = normalize_address(recipient)
        with self._lock:
            self._total_supply = (S(self._total_supply) + S(amount)).value
            self._set_balance(recipient, self._balances.get(recipient, 0) + amount)
        logger.debug("token_minted", token=self.symbol, recipient=recipient, amount=amount)

    def burn(self, owner: str, amount: int) -> None:
        """Destroy amount units from owner.

        Raises:
            InsufficientBalance: If owner's balance is below amount
        """
        owner = normalize_address(owner)
        with self._lock:
            balance = self._balances.get(owner, 0)
            if balance < amount:
                raise InsufficientBalance(f"{self.symbol}: cannot burn {amount}, balance {balance}")
            self._set_balance(owner, balance - amount)
            self._total_supply -= amount
        logger.debug("token_burned", token=self.symbol, owner=owner, amount=amount)

    def _move(self, sender: str, recipient: str, amount: int) -> None:
        if amount < 0:
            raise ValueError(f"Transfer amount cannot be negative: {amount}")
        balance = self._balances.get(sender, 0)
        if balance < amount:
            raise InsufficientBalance(
                f"{self.symbol}: balance {balance} of {sender} < {amount}"
            )
        self._set_balance(sender, balance - amount)
        self._set_balance(recipient, self._balances.get(recipient, 0) + amount)

    def _set_balance(self, account: str, amount: int) -> None:
        if amount == 0:
            self._balances.pop(account, None)
        else:
            self._balances[account] = amount

    def __repr__(self) -> str:
        return f"FungibleToken({self.symbol}, {self._address}, supply={self._total_supply})"
