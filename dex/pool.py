"""Constant-product liquidity pool.

Pool is the single state machine of the system. It owns the reserves and
the outstanding claim count, prices swaps with dex.amm.pricing and
converts deposits and withdrawals with dex.amm.liquidity.

Every public operation runs as one atomic step:

    lock + reentrancy guard -> validate -> compute -> stage new state
    -> move assets and claims -> check staged state -> commit -> event

A failure in the move or check steps reverts every movement made so
far. Reserves and claims are only written in the commit step.
"""

from __future__ import annotations

import hashlib
import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum

import structlog

from dex.amm import liquidity, pricing
from dex.config import DEFAULT_POOL_CONFIG, LiquidityPolicy, PoolConfig
from dex.constants import LP_TOKEN_DECIMALS, LP_TOKEN_NAME, LP_TOKEN_SYMBOL, PRICE_SCALE
from dex.errors import (
    EmptyPool,
    InsufficientClaimBalance,
    InvalidAsset,
    InvariantViolation,
    ReentrantCall,
    SlippageExceeded,
    TransferFailed,
    ZeroInput,
)
from dex.ledger.base import AssetLedger, ClaimLedger, InsufficientBalance, LedgerError
from dex.ledger.token import FungibleToken
from dex.models.events import EventLog, LiquidityAdded, LiquidityRemoved, PoolEvent, Swap
from dex.models.types import is_valid_address, normalize_address
from dex.safe_int import S, is_uint256

logger = structlog.get_logger()


class Direction(str, Enum):
    """Swap direction."""

    A_TO_B = "a_to_b"
    B_TO_A = "b_to_a"


class PoolState(str, Enum):
    """Macro state: EMPTY has no claims outstanding, SEEDED has some."""

    EMPTY = "empty"
    SEEDED = "seeded"


@dataclass(frozen=True)
class PoolSnapshot:
    """Consistent read of all pool state fields."""

    address: str
    asset_a: str
    asset_b: str
    reserve_a: int
    reserve_b: int
    total_claims: int
    policy: LiquidityPolicy

    @property
    def state(self) -> PoolState:
        return PoolState.EMPTY if self.total_claims == 0 else PoolState.SEEDED


def derive_pool_address(asset_a: str, asset_b: str) -> str:
    """Deterministic pool address for an asset pair."""
    digest = hashlib.sha256(f"pool:{asset_a}:{asset_b}".encode()).hexdigest()
    return "0x" + digest[:40]


class _Settlement:
    """Asset and claim movements of one operation.

    Each completed leg records its inverse; rollback() replays them in
    reverse order.
    """

    def __init__(self, pool_address: str) -> None:
        self._pool = pool_address
        self._undo: list[tuple[str, Callable[[], None]]] = []

    def pull(self, ledger: AssetLedger, owner: str, amount: int) -> None:
        """Move amount from owner into pool custody."""
        if amount == 0:
            return
        ledger.transfer_from(self._pool, owner, self._pool, amount)
        self._undo.append(
            (f"refund {ledger.address}", lambda: ledger.transfer(self._pool, owner, amount))
        )

    def pay(self, ledger: AssetLedger, recipient: str, amount: int) -> None:
        """Move amount out of pool custody to recipient."""
        if amount == 0:
            return
        ledger.transfer(self._pool, recipient, amount)
        self._undo.append(
            (
                f"reclaim {ledger.address}",
                lambda: ledger.transfer(recipient, self._pool, amount),
            )
        )

    def mint(self, claims: ClaimLedger, recipient: str, amount: int) -> None:
        claims.mint(recipient, amount)
        self._undo.append(("burn claims", lambda: claims.burn(recipient, amount)))

    def burn(self, claims: ClaimLedger, owner: str, amount: int) -> None:
        claims.burn(owner, amount)
        self._undo.append(("remint claims", lambda: claims.mint(owner, amount)))

    def rollback(self) -> None:
        while self._undo:
            label, undo = self._undo.pop()
            try:
                undo()
            except LedgerError:
                # Custody no longer matches reserves for this leg
                logger.exception("settlement_rollback_failed", pool=self._pool, leg=label)


class Pool:
    """Two-asset constant-product pool with LP claims.

    Args:
        token_a: Ledger of asset A
        token_b: Ledger of asset B
        claims: Ledger of LP claims. Defaults to a fresh FungibleToken
            "DEX LP Token" living at the pool address.
        address: Pool account in the ledgers. Derived from the assets if None.
        config: Pool behavior (liquidity policy, invariant checking)

    Raises:
        InvalidAsset: If an asset identifier is missing, malformed, or both
            assets are the same
        InvariantViolation: If the claims ledger already has supply
    """

    def __init__(
        self,
        token_a: AssetLedger,
        token_b: AssetLedger,
        claims: ClaimLedger | None = None,
        *,
        address: str | None = None,
        config: PoolConfig = DEFAULT_POOL_CONFIG,
    ) -> None:
        if token_a is None or token_b is None:
            raise InvalidAsset("Both pooled assets are required")
        asset_a = _asset_id(token_a.address)
        asset_b = _asset_id(token_b.address)
        if asset_a == asset_b:
            raise InvalidAsset(f"Pooled assets must differ: {asset_a}")

        self.asset_a = asset_a
        self.asset_b = asset_b
        self.token_a = token_a
        self.token_b = token_b
        self.address = normalize_address(
            address or derive_pool_address(asset_a, asset_b), validate=True
        )
        if claims is None:
            claims = FungibleToken(
                LP_TOKEN_NAME, LP_TOKEN_SYMBOL, LP_TOKEN_DECIMALS, address=self.address
            )
        self.claims: ClaimLedger = claims
        if self.claims.total_supply() != 0:
            raise InvariantViolation(
                f"Claims ledger must start empty, has supply {self.claims.total_supply()}"
            )
        self.config = config
        self.events = EventLog()

        self._reserve_a = 0
        self._reserve_b = 0
        self._total_claims = 0
        self._lock = threading.RLock()
        self._entered = False

        logger.info(
            "pool_created",
            pool=self.address,
            asset_a=self.asset_a,
            asset_b=self.asset_b,
            policy=self.policy.value,
        )

    # --- Guard ---

    @contextmanager
    def _guard(self, operation: str) -> Iterator[None]:
        """Serialize operations and reject reentrant calls."""
        with self._lock:
            if self._entered:
                logger.warning("reentrant_call_rejected", pool=self.address, operation=operation)
                raise ReentrantCall(f"{operation} called while another pool operation is running")
            self._entered = True
            try:
                yield
            finally:
                self._entered = False

    # --- Read-only queries ---

    @property
    def policy(self) -> LiquidityPolicy:
        return self.config.liquidity_policy

    @property
    def reserve_a(self) -> int:
        with self._lock:
            return self._reserve_a

    @property
    def reserve_b(self) -> int:
        with self._lock:
            return self._reserve_b

    @property
    def total_claims(self) -> int:
        with self._lock:
            return self._total_claims

    @property
    def state(self) -> PoolState:
        return PoolState.EMPTY if self.total_claims == 0 else PoolState.SEEDED

    def get_reserves(self) -> tuple[int, int]:
        """Current (reserve_a, reserve_b)."""
        with self._lock:
            return self._reserve_a, self._reserve_b

    def get_price(self) -> int:
        """Price of A in units of B, scaled by PRICE_SCALE (1e18).

        Raises:
            EmptyPool: If reserve_a is zero
        """
        with self._lock:
            reserve_a, reserve_b = self._reserve_a, self._reserve_b
        if reserve_a == 0:
            raise EmptyPool("Empty pool has no price")
        return (S(reserve_b) * S(PRICE_SCALE) // S(reserve_a)).value

    def get_amount_out(self, amount_in: int, reserve_in: int, reserve_out: int) -> int:
        """Pricing formula over explicit reserves; see pricing.get_amount_out."""
        return pricing.get_amount_out(amount_in, reserve_in, reserve_out)

    def quote_swap(self, amount_in: int, direction: Direction) -> int:
        """Output a swap would produce against the current reserves.

        Raises:
            ZeroInput: If amount_in is zero
            EmptyPool: If the pool is not seeded
        """
        if amount_in <= 0:
            raise ZeroInput("Swap input must be positive")
        with self._lock:
            reserve_in, reserve_out = self._directed_reserves(direction)
        if reserve_in == 0 or reserve_out == 0:
            raise EmptyPool("Cannot price against an empty pool")
        return pricing.get_amount_out(amount_in, reserve_in, reserve_out)

    def balance_of(self, account: str) -> int:
        """Claims held by account."""
        return self.claims.balance_of(account)

    def total_supply(self) -> int:
        """Outstanding claims according to the claim ledger."""
        return self.claims.total_supply()

    def snapshot(self) -> PoolSnapshot:
        with self._lock:
            return PoolSnapshot(
                address=self.address,
                asset_a=self.asset_a,
                asset_b=self.asset_b,
                reserve_a=self._reserve_a,
                reserve_b=self._reserve_b,
                total_claims=self._total_claims,
                policy=self.policy,
            )

    # --- Liquidity ---

    def add_liquidity(self, sender: str, amount_a: int, amount_b: int) -> int:
        """Deposit both assets and mint claims to sender.

        The sender must have approved the pool for both amounts.

        Returns:
            Claims minted

        Raises:
            ZeroAmount: If either amount is zero
            RatioViolation: STRICT_RATIO pools only, B under-supplied
            InsufficientClaimsMinted: If the deposit rounds to zero claims
            TransferFailed: If either asset could not be pulled
            ReentrantCall: If called from inside another pool operation
        """
        sender = normalize_address(sender, validate=True)
        with self._guard("add_liquidity"):
            minted = liquidity.claims_for_deposit(
                amount_a,
                amount_b,
                self._reserve_a,
                self._reserve_b,
                self._total_claims,
                self.policy,
            )
            new_reserve_a = (S(self._reserve_a) + S(amount_a)).value
            new_reserve_b = (S(self._reserve_b) + S(amount_b)).value
            new_total = (S(self._total_claims) + S(minted)).value
            _validate_state(new_reserve_a, new_reserve_b, new_total)

            def legs(settlement: _Settlement) -> None:
                settlement.pull(self.token_a, sender, amount_a)
                settlement.pull(self.token_b, sender, amount_b)
                settlement.mint(self.claims, sender, minted)

            self._settle(legs, (new_reserve_a, new_reserve_b, new_total))
            self._commit(new_reserve_a, new_reserve_b, new_total)
            self._emit(
                LiquidityAdded(
                    provider=sender,
                    amount_a=amount_a,
                    amount_b=amount_b,
                    claims_minted=minted,
                )
            )
        return minted

    def remove_liquidity(self, sender: str, claims: int) -> tuple[int, int]:
        """Burn sender's claims and pay out the proportional reserves.

        Returns:
            (amount_a, amount_b) paid to sender, floored

        Raises:
            ZeroAmount: If claims is zero
            InsufficientClaimBalance: If sender holds fewer claims
            TransferFailed: If an asset could not be paid out
            ReentrantCall: If called from inside another pool operation
        """
        sender = normalize_address(sender, validate=True)
        with self._guard("remove_liquidity"):
            amount_a, amount_b = liquidity.amounts_for_withdrawal(
                claims,
                self._reserve_a,
                self._reserve_b,
                self._total_claims,
                claim_balance=self.claims.balance_of(sender),
            )
            new_reserve_a = (S(self._reserve_a) - S(amount_a)).value
            new_reserve_b = (S(self._reserve_b) - S(amount_b)).value
            new_total = (S(self._total_claims) - S(claims)).value
            _validate_state(new_reserve_a, new_reserve_b, new_total)

            def legs(settlement: _Settlement) -> None:
                try:
                    settlement.burn(self.claims, sender, claims)
                except InsufficientBalance as err:
                    raise InsufficientClaimBalance(str(err)) from err
                settlement.pay(self.token_a, sender, amount_a)
                settlement.pay(self.token_b, sender, amount_b)

            self._settle(legs, (new_reserve_a, new_reserve_b, new_total))
            self._commit(new_reserve_a, new_reserve_b, new_total)
            self._emit(
                LiquidityRemoved(
                    provider=sender,
                    amount_a=amount_a,
                    amount_b=amount_b,
                    claims_burned=claims,
                )
            )
        return amount_a, amount_b

    # --- Swaps ---

    def swap(
        self,
        sender: str,
        amount_in: int,
        direction: Direction,
        min_amount_out: int = 0,
    ) -> int:
        """Exchange amount_in of one asset for the other.

        The 0.3% fee stays in the input reserve, so reserve_a * reserve_b
        grows with every swap.

        Args:
            sender: Trader, must have approved the pool for amount_in
            amount_in: Exact input amount
            direction: A_TO_B or B_TO_A
            min_amount_out: Reject the swap if the output is below this

        Returns:
            Output amount paid to sender

        Raises:
            ZeroInput: If amount_in is zero
            EmptyPool: If either reserve is zero
            SlippageExceeded: If the output is below min_amount_out
            TransferFailed: If the input could not be pulled
            ReentrantCall: If called from inside another pool operation
        """
        sender = normalize_address(sender, validate=True)
        direction = Direction(direction)
        with self._guard("swap"):
            if amount_in <= 0:
                raise ZeroInput("Swap input must be positive")
            reserve_in, reserve_out = self._directed_reserves(direction)
            if reserve_in == 0 or reserve_out == 0:
                raise EmptyPool("Cannot swap against an empty pool")

            quote = pricing.simulate_swap(amount_in, reserve_in, reserve_out)
            if quote.amount_out < min_amount_out:
                raise SlippageExceeded(
                    f"Output {quote.amount_out} is below minimum {min_amount_out}"
                )
            new_in, new_out = quote.reserves_after
            if S(new_in) * S(new_out) < S(reserve_in) * S(reserve_out):
                raise InvariantViolation("Swap would decrease the constant product")

            if direction is Direction.A_TO_B:
                token_in, token_out = self.token_a, self.token_b
                new_reserve_a, new_reserve_b = new_in, new_out
            else:
                token_in, token_out = self.token_b, self.token_a
                new_reserve_a, new_reserve_b = new_out, new_in
            _validate_state(new_reserve_a, new_reserve_b, self._total_claims)

            def legs(settlement: _Settlement) -> None:
                settlement.pull(token_in, sender, amount_in)
                settlement.pay(token_out, sender, quote.amount_out)

            self._settle(legs, (new_reserve_a, new_reserve_b, self._total_claims))
            self._commit(new_reserve_a, new_reserve_b, self._total_claims)
            self._emit(
                Swap(
                    trader=sender,
                    asset_in=token_in.address,
                    asset_out=token_out.address,
                    amount_in=amount_in,
                    amount_out=quote.amount_out,
                )
            )
        return quote.amount_out

    def swap_a_for_b(self, sender: str, amount_in: int, min_amount_out: int = 0) -> int:
        return self.swap(sender, amount_in, Direction.A_TO_B, min_amount_out)

    def swap_b_for_a(self, sender: str, amount_in: int, min_amount_out: int = 0) -> int:
        return self.swap(sender, amount_in, Direction.B_TO_A, min_amount_out)

    # --- Invariants ---

    def check_invariants(self) -> None:
        """Verify reserve, claim and custody consistency.

        Raises:
            InvariantViolation: If any invariant does not hold
        """
        with self._lock:
            self._verify(self._reserve_a, self._reserve_b, self._total_claims)

    # --- Internals ---

    def _verify(self, reserve_a: int, reserve_b: int, total_claims: int) -> None:
        """Check a reserve/claims triple against the ledgers' current balances."""
        _validate_state(reserve_a, reserve_b, total_claims)
        supply = self.claims.total_supply()
        if supply != total_claims:
            raise InvariantViolation(f"Claim supply {supply} != total claims {total_claims}")
        custody_a = self.token_a.balance_of(self.address)
        custody_b = self.token_b.balance_of(self.address)
        if custody_a < reserve_a or custody_b < reserve_b:
            raise InvariantViolation(
                f"Reserves ({reserve_a}, {reserve_b}) exceed custody ({custody_a}, {custody_b})"
            )

    def _directed_reserves(self, direction: Direction) -> tuple[int, int]:
        if direction is Direction.A_TO_B:
            return self._reserve_a, self._reserve_b
        return self._reserve_b, self._reserve_a

    def _settle(
        self, legs: Callable[[_Settlement], None], staged: tuple[int, int, int]
    ) -> None:
        """Run the asset and claim legs, then check the staged state.

        Any failure, including a failed check, rolls the legs back before
        anything is committed.
        """
        settlement = _Settlement(self.address)
        try:
            legs(settlement)
            if self.config.check_invariants:
                self._verify(*staged)
        except LedgerError as err:
            settlement.rollback()
            raise TransferFailed(str(err)) from err
        except Exception:
            settlement.rollback()
            raise

    def _commit(self, reserve_a: int, reserve_b: int, total_claims: int) -> None:
        self._reserve_a = reserve_a
        self._reserve_b = reserve_b
        self._total_claims = total_claims

    def _emit(self, event: PoolEvent) -> None:
        self.events.append(event)
        logger.info(
            event.name,
            pool=self.address,
            reserve_a=self._reserve_a,
            reserve_b=self._reserve_b,
            total_claims=self._total_claims,
            **{k: v for k, v in event.to_dict().items() if k != "event"},
        )

    def __repr__(self) -> str:
        return (
            f"Pool({self.address}, reserves=({self._reserve_a}, {self._reserve_b}), "
            f"claims={self._total_claims})"
        )


def _asset_id(address: str | None) -> str:
    if not address or not is_valid_address(normalize_address(address)):
        raise InvalidAsset(f"Invalid asset identifier: {address!r}")
    return normalize_address(address)


def _validate_state(reserve_a: int, reserve_b: int, total_claims: int) -> None:
    for value in (reserve_a, reserve_b, total_claims):
        if not is_uint256(value):
            raise InvariantViolation(f"Pool value out of uint256 range: {value}")
    empty = (reserve_a == 0, reserve_b == 0, total_claims == 0)
    if any(empty) and not all(empty):
        raise InvariantViolation(
            f"Pool must be fully empty or fully seeded: reserves ({reserve_a}, {reserve_b}), "
            f"claims {total_claims}"
        )


def create_pool(
    token_a: AssetLedger,
    token_b: AssetLedger,
    *,
    claims: ClaimLedger | None = None,
    config: PoolConfig = DEFAULT_POOL_CONFIG,
) -> Pool:
    """Create an empty pool for two distinct assets."""
    return Pool(token_a, token_b, claims, config=config)


__all__ = [
    "Direction",
    "Pool",
    "PoolSnapshot",
    "PoolState",
    "create_pool",
    "derive_pool_address",
]
