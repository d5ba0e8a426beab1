"""Pydantic models for the pool HTTP surface.

Amounts travel as uint256 decimal strings, field names are camelCase on
the wire and snake_case in Python.
"""

from typing import Any

from pydantic import BaseModel, Field

from dex.config import LiquidityPolicy
from dex.models.events import PoolEvent
from dex.models.types import Address, Uint256
from dex.pool import Direction, PoolSnapshot, PoolState


class AddLiquidityRequest(BaseModel):
    """Deposit both assets into the pool."""

    sender: Address = Field(description="Provider account, must have approved the pool.")
    amount_a: Uint256 = Field(alias="amountA")
    amount_b: Uint256 = Field(alias="amountB")

    model_config = {"populate_by_name": True}


class AddLiquidityResponse(BaseModel):
    claims_minted: Uint256 = Field(alias="claimsMinted")

    model_config = {"populate_by_name": True}


class RemoveLiquidityRequest(BaseModel):
    """Burn claims for the proportional share of both reserves."""

    sender: Address
    claims: Uint256

    model_config = {"populate_by_name": True}


class RemoveLiquidityResponse(BaseModel):
    amount_a: Uint256 = Field(alias="amountA")
    amount_b: Uint256 = Field(alias="amountB")

    model_config = {"populate_by_name": True}


class SwapRequest(BaseModel):
    """Exact-input swap."""

    sender: Address
    amount_in: Uint256 = Field(alias="amountIn")
    direction: Direction
    min_amount_out: Uint256 = Field(
        default="0",
        alias="minAmountOut",
        description="Reject the swap if the output would be lower.",
    )

    model_config = {"populate_by_name": True}


class SwapResponse(BaseModel):
    direction: Direction
    amount_in: Uint256 = Field(alias="amountIn")
    amount_out: Uint256 = Field(alias="amountOut")

    model_config = {"populate_by_name": True}


class QuoteResponse(BaseModel):
    direction: Direction
    amount_in: Uint256 = Field(alias="amountIn")
    amount_out: Uint256 = Field(alias="amountOut")

    model_config = {"populate_by_name": True}


class PriceResponse(BaseModel):
    """Price of asset A in asset B, scaled by `scale`."""

    price: Uint256
    scale: Uint256

    model_config = {"populate_by_name": True}


class FaucetRequest(BaseModel):
    """Mint demo assets to an account and approve the pool to spend them."""

    account: Address
    amount_a: Uint256 = Field(default="0", alias="amountA")
    amount_b: Uint256 = Field(default="0", alias="amountB")

    model_config = {"populate_by_name": True}


class AccountBalances(BaseModel):
    account: Address
    balance_a: Uint256 = Field(alias="balanceA")
    balance_b: Uint256 = Field(alias="balanceB")
    claims: Uint256

    model_config = {"populate_by_name": True}


class PoolInfo(BaseModel):
    """Committed pool state."""

    address: Address
    asset_a: Address = Field(alias="assetA")
    asset_b: Address = Field(alias="assetB")
    reserve_a: Uint256 = Field(alias="reserveA")
    reserve_b: Uint256 = Field(alias="reserveB")
    total_claims: Uint256 = Field(alias="totalClaims")
    state: PoolState
    policy: LiquidityPolicy

    model_config = {"populate_by_name": True}

    @classmethod
    def from_snapshot(cls, snapshot: PoolSnapshot) -> "PoolInfo":
        return cls(
            address=snapshot.address,
            asset_a=snapshot.asset_a,
            asset_b=snapshot.asset_b,
            reserve_a=snapshot.reserve_a,
            reserve_b=snapshot.reserve_b,
            total_claims=snapshot.total_claims,
            state=snapshot.state,
            policy=snapshot.policy,
        )


class EventsResponse(BaseModel):
    """Audit log, oldest first. Integer amounts are decimal strings."""

    events: list[dict[str, Any]] = Field(default_factory=list)

    @classmethod
    def from_events(cls, events: tuple[PoolEvent, ...]) -> "EventsResponse":
        return cls(events=[event_to_wire(e) for e in events])


class ErrorResponse(BaseModel):
    """Body of every rejected pool operation (4xx)."""

    error: str = Field(description="Error kind, e.g. EmptyPool.")
    detail: str


def event_to_wire(event: PoolEvent) -> dict[str, Any]:
    """Serialize an event with ints as strings so uint256 values survive JSON."""
    return {k: str(v) if isinstance(v, int) else v for k, v in event.to_dict().items()}
