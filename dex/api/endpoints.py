"""API endpoints for the pool."""

from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, Path, Query, Request
from pydantic import BeforeValidator

from dex.api.deployment import Deployment
from dex.constants import PRICE_SCALE
from dex.models.api import (
    AccountBalances,
    AddLiquidityRequest,
    AddLiquidityResponse,
    ErrorResponse,
    EventsResponse,
    FaucetRequest,
    PoolInfo,
    PriceResponse,
    QuoteResponse,
    RemoveLiquidityRequest,
    RemoveLiquidityResponse,
    SwapRequest,
    SwapResponse,
)
from dex.models.types import ADDRESS_PATTERN, validate_uint256
from dex.pool import Direction
from dex.safe_int import UINT256_MAX

logger = structlog.get_logger()

# Bodies returned by the DexError handler in dex.api.main
ERROR_RESPONSES: dict[int | str, dict[str, object]] = {
    400: {"model": ErrorResponse, "description": "Rejected pool operation"},
    409: {"model": ErrorResponse, "description": "Pool is empty"},
    423: {"model": ErrorResponse, "description": "Pool operation already running"},
}

router = APIRouter(prefix="/pool", responses=ERROR_RESPONSES)
faucet_router = APIRouter(responses={400: ERROR_RESPONSES[400]})


def get_deployment(request: Request) -> Deployment:
    """Dependency provider for the deployed pool.

    Override this in tests to inject a fresh deployment:
        app.dependency_overrides[get_deployment] = lambda: deployment
    """
    return request.app.state.deployment


@router.get("")
def pool_info(deployment: Deployment = Depends(get_deployment)) -> PoolInfo:
    """Reserves, outstanding claims and state of the pool."""
    return PoolInfo.from_snapshot(deployment.pool.snapshot())


@router.get("/price")
def price(deployment: Deployment = Depends(get_deployment)) -> PriceResponse:
    """Price of A in B, scaled by 1e18. 409 when the pool is empty."""
    return PriceResponse(price=deployment.pool.get_price(), scale=PRICE_SCALE)


@router.get("/quote")
def quote(
    amount_in: Annotated[
        str,
        BeforeValidator(validate_uint256),
        Query(description="Exact input amount as a decimal string"),
    ],
    direction: Direction,
    deployment: Deployment = Depends(get_deployment),
) -> QuoteResponse:
    """Output of a swap against the current reserves, without executing it."""
    amount_out = deployment.pool.quote_swap(int(amount_in), direction)
    return QuoteResponse(direction=direction, amount_in=amount_in, amount_out=amount_out)


@router.get("/events")
def events(deployment: Deployment = Depends(get_deployment)) -> EventsResponse:
    return EventsResponse.from_events(deployment.pool.events.snapshot())


@router.get("/accounts/{account}")
def account_balances(
    account: str = Path(pattern=ADDRESS_PATTERN),
    deployment: Deployment = Depends(get_deployment),
) -> AccountBalances:
    return AccountBalances(
        account=account,
        balance_a=deployment.token_a.balance_of(account),
        balance_b=deployment.token_b.balance_of(account),
        claims=deployment.pool.balance_of(account),
    )


@router.post("/liquidity/add")
def add_liquidity(
    body: AddLiquidityRequest,
    deployment: Deployment = Depends(get_deployment),
) -> AddLiquidityResponse:
    minted = deployment.pool.add_liquidity(body.sender, int(body.amount_a), int(body.amount_b))
    return AddLiquidityResponse(claims_minted=minted)


@router.post("/liquidity/remove")
def remove_liquidity(
    body: RemoveLiquidityRequest,
    deployment: Deployment = Depends(get_deployment),
) -> RemoveLiquidityResponse:
    amount_a, amount_b = deployment.pool.remove_liquidity(body.sender, int(body.claims))
    return RemoveLiquidityResponse(amount_a=amount_a, amount_b=amount_b)


@router.post("/swap")
def swap(
    body: SwapRequest,
    deployment: Deployment = Depends(get_deployment),
) -> SwapResponse:
    amount_out = deployment.pool.swap(
        body.sender,
        int(body.amount_in),
        body.direction,
        min_amount_out=int(body.min_amount_out),
    )
    return SwapResponse(direction=body.direction, amount_in=body.amount_in, amount_out=amount_out)


@faucet_router.post("/faucet")
def faucet(
    body: FaucetRequest,
    deployment: Deployment = Depends(get_deployment),
) -> AccountBalances:
    """Mint demo assets to an account and give the pool unlimited allowance."""
    pool = deployment.pool
    for token, amount in ((deployment.token_a, body.amount_a), (deployment.token_b, body.amount_b)):
        if int(amount) > 0:
            token.mint(body.account, int(amount))
        token.approve(body.account, pool.address, UINT256_MAX)

    logger.info(
        "faucet_dispensed",
        account=body.account,
        amount_a=body.amount_a,
        amount_b=body.amount_b,
    )
    return account_balances(body.account, deployment)
