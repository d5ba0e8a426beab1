"""Integration tests for the pool API."""

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from dex.api.deployment import deploy
from dex.api.endpoints import get_deployment
from dex.api.main import app, create_app
from dex.config import LiquidityPolicy, PoolConfig, ServerConfig
from dex.constants import LP_TOKEN_NAME
from tests.helpers import ALICE, BOB, TOKENS_10, TOKENS_50, TOKENS_100

E18 = str(10**18)
THOUSAND = str(1000 * 10**18)


@pytest.fixture
def deployment():
    return deploy()


@pytest.fixture
def client(deployment) -> Iterator[TestClient]:
    """Test client over a fresh deployment with ALICE and BOB funded."""
    app.dependency_overrides[get_deployment] = lambda: deployment
    test_client = TestClient(app)
    for account in (ALICE, BOB):
        response = test_client.post(
            "/faucet", json={"account": account, "amountA": THOUSAND, "amountB": THOUSAND}
        )
        assert response.status_code == 200
    yield test_client
    app.dependency_overrides.clear()


def add(client, sender, amount_a, amount_b):
    return client.post(
        "/pool/liquidity/add",
        json={"sender": sender, "amountA": str(amount_a), "amountB": str(amount_b)},
    )


class TestHealth:
    def test_health_check(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok", "policy": "proportional_min"}

    def test_health_reports_configured_policy(self):
        strict = ServerConfig(pool=PoolConfig(liquidity_policy=LiquidityPolicy.STRICT_RATIO))
        response = TestClient(create_app(strict)).get("/health")
        assert response.json()["policy"] == "strict_ratio"


class TestFaucet:
    def test_mints_and_approves(self, client, deployment):
        response = client.get(f"/pool/accounts/{ALICE}")
        assert response.json() == {
            "account": ALICE,
            "balanceA": THOUSAND,
            "balanceB": THOUSAND,
            "claims": "0",
        }
        assert deployment.token_a.allowance(ALICE, deployment.pool.address) > 0


class TestPoolLifecycle:
    def test_empty_pool_info(self, client, deployment):
        data = client.get("/pool").json()
        assert data["address"] == deployment.pool.address
        assert data["assetA"] == deployment.token_a.address
        assert data["reserveA"] == "0"
        assert data["totalClaims"] == "0"
        assert data["state"] == "empty"
        assert data["policy"] == "proportional_min"

    def test_seed_trade_withdraw(self, client, deployment):
        response = add(client, ALICE, TOKENS_100, TOKENS_100)
        assert response.status_code == 200
        assert response.json() == {"claimsMinted": str(TOKENS_100)}

        assert client.get("/pool/price").json() == {"price": E18, "scale": E18}

        quote = client.get("/pool/quote", params={"amount_in": TOKENS_10, "direction": "a_to_b"})
        assert quote.json()["amountOut"] == "9066108938801491315"

        swap = client.post(
            "/pool/swap",
            json={"sender": BOB, "amountIn": str(TOKENS_10), "direction": "a_to_b"},
        )
        assert swap.status_code == 200
        assert swap.json() == {
            "direction": "a_to_b",
            "amountIn": str(TOKENS_10),
            "amountOut": "9066108938801491315",
        }

        info = client.get("/pool").json()
        assert info["reserveA"] == str(110 * 10**18)
        assert info["reserveB"] == str(TOKENS_100 - 9066108938801491315)
        assert info["state"] == "seeded"

        removed = client.post("/pool/liquidity/remove", json={"sender": ALICE, "claims": str(TOKENS_50)})
        assert removed.status_code == 200
        assert removed.json() == {
            "amountA": str(55 * 10**18),
            "amountB": "45466945530599254342",
        }

        events = client.get("/pool/events").json()["events"]
        assert [e["event"] for e in events] == ["LiquidityAdded", "Swap", "LiquidityRemoved"]
        assert events[1]["trader"] == BOB
        assert events[1]["amount_out"] == "9066108938801491315"
        deployment.pool.check_invariants()

    def test_slippage_guard(self, client):
        add(client, ALICE, TOKENS_100, TOKENS_100)
        response = client.post(
            "/pool/swap",
            json={
                "sender": BOB,
                "amountIn": str(TOKENS_10),
                "direction": "b_to_a",
                "minAmountOut": str(TOKENS_10),
            },
        )
        assert response.status_code == 400
        assert response.json()["error"] == "SlippageExceeded"
        assert client.get("/pool/events").json()["events"][-1]["event"] == "LiquidityAdded"

    def test_second_provider_and_full_exit(self, client):
        add(client, ALICE, TOKENS_100, TOKENS_100)
        assert add(client, BOB, TOKENS_50, TOKENS_100).json() == {"claimsMinted": str(TOKENS_50)}
        assert client.get("/pool").json()["reserveB"] == str(200 * 10**18)

        for account, claims in ((ALICE, TOKENS_100), (BOB, TOKENS_50)):
            response = client.post(
                "/pool/liquidity/remove", json={"sender": account, "claims": str(claims)}
            )
            assert response.status_code == 200

        info = client.get("/pool").json()
        assert (info["reserveA"], info["reserveB"], info["totalClaims"]) == ("0", "0", "0")
        assert info["state"] == "empty"


class TestDeployment:
    def test_demo_assets(self):
        deployment = deploy()
        assert deployment.token_a.symbol == "TKA"
        assert deployment.token_b.symbol == "TKB"
        assert deployment.pool.claims.name == LP_TOKEN_NAME
        assert deployment.pool.asset_a == deployment.token_a.address

    def test_app_state_deployment_is_used_without_override(self):
        client = TestClient(create_app())
        assert client.get("/pool").json()["state"] == "empty"
