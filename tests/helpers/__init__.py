"""Test helpers module for shared test utilities.

- constants: accounts, asset addresses and common amounts
- factories: token and pool factory functions
"""

from tests.helpers.constants import (
    ALICE,
    BOB,
    CAROL,
    E18,
    INITIAL_BALANCE,
    TOKEN_A,
    TOKEN_B,
    TOKENS_10,
    TOKENS_50,
    TOKENS_100,
)
from tests.helpers.factories import fund, make_pool, make_tokens

__all__ = [
    # Constants
    "ALICE",
    "BOB",
    "CAROL",
    "TOKEN_A",
    "TOKEN_B",
    "E18",
    "TOKENS_100",
    "TOKENS_50",
    "TOKENS_10",
    "INITIAL_BALANCE",
    # Factories
    "make_tokens",
    "make_pool",
    "fund",
]
