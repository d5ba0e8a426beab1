"""Pricing and liquidity math for the constant-product pool."""

from dex.amm.liquidity import amounts_for_withdrawal, claims_for_deposit, initial_claims
from dex.amm.pricing import SwapQuote, get_amount_in, get_amount_out, quote, simulate_swap

__all__ = [
    # Pricing
    "SwapQuote",
    "get_amount_out",
    "get_amount_in",
    "quote",
    "simulate_swap",
    # Liquidity accounting
    "initial_claims",
    "claims_for_deposit",
    "amounts_for_withdrawal",
]
