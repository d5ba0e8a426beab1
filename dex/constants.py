"""Protocol constants for the constant-product pool.

Centralizes the pricing parameters and the LP token metadata.
"""

# Swap fee: 0.3%, applied to the input as amount_in * 997 / 1000
FEE_NUMERATOR = 997
FEE_DENOMINATOR = 1000

# Fixed-point scale for get_price() (1e18, matches 18-decimal tokens)
PRICE_SCALE = 10**18

# LP claim token metadata
LP_TOKEN_NAME = "DEX LP Token"
LP_TOKEN_SYMBOL = "DEX-LP"
LP_TOKEN_DECIMALS = 18

# Demo assets created by the HTTP surface at startup
DEMO_TOKEN_A = ("Token A", "TKA")
DEMO_TOKEN_B = ("Token B", "TKB")
