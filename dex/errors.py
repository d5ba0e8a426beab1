"""Pool error classes.

Every failed pool operation raises one of these and leaves the pool
untouched. ``code`` is the stable error kind reported by the HTTP surface.
"""


class DexError(Exception):
    """Base error for pool operations."""

    code = "DexError"


class ZeroAmount(DexError):
    """A liquidity amount (deposit side or claims to burn) is zero."""

    code = "ZeroAmount"


class ZeroInput(DexError):
    """Swap or pricing input amount is zero."""

    code = "ZeroInput"


class InsufficientClaimsMinted(DexError):
    """Deposit is too small to mint a single claim unit."""

    code = "InsufficientClaimsMinted"


class InsufficientClaimBalance(DexError):
    """Caller tried to burn more claims than they hold."""

    code = "InsufficientClaimBalance"


class RatioViolation(DexError):
    """Strict-ratio deposit under-supplies asset B relative to the reserves."""

    code = "RatioViolation"


class EmptyPool(DexError):
    """Operation needs a seeded pool."""

    code = "EmptyPool"


class InvalidReserves(DexError):
    """Pricing was asked to run against a zero reserve."""

    code = "InvalidReserves"


class InsufficientLiquidity(DexError):
    """Requested output is not below the output reserve."""

    code = "InsufficientLiquidity"


class TransferFailed(DexError):
    """Moving an underlying asset failed (balance or allowance too low)."""

    code = "TransferFailed"


class SlippageExceeded(DexError):
    """Swap output fell below the caller's minimum."""

    code = "SlippageExceeded"


class ReentrantCall(DexError):
    """A pool operation was entered while another one is still running."""

    code = "ReentrantCall"


class InvalidAsset(DexError):
    """Asset identifiers are missing, malformed, or identical."""

    code = "InvalidAsset"


class InvariantViolation(DexError):
    """Committed pool state broke one of the reserve/claim invariants."""

    code = "InvariantViolation"


class ArithmeticOverflow(DexError, ArithmeticError):
    """An intermediate value left the uint256 range."""

    code = "ArithmeticOverflow"
