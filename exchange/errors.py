"""Exchange error classes.

Every error aborts the enclosing pool operation; the host transaction
restores all journaled state before the error reaches the caller.
"""


class ExchangeError(Exception):
    """Base error for exchange operations."""

    pass


class InvalidReserves(ExchangeError):
    """A zero reserve was supplied to the pricing math."""

    pass


class NoInputProvided(ExchangeError):
    """Swap invoked with no observed balance surplus of the input asset."""

    pass


class InsufficientLiquidity(ExchangeError):
    """Requested output is zero or would meet/exceed the available reserve."""

    pass


class InvariantViolation(ExchangeError):
    """Fee-adjusted constant product decreased across a swap."""

    pass


class InsufficientInitialLiquidity(ExchangeError):
    """First deposit does not cover the permanently locked shares."""

    pass


class ZeroLiquidityMinted(ExchangeError):
    """Deposit would mint zero shares."""

    pass


class ZeroLiquidityBurned(ExchangeError):
    """Burn would return zero of both assets."""

    pass


class ReserveOverflow(ExchangeError):
    """Balance exceeds the 112-bit reserve field."""

    pass


class InsufficientBalance(ExchangeError, ValueError):
    """Ledger holder cannot cover a transfer or burn."""

    pass
