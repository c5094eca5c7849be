"""Asset doubles for reentrancy and failure tests."""

from collections.abc import Callable

from exchange.ledger import Token


class HookedToken(Token):
    """Token that runs a callback after every completed transfer.

    Usage:
        token = HookedToken(TOKEN1, initial_holder=WALLET, initial_supply=10**24)
        token.on_transfer = lambda sender, to, amount: exchange.sync()
    """

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.on_transfer: Callable[[str, str, int], None] | None = None
        self.transfer_calls: list[tuple[str, str, int]] = []  # Track calls for assertions

    def transfer(self, sender: str, to: str, amount: int) -> bool:
        result = super().transfer(sender, to, amount)
        self.transfer_calls.append((sender, to, amount))
        if self.on_transfer is not None:
            hook, self.on_transfer = self.on_transfer, None  # fire once
            hook(sender, to, amount)
        return result


class TaxedToken(Token):
    """Token that burns an extra `tax` from `source` on every transfer it sends.

    The source ends up poorer than the transferred amount alone explains,
    which is how a hostile asset would try to drain an exchange.
    """

    def __init__(self, *args, source: str, tax: int, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.source = source.lower()
        self.tax = tax

    def transfer(self, sender: str, to: str, amount: int) -> bool:
        result = super().transfer(sender, to, amount)
        if sender.lower() == self.source and self.tax:
            self.burn(sender, self.tax)
        return result
