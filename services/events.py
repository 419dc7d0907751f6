from decimal import Decimal
from typing import Callable, NamedTuple, Optional


class BalanceChanged(NamedTuple):
    balance: Decimal
    delta: Decimal
    reason: str                 # 'firing' | 'reset' | 'command' | 'run'
    entry_id: Optional[str] = None


Handler = Callable[[BalanceChanged], None]


class BalanceEvents:
    """Synchronous balance-changed notifications for whoever displays the balance."""

    def __init__(self):
        self._subscribers: list[Handler] = []

    def subscribe(self, handler: Handler) -> None:
        if handler not in self._subscribers:
            self._subscribers.append(handler)

    def unsubscribe(self, handler: Handler) -> None:
        if handler in self._subscribers:
            self._subscribers.remove(handler)

    def publish(self, event: BalanceChanged) -> None:
        for handler in list(self._subscribers):
            handler(event)
