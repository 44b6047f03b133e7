from typing import Callable, List, Any


class Signal:
    """Minimal signal implementation for decoupled communication."""

    def __init__(self) -> None:
        self._receivers: List[Callable[..., Any]] = []

    def connect(self, receiver: Callable[..., Any]) -> None:
        if receiver not in self._receivers:
            self._receivers.append(receiver)

    def disconnect(self, receiver: Callable[..., Any]) -> None:
        if receiver in self._receivers:
            self._receivers.remove(receiver)

    def send(self, sender: Any = None, **kwargs: Any) -> None:
        for receiver in list(self._receivers):
            receiver(sender=sender, **kwargs)


# Lifecycle / slug signals
slugy_ready = Signal()
composer_registered = Signal()
slug_assigned = Signal()
