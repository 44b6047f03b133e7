import logging
from typing import Any, Callable, Dict, Optional

from slugy.core import signals
from slugy.core.exceptions import ComposerRegistrationError

logger = logging.getLogger(__name__)

Composer = Callable[[Any], Optional[str]]


class ComposerRegistry:
    """Maps record types to functions building their slug source text.

    Lookup is by exact type; subclasses need their own registration.
    """

    def __init__(self) -> None:
        self._composers: Dict[type, Composer] = {}

    def register(self, record_type: type, composer: Composer) -> None:
        if not isinstance(record_type, type):
            raise ComposerRegistrationError(
                f"Composers are registered per type, got {record_type!r}"
            )
        if not callable(composer):
            raise ComposerRegistrationError(
                f"Composer for {record_type.__name__} is not callable"
            )

        if record_type in self._composers:
            logger.warning("Replacing slug composer for %s", record_type.__name__)
        self._composers[record_type] = composer
        signals.composer_registered.send(
            sender=self, record_type=record_type, composer=composer
        )

    def unregister(self, record_type: type) -> None:
        self._composers.pop(record_type, None)

    def get(self, record_type: type) -> Optional[Composer]:
        return self._composers.get(record_type)

    def clear(self) -> None:
        self._composers.clear()

    def __contains__(self, record_type: type) -> bool:
        return record_type in self._composers

    def __len__(self) -> int:
        return len(self._composers)


registry = ComposerRegistry()


def register_composer(record_type: type, composer: Composer) -> None:
    registry.register(record_type, composer)


def composer_for(record_type: type) -> Callable[[Composer], Composer]:
    """Decorator form of :func:`register_composer`.

    The composer receives the prior record with the changes applied: a dict
    for mappings, a ``dataclasses.replace`` copy for dataclasses, and a
    read-only ``MergedView`` for anything else. A ``MergedView`` supports
    attribute reads only; ``vars()``, ``dataclasses.asdict()`` and
    ``isinstance()`` checks against the record type do not work on it.
    """

    def decorator(composer: Composer) -> Composer:
        registry.register(record_type, composer)
        return composer

    return decorator


def unregister_composer(record_type: type) -> None:
    registry.unregister(record_type)


def get_composer(record_type: type) -> Optional[Composer]:
    return registry.get(record_type)


def clear_composers() -> None:
    registry.clear()
