import logging
from typing import Dict, Mapping, Optional, Union

from slugy.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

GERMAN = {
    "ä": "ae",
    "ö": "oe",
    "ü": "ue",
    "Ä": "AE",
    "Ö": "OE",
    "Ü": "UE",
    "ß": "ss",
}

TABLES: Dict[str, Dict[str, str]] = {
    "de": GERMAN,
}

_active: Optional[Dict[int, str]] = None


def build_table(mapping: Mapping[str, str]) -> Dict[int, str]:
    """Turn a character mapping into a ``str.translate`` table."""
    for key in mapping:
        if not isinstance(key, str) or len(key) != 1:
            raise ConfigurationError(
                f"Transliteration keys must be single characters, got {key!r}"
            )
    return str.maketrans(dict(mapping))


def activate(table: Union[str, Mapping[str, str], None]) -> None:
    """Set the process-wide table, by name or as a mapping.

    ``None``, ``""`` and ``"none"`` switch transliteration off. Call this during
    application setup only; the active table is read without locking.
    """
    global _active
    if table is None or (isinstance(table, str) and table.lower() in ("", "none")):
        _active = {}
        logger.info("Transliteration disabled")
        return

    if isinstance(table, str):
        name = table.lower()
        if name not in TABLES:
            raise ConfigurationError(f"Unknown transliteration table '{table}'")
        _active = build_table(TABLES[name])
        logger.info("Transliteration table '%s' activated", name)
        return

    _active = build_table(table)
    logger.info("Custom transliteration table activated (%s entries)", len(_active))


def active_table() -> Dict[int, str]:
    """The process-wide table; falls back to the settings before ``setup()`` runs.

    A bad table name in the settings disables transliteration here rather than
    raising, since ``slugify`` must not fail. ``setup()`` reports it instead.
    """
    global _active
    if _active is None:
        from slugy.settings import settings

        try:
            activate(settings.transliteration)
        except ConfigurationError as exc:
            logger.error("%s; transliteration disabled until setup() runs", exc)
            _active = {}
    return _active


def reset() -> None:
    global _active
    _active = None
