import re
import unicodedata
from typing import Any, Mapping, Optional

from slugy.core import transliteration
from slugy.utils.formatting import stringify

_WHITESPACE_RUN = re.compile(r"\s+")
_DISALLOWED = re.compile(r"[^A-Za-z0-9\s-]")
_WHITESPACE = re.compile(r"\s")
_HYPHEN_RUN = re.compile(r"-{2,}")


def slugify(value: Any, *, table: Optional[Mapping[str, str]] = None) -> str:
    """Return a lowercase, hyphen-delimited ASCII slug for ``value``.

    Steps, in order: transliterate, strip, NFD-decompose, collapse whitespace,
    drop everything but ASCII letters/digits/whitespace/hyphens, turn
    whitespace into hyphens, collapse hyphen runs, lowercase, and strip edge
    hyphens.

    ``table`` overrides the process-wide transliteration table for this call;
    pass ``{}`` to skip transliteration. Never raises: ``"Keep the hyphen:
    build-up"`` becomes ``"keep-the-hyphen-build-up"``.
    """
    text = stringify(value)

    translate = (
        transliteration.active_table()
        if table is None
        else transliteration.build_table(table)
    )
    if translate:
        text = text.translate(translate)

    text = text.strip()
    text = unicodedata.normalize("NFD", text)
    text = _WHITESPACE_RUN.sub(" ", text)
    text = _DISALLOWED.sub("", text)
    text = _WHITESPACE.sub("-", text)
    text = _HYPHEN_RUN.sub("-", text)
    text = text.lower()
    return text.strip("-")
