from typing import Any


def stringify(value: Any) -> str:
    """Source text for a field value.

    ``None`` becomes the empty string, bytes are decoded as UTF-8 (undecodable
    bytes are dropped) and everything else goes through ``str()``.
    """
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8", errors="ignore")
    return str(value)
