import os
from typing import List

from slugy.core.transliteration import TABLES


class Settings:
    """Django-inspired settings container with explicit configuration."""

    def __init__(self) -> None:
        self.environment = os.environ.get("SLUGY_ENV", "base")
        self.log_level = os.environ.get("LOG_LEVEL", "INFO").upper()

        # Name of a table in slugy.core.transliteration.TABLES; "" or "none" disables it
        self.transliteration = (
            os.environ.get("SLUGY_TRANSLITERATION", "de").strip().lower()
        )
        self.slug_field = os.environ.get("SLUGY_SLUG_FIELD", "slug").strip()

        # Composer modules must be declared explicitly; no dynamic discovery.
        installed = os.environ.get("SLUGY_INSTALLED_COMPOSERS", "")
        self.INSTALLED_COMPOSERS: List[str] = [
            module.strip() for module in installed.split(",") if module.strip()
        ]

    @property
    def transliteration_enabled(self) -> bool:
        return self.transliteration not in ("", "none")

    def validate(self) -> dict:
        """Validate configuration and return any errors."""
        errors = {}

        if self.transliteration_enabled and self.transliteration not in TABLES:
            errors["transliteration"] = (
                f"Unknown transliteration table '{self.transliteration}' "
                f"(SLUGY_TRANSLITERATION); expected one of {sorted(TABLES)} or 'none'"
            )

        if not self.slug_field:
            errors["slug_field"] = "Missing slug output field (SLUGY_SLUG_FIELD)"

        return errors


settings = Settings()
