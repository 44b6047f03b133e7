import importlib
import logging
from typing import List

from slugy.core import signals, transliteration
from slugy.core.composers import registry
from slugy.core.exceptions import ComposerRegistrationError, ConfigurationError
from slugy.core.logging import configure_logging
from slugy.settings import settings

logger = logging.getLogger(__name__)


def setup(project_settings=None, configure_logs: bool = True) -> List[str]:
    """Configure slugy once, at application start.

    Validates settings, activates the transliteration table and imports every
    module in ``INSTALLED_COMPOSERS`` so its composers register themselves.
    Returns the imported module paths.
    """
    project_settings = project_settings or settings
    if configure_logs:
        configure_logging(project_settings.log_level)

    logger.info("Loading settings from %s", project_settings.environment)
    errors = project_settings.validate()
    if errors:
        raise ConfigurationError(f"Configuration errors: {errors}")

    transliteration.activate(project_settings.transliteration)

    loaded = []
    for dotted_path in project_settings.INSTALLED_COMPOSERS:
        try:
            importlib.import_module(dotted_path)
        except ImportError as exc:
            raise ComposerRegistrationError(
                f"Could not import composer module {dotted_path}: {exc}"
            ) from exc
        loaded.append(dotted_path)
        logger.info("Loaded composers from %s", dotted_path)

    signals.slugy_ready.send(sender=project_settings, composers=len(registry))
    return loaded
