class ConfigurationError(Exception):
    """Raised when required configuration is missing or invalid."""


class ComposerRegistrationError(Exception):
    """Raised when a composer cannot be registered or its module cannot be loaded."""


class InvalidFieldSpec(TypeError):
    """Raised when a field spec has a shape slugy does not understand."""
