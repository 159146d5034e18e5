"""Project error hierarchy."""


class DevGateError(Exception):
    """Base error."""


class ConfigNotFoundError(DevGateError):
    """Raised when the parameters file cannot be located or read."""


class ConfigParseError(DevGateError):
    """Raised when the parameters file is not valid YAML."""
