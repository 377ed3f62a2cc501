"""portal.errors

Error types shared by the matcher, the services and the HTTP layer.
"""


class PortalError(Exception):
    """Base application error."""


class ConfigError(PortalError):
    """Raised when a config file is missing or malformed."""


class KnowledgeError(PortalError):
    """Raised when a knowledge collection is empty or has duplicate ids."""


class ValidationError(PortalError):
    """Raised when a request payload is missing or invalid.

    The message is user facing and is returned as-is with a 400.
    """


class UpstreamError(PortalError):
    """Raised when the external generative-language API fails."""

    def __init__(self, message: str, status_code: int = 0) -> None:
        super().__init__(message)
        self.status_code = status_code
