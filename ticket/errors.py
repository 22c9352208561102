"""
Ticket Scanning Errors - Exception hierarchy shared by every scanning component
"""


class TicketScanError(Exception):
    """Base class for all ticket scanning errors."""


class ConfigurationError(TicketScanError):
    """No usable provider or required setting is missing. Never retried."""


class ImageReadError(TicketScanError):
    """The ticket image could not be read or encoded for transport."""


class TransientProviderError(TicketScanError):
    """Network failure, timeout or 5xx reply from a vision backend."""

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.status_code = status_code


class ResponseParseError(TicketScanError):
    """The backend replied, but the reply is not a usable JSON object."""

    def __init__(self, message: str, raw_content: str = None):
        super().__init__(message)
        self.raw_content = raw_content


class CatalogError(TicketScanError):
    """The movie catalog search could not be completed."""
