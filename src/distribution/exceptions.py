"""
Report Distribution Errors

Every failure surfaced to callers derives from ReportDistributionError:
- LoadError: the distribution list could not be read
- ValidationError: the request was rejected before any transport call
- DispatchError: the transport refused or failed the single send attempt
"""

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from notifications.email_provider import DeliveryResult


class ReportDistributionError(Exception):
    """Base class for report distribution failures."""
    pass


class LoadError(ReportDistributionError):
    """Raised when a distribution list source is missing, unreadable or malformed."""
    pass


class ValidationError(ReportDistributionError):
    """Raised when a notification request is incomplete or resolves no recipients."""
    pass


class DispatchError(ReportDistributionError):
    """
    Raised when the mail transport does not accept the message.

    The failed DeliveryResult is kept on ``result`` when the transport
    produced one.
    """

    def __init__(self, message: str, result: Optional["DeliveryResult"] = None):
        super().__init__(message)
        self.result = result

    @property
    def error_code(self) -> Optional[str]:
        return self.result.error_code if self.result else None
