"""Exception hierarchy shared by the engine and the service layer."""


class CrediFlowError(Exception):
    """Base exception for all CrediFlow errors."""


class InvalidLoanTermsError(CrediFlowError, ValueError):
    """Raised when loan terms cannot produce a repayment schedule."""


class NotFoundError(CrediFlowError):
    """Raised when a referenced record does not exist."""


class InvalidStatusTransitionError(CrediFlowError):
    """Raised when a record is not in a state that allows the requested change."""
