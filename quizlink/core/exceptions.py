"""
Domain errors raised by the candidate session subsystem.

Controllers translate these into HTTP responses; the websocket handler sends
them to the candidate as ``error`` messages before closing the socket.
"""


class AssessmentError(Exception):
    """Base class for every assessment domain error."""

    reason = "assessment_error"

    def __init__(self, message: str = ""):
        super().__init__(message or self.__class__.__doc__)
        self.message = message or self.__class__.__doc__


class NotFoundError(AssessmentError):
    """No assessment link matches this token."""

    reason = "not_found"


class ExpiredError(AssessmentError):
    """This assessment link has expired."""

    reason = "expired"


class AlreadyCompletedError(AssessmentError):
    """This assessment has already been completed."""

    reason = "already_completed"


class InvalidOptionError(AssessmentError):
    """Selected option is out of range for this question."""

    reason = "invalid_option"


class TransportFailureError(AssessmentError):
    """Notification could not be delivered."""

    reason = "transport_failure"


class SessionStateError(AssessmentError):
    """Action is not allowed in the current session state."""

    reason = "invalid_state"


class AssessmentLockedError(AssessmentError):
    """Assessment already has candidate links and can no longer be changed."""

    reason = "assessment_locked"


# Errors a candidate sees as "assessment unavailable"
UNAVAILABLE_ERRORS = (NotFoundError, ExpiredError, AlreadyCompletedError)
