class CineMatchError(Exception):
    """Base class for every error raised by CineMatch."""


class ValidationFailure(CineMatchError):
    """The submitted preferences do not meet the submit guard."""


class RequestFailure(CineMatchError):
    """The oracle call failed or its reply did not match the declared schema."""


class FlowStateError(CineMatchError):
    """An operation was attempted in a flow state that does not allow it."""
