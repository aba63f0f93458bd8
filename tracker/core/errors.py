"""
Error taxonomy for the tracker core.

Every failure path of register/submit/list ends in exactly one of these.
"""


class TrackerError(Exception):
    """Base class for tracker failures."""


class InputValidationError(TrackerError):
    """Malformed or missing input. Raised before any storage access."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class UnauthorizedError(TrackerError):
    """Unknown device or passkey mismatch. Deliberately carries no detail."""

    def __init__(self):
        super().__init__("Unauthorized")


class StorageError(TrackerError):
    """The storage collaborator failed. Not retried here."""

    def __init__(self, message: str = "storage operation failed"):
        super().__init__(message)
        self.message = message
