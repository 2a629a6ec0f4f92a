"""
Recovery strategy classifications for error handling.

These bases categorize errors by their recovery characteristics
and guide the error handling strategy of the caller.
"""


class RecoverableError(Exception):
    """Base for errors the caller may recover from, e.g. by using a fallback."""

    def __init__(self, message: str, **kwargs):
        super().__init__(message)
        self.recoverable = True


class UnrecoverableError(Exception):
    """Base for errors that must halt the run."""

    def __init__(self, message: str, **kwargs):
        super().__init__(message)
        self.recoverable = False
