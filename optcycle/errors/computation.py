"""Numeric runtime invocation failures."""

from typing import Optional

from .recovery import RecoverableError


class ComputationError(RecoverableError):
    """A bridge invocation failed inside or at the edge of the numeric runtime.

    The caller decides whether to continue without the value or abort the
    calculation. ``foreign_message`` holds the runtime's own error text.
    """

    def __init__(self, function_name: str, foreign_message: str,
                 module_name: Optional[str] = None):
        target = f"{module_name}.{function_name}" if module_name else function_name
        super().__init__(f"Computation '{target}' failed: {foreign_message}")
        self.function_name = function_name
        self.foreign_message = foreign_message
        self.module_name = module_name
