"""Error types for the action subsystem.

Error codes are what callers see on a failed ``ActionResult``. Exceptions here
never leave the execution wrapper.
"""

from enum import StrEnum


class ActionErrorCode(StrEnum):
    NO_EXECUTOR = "NO_EXECUTOR"  # configuration/deployment gap
    VALIDATION_ERROR = "VALIDATION_ERROR"  # expected, user-facing
    VALIDATION_CRASH = "VALIDATION_CRASH"  # executor bug
    EXECUTION_CRASH = "EXECUTION_CRASH"  # executor bug
    CLIENT_ERROR = "CLIENT_ERROR"  # reserved for consumers; never produced by the core


class ExecutorContractError(Exception):
    """Raised when an executor returns something that is not an action result.

    This is a developer error in the executor. The execution wrapper turns it
    into an EXECUTION_CRASH result.
    """

    def __init__(self, kind: str, message: str | None = None):
        self.kind = kind
        self.message = message or f"Executor for {kind} returned a non-conforming result"
        super().__init__(self.message)
