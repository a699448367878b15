"""Error codes and exceptions for transferflow."""
from enum import Enum, auto


class ErrorCode(Enum):
    """Enumeration of all possible error codes in the library."""

    INCOMPLETE_MATCH = auto()
    UNKNOWN_STEP = auto()
    ILLEGAL_TRANSITION = auto()


class TransferFlowError(Exception):
    """Base exception for transferflow errors."""

    def __init__(self, code: ErrorCode, message: str):
        self.code = code
        self.message = message
        super().__init__(f"[{code.name}] {message}")


class IncompleteMatchError(TransferFlowError, TypeError):
    """Raised when a handler set does not cover exactly the known steps."""

    def __init__(self, message: str, missing=(), unexpected=()):
        self.missing = tuple(missing)
        self.unexpected = tuple(unexpected)
        super().__init__(ErrorCode.INCOMPLETE_MATCH, message)


class UnknownStepError(TransferFlowError, TypeError):
    """Raised when a value is not a transfer step."""

    def __init__(self, message: str):
        super().__init__(ErrorCode.UNKNOWN_STEP, message)


class IllegalTransitionError(TransferFlowError, ValueError):
    """Raised when a step change is out of the expected order."""

    def __init__(self, current: str, target: str, allowed):
        self.current = current
        self.target = target
        super().__init__(
            ErrorCode.ILLEGAL_TRANSITION,
            f"Illegal transfer step transition: {current!r} -> {target!r}. "
            f"Allowed from {current!r}: {sorted(allowed)}",
        )
