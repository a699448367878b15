"""Transfer tracker – holds the current step snapshot of one transfer."""
import logging
import uuid
from threading import RLock
from typing import List, Optional

from transferflow.core.events import EventBus, event_bus
from transferflow.core.step_state import assert_transition
from transferflow.core.transfer_step import (
    ApprovalRequired,
    Filling,
    TokenRawDenom,
    TransferStep,
    WaitForIndex,
    description,
    tag_of,
)


def approval_step(
    token: TokenRawDenom,
    required_amount: int,
    current_allowance: int
) -> Optional[ApprovalRequired]:
    """
    Return the approval step if the allowance is short, else None.

    This is where the ``current_allowance < required_amount`` precondition
    of ApprovalRequired gets established; ``None`` means approval can be
    skipped.
    """
    if current_allowance < required_amount:
        return ApprovalRequired(
            token=token,
            required_amount=required_amount,
            current_allowance=current_allowance,
        )
    return None


def format_step_event(
    transfer_id: str,
    step: TransferStep,
    previous: Optional[TransferStep] = None,
    message: Optional[str] = None
) -> str:
    """Build the ``key=value | ...`` line for a step change."""
    parts = [
        f"transfer_id={transfer_id[:8]}",
        f"step={tag_of(step)}",
    ]

    if previous is not None:
        parts.append(f"from={tag_of(previous)}")
    if isinstance(step, ApprovalRequired):
        # Token denoms are long hex strings, keep the head only
        token = str(step.token)
        parts.append(f"token={token[:10] + '...' if len(token) > 10 else token}")
        parts.append(f"required={step.required_amount}")
        parts.append(f"allowance={step.current_allowance}")
        parts.append(f"shortfall={step.shortfall}")
    if message:
        parts.append(f"msg={message}")

    return " | ".join(parts)


def log_step_event(
    logger: logging.Logger,
    transfer_id: str,
    step: TransferStep,
    previous: Optional[TransferStep] = None,
    message: Optional[str] = None
):
    """
    Log a structured transfer step event.

    Args:
        logger: Logger instance
        transfer_id: Transfer ID
        step: New step snapshot
        previous: Step being replaced (optional)
        message: Additional message (optional)
    """
    log_msg = format_step_event(transfer_id, step, previous, message)

    if isinstance(step, WaitForIndex):
        logger.info(log_msg)
    else:
        logger.debug(log_msg)


class TransferTracker:
    """
    Keeps the latest step of a transfer and publishes every change.

    Steps are replaced, never mutated. With ``strict`` the expected order
    Filling -> (ApprovalRequired ->)? SubmitInstruction -> WaitForIndex is
    enforced; setting the same step name again is always allowed and
    replaces the snapshot without adding to the history.
    """

    def __init__(
        self,
        transfer_id: Optional[str] = None,
        strict: bool = True,
        bus: Optional[EventBus] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the tracker at Filling.

        Args:
            transfer_id: Identifier used in logs; random if omitted
            strict: Reject steps out of the expected order
            bus: Event bus to publish on; module singleton if omitted
            logger: Optional logger instance
        """
        self.transfer_id = transfer_id or str(uuid.uuid4())
        self.strict = strict
        self.bus = bus if bus is not None else event_bus
        self.logger = logger or logging.getLogger(__name__)

        # Held while publishing so signals go out in the order steps are stored
        self._lock = RLock()
        self._current: TransferStep = Filling()
        self._history: List[TransferStep] = []

    @property
    def current(self) -> TransferStep:
        return self._current

    @property
    def history(self) -> tuple:
        """Previous snapshots with a different step name, oldest first."""
        return tuple(self._history)

    @property
    def description(self) -> str:
        return description(self._current)

    def advance(self, step: TransferStep) -> TransferStep:
        """
        Replace the current step with *step*.

        Raises:
            UnknownStepError: If *step* is not a transfer step
            IllegalTransitionError: If strict and the order is violated
        """
        target = tag_of(step)
        with self._lock:
            previous = self._current
            current = tag_of(previous)
            if target != current:
                if self.strict:
                    assert_transition(current, target)
                self._history.append(previous)
            self._current = step

            self._publish(step, previous)
        return step

    def reset(self) -> TransferStep:
        """Go back to Filling, e.g. after the indexer confirmed the transfer."""
        with self._lock:
            previous = self._current
            new = Filling()
            self._history.clear()
            self._current = new

            self._publish(new, previous, message="reset")
        return new

    def _publish(
        self,
        step: TransferStep,
        previous: TransferStep,
        message: Optional[str] = None
    ) -> None:
        log_step_event(
            self.logger, self.transfer_id, step,
            previous=previous, message=message
        )
        self.bus.step_changed.emit(step)
