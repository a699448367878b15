"""Transfer step model – the states a single transfer passes through.

A step is an immutable snapshot. The orchestrator builds a new one whenever
transfer progress changes; UI and dispatch code read it through ``match``,
``is_step`` and ``description``.

``match`` and ``matcher`` require a handler for every step name and reject
incomplete (or misspelled) handler sets before any handler runs, so adding a
step breaks every dispatch site loudly instead of falling through.
"""
from dataclasses import dataclass, fields
from typing import Any, Callable, ClassVar, Dict, NewType, Union

from transferflow.shared.errors import IncompleteMatchError, UnknownStepError

# Raw on-chain denomination of a token (e.g. a hex-encoded address).
TokenRawDenom = NewType("TokenRawDenom", str)

# Built by the external instruction builder; never inspected here.
Instruction = Any


@dataclass(frozen=True)
class Filling:
    """User is editing transfer parameters; nothing on chain yet."""

    _tag: ClassVar[str] = "Filling"


@dataclass(frozen=True)
class ApprovalRequired:
    """
    Allowance for ``token`` is below ``required_amount``.

    The caller must establish ``current_allowance < required_amount``
    before building this step; it is not re-checked here.
    """

    token: TokenRawDenom
    required_amount: int
    current_allowance: int

    _tag: ClassVar[str] = "ApprovalRequired"

    @property
    def shortfall(self) -> int:
        """Amount the allowance still has to be raised by."""
        return self.required_amount - self.current_allowance


@dataclass(frozen=True)
class SubmitInstruction:
    """Allowance is sufficient; the instruction is ready to send."""

    instruction: Instruction

    _tag: ClassVar[str] = "SubmitInstruction"


@dataclass(frozen=True)
class WaitForIndex:
    """Chain accepted the instruction; waiting for the indexer."""

    _tag: ClassVar[str] = "WaitForIndex"


TransferStep = Union[Filling, ApprovalRequired, SubmitInstruction, WaitForIndex]

_VARIANTS = (Filling, ApprovalRequired, SubmitInstruction, WaitForIndex)

STEP_TAGS = tuple(cls._tag for cls in _VARIANTS)

_BY_TYPE = {cls: cls._tag for cls in _VARIANTS}


def tag_of(step: TransferStep) -> str:
    """Return the step name of *step*."""
    try:
        return _BY_TYPE[type(step)]
    except KeyError:
        raise UnknownStepError(
            f"Not a transfer step: {step!r} ({type(step).__name__})"
        ) from None


def is_step(step: Any, tag: str) -> bool:
    """Return True if *step* is the step named *tag*."""
    return _BY_TYPE.get(type(step)) == tag


def _check_handlers(handlers: Dict[str, Callable[..., Any]]) -> None:
    missing = [tag for tag in STEP_TAGS if tag not in handlers]
    unexpected = sorted(name for name in handlers if name not in STEP_TAGS)
    if missing or unexpected:
        parts = []
        if missing:
            parts.append(f"missing handlers for {missing}")
        if unexpected:
            parts.append(f"unknown steps {unexpected}")
        raise IncompleteMatchError(
            "Transfer step match is not exhaustive: " + "; ".join(parts),
            missing=missing,
            unexpected=unexpected,
        )
    for name, handler in handlers.items():
        if not callable(handler):
            raise IncompleteMatchError(
                f"Handler for {name!r} is not callable: {handler!r}"
            )


def _dispatch(step: TransferStep, handlers: Dict[str, Callable[..., Any]]) -> Any:
    handler = handlers[tag_of(step)]
    payload = {f.name: getattr(step, f.name) for f in fields(step)}
    return handler(**payload)


def match(step: TransferStep, **handlers: Callable[..., Any]) -> Any:
    """
    Run the handler for *step*'s variant and return its result.

    Handlers are keyed by step name and receive the step's fields as
    keyword arguments (``Filling`` and ``WaitForIndex`` handlers take none).

    Raises:
        IncompleteMatchError: If *handlers* does not name exactly the
            known steps.
        UnknownStepError: If *step* is not a transfer step.
    """
    _check_handlers(handlers)
    return _dispatch(step, handlers)


def matcher(**handlers: Callable[..., Any]) -> Callable[[TransferStep], Any]:
    """
    Build a reusable one-argument dispatcher from *handlers*.

    The handler set is checked here, when the dispatcher is built, not on
    first use.
    """
    _check_handlers(handlers)
    table = dict(handlers)

    def dispatch(step: TransferStep) -> Any:
        return _dispatch(step, table)

    return dispatch


_describe = matcher(
    Filling=lambda: "Configure your transfer details",
    ApprovalRequired=lambda **_: "Approve token spending",
    SubmitInstruction=lambda **_: "Submit transfer to blockchain",
    WaitForIndex=lambda: "Waiting for indexer",
)


def description(step: TransferStep) -> str:
    """Return the human-readable label for a transfer step."""
    return _describe(step)
