"""Expected transfer step order – checked by the orchestrator, not the model."""
from transferflow.shared.errors import IllegalTransitionError

# Legal transitions: current step -> set of allowed next steps.
# Any non-final step may fall back to Filling when the user edits the form.
TRANSITIONS: dict[str, set[str]] = {
    "Filling":           {"ApprovalRequired", "SubmitInstruction"},
    "ApprovalRequired":  {"SubmitInstruction", "Filling"},
    "SubmitInstruction": {"WaitForIndex", "Filling"},
    "WaitForIndex":      set(),
}

TERMINAL_STEPS = {"WaitForIndex"}


def is_valid_transition(current: str, target: str) -> bool:
    """Return True if *current -> target* is a legal transition."""
    return target in TRANSITIONS.get(current, set())


def assert_transition(current: str, target: str) -> None:
    """Raise IllegalTransitionError if the transition is illegal."""
    if not is_valid_transition(current, target):
        raise IllegalTransitionError(current, target, TRANSITIONS.get(current, set()))
