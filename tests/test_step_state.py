"""Tests for the expected transfer step order."""
import pytest

from transferflow.core.step_state import (
    TERMINAL_STEPS,
    TRANSITIONS,
    assert_transition,
    is_valid_transition,
)
from transferflow.core.transfer_step import STEP_TAGS
from transferflow.shared.errors import ErrorCode, IllegalTransitionError


class TestIsValidTransition:
    def test_filling_to_approval(self):
        assert is_valid_transition("Filling", "ApprovalRequired") is True

    def test_filling_skips_approval(self):
        assert is_valid_transition("Filling", "SubmitInstruction") is True

    def test_approval_to_submit(self):
        assert is_valid_transition("ApprovalRequired", "SubmitInstruction") is True

    def test_submit_to_wait(self):
        assert is_valid_transition("SubmitInstruction", "WaitForIndex") is True

    def test_edit_falls_back_to_filling(self):
        assert is_valid_transition("ApprovalRequired", "Filling") is True
        assert is_valid_transition("SubmitInstruction", "Filling") is True

    def test_filling_to_wait_invalid(self):
        assert is_valid_transition("Filling", "WaitForIndex") is False

    def test_submit_back_to_approval_invalid(self):
        assert is_valid_transition("SubmitInstruction", "ApprovalRequired") is False

    def test_terminal_steps_have_no_outgoing(self):
        for step in TERMINAL_STEPS:
            for target in STEP_TAGS:
                assert is_valid_transition(step, target) is False

    def test_unknown_step_returns_false(self):
        assert is_valid_transition("unknown", "Filling") is False

    def test_table_covers_every_step(self):
        assert set(TRANSITIONS) == set(STEP_TAGS)


class TestAssertTransition:
    def test_valid_does_not_raise(self):
        assert_transition("Filling", "SubmitInstruction")  # should not raise

    def test_invalid_raises(self):
        with pytest.raises(IllegalTransitionError, match="Illegal transfer step transition") as exc_info:
            assert_transition("WaitForIndex", "Filling")

        assert exc_info.value.code is ErrorCode.ILLEGAL_TRANSITION
        assert exc_info.value.current == "WaitForIndex"
        assert exc_info.value.target == "Filling"

    def test_invalid_is_value_error(self):
        with pytest.raises(ValueError):
            assert_transition("Filling", "WaitForIndex")
