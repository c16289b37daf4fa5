"""Tests for cit.workflow.fsm module."""

import pytest
from transitions import MachineError

from cit.workflow.fsm import (
    ModeFSM,
    STATES,
    TRANSITIONS,
    BROWSE,
    BRANCH_SELECT,
    CONFIRM,
)


class TestFSMStates:
    """Tests for FSM state definitions."""

    def test_all_states_defined(self):
        assert set(STATES) == {"browse", "branch_select", "confirm"}

    def test_every_transition_uses_known_states(self):
        for t in TRANSITIONS:
            assert t["source"] in STATES
            assert t["dest"] in STATES


class TestFSMBasic:

    def test_initial_state_is_browse(self):
        assert ModeFSM().state == BROWSE

    def test_branch_select_path(self):
        fsm = ModeFSM()
        fsm.open_branches()
        assert fsm.state == BRANCH_SELECT
        fsm.pick_branch()
        assert fsm.state == CONFIRM
        fsm.finish()
        assert fsm.state == BROWSE

    def test_direct_confirm_path(self):
        fsm = ModeFSM()
        fsm.open_confirm()
        assert fsm.state == CONFIRM

    def test_back_from_branch_select(self):
        fsm = ModeFSM()
        fsm.open_branches()
        fsm.back()
        assert fsm.state == BROWSE

    def test_back_from_confirm(self):
        fsm = ModeFSM()
        fsm.open_confirm()
        fsm.back()
        assert fsm.state == BROWSE


class TestFSMGuards:
    """Invalid triggers are rejected."""

    def test_cannot_back_out_of_browse(self):
        fsm = ModeFSM()
        assert not fsm.can("back")
        with pytest.raises(MachineError):
            fsm.back()

    def test_branch_select_cannot_skip_to_finish(self):
        fsm = ModeFSM()
        fsm.open_branches()
        with pytest.raises(MachineError):
            fsm.finish()

    def test_confirm_cannot_reopen_branches(self):
        fsm = ModeFSM()
        fsm.open_confirm()
        assert not fsm.can("open_branches")


class TestFSMCallbacks:

    def test_on_transition_called(self):
        calls = []
        fsm = ModeFSM(on_transition=lambda f, t, trig: calls.append((f, t, trig)))
        fsm.open_branches()
        fsm.back()
        assert calls == [
            ("browse", "branch_select", "open_branches"),
            ("branch_select", "browse", "back"),
        ]
