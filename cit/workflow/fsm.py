"""Interaction mode state machine using transitions library.

Modes:
- browse: moving through the commit list (initial)
- branch_select: choosing which containing branch to check out
- confirm: waiting for y/n before running the checkout

Usage:
    from cit.workflow.fsm import ModeFSM

    fsm = ModeFSM()
    fsm.open_branches()  # browse -> branch_select
    fsm.pick_branch()  # branch_select -> confirm
    fsm.finish()  # confirm -> browse
"""

import logging
from typing import Callable

from transitions import Machine

logger = logging.getLogger(__name__)


BROWSE = "browse"
BRANCH_SELECT = "branch_select"
CONFIRM = "confirm"

STATES = [BROWSE, BRANCH_SELECT, CONFIRM]

# Each trigger becomes a method on the FSM
TRANSITIONS = [
    # Selecting a commit
    {"trigger": "open_confirm", "source": BROWSE, "dest": CONFIRM},  # Branch tip or no branch at all
    {"trigger": "open_branches", "source": BROWSE, "dest": BRANCH_SELECT},

    # Branch chosen
    {"trigger": "pick_branch", "source": BRANCH_SELECT, "dest": CONFIRM},

    # Checkout executed (or declined)
    {"trigger": "finish", "source": CONFIRM, "dest": BROWSE},

    # One level of cancel, never past browse
    {"trigger": "back", "source": BRANCH_SELECT, "dest": BROWSE},
    {"trigger": "back", "source": CONFIRM, "dest": BROWSE},
]


class ModeFSM:
    """State machine for the browser's interaction mode.

    Wraps the transitions library:
    - Only explicit triggers, no auto transitions
    - Logs all transitions
    - Reports transitions to an optional callback
    """

    def __init__(self, on_transition: Callable[[str, str, str], None] | None = None):
        """Initialize FSM in browse mode.

        Args:
            on_transition: Optional callback(from_state, to_state, trigger) called after transitions
        """
        self.on_transition = on_transition

        self.machine = Machine(
            model=self,
            states=STATES,
            transitions=TRANSITIONS,
            initial=BROWSE,
            auto_transitions=False,  # Only explicit transitions
            send_event=True,  # Pass EventData to callbacks
            after_state_change="on_state_change",  # Callback after any transition
        )

    def on_state_change(self, event) -> None:
        """Callback after any state transition."""
        from_state = event.transition.source
        to_state = event.transition.dest
        trigger = event.event.name

        logger.debug(f"[FSM] {from_state} -> {to_state} ({trigger})")

        if self.on_transition:
            self.on_transition(from_state, to_state, trigger)

    def can(self, trigger: str) -> bool:
        """Check if a trigger can be executed in current state."""
        return trigger in self.machine.get_triggers(self.state)
