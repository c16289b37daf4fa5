"""Cursor, scrolling and modal interaction over the commit model.

Browse -> (BranchSelect ->) Confirm -> checkout -> Browse. Escape backs out
one level at a time and only asks to exit from Browse.
"""

import logging

from cit.history.commits import Commit, CommitModel
from cit.history.resolver import BranchResolver
from cit.workflow.checkout import CheckoutExecutor, CheckoutOutcome, CheckoutPlan
from cit.workflow.fsm import BRANCH_SELECT, BROWSE, CONFIRM, ModeFSM

logger = logging.getLogger(__name__)

DEFAULT_PAGE_HEIGHT = 20


class Navigator:
    """Interaction state for the commit browser.

    The UI calls one method per key press and renders from the public
    attributes; every method leaves scroll_offset <= cursor <
    scroll_offset + page_height (when there are commits).
    """

    def __init__(
        self,
        model: CommitModel,
        executor: CheckoutExecutor,
        resolver: BranchResolver | None = None,
        page_height: int = DEFAULT_PAGE_HEIGHT,
    ):
        self.model = model
        self.executor = executor
        self.resolver = resolver
        self.page_height = max(1, page_height)
        self.cursor = 0
        self.scroll_offset = 0

        # Only meaningful in branch_select / confirm
        self.candidates: list[str] = []
        self.selected = 0
        self.branch: str | None = None
        self.detached = False
        self.plan: CheckoutPlan | None = None

        self.status = ""
        self.fsm = ModeFSM(on_transition=self._on_transition)

    @property
    def mode(self) -> str:
        return self.fsm.state

    @property
    def current(self) -> Commit | None:
        if 0 <= self.cursor < len(self.model):
            return self.model[self.cursor]
        return None

    def _on_transition(self, from_state: str, to_state: str, trigger: str) -> None:
        if to_state == BROWSE:
            self.candidates = []
            self.selected = 0
            self.branch = None
            self.detached = False
            self.plan = None
        elif to_state == CONFIRM:
            commit = self.current
            if commit is not None:
                self.plan = self.executor.plan(commit, self.branch)

    # Cursor and scrolling

    def _clamp_cursor(self) -> None:
        last = len(self.model) - 1
        if last < 0:
            self.cursor = 0
        else:
            self.cursor = min(max(self.cursor, 0), last)

    def _follow_cursor(self) -> None:
        """Slide the window the minimum distance that brings the cursor back in view."""
        if self.cursor < self.scroll_offset:
            self.scroll_offset = self.cursor
        elif self.cursor >= self.scroll_offset + self.page_height:
            self.scroll_offset = self.cursor - self.page_height + 1

    def _move_to(self, index: int) -> None:
        self.cursor = index
        self._clamp_cursor()
        self._follow_cursor()

    def set_page_height(self, height: int) -> None:
        self.page_height = max(1, height)
        self._clamp_cursor()
        self._follow_cursor()

    def move_up(self) -> None:
        if self.mode == BROWSE:
            self._move_to(self.cursor - 1)

    def move_down(self) -> None:
        if self.mode == BROWSE:
            self._move_to(self.cursor + 1)

    def page_up(self) -> None:
        if self.mode == BROWSE:
            self._move_to(self.cursor - self.page_height)

    def page_down(self) -> None:
        if self.mode == BROWSE:
            self._move_to(self.cursor + self.page_height)

    def visible_range(self) -> range:
        end = min(self.scroll_offset + self.page_height, len(self.model))
        return range(self.scroll_offset, max(end, self.scroll_offset))

    def visible_commits(self) -> list[tuple[int, Commit]]:
        with self.model.lock:
            return [(i, self.model[i]) for i in self.visible_range()]

    def request_visible(self) -> int:
        """Queue branch resolution for the cursor row and the visible window."""
        if self.resolver is None:
            return 0
        submitted = 0
        with self.model.lock:
            indexes = [self.cursor] + list(self.visible_range())
            commits = [self.model[i] for i in indexes if 0 <= i < len(self.model)]
        for commit in commits:
            if self.resolver.request(commit):
                submitted += 1
        return submitted

    # Modal interaction

    def select(self) -> None:
        """Enter: pick the commit in browse, commit the branch choice in branch_select."""
        if self.mode == BROWSE:
            self._select_commit()
        elif self.mode == BRANCH_SELECT:
            self._pick_branch()

    def _select_commit(self) -> None:
        commit = self.current
        if commit is None or commit.is_uncommitted:
            return

        self.status = ""
        if commit.branch and self.executor.is_branch_tip(commit.branch, commit.sha):
            self.branch = commit.branch
            self.detached = False
            self.fsm.open_confirm()
            return

        candidates = self.executor.candidate_branches(commit)
        if not candidates:
            self.detached = True
            self.fsm.open_confirm()
            return

        self.fsm.open_branches()
        self.candidates = candidates
        self.selected = 0

    def _pick_branch(self) -> None:
        self.branch = self.candidates[self.selected]
        self.detached = False
        self.fsm.pick_branch()

    def select_prev(self) -> None:
        if self.mode == BRANCH_SELECT and self.selected > 0:
            self.selected -= 1

    def select_next(self) -> None:
        if self.mode == BRANCH_SELECT and self.selected < len(self.candidates) - 1:
            self.selected += 1

    def accept(self) -> CheckoutOutcome | None:
        """'y' in confirm: run the checkout and return to browse."""
        if not self.fsm.can("finish"):
            return None

        commit = self.current
        branch = self.branch
        self.fsm.finish()
        if commit is None:
            return None

        outcome = self.executor.execute(commit, branch)
        self.status = outcome.message

        index = self.model.index_of(commit.sha)
        self._move_to(index if index is not None else self.cursor)
        return outcome

    def decline(self) -> None:
        """'n' in confirm: back to browse without side effects."""
        if self.fsm.can("finish"):
            self.fsm.finish()

    def cancel(self) -> bool:
        """Escape. Returns True when the caller should exit (only from browse)."""
        if not self.fsm.can("back"):
            return True
        self.fsm.back()
        return False

    def prompt(self) -> str:
        """Status line text describing the pending action, if any."""
        if self.mode == CONFIRM and self.plan is not None:
            return self.plan.describe()
        if self.mode == BRANCH_SELECT:
            return "Select branch (←/→, Enter to confirm, Esc to cancel)"
        return ""
