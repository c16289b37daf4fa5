"""
cit browse - interactive commit history browser.

Thin textual layer over Navigator: key bindings call one navigator method,
then the commit list and status bar are redrawn from navigator state.
"""

import logging

from rich.markup import escape
from textual import events
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import Footer, Static

from cit.history.commits import Commit
from cit.lib.config import BrowserConfig
from cit.workflow.fsm import BRANCH_SELECT, CONFIRM
from cit.workflow.navigator import Navigator
from cit.workflow.reconcile import Reconciler

logger = logging.getLogger(__name__)


def format_row(commit: Commit, width: int | None = None) -> str:
    """Plain text for one commit row, cut to width."""
    display = f"{commit.short_sha} - {commit.date} - {commit.author} - {commit.message}"
    if commit.branch:
        display += f" [{commit.branch}]"
    if width is not None and width > 0 and len(display) > width:
        display = display[:width]
    return display


def style_row(commit: Commit, text: str, selected: bool) -> str:
    """Wrap a row in Rich markup."""
    text = escape(text)
    if selected:
        if commit.is_uncommitted:
            return f"[black on yellow]{text}[/]"
        return f"[black on white]{text}[/]"
    if commit.is_head or commit.is_uncommitted:
        return f"[yellow]{text}[/]"
    return text


def render_commit_list(navigator: Navigator, width: int | None = None) -> str:
    lines = []
    for index, commit in navigator.visible_commits():
        text = format_row(commit, width)
        lines.append(style_row(commit, text, index == navigator.cursor))
    if not lines:
        return "[dim]No commits[/dim]"
    return "\n".join(lines)


def render_branch_choices(navigator: Navigator) -> str:
    parts = []
    for i, name in enumerate(navigator.candidates):
        if i == navigator.selected:
            parts.append(f"[black on white] {escape(name)} [/]")
        else:
            parts.append(f" {escape(name)} ")
    return " ".join(parts)


def render_status(navigator: Navigator, branch_name: str = "", attached: bool = False) -> str:
    """Two status lines: mode prompt or summary, then choices or the last message."""
    if navigator.mode == BRANCH_SELECT:
        return f"{escape(navigator.prompt())}\n{render_branch_choices(navigator)}"

    if navigator.mode == CONFIRM:
        first = escape(navigator.prompt())
    else:
        first = f"Total commits: {len(navigator.model)}"
        commit = navigator.current
        if commit is not None and commit.branch:
            first += f" (Branch: {escape(commit.branch)})"
        if attached:
            first += f" | On branch {escape(branch_name)}"
        else:
            first += " | HEAD detached"

    if navigator.status:
        return f"{first}\n{escape(navigator.status)}"
    return first


class BrowseApp(App):
    """Main commit browser application."""

    CSS = """
    #commit-list {
        height: 1fr;
    }

    #status-bar {
        height: 2;
        background: $surface;
        padding: 0 1;
    }
    """

    BINDINGS = [
        Binding("up", "cursor_up", "Up", show=False),
        Binding("down", "cursor_down", "Down", show=False),
        Binding("pageup", "page_up", "PgUp", show=False),
        Binding("pagedown", "page_down", "PgDn", show=False),
        Binding("enter", "select", "Checkout"),
        Binding("left", "branch_prev", "Prev branch", show=False),
        Binding("right", "branch_next", "Next branch", show=False),
        Binding("y", "accept", "Yes", show=False),
        Binding("n", "decline", "No", show=False),
        Binding("escape", "cancel", "Back/Quit"),
    ]

    def __init__(self, navigator: Navigator, reconciler: Reconciler, config: BrowserConfig) -> None:
        super().__init__()
        self.navigator = navigator
        self.reconciler = reconciler
        self.config = config

    def compose(self) -> ComposeResult:
        yield Static(id="commit-list")
        yield Static(id="status-bar")
        yield Footer()

    def on_mount(self) -> None:
        self.title = f"cit: {self.config.repo_path}"
        self.reconciler.start()
        self.set_interval(self.config.poll_interval, self.redraw)
        self.call_after_refresh(self._sync_page_height)
        self.redraw()

    def on_unmount(self) -> None:
        self.reconciler.stop()
        if self.navigator.resolver is not None:
            self.navigator.resolver.shutdown()

    def on_resize(self, event: events.Resize) -> None:
        self._sync_page_height()

    def _sync_page_height(self) -> None:
        height = self.query_one("#commit-list", Static).size.height
        if height > 0:
            self.navigator.set_page_height(height)
        self.redraw()

    def redraw(self) -> None:
        """Render list and status from navigator state."""
        self.navigator.request_visible()

        commit_list = self.query_one("#commit-list", Static)
        width = commit_list.size.width or None
        commit_list.update(render_commit_list(self.navigator, width))

        status_bar = self.query_one("#status-bar", Static)
        status_bar.update(render_status(
            self.navigator,
            self.reconciler.branch_name,
            self.reconciler.attached,
        ))

    def action_cursor_up(self) -> None:
        self.navigator.move_up()
        self.redraw()

    def action_cursor_down(self) -> None:
        self.navigator.move_down()
        self.redraw()

    def action_page_up(self) -> None:
        self.navigator.page_up()
        self.redraw()

    def action_page_down(self) -> None:
        self.navigator.page_down()
        self.redraw()

    def action_select(self) -> None:
        self.navigator.select()
        self.redraw()

    def action_branch_prev(self) -> None:
        self.navigator.select_prev()
        self.redraw()

    def action_branch_next(self) -> None:
        self.navigator.select_next()
        self.redraw()

    def action_accept(self) -> None:
        outcome = self.navigator.accept()
        if outcome is not None and not outcome.success:
            self.notify(outcome.message, severity="error")
        self.redraw()

    def action_decline(self) -> None:
        self.navigator.decline()
        self.redraw()

    def action_cancel(self) -> None:
        if self.navigator.cancel():
            self.exit()
            return
        self.redraw()


def cmd_browse(navigator: Navigator, reconciler: Reconciler, config: BrowserConfig) -> int:
    """Run the browser until the user exits."""
    app = BrowseApp(navigator, reconciler, config)
    app.run()
    return 0
