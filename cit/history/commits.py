"""Commit model: the ordered commit list shown by the browser.

The list is built once from `git log`, annotated in place by background
branch resolution and HEAD reconciliation, and rebuilt after a checkout.
"""

import dataclasses
import logging
import threading
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Iterator

from cit.git import (
    LogEntry,
    OracleUnavailable,
    get_head_sha,
    get_log,
    get_uncommitted_summary,
    get_user_name,
)
from cit.lib.constants import DATE_FORMAT, SHORT_SHA_LEN, UNCOMMITTED_SHA

if TYPE_CHECKING:
    from cit.history.resolver import BranchResolver

logger = logging.getLogger(__name__)


@dataclass
class Commit:
    """One row of the history list."""
    sha: str
    author: str
    date: str
    message: str
    branch: str = ""  # Resolved branch name, "" until loaded or when none
    branch_loaded: bool = False
    is_head: bool = False
    is_uncommitted: bool = False

    @property
    def short_sha(self) -> str:
        return self.sha[:SHORT_SHA_LEN]

    @classmethod
    def from_log_entry(cls, entry: LogEntry) -> "Commit":
        return cls(
            sha=entry.sha,
            author=entry.author,
            date=entry.date,
            message=entry.message,
        )


def make_uncommitted_commit(author: str, summary: str, now: datetime | None = None) -> Commit:
    """Build the pseudo-commit standing for pending local modifications."""
    now = now or datetime.now()
    return Commit(
        sha=UNCOMMITTED_SHA,
        author=author,
        date=now.strftime(DATE_FORMAT),
        message=f"Uncommitted Changes: {summary}",
        branch_loaded=True,
        is_uncommitted=True,
    )


class CommitModel:
    """Ordered commits plus the lock that serializes mutations of the list.

    Field writes on a single Commit (branch, branch_loaded) happen without the
    lock; anything touching many commits or replacing the list takes it.
    """

    def __init__(self, commits: list[Commit] | None = None):
        self.commits: list[Commit] = list(commits or [])
        self.lock = threading.RLock()

    def __len__(self) -> int:
        return len(self.commits)

    def __getitem__(self, index: int) -> Commit:
        return self.commits[index]

    def __iter__(self) -> Iterator[Commit]:
        return iter(list(self.commits))

    def mark_head(self, head_sha: str | None) -> bool:
        """Flag the commit matching head_sha. Returns True if any flag changed."""
        changed = False
        with self.lock:
            for commit in self.commits:
                if commit.is_uncommitted:
                    continue
                is_head = head_sha is not None and commit.sha == head_sha
                if commit.is_head != is_head:
                    commit.is_head = is_head
                    changed = True
        return changed

    def reset_branches(self) -> None:
        """Forget every resolved branch name.

        Commits are replaced by fresh copies, so a resolution still running
        against an old object cannot write its branch back into the list.
        """
        with self.lock:
            self.commits = [
                commit if commit.is_uncommitted
                else dataclasses.replace(commit, branch="", branch_loaded=False)
                for commit in self.commits
            ]

    def replace(self, commits: list[Commit]) -> None:
        with self.lock:
            self.commits = list(commits)

    def index_of(self, sha: str) -> int | None:
        with self.lock:
            for i, commit in enumerate(self.commits):
                if commit.sha == sha:
                    return i
        return None


def load_commits(repo: Path) -> list[Commit]:
    """
    Read the log, flag HEAD and prepend the uncommitted pseudo-commit.

    Raises:
        LogUnavailable: the log query failed
    """
    commits = [Commit.from_log_entry(e) for e in get_log(repo)]

    try:
        head_sha = get_head_sha(repo)
    except OracleUnavailable as e:
        # No HEAD highlight, not fatal (e.g. repository without commits)
        logger.info(f"[MODEL] HEAD unavailable: {e}")
        head_sha = None

    for commit in commits:
        commit.is_head = head_sha is not None and commit.sha == head_sha

    summary = get_uncommitted_summary(repo)
    if summary:
        commits.insert(0, make_uncommitted_commit(get_user_name(repo), summary))

    return commits


def build_model(repo: Path, resolver: "BranchResolver | None" = None) -> CommitModel:
    """
    Build the commit model and start the bulk branch prefetch.

    The model is usable right away; branch names appear as they resolve.

    Raises:
        LogUnavailable: the log query failed
    """
    model = CommitModel(load_commits(repo))
    logger.info(f"[MODEL] Loaded {len(model)} commits from {repo}")

    if resolver is not None:
        resolver.prefetch()

    return model
