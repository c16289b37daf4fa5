"""Checkout execution.

Decides between attaching HEAD to a branch ("switch") and checking out a
bare commit ("detached"), runs git, and resyncs the model on success.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING

from cit.git import (
    OracleUnavailable,
    checkout_detached,
    combined_output,
    get_branch_sha,
    get_branches_containing,
    switch_branch,
)
from cit.history.commits import Commit
from cit.lib.constants import DEFAULT_STATUS_MAX_LENGTH, SHORT_SHA_LEN

if TYPE_CHECKING:
    from cit.workflow.reconcile import Reconciler

logger = logging.getLogger(__name__)


class CheckoutKind(Enum):
    SWITCH = "switch"
    DETACHED = "detached"


@dataclass(frozen=True)
class CheckoutPlan:
    """What a checkout of a commit will do."""
    kind: CheckoutKind
    target: str  # Branch name for SWITCH, full sha for DETACHED

    @property
    def detached(self) -> bool:
        return self.kind is CheckoutKind.DETACHED

    def describe(self) -> str:
        if self.detached:
            return f"Checkout commit {self.target[:SHORT_SHA_LEN]}? (detached HEAD) [y/n]"
        return f"Checkout branch '{self.target}'? [y/n]"


@dataclass
class CheckoutOutcome:
    """Result of an attempted checkout, ready for the status line."""
    success: bool
    message: str
    plan: CheckoutPlan | None = None


def truncate(text: str, limit: int) -> str:
    """Cut text to limit characters, marking the cut with '...'."""
    if len(text) > limit:
        return text[:limit] + "..."
    return text


class CheckoutExecutor:
    """Runs checkouts against the repository."""

    def __init__(
        self,
        repo: Path,
        reconciler: "Reconciler | None" = None,
        status_max_length: int = DEFAULT_STATUS_MAX_LENGTH,
    ):
        self.repo = repo
        self.reconciler = reconciler
        self.status_max_length = status_max_length

    def is_branch_tip(self, branch: str, sha: str) -> bool:
        """True if branch currently points at sha. Lookup failure counts as no."""
        if not branch:
            return False
        try:
            return get_branch_sha(self.repo, branch) == sha
        except OracleUnavailable as e:
            logger.warning(f"[CHECKOUT] {e}")
            return False

    def candidate_branches(self, commit: Commit) -> list[str]:
        """Branches containing commit; empty on lookup failure."""
        try:
            return get_branches_containing(self.repo, commit.sha)
        except OracleUnavailable as e:
            logger.warning(f"[CHECKOUT] {e}")
            return []

    def plan(self, commit: Commit, branch: str | None = None) -> CheckoutPlan:
        """Switch only when the chosen branch's tip is exactly this commit."""
        if branch and self.is_branch_tip(branch, commit.sha):
            return CheckoutPlan(CheckoutKind.SWITCH, branch)
        return CheckoutPlan(CheckoutKind.DETACHED, commit.sha)

    def execute(self, commit: Commit, branch: str | None = None) -> CheckoutOutcome:
        """
        Check out commit, via branch when it is that branch's tip.

        On failure nothing in the model or cache is touched, since the
        repository did not change.
        """
        if commit.is_uncommitted:
            logger.warning("[CHECKOUT] Refusing to check out the uncommitted changes entry")
            return CheckoutOutcome(
                success=False,
                message="Uncommitted changes cannot be checked out",
            )

        plan = self.plan(commit, branch)
        logger.info(f"[CHECKOUT] {plan.kind.value} -> {plan.target}")

        if plan.detached:
            result = checkout_detached(self.repo, plan.target)
        else:
            result = switch_branch(self.repo, plan.target)

        if not result.success:
            logger.warning(f"[CHECKOUT] Failed: {result.error_text}")
            return CheckoutOutcome(
                success=False,
                message=f"Checkout failed: {result.error_text}",
                plan=plan,
            )

        if self.reconciler is not None:
            self.reconciler.resync()

        output = combined_output(result) or "Checkout successful"
        output = truncate(output.replace("\n", " "), self.status_max_length)
        return CheckoutOutcome(
            success=True,
            message=f"Checkout successful: {output}",
            plan=plan,
        )
