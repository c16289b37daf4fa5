"""Keeps the commit model in step with the repository.

Two paths:
- tick(): cheap, on a timer. Re-reads HEAD and moves the is_head flag, which
  catches checkouts done by other tools. New commits and branches are not
  picked up here.
- resync(): full refresh after a checkout made by cit itself.

Both hold the model lock, so a tick never interleaves with a resync.
"""

import logging
import threading
from pathlib import Path

from cit.git import LogUnavailable, OracleUnavailable, get_current_branch, get_head_sha
from cit.history.cache import BranchCache
from cit.history.commits import CommitModel, load_commits
from cit.history.resolver import BranchResolver
from cit.lib.constants import DEFAULT_POLL_INTERVAL

logger = logging.getLogger(__name__)


class Reconciler:
    """Periodic HEAD tracking plus the post-checkout resync."""

    def __init__(
        self,
        repo: Path,
        model: CommitModel,
        cache: BranchCache,
        resolver: BranchResolver | None = None,
        interval: float = DEFAULT_POLL_INTERVAL,
    ):
        self.repo = repo
        self.model = model
        self.cache = cache
        self.resolver = resolver
        self.interval = interval
        # Last seen checked-out branch, refreshed by tick()
        self.branch_name = ""
        self.attached = False
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    def tick(self) -> bool:
        """Refresh is_head flags. Returns True if any flag moved."""
        self.branch_name, self.attached = get_current_branch(self.repo)
        try:
            head_sha = get_head_sha(self.repo)
        except OracleUnavailable as e:
            logger.debug(f"[RECONCILE] HEAD unavailable, keeping flags: {e}")
            return False

        with self.model.lock:
            changed = self.model.mark_head(head_sha)
        if changed:
            logger.info(f"[RECONCILE] HEAD moved to {head_sha[:7]}")
        return changed

    def resync(self) -> None:
        """Drop every branch annotation, reload the log and re-mark HEAD.

        The bulk prefetch is started before the lock is released, so every
        lazy resolution for the new rows waits for it. It is not awaited here.
        """
        with self.model.lock:
            self.cache.invalidate_all()
            try:
                self.model.replace(load_commits(self.repo))
            except LogUnavailable as e:
                logger.warning(f"[RECONCILE] Log reload failed, keeping old list: {e}")
                self.model.reset_branches()
                self.tick()
            self.branch_name, self.attached = get_current_branch(self.repo)
            if self.resolver is not None:
                self.resolver.prefetch()
            logger.info(f"[RECONCILE] Resynced {len(self.model)} commits")

    def _run(self) -> None:
        while not self._stop.wait(self.interval):
            self.tick()

    def start(self) -> None:
        """Start ticking on a daemon thread."""
        if self._thread is not None and self._thread.is_alive():
            return
        self._stop.clear()
        self._thread = threading.Thread(
            target=self._run,
            name="cit-reconcile",
            daemon=True,
        )
        self._thread.start()

    def stop(self) -> None:
        self._stop.set()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=self.interval * 2)
        self._thread = None
