"""Background branch resolution for visible commits."""

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import wait as wait_futures

from cit.history.cache import BranchCache
from cit.history.commits import Commit
from cit.lib.constants import DEFAULT_RESOLVER_WORKERS

logger = logging.getLogger(__name__)


class BranchResolver:
    """Bounded worker pool filling in Commit.branch from the BranchCache.

    A commit is submitted at most once while its resolution is pending, and
    never once branch_loaded is set. Results computed before a cache
    invalidation are not written back to the commit.

    The bulk tip prefetch runs on its own thread. Lazy resolutions wait for
    the latest prefetch first, so a branch tip is never shadowed by the
    checked-out branch that also contains it.
    """

    def __init__(self, cache: BranchCache, max_workers: int = DEFAULT_RESOLVER_WORKERS):
        self.cache = cache
        self._pool = ThreadPoolExecutor(
            max_workers=max_workers,
            thread_name_prefix="cit-branch",
        )
        self._prefetch_pool = ThreadPoolExecutor(
            max_workers=1,
            thread_name_prefix="cit-prefetch",
        )
        self._prefetch_future: Future | None = None
        self._pending: set[str] = set()
        self._lock = threading.Lock()
        self._closed = False

    def request(self, commit: Commit) -> bool:
        """Queue resolution for a commit. Returns True if work was submitted."""
        if commit.is_uncommitted or commit.branch_loaded:
            return False

        with self._lock:
            if self._closed or commit.sha in self._pending:
                return False
            self._pending.add(commit.sha)
            generation = self.cache.generation
            self._pool.submit(self._resolve, commit, generation)
        return True

    def _resolve(self, commit: Commit, generation: int) -> None:
        try:
            with self._lock:
                prefetch = self._prefetch_future
            if prefetch is not None:
                wait_futures([prefetch])

            branch = self.cache.resolve(commit.sha)
            if self.cache.generation != generation:
                logger.debug(f"[RESOLVE] {commit.short_sha}: cache invalidated, dropping result")
                return
            commit.branch = branch
            commit.branch_loaded = True
        except Exception:
            logger.exception(f"[RESOLVE] {commit.short_sha}: resolution crashed")
        finally:
            with self._lock:
                self._pending.discard(commit.sha)

    def prefetch(self) -> Future | None:
        """Start the bulk branch-tip prefetch without blocking."""
        with self._lock:
            if self._closed:
                return None
            self._prefetch_future = self._prefetch_pool.submit(self.cache.prefetch)
            return self._prefetch_future

    def shutdown(self, wait: bool = False) -> None:
        """Stop accepting work. Without wait, queued resolutions are dropped."""
        with self._lock:
            self._closed = True
        self._prefetch_pool.shutdown(wait=wait, cancel_futures=not wait)
        self._pool.shutdown(wait=wait, cancel_futures=not wait)
