"""Branch resolution cache.

Maps commit sha -> branch name ("" means no branch contains the commit).
Readers are the lazy per-commit resolutions. Writers are those same
resolutions and the bulk tip prefetch; invalidation after a checkout clears
everything. Tip entries always win over `branch --contains` answers.
"""

import logging
import threading
from pathlib import Path

from cit.git import OracleUnavailable, get_branch_tips, get_branches_containing
from cit.lib.rwlock import ReadWriteLock

logger = logging.getLogger(__name__)


class BranchCache:
    """Memoized sha -> branch lookups shared across threads.

    A failed containment lookup is not memoized, so the next request retries
    it; callers see "" in the meantime.
    """

    def __init__(self, repo: Path):
        self.repo = repo
        self._entries: dict[str, str] = {}
        self._lock = ReadWriteLock()
        self._generation = 0
        # sha -> event set when the in-flight lookup for it finishes
        self._inflight: dict[str, threading.Event] = {}
        self._inflight_lock = threading.Lock()

    @property
    def generation(self) -> int:
        """Bumped by every invalidate_all()."""
        with self._lock.read():
            return self._generation

    def __len__(self) -> int:
        with self._lock.read():
            return len(self._entries)

    def __contains__(self, sha: str) -> bool:
        with self._lock.read():
            return sha in self._entries

    def get(self, sha: str) -> str | None:
        with self._lock.read():
            return self._entries.get(sha)

    def put(self, sha: str, branch: str, generation: int | None = None) -> bool:
        """Store one entry. Dropped if generation is given and no longer current."""
        with self._lock.write():
            if generation is not None and generation != self._generation:
                return False
            self._entries[sha] = branch
            return True

    def update(self, mapping: dict[str, str], generation: int | None = None) -> int:
        """Store many entries at once. Returns how many were written."""
        with self._lock.write():
            if generation is not None and generation != self._generation:
                return 0
            self._entries.update(mapping)
            return len(mapping)

    def put_if_absent(self, sha: str, branch: str, generation: int | None = None) -> str | None:
        """Store an entry unless one exists. Returns the stored value, None if stale."""
        with self._lock.write():
            if generation is not None and generation != self._generation:
                return None
            return self._entries.setdefault(sha, branch)

    def invalidate_all(self) -> None:
        """Drop every entry; results computed before this call are discarded."""
        with self._lock.write():
            count = len(self._entries)
            self._entries.clear()
            self._generation += 1
        logger.info(f"[CACHE] Invalidated {count} entries")

    def resolve(self, sha: str) -> str:
        """
        Get the branch for sha, querying git on a miss.

        Concurrent callers for the same sha share one query.
        """
        cached = self.get(sha)
        if cached is not None:
            return cached

        with self._inflight_lock:
            event = self._inflight.get(sha)
            owner = event is None
            if owner:
                event = threading.Event()
                self._inflight[sha] = event

        if not owner:
            event.wait()
            cached = self.get(sha)
            return cached if cached is not None else ""

        try:
            # A prefetch may have landed while we were claiming the key
            cached = self.get(sha)
            if cached is not None:
                return cached
            return self._lookup(sha)
        finally:
            with self._inflight_lock:
                del self._inflight[sha]
            event.set()

    def _lookup(self, sha: str) -> str:
        generation = self.generation
        try:
            branches = get_branches_containing(self.repo, sha)
        except OracleUnavailable as e:
            logger.warning(f"[CACHE] Branch lookup failed for {sha[:7]}: {e}")
            return ""

        branch = branches[0] if branches else ""
        # A branch tip written by prefetch meanwhile takes precedence
        stored = self.put_if_absent(sha, branch, generation)
        if stored is None:
            logger.debug(f"[CACHE] Discarded stale result for {sha[:7]}")
            return branch
        return stored

    def prefetch(self) -> int:
        """Seed the cache with every branch tip in one query.

        Returns the number of entries written.
        """
        generation = self.generation
        try:
            tips = get_branch_tips(self.repo)
        except OracleUnavailable as e:
            logger.warning(f"[CACHE] Branch tip prefetch failed: {e}")
            return 0

        written = self.update(tips, generation)
        logger.debug(f"[CACHE] Prefetched {written} branch tips")
        return written
