"""Tests for cit.history.cache and cit.lib.rwlock."""

import threading
import time
from pathlib import Path
from unittest.mock import patch

from cit.git.errors import OracleUnavailable
from cit.history.cache import BranchCache
from cit.lib.rwlock import ReadWriteLock

REPO = Path("/repo")


class TestReadWriteLock:

    def test_readers_share_the_lock(self):
        lock = ReadWriteLock()
        lock.acquire_read()
        acquired = threading.Event()

        def reader():
            with lock.read():
                acquired.set()

        t = threading.Thread(target=reader)
        t.start()
        assert acquired.wait(timeout=2)
        t.join(timeout=2)
        lock.release_read()

    def test_writer_waits_for_readers(self):
        lock = ReadWriteLock()
        lock.acquire_read()
        written = threading.Event()

        def writer():
            with lock.write():
                written.set()

        t = threading.Thread(target=writer)
        t.start()
        assert not written.wait(timeout=0.1)
        lock.release_read()
        assert written.wait(timeout=2)
        t.join(timeout=2)

    def test_reader_waits_for_writer(self):
        lock = ReadWriteLock()
        lock.acquire_write()
        read = threading.Event()

        def reader():
            with lock.read():
                read.set()

        t = threading.Thread(target=reader)
        t.start()
        assert not read.wait(timeout=0.1)
        lock.release_write()
        assert read.wait(timeout=2)
        t.join(timeout=2)


class TestBranchCacheBasics:

    def test_get_missing_is_none(self):
        assert BranchCache(REPO).get("abc") is None

    def test_empty_string_is_a_cached_value(self):
        cache = BranchCache(REPO)
        cache.put("abc", "")
        assert cache.get("abc") == ""
        assert "abc" in cache

    def test_update(self):
        cache = BranchCache(REPO)
        assert cache.update({"a": "main", "b": "dev"}) == 2
        assert cache.get("a") == "main"
        assert cache.get("b") == "dev"
        assert len(cache) == 2

    def test_put_if_absent_keeps_existing_entry(self):
        cache = BranchCache(REPO)
        cache.put("a", "feature")
        assert cache.put_if_absent("a", "main") == "feature"
        assert cache.put_if_absent("b", "main") == "main"
        assert cache.get("a") == "feature"

    def test_put_if_absent_stale_generation(self):
        cache = BranchCache(REPO)
        generation = cache.generation
        cache.invalidate_all()
        assert cache.put_if_absent("a", "main", generation) is None
        assert "a" not in cache

    def test_invalidate_clears_and_bumps_generation(self):
        cache = BranchCache(REPO)
        cache.update({"a": "main"})
        before = cache.generation
        cache.invalidate_all()
        assert len(cache) == 0
        assert cache.generation == before + 1

    def test_stale_generation_write_dropped(self):
        cache = BranchCache(REPO)
        generation = cache.generation
        cache.invalidate_all()
        assert cache.put("a", "main", generation) is False
        assert cache.update({"a": "main"}, generation) == 0
        assert cache.get("a") is None


class TestResolve:
    """Test lazy resolution through `git branch --contains`."""

    @patch("cit.history.cache.get_branches_containing")
    def test_resolves_first_branch_and_memoizes(self, mock_contains):
        mock_contains.return_value = ["main", "dev"]
        cache = BranchCache(REPO)
        assert cache.resolve("abc") == "main"
        assert cache.resolve("abc") == "main"
        mock_contains.assert_called_once_with(REPO, "abc")

    @patch("cit.history.cache.get_branches_containing")
    def test_no_branch_is_memoized_as_empty(self, mock_contains):
        mock_contains.return_value = []
        cache = BranchCache(REPO)
        assert cache.resolve("abc") == ""
        assert cache.resolve("abc") == ""
        assert mock_contains.call_count == 1
        assert cache.get("abc") == ""

    @patch("cit.history.cache.get_branches_containing")
    def test_failure_returns_empty_but_is_retried(self, mock_contains):
        mock_contains.side_effect = [OracleUnavailable("boom"), ["main"]]
        cache = BranchCache(REPO)
        assert cache.resolve("abc") == ""
        assert cache.get("abc") is None
        assert cache.resolve("abc") == "main"
        assert mock_contains.call_count == 2

    @patch("cit.history.cache.get_branches_containing")
    def test_prefetched_entry_skips_query(self, mock_contains):
        cache = BranchCache(REPO)
        cache.put("abc", "feature")
        assert cache.resolve("abc") == "feature"
        mock_contains.assert_not_called()

    @patch("cit.history.cache.get_branches_containing")
    def test_concurrent_resolve_queries_once(self, mock_contains):
        """Two callers racing on the same sha share one query."""
        started = threading.Event()
        release = threading.Event()

        def slow_lookup(repo, sha):
            started.set()
            release.wait(timeout=5)
            return ["main"]

        mock_contains.side_effect = slow_lookup
        cache = BranchCache(REPO)
        results = []

        def worker():
            results.append(cache.resolve("abc"))

        first = threading.Thread(target=worker)
        first.start()
        assert started.wait(timeout=5)

        second = threading.Thread(target=worker)
        second.start()
        time.sleep(0.05)
        release.set()

        first.join(timeout=5)
        second.join(timeout=5)
        assert results == ["main", "main"]
        assert mock_contains.call_count == 1

    @patch("cit.history.cache.get_branches_containing")
    def test_result_dropped_if_invalidated_mid_query(self, mock_contains):
        cache = BranchCache(REPO)

        def lookup_then_invalidate(repo, sha):
            cache.invalidate_all()
            return ["old-branch"]

        mock_contains.side_effect = lookup_then_invalidate
        assert cache.resolve("abc") == "old-branch"
        assert cache.get("abc") is None

    @patch("cit.history.cache.get_branch_tips")
    @patch("cit.history.cache.get_branches_containing")
    def test_tip_from_prefetch_wins_over_lookup(self, mock_contains, mock_tips):
        """A tip prefetched while --contains runs is not overwritten."""
        cache = BranchCache(REPO)
        mock_tips.return_value = {"c2": "feature"}

        def lookup_with_prefetch(repo, sha):
            cache.prefetch()
            return ["main", "feature"]

        mock_contains.side_effect = lookup_with_prefetch
        assert cache.resolve("c2") == "feature"
        assert cache.get("c2") == "feature"

    @patch("cit.history.cache.get_branch_tips")
    @patch("cit.history.cache.get_branches_containing")
    def test_prefetch_replaces_earlier_lookup(self, mock_contains, mock_tips):
        mock_contains.return_value = ["main", "feature"]
        mock_tips.return_value = {"c2": "feature"}
        cache = BranchCache(REPO)
        assert cache.resolve("c2") == "main"
        cache.prefetch()
        assert cache.get("c2") == "feature"


class TestPrefetch:

    @patch("cit.history.cache.get_branch_tips")
    def test_seeds_tips(self, mock_tips):
        mock_tips.return_value = {"aaa": "main", "bbb": "feature"}
        cache = BranchCache(REPO)
        assert cache.prefetch() == 2
        assert cache.get("aaa") == "main"
        assert cache.get("bbb") == "feature"

    @patch("cit.history.cache.get_branch_tips")
    def test_failure_writes_nothing(self, mock_tips):
        mock_tips.side_effect = OracleUnavailable("boom")
        cache = BranchCache(REPO)
        assert cache.prefetch() == 0
        assert len(cache) == 0

    @patch("cit.history.cache.get_branch_tips")
    def test_prefetch_after_invalidate_repopulates(self, mock_tips):
        mock_tips.return_value = {"aaa": "main"}
        cache = BranchCache(REPO)
        cache.update({"zzz": "stale"})
        cache.invalidate_all()
        cache.prefetch()
        assert cache.get("aaa") == "main"
        assert cache.get("zzz") is None
        assert len(cache) == 1
