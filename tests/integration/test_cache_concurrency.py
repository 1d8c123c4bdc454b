"""
Integration tests for concurrent access to the cache file.

Tests cover:
- Exclusive and shared lock semantics of file_lock
- Many writers racing on one cache file (threads and processes)
- Readers never observing a partially written document
"""

import multiprocessing
import sys
import threading
from datetime import timedelta
from pathlib import Path

import pytest

from casechart.domain.models import CacheStatus
from casechart.repositories import FileCacheRepository
from casechart.repositories.file import LockTimeout, file_lock

from tests.conftest import make_series

ROUNDS = 15


def series_for(writer: int):
    """A series whose length and values identify the writer."""
    return make_series([writer * 1000 + day for day in range(50 + writer)])


def write_many(path: str, writer: int, rounds: int) -> int:
    """Store the writer's series repeatedly; returns the number of completed writes."""
    repo = FileCacheRepository(Path(path), lock_timeout=10.0)
    series = series_for(writer)
    return sum(1 for _ in range(rounds) if repo.store(series) is not None)


# =============================================================================
# FILE LOCK TESTS
# =============================================================================


class TestFileLock:
    """Tests for the sidecar lock itself."""

    def test_exclusive_lock_blocks_second_holder(self, tmp_path: Path):
        """
        GIVEN one holder of an exclusive lock
        WHEN another holder asks for it with a short timeout
        THEN LockTimeout is raised
        """
        lock_path = tmp_path / "data.lock"

        with file_lock(lock_path, shared=False):
            with pytest.raises(LockTimeout):
                with file_lock(lock_path, shared=False, timeout=0.05):
                    pass

    def test_exclusive_lock_blocks_reader(self, tmp_path: Path):
        lock_path = tmp_path / "data.lock"

        with file_lock(lock_path, shared=False):
            with pytest.raises(LockTimeout):
                with file_lock(lock_path, shared=True, timeout=0.05):
                    pass

    @pytest.mark.skipif(sys.platform == "win32", reason="Windows locks are exclusive only")
    def test_shared_locks_coexist(self, tmp_path: Path):
        lock_path = tmp_path / "data.lock"

        with file_lock(lock_path, shared=True):
            with file_lock(lock_path, shared=True, timeout=0.05):
                pass

    def test_lock_is_released_after_block(self, tmp_path: Path):
        lock_path = tmp_path / "data.lock"

        with file_lock(lock_path, shared=False):
            pass
        with file_lock(lock_path, shared=False, timeout=0.05):
            pass

    def test_waiter_gets_lock_once_holder_releases(self, tmp_path: Path):
        """
        GIVEN a holder that releases the lock after a short delay
        WHEN a second holder waits with a long timeout
        THEN it gets the lock instead of timing out
        """
        lock_path = tmp_path / "data.lock"
        acquired = threading.Event()
        release = threading.Event()

        def hold() -> None:
            with file_lock(lock_path, shared=False):
                acquired.set()
                release.wait(5)

        holder = threading.Thread(target=hold)
        holder.start()
        assert acquired.wait(5)
        threading.Timer(0.1, release.set).start()

        with file_lock(lock_path, shared=False, timeout=5.0):
            pass
        holder.join(5)


# =============================================================================
# CONCURRENT WRITER TESTS
# =============================================================================


class TestConcurrentWriters:
    """Tests for racing writers and readers on one cache file."""

    def test_threads_never_expose_partial_documents(self, cache_path: Path):
        """
        GIVEN eight threads storing different series and a reader polling
        WHEN they all run at the same time
        THEN every successful read returns one of the written series intact
        """
        writers = range(1, 9)
        expected = {series_for(writer) for writer in writers}
        reader_repo = FileCacheRepository(cache_path, lock_timeout=10.0)
        stop = threading.Event()
        observed = []
        bad_reads = []

        def read_loop() -> None:
            while not stop.is_set():
                result = reader_repo.load(timedelta(hours=1))
                if result.status == CacheStatus.ABSENT:
                    continue
                if result.series in expected:
                    observed.append(result.series)
                else:
                    bad_reads.append(result)

        reader = threading.Thread(target=read_loop)
        reader.start()
        threads = [
            threading.Thread(target=write_many, args=(str(cache_path), writer, ROUNDS))
            for writer in writers
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(30)
        stop.set()
        reader.join(30)

        assert bad_reads == []
        final = reader_repo.load(timedelta(hours=1))
        assert final.status == CacheStatus.FRESH
        assert final.series in expected

    def test_processes_leave_a_valid_cache(self, cache_path: Path):
        """
        GIVEN four processes storing different series into one cache file
        WHEN they race
        THEN all writes complete and the file holds one complete series
        """
        context = multiprocessing.get_context("spawn")
        writers = range(1, 5)

        with context.Pool(len(writers)) as pool:
            completed = pool.starmap(
                write_many,
                [(str(cache_path), writer, ROUNDS) for writer in writers],
            )

        assert completed == [ROUNDS] * len(writers)
        result = FileCacheRepository(cache_path).load(timedelta(hours=1))
        assert result.series in {series_for(writer) for writer in writers}
        leftovers = [p.name for p in cache_path.parent.iterdir() if p.suffix == ".tmp"]
        assert leftovers == []
