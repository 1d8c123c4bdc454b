"""Inter-process advisory locks on a sidecar lock file."""

import contextlib
import os
import sys
import time
from pathlib import Path
from typing import Iterator

if sys.platform == "win32":
    import msvcrt

    def _try_lock(fd: int, shared: bool) -> None:
        # msvcrt has no shared mode; readers lock exclusively too
        os.lseek(fd, 0, os.SEEK_SET)
        msvcrt.locking(fd, msvcrt.LK_NBLCK, 1)

    def _unlock(fd: int) -> None:
        os.lseek(fd, 0, os.SEEK_SET)
        msvcrt.locking(fd, msvcrt.LK_UNLCK, 1)

else:
    import fcntl

    def _try_lock(fd: int, shared: bool) -> None:
        mode = fcntl.LOCK_SH if shared else fcntl.LOCK_EX
        fcntl.flock(fd, mode | fcntl.LOCK_NB)

    def _unlock(fd: int) -> None:
        fcntl.flock(fd, fcntl.LOCK_UN)


class LockTimeout(Exception):
    """Raised when another process holds the lock for longer than the timeout."""

    def __init__(self, path: Path, timeout: float):
        self.path = path
        self.timeout = timeout
        super().__init__(f"Could not lock {path} within {timeout:.1f}s")


@contextlib.contextmanager
def file_lock(
    lock_path: Path,
    shared: bool = False,
    timeout: float = 2.0,
    poll_interval: float = 0.02,
) -> Iterator[None]:
    """
    Hold a shared or exclusive lock on lock_path for the duration of the block.

    Locks are taken on a separate open file description, so two holders in
    the same process exclude each other just like two processes do.
    Raises LockTimeout if the lock cannot be taken within timeout seconds.
    """
    fd = os.open(lock_path, os.O_RDWR | os.O_CREAT, 0o644)
    try:
        deadline = time.monotonic() + timeout
        while True:
            try:
                _try_lock(fd, shared)
                break
            except OSError as exc:
                if time.monotonic() >= deadline:
                    raise LockTimeout(lock_path, timeout) from exc
                time.sleep(poll_interval)
        try:
            yield
        finally:
            _unlock(fd)
    finally:
        os.close(fd)
