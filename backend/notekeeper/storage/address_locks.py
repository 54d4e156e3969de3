from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Iterator


class AddressLocks:
    """One mutex per record address.

    Operations on the same address are serialized; operations on different
    addresses never wait for each other. An entry lives only while some
    caller holds or waits for it.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        # address -> (lock, number of holders and waiters)
        self._locks: dict[str, tuple[threading.Lock, int]] = {}

    def _acquire_entry(self, address: str) -> threading.Lock:
        with self._guard:
            lock, users = self._locks.get(address, (None, 0))
            if lock is None:
                lock = threading.Lock()
            self._locks[address] = (lock, users + 1)
            return lock

    def _release_entry(self, address: str) -> None:
        with self._guard:
            lock, users = self._locks[address]
            if users <= 1:
                del self._locks[address]
            else:
                self._locks[address] = (lock, users - 1)

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)

    @contextmanager
    def hold(self, address: str) -> Iterator[None]:
        lock = self._acquire_entry(address)
        try:
            with lock:
                yield
        finally:
            self._release_entry(address)
