# =============================================================================
# PER-KEY LOCKS
# =============================================================================
# One mutex per identifier so that concurrent first requests for the same
# post run a single upstream translation. Locks are reference counted and
# dropped once nobody holds or waits on them.

import threading
from contextlib import contextmanager
from typing import Dict, List

class KeyedLocks:
    def __init__(self):
        self._guard = threading.Lock()
        # key -> [lock, number of holders + waiters]
        self._locks: Dict[str, List] = {}
    
    @contextmanager
    def hold(self, key: str):
        with self._guard:
            slot = self._locks.get(key)
            if slot is None:
                slot = [threading.Lock(), 0]
                self._locks[key] = slot
            slot[1] += 1
        
        try:
            with slot[0]:
                yield
        finally:
            with self._guard:
                slot[1] -= 1
                if slot[1] == 0:
                    del self._locks[key]
    
    def active_keys(self) -> int:
        """Number of keys currently held or waited on"""
        with self._guard:
            return len(self._locks)
