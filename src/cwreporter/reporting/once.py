"""
Sticky one-time flags for messages that should be logged only once.
"""

import threading
from typing import Hashable, Set


class OnceFlags:
    """
    A set of named latches; each one trips the first time it is checked.

    Flags are never reset, so a message guarded by one is logged at most once
    for the owner's lifetime.

    Example:
        if self._once.first("too_small"):
            logger.debug("...")
    """

    def __init__(self):
        self._tripped: Set[Hashable] = set()
        self._lock = threading.Lock()

    def first(self, key: Hashable) -> bool:
        """Trip `key` and return True if it had not been tripped before."""
        with self._lock:
            if key in self._tripped:
                return False
            self._tripped.add(key)
            return True
