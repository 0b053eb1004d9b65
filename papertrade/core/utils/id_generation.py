"""
Time-ordered identifier generation.
"""

import itertools
import threading
import time

_counter = itertools.count(1)
_counter_lock = threading.Lock()


def generate_id(prefix: str) -> str:
    """Generate a unique id that sorts by creation time.

    The millisecond timestamp is followed by a process-wide sequence number,
    so ids created within the same millisecond still sort in creation order.

    Args:
        prefix: Id prefix, e.g. "txn" or "order"

    Returns:
        Id of the form "<prefix>-<epoch_ms>-<seq>"
    """
    with _counter_lock:
        sequence = next(_counter)
    return f"{prefix}-{time.time_ns() // 1_000_000:013d}-{sequence:08d}"
