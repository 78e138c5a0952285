"""
Per-frame work mapping.

Frames are independent, so they can be processed on a thread pool (OpenCV
and numpy release the GIL for the heavy parts). Results always come back in
input order.
"""

from concurrent.futures import ThreadPoolExecutor
from typing import Callable, List, Sequence, TypeVar


T = TypeVar("T")
R = TypeVar("R")


def map_frames(fn: Callable[[T], R], items: Sequence[T], workers: int = 1) -> List[R]:
    """
    Apply fn to every item, sequentially or on a thread pool.

    Args:
        fn: Per-frame function
        items: Frames (or frame paths) in sampling order
        workers: Number of worker threads; 1 runs inline

    Returns:
        Results in the same order as items. The first exception raised by
        fn propagates.
    """
    if workers <= 1 or len(items) <= 1:
        return [fn(item) for item in items]

    with ThreadPoolExecutor(max_workers=min(workers, len(items))) as executor:
        return list(executor.map(fn, items))
