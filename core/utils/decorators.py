"""
Utility decorators and context managers.
"""

import time
from contextlib import contextmanager
from typing import Dict, Iterator


@contextmanager
def timer() -> Iterator[Dict[str, int]]:
    """
    Measure elapsed time of a block in milliseconds.

    The yielded dict gets its "ms" key in the finally clause, so read it
    after the with block.

    Example:
        >>> with timer() as t:
        ...     do_work()
        >>> elapsed = t["ms"]
    """
    result = {"ms": 0}
    start = time.perf_counter()
    try:
        yield result
    finally:
        result["ms"] = int(round((time.perf_counter() - start) * 1000))
