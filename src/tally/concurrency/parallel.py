import itertools
import os
import threading
from collections.abc import Mapping
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from typing import (
    Any,
    Iterable,
    Iterator,
    List,
    Optional,
    TypeVar,
)

from tally.core.counter import Counter

_T = TypeVar("_T")


def _default_max_workers() -> int:
    """
    Return an explicit default for max_workers, typically the CPU count
    or 1 if that's unavailable.
    """
    return os.cpu_count() or 1


class Parallel:
    """
    Counting across worker threads without sharing a Counter.

    Each chunk of input is tallied into its own Counter, then the partial
    counters are combined with Add. Add is associative and commutative, so the
    result does not depend on how the input was split or in which order the
    chunks finished.
    """

    @staticmethod
    def count(
        iterable: Iterable[_T],
        *,
        max_workers: Optional[int] = None,
        chunk_size: Optional[int] = None,
        streaming: bool = False,
        **config: Any
    ) -> Counter:
        """
        Count the elements of ``iterable`` using a pool of worker threads.

        Args:
            iterable (Iterable[_T]): The elements to count.
            max_workers (int, optional): Maximum number of worker threads to spawn.
                Defaults to os.cpu_count() or 1 if that's None.
            chunk_size (int, optional): How many elements each task counts:
                - If streaming=False (the default): defaults to roughly len(iterable) // (4 * max_workers).
                - If streaming=True, defaults to 256 if not specified.
            streaming (bool): If True, read the input in chunks without
                materializing it first. The total length is not computed.
            **config: Counter configuration (``count_type``, ``hash_strategy``)
                for the partial and the final counters.

        Returns:
            Counter: Equal to ``Counter(iterable, **config)``. A Counter or Mapping
            input is read as element -> count in the calling thread; there is
            nothing to split.

        Raises:
            ValueError: If chunk_size is given and is not positive.
            Exception: Re-raises any exception from worker tasks.
        """
        if chunk_size is not None and chunk_size < 1:
            raise ValueError("chunk_size must be at least 1")

        if isinstance(iterable, (Counter, Mapping)):
            return Counter(iterable, **config)

        mw = max_workers or _default_max_workers()
        stop_event = threading.Event()

        if streaming:
            if chunk_size is None:
                chunk_size = 256
            chunks: Iterable[List[_T]] = Parallel._chunked_iter(iter(iterable), chunk_size)
        else:
            items = iterable if isinstance(iterable, list) else list(iterable)
            total = len(items)
            if total == 0:
                return Counter(**config)
            if chunk_size is None:
                chunk_size = max(1, total // (mw * 4) or 1)
            chunks = (items[start:start + chunk_size] for start in range(0, total, chunk_size))

        def count_chunk(sublist: List[_T]) -> Optional[Counter]:
            if stop_event.is_set():
                return None
            return Counter(sublist, **config)

        result: Counter = Counter(**config)
        futures: List[Future] = []
        with ThreadPoolExecutor(max_workers=mw) as executor:
            for sublist in chunks:
                if stop_event.is_set():
                    break
                futures.append(executor.submit(count_chunk, sublist))

            for f in as_completed(futures):
                try:
                    partial = f.result()
                except Exception:
                    stop_event.set()
                    raise
                if partial is not None:
                    result += partial
        return result

    @staticmethod
    def _chunked_iter(input_iter: Iterator[_T], sz: int) -> Iterator[List[_T]]:
        while True:
            batch = list(itertools.islice(input_iter, sz))
            if not batch:
                break
            yield batch

    @staticmethod
    def merge(counters: Iterable[Counter], **config: Any) -> Counter:
        """
        Combine counters with Add.

        Args:
            counters (Iterable[Counter]): Partial tallies, e.g. one per thread.
            **config: Configuration of the returned counter when ``counters`` is empty.

        Returns:
            Counter: A new counter; the inputs are left unchanged. Configured
            like the first input, or from ``config`` if there is none.
        """
        merged: Optional[Counter] = None
        for counter in counters:
            if merged is None:
                merged = counter.copy()
            else:
                merged += counter
        return merged if merged is not None else Counter(**config)
