import collections
import sys
import threading
import time
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List

import numpy as np

from tally import ConcurrentCounter, Counter, Parallel, reverse_order

WORDS = "able babble table babble rabble table able fable scrabble".split()
EXTRA_WORDS = "cain and abel fable table cable".split()
OTHER_WORDS = "scrabble cabbie fable babble".split()


def check_gil_enabled() -> bool:
    """
    Helper to check if GIL is enabled (Python 3.13+),
    else assume True if the attribute is not found.
    """
    try:
        return sys._is_gil_enabled()
    except AttributeError:
        return True


def random_elements(items: int, distinct: int = 1000, seed: int = 0) -> List[int]:
    """Zipf-distributed integers, so a few elements dominate like real word counts."""
    rng = np.random.default_rng(seed)
    return (rng.zipf(1.3, size=items) % distinct).tolist()


###############################################################################
# Base Class for all counter benchmarks
###############################################################################
class BaseBenchmark(ABC):
    """
    Each derived class implements one timed workload with run_benchmark(...).
    """

    def __init__(self, name: str):
        self.name = name

    @abstractmethod
    def run_benchmark(
        self,
        callback: Callable[[Dict[str, Any]], None],
        items: int,
        workers: int
    ) -> None:
        """
        Execute the workload and call 'callback' with a dictionary
        containing measurement data, e.g.:
            {
                "duration": ...,
                "distinct": ...,
                "gil_enabled": ...
            }
        """
        pass

    def _report(self, callback, duration: float, items: int, **extra) -> None:
        print(f"[{self.name}] {items:,} ops completed in {duration:.4f} seconds.")
        data = {"duration": duration, "gil_enabled": check_gil_enabled()}
        data.update(extra)
        callback(data)


###############################################################################
# Single-threaded workloads
###############################################################################
class CountIterableBenchmark(BaseBenchmark):
    def __init__(self):
        super().__init__("count_iterable")

    def run_benchmark(self, callback, items, workers):
        data = random_elements(items)
        start = time.perf_counter()
        counter = Counter(data)
        counts_of_counts = Counter(counter.values())
        duration = time.perf_counter() - start
        self._report(callback, duration, items, distinct=len(counter), distinct_counts=len(counts_of_counts))


class CollectionsCounterBenchmark(BaseBenchmark):
    """Baseline: the standard library's collections.Counter on the same input."""

    def __init__(self):
        super().__init__("collections_counter")

    def run_benchmark(self, callback, items, workers):
        data = random_elements(items)
        start = time.perf_counter()
        counter = collections.Counter(data)
        duration = time.perf_counter() - start
        self._report(callback, duration, items, distinct=len(counter))


class IndexedUpdateBenchmark(BaseBenchmark):
    def __init__(self):
        super().__init__("indexed_update")

    def run_benchmark(self, callback, items, workers):
        data = random_elements(items)
        counter = Counter()
        start = time.perf_counter()
        for element in data:
            counter[element] += 1
        duration = time.perf_counter() - start
        self._report(callback, duration, items, distinct=len(counter))


class WordArithmeticBenchmark(BaseBenchmark):
    def __init__(self):
        super().__init__("word_arithmetic")

    def run_benchmark(self, callback, items, workers):
        rounds = max(1, items // len(WORDS))
        start = time.perf_counter()
        for _ in range(rounds):
            counts = Counter(WORDS)
            counts += EXTRA_WORDS
            difference = counts - Counter(OTHER_WORDS)
        duration = time.perf_counter() - start
        self._report(callback, duration, rounds * len(WORDS), distinct=len(difference))


class MostCommonOrderedBenchmark(BaseBenchmark):
    def __init__(self):
        super().__init__("most_common_ordered")

    def run_benchmark(self, callback, items, workers):
        counter = Counter(random_elements(items, distinct=items))
        start = time.perf_counter()
        ranked = counter.most_common_ordered()
        duration = time.perf_counter() - start
        self._report(callback, duration, len(ranked), distinct=len(counter))


class KMostCommonBenchmark(BaseBenchmark):
    def __init__(self, k: int = 10):
        super().__init__("k_most_common_ordered")
        self.k = k

    def run_benchmark(self, callback, items, workers):
        counter = Counter(random_elements(items, distinct=items))
        start = time.perf_counter()
        top = counter.k_most_common_ordered(self.k)
        duration = time.perf_counter() - start
        assert top == counter.most_common_ordered()[:self.k]
        self._report(callback, duration, len(counter), distinct=len(counter), k=self.k)


class TiebreakerBenchmark(BaseBenchmark):
    def __init__(self):
        super().__init__("most_common_tiebreaker")

    def run_benchmark(self, callback, items, workers):
        counter = Counter(random_elements(items, distinct=items))
        start = time.perf_counter()
        ranked = counter.most_common_tiebreaker(reverse_order)
        duration = time.perf_counter() - start
        self._report(callback, duration, len(ranked), distinct=len(counter))


###############################################################################
# Threaded workloads
###############################################################################
class ConcurrentCounterThreadsBenchmark(BaseBenchmark):
    def __init__(self):
        super().__init__("concurrent_counter_threads")

    def run_benchmark(self, callback, items, workers):
        print(f"\n[{self.name}] GIL Enabled: {check_gil_enabled()}")
        data = random_elements(items)
        per_worker = [data[i::workers] for i in range(workers)]
        counter = ConcurrentCounter[int]()

        def adder(chunk):
            for element in chunk:
                counter.add(element)

        threads = [threading.Thread(target=adder, args=(chunk,)) for chunk in per_worker]

        print(f"[{self.name}] Starting {workers} adder threads...")
        start = time.perf_counter()
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        duration = time.perf_counter() - start

        assert counter.total() == items
        self._report(callback, duration, items, distinct=counter.distinct())


class ThreadLocalMergeBenchmark(BaseBenchmark):
    """One private Counter per thread, merged into a ConcurrentCounter at the end."""

    def __init__(self):
        super().__init__("thread_local_merge")

    def run_benchmark(self, callback, items, workers):
        print(f"\n[{self.name}] GIL Enabled: {check_gil_enabled()}")
        data = random_elements(items)
        per_worker = [data[i::workers] for i in range(workers)]
        shared = ConcurrentCounter[int]()

        def worker(chunk):
            shared.merge(Counter(chunk))

        threads = [threading.Thread(target=worker, args=(chunk,)) for chunk in per_worker]

        start = time.perf_counter()
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        duration = time.perf_counter() - start

        assert shared.total() == items
        self._report(callback, duration, items, distinct=shared.distinct())


class ParallelCountBenchmark(BaseBenchmark):
    def __init__(self):
        super().__init__("parallel_count")

    def run_benchmark(self, callback, items, workers):
        print(f"\n[{self.name}] GIL Enabled: {check_gil_enabled()}")
        data = random_elements(items)
        start = time.perf_counter()
        counter = Parallel.count(data, max_workers=workers)
        duration = time.perf_counter() - start
        self._report(callback, duration, items, distinct=len(counter))


###############################################################################
# BenchmarkFactory – Return counter workloads by name
###############################################################################
class BenchmarkFactory:
    _registered = {
        "count_iterable": CountIterableBenchmark,
        "collections_counter": CollectionsCounterBenchmark,
        "indexed_update": IndexedUpdateBenchmark,
        "word_arithmetic": WordArithmeticBenchmark,
        "most_common_ordered": MostCommonOrderedBenchmark,
        "k_most_common_ordered": KMostCommonBenchmark,
        "most_common_tiebreaker": TiebreakerBenchmark,
        "concurrent_counter_threads": ConcurrentCounterThreadsBenchmark,
        "thread_local_merge": ThreadLocalMergeBenchmark,
        "parallel_count": ParallelCountBenchmark,
    }

    @classmethod
    def names(cls) -> List[str]:
        return list(cls._registered)

    @classmethod
    def get_benchmark(cls, name: str) -> BaseBenchmark:
        if name not in cls._registered:
            raise ValueError(f"No counter benchmark for '{name}'")
        return cls._registered[name]()
