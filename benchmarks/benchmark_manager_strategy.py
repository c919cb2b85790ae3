from abc import ABC, abstractmethod
from typing import List, Tuple

from benchmark_strategy import BenchmarkStrategy, GridStrategy, MultiSampleStrategy, SingleRunStrategy


class ManagerStrategy(ABC):
    """
    A "manager strategy" defines an entire suite of BenchmarkStrategy runs,
    i.e. a set of (strategy, benchmark_name) pairs.

    'execute()' runs them all in sequence.
    """

    @abstractmethod
    def build_strategies(self) -> List[Tuple[BenchmarkStrategy, str]]:
        """
        Return a list of (BenchmarkStrategy, benchmark_name) pairs to execute.
        """
        pass

    def execute(self, manager: 'BenchmarkManager'):
        """
        Execute all (strategy, benchmark_name) pairs built by build_strategies().
        """
        for strat, bench_name in self.build_strategies():
            manager.run_strategy(strat, bench_name)


class FullTestSuiteStrategy(ManagerStrategy):
    """Every workload, with counting runs scaled over input size and thread count."""

    def build_strategies(self) -> List[Tuple[BenchmarkStrategy, str]]:
        sizes = [10_000, 100_000, 1_000_000]
        return [
            (GridStrategy(sizes), "count_iterable"),
            (GridStrategy(sizes), "collections_counter"),
            (GridStrategy(sizes), "indexed_update"),
            (MultiSampleStrategy(100_000, 1, 3), "word_arithmetic"),
            (GridStrategy(sizes), "most_common_ordered"),
            (GridStrategy(sizes), "k_most_common_ordered"),
            (SingleRunStrategy(100_000), "most_common_tiebreaker"),
            (GridStrategy([100_000], [1, 2, 4, 8]), "concurrent_counter_threads"),
            (GridStrategy([100_000], [1, 2, 4, 8]), "thread_local_merge"),
            (GridStrategy([1_000_000], [1, 2, 4, 8]), "parallel_count"),
        ]


class MinimalTestSuiteStrategy(ManagerStrategy):
    def build_strategies(self) -> List[Tuple[BenchmarkStrategy, str]]:
        return [
            (SingleRunStrategy(10_000), "count_iterable"),
            (SingleRunStrategy(10_000), "most_common_ordered"),
            (SingleRunStrategy(10_000), "k_most_common_ordered"),
            (SingleRunStrategy(10_000, 2), "concurrent_counter_threads"),
        ]


class ManagerStrategyFactory:
    """
    Known manager strategies by name.
    """
    _registered_strategies = {
        "full_test_suite": FullTestSuiteStrategy,
        "minimal_test_suite": MinimalTestSuiteStrategy,
    }

    @classmethod
    def names(cls) -> List[str]:
        return list(cls._registered_strategies)

    @classmethod
    def create_strategy(cls, name: str) -> ManagerStrategy:
        if name not in cls._registered_strategies:
            raise ValueError(f"No manager strategy registered under '{name}'")
        return cls._registered_strategies[name]()
