# benchmark_strategy.py
from abc import ABC, abstractmethod
from itertools import product
from typing import Callable, Iterator, Optional, Sequence, Tuple

RunParams = Tuple[int, int]  # (items, workers)


class BenchmarkStrategy(ABC):
    """
    Decides which (items, workers) combinations a benchmark is run with.

    Subclasses only describe the parameter sets; ``run`` hands each of them
    to the manager in order.
    """

    @abstractmethod
    def parameters(self) -> Iterator[RunParams]:
        """Yield one (items, workers) pair per run."""
        pass

    def run(self, manager, benchmark_name: str, callback: Optional[Callable[[dict], None]]):
        for items, workers in self.parameters():
            manager.run_benchmark(
                name=benchmark_name,
                items=items,
                workers=workers,
                callback=callback
            )


class SingleRunStrategy(BenchmarkStrategy):
    """One run."""

    def __init__(self, items: int, workers: int = 1):
        self.items = items
        self.workers = workers

    def parameters(self) -> Iterator[RunParams]:
        yield self.items, self.workers


class MultiSampleStrategy(SingleRunStrategy):
    """The same run repeated ``samples`` times, for averaging."""

    def __init__(self, items: int, workers: int, samples: int):
        super().__init__(items, workers)
        self.samples = samples

    def parameters(self) -> Iterator[RunParams]:
        for i in range(self.samples):
            print(f"\n--- [MultiSample] Running sample {i+1}/{self.samples} ---")
            yield self.items, self.workers


class GridStrategy(BenchmarkStrategy):
    """Every combination of input size and worker count, sizes outermost."""

    def __init__(self, item_values: Sequence[int], worker_values: Sequence[int] = (1,)):
        self.item_values = item_values
        self.worker_values = worker_values

    def parameters(self) -> Iterator[RunParams]:
        return product(self.item_values, self.worker_values)
