import argparse
import csv
import json
import threading
import time
from dataclasses import dataclass, field, asdict
from typing import Dict, Any, Callable, List, Optional

import yaml

import benchmark_strategy as bs
from benchmark_manager_strategy import ManagerStrategyFactory
from benchmarks_builder import BenchmarkFactory


@dataclass
class BenchmarkRecord:
    """Holds a single benchmark result."""
    name: str
    items: int
    workers: int
    duration: float
    throughput: float
    extra: Dict[str, Any] = field(default_factory=dict)


class BenchmarkManager:
    """
    A manager that:
      - Uses counter workloads from BenchmarkFactory.
      - Allows single-run or strategy-based runs.
      - Stores results as BenchmarkRecord behind a lock.
      - Exports results and prints summary.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.records: List[BenchmarkRecord] = []

    def run_benchmark(
        self,
        name: str,
        items: int,
        workers: int = 1,
        callback: Optional[Callable[[dict], None]] = None
    ) -> None:
        """
        Run the benchmark identified by 'name' exactly once.
        The workload is fetched from BenchmarkFactory by `name`.
        """
        user_callback = callback

        def callback_wrapper(data: Dict[str, Any]):
            self._store_record(name, items, workers, data)
            if user_callback is not None:
                user_callback(data)

        print(f"\n🚩 Starting benchmark: {name} | {items:,} items | {workers} worker(s)")

        start_time = time.perf_counter()
        test = BenchmarkFactory.get_benchmark(name)
        test.run_benchmark(callback=callback_wrapper, items=items, workers=workers)
        end_time = time.perf_counter()

        print(f"✅ Benchmark '{name}' finished in {end_time - start_time:.2f} seconds.")

    def run_strategy(self, strategy: bs.BenchmarkStrategy, benchmark_name: str):
        """
        The provided 'strategy' calls manager.run_benchmark(...) as many
        times as it is designed to; every run is recorded.
        """
        strategy.run(self, benchmark_name, callback=None)

    def _store_record(self, benchmark_name: str, items: int, workers: int, data: Dict[str, Any]):
        """Given a result dictionary from the workload, build a BenchmarkRecord."""
        duration = data.get("duration", 0.0)
        throughput = items / duration if duration > 0 else 0.0
        extra = dict(data)
        extra.pop("duration", None)

        record = BenchmarkRecord(
            name=benchmark_name,
            items=items,
            workers=workers,
            duration=duration,
            throughput=throughput,
            extra=extra
        )
        with self._lock:
            self.records.append(record)

    def export(self) -> List[Dict[str, Any]]:
        """Convert all records to dictionaries for JSON/CSV or other uses."""
        with self._lock:
            return [asdict(r) for r in self.records]

    def print_summary(self) -> None:
        """Display a simple summary of each recorded run."""
        print("\n📊 Benchmark Summary:")
        for rec in self.export():
            print(f"- {rec['name']}: {rec['items']:,} items / {rec['workers']}W | "
                  f"{rec['duration']:.4f}s | {rec['throughput']:,.0f} ops/sec | extra: {rec['extra']}")

    def save_as_csv(self, filepath: str) -> None:
        data = self.export()
        if not data:
            print("No records to save.")
            return
        keys = list(data[0].keys())
        with open(filepath, 'w', newline='', encoding='utf-8') as f:
            writer = csv.DictWriter(f, fieldnames=keys)
            writer.writeheader()
            writer.writerows(data)
        print(f"✅ Saved benchmark records to CSV: {filepath}")

    def save_as_json(self, filepath: str) -> None:
        data = self.export()
        if not data:
            print("No records to save.")
            return
        with open(filepath, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2)
        print(f"✅ Saved benchmark records to JSON: {filepath}")

    def save_as_yaml(self, filepath: str) -> None:
        """Save all benchmark records to a YAML file."""
        data = self.export()
        if not data:
            print("No records to save.")
            return
        with open(filepath, 'w', encoding='utf-8') as f:
            yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)
        print(f"✅ Saved benchmark records to YAML: {filepath}")


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Run counter benchmarks.")
    parser.add_argument("--suite", default="minimal_test_suite",
                        choices=ManagerStrategyFactory.names())
    parser.add_argument("--output", help="Write records to this .csv, .json or .yaml file")
    parser.add_argument("--chart", action="store_true", help="Show a throughput/duration chart")
    args = parser.parse_args(argv)

    manager = BenchmarkManager()
    ManagerStrategyFactory.create_strategy(args.suite).execute(manager)
    manager.print_summary()

    if args.output:
        if args.output.endswith(".csv"):
            manager.save_as_csv(args.output)
        elif args.output.endswith((".yaml", ".yml")):
            manager.save_as_yaml(args.output)
        else:
            manager.save_as_json(args.output)

    if args.chart:
        from benchmark_visualizer import BenchmarkVisualizer
        BenchmarkVisualizer(manager.export()).show_dual_axis_chart()


if __name__ == "__main__":
    main()
