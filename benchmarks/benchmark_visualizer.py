from typing import Dict, Any, List, Optional

import matplotlib.pyplot as plt
import numpy as np


class BenchmarkVisualizer:
    """
    Charts for exported benchmark records:
      - bar chart of one metric per run
      - dual-axis throughput/duration per benchmark
      - throughput against input size or worker count
    """

    def __init__(self, records: List[Dict[str, Any]]):
        self.records = records

    def _grouped_averages(self):
        grouped = {}
        for r in self.records:
            grouped.setdefault(r["name"], {"throughput": [], "duration": []})
            grouped[r["name"]]["throughput"].append(r["throughput"])
            grouped[r["name"]]["duration"].append(r["duration"])

        names = list(grouped.keys())
        avg_throughput = [np.mean(vals["throughput"]) for vals in grouped.values()]
        avg_duration = [np.mean(vals["duration"]) for vals in grouped.values()]
        return names, avg_throughput, avg_duration

    def _finish(self, save_path: Optional[str], label: str):
        if save_path:
            plt.savefig(save_path, bbox_inches='tight')
            print(f"✅ {label} saved to {save_path}")
        plt.show()

    def show_bar_chart(
        self,
        metric: str = "throughput",
        title: str = "Benchmark Results",
        save_path: Optional[str] = None
    ):
        """
        Renders a bar chart of the given metric (e.g., throughput, duration).
        Sorted descending by metric value.
        """
        sorted_records = sorted(self.records, key=lambda r: r.get(metric, 0), reverse=True)
        labels = [f"{r['name']} ({r['items']:,})" for r in sorted_records]
        values = [r.get(metric, 0) for r in sorted_records]

        plt.figure()
        plt.bar(labels, values)
        plt.title(title)
        plt.ylabel(metric)
        plt.xlabel("Benchmark")
        plt.xticks(rotation=25, ha="right")
        plt.tight_layout()
        self._finish(save_path, "Chart")

    def group_by_extra_key(self, key: str):
        """
        Group the records by a key of the 'extra' dictionary,
        then print average throughput/duration for each group.
        """
        groups = {}
        for r in self.records:
            groups.setdefault(r.get("extra", {}).get(key), []).append(r)

        print(f"\n📦 Grouped by '{key}':")
        for val, group in groups.items():
            avg_throughput = np.mean([r["throughput"] for r in group])
            avg_duration = np.mean([r["duration"] for r in group])
            print(f"  - Value: {val} | Avg Throughput: {avg_throughput:.2f} | Avg Duration: {avg_duration:.4f}s")

    def show_dual_axis_chart(
            self,
            title: str = "Throughput vs Duration by Workload",
            save_path: Optional[str] = None
    ):
        names, avg_throughput, avg_duration = self._grouped_averages()

        x = np.arange(len(names))
        width = 0.4

        fig, ax1 = plt.subplots(figsize=(10, 6))

        color1 = 'tab:blue'
        ax1.bar(x - width / 2, avg_throughput, width, label='Throughput (ops/sec)', color=color1)
        ax1.set_ylabel("Throughput (ops/sec)", color=color1)
        ax1.tick_params(axis='y', labelcolor=color1)

        ax2 = ax1.twinx()
        color2 = 'tab:orange'
        ax2.bar(x + width / 2, avg_duration, width, label='Duration (s)', color=color2)
        ax2.set_ylabel("Duration (seconds)", color=color2)
        ax2.tick_params(axis='y', labelcolor=color2)

        plt.title(title)
        ax1.set_xticks(x)
        ax1.set_xticklabels(names, rotation=25, ha="right")

        fig.tight_layout()
        self._finish(save_path, "Dual-axis chart")

    def show_scaling_chart(
        self,
        x_field: str = "items",
        y_field: str = "throughput",
        title: str = "Scaling",
        save_path: Optional[str] = None
    ):
        """
        One line per benchmark, 'y_field' plotted against 'x_field'
        ("items" or "workers"). Repeated samples are averaged.
        """
        plt.figure()
        for name in dict.fromkeys(r["name"] for r in self.records):
            points = {}
            for r in self.records:
                if r["name"] == name:
                    points.setdefault(r[x_field], []).append(r[y_field])
            xs = sorted(points)
            plt.plot(xs, [np.mean(points[x]) for x in xs], marker='o', label=name)

        if x_field == "items":
            plt.xscale("log")
        plt.title(title)
        plt.xlabel(x_field)
        plt.ylabel(y_field)
        plt.legend()
        plt.tight_layout()
        self._finish(save_path, "Scaling chart")
