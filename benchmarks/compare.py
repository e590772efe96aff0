"""Compare fresh jaded benchmark runs against the saved baselines.

Usage::

    python benchmarks/compare.py [--tolerance 0.25]

Each benchmark is run again and its throughput compared with the JSON
baseline written by the bench script's ``__main__`` block.  Exits with
status 1 if any benchmark is slower than its baseline by more than the
tolerance.
"""
from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Callable

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))
sys.path.insert(0, str(Path(__file__).parent))

import click
from rich.console import Console
from rich.table import Table

from bench_latency import bench_decode_latency
from bench_memory import bench_decode_memory
from bench_throughput import bench_decode_throughput, bench_render_throughput

_RESULTS_DIR = Path(__file__).parent / "results"

_BENCHMARKS: dict[str, Callable[[], dict[str, object]]] = {
    "decode_throughput_baseline.json": bench_decode_throughput,
    "render_throughput_baseline.json": bench_render_throughput,
    "latency_baseline.json": bench_decode_latency,
    "memory_baseline.json": bench_decode_memory,
}


def load_baseline(path: Path) -> dict[str, object] | None:
    if not path.exists():
        return None
    with open(path, encoding="utf-8") as fh:
        return json.load(fh)  # type: ignore[no-any-return]


def relative_change(baseline: float, current: float) -> float | None:
    """Fractional change from ``baseline`` to ``current``; None without a baseline."""
    if baseline <= 0:
        return None
    return (current - baseline) / baseline


def is_regression(baseline: dict[str, object], current: dict[str, object], tolerance: float) -> bool:
    """Return True if ``current`` is worse than ``baseline`` beyond ``tolerance``.

    Throughput benchmarks compare ``ops_per_second`` (lower is worse);
    the memory benchmark compares ``peak_memory_kb`` (higher is worse).
    """
    if "peak_memory_kb" in baseline:
        change = relative_change(float(baseline["peak_memory_kb"]), float(current["peak_memory_kb"]))  # type: ignore[arg-type]
        return change is not None and change > tolerance
    change = relative_change(float(baseline["ops_per_second"]), float(current["ops_per_second"]))  # type: ignore[arg-type]
    return change is not None and change < -tolerance


@click.command()
@click.option("--tolerance", type=float, default=0.25, show_default=True, help="Allowed fractional slowdown")
def main(tolerance: float) -> None:
    """Re-run the benchmarks and compare them with the saved baselines."""
    console = Console()
    table = Table(title="jaded benchmarks vs. baseline")
    table.add_column("Operation")
    table.add_column("Baseline", justify="right")
    table.add_column("Current", justify="right")
    table.add_column("Change", justify="right")

    regressions = 0
    for fname, bench_fn in _BENCHMARKS.items():
        baseline = load_baseline(_RESULTS_DIR / fname)
        if baseline is None:
            table.add_row(fname, "[dim]none[/dim]", "", "[dim]run the bench script first[/dim]")
            continue
        current = bench_fn()
        key = "peak_memory_kb" if "peak_memory_kb" in baseline else "ops_per_second"
        before = float(baseline[key])  # type: ignore[arg-type]
        after = float(current[key])  # type: ignore[arg-type]
        change = relative_change(before, after)
        change_text = "n/a" if change is None else f"{change:+.1%}"
        if is_regression(baseline, current, tolerance):
            regressions += 1
            change_text = f"[red]{change_text}[/red]"
        table.add_row(str(current["operation"]), f"{before:,.1f}", f"{after:,.1f}", change_text)

    console.print(table)
    if regressions:
        console.print(f"[red]{regressions} benchmark(s) regressed beyond {tolerance:.0%}[/red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
