"""Benchmark: memory allocated while decoding sample streams."""
from __future__ import annotations

import json
import sys
import tracemalloc
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))
sys.path.insert(0, str(Path(__file__).parent))

import jaded
from streams import SAMPLES

_ITERATIONS: int = 200


def bench_decode_memory(iterations: int = _ITERATIONS) -> dict[str, object]:
    """Benchmark peak memory while decoding the largest sample.

    Returns
    -------
    dict with keys: operation, iterations, peak_memory_kb, current_memory_kb.
    """
    data = SAMPLES["int_array_1000"]
    tracemalloc.start()
    for _ in range(iterations):
        jaded.parse(data)
    current, peak = tracemalloc.get_traced_memory()
    tracemalloc.stop()

    result: dict[str, object] = {
        "operation": "jaded_decode_memory",
        "iterations": iterations,
        "peak_memory_kb": round(peak / 1024, 2),
        "current_memory_kb": round(current / 1024, 2),
        "ops_per_second": 0.0,
        "avg_latency_ms": 0.0,
    }
    print(
        f"[bench_memory] {result['operation']}: "
        f"peak {result['peak_memory_kb']:.2f} KB over {iterations} iterations"
    )
    return result


if __name__ == "__main__":
    result = bench_decode_memory()
    results_dir = Path(__file__).parent / "results"
    results_dir.mkdir(exist_ok=True)
    output_path = results_dir / "memory_baseline.json"
    with open(output_path, "w", encoding="utf-8") as fh:
        json.dump(result, fh, indent=2)
    print(f"Results saved to {output_path}")
