"""Benchmark: decode and render throughput.

Measures how many streams can be decoded per second with the public
jaded.parse() API, and how many blobs jaded.render() can turn into JSON.
"""
from __future__ import annotations

import json
import sys
import time
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))
sys.path.insert(0, str(Path(__file__).parent))

import jaded
from streams import SAMPLES

_ITERATIONS: int = 2_000
_RENDER_ITERATIONS: int = 500


def _report(operation: str, iterations: int, total: float) -> dict[str, object]:
    result: dict[str, object] = {
        "operation": operation,
        "iterations": iterations,
        "total_seconds": round(total, 4),
        "ops_per_second": round(iterations / total, 1),
        "avg_latency_ms": round(total / iterations * 1000, 4),
    }
    print(
        f"[bench_throughput] {result['operation']}: "
        f"{result['ops_per_second']:,.0f} ops/sec  "
        f"avg {result['avg_latency_ms']:.4f} ms"
    )
    return result


def bench_decode_throughput(iterations: int = _ITERATIONS) -> dict[str, object]:
    """Benchmark decoding of every sample stream.

    Returns
    -------
    dict with keys: operation, iterations, total_seconds, ops_per_second,
    avg_latency_ms.
    """
    streams = list(SAMPLES.values())
    start = time.perf_counter()
    for i in range(iterations):
        jaded.parse(streams[i % len(streams)])
    total = time.perf_counter() - start
    return _report("jaded_decode_throughput", iterations, total)


def bench_render_throughput(iterations: int = _RENDER_ITERATIONS) -> dict[str, object]:
    """Benchmark rendering of a decoded stream to JSON text.

    Returns
    -------
    dict with keys: operation, iterations, total_seconds, ops_per_second,
    avg_latency_ms.
    """
    blob = SAMPLES["string_array_200"]
    start = time.perf_counter()
    for _ in range(iterations):
        jaded.render(blob)
    total = time.perf_counter() - start
    return _report("jaded_render_throughput", iterations, total)


if __name__ == "__main__":
    results_dir = Path(__file__).parent / "results"
    results_dir.mkdir(exist_ok=True)

    for bench_fn, fname in [
        (bench_decode_throughput, "decode_throughput_baseline.json"),
        (bench_render_throughput, "render_throughput_baseline.json"),
    ]:
        result = bench_fn()
        output_path = results_dir / fname
        with open(output_path, "w", encoding="utf-8") as fh:
            json.dump(result, fh, indent=2)
        print(f"Results saved to {output_path}")
