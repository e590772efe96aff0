"""Benchmark: decode latency (p50/p95/mean) per sample stream."""
from __future__ import annotations

import json
import sys
import time
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))
sys.path.insert(0, str(Path(__file__).parent))

import jaded
from streams import SAMPLES

_WARMUP: int = 50
_ITERATIONS: int = 1_000


def bench_decode_latency(sample: str = "node_chain_50", iterations: int = _ITERATIONS) -> dict[str, object]:
    """Benchmark decode latency of one sample stream.

    Returns
    -------
    dict with keys: operation, iterations, total_seconds, ops_per_second,
    avg_latency_ms, p50_ms, p95_ms.
    """
    data = SAMPLES[sample]
    for _ in range(_WARMUP):
        jaded.parse(data)

    latencies_ms: list[float] = []
    for _ in range(iterations):
        t0 = time.perf_counter()
        jaded.parse(data)
        latencies_ms.append((time.perf_counter() - t0) * 1000)

    sorted_lats = sorted(latencies_ms)
    n = len(sorted_lats)
    total = sum(latencies_ms) / 1000

    result: dict[str, object] = {
        "operation": f"jaded_decode_latency_{sample}",
        "iterations": iterations,
        "total_seconds": round(total, 4),
        "ops_per_second": round(iterations / total, 1),
        "avg_latency_ms": round(sum(latencies_ms) / n, 4),
        "p50_ms": round(sorted_lats[int(n * 0.50)], 4),
        "p95_ms": round(sorted_lats[min(int(n * 0.95), n - 1)], 4),
    }
    print(
        f"[bench_latency] {result['operation']}: "
        f"p50={result['p50_ms']:.4f}ms  p95={result['p95_ms']:.4f}ms  "
        f"mean={result['avg_latency_ms']:.4f}ms"
    )
    return result


if __name__ == "__main__":
    results = [bench_decode_latency(name) for name in SAMPLES]
    results_dir = Path(__file__).parent / "results"
    results_dir.mkdir(exist_ok=True)
    output_path = results_dir / "latency_baseline.json"
    with open(output_path, "w", encoding="utf-8") as fh:
        json.dump(results[0], fh, indent=2)
    print(f"Results saved to {output_path}")
