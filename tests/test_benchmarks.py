"""Structural tests for the jaded benchmark modules."""
from __future__ import annotations

import importlib
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))
sys.path.insert(0, str(Path(__file__).parent.parent / "benchmarks"))


def test_bench_throughput_importable() -> None:
    """Verify bench_throughput module can be imported."""
    mod = importlib.import_module("bench_throughput")
    assert hasattr(mod, "bench_decode_throughput")
    assert hasattr(mod, "bench_render_throughput")


def test_bench_latency_importable() -> None:
    """Verify bench_latency module can be imported."""
    mod = importlib.import_module("bench_latency")
    assert hasattr(mod, "bench_decode_latency")


def test_bench_memory_importable() -> None:
    """Verify bench_memory module can be imported."""
    mod = importlib.import_module("bench_memory")
    assert hasattr(mod, "bench_decode_memory")


def test_sample_streams_decode() -> None:
    """Every benchmark sample is a well-formed stream."""
    import jaded
    from streams import SAMPLES

    chain = jaded.loads(SAMPLES["node_chain_50"]).object_data()
    assert chain.class_name == "Node"
    assert len(jaded.loads(SAMPLES["int_array_1000"]).primitive_array()) == 1000
    assert len(jaded.loads(SAMPLES["string_array_200"]).array()) == 200


def test_decode_throughput_returns_expected_keys() -> None:
    """Verify bench_decode_throughput returns expected result keys."""
    from bench_throughput import bench_decode_throughput

    result = bench_decode_throughput(iterations=30)
    assert "operation" in result
    assert result["iterations"] == 30
    assert "ops_per_second" in result
    assert "avg_latency_ms" in result
    assert float(result["ops_per_second"]) > 0  # type: ignore[arg-type]


def test_render_throughput_returns_expected_keys() -> None:
    """Verify bench_render_throughput returns expected result keys."""
    from bench_throughput import bench_render_throughput

    result = bench_render_throughput(iterations=5)
    assert "operation" in result
    assert "ops_per_second" in result
    assert "avg_latency_ms" in result


def test_decode_latency_percentiles() -> None:
    """Verify bench_decode_latency reports ordered percentiles."""
    from bench_latency import bench_decode_latency

    result = bench_decode_latency("string_array_200", iterations=20)
    assert float(result["p50_ms"]) <= float(result["p95_ms"])  # type: ignore[arg-type]


def test_decode_memory_reports_peak() -> None:
    """Verify bench_decode_memory reports a positive peak."""
    from bench_memory import bench_decode_memory

    result = bench_decode_memory(iterations=3)
    assert float(result["peak_memory_kb"]) > 0  # type: ignore[arg-type]


def test_compare_flags_regressions() -> None:
    """Verify compare.is_regression checks the right metric in the right direction."""
    from compare import is_regression

    baseline = {"ops_per_second": 1000.0}
    assert is_regression(baseline, {"ops_per_second": 700.0}, 0.25)
    assert not is_regression(baseline, {"ops_per_second": 900.0}, 0.25)
    assert not is_regression(baseline, {"ops_per_second": 5000.0}, 0.25)

    memory = {"peak_memory_kb": 100.0, "ops_per_second": 0.0}
    assert is_regression(memory, {"peak_memory_kb": 150.0, "ops_per_second": 0.0}, 0.25)
    assert not is_regression(memory, {"peak_memory_kb": 80.0, "ops_per_second": 0.0}, 0.25)
