import time

import pytest

from delve.dungeon import Dungeon

# Simple performance guardrail. Not a strict micro-benchmark; aims to catch large regressions.
# Adjust thresholds if CI hardware differs significantly.


@pytest.mark.performance
def test_dungeon_generation_medium_seeds():
    seeds = [10101, 20202, 30303]
    max_seconds_per = 2.0  # generous threshold; tune as needed
    timings = []
    d = Dungeon(width=75, height=75)
    for s in seeds:
        start = time.perf_counter()
        d.generate(s)
        elapsed = time.perf_counter() - start
        timings.append(elapsed)
        assert d.rooms
        assert elapsed < max_seconds_per, f"Seed {s} took {elapsed:.3f}s (> {max_seconds_per}s)"
    avg = sum(timings) / len(timings)
    assert avg < max_seconds_per * 0.85, f"Average generation {avg:.3f}s too high"


@pytest.mark.performance
def test_phase_breakdown_sums_below_runtime():
    d = Dungeon()
    d.generate(4242)
    phases = d.metrics["phase_ms"]
    assert sum(phases.values()) <= d.metrics["runtime_ms"] + len(phases)
