# MIT License (see LICENSE)
"""
Simple profiling utilities for per-tick cost measurement.

The suspension solver wraps its phases (prefilter, solve) in named
sections when a Profiler is attached, which makes it easy to check that a
tick stays within its frame budget.

Example:
    profiler = Profiler()
    solver = SuspensionSolver(track_width=0.5, profiler=profiler)
    solver.step(arms, colliders, dt=1/60)
    print(profiler.stats.summary())
"""
from __future__ import annotations
from contextlib import contextmanager
from dataclasses import dataclass, field
from threading import Lock
from typing import Iterator
import time


@dataclass
class ProfileStats:
    """
    Accumulates timing samples for named sections.

    Stores raw timing data and provides summary statistics (count, mean, max, total).
    """
    samples: dict[str, list[float]] = field(default_factory=dict)
    _lock: Lock = field(default_factory=Lock, repr=False, compare=False)

    def add(self, name: str, dt: float) -> None:
        """Record a timing sample (in seconds) for a named section."""
        with self._lock:
            self.samples.setdefault(name, []).append(dt)

    def clear(self) -> None:
        with self._lock:
            self.samples.clear()

    def summary(self) -> dict[str, dict[str, float]]:
        """
        Compute summary statistics for all recorded sections.

        Returns:
            Dict mapping section name to stats dict with keys:
            - 'n': sample count
            - 'mean_ms': average time in milliseconds
            - 'max_ms': maximum time in milliseconds
            - 'total_ms': summed time in milliseconds
        """
        out = {}
        with self._lock:
            for name, times in self.samples.items():
                n = len(times)
                total = sum(times)
                out[name] = {
                    "n": n,
                    "mean_ms": 1e3 * (total / n),
                    "max_ms": 1e3 * max(times),
                    "total_ms": 1e3 * total,
                }
        return out


class Profiler:
    """
    Context-manager based profiler for timing code sections.

    Sections may be entered from worker threads.

    Usage:
        profiler = Profiler()
        with profiler.section("solve"):
            solver.step(arms, colliders, dt)
    """

    def __init__(self) -> None:
        self.stats = ProfileStats()

    @contextmanager
    def section(self, name: str) -> Iterator[None]:
        """
        Time the enclosed code and record it under `name`.

        Args:
            name: Identifier for this timed section.
        """
        t0 = time.perf_counter()
        try:
            yield
        finally:
            self.stats.add(name, time.perf_counter() - t0)
