"""
Microbenchmark: time per suspension tick vs number of arms.
Run:
  python benchmarks/bench_suspension.py
"""
import time

import numpy as np

from suspension_sim import Box, Collider, Pose, Sphere, SuspensionArm, SuspensionSolver, Wheel
from suspension_sim.profiler import Profiler


def run(n_arms: int, parallel: bool, ticks: int = 120):
    prof = Profiler()
    solver = SuspensionSolver(track_width=0.4, parallel=parallel, profiler=prof)

    rng = np.random.default_rng(12345)  # determinism (no randomness elsewhere)

    arms = []
    for i in range(n_arms):
        side = 1.0 if i % 2 == 0 else -1.0
        x = 0.6 * (i // 2)
        wheel = Wheel(radius=0.3, axis=(0.0, side, 0.0), center=(x - 0.4, side * 1.45, 0.45))
        arms.append(SuspensionArm.build((x, side * 1.2, 0.45), wheel))

    colliders = [Collider(Box(Pose(position=(0.0, 0.0, -0.5)), half_extents=(100.0, 100.0, 0.5)), name="ground")]
    for k in range(20):
        c = (float(rng.uniform(-1, 0.6 * n_arms / 2)), float(rng.choice([-1.45, 1.45])), 0.0)
        colliders.append(Collider(Sphere(center=c, radius=float(rng.uniform(0.05, 0.2))), name=f"rock{k}"))

    # warmup
    for _ in range(10):
        solver.step(arms, colliders, 1 / 60)
    prof.stats.clear()

    t0 = time.perf_counter()
    for _ in range(ticks):
        solver.step(arms, colliders, 1 / 60)
    t1 = time.perf_counter()
    solver.close()

    return (t1 - t0) / ticks, prof.stats.summary()


if __name__ == "__main__":
    for n in [2, 6, 12, 24]:
        for parallel in (False, True):
            per_tick, summary = run(n, parallel)
            print(f"arms={n:3d} parallel={parallel!s:5}  tick={1e3*per_tick:8.3f} ms")
            for k in ["prefilter", "solve"]:
                if k in summary:
                    print(" ", k, summary[k])
        print()
