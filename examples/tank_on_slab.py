import logging

from suspension_sim import Box, Collider, Pose, SuspensionArm, SuspensionSolver, Wheel
from suspension_sim.logging_config import setup_logging

setup_logging(logging.INFO)

# Six trailing arms per side, pivots 0.45 m above flat ground (top at z = 0)
arms = []
for side in (1.0, -1.0):
    for i in range(6):
        x = 1.5 - 0.6 * i
        pivot = (x, side * 1.2, 0.45)
        wheel = Wheel(radius=0.3, axis=(0.0, side, 0.0), center=(x - 0.4, side * 1.45, 0.45))
        arms.append(SuspensionArm.build(pivot, wheel, vehicle_left=(0.0, 1.0, 0.0)))

ground = Collider(Box(Pose(position=(0.0, 0.0, -0.5)), half_extents=(20.0, 20.0, 0.5)), name="ground")
slab = Collider(Box(Pose(position=(0.9, 1.4, 0.125)), half_extents=(0.4, 0.5, 0.125)), name="slab")

with SuspensionSolver(track_width=0.4) as solver:
    for tick in range(20):
        angles = solver.step(arms, [ground, slab], dt=1 / 60)

print("left arms: ", [round(a, 2) for a in angles[:6]])
print("right arms:", [round(a, 2) for a in angles[6:]])
