from suspension_sim import Box, Collider, Cylinder, Pose, Sphere, Unsupported, overlaps
from suspension_sim.logging_config import setup_logging

setup_logging()

ground = Collider(Box(Pose(position=(0.0, 0.0, -0.5)), half_extents=(10.0, 10.0, 0.5)), name="ground")
wheel = Cylinder.centered_at(center=(0.0, 0.0, 0.3), axis=(0.0, 1.0, 0.0), radius=0.35, height=0.4)
rock = Sphere(center=(0.6, 0.0, 0.1), radius=0.3)

print("wheel vs ground:", overlaps(wheel, ground))
print("wheel vs rock:  ", overlaps(wheel, rock))
print("rock vs ground: ", overlaps(rock, ground))
print("capsule:        ", overlaps(Unsupported("capsule"), ground))
