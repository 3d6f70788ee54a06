# MIT License (see LICENSE)
"""
Default tolerances and limits used throughout the simulation.

Angles are in degrees, speeds in multiples of the full arm travel per second.
"""
from __future__ import annotations

# Progress tolerance of the GJK tester. Pairs closer than this to contact
# may be reported either way.
GJK_EPSILON: float = 1e-4

# Upper bound on simplex refinement steps before a query is declared degenerate.
GJK_MAX_ITERATIONS: int = 64

# A cylinder support direction whose radial part is shorter than this
# maps to the center of a cap.
RADIAL_EPSILON: float = 1e-4

# Torsion bar spring-back: the arm relaxes toward 0 at
# TORSION_BAR_RETURN_SPEED * ARM_MAX_DEGREES degrees per second.
TORSION_BAR_RETURN_SPEED: float = 3.0

# Largest upward arm travel tested in one tick.
ARM_STEP_DEGREES: float = 5.0

# Full bottom-out angle of a suspension arm.
ARM_MAX_DEGREES: float = 90.0

# Bisection refinements of the contact angle per tick.
BISECTION_STEPS: int = 3

# Smallest penetration the distance probe reacts to.
PROBE_MIN_DEPTH: float = 0.01
