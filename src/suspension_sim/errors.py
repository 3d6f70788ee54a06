# MIT License (see LICENSE)
"""
Exception types raised by the intersection tester and the suspension solver.

All of them are local failures: a single query degrades, the surrounding
tick carries on.
"""
from __future__ import annotations


class SuspensionSimError(Exception):
    """Base class for errors raised by suspension_sim."""


class InvalidArgument(SuspensionSimError, ValueError):
    """A required shape or collider reference is missing or malformed."""


class UnsupportedShape(SuspensionSimError, TypeError):
    """The shape kind has no support mapping."""


class DegenerateGeometry(SuspensionSimError, ArithmeticError):
    """GJK could not reach a conclusive answer for the given pair."""
