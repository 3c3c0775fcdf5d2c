"""
Shared compute infrastructure for fluxpredictor.

This module provides timing utilities, numerical tolerances and linear
algebra kernels that are shared across backends.

IMPORTANT: This is NOT where domain-specific backends live. Those go in
{domain}/backends/. This module contains shared NUMERIC infrastructure.

Submodules:
    timing: Execution timing utilities
    tolerances: Rank tolerance and comparison tiers
    linalg: Linear algebra kernels (QR)
"""

from fluxpredictor.core.compute.timing import Timer, timed
from fluxpredictor.core.compute.tolerances import (
    ToleranceTier,
    rank_tolerance,
    select_tolerance,
)

__all__ = [
    # Timing
    "Timer",
    "timed",
    # Tolerances
    "ToleranceTier",
    "rank_tolerance",
    "select_tolerance",
]
