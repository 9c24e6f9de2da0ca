"""
Geodetic Constants for Ellipsoid Modeling.

This module provides reference ellipsoid parameters and numerical solver
defaults with their uncertainty bounds and sources. All lengths are in
meters.

References
----------
- WGS84 parameters: NIMA TR8350.2, Third Edition, 2000
- Surface projection: Cozzi, P. & Ring, K. (2011). 3D Engine Design for
  Virtual Globes, Chapter 2 (Math Foundations). CRC Press.
"""

from dataclasses import dataclass
from typing import Final


@dataclass(frozen=True)
class Constant:
    """A constant with uncertainty and provenance.

    Attributes
    ----------
    value : float
        The nominal value of the constant.
    uncertainty : float
        The standard uncertainty (1-sigma) of the constant.
    unit : str
        The unit of the constant.
    source : str
        Reference for the constant value.
    description : str
        Human-readable description of the constant.
    """
    value: float
    uncertainty: float
    unit: str
    source: str
    description: str


class GeodeticConstants:
    """Registry of constants used throughout the system.

    Reference Ellipsoid (WGS84)
    ---------------------------
    Shape parameters of the default Earth ellipsoid.

    Surface Solver
    --------------
    Defaults for the Newton-Raphson geodetic surface projection.
    """

    # =========================================================================
    # WGS84 Ellipsoid Parameters
    # Reference: NIMA TR8350.2, Third Edition, 2000
    # =========================================================================

    WGS84_SEMI_MAJOR_AXIS: Final[Constant] = Constant(
        value=6_378_137.0,
        uncertainty=0.0,  # Defined exactly
        unit="m",
        source="WGS84, NIMA TR8350.2",
        description="Semi-major axis (equatorial radius) of WGS84 ellipsoid"
    )

    WGS84_SEMI_MINOR_AXIS: Final[Constant] = Constant(
        value=6_356_752.314245,
        uncertainty=0.0001,
        unit="m",
        source="WGS84, NIMA TR8350.2",
        description="Semi-minor axis (polar radius) of WGS84 ellipsoid"
    )

    WGS84_FLATTENING: Final[Constant] = Constant(
        value=1.0 / 298.257223563,
        uncertainty=0.0,  # Defined exactly
        unit="dimensionless",
        source="WGS84, NIMA TR8350.2",
        description="Flattening of WGS84 ellipsoid: f = (a - b) / a"
    )

    # =========================================================================
    # Surface Solver Defaults
    # =========================================================================

    SURFACE_TOLERANCE: Final[Constant] = Constant(
        value=1e-10,
        uncertainty=0.0,
        unit="dimensionless",
        source="Cozzi & Ring (2011)",
        description="Maximum |x²/a² + y²/b² + z²/c² - 1| accepted as on-surface"
    )

    MAX_SURFACE_ITERATIONS: Final[int] = 100
