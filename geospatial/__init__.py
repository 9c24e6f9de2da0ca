"""
Geospatial Module for Ellipsoid Coordinate Transforms.

All conversions between Cartesian points and geodetic coordinates go
through the `Ellipsoid` type defined here.

This module provides:
- The triaxial `Ellipsoid` with its surface normals and transforms
- Vector helpers, including rotation about an arbitrary axis
- The closed-form reduction for ellipsoids of revolution (cross-checking)
"""

from geospatial.vector_math import (
    dot,
    length,
    length_squared,
    normalize,
    rotate_around_axis,
)

from geospatial.ellipsoid import (
    Ellipsoid,
    SurfaceSolverConfig,
    SurfaceSolution,
)

from geospatial.rotational import (
    RotationalEllipsoid,
    WGS84,
)

__all__ = [
    # Vector helpers
    "dot",
    "length",
    "length_squared",
    "normalize",
    "rotate_around_axis",
    # Ellipsoid
    "Ellipsoid",
    "SurfaceSolverConfig",
    "SurfaceSolution",
    # Rotational reduction
    "RotationalEllipsoid",
    "WGS84",
]
