"""
Common utilities and infrastructure for the ellipsoid geodesy packages.

This package provides foundational components used across all modules:
- Geodetic constants with provenance
- Unit registry for angles and heights
- Coordinate value types
- Error taxonomy
- Logging infrastructure
"""

from common.constants import GeodeticConstants
from common.errors import (
    GeodesyError,
    InvalidRadius,
    ConvergenceFailure,
    NumericDegeneracy,
    ConsistencyViolation,
)
from common.units import ureg, Q_, validate_units
from common.types import (
    Vector3,
    as_vector3,
    GeodeticCoordinate2D,
    GeodeticCoordinate3D,
    geodetic_from_quantities,
)
from common.logging_config import get_logger

__all__ = [
    "GeodeticConstants",
    "GeodesyError",
    "InvalidRadius",
    "ConvergenceFailure",
    "NumericDegeneracy",
    "ConsistencyViolation",
    "ureg",
    "Q_",
    "validate_units",
    "Vector3",
    "as_vector3",
    "GeodeticCoordinate2D",
    "GeodeticCoordinate3D",
    "geodetic_from_quantities",
    "get_logger",
]
