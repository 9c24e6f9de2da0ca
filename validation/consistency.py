"""
Consistency Checks for Ellipsoid Coordinate Transforms.

This module verifies that transform outputs obey the geometric identities
they are built on, and agrees with independent implementations.

Check Categories
----------------
1. Round trips (geodetic -> Cartesian -> geodetic)
2. Geometric invariants (unit normals, on-surface residual)
3. Agreement with the closed-form reduction for ellipsoids of revolution
4. Agreement with PROJ (via pyproj) for WGS84
"""

from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Dict, Iterable, List, Optional

import numpy as np
from numpy.typing import NDArray
from pyproj import Transformer

from common.errors import ConsistencyViolation
from common.logging_config import get_logger
from common.types import GeodeticCoordinate, GeodeticCoordinate3D, as_vector3
from geospatial.ellipsoid import Ellipsoid
from geospatial.rotational import RotationalEllipsoid

logger = get_logger(__name__)


@lru_cache(maxsize=1)
def _wgs84_transformer() -> Transformer:
    """Earth-centered Cartesian (EPSG:4978) -> geographic 3D (EPSG:4979)."""
    return Transformer.from_crs("EPSG:4978", "EPSG:4979", always_xy=True)


def _wrap_angle(angle: float) -> float:
    """Wrap an angle difference to [-π, π]."""
    return float(np.arctan2(np.sin(angle), np.cos(angle)))


@dataclass
class ValidationResult:
    """Result of a validation check.

    Attributes
    ----------
    test_name : str
        Name of the test.
    passed : bool
        Whether the test passed.
    message : str
        Description of result.
    details : dict
        Additional details.
    """
    test_name: str
    passed: bool
    message: str
    details: Dict[str, Any]


class TransformConsistencyChecker:
    """Checker for geometric consistency of one ellipsoid's transforms.

    Parameters
    ----------
    ellipsoid : Ellipsoid
        The ellipsoid under test.
    strict_mode : bool
        If True, raise `ConsistencyViolation` on the first failed check.
    """

    def __init__(self, ellipsoid: Ellipsoid, strict_mode: bool = False):
        self.ellipsoid = ellipsoid
        self.strict_mode = strict_mode
        self._logger = get_logger("TransformConsistencyChecker")

    def _report(self, result: ValidationResult) -> ValidationResult:
        if not result.passed:
            self._logger.warning(f"CHECK FAILED | {result.test_name} | {result.message}")
            if self.strict_mode:
                raise ConsistencyViolation(f"{result.test_name}: {result.message}")
        return result

    def check_all(
        self,
        points: Iterable[NDArray[np.float64]]
    ) -> List[ValidationResult]:
        """Run the geometric checks on a set of Cartesian points.

        For each point, the surface projection residual, the normal at its
        surface point and the Cartesian -> geodetic -> Cartesian round trip
        are checked.
        """
        results = []
        for point in points:
            p = as_vector3(point)
            results.append(self.check_surface_residual(p))
            results.append(self.check_unit_normal(self.ellipsoid.scale_to_geodetic_surface(p)))
            results.append(self.check_cartesian_round_trip(p))
        return results

    def check_round_trip(
        self,
        coordinate: GeodeticCoordinate,
        angle_tolerance: float = 1e-9,
        height_tolerance: float = 1e-6
    ) -> ValidationResult:
        """Check geodetic -> Cartesian -> geodetic returns the input."""
        expected = coordinate.to_radians()
        expected_height = getattr(coordinate, "height", 0.0)
        recovered = self.ellipsoid.to_geodetic_3d(self.ellipsoid.to_cartesian(coordinate))

        lat_error = abs(recovered.latitude - expected.latitude)
        # Longitude is undefined at the poles
        if abs(abs(expected.latitude) - np.pi / 2) < angle_tolerance:
            lon_error = 0.0
        else:
            lon_error = abs(_wrap_angle(recovered.longitude - expected.longitude))
        height_error = abs(recovered.height - expected_height)

        passed = (
            lat_error <= angle_tolerance
            and lon_error <= angle_tolerance
            and height_error <= height_tolerance
        )
        return self._report(ValidationResult(
            test_name="geodetic_round_trip",
            passed=passed,
            message=(
                f"Round trip errors: lat={lat_error:.3e} rad, "
                f"lon={lon_error:.3e} rad, height={height_error:.3e}"
            ),
            details={
                'latitude_error_rad': lat_error,
                'longitude_error_rad': lon_error,
                'height_error': height_error,
            }
        ))

    def check_cartesian_round_trip(
        self,
        point: NDArray[np.float64],
        relative_tolerance: float = 1e-9
    ) -> ValidationResult:
        """Check Cartesian -> geodetic -> Cartesian returns the input."""
        p = as_vector3(point)
        recovered = self.ellipsoid.to_cartesian(self.ellipsoid.to_geodetic_3d(p))
        error = float(np.linalg.norm(recovered - p))
        scale = max(float(np.linalg.norm(p)), self.ellipsoid.maximum_radius)
        return self._report(ValidationResult(
            test_name="cartesian_round_trip",
            passed=error <= relative_tolerance * scale,
            message=f"Cartesian round trip error {error:.3e}",
            details={'error': error, 'limit': relative_tolerance * scale}
        ))

    def check_unit_normal(
        self,
        surface_point: NDArray[np.float64],
        tolerance: float = 1e-12
    ) -> ValidationResult:
        """Check the surface normal at a point has unit length."""
        n = self.ellipsoid.geodetic_surface_normal(surface_point)
        deviation = abs(float(np.linalg.norm(n)) - 1.0)
        return self._report(ValidationResult(
            test_name="unit_normal",
            passed=deviation <= tolerance,
            message=f"Normal length deviation {deviation:.3e}",
            details={'deviation': deviation}
        ))

    def check_surface_residual(self, point: NDArray[np.float64]) -> ValidationResult:
        """Check the projected point satisfies the ellipsoid equation."""
        solution = self.ellipsoid.solve_geodetic_surface(point)
        tolerance = self.ellipsoid.config.tolerance
        residual = float(
            np.sum(solution.point**2 * self.ellipsoid.one_over_radii_squared) - 1.0
        )
        # Recomputing from the point adds a few ulps of rounding
        passed = abs(residual) <= tolerance + 8 * np.finfo(np.float64).eps
        return self._report(ValidationResult(
            test_name="surface_residual",
            passed=passed,
            message=(
                f"Residual {residual:.3e} after "
                f"{solution.iterations} iterations"
            ),
            details={
                'residual': residual,
                'solver_residual': solution.residual,
                'tolerance': tolerance,
                'iterations': solution.iterations,
                'alpha': solution.alpha,
            }
        ))

    def check_against_closed_form(
        self,
        coordinate: GeodeticCoordinate,
        reference: Optional[RotationalEllipsoid] = None,
        position_tolerance: float = 1e-6,
        angle_tolerance: float = 1e-9,
        height_tolerance: float = 1e-3
    ) -> ValidationResult:
        """Compare both transform directions with the rotational reduction.

        `reference` defaults to the reduction of the ellipsoid under test,
        which then must have equal x and y radii. The height tolerance
        reflects the surface residual tolerance: a residual s displaces the
        surface point by about s * r / 2.
        """
        if reference is None:
            reference = RotationalEllipsoid.from_ellipsoid(self.ellipsoid)

        expected_xyz = reference.to_cartesian(coordinate)
        actual_xyz = self.ellipsoid.to_cartesian(coordinate)
        position_error = float(np.linalg.norm(actual_xyz - expected_xyz))

        expected = reference.to_geodetic(actual_xyz)
        recovered = self.ellipsoid.to_geodetic_3d(actual_xyz)
        lat_error = abs(recovered.latitude - expected.latitude)
        height_error = abs(recovered.height - expected.height)

        passed = (
            position_error <= position_tolerance
            and lat_error <= angle_tolerance
            and height_error <= height_tolerance
        )
        return self._report(ValidationResult(
            test_name=f"closed_form_{reference.name}",
            passed=passed,
            message=(
                f"Closed-form differences: position={position_error:.3e}, "
                f"lat={lat_error:.3e} rad, height={height_error:.3e}"
            ),
            details={
                'position_error': position_error,
                'latitude_error_rad': lat_error,
                'height_error': height_error,
            }
        ))

    def check_against_pyproj(
        self,
        point: NDArray[np.float64],
        angle_tolerance: float = 1e-9,
        height_tolerance: float = 1e-3
    ) -> ValidationResult:
        """Compare `to_geodetic_3d` with PROJ's WGS84 conversion.

        The ellipsoid under test must be WGS84 in meters.
        """
        p = as_vector3(point)
        lon_deg, lat_deg, ref_height = _wgs84_transformer().transform(p[0], p[1], p[2])
        expected = GeodeticCoordinate3D.from_degrees(lat_deg, lon_deg, ref_height).to_radians()
        actual = self.ellipsoid.to_geodetic_3d(p)

        lat_error = abs(actual.latitude - expected.latitude)
        lon_error = abs(_wrap_angle(actual.longitude - expected.longitude))
        height_error = abs(actual.height - expected.height)

        passed = (
            lat_error <= angle_tolerance
            and lon_error <= angle_tolerance
            and height_error <= height_tolerance
        )
        return self._report(ValidationResult(
            test_name="pyproj_wgs84",
            passed=passed,
            message=(
                f"PROJ differences: lat={lat_error:.3e} rad, "
                f"lon={lon_error:.3e} rad, height={height_error:.3e} m"
            ),
            details={
                'latitude_error_rad': lat_error,
                'longitude_error_rad': lon_error,
                'height_error_m': height_error,
            }
        ))
