"""
Closed-Form Transforms for Ellipsoids of Revolution.

When the x and y radii of an `Ellipsoid` are equal, every meridian section
is the same ellipse and the geodetic transforms reduce to two dimensions:
the forward transform is closed form through the parametric (reduced)
latitude, and the inverse converges in one or two Bowring steps. This
reduction does not share code with the triaxial Newton-Raphson solver, so
it serves as an independent reference for it.

Scientific Context
------------------
Domain: Geodesy
Model: Meridian ellipse with semi-axes (a, b), revolved about z

References
----------
- NIMA TR8350.2: WGS84 parameters
- Bowring, B.R. (1976). Transformation from spatial to geographical
  coordinates. Survey Review, 23(181), 323-327.
"""

from dataclasses import dataclass
from typing import Optional

import numpy as np

from common.constants import GeodeticConstants
from common.errors import InvalidRadius, NumericDegeneracy
from common.types import (
    GeodeticCoordinate,
    GeodeticCoordinate3D,
    Vector3,
    as_vector3,
)
from geospatial.ellipsoid import Ellipsoid, SurfaceSolverConfig, VectorLike


@dataclass(frozen=True)
class RotationalEllipsoid:
    """Ellipsoid of revolution about the z axis.

    Attributes
    ----------
    equatorial_radius : float
        Semi-axis a, shared by x and y.
    polar_radius : float
        Semi-axis b along z. May exceed a (prolate).
    name : str
        Identifier used in validation reports.
    """
    equatorial_radius: float
    polar_radius: float
    name: str = "rotational"

    def __post_init__(self):
        radii = (self.equatorial_radius, self.equatorial_radius, self.polar_radius)
        if not np.all(np.isfinite(radii)) or min(radii) < 0:
            raise InvalidRadius(radii)
        if min(radii) == 0:
            raise ValueError(f"Rotational reduction needs positive radii, got {radii}")

    @classmethod
    def from_flattening(cls, a: float, f: float, name: str = "rotational") -> 'RotationalEllipsoid':
        """Build from the semi-major axis and flattening f = (a - b) / a."""
        return cls(a, a * (1 - f), name)

    @classmethod
    def from_ellipsoid(cls, ellipsoid: Ellipsoid, name: str = "rotational") -> 'RotationalEllipsoid':
        """The rotational reduction of `ellipsoid`.

        Raises
        ------
        ValueError
            If the x and y radii differ.
        """
        x, y, z = ellipsoid.radii.tolist()
        if x != y:
            raise ValueError(f"{ellipsoid!r} is not rotationally symmetric about z")
        return cls(x, z, name)

    def to_ellipsoid(self, config: Optional[SurfaceSolverConfig] = None) -> Ellipsoid:
        a, b = self.equatorial_radius, self.polar_radius
        return Ellipsoid(a, a, b, config)

    @property
    def flattening(self) -> float:
        return 1.0 - self.polar_radius / self.equatorial_radius

    @property
    def e2(self) -> float:
        """First eccentricity squared, 1 - b²/a²."""
        return 1.0 - (self.polar_radius / self.equatorial_radius) ** 2

    @property
    def ep2(self) -> float:
        """Second eccentricity squared, a²/b² - 1."""
        return (self.equatorial_radius / self.polar_radius) ** 2 - 1.0

    def prime_vertical_radius(self, latitude: float) -> float:
        """Radius of curvature N = a / sqrt(1 - e² sin²φ), latitude in radians."""
        sin_lat = np.sin(latitude)
        return float(self.equatorial_radius / np.sqrt(1.0 - self.e2 * sin_lat**2))

    def _reduced_latitude(self, latitude: float) -> float:
        # tan β = (b / a) tan φ, written to stay finite at the poles
        return float(np.arctan2(
            self.polar_radius * np.sin(latitude),
            self.equatorial_radius * np.cos(latitude)
        ))

    def to_cartesian(self, coordinate: GeodeticCoordinate) -> Vector3:
        """Geodetic -> Cartesian through the parametric latitude.

        The surface point in the meridian plane is (a cos β, b sin β); the
        height is then added along the normal (cos φ, sin φ).
        """
        lat, lon = coordinate.to_radians().lat_lon()
        height = getattr(coordinate, "height", 0.0)
        reduced = self._reduced_latitude(lat)

        rho = self.equatorial_radius * np.cos(reduced) + height * np.cos(lat)
        z = self.polar_radius * np.sin(reduced) + height * np.sin(lat)
        return as_vector3([rho * np.cos(lon), rho * np.sin(lon), z])

    def to_geodetic(
        self,
        point: VectorLike,
        max_iterations: int = 10,
        tolerance: float = 1e-14
    ) -> GeodeticCoordinate3D:
        """Cartesian -> geodetic by Bowring's iteration on the reduced latitude.

        Parameters
        ----------
        point : array-like
            Cartesian point, same linear unit as the radii.
        max_iterations : int
            Maximum Bowring refinements. One is enough for Earth-like
            flattening near the surface.
        tolerance : float
            Stop once the reduced latitude changes by less than this (radians).

        Returns
        -------
        GeodeticCoordinate3D
            Coordinate tagged as radians.

        Raises
        ------
        NumericDegeneracy
            If `point` is the center, where latitude is undefined.
        """
        x, y, z = as_vector3(point).tolist()
        rho = float(np.hypot(x, y))
        if rho == 0.0 and z == 0.0:
            raise NumericDegeneracy("RotationalEllipsoid.to_geodetic", (x, y, z))

        a, b = self.equatorial_radius, self.polar_radius
        e2, ep2 = self.e2, self.ep2

        reduced = float(np.arctan2(a * z, b * rho))
        latitude = reduced
        for _ in range(max_iterations):
            latitude = float(np.arctan2(
                z + ep2 * b * np.sin(reduced) ** 3,
                rho - e2 * a * np.cos(reduced) ** 3
            ))
            refined = self._reduced_latitude(latitude)
            converged = abs(refined - reduced) < tolerance
            reduced = refined
            if converged:
                break

        sin_lat = np.sin(latitude)
        # Valid at every latitude, including on the polar axis
        height = rho * np.cos(latitude) + z * sin_lat - a * np.sqrt(1.0 - e2 * sin_lat**2)
        return GeodeticCoordinate3D.from_radians(latitude, float(np.arctan2(y, x)), float(height))


WGS84 = RotationalEllipsoid.from_flattening(
    GeodeticConstants.WGS84_SEMI_MAJOR_AXIS.value,
    GeodeticConstants.WGS84_FLATTENING.value,
    name="WGS84"
)
