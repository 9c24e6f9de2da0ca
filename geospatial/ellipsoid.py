"""
Triaxial Ellipsoid and Its Coordinate Transforms.

This module implements conversions between Cartesian 3D points and
geodetic (latitude, longitude, height) coordinates on an ellipsoid with
three independent semi-axes:

    x²/a² + y²/b² + z²/c² = 1

Scientific Context
------------------
Domain: Geodesy, planetary rendering
Model: Triaxial ellipsoid; the rotational (oblate) Earth ellipsoid is the
special case a = b.

Transforms
----------
- Geodetic surface normal: gradient of the implicit quadric, normalized.
- Geodetic -> Cartesian: closed form. The surface point whose outward
  normal is n is k / sqrt(k·n) with k = radii² * n.
- Cartesian -> geodetic: no closed form for a general triaxial ellipsoid.
  The closest surface point is found with a Newton-Raphson iteration on
  the normal offset alpha, then latitude/longitude come from the normal
  at that point and height from the offset vector.

Thread Safety
-------------
An `Ellipsoid` is immutable after construction (its cached arrays are
read-only) and every transform is a pure function, so one instance can
be shared freely between threads.

References
----------
- Cozzi, P. & Ring, K. (2011). 3D Engine Design for Virtual Globes.
  Chapter 2: Math Foundations.
"""

from dataclasses import dataclass
from typing import Optional, Sequence, Union

import numpy as np
from numpy.typing import NDArray

from common.constants import GeodeticConstants
from common.errors import ConvergenceFailure, InvalidRadius, NumericDegeneracy
from common.logging_config import get_logger
from common.types import (
    GeodeticCoordinate,
    GeodeticCoordinate2D,
    GeodeticCoordinate3D,
    Vector3,
    as_vector3,
)

logger = get_logger(__name__)

VectorLike = Union[Sequence[float], NDArray[np.float64]]


@dataclass(frozen=True)
class SurfaceSolverConfig:
    """Configuration for the geodetic surface projection.

    Attributes
    ----------
    tolerance : float
        Convergence threshold on the implicit-surface residual
        |Σ pᵢ² / (rᵢ² dᵢ²) - 1|.
    max_iterations : int
        Newton-Raphson steps allowed before raising `ConvergenceFailure`.
    strict_numerics : bool
        If True, non-finite results raise `NumericDegeneracy`. If False,
        they are returned as NaN and logged as warnings.
    """
    tolerance: float = GeodeticConstants.SURFACE_TOLERANCE.value
    max_iterations: int = GeodeticConstants.MAX_SURFACE_ITERATIONS
    strict_numerics: bool = True

    def __post_init__(self):
        if self.tolerance <= 0:
            raise ValueError(f"tolerance must be positive, got {self.tolerance}")
        if self.max_iterations < 1:
            raise ValueError(f"max_iterations must be >= 1, got {self.max_iterations}")


@dataclass(frozen=True)
class SurfaceSolution:
    """Result of the Newton-Raphson geodetic surface projection.

    Attributes
    ----------
    point : ndarray
        The surface point, shape (3,).
    alpha : float
        Normal offset at which `point` was evaluated.
    residual : float
        Implicit-surface residual at `alpha`; |residual| <= tolerance.
    iterations : int
        Newton-Raphson steps taken (at least 1).
    """
    point: Vector3
    alpha: float
    residual: float
    iterations: int


class Ellipsoid:
    """An immutable triaxial ellipsoid centered at the origin.

    Parameters
    ----------
    x, y, z : float
        Semi-axis lengths along each Cartesian axis, in meters (or any
        single linear unit used consistently).
    config : SurfaceSolverConfig, optional
        Solver settings for the Cartesian -> geodetic transforms.

    Raises
    ------
    InvalidRadius
        If any radius is negative or not finite.

    Notes
    -----
    Radii of exactly zero are accepted. Transforms that divide by that
    axis then produce non-finite values, which are reported according
    to `config.strict_numerics`.

    Examples
    --------
    >>> ellipsoid = Ellipsoid(2.0, 1.0, 1.0)
    >>> ellipsoid.scale_to_geocentric_surface([4.0, 0.0, 0.0])
    array([2., 0., 0.])
    """

    __slots__ = (
        "_radii",
        "_radii_squared",
        "_radii_to_the_fourth",
        "_one_over_radii_squared",
        "_config",
    )

    def __init__(
        self,
        x: float,
        y: float,
        z: float,
        config: Optional[SurfaceSolverConfig] = None
    ):
        radii = np.array([x, y, z], dtype=np.float64)
        if not np.all(np.isfinite(radii)) or np.any(radii < 0):
            raise InvalidRadius(radii)

        squared = radii * radii
        with np.errstate(divide='ignore'):
            one_over = 1.0 / squared

        self._radii = as_vector3(radii)
        self._radii_squared = as_vector3(squared)
        self._radii_to_the_fourth = as_vector3(squared * squared)
        self._one_over_radii_squared = as_vector3(one_over)
        self._config = config or SurfaceSolverConfig()

    @classmethod
    def from_vector(
        cls,
        radii: VectorLike,
        config: Optional[SurfaceSolverConfig] = None
    ) -> 'Ellipsoid':
        """Create an ellipsoid whose radii are the components of `radii`."""
        x, y, z = as_vector3(radii)
        return cls(x, y, z, config)

    @classmethod
    def wgs84(cls, config: Optional[SurfaceSolverConfig] = None) -> 'Ellipsoid':
        """The WGS84 Earth ellipsoid, in meters."""
        a = GeodeticConstants.WGS84_SEMI_MAJOR_AXIS.value
        b = GeodeticConstants.WGS84_SEMI_MINOR_AXIS.value
        return cls(a, a, b, config)

    @classmethod
    def unit_sphere(cls, config: Optional[SurfaceSolverConfig] = None) -> 'Ellipsoid':
        return cls(1.0, 1.0, 1.0, config)

    # =========================================================================
    # Accessors
    # =========================================================================

    def __setattr__(self, name, value):
        if hasattr(self, "_config"):
            raise AttributeError(f"{type(self).__name__} is immutable")
        object.__setattr__(self, name, value)

    @property
    def radii(self) -> Vector3:
        return self._radii

    @property
    def radii_squared(self) -> Vector3:
        return self._radii_squared

    @property
    def radii_to_the_fourth(self) -> Vector3:
        return self._radii_to_the_fourth

    @property
    def one_over_radii_squared(self) -> Vector3:
        return self._one_over_radii_squared

    @property
    def config(self) -> SurfaceSolverConfig:
        return self._config

    @property
    def maximum_radius(self) -> float:
        return float(np.max(self._radii))

    @property
    def minimum_radius(self) -> float:
        return float(np.min(self._radii))

    @property
    def is_sphere(self) -> bool:
        """True when all three radii are equal."""
        return bool(self._radii[0] == self._radii[1] == self._radii[2])

    def __eq__(self, other):
        """Equal when both the radii and the solver configuration match."""
        if not isinstance(other, Ellipsoid):
            return NotImplemented
        return (
            bool(np.array_equal(self._radii, other._radii))
            and self._config == other._config
        )

    def __hash__(self):
        return hash((tuple(self._radii.tolist()), self._config))

    def __repr__(self):
        x, y, z = self._radii.tolist()
        return f"Ellipsoid({x!r}, {y!r}, {z!r})"

    # =========================================================================
    # Surface normals
    # =========================================================================

    def geodetic_surface_normal(self, point: VectorLike) -> Vector3:
        """Outward unit normal at a Cartesian point on the surface.

        Parameters
        ----------
        point : array-like
            A point on (or very near) the ellipsoid surface. Not validated:
            for other points this is the normal of the scaled quadric shell
            passing through `point`.

        Returns
        -------
        ndarray
            Unit vector, shape (3,).
        """
        p = as_vector3(point)
        with np.errstate(divide='ignore', invalid='ignore'):
            gradient = p * self._one_over_radii_squared
            normal = gradient / np.linalg.norm(gradient)
        return self._checked(normal, "geodetic_surface_normal", p)

    def geodetic_surface_normal_at(self, coordinate: GeodeticCoordinate) -> Vector3:
        """Outward unit normal at a geodetic latitude/longitude.

        Height, if present, is ignored. The result does not depend on the
        radii: geodetic latitude is defined by the normal direction.
        """
        lat, lon = coordinate.to_radians().lat_lon()
        cos_lat = np.cos(lat)
        return as_vector3([
            cos_lat * np.cos(lon),
            cos_lat * np.sin(lon),
            np.sin(lat),
        ])

    # =========================================================================
    # Geodetic -> Cartesian
    # =========================================================================

    def to_cartesian(self, coordinate: GeodeticCoordinate) -> Vector3:
        """Convert a geodetic coordinate to a Cartesian point.

        Parameters
        ----------
        coordinate : GeodeticCoordinate2D or GeodeticCoordinate3D
            Latitude/longitude in either unit. A 2D coordinate (or a 3D
            coordinate with zero height) lands on the surface.

        Returns
        -------
        ndarray
            Cartesian point, shape (3,).
        """
        n = self.geodetic_surface_normal_at(coordinate)
        k = self._radii_squared * n
        gamma = np.sqrt(np.dot(k, n))

        with np.errstate(divide='ignore', invalid='ignore'):
            surface_point = k / gamma

        height = getattr(coordinate, "height", 0.0)
        result = surface_point + n * height
        return self._checked(result, "to_cartesian", n)

    # =========================================================================
    # Cartesian -> surface
    # =========================================================================

    def scale_to_geocentric_surface(self, point: VectorLike) -> Vector3:
        """Project a point onto the surface along the line to the center."""
        p = as_vector3(point)
        with np.errstate(divide='ignore', invalid='ignore'):
            beta = 1.0 / np.sqrt(np.sum(p * p * self._one_over_radii_squared))
            result = p * beta
        return self._checked(result, "scale_to_geocentric_surface", p)

    def solve_geodetic_surface(self, point: VectorLike) -> SurfaceSolution:
        """Find the surface point whose normal passes through `point`.

        Solves for the offset alpha such that p / (1 + alpha / rᵢ²) lies on
        the ellipsoid, using Newton-Raphson on

            S(alpha) = Σ pᵢ² / (rᵢ² dᵢ²) - 1,   dᵢ = 1 + alpha / rᵢ²

        The first step always runs, even when the initial guess already
        satisfies the tolerance. A step that would take alpha to or below
        -min(rᵢ²), over the axes `point` has a component along, is cut to
        half the remaining distance to that bound. This keeps every dᵢ
        positive, which selects the root giving the closest surface point.

        Parameters
        ----------
        point : array-like
            Any Cartesian point.

        Returns
        -------
        SurfaceSolution
            The surface point together with solver diagnostics.

        Raises
        ------
        ConvergenceFailure
            If the residual does not drop below `config.tolerance` within
            `config.max_iterations` steps.
        NumericDegeneracy
            In strict mode, if the point is at the center or a radius is 0.
        """
        p = as_vector3(point)
        cfg = self._config
        p2 = p * p

        with np.errstate(divide='ignore', invalid='ignore'):
            beta = 1.0 / np.sqrt(np.sum(p2 * self._one_over_radii_squared))
            n = beta * p * self._one_over_radii_squared
            alpha = (1.0 - beta) * np.linalg.norm(p) / np.linalg.norm(n)

        if not np.isfinite(alpha):
            return self._degenerate_solution(p)

        # Axes the point has no component along drop out of S(alpha); on the
        # rest every dᵢ stays positive
        active = p != 0.0
        p2 = p2[active]
        radii_squared = self._radii_squared[active]
        radii_to_the_fourth = self._radii_to_the_fourth[active]
        one_over_radii_squared = self._one_over_radii_squared[active]
        alpha_floor = -np.min(radii_squared)
        if not alpha > alpha_floor:
            alpha = alpha_floor / 2.0

        s = np.inf
        for iteration in range(1, cfg.max_iterations + 1):
            with np.errstate(divide='ignore', invalid='ignore'):
                d = 1.0 + alpha * one_over_radii_squared
                d2 = d * d
                s = np.sum(p2 / (radii_squared * d2)) - 1.0
                ds_dalpha = -2.0 * np.sum(p2 / (radii_to_the_fourth * d2 * d))

            if not np.isfinite(s):
                return self._degenerate_solution(p)

            evaluated_alpha = alpha
            alpha = alpha - s / ds_dalpha
            if not alpha > alpha_floor:
                alpha = (evaluated_alpha + alpha_floor) / 2.0

            if abs(s) <= cfg.tolerance:
                logger.debug(
                    f"Geodetic surface converged in {iteration} iterations "
                    f"(residual={s:.3e})"
                )
                surface_point = np.zeros(3)
                surface_point[active] = p[active] / d
                return SurfaceSolution(
                    point=as_vector3(surface_point),
                    alpha=float(evaluated_alpha),
                    residual=float(s),
                    iterations=iteration
                )

        logger.error(
            f"Geodetic surface projection of {p.tolist()} did not converge "
            f"in {cfg.max_iterations} iterations (residual={s:.3e})"
        )
        raise ConvergenceFailure(p, cfg.max_iterations, s)

    def scale_to_geodetic_surface(self, point: VectorLike) -> Vector3:
        """Closest point on the surface to `point` (normal-foot projection)."""
        return self.solve_geodetic_surface(point).point

    # =========================================================================
    # Cartesian -> geodetic
    # =========================================================================

    def to_geodetic_2d(self, point: VectorLike) -> GeodeticCoordinate2D:
        """Latitude/longitude (radians) of the surface point below `point`."""
        surface_point = self.scale_to_geodetic_surface(point)
        return self._surface_lat_lon(surface_point)

    def to_geodetic_3d(self, point: VectorLike) -> GeodeticCoordinate3D:
        """Latitude/longitude (radians) and height of a Cartesian point.

        Height is the distance from the geodetic surface point, positive
        when `point` lies outside the ellipsoid and negative inside.
        """
        p = as_vector3(point)
        surface_point = self.scale_to_geodetic_surface(p)
        offset = p - surface_point
        height = np.sign(np.dot(offset, p)) * np.linalg.norm(offset)
        return GeodeticCoordinate3D(self._surface_lat_lon(surface_point), float(height))

    def _surface_lat_lon(self, surface_point: Vector3) -> GeodeticCoordinate2D:
        if not np.all(np.isfinite(surface_point)):
            return GeodeticCoordinate2D(np.nan, np.nan, is_radians=True)
        n = self.geodetic_surface_normal(surface_point)
        latitude = np.arcsin(np.clip(n[2] / np.linalg.norm(n), -1.0, 1.0))
        longitude = np.arctan2(n[1], n[0])
        return GeodeticCoordinate2D(float(latitude), float(longitude), is_radians=True)

    # =========================================================================
    # Degeneracy handling
    # =========================================================================

    def _checked(self, result: NDArray[np.float64], operation: str,
                 point: NDArray[np.float64]) -> Vector3:
        if np.all(np.isfinite(result)):
            return as_vector3(result)
        if self._config.strict_numerics:
            raise NumericDegeneracy(operation, point)
        logger.warning(f"{operation} returned a non-finite result for {point.tolist()}")
        return as_vector3(np.full(3, np.nan))

    def _degenerate_solution(self, p: Vector3) -> SurfaceSolution:
        if self._config.strict_numerics:
            raise NumericDegeneracy("solve_geodetic_surface", p)
        logger.warning(
            f"solve_geodetic_surface returned a non-finite result for {p.tolist()}"
        )
        return SurfaceSolution(
            point=as_vector3(np.full(3, np.nan)),
            alpha=float("nan"),
            residual=float("nan"),
            iterations=0
        )
