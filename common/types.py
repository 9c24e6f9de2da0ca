"""
Value Types for Geodetic and Cartesian Coordinates.

This module defines the coordinate types exchanged with the ellipsoid
transforms. All types are immutable: conversions return new values and
never modify the receiver, so instances can be shared between threads.

Design Rationale
----------------
A 3D geodetic coordinate is a 2D coordinate plus a height. It is modeled
by composition (`GeodeticCoordinate3D.surface`) with delegating accessors,
rather than by subclassing, so a 3D value is never accepted where the
surface-only 2D type is required by mistake.
"""

from dataclasses import dataclass, replace
from typing import Sequence, Tuple, Union

import numpy as np
from numpy.typing import NDArray

from common.units import (
    ANGLE_UNIT,
    HEIGHT_UNIT,
    Q_,
    ensure_quantity,
    validate_units,
)

# 3-component Cartesian vector, shape (3,)
Vector3 = NDArray[np.float64]

# Slack for latitudes produced by floating-point round trips
_LATITUDE_SLACK = 1e-9


def as_vector3(values: Union[Sequence[float], NDArray[np.float64]]) -> Vector3:
    """Return a read-only float64 copy of a 3-component vector.

    Raises
    ------
    ValueError
        If `values` does not hold exactly three components.
    """
    vec = np.array(values, dtype=np.float64)
    if vec.shape != (3,):
        raise ValueError(f"Expected a 3-component vector, got shape {vec.shape}")
    vec.flags.writeable = False
    return vec


@dataclass(frozen=True)
class GeodeticCoordinate2D:
    """Latitude and longitude of a point on the ellipsoid surface.

    Attributes
    ----------
    latitude : float
        Geodetic latitude, positive north.
    longitude : float
        Geodetic longitude, positive east.
    is_radians : bool
        Unit flag. False (the default) means both angles are in DEGREES.

    Examples
    --------
    >>> coord = GeodeticCoordinate2D(45.0, -90.0)
    >>> coord.to_radians().lat_lon()
    (0.7853981633974483, -1.5707963267948966)
    """
    latitude: float
    longitude: float
    is_radians: bool = False

    def __post_init__(self):
        """Validate the latitude range."""
        limit = np.pi / 2 if self.is_radians else 90.0
        lat = float(self.latitude)
        if np.isfinite(lat) and abs(lat) > limit + _LATITUDE_SLACK:
            unit = "rad" if self.is_radians else "deg"
            raise ValueError(
                f"Latitude {lat} {unit} out of range [-{limit}, {limit}]. "
                f"Check the unit flag."
            )

    def to_radians(self) -> 'GeodeticCoordinate2D':
        """Return this coordinate in radians (a copy if already radians)."""
        if self.is_radians:
            return replace(self)
        return GeodeticCoordinate2D(
            latitude=float(np.radians(self.latitude)),
            longitude=float(np.radians(self.longitude)),
            is_radians=True
        )

    def to_degrees(self) -> 'GeodeticCoordinate2D':
        """Return this coordinate in degrees (a copy if already degrees)."""
        if not self.is_radians:
            return replace(self)
        return GeodeticCoordinate2D(
            latitude=float(np.degrees(self.latitude)),
            longitude=float(np.degrees(self.longitude)),
            is_radians=False
        )

    def lat_lon(self) -> Tuple[float, float]:
        return self.latitude, self.longitude


@dataclass(frozen=True)
class GeodeticCoordinate3D:
    """Latitude, longitude and height relative to the ellipsoid.

    Attributes
    ----------
    surface : GeodeticCoordinate2D
        The latitude/longitude part, carrying the angle unit flag.
    height : float
        Height along the surface normal in METERS. Positive outside the
        ellipsoid, negative inside. Default 0 (on the surface).
    """
    surface: GeodeticCoordinate2D
    height: float = 0.0

    @classmethod
    def from_degrees(cls, lat_deg: float, lon_deg: float,
                     height_m: float = 0.0) -> 'GeodeticCoordinate3D':
        return cls(GeodeticCoordinate2D(lat_deg, lon_deg, is_radians=False), height_m)

    @classmethod
    def from_radians(cls, lat_rad: float, lon_rad: float,
                     height_m: float = 0.0) -> 'GeodeticCoordinate3D':
        return cls(GeodeticCoordinate2D(lat_rad, lon_rad, is_radians=True), height_m)

    @property
    def latitude(self) -> float:
        return self.surface.latitude

    @property
    def longitude(self) -> float:
        return self.surface.longitude

    @property
    def is_radians(self) -> bool:
        return self.surface.is_radians

    def lat_lon(self) -> Tuple[float, float]:
        return self.surface.lat_lon()

    def to_radians(self) -> 'GeodeticCoordinate3D':
        """Return this coordinate with angles in radians; height is kept."""
        return GeodeticCoordinate3D(self.surface.to_radians(), self.height)

    def to_degrees(self) -> 'GeodeticCoordinate3D':
        """Return this coordinate with angles in degrees; height is kept."""
        return GeodeticCoordinate3D(self.surface.to_degrees(), self.height)


GeodeticCoordinate = Union[GeodeticCoordinate2D, GeodeticCoordinate3D]


@validate_units({'latitude': ANGLE_UNIT, 'longitude': ANGLE_UNIT, 'height': HEIGHT_UNIT})
def geodetic_from_quantities(latitude, longitude, height=Q_(0.0, HEIGHT_UNIT)) -> GeodeticCoordinate3D:
    """Build a 3D coordinate from pint quantities.

    Parameters
    ----------
    latitude, longitude : pint.Quantity
        Angles in any angle unit. Bare numbers are taken as radians,
        with a warning.
    height : pint.Quantity
        Height in any length unit; stored in meters.

    Returns
    -------
    GeodeticCoordinate3D
        Coordinate tagged as radians.

    Raises
    ------
    ValueError
        If a quantity has incompatible units.
    """
    latitude = ensure_quantity(latitude, ANGLE_UNIT)
    longitude = ensure_quantity(longitude, ANGLE_UNIT)
    height = ensure_quantity(height, HEIGHT_UNIT)
    return GeodeticCoordinate3D.from_radians(
        float(latitude.to(ANGLE_UNIT).magnitude),
        float(longitude.to(ANGLE_UNIT).magnitude),
        float(height.to(HEIGHT_UNIT).magnitude)
    )
