import pytest

from geospatial.ellipsoid import Ellipsoid


@pytest.fixture
def unit_sphere():
    return Ellipsoid.unit_sphere()


@pytest.fixture
def wgs84():
    """WGS84 Earth ellipsoid in meters."""
    return Ellipsoid.wgs84()


@pytest.fixture
def oblate():
    """Oblate Earth-like ellipsoid with a rounded polar radius."""
    return Ellipsoid(6378137.0, 6378137.0, 6356752.3)


@pytest.fixture
def triaxial():
    """Ellipsoid with three distinct radii."""
    return Ellipsoid(3.0, 2.5, 2.0)
