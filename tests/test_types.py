import dataclasses

import numpy as np
import pytest

from common.types import (
    GeodeticCoordinate2D,
    GeodeticCoordinate3D,
    as_vector3,
    geodetic_from_quantities,
)
from common.units import Q_


def test_as_vector3_returns_read_only_copy():
    source = [1.0, 2.0, 3.0]
    vec = as_vector3(source)
    assert vec.dtype == np.float64
    with pytest.raises(ValueError):
        vec[0] = 5.0


@pytest.mark.parametrize("bad", [[1.0, 2.0], [1.0, 2.0, 3.0, 4.0], [[1.0, 2.0, 3.0]]])
def test_as_vector3_rejects_wrong_shape(bad):
    with pytest.raises(ValueError):
        as_vector3(bad)


def test_coordinates_default_to_degrees():
    coord = GeodeticCoordinate2D(45.0, -90.0)
    assert not coord.is_radians
    assert coord.lat_lon() == (45.0, -90.0)


def test_degree_radian_conversion():
    rad = GeodeticCoordinate2D(45.0, -90.0).to_radians()
    assert rad.is_radians
    assert np.isclose(rad.latitude, np.pi / 4)
    assert np.isclose(rad.longitude, -np.pi / 2)

    back = rad.to_degrees()
    assert not back.is_radians
    assert np.isclose(back.latitude, 45.0)
    assert np.isclose(back.longitude, -90.0)


def test_conversion_matches_numpy_and_yields_floats():
    rad = GeodeticCoordinate2D(37.25, -122.5).to_radians()
    assert rad.latitude == np.radians(37.25)
    assert rad.longitude == np.radians(-122.5)
    assert type(rad.latitude) is float
    assert type(rad.to_degrees().longitude) is float


def test_conversion_to_same_unit_is_a_copy():
    coord = GeodeticCoordinate2D(0.5, 1.0, is_radians=True)
    same = coord.to_radians()
    assert same == coord
    assert same is not coord

    deg = GeodeticCoordinate2D(10.0, 20.0)
    assert deg.to_degrees() == deg


def test_coordinates_are_immutable():
    coord = GeodeticCoordinate2D(10.0, 20.0)
    with pytest.raises(dataclasses.FrozenInstanceError):
        coord.latitude = 5.0

    coord3 = GeodeticCoordinate3D.from_degrees(10.0, 20.0, 30.0)
    with pytest.raises(dataclasses.FrozenInstanceError):
        coord3.height = 0.0


@pytest.mark.parametrize("lat, is_radians", [(91.0, False), (-90.5, False), (1.6, True), (-2.0, True)])
def test_latitude_out_of_range(lat, is_radians):
    with pytest.raises(ValueError):
        GeodeticCoordinate2D(lat, 0.0, is_radians=is_radians)


def test_nan_latitude_is_allowed():
    coord = GeodeticCoordinate2D(np.nan, np.nan, is_radians=True)
    assert np.isnan(coord.latitude)


def test_3d_coordinate_delegates_to_surface():
    coord = GeodeticCoordinate3D.from_degrees(12.0, 34.0, 56.0)
    assert coord.latitude == 12.0
    assert coord.longitude == 34.0
    assert coord.height == 56.0
    assert not coord.is_radians
    assert coord.lat_lon() == (12.0, 34.0)
    assert coord.surface == GeodeticCoordinate2D(12.0, 34.0)


def test_3d_coordinate_conversion_keeps_height():
    coord = GeodeticCoordinate3D.from_degrees(12.0, 34.0, 56.0).to_radians()
    assert coord.is_radians
    assert np.isclose(coord.latitude, np.radians(12.0))
    assert coord.height == 56.0
    assert np.isclose(coord.to_degrees().longitude, 34.0)


def test_3d_height_defaults_to_surface():
    assert GeodeticCoordinate3D.from_radians(0.1, 0.2).height == 0.0


def test_geodetic_from_quantities():
    coord = geodetic_from_quantities(Q_(30.0, 'degree'), Q_(-45.0, 'degree'), Q_(2.5, 'kilometer'))
    assert coord.is_radians
    assert np.isclose(coord.latitude, np.pi / 6)
    assert np.isclose(coord.longitude, -np.pi / 4)
    assert np.isclose(coord.height, 2500.0)


def test_geodetic_from_quantities_rejects_wrong_units():
    with pytest.raises(ValueError):
        geodetic_from_quantities(Q_(1.0, 'meter'), Q_(0.0, 'degree'))
    with pytest.raises(ValueError):
        geodetic_from_quantities(Q_(1.0, 'degree'), Q_(0.0, 'degree'), Q_(3.0, 'second'))


def test_geodetic_from_bare_numbers_warns():
    with pytest.warns(UserWarning):
        coord = geodetic_from_quantities(0.5, 0.25)
    assert coord.lat_lon() == (0.5, 0.25)
    assert coord.height == 0.0
