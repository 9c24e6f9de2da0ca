import numpy as np
import pytest

from common.errors import ConsistencyViolation
from common.types import GeodeticCoordinate2D, GeodeticCoordinate3D
from geospatial.rotational import WGS84
from geospatial.ellipsoid import Ellipsoid
from validation.consistency import TransformConsistencyChecker, ValidationResult


@pytest.fixture
def wgs84_checker(wgs84):
    return TransformConsistencyChecker(wgs84)


def test_round_trip_check_passes(unit_sphere):
    checker = TransformConsistencyChecker(unit_sphere)
    result = checker.check_round_trip(GeodeticCoordinate2D(33.0, -77.0))
    assert isinstance(result, ValidationResult)
    assert result.passed, result.message
    assert result.test_name == "geodetic_round_trip"


def test_round_trip_check_with_height(wgs84_checker):
    coordinate = GeodeticCoordinate3D.from_degrees(-20.0, 60.0, 12000.0)
    result = wgs84_checker.check_round_trip(coordinate, height_tolerance=1e-3)
    assert result.passed, result.message


def test_round_trip_check_at_pole(triaxial):
    result = TransformConsistencyChecker(triaxial).check_round_trip(GeodeticCoordinate2D(90.0, 45.0))
    assert result.passed, result.message
    assert result.details['longitude_error_rad'] == 0.0


def test_check_all(triaxial):
    points = [np.array([4.0, 1.0, -1.0]), np.array([0.5, 0.5, 0.5]), np.array([-1.0, 3.0, 2.0])]
    results = TransformConsistencyChecker(triaxial).check_all(points)
    assert len(results) == 3 * len(points)
    assert all(r.passed for r in results), [r.message for r in results if not r.passed]


def test_surface_residual_details(wgs84_checker):
    result = wgs84_checker.check_surface_residual([7e6, -2e6, 3e6])
    assert result.passed
    assert result.details['iterations'] >= 1
    assert abs(result.details['residual']) <= 1e-10 + 1e-14


def test_closed_form_check():
    reference_checker = TransformConsistencyChecker(WGS84.to_ellipsoid())
    for coordinate in (
        GeodeticCoordinate3D.from_degrees(51.5, -0.1, 35.0),
        GeodeticCoordinate3D.from_degrees(-80.0, 10.0, 0.0),
        GeodeticCoordinate2D(5.0, 179.0),
    ):
        result = reference_checker.check_against_closed_form(coordinate, WGS84)
        assert result.passed, result.message


def test_closed_form_check_derives_reference(oblate):
    checker = TransformConsistencyChecker(oblate)
    result = checker.check_against_closed_form(GeodeticCoordinate3D.from_degrees(-41.0, 174.8, 120.0))
    assert result.passed, result.message
    assert result.test_name == "closed_form_rotational"


def test_closed_form_check_needs_rotational_symmetry(triaxial):
    with pytest.raises(ValueError):
        TransformConsistencyChecker(triaxial).check_against_closed_form(GeodeticCoordinate2D(0.0, 0.0))


@pytest.mark.parametrize("point", [
    [6378137.0 + 100.0, 0.0, 0.0],
    [4e6, 3e6, 4e6],
    [-1.2e6, -5.5e6, -2.9e6],
    [5e6, -4e6, 3e6],
])
def test_agrees_with_pyproj(wgs84_checker, point):
    result = wgs84_checker.check_against_pyproj(np.array(point))
    assert result.passed, result.message


def test_failed_check_is_reported_not_raised(unit_sphere):
    checker = TransformConsistencyChecker(unit_sphere)
    result = checker.check_unit_normal([1.0, 0.0, 0.0], tolerance=-1.0)
    assert not result.passed


def test_strict_mode_raises(unit_sphere):
    checker = TransformConsistencyChecker(unit_sphere, strict_mode=True)
    with pytest.raises(ConsistencyViolation):
        checker.check_round_trip(GeodeticCoordinate2D(10.0, 10.0), angle_tolerance=-1.0)


def test_closed_form_check_detects_wrong_ellipsoid():
    checker = TransformConsistencyChecker(Ellipsoid(6378137.0, 6378137.0, 6378137.0))
    result = checker.check_against_closed_form(GeodeticCoordinate2D(45.0, 0.0), WGS84)
    assert not result.passed
