import numpy as np
import pint
import pytest

from common.units import ANGLE_UNIT, HEIGHT_UNIT, Q_, ensure_quantity, validate_units


def test_registry_angle_and_height_units():
    assert np.isclose(Q_(180.0, 'degree').to(ANGLE_UNIT).magnitude, np.pi)
    assert np.isclose(Q_(1.5, 'kilometer').to(HEIGHT_UNIT).magnitude, 1500.0)


def test_ensure_quantity_passes_quantities_through():
    q = Q_(3.0, 'meter')
    assert ensure_quantity(q, 'meter') is q


def test_ensure_quantity_warns_on_bare_numbers():
    with pytest.warns(UserWarning):
        q = ensure_quantity(3.0, 'meter')
    assert isinstance(q, pint.Quantity)
    assert q.to('meter').magnitude == 3.0


def test_validate_units_decorator():
    @validate_units({'height': 'meter'})
    def raise_by(height):
        return height

    assert raise_by(Q_(1.0, 'foot')) == Q_(1.0, 'foot')
    assert raise_by(4.0) == 4.0
    with pytest.raises(ValueError):
        raise_by(Q_(1.0, 'second'))
