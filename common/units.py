"""
Unit Registry for Angles and Heights.

This module provides a centralized unit system using the `pint` library.
Geodetic coordinates carry angles (degrees or radians) and a single linear
height unit (meters); everything that crosses a public boundary with
attached units is converted here.

Example Usage
-------------
>>> from common.units import Q_
>>> Q_(90, 'degree').to('radian')
<Quantity(1.57079633, 'radian')>
"""

from functools import wraps
import inspect
from typing import Callable, Union
import warnings

import pint
from pint import UnitRegistry as PintUnitRegistry

# Create the global unit registry
ureg = PintUnitRegistry()

# Convenience alias for creating quantities
Q_ = ureg.Quantity

# The only linear unit heights are expressed in
HEIGHT_UNIT = "meter"
ANGLE_UNIT = "radian"


def validate_units(expected_units: dict[str, str]):
    """Decorator to validate units of function arguments.

    Parameters
    ----------
    expected_units : dict[str, str]
        Mapping from argument names to expected unit strings.

    Examples
    --------
    >>> @validate_units({'height': 'm'})
    ... def raise_by(height):
    ...     return height
    """
    def decorator(func: Callable) -> Callable:
        sig = inspect.signature(func)

        @wraps(func)
        def wrapper(*args, **kwargs):
            bound = sig.bind(*args, **kwargs)
            bound.apply_defaults()

            for param_name, expected_unit in expected_units.items():
                value = bound.arguments.get(param_name)
                if isinstance(value, pint.Quantity):
                    try:
                        value.to(expected_unit)
                    except pint.DimensionalityError as e:
                        raise ValueError(
                            f"Parameter '{param_name}' has incompatible units. "
                            f"Expected {expected_unit}, got {value.units}"
                        ) from e

            return func(*args, **kwargs)
        return wrapper
    return decorator


def ensure_quantity(value: Union[float, pint.Quantity], default_unit: str) -> pint.Quantity:
    """Ensure a value is a pint Quantity, applying default unit if necessary.

    Parameters
    ----------
    value : float or pint.Quantity
        The value to convert.
    default_unit : str
        The unit to apply if value is a bare number.

    Returns
    -------
    pint.Quantity
        The value with units.

    Warnings
    --------
    Issues a warning if a bare number is provided without units.
    """
    if isinstance(value, pint.Quantity):
        return value
    warnings.warn(
        f"Bare number {value} provided without units. "
        f"Assuming {default_unit}. Consider using explicit units.",
        UserWarning,
        stacklevel=3
    )
    return Q_(value, default_unit)
