"""
Vector Helpers for 3-Component Cartesian Vectors.

Vectors are plain float64 numpy arrays of shape (3,); addition,
subtraction, scaling and elementwise multiplication are numpy operators.
This module adds the few operations that need a name or a guard.
"""

from typing import Sequence, Union

import numpy as np
from numpy.typing import NDArray

from common.errors import NumericDegeneracy
from common.types import Vector3, as_vector3

VectorLike = Union[Sequence[float], NDArray[np.float64]]


def dot(a: VectorLike, b: VectorLike) -> float:
    return float(np.dot(a, b))


def length_squared(vec: VectorLike) -> float:
    return dot(vec, vec)


def length(vec: VectorLike) -> float:
    return float(np.sqrt(length_squared(vec)))


def normalize(vec: VectorLike) -> Vector3:
    """Return `vec` scaled to unit length.

    Raises
    ------
    NumericDegeneracy
        If `vec` has zero or non-finite length.
    """
    magnitude = length(vec)
    if magnitude == 0.0 or not np.isfinite(magnitude):
        raise NumericDegeneracy("normalize", vec)
    return as_vector3(np.asarray(vec, dtype=np.float64) / magnitude)


def rotate_around_axis(vec: VectorLike, axis: VectorLike, theta: float) -> Vector3:
    """Rotate a vector about an arbitrary axis through the origin.

    Parameters
    ----------
    vec : array-like
        Vector to rotate.
    axis : array-like
        Rotation axis. Need not be unit length, but must be non-zero.
    theta : float
        Rotation angle in radians, counter-clockwise when looking down
        the axis towards the origin.

    Returns
    -------
    ndarray
        The rotated vector.

    Notes
    -----
    Rodrigues' formula written for a non-normalized axis (u, v, w) with
    m² = u² + v² + w²:

        r = [a (a·x) + (m² x - a (a·x)) cos θ + m (a × x) sin θ] / m²
    """
    x = np.asarray(vec, dtype=np.float64)
    a = np.asarray(axis, dtype=np.float64)

    ms = length_squared(a)
    if ms == 0.0:
        raise NumericDegeneracy("rotate_around_axis", a)
    m = np.sqrt(ms)

    along = a * np.dot(a, x)
    rotated = (
        along
        + (ms * x - along) * np.cos(theta)
        + m * np.cross(a, x) * np.sin(theta)
    ) / ms
    return as_vector3(rotated)
