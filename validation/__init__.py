"""
Validation Framework for Ellipsoid Coordinate Transforms.

This module provides consistency checks against geometric identities and
independent reference implementations.
"""

from validation.consistency import (
    ValidationResult,
    TransformConsistencyChecker,
)

__all__ = [
    "ValidationResult",
    "TransformConsistencyChecker",
]
