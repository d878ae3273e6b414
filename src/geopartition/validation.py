"""Parameter validation shared by the partitioners.

Every helper raises `InvalidParameterError` (a `ValueError`) with the name
of the offending parameter and the value received, and returns the value in
a normalized form so partitioners can store it directly.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from numbers import Integral, Real

import numpy as np

from geopartition.errors import InvalidParameterError


def validate_positive_int(value: int, name: str) -> int:
    """Ensure ``value`` is an integer greater than zero.

    Examples
    --------
    >>> validate_positive_int(3, "k")
    3
    >>> validate_positive_int(0, "k")  # doctest: +SKIP
    InvalidParameterError: [E2001] k must be a positive integer (got 0).
    """
    if isinstance(value, bool) or not isinstance(value, Integral):
        raise InvalidParameterError(f"{name} must be an integer (got {value!r}).")
    if value <= 0:
        raise InvalidParameterError(f"{name} must be a positive integer (got {value}).")
    return int(value)


def validate_positive_float(value: float, name: str) -> float:
    """Ensure ``value`` is a finite real number greater than zero."""
    if isinstance(value, bool) or not isinstance(value, Real):
        raise InvalidParameterError(f"{name} must be a number (got {value!r}).")
    if not math.isfinite(value) or value <= 0:
        raise InvalidParameterError(
            f"{name} must be positive and finite (got {value})."
        )
    return float(value)


def validate_non_negative_float(value: float, name: str) -> float:
    """Ensure ``value`` is a finite real number greater than or equal to zero."""
    if isinstance(value, bool) or not isinstance(value, Real):
        raise InvalidParameterError(f"{name} must be a number (got {value!r}).")
    if not math.isfinite(value) or value < 0:
        raise InvalidParameterError(
            f"{name} must be non-negative and finite (got {value})."
        )
    return float(value)


def validate_fraction(value: float, name: str = "fraction") -> float:
    """Ensure ``value`` lies in the open interval (0, 1)."""
    if isinstance(value, bool) or not isinstance(value, Real):
        raise InvalidParameterError(f"{name} must be a number (got {value!r}).")
    if not 0.0 < value < 1.0:
        raise InvalidParameterError(
            f"{name} must lie strictly between 0 and 1 (got {value})."
        )
    return float(value)


def validate_vector(
    values: Sequence[float] | float, name: str, *, nonzero: bool = False
) -> tuple[float, ...]:
    """Normalize a direction/point/size parameter to a tuple of finite floats.

    Parameters
    ----------
    values : sequence of float or float
        Vector components. A scalar becomes a 1-tuple.
    name : str
        Parameter name used in error messages.
    nonzero : bool, default=False
        If True, reject the zero vector.

    Returns
    -------
    tuple of float
        Hashable copy of the components, suitable for frozen dataclasses.
    """
    try:
        arr = np.atleast_1d(np.asarray(values, dtype=np.float64))
    except (TypeError, ValueError) as exc:
        raise InvalidParameterError(
            f"{name} must be a sequence of numbers (got {values!r})."
        ) from exc
    if arr.ndim != 1 or arr.size == 0:
        raise InvalidParameterError(
            f"{name} must be a non-empty 1-D sequence of numbers (got {values!r})."
        )
    if not np.all(np.isfinite(arr)):
        raise InvalidParameterError(f"{name} must contain finite values (got {values!r}).")
    if nonzero and not np.any(arr):
        raise InvalidParameterError(f"{name} must not be the zero vector (got {values!r}).")
    return tuple(float(v) for v in arr)


def validate_dimension(
    vector: tuple[float, ...], n_dims: int, name: str
) -> None:
    """Ensure a vector parameter matches the subject's dimension."""
    if len(vector) != n_dims:
        raise InvalidParameterError(
            f"{name} has {len(vector)} components but the subject is {n_dims}D."
        )
