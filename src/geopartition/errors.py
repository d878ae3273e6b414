"""Exceptions raised by geopartition.

Every error message starts with a stable error code so that failures can be
matched in logs and tests independently of the surrounding wording.

| Code  | Exception              | Raised when                                   |
|-------|------------------------|-----------------------------------------------|
| E2001 | InvalidParameterError  | A partitioner is configured with bad values   |
| E2002 | UnknownVariableError   | A variable is not present in spatial data     |
| E2003 | EmptyDomainError       | A partitioner needs at least one point        |
"""

from __future__ import annotations

from collections.abc import Iterable


class PartitioningError(Exception):
    """Base class for all geopartition errors.

    Parameters
    ----------
    message : str
        Human-readable description of the problem.
    error_code : str
        Stable error code, prepended to the message as ``[CODE]``.

    Attributes
    ----------
    error_code : str
        The error code passed at construction.
    """

    default_code = "E2000"

    def __init__(self, message: str, error_code: str | None = None) -> None:
        self.error_code = error_code or self.default_code
        self.message = f"[{self.error_code}] {message}"
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


class InvalidParameterError(PartitioningError, ValueError):
    """Raised when a partitioner is configured with invalid parameters.

    Examples include non-positive counts or radii, fractions outside
    ``(0, 1)``, or asking for more subsets than there are points.

    Inherits from `ValueError` so callers catching ``ValueError`` keep working.
    """

    default_code = "E2001"


class UnknownVariableError(PartitioningError, KeyError):
    """Raised when a variable name is not present in spatial data.

    Parameters
    ----------
    variable : str
        The requested variable name.
    available : iterable of str
        Names of the variables that do exist.
    """

    default_code = "E2002"

    def __init__(self, variable: str, available: Iterable[str] = ()) -> None:
        self.variable = variable
        self.available = tuple(available)
        listing = ", ".join(repr(v) for v in self.available) or "none"
        super().__init__(
            f"Unknown variable {variable!r}. Available variables: {listing}."
        )


class EmptyDomainError(PartitioningError, ValueError):
    """Raised when a partitioner that requires points receives an empty subject."""

    default_code = "E2003"

    def __init__(self, partitioner_name: str) -> None:
        self.partitioner_name = partitioner_name
        super().__init__(
            f"{partitioner_name} cannot partition an empty domain (0 points). "
            "Check that the domain or restricted subset contains points."
        )
