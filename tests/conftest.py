"""Shared test fixtures for the geopartition test suite.

Fixture Naming Convention
=========================

**Domain fixtures** follow the pattern ``grid_{nx}x{ny}`` for regular grids
with unit spacing and origin at zero. Point sets and data use descriptive
names (``square_corners``, ``quadrant_data``).

Grid ordering: the linear index runs fastest along the first axis, so on a
3x3 grid indices 0, 1, 2 share ``y = 0``.
"""

import os
from collections.abc import Callable, Iterable

import numpy as np
import pytest
from hypothesis import Phase, Verbosity, settings

from geopartition.domain import GeoData, PointSet, RegularGrid, georef

# =============================================================================
# Hypothesis Configuration for Performance
# =============================================================================
# - "ci": Fast profile for CI pipelines (fewer examples, no deadline)
# - "dev": Standard development profile (moderate examples)
# - "thorough": Full property testing (many examples, for pre-release)

settings.register_profile(
    "ci",
    max_examples=10,
    deadline=None,
    phases=[Phase.explicit, Phase.reuse, Phase.generate],
    verbosity=Verbosity.quiet,
)

settings.register_profile(
    "dev",
    max_examples=25,
    deadline=5000,
    verbosity=Verbosity.normal,
)

settings.register_profile(
    "thorough",
    max_examples=100,
    deadline=None,
    verbosity=Verbosity.verbose,
)

# Set HYPOTHESIS_PROFILE=ci in CI environments for faster tests
_profile = os.environ.get("HYPOTHESIS_PROFILE", "dev")
settings.load_profile(_profile)

# =============================================================================
# Test Configuration Constants
# =============================================================================

DEFAULT_SEED = 42
ALT_SEED = 123


# =============================================================================
# --- Fixtures ---
# =============================================================================
@pytest.fixture(scope="session")
def setify() -> Callable[[Iterable[Iterable[int]]], set[frozenset[int]]]:
    """Convert nested index lists into an order-free set of frozensets."""

    def _setify(groups: Iterable[Iterable[int]]) -> set[frozenset[int]]:
        return {frozenset(int(i) for i in group) for group in groups}

    return _setify


@pytest.fixture(scope="session")
def grid_3x3() -> RegularGrid:
    """3x3 unit grid, 9 points."""
    return RegularGrid((3, 3))


@pytest.fixture(scope="session")
def grid_10x10() -> RegularGrid:
    """10x10 unit grid, 100 points with coordinates 0..9."""
    return RegularGrid((10, 10))


@pytest.fixture(scope="session")
def grid_100x100() -> RegularGrid:
    """100x100 unit grid, 10000 points. Read-only, shared across tests."""
    return RegularGrid((100, 100))


@pytest.fixture(scope="session")
def square_corners() -> PointSet:
    """Unit square corners plus one point close to the origin."""
    return PointSet(
        np.array(
            [
                [0.0, 0.0],
                [1.0, 0.0],
                [1.0, 1.0],
                [0.0, 1.0],
                [0.2, 0.2],
            ]
        )
    )


@pytest.fixture(scope="session")
def quadrant_data() -> GeoData:
    """20x20 grid whose variable ``z`` is constant on each 10x10 quadrant.

    z = 1 for x < 10, y < 10; 2 for x >= 10, y < 10;
    z = 3 for x < 10, y >= 10; 4 for x >= 10, y >= 10.
    """
    x, y = np.meshgrid(np.arange(20), np.arange(20), indexing="ij")
    z = 1.0 + (x >= 10) + 2.0 * (y >= 10)
    return georef({"z": z})


@pytest.fixture
def rng() -> np.random.Generator:
    """Seeded random generator."""
    return np.random.default_rng(DEFAULT_SEED)
