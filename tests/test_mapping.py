"""Tests for nearest_mapping."""

import numpy as np
import pytest

from geopartition.domain import RegularGrid, georef
from geopartition.errors import UnknownVariableError
from geopartition.mapping import nearest_mapping


@pytest.fixture
def scattered():
    coords = np.array([[0.1, 0.0], [1.9, 1.2], [2.1, 0.9], [0.0, 2.2]])
    return georef({"z": [1.0, 2.0, 3.0, np.nan], "w": [0.0, 0.0, 0.0, 1.0]}, coords)


def test_maps_to_nearest_grid_point(scattered, grid_3x3):
    mapping = nearest_mapping(scattered, grid_3x3)
    # data 1 and 2 both fall on grid point 5 = (2, 1); the later one wins
    assert mapping["z"] == {0: 0, 5: 2}
    assert mapping["w"] == {0: 0, 5: 2, 6: 3}


def test_selected_variables(scattered, grid_3x3):
    assert list(nearest_mapping(scattered, grid_3x3, ["w"])) == ["w"]


def test_unknown_variable(scattered, grid_3x3):
    with pytest.raises(UnknownVariableError, match=r"\[E2002\]"):
        nearest_mapping(scattered, grid_3x3, ["nope"])


def test_dimension_mismatch(scattered):
    with pytest.raises(ValueError, match="2D"):
        nearest_mapping(scattered, RegularGrid(5))


def test_empty_target(scattered):
    with pytest.raises(ValueError, match="empty domain"):
        nearest_mapping(scattered, RegularGrid((0, 0)))


def test_same_support_is_identity(quadrant_data):
    mapping = nearest_mapping(quadrant_data, quadrant_data.domain)
    assert mapping["z"] == {i: i for i in range(400)}
