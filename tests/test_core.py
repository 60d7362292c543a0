from concurrent.futures import ThreadPoolExecutor

import numpy as np
import pytest

from latticenoise import (
    ConfigurationError,
    DEFAULT_GRID_SIZE,
    DimensionMismatchError,
    NoiseConfig,
    NoiseField,
    lookup_gradient,
    smoothstep,
)
from latticenoise.core import wrap_coordinate


def test_default_configuration():
    field = NoiseField({"seed": 7})
    assert field.grid_size == DEFAULT_GRID_SIZE
    assert field.dimension == 3
    assert isinstance(field.noise([1.0, 2.0, 3.5]), float)


def test_seed_is_drawn_when_omitted():
    field = NoiseField(NoiseConfig(grid_size=(4, 4)))
    assert isinstance(field.seed, int)
    rebuilt = NoiseField(NoiseConfig(seed=field.seed, grid_size=(4, 4)))
    assert rebuilt.noise([1.3, 2.7]) == field.noise([1.3, 2.7])


def test_accepts_camel_case_grid_size():
    field = NoiseField({"seed": 1, "gridSize": [5, 6]})
    assert field.grid_size == (5, 6)


def test_rejects_both_grid_size_spellings():
    with pytest.raises(ConfigurationError):
        NoiseField({"seed": 1, "grid_size": [5, 6], "gridSize": [5, 6]})


def test_field_state_is_fixed_after_construction():
    field = NoiseField({"seed": 1, "grid_size": [4, 4]})
    before = field.noise_array([[1.5, 2.5]])
    with pytest.raises(AttributeError):
        field.config.grid_size = (4,)
    with pytest.raises(AttributeError):
        field.config = NoiseConfig(seed=2, grid_size=(4,))
    with pytest.raises(AttributeError):
        field.dimension = 1
    with pytest.raises(ValueError):
        field.lattice.strides[0] = 0
    assert field.dimension == 2
    assert field.grid_size == (4, 4)
    assert np.array_equal(field.noise_array([[1.5, 2.5]]), before)


def test_drawn_seed_leaves_caller_config_untouched():
    config = NoiseConfig(grid_size=(4, 4))
    field = NoiseField(config)
    assert config.seed is None
    assert isinstance(field.config.seed, int)


@pytest.mark.parametrize(
    "options",
    [
        {"grid_size": []},
        {"grid_size": [10] * 11},
        {"grid_size": [10, 0]},
        {"grid_size": [10, -2]},
        {"grid_size": [2.5]},
        {"grid_size": 10},
        {"seed": "abc", "grid_size": [10]},
        {"seed": 1, "size": [10]},
    ],
)
def test_invalid_configuration_raises(options):
    with pytest.raises(ConfigurationError):
        NoiseField(options)


def test_unsupported_config_type_raises():
    with pytest.raises(ConfigurationError):
        NoiseField([10, 10])


def test_same_config_is_deterministic():
    first = NoiseField({"seed": 500, "grid_size": [10, 10, 10]})
    second = NoiseField({"seed": 500, "grid_size": [10, 10, 10]})
    rng = np.random.default_rng(0)
    for point in rng.uniform(-50.0, 50.0, size=(25, 3)):
        assert first.noise(point) == pytest.approx(second.noise(point), abs=1e-10)


def test_different_seeds_differ():
    first = NoiseField({"seed": 100, "grid_size": [10, 10]})
    second = NoiseField({"seed": 200, "grid_size": [10, 10]})
    points = [[1.5, 2.5], [3.25, 4.75], [7.1, 0.4]]
    assert any(first.noise(p) != second.noise(p) for p in points)


def test_1d_closed_form(field_1d):
    g1 = lookup_gradient(field_1d.lattice, [1])
    g2 = lookup_gradient(field_1d.lattice, [2])
    expected = g1 * 0.3 + smoothstep(0.3) * (g2 * (-0.7) - g1 * 0.3)
    assert field_1d.noise([1.3]) == pytest.approx(expected, abs=1e-10)


def test_noise_is_zero_at_lattice_nodes(field_3d):
    for point in ([0, 0, 0], [1, 2, 3], [9, 9, 9], [10, 10, 10], [-4, 13, 7]):
        assert field_3d.noise(point) == pytest.approx(0.0, abs=1e-12)


@pytest.mark.parametrize("x", [0.0, 1.5, 3.75, 9.99, -0.25, -13.6, 1234.5678])
def test_wrap_law_1d(field_1d, x):
    assert field_1d.noise([x]) == pytest.approx(field_1d.noise([x + 10]), abs=1e-10)


def test_wrap_law_per_axis():
    field = NoiseField({"seed": 3, "grid_size": [4, 7]})
    assert field.noise([1.5, 2.3]) == pytest.approx(field.noise([5.5, 2.3]), abs=1e-10)
    assert field.noise([1.5, 2.3]) == pytest.approx(field.noise([1.5, 9.3]), abs=1e-10)
    assert field.noise([1.5, 2.3]) == pytest.approx(field.noise([-2.5, -4.7]), abs=1e-10)


def test_wrap_coordinate_stays_in_range():
    assert wrap_coordinate(11.5, 10.0) == pytest.approx(1.5)
    assert wrap_coordinate(-1.5, 10.0) == pytest.approx(8.5)
    assert wrap_coordinate(10.0, 10.0) == 0.0
    assert wrap_coordinate(-1e-20, 10.0) == 0.0
    assert 0.0 <= wrap_coordinate(-1e-12, 10.0) < 10.0


def test_noise_stays_near_unit_range():
    field = NoiseField({"seed": 9, "grid_size": [16, 16]})
    rng = np.random.default_rng(9)
    values = [field.noise(p) for p in rng.uniform(0.0, 16.0, size=(500, 2))]
    assert all(np.isfinite(values))
    assert max(abs(v) for v in values) <= 1.5


def test_noise_is_continuous(field_3d):
    base = field_3d.noise([2.5, 3.5, 4.5])
    nearby = field_3d.noise([2.5 + 1e-7, 3.5, 4.5])
    assert abs(base - nearby) < 1e-5


@pytest.mark.parametrize("coordinates", [[1.0], [1.0, 1.0], [1.0, 1.0, 1.0, 1.0], [[1.0, 2.0, 3.0]]])
def test_dimension_mismatch_raises(field_3d, coordinates):
    with pytest.raises(DimensionMismatchError):
        field_3d.noise(coordinates)


def test_non_finite_coordinates_raise(field_1d):
    with pytest.raises(ValueError):
        field_1d.noise([float("nan")])
    with pytest.raises(ValueError):
        field_1d.noise([float("inf")])


@pytest.mark.parametrize("dimension", [4, 5, 10])
def test_higher_dimensions(dimension):
    field = NoiseField({"seed": 123, "grid_size": [2] * dimension})
    value = field.noise([0.5] * dimension)
    assert np.isfinite(value)
    assert field.noise([0.5] * dimension) == value


@pytest.mark.parametrize("grid_size", [[10], [6, 5], [4, 4, 4], [3, 2, 3, 2]])
def test_noise_array_matches_noise(grid_size):
    field = NoiseField({"seed": 77, "grid_size": grid_size})
    rng = np.random.default_rng(len(grid_size))
    points = rng.uniform(-30.0, 30.0, size=(40, len(grid_size)))
    expected = np.array([field.noise(p) for p in points])
    assert np.allclose(field.noise_array(points), expected, rtol=0.0, atol=1e-12)


def test_noise_array_keeps_leading_shape(field_3d):
    points = np.zeros((4, 5, 3))
    points[..., 0] = np.linspace(0.0, 5.0, 5)
    values = field_3d.noise_array(points)
    assert values.shape == (4, 5)
    assert values[0, 2] == pytest.approx(field_3d.noise(points[0, 2]), abs=1e-12)


def test_noise_array_validation(field_3d):
    with pytest.raises(DimensionMismatchError):
        field_3d.noise_array(np.zeros((5, 2)))
    with pytest.raises(DimensionMismatchError):
        field_3d.noise_array(1.0)
    with pytest.raises(ValueError):
        field_3d.noise_array([[0.0, np.nan, 0.0]])


def test_concurrent_queries_agree(field_3d):
    rng = np.random.default_rng(4)
    points = [tuple(p) for p in rng.uniform(-20.0, 20.0, size=(64, 3))]
    expected = [field_3d.noise(p) for p in points]
    with ThreadPoolExecutor(max_workers=4) as pool:
        results = list(pool.map(field_3d.noise, points))
    assert results == expected


def test_repr(field_1d):
    assert repr(field_1d) == "NoiseField(seed=123, grid_size=(10,))"
