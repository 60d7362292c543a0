# latticenoise/core.py
"""
Градиентный шум Перлина произвольной размерности (1..10)
"""

import logging
import math
import numbers
from dataclasses import dataclass, replace
from typing import Any, Mapping, Optional, Sequence, Tuple, Union

import numpy as np
from numba import jit, prange

from .exceptions import ConfigurationError, DimensionMismatchError
from .grid import GradientLattice, build_lattice, random_seed
from .interpolation import interpolate_scalar_values, reduce_corners
from .scalar import calculate_scalar_values

logger = logging.getLogger(__name__)

MAX_DIMENSION = 10
DEFAULT_GRID_SIZE = (64, 64, 64)

# ----------------------------------------------------------------------
# Параметры
# ----------------------------------------------------------------------

@dataclass(frozen=True)
class NoiseConfig:
    """Параметры поля шума"""
    seed: Optional[int] = None
    grid_size: Tuple[int, ...] = DEFAULT_GRID_SIZE  # Количество ячеек по каждой оси

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any]) -> "NoiseConfig":
        """Параметры из словаря (ключи seed и grid_size или gridSize)"""
        unknown = set(options) - {"seed", "grid_size", "gridSize"}
        if unknown:
            raise ConfigurationError(f"Unknown noise options: {', '.join(sorted(unknown))}")

        grid_size = options.get("grid_size")
        if "gridSize" in options:
            if grid_size is not None:
                raise ConfigurationError("Pass either grid_size or gridSize, not both")
            grid_size = options["gridSize"]
        if grid_size is None:
            grid_size = DEFAULT_GRID_SIZE
        return cls(seed=options.get("seed"), grid_size=grid_size)

    def validate(self) -> "NoiseConfig":
        """Проверка параметров; возвращает нормализованную копию"""
        try:
            grid_size = tuple(self.grid_size)
        except TypeError:
            raise ConfigurationError(
                f"grid_size must be a sequence of integers, got {self.grid_size!r}"
            ) from None

        if not 1 <= len(grid_size) <= MAX_DIMENSION:
            raise ConfigurationError(
                f"grid_size must have between 1 and {MAX_DIMENSION} entries, got {len(grid_size)}"
            )
        for count in grid_size:
            if isinstance(count, bool) or not isinstance(count, numbers.Integral) or count < 1:
                raise ConfigurationError(
                    f"grid_size entries must be positive integers, got {grid_size!r}"
                )

        seed = self.seed
        if seed is not None and (isinstance(seed, bool) or not isinstance(seed, numbers.Integral)):
            raise ConfigurationError(f"Seed must be an integer, got {seed!r}")

        return NoiseConfig(
            seed=None if seed is None else int(seed),
            grid_size=tuple(int(count) for count in grid_size),
        )

# ----------------------------------------------------------------------
# Вспомогательные функции
# ----------------------------------------------------------------------

def wrap_coordinate(value: float, period: float) -> float:
    """Перенос координаты в [0, period)"""
    wrapped = math.fmod(value, period)
    if wrapped < 0.0:
        wrapped += period
        # -1e-20 + 10.0 округляется до 10.0
        if wrapped >= period:
            wrapped = 0.0
    return wrapped


@jit(nopython=True, cache=True)
def _wrap_jit(value: float, period: float) -> float:
    wrapped = np.fmod(value, period)
    if wrapped < 0.0:
        wrapped += period
        if wrapped >= period:
            wrapped = 0.0
    return wrapped


@jit(nopython=True, parallel=True, cache=True)
def _noise_batch(points: np.ndarray, gradients: np.ndarray,
                 strides: np.ndarray, periods: np.ndarray) -> np.ndarray:
    """Шум для массива точек формы (count, dimension)"""
    count, dimension = points.shape
    corners = 1 << dimension
    result = np.empty(count, dtype=np.float64)

    for p in prange(count):
        wrapped = np.empty(dimension, dtype=np.float64)
        cell = np.empty(dimension, dtype=np.int64)
        fractional = np.empty(dimension, dtype=np.float64)
        for d in range(dimension):
            wrapped[d] = _wrap_jit(points[p, d], periods[d])
            cell[d] = np.int64(np.floor(wrapped[d]))
            fractional[d] = wrapped[d] - cell[d]

        values = np.empty(corners, dtype=np.float64)
        for i in range(corners):
            index = 0
            for d in range(dimension):
                index += (cell[d] + ((i >> d) & 1)) * strides[d]
            scalar = 0.0
            for d in range(dimension):
                corner = cell[d] + ((i >> d) & 1)
                scalar += gradients[index, d] * (wrapped[d] - corner)
            values[i] = scalar

        result[p] = reduce_corners(values, fractional)

    return result

# ----------------------------------------------------------------------
# Поле шума
# ----------------------------------------------------------------------

class NoiseField:
    """
    Поле градиентного шума

    Решётка строится один раз при создании; координаты запроса переносятся
    в область решётки по модулю grid_size, поэтому шум периодичен.
    """

    def __init__(self, config: Optional[Union[NoiseConfig, Mapping[str, Any]]] = None):
        """
        Args:
            config: NoiseConfig, словарь {seed, grid_size} или None
        """
        if config is None:
            config = NoiseConfig()
        elif isinstance(config, Mapping):
            config = NoiseConfig.from_mapping(config)
        elif not isinstance(config, NoiseConfig):
            raise ConfigurationError(f"Unsupported noise configuration: {config!r}")

        config = config.validate()
        if config.seed is None:
            config = replace(config, seed=random_seed())

        self._config = config
        self._dimension = len(config.grid_size)
        self._lattice = build_lattice(self._dimension, config.grid_size, config.seed)
        periods = np.array(config.grid_size, dtype=np.float64)
        periods.flags.writeable = False
        self._periods = periods
        logger.debug("Noise field ready: dimension=%d, grid_size=%s", self.dimension, self.grid_size)

    @property
    def config(self) -> NoiseConfig:
        return self._config

    @property
    def seed(self) -> int:
        return self._config.seed

    @property
    def grid_size(self) -> Tuple[int, ...]:
        return self._config.grid_size

    @property
    def dimension(self) -> int:
        return self._dimension

    @property
    def lattice(self) -> GradientLattice:
        return self._lattice

    def _check_arity(self, size: int) -> None:
        if size != self.dimension:
            raise DimensionMismatchError(
                f"Coordinates dimension ({size}) must match grid dimension ({self.dimension})"
            )

    def wrap(self, coordinates: Sequence[float]) -> Tuple[float, ...]:
        """Перенос координат в область решётки"""
        return tuple(
            wrap_coordinate(float(coord), float(period))
            for coord, period in zip(coordinates, self.grid_size)
        )

    def noise(self, coordinates: Sequence[float]) -> float:
        """
        Значение шума в точке

        Args:
            coordinates: Координаты точки (их количество равно dimension)

        Returns:
            Значение примерно из [-1, 1] (без обрезки)
        """
        coords = np.asarray(coordinates, dtype=np.float64)
        if coords.ndim != 1:
            raise DimensionMismatchError(
                f"Coordinates must be a flat sequence, got array of shape {coords.shape}"
            )
        self._check_arity(coords.shape[0])
        if not np.all(np.isfinite(coords)):
            raise ValueError(f"Coordinates must be finite, got {coordinates!r}")

        wrapped = self.wrap(coords.tolist())
        scalar_values = calculate_scalar_values(self._lattice, wrapped)
        return interpolate_scalar_values(scalar_values, wrapped)

    def noise_array(self, points: Union[Sequence[Sequence[float]], np.ndarray]) -> np.ndarray:
        """
        Векторизованный шум для массива точек

        Args:
            points: Массив формы (..., dimension)

        Returns:
            Массив значений формы (...)
        """
        points = np.asarray(points, dtype=np.float64)
        if points.ndim == 0:
            raise DimensionMismatchError("Points must have a trailing coordinate axis")
        self._check_arity(points.shape[-1])
        if not np.all(np.isfinite(points)):
            raise ValueError("Points must have finite coordinates")

        flat = np.ascontiguousarray(points.reshape(-1, self.dimension))
        values = _noise_batch(
            flat, self._lattice.flat_gradients, self._lattice.strides, self._periods
        )
        return values.reshape(points.shape[:-1])

    def __repr__(self) -> str:
        return f"NoiseField(seed={self.seed}, grid_size={self.grid_size})"
