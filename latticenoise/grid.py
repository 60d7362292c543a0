# latticenoise/grid.py
"""
Построение решётки случайных градиентов для шума Перлина

В каждом узле n-мерной решётки хранится псевдослучайный градиент:
скаляр из [-1, 1] для n = 1 и единичный вектор для n >= 2.
"""

import logging
import numbers
import warnings
from typing import Iterator, Optional, Sequence, Tuple, Union

import numpy as np

from .exceptions import ConfigurationError, LatticeBoundsError

logger = logging.getLogger(__name__)

Gradient = Union[float, np.ndarray]

# ----------------------------------------------------------------------
# Вспомогательные функции
# ----------------------------------------------------------------------

def random_seed() -> int:
    """Случайный seed из системного источника энтропии"""
    return int(np.random.SeedSequence().entropy)


def _seed_entropy(seed: int) -> int:
    """Отображает любое целое (в том числе отрицательное) в неотрицательную энтропию"""
    return seed << 1 if seed >= 0 else ((-seed) << 1) - 1


def _is_integer(value) -> bool:
    return isinstance(value, numbers.Integral) and not isinstance(value, bool)


def _as_index(value) -> Optional[int]:
    """Целочисленная координата узла или None, если значение не целое"""
    if isinstance(value, bool):
        return None
    if isinstance(value, numbers.Integral):
        return int(value)
    if isinstance(value, numbers.Real) and float(value).is_integer():
        return int(value)
    return None


def normalize_vectors(vectors: np.ndarray) -> np.ndarray:
    """
    Нормализация векторов вдоль последней оси

    Векторы нулевой длины остаются нулевыми.
    """
    magnitudes = np.linalg.norm(vectors, axis=-1, keepdims=True)
    degenerate = magnitudes == 0.0
    if np.any(degenerate):
        warnings.warn(
            f"{int(np.count_nonzero(degenerate))} gradient(s) had zero magnitude "
            "and were left as zero vectors",
            RuntimeWarning,
        )
    return vectors / np.where(degenerate, 1.0, magnitudes)


def validate_grid_shape(dimension: int, grid_shape: Sequence[int]) -> Tuple[int, ...]:
    """Проверка размерности и количества ячеек по каждой оси"""
    if not _is_integer(dimension) or dimension < 1:
        raise ConfigurationError(f"Dimension must be a positive integer, got {dimension!r}")

    try:
        shape = tuple(grid_shape)
    except TypeError:
        raise ConfigurationError(f"Grid shape must be a sequence, got {grid_shape!r}") from None

    if len(shape) != dimension:
        raise ConfigurationError(
            f"Grid shape length ({len(shape)}) must match dimension ({dimension})"
        )
    for count in shape:
        if not _is_integer(count) or count < 0:
            raise ConfigurationError(
                f"Grid cell counts must be non-negative integers, got {shape!r}"
            )
    return tuple(int(count) for count in shape)

# ----------------------------------------------------------------------
# Решётка градиентов
# ----------------------------------------------------------------------

class GradientLattice:
    """
    Неизменяемая решётка градиентов

    Градиенты хранятся плотным массивом формы (g0 + 1, ..., g[n-1] + 1, n),
    ключом служит кортеж целых координат узла.
    """

    def __init__(self, gradients: np.ndarray, seed: Optional[int] = None):
        """
        Args:
            gradients: Массив формы (*extents, dimension)
            seed: Seed, из которого построена решётка (если известен)
        """
        gradients = np.array(gradients, dtype=np.float64)
        if gradients.ndim < 2 or gradients.shape[-1] != gradients.ndim - 1:
            raise ConfigurationError(
                f"Gradient array of shape {gradients.shape} does not describe a lattice"
            )
        gradients.flags.writeable = False

        self._gradients = gradients
        self._seed = seed
        self._dimension = gradients.shape[-1]
        self._extents = tuple(gradients.shape[:-1])

        # Шаги по осям в плоском массиве (C-порядок)
        strides = np.array(
            [int(np.prod(self._extents[axis + 1:])) for axis in range(self._dimension)],
            dtype=np.int64,
        )
        strides.flags.writeable = False
        self._strides = strides
        self._flat_gradients = gradients.reshape(-1, self._dimension)

    @property
    def seed(self) -> Optional[int]:
        return self._seed

    @property
    def dimension(self) -> int:
        return self._dimension

    @property
    def extents(self) -> Tuple[int, ...]:
        """Количество узлов по каждой оси"""
        return self._extents

    @property
    def shape(self) -> Tuple[int, ...]:
        """Количество ячеек по каждой оси"""
        return tuple(extent - 1 for extent in self._extents)

    @property
    def strides(self) -> np.ndarray:
        """Шаги по осям в flat_gradients (только для чтения)"""
        return self._strides

    @property
    def flat_gradients(self) -> np.ndarray:
        return self._flat_gradients

    @property
    def gradients(self) -> np.ndarray:
        """Массив градиентов (только для чтения)"""
        return self._gradients

    @property
    def size(self) -> int:
        return int(np.prod(self.extents))

    def __len__(self) -> int:
        return self.size

    def _index(self, coordinates) -> Optional[Tuple[int, ...]]:
        try:
            coords = tuple(coordinates)
        except TypeError:
            return None
        if len(coords) != self.dimension:
            return None

        index = []
        for value, extent in zip(coords, self.extents):
            coord = _as_index(value)
            if coord is None or not 0 <= coord < extent:
                return None
            index.append(coord)
        return tuple(index)

    def _gradient(self, index: Tuple[int, ...]) -> Gradient:
        vector = self._gradients[index]
        if self.dimension == 1:
            return float(vector[0])
        return vector

    def __contains__(self, coordinates) -> bool:
        return self._index(coordinates) is not None

    def get(self, coordinates, default: Optional[Gradient] = None) -> Optional[Gradient]:
        """Градиент в узле или default, если узла нет в решётке"""
        index = self._index(coordinates)
        if index is None:
            return default
        return self._gradient(index)

    def __getitem__(self, coordinates) -> Gradient:
        index = self._index(coordinates)
        if index is None:
            raise LatticeBoundsError(
                f"No gradient at {coordinates!r}; lattice extents are {self.extents}"
            )
        return self._gradient(index)

    def keys(self) -> Iterator[Tuple[int, ...]]:
        """Координаты всех узлов в порядке обхода при построении"""
        for index in np.ndindex(*self.extents):
            yield tuple(int(coord) for coord in index)

    def __iter__(self) -> Iterator[Tuple[int, ...]]:
        return self.keys()

    def items(self) -> Iterator[Tuple[Tuple[int, ...], Gradient]]:
        for index in self.keys():
            yield index, self._gradient(index)

    def __repr__(self) -> str:
        return (
            f"GradientLattice(dimension={self.dimension}, shape={self.shape}, "
            f"seed={self.seed})"
        )

# ----------------------------------------------------------------------
# Построение решётки
# ----------------------------------------------------------------------

def build_lattice(dimension: int, grid_shape: Sequence[int],
                  seed: Optional[int] = None) -> GradientLattice:
    """
    Генерация решётки с градиентом в каждом узле

    Узлы обходятся в C-порядке (последняя ось меняется быстрее всего),
    из потока случайных чисел на каждый узел берётся ровно dimension значений.

    Args:
        dimension: Размерность решётки (положительное целое)
        grid_shape: Количество ячеек по каждой оси
        seed: Семя генератора; None - случайное

    Returns:
        Решётка из prod(grid_shape[i] + 1) градиентов
    """
    shape = validate_grid_shape(dimension, grid_shape)

    if seed is None:
        seed = random_seed()
    elif not _is_integer(seed):
        raise ConfigurationError(f"Seed must be an integer, got {seed!r}")
    seed = int(seed)

    # Локальный генератор: глобальное состояние numpy не затрагивается
    rng = np.random.default_rng(_seed_entropy(seed))

    extents = tuple(count + 1 for count in shape)
    total = int(np.prod(extents))
    vectors = rng.uniform(-1.0, 1.0, size=(total, dimension))

    if dimension > 1:
        vectors = normalize_vectors(vectors)

    lattice = GradientLattice(vectors.reshape(extents + (dimension,)), seed=seed)
    logger.debug("Built %d gradients for grid shape %s (seed=%d)", total, shape, seed)
    return lattice


def lookup_gradient(lattice: GradientLattice, coordinates: Sequence[int]) -> Optional[Gradient]:
    """
    Градиент в узле решётки

    Returns:
        Градиент или None, если узла нет в решётке
    """
    return lattice.get(coordinates)


get_gradient_at = lookup_gradient
