# latticenoise/scalar.py
"""
Скалярные произведения в вершинах ячейки

Для точки P находится содержащая её ячейка решётки, и в каждой из 2^n
вершин вычисляется скалярное произведение градиента на вектор (P - вершина).
"""

import math
from typing import List, Sequence

from .exceptions import DimensionMismatchError, LatticeBoundsError
from .grid import Gradient, GradientLattice


def dot_product(gradient: Gradient, distance: Sequence[float]) -> float:
    """Скалярное произведение; для 1D градиент - скаляр"""
    if isinstance(gradient, float):
        return gradient * distance[0]

    if len(gradient) != len(distance):
        raise DimensionMismatchError(
            f"Gradient length ({len(gradient)}) must match distance vector length ({len(distance)})"
        )
    return float(sum(g * d for g, d in zip(gradient, distance)))


def find_cell(point: Sequence[float]) -> List[int]:
    """Ячейка, содержащая точку (floor по каждой оси)"""
    return [math.floor(coord) for coord in point]


def generate_cell_vertices(cell: Sequence[int]) -> List[List[int]]:
    """
    Все 2^n вершины ячейки

    Вершина i смещена по оси d на (i >> d) & 1.
    """
    dimension = len(cell)
    return [
        [cell[d] + ((i >> d) & 1) for d in range(dimension)]
        for i in range(1 << dimension)
    ]


def calculate_scalar_values(lattice: GradientLattice, point: Sequence[float]) -> List[float]:
    """
    Скалярные произведения во всех вершинах ячейки, содержащей точку

    Args:
        lattice: Решётка градиентов
        point: Координаты точки P

    Returns:
        2^n значений в порядке вершин generate_cell_vertices
    """
    point = [float(coord) for coord in point]
    if len(point) != lattice.dimension:
        raise DimensionMismatchError(
            f"Point dimension ({len(point)}) must match lattice dimension ({lattice.dimension})"
        )

    values = []
    for vertex in generate_cell_vertices(find_cell(point)):
        gradient = lattice.get(vertex)
        if gradient is None:
            raise LatticeBoundsError(
                f"Gradient not found at vertex {tuple(vertex)}; point may be outside grid bounds"
            )
        distance = [coord - corner for coord, corner in zip(point, vertex)]
        values.append(dot_product(gradient, distance))

    return values
