# latticenoise/interpolation.py
"""
Интерполяция скалярных произведений в вершинах ячейки

2^n значений сворачиваются в одно по очереди вдоль каждой оси.
Весовая функция smoothstep имеет нулевую производную в узлах, поэтому
градиент шума в узле совпадает с заранее вычисленным случайным градиентом.
"""

import math
from typing import List, Sequence

import numpy as np
from numba import jit

from .exceptions import ConfigurationError

# ----------------------------------------------------------------------
# Сглаживание
# ----------------------------------------------------------------------

def smoothstep(t: float) -> float:
    """
    Классическая функция smoothstep: t^2 * (3 - 2t)

    Args:
        t: Параметр интерполяции (обрезается до [0, 1])

    Returns:
        Значение из [0, 1]
    """
    t = max(0.0, min(1.0, t))
    return t * t * (3.0 - 2.0 * t)


def calculate_fractional_coordinates(point: Sequence[float]) -> List[float]:
    """Дробные координаты точки внутри ячейки, каждая из [0, 1)"""
    return [coord - math.floor(coord) for coord in point]


def interpolate_1d(a0: float, a1: float, t: float) -> float:
    """f(t) = a0 + smoothstep(t) * (a1 - a0)"""
    return a0 + smoothstep(t) * (a1 - a0)

# ----------------------------------------------------------------------
# n-мерная интерполяция
# ----------------------------------------------------------------------

def _interpolate_recursive(values: Sequence[float], fractional: Sequence[float],
                           axis: int = 0) -> float:
    if len(values) == 1:
        return values[0]

    # Бит оси axis в индексе вершины делит значения на нижнюю и верхнюю группы
    lower = _interpolate_recursive(values[0::2], fractional, axis + 1)
    upper = _interpolate_recursive(values[1::2], fractional, axis + 1)
    return interpolate_1d(lower, upper, fractional[axis])


def interpolate_scalar_values(scalar_values: Sequence[float], point: Sequence[float]) -> float:
    """
    Интерполяция между 2^n значениями в вершинах ячейки

    Ось 0 сворачивается первой: на глубине d вершины делятся по биту d
    своего индекса, обе половины рекурсивно сворачиваются по оставшимся
    осям и смешиваются с весом smoothstep(frac[d]).

    Args:
        scalar_values: Значения в вершинах (2^n штук, порядок generate_cell_vertices)
        point: Координаты точки P

    Returns:
        Интерполированное значение шума
    """
    dimension = len(point)
    expected = 1 << dimension
    if len(scalar_values) != expected:
        raise ConfigurationError(
            f"The number of scalar values ({len(scalar_values)}) must be equal to "
            f"2^{dimension} = {expected}"
        )

    fractional = calculate_fractional_coordinates(point)
    return float(_interpolate_recursive(list(scalar_values), fractional))


def scale_noise_value(value: float, scale_factor: float = 1.0) -> float:
    """Линейное масштабирование значения шума"""
    return value * scale_factor

# ----------------------------------------------------------------------
# Версии для numba
# ----------------------------------------------------------------------

@jit(nopython=True, cache=True)
def _smoothstep_jit(t: float) -> float:
    if t < 0.0:
        t = 0.0
    elif t > 1.0:
        t = 1.0
    return t * t * (3.0 - 2.0 * t)


@jit(nopython=True, cache=True)
def reduce_corners(values: np.ndarray, fractional: np.ndarray) -> float:
    """
    Свёртка значений в вершинах на месте

    Старшая ось сворачивается первой, ось 0 - последней, поэтому
    порядок операций совпадает с interpolate_scalar_values.
    """
    length = values.shape[0]
    for axis in range(fractional.shape[0] - 1, -1, -1):
        half = length >> 1
        s = _smoothstep_jit(fractional[axis])
        for j in range(half):
            a0 = values[j]
            values[j] = a0 + s * (values[j + half] - a0)
        length = half
    return values[0]
