"""Latticenoise public API."""

from .core import (
    NoiseConfig,
    NoiseField,
    MAX_DIMENSION,
    DEFAULT_GRID_SIZE,
)
from .exceptions import (
    NoiseError,
    ConfigurationError,
    DimensionMismatchError,
    LatticeBoundsError,
)
from .grid import (
    GradientLattice,
    build_lattice,
    lookup_gradient,
    get_gradient_at,
)
from .scalar import calculate_scalar_values
from .interpolation import (
    smoothstep,
    calculate_fractional_coordinates,
    interpolate_1d,
    interpolate_scalar_values,
    scale_noise_value,
)

__all__ = [
    "NoiseConfig",
    "NoiseField",
    "MAX_DIMENSION",
    "DEFAULT_GRID_SIZE",
    "NoiseError",
    "ConfigurationError",
    "DimensionMismatchError",
    "LatticeBoundsError",
    "GradientLattice",
    "build_lattice",
    "lookup_gradient",
    "get_gradient_at",
    "calculate_scalar_values",
    "smoothstep",
    "calculate_fractional_coordinates",
    "interpolate_1d",
    "interpolate_scalar_values",
    "scale_noise_value",
]

__version__ = "0.1.0"
