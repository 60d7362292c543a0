"""Exception types raised by latticenoise."""


class NoiseError(Exception):
    """Base class for all latticenoise errors."""


class ConfigurationError(NoiseError, ValueError):
    """Invalid dimension, grid shape, seed or corner-value count."""


class DimensionMismatchError(NoiseError, ValueError):
    """Query coordinates do not match the configured dimension."""


class LatticeBoundsError(NoiseError, IndexError):
    """A lattice coordinate has no stored gradient."""
