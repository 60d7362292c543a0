"""Pytest configuration for latticenoise tests."""
from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from latticenoise import NoiseField, build_lattice  # noqa: E402


@pytest.fixture
def lattice_2d():
    return build_lattice(2, [3, 3], seed=42)


@pytest.fixture
def field_1d():
    return NoiseField({"seed": 123, "grid_size": [10]})


@pytest.fixture
def field_3d():
    return NoiseField({"seed": 123, "grid_size": [10, 10, 10]})
