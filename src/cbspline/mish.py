"""Gaussian quadrature "mish" points shared by assembly and sampling."""
from __future__ import annotations
import math
import numpy as np
import numpy.typing as npt

from .params import AxisParameters

Array = npt.NDArray[np.float64]

MUBAR = 3
SQRT35 = math.sqrt(3.0 / 5.0)
# Offsets from the cell center, in units of dx
GAUSS_OFFSETS: Array = np.array([-0.5 * SQRT35, 0.0, 0.5 * SQRT35], dtype=np.float64)
GAUSS_WEIGHTS: Array = np.array([8.0 / 18.0, 5.0 / 18.0, 8.0 / 18.0], dtype=np.float64)


def mish_points(params: AxisParameters) -> Array:
    """Quadrature abscissae, three per cell, ordered left to right."""
    centers = params.xmin + params.dx * (np.arange(params.num_cells, dtype=np.float64) + 0.5)
    x = centers[:, None] + params.dx * GAUSS_OFFSETS[None, :]
    return x.reshape(-1)


def mish_weights(params: AxisParameters) -> Array:
    """Integration weights (``dx * gaussweight``) aligned with :func:`mish_points`."""
    return np.tile(params.dx * GAUSS_WEIGHTS, params.num_cells)

