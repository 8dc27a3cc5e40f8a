"""Cubic B-spline basis functions on a uniform node set."""
from __future__ import annotations
from typing import Tuple
import numpy as np
import numpy.typing as npt

from .errors import OutOfDomainError
from .mish import mish_points
from .params import AxisParameters

Array = npt.NDArray[np.float64]
IntArray = npt.NDArray[np.int64]

ONESIXTH = 1.0 / 6.0
FOURSIXTH = 4.0 / 6.0
SUPPORT = 4  # nodes touching any point


def _check_derivative(derivative: int, highest: int) -> int:
    d = int(derivative)
    if d != derivative or not 0 <= d <= highest:
        raise ValueError(f"derivative must be an integer in [0, {highest}], got {derivative!r}.")
    return d


def check_domain(params: AxisParameters, x: Array) -> None:
    """Raise :class:`OutOfDomainError` for the first point outside [xmin, xmax]."""
    x = np.asarray(x, dtype=np.float64)
    bad = ~((x >= params.xmin) & (x <= params.xmax))
    if np.any(bad):
        raise OutOfDomainError(x[bad].flat[0], params.xmin, params.xmax)


def node_centers(params: AxisParameters) -> Array:
    """Node locations for ``m = -1 .. num_cells+1``."""
    m = np.arange(-1, params.num_cells + 2, dtype=np.float64)
    return params.xmin + m * params.dx


def basis_values(params: AxisParameters, m, x, derivative: int = 0) -> Array:
    """Vectorized basis evaluation for broadcastable node indices ``m`` and points ``x``.

    No domain check is made here; callers validate ``x`` first.
    """
    d = _check_derivative(derivative, 3)
    m = np.asarray(m, dtype=np.float64)
    x = np.asarray(x, dtype=np.float64)

    delta = (x - (params.xmin + m * params.dx)) * params.dx_recip
    z = np.abs(delta)
    t = 2.0 - z
    s = t - 1.0
    above = s > 0.0
    # -1 right of the node, +1 at and left of it
    sign = np.where(delta > 0.0, -1.0, 1.0)

    if d == 0:
        b = t * t * t * ONESIXTH - np.where(above, s * s * s * FOURSIXTH, 0.0)
    elif d == 1:
        b = t * t * ONESIXTH - np.where(above, s * s * FOURSIXTH, 0.0)
        b = b * sign * 3.0 * params.dx_recip
    elif d == 2:
        b = t - np.where(above, 4.0 * s, 0.0)
        b = b * params.dx_recip * params.dx_recip
    else:
        # Step rule for the regularization integral; zero at the kinks z == 1
        b = np.where(z > 1.0, 1.0, np.where(z < 1.0, -3.0, 0.0))
        b = b * sign * params.dx_recip * params.dx_recip * params.dx_recip

    return np.where(z < 2.0, b, 0.0)


def basis(params: AxisParameters, m: int, x: float, derivative: int = 0) -> float:
    """Value of the ``derivative``-th derivative of basis function ``m`` at ``x``.

    Parameters
    ----------
    params : AxisParameters
        Axis description
    m : int
        Node index, ``-1 <= m <= num_cells + 1`` for the functions in use
    x : float
        Physical location
    derivative : int
        0, 1, 2, or 3. The third derivative is the piecewise-constant step used
        by the regularization term, not a classical derivative at the kinks.

    Returns
    -------
    float
        Basis value; zero when ``|x - x_m| >= 2 dx``

    Raises
    ------
    OutOfDomainError
        If ``x`` is outside ``[xmin, xmax]``
    """
    check_domain(params, x)
    return float(basis_values(params, m, x, derivative))


def support_start(params: AxisParameters, x: Array) -> IntArray:
    """First node of the four-node window covering each point, computed without search."""
    x = np.asarray(x, dtype=np.float64)
    return np.ceil((x - params.xmin - 2.0 * params.dx) * params.dx_recip).astype(np.int64)


def local_support(params: AxisParameters, x: Array, derivative: int = 0) -> Tuple[IntArray, Array]:
    """Coefficient indices and basis values of the four-node window at each point.

    Returns ``(idx, vals)`` of shape ``(n, 4)`` such that
    ``u(x_i) = sum_k vals[i, k] * a[idx[i, k]]``. Nodes outside ``[-1, num_cells+1]``
    carry a zero value and a clipped index.
    """
    x = np.asarray(x, dtype=np.float64).reshape(-1)
    m = support_start(params, x)[:, None] + np.arange(SUPPORT, dtype=np.int64)[None, :]
    valid = (m >= -1) & (m <= params.num_cells + 1)
    vals = np.where(valid, basis_values(params, m, x[:, None], derivative), 0.0)
    idx = np.clip(m + 1, 0, params.mdim - 1)
    return idx, vals


def evaluation_matrix(params: AxisParameters, points: Array, derivative: int = 0) -> Array:
    """Dense matrix ``E`` with ``E @ a`` evaluating the expansion at ``points``."""
    points = np.asarray(points, dtype=np.float64).reshape(-1)
    check_domain(params, points)
    idx, vals = local_support(params, points, derivative)
    E = np.zeros((points.size, params.mdim), dtype=np.float64)
    rows = np.repeat(np.arange(points.size), SUPPORT).reshape(idx.shape)
    np.add.at(E, (rows, idx), vals)
    return E


def mish_basis_matrix(params: AxisParameters, derivative: int = 0) -> Array:
    """Basis table at the mish points, shape ``(mdim, mish_dim)``."""
    return evaluation_matrix(params, mish_points(params), derivative).T.copy()
