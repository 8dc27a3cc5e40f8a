"""Homogeneous boundary conditions and the folding matrix that enforces them.

The math and terminology follow Ooyama, K. V., 2002: The cubic-spline transform
method: Basic definitions and tests in a 1d single domain. Mon. Wea. Rev., 130,
2392-2415.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Union
import numpy as np
import numpy.typing as npt

from .errors import ConfigurationError

Array = npt.NDArray[np.float64]


@dataclass(frozen=True)
class Homogeneous0:
    """No constraint on the edge coefficients (natural condition)."""
    rank_left = 0
    rank_right = 0


@dataclass(frozen=True)
class Robin1:
    """One constraint: the edge coefficient is ``alpha*a[1] + beta*a[2]``."""
    alpha: float
    beta: float
    rank_left = 1
    rank_right = 1


@dataclass(frozen=True)
class Robin2:
    """Two constraints: the two edge coefficients are ``alpha``/``beta`` multiples of the third."""
    alpha: float
    beta: float
    rank_left = 2
    rank_right = 2


@dataclass(frozen=True)
class Homogeneous3:
    """The three edge coefficients vanish."""
    rank_left = 3
    rank_right = 3


@dataclass(frozen=True)
class Periodic:
    """Wrap-around condition; encoded once, so the ranks are asymmetric."""
    rank_left = 1
    rank_right = 2


BoundaryCondition = Union[Homogeneous0, Robin1, Robin2, Homogeneous3, Periodic]

R0 = Homogeneous0()
R1T0 = Robin1(alpha=-4.0, beta=-1.0)    # u = 0
R1T1 = Robin1(alpha=0.0, beta=1.0)      # u' = 0
R1T2 = Robin1(alpha=2.0, beta=-1.0)     # u'' = 0
R2T10 = Robin2(alpha=1.0, beta=-0.5)    # u = u' = 0
R2T20 = Robin2(alpha=-1.0, beta=0.0)    # u = u'' = 0
R3 = Homogeneous3()
PERIODIC = Periodic()

PRESETS: Dict[str, BoundaryCondition] = {
    "R0": R0,
    "R1T0": R1T0,
    "R1T1": R1T1,
    "R1T2": R1T2,
    "R2T10": R2T10,
    "R2T20": R2T20,
    "R3": R3,
    "PERIODIC": PERIODIC,
}

_VARIANTS = (Homogeneous0, Robin1, Robin2, Homogeneous3, Periodic)


def boundary_condition(bc: Union[str, BoundaryCondition]) -> BoundaryCondition:
    """Resolve a preset name (case-insensitive) or pass a variant through."""
    if isinstance(bc, _VARIANTS):
        return bc
    if isinstance(bc, str):
        key = bc.strip().upper()
        if key in PRESETS:
            return PRESETS[key]
        raise ConfigurationError(
            f"Unknown boundary condition {bc!r}; expected one of {sorted(PRESETS)}."
        )
    raise ConfigurationError(f"Unsupported boundary condition type {type(bc).__name__}.")


def interior_dim(bcl: BoundaryCondition, bcr: BoundaryCondition, num_cells: int) -> int:
    """Dimension of the boundary-folded coefficient space."""
    return int(num_cells) + 3 - bcl.rank_left - bcr.rank_right


def _min_rows(bc: BoundaryCondition) -> int:
    # Robin1 and Periodic write into the first/last two interior rows
    return 2 if isinstance(bc, (Robin1, Periodic)) else 1


def build_folding(bcl: BoundaryCondition, bcr: BoundaryCondition, num_cells: int) -> Array:
    """Build the folding matrix mapping open coefficients to interior coefficients.

    Parameters
    ----------
    bcl, bcr : BoundaryCondition
        Left and right boundary conditions
    num_cells : int
        Number of cells on the axis

    Returns
    -------
    Array
        Matrix of shape ``(Mdim - rankL - rankR, Mdim)`` with ``Mdim = num_cells + 3``.
        Its transpose maps interior coefficients back to open coefficients that
        satisfy both boundary conditions exactly.

    Raises
    ------
    ConfigurationError
        If the boundary ranks leave no (or too small an) interior space
    """
    rank_l = bcl.rank_left
    rank_r = bcr.rank_right
    mdim = int(num_cells) + 3
    n_int = mdim - rank_l - rank_r
    if n_int < 1:
        raise ConfigurationError(
            f"Boundary ranks {rank_l}+{rank_r} leave no interior coefficients on a "
            f"{num_cells}-cell axis (rankL + rankR must be below Mdim={mdim})."
        )
    if n_int < max(_min_rows(bcl), _min_rows(bcr)):
        raise ConfigurationError(
            f"{num_cells}-cell axis is too short for boundary conditions "
            f"{type(bcl).__name__}/{type(bcr).__name__}."
        )

    gamma = np.zeros((n_int, mdim), dtype=np.float64)
    gamma[:, rank_l:mdim - rank_r] = np.eye(n_int, dtype=np.float64)

    # Left edge
    if isinstance(bcl, Robin1):
        gamma[0, 0] = bcl.alpha
        gamma[1, 0] = bcl.beta
    elif isinstance(bcl, Robin2):
        gamma[0, 0] = bcl.alpha
        gamma[0, 1] = bcl.beta
    elif isinstance(bcl, Periodic):
        gamma[n_int - 1, 0] = 1.0

    # Right edge
    if isinstance(bcr, Robin1):
        gamma[n_int - 1, mdim - 1] = bcr.alpha
        gamma[n_int - 2, mdim - 1] = bcr.beta
    elif isinstance(bcr, Robin2):
        gamma[n_int - 1, mdim - 1] = bcr.alpha
        gamma[n_int - 1, mdim - 2] = bcr.beta
    elif isinstance(bcr, Periodic):
        gamma[0, mdim - 2] = 1.0
        gamma[1, mdim - 1] = 1.0

    return gamma
