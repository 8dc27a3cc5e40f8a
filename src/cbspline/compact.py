"""Compact (mass + regularization) operator: assembly, boundary folding and factorization."""
from __future__ import annotations
import logging
from collections import OrderedDict
from typing import Optional
import numpy as np
import numpy.typing as npt
from scipy import linalg as sla

from .basis import mish_basis_matrix
from .boundary import build_folding
from .errors import SingularOperatorError
from .mish import mish_weights
from .params import AxisParameters

Array = npt.NDArray[np.float64]

logger = logging.getLogger(__name__)


def _readonly(a: Array) -> Array:
    a.setflags(write=False)
    return a


class CompactOperator:
    """Boundary-folded, Cholesky-factored ``P + Q`` for one axis configuration.

    ``P`` is the mass matrix and ``Q`` the third-derivative regularization, both
    integrated with the three-point mish quadrature. All arrays are read-only
    after construction, so one instance can be shared by every axis (tile,
    column, ring) with identical parameters.
    """

    def __init__(self, params: AxisParameters, folding: Optional[Array] = None):
        """Assemble and factor the operator.

        Parameters
        ----------
        params : AxisParameters
            Axis description
        folding : Optional[Array]
            Precomputed folding matrix (default: built from ``params``)

        Raises
        ------
        ConfigurationError
            If the boundary conditions do not fit on the axis
        SingularOperatorError
            If the folded operator is not symmetric positive definite
        """
        self.params = params
        gamma = build_folding(params.bcl, params.bcr, params.num_cells) if folding is None \
            else np.array(folding, dtype=np.float64)
        if gamma.shape != (params.interior_dim, params.mdim):
            raise ValueError(
                f"folding shape {gamma.shape} must be ({params.interior_dim}, {params.mdim})."
            )
        self.folding: Array = _readonly(gamma)

        # Basis tables at the mish points, (mdim, mish_dim)
        B0 = mish_basis_matrix(params, 0)
        B3 = mish_basis_matrix(params, 3)
        w = mish_weights(params)
        eps_q = params.eps_q

        self.BW: Array = _readonly(B0 * w)
        P = self.BW @ B0.T
        Q = eps_q * ((B3 * w) @ B3.T)
        self.mass: Array = _readonly(0.5 * (P + P.T))
        self.regularization: Array = _readonly(0.5 * (Q + Q.T))
        self.mass_plus_reg: Array = _readonly(self.mass + self.regularization)

        folded = gamma @ self.mass_plus_reg @ gamma.T
        folded = 0.5 * (folded + folded.T)
        self.folded: Array = _readonly(folded)
        logger.debug(
            "Assembled compact operator: mdim=%d interior=%d eps_q=%.3e nnz=%d",
            params.mdim, params.interior_dim, eps_q, np.count_nonzero(folded),
        )

        try:
            c, lower = sla.cho_factor(folded, lower=False, check_finite=True)
        except (np.linalg.LinAlgError, ValueError) as exc:
            logger.error("Cholesky factorization failed for %r: %s", params, exc)
            raise SingularOperatorError(
                f"Folded compact operator is not positive definite for {params!r}."
            ) from exc
        self._factor = (c, lower)

    @property
    def mdim(self) -> int:
        return self.params.mdim

    @property
    def interior_dim(self) -> int:
        return self.params.interior_dim

    def solve(self, rhs: Array) -> Array:
        """Solve ``Γ (P+Q) Γᵀ y = rhs`` for a vector or an ``(interior, batch)`` array."""
        return sla.cho_solve(self._factor, rhs, check_finite=False)

    def fold(self, b: Array) -> Array:
        """Map open-space vectors to the interior space (``Γ b``)."""
        return self.folding @ b

    def unfold(self, c: Array) -> Array:
        """Map interior vectors back to open coefficients (``Γᵀ c``)."""
        return self.folding.T @ c


# Least recently used operators are evicted beyond this many entries
OPERATOR_CACHE_SIZE = 128

_OPERATOR_CACHE: OrderedDict[AxisParameters, CompactOperator] = OrderedDict()


def build_operator(params: AxisParameters, folding: Optional[Array] = None) -> CompactOperator:
    """Build a new, unshared operator."""
    return CompactOperator(params, folding)


def get_operator(params: AxisParameters) -> CompactOperator:
    """Return the shared operator for ``params``, building it on first use.

    At most ``OPERATOR_CACHE_SIZE`` operators are kept; every distinct
    ``xmin``/``xmax`` is a separate entry, so tiled callers that move their
    origin should rely on the eviction or call :func:`clear_operator_cache`.
    """
    op = _OPERATOR_CACHE.get(params)
    if op is not None:
        logger.debug("Reusing cached compact operator for %r", params)
        _OPERATOR_CACHE.move_to_end(params)
        return op
    op = CompactOperator(params)
    _OPERATOR_CACHE[params] = op
    while len(_OPERATOR_CACHE) > max(OPERATOR_CACHE_SIZE, 1):
        evicted, _ = _OPERATOR_CACHE.popitem(last=False)
        logger.debug("Evicted cached compact operator for %r", evicted)
    return op


def clear_operator_cache() -> None:
    """Drop all memoized operators."""
    _OPERATOR_CACHE.clear()
