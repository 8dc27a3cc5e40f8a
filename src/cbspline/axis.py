"""One-dimensional cubic B-spline axis and its B/A/I transforms."""
from __future__ import annotations
import logging
from typing import Dict, Optional, Tuple
import numpy as np
import numpy.typing as npt

from .basis import check_domain, evaluation_matrix, local_support
from .compact import CompactOperator, build_operator, get_operator
from .mish import mish_points
from .params import AxisParameters

Array = npt.NDArray[np.float64]

logger = logging.getLogger(__name__)


class Spline1D:
    """Facade for one spline axis: samples -> B vector -> A coefficients -> samples.

    The instance owns its sample buffer ``u_mish`` and the coefficient buffers
    ``b`` and ``a``; the factored compact operator is shared (read-only) between
    all instances built from equal :class:`AxisParameters`. The in-place
    transforms (trailing underscore) update those buffers, the plain ones return
    new arrays and accept a trailing batch axis.
    """

    def __init__(
        self,
        params: AxisParameters,
        *,
        operator: Optional[CompactOperator] = None,
        share_operator: bool = True,
    ):
        """Build the axis.

        Parameters
        ----------
        params : AxisParameters
            Axis description
        operator : Optional[CompactOperator]
            Factored operator to reuse; must have been built for ``params``
        share_operator : bool
            Take the operator from the process-wide cache (default) or build a
            private one

        Raises
        ------
        ConfigurationError
            If the boundary conditions do not fit on the axis
        SingularOperatorError
            If the operator cannot be factored
        """
        if operator is None:
            operator = get_operator(params) if share_operator else build_operator(params)
        elif operator.params != params:
            raise ValueError("operator was built for different axis parameters.")
        self.params = params
        self.operator = operator

        pts = mish_points(params)
        pts.setflags(write=False)
        self._mish_points: Array = pts
        self.u_mish: Array = np.zeros(params.mish_dim, dtype=np.float64)
        self.b: Array = np.zeros(params.mdim, dtype=np.float64)
        self.a: Array = np.zeros(params.mdim, dtype=np.float64)

        self._mish_support: Dict[int, Tuple[npt.NDArray[np.int64], Array]] = {}
        logger.debug(
            "Created Spline1D on [%g, %g] with %d cells (%s/%s)",
            params.xmin, params.xmax, params.num_cells,
            type(params.bcl).__name__, type(params.bcr).__name__,
        )

    @classmethod
    def from_params(cls, **kwargs) -> "Spline1D":
        """Create an axis from :class:`AxisParameters` keyword arguments."""
        return cls(AxisParameters(**kwargs))

    def copy(self) -> "Spline1D":
        """New axis with the same operator and independent copies of the buffers."""
        other = type(self)(self.params, operator=self.operator)
        other.u_mish[:] = self.u_mish
        other.b[:] = self.b
        other.a[:] = self.a
        return other

    # ---------- read-only views ----------
    @property
    def mish_points(self) -> Array:
        """Quadrature sample locations (read-only)."""
        return self._mish_points

    @property
    def mish_dim(self) -> int:
        return self.params.mish_dim

    @property
    def b_dim(self) -> int:
        return self.params.mdim

    @property
    def gamma_bc(self) -> Array:
        """Boundary folding matrix."""
        return self.operator.folding

    @property
    def pq(self) -> Array:
        """Unfolded mass + regularization matrix (diagnostics)."""
        return self.operator.mass_plus_reg

    # ---------- private helpers ----------
    def _support(self, points: Optional[Array], derivative: int):
        if points is None:
            d = int(derivative)
            if d not in self._mish_support:
                self._mish_support[d] = local_support(self.params, self._mish_points, derivative)
            return self._mish_support[d]
        pts = np.atleast_1d(np.asarray(points, dtype=np.float64))
        if pts.ndim != 1:
            raise ValueError("points must be a 1D sequence.")
        check_domain(self.params, pts)
        return local_support(self.params, pts, derivative)

    def _check_leading(self, arr: Array, n: int, name: str) -> Array:
        arr = np.asarray(arr, dtype=np.float64)
        if arr.ndim not in (1, 2) or arr.shape[0] != n:
            raise ValueError(f"{name} must have shape ({n},) or ({n}, batch), got {arr.shape}.")
        return arr

    # ---------- samples ----------
    def set_mish_values(self, values: Array) -> None:
        """Copy physical samples (one per mish point) into ``u_mish``."""
        values = np.asarray(values, dtype=np.float64)
        if values.shape != (self.mish_dim,):
            raise ValueError(f"values must have shape ({self.mish_dim},), got {values.shape}.")
        self.u_mish[:] = values

    # ---------- B transform ----------
    def sb_transform(self, u_mish: Optional[Array] = None) -> Array:
        """Integrate samples against every basis function (no boundary folding).

        Parameters
        ----------
        u_mish : Optional[Array]
            Samples of shape ``(mish_dim,)`` or ``(mish_dim, batch)``
            (default: the axis buffer ``u_mish``)

        Returns
        -------
        Array
            Open-space B vector of shape ``(mdim,)`` or ``(mdim, batch)``
        """
        u = self.u_mish if u_mish is None else self._check_leading(u_mish, self.mish_dim, "u_mish")
        return self.operator.BW @ u

    def sb_transform_(self) -> Array:
        """In-place B transform ``u_mish -> b``."""
        self.b[:] = self.sb_transform()
        return self.b

    # ---------- A transform ----------
    def sa_transform(self, b: Optional[Array] = None, ahat: Optional[Array] = None) -> Array:
        """Solve for A coefficients that satisfy the boundary conditions.

        Parameters
        ----------
        b : Optional[Array]
            B vector, ``(mdim,)`` or ``(mdim, batch)`` (default: the axis buffer ``b``)
        ahat : Optional[Array]
            Background coefficients; when given, only the perturbation
            ``b - (P+Q) ahat`` is solved for and ``ahat`` is added back

        Returns
        -------
        Array
            A coefficients with the shape of ``b``
        """
        b = self.b if b is None else self._check_leading(b, self.b_dim, "b")
        op = self.operator
        if ahat is None:
            return op.unfold(op.solve(op.fold(b)))

        ahat = self._check_leading(ahat, self.b_dim, "ahat")
        if ahat.ndim > b.ndim:
            raise ValueError("ahat cannot carry a batch axis when b does not.")
        if ahat.ndim < b.ndim:
            ahat = ahat[:, None]
        btilde = op.fold(b - op.mass_plus_reg @ ahat)
        return op.unfold(op.solve(btilde)) + ahat

    def sa_transform_(self, ahat: Optional[Array] = None) -> Array:
        """In-place A transform ``b -> a``."""
        self.a[:] = self.sa_transform(ahat=ahat)
        return self.a

    # ---------- I transform ----------
    def si_transform(
        self,
        points: Optional[Array] = None,
        derivative: int = 0,
        a: Optional[Array] = None,
    ) -> Array:
        """Evaluate the expansion (or its 1st/2nd derivative) at points.

        Parameters
        ----------
        points : Optional[Array]
            Evaluation points inside ``[xmin, xmax]`` (default: the mish points)
        derivative : int
            0, 1, or 2
        a : Optional[Array]
            Coefficients ``(mdim,)`` or ``(mdim, batch)`` (default: the axis buffer ``a``)

        Returns
        -------
        Array
            Values of shape ``(n_points,)`` or ``(n_points, batch)``

        Raises
        ------
        OutOfDomainError
            If any point lies outside the axis
        """
        if derivative not in (0, 1, 2):
            raise ValueError("Only 0th/1st/2nd derivatives are supported.")
        a = self.a if a is None else self._check_leading(a, self.b_dim, "a")
        idx, vals = self._support(points, derivative)
        coeffs = a[idx]
        if coeffs.ndim == 2:
            return np.sum(vals * coeffs, axis=1)
        return np.einsum("pk,pkn->pn", vals, coeffs)

    def si_transform_into(
        self, out: Array, points: Optional[Array] = None, derivative: int = 0
    ) -> Array:
        """Evaluate into a caller-supplied buffer; ``out`` is untouched on failure."""
        u = self.si_transform(points, derivative)
        if not isinstance(out, np.ndarray) or out.shape != u.shape:
            got = out.shape if isinstance(out, np.ndarray) else type(out).__name__
            raise ValueError(f"out must be an array of shape {u.shape}, got {got}.")
        out[...] = u
        return out

    def si_transform_(self, derivative: int = 0) -> Array:
        """In-place I transform ``a -> u_mish``."""
        return self.si_transform_into(self.u_mish, None, derivative)

    def six_transform(self, points: Optional[Array] = None) -> Array:
        """First derivative of the expansion."""
        return self.si_transform(points, 1)

    def sixx_transform(self, points: Optional[Array] = None) -> Array:
        """Second derivative of the expansion."""
        return self.si_transform(points, 2)

    def si_transform_all(
        self, points: Optional[Array] = None, a: Optional[Array] = None
    ) -> Tuple[Array, Array, Array]:
        """Value, first and second derivative at the same points.

        Returns
        -------
        u : Array
        u_x : Array
        u_xx : Array
        """
        return tuple(self.si_transform(points, d, a) for d in (0, 1, 2))

    def evaluation_matrix(self, points: Optional[Array] = None, derivative: int = 0) -> Array:
        """Dense ``(n_points, mdim)`` matrix ``E`` with ``E @ a`` equal to :meth:`si_transform`."""
        pts = self._mish_points if points is None else points
        return evaluation_matrix(self.params, pts, derivative)
