"""Error taxonomy for the compact cubic B-spline engine."""
from __future__ import annotations
from numpy.linalg import LinAlgError


class CBSplineError(Exception):
    """Base class for all errors raised by cbspline."""


class ConfigurationError(CBSplineError, ValueError):
    """Invalid axis parameters or boundary-condition/cell-count combination."""


class SingularOperatorError(CBSplineError, LinAlgError):
    """The folded compact operator is not symmetric positive definite."""


class OutOfDomainError(CBSplineError, ValueError):
    """Evaluation point lies outside [xmin, xmax]."""

    def __init__(self, x: float, xmin: float, xmax: float):
        self.x = float(x)
        self.xmin = float(xmin)
        self.xmax = float(xmax)
        super().__init__(f"x={self.x!r} outside spline domain [{self.xmin!r}, {self.xmax!r}].")
