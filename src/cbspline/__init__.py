"""Top-level package exports for the cbspline library."""
import logging

from .axis import Spline1D
from .basis import evaluation_matrix
from .boundary import (
    PERIODIC,
    R0,
    R1T0,
    R1T1,
    R1T2,
    R2T10,
    R2T20,
    R3,
    BoundaryCondition,
    Homogeneous0,
    Homogeneous3,
    Periodic,
    Robin1,
    Robin2,
    boundary_condition,
    build_folding,
)
from .compact import CompactOperator, clear_operator_cache, get_operator
from .errors import CBSplineError, ConfigurationError, OutOfDomainError, SingularOperatorError
from .log import setup_logging
from .mish import mish_points
from .params import AxisParameters

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
    "AxisParameters",
    "BoundaryCondition",
    "CBSplineError",
    "CompactOperator",
    "ConfigurationError",
    "Homogeneous0",
    "Homogeneous3",
    "OutOfDomainError",
    "PERIODIC",
    "Periodic",
    "R0",
    "R1T0",
    "R1T1",
    "R1T2",
    "R2T10",
    "R2T20",
    "R3",
    "Robin1",
    "Robin2",
    "SingularOperatorError",
    "Spline1D",
    "boundary_condition",
    "build_folding",
    "clear_operator_cache",
    "evaluation_matrix",
    "get_operator",
    "mish_points",
    "setup_logging",
]
