"""Axis parameters for a compact cubic B-spline axis."""
from __future__ import annotations
from dataclasses import dataclass, field, fields
import math
import operator
from typing import Any, Mapping, Union

from .boundary import BoundaryCondition, R0, boundary_condition, interior_dim
from .errors import ConfigurationError


@dataclass(frozen=True)
class AxisParameters:
    """Immutable description of one spline axis.

    Boundary conditions may be given as variants or as preset names
    (``"R0"``, ``"R1T0"``, ``"PERIODIC"``, ...); names are resolved here once.
    Instances are hashable and serve as the key for operator memoization.
    """
    xmin: float = 0.0
    xmax: float = 1.0
    num_cells: int = 1
    l_q: float = 2.0
    bcl: Union[str, BoundaryCondition] = field(default=R0)
    bcr: Union[str, BoundaryCondition] = field(default=R0)

    def __post_init__(self):
        if isinstance(self.num_cells, bool):
            raise ConfigurationError("num_cells must be an integer, got a bool.")
        try:
            num_cells = operator.index(self.num_cells)
        except TypeError:
            raise ConfigurationError(f"num_cells must be an integer, got {self.num_cells!r}.") from None
        # frozen: assign normalized values through object.__setattr__
        object.__setattr__(self, "num_cells", num_cells)
        object.__setattr__(self, "xmin", float(self.xmin))
        object.__setattr__(self, "xmax", float(self.xmax))
        object.__setattr__(self, "l_q", float(self.l_q))
        object.__setattr__(self, "bcl", boundary_condition(self.bcl))
        object.__setattr__(self, "bcr", boundary_condition(self.bcr))

        if self.num_cells < 1:
            raise ConfigurationError("num_cells must be at least 1.")
        if not (math.isfinite(self.xmin) and math.isfinite(self.xmax)):
            raise ConfigurationError("xmin and xmax must be finite.")
        if not self.xmax > self.xmin:
            raise ConfigurationError(f"xmax ({self.xmax}) must exceed xmin ({self.xmin}).")
        if not (math.isfinite(self.l_q) and self.l_q >= 0.0):
            raise ConfigurationError("l_q must be a finite, non-negative length scale.")
        # without regularization the mass matrix needs a mish point per interior coefficient
        if self.l_q == 0.0 and self.interior_dim > self.mish_dim:
            raise ConfigurationError(
                f"l_q=0 leaves {self.interior_dim} interior coefficients against "
                f"{self.mish_dim} mish points; use l_q > 0 or more cells."
            )

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> "AxisParameters":
        """Build parameters from a plain configuration mapping.

        Accepts the field names plus the upper-case aliases ``BCL``/``BCR``.
        """
        aliases = {"BCL": "bcl", "BCR": "bcr"}
        names = {f.name for f in fields(cls)}
        kwargs = {}
        for key, value in mapping.items():
            name = aliases.get(key, key)
            if name not in names:
                raise ConfigurationError(f"Unknown axis parameter {key!r}.")
            kwargs[name] = value
        return cls(**kwargs)

    @property
    def dx(self) -> float:
        """Cell width."""
        return (self.xmax - self.xmin) / self.num_cells

    @property
    def dx_recip(self) -> float:
        return 1.0 / self.dx

    @property
    def mdim(self) -> int:
        """Number of open coefficients (nodes -1 .. num_cells+1)."""
        return self.num_cells + 3

    @property
    def mish_dim(self) -> int:
        return self.num_cells * 3

    @property
    def rank_left(self) -> int:
        return self.bcl.rank_left

    @property
    def rank_right(self) -> int:
        return self.bcr.rank_right

    @property
    def interior_dim(self) -> int:
        return interior_dim(self.bcl, self.bcr, self.num_cells)

    @property
    def eps_q(self) -> float:
        """Weight of the third-derivative regularization term."""
        return ((self.l_q * self.dx) / (2.0 * math.pi)) ** 6
