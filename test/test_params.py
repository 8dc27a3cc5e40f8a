import unittest

import numpy as np

from cbspline.boundary import PERIODIC, R0, R1T0
from cbspline.errors import ConfigurationError
from cbspline.params import AxisParameters


class TestAxisParameters(unittest.TestCase):
    def test_derived_quantities(self):
        p = AxisParameters(xmin=0.0, xmax=4.0, num_cells=8, l_q=2.0)
        self.assertAlmostEqual(p.dx, 0.5)
        self.assertAlmostEqual(p.dx_recip, 2.0)
        self.assertEqual(p.mdim, 11)
        self.assertEqual(p.mish_dim, 24)
        self.assertEqual(p.interior_dim, 11)
        self.assertAlmostEqual(p.eps_q, (2.0 * 0.5 / (2.0 * np.pi)) ** 6)
        self.assertIs(p.bcl, R0)

    def test_boundary_names_resolved_once(self):
        p = AxisParameters(xmin=0.0, xmax=1.0, num_cells=5, bcl="R1T0", bcr="periodic")
        self.assertEqual(p.bcl, R1T0)
        self.assertIs(p.bcr, PERIODIC)
        self.assertEqual((p.rank_left, p.rank_right), (1, 2))
        self.assertEqual(p.interior_dim, 8 - 3)

    def test_value_semantics(self):
        a = AxisParameters(xmin=0, xmax=1, num_cells=3, bcl="R1T0")
        b = AxisParameters(xmin=0.0, xmax=1.0, num_cells=3, bcl=R1T0)
        self.assertEqual(a, b)
        self.assertEqual(hash(a), hash(b))
        self.assertIsInstance(a.xmin, float)
        with self.assertRaises(AttributeError):
            a.num_cells = 4

    def test_invalid_parameters(self):
        with self.assertRaisesRegex(ConfigurationError, "at least 1"):
            AxisParameters(xmin=0.0, xmax=1.0, num_cells=0)
        with self.assertRaisesRegex(ConfigurationError, "must exceed"):
            AxisParameters(xmin=1.0, xmax=1.0, num_cells=2)
        with self.assertRaisesRegex(ConfigurationError, "integer"):
            AxisParameters(xmin=0.0, xmax=1.0, num_cells=2.5)
        with self.assertRaisesRegex(ConfigurationError, "finite"):
            AxisParameters(xmin=0.0, xmax=float("inf"), num_cells=2)
        with self.assertRaisesRegex(ConfigurationError, "l_q"):
            AxisParameters(xmin=0.0, xmax=1.0, num_cells=2, l_q=-1.0)
        with self.assertRaises(ConfigurationError):
            AxisParameters(xmin=0.0, xmax=1.0, num_cells=2, bcl="R9")
        # configuration errors remain ValueErrors for generic callers
        with self.assertRaises(ValueError):
            AxisParameters(xmin=0.0, xmax=1.0, num_cells=-3)

    def test_unregularized_axis_needs_enough_mish_points(self):
        # one cell: 4 open coefficients, 3 mish points
        with self.assertRaisesRegex(ConfigurationError, "l_q=0"):
            AxisParameters(xmin=0.0, xmax=1.0, num_cells=1, l_q=0.0)
        p = AxisParameters(xmin=0.0, xmax=1.0, num_cells=1, l_q=0.0, bcl="R1T0")
        self.assertEqual(p.interior_dim, p.mish_dim)
        p = AxisParameters(xmin=0.0, xmax=1.0, num_cells=1, l_q=1e-3)
        self.assertGreater(p.eps_q, 0.0)
        p = AxisParameters(xmin=0.0, xmax=1.0, num_cells=2, l_q=0.0)
        self.assertEqual((p.interior_dim, p.mish_dim), (5, 6))

    def test_from_mapping(self):
        cfg = {"xmin": 0.0, "xmax": 2.0, "num_cells": 10, "l_q": 4.0, "BCL": "R1T0", "bcr": "R0"}
        p = AxisParameters.from_mapping(cfg)
        self.assertEqual(p, AxisParameters(xmin=0.0, xmax=2.0, num_cells=10, l_q=4.0, bcl=R1T0))
        with self.assertRaisesRegex(ConfigurationError, "Unknown axis parameter"):
            AxisParameters.from_mapping({"xmin": 0.0, "xmax": 1.0, "cells": 4})


if __name__ == "__main__":
    unittest.main()
