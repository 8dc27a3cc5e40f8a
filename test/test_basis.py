import numpy as np
import numpy.testing as npt
import pytest
from scipy.interpolate import BSpline as SciPyBSpline

from cbspline.basis import basis, basis_values, evaluation_matrix, local_support, node_centers
from cbspline.errors import OutOfDomainError
from cbspline.params import AxisParameters


def _cardinal(params: AxisParameters, m: int) -> SciPyBSpline:
    """SciPy cubic B-spline centered on node m."""
    xm = params.xmin + m * params.dx
    knots = xm + params.dx * np.arange(-2.0, 3.0)
    return SciPyBSpline.basis_element(knots, extrapolate=False)


def test_basis_matches_scipy_cardinal_bspline():
    params = AxisParameters(xmin=-1.0, xmax=2.0, num_cells=6)
    m = 3
    xm = params.xmin + m * params.dx
    # Strictly inside the support, avoiding the knots for the 2nd derivative kinks
    x = np.linspace(xm - 2.0 * params.dx, xm + 2.0 * params.dx, 97)[1:-1]
    ref = _cardinal(params, m)

    for d in (0, 1, 2):
        ours = np.array([basis(params, m, xi, d) for xi in x])
        theirs = ref.derivative(d)(x) if d else ref(x)
        npt.assert_allclose(ours, theirs, atol=1e-10, rtol=1e-12)


def test_basis_support_is_compact():
    params = AxisParameters(xmin=0.0, xmax=10.0, num_cells=10)
    x = np.linspace(0.0, 10.0, 1001)
    for m in range(-1, params.num_cells + 2):
        xm = params.xmin + m * params.dx
        vals = basis_values(params, m, x, 0)
        outside = np.abs(x - xm) >= 2.0 * params.dx
        npt.assert_array_equal(vals[outside], 0.0)
        assert np.all(vals[~outside] > 0.0)


def test_partition_of_unity_and_derivatives():
    params = AxisParameters(xmin=0.0, xmax=3.0, num_cells=7)
    rng = np.random.default_rng(7)
    x = np.sort(rng.uniform(params.xmin, params.xmax, 200))
    m = np.arange(-1, params.num_cells + 2)

    # 1) sum_m N_m(x) == 1 on the whole domain
    npt.assert_allclose(basis_values(params, m[:, None], x[None, :], 0).sum(axis=0), 1.0, atol=1e-13)

    # 2) derivatives of the partition of unity vanish
    for d in (1, 2, 3):
        npt.assert_allclose(
            basis_values(params, m[:, None], x[None, :], d).sum(axis=0), 0.0, atol=1e-9
        )


def test_third_derivative_step_rule():
    params = AxisParameters(xmin=0.0, xmax=8.0, num_cells=8)
    dx3 = params.dx ** 3
    m = 4  # node at x = 4
    assert basis(params, m, 4.5, 3) == pytest.approx(3.0 / dx3)     # 0 < delta < 1
    assert basis(params, m, 3.5, 3) == pytest.approx(-3.0 / dx3)    # -1 < delta <= 0
    assert basis(params, m, 5.5, 3) == pytest.approx(-1.0 / dx3)    # 1 < delta < 2
    assert basis(params, m, 2.5, 3) == pytest.approx(1.0 / dx3)     # -2 < delta < -1
    assert basis(params, m, 5.0, 3) == 0.0                          # kink
    assert basis(params, m, 6.0, 3) == 0.0                          # edge of support
    assert basis(params, m, 4.0, 3) == pytest.approx(-3.0 / dx3)    # delta == 0 uses the left sign


def test_basis_errors():
    params = AxisParameters(xmin=0.0, xmax=1.0, num_cells=4)
    with pytest.raises(OutOfDomainError, match="outside spline domain"):
        basis(params, 0, -1e-9, 0)
    with pytest.raises(OutOfDomainError):
        basis(params, 0, 1.5, 0)
    with pytest.raises(ValueError, match="derivative"):
        basis(params, 0, 0.5, 4)
    # endpoints themselves are inside
    assert basis(params, 0, 0.0, 0) == pytest.approx(4.0 / 6.0)
    assert basis(params, params.num_cells, 1.0, 0) == pytest.approx(4.0 / 6.0)


def test_local_support_window_and_evaluation_matrix():
    params = AxisParameters(xmin=0.0, xmax=5.0, num_cells=5)
    x = np.array([0.0, 0.3, 2.5, 4.99, 5.0])
    idx, vals = local_support(params, x, 0)
    assert idx.shape == vals.shape == (x.size, 4)
    assert np.all((idx >= 0) & (idx < params.mdim))

    E = evaluation_matrix(params, x, 0)
    assert E.shape == (x.size, params.mdim)
    npt.assert_allclose(E.sum(axis=1), 1.0, atol=1e-14)

    # Matches a brute-force evaluation over all nodes
    m = np.arange(-1, params.num_cells + 2)
    brute = basis_values(params, m[None, :], x[:, None], 0)
    npt.assert_allclose(E, brute, atol=1e-15)

    with pytest.raises(OutOfDomainError):
        evaluation_matrix(params, [2.0, 5.5])


def test_node_centers():
    params = AxisParameters(xmin=1.0, xmax=2.0, num_cells=4)
    npt.assert_allclose(node_centers(params), 1.0 + 0.25 * np.arange(-1, 6))
