import numpy as np
import pytest

from quadwbc.zero_force import ZeroForceConstraint


def _flags(t):
    return [True, False, True, False]


@pytest.mark.parametrize("index", [0, 1, 2, 3])
def test_is_active_is_inverse_of_stance(index):
    constraint = ZeroForceConstraint(index, _flags)
    assert constraint.is_active(0.3) is (not _flags(0.3)[index])


def test_value_is_contact_force_slice():
    u = np.arange(24, dtype=float)
    constraint = ZeroForceConstraint(2, _flags)
    np.testing.assert_array_equal(constraint.value(0.0, np.zeros(5), u), u[6:9])


def test_linear_approximation_shapes_and_identity_block():
    x = np.ones(7)
    u = np.linspace(-1.0, 1.0, 24)
    constraint = ZeroForceConstraint(1, _flags)
    approx = constraint.linear_approximation(0.0, x, u)
    assert approx.dfdx.shape == (3, 7)
    assert approx.dfdu.shape == (3, 24)
    assert not approx.dfdx.any()
    np.testing.assert_array_equal(approx.dfdu[:, 3:6], np.eye(3))
    assert approx.dfdu.sum() == 3.0


def test_linear_approximation_is_exact():
    rng = np.random.default_rng(4)
    u = rng.normal(size=12)
    constraint = ZeroForceConstraint(3, _flags)
    approx = constraint.linear_approximation(0.0, np.zeros(2), u)
    np.testing.assert_allclose(approx.dfdu @ u, approx.f)
    np.testing.assert_allclose(approx.f, constraint.value(0.0, np.zeros(2), u))


def test_num_constraints_is_three():
    assert ZeroForceConstraint(0, _flags).num_constraints == 3


def test_short_input_raises():
    constraint = ZeroForceConstraint(3, _flags)
    with pytest.raises(ValueError):
        constraint.value(0.0, np.zeros(1), np.zeros(6))


def test_negative_index_raises():
    with pytest.raises(ValueError):
        ZeroForceConstraint(-1, _flags)