import numpy as np
import pytest

from quadwbc.friction_cone import (
    FrictionConeConfig,
    FrictionConeConstraint,
    LinearApproximation,
    QuadraticApproximation,
)

STATE_DIM = 24
INPUT_DIM = 24


def _flags_schedule(time):
    # legs 0 and 3 in stance before t = 1, all legs in stance afterwards
    return [True, False, False, True] if time < 1.0 else [True, True, True, True]


def _make(index=1, **config):
    return FrictionConeConstraint(FrictionConeConfig(**config), index, _flags_schedule)


def _input_with_force(index, force):
    u = np.linspace(-1.0, 1.0, INPUT_DIM)
    u[3 * index : 3 * index + 3] = force
    return u


def _numeric_gradient(constraint, state, u, eps=1e-6):
    grad = np.zeros(u.size)
    for k in range(u.size):
        up, um = u.copy(), u.copy()
        up[k] += eps
        um[k] -= eps
        grad[k] = (constraint.value(0.0, state, up)[0] - constraint.value(0.0, state, um)[0]) / (2 * eps)
    return grad


def test_config_defaults():
    cfg = FrictionConeConfig()
    assert cfg.friction_coefficient == 0.7
    assert cfg.regularization == 25.0
    assert cfg.gripper_force == 0.0
    assert cfg.hessian_diagonal_shift == 1e-6


@pytest.mark.parametrize(
    "kwargs",
    [
        {"friction_coefficient": 0.0},
        {"friction_coefficient": -0.3},
        {"regularization": 0.0},
        {"hessian_diagonal_shift": -1e-3},
    ],
)
def test_config_rejects_invalid_values(kwargs):
    with pytest.raises(ValueError):
        FrictionConeConfig(**kwargs)


def test_zero_crossing_at_documented_normal_force():
    cfg = FrictionConeConfig(friction_coefficient=0.5, regularization=16.0)
    constraint = FrictionConeConstraint(cfg, 2, _flags_schedule)
    fz = np.sqrt(cfg.regularization) / cfg.friction_coefficient
    value = constraint.value(0.0, np.zeros(STATE_DIM), _input_with_force(2, [0.0, 0.0, fz]))
    assert value.shape == (1,)
    assert value[0] == pytest.approx(0.0, abs=1e-12)


def test_value_increases_with_normal_force_and_decreases_with_tangential_force():
    constraint = _make()
    x = np.zeros(STATE_DIM)
    base = constraint.value(0.0, x, _input_with_force(1, [3.0, -2.0, 50.0]))[0]
    more_normal = constraint.value(0.0, x, _input_with_force(1, [3.0, -2.0, 60.0]))[0]
    more_tangent = constraint.value(0.0, x, _input_with_force(1, [6.0, -2.0, 50.0]))[0]
    assert more_normal > base
    assert more_tangent < base


def test_gripper_force_shifts_cone():
    x = np.zeros(STATE_DIM)
    u = _input_with_force(0, [1.0, 1.0, 10.0])
    plain = FrictionConeConstraint(FrictionConeConfig(), 0, _flags_schedule).value(0.0, x, u)[0]
    gripping = FrictionConeConstraint(FrictionConeConfig(gripper_force=10.0), 0, _flags_schedule).value(0.0, x, u)[0]
    shifted_u = _input_with_force(0, [1.0, 1.0, 20.0])
    assert gripping == pytest.approx(plain + FrictionConeConfig().friction_coefficient * 10.0)
    assert gripping == pytest.approx(
        FrictionConeConstraint(FrictionConeConfig(), 0, _flags_schedule).value(0.0, x, shifted_u)[0]
    )


def test_value_depends_only_on_own_contact():
    constraint = _make(index=1)
    x = np.zeros(STATE_DIM)
    u = _input_with_force(1, [2.0, 1.0, 30.0])
    other = u.copy()
    other[0:3] = [100.0, -50.0, 7.0]
    other[9:] = 42.0
    assert constraint.value(0.0, x, other)[0] == pytest.approx(constraint.value(0.0, x, u)[0])


def test_is_active_follows_contact_flags():
    swing_leg = _make(index=1)
    stance_leg = _make(index=0)
    assert swing_leg.is_active(0.5) is False
    assert swing_leg.is_active(1.5) is True
    assert stance_leg.is_active(0.5) is True


def test_linear_approximation_matches_finite_differences():
    constraint = _make(index=1)
    x = np.arange(STATE_DIM, dtype=float)
    u = _input_with_force(1, [4.0, -3.0, 40.0])
    approx = constraint.linear_approximation(0.0, x, u)
    assert isinstance(approx, LinearApproximation)
    assert np.allclose(approx.f, constraint.value(0.0, x, u))
    assert approx.dfdx.shape == (1, STATE_DIM)
    assert np.all(approx.dfdx == 0.0)
    assert approx.dfdu.shape == (1, INPUT_DIM)
    assert np.allclose(approx.dfdu[0], _numeric_gradient(constraint, x, u), atol=1e-6)


def test_input_gradient_is_zero_outside_contact_block():
    constraint = _make(index=2)
    u = _input_with_force(2, [1.0, 2.0, 20.0])
    dfdu = constraint.linear_approximation(0.0, np.zeros(STATE_DIM), u).dfdu[0]
    mask = np.ones(INPUT_DIM, dtype=bool)
    mask[6:9] = False
    assert np.all(dfdu[mask] == 0.0)
    assert dfdu[8] == pytest.approx(constraint.config.friction_coefficient)


def test_quadratic_approximation_hessians():
    shift = 1e-3
    constraint = _make(index=1, hessian_diagonal_shift=shift)
    x = np.zeros(STATE_DIM)
    u = _input_with_force(1, [4.0, -3.0, 40.0])
    quad = constraint.quadratic_approximation(0.0, x, u)
    lin = constraint.linear_approximation(0.0, x, u)
    assert isinstance(quad, QuadraticApproximation)
    assert np.allclose(quad.f, lin.f)
    assert np.allclose(quad.dfdu, lin.dfdu)
    assert len(quad.dfdxx) == len(quad.dfduu) == len(quad.dfdux) == 1

    assert np.allclose(quad.dfdxx[0], -shift * np.eye(STATE_DIM))
    assert quad.dfdux[0].shape == (INPUT_DIM, STATE_DIM)
    assert np.all(quad.dfdux[0] == 0.0)

    hessian = quad.dfduu[0]
    assert np.allclose(hessian, hessian.T)
    eps = 1e-5
    numeric = np.zeros((INPUT_DIM, INPUT_DIM))
    for k in range(INPUT_DIM):
        up, um = u.copy(), u.copy()
        up[k] += eps
        um[k] -= eps
        numeric[:, k] = (
            constraint.linear_approximation(0.0, x, up).dfdu[0] - constraint.linear_approximation(0.0, x, um).dfdu[0]
        ) / (2 * eps)
    assert np.allclose(hessian + shift * np.eye(INPUT_DIM), numeric, atol=1e-6)


def test_cone_hessian_is_negative_semidefinite():
    constraint = _make(index=0, hessian_diagonal_shift=0.0)
    u = _input_with_force(0, [7.0, 2.0, 15.0])
    hessian = constraint.quadratic_approximation(0.0, np.zeros(STATE_DIM), u).dfduu[0]
    assert np.max(np.linalg.eigvalsh(hessian)) <= 1e-12


def test_set_surface_normal_is_refused_and_keeps_identity():
    constraint = _make()
    with pytest.raises(RuntimeError):
        constraint.set_surface_normal_in_world([0.0, 0.1, 0.99])
    assert np.array_equal(constraint.terrain_rotation, np.eye(3))


def test_short_input_is_rejected():
    constraint = _make(index=3)
    with pytest.raises(ValueError):
        constraint.value(0.0, np.zeros(STATE_DIM), np.zeros(9))


def test_negative_index_is_rejected():
    with pytest.raises(ValueError):
        FrictionConeConstraint(FrictionConeConfig(), -1, _flags_schedule)