"""Whole-body-control tasks over the decision vector ``[qdd, F, tau]``.

``qdd`` holds the generalised accelerations, ``F`` the stacked 3-D contact
forces and ``tau`` the actuated joint torques.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import numpy as np

from quadwbc.task import Task


@dataclass(frozen=True)
class WbcDimensions:
    """Sizes of the floating-base model the tasks are built for."""

    generalized_coordinates_num: int
    actuated_dof_num: int
    num_three_dof_contacts: int

    def __post_init__(self) -> None:
        for name in ("generalized_coordinates_num", "actuated_dof_num", "num_three_dof_contacts"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must not be negative")
        if self.actuated_dof_num > self.generalized_coordinates_num:
            raise ValueError("actuated_dof_num cannot exceed generalized_coordinates_num")

    def num_decision_vars(self) -> int:
        """Length of the decision vector ``[qdd, F, tau]``."""
        return self.generalized_coordinates_num + 3 * self.num_three_dof_contacts + self.actuated_dof_num

    @property
    def force_offset(self) -> int:
        return self.generalized_coordinates_num

    @property
    def torque_offset(self) -> int:
        return self.generalized_coordinates_num + 3 * self.num_three_dof_contacts


def _flags(dims: WbcDimensions, contact_flags: Sequence[bool]) -> list[bool]:
    flags = [bool(flag) for flag in contact_flags]
    if len(flags) != dims.num_three_dof_contacts:
        raise ValueError(f"expected {dims.num_three_dof_contacts} contact flags, got {len(flags)}")
    return flags


def _matrix(value, shape: tuple[int, int], name: str) -> np.ndarray:
    matrix = np.asarray(value, dtype=float)
    if matrix.shape != shape:
        raise ValueError(f"{name} has shape {matrix.shape}, expected {shape}")
    return matrix


def _vector(value, size: int, name: str) -> np.ndarray:
    vector = np.asarray(value, dtype=float).reshape(-1)
    if vector.size != size:
        raise ValueError(f"{name} has {vector.size} entries, expected {size}")
    return vector


def _jacobian(dims: WbcDimensions, value, name: str) -> np.ndarray:
    return _matrix(value, (3 * dims.num_three_dof_contacts, dims.generalized_coordinates_num), name)


def floating_base_eom_task(dims: WbcDimensions, mass_matrix, nonlinear_effects, contact_jacobian) -> Task:
    """Equations of motion ``M qdd - J' F - S' tau = -h`` as an equality task."""
    nq = dims.generalized_coordinates_num
    m = _matrix(mass_matrix, (nq, nq), "mass_matrix")
    h = _vector(nonlinear_effects, nq, "nonlinear_effects")
    j = _jacobian(dims, contact_jacobian, "contact_jacobian")

    selection = np.zeros((dims.actuated_dof_num, nq))
    selection[:, nq - dims.actuated_dof_num :] = np.eye(dims.actuated_dof_num)
    a = np.hstack([m, -j.T, -selection.T])
    return Task(a, -h, np.zeros((0, 0)), np.zeros(0))


def torque_limits_task(dims: WbcDimensions, torque_limits) -> Task:
    """Bounds ``-limit <= tau <= limit``, repeating ``torque_limits`` over the joints."""
    limits = np.asarray(torque_limits, dtype=float).reshape(-1)
    nu = dims.actuated_dof_num
    if limits.size == 0 or (2 * nu) % limits.size:
        raise ValueError(f"{limits.size} torque limits cannot be repeated over {nu} joints")
    n = dims.num_decision_vars()
    d = np.zeros((2 * nu, n))
    start = dims.torque_offset
    d[:nu, start : start + nu] = np.eye(nu)
    d[nu:, start : start + nu] = -np.eye(nu)
    f = np.tile(limits, 2 * nu // limits.size)
    return Task(np.zeros((0, 0)), np.zeros(0), d, f)


def no_contact_motion_task(dims: WbcDimensions, contact_flags, contact_jacobian, contact_jacobian_dot, velocity) -> Task:
    """Zero acceleration ``J qdd + Jdot v = 0`` for every foot in stance."""
    flags = _flags(dims, contact_flags)
    nq = dims.generalized_coordinates_num
    j = _jacobian(dims, contact_jacobian, "contact_jacobian")
    dj = _jacobian(dims, contact_jacobian_dot, "contact_jacobian_dot")
    v = _vector(velocity, nq, "velocity")

    stance = [i for i, flag in enumerate(flags) if flag]
    a = np.zeros((3 * len(stance), dims.num_decision_vars()))
    b = np.zeros(3 * len(stance))
    for row, i in enumerate(stance):
        a[3 * row : 3 * row + 3, :nq] = j[3 * i : 3 * i + 3]
        b[3 * row : 3 * row + 3] = -dj[3 * i : 3 * i + 3] @ v
    return Task(a, b, np.zeros((0, 0)), np.zeros(0))


def friction_cone_task(dims: WbcDimensions, contact_flags, friction_coeff: float) -> Task:
    """Zero force on swing feet and a friction pyramid on stance feet."""
    flags = _flags(dims, contact_flags)
    n = dims.num_decision_vars()
    num_contacts = sum(flags)
    num_swing = dims.num_three_dof_contacts - num_contacts
    offset = dims.force_offset

    a = np.zeros((3 * num_swing, n))
    swing = [i for i, flag in enumerate(flags) if not flag]
    for row, i in enumerate(swing):
        a[3 * row : 3 * row + 3, offset + 3 * i : offset + 3 * i + 3] = np.eye(3)
    b = np.zeros(a.shape[0])

    mu = float(friction_coeff)
    pyramid = np.array(
        [
            [0.0, 0.0, -1.0],
            [1.0, 0.0, -mu],
            [-1.0, 0.0, -mu],
            [0.0, 1.0, -mu],
            [0.0, -1.0, -mu],
        ]
    )
    d = np.zeros((5 * num_contacts + 3 * num_swing, n))
    stance = [i for i, flag in enumerate(flags) if flag]
    for row, i in enumerate(stance):
        d[5 * row : 5 * row + 5, offset + 3 * i : offset + 3 * i + 3] = pyramid
    f = np.zeros(d.shape[0])
    return Task(a, b, d, f)


def swing_leg_task(
    dims: WbcDimensions,
    contact_flags,
    contact_jacobian,
    contact_jacobian_dot,
    velocity,
    pos_desired,
    pos_measured,
    vel_desired,
    vel_measured,
    kp: float,
    kd: float,
) -> Task:
    """PD-tracked foot acceleration ``J qdd + Jdot v = kp e_p + kd e_v`` for swing feet."""
    flags = _flags(dims, contact_flags)
    nq = dims.generalized_coordinates_num
    nc = dims.num_three_dof_contacts
    j = _jacobian(dims, contact_jacobian, "contact_jacobian")
    dj = _jacobian(dims, contact_jacobian_dot, "contact_jacobian_dot")
    v = _vector(velocity, nq, "velocity")
    p_des = _matrix(np.asarray(pos_desired, dtype=float).reshape(-1, 3), (nc, 3), "pos_desired")
    p_meas = _matrix(np.asarray(pos_measured, dtype=float).reshape(-1, 3), (nc, 3), "pos_measured")
    v_des = _matrix(np.asarray(vel_desired, dtype=float).reshape(-1, 3), (nc, 3), "vel_desired")
    v_meas = _matrix(np.asarray(vel_measured, dtype=float).reshape(-1, 3), (nc, 3), "vel_measured")

    swing = [i for i, flag in enumerate(flags) if not flag]
    a = np.zeros((3 * len(swing), dims.num_decision_vars()))
    b = np.zeros(3 * len(swing))
    for row, i in enumerate(swing):
        accel = kp * (p_des[i] - p_meas[i]) + kd * (v_des[i] - v_meas[i])
        a[3 * row : 3 * row + 3, :nq] = j[3 * i : 3 * i + 3]
        b[3 * row : 3 * row + 3] = accel - dj[3 * i : 3 * i + 3] @ v
    return Task(a, b, np.zeros((0, 0)), np.zeros(0))


def contact_force_task(dims: WbcDimensions, input_desired) -> Task:
    """Track the desired contact forces taken from the head of ``input_desired``."""
    nc = dims.num_three_dof_contacts
    desired = np.asarray(input_desired, dtype=float).reshape(-1)
    if desired.size < 3 * nc:
        raise ValueError(f"input_desired needs at least {3 * nc} entries, got {desired.size}")
    a = np.zeros((3 * nc, dims.num_decision_vars()))
    offset = dims.force_offset
    a[:, offset : offset + 3 * nc] = np.eye(3 * nc)
    return Task(a, desired[: 3 * nc].copy(), np.zeros((0, 0)), np.zeros(0))