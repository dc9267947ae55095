"""Velocity constraints on a single foot: zero velocity in stance, normal velocity in swing."""

from __future__ import annotations

import sys
from typing import Callable, Sequence

import numpy as np

from quadwbc.end_effector import EndEffectorKinematics, EndEffectorLinearConfig, EndEffectorLinearConstraint
from quadwbc.friction_cone import LinearApproximation

ContactFlagsFn = Callable[[float], Sequence[bool]]


def _almost_zero(value: float) -> bool:
    return abs(float(value)) < sys.float_info.min


def zero_velocity_config(position_error_gain: float) -> EndEffectorLinearConfig:
    """Coefficients for ``vee + gain * e_z * zee = 0`` on a stance foot.

    The position term is only added when the gain is non-zero.
    """
    ax = np.zeros((0, 0))
    if not _almost_zero(position_error_gain):
        ax = np.zeros((3, 3))
        ax[2, 2] = position_error_gain
    return EndEffectorLinearConfig(b=np.zeros(3), ax=ax, av=np.eye(3))


def normal_velocity_config(z_velocity: float, z_position: float, position_error_gain: float) -> EndEffectorLinearConfig:
    """Coefficients making a swing foot track a reference height profile.

    The constraint reads ``vz - z_velocity + gain * (z - z_position) = 0``;
    the position term is only added when the gain is non-zero.
    """
    b = np.array([-float(z_velocity)])
    av = np.array([[0.0, 0.0, 1.0]])
    ax = np.zeros((0, 0))
    if not _almost_zero(position_error_gain):
        b[0] -= position_error_gain * z_position
        ax = np.array([[0.0, 0.0, float(position_error_gain)]])
    return EndEffectorLinearConfig(b=b, ax=ax, av=av)


def _check_index(contact_point_index: int) -> int:
    if contact_point_index < 0:
        raise ValueError("contact_point_index must not be negative")
    return int(contact_point_index)


class ZeroVelocityConstraint:
    """Three linear equalities on a foot's velocity, active while the foot is in stance."""

    def __init__(
        self,
        kinematics: EndEffectorKinematics,
        contact_point_index: int,
        contact_flags: ContactFlagsFn,
        config: EndEffectorLinearConfig | None = None,
    ):
        self._index = _check_index(contact_point_index)
        self._contact_flags = contact_flags
        self._linear = EndEffectorLinearConstraint(kinematics, 3, config)

    @property
    def contact_point_index(self) -> int:
        return self._index

    @property
    def num_constraints(self) -> int:
        return 3

    def is_active(self, time: float) -> bool:
        """True while the contact is in stance at ``time``."""
        return bool(self._contact_flags(time)[self._index])

    def value(self, time: float, state, input) -> np.ndarray:
        """Constraint value."""
        return self._linear.value(time, state, input)

    def linear_approximation(self, time: float, state, input) -> LinearApproximation:
        """Value and first derivatives with respect to state and input."""
        return self._linear.linear_approximation(time, state, input)


class NormalVelocityConstraint:
    """One linear equality on a foot's normal velocity, active while the foot swings.

    Its coefficients change with time, so every evaluation takes the
    configuration to use, as built by :func:`normal_velocity_config`.
    """

    def __init__(self, kinematics: EndEffectorKinematics, contact_point_index: int, contact_flags: ContactFlagsFn):
        self._index = _check_index(contact_point_index)
        self._contact_flags = contact_flags
        self._linear = EndEffectorLinearConstraint(kinematics, 1)

    @property
    def contact_point_index(self) -> int:
        return self._index

    @property
    def num_constraints(self) -> int:
        return 1

    def is_active(self, time: float) -> bool:
        """True while the contact is in swing at ``time``."""
        return not bool(self._contact_flags(time)[self._index])

    def value(self, time: float, state, input, config: EndEffectorLinearConfig) -> np.ndarray:
        """Constraint value under ``config``."""
        self._linear.configure(config)
        return self._linear.value(time, state, input)

    def linear_approximation(self, time: float, state, input, config: EndEffectorLinearConfig) -> LinearApproximation:
        """Value and first derivatives under ``config``."""
        self._linear.configure(config)
        return self._linear.linear_approximation(time, state, input)