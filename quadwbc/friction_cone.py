"""Friction cone constraint on a single 3-D contact force.

The constraint reads ``h(t, x, u) >= 0`` with

    h = mu * (Fz + gripper_force) - sqrt(Fx^2 + Fy^2 + regularization)

where ``F`` is the contact force expressed in the terrain frame. The contact
forces sit at the head of the input vector, three entries per contact.

The gripper force shifts the cone origin down along z, so tangential forces
are possible without a normal force. The regularization keeps the gradient
and Hessian finite at zero tangential force; with ``Fx = Fy = 0`` the
zero-crossing lies at ``Fz = sqrt(regularization) / mu``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Sequence

import numpy as np

ContactFlagsFn = Callable[[float], Sequence[bool]]


@dataclass(frozen=True)
class FrictionConeConfig:
    """Friction model settings."""

    friction_coefficient: float = 0.7
    regularization: float = 25.0
    gripper_force: float = 0.0
    hessian_diagonal_shift: float = 1e-6

    def __post_init__(self) -> None:
        if not self.friction_coefficient > 0.0:
            raise ValueError("friction_coefficient must be positive")
        if not self.regularization > 0.0:
            raise ValueError("regularization must be positive")
        if not self.hessian_diagonal_shift >= 0.0:
            raise ValueError("hessian_diagonal_shift must not be negative")


@dataclass
class LinearApproximation:
    """First-order expansion ``f + dfdx dx + dfdu du`` of a vector function."""

    f: np.ndarray
    dfdx: np.ndarray
    dfdu: np.ndarray


@dataclass
class QuadraticApproximation:
    """Second-order expansion of a vector function; one Hessian per output row."""

    f: np.ndarray
    dfdx: np.ndarray
    dfdu: np.ndarray
    dfdxx: list[np.ndarray] = field(default_factory=list)
    dfduu: list[np.ndarray] = field(default_factory=list)
    dfdux: list[np.ndarray] = field(default_factory=list)


@dataclass(frozen=True)
class _ConeDerivatives:
    gradient: np.ndarray  # derivative w.r.t. the world-frame force
    hessian: np.ndarray  # second derivative w.r.t. the world-frame force


class FrictionConeConstraint:
    """Friction cone on one contact, active while that contact is in stance."""

    def __init__(self, config: FrictionConeConfig, contact_point_index: int, contact_flags: ContactFlagsFn):
        if contact_point_index < 0:
            raise ValueError("contact_point_index must not be negative")
        self._config = config
        self._index = int(contact_point_index)
        self._contact_flags = contact_flags
        # rotation from world to terrain frame
        self._terrain_rotation = np.eye(3)

    @property
    def config(self) -> FrictionConeConfig:
        return self._config

    @property
    def contact_point_index(self) -> int:
        return self._index

    @property
    def terrain_rotation(self) -> np.ndarray:
        return self._terrain_rotation.copy()

    def is_active(self, time: float) -> bool:
        """True while the contact is in stance at ``time``."""
        return bool(self._contact_flags(time)[self._index])

    def set_surface_normal_in_world(self, surface_normal) -> None:
        """Reset the terrain frame; a tilted surface normal is refused."""
        self._terrain_rotation = np.eye(3)
        raise RuntimeError(
            "[FrictionConeConstraint] surface normal estimation is unsupported; "
            "the cone stays aligned with the world z axis"
        )

    def _contact_force(self, input) -> np.ndarray:
        u = np.asarray(input, dtype=float).reshape(-1)
        start = 3 * self._index
        if u.size < start + 3:
            raise ValueError(f"input has {u.size} entries, contact {self._index} needs at least {start + 3}")
        return u[start : start + 3]

    def _cone_value(self, local_force: np.ndarray) -> np.ndarray:
        cfg = self._config
        fx, fy, fz = local_force
        tangent_norm = np.sqrt(fx * fx + fy * fy + cfg.regularization)
        return np.array([cfg.friction_coefficient * (fz + cfg.gripper_force) - tangent_norm])

    def _cone_derivatives(self, local_force: np.ndarray) -> _ConeDerivatives:
        cfg = self._config
        fx, fy, _ = local_force
        fx_sq, fy_sq = fx * fx, fy * fy
        tangent_sq = fx_sq + fy_sq + cfg.regularization
        tangent_norm = np.sqrt(tangent_sq)
        tangent_pow32 = tangent_norm * tangent_sq

        local_gradient = np.array([-fx / tangent_norm, -fy / tangent_norm, cfg.friction_coefficient])
        local_hessian = np.zeros((3, 3))
        local_hessian[0, 0] = -(fy_sq + cfg.regularization) / tangent_pow32
        local_hessian[0, 1] = fx * fy / tangent_pow32
        local_hessian[1, 0] = local_hessian[0, 1]
        local_hessian[1, 1] = -(fx_sq + cfg.regularization) / tangent_pow32

        rotation = self._terrain_rotation
        return _ConeDerivatives(
            gradient=local_gradient @ rotation,
            hessian=rotation.T @ local_hessian @ rotation,
        )

    def _input_derivative(self, input_dim: int, derivatives: _ConeDerivatives) -> np.ndarray:
        dhdu = np.zeros((1, input_dim))
        start = 3 * self._index
        dhdu[0, start : start + 3] = derivatives.gradient
        return dhdu

    def _input_second_derivative(self, input_dim: int, derivatives: _ConeDerivatives) -> np.ndarray:
        ddhdudu = np.zeros((input_dim, input_dim))
        start = 3 * self._index
        ddhdudu[start : start + 3, start : start + 3] = derivatives.hessian
        ddhdudu -= self._config.hessian_diagonal_shift * np.eye(input_dim)
        return ddhdudu

    def _state_second_derivative(self, state_dim: int) -> np.ndarray:
        return -self._config.hessian_diagonal_shift * np.eye(state_dim)

    def value(self, time: float, state, input) -> np.ndarray:
        """Constraint value as a one-element vector."""
        local_force = self._terrain_rotation @ self._contact_force(input)
        return self._cone_value(local_force)

    def _first_order(self, state, input):
        x = np.asarray(state, dtype=float).reshape(-1)
        u = np.asarray(input, dtype=float).reshape(-1)
        local_force = self._terrain_rotation @ self._contact_force(u)
        derivatives = self._cone_derivatives(local_force)
        f = self._cone_value(local_force)
        dfdx = np.zeros((1, x.size))
        dfdu = self._input_derivative(u.size, derivatives)
        return x, u, derivatives, f, dfdx, dfdu

    def linear_approximation(self, time: float, state, input) -> LinearApproximation:
        """Value and first derivatives with respect to state and input."""
        _, _, _, f, dfdx, dfdu = self._first_order(state, input)
        return LinearApproximation(f=f, dfdx=dfdx, dfdu=dfdu)

    def quadratic_approximation(self, time: float, state, input) -> QuadraticApproximation:
        """Value, first and (diagonally shifted) second derivatives."""
        x, u, derivatives, f, dfdx, dfdu = self._first_order(state, input)
        return QuadraticApproximation(
            f=f,
            dfdx=dfdx,
            dfdu=dfdu,
            dfdxx=[self._state_second_derivative(x.size)],
            dfduu=[self._input_second_derivative(u.size, derivatives)],
            dfdux=[np.zeros((u.size, x.size))],
        )