"""Linear constraint on an end-effector position and linear velocity.

    g(xee, vee) = Ax * xee + Av * vee + b

Leave ``av`` empty for a constraint on the position only, and ``ax`` empty
for one on the velocity only.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Sequence

import numpy as np

from quadwbc.friction_cone import LinearApproximation


class EndEffectorKinematics(ABC):
    """Kinematic interface to one or more end-effectors."""

    @property
    @abstractmethod
    def ids(self) -> Sequence[str]:
        """Names of the end-effectors."""

    @abstractmethod
    def position(self, state) -> list[np.ndarray]:
        """Positions of the end-effectors, one 3-vector each."""

    @abstractmethod
    def velocity(self, state, input) -> list[np.ndarray]:
        """Linear velocities of the end-effectors, one 3-vector each."""

    @abstractmethod
    def position_linear_approximation(self, state) -> list[LinearApproximation]:
        """First-order expansion of each position."""

    @abstractmethod
    def velocity_linear_approximation(self, state, input) -> list[LinearApproximation]:
        """First-order expansion of each velocity."""


def _matrix(value) -> np.ndarray:
    m = np.asarray(value, dtype=float)
    if m.size == 0:
        return np.zeros((0, 0))
    if m.ndim != 2:
        raise ValueError(f"expected a two-dimensional matrix, got shape {m.shape}")
    return m


@dataclass
class EndEffectorLinearConfig:
    """Coefficients of ``Ax * xee + Av * vee + b``."""

    b: np.ndarray = field(default_factory=lambda: np.zeros(0))
    ax: np.ndarray = field(default_factory=lambda: np.zeros((0, 0)))
    av: np.ndarray = field(default_factory=lambda: np.zeros((0, 0)))

    def __post_init__(self) -> None:
        self.b = np.asarray(self.b, dtype=float).reshape(-1)
        self.ax = _matrix(self.ax)
        self.av = _matrix(self.av)


class EndEffectorLinearConstraint:
    """Linear constraint on a single end-effector's position and velocity."""

    def __init__(
        self,
        kinematics: EndEffectorKinematics,
        num_constraints: int,
        config: EndEffectorLinearConfig | None = None,
    ):
        if len(kinematics.ids) != 1:
            raise RuntimeError("[EndEffectorLinearConstraint] this class only accepts a single end-effector!")
        self._kinematics = kinematics
        self._num_constraints = int(num_constraints)
        self._config = config if config is not None else EndEffectorLinearConfig()

    @property
    def kinematics(self) -> EndEffectorKinematics:
        return self._kinematics

    @property
    def num_constraints(self) -> int:
        return self._num_constraints

    @property
    def config(self) -> EndEffectorLinearConfig:
        return self._config

    def configure(self, config: EndEffectorLinearConfig) -> None:
        """Replace the constraint coefficients after checking their shapes."""
        n = self._num_constraints
        if config.b.size != n:
            raise ValueError(f"b has {config.b.size} entries, expected {n}")
        if config.ax.size == 0 and config.av.size == 0:
            raise ValueError("at least one of ax and av must be set")
        for name, m in (("ax", config.ax), ("av", config.av)):
            if m.size > 0 and m.shape != (n, 3):
                raise ValueError(f"{name} has shape {m.shape}, expected {(n, 3)}")
        self._config = config

    def value(self, time: float, state, input) -> np.ndarray:
        """Constraint value ``Ax * xee + Av * vee + b``."""
        cfg = self._config
        f = cfg.b.copy()
        if cfg.ax.size > 0:
            f = f + cfg.ax @ np.asarray(self._kinematics.position(state)[0], dtype=float)
        if cfg.av.size > 0:
            f = f + cfg.av @ np.asarray(self._kinematics.velocity(state, input)[0], dtype=float)
        return f

    def linear_approximation(self, time: float, state, input) -> LinearApproximation:
        """Value and first derivatives with respect to state and input."""
        cfg = self._config
        nx = np.asarray(state, dtype=float).reshape(-1).size
        nu = np.asarray(input, dtype=float).reshape(-1).size
        f = cfg.b.copy()
        dfdx = np.zeros((self._num_constraints, nx))
        dfdu = np.zeros((self._num_constraints, nu))

        if cfg.ax.size > 0:
            pos = self._kinematics.position_linear_approximation(state)[0]
            f = f + cfg.ax @ pos.f
            dfdx = dfdx + cfg.ax @ pos.dfdx

        if cfg.av.size > 0:
            vel = self._kinematics.velocity_linear_approximation(state, input)[0]
            f = f + cfg.av @ vel.f
            dfdx = dfdx + cfg.av @ vel.dfdx
            dfdu = dfdu + cfg.av @ vel.dfdu

        return LinearApproximation(f=f, dfdx=dfdx, dfdu=dfdu)