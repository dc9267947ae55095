"""Prioritised linear task: equalities ``a x = b`` and inequalities ``d x <= f``."""

from __future__ import annotations

import numbers
from dataclasses import dataclass, field

import numpy as np


def _as_matrix(value, name: str) -> np.ndarray:
    matrix = np.asarray(value, dtype=float)
    if matrix.ndim == 2:
        return matrix
    if matrix.size == 0:
        return np.zeros((0, 0))
    raise ValueError(f"{name} must be a two-dimensional matrix, got shape {matrix.shape}")


def _as_vector(value) -> np.ndarray:
    return np.asarray(value, dtype=float).reshape(-1)


def concatenate_matrices(m1, m2) -> np.ndarray:
    """Stack two matrices vertically; a matrix without columns yields the other one."""
    m1 = _as_matrix(m1, "m1")
    m2 = _as_matrix(m2, "m2")
    if m1.shape[1] == 0:
        return m2.copy()
    if m2.shape[1] == 0:
        return m1.copy()
    if m1.shape[1] != m2.shape[1]:
        raise ValueError(f"cannot stack matrices with {m1.shape[1]} and {m2.shape[1]} columns")
    return np.vstack([m1, m2])


def concatenate_vectors(v1, v2) -> np.ndarray:
    """Join two vectors end to end."""
    return np.concatenate([_as_vector(v1), _as_vector(v2)])


@dataclass(eq=False)
class Task:
    """Equality part ``a x = b`` and inequality part ``d x <= f`` of one task."""

    a: np.ndarray = field(default_factory=lambda: np.zeros((0, 0)))
    b: np.ndarray = field(default_factory=lambda: np.zeros(0))
    d: np.ndarray = field(default_factory=lambda: np.zeros((0, 0)))
    f: np.ndarray = field(default_factory=lambda: np.zeros(0))

    def __post_init__(self) -> None:
        self.a = _as_matrix(self.a, "a")
        self.b = _as_vector(self.b)
        self.d = _as_matrix(self.d, "d")
        self.f = _as_vector(self.f)
        if self.a.shape[0] != self.b.size:
            raise ValueError(f"a has {self.a.shape[0]} rows but b has {self.b.size} entries")
        if self.d.shape[0] != self.f.size:
            raise ValueError(f"d has {self.d.shape[0]} rows but f has {self.f.size} entries")

    @classmethod
    def empty(cls, num_decision_vars: int) -> "Task":
        """A task with no rows over ``num_decision_vars`` decision variables."""
        return cls(
            np.zeros((0, num_decision_vars)),
            np.zeros(0),
            np.zeros((0, num_decision_vars)),
            np.zeros(0),
        )

    def __add__(self, other: "Task") -> "Task":
        if not isinstance(other, Task):
            return NotImplemented
        return Task(
            concatenate_matrices(self.a, other.a),
            concatenate_vectors(self.b, other.b),
            concatenate_matrices(self.d, other.d),
            concatenate_vectors(self.f, other.f),
        )

    def __mul__(self, scale: float) -> "Task":
        if not isinstance(scale, numbers.Real):
            return NotImplemented
        return Task(
            self.a * scale if self.a.shape[1] > 0 else self.a.copy(),
            self.b * scale,
            self.d * scale if self.d.shape[1] > 0 else self.d.copy(),
            self.f * scale,
        )

    __rmul__ = __mul__