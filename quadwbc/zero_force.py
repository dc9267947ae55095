"""Zero contact force on a foot while it swings."""

from __future__ import annotations

from typing import Callable, Sequence

import numpy as np

from quadwbc.friction_cone import LinearApproximation

ContactFlagsFn = Callable[[float], Sequence[bool]]


class ZeroForceConstraint:
    """Equality constraint ``F_i = 0`` on the 3-D force of one contact.

    The contact forces sit at the head of the input vector, three entries per
    contact. The constraint is active while the contact is not in stance.
    """

    def __init__(self, contact_point_index: int, contact_flags: ContactFlagsFn):
        if contact_point_index < 0:
            raise ValueError("contact_point_index must not be negative")
        self._index = int(contact_point_index)
        self._contact_flags = contact_flags

    @property
    def contact_point_index(self) -> int:
        return self._index

    @property
    def num_constraints(self) -> int:
        return 3

    def is_active(self, time: float) -> bool:
        """True while the contact is in swing at ``time``."""
        return not bool(self._contact_flags(time)[self._index])

    def _force(self, u: np.ndarray) -> np.ndarray:
        start = 3 * self._index
        if u.size < start + 3:
            raise ValueError(f"input has {u.size} entries, contact {self._index} needs at least {start + 3}")
        return u[start : start + 3].copy()

    def value(self, time: float, state, input) -> np.ndarray:
        """The contact force of this foot."""
        return self._force(np.asarray(input, dtype=float).reshape(-1))

    def linear_approximation(self, time: float, state, input) -> LinearApproximation:
        """Value and its (constant) derivatives with respect to state and input."""
        x = np.asarray(state, dtype=float).reshape(-1)
        u = np.asarray(input, dtype=float).reshape(-1)
        f = self._force(u)
        dfdx = np.zeros((3, x.size))
        dfdu = np.zeros((3, u.size))
        start = 3 * self._index
        dfdu[:, start : start + 3] = np.eye(3)
        return LinearApproximation(f=f, dfdx=dfdx, dfdu=dfdu)