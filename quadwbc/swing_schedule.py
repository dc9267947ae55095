"""Swing-phase bookkeeping for the feet of a legged robot.

A mode sequence is turned, per foot, into a sequence of contact flags, one per
phase. For every swing phase the helpers here find the phase index whose event
time is the lift-off (``start``) and the one whose event time is the
touch-down (``final``).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SwingConfig:
    """Settings of the swing-foot height trajectory.

    Swing phases shorter than ``swing_time_scale`` are scaled down in height
    and velocity.
    """

    liftoff_velocity: float = 0.0
    touch_down_velocity: float = 0.0
    swing_height: float = 0.1
    swing_time_scale: float = 0.15


def find_swing_indices(index: int, contact_flags: Sequence[bool]) -> tuple[int, int]:
    """Lift-off and touch-down phase indices of the swing containing phase ``index``.

    A stance phase gives ``(0, 0)``. The lift-off index is the last stance
    phase before ``index``, or -1 if there is none. The touch-down index is the
    phase just before the next stance phase, or the last phase if the swing
    never ends.
    """
    flags = [bool(flag) for flag in contact_flags]
    if not 0 <= index < len(flags):
        raise IndexError(f"phase index {index} is out of range for {len(flags)} phases")
    if flags[index]:
        return 0, 0

    start = next((i for i in range(index - 1, -1, -1) if flags[i]), -1)
    final = next((i - 1 for i in range(index + 1, len(flags)) if flags[i]), len(flags) - 1)
    return start, final


def foot_schedule(contact_flags: Sequence[bool]) -> tuple[list[int], list[int]]:
    """Per-phase lift-off and touch-down indices for one foot; stance phases hold 0."""
    flags = [bool(flag) for flag in contact_flags]
    pairs = [find_swing_indices(i, flags) for i in range(len(flags))]
    starts = [start for start, _ in pairs]
    finals = [final for _, final in pairs]
    return starts, finals


def _report(index: int, mode_sequence: Sequence[int]) -> None:
    num_subsystems = len(mode_sequence)
    logger.error("Subsystem: %d out of %d", index, num_subsystems - 1)
    logger.error("%s", ",  ".join(f"[{i}]: {mode}" for i, mode in enumerate(mode_sequence)))


def check_indices_valid(leg: int, index: int, start_index: int, final_index: int, mode_sequence: Sequence[int]) -> None:
    """Raise ``RuntimeError`` if a swing has no defined lift-off or touch-down time."""
    num_subsystems = len(mode_sequence)
    if start_index < 0:
        _report(index, mode_sequence)
        raise RuntimeError(f"The time of take-off for the first swing of the EE with ID {leg} is not defined.")
    if final_index >= num_subsystems - 1:
        _report(index, mode_sequence)
        raise RuntimeError(f"The time of touch-down for the last swing of the EE with ID {leg} is not defined.")


def swing_trajectory_scaling(start_time: float, final_time: float, swing_time_scale: float) -> float:
    """Scale factor for a swing lasting ``final_time - start_time``, capped at 1."""
    return min(1.0, (final_time - start_time) / swing_time_scale)