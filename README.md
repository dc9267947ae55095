# quadwbc

Whole-body control building blocks for legged robots, built on NumPy.

The package describes control problems as tasks made of linear equality rows
`a x = b` and inequality rows `d x <= f` over a shared vector of decision
variables. For a robot with `n` generalized coordinates, `k` three-degree-of-freedom
contacts and `m` actuated joints, that vector is
`[generalized accelerations, contact forces, joint torques]`, of length `n + 3k + m`.
It also provides the per-foot constraints of a legged-robot optimal control
problem, each with its value and derivatives.

## What is inside

- `quadwbc.task`: `Task`, the equality/inequality block. Tasks stack with `+`
  (rows of the second task go below those of the first) and scale with `*`.
  `Task.empty(n)` gives a task with no rows over `n` variables.
  `concatenate_matrices` and `concatenate_vectors` do the stacking.
- `quadwbc.wbc_tasks`: builders for the standard whole-body control tasks, all
  sized by a `WbcDimensions`:
  `floating_base_eom_task`, `torque_limits_task`, `no_contact_motion_task`,
  `friction_cone_task` (zero force on swing feet, a friction pyramid on stance feet),
  `swing_leg_task` (PD tracking of swing-foot motion) and `contact_force_task`.
- `quadwbc.friction_cone`: `FrictionConeConstraint` with `FrictionConeConfig`, the
  smooth cone `mu * (Fz + gripper_force) - sqrt(Fx^2 + Fy^2 + regularization) >= 0`.
  It returns values, a `LinearApproximation` and a `QuadraticApproximation`.
- `quadwbc.zero_force`: `ZeroForceConstraint`, the force of a foot held at zero while it swings.
- `quadwbc.end_effector`: the abstract `EndEffectorKinematics` interface, and
  `EndEffectorLinearConstraint` with `EndEffectorLinearConfig` for
  `ax * position + av * velocity + b`.
- `quadwbc.velocity_constraints`: `ZeroVelocityConstraint` (stance feet),
  `NormalVelocityConstraint` (swing feet), and the config builders
  `zero_velocity_config` and `normal_velocity_config`.
- `quadwbc.swing_schedule`: `SwingConfig` and the helpers `find_swing_indices`,
  `foot_schedule`, `check_indices_valid` and `swing_trajectory_scaling`, which find
  the lift-off and touch-down phases of each swing in a contact sequence.

Constraints that depend on the gait take a `contact_flags` callable: given a time,
it returns one stance flag per foot. Contact forces are read from the head of the
input vector, three entries per contact.

## What it does not do

The package builds tasks and constraints but contains no quadratic-program solver.
It has no hierarchical or weighted whole-body controller that solves the stacked
tasks, and it does not compute robot kinematics or dynamics. Mass matrices,
Jacobians and end-effector kinematics come from the caller; for the latter, subclass
`EndEffectorKinematics`.

## Installing

```
pip install .
```

To run the tests, install the `test` extra:

```
pip install ".[test]"
pytest
```

## Example: building whole-body control tasks

```python
import numpy as np
from quadwbc.wbc_tasks import WbcDimensions, friction_cone_task, torque_limits_task

dims = WbcDimensions(generalized_coordinates_num=18, actuated_dof_num=12, num_three_dof_contacts=4)
flags = [True, False, False, True]

constraints = friction_cone_task(dims, flags, 0.7) + torque_limits_task(dims, [33.5, 33.5, 33.5])
print(constraints.a.shape, constraints.d.shape)   # (6, 42) (40, 42)
```

## Example: friction cone

```python
import numpy as np
from quadwbc.friction_cone import FrictionConeConfig, FrictionConeConstraint

cone = FrictionConeConstraint(FrictionConeConfig(), 0, lambda t: [True] * 4)
u = np.zeros(24)
u[2] = 100.0                       # normal force on contact 0
print(cone.value(0.0, np.zeros(24), u))   # [65.]
```

## Example: swing phases

```python
from quadwbc.swing_schedule import foot_schedule, swing_trajectory_scaling

starts, finals = foot_schedule([True, False, False, True])
print(starts, finals)                       # [0, 0, 0, 0] [0, 2, 2, 0]
print(swing_trajectory_scaling(0.0, 0.3, 0.15))   # 1.0
```