"""
Pure pursuit control law and its runtime-tunable parameters.

Modules:
    pure_pursuit - Throttle/steering computation
    parameters   - Immutable parameter snapshots with atomic swap
"""

from .parameters import PARAMETER_ALIASES, ControllerParameters, ParameterStore
from .pure_pursuit import (
    ControlCommand,
    PurePursuitController,
    SteeringDiagnostics,
    clamp,
    compute_control_outputs,
    compute_distance,
    compute_lookahead_distance,
    compute_steering,
    compute_throttle,
    fold_alpha,
)

__all__ = [
    'PARAMETER_ALIASES',
    'ControllerParameters',
    'ParameterStore',
    'ControlCommand',
    'PurePursuitController',
    'SteeringDiagnostics',
    'clamp',
    'compute_control_outputs',
    'compute_distance',
    'compute_lookahead_distance',
    'compute_steering',
    'compute_throttle',
    'fold_alpha',
]
