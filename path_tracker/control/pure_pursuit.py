import math
from dataclasses import dataclass
from typing import Optional, Tuple, Union

from ..geometry import (
    Odometry,
    Pose,
    distance,
    require_finite_odometry,
    require_finite_pose,
)
from .parameters import ControllerParameters, ParameterStore

MAX_STEERING_ANGLE = 0.5
MIN_LOOKAHEAD_DISTANCE = 1.0


@dataclass(frozen=True)
class ControlCommand:
    throttle: float = 0.0
    steering: float = 0.0


@dataclass(frozen=True)
class SteeringDiagnostics:
    yaw_robot: float
    yaw_goal: float
    heading_error: float  # raw yaw difference, not fed into steering
    cross_track_error: float
    alpha: float
    lookahead_distance: float
    steering: float


def compute_distance(p1: Pose, p2: Pose) -> float:
    return distance(p1, p2)


def compute_throttle(distance_to_goal: float, params: ControllerParameters) -> float:
    return min(params.max_throttle, distance_to_goal * params.throttle_gain)


def fold_alpha(alpha: float) -> float:
    """
    Fold alpha by a single half turn into [-pi/2, pi/2].

    A goal behind the robot is treated like one in front, so a goal
    straight behind gives zero bias.
    """
    if alpha > math.pi / 2:
        alpha -= math.pi
    elif alpha < -math.pi / 2:
        alpha += math.pi
    return alpha


def compute_lookahead_distance(linear_velocity: float, params: ControllerParameters) -> float:
    return max(MIN_LOOKAHEAD_DISTANCE, linear_velocity * params.lookahead_velocity_factor)


def clamp(value: float, min_val: float, max_val: float) -> float:
    return max(min_val, min(max_val, value))


def compute_steering(odom: Odometry, goal: Pose,
                     params: ControllerParameters) -> Tuple[float, SteeringDiagnostics]:
    robot = odom.pose
    yaw_robot = robot.yaw
    yaw_goal = goal.yaw
    heading_error = yaw_goal - yaw_robot

    dx = goal.x - robot.x
    dy = goal.y - robot.y
    # Straight-line distance, not the lateral offset to the path.
    cross_track_error = math.hypot(dx, dy)

    alpha = fold_alpha(math.atan2(dy, dx) - yaw_robot)

    lookahead = compute_lookahead_distance(odom.twist.linear, params)

    steering = math.atan((2.0 * params.robot_length * cross_track_error) / lookahead) + alpha
    steering = clamp(steering, -MAX_STEERING_ANGLE, MAX_STEERING_ANGLE)

    diagnostics = SteeringDiagnostics(
        yaw_robot=yaw_robot,
        yaw_goal=yaw_goal,
        heading_error=heading_error,
        cross_track_error=cross_track_error,
        alpha=alpha,
        lookahead_distance=lookahead,
        steering=steering,
    )
    return steering, diagnostics


def compute_control_outputs(odom: Odometry, goal: Pose,
                            params: ControllerParameters) -> Tuple[ControlCommand, SteeringDiagnostics]:
    require_finite_odometry(odom, 'robot odometry')
    require_finite_pose(goal, 'goal pose')

    distance_to_goal = compute_distance(odom.pose, goal)
    throttle = compute_throttle(distance_to_goal, params)
    steering, diagnostics = compute_steering(odom, goal, params)

    return ControlCommand(throttle, steering), diagnostics


class PurePursuitController:
    """
    Stateless pure pursuit law.

    Each call reads the parameter snapshot exactly once, so an update
    that lands between ticks is applied whole on the next tick.
    """

    def __init__(self, parameters: Union[ParameterStore, ControllerParameters, None] = None):
        if isinstance(parameters, ParameterStore):
            self._store = parameters
        else:
            self._store = ParameterStore(parameters)

    @property
    def parameters(self) -> ControllerParameters:
        return self._store.snapshot()

    def compute(self, odom: Odometry, goal: Pose,
                params: Optional[ControllerParameters] = None) -> Tuple[ControlCommand, SteeringDiagnostics]:
        if params is None:
            params = self._store.snapshot()
        return compute_control_outputs(odom, goal, params)
