"""
Waypoint search and local path windowing

Tracks progress of the robot along a global path and cuts the local
path window the tracker takes its goal point from.
"""

import math
from dataclasses import dataclass
from typing import NamedTuple, Optional, Tuple

import numpy as np

from ..errors import EmptyPathError, PathTooShortError
from ..geometry import Pose, distance, normalize_angle, require_finite_pose
from .paths import (
    DEFAULT_FIGURE_EIGHT_A,
    DEFAULT_FIGURE_EIGHT_B,
    DEFAULT_RESOLUTION,
    Path,
    Waypoint,
    generate_global_path,
)

GOAL_LOOKAHEAD_INDEX = 11


class PoseError(NamedTuple):
    position_error: float
    heading_error: float


@dataclass(frozen=True)
class LocalPathWindow:
    start: int
    end: int  # inclusive
    next_index: int
    path: Path


def closest_waypoint(pose: Pose, path: Path, search_start: int = 0,
                     search_window: Optional[int] = None) -> int:
    """
    Index of the waypoint nearest to the robot, searching forward only.

    Args:
        pose: Robot pose
        path: Non-empty path to search
        search_start: First index considered, clamped into the path
        search_window: Number of waypoints examined (None for all remaining)
    """
    if path.is_empty():
        raise EmptyPathError('cannot search for a waypoint on an empty path')
    require_finite_pose(pose, 'robot pose')

    start = min(max(search_start, 0), len(path) - 1)
    stop = len(path)
    if search_window is not None:
        stop = min(stop, start + max(search_window, 1))

    xy = path.xy()[start:stop]
    dists = np.hypot(xy[:, 0] - pose.x, xy[:, 1] - pose.y)
    return start + int(np.argmin(dists))


def is_ahead(pose: Pose, waypoint: Waypoint) -> bool:
    """True when the waypoint bearing is within +-90 deg of the robot heading."""
    dx = waypoint.x - pose.x
    dy = waypoint.y - pose.y
    if math.hypot(dx, dy) < 1e-9:
        return True
    bearing = math.atan2(dy, dx)
    return abs(normalize_angle(bearing - pose.yaw)) <= math.pi / 2


def next_waypoint(pose: Pose, path: Path, search_start: int = 0,
                  search_window: Optional[int] = None) -> int:
    """First waypoint ahead of the robot, scanning at most `search_window` past the closest."""
    closest_id = closest_waypoint(pose, path, search_start, search_window)
    stop = len(path)
    if search_window is not None:
        stop = min(stop, closest_id + max(search_window, 1))
    for i in range(closest_id, stop):
        if is_ahead(pose, path[i]):
            return i
    return closest_id


def local_path_window(path_length: int, index: int,
                      count_before: int, count_after: int) -> Tuple[int, int]:
    """Inclusive [start, end] window around `index`, clamped to the path."""
    if count_before < 0 or count_after < 0:
        raise ValueError(
            f'window counts must be non-negative, got {count_before}, {count_after}')
    if path_length <= 0:
        raise EmptyPathError('cannot window an empty path')
    index = min(max(index, 0), path_length - 1)
    start = max(0, index - count_before)
    end = min(path_length - 1, index + count_after)
    return start, end


def calculate_pose_error(pose_robot: Pose, pose_goal: Pose) -> PoseError:
    """Euclidean position error and heading error in (-pi, pi]."""
    return PoseError(
        distance(pose_robot, pose_goal),
        normalize_angle(pose_goal.yaw - pose_robot.yaw),
    )


def relative_pose_error(pose_robot: Pose, pose_goal: Pose) -> PoseError:
    """Goal seen from the robot: signed lateral offset and heading error."""
    goal_in_robot = pose_goal.relative_to(pose_robot)
    return PoseError(goal_in_robot.y, normalize_angle(goal_in_robot.yaw))


def select_goal(local_path: Path, goal_lookahead_index: int = GOAL_LOOKAHEAD_INDEX) -> Waypoint:
    if goal_lookahead_index < 0:
        raise ValueError(f'goal_lookahead_index must be non-negative, got {goal_lookahead_index}')
    if len(local_path) <= goal_lookahead_index:
        raise PathTooShortError(
            f'local path has {len(local_path)} waypoints, '
            f'need more than {goal_lookahead_index} to select a goal')
    return local_path[goal_lookahead_index]


class WaypointPathManager:
    """
    Owns the global path and derives the local path around the robot.

    Progress along the global path only moves forward, so waypoint
    searches never jump back onto an earlier branch where the path
    crosses itself. With `loop` enabled the progress wraps to the start
    once the robot reaches the end of the path.
    """

    def __init__(self, global_path: Optional[Path] = None,
                 search_window: Optional[int] = None, loop: bool = True):
        self._global_path = global_path if global_path is not None else Path()
        self._local_path = Path(frame_id=self._global_path.frame_id)
        self._search_window = search_window
        self._loop = loop
        self._current_index = 0
        self._lap_count = 0
        self._goal_pose: Optional[Waypoint] = None

    @property
    def global_path(self) -> Path:
        return self._global_path

    @property
    def local_path(self) -> Path:
        return self._local_path

    @property
    def current_index(self) -> int:
        return self._current_index

    @property
    def lap_count(self) -> int:
        return self._lap_count

    @property
    def goal_pose(self) -> Optional[Waypoint]:
        return self._goal_pose

    def set_global_path(self, path: Path):
        self._global_path = path
        self._local_path = Path(frame_id=path.frame_id)
        self._current_index = 0
        self._lap_count = 0
        self._goal_pose = None

    def generate_global_path(self, a: float = DEFAULT_FIGURE_EIGHT_A,
                             b: float = DEFAULT_FIGURE_EIGHT_B,
                             resolution: float = DEFAULT_RESOLUTION,
                             frame_id: str = 'world') -> Path:
        path = generate_global_path(a, b, resolution, frame_id)
        self.set_global_path(path)
        return path

    def update_local_path(self, robot_pose: Pose, count_before: int,
                          count_after: int) -> LocalPathWindow:
        path = self._global_path
        next_id = next_waypoint(robot_pose, path, self._current_index, self._search_window)
        start, end = local_path_window(len(path), next_id, count_before, count_after)

        self._local_path = path[start:end + 1]
        self._goal_pose = path[next_id]

        if self._loop and next_id >= len(path) - 2:
            if self._current_index > 0:
                self._lap_count += 1
            self._current_index = 0
        else:
            self._current_index = max(self._current_index, next_id - 1)

        return LocalPathWindow(start, end, next_id, self._local_path)

    def calculate_pose_error(self, robot_pose: Pose) -> Optional[PoseError]:
        """Error of the robot against the current goal, None before the first update."""
        if self._goal_pose is None:
            return None
        return calculate_pose_error(robot_pose, self._goal_pose)
