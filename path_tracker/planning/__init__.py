"""
Global path generation and local path windowing.

Modules:
    paths     - Path container, figure-eight reference path
    waypoints - Closest/next waypoint search, WaypointPathManager
"""

from .paths import (
    Path,
    Waypoint,
    create_path,
    create_line_path,
    generate_global_path,
)
from .waypoints import (
    GOAL_LOOKAHEAD_INDEX,
    LocalPathWindow,
    PoseError,
    WaypointPathManager,
    calculate_pose_error,
    closest_waypoint,
    local_path_window,
    next_waypoint,
    relative_pose_error,
    select_goal,
)

__all__ = [
    'Path',
    'Waypoint',
    'create_path',
    'create_line_path',
    'generate_global_path',
    'GOAL_LOOKAHEAD_INDEX',
    'LocalPathWindow',
    'PoseError',
    'WaypointPathManager',
    'calculate_pose_error',
    'closest_waypoint',
    'local_path_window',
    'next_waypoint',
    'relative_pose_error',
    'select_goal',
]
