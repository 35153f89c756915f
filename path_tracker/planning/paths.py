"""
Paths - Ordered waypoint sequences and the reference figure-eight

A Path is immutable once built. Waypoints are plain poses and are only
identified by their index in the path.
"""

import math
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple, Union

import numpy as np

from ..geometry import Pose

Waypoint = Pose

DEFAULT_FIGURE_EIGHT_A = 12.0
DEFAULT_FIGURE_EIGHT_B = 10.0
DEFAULT_RESOLUTION = math.pi / 1000.0


class Path:

    def __init__(self, waypoints: Iterable[Waypoint] = (), frame_id: str = 'world'):
        self._waypoints: Tuple[Waypoint, ...] = tuple(waypoints)
        self.frame_id = frame_id
        self._xy: Optional[np.ndarray] = None

    @property
    def waypoints(self) -> Tuple[Waypoint, ...]:
        return self._waypoints

    def is_empty(self) -> bool:
        return len(self._waypoints) == 0

    def xy(self) -> np.ndarray:
        """Waypoint positions as an (N, 2) array."""
        if self._xy is None:
            self._xy = np.array([(wp.x, wp.y) for wp in self._waypoints],
                                dtype=float).reshape(-1, 2)
        return self._xy

    def __len__(self) -> int:
        return len(self._waypoints)

    def __iter__(self) -> Iterator[Waypoint]:
        return iter(self._waypoints)

    def __getitem__(self, index: Union[int, slice]) -> Union[Waypoint, 'Path']:
        if isinstance(index, slice):
            return Path(self._waypoints[index], self.frame_id)
        return self._waypoints[index]

    def __repr__(self) -> str:
        return f'Path(frame_id={self.frame_id!r}, waypoints={len(self)})'


def create_path(points: Sequence[Tuple[float, float]], frame_id: str = 'world') -> Path:
    """
    Create a Path from (x, y) coordinates.

    Each waypoint faces the next one; the last waypoint keeps the
    heading of the segment leading into it.
    """
    coords = np.asarray(points, dtype=float).reshape(-1, 2)
    n = len(coords)
    if n == 0:
        return Path(frame_id=frame_id)

    if n == 1:
        yaws = np.zeros(1)
    else:
        deltas = np.diff(coords, axis=0)
        yaws = np.arctan2(deltas[:, 1], deltas[:, 0])
        yaws = np.append(yaws, yaws[-1])

    waypoints: List[Waypoint] = [
        Pose(float(x), float(y), 0.0, float(yaw))
        for (x, y), yaw in zip(coords, yaws)
    ]
    return Path(waypoints, frame_id)


def create_line_path(length: float = 4.0, spacing: float = 1.0,
                     frame_id: str = 'world') -> Path:
    """Create a straight line path along X axis."""
    count = int(round(length / spacing)) + 1
    return create_path([(i * spacing, 0.0) for i in range(count)], frame_id)


def generate_global_path(a: float = DEFAULT_FIGURE_EIGHT_A,
                         b: float = DEFAULT_FIGURE_EIGHT_B,
                         resolution: float = DEFAULT_RESOLUTION,
                         frame_id: str = 'world') -> Path:
    """
    Sample the figure-eight x = a*sin(t), y = b*sin(t)*cos(t) over one period.

    Args:
        a: Half width of the figure-eight along X (m)
        b: Lobe height scale along Y (m)
        resolution: Parameter step in radians
        frame_id: Frame the waypoints are expressed in
    """
    if not (math.isfinite(a) and math.isfinite(b)):
        raise ValueError(f'figure-eight scales must be finite, got a={a}, b={b}')
    if not (math.isfinite(resolution) and resolution > 0.0):
        raise ValueError(f'resolution must be a finite positive number, got {resolution}')

    t = np.arange(0.0, 2.0 * math.pi, resolution)
    x = a * np.sin(t)
    y = b * np.sin(t) * np.cos(t)
    return create_path(np.column_stack((x, y)), frame_id)
