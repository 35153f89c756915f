import math
from dataclasses import dataclass, field
from typing import Tuple

from .errors import FrameMismatchError, NonFinitePoseError


@dataclass(frozen=True)
class Pose:
    """Planar pose with height. Units: meters, radians."""
    x: float
    y: float
    z: float = 0.0
    yaw: float = 0.0

    @classmethod
    def from_quaternion(cls, x: float, y: float, z: float,
                        qx: float, qy: float, qz: float, qw: float) -> 'Pose':
        return cls(x, y, z, quaternion_to_yaw(qx, qy, qz, qw))

    def quaternion(self) -> Tuple[float, float, float, float]:
        return yaw_to_quaternion(self.yaw)

    def is_finite(self) -> bool:
        return all(math.isfinite(v) for v in (self.x, self.y, self.z, self.yaw))

    def compose(self, other: 'Pose') -> 'Pose':
        """Express `other`, given in this pose's frame, in the parent frame."""
        cos_yaw = math.cos(self.yaw)
        sin_yaw = math.sin(self.yaw)
        return Pose(
            self.x + cos_yaw * other.x - sin_yaw * other.y,
            self.y + sin_yaw * other.x + cos_yaw * other.y,
            self.z + other.z,
            normalize_angle(self.yaw + other.yaw),
        )

    def inverse(self) -> 'Pose':
        cos_yaw = math.cos(self.yaw)
        sin_yaw = math.sin(self.yaw)
        return Pose(
            -(cos_yaw * self.x + sin_yaw * self.y),
            -(-sin_yaw * self.x + cos_yaw * self.y),
            -self.z,
            normalize_angle(-self.yaw),
        )

    def relative_to(self, origin: 'Pose') -> 'Pose':
        return origin.inverse().compose(self)


@dataclass(frozen=True)
class VelocityState:
    linear: float = 0.0
    angular: float = 0.0


@dataclass(frozen=True)
class Odometry:
    pose: Pose
    twist: VelocityState = field(default_factory=VelocityState)
    frame_id: str = 'world'
    child_frame_id: str = 'base_link'

    def is_finite(self) -> bool:
        return (self.pose.is_finite()
                and math.isfinite(self.twist.linear)
                and math.isfinite(self.twist.angular))


def quaternion_to_yaw(qx: float, qy: float, qz: float, qw: float) -> float:
    siny_cosp = 2.0 * (qw * qz + qx * qy)
    cosy_cosp = 1.0 - 2.0 * (qy * qy + qz * qz)
    return math.atan2(siny_cosp, cosy_cosp)


def yaw_to_quaternion(yaw: float) -> Tuple[float, float, float, float]:
    return 0.0, 0.0, math.sin(yaw / 2.0), math.cos(yaw / 2.0)


def normalize_angle(angle: float) -> float:
    """Wrap an angle into (-pi, pi]."""
    angle = math.fmod(angle + math.pi, 2.0 * math.pi)
    if angle <= 0.0:
        angle += 2.0 * math.pi
    return angle - math.pi


def distance(p1: Pose, p2: Pose) -> float:
    return math.hypot(p2.x - p1.x, p2.y - p1.y)


def require_finite_pose(pose: Pose, name: str = 'pose') -> Pose:
    if not pose.is_finite():
        raise NonFinitePoseError(f'{name} has non-finite fields: {pose}')
    return pose


def require_finite_odometry(odom: Odometry, name: str = 'odometry') -> Odometry:
    if not odom.is_finite():
        raise NonFinitePoseError(f'{name} has non-finite fields: {odom}')
    return odom


def require_same_frame(frame_id: str, expected: str, name: str = 'pose') -> str:
    # An empty frame id is unknown and accepted
    if frame_id and expected and frame_id != expected:
        raise FrameMismatchError(f'{name} is in frame {frame_id!r}, expected {expected!r}')
    return frame_id
