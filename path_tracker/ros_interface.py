"""
Conversions between ROS 2 messages and core types, plus the tf2-backed
transform provider used by the nodes.
"""

import math

from rclpy.node import Node
from rclpy.time import Time
from geometry_msgs.msg import Pose as PoseMsg, PoseStamped, TransformStamped, Twist
from nav_msgs.msg import Odometry as OdometryMsg, Path as NavPath
from std_msgs.msg import Float32
from tf2_ros import Buffer, TransformBroadcaster, TransformException, TransformListener

from .control import ControlCommand
from .errors import TransformUnavailableError
from .geometry import Odometry, Pose, VelocityState, require_finite_odometry
from .planning import Path
from .transforms import TransformProvider


def pose_from_msg(msg: PoseMsg) -> Pose:
    q = msg.orientation
    return Pose.from_quaternion(msg.position.x, msg.position.y, msg.position.z,
                                q.x, q.y, q.z, q.w)


def pose_to_msg(pose: Pose) -> PoseMsg:
    msg = PoseMsg()
    msg.position.x = pose.x
    msg.position.y = pose.y
    msg.position.z = pose.z
    qx, qy, qz, qw = pose.quaternion()
    msg.orientation.x = qx
    msg.orientation.y = qy
    msg.orientation.z = qz
    msg.orientation.w = qw
    return msg


def odometry_from_msg(msg: OdometryMsg) -> Odometry:
    odom = Odometry(
        pose=pose_from_msg(msg.pose.pose),
        twist=VelocityState(msg.twist.twist.linear.x, msg.twist.twist.angular.z),
        frame_id=msg.header.frame_id,
        child_frame_id=msg.child_frame_id,
    )
    return require_finite_odometry(odom)


def path_from_msg(msg: NavPath) -> Path:
    return Path((pose_from_msg(p.pose) for p in msg.poses), msg.header.frame_id)


def path_to_msg(path: Path, stamp) -> NavPath:
    nav_path = NavPath()
    nav_path.header.stamp = stamp
    nav_path.header.frame_id = path.frame_id

    for waypoint in path:
        pose = PoseStamped()
        pose.header = nav_path.header
        pose.pose = pose_to_msg(waypoint)
        nav_path.poses.append(pose)

    return nav_path


def command_to_twist(cmd: ControlCommand) -> Twist:
    twist = Twist()
    twist.linear.x = cmd.throttle
    twist.angular.z = cmd.steering
    return twist


def float_msg(value: float) -> Float32:
    msg = Float32()
    msg.data = float(value)
    return msg


def degrees_msg(radians: float) -> Float32:
    return float_msg(math.degrees(radians))


class Tf2TransformProvider(TransformProvider):

    def __init__(self, node: Node):
        self._node = node
        self._buffer = Buffer()
        self._listener = TransformListener(self._buffer, node)
        self._broadcaster = TransformBroadcaster(node)

    def lookup_transform(self, target_frame: str, source_frame: str) -> Pose:
        try:
            transform = self._buffer.lookup_transform(
                target_frame, source_frame, Time())
        except TransformException as e:
            raise TransformUnavailableError(
                f'{source_frame} -> {target_frame}: {e}') from e

        t = transform.transform.translation
        q = transform.transform.rotation
        return Pose.from_quaternion(t.x, t.y, t.z, q.x, q.y, q.z, q.w)

    def broadcast_transform(self, pose: Pose, parent_frame: str, child_frame: str) -> None:
        t = TransformStamped()
        t.header.stamp = self._node.get_clock().now().to_msg()
        t.header.frame_id = parent_frame
        t.child_frame_id = child_frame
        t.transform.translation.x = pose.x
        t.transform.translation.y = pose.y
        t.transform.translation.z = pose.z
        qx, qy, qz, qw = pose.quaternion()
        t.transform.rotation.x = qx
        t.transform.rotation.y = qy
        t.transform.rotation.z = qz
        t.transform.rotation.w = qw
        self._broadcaster.sendTransform(t)
