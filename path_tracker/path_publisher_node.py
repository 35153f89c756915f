#!/usr/bin/env python3
# Path Publisher Node - figure-eight global path and local path window around the robot

import math
from typing import Optional

import rclpy
from rclpy.node import Node
from rclpy.qos import QoSProfile, ReliabilityPolicy
from nav_msgs.msg import Odometry as OdometryMsg, Path as NavPath
from std_msgs.msg import Float32

from path_tracker.errors import PathTrackerError
from path_tracker.geometry import Pose
from path_tracker.planning import (
    WaypointPathManager,
    calculate_pose_error,
    relative_pose_error,
)
from path_tracker.ros_interface import (
    Tf2TransformProvider,
    degrees_msg,
    float_msg,
    odometry_from_msg,
    path_to_msg,
)


class PathPublisherNode(Node):

    def __init__(self):
        super().__init__('path_publisher_node')

        self.declare_parameter('odom_topic', '/gazebo/ground_truth/state')
        self.declare_parameter('world_frame', 'world')
        self.declare_parameter('map_frame', 'map')
        self.declare_parameter('robot_frame', 'base_link')
        self.declare_parameter('timer_period', 0.1)
        self.declare_parameter('global_path_a', 12.0)
        self.declare_parameter('global_path_b', 10.0)
        self.declare_parameter('global_path_resolution', math.pi / 1000.0)
        self.declare_parameter('local_path_before', 10)
        self.declare_parameter('local_path_after', 50)
        self.declare_parameter('search_window', 200)
        self.declare_parameter('loop_path', True)
        self.declare_parameter('publish_robot_tf', True)

        odom_topic = self.get_parameter('odom_topic').value
        self._world_frame = self.get_parameter('world_frame').value
        self._map_frame = self.get_parameter('map_frame').value
        self._robot_frame = self.get_parameter('robot_frame').value
        timer_period = self.get_parameter('timer_period').value
        self._n_wp_before = self.get_parameter('local_path_before').value
        self._n_wp_after = self.get_parameter('local_path_after').value
        self._publish_robot_tf = self.get_parameter('publish_robot_tf').value
        search_window = self.get_parameter('search_window').value

        self._manager = WaypointPathManager(
            search_window=search_window if search_window > 0 else None,
            loop=self.get_parameter('loop_path').value,
        )
        global_path = self._manager.generate_global_path(
            self.get_parameter('global_path_a').value,
            self.get_parameter('global_path_b').value,
            self.get_parameter('global_path_resolution').value,
            frame_id=self._world_frame,
        )

        self._transforms = Tf2TransformProvider(self)
        self._robot_pose: Optional[Pose] = None

        # Publishers
        qos = QoSProfile(depth=10, reliability=ReliabilityPolicy.RELIABLE)
        self._global_path_pub = self.create_publisher(
            NavPath, '/path_tracker/planning/global_path', qos)
        self._local_path_pub = self.create_publisher(
            NavPath, '/path_tracker/planning/local_path', qos)
        self._abs_position_error_pub = self.create_publisher(
            Float32, '/path_tracker/tracking/abs_position_error', qos)
        self._abs_heading_error_pub = self.create_publisher(
            Float32, '/path_tracker/tracking/abs_heading_error', qos)
        self._rel_position_error_pub = self.create_publisher(
            Float32, '/path_tracker/tracking/rel_position_error', qos)
        self._rel_heading_error_pub = self.create_publisher(
            Float32, '/path_tracker/tracking/rel_heading_error', qos)

        # Subscribers
        self.create_subscription(OdometryMsg, odom_topic, self._odom_callback, 1)

        # Timers
        self.create_timer(timer_period, self._timer_callback)

        self.get_logger().info(
            f'Path Publisher started - Waypoints: {len(global_path)}, '
            f'window: -{self._n_wp_before}/+{self._n_wp_after}')

    def _odom_callback(self, msg: OdometryMsg):
        try:
            odom = odometry_from_msg(msg)
        except PathTrackerError as e:
            self.get_logger().warn(f'Rejected odometry: {e}', throttle_duration_sec=2.0)
            return

        if odom.child_frame_id:
            self._robot_frame = odom.child_frame_id

        source_frame = odom.frame_id or self._world_frame
        try:
            pose = self._transforms.transform_pose(odom.pose, self._world_frame, source_frame)
        except PathTrackerError as e:
            self.get_logger().warn(
                f'Cannot place robot in {self._world_frame}: {e}', throttle_duration_sec=2.0)
            return

        self._robot_pose = pose

        if self._publish_robot_tf and source_frame == self._world_frame:
            self._transforms.broadcast_transform(
                pose, self._world_frame, self._robot_frame)

    def _timer_callback(self):
        stamp = self.get_clock().now().to_msg()

        # The paths live in the world frame, keep map aligned with it
        self._transforms.broadcast_transform(
            Pose(0.0, 0.0), self._world_frame, self._map_frame)

        self._global_path_pub.publish(path_to_msg(self._manager.global_path, stamp))

        if self._robot_pose is None:
            return

        try:
            window = self._manager.update_local_path(
                self._robot_pose, self._n_wp_before, self._n_wp_after)
        except PathTrackerError as e:
            self.get_logger().warn(f'Local path update failed: {e}', throttle_duration_sec=2.0)
            return

        self._local_path_pub.publish(path_to_msg(window.path, stamp))

        goal = self._manager.goal_pose
        absolute = calculate_pose_error(self._robot_pose, goal)
        relative = relative_pose_error(self._robot_pose, goal)

        self._abs_position_error_pub.publish(float_msg(absolute.position_error))
        self._abs_heading_error_pub.publish(degrees_msg(absolute.heading_error))
        self._rel_position_error_pub.publish(float_msg(relative.position_error))
        self._rel_heading_error_pub.publish(degrees_msg(relative.heading_error))

        self.get_logger().debug(
            f'Next waypoint {window.next_index} [{window.start}, {window.end}], '
            f'lap {self._manager.lap_count}, '
            f'position error {absolute.position_error:.3f}, '
            f'heading error {math.degrees(absolute.heading_error):.1f} deg')


def main(args=None):
    rclpy.init(args=args)
    node = PathPublisherNode()

    try:
        rclpy.spin(node)
    except KeyboardInterrupt:
        pass
    finally:
        node.destroy_node()
        if rclpy.ok():
            rclpy.shutdown()


if __name__ == '__main__':
    main()
