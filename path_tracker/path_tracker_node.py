#!/usr/bin/env python3
# Path Tracker Node - Pure Pursuit on the goal point of the published local path

from typing import Optional

import rclpy
from rclpy.node import Node
from rclpy.qos import QoSProfile, ReliabilityPolicy
from geometry_msgs.msg import Twist
from nav_msgs.msg import Odometry as OdometryMsg, Path as NavPath
from rcl_interfaces.msg import ParameterDescriptor, SetParametersResult

from path_tracker.control import (
    PARAMETER_ALIASES,
    ControllerParameters,
    ParameterStore,
    PurePursuitController,
)
from path_tracker.errors import InvalidParametersError, PathTrackerError
from path_tracker.geometry import Odometry, require_same_frame
from path_tracker.planning import GOAL_LOOKAHEAD_INDEX, select_goal
from path_tracker.ros_interface import command_to_twist, odometry_from_msg, path_from_msg

CONTROLLER_PARAMETERS = ('max_throttle', 'throttle_gain', 'robot_length', 'lookahead_distance')


class PathTrackerNode(Node):

    def __init__(self):
        super().__init__('path_tracker_node')

        defaults = ControllerParameters()

        self.declare_parameter('odom_topic', '/gazebo/ground_truth/state')
        self.declare_parameter('local_path_topic', '/path_tracker/planning/local_path')
        self.declare_parameter('cmd_vel_topic', '/jackal_velocity_controller/cmd_vel')
        self.declare_parameter('goal_lookahead_index', GOAL_LOOKAHEAD_INDEX)

        self.declare_parameter('max_throttle', defaults.max_throttle,
                               ParameterDescriptor(description='Throttle saturation (m/s)'))
        self.declare_parameter('throttle_gain', defaults.throttle_gain,
                               ParameterDescriptor(description='Throttle per meter to goal'))
        self.declare_parameter('robot_length', defaults.robot_length,
                               ParameterDescriptor(description='Wheelbase (m)'))
        self.declare_parameter('lookahead_distance', defaults.lookahead_velocity_factor,
                               ParameterDescriptor(description='Lookahead distance per m/s',
                                                   dynamic_typing=True))

        odom_topic = self.get_parameter('odom_topic').value
        local_path_topic = self.get_parameter('local_path_topic').value
        cmd_vel_topic = self.get_parameter('cmd_vel_topic').value
        self._goal_index = self._validate_goal_index(
            self.get_parameter('goal_lookahead_index').value)

        # Invalid startup parameters are fatal
        self._parameters = ParameterStore(defaults.replace(**{
            name: self.get_parameter(name).value for name in CONTROLLER_PARAMETERS
        }))
        self._controller = PurePursuitController(self._parameters)

        self._odom: Optional[Odometry] = None

        self.add_on_set_parameters_callback(self._parameters_callback)

        # Publishers
        self._cmd_pub = self.create_publisher(Twist, cmd_vel_topic, 1)

        # Subscribers
        qos = QoSProfile(depth=1, reliability=ReliabilityPolicy.RELIABLE)
        self.create_subscription(OdometryMsg, odom_topic, self._odom_callback, qos)
        self.create_subscription(NavPath, local_path_topic, self._local_path_callback, qos)

        params = self._parameters.snapshot()
        self.get_logger().info(
            f'Path Tracker started - max_throttle: {params.max_throttle}, '
            f'throttle_gain: {params.throttle_gain}, robot_length: {params.robot_length}, '
            f'lookahead factor: {params.lookahead_velocity_factor}, '
            f'goal index: {self._goal_index}')

    @staticmethod
    def _validate_goal_index(value) -> int:
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise InvalidParametersError(
                f'goal_lookahead_index must be a non-negative integer, got {value!r}')
        return value

    def _parameters_callback(self, params) -> SetParametersResult:
        changes = {}
        goal_index = self._goal_index

        try:
            for param in params:
                if param.name in CONTROLLER_PARAMETERS:
                    changes[param.name] = param.value
                elif param.name == 'goal_lookahead_index':
                    goal_index = self._validate_goal_index(param.value)

            # Goal index is only applied once the controller snapshot is accepted
            if changes:
                self._parameters.update(**changes)
        except InvalidParametersError as e:
            self.get_logger().warn(f'Rejected parameter update: {e}')
            return SetParametersResult(successful=False, reason=str(e))

        if changes:
            names = ', '.join(f'{PARAMETER_ALIASES.get(k, k)}={v}' for k, v in changes.items())
            self.get_logger().info(f'Controller parameters updated: {names}')
        if goal_index != self._goal_index:
            self._goal_index = goal_index
            self.get_logger().info(f'Goal lookahead index set to {goal_index}')

        return SetParametersResult(successful=True)

    def _odom_callback(self, msg: OdometryMsg):
        try:
            odom = odometry_from_msg(msg)
        except PathTrackerError as e:
            self.get_logger().warn(f'Rejected odometry: {e}', throttle_duration_sec=2.0)
            return

        self._odom = odom

    def _local_path_callback(self, msg: NavPath):
        if self._odom is None:
            return

        try:
            local_path = path_from_msg(msg)
            require_same_frame(self._odom.frame_id, local_path.frame_id, 'odometry')
            goal = select_goal(local_path, self._goal_index)
            cmd, diag = self._controller.compute(self._odom, goal)
        except PathTrackerError as e:
            self.get_logger().warn(f'Skipping control cycle: {e}', throttle_duration_sec=2.0)
            return

        self._cmd_pub.publish(command_to_twist(cmd))

        self.get_logger().debug(
            f'yaw robot {diag.yaw_robot:.3f}, yaw goal {diag.yaw_goal:.3f}, '
            f'heading error {diag.heading_error:.3f}, '
            f'cross-track error {diag.cross_track_error:.3f}, alpha {diag.alpha:.3f}, '
            f'lookahead {diag.lookahead_distance:.3f}, '
            f'steering {cmd.steering:.3f}, throttle {cmd.throttle:.3f}')


def main(args=None):
    rclpy.init(args=args)
    node = PathTrackerNode()

    try:
        rclpy.spin(node)
    except KeyboardInterrupt:
        pass
    finally:
        node._cmd_pub.publish(Twist())
        node.destroy_node()
        if rclpy.ok():
            rclpy.shutdown()


if __name__ == '__main__':
    main()
