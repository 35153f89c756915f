import math

import pytest

from path_tracker.errors import FrameMismatchError, NonFinitePoseError
from path_tracker.geometry import (
    Odometry,
    Pose,
    VelocityState,
    distance,
    normalize_angle,
    quaternion_to_yaw,
    require_finite_odometry,
    require_finite_pose,
    require_same_frame,
    yaw_to_quaternion,
)


def test_normalize_angle_range_is_half_open():
    assert normalize_angle(math.pi) == pytest.approx(math.pi)
    assert normalize_angle(-math.pi) == pytest.approx(math.pi)
    assert normalize_angle(0.0) == 0.0
    assert normalize_angle(1.5 * math.pi) == pytest.approx(-0.5 * math.pi)
    assert normalize_angle(-1.5 * math.pi) == pytest.approx(0.5 * math.pi)
    assert normalize_angle(7.0 * math.pi + 0.25) == pytest.approx(-math.pi + 0.25)


def test_quaternion_yaw_round_trip():
    for yaw in (-3.0, -1.2, 0.0, 0.7, 3.1):
        assert quaternion_to_yaw(*yaw_to_quaternion(yaw)) == pytest.approx(yaw)


def test_pose_from_quaternion():
    qx, qy, qz, qw = yaw_to_quaternion(math.pi / 2)
    pose = Pose.from_quaternion(1.0, 2.0, 0.5, qx, qy, qz, qw)
    assert (pose.x, pose.y, pose.z) == (1.0, 2.0, 0.5)
    assert pose.yaw == pytest.approx(math.pi / 2)


def test_distance_ignores_height():
    assert distance(Pose(0.0, 0.0, 5.0), Pose(3.0, 4.0, -2.0)) == pytest.approx(5.0)


def test_relative_to_expresses_goal_in_robot_frame():
    robot = Pose(0.0, 0.0, 0.0, math.pi / 2)
    goal = Pose(1.0, 1.0, 0.0, math.pi / 2)
    rel = goal.relative_to(robot)
    assert rel.x == pytest.approx(1.0)
    assert rel.y == pytest.approx(-1.0)
    assert rel.yaw == pytest.approx(0.0)


def test_compose_with_inverse_is_identity():
    pose = Pose(3.0, -2.0, 1.0, 2.5)
    identity = pose.compose(pose.inverse())
    assert identity.x == pytest.approx(0.0, abs=1e-12)
    assert identity.y == pytest.approx(0.0, abs=1e-12)
    assert identity.z == pytest.approx(0.0)
    assert identity.yaw == pytest.approx(0.0, abs=1e-12)


def test_non_finite_pose_rejected():
    with pytest.raises(NonFinitePoseError):
        require_finite_pose(Pose(float('nan'), 0.0))
    with pytest.raises(NonFinitePoseError):
        require_finite_pose(Pose(0.0, 0.0, 0.0, float('inf')))
    assert require_finite_pose(Pose(1.0, 2.0)) == Pose(1.0, 2.0)


def test_non_finite_velocity_rejected():
    odom = Odometry(Pose(0.0, 0.0), VelocityState(float('nan'), 0.0))
    with pytest.raises(NonFinitePoseError):
        require_finite_odometry(odom)


def test_require_same_frame():
    assert require_same_frame('world', 'world') == 'world'
    # unknown frames are accepted
    assert require_same_frame('', 'world') == ''
    assert require_same_frame('odom', '') == 'odom'
    with pytest.raises(FrameMismatchError):
        require_same_frame('odom', 'world', 'odometry')
