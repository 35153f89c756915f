import math

import pytest

from path_tracker.control import (
    ControlCommand,
    ControllerParameters,
    ParameterStore,
    PurePursuitController,
    compute_control_outputs,
    compute_lookahead_distance,
    compute_throttle,
    fold_alpha,
)
from path_tracker.errors import InvalidParametersError, NonFinitePoseError
from path_tracker.geometry import Odometry, Pose, VelocityState


def odom_at(x=0.0, y=0.0, yaw=0.0, speed=0.0):
    return Odometry(Pose(x, y, 0.0, yaw), VelocityState(speed, 0.0))


def test_throttle_is_linear_then_saturates():
    params = ControllerParameters(max_throttle=0.5, throttle_gain=0.2)
    assert compute_throttle(0.0, params) == 0.0
    assert compute_throttle(1.0, params) == pytest.approx(0.2)
    assert compute_throttle(2.5, params) == 0.5
    assert compute_throttle(100.0, params) == 0.5


@pytest.mark.parametrize('max_throttle,gain', [(0.5, 0.2), (2.0, 3.0), (0.1, 0.01)])
def test_throttle_stays_within_limits(max_throttle, gain):
    params = ControllerParameters(max_throttle=max_throttle, throttle_gain=gain)
    for dist in (0.0, 0.05, 1.0, 7.5, 1e6):
        throttle = compute_throttle(dist, params)
        assert 0.0 <= throttle <= max_throttle
        if dist * gain >= max_throttle:
            assert throttle == max_throttle


def test_fold_alpha_half_plane():
    assert fold_alpha(0.3) == 0.3
    assert fold_alpha(math.pi / 2) == math.pi / 2
    assert fold_alpha(3 * math.pi / 4) == pytest.approx(-math.pi / 4)
    assert fold_alpha(-3 * math.pi / 4) == pytest.approx(math.pi / 4)
    assert fold_alpha(math.pi) == 0.0
    assert fold_alpha(-math.pi) == 0.0


def test_fold_alpha_output_ranges():
    for i in range(1, 50):
        raw = math.pi / 2 + i * (math.pi / 2) / 50
        assert -math.pi / 2 < fold_alpha(raw) <= 0.0
        assert 0.0 <= fold_alpha(-raw) < math.pi / 2


def test_lookahead_has_floor_of_one():
    params = ControllerParameters(lookahead_velocity_factor=1.0)
    assert compute_lookahead_distance(-5.0, params) == 1.0
    assert compute_lookahead_distance(0.0, params) == 1.0
    assert compute_lookahead_distance(0.5, params) == 1.0
    assert compute_lookahead_distance(3.0, params) == 3.0

    fast = ControllerParameters(lookahead_velocity_factor=2.5)
    assert compute_lookahead_distance(2.0, fast) == 5.0
    assert compute_lookahead_distance(-2.0, fast) == 1.0


def test_goal_straight_ahead():
    params = ControllerParameters(max_throttle=5.0, throttle_gain=0.3, robot_length=0.01)
    cmd, diag = compute_control_outputs(odom_at(), Pose(10.0, 0.0), params)

    assert cmd.throttle == pytest.approx(min(5.0, 10.0 * 0.3))
    assert diag.alpha == 0.0
    assert diag.lookahead_distance == 1.0
    assert cmd.steering == pytest.approx(math.atan(2 * 0.01 * 10.0 / 1.0))


def test_goal_straight_ahead_saturates_steering():
    params = ControllerParameters(robot_length=0.5)
    cmd, _ = compute_control_outputs(odom_at(), Pose(10.0, 0.0), params)
    assert cmd.steering == 0.5


def test_goal_directly_behind_folds_alpha_to_zero():
    params = ControllerParameters(robot_length=0.01)
    cmd, diag = compute_control_outputs(odom_at(), Pose(-5.0, 0.0), params)

    assert diag.alpha == 0.0
    assert cmd.steering == pytest.approx(math.atan(2 * 0.01 * 5.0 / 1.0))


def test_steering_clamp_is_exact_on_both_sides():
    params = ControllerParameters(robot_length=1e-6)
    cmd, _ = compute_control_outputs(odom_at(), Pose(1.0, -1.5), params)
    assert cmd.steering == -0.5

    params = ControllerParameters(robot_length=10.0)
    cmd, _ = compute_control_outputs(odom_at(), Pose(1.0, 1.5), params)
    assert cmd.steering == 0.5


def test_outputs_always_bounded():
    params = ControllerParameters(max_throttle=0.8, throttle_gain=0.4, robot_length=0.3)
    for yaw in (-3.0, -1.5, 0.0, 1.0, 3.1):
        for gx, gy in ((5.0, 0.0), (-3.0, 2.0), (0.0, -4.0), (0.1, 0.1), (20.0, -20.0)):
            for speed in (-1.0, 0.0, 2.0):
                cmd, _ = compute_control_outputs(odom_at(1.0, -1.0, yaw, speed), Pose(gx, gy), params)
                assert 0.0 <= cmd.throttle <= 0.8
                assert -0.5 <= cmd.steering <= 0.5


def test_heading_error_is_raw_difference():
    _, diag = compute_control_outputs(odom_at(yaw=3.0), Pose(1.0, 0.0, 0.0, -3.0),
                                      ControllerParameters())
    assert diag.heading_error == pytest.approx(-6.0)


def test_cross_track_error_is_straight_line_distance():
    _, diag = compute_control_outputs(odom_at(1.0, 1.0), Pose(4.0, 5.0), ControllerParameters())
    assert diag.cross_track_error == pytest.approx(5.0)


def test_non_finite_inputs_rejected():
    params = ControllerParameters()
    with pytest.raises(NonFinitePoseError):
        compute_control_outputs(odom_at(x=float('nan')), Pose(1.0, 0.0), params)
    with pytest.raises(NonFinitePoseError):
        compute_control_outputs(odom_at(speed=float('inf')), Pose(1.0, 0.0), params)
    with pytest.raises(NonFinitePoseError):
        compute_control_outputs(odom_at(), Pose(1.0, float('inf')), params)


def test_controller_uses_whole_updated_parameter_set():
    store = ParameterStore(ControllerParameters(max_throttle=0.5, throttle_gain=0.2))
    controller = PurePursuitController(store)
    odom, goal = odom_at(), Pose(10.0, 0.0)

    cmd, _ = controller.compute(odom, goal)
    assert cmd.throttle == 0.5

    store.update(max_throttle=2.0, throttle_gain=0.1)
    cmd, _ = controller.compute(odom, goal)
    # old max with new gain would give 0.5, new max with old gain 2.0
    assert cmd.throttle == pytest.approx(1.0)


def test_controller_keeps_parameters_after_rejected_update():
    store = ParameterStore(ControllerParameters(max_throttle=0.5, throttle_gain=0.2))
    controller = PurePursuitController(store)

    with pytest.raises(InvalidParametersError):
        store.update(max_throttle=3.0, throttle_gain=-1.0)

    assert controller.parameters.max_throttle == 0.5
    cmd, _ = controller.compute(odom_at(), Pose(10.0, 0.0))
    assert cmd.throttle == 0.5


def test_controller_accepts_explicit_snapshot():
    controller = PurePursuitController(ControllerParameters(max_throttle=1.0, throttle_gain=1.0))
    override = ControllerParameters(max_throttle=0.25, throttle_gain=1.0)

    cmd, _ = controller.compute(odom_at(), Pose(10.0, 0.0), override)
    assert cmd == ControlCommand(0.25, cmd.steering)
    assert controller.parameters.max_throttle == 1.0
