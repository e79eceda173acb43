"""Unit tests for hand postures and finger posture controllers."""

import pytest

from cuboid_grasps.grippers import HandPosture, LinearFingerPostureController

from .fixtures.gripper_fixtures import FINGER_JOINTS, make_finger_gripper


def test_hand_posture_rejects_mismatched_lengths() -> None:
    """Verify that each joint in a hand posture needs exactly one position."""
    # Act/Assert - Expect a ValueError for two joints but one position
    with pytest.raises(ValueError):
        HandPosture(FINGER_JOINTS, (0.0,))


def test_hand_posture_configuration_round_trip() -> None:
    """Verify that a hand posture converts to and from a joint configuration."""
    # Arrange - Create a posture for two finger joints
    posture = HandPosture(FINGER_JOINTS, (0.01, 0.02), time_from_start_s=0.5)

    # Act - Convert the posture into a configuration and back
    result = HandPosture.from_configuration(posture.to_configuration(), time_from_start_s=0.5)

    # Assert - Expect an identical posture
    assert result == posture


def test_hand_posture_from_yaml_data() -> None:
    """Verify that hand postures load from YAML data with a default time from start."""
    # Arrange - Create YAML data without a time from start
    data = {"joint_names": list(FINGER_JOINTS), "positions": [0.04, 0.04]}

    # Act - Load the posture
    posture = HandPosture.from_yaml_data(data)

    # Assert - Expect the joints and positions as tuples, starting immediately
    assert posture.joint_names == FINGER_JOINTS
    assert posture.positions == (0.04, 0.04)
    assert posture.time_from_start_s == 0.0


def test_linear_controller_interpolates_postures() -> None:
    """Verify that finger separations are linearly mapped between closed and open postures."""
    # Arrange - Use a gripper opening from 0 to 0.1 m with joints from 0 to 0.05
    gripper = make_finger_gripper()
    controller = LinearFingerPostureController()

    # Act - Convert a 0.05 m separation into a posture
    posture = controller.finger_width_to_posture(gripper, 0.05)

    # Assert - Expect the joints halfway between their closed and open values
    assert posture is not None
    assert posture.joint_names == FINGER_JOINTS
    assert posture.positions == pytest.approx((0.025, 0.025))


def test_linear_controller_rejects_unreachable_widths() -> None:
    """Verify that separations beyond the gripper's limits cannot be commanded."""
    # Arrange - Use a gripper opening from 0 to 0.1 m
    gripper = make_finger_gripper()
    controller = LinearFingerPostureController()

    # Act/Assert - Expect None for a separation wider than fully open
    assert controller.finger_width_to_posture(gripper, 0.2) is None


def test_set_grasp_width_spans_usable_range() -> None:
    """Verify that the percent open spans from the minimum acceptable width to fully open."""
    # Arrange - Require at least 0.06 m between the fingers
    gripper = make_finger_gripper()
    controller = LinearFingerPostureController()

    # Act - Request the gripper fully open and at its minimum acceptable width
    fully_open = controller.set_grasp_width(gripper, 1.0, 0.06)
    minimum = controller.set_grasp_width(gripper, 0.0, 0.06)

    # Assert - Expect the open posture, and joints matching a 0.06 m separation
    assert fully_open is not None and minimum is not None
    assert fully_open.positions == pytest.approx((0.05, 0.05))
    assert minimum.positions == pytest.approx((0.03, 0.03))


@pytest.mark.parametrize(("percent_open", "min_width"), [(1.5, 0.0), (-0.1, 0.0), (0.5, 0.2)])
def test_set_grasp_width_failures(percent_open: float, min_width: float) -> None:
    """Verify that invalid openings or objects too wide for the gripper produce no posture."""
    # Arrange - Use a gripper opening up to 0.1 m
    gripper = make_finger_gripper()
    controller = LinearFingerPostureController()

    # Act/Assert - Expect None rather than a posture
    assert controller.set_grasp_width(gripper, percent_open, min_width) is None
