"""Unit tests for the static description of end-effectors."""

import numpy as np
import pytest

from cuboid_grasps.grippers import EndEffectorType, FingerParameters, HandPosture, SuctionParameters
from cuboid_grasps.spatial import Pose3D

from .fixtures.gripper_fixtures import make_finger_gripper, make_suction_gripper


def test_end_effector_type_from_name() -> None:
    """Verify that end-effector types are looked up by case-insensitive name."""
    # Arrange/Act/Assert - Expect known names to resolve and unknown names to be rejected
    assert EndEffectorType.from_name("finger") is EndEffectorType.FINGER
    assert EndEffectorType.from_name("Suction") is EndEffectorType.SUCTION
    with pytest.raises(ValueError):
        EndEffectorType.from_name("magnet")


def test_gripper_profile_derived_values() -> None:
    """Verify the depth range and angle resolution derived from a gripper profile."""
    # Arrange/Act - Create a finger gripper with depths in [0.01, 0.03] m
    gripper = make_finger_gripper(grasp_min_depth=0.01, grasp_max_depth=0.03)

    # Assert - Expect the finger depth and the angle resolution in radians
    assert gripper.finger_depth == pytest.approx(0.02)
    assert gripper.angle_resolution_rad == pytest.approx(np.pi / 4.0)
    assert "test_hand" in gripper.describe()


def test_gripper_profile_requires_matching_parameters() -> None:
    """Verify that each end-effector type needs its own parameter block."""
    # Act/Assert - Expect ValueErrors for a finger gripper without finger parameters, and for
    #   requesting suction parameters from a finger gripper
    with pytest.raises(ValueError, match="finger parameters"):
        make_finger_gripper(finger=None)
    with pytest.raises(ValueError):
        make_finger_gripper().require_suction()
    with pytest.raises(ValueError, match="suction parameters"):
        make_suction_gripper(suction=None)


@pytest.mark.parametrize(
    "overrides",
    [
        {"grasp_min_depth": 0.05, "grasp_max_depth": 0.01},
        {"grasp_pose_to_eef_pose": Pose3D.identity()},
        {"grasp_posture": HandPosture(("other_joint",), (0.0,))},
    ],
)
def test_gripper_profile_rejects_inconsistent_values(overrides: dict) -> None:
    """Verify that inconsistent gripper profiles cannot be constructed."""
    # Act/Assert - Expect a ValueError for each inconsistency
    with pytest.raises(ValueError):
        make_finger_gripper(**overrides)


def test_finger_parameters_reject_inverted_widths() -> None:
    """Verify that a gripper cannot close wider than it opens."""
    # Act/Assert - Expect a ValueError for a minimum width above the maximum
    with pytest.raises(ValueError):
        FingerParameters(
            0.1,
            max_finger_width=0.05,
            min_finger_width=0.08,
            gripper_finger_width=0.0,
        )


def test_suction_voxels_tile_active_area() -> None:
    """Verify that suction voxels evenly tile the active suction area."""
    # Arrange - Split a 0.04 x 0.02 pad into 2 x 2 regions
    suction = SuctionParameters(0.04, 0.02, suction_regions_x=2, suction_regions_y=2)

    # Act - Compute the pad's voxels
    voxels = suction.suction_voxels

    # Assert - Expect four equal voxels spanning the pad, centered about the origin
    assert len(voxels) == 4
    assert all(v.x_width == pytest.approx(0.02) for v in voxels)
    assert all(v.y_width == pytest.approx(0.01) for v in voxels)
    centers = np.array([v.center_point.to_array() for v in voxels])
    assert np.allclose(centers.mean(axis=0), 0.0)
    assert np.abs(centers[:, 0]).max() == pytest.approx(0.01)


def test_suction_parameters_need_regions() -> None:
    """Verify that a suction pad needs at least one region along each axis."""
    # Act/Assert - Expect a ValueError for zero regions along y
    with pytest.raises(ValueError):
        SuctionParameters(0.02, 0.02, suction_regions_x=1, suction_regions_y=0)
