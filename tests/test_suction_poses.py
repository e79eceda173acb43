"""Unit tests for enumerating suction grasp poses over the top face of a cuboid."""

import numpy as np
import pytest

from cuboid_grasps.geometry import Cuboid
from cuboid_grasps.grasping import generate_suction_grasp_poses
from cuboid_grasps.grasping.suction_poses import (
    lateral_sweep,
    max_lateral_offset,
    orient_toward_ideal,
    sweep_values,
    yaw_sweep,
)
from cuboid_grasps.spatial import UNIT_X, UNIT_Z, Pose3D

from .fixtures.gripper_fixtures import make_suction_gripper


def test_sweep_values() -> None:
    """Verify the multiples of a step produced by a sweep."""
    # Arrange/Act/Assert - Expect the limit to be kept only when requested
    assert sweep_values(0.25, 1.0) == pytest.approx([0.25, 0.5, 0.75, 1.0])
    assert sweep_values(0.25, 1.0, include_limit=False) == pytest.approx([0.25, 0.5, 0.75])
    assert sweep_values(0.3, 1.0) == pytest.approx([0.3, 0.6, 0.9])
    assert sweep_values(0.25, 0.0).size == 0


def test_sweep_values_with_non_positive_step(caplog: pytest.LogCaptureFixture) -> None:
    """Verify that a sweep with a non-positive step produces no values."""
    # Act - Attempt a sweep with a zero step
    values = sweep_values(0.0, 1.0)

    # Assert - Expect no values and a logged warning
    assert values.size == 0
    assert "non-positive step" in caplog.text


def test_yaw_sweep_stays_below_full_turn() -> None:
    """Verify that a yaw sweep in quarter turns adds three rotated copies of each pose."""
    # Arrange/Act - Sweep an identity pose in quarter turns
    poses = yaw_sweep([Pose3D.identity()], np.pi / 2.0)

    # Assert - Expect rotations of 90, 180, and 270 degrees about z
    assert len(poses) == 3
    assert np.allclose(poses[0].x_axis, [0.0, 1.0, 0.0], atol=1e-8)
    assert np.allclose(poses[1].x_axis, [-1.0, 0.0, 0.0], atol=1e-8)
    assert np.allclose(poses[2].x_axis, [0.0, -1.0, 0.0], atol=1e-8)


def test_lateral_sweep_alternates_directions() -> None:
    """Verify that lateral sweeps alternate positive and negative shifts."""
    # Arrange/Act - Shift an identity pose along y in 0.25 m steps up to 0.5 m
    poses = lateral_sweep([Pose3D.identity()], "y", 0.25, 0.5)

    # Assert - Expect shifts of +0.25, -0.25, +0.5, then -0.5
    y_values = [pose.position.y for pose in poses]
    assert y_values == pytest.approx([0.25, -0.25, 0.5, -0.5])


def test_lateral_sweep_rejects_other_axes() -> None:
    """Verify that suction grasps can only be shifted along x or y."""
    # Act/Assert - Expect a ValueError for a shift along z
    with pytest.raises(ValueError):
        lateral_sweep([Pose3D.identity()], "z", 0.25, 0.5)


def test_orient_toward_ideal_flips_opposing_axes() -> None:
    """Verify that the top-face pose is flipped to match the ideal grasp orientation."""
    # Arrange - Create an ideal pose pointing down and yawed a half turn
    top_pose = Pose3D.from_xyz_rpy(z=0.1)
    ideal_pose = Pose3D.identity().rotated_about(UNIT_X, np.pi).rotated_about(UNIT_Z, np.pi)

    # Act - Orient the top-face pose toward the ideal pose
    anchor = orient_toward_ideal(top_pose, ideal_pose)

    # Assert - Expect the anchor's x and z axes to agree with the ideal pose's axes
    assert np.dot(anchor.z_axis, ideal_pose.z_axis) > 0
    assert np.dot(anchor.x_axis, ideal_pose.x_axis) > 0
    assert anchor.position.approx_equal(top_pose.position)


def test_max_lateral_offset() -> None:
    """Verify how far a suction pad may shift while staying over the top face."""
    # Arrange - Create a 0.06 x 0.1 top face and a gripper with a 0.02 x 0.02 pad
    cuboid = Cuboid(Pose3D.identity(), 0.06, 0.1, 0.05)
    gripper = make_suction_gripper()

    # Act/Assert - Expect half of the smaller slack between the face and the pad
    assert max_lateral_offset(cuboid, gripper) == pytest.approx(0.02)


def test_suction_poses_without_lateral_room() -> None:
    """Verify the yaw and depth sweeps when the pad exactly covers the top face."""
    # Arrange - Create a top face matching the 0.02 x 0.02 suction pad
    cuboid = Cuboid(Pose3D.from_xyz_rpy(z=0.1), 0.02, 0.02, 0.05)
    gripper = make_suction_gripper()

    # Act - Generate suction grasp poses with a 90 degree angle resolution
    poses = generate_suction_grasp_poses(cuboid, gripper, Pose3D.identity())

    # Assert - Expect (1 + 3 yaws) * (1 + 1 depth) poses, beginning with the centered grasp
    assert len(poses) == 8
    assert poses[0].approx_equal(cuboid.pose)
    assert poses[4].position.approx_equal(cuboid.pose.translated_local(z=0.01).position)


def test_suction_poses_with_lateral_sweeps() -> None:
    """Verify that lateral sweeps multiply the poses produced by the earlier sweeps."""
    # Arrange - Create a 0.06 x 0.06 top face, leaving 0.02 m of slack on either side of the pad
    cuboid = Cuboid(Pose3D.identity(), 0.06, 0.06, 0.05)
    gripper = make_suction_gripper()

    # Act - Generate suction grasp poses
    poses = generate_suction_grasp_poses(cuboid, gripper, Pose3D.identity())

    # Assert - Expect 8 poses, times 5 along y (0, +/-0.01, +/-0.02), times 5 along x
    assert len(poses) == 8 * 5 * 5
    offsets = np.array([pose.position.to_array() for pose in poses])
    assert np.abs(offsets[:, :2]).max() == pytest.approx(0.02)


def test_suction_poses_with_zero_resolutions() -> None:
    """Verify that only the centered grasp is produced when every sweep is disabled."""
    # Arrange - Disable the yaw and depth sweeps, and match the pad to the top face
    cuboid = Cuboid(Pose3D.identity(), 0.02, 0.02, 0.05)
    gripper = make_suction_gripper(angle_resolution_deg=0.0, grasp_depth_resolution=0.0)

    # Act - Generate suction grasp poses
    poses = generate_suction_grasp_poses(cuboid, gripper, Pose3D.identity())

    # Assert - Expect only the centered grasp
    assert len(poses) == 1
