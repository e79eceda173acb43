"""Unit tests for generating scored grasp candidates for cuboids."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import numpy as np
import pytest

from cuboid_grasps.grasping import GraspCandidateConfig, GraspGenerator
from cuboid_grasps.spatial import Point3D, Pose3D
from cuboid_grasps.visualization import GraspVisualizer

from .fixtures.gripper_fixtures import make_finger_gripper, make_suction_gripper

if TYPE_CHECKING:
    from cuboid_grasps.geometry import Cuboid
    from cuboid_grasps.grasping import GraspCandidate

CUBE_SIDE = 0.0625

X_AXIS_FACES = GraspCandidateConfig(
    enable_corner_grasps=False,
    enable_variable_angle_grasps=False,
    enable_edge_grasps=False,
    generate_y_axis_grasps=False,
    generate_z_axis_grasps=False,
)


class RecordingVisualizer(GraspVisualizer):
    """Records everything passed to the visualizer."""

    def __init__(self) -> None:
        self.cuboids: list[Cuboid] = []
        self.poses: list[Pose3D] = []
        self.candidates: list[GraspCandidate] = []

    def show_cuboid(self, cuboid: Cuboid) -> None:
        self.cuboids.append(cuboid)

    def show_grasp_pose(self, pose: Pose3D) -> None:
        self.poses.append(pose)

    def show_candidate(self, candidate: GraspCandidate) -> None:
        self.candidates.append(candidate)


def test_finger_grasps_on_cube_faces() -> None:
    """Verify the finger candidates generated across the x-axis faces of a cube."""
    # Arrange - Use a gripper that fits five grasps on each face of the cube
    generator = GraspGenerator()
    gripper = make_finger_gripper()

    # Act - Generate face grasps around the cube's x-axis
    candidates = generator.generate_grasps(
        Pose3D.identity(),
        CUBE_SIDE,
        CUBE_SIDE,
        CUBE_SIDE,
        gripper,
        X_AXIS_FACES,
    )

    # Assert - Expect 20 face poses, doubled by depth and by direction, at three openings each,
    #   with unique ids and normalized qualities
    assert candidates is not None
    assert len(candidates) == 20 * 2 * 2 * 3
    assert len({c.grasp_id for c in candidates}) == len(candidates)
    assert all(0.0 <= c.grasp_quality <= 1.0 for c in candidates)
    assert [c.percent_open for c in candidates[:3]] == [1.0, 0.5, 0.0]


def test_finger_grasps_across_all_axes() -> None:
    """Verify that every axis and grasp type contributes candidates for a small box."""
    # Arrange - Create a generator and a box narrower than the gripper along every axis
    generator = GraspGenerator()
    gripper = make_finger_gripper(angle_resolution_deg=30.0)

    # Act - Generate grasps using every grasp type and axis
    candidates = generator.generate_grasps(Pose3D.identity(), 0.04, 0.05, 0.06, gripper)

    # Assert - Expect candidates in multiples of three, with normalized qualities
    assert candidates
    assert len(candidates) % 3 == 0
    assert all(0.0 <= c.grasp_quality <= 1.0 for c in candidates)


def test_finger_grasps_for_too_wide_object(caplog: pytest.LogCaptureFixture) -> None:
    """Verify that an object wider than the gripper along every axis receives no grasps."""
    # Arrange - Create a generator and a cube much wider than the gripper's opening
    generator = GraspGenerator()
    gripper = make_finger_gripper()

    # Act - Generate grasps for a 0.2 m cube
    with caplog.at_level(logging.WARNING):
        candidates = generator.generate_grasps(Pose3D.identity(), 0.2, 0.2, 0.2, gripper)

    # Assert - Expect an empty list and a warning about the lack of grasps
    assert candidates == []
    assert "Generated 0 grasps" in caplog.text


def test_suction_grasps() -> None:
    """Verify the suction candidates generated over a top face matching the suction pad."""
    # Arrange - Create a generator whose ideal grasp points down onto the object
    generator = GraspGenerator()
    generator.set_ideal_grasp_pose_rpy([np.pi, 0.0, 0.0])
    gripper = make_suction_gripper()
    top_pose = Pose3D.from_xyz_rpy(z=0.3)

    # Act - Generate suction grasps over a 0.02 x 0.02 top face
    candidates = generator.generate_grasps(top_pose, 0.02, 0.02, 0.05, gripper)

    # Assert - Expect the centered grasp first, flipped to point down, with one candidate per
    #   pose and no finger openings
    assert candidates is not None
    assert len(candidates) == 8
    first = candidates[0]
    assert first.generic_grasp_pose.position.approx_equal(top_pose.position)
    assert np.allclose(first.generic_grasp_pose.z_axis, [0.0, 0.0, -1.0], atol=1e-8)
    assert all(c.percent_open is None for c in candidates)
    assert all(0.0 <= c.grasp_quality <= 1.0 for c in candidates)
    assert first.grasp_quality == max(c.grasp_quality for c in candidates)


def test_suction_grasps_leave_ideal_pose_unchanged() -> None:
    """Verify that generating suction grasps doesn't move the generator's ideal grasp pose."""
    # Arrange - Create a generator with an ideal grasp at the origin
    generator = GraspGenerator()
    gripper = make_suction_gripper()

    # Act - Generate suction grasps for an object away from the origin
    generator.generate_grasps(Pose3D.from_xyz_rpy(1.0, 2.0, 3.0), 0.04, 0.04, 0.05, gripper)

    # Assert - Expect the ideal grasp pose to remain at the origin
    assert generator.ideal_grasp_pose.position.approx_equal(Point3D.identity())


def test_set_ideal_grasp_pose_rpy() -> None:
    """Verify that setting the ideal orientation keeps the ideal position."""
    # Arrange - Create a generator with an ideal grasp pose away from the origin
    generator = GraspGenerator()
    generator.set_ideal_grasp_pose(Pose3D.from_xyz_rpy(0.1, 0.2, 0.3))

    # Act - Set a quarter turn about z as the ideal orientation
    generator.set_ideal_grasp_pose_rpy((0.0, 0.0, np.pi / 2.0))

    # Assert - Expect the position to be kept and the x-axis rotated onto y
    ideal = generator.ideal_grasp_pose
    assert ideal.position.approx_equal(Point3D(0.1, 0.2, 0.3))
    assert np.allclose(ideal.x_axis, [0.0, 1.0, 0.0], atol=1e-8)

    with pytest.raises(ValueError):
        generator.set_ideal_grasp_pose_rpy((0.0, 0.0))


def test_observers_receive_every_candidate() -> None:
    """Verify that the step callback and visualizer observe every generated candidate."""
    # Arrange - Create a verbose generator with a recording visualizer and step callback
    visualizer = RecordingVisualizer()
    observed: list[GraspCandidate] = []
    generator = GraspGenerator(visualizer=visualizer, step_callback=observed.append, verbose=True)
    gripper = make_finger_gripper()

    # Act - Generate face grasps around the cube's x-axis
    candidates = generator.generate_grasps(
        Pose3D.identity(),
        CUBE_SIDE,
        CUBE_SIDE,
        CUBE_SIDE,
        gripper,
        X_AXIS_FACES,
    )

    # Assert - Expect the cuboid, every pose, and every candidate to have been observed in order
    assert candidates is not None
    assert observed == candidates
    assert visualizer.candidates == candidates
    assert len(visualizer.cuboids) == 1
    assert len(visualizer.poses) == len(candidates) // 3


def test_quiet_generator_skips_visualizer() -> None:
    """Verify that the visualizer is only used by verbose generators."""
    # Arrange - Create a quiet generator with a recording visualizer
    visualizer = RecordingVisualizer()
    generator = GraspGenerator(visualizer=visualizer)

    # Act - Generate suction grasps
    generator.generate_grasps(Pose3D.identity(), 0.02, 0.02, 0.05, make_suction_gripper())

    # Assert - Expect that nothing was sent to the visualizer
    assert visualizer.cuboids == []
    assert visualizer.candidates == []
