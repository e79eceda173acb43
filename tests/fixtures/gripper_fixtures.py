"""Define functions constructing example gripper profiles for tests."""

from __future__ import annotations

from typing import Any

from cuboid_grasps.grippers import (
    EndEffectorType,
    FingerParameters,
    GripperProfile,
    HandPosture,
    SuctionParameters,
)
from cuboid_grasps.spatial import Pose3D

FINGER_JOINTS = ("left_finger_joint", "right_finger_joint")


def make_finger_gripper(**overrides: Any) -> GripperProfile:
    """Construct a parallel-jaw gripper profile, optionally overriding any of its fields."""
    finger_overrides = overrides.pop("finger_overrides", {})
    finger = FingerParameters(
        **{
            "max_grasp_width": 0.1,
            "max_finger_width": 0.1,
            "min_finger_width": 0.0,
            "gripper_finger_width": 0.0,
            **finger_overrides,
        },
    )
    fields: dict[str, Any] = {
        "name": "test_hand",
        "end_effector_type": EndEffectorType.FINGER,
        "grasp_pose_to_eef_pose": Pose3D.from_xyz_rpy(z=-0.1),
        "pre_grasp_posture": HandPosture(FINGER_JOINTS, (0.05, 0.05)),
        "grasp_posture": HandPosture(FINGER_JOINTS, (0.0, 0.0)),
        "parent_link": "wrist_link",
        "angle_resolution_deg": 45.0,
        "grasp_resolution": 0.015625,
        "grasp_depth_resolution": 0.02,
        "grasp_min_depth": 0.0,
        "grasp_max_depth": 0.02,
        "approach_distance_desired": 0.05,
        "retreat_distance_desired": 0.06,
        "lift_distance_desired": 0.04,
        "grasp_padding_on_approach": 0.005,
        "finger": finger,
    }
    fields.update(overrides)
    return GripperProfile(**fields)


def make_suction_gripper(**overrides: Any) -> GripperProfile:
    """Construct a suction gripper profile, optionally overriding any of its fields."""
    suction_overrides = overrides.pop("suction_overrides", {})
    suction = SuctionParameters(
        **{
            "active_suction_range_x": 0.02,
            "active_suction_range_y": 0.02,
            "suction_regions_x": 2,
            "suction_regions_y": 2,
            **suction_overrides,
        },
    )
    fields: dict[str, Any] = {
        "name": "test_suction",
        "end_effector_type": EndEffectorType.SUCTION,
        "grasp_pose_to_eef_pose": Pose3D.from_xyz_rpy(z=-0.05),
        "pre_grasp_posture": HandPosture(("suction_joint",), (0.0,)),
        "grasp_posture": HandPosture(("suction_joint",), (1.0,)),
        "parent_link": "wrist_link",
        "angle_resolution_deg": 90.0,
        "grasp_resolution": 0.01,
        "grasp_depth_resolution": 0.01,
        "grasp_min_depth": 0.0,
        "grasp_max_depth": 0.01,
        "suction": suction,
    }
    fields.update(overrides)
    return GripperProfile(**fields)
