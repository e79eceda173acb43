"""Define the static geometry and limits describing an end-effector used for grasping."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from functools import cached_property

import numpy as np

from cuboid_grasps.grippers.postures import HandPosture
from cuboid_grasps.spatial import Point3D, Pose3D


class EndEffectorType(Enum):
    """Kinds of end-effectors supported by the grasp generator."""

    FINGER = 1
    SUCTION = 2

    @classmethod
    def from_name(cls, name: str) -> EndEffectorType:
        """Retrieve the end-effector type with the given (case-insensitive) name."""
        try:
            return cls[name.upper()]
        except KeyError as error:
            raise ValueError(f"Unknown end-effector type: '{name}'") from error


@dataclass(frozen=True)
class SuctionVoxel:
    """A rectangular sub-region of a suction pad, expressed in the end-effector's grasp frame."""

    center_point: Point3D
    top_left: Point3D
    top_right: Point3D
    bottom_left: Point3D
    bottom_right: Point3D

    @classmethod
    def from_center(cls, center_point: Point3D, x_width: float, y_width: float) -> SuctionVoxel:
        """Construct a suction voxel of the given size centered at a point."""
        cx, cy, cz = center_point
        half_x = x_width / 2.0
        half_y = y_width / 2.0
        return SuctionVoxel(
            center_point=center_point,
            top_left=Point3D(cx - half_x, cy + half_y, cz),
            top_right=Point3D(cx + half_x, cy + half_y, cz),
            bottom_left=Point3D(cx - half_x, cy - half_y, cz),
            bottom_right=Point3D(cx + half_x, cy - half_y, cz),
        )

    @property
    def x_width(self) -> float:
        """Size (meters) of the voxel along the grasp frame's x-axis."""
        return self.top_right.x - self.top_left.x

    @property
    def y_width(self) -> float:
        """Size (meters) of the voxel along the grasp frame's y-axis."""
        return self.top_left.y - self.bottom_left.y


@dataclass(frozen=True)
class FingerParameters:
    """Parameters specific to parallel-jaw (finger) grippers."""

    max_grasp_width: float
    """Widest object dimension (meters) for which face and variable-angle grasps are generated."""

    max_finger_width: float
    """Distance (meters) between the fingers when the gripper is fully open."""

    min_finger_width: float
    """Distance (meters) between the fingers when the gripper is fully closed."""

    gripper_finger_width: float
    """Physical width (meters) of a finger pad, used so generated grasps overlap the object."""

    def __post_init__(self) -> None:
        """Verify that the finger parameters describe a valid range of openings."""
        if self.min_finger_width > self.max_finger_width:
            raise ValueError(
                f"Minimum finger width ({self.min_finger_width}) exceeds "
                f"maximum finger width ({self.max_finger_width})",
            )


@dataclass(frozen=True)
class SuctionParameters:
    """Parameters specific to suction grippers."""

    active_suction_range_x: float
    active_suction_range_y: float
    suction_regions_x: int
    suction_regions_y: int

    def __post_init__(self) -> None:
        """Verify that the suction pad is split into at least one region along each axis."""
        if self.suction_regions_x < 1 or self.suction_regions_y < 1:
            raise ValueError(
                f"Suction pad needs at least one region per axis, got "
                f"{self.suction_regions_x} x {self.suction_regions_y}",
            )

    @cached_property
    def suction_voxels(self) -> tuple[SuctionVoxel, ...]:
        """Split the active suction area into a grid of voxels centered on the grasp frame."""
        voxel_x = self.active_suction_range_x / self.suction_regions_x
        voxel_y = self.active_suction_range_y / self.suction_regions_y

        voxels = []
        for ix in range(self.suction_regions_x):
            for iy in range(self.suction_regions_y):
                center = Point3D(
                    -self.active_suction_range_x / 2.0 + voxel_x * (ix + 0.5),
                    -self.active_suction_range_y / 2.0 + voxel_y * (iy + 0.5),
                    0.0,
                )
                voxels.append(SuctionVoxel.from_center(center, voxel_x, voxel_y))
        return tuple(voxels)


@dataclass(frozen=True)
class GripperProfile:
    """Static description of one end-effector, shared read-only across grasp generation calls.

    The end-effector type determines which of the type-specific parameter blocks is used.
    """

    name: str
    end_effector_type: EndEffectorType
    grasp_pose_to_eef_pose: Pose3D
    """Converts a generic grasp pose into this end-effector's frame of reference."""

    pre_grasp_posture: HandPosture
    """Posture of the end-effector in its "open" position."""

    grasp_posture: HandPosture
    """Posture of the end-effector in its "closed" position."""

    parent_link: str
    """Last link in the kinematic chain before the end-effector."""

    angle_resolution_deg: float
    """Grasps are generated at increments of this angle (degrees)."""

    grasp_resolution: float
    grasp_depth_resolution: float
    grasp_min_depth: float
    """Minimum amount (meters) the fingers must overlap the object."""

    grasp_max_depth: float
    """Maximum distance (meters) from the fingertips inward at which an object can be grasped."""

    approach_distance_desired: float = 0.05
    """Approach distance (meters) in addition to grasp_max_depth."""

    retreat_distance_desired: float = 0.05
    """Retreat distance (meters) in addition to grasp_max_depth."""

    lift_distance_desired: float = 0.05
    grasp_padding_on_approach: float = 0.005
    finger: FingerParameters | None = None
    suction: SuctionParameters | None = None

    def __post_init__(self) -> None:
        """Verify that the profile is internally consistent."""
        if self.end_effector_type is EndEffectorType.FINGER and self.finger is None:
            raise ValueError(f"Finger gripper '{self.name}' is missing its finger parameters.")
        if self.end_effector_type is EndEffectorType.SUCTION and self.suction is None:
            raise ValueError(f"Suction gripper '{self.name}' is missing its suction parameters.")

        if self.grasp_min_depth > self.grasp_max_depth:
            raise ValueError(
                f"Gripper '{self.name}' has min depth {self.grasp_min_depth} "
                f"greater than max depth {self.grasp_max_depth}",
            )

        if np.linalg.norm(self.grasp_pose_to_eef_pose.position.to_array()) == 0:
            raise ValueError(
                f"Gripper '{self.name}' needs a nonzero grasp-to-end-effector translation "
                "to define its approach direction.",
            )

        if self.pre_grasp_posture.joint_names != self.grasp_posture.joint_names:
            raise ValueError(
                f"Gripper '{self.name}' has open and closed postures for different joints.",
            )

    @property
    def finger_depth(self) -> float:
        """Range of depths (meters) over which grasps are sampled."""
        return self.grasp_max_depth - self.grasp_min_depth

    @property
    def angle_resolution_rad(self) -> float:
        """Angular increment (radians) at which rotated grasps are generated."""
        return math.radians(self.angle_resolution_deg)

    def require_finger(self) -> FingerParameters:
        """Retrieve the finger parameters of the profile.

        :raises ValueError: If the profile doesn't describe a finger gripper
        """
        if self.finger is None:
            raise ValueError(f"Gripper '{self.name}' has no finger parameters.")
        return self.finger

    def require_suction(self) -> SuctionParameters:
        """Retrieve the suction parameters of the profile.

        :raises ValueError: If the profile doesn't describe a suction gripper
        """
        if self.suction is None:
            raise ValueError(f"Gripper '{self.name}' has no suction parameters.")
        return self.suction

    def describe(self) -> str:
        """Summarize the profile's parameters in a human-readable string."""
        lines = [
            f"Gripper '{self.name}' ({self.end_effector_type.name.lower()})",
            f"  parent link:            {self.parent_link}",
            f"  grasp -> eef transform: {self.grasp_pose_to_eef_pose}",
            f"  angle resolution:       {self.angle_resolution_deg} deg",
            f"  grasp resolution:       {self.grasp_resolution} m",
            f"  depth resolution:       {self.grasp_depth_resolution} m",
            f"  depth range:            [{self.grasp_min_depth}, {self.grasp_max_depth}] m",
        ]
        if self.finger is not None:
            lines.append(
                f"  finger width range:     [{self.finger.min_finger_width}, "
                f"{self.finger.max_finger_width}] m (pad {self.finger.gripper_finger_width} m)",
            )
        if self.suction is not None:
            lines.append(
                f"  suction area:           {self.suction.active_suction_range_x} x "
                f"{self.suction.active_suction_range_y} m "
                f"in {len(self.suction.suction_voxels)} voxels",
            )
        return "\n".join(lines)
