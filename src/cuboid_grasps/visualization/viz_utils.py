"""Utility classes and functions to build trimesh markers for grasp visualization."""

from __future__ import annotations

from dataclasses import astuple, dataclass
from typing import TYPE_CHECKING

import numpy as np
import trimesh

if TYPE_CHECKING:
    from cuboid_grasps.geometry import Cuboid
    from cuboid_grasps.spatial import Pose3D


@dataclass(frozen=True)
class RGBA:
    """An RGB color with an alpha (A) value specifying transparency."""

    red: int  # Red value (between 0 and 255)
    green: int  # Green value (between 0 and 255)
    blue: int  # Blue value (between 0 and 255)
    alpha: int  # Alpha value (between 0 and 255)

    def __post_init__(self) -> None:
        """Verify that the constructed RGBA is valid."""
        for attr_name in ["red", "green", "blue", "alpha"]:
            attr_value = getattr(self, attr_name)
            if attr_value < 0 or attr_value > 255:
                raise ValueError(f"RGBA expects {attr_name} within [0, 255], got {attr_value}")

    @classmethod
    def from_quality(cls, quality: float, alpha: int = 255) -> RGBA:
        """Map a grasp quality in [0, 1] onto a color ranging from red (0) to green (1)."""
        clipped = float(np.clip(quality, 0.0, 1.0))
        return RGBA(round(255 * (1.0 - clipped)), round(255 * clipped), 0, alpha)


def create_axes_markers(length: float) -> trimesh.Trimesh:
    """Create RGB axes markers where the x-axis is red, y-axis is green, and z-axis is blue."""
    radius = length * 0.03  # Each axis will be a cylinder

    x_axis = trimesh.creation.cylinder(radius=radius, height=length)
    x_axis.apply_transform(trimesh.transformations.rotation_matrix(np.pi / 2, [0, 1, 0]))
    x_axis.apply_translation([length / 2, 0, 0])
    x_axis.visual.face_colors = (255, 0, 0, 255)

    y_axis = trimesh.creation.cylinder(radius=radius, height=length)
    y_axis.apply_transform(trimesh.transformations.rotation_matrix(-np.pi / 2, [1, 0, 0]))
    y_axis.apply_translation([0, length / 2, 0])
    y_axis.visual.face_colors = (0, 255, 0, 255)

    z_axis = trimesh.creation.cylinder(radius=radius, height=length)
    z_axis.apply_translation([0, 0, length / 2])
    z_axis.visual.face_colors = (0, 0, 255, 255)

    return trimesh.util.concatenate([x_axis, y_axis, z_axis])


def create_pose_axes(pose: Pose3D, length: float) -> trimesh.Trimesh:
    """Create RGB axes markers placed at the given pose."""
    axes = create_axes_markers(length)
    axes.apply_transform(pose.to_homogeneous_matrix())
    return axes


def create_approach_marker(pose: Pose3D, length: float, color: RGBA) -> trimesh.Trimesh:
    """Create a thin cylinder along the pose's z-axis showing the grasp's approach direction."""
    marker = trimesh.creation.cylinder(radius=length * 0.05, height=length)
    marker.apply_translation([0, 0, length / 2])
    marker.apply_transform(pose.to_homogeneous_matrix())
    marker.visual.face_colors = astuple(color)
    return marker


def create_cuboid_mesh(cuboid: Cuboid, color: RGBA) -> trimesh.Trimesh:
    """Create a box mesh matching the given cuboid's pose and dimensions."""
    box = trimesh.creation.box(
        extents=cuboid.size,
        transform=cuboid.pose.to_homogeneous_matrix(),
    )
    box.visual.face_colors = astuple(color)
    return box
