"""Define configuration toggles and scoring weights for grasp generation."""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields, replace
from enum import Enum

logger = logging.getLogger(__name__)


class GraspAxis(Enum):
    """Axis of a cuboid along which the gripper's fingers close."""

    X = 0
    Y = 1
    Z = 2


@dataclass(frozen=True)
class GraspCandidateConfig:
    """Selects which grasp pose strategies and cuboid axes are used during generation."""

    enable_corner_grasps: bool = True
    enable_face_grasps: bool = True
    enable_variable_angle_grasps: bool = True
    enable_edge_grasps: bool = True
    generate_x_axis_grasps: bool = True
    generate_y_axis_grasps: bool = True
    generate_z_axis_grasps: bool = True

    def disable_all_grasp_types(self) -> GraspCandidateConfig:
        """Create a copy of the config with every grasp pose strategy disabled."""
        return replace(
            self,
            enable_corner_grasps=False,
            enable_face_grasps=False,
            enable_variable_angle_grasps=False,
            enable_edge_grasps=False,
        )

    def enable_all_grasp_types(self) -> GraspCandidateConfig:
        """Create a copy of the config with every grasp pose strategy enabled."""
        return replace(
            self,
            enable_corner_grasps=True,
            enable_face_grasps=True,
            enable_variable_angle_grasps=True,
            enable_edge_grasps=True,
        )

    def generates_axis(self, axis: GraspAxis) -> bool:
        """Evaluate whether grasps should be generated around the given cuboid axis."""
        if axis is GraspAxis.X:
            return self.generate_x_axis_grasps
        if axis is GraspAxis.Y:
            return self.generate_y_axis_grasps
        return self.generate_z_axis_grasps


def derive_axis_config(
    config: GraspCandidateConfig,
    object_width: float,
    max_grasp_width: float,
) -> GraspCandidateConfig:
    """Restrict the grasp strategies used for an axis along which the object may be too wide.

    Objects wider than the gripper's maximum grasp width can still be grasped across their
    edges and corners, but not across their faces.

    :param config: Configuration requested by the caller
    :param object_width: Size (meters) of the object along the axis the fingers close on
    :param max_grasp_width: Widest object (meters) grasped across its faces
    :return: Configuration to use for the axis (the input itself if no restriction applies)
    """
    if object_width <= max_grasp_width:
        return config

    logger.debug(
        f"Object width {object_width} exceeds max grasp width {max_grasp_width}; "
        "only edge and corner grasps remain enabled",
    )
    restricted = config.disable_all_grasp_types()
    return replace(
        restricted,
        enable_edge_grasps=config.enable_edge_grasps,
        enable_corner_grasps=config.enable_corner_grasps,
    )


@dataclass(frozen=True)
class GraspScoreWeights:
    """Non-negative weights combining grasp sub-scores into a weighted average.

    Weights need not sum to one because the final score is normalized by their total.
    """

    orientation_x_score_weight: float = 1.0
    orientation_y_score_weight: float = 1.0
    orientation_z_score_weight: float = 1.0
    translation_x_score_weight: float = 1.0
    translation_y_score_weight: float = 1.0
    translation_z_score_weight: float = 1.0
    depth_score_weight: float = 1.0
    width_score_weight: float = 1.0
    overhang_score_weight: float = 1.0

    def __post_init__(self) -> None:
        """Verify that every weight is non-negative."""
        for field in fields(self):
            value = getattr(self, field.name)
            if value < 0:
                raise ValueError(
                    f"Grasp score weight '{field.name}' must be non-negative, got {value}",
                )

    def finger_weights(self) -> tuple[float, ...]:
        """Weights for (width, orientation x/y/z, depth, translation x/y/z) finger sub-scores."""
        return (
            self.width_score_weight,
            self.orientation_x_score_weight,
            self.orientation_y_score_weight,
            self.orientation_z_score_weight,
            self.depth_score_weight,
            self.translation_x_score_weight,
            self.translation_y_score_weight,
            self.translation_z_score_weight,
        )

    def suction_weights(self) -> tuple[float, ...]:
        """Weights for (orientation x/y/z, translation x/y/z, overhang x/y) suction sub-scores."""
        return (
            self.orientation_x_score_weight,
            self.orientation_y_score_weight,
            self.orientation_z_score_weight,
            self.translation_x_score_weight,
            self.translation_y_score_weight,
            self.translation_z_score_weight,
            self.overhang_score_weight,
            self.overhang_score_weight,
        )
