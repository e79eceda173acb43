"""Enumerate candidate suction grasp poses over the top face of a cuboid."""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING

import numpy as np

from cuboid_grasps.spatial import UNIT_X, UNIT_Z

if TYPE_CHECKING:
    from numpy.typing import NDArray

    from cuboid_grasps.geometry import Cuboid
    from cuboid_grasps.grippers import GripperProfile
    from cuboid_grasps.spatial import Pose3D

logger = logging.getLogger(__name__)

SWEEP_TOLERANCE = 1e-9
"""Slack used when deciding whether the last step of a sweep lands on its limit."""


def orient_toward_ideal(top_pose: Pose3D, ideal_pose: Pose3D) -> Pose3D:
    """Flip the cuboid's top-face pose so its axes best match the ideal grasp orientation.

    The pose is first flipped a half turn about its x-axis if its z-axis opposes the ideal
    z-axis, then a half turn about its z-axis if its x-axis opposes the ideal x-axis.
    """
    anchor = top_pose
    if np.dot(anchor.z_axis, ideal_pose.z_axis) < 0:
        logger.debug("Flipping the top-face pose about its x-axis")
        anchor = anchor.rotated_about(UNIT_X, np.pi)

    if np.dot(anchor.x_axis, ideal_pose.x_axis) < 0:
        logger.debug("Flipping the top-face pose about its z-axis")
        anchor = anchor.rotated_about(UNIT_Z, np.pi)

    return anchor


def sweep_values(step: float, limit: float, include_limit: bool = True) -> NDArray[np.float64]:
    """Compute the positive multiples of a step up to a limit.

    :param step: Increment between consecutive values
    :param limit: Upper bound on the values
    :param include_limit: Whether a value exactly at the limit is kept
    :return: Array of values [step, 2 * step, ...] within the limit (empty if none fit)
    """
    if step <= 0:
        logger.warning(f"Skipping sweep with non-positive step {step}")
        return np.zeros(0)
    if limit <= 0:
        return np.zeros(0)

    if include_limit:
        count = math.floor(limit / step + SWEEP_TOLERANCE)
    else:
        count = math.ceil(limit / step - SWEEP_TOLERANCE) - 1

    return step * np.arange(1, max(count, 0) + 1)


def yaw_sweep(poses: list[Pose3D], angle_resolution_rad: float) -> list[Pose3D]:
    """Copy each pose rotated about its z-axis in steps strictly less than a full turn."""
    yaws = sweep_values(angle_resolution_rad, 2.0 * np.pi, include_limit=False)
    return [pose.rotated_about(UNIT_Z, yaw) for pose in poses for yaw in yaws]


def depth_sweep(poses: list[Pose3D], depth_resolution: float, depth_range: float) -> list[Pose3D]:
    """Copy each pose pushed deeper along its z-axis, up to the given depth range."""
    depths = sweep_values(depth_resolution, depth_range)
    return [pose.translated_local(z=z) for pose in poses for z in depths]


def lateral_sweep(poses: list[Pose3D], axis: str, increment: float, limit: float) -> list[Pose3D]:
    """Copy each pose shifted both ways along its local x- or y-axis.

    :param poses: Poses to be copied
    :param axis: Local axis ("x" or "y") along which the copies are shifted
    :param increment: Spacing (meters) between consecutive shifts
    :param limit: Largest shift (meters) in either direction
    :return: List of shifted poses, alternating positive and negative shifts
    """
    if axis not in ("x", "y"):
        raise ValueError(f"Suction grasps can only be shifted along x or y, not '{axis}'")

    offsets = sweep_values(increment, limit)
    shifted = []
    for pose in poses:
        for offset in offsets:
            shifted.append(pose.translated_local(**{axis: offset}))
            shifted.append(pose.translated_local(**{axis: -offset}))
    return shifted


def max_lateral_offset(cuboid: Cuboid, gripper: GripperProfile) -> float:
    """Compute how far (meters) a suction grasp may shift while the pad stays on the top face."""
    suction = gripper.require_suction()
    return (
        min(
            cuboid.depth - suction.active_suction_range_x,
            cuboid.width - suction.active_suction_range_y,
        )
        / 2.0
    )


def generate_suction_grasp_poses(
    cuboid: Cuboid,
    gripper: GripperProfile,
    ideal_pose: Pose3D,
) -> list[Pose3D]:
    """Enumerate suction grasp poses over the top face of a cuboid.

    The centered grasp is always generated first. Each subsequent sweep (yaw, depth, y, then x)
    copies every pose generated so far, so the sweeps compose multiplicatively.

    :param cuboid: Cuboid whose pose is the center of its top face
    :param gripper: Profile of the suction gripper
    :param ideal_pose: Ideal grasp pose, whose orientation is preferred
    :return: List of generic grasp poses, in order of generation
    """
    anchor = orient_toward_ideal(cuboid.pose, ideal_pose)
    grasp_poses = [anchor.translated_local(z=gripper.grasp_min_depth)]

    grasp_poses.extend(yaw_sweep(grasp_poses, gripper.angle_resolution_rad))
    logger.debug(f"{len(grasp_poses)} suction grasp poses after the yaw sweep")

    depth_poses = depth_sweep(grasp_poses, gripper.grasp_depth_resolution, gripper.finger_depth)
    grasp_poses.extend(depth_poses)
    logger.debug(f"{len(grasp_poses)} suction grasp poses after the depth sweep")

    xy_max = max_lateral_offset(cuboid, gripper)
    xy_increment = gripper.grasp_resolution
    grasp_poses.extend(lateral_sweep(grasp_poses, "y", xy_increment, xy_max))
    grasp_poses.extend(lateral_sweep(grasp_poses, "x", xy_increment, xy_max))
    logger.debug(f"Created {len(grasp_poses)} suction grasp poses")

    return grasp_poses
