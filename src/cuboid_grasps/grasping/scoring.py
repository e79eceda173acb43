"""Define normalized sub-scores for grasp poses and combine them into a single quality value.

Every sub-score lies within [0, 1], where 1 is best, so that the final weighted average of the
sub-scores also lies within [0, 1].
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Sequence

import numpy as np

from cuboid_grasps.geometry import Cuboid
from cuboid_grasps.grasping.config import GraspScoreWeights

if TYPE_CHECKING:
    from numpy.typing import NDArray

    from cuboid_grasps.grasping.finger_poses import PoseBounds
    from cuboid_grasps.grippers import GripperProfile, SuctionParameters
    from cuboid_grasps.spatial import Pose3D

logger = logging.getLogger(__name__)


def score_rotations_from_desired(grasp_pose: Pose3D, ideal_pose: Pose3D) -> NDArray[np.float64]:
    """Score how closely each axis of a grasp pose aligns with the same axis of an ideal pose.

    :param grasp_pose: Grasp pose being scored
    :param ideal_pose: Pose with the ideal grasp orientation
    :return: Array of (x, y, z) scores, where 1 means parallel and 0 means opposite axes
    """
    grasp_axes = grasp_pose.rotation_matrix
    ideal_axes = ideal_pose.rotation_matrix
    cosines = np.clip(np.sum(grasp_axes * ideal_axes, axis=0), -1.0, 1.0)
    angles = np.arccos(cosines)
    return (np.pi - angles) / np.pi


def score_translation_in_range(grasp_pose: Pose3D, bounds: PoseBounds) -> NDArray[np.float64]:
    """Normalize each coordinate of a grasp's position within the observed range of positions.

    :param grasp_pose: Grasp pose being scored
    :param bounds: Observed bounds over all generated grasp poses
    :return: Array of (x, y, z) values in [0, 1] (0 along axes where the range is degenerate)
    """
    position = grasp_pose.position.to_array()
    span = bounds.max_translation - bounds.min_translation
    scores = np.zeros(3)
    nonzero = span > 0
    scores[nonzero] = (position[nonzero] - bounds.min_translation[nonzero]) / span[nonzero]
    return np.clip(scores, 0.0, 1.0)


def score_translation_from_ideal(
    grasp_pose: Pose3D,
    ideal_pose: Pose3D,
    scale: float,
) -> NDArray[np.float64]:
    """Score how close each coordinate of a grasp's position is to an ideal position.

    :param grasp_pose: Grasp pose being scored
    :param ideal_pose: Pose at the ideal grasp position
    :param scale: Distance (meters) at which a coordinate's score drops to zero
    :return: Array of (x, y, z) scores in [0, 1]
    :raises ValueError: If the scale is not positive
    """
    if scale <= 0:
        raise ValueError(f"Translation score scale must be positive, got {scale}")

    error = np.abs(grasp_pose.position.to_array() - ideal_pose.position.to_array())
    return np.clip(1.0 - error / scale, 0.0, 1.0)


def score_distance_to_palm(
    grasp_pose: Pose3D,
    object_pose: Pose3D,
    bounds: PoseBounds,
    preferred_ratio: float = 0.0,
) -> float:
    """Score a grasp's distance from the object's center relative to the observed distances.

    :param grasp_pose: Grasp pose being scored
    :param object_pose: Pose of the object's center
    :param bounds: Observed bounds over all generated grasp poses
    :param preferred_ratio: Preferred normalized distance in [0, 1] (0 = closest observed)
    :return: Score in [0, 1], highest at the preferred distance
    """
    distance = grasp_pose.position.distance_to(object_pose.position)
    span = bounds.max_distance - bounds.min_distance
    ratio = 0.0 if span <= 0 else (distance - bounds.min_distance) / span

    worst_error = max(preferred_ratio, 1.0 - preferred_ratio)
    score = 1.0 - abs(ratio - preferred_ratio) / worst_error
    return float(np.clip(score, 0.0, 1.0))


def score_grasp_width(percent_open: float) -> float:
    """Score the opening of a finger gripper, favoring wider openings."""
    return float(np.clip(percent_open**2, 0.0, 1.0))


def score_grasp_overhang(
    grasp_pose: Pose3D,
    suction: SuctionParameters,
    object_pose: Pose3D,
    object_size: NDArray[np.float64],
) -> NDArray[np.float64]:
    """Score how much of a suction pad lies over the object's top face.

    The top face is projected into the grasp frame and bounded by an axis-aligned box. For each
    suction voxel, the fraction of its x (and y) extent that lies within that box is computed.

    :param grasp_pose: Generic suction grasp pose being scored
    :param suction: Suction parameters, including the pad's voxels in the grasp frame
    :param object_pose: Pose of the center of the object's top face
    :param object_size: (depth, width, height) of the object (meters)
    :return: Array of (x, y) scores in [0, 1], averaged over the pad's voxels
    """
    depth, width, height = (float(v) for v in object_size)
    top_face = Cuboid(object_pose, depth, width, height)
    grasp_t_ref = grasp_pose.inverse(pose_frame="grasp")
    top_corners = top_face.top_face_corners()
    corners = np.array([(grasp_t_ref @ (object_pose @ c)).to_array() for c in top_corners])
    face_min = corners.min(axis=0)
    face_max = corners.max(axis=0)

    voxel_scores = []
    for voxel in suction.suction_voxels:
        voxel_min = voxel.bottom_left.to_array()
        voxel_max = voxel.top_right.to_array()
        overlap = np.minimum(voxel_max, face_max) - np.maximum(voxel_min, face_min)
        extent = voxel_max - voxel_min
        fractions = np.ones(2)
        for i in range(2):
            if extent[i] > 0:
                fractions[i] = max(0.0, overlap[i]) / extent[i]
        voxel_scores.append(fractions)

    return np.clip(np.mean(voxel_scores, axis=0), 0.0, 1.0)


def weighted_average(scores: Sequence[float], weights: Sequence[float]) -> float:
    """Combine sub-scores using the weighted average sum(w * s) / sum(w).

    :raises ValueError: If the number of scores and weights differ or the weights sum to zero
    """
    scores_arr = np.asarray(scores, dtype=float)
    weights_arr = np.asarray(weights, dtype=float)
    if scores_arr.shape != weights_arr.shape:
        raise ValueError(f"Got {scores_arr.size} scores but {weights_arr.size} weights")

    total_weight = float(weights_arr.sum())
    if total_weight <= 0:
        raise ValueError("Cannot average grasp scores whose weights sum to zero.")

    return float(np.dot(scores_arr, weights_arr) / total_weight)


class GraspScorer:
    """Computes grasp quality as a weighted average of normalized sub-scores."""

    def __init__(
        self,
        weights: GraspScoreWeights | None = None,
        preferred_depth_ratio: float = 0.0,
    ) -> None:
        """Initialize the scorer with the given weights.

        :param weights: Weight of each sub-score (defaults to equal weights)
        :param preferred_depth_ratio: Preferred normalized palm distance in [0, 1]
        """
        if not 0.0 <= preferred_depth_ratio <= 1.0:
            raise ValueError(
                f"Preferred depth ratio must be within [0, 1], got {preferred_depth_ratio}",
            )

        self.weights = GraspScoreWeights() if weights is None else weights
        self.preferred_depth_ratio = preferred_depth_ratio

    def finger_sub_scores(
        self,
        grasp_pose: Pose3D,
        ideal_pose: Pose3D,
        object_pose: Pose3D,
        bounds: PoseBounds,
        percent_open: float,
    ) -> NDArray[np.float64]:
        """Compute the (width, orientation x/y/z, depth, translation x/y/z) finger sub-scores."""
        width_score = score_grasp_width(percent_open)
        orientation_scores = score_rotations_from_desired(grasp_pose, ideal_pose)
        distance_score = score_distance_to_palm(
            grasp_pose,
            object_pose,
            bounds,
            self.preferred_depth_ratio,
        )
        translation_scores = 1.0 - score_translation_in_range(grasp_pose, bounds)  # Prefer minimum

        return np.array([width_score, *orientation_scores, distance_score, *translation_scores])

    def score_finger_grasp(
        self,
        grasp_pose: Pose3D,
        ideal_pose: Pose3D,
        object_pose: Pose3D,
        bounds: PoseBounds,
        percent_open: float,
    ) -> float:
        """Score a finger grasp pose at the given gripper opening.

        :param grasp_pose: Generic grasp pose being scored
        :param ideal_pose: Pose with the ideal grasp orientation
        :param object_pose: Pose of the object's center
        :param bounds: Observed bounds over all grasp poses generated for the same axis
        :param percent_open: Fraction in [0, 1] of the gripper's usable opening
        :return: Grasp quality in [0, 1]
        """
        scores = self.finger_sub_scores(grasp_pose, ideal_pose, object_pose, bounds, percent_open)
        weights = self.weights.finger_weights()
        total = weighted_average(scores, weights)

        logger.debug(
            f"Finger grasp score {total:.4f} from width {scores[0]:.3f}, "
            f"orientation ({scores[1]:.3f}, {scores[2]:.3f}, {scores[3]:.3f}), "
            f"distance {scores[4]:.3f}, "
            f"translation ({scores[5]:.3f}, {scores[6]:.3f}, {scores[7]:.3f}), weights {weights}",
        )
        return total

    def suction_sub_scores(
        self,
        grasp_pose: Pose3D,
        ideal_pose: Pose3D,
        cuboid: Cuboid,
        gripper: GripperProfile,
    ) -> NDArray[np.float64]:
        """Compute the (orientation x/y/z, translation x/y/z, overhang x/y) suction sub-scores."""
        ideal_at_object = ideal_pose.with_position(cuboid.pose.position)
        orientation_scores = score_rotations_from_desired(grasp_pose, ideal_at_object)

        scale = float(np.linalg.norm(cuboid.size)) / 2.0 + gripper.grasp_max_depth
        translation_scores = score_translation_from_ideal(grasp_pose, ideal_at_object, scale)

        overhang_scores = score_grasp_overhang(
            grasp_pose,
            gripper.require_suction(),
            cuboid.pose,
            cuboid.size,
        )
        return np.array([*orientation_scores, *translation_scores, *overhang_scores])

    def score_suction_grasp(
        self,
        grasp_pose: Pose3D,
        ideal_pose: Pose3D,
        cuboid: Cuboid,
        gripper: GripperProfile,
    ) -> float:
        """Score a suction grasp pose.

        :param grasp_pose: Generic grasp pose being scored
        :param ideal_pose: Pose with the ideal grasp orientation
        :param cuboid: Cuboid whose pose is the center of its top face
        :param gripper: Profile of the suction gripper
        :return: Grasp quality in [0, 1]
        """
        scores = self.suction_sub_scores(grasp_pose, ideal_pose, cuboid, gripper)
        weights = self.weights.suction_weights()
        total = weighted_average(scores, weights)

        logger.debug(
            f"Suction grasp score {total:.4f} from "
            f"orientation ({scores[0]:.3f}, {scores[1]:.3f}, {scores[2]:.3f}), "
            f"translation ({scores[3]:.3f}, {scores[4]:.3f}, {scores[5]:.3f}), "
            f"overhang ({scores[6]:.3f}, {scores[7]:.3f}), weights {weights}",
        )
        return total
