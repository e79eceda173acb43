"""Define grasp candidates and the functions that assemble them and derive their waypoints."""

from __future__ import annotations

import itertools
import logging
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, Iterator

import numpy as np

from cuboid_grasps.grippers import EndEffectorType, LinearFingerPostureController

if TYPE_CHECKING:
    from numpy.typing import NDArray

    from cuboid_grasps.grippers import GripperProfile, HandPosture, HandPostureController
    from cuboid_grasps.spatial import Pose3D

logger = logging.getLogger(__name__)

FINGER_PERCENT_OPENINGS = (1.0, 0.5, 0.0)
"""Gripper openings (widest first) at which each finger grasp pose becomes a candidate."""


@dataclass(frozen=True)
class Header:
    """Stamps data with the time it was created and the frame it is expressed in."""

    frame_id: str
    stamp_s: float = field(default_factory=time.time)


@dataclass(frozen=True)
class GripperTranslation:
    """A straight-line motion of the gripper along a stamped unit direction."""

    header: Header
    direction: NDArray[np.float64]
    desired_distance: float
    min_distance: float = 0.0


@dataclass(frozen=True)
class GraspCandidate:
    """A complete grasp: effector pose, approach and retreat motions, postures, and quality."""

    grasp_id: str
    header: Header
    grasp_pose: Pose3D
    """Pose of the end-effector, i.e., the generic grasp pose offset into the effector's frame."""

    pre_grasp_approach: GripperTranslation
    post_grasp_retreat: GripperTranslation
    pre_grasp_posture: HandPosture
    grasp_posture: HandPosture
    grasp_quality: float
    gripper: GripperProfile
    object_pose: Pose3D
    generic_grasp_pose: Pose3D
    percent_open: float | None = None
    """Fraction of the usable finger opening used on approach (None for suction grasps)."""


@dataclass(frozen=True)
class GraspWaypoints:
    """End-effector poses traversed while executing a grasp candidate."""

    pregrasp_pose: Pose3D
    grasp_pose: Pose3D
    lift_pose: Pose3D
    retreat_pose: Pose3D

    def __iter__(self) -> Iterator[Pose3D]:
        """Provide an iterator over the waypoints in order of execution."""
        yield from (self.pregrasp_pose, self.grasp_pose, self.lift_pose, self.retreat_pose)


def compute_approach_and_retreat(
    gripper: GripperProfile,
    stamp_s: float | None = None,
) -> tuple[GripperTranslation, GripperTranslation]:
    """Compute the pre-grasp approach and post-grasp retreat motions of a gripper.

    The approach points opposite the grasp-to-effector translation; the retreat reverses it.
    Both are expressed in the frame of the link preceding the end-effector.

    :param gripper: Profile of the gripper
    :param stamp_s: Timestamp (seconds) of the motions (defaults to the current time)
    :return: Tuple of the (approach, retreat) gripper translations
    """
    stamp_s = time.time() if stamp_s is None else stamp_s
    header = Header(gripper.parent_link, stamp_s)

    offset = gripper.grasp_pose_to_eef_pose.position.to_array()
    approach_dir = -offset / np.linalg.norm(offset)

    approach = GripperTranslation(
        header=header,
        direction=approach_dir,
        desired_distance=gripper.grasp_max_depth + gripper.approach_distance_desired,
    )
    retreat = GripperTranslation(
        header=header,
        direction=-approach_dir,
        desired_distance=gripper.grasp_max_depth + gripper.retreat_distance_desired,
    )
    return approach, retreat


class GraspCandidateAssembler:
    """Turns generic grasp poses into grasp candidates with unique ids."""

    def __init__(self, posture_controller: HandPostureController | None = None) -> None:
        """Initialize the assembler and its grasp id counter.

        :param posture_controller: Converts finger openings into postures (defaults to linear)
        """
        if posture_controller is None:
            posture_controller = LinearFingerPostureController()
        self.posture_controller = posture_controller
        self._grasp_ids = itertools.count()

    def next_grasp_id(self) -> str:
        """Generate the next unique grasp id."""
        return f"Grasp{next(self._grasp_ids)}"

    def _assemble(
        self,
        generic_pose: Pose3D,
        gripper: GripperProfile,
        object_pose: Pose3D,
        quality: float,
        pre_grasp_posture: HandPosture,
        percent_open: float | None,
    ) -> GraspCandidate:
        stamp_s = time.time()
        approach, retreat = compute_approach_and_retreat(gripper, stamp_s)
        eef_pose = generic_pose @ gripper.grasp_pose_to_eef_pose

        return GraspCandidate(
            grasp_id=self.next_grasp_id(),
            header=Header(eef_pose.ref_frame, stamp_s),
            grasp_pose=eef_pose,
            pre_grasp_approach=approach,
            post_grasp_retreat=retreat,
            pre_grasp_posture=pre_grasp_posture,
            grasp_posture=gripper.grasp_posture,
            grasp_quality=quality,
            gripper=gripper,
            object_pose=object_pose,
            generic_grasp_pose=generic_pose,
            percent_open=percent_open,
        )

    def finger_candidates(
        self,
        generic_pose: Pose3D,
        gripper: GripperProfile,
        object_pose: Pose3D,
        object_width: float,
        score_opening: Callable[[float], float],
    ) -> list[GraspCandidate]:
        """Create finger grasp candidates at fully open, half open, and minimum openings.

        Openings that the gripper cannot achieve around the object are skipped.

        :param generic_pose: Generic grasp pose shared by the candidates
        :param gripper: Profile of the finger gripper
        :param object_pose: Pose of the object's center
        :param object_width: Size (meters) of the object between the fingers
        :param score_opening: Maps a fraction of the gripper's opening to a grasp quality
        :return: List of up to three grasp candidates, widest opening first
        """
        min_finger_open_on_approach = object_width + 2.0 * gripper.grasp_padding_on_approach

        candidates = []
        for percent_open in FINGER_PERCENT_OPENINGS:
            posture = self.posture_controller.set_grasp_width(
                gripper,
                percent_open,
                min_finger_open_on_approach,
            )
            if posture is None:
                logger.error(
                    f"Unable to set grasp width to {percent_open} open. Stats: "
                    f"min_finger_open_on_approach = {min_finger_open_on_approach}, "
                    f"object_width = {object_width}, "
                    f"grasp_padding_on_approach = {gripper.grasp_padding_on_approach}",
                )
                continue

            quality = score_opening(percent_open)
            candidates.append(
                self._assemble(generic_pose, gripper, object_pose, quality, posture, percent_open),
            )
        return candidates

    def suction_candidate(
        self,
        generic_pose: Pose3D,
        gripper: GripperProfile,
        object_pose: Pose3D,
        quality: float,
    ) -> GraspCandidate:
        """Create the single grasp candidate of a suction grasp pose."""
        if gripper.end_effector_type is not EndEffectorType.SUCTION:
            raise ValueError(f"Gripper '{gripper.name}' cannot create suction grasp candidates.")
        return self._assemble(
            generic_pose,
            gripper,
            object_pose,
            quality,
            gripper.pre_grasp_posture,
            percent_open=None,
        )


def get_pre_grasp_direction(candidate: GraspCandidate, ee_parent_link: str) -> NDArray[np.float64]:
    """Compute the pre-grasp approach direction of a candidate.

    If the approach is expressed in the end-effector's parent link, it's rotated by the grasp
    pose's orientation into the grasp pose's reference frame.

    :param candidate: Grasp candidate whose approach direction is computed
    :param ee_parent_link: Name of the link preceding the end-effector
    :return: Approach direction (unit vector)
    """
    approach = candidate.pre_grasp_approach
    if approach.header.frame_id == ee_parent_link:
        return candidate.grasp_pose.rotation_matrix @ approach.direction
    return approach.direction


def get_pre_grasp_pose(candidate: GraspCandidate, ee_parent_link: str) -> Pose3D:
    """Compute the end-effector pose backed away from a grasp along its approach direction."""
    direction = get_pre_grasp_direction(candidate, ee_parent_link)
    distance = candidate.pre_grasp_approach.desired_distance
    return candidate.grasp_pose.translated(-direction * distance)


def get_grasp_waypoints(candidate: GraspCandidate) -> GraspWaypoints:
    """Compute the pre-grasp, grasp, lift, and retreat waypoints of a grasp candidate.

    The lift raises the grasp pose along +z of its reference frame; the retreat then moves
    along the candidate's retreat direction, rotated by the lifted pose's orientation.
    """
    gripper = candidate.gripper
    grasp_pose = candidate.grasp_pose
    pregrasp_pose = get_pre_grasp_pose(candidate, gripper.parent_link)

    lift_pose = grasp_pose.translated(np.array([0.0, 0.0, gripper.lift_distance_desired]))

    retreat = candidate.post_grasp_retreat
    retreat_dir = retreat.direction / np.linalg.norm(retreat.direction)
    retreat_pose = lift_pose.translated(
        lift_pose.rotation_matrix @ retreat_dir * retreat.desired_distance,
    )

    return GraspWaypoints(pregrasp_pose, grasp_pose, lift_pose, retreat_pose)
