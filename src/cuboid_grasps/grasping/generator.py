"""Define a class that generates scored grasp candidates for cuboid-shaped objects."""

from __future__ import annotations

import logging
from functools import partial
from typing import TYPE_CHECKING, Callable, Sequence

from cuboid_grasps.geometry import Cuboid
from cuboid_grasps.grasping.candidates import GraspCandidate, GraspCandidateAssembler
from cuboid_grasps.grasping.config import GraspAxis, GraspCandidateConfig, derive_axis_config
from cuboid_grasps.grasping.finger_poses import AxisFrame, PoseBounds, generate_axis_grasp_poses
from cuboid_grasps.grasping.scoring import GraspScorer
from cuboid_grasps.grasping.suction_poses import generate_suction_grasp_poses
from cuboid_grasps.grippers import EndEffectorType
from cuboid_grasps.spatial import Pose3D
from cuboid_grasps.visualization import NullGraspVisualizer

if TYPE_CHECKING:
    from cuboid_grasps.grasping.config import GraspScoreWeights
    from cuboid_grasps.grippers import GripperProfile, HandPostureController
    from cuboid_grasps.visualization import GraspVisualizer

logger = logging.getLogger(__name__)

StepCallback = Callable[[GraspCandidate], None]
"""Called with each grasp candidate immediately after it's scored."""


class GraspGenerator:
    """Generates geometric grasps for cuboids, without physics or contact wrench analysis."""

    def __init__(
        self,
        weights: GraspScoreWeights | None = None,
        visualizer: GraspVisualizer | None = None,
        posture_controller: HandPostureController | None = None,
        step_callback: StepCallback | None = None,
        verbose: bool = False,
        preferred_depth_ratio: float = 0.0,
    ) -> None:
        """Initialize the grasp generator.

        :param weights: Weights used to score grasp candidates (defaults to equal weights)
        :param visualizer: Receives poses and candidates as they're generated (if verbose)
        :param posture_controller: Converts finger openings into hand postures
        :param step_callback: Optional function called after each candidate is scored
        :param verbose: Whether to send generated poses and candidates to the visualizer
        :param preferred_depth_ratio: Preferred normalized palm distance in [0, 1]
        """
        self.scorer = GraspScorer(weights, preferred_depth_ratio)
        self.assembler = GraspCandidateAssembler(posture_controller)
        self.visualizer = NullGraspVisualizer() if visualizer is None else visualizer
        self.step_callback = step_callback
        self.verbose = verbose

        self._ideal_grasp_pose = Pose3D.identity()

    @property
    def ideal_grasp_pose(self) -> Pose3D:
        """Retrieve the pose whose orientation grasps are scored against."""
        return self._ideal_grasp_pose

    def set_ideal_grasp_pose(self, pose: Pose3D) -> None:
        """Set the pose whose orientation grasps are scored against."""
        self._ideal_grasp_pose = pose

    def set_ideal_grasp_pose_rpy(self, rpy: Sequence[float]) -> None:
        """Set the ideal grasp orientation from intrinsic rotations about x, y, then z.

        The translation of the ideal grasp pose is left unchanged.

        :param rpy: Sequence of three angles (radians)
        :raises ValueError: If the sequence doesn't contain exactly three angles
        """
        if len(rpy) != 3:
            raise ValueError(f"Ideal grasp orientation needs 3 angles, got {len(rpy)}")

        current = self._ideal_grasp_pose
        rotation = Pose3D.from_intrinsic_xyz(rpy[0], rpy[1], rpy[2], current.ref_frame)
        self._ideal_grasp_pose = rotation.with_position(current.position)

    def generate_grasps(
        self,
        cuboid_pose: Pose3D,
        depth: float,
        width: float,
        height: float,
        gripper: GripperProfile,
        config: GraspCandidateConfig | None = None,
    ) -> list[GraspCandidate] | None:
        """Generate grasp candidates for a cuboid using the given gripper.

        :param cuboid_pose: Pose of the cuboid's center (top-face center for suction grippers)
        :param depth: Size (meters) of the cuboid along its local x-axis
        :param width: Size (meters) of the cuboid along its local y-axis
        :param height: Size (meters) of the cuboid along its local z-axis
        :param gripper: Profile of the end-effector used to grasp
        :param config: Selects which grasp types are generated (defaults to all)
        :return: List of grasp candidates, or None if the gripper's type is unsupported
        """
        if gripper.end_effector_type is EndEffectorType.FINGER:
            return self.generate_finger_grasps(cuboid_pose, depth, width, height, gripper, config)
        if gripper.end_effector_type is EndEffectorType.SUCTION:
            return self.generate_suction_grasps(cuboid_pose, depth, width, height, gripper, config)

        logger.error(f"Unsupported end-effector type: {gripper.end_effector_type}")
        return None

    def generate_finger_grasps(
        self,
        cuboid_pose: Pose3D,
        depth: float,
        width: float,
        height: float,
        gripper: GripperProfile,
        config: GraspCandidateConfig | None = None,
    ) -> list[GraspCandidate]:
        """Generate finger grasp candidates around each enabled axis of a cuboid.

        Axes along which the cuboid is wider than the gripper's max grasp width only receive
        edge and corner grasps.
        """
        config = GraspCandidateConfig() if config is None else config
        cuboid = Cuboid(cuboid_pose, depth, width, height)
        finger = gripper.require_finger()

        if self.verbose:
            self.visualizer.show_cuboid(cuboid)

        candidates: list[GraspCandidate] = []
        for axis in GraspAxis:
            if not config.generates_axis(axis):
                continue

            logger.debug(f"Generating grasps around the {axis.name.lower()}-axis of the cuboid")
            object_width = AxisFrame.from_cuboid(cuboid, axis).object_width
            axis_config = derive_axis_config(config, object_width, finger.max_grasp_width)
            candidates.extend(self.generate_cuboid_axis_grasps(cuboid, axis, gripper, axis_config))

        self._log_total(candidates)
        return candidates

    def generate_cuboid_axis_grasps(
        self,
        cuboid: Cuboid,
        axis: GraspAxis,
        gripper: GripperProfile,
        config: GraspCandidateConfig,
    ) -> list[GraspCandidate]:
        """Generate finger grasp candidates around one axis of a cuboid.

        :param cuboid: Cuboid being grasped
        :param axis: Axis of the cuboid along which the fingers close
        :param gripper: Profile of the finger gripper
        :param config: Selects which grasp pose strategies are used
        :return: List of grasp candidates, in order of generation
        """
        grasp_poses = generate_axis_grasp_poses(cuboid, axis, gripper, config)
        if not grasp_poses:
            logger.debug(f"No grasp poses were created around the {axis.name} axis")
            return []

        bounds = PoseBounds.from_poses(grasp_poses, cuboid.pose.position)
        logger.debug(f"min/max distance = {bounds.min_distance}, {bounds.max_distance}")
        object_width = AxisFrame.from_cuboid(cuboid, axis).object_width

        candidates: list[GraspCandidate] = []
        num_poses_added = 0
        for grasp_pose in grasp_poses:
            if self.verbose:
                self.visualizer.show_grasp_pose(grasp_pose)

            score_opening = partial(
                self.scorer.score_finger_grasp,
                grasp_pose,
                self._ideal_grasp_pose,
                cuboid.pose,
                bounds,
            )
            new_candidates = self.assembler.finger_candidates(
                grasp_pose,
                gripper,
                cuboid.pose,
                object_width,
                score_opening,
            )
            if new_candidates:
                num_poses_added += 1
            else:
                logger.debug("Unable to add grasp: no gripper opening fits around the object")

            for candidate in new_candidates:
                self._record(candidate, candidates)

        logger.info(f"Added {num_poses_added} of {len(grasp_poses)} grasp poses created")
        return candidates

    def generate_suction_grasps(
        self,
        cuboid_top_pose: Pose3D,
        depth: float,
        width: float,
        height: float,
        gripper: GripperProfile,
        config: GraspCandidateConfig | None = None,
    ) -> list[GraspCandidate]:
        """Generate suction grasp candidates over the top face of a cuboid.

        Suction grasps don't use the grasp candidate config; it's accepted so that every
        generation method shares one signature.

        :param cuboid_top_pose: Pose of the center of the cuboid's top face
        :return: List of grasp candidates, the centered grasp first
        """
        cuboid = Cuboid(cuboid_top_pose, depth, width, height)
        if self.verbose:
            self.visualizer.show_cuboid(cuboid)

        grasp_poses = generate_suction_grasp_poses(cuboid, gripper, self._ideal_grasp_pose)

        candidates: list[GraspCandidate] = []
        for grasp_pose in grasp_poses:
            if self.verbose:
                self.visualizer.show_grasp_pose(grasp_pose)

            quality = self.scorer.score_suction_grasp(
                grasp_pose,
                self._ideal_grasp_pose,
                cuboid,
                gripper,
            )
            candidate = self.assembler.suction_candidate(grasp_pose, gripper, cuboid.pose, quality)
            self._record(candidate, candidates)

        self._log_total(candidates)
        return candidates

    def _record(self, candidate: GraspCandidate, candidates: list[GraspCandidate]) -> None:
        """Append a scored candidate to the output, notifying any observers."""
        if self.verbose:
            self.visualizer.show_candidate(candidate)
        if self.step_callback is not None:
            self.step_callback(candidate)
        candidates.append(candidate)

    @staticmethod
    def _log_total(candidates: list[GraspCandidate]) -> None:
        if not candidates:
            logger.warning("Generated 0 grasps")
        else:
            logger.info(f"Generated {len(candidates)} grasps")
