"""Enumerate candidate finger-gripper grasp poses around one axis of a cuboid.

For a chosen grasp axis, the cuboid is described by a triple of directions
(a, b, c): the fingers close along c, while the palm is positioned around the a-b cross-section
of the cuboid. Poses are generated in stages that each extend one working list:

    corner -> face -> variable angle -> edge -> depth -> bidirectional

All generated poses are generic grasp poses: origin at the palm, +z pointing toward the
object, +y parallel to the direction in which the fingers close.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, NamedTuple

import numpy as np

from cuboid_grasps.geometry import grasp_reaches_cuboid
from cuboid_grasps.grasping.config import GraspAxis
from cuboid_grasps.spatial import UNIT_X, UNIT_Y, UNIT_Z, Pose3D

if TYPE_CHECKING:
    from numpy.typing import NDArray

    from cuboid_grasps.geometry import Cuboid
    from cuboid_grasps.grasping.config import GraspCandidateConfig
    from cuboid_grasps.grippers import GripperProfile
    from cuboid_grasps.spatial import Point3D

logger = logging.getLogger(__name__)

CLEARANCE_OFFSET = 0.001
"""Distance (meters) the palm is backed away from the object's surface."""


@dataclass(frozen=True)
class AxisFrame:
    """Lengths, directions, and canonical grasp rotation of a cuboid for one grasp axis."""

    axis: GraspAxis
    length_along_a: float
    length_along_b: float
    length_along_c: float
    a_dir: NDArray[np.float64]
    b_dir: NDArray[np.float64]
    c_dir: NDArray[np.float64]
    rotation_angles: tuple[float, float, float]
    """Intrinsic x-y-z rotation (radians) aligning the generic grasp frame with this axis."""

    object_width: float
    """Size (meters) of the object between the fingers when grasping along this axis."""

    @classmethod
    def from_cuboid(cls, cuboid: Cuboid, axis: GraspAxis) -> AxisFrame:
        """Construct the axis frame of the given cuboid for a grasp axis."""
        x_dir, y_dir, z_dir = cuboid.pose.x_axis, cuboid.pose.y_axis, cuboid.pose.z_axis

        if axis is GraspAxis.X:
            return AxisFrame(
                axis=axis,
                length_along_a=cuboid.width,
                length_along_b=cuboid.height,
                length_along_c=cuboid.depth,
                a_dir=y_dir,
                b_dir=z_dir,
                c_dir=x_dir,
                rotation_angles=(-np.pi / 2.0, 0.0, -np.pi / 2.0),
                object_width=cuboid.depth,
            )
        if axis is GraspAxis.Y:
            return AxisFrame(
                axis=axis,
                length_along_a=cuboid.depth,
                length_along_b=cuboid.height,
                length_along_c=cuboid.width,
                a_dir=x_dir,
                b_dir=z_dir,
                c_dir=y_dir,
                rotation_angles=(0.0, np.pi / 2.0, np.pi),
                object_width=cuboid.width,
            )
        return AxisFrame(
            axis=axis,
            length_along_a=cuboid.depth,
            length_along_b=cuboid.width,
            length_along_c=cuboid.height,
            a_dir=x_dir,
            b_dir=y_dir,
            c_dir=z_dir,
            rotation_angles=(np.pi / 2.0, np.pi / 2.0, 0.0),
            object_width=cuboid.height,
        )

    def canonical_pose(self, cuboid_pose: Pose3D) -> Pose3D:
        """Rotate the cuboid's pose so that the generic grasp frame is aligned with this axis."""
        return cuboid_pose @ Pose3D.from_intrinsic_xyz(*self.rotation_angles)

    def length(self, name: str) -> float:
        """Retrieve the cuboid's length (meters) along the named direction ('a', 'b', or 'c')."""
        return {"a": self.length_along_a, "b": self.length_along_b, "c": self.length_along_c}[name]

    def direction(self, name: str) -> NDArray[np.float64]:
        """Retrieve the named direction ('a', 'b', or 'c') expressed in the cuboid's frame."""
        return {"a": self.a_dir, "b": self.b_dir, "c": self.c_dir}[name]


class _FaceSweep(NamedTuple):
    """Describes the row of grasps placed along one face of the a-b cross-section."""

    alignment_rad: float  # Rotation about the grasp's y-axis facing the palm toward the face
    normal: str  # Direction ('a' or 'b') normal to the face
    normal_sign: float
    sweep: str  # Direction ('a' or 'b') along which grasps are spaced
    sweep_sign: float


_FACE_SWEEPS = (
    _FaceSweep(0.0, "a", -1.0, "b", 1.0),  # -a face
    _FaceSweep(-np.pi / 2.0, "b", 1.0, "a", -1.0),  # +b face
    _FaceSweep(np.pi, "a", 1.0, "b", -1.0),  # +a face
    _FaceSweep(np.pi / 2.0, "b", -1.0, "a", 1.0),  # -b face
)

_CORNERS = (
    (-1.0, -1.0, 0.0),  # (a sign, b sign, alignment rotation)
    (-1.0, 1.0, -np.pi / 2.0),
    (1.0, 1.0, np.pi),
    (1.0, -1.0, np.pi / 2.0),
)


class _EdgeSigns(NamedTuple):
    """Per-axis sign flips selecting which cuboid edges are grasped and how grasps tilt."""

    a_sign: float
    b_sign: float
    a_rot_sign: float
    b_rot_sign: float

    @classmethod
    def for_axis(cls, axis: GraspAxis) -> _EdgeSigns:
        if axis is GraspAxis.Y:
            return _EdgeSigns(a_sign=-1.0, b_sign=1.0, a_rot_sign=1.0, b_rot_sign=-1.0)
        if axis is GraspAxis.Z:
            return _EdgeSigns(-1.0, -1.0, -1.0, -1.0)
        return _EdgeSigns(1.0, 1.0, 1.0, 1.0)

    def edge_terms(self, face_index: int) -> tuple[float, float]:
        """Compute the (c-direction sign, tilt about local x) of the edge next to a face."""
        quarter = np.pi / 4.0
        return (
            (-self.a_sign, -quarter * self.a_rot_sign),  # -a face
            (self.b_sign, quarter * self.b_rot_sign),  # +b face
            (self.a_sign, quarter * self.a_rot_sign),  # +a face
            (-self.b_sign, -quarter * self.b_rot_sign),  # -b face
        )[face_index]


@dataclass(frozen=True)
class PoseBounds:
    """Observed ranges of grasp pose distances and translations, used to normalize scores."""

    min_distance: float
    max_distance: float
    min_translation: NDArray[np.float64]
    max_translation: NDArray[np.float64]

    @classmethod
    def from_poses(cls, poses: list[Pose3D], center: Point3D) -> PoseBounds:
        """Compute the bounds of the given grasp poses relative to an object's center.

        :param poses: Non-empty list of grasp poses
        :param center: Position of the object's center, in the same frame as the poses
        :return: Constructed PoseBounds instance
        :raises ValueError: If no poses are given
        """
        if not poses:
            raise ValueError("Cannot compute pose bounds from an empty list of poses.")

        positions = np.array([pose.position.to_array() for pose in poses])
        distances = np.linalg.norm(positions - center.to_array(), axis=1)
        return PoseBounds(
            min_distance=float(distances.min()),
            max_distance=float(distances.max()),
            min_translation=positions.min(axis=0),
            max_translation=positions.max(axis=0),
        )


def num_face_grasps(length: float, finger_width: float, resolution: float) -> int:
    """Compute how many grasps fit along a face of the given length.

    If the fingers are wider than the face, three grasps are still attempted.

    :param length: Length (meters) of the face
    :param finger_width: Physical width (meters) of the gripper's finger pads
    :param resolution: Desired spacing (meters) between neighboring grasps
    :return: Number of grasps placed along the face
    """
    if resolution <= 0:
        logger.warning(f"Non-positive grasp resolution {resolution}; using a single face grasp")
        return 1

    count = math.floor((length - finger_width) / resolution) + 1
    return count if count > 0 else 3


def face_offsets(length: float, finger_width: float, count: int) -> NDArray[np.float64]:
    """Compute evenly spaced grasp offsets (meters) along a face, centered about zero."""
    if count == 1:
        return np.zeros(1)
    half_span = (length - finger_width) / 2.0
    return np.linspace(-half_span, half_span, count)


def num_radial_grasps(angle_resolution_rad: float) -> int:
    """Compute how many rotated grasps are fanned around each corner of the cuboid."""
    if angle_resolution_rad <= 0:
        return 1
    return max(1, math.ceil((np.pi / 2.0) / angle_resolution_rad))


def max_variable_angle_iterations(angle_resolution_rad: float) -> int:
    """Compute the most rotated poses kept per direction in a variable-angle sweep."""
    return math.ceil(np.pi / angle_resolution_rad) + 1


def num_depth_grasps(finger_depth: float, depth_resolution: float) -> int:
    """Compute how many deeper copies of each grasp pose are generated."""
    if depth_resolution <= 0:
        return 1
    return max(1, math.ceil(finger_depth / depth_resolution))


def corner_grasp_poses(frame: AxisFrame, cuboid_pose: Pose3D, num_radial: int) -> list[Pose3D]:
    """Generate grasps fanned around the four corners of the cuboid's a-b cross-section.

    Each corner gets `num_radial` grasps spread evenly strictly within a quarter turn.
    """
    canonical = frame.canonical_pose(cuboid_pose)
    half_a = 0.5 * (frame.length_along_a + CLEARANCE_OFFSET) * frame.a_dir
    half_b = 0.5 * (frame.length_along_b + CLEARANCE_OFFSET) * frame.b_dir
    delta_angle = (np.pi / 2.0) / (num_radial + 1)

    poses = []
    for a_sign, b_sign, alignment_rad in _CORNERS:
        corner_pose = canonical.rotated_about(UNIT_Y, alignment_rad)
        corner_pose = corner_pose.translated(a_sign * half_a + b_sign * half_b)
        for k in range(1, num_radial + 1):
            poses.append(corner_pose.rotated_about(UNIT_Y, k * delta_angle))
    return poses


def _face_row(
    frame: AxisFrame,
    cuboid_pose: Pose3D,
    face: _FaceSweep,
    finger_width: float,
    resolution: float,
    edge: tuple[float, float] | None = None,
) -> list[Pose3D]:
    """Generate one row of grasps along a face, optionally moved onto the face's edge.

    :param edge: Optional (c-direction sign, tilt about local x) moving the row onto an edge
    """
    row_start = frame.canonical_pose(cuboid_pose).rotated_about(UNIT_Y, face.alignment_rad)
    normal_length = frame.length(face.normal)
    half_span = 0.5 * (normal_length + CLEARANCE_OFFSET)
    offset = face.normal_sign * half_span * frame.direction(face.normal)

    if edge is not None:
        c_sign, tilt_rad = edge
        row_start = row_start.rotated_about(UNIT_X, tilt_rad)
        offset = offset + c_sign * 0.5 * (frame.length_along_c + CLEARANCE_OFFSET) * frame.c_dir

    sweep_length = frame.length(face.sweep)
    count = num_face_grasps(sweep_length, finger_width, resolution)
    sweep_dir = face.sweep_sign * frame.direction(face.sweep)

    return [
        row_start.translated(offset + along * sweep_dir)
        for along in face_offsets(sweep_length, finger_width, count)
    ]


def face_grasp_poses(
    frame: AxisFrame,
    cuboid_pose: Pose3D,
    finger_width: float,
    resolution: float,
) -> list[Pose3D]:
    """Generate axis-aligned grasps along the four faces of the cuboid's a-b cross-section."""
    poses = []
    for face in _FACE_SWEEPS:
        poses.extend(_face_row(frame, cuboid_pose, face, finger_width, resolution))
    return poses


def edge_grasp_poses(
    frame: AxisFrame,
    cuboid_pose: Pose3D,
    finger_width: float,
    resolution: float,
) -> list[Pose3D]:
    """Generate grasps along the cuboid's edges, tilted 45 degrees toward the cuboid."""
    signs = _EdgeSigns.for_axis(frame.axis)
    poses = []
    for face_index, face in enumerate(_FACE_SWEEPS):
        edge = signs.edge_terms(face_index)
        poses.extend(_face_row(frame, cuboid_pose, face, finger_width, resolution, edge))
    return poses


def variable_angle_grasp_poses(
    base_poses: list[Pose3D],
    cuboid: Cuboid,
    angle_resolution_rad: float,
    max_depth: float,
) -> list[Pose3D]:
    """Sweep each base pose about its local y-axis while the fingers still reach the cuboid.

    Each base pose is rotated repeatedly in both directions. Rotated poses are kept until the
    first one whose palm-to-fingertip segment no longer crosses the cuboid.

    :param base_poses: Face grasp poses from which the sweeps begin
    :param cuboid: Cuboid being grasped
    :param angle_resolution_rad: Rotation (radians) between consecutive swept poses
    :param max_depth: Maximum palm-to-fingertip distance (meters) of the gripper
    :return: List of rotated grasp poses (excluding the base poses)
    """
    if angle_resolution_rad <= 0:
        logger.warning(f"Skipping variable angle grasps (angle resolution {angle_resolution_rad})")
        return []

    max_iterations = max_variable_angle_iterations(angle_resolution_rad)
    poses = []
    for base_pose in base_poses:
        for step_rad in (angle_resolution_rad, -angle_resolution_rad):
            grasp_pose = base_pose.rotated_about(UNIT_Y, step_rad)
            for _ in range(max_iterations):
                if not grasp_reaches_cuboid(grasp_pose, cuboid, max_depth):
                    break
                poses.append(grasp_pose)
                grasp_pose = grasp_pose.rotated_about(UNIT_Y, step_rad)
            else:
                logger.warning("Exceeded max iterations while creating variable angle grasps")
    return poses


def depth_grasp_poses(
    poses: list[Pose3D],
    finger_depth: float,
    depth_resolution: float,
) -> list[Pose3D]:
    """Copy each pose at increasing depths along its own approach (z) axis."""
    num_depths = num_depth_grasps(finger_depth, depth_resolution)
    delta_depth = finger_depth / num_depths
    return [
        pose.translated_local(z=j * delta_depth) for pose in poses for j in range(1, num_depths + 1)
    ]


def bidirectional_grasp_poses(poses: list[Pose3D]) -> list[Pose3D]:
    """Copy each pose flipped by a half turn about its own approach (z) axis."""
    return [pose.rotated_about(UNIT_Z, np.pi) for pose in poses]


def generate_axis_grasp_poses(
    cuboid: Cuboid,
    axis: GraspAxis,
    gripper: GripperProfile,
    config: GraspCandidateConfig,
) -> list[Pose3D]:
    """Enumerate generic finger grasp poses around one axis of a cuboid.

    :param cuboid: Cuboid being grasped
    :param axis: Axis of the cuboid along which the fingers close
    :param gripper: Profile of the finger gripper
    :param config: Selects which grasp pose strategies are used
    :return: List of generic grasp poses, in order of generation
    """
    pad_width = gripper.require_finger().gripper_finger_width
    frame = AxisFrame.from_cuboid(cuboid, axis)
    angle_res = gripper.angle_resolution_rad

    grasp_poses: list[Pose3D] = []

    if config.enable_corner_grasps:
        grasp_poses.extend(corner_grasp_poses(frame, cuboid.pose, num_radial_grasps(angle_res)))
    num_corner_poses = len(grasp_poses)
    logger.debug(f"Added {num_corner_poses} corner grasp poses around the {axis.name} axis")

    if config.enable_face_grasps:
        grasp_poses.extend(
            face_grasp_poses(frame, cuboid.pose, pad_width, gripper.grasp_resolution),
        )

    if config.enable_variable_angle_grasps:
        face_poses = grasp_poses[num_corner_poses:]  # Corner grasps don't need variable angles
        grasp_poses.extend(
            variable_angle_grasp_poses(face_poses, cuboid, angle_res, gripper.grasp_max_depth),
        )

    if config.enable_edge_grasps:
        grasp_poses.extend(
            edge_grasp_poses(frame, cuboid.pose, pad_width, gripper.grasp_resolution),
        )

    grasp_poses.extend(
        depth_grasp_poses(grasp_poses, gripper.finger_depth, gripper.grasp_depth_resolution),
    )
    grasp_poses.extend(bidirectional_grasp_poses(grasp_poses))

    logger.debug(f"Created {len(grasp_poses)} grasp poses around the {axis.name} axis")
    return grasp_poses
