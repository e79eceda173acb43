"""Define a class to represent rigid-body poses in 3D space."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any, Tuple, TypeVar

import numpy as np

from cuboid_grasps.spatial.frames import DEFAULT_FRAME
from cuboid_grasps.spatial.points import Point3D
from cuboid_grasps.spatial.rotations import EulerRPY, Quaternion

if TYPE_CHECKING:
    from collections.abc import Sequence

    from numpy.typing import NDArray

MultiplyT = TypeVar("MultiplyT", "Pose3D", Point3D)

XYZ_RPY = Tuple[float, float, float, float, float, float]
"""A 6-tuple of (x, y, z, roll, pitch, yaw) values."""


@dataclass(frozen=True)
class Pose3D:
    """A position and orientation in 3D space."""

    position: Point3D
    orientation: Quaternion
    ref_frame: str = DEFAULT_FRAME

    def __matmul__(self, other: MultiplyT) -> MultiplyT:
        """Compose the homogeneous transformation matrix of this pose with another object.

        :param other: 3D pose or 3D point right-multiplied with this pose
        :return: Result from the matrix multiplication
        """
        if isinstance(other, Pose3D):
            return self._matrix_multiply_with_pose(other)
        if isinstance(other, Point3D):
            return self._matrix_multiply_with_point(other)

        raise NotImplementedError(f"Cannot matrix-multiply Pose3D with: {other}")

    def _matrix_multiply_with_pose(self, other: Pose3D) -> Pose3D:
        """Multiply the homogeneous transformation matrix of this pose with another pose.

        Consider: pose_A_B @ pose_B_C = pose_A_C, meaning the pose of 'C' relative to frame A.
            Therefore, we see that the resulting pose takes the "left-side" reference frame.

        :param other: Pose defining the right-side matrix in the multiplication
        :return: Pose3D resulting from the matrix multiplication
        """
        left_m = self.to_homogeneous_matrix()
        right_m = other.to_homogeneous_matrix()
        result_ref_frame = self.ref_frame  # Result takes the "leftmost" reference frame
        return Pose3D.from_homogeneous_matrix(left_m @ right_m, result_ref_frame)

    def _matrix_multiply_with_point(self, other: Point3D) -> Point3D:
        """Multiply the homogeneous transformation matrix of this pose with a 3D point.

        :param other: 3D point treated as a homogeneous coordinate in the multiplication
        :return: Point3D resulting from the matrix multiplication
        """
        result = self.to_homogeneous_matrix() @ other.to_homogeneous_coordinate()
        return Point3D.from_homogeneous_coordinate(result)

    def __str__(self) -> str:
        """Return a human-readable string representation of the Pose3D."""
        xyz_rpy_strings = [f"{value:.3f}" for value in self.to_xyz_rpy()]
        xyz_rpy = ", ".join(xyz_rpy_strings)
        return f'Pose3D([{xyz_rpy}], ref_frame="{self.ref_frame}")'

    @classmethod
    def identity(cls, ref_frame: str = DEFAULT_FRAME) -> Pose3D:
        """Construct a Pose3D corresponding to the identity transformation."""
        return Pose3D(Point3D.identity(), Quaternion.identity(), ref_frame)

    @classmethod
    def from_xyz_rpy(
        cls,
        x: float = 0.0,
        y: float = 0.0,
        z: float = 0.0,
        roll_rad: float = 0.0,
        pitch_rad: float = 0.0,
        yaw_rad: float = 0.0,
        ref_frame: str = DEFAULT_FRAME,
    ) -> Pose3D:
        """Construct a Pose3D from the given XYZ coordinates and Euler RPY angles.

        :param x: Translation along the x-axis
        :param y: Translation along the y-axis
        :param z: Translation along the z-axis
        :param roll_rad: Fixed-frame roll angle (radians) about the x-axis
        :param pitch_rad: Fixed-frame pitch angle (radians) about the y-axis
        :param yaw_rad: Fixed-frame yaw angle (radians) about the z-axis
        :param ref_frame: Reference frame of the constructed pose
        :return: Constructed Pose3D instance
        """
        position = Point3D(x, y, z)
        orientation = EulerRPY(roll_rad, pitch_rad, yaw_rad).to_quaternion()

        return Pose3D(position, orientation, ref_frame)

    @classmethod
    def from_axis_angle(
        cls,
        axis: NDArray[np.float64],
        angle_rad: float,
        ref_frame: str = DEFAULT_FRAME,
    ) -> Pose3D:
        """Construct a pure rotation (zero translation) about the given axis."""
        return Pose3D(Point3D.identity(), Quaternion.from_axis_angle(axis, angle_rad), ref_frame)

    @classmethod
    def from_intrinsic_xyz(
        cls,
        alpha_x_rad: float,
        alpha_y_rad: float,
        alpha_z_rad: float,
        ref_frame: str = DEFAULT_FRAME,
    ) -> Pose3D:
        """Construct a pure rotation from successive rotations about the moving x, y, then z axes.

        The resulting rotation matrix is R = Rx(alpha_x) * Ry(alpha_y) * Rz(alpha_z).
        """
        q_x = Quaternion.from_axis_angle(np.array([1.0, 0.0, 0.0]), alpha_x_rad)
        q_y = Quaternion.from_axis_angle(np.array([0.0, 1.0, 0.0]), alpha_y_rad)
        q_z = Quaternion.from_axis_angle(np.array([0.0, 0.0, 1.0]), alpha_z_rad)
        return Pose3D(Point3D.identity(), q_x * q_y * q_z, ref_frame)

    def to_xyz_rpy(self) -> XYZ_RPY:
        """Convert the pose into a tuple of its (x, y, z, roll, pitch, yaw) values.

        :return: 6-tuple of (x, y, z, roll, pitch, yaw) values with angles in radians
        """
        return (*self.position.to_tuple(), *self.orientation.to_euler_rpy().to_tuple())

    @classmethod
    def from_sequence(
        cls,
        data: XYZ_RPY | Sequence[float],
        ref_frame: str = DEFAULT_FRAME,
    ) -> Pose3D:
        """Construct a Pose3D from the given sequence of XYZ-RPY data.

        :param data: Sequence of six floats specifying (x, y, z, roll, pitch, yaw)
        :param ref_frame: Reference frame of the constructed Pose3D
        :return: Constructed Pose3D instance
        """
        if len(data) != 6:
            raise ValueError(f"Cannot construct Pose3D from sequence of length {len(data)}.")
        x, y, z, roll, pitch, yaw = data
        return Pose3D.from_xyz_rpy(x, y, z, roll, pitch, yaw, ref_frame)

    @classmethod
    def from_homogeneous_matrix(cls, matrix: np.ndarray, ref_frame: str = DEFAULT_FRAME) -> Pose3D:
        """Construct a Pose3D from a 4x4 homogeneous transformation matrix."""
        if matrix.shape != (4, 4):
            raise ValueError(f"Expected a 4x4 matrix but received shape {matrix.shape}")

        position = Point3D(float(matrix[0, 3]), float(matrix[1, 3]), float(matrix[2, 3]))
        orientation = Quaternion.from_homogeneous_matrix(matrix)
        return Pose3D(position, orientation, ref_frame)

    def to_homogeneous_matrix(self) -> np.ndarray:
        """Convert the Pose3D into a 4x4 homogeneous transformation matrix."""
        matrix = self.orientation.to_homogeneous_matrix()
        matrix[:3, 3] = self.position.to_array()
        return matrix

    @classmethod
    def from_yaml_data(cls, pose_data: dict | list, default_frame: str = DEFAULT_FRAME) -> Pose3D:
        """Construct a Pose3D instance from data imported from YAML.

        :param pose_data: Dictionary or list of YAML data representing a 3D pose
        :param default_frame: Default frame used for the pose, if the YAML doesn't provide one
        :return: Constructed Pose3D instance
        :raises TypeError: If the given YAML data has an unsupported type
        """
        if isinstance(pose_data, dict):
            xyz_rpy = pose_data["xyz_rpy"]
            ref_frame = pose_data["frame"]
        elif isinstance(pose_data, (list, tuple)):
            xyz_rpy = pose_data
            ref_frame = default_frame
        else:
            raise TypeError(f"Cannot load Pose3D from YAML data of type {type(pose_data)}")

        return Pose3D.from_sequence(xyz_rpy, ref_frame)

    def to_yaml_data(self) -> dict[str, Any]:
        """Convert the pose into a dictionary suitable for export to YAML."""
        return {"xyz_rpy": list(self.to_xyz_rpy()), "frame": self.ref_frame}

    @property
    def rotation_matrix(self) -> NDArray[np.float64]:
        """Retrieve the 3x3 rotation matrix of the pose's orientation."""
        return self.orientation.to_rotation_matrix()

    @property
    def x_axis(self) -> NDArray[np.float64]:
        """Retrieve the pose's local x-axis expressed in its reference frame."""
        return self.rotation_matrix[:, 0]

    @property
    def y_axis(self) -> NDArray[np.float64]:
        """Retrieve the pose's local y-axis expressed in its reference frame."""
        return self.rotation_matrix[:, 1]

    @property
    def z_axis(self) -> NDArray[np.float64]:
        """Retrieve the pose's local z-axis expressed in its reference frame."""
        return self.rotation_matrix[:, 2]

    def rotated_about(self, axis: NDArray[np.float64], angle_rad: float) -> Pose3D:
        """Rotate the pose about one of its own (local) axes, keeping its position fixed.

        :param axis: Rotation axis expressed in the pose's local frame
        :param angle_rad: Right-handed rotation angle (radians)
        :return: Rotated pose, i.e., self @ rotation
        """
        return self @ Pose3D.from_axis_angle(axis, angle_rad)

    def translated_local(self, x: float = 0.0, y: float = 0.0, z: float = 0.0) -> Pose3D:
        """Translate the pose along its own (local) axes."""
        return self @ Pose3D(Point3D(x, y, z), Quaternion.identity())

    def translated(self, offset: NDArray[np.float64]) -> Pose3D:
        """Translate the pose by an offset expressed in its reference frame."""
        new_position = Point3D.from_array(self.position.to_array() + np.asarray(offset))
        return self.with_position(new_position)

    def with_position(self, position: Point3D) -> Pose3D:
        """Create a copy of the pose with its position replaced."""
        return replace(self, position=position)

    def inverse(self, pose_frame: str) -> Pose3D:
        """Return a pose representing the inverse transformation of this pose.

        :param pose_frame: Name of the reference frame represented by this pose
        """
        inverse_matrix = np.linalg.inv(self.to_homogeneous_matrix())
        return Pose3D.from_homogeneous_matrix(inverse_matrix, pose_frame)

    def approx_equal(self, other: Pose3D, rtol: float = 1e-05, atol: float = 1e-08) -> bool:
        """Evaluate whether another Pose3D is approximately equal to this one."""
        return (
            self.ref_frame == other.ref_frame
            and self.position.approx_equal(other.position, rtol=rtol, atol=atol)
            and self.orientation.approx_equal(other.orientation, rtol=rtol, atol=atol)
        )
