"""Define a class representing a posed cuboid (box-shaped) object."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

from cuboid_grasps.spatial import Point3D, Pose3D

if TYPE_CHECKING:
    from numpy.typing import NDArray


@dataclass(frozen=True)
class Cuboid:
    """A box centered at a pose, with extents along the pose's local x, y, and z axes."""

    pose: Pose3D
    depth: float
    """Size (meters) of the cuboid along its local x-axis."""

    width: float
    """Size (meters) of the cuboid along its local y-axis."""

    height: float
    """Size (meters) of the cuboid along its local z-axis."""

    def __post_init__(self) -> None:
        """Verify that the cuboid has non-negative dimensions."""
        for name, value in (("depth", self.depth), ("width", self.width), ("height", self.height)):
            if value < 0:
                raise ValueError(f"Cuboid {name} must be non-negative, got {value}")

    @property
    def size(self) -> NDArray[np.float64]:
        """Retrieve the (depth, width, height) dimensions of the cuboid as an array."""
        return np.array([self.depth, self.width, self.height])

    @property
    def half_extents(self) -> NDArray[np.float64]:
        """Retrieve the half-dimensions of the cuboid along its local axes."""
        return self.size / 2.0

    def contains_local(self, point: Point3D) -> bool:
        """Evaluate whether a point (expressed in the cuboid's frame) lies within the cuboid."""
        return bool(np.all(np.abs(point.to_array()) <= self.half_extents))

    def top_face_corners(self) -> list[Point3D]:
        """Compute the corners of a depth-by-width face centered at the cuboid's pose.

        Suction grasps treat the given pose as the center of the object's top face, so the
        returned corners are expressed in that pose's frame at z = 0.
        """
        half_d = self.depth / 2.0
        half_w = self.width / 2.0
        return [
            Point3D(half_d, half_w, 0.0),
            Point3D(-half_d, half_w, 0.0),
            Point3D(-half_d, -half_w, 0.0),
            Point3D(half_d, -half_w, 0.0),
        ]
