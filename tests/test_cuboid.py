"""Unit tests for the Cuboid class."""

import numpy as np
import pytest

from cuboid_grasps.geometry import Cuboid
from cuboid_grasps.spatial import Point3D, Pose3D


def test_cuboid_rejects_negative_dimensions() -> None:
    """Verify that a cuboid cannot have a negative size."""
    # Act/Assert - Expect a ValueError for a negative width
    with pytest.raises(ValueError, match="width"):
        Cuboid(Pose3D.identity(), 0.1, -0.1, 0.1)


def test_cuboid_size_and_containment() -> None:
    """Verify the size of a cuboid and which local points it contains."""
    # Arrange - Create a 0.2 x 0.1 x 0.05 cuboid
    cuboid = Cuboid(Pose3D.identity(), 0.2, 0.1, 0.05)

    # Act/Assert - Expect the size as an array and containment within the half-extents
    assert np.allclose(cuboid.size, [0.2, 0.1, 0.05])
    assert cuboid.contains_local(Point3D(0.09, 0.04, 0.02))
    assert not cuboid.contains_local(Point3D(0.11, 0.0, 0.0))


def test_cuboid_top_face_corners() -> None:
    """Verify that the top-face corners span the cuboid's depth and width at z = 0."""
    # Arrange - Create a 0.2 x 0.1 x 0.05 cuboid
    cuboid = Cuboid(Pose3D.identity(), 0.2, 0.1, 0.05)

    # Act - Compute the corners of its top face
    corners = np.array([c.to_array() for c in cuboid.top_face_corners()])

    # Assert - Expect four corners at z = 0 spanning the depth and width
    assert corners.shape == (4, 3)
    assert np.allclose(corners[:, 2], 0.0)
    assert np.allclose(corners.max(axis=0)[:2], [0.1, 0.05])
    assert np.allclose(corners.min(axis=0)[:2], [-0.1, -0.05])
