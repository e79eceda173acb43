"""Define line segment intersection tests against the faces of a cuboid.

A segment is parameterized as p(t) = start + t * (end - start) for t in [0, 1]. Each face of a
cuboid lies in a plane where one local coordinate equals +/- half of the cuboid's size along
that axis; the segment hits the face if it crosses that plane within [0, 1] at a point whose
other two coordinates lie within the face's extents.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, NamedTuple

from cuboid_grasps.spatial import Point3D

if TYPE_CHECKING:
    from cuboid_grasps.geometry.cuboids import Cuboid
    from cuboid_grasps.spatial import Pose3D


class _CuboidFace(NamedTuple):
    """Describes one face of a cuboid in terms of its local coordinate indices."""

    normal_index: int  # Coordinate held fixed on the face's plane
    sign: float  # Which side of the cuboid the face lies on
    u_index: int  # First in-plane coordinate
    v_index: int  # Second in-plane coordinate


_CUBOID_FACES = (
    _CuboidFace(2, 1.0, 0, 1),  # XY faces (z = +/- height/2)
    _CuboidFace(2, -1.0, 0, 1),
    _CuboidFace(1, 1.0, 0, 2),  # XZ faces (y = +/- width/2)
    _CuboidFace(1, -1.0, 0, 2),
    _CuboidFace(0, 1.0, 1, 2),  # YZ faces (x = +/- depth/2)
    _CuboidFace(0, -1.0, 1, 2),
)


def plane_crossing_parameter(offset: float, start: float, end: float) -> float | None:
    """Find the segment parameter t at which one coordinate reaches the given plane offset.

    :param offset: Value of the coordinate on the plane (e.g., height / 2)
    :param start: Value of the coordinate at the segment's start (t = 0)
    :param end: Value of the coordinate at the segment's end (t = 1)
    :return: Parameter t of the crossing, or None if the segment is parallel to the plane
    """
    if end == start:
        return None
    return (offset - start) / (end - start)


def face_intersection(
    t: float,
    u1: float,
    v1: float,
    u2: float,
    v2: float,
    extent_u: float,
    extent_v: float,
) -> tuple[float, float] | None:
    """Test whether a segment crossing a face's plane at parameter t lies within the face.

    :param t: Segment parameter at which the segment crosses the face's plane
    :param u1: First in-plane coordinate of the segment's start point
    :param v1: Second in-plane coordinate of the segment's start point
    :param u2: First in-plane coordinate of the segment's end point
    :param v2: Second in-plane coordinate of the segment's end point
    :param extent_u: Full size of the face along its first in-plane coordinate
    :param extent_v: Full size of the face along its second in-plane coordinate
    :return: In-plane (u, v) coordinates of the intersection, or None if there is no hit
    """
    if not 0.0 <= t <= 1.0:
        return None  # The plane isn't crossed within the segment

    u = u1 + t * (u2 - u1)
    v = v1 + t * (v2 - v1)
    if -extent_u / 2.0 <= u <= extent_u / 2.0 and -extent_v / 2.0 <= v <= extent_v / 2.0:
        return (u, v)

    return None


def find_segment_cuboid_intersection(
    start: Point3D,
    end: Point3D,
    cuboid: Cuboid,
) -> Point3D | None:
    """Find where a line segment first crosses the boundary of a cuboid.

    Faces are tested in the order +Z, -Z, +Y, -Y, +X, -X and the first hit is returned. A
    segment lying entirely inside the cuboid crosses no face, so it reports no intersection.

    :param start: Start point of the segment, expressed in the cuboid's reference frame
    :param end: End point of the segment, expressed in the cuboid's reference frame
    :param cuboid: Cuboid tested for intersection
    :return: Intersection point expressed in the cuboid's local frame, or None if none exists
    """
    cuboid_t_ref = cuboid.pose.inverse(pose_frame="cuboid")
    local_start = (cuboid_t_ref @ start).to_array()  # T_cuboid_ref * p_ref = p_cuboid
    local_end = (cuboid_t_ref @ end).to_array()
    size = cuboid.size

    for face in _CUBOID_FACES:
        offset = face.sign * size[face.normal_index] / 2.0
        axis = face.normal_index
        t = plane_crossing_parameter(offset, local_start[axis], local_end[axis])
        if t is None:
            continue

        hit = face_intersection(
            t,
            local_start[face.u_index],
            local_start[face.v_index],
            local_end[face.u_index],
            local_end[face.v_index],
            size[face.u_index],
            size[face.v_index],
        )
        if hit is not None:
            coords = [0.0, 0.0, 0.0]
            coords[face.normal_index] = offset
            coords[face.u_index], coords[face.v_index] = hit
            return Point3D.from_sequence(coords)

    return None


def segment_intersects_cuboid(start: Point3D, end: Point3D, cuboid: Cuboid) -> bool:
    """Evaluate whether a line segment crosses any face of the given cuboid."""
    return find_segment_cuboid_intersection(start, end, cuboid) is not None


def grasp_reaches_cuboid(grasp_pose: Pose3D, cuboid: Cuboid, max_depth: float) -> bool:
    """Evaluate whether the segment from a grasp pose to its fingertips crosses the cuboid.

    The segment runs from the grasp pose's origin along its local z-axis (the approach
    direction) for the gripper's maximum grasp depth.

    :param grasp_pose: Generic grasp pose expressed in the same frame as the cuboid's pose
    :param cuboid: Cuboid being grasped
    :param max_depth: Maximum distance (meters) from the palm to the fingertips
    :return: True if the palm-to-fingertip segment crosses a face of the cuboid
    """
    point_a = grasp_pose.position
    point_b = Point3D.from_array(point_a.to_array() + grasp_pose.z_axis * max_depth)
    return segment_intersects_cuboid(point_a, point_b, cuboid)
