"""Import classes and functions representing cuboids and geometric intersection tests."""

from .cuboids import Cuboid as Cuboid
from .intersections import face_intersection as face_intersection
from .intersections import find_segment_cuboid_intersection as find_segment_cuboid_intersection
from .intersections import grasp_reaches_cuboid as grasp_reaches_cuboid
from .intersections import plane_crossing_parameter as plane_crossing_parameter
from .intersections import segment_intersects_cuboid as segment_intersects_cuboid
