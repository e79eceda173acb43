"""Import classes and definitions representing 3D coordinate frames, poses, and rotations."""

from .frames import DEFAULT_FRAME as DEFAULT_FRAME
from .frames import UNIT_X as UNIT_X
from .frames import UNIT_Y as UNIT_Y
from .frames import UNIT_Z as UNIT_Z
from .points import Point3D as Point3D
from .poses import XYZ_RPY as XYZ_RPY
from .poses import Pose3D as Pose3D
from .rotations import EulerRPY as EulerRPY
from .rotations import Quaternion as Quaternion
