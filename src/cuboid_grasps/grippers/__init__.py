"""Import classes describing end-effectors and the postures commanding them."""

from .postures import Configuration as Configuration
from .postures import HandPosture as HandPosture
from .postures import HandPostureController as HandPostureController
from .postures import LinearFingerPostureController as LinearFingerPostureController
from .profile import EndEffectorType as EndEffectorType
from .profile import FingerParameters as FingerParameters
from .profile import GripperProfile as GripperProfile
from .profile import SuctionParameters as SuctionParameters
from .profile import SuctionVoxel as SuctionVoxel
