"""Import classes and functions used to generate and score grasps for cuboids."""

from .candidates import GraspCandidate as GraspCandidate
from .candidates import GraspCandidateAssembler as GraspCandidateAssembler
from .candidates import GraspWaypoints as GraspWaypoints
from .candidates import GripperTranslation as GripperTranslation
from .candidates import Header as Header
from .candidates import get_grasp_waypoints as get_grasp_waypoints
from .candidates import get_pre_grasp_direction as get_pre_grasp_direction
from .candidates import get_pre_grasp_pose as get_pre_grasp_pose
from .config import GraspAxis as GraspAxis
from .config import GraspCandidateConfig as GraspCandidateConfig
from .config import GraspScoreWeights as GraspScoreWeights
from .config import derive_axis_config as derive_axis_config
from .finger_poses import AxisFrame as AxisFrame
from .finger_poses import PoseBounds as PoseBounds
from .finger_poses import generate_axis_grasp_poses as generate_axis_grasp_poses
from .finger_poses import num_face_grasps as num_face_grasps
from .generator import GraspGenerator as GraspGenerator
from .scoring import GraspScorer as GraspScorer
from .scoring import weighted_average as weighted_average
from .suction_poses import generate_suction_grasp_poses as generate_suction_grasp_poses
