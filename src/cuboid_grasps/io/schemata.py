"""Define Pydantic models for validating gripper and grasp generator YAML configuration files."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Dict, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator
from typing_extensions import Annotated

from cuboid_grasps.grasping import GraspCandidateConfig, GraspGenerator, GraspScoreWeights
from cuboid_grasps.grippers import (
    EndEffectorType,
    FingerParameters,
    GripperProfile,
    HandPosture,
    SuctionParameters,
)
from cuboid_grasps.io.yaml_utils import load_yaml_data
from cuboid_grasps.spatial import Pose3D

if TYPE_CHECKING:
    from cuboid_grasps.grasping.generator import StepCallback
    from cuboid_grasps.grippers import HandPostureController
    from cuboid_grasps.visualization import GraspVisualizer

# =============================================================================
# Pose Schemata
# =============================================================================

XYZ_RPY = Tuple[float, float, float, float, float, float]
"""A six-tuple of floats representing an SE(3) pose."""

NonNegativeFloat = Annotated[float, Field(ge=0)]
"""A distance or weight that cannot be negative."""


class Pose3DDictSchema(BaseModel):
    """Schema for specifying a Pose3D as a dictionary."""

    xyz_rpy: XYZ_RPY
    frame: str

    model_config = ConfigDict(extra="forbid")


Pose3DSchema = Union[XYZ_RPY, Pose3DDictSchema]
"""A Pose3D can be specified using a 6-tuple or a dictionary with `xyz_rpy` and `frame`."""


def pose_from_schema(pose: Pose3DSchema) -> Pose3D:
    """Convert validated pose data into a Pose3D."""
    if isinstance(pose, Pose3DDictSchema):
        return Pose3D.from_yaml_data(pose.model_dump())
    return Pose3D.from_yaml_data(list(pose))


# =============================================================================
# Gripper Schemata
# =============================================================================


class HandPostureSchema(BaseModel):
    """Schema for a single-waypoint posture of an end-effector's joints."""

    joint_names: List[str]
    positions: List[float]
    time_from_start_s: float = Field(default=0.0, ge=0)

    model_config = ConfigDict(extra="forbid")

    @model_validator(mode="after")
    def check_lengths_match(self) -> HandPostureSchema:
        """Validate that every joint name has exactly one position."""
        if len(self.joint_names) != len(self.positions):
            raise ValueError(
                f"Posture has {len(self.joint_names)} joint names "
                f"but {len(self.positions)} positions",
            )
        return self

    def to_hand_posture(self) -> HandPosture:
        """Convert the validated data into a HandPosture."""
        return HandPosture(tuple(self.joint_names), tuple(self.positions), self.time_from_start_s)


class FingerParametersSchema(BaseModel):
    """Schema for the parameters of a parallel-jaw (finger) gripper."""

    max_grasp_width: float = Field(gt=0, description="Widest object grasped across its faces (m)")
    max_finger_width: float = Field(ge=0, description="Finger separation when fully open (m)")
    min_finger_width: float = Field(ge=0, description="Finger separation when fully closed (m)")
    gripper_finger_width: float = Field(ge=0, description="Width of a finger pad (m)")

    model_config = ConfigDict(extra="forbid")


class SuctionParametersSchema(BaseModel):
    """Schema for the parameters of a suction gripper."""

    active_suction_range_x: float = Field(ge=0, description="Active pad size along x (m)")
    active_suction_range_y: float = Field(ge=0, description="Active pad size along y (m)")
    suction_regions_x: int = Field(default=1, ge=1)
    suction_regions_y: int = Field(default=1, ge=1)

    model_config = ConfigDict(extra="forbid")


class GripperProfileSchema(BaseModel):
    """Schema for the static description of one end-effector."""

    end_effector_type: Literal["finger", "suction"]
    grasp_pose_to_eef: Pose3DSchema
    pre_grasp_posture: HandPostureSchema
    grasp_posture: HandPostureSchema
    parent_link: str
    angle_resolution_deg: float = Field(description="Angular increment between grasps (degrees)")
    grasp_resolution: float = Field(description="Linear spacing between grasps (m)")
    grasp_depth_resolution: float = Field(description="Spacing between grasp depths (m)")
    grasp_min_depth: NonNegativeFloat
    grasp_max_depth: NonNegativeFloat
    approach_distance_desired: NonNegativeFloat = 0.05
    retreat_distance_desired: NonNegativeFloat = 0.05
    lift_distance_desired: NonNegativeFloat = 0.05
    grasp_padding_on_approach: NonNegativeFloat = 0.005
    finger: Optional[FingerParametersSchema] = None
    suction: Optional[SuctionParametersSchema] = None

    model_config = ConfigDict(extra="forbid")

    @model_validator(mode="after")
    def check_parameter_block(self) -> GripperProfileSchema:
        """Validate that the parameters matching the end-effector's type are given."""
        if getattr(self, self.end_effector_type) is None:
            ee_type = self.end_effector_type
            raise ValueError(f"A {ee_type} gripper requires a '{ee_type}' parameter block")
        return self

    def to_gripper_profile(self, name: str) -> GripperProfile:
        """Convert the validated data into a GripperProfile with the given name."""
        finger = None if self.finger is None else FingerParameters(**self.finger.model_dump())
        suction = None if self.suction is None else SuctionParameters(**self.suction.model_dump())

        return GripperProfile(
            name=name,
            end_effector_type=EndEffectorType.from_name(self.end_effector_type),
            grasp_pose_to_eef_pose=pose_from_schema(self.grasp_pose_to_eef),
            pre_grasp_posture=self.pre_grasp_posture.to_hand_posture(),
            grasp_posture=self.grasp_posture.to_hand_posture(),
            parent_link=self.parent_link,
            angle_resolution_deg=self.angle_resolution_deg,
            grasp_resolution=self.grasp_resolution,
            grasp_depth_resolution=self.grasp_depth_resolution,
            grasp_min_depth=self.grasp_min_depth,
            grasp_max_depth=self.grasp_max_depth,
            approach_distance_desired=self.approach_distance_desired,
            retreat_distance_desired=self.retreat_distance_desired,
            lift_distance_desired=self.lift_distance_desired,
            grasp_padding_on_approach=self.grasp_padding_on_approach,
            finger=finger,
            suction=suction,
        )


class EndEffectorsSchema(BaseModel):
    """Schema for a file describing one or more named end-effectors."""

    end_effectors: Dict[str, GripperProfileSchema]

    model_config = ConfigDict(extra="forbid")

    @classmethod
    def validate_yaml(cls, yaml_path: Path) -> EndEffectorsSchema:
        """Validate an end-effectors YAML file and return the resulting schema.

        :param yaml_path: Path to a YAML file to be validated by the schema
        :return: Validated EndEffectorsSchema instance
        """
        yaml_data = load_yaml_data(yaml_path, required_keys={"end_effectors"})

        try:
            return EndEffectorsSchema.model_validate(yaml_data)
        except ValidationError as v_err:
            raise RuntimeError(f"Validation error in {yaml_path}: {v_err}") from v_err


# =============================================================================
# Grasp Generator Schemata
# =============================================================================


class ScoreWeightsSchema(BaseModel):
    """Schema for the weights of the grasp sub-scores."""

    orientation_x_score_weight: NonNegativeFloat = 1.0
    orientation_y_score_weight: NonNegativeFloat = 1.0
    orientation_z_score_weight: NonNegativeFloat = 1.0
    translation_x_score_weight: NonNegativeFloat = 1.0
    translation_y_score_weight: NonNegativeFloat = 1.0
    translation_z_score_weight: NonNegativeFloat = 1.0
    depth_score_weight: NonNegativeFloat = 1.0
    width_score_weight: NonNegativeFloat = 1.0
    overhang_score_weight: NonNegativeFloat = 1.0

    model_config = ConfigDict(extra="forbid")


class CandidateConfigSchema(BaseModel):
    """Schema selecting which grasp types and cuboid axes are generated."""

    enable_corner_grasps: bool = True
    enable_face_grasps: bool = True
    enable_variable_angle_grasps: bool = True
    enable_edge_grasps: bool = True
    generate_x_axis_grasps: bool = True
    generate_y_axis_grasps: bool = True
    generate_z_axis_grasps: bool = True

    model_config = ConfigDict(extra="forbid")


class GeneratorSettingsSchema(BaseModel):
    """Schema for the settings of a grasp generator."""

    ideal_grasp_rpy: Tuple[float, float, float] = (0.0, 0.0, 0.0)
    score_weights: ScoreWeightsSchema = Field(default_factory=ScoreWeightsSchema)
    candidate_config: CandidateConfigSchema = Field(default_factory=CandidateConfigSchema)
    verbose: bool = False
    preferred_depth_ratio: float = Field(default=0.0, ge=0, le=1)

    model_config = ConfigDict(extra="forbid")

    @classmethod
    def validate_yaml(cls, yaml_path: Path) -> GeneratorSettingsSchema:
        """Validate a grasp generator settings YAML file and return the resulting schema.

        :param yaml_path: Path to a YAML file to be validated by the schema
        :return: Validated GeneratorSettingsSchema instance
        """
        yaml_data = load_yaml_data(yaml_path)

        try:
            return GeneratorSettingsSchema.model_validate(yaml_data or {})
        except ValidationError as v_err:
            raise RuntimeError(f"Validation error in {yaml_path}: {v_err}") from v_err

    def to_score_weights(self) -> GraspScoreWeights:
        """Convert the validated weights into GraspScoreWeights."""
        return GraspScoreWeights(**self.score_weights.model_dump())

    def to_candidate_config(self) -> GraspCandidateConfig:
        """Convert the validated toggles into a GraspCandidateConfig."""
        return GraspCandidateConfig(**self.candidate_config.model_dump())

    def create_generator(
        self,
        visualizer: GraspVisualizer | None = None,
        posture_controller: HandPostureController | None = None,
        step_callback: StepCallback | None = None,
    ) -> GraspGenerator:
        """Construct a grasp generator configured by these settings."""
        generator = GraspGenerator(
            weights=self.to_score_weights(),
            visualizer=visualizer,
            posture_controller=posture_controller,
            step_callback=step_callback,
            verbose=self.verbose,
            preferred_depth_ratio=self.preferred_depth_ratio,
        )
        generator.set_ideal_grasp_pose_rpy(self.ideal_grasp_rpy)
        return generator


# =============================================================================
# Loaders
# =============================================================================


def load_gripper_profile(yaml_path: Path, name: str) -> GripperProfile:
    """Load the named end-effector's profile from a YAML file.

    :param yaml_path: Path to a YAML file with an `end_effectors` map
    :param name: Name of the end-effector to be loaded
    :return: Constructed GripperProfile instance
    :raises KeyError: If the file doesn't describe an end-effector with the given name
    """
    schema = EndEffectorsSchema.validate_yaml(yaml_path)
    if name not in schema.end_effectors:
        available = ", ".join(sorted(schema.end_effectors))
        raise KeyError(f"No end-effector named '{name}' in {yaml_path} (available: {available})")

    return schema.end_effectors[name].to_gripper_profile(name)


def load_generator_settings(yaml_path: Path) -> GeneratorSettingsSchema:
    """Load grasp generator settings from a YAML file."""
    return GeneratorSettingsSchema.validate_yaml(yaml_path)
