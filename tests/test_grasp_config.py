"""Unit tests for grasp candidate configuration toggles."""

from hypothesis import given

from cuboid_grasps.grasping import GraspAxis, GraspCandidateConfig, derive_axis_config

from .strategies.geometry_strategies import candidate_configs


@given(candidate_configs())
def test_disable_and_enable_all_grasp_types(config: GraspCandidateConfig) -> None:
    """Verify that grasp types can be toggled together without affecting axes."""
    # Arrange/Act - Disable and enable every grasp type
    disabled = config.disable_all_grasp_types()
    enabled = config.enable_all_grasp_types()

    # Assert - Expect every grasp type toggled, with the axis selections unchanged
    assert not any(
        (
            disabled.enable_corner_grasps,
            disabled.enable_face_grasps,
            disabled.enable_variable_angle_grasps,
            disabled.enable_edge_grasps,
        ),
    )
    assert enabled.enable_face_grasps and enabled.enable_variable_angle_grasps
    for axis in GraspAxis:
        assert disabled.generates_axis(axis) == config.generates_axis(axis)
        assert enabled.generates_axis(axis) == config.generates_axis(axis)


@given(candidate_configs())
def test_derive_axis_config_for_wide_objects(config: GraspCandidateConfig) -> None:
    """Verify that only edge and corner grasps remain for objects too wide for the gripper."""
    # Arrange/Act - Derive configs for an object narrower and wider than the max grasp width
    narrow = derive_axis_config(config, object_width=0.05, max_grasp_width=0.1)
    wide = derive_axis_config(config, object_width=0.2, max_grasp_width=0.1)

    # Assert - Expect the narrow config unchanged, and the wide config to keep only the
    #   requested edge and corner grasps
    assert narrow == config
    assert not wide.enable_face_grasps
    assert not wide.enable_variable_angle_grasps
    assert wide.enable_edge_grasps == config.enable_edge_grasps
    assert wide.enable_corner_grasps == config.enable_corner_grasps
