"""Define strategies for generating cuboids and grasp configurations for property-based testing."""

import hypothesis.strategies as st

from cuboid_grasps.geometry import Cuboid
from cuboid_grasps.grasping import GraspCandidateConfig, GraspScoreWeights

from .spatial_strategies import poses_3d


@st.composite
def dimensions(draw: st.DrawFn, min_value: float = 0.01, max_value: float = 0.2) -> float:
    """Generate random object dimensions (meters)."""
    return draw(st.floats(min_value=min_value, max_value=max_value, allow_nan=False))


@st.composite
def cuboids(draw: st.DrawFn) -> Cuboid:
    """Generate random posed cuboids of tabletop-object size."""
    pose = draw(poses_3d(max_abs=1.0))
    return Cuboid(pose, draw(dimensions()), draw(dimensions()), draw(dimensions()))


@st.composite
def score_weights(draw: st.DrawFn) -> GraspScoreWeights:
    """Generate random non-negative grasp score weights with a positive total."""
    weight = st.floats(min_value=0.0, max_value=10.0, allow_nan=False)
    values = [draw(weight) for _ in range(9)]
    values[0] += 0.1  # At least one weight must be positive
    return GraspScoreWeights(*values)


@st.composite
def candidate_configs(draw: st.DrawFn) -> GraspCandidateConfig:
    """Generate random combinations of grasp strategy and axis toggles."""
    return GraspCandidateConfig(*(draw(st.booleans()) for _ in range(7)))
