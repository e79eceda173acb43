"""Define interfaces for visualizing grasp generation as it progresses."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING

import trimesh

from cuboid_grasps.visualization.viz_utils import (
    RGBA,
    create_approach_marker,
    create_cuboid_mesh,
    create_pose_axes,
)

if TYPE_CHECKING:
    from cuboid_grasps.geometry import Cuboid
    from cuboid_grasps.grasping.candidates import GraspCandidate
    from cuboid_grasps.spatial import Pose3D


class GraspVisualizer(ABC):
    """An interface receiving the cuboids, poses, and candidates produced by grasp generation.

    Visualizers only observe generation; they never change its result.
    """

    @abstractmethod
    def show_cuboid(self, cuboid: Cuboid) -> None:
        """Display the cuboid being grasped."""
        ...

    @abstractmethod
    def show_grasp_pose(self, pose: Pose3D) -> None:
        """Display a generic grasp pose before it's turned into candidates."""
        ...

    @abstractmethod
    def show_candidate(self, candidate: GraspCandidate) -> None:
        """Display a scored grasp candidate."""
        ...


class NullGraspVisualizer(GraspVisualizer):
    """A visualizer that ignores everything it's given."""

    def show_cuboid(self, cuboid: Cuboid) -> None:
        """Ignore the cuboid."""

    def show_grasp_pose(self, pose: Pose3D) -> None:
        """Ignore the grasp pose."""

    def show_candidate(self, candidate: GraspCandidate) -> None:
        """Ignore the grasp candidate."""


@dataclass(frozen=True)
class GraspVizConfig:
    """Configuration for visualizing grasps using trimesh."""

    cuboid_color: RGBA = RGBA(100, 100, 100, 150)
    pose_axes_length: float = 0.02
    approach_length: float = 0.03
    resolution: tuple[int, int] = (1920, 1080)


class TrimeshGraspVisualizer(GraspVisualizer):
    """Accumulates grasp markers in a trimesh scene, which can be displayed once generation ends."""

    def __init__(self, config: GraspVizConfig | None = None) -> None:
        """Initialize an empty scene using the given visualization configuration."""
        self.config = GraspVizConfig() if config is None else config
        self.scene = trimesh.Scene()
        self.num_poses = 0
        self.num_candidates = 0

    def show_cuboid(self, cuboid: Cuboid) -> None:
        """Add the cuboid being grasped to the scene."""
        mesh = create_cuboid_mesh(cuboid, self.config.cuboid_color)
        self.scene.add_geometry(mesh, node_name="cuboid")

    def show_grasp_pose(self, pose: Pose3D) -> None:
        """Add axes markers for a generic grasp pose to the scene."""
        axes = create_pose_axes(pose, self.config.pose_axes_length)
        self.scene.add_geometry(axes, node_name=f"pose_{self.num_poses}")
        self.num_poses += 1

    def show_candidate(self, candidate: GraspCandidate) -> None:
        """Add an approach marker colored by grasp quality for the candidate to the scene."""
        color = RGBA.from_quality(candidate.grasp_quality)
        marker = create_approach_marker(
            candidate.generic_grasp_pose,
            self.config.approach_length,
            color,
        )
        self.scene.add_geometry(marker, node_name=candidate.grasp_id)
        self.num_candidates += 1

    def display(self) -> None:
        """Open an interactive window displaying the accumulated scene."""
        self.scene.set_camera(resolution=self.config.resolution)
        self.scene.show()
