"""Generate and rank grasp candidates for a cuboid using a gripper loaded from YAML."""

from __future__ import annotations

from pathlib import Path

import click
from rich.table import Table

from cuboid_grasps.io import (
    GeneratorSettingsSchema,
    configure_logging,
    console,
    load_generator_settings,
    load_gripper_profile,
    log_info,
)
from cuboid_grasps.spatial import Pose3D
from cuboid_grasps.visualization import TrimeshGraspVisualizer


@click.command()
@click.argument("gripper_yaml", type=click.Path(exists=True, path_type=Path))
@click.argument("end_effector")
@click.option(
    "--settings",
    "settings_yaml",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="YAML file of grasp generator settings (defaults are used if omitted).",
)
@click.option(
    "--dims",
    nargs=3,
    type=float,
    default=(0.05, 0.05, 0.05),
    show_default=True,
    help="Depth, width, and height (meters) of the cuboid.",
)
@click.option(
    "--xyz-rpy",
    nargs=6,
    type=float,
    default=(0.0, 0.0, 0.0, 0.0, 0.0, 0.0),
    show_default=True,
    help="Pose of the cuboid (top-face center for suction grippers).",
)
@click.option("--top", "num_top", type=int, default=10, show_default=True)
@click.option("--log-level", default="INFO", show_default=True)
@click.option("--show", is_flag=True, help="Display the generated grasps in a trimesh window.")
def generate_cuboid_grasps(
    gripper_yaml: Path,
    end_effector: str,
    settings_yaml: Path | None,
    dims: tuple[float, float, float],
    xyz_rpy: tuple[float, float, float, float, float, float],
    num_top: int,
    log_level: str,
    show: bool,
) -> None:
    """Generate grasps for a cuboid and print the highest-quality candidates.

    :param gripper_yaml: YAML file describing one or more end-effectors
    :param end_effector: Name of the end-effector used to grasp
    :param settings_yaml: Optional YAML file of grasp generator settings
    :param dims: Depth, width, and height (meters) of the cuboid
    :param xyz_rpy: Pose of the cuboid as (x, y, z, roll, pitch, yaw)
    :param num_top: Number of top-scoring candidates to print
    :param log_level: Minimum level of displayed log messages
    :param show: Whether to display the generated grasps in a trimesh window
    """
    configure_logging(log_level)

    console.print(f"[yellow]Loading end-effector '{end_effector}' from {gripper_yaml}...[/yellow]")
    gripper = load_gripper_profile(gripper_yaml, end_effector)
    console.print(gripper.describe())

    if settings_yaml is None:
        settings = GeneratorSettingsSchema()
    else:
        settings = load_generator_settings(settings_yaml)

    visualizer = TrimeshGraspVisualizer() if show else None
    if show:
        settings = settings.model_copy(update={"verbose": True})
    generator = settings.create_generator(visualizer=visualizer)

    cuboid_pose = Pose3D.from_sequence(xyz_rpy)
    depth, width, height = dims
    candidates = generator.generate_grasps(
        cuboid_pose,
        depth,
        width,
        height,
        gripper,
        settings.to_candidate_config(),
    )

    if candidates is None:
        console.print(f"[red]Unable to generate grasps for end-effector '{end_effector}'.[/red]")
        raise SystemExit(1)

    log_info(f"Generated {len(candidates)} grasp candidates")
    ranked = sorted(candidates, key=lambda c: c.grasp_quality, reverse=True)

    table = Table(title=f"Top {min(num_top, len(ranked))} of {len(ranked)} grasps")
    table.add_column("ID")
    table.add_column("Quality", justify="right")
    table.add_column("Open", justify="right")
    table.add_column("Grasp pose (x, y, z, roll, pitch, yaw)")
    for candidate in ranked[:num_top]:
        opening = "-" if candidate.percent_open is None else f"{candidate.percent_open:.1f}"
        xyz_rpy_str = ", ".join(f"{v:.3f}" for v in candidate.grasp_pose.to_xyz_rpy())
        table.add_row(candidate.grasp_id, f"{candidate.grasp_quality:.4f}", opening, xyz_rpy_str)
    console.print(table)

    if visualizer is not None:
        visualizer.display()


if __name__ == "__main__":
    generate_cuboid_grasps()
