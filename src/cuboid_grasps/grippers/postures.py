"""Define hand postures and controllers converting finger openings into postures."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict

if TYPE_CHECKING:
    from cuboid_grasps.grippers.profile import GripperProfile

logger = logging.getLogger(__name__)

Configuration = Dict[str, float]
"""A map from joint names to positions (rad or m)."""

WIDTH_TOLERANCE = 1e-9
"""Tolerance (meters) used when comparing finger separations against their limits."""


@dataclass(frozen=True)
class HandPosture:
    """A single-waypoint joint trajectory commanding an end-effector's joints."""

    joint_names: tuple[str, ...]
    positions: tuple[float, ...]
    time_from_start_s: float = 0.0

    def __post_init__(self) -> None:
        """Verify that every joint name has exactly one position."""
        if len(self.joint_names) != len(self.positions):
            raise ValueError(
                f"HandPosture has {len(self.joint_names)} joint names "
                f"but {len(self.positions)} positions.",
            )

    @classmethod
    def from_configuration(
        cls,
        configuration: Configuration,
        time_from_start_s: float = 0.0,
    ) -> HandPosture:
        """Construct a hand posture from a map of joint names to positions."""
        names = tuple(configuration.keys())
        return HandPosture(names, tuple(float(configuration[n]) for n in names), time_from_start_s)

    def to_configuration(self) -> Configuration:
        """Convert the hand posture into a map from joint names to positions."""
        return dict(zip(self.joint_names, self.positions))

    @classmethod
    def from_yaml_data(cls, data: dict[str, Any]) -> HandPosture:
        """Construct a hand posture from a dictionary imported from YAML."""
        return HandPosture(
            joint_names=tuple(data["joint_names"]),
            positions=tuple(float(p) for p in data["positions"]),
            time_from_start_s=float(data.get("time_from_start_s", 0.0)),
        )


class HandPostureController(ABC):
    """An interface converting desired finger openings into hand postures."""

    @abstractmethod
    def finger_width_to_posture(
        self,
        gripper: GripperProfile,
        distance_btw_fingers: float,
    ) -> HandPosture | None:
        """Convert a distance between the fingers into a hand posture.

        :param gripper: Profile of the finger gripper being commanded
        :param distance_btw_fingers: Desired separation (meters) between the fingers
        :return: Hand posture achieving the separation, or None if it's unachievable
        """
        ...

    def set_grasp_width(
        self,
        gripper: GripperProfile,
        percent_open: float,
        min_finger_width: float,
    ) -> HandPosture | None:
        """Compute a posture opening the fingers to a fraction of their usable range.

        :param gripper: Profile of the finger gripper being commanded
        :param percent_open: Fraction in [0, 1] between the minimum width (0) and fully open (1)
        :param min_finger_width: Smallest acceptable finger separation (meters), e.g. the
            object's width plus padding on either side
        :return: Hand posture for the requested opening, or None if it cannot be achieved
        """
        if not 0.0 <= percent_open <= 1.0:
            logger.error(f"Invalid percent_open requested: {percent_open} (expected within [0, 1])")
            return None

        finger = gripper.require_finger()
        min_distance_btw_fingers = max(finger.min_finger_width, min_finger_width)
        if min_distance_btw_fingers > finger.max_finger_width + WIDTH_TOLERANCE:
            logger.debug(
                f"Minimum finger separation {min_distance_btw_fingers} exceeds the gripper's "
                f"maximum opening of {finger.max_finger_width}",
            )
            return None

        distance_btw_fingers = (
            min_distance_btw_fingers
            + (finger.max_finger_width - min_distance_btw_fingers) * percent_open
        )
        return self.finger_width_to_posture(gripper, distance_btw_fingers)


class LinearFingerPostureController(HandPostureController):
    """Interpolates joint values linearly between the closed and open posture templates.

    Assumes a linear relationship between the actuated joint values and the distance between
    the fingers: the gripper's closed posture corresponds to its minimum finger width and its
    open (pre-grasp) posture corresponds to its maximum finger width.
    """

    def finger_width_to_posture(
        self,
        gripper: GripperProfile,
        distance_btw_fingers: float,
    ) -> HandPosture | None:
        """Convert a distance between the fingers into a hand posture."""
        finger = gripper.require_finger()
        logger.debug(f"Setting grasp posture to a finger separation of {distance_btw_fingers}")

        if (
            distance_btw_fingers > finger.max_finger_width + WIDTH_TOLERANCE
            or distance_btw_fingers < finger.min_finger_width - WIDTH_TOLERANCE
        ):
            logger.debug(
                f"Requested {distance_btw_fingers} is beyond the limits of "
                f"[{finger.min_finger_width}, {finger.max_finger_width}]",
            )
            return None

        width_range = finger.max_finger_width - finger.min_finger_width
        if width_range <= 0:
            ratio = 1.0
        else:
            ratio = (distance_btw_fingers - finger.min_finger_width) / width_range

        open_values = gripper.pre_grasp_posture.positions
        closed_values = gripper.grasp_posture.positions
        positions = tuple(
            closed + ratio * (opened - closed) for opened, closed in zip(open_values, closed_values)
        )
        return HandPosture(gripper.pre_grasp_posture.joint_names, positions)
