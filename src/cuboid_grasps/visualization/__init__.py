"""Import classes and functions for visualizing grasp generation."""

from .grasp_visualizer import GraspVisualizer as GraspVisualizer
from .grasp_visualizer import GraspVizConfig as GraspVizConfig
from .grasp_visualizer import NullGraspVisualizer as NullGraspVisualizer
from .grasp_visualizer import TrimeshGraspVisualizer as TrimeshGraspVisualizer
from .viz_utils import RGBA as RGBA
from .viz_utils import create_axes_markers as create_axes_markers
