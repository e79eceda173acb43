"""Import classes and functions used for configuration files and console output."""

from .logging import configure_logging as configure_logging
from .logging import console as console
from .logging import log_info as log_info
from .schemata import EndEffectorsSchema as EndEffectorsSchema
from .schemata import GeneratorSettingsSchema as GeneratorSettingsSchema
from .schemata import GripperProfileSchema as GripperProfileSchema
from .schemata import load_generator_settings as load_generator_settings
from .schemata import load_gripper_profile as load_gripper_profile
from .yaml_utils import export_yaml_data as export_yaml_data
from .yaml_utils import load_yaml_data as load_yaml_data
