"""Define constants describing reference frames and coordinate axes."""

import numpy as np

DEFAULT_FRAME = "world"
"""Reference frame assumed when a pose doesn't specify one."""

UNIT_X = np.array([1.0, 0.0, 0.0])
UNIT_Y = np.array([0.0, 1.0, 0.0])
UNIT_Z = np.array([0.0, 0.0, 1.0])
