"""Functionality for typehints."""

from typing import Sequence, Union, Literal, TextIO
from pathlib import Path

import numpy as np


FloatSequence = Union[np.ndarray,Sequence[float]]
IntSequence = Union[np.ndarray,Sequence[int]]
FileHandle = Union[TextIO, str, Path]
QuaternionOrder = Literal['wxyz', 'xyzw']
RotationConvention = Literal['active', 'passive']
LaueClass = Literal['triclinic', 'monoclinic', 'orthorhombic',
                    'tetragonal_low', 'tetragonal_high',
                    'trigonal_low', 'trigonal_high',
                    'hexagonal_low', 'hexagonal_high',
                    'cubic_low', 'cubic_high']
NumpyRngSeed = Union[int, IntSequence, np.random.SeedSequence, np.random.Generator]
