"""
Crystallographic orientations and crystal symmetry.

Conversion between orientation representations, fundamental zone
reduction, misorientation, orientation/misorientation distribution
binning, inverse pole figure coloring, and pole figure generation
for the eleven Laue classes.

References
----------
D. Rowenhorst et al., Modelling and Simulation in Materials Science and Engineering 23:083501, 2015
https://doi.org/10.1088/0965-0393/23/8/083501
"""

from pathlib import Path as _Path
import re as _re
import logging

logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')

name = 'oricore'
with open(_Path(__file__).parent/_Path('VERSION')) as _f:
    version = _re.sub(r'^v','',_f.readline().strip())
    __version__ = version

from .                 import _typehints       # noqa
from .                 import util             # noqa
from .                 import conversion       # noqa
from .                 import symmetry         # noqa
# Modules that contain only one class (of the same name), are prefixed by a '_'.
# For example, '_colormap' contains a class called 'Colormap' which is imported as 'oricore.Colormap'.
from ._rotation        import Rotation         # noqa
from ._colormap        import Colormap         # noqa
from ._bulkarray       import BulkArray        # noqa
from ._bulkarray       import AllocationError  # noqa
from ._config          import Config           # noqa
from .                 import polefigure       # noqa
from .polefigure       import PoleFigureConfig # noqa
from ._laueops         import LaueOps          # noqa
from ._laueops         import SchmidTuple      # noqa
from .symmetry         import SymmetryGroupTable # noqa
