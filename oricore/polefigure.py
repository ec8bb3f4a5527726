"""
Pole figure generation.

A pole figure is computed in four steps:

1. Rotate the crystal directions of each pole family into the sample frame
   (see LaueOps.sphere_coordinates).
2. Project the upper hemisphere onto the equatorial plane (equal-area)
   and histogram the points in multiples of random distribution.
3. Determine the common intensity range of all families.
4. Shade each intensity image with a colormap.

"""
import logging
from functools import partial
from multiprocessing.pool import ThreadPool
from typing import Optional, Union, Sequence, Dict, Any, List, Tuple

import numpy as np

from ._config import Config
from ._bulkarray import BulkArray
from ._colormap import Colormap
from . import util


logger = logging.getLogger(__name__)


class PoleFigureConfig(Config):
    """
    Pole figure configuration.

    The configuration has the entries

    - eulers: Bunge Euler angles in radians, shape (N,3)
    - image_dim: edge length of the square output images in pixels
    - lambert_dim: number of histogram bins along each axis of the projection
    - labels: names of the pole families, overriding the defaults
    - order: position of each pole family in the output
    - colormap: name of a matplotlib colormap
    - sphere_radius: radius of the projection sphere, always 1.0

    The entries 'min_scale' and 'max_scale' are written during pole figure
    generation and give the common intensity range of all images.
    """

    def __init__(self,
                 config: Optional[Union[str, Dict[str, Any]]] = None,
                 **kwargs):
        """
        New pole figure configuration.

        Parameters
        ----------
        config : dict or str, optional
            Pole figure configuration. String needs to be valid YAML.
        **kwargs : arbitrary key–value pairs, optional
            Top-level entries of the configuration.

        Examples
        --------
        >>> import numpy as np
        >>> import oricore
        >>> cfg = oricore.PoleFigureConfig(eulers=np.zeros((1,3)),image_dim=64)
        >>> cfg['lambert_dim']
        64

        """
        super().__init__(config,**kwargs)
        for k,v in [('image_dim',512),
                    ('lambert_dim',64),
                    ('labels',[]),
                    ('order',[]),
                    ('colormap','jet'),
                    ('sphere_radius',1.0)]:
            self.setdefault(k,v)


    @property
    def is_complete(self) -> bool:
        """
        Check for completeness.

        Returns
        -------
        complete : bool
            Whether all mandatory entries are present.
        """
        if miss := [k for k in ['eulers','image_dim','lambert_dim'] if self.get(k) is None]:
            logger.info(f'Entr{"ies" if len(miss)>1 else "y"} {util.srepr(miss,",",quote=True)} missing')
            return False
        return True


    @property
    def is_valid(self) -> bool:
        """
        Check for valid content.

        Returns
        -------
        valid : bool
            Whether the present entries are valid.
        """
        ok = True

        for k in ['image_dim','lambert_dim']:
            if k in self and not (isinstance(self[k],(int,np.integer)) and self[k] > 0):
                logger.warning(f"Invalid {k} '{self[k]}'")
                ok = False

        if 'eulers' in self:
            try:
                eu = euler_array(self)
                if len(eu) == 0:
                    logger.warning('No orientations given')
                    ok = False
            except ValueError:
                logger.warning('Invalid Euler angles')
                ok = False

        if self.get('sphere_radius',1.0) != 1.0:
            logger.warning(f"Invalid sphere radius '{self['sphere_radius']}'")
            ok = False

        order = self.get('order',[])
        if not all(isinstance(i,(int,np.integer)) for i in order) or \
           (len(order) > 0 and sorted(order) != list(range(len(order)))):
            logger.warning(f"Invalid order '{self['order']}'")
            ok = False

        if not all(isinstance(label,str) for label in self.get('labels',[])):
            logger.warning(f"Invalid labels '{self['labels']}'")
            ok = False

        return ok


def euler_array(config: Dict[str, Any]) -> np.ndarray:
    """
    Euler angles of a pole figure configuration.

    Parameters
    ----------
    config : dict
        Configuration with entry 'eulers'.

    Returns
    -------
    eulers : numpy.ndarray, shape (N,3)
        Bunge Euler angles in radians.
    """
    eu = config['eulers']
    eu_ = np.atleast_2d(eu.as_array() if isinstance(eu,BulkArray) else np.asarray(eu,dtype=float))
    if eu_.ndim != 2 or eu_.shape[1] != 3:
        raise ValueError(f'invalid shape of Euler angles {eu_.shape}')
    return eu_


def check(config: Dict[str, Any]) -> PoleFigureConfig:
    """
    Validate pole figure configuration at the public boundary.

    Parameters
    ----------
    config : dict
        Pole figure configuration.

    Returns
    -------
    checked : oricore.PoleFigureConfig
        The configuration itself or, for plain dictionaries,
        a copy with default values for missing entries.

    Raises
    ------
    ValueError
        If the configuration is incomplete or invalid.
    """
    cfg = config if isinstance(config,PoleFigureConfig) else PoleFigureConfig(config)
    if not cfg.is_complete or not cfg.is_valid:
        raise ValueError('incomplete or invalid pole figure configuration')
    return cfg


def _pixel_centers(N: int) -> Tuple[np.ndarray, np.ndarray]:
    """Coordinates of pixel centers in [-1,1]², rows from top to bottom."""
    c = (2.*np.arange(N)+1.)/N - 1.
    return np.meshgrid(c,-c)


def stereographic_intensity(xyz: Union[BulkArray, np.ndarray],
                            config: Dict[str, Any]) -> np.ndarray:
    """
    Intensity image of points on the unit sphere.

    Points on the upper hemisphere (z > 0) are projected with the
    equal-area projection and counted on a grid of 'lambert_dim'²
    bins spanning [-1,1]². Counts are normalized to multiples of
    random distribution (MRD) within the unit disc and resampled
    to 'image_dim'² pixels.

    Parameters
    ----------
    xyz : oricore.BulkArray or numpy.ndarray, shape (M,3)
        Unit vectors.
    config : dict
        Configuration with entries 'image_dim' and 'lambert_dim'.

    Returns
    -------
    intensity : numpy.ndarray, shape (image_dim,image_dim)
        Intensity in MRD, NaN outside the unit disc.
        The first row is at the top (+y), the first column at the left (-x).

    """
    xyz_ = (xyz.as_array() if isinstance(xyz,BulkArray) else np.asarray(xyz,dtype=float)).reshape(-1,3)
    L = int(config['lambert_dim'])
    N = int(config['image_dim'])

    upper = xyz_[xyz_[:,2] > 0.]
    xy = util.project_equal_area(upper)
    H,_,_ = np.histogram2d(xy[:,0],xy[:,1],bins=L,range=[[-1.,1.],[-1.,1.]])
    counts = np.flipud(H.T)

    x,y = _pixel_centers(L)
    inside = x**2+y**2 <= 1.
    total = counts[inside].sum()
    mrd = counts*(np.count_nonzero(inside)/total) if total > 0 else np.zeros_like(counts)

    idx = ((np.arange(N)+0.5)*L/N).astype(int)
    intensity = mrd[np.ix_(idx,idx)]
    x,y = _pixel_centers(N)
    intensity[x**2+y**2 > 1.] = np.nan
    return intensity


def rgba_image(intensity: np.ndarray,
               config: Dict[str, Any],
               name: str = '') -> BulkArray:
    """
    Shade intensity image.

    Parameters
    ----------
    intensity : numpy.ndarray, shape (image_dim,image_dim)
        Intensity image, NaN for transparent pixels.
    config : dict
        Configuration with entries 'min_scale', 'max_scale', and 'colormap'.
    name : str, optional
        Name of the returned array.

    Returns
    -------
    image : oricore.BulkArray, shape (image_dim²,4)
        RGBA pixels of type uint8.

    """
    cmap = Colormap.from_predefined(config.get('colormap','jet'))
    img = np.array(cmap.shade(intensity,bounds=(config['min_scale'],config['max_scale'])),dtype=np.uint8)
    return BulkArray.wrap(np.ascontiguousarray(img.reshape(-1,4)),name=name,owns_data=True)


def generate(families: Sequence[BulkArray],
             config: Dict[str, Any]) -> List[BulkArray]:
    """
    Turn sphere coordinates of pole families into images.

    Parameters
    ----------
    families : sequence of oricore.BulkArray
        Sphere coordinates of each pole family, named after the family.
    config : dict
        Pole figure configuration. The entries 'min_scale' and 'max_scale'
        are set to the common intensity range of all families.

    Returns
    -------
    images : list of oricore.BulkArray
        RGBA image of each family, ordered by config['order'] if it
        has one entry per family and in family order otherwise.

    """
    N_threads = min(len(families),util.num_threads())

    pool = ThreadPool(N_threads)
    result = pool.map_async(partial(stereographic_intensity,config=config),families)
    pool.close()
    pool.join()
    intensities = result.get()

    config['min_scale'] = float(min(np.nanmin(i) for i in intensities))
    config['max_scale'] = float(max(np.nanmax(i) for i in intensities))
    logger.debug(f'intensity range {config["min_scale"]}–{config["max_scale"]} MRD')

    pool = ThreadPool(N_threads)
    result = pool.starmap_async(rgba_image,[(i,config,f.name) for i,f in zip(intensities,families)])
    pool.close()
    pool.join()
    images = result.get()

    order = list(config.get('order',[]))
    if len(order) != len(images): return images

    ordered: List[BulkArray] = [None]*len(images)                                                   # type: ignore[list-item]
    for image,o in zip(images,order):
        ordered[o] = image
    return ordered
