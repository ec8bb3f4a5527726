import os
from typing import Optional, Union

import numpy as np
import scipy.interpolate as interp
import matplotlib as mpl
if os.name == 'posix' and 'DISPLAY' not in os.environ:
    mpl.use('Agg')
from PIL import Image

from ._typehints import FloatSequence


class Colormap(mpl.colors.ListedColormap):
    """
    Enhance matplotlib colormap functionality for shading pole figures.

    Colors are internally stored as R(ed) G(green) B(lue) values.
    A colormap can be used in matplotlib, seaborn, etc.

    References
    ----------
    Matplotlib colormaps overview
    https://matplotlib.org/stable/tutorials/colors/colormaps.html

    """

    def __init__(self,
                 colors: np.ndarray, name: str):
        """
        New colormap.

        Parameters
        ----------
        colors : numpy.ndarray, shape (:,3) or (:,4)
            Color specifications as RGB(A) values.
        name : str
            String to identify the colormap.

        """
        super().__init__(colors,name)
        self.colors: np.ndarray = np.asarray(colors)


    def __eq__(self,
               other: object) -> bool:
        """
        Return self==other.

        Test equality of other.

        """
        if not isinstance(other, Colormap):
            return NotImplemented
        return np.array_equal(self.colors,other.colors)


    def __repr__(self) -> str:
        """Return repr(self)."""
        return f'Colormap: {self.name}'


    @staticmethod
    def from_predefined(name: str,
                        N: int = 256) -> 'Colormap':
        """
        Select from the matplotlib colormaps.

        Parameters
        ----------
        name : str
            Name of the colormap, e.g. 'jet' or 'viridis'.
        N : int, optional
            Number of color quantization levels. Defaults to 256.
            This parameter is not used for matplotlib colormaps
            that are of type `ListedColormap`.

        Returns
        -------
        new : oricore.Colormap
            Predefined colormap.

        Examples
        --------
        >>> import oricore
        >>> oricore.Colormap.from_predefined('jet')
        Colormap: jet

        """
        colormap = mpl.colormaps[name]
        return Colormap(np.array(colormap(np.linspace(0,1,N)))
                        if isinstance(colormap,mpl.colors.LinearSegmentedColormap) else
                        np.array(colormap.colors),
                        name=name)


    def at(self,
           fraction : Union[float,FloatSequence]) -> np.ndarray:
        """
        Interpolate color at fraction.

        Parameters
        ----------
        fraction : (sequence of) float
            Fractional coordinate(s) to evaluate Colormap at.

        Returns
        -------
        color : numpy.ndarray, shape(...,3) or (...,4)
            RGB(A) values of interpolated color(s).

        Examples
        --------
        >>> import oricore
        >>> cmap = oricore.Colormap.from_predefined('gray')
        >>> cmap.at(0.5)
        array([0.5, 0.5, 0.5, 1. ])

        """
        return interp.interp1d(np.linspace(0,1,self.N),
                               self.colors,
                               axis=0,
                               assume_sorted=True)(fraction)


    def shade(self,
              field: np.ndarray,
              bounds: Optional[FloatSequence] = None,
              gap: Optional[float] = None) -> Image.Image:
        """
        Generate PIL image of 2D field using colormap.

        Parameters
        ----------
        field : numpy.ndarray, shape (:,:)
            Data to be shaded.
        bounds : sequence of float, len (2), optional
            Value range (left,right) spanned by colormap.
            Defaults to the range of the finite values in field.
        gap : field.dtype, optional
            Transparent value. NaN will always be rendered transparent.
            Defaults to None.

        Returns
        -------
        PIL.Image
            RGBA image of shaded data.

        """
        mask = np.logical_not(np.isnan(field) if gap is None else
                              np.logical_or(np.isnan(field), field == gap))

        if bounds is not None:
            l,r = float(bounds[0]),float(bounds[1])
        elif mask.any():
            l,r = field[mask].min(),field[mask].max()
        else:
            l,r = 0.,1.

        if abs(delta := r-l) * 1e8 <= (avg := 0.5*abs(r+l)):                                        # delta is similar to numerical noise
            l,r = (l-0.5*avg*np.sign(delta),r+0.5*avg*np.sign(delta))
        if r == l: l,r = l-0.5,r+0.5

        field_ = np.nan_to_num(field, nan=(l+r)/2, posinf=r, neginf=l)

        return Image.fromarray(
            (np.dstack((
                        self.colors[np.round(np.clip((field_-l)/(r-l),0.0,1.0)*(self.N-1)).astype(np.uint16),:3],
                        mask.astype(float)
                       )
                      )*255
            ).round().astype(np.uint8))


    def reversed(self,
                 name: Optional[str] = None) -> 'Colormap':
        """
        Reverse.

        Parameters
        ----------
        name : str, optional
            Name of the reversed colormap.
            Defaults to parent colormap name + '_r'.

        Returns
        -------
        oricore.Colormap
            Reversed colormap.

        Examples
        --------
        >>> import oricore
        >>> oricore.Colormap.from_predefined('jet').reversed()
        Colormap: jet_r

        """
        rev = super().reversed(name)
        return Colormap(np.array(rev.colors),rev.name[:-4] if rev.name.endswith('_r_r') else rev.name)
