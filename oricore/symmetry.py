"""
Symmetry group tables of the eleven Laue classes.

Each table holds the rotational symmetry operators of a Laue class
together with the constants needed for binning orientations in
homochoric space, coloring inverse pole figures, and generating
pole figures. Tables are built once on import and never change.

Notes
-----
The rotational operators of a Laue class are those of its
enantiomorphic point group, e.g. 432 for m-3m.

References
----------
U.F. Kocks et al.,
Texture and Anisotropy: Preferred Orientations in Polycrystals
and their Effect on Materials Properties.
Cambridge University Press 1998. Table II

"""
import logging as _logging
from typing import Optional as _Optional, List as _List, Tuple as _Tuple

import numpy as _np

from ._typehints import FloatSequence as _FloatSequence, LaueClass as _LaueClass
from . import conversion as _conversion


logger = _logging.getLogger(__name__)


class SymmetryGroupTable:
    """
    Constant data of one Laue class.

    Attributes
    ----------
    key : str
        Identifier, e.g. 'cubic_low'.
    name : str
        Human-readable name, e.g. 'Cubic m3 (Tetrahedral)'.
    point_group : str
        Hermann–Mauguin symbol of the Laue class.
    sym_quats : numpy.ndarray, shape (N,4)
        Rotational symmetry operators as scalar-first unit quaternions.
    sym_matrices : numpy.ndarray, shape (N,3,3)
        Rotational symmetry operators as rotation matrices.
    sym_rods : numpy.ndarray, shape (N,3)
        Rotational symmetry operators as three-component Rodrigues–Frank vectors.
        Rotations by π are scaled by RODRIGUES_SENTINEL.
    has_inversion : bool
        Whether the Laue class contains the inversion.
    odf_num_bins : numpy.ndarray, shape (3)
        Number of bins along each axis of homochoric space.
    odf_dim : numpy.ndarray, shape (3)
        Half-width of the binned region of homochoric space.
    odf_step : numpy.ndarray, shape (3)
        Width of one bin.
    ipf_eta_range : tuple of float
        Azimuthal range (min,max) of the standard stereographic triangle in degrees.
    ipf_chi_kind : {'cubic_high', 'cubic_low', 'hemisphere'}
        Shape of the polar boundary of the standard stereographic triangle.
    pole_families : list of tuple(str, numpy.ndarray)
        Label and unit directions, shape (M,3), of each pole figure family.
        Antipodes are not included.
    slip_systems : numpy.ndarray, shape (M,2,3), optional
        Unit slip plane normals and slip directions.

    """

    __slots__ = ['key','name','point_group',
                 'sym_quats','sym_matrices','sym_rods','has_inversion',
                 'odf_num_bins','odf_dim','odf_step',
                 'ipf_eta_range','ipf_chi_kind',
                 'pole_families','slip_systems']

    def __init__(self,
                 key: str,
                 name: str,
                 point_group: str,
                 quaternions: _FloatSequence,
                 odf_num_bins: _Tuple[int, int, int],
                 fz_angles: _Tuple[float, float, float],
                 ipf_eta_range: _Tuple[float, float],
                 ipf_chi_kind: str,
                 pole_families: _List[_Tuple[str, _FloatSequence]],
                 slip_systems: _Optional[_np.ndarray] = None,
                 has_inversion: bool = True):
        """
        New symmetry group table.

        Parameters
        ----------
        key : str
            Identifier.
        name : str
            Human-readable name.
        point_group : str
            Hermann–Mauguin symbol.
        quaternions : numpy.ndarray, shape (N,4)
            Scalar-first quaternions of the rotational symmetry operators.
        odf_num_bins : tuple of int, len (3)
            Number of bins along each axis of homochoric space.
        fz_angles : tuple of float, len (3)
            Rotation angle Δ that determines the binned half-width
            (3/4 (Δ - sin Δ))^(1/3) along each axis.
        ipf_eta_range : tuple of float, len (2)
            Azimuthal range of the standard stereographic triangle in degrees.
        ipf_chi_kind : {'cubic_high', 'cubic_low', 'hemisphere'}
            Shape of the polar boundary of the standard stereographic triangle.
        pole_families : list of tuple(str, sequence of float)
            Label and directions of each pole figure family.
        slip_systems : numpy.ndarray, shape (M,2,(3)), optional
            Slip plane normals and slip directions.
        has_inversion : bool, optional
            Whether the Laue class contains the inversion. Defaults to True.

        """
        def frozen(a):
            a.setflags(write=False)
            return a

        qu = _np.array(quaternions,dtype=float)
        qu[qu[:,0] < 0.] *= -1.
        with _np.errstate(divide='ignore',invalid='ignore'):
            rods = _np.where(_np.abs(qu[:,0:1]) < 1.e-12,
                             qu[:,1:]*_conversion.RODRIGUES_SENTINEL,
                             qu[:,1:]/qu[:,0:1])

        self.key = key
        self.name = name
        self.point_group = point_group
        self.sym_quats = frozen(qu)
        self.sym_matrices = frozen(_conversion.qu2om(qu))
        self.sym_rods = frozen(rods)
        self.has_inversion = has_inversion

        Delta = _np.array(fz_angles,dtype=float)
        self.odf_num_bins = frozen(_np.array(odf_num_bins,dtype=int))
        self.odf_dim = frozen((0.75*(Delta-_np.sin(Delta)))**(1./3.))
        self.odf_step = frozen(self.odf_dim/(self.odf_num_bins//2))

        self.ipf_eta_range = (float(ipf_eta_range[0]),float(ipf_eta_range[1]))
        self.ipf_chi_kind = ipf_chi_kind
        self.pole_families = [(label,frozen(_np.array(d,dtype=float)/_np.linalg.norm(d,axis=-1,keepdims=True)))
                              for label,d in pole_families]
        if slip_systems is None:
            self.slip_systems = None
        else:
            ss = _np.array(slip_systems,dtype=float)
            self.slip_systems = frozen(ss/_np.linalg.norm(ss,axis=-1,keepdims=True))


    def __repr__(self) -> str:
        """
        Return repr(self).

        Give short, human-readable summary.

        """
        return f'{self.name} ({self.key}): {self.num_sym_ops} symmetry operators, '\
               f'{self.odf_size} ODF bins'

    @property
    def num_sym_ops(self) -> int:
        return len(self.sym_quats)

    @property
    def odf_size(self) -> int:
        """Number of bins of the orientation distribution function."""
        return int(_np.prod(self.odf_num_bins))

    @property
    def mdf_size(self) -> int:
        """Number of bins of the misorientation distribution function."""
        return int(_np.prod(self.odf_num_bins))


_s2 = 0.5*_np.sqrt(2.)
_s3 = 0.5*_np.sqrt(3.)

# rotational operators (scalar-first) of the enantiomorphic point groups
_ops_432 = [
    [ 1.0, 0.0, 0.0, 0.0],
    [ 0.0, 1.0, 0.0, 0.0],
    [ 0.0, 0.0, 1.0, 0.0],
    [ 0.0, 0.0, 0.0, 1.0],
    [ 0.0, 0.0, _s2, _s2],
    [ 0.0, 0.0, _s2,-_s2],
    [ 0.0, _s2, 0.0, _s2],
    [ 0.0, _s2, 0.0,-_s2],
    [ 0.0, _s2,-_s2, 0.0],
    [ 0.0,-_s2,-_s2, 0.0],
    [ 0.5, 0.5, 0.5, 0.5],
    [-0.5, 0.5, 0.5, 0.5],
    [-0.5, 0.5, 0.5,-0.5],
    [-0.5, 0.5,-0.5, 0.5],
    [-0.5,-0.5, 0.5, 0.5],
    [-0.5,-0.5, 0.5,-0.5],
    [-0.5,-0.5,-0.5, 0.5],
    [-0.5, 0.5,-0.5,-0.5],
    [-_s2, 0.0, 0.0, _s2],
    [ _s2, 0.0, 0.0, _s2],
    [-_s2, 0.0, _s2, 0.0],
    [-_s2, 0.0,-_s2, 0.0],
    [-_s2, _s2, 0.0, 0.0],
    [-_s2,-_s2, 0.0, 0.0],
]

# 23, given in (x,y,z,w) order
_ops_23 = _conversion.reorder(_np.array([
    [ 0.0, 0.0, 0.0, 1.0],
    [ 1.0, 0.0, 0.0, 0.0],
    [ 0.0, 1.0, 0.0, 0.0],
    [ 0.0, 0.0, 1.0, 0.0],
    [ 0.5, 0.5, 0.5, 0.5],
    [-0.5,-0.5,-0.5, 0.5],
    [ 0.5,-0.5, 0.5, 0.5],
    [-0.5, 0.5,-0.5, 0.5],
    [-0.5, 0.5, 0.5, 0.5],
    [ 0.5,-0.5,-0.5, 0.5],
    [-0.5,-0.5, 0.5, 0.5],
    [ 0.5, 0.5,-0.5, 0.5],
    ]),'xyzw','wxyz')

_ops_622 = [
    [ 1.0, 0.0, 0.0, 0.0],
    [-_s3, 0.0, 0.0,-0.5],
    [ 0.5, 0.0, 0.0, _s3],
    [ 0.0, 0.0, 0.0, 1.0],
    [-0.5, 0.0, 0.0, _s3],
    [-_s3, 0.0, 0.0, 0.5],
    [ 0.0, 1.0, 0.0, 0.0],
    [ 0.0,-_s3, 0.5, 0.0],
    [ 0.0, 0.5,-_s3, 0.0],
    [ 0.0, 0.0, 1.0, 0.0],
    [ 0.0,-0.5,-_s3, 0.0],
    [ 0.0, _s3, 0.5, 0.0],
]
_ops_6   = _ops_622[:6]
_ops_32  = [_ops_622[i] for i in (0,2,4,7,9,11)]
_ops_3   = _ops_622[0:6:2]

_ops_422 = [
    [ 1.0, 0.0, 0.0, 0.0],
    [ 0.0, 1.0, 0.0, 0.0],
    [ 0.0, 0.0, 1.0, 0.0],
    [ 0.0, 0.0, 0.0, 1.0],
    [ 0.0, _s2, _s2, 0.0],
    [ 0.0,-_s2, _s2, 0.0],
    [ _s2, 0.0, 0.0, _s2],
    [-_s2, 0.0, 0.0, _s2],
]
_ops_4   = [_ops_422[i] for i in (0,3,6,7)]
_ops_222 = _ops_422[:4]
_ops_2   = [_ops_422[i] for i in (0,2)]
_ops_1   = _ops_422[:1]


# {111}<110>, given as (direction, plane normal)
_slip_cF = _np.array([
    [ 0,+1,-1, +1,+1,+1],
    [-1, 0,+1, +1,+1,+1],
    [+1,-1, 0, +1,+1,+1],
    [ 0,-1,-1, -1,-1,+1],
    [+1, 0,+1, -1,-1,+1],
    [-1,+1, 0, -1,-1,+1],
    [ 0,-1,+1, +1,-1,-1],
    [-1, 0,-1, +1,-1,-1],
    [+1,+1, 0, +1,-1,-1],
    [ 0,+1,+1, -1,+1,-1],
    [+1, 0,-1, -1,+1,-1],
    [-1,-1, 0, -1,+1,-1]],dtype=float)


_cubic_families = [
    ('<001>',[[1,0,0],[0,1,0],[0,0,1]]),
    ('<011>',[[1,1,0],[1,0,1],[0,1,1],[-1,-1,0],[-1,0,1],[0,-1,1]]),
    ('<111>',[[1,1,1],[-1,1,1],[1,-1,1],[1,1,-1]]),
]
_hexagonal_families = [
    ('<0001>', [[0,0,1]]),
    ('<10-10>',[[_s3,0.5,0],[0,1,0],[-_s3,0.5,0]]),
    ('<2-1-10>',[[1,0,0],[0.5,_s3,0],[-0.5,_s3,0]]),
]
_tetragonal_families = [
    ('<001>',[[0,0,1]]),
    ('<100>',[[1,0,0],[0,1,0]]),
    ('<110>',[[1,1,0],[-1,1,0]]),
]
_orthogonal_families = [
    ('<001>',[[0,0,1]]),
    ('<100>',[[1,0,0]]),
    ('<010>',[[0,1,0]]),
]

_pi = _np.pi

_tables = {t.key:t for t in [
    SymmetryGroupTable('triclinic','Triclinic -1','-1',
                       _ops_1,(72,72,72),(_pi,_pi,_pi),
                       (0.,360.),'hemisphere',_orthogonal_families),
    SymmetryGroupTable('monoclinic','Monoclinic 2/m','2/m',
                       _ops_2,(72,36,72),(_pi,_pi/2.,_pi),
                       (0.,180.),'hemisphere',_orthogonal_families),
    SymmetryGroupTable('orthorhombic','OrthoRhombic mmm','mmm',
                       _ops_222,(36,36,36),(_pi/2.,_pi/2.,_pi/2.),
                       (0.,90.),'hemisphere',_orthogonal_families),
    SymmetryGroupTable('tetragonal_low','Tetragonal 4/m','4/m',
                       _ops_4,(72,72,18),(_pi,_pi,_pi/4.),
                       (0.,90.),'hemisphere',_tetragonal_families),
    SymmetryGroupTable('tetragonal_high','Tetragonal 4/mmm','4/mmm',
                       _ops_422,(36,36,18),(_pi/2.,_pi/2.,_pi/4.),
                       (0.,45.),'hemisphere',_tetragonal_families),
    SymmetryGroupTable('trigonal_low','Trigonal -3','-3',
                       _ops_3,(72,72,24),(_pi,_pi,_pi/3.),
                       (0.,120.),'hemisphere',_hexagonal_families),
    SymmetryGroupTable('trigonal_high','Trigonal -3m','-3m',
                       _ops_32,(72,36,24),(_pi,_pi/2.,_pi/3.),
                       (0.,60.),'hemisphere',_hexagonal_families),
    SymmetryGroupTable('hexagonal_low','Hexagonal 6/m','6/m',
                       _ops_6,(72,72,12),(_pi,_pi,_pi/6.),
                       (0.,60.),'hemisphere',_hexagonal_families),
    SymmetryGroupTable('hexagonal_high','Hexagonal 6/mmm','6/mmm',
                       _ops_622,(36,36,12),(_pi/2.,_pi/2.,_pi/6.),
                       (0.,30.),'hemisphere',_hexagonal_families),
    SymmetryGroupTable('cubic_low','Cubic m3 (Tetrahedral)','m-3',
                       _ops_23,(36,36,36),(_pi/2.,_pi/2.,_pi/2.),
                       (0.,90.),'cubic_low',_cubic_families),
    SymmetryGroupTable('cubic_high','Cubic m3m','m-3m',
                       _ops_432,(18,18,18),(_pi/4.,_pi/4.,_pi/4.),
                       (0.,45.),'cubic_high',_cubic_families,
                       _np.stack([_slip_cF[:,3:],_slip_cF[:,:3]],axis=1)),
]}


def keys() -> _List[str]:
    """
    Keys of all Laue classes.

    Returns
    -------
    keys : list of str
        Keys ordered by increasing symmetry.

    """
    return list(_tables)


def get(key: _LaueClass) -> SymmetryGroupTable:
    """
    Look up the table of a Laue class.

    Parameters
    ----------
    key : str
        Key of the Laue class, e.g. 'cubic_low'.

    Returns
    -------
    table : oricore.SymmetryGroupTable
        Constant data of the Laue class.

    Examples
    --------
    >>> import oricore
    >>> oricore.symmetry.get('cubic_low').num_sym_ops
    12

    """
    try:
        table = _tables[key]
    except KeyError:
        raise KeyError(f'invalid Laue class "{key}", valid options are {", ".join(_tables)}') from None
    logger.debug(f'symmetry table "{key}" requested')
    return table
