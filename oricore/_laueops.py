import logging
from functools import partial
from multiprocessing.pool import ThreadPool
from typing import Optional, Union, Dict, List, NamedTuple, Tuple

import numpy as np

from ._typehints import FloatSequence, IntSequence, NumpyRngSeed, LaueClass
from ._rotation import Rotation
from ._bulkarray import BulkArray
from . import conversion
from . import symmetry
from . import polefigure
from . import util


logger = logging.getLogger(__name__)


class SchmidTuple(NamedTuple):
    factor: Union[float, np.ndarray]
    angles: np.ndarray
    slip_system: Union[int, np.ndarray]


def _quaternion(q: Union[Rotation, FloatSequence]) -> np.ndarray:
    """Scalar-first quaternion array of a Rotation or an array."""
    qu = q.quaternion if isinstance(q,Rotation) else np.asarray(q,dtype=float)
    if qu.shape[-1:] != (4,):
        raise ValueError(f'invalid quaternion shape {qu.shape}')
    return qu

def _multiply(a: np.ndarray,
              b: np.ndarray) -> np.ndarray:
    """Quaternion product a*b, standardized to positive real part."""
    q = a[...,0:1]*b[...,0:1] - np.sum(a[...,1:]*b[...,1:],axis=-1,keepdims=True)
    p = a[...,0:1]*b[...,1:] + b[...,0:1]*a[...,1:] + conversion.P*np.cross(a[...,1:],b[...,1:])
    ab = np.block([q,p])
    ab[ab[...,0] < 0.] *= -1.
    return ab

def _invert(a: np.ndarray) -> np.ndarray:
    return a*np.array([1.,-1.,-1.,-1.])

def _take(a: np.ndarray,
          i: Union[int, np.ndarray]) -> np.ndarray:
    """Select a[i[...],...] along the first axis."""
    return np.take_along_axis(a,np.asarray(i)[np.newaxis,...,np.newaxis],axis=0)[0]

def _Rodrigues(rho: FloatSequence) -> np.ndarray:
    ro = np.asarray(rho,dtype=float)
    if ro.shape[-1:] != (4,):
        raise ValueError(f'invalid Rodrigues–Frank vector shape {ro.shape}')
    return ro


class LaueOps:
    """
    Symmetry operations of one Laue class.

    Fundamental zone reduction, misorientation, binning, coloring,
    and pole figure generation for orientations of crystals of
    the given Laue class. All functionality is driven by the
    constant data in the corresponding symmetry table.

    Orientations are given as Bunge Euler angles (radians),
    scalar-first quaternions, or four-component Rodrigues–Frank
    vectors (n_1, n_2, n_3, tan(ω/2)). Symmetry operators act
    from the left, i.e. S*q.

    Examples
    --------
    Misorientation angle between two cubic orientations:

    >>> import numpy as np
    >>> import oricore
    >>> ops = oricore.LaueOps.from_key('cubic_high')
    >>> a = oricore.Rotation.from_Euler_angles([0,0,0])
    >>> b = oricore.Rotation.from_Euler_angles([90,0,0],degrees=True)
    >>> np.degrees(ops.misorientation(a,b)[3])
    0.0

    """

    _engines: Dict[str, 'LaueOps'] = {}

    def __init__(self,
                 table: Union[symmetry.SymmetryGroupTable, LaueClass]):
        """
        New symmetry engine.

        Parameters
        ----------
        table : oricore.SymmetryGroupTable or str
            Symmetry table or key of a Laue class.

        """
        self.table = symmetry.get(table) if isinstance(table,str) else table
        logger.debug(f'symmetry engine for {self.table.key} created')


    @classmethod
    def from_key(cls,
                 key: LaueClass) -> 'LaueOps':
        """
        Symmetry engine of a Laue class.

        Engines are created once per Laue class and reused.

        Parameters
        ----------
        key : str
            Key of the Laue class, e.g. 'hexagonal_high'.

        Returns
        -------
        engine : oricore.LaueOps
            Symmetry engine.

        """
        if key not in cls._engines:
            cls._engines[key] = cls(symmetry.get(key))
        return cls._engines[key]


    def __repr__(self) -> str:
        """Return repr(self)."""
        return f'LaueOps: {self.table.name}'


    @property
    def key(self) -> str:
        return self.table.key

    @property
    def name(self) -> str:
        return self.table.name

    @property
    def num_sym_ops(self) -> int:
        return self.table.num_sym_ops

    @property
    def has_inversion(self) -> bool:
        return self.table.has_inversion

    @property
    def odf_size(self) -> int:
        return self.table.odf_size

    @property
    def mdf_size(self) -> int:
        return self.table.mdf_size


    def quaternion_operator(self,
                            i: int) -> np.ndarray:
        """Symmetry operator i as scalar-first quaternion."""
        return self.table.sym_quats[self._operator_index(i)].copy()

    def matrix_operator(self,
                        i: int) -> np.ndarray:
        """Symmetry operator i as rotation matrix."""
        return self.table.sym_matrices[self._operator_index(i)].copy()

    def Rodrigues_operator(self,
                           i: int) -> np.ndarray:
        """Symmetry operator i as three-component Rodrigues–Frank vector."""
        return self.table.sym_rods[self._operator_index(i)].copy()

    def _operator_index(self,
                        i: int) -> int:
        if not 0 <= i < self.num_sym_ops:
            raise ValueError(f'symmetry operator index {i} out of range [0,{self.num_sym_ops})')
        return int(i)


    def _operators(self,
                   ndim: int) -> np.ndarray:
        """Symmetry quaternions, shape (N,1,...,1,4) for broadcasting with ndim leading dimensions."""
        return self.table.sym_quats.reshape((self.num_sym_ops,)+(1,)*ndim+(4,))


    ################################################################################################
    # misorientation

    def misorientation(self,
                       q1: Union[Rotation, FloatSequence],
                       q2: Union[Rotation, FloatSequence]) -> np.ndarray:
        """
        Calculate misorientation between two orientations.

        All N² candidates S_i*(q2*q1⁻¹)*S_j⁻¹ are evaluated and the
        one with the smallest rotation angle is selected. For equal
        angles, the first candidate in operator order is selected.

        Parameters
        ----------
        q1 : oricore.Rotation or numpy.ndarray, shape (...,4)
            First orientation.
        q2 : oricore.Rotation or numpy.ndarray, shape (...,4)
            Second orientation. Shape needs to be broadcastable with q1.

        Returns
        -------
        axis_angle : numpy.ndarray, shape (...,4)
            Misorientation as axis–angle pair (n_1, n_2, n_3, ω), ω in radians.

        """
        dq = _multiply(_quaternion(q2),_invert(_quaternion(q1)))
        shape = dq.shape[:-1]
        N = self.num_sym_ops

        S = self._operators(len(shape))
        candidates = _multiply(_multiply(S[:,np.newaxis],dq),_invert(S[np.newaxis,:]))
        angles = 2.*np.arccos(np.clip(candidates[...,0],-1.,1.)).reshape((N*N,)+shape)
        best = np.argmin(angles,axis=0)

        return conversion.qu2ax(_take(candidates.reshape((N*N,)+shape+(4,)),best))


    def nearest_quaternion(self,
                           q1: Union[Rotation, FloatSequence],
                           q2: Union[Rotation, FloatSequence]) -> np.ndarray:
        """
        Find the symmetrically equivalent orientation of q2 closest to q1.

        Parameters
        ----------
        q1 : oricore.Rotation or numpy.ndarray, shape (...,4)
            Reference orientation.
        q2 : oricore.Rotation or numpy.ndarray, shape (...,4)
            Orientation to be moved close to q1.

        Returns
        -------
        nearest : numpy.ndarray, shape (...,4)
            Quaternion S_i*q2 that maximizes |q1·S_i*q2|.

        """
        qu1 = _quaternion(q1)
        qu2 = _quaternion(q2)
        shape = np.broadcast_shapes(qu1.shape,qu2.shape)[:-1]
        candidates = _multiply(self._operators(len(shape)),qu2)
        best = np.argmax(np.abs(np.sum(qu1*candidates,axis=-1)),axis=0)
        return _take(np.broadcast_to(candidates,(self.num_sym_ops,)+shape+(4,)),best)


    ################################################################################################
    # fundamental zones

    def ODF_FZ_Rodrigues(self,
                         rho: FloatSequence) -> np.ndarray:
        """
        Reduce Rodrigues–Frank vector to the fundamental zone of orientations.

        Among all symmetrically equivalent vectors, the one closest to the
        origin is selected. For equal distances, the first one in operator
        order is selected.

        Parameters
        ----------
        rho : numpy.ndarray, shape (...,4)
            Rodrigues–Frank vector (n_1, n_2, n_3, tan(ω/2)).

        Returns
        -------
        rho_FZ : numpy.ndarray, shape (...,4)
            Equivalent Rodrigues–Frank vector in the fundamental zone.

        """
        rho_ = conversion.compact_ro(_Rodrigues(rho))
        rs = self.table.sym_rods.reshape((self.num_sym_ops,)+(1,)*(rho_.ndim-1)+(3,))
        with np.errstate(divide='ignore',invalid='ignore',over='ignore'):
            candidates = (rs + rho_ + conversion.P*np.cross(rs,rho_)) \
                       / (1.-np.sum(rs*rho_,axis=-1,keepdims=True))
            distance = np.linalg.norm(candidates,axis=-1)
        distance[~np.isfinite(distance)] = np.inf
        best = np.argmin(distance,axis=0)
        return conversion.expand_ro(_take(candidates,best))


    def MDF_FZ_Rodrigues(self,
                         rho: FloatSequence) -> np.ndarray:
        """
        Reduce Rodrigues–Frank vector to the fundamental zone of misorientations.

        The vector is reduced to the fundamental zone of orientations and
        the absolute values of the rotation axis are sorted in descending
        order, keeping the rotation angle.

        Parameters
        ----------
        rho : numpy.ndarray, shape (...,4)
            Rodrigues–Frank vector (n_1, n_2, n_3, tan(ω/2)).

        Returns
        -------
        rho_FZ : numpy.ndarray, shape (...,4)
            Equivalent Rodrigues–Frank vector in the fundamental zone of misorientations.

        """
        ax = conversion.ro2ax(self.ODF_FZ_Rodrigues(rho))
        n = -np.sort(-np.abs(ax[...,:3]),axis=-1)
        return conversion.ax2ro(np.block([n,ax[...,3:4]]))


    ################################################################################################
    # binning

    def _bin(self,
             ho: np.ndarray) -> np.ndarray:
        n = self.table.odf_num_bins
        b = np.clip(np.floor((ho+self.table.odf_dim)/self.table.odf_step).astype(int),0,n-1)
        return b[...,0] + b[...,1]*n[0] + b[...,2]*n[0]*n[1]

    def ODF_bin(self,
                rho: FloatSequence) -> Union[np.integer, np.ndarray]:
        """
        Bin index of Rodrigues–Frank vector in the orientation distribution function.

        The vector is converted into homochoric space and binned along each
        axis; indices beyond the binned region are clamped to the closest bin.

        Parameters
        ----------
        rho : numpy.ndarray, shape (...,4)
            Rodrigues–Frank vector, typically within the fundamental zone.

        Returns
        -------
        bin : numpy.ndarray of int, shape (...)
            Flat bin index b_0 + b_1 n_0 + b_2 n_0 n_1.

        """
        return self._bin(conversion.ro2ho(_Rodrigues(rho)))

    def MDF_bin(self,
                rho: FloatSequence) -> Union[np.integer, np.ndarray]:
        """
        Bin index of Rodrigues–Frank vector in the misorientation distribution function.

        Parameters
        ----------
        rho : numpy.ndarray, shape (...,4)
            Rodrigues–Frank vector, typically within the fundamental zone of misorientations.

        Returns
        -------
        bin : numpy.ndarray of int, shape (...)
            Flat bin index b_0 + b_1 n_0 + b_2 n_0 n_1.

        """
        return self._bin(conversion.ro2ho(_Rodrigues(rho)))


    def _homochoric_from_bin(self,
                             random3: FloatSequence,
                             bin: Union[int, IntSequence],
                             size: int) -> np.ndarray:
        b = np.asarray(bin)
        if np.any(b < 0) or np.any(b >= size):
            raise ValueError(f'bin index out of range [0,{size})')
        n = self.table.odf_num_bins
        phi = np.stack([b%n[0],(b//n[0])%n[1],b//(n[0]*n[1])],axis=-1)
        return self.table.odf_step*phi - self.table.odf_dim \
             + self.table.odf_step*np.asarray(random3,dtype=float)

    def Euler_angles_from_bin(self,
                              random3: FloatSequence,
                              bin: Union[int, IntSequence],
                              degrees: bool = False) -> np.ndarray:
        """
        Sample orientation from a bin of the orientation distribution function.

        Parameters
        ----------
        random3 : numpy.ndarray, shape (...,3)
            Uniform random numbers in [0,1) that select the position within the bin.
        bin : (sequence of) int
            Flat bin index.
        degrees : bool, optional
            Return angles in degrees. Defaults to False.

        Returns
        -------
        phi : numpy.ndarray, shape (...,3)
            Bunge Euler angles of the sampled orientation in the fundamental zone.

        Notes
        -----
        Only bins whose cell lies inside the fundamental zone are recovered
        by ODF_bin. Other cells of the cubic grid (outside the fundamental zone
        or the homochoric ball) still yield an orientation, but it re-bins elsewhere.

        """
        ho = self._homochoric_from_bin(random3,bin,self.odf_size)
        eu = conversion.ro2eu(self.ODF_FZ_Rodrigues(conversion.ho2ro(ho)))
        return np.degrees(eu) if degrees else eu

    def Rodrigues_from_bin(self,
                           random3: FloatSequence,
                           bin: Union[int, IntSequence]) -> np.ndarray:
        """
        Sample misorientation from a bin of the misorientation distribution function.

        Parameters
        ----------
        random3 : numpy.ndarray, shape (...,3)
            Uniform random numbers in [0,1) that select the position within the bin.
        bin : (sequence of) int
            Flat bin index.

        Returns
        -------
        rho : numpy.ndarray, shape (...,4)
            Rodrigues–Frank vector in the fundamental zone of misorientations.

        Notes
        -----
        As for Euler_angles_from_bin, MDF_bin recovers the bin only for cells
        inside the fundamental zone of misorientations.

        """
        ho = self._homochoric_from_bin(random3,bin,self.mdf_size)
        return self.MDF_FZ_Rodrigues(conversion.ho2ro(ho))


    def randomize_Euler_angles(self,
                               phi: FloatSequence,
                               rng_seed: Optional[NumpyRngSeed] = None,
                               degrees: bool = False) -> np.ndarray:
        """
        Apply a randomly selected symmetry operator.

        Parameters
        ----------
        phi : numpy.ndarray, shape (...,3)
            Bunge Euler angles.
        rng_seed : {None, int, array_like[ints], SeedSequence, BitGenerator, Generator}, optional
            A seed to initialize the BitGenerator.
            Defaults to None, i.e. unpredictable entropy will be pulled from the OS.
        degrees : bool, optional
            Euler angles are given (and returned) in degrees. Defaults to False.

        Returns
        -------
        phi : numpy.ndarray, shape (...,3)
            Bunge Euler angles of a symmetrically equivalent orientation.

        """
        eu = np.radians(phi) if degrees else np.asarray(phi,dtype=float)
        i = np.random.default_rng(rng_seed).integers(self.num_sym_ops,size=eu.shape[:-1])
        eu_ = conversion.qu2eu(_multiply(self.table.sym_quats[i],conversion.eu2qu(eu)))
        return np.degrees(eu_) if degrees else eu_


    ################################################################################################
    # coloring

    def _chi_max(self,
                 eta: np.ndarray) -> np.ndarray:
        kind = self.table.ipf_chi_kind
        if kind == 'hemisphere':
            return np.full_like(eta,0.5*np.pi)
        x = np.where(np.degrees(eta) > 45.,0.5*np.pi-eta,eta) if kind == 'cubic_low' else eta
        return np.arccos(np.clip(np.sqrt(1./(2.+np.tan(x)**2)),-1.,1.))

    def in_unit_triangle(self,
                         eta: Union[float, np.ndarray],
                         chi: Union[float, np.ndarray]) -> Union[np.bool_, np.ndarray]:
        """
        Check whether direction falls into the standard stereographic triangle.

        Parameters
        ----------
        eta : float or numpy.ndarray
            Azimuthal angle in radians.
        chi : float or numpy.ndarray
            Polar angle in radians.

        Returns
        -------
        in : bool or numpy.ndarray of bool
            Whether the direction is within the standard stereographic triangle.

        """
        eta_ = np.asarray(eta,dtype=float)
        chi_ = np.asarray(chi,dtype=float)
        eta_min,eta_max = np.radians(self.table.ipf_eta_range)
        return ~((eta_ < eta_min) | (eta_ > eta_max) | (chi_ < 0.) | (chi_ > self._chi_max(eta_)))

    def _IPF_channels(self,
                      eta: np.ndarray,
                      chi: np.ndarray) -> np.ndarray:
        eta_min,eta_max = self.table.ipf_eta_range
        f = chi/self._chi_max(eta)
        b = np.abs(np.degrees(eta)-eta_min)/(eta_max-eta_min)
        rgb = np.stack([1.-f,(1.-b)*f,b*f],axis=-1)
        return (np.sqrt(np.clip(rgb,0.,1.))*255.).astype(np.uint8)

    def _pole_angles(self,
                     p: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        """Azimuthal angle in [0,2π) and polar angle of unit vectors."""
        eta = np.arctan2(p[...,1],p[...,0])
        return np.where(eta < 0.,eta+2.*np.pi,eta), np.arccos(np.clip(p[...,2],-1.,1.))

    def IPF_color(self,
                  phi: FloatSequence,
                  ref_dir: FloatSequence = (0,0,1),
                  degrees: bool = False) -> np.ndarray:
        """
        Inverse pole figure color of a sample direction.

        The sample direction is transformed into the crystal frame of each
        symmetrically equivalent orientation until it falls into the standard
        stereographic triangle. The position within the triangle determines
        the color.

        Parameters
        ----------
        phi : numpy.ndarray, shape (...,3)
            Bunge Euler angles.
        ref_dir : numpy.ndarray, shape (3), optional
            Sample direction. Defaults to (0,0,1).
        degrees : bool, optional
            Euler angles are given in degrees. Defaults to False.

        Returns
        -------
        rgb : numpy.ndarray of uint8, shape (...,3)
            Red, green, and blue channel.

        Examples
        --------
        >>> import oricore
        >>> oricore.LaueOps.from_key('cubic_high').IPF_color([0,0,0])
        array([255,   0,   0], dtype=uint8)

        """
        eu = np.radians(phi) if degrees else np.asarray(phi,dtype=float)
        q = conversion.eu2qu(eu)
        shape = q.shape[:-1]

        g = conversion.qu2om(_multiply(self._operators(len(shape)),q))
        p = np.einsum('...ij,j',g,np.asarray(ref_dir,dtype=float))
        p /= np.linalg.norm(p,axis=-1,keepdims=True)
        valid = np.ones(p.shape[:-1],dtype=bool)
        if self.has_inversion:
            p = np.where(p[...,2:3] < 0.,-p,p)
        else:
            valid = p[...,2] >= 0.

        eta,chi = self._pole_angles(p)
        ok = valid & self.in_unit_triangle(eta,chi)
        found = np.any(ok,axis=0)
        if not np.all(found):
            logger.warning(f'{np.count_nonzero(~found)} direction(s) outside of the standard stereographic triangle')
        j = np.where(found,np.argmax(ok,axis=0),self.num_sym_ops-1)[np.newaxis]

        return self._IPF_channels(np.take_along_axis(eta,j,axis=0)[0],
                                  np.take_along_axis(chi,j,axis=0)[0])


    def Rodrigues_color(self,
                        rho: FloatSequence) -> np.ndarray:
        """
        Color of a Rodrigues–Frank vector.

        Each component is mapped linearly from the binned
        region of homochoric space onto a color channel.

        Parameters
        ----------
        rho : numpy.ndarray, shape (...,3)
            Rodrigues–Frank vector n·tan(ω/2).

        Returns
        -------
        rgb : numpy.ndarray of uint8, shape (...,3)
            Red, green, and blue channel.

        """
        dim = self.table.odf_dim
        rgb = (np.asarray(rho,dtype=float)+dim)/(2.*dim)/np.array([dim[0],dim[0],dim[1]])
        return (np.clip(rgb,0.,1.)*255.).astype(np.uint8)


    def misorientation_color(self,
                             q1: Union[Rotation, FloatSequence],
                             q2: Union[Rotation, FloatSequence],
                             ref_dir: FloatSequence = (0,0,1)) -> np.ndarray:
        """Misorientation color (not available)."""
        raise NotImplementedError(f'misorientation color for {self.name}')


    def IPF_triangle_legend(self,
                            image_dim: int = 512) -> BulkArray:
        """
        Color legend of the inverse pole figure.

        The upper hemisphere is shown in equal-area projection,
        pixels outside of the standard stereographic triangle are white.

        Parameters
        ----------
        image_dim : int, optional
            Edge length of the square image in pixels. Defaults to 512.

        Returns
        -------
        legend : oricore.BulkArray, shape (image_dim²,4)
            RGBA pixels of type uint8, first row at the top.

        """
        if image_dim < 1:
            raise ValueError(f'invalid image dimension {image_dim}')
        c = (2.*np.arange(image_dim)+1.)/image_dim - 1.
        x,y = np.meshgrid(c,-c)
        v = util.unproject_equal_area(np.stack([x,y],axis=-1))

        with np.errstate(invalid='ignore'):
            eta,chi = self._pole_angles(v)
            inside = self.in_unit_triangle(eta,chi) & ~np.isnan(chi)
        rgba = np.full((image_dim,image_dim,4),255,dtype=np.uint8)
        rgba[inside,:3] = self._IPF_channels(eta[inside],chi[inside])

        return BulkArray.wrap(rgba.reshape(-1,4),name=f'{self.name} IPF legend',owns_data=True)


    ################################################################################################
    # slip

    def _max_Schmid(self,
                    load: np.ndarray,
                    planes: np.ndarray,
                    directions: np.ndarray,
                    valid: np.ndarray) -> SchmidTuple:
        """First slip system with the highest Schmid factor; zero if none is valid."""
        load_norm = np.linalg.norm(load,axis=-1,keepdims=True)
        cos_phi = np.abs(np.einsum('...j,mj',load,planes))/(load_norm*np.linalg.norm(planes,axis=-1))
        cos_lambda = np.abs(np.einsum('...j,mj',load,directions))/(load_norm*np.linalg.norm(directions,axis=-1))
        m = np.where(valid,cos_phi*cos_lambda,0.)

        best = np.asarray(np.argmax(m,axis=-1))
        factor = np.take_along_axis(m,best[...,np.newaxis],axis=-1)[...,0]
        found = factor > 0.
        angles = np.stack([np.arccos(np.clip(np.take_along_axis(c,best[...,np.newaxis],axis=-1)[...,0],-1.,1.))
                           for c in (cos_phi,cos_lambda)],axis=-1)
        return SchmidTuple(factor,
                           np.where(found[...,np.newaxis],angles,0.),
                           np.where(found,best,0))

    def Schmid_factor(self,
                      load: FloatSequence,
                      plane: Optional[FloatSequence] = None,
                      direction: Optional[FloatSequence] = None) -> SchmidTuple:
        """
        Calculate highest Schmid factor.

        Parameters
        ----------
        load : numpy.ndarray, shape (...,3)
            Loading direction in the crystal frame.
        plane : numpy.ndarray, shape (3), optional
            Slip plane normal. If given, all symmetrically equivalent
            slip systems with non-negative plane normal z-component are
            considered. Defaults to the tabulated slip systems.
        direction : numpy.ndarray, shape (3), optional
            Slip direction. Required if plane is given.

        Returns
        -------
        factor : float or numpy.ndarray, shape (...)
            Highest Schmid factor |cos φ cos λ|.
        angles : numpy.ndarray, shape (...,2)
            Angles φ (plane normal) and λ (slip direction) to the
            loading direction in radians.
        slip_system : int or numpy.ndarray of int, shape (...)
            Index of the symmetry operator or, for the tabulated
            slip systems, of the slip system.

        Examples
        --------
        Maximum Schmid factor of {111}<110> slip under [001] loading:

        >>> import oricore
        >>> ops = oricore.LaueOps.from_key('cubic_high')
        >>> round(float(ops.Schmid_factor([0,0,1]).factor),4)
        0.4082

        """
        load_ = np.asarray(load,dtype=float)

        if plane is None and direction is None:
            if self.table.slip_systems is None:
                raise NotImplementedError(f'no slip systems tabulated for {self.name}')
            return self._max_Schmid(load_,
                                    self.table.slip_systems[:,0],self.table.slip_systems[:,1],
                                    np.ones(len(self.table.slip_systems),dtype=bool))
        if plane is None or direction is None:
            raise ValueError('slip plane and slip direction need to be given together')

        planes = self.table.sym_matrices @ np.asarray(plane,dtype=float)
        directions = self.table.sym_matrices @ np.asarray(direction,dtype=float)
        return self._max_Schmid(load_,planes,directions,planes[:,2] >= 0.)


    def m_prime(self,
                q1: Union[Rotation, FloatSequence],
                q2: Union[Rotation, FloatSequence],
                LD: FloatSequence) -> Union[float, np.ndarray]:
        """
        Calculate the Luster–Morris slip transmission parameter m'.

        For each orientation, the slip system with the highest Schmid factor
        under the loading direction is selected.

        Parameters
        ----------
        q1 : oricore.Rotation or numpy.ndarray, shape (...,4)
            Orientation of the first grain.
        q2 : oricore.Rotation or numpy.ndarray, shape (...,4)
            Orientation of the second grain.
        LD : numpy.ndarray, shape (3)
            Loading direction in the sample frame.

        Returns
        -------
        m_prime : float or numpy.ndarray, shape (...)
            |n_1·n_2| |d_1·d_2| of the slip plane normals n and slip directions d.

        References
        ----------
        J. Luster and M.A. Morris, Metallurgical and Materials Transactions A 26:1745–1756, 1995
        https://doi.org/10.1007/BF02670762

        """
        if self.table.slip_systems is None:
            raise NotImplementedError(f'm\' for {self.name}')

        def active_system(q):
            g = conversion.qu2om(_quaternion(q))
            ss = self.table.slip_systems[self.Schmid_factor(g@np.asarray(LD,dtype=float)).slip_system]
            return np.einsum('...ji,...kj->...ki',g,ss)

        s1 = active_system(q1)
        s2 = active_system(q2)
        return np.abs(np.sum(s1[...,0,:]*s2[...,0,:],axis=-1)) \
             * np.abs(np.sum(s1[...,1,:]*s2[...,1,:],axis=-1))

    def F1(self,
           q1: Union[Rotation, FloatSequence],
           q2: Union[Rotation, FloatSequence],
           LD: FloatSequence,
           max_Schmid: bool = True) -> float:
        """Slip transmission parameter F1 (not available)."""
        raise NotImplementedError(f'F1 for {self.name}')

    def F1spt(self,
              q1: Union[Rotation, FloatSequence],
              q2: Union[Rotation, FloatSequence],
              LD: FloatSequence,
              max_Schmid: bool = True) -> float:
        """Slip transmission parameter F1spt (not available)."""
        raise NotImplementedError(f'F1spt for {self.name}')

    def F7(self,
           q1: Union[Rotation, FloatSequence],
           q2: Union[Rotation, FloatSequence],
           LD: FloatSequence,
           max_Schmid: bool = True) -> float:
        """Slip transmission parameter F7 (not available)."""
        raise NotImplementedError(f'F7 for {self.name}')


    ################################################################################################
    # pole figures

    @staticmethod
    def _sphere_chunk(eulers: np.ndarray,
                      directions: List[np.ndarray],
                      output: List[np.ndarray],
                      chunk: Tuple[int, int]):
        s,e = chunk
        g = conversion.eu2om(eulers[s:e])
        for d,out in zip(directions,output):
            out[s*len(d):e*len(d)] = np.einsum('kj,nji->nki',d,g).reshape(-1,3)

    def sphere_coordinates(self,
                           eulers: Union[BulkArray, FloatSequence],
                           labels: Optional[List[str]] = None) -> List[BulkArray]:
        """
        Sample frame coordinates of the pole families.

        Parameters
        ----------
        eulers : oricore.BulkArray or numpy.ndarray, shape (N,3)
            Bunge Euler angles in radians.
        labels : list of str, optional
            Names of the pole families. Defaults to the table labels.

        Returns
        -------
        xyz : list of oricore.BulkArray, shape (N·2k,3)
            Unit vectors for each of the pole families with k directions.
            Each direction is followed by its antipode; the 2k vectors
            of orientation i start at row 2k·i.

        """
        eu = polefigure.euler_array({'eulers':eulers})
        labels_ = [label for label,_ in self.table.pole_families]
        for i,label in enumerate((labels or [])[:len(labels_)]): labels_[i] = label

        directions = [np.stack([d,-d],axis=1).reshape(-1,3) for _,d in self.table.pole_families]
        output = [np.empty((len(eu)*len(d),3)) for d in directions]

        pool = ThreadPool(util.num_threads())
        result = pool.map_async(partial(LaueOps._sphere_chunk,eu,directions,output),
                                util.parallel_chunks(len(eu),util.num_threads()))
        pool.close()
        pool.join()
        result.get()

        return [BulkArray.wrap(o,name=label,owns_data=True) for o,label in zip(output,labels_)]


    def pole_figure(self,
                    config: Union[polefigure.PoleFigureConfig, Dict]) -> List[BulkArray]:
        """
        Generate pole figures.

        Parameters
        ----------
        config : oricore.PoleFigureConfig or dict
            Pole figure configuration. The entries 'min_scale'
            and 'max_scale' are set to the common intensity range.

        Returns
        -------
        images : list of oricore.BulkArray, shape (image_dim²,4)
            RGBA image (uint8) of each pole family.

        Examples
        --------
        >>> import numpy as np
        >>> import oricore
        >>> cfg = oricore.PoleFigureConfig(eulers=np.zeros((1,3)),image_dim=32,lambert_dim=32)
        >>> [i.name for i in oricore.LaueOps.from_key('cubic_high').pole_figure(cfg)]
        ['<001>', '<011>', '<111>']

        """
        cfg = polefigure.check(config)
        families = self.sphere_coordinates(cfg['eulers'],cfg['labels'])
        logger.info(f'{self.name}: {len(polefigure.euler_array(cfg))} orientations, '
                    f'{len(families)} pole families, {cfg["image_dim"]}² pixels')
        images = polefigure.generate(families,cfg)
        if cfg is not config:
            config.update({k:cfg[k] for k in ['sphere_radius','min_scale','max_scale']})
        return images
