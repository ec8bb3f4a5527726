import copy
from typing import Optional, Union, Sequence, Tuple, Literal, TypeVar

import numpy as np

from ._typehints import FloatSequence, IntSequence, NumpyRngSeed, QuaternionOrder, RotationConvention
from . import conversion
from . import util


MyType = TypeVar('MyType', bound='Rotation')

class Rotation:
    u"""
    Rotation with functionality for conversion between different representations.

    The following conventions apply:

    - Coordinate frames are right-handed.
    - A rotation angle ω is taken to be positive for a counterclockwise rotation
      when viewing from the end point of the rotation axis towards the origin.
    - Rotations will be interpreted in the passive sense, i.e. as rotation of
      the coordinate frame.
    - P = -1.
    - Quaternions are stored scalar-first ('wxyz'). Every constructor and
      serializer that deals with quaternions takes the component order explicitly.

    Examples
    --------
    Rotate vector 'a' (defined in coordinate system 'A') to
    coordinates 'b' expressed in system 'B':

    >>> import numpy as np
    >>> import oricore
    >>> Q = oricore.Rotation.from_random()
    >>> a = np.random.rand(3)
    >>> b = Q @ a
    >>> np.allclose(np.dot(Q.as_matrix(),a),b)
    True

    Compound rotations R1 (first) and R2 (second):

    >>> R1 = oricore.Rotation.from_random()
    >>> R2 = oricore.Rotation.from_random()
    >>> R = R2 * R1
    >>> np.allclose(R.as_matrix(), np.dot(R2.as_matrix(),R1.as_matrix()))
    True

    References
    ----------
    D. Rowenhorst et al., Modelling and Simulation in Materials Science and Engineering 23:083501, 2015
    https://doi.org/10.1088/0965-0393/23/8/083501

    """

    __slots__ = ['quaternion']

    def __init__(self,
                 rotation: Union[FloatSequence, 'Rotation'] = np.array([1.,0.,0.,0.])):
        """
        New rotation.

        Parameters
        ----------
        rotation : list, numpy.ndarray, or Rotation, optional
            Unit quaternion (scalar-first) in positive real hemisphere.
            Use .from_quaternion to perform a sanity check.
            Defaults to no rotation.

        """
        self.quaternion: np.ndarray
        if isinstance(rotation,Rotation):
            self.quaternion = rotation.quaternion.copy()
        elif np.array(rotation).shape[-1] == 4:
            self.quaternion = np.array(rotation,dtype=float)
        else:
            raise TypeError('"rotation" is neither a Rotation nor a quaternion')


    def __repr__(self) -> str:
        """
        Return repr(self).

        Give short, human-readable summary.

        """
        return f'Quaternion{" " if self.quaternion.shape == (4,) else "s of shape "+str(self.quaternion.shape[:-1])+chr(10)}'\
               + str(self.quaternion)


    def __copy__(self: MyType,
                 rotation: Union[None, FloatSequence, 'Rotation'] = None) -> MyType:
        """
        Return deepcopy(self).

        Create deep copy.

        """
        dup = copy.deepcopy(self)
        if rotation is not None:
            dup.quaternion = Rotation(rotation).quaternion
        return dup

    copy = __copy__


    def __getitem__(self,
                    item: Union[Tuple[Union[None, int, slice]], int, bool, np.bool_, np.ndarray]):
        """
        Return self[item].

        Return slice according to item.

        """
        return self.copy() if self.shape == () else \
               self.copy(self.quaternion[item+(slice(None),)] if isinstance(item,tuple) else self.quaternion[item])


    def __eq__(self,
               other: object) -> bool:
        """
        Return self==other.

        Test equality of other. q and -q describe the same rotation.

        Parameters
        ----------
        other : Rotation
            Rotation to check for equality.

        """
        return NotImplemented if not isinstance(other, Rotation) else \
               np.logical_or(np.all(self.quaternion ==     other.quaternion,axis=-1),
                             np.all(self.quaternion == -1.*other.quaternion,axis=-1))


    def __ne__(self,
               other: object) -> bool:
        """
        Return self!=other.

        Test inequality of other.

        Parameters
        ----------
        other : Rotation
            Rotation to check for inequality.

        """
        return np.logical_not(self==other) if isinstance(other, Rotation) else NotImplemented

    def isclose(self: MyType,
                other: MyType,
                rtol: float = 1.e-5,
                atol: float = 1.e-8,
                equal_nan: bool = True) -> bool:
        """
        Report where values are approximately equal to corresponding ones of other Rotation.

        Parameters
        ----------
        other : Rotation
            Rotation to compare against.
        rtol : float, optional
            Relative tolerance of equality.
        atol : float, optional
            Absolute tolerance of equality.
        equal_nan : bool, optional
            Consider matching NaN values as equal. Defaults to True.

        Returns
        -------
        mask : numpy.ndarray of bool, shape (self.shape)
            Mask indicating where corresponding rotations are close.

        """
        s = self.quaternion
        o = other.quaternion
        return np.logical_or(np.all(np.isclose(s,    o,rtol,atol,equal_nan),axis=-1),
                             np.all(np.isclose(s,-1.*o,rtol,atol,equal_nan),axis=-1))


    def allclose(self: MyType,
                 other: MyType,
                 rtol: float = 1.e-5,
                 atol: float = 1.e-8,
                 equal_nan: bool = True) -> Union[np.bool_, bool]:
        """
        Test whether all values are approximately equal to corresponding ones of other Rotation.

        Parameters
        ----------
        other : Rotation
            Rotation to compare against.
        rtol : float, optional
            Relative tolerance of equality.
        atol : float, optional
            Absolute tolerance of equality.
        equal_nan : bool, optional
            Consider matching NaN values as equal. Defaults to True.

        Returns
        -------
        answer : bool
            Whether all values are close between both rotations.

        """
        return np.all(self.isclose(other,rtol,atol,equal_nan))


    def __array__(self):
        """Initializer for numpy."""
        return self.quaternion


    @property
    def size(self) -> int:
        return self.quaternion[...,0].size

    @property
    def shape(self) -> Tuple[int, ...]:
        return self.quaternion[...,0].shape


    def __len__(self) -> int:
        """
        Return len(self).

        Length of leading/leftmost dimension of array.

        """
        return 0 if self.shape == () else self.shape[0]


    def __invert__(self: MyType) -> MyType:
        """
        Return ~self.

        Inverse rotation (backward rotation).

        """
        dup = self.copy()
        dup.quaternion[...,1:] *= -1.
        return dup


    def __mul__(self: MyType,
                other: MyType) -> MyType:
        """
        Return self*other.

        Compose with other.

        Parameters
        ----------
        other : Rotation
            Rotation for composition.
            Shapes need to be broadcastable.

        Returns
        -------
        composition : Rotation
            Compound rotation self*other, i.e. first other then self rotation.

        """
        if isinstance(other,Rotation):
            q_m = self.quaternion[...,0:1]
            p_m = self.quaternion[...,1:]
            q_o = other.quaternion[...,0:1]
            p_o = other.quaternion[...,1:]

            q = q_m*q_o - np.sum(p_m*p_o,axis=-1,keepdims=True)
            p = q_m*p_o + q_o*p_m + conversion.P * np.cross(p_m,p_o)
            return self.copy(Rotation(np.block([q,p]))._standardize())
        else:
            raise TypeError('use "R@b", i.e. matmul, to apply rotation "R" to object "b"')


    def __truediv__(self: MyType,
                    other: MyType) -> MyType:
        """
        Return self/other.

        Compose with inverse of other.

        Parameters
        ----------
        other : Rotation
            Rotation to invert for composition.

        Returns
        -------
        composition : Rotation
            Compound rotation self*(~other), i.e. first inverse of other then self rotation.

        """
        if isinstance(other,Rotation):
            return self*~other
        else:
            raise TypeError('use "R@b", i.e. matmul, to apply rotation "R" to object "b"')


    def apply(self,
              vector: FloatSequence,
              convention: RotationConvention = 'passive') -> np.ndarray:
        """
        Rotate vector.

        Parameters
        ----------
        vector : numpy.ndarray, shape (...,3)
            Vector(s) to rotate. Shape needs to be broadcastable with self.shape.
        convention : {'passive', 'active'}, optional
            'passive' expresses the vector in the coordinate frame defined by the rotation,
            i.e. R∙v. 'active' rotates the vector, i.e. R.T∙v.
            Defaults to 'passive'.

        Returns
        -------
        rotated : numpy.ndarray, shape (...,3)
            Rotated vector(s).

        Examples
        --------
        A rotation by 90° about z maps [1,0,0] onto [0,1,0] when acting actively.

        >>> import oricore
        >>> R = oricore.Rotation.from_axis_angle([0,0,1,90],degrees=True)
        >>> R.apply([1,0,0],convention='active').round(6)
        array([0., 1., 0.])

        """
        if convention not in ['passive','active']:
            raise ValueError(f'invalid rotation convention "{convention}"')
        v = np.asarray(vector,dtype=float)
        if v.shape[-1:] != (3,): raise ValueError('can only rotate vectors')

        q_m = self.quaternion[...,0:1]
        p_m = self.quaternion[...,1:]
        A = q_m**2 - np.sum(p_m**2,axis=-1,keepdims=True)
        B = 2. * np.sum(p_m*v,axis=-1,keepdims=True)
        C = 2. * conversion.P * q_m * (1. if convention == 'passive' else -1.)
        return A*v + B*p_m + C*np.cross(p_m,v)

    def __matmul__(self,
                   other: np.ndarray) -> np.ndarray:
        """
        Return self@other.

        Rotate vector passively, see apply.

        Parameters
        ----------
        other : numpy.ndarray, shape (...,3)
            Vector on which to apply the rotation.

        Returns
        -------
        rotated : numpy.ndarray, shape (...,3)
            Rotated vector, i.e. transformed to frame defined by rotation.

        """
        if isinstance(other, np.ndarray):
            return self.apply(other)
        elif isinstance(other, Rotation):
            raise TypeError('use "R2*R1", i.e. multiplication, to compose rotations "R1" and "R2"')
        else:
            raise TypeError(f'cannot rotate "{type(other)}"')


    def _standardize(self: MyType) -> MyType:
        """Standardize quaternion (ensure positive real hemisphere)."""
        self.quaternion[self.quaternion[...,0] < 0.] *= -1.
        return self


    def flatten(self: MyType,
                order: Literal['C','F','A'] = 'C') -> MyType:
        """
        Flatten array.

        Parameters
        ----------
        order : {'C', 'F', 'A'}, optional
            'C' flattens in row-major (C-style) order.
            'F' flattens in column-major (Fortran-style) order.
            'A' flattens in column-major order if object is Fortran contiguous in memory,
            row-major order otherwise.
            Defaults to 'C'.

        Returns
        -------
        flattened : Rotation
            Rotation flattened to single dimension.

        """
        return self.copy(self.quaternion.reshape((-1,4),order=order))


    def reshape(self: MyType,
                shape: Union[int, IntSequence],
                order: Literal['C','F','A'] = 'C') -> MyType:
        """
        Reshape array.

        Parameters
        ----------
        shape : (sequence of) int
            New shape, number of elements needs to match the original shape.
            If an integer is supplied, then the result will be a 1-D array of that length.
        order : {'C', 'F', 'A'}, optional
            'C' reshapes in row-major (C-style) order.
            'F' reshapes in column-major (Fortran-style) order.
            Defaults to 'C'.

        Returns
        -------
        reshaped : Rotation
            Rotation of given shape.

        """
        if isinstance(shape,(int,np.integer)): shape = (shape,)
        return self.copy(self.quaternion.reshape(tuple(shape)+(4,),order=order))


    def broadcast_to(self: MyType,
                     shape: Union[int, IntSequence],
                     mode: Literal['left', 'right'] = 'right') -> MyType:
        """
        Broadcast array.

        Parameters
        ----------
        shape : (sequence of) int
            Shape of broadcasted array, needs to be compatible with the original shape.
        mode : {'left', 'right'}, optional
            Where to preferentially insert new axes.
            With 'right', the original axes stay leading. Defaults to 'right'.

        Returns
        -------
        broadcasted : Rotation
            Rotation broadcasted to given shape.

        """
        shape_ = (shape,) if isinstance(shape,(int,np.integer)) else tuple(shape)
        q = self.quaternion.reshape(util.shapeshifter(self.shape,shape_,mode)+(4,))
        return self.copy(np.broadcast_to(q,shape_+(4,)))


    def misorientation(self: MyType,
                       other: MyType) -> MyType:
        """
        Calculate misorientation to other Rotation.

        No crystal symmetry is considered, see LaueOps.misorientation.

        Parameters
        ----------
        other : Rotation
            Rotation to which the misorientation is computed.

        Returns
        -------
        g : Rotation
            Misorientation.

        """
        return ~(self*~other)


    ################################################################################################
    # convert to different orientation representations (numpy arrays)

    def as_quaternion(self,
                      order: QuaternionOrder = 'wxyz') -> np.ndarray:
        """
        Represent as unit quaternion.

        Parameters
        ----------
        order : {'wxyz', 'xyzw'}, optional
            Component order, scalar-first or scalar-last.
            Defaults to 'wxyz'.

        Returns
        -------
        q : numpy.ndarray, shape (...,4)
            Unit quaternion in positive real hemisphere, i.e. ǀqǀ = 1, w ≥ 0.

        """
        return conversion.reorder(self.quaternion,'wxyz',order)

    def as_Euler_angles(self,
                        degrees: bool = False) -> np.ndarray:
        """
        Represent as Bunge Euler angles.

        Parameters
        ----------
        degrees : bool, optional
            Return angles in degrees. Defaults to False.

        Returns
        -------
        phi : numpy.ndarray, shape (...,3)
            Bunge Euler angles (φ_1 ∈ [0,2π], ϕ ∈ [0,π], φ_2 ∈ [0,2π])
            or (φ_1 ∈ [0,360], ϕ ∈ [0,180], φ_2 ∈ [0,360]) if degrees == True.

        Notes
        -----
        Bunge Euler angles correspond to a rotation axis sequence of z–x'–z''.

        Examples
        --------
        Cube orientation as Bunge Euler angles.

        >>> import oricore
        >>> oricore.Rotation([1,0,0,0]).as_Euler_angles()
        array([0., 0., 0.])

        """
        eu = conversion.qu2eu(self.quaternion)
        return np.degrees(eu) if degrees else eu

    def as_axis_angle(self,
                      degrees: bool = False,
                      pair: bool = False) -> Union[Tuple[np.ndarray, np.ndarray], np.ndarray]:
        """
        Represent as axis–angle pair.

        Parameters
        ----------
        degrees : bool, optional
            Return rotation angle in degrees. Defaults to False.
        pair : bool, optional
            Return tuple of axis and angle. Defaults to False.

        Returns
        -------
        n_omega : numpy.ndarray, shape (...,4) or tuple ((...,3), (...)) if pair == True
            Axis and angle [n_1, n_2, n_3, ω] with ǀnǀ = 1 and ω ∈ [0,π]
            or ω ∈ [0,180] if degrees == True.
            The identity has the axis [0,0,1].

        Examples
        --------
        Cube orientation as axis–angle pair.

        >>> import oricore
        >>> oricore.Rotation([1,0,0,0]).as_axis_angle(pair=True)
        (array([0., 0., 1.]), array(0.))

        """
        ax: np.ndarray = conversion.qu2ax(self.quaternion)
        if degrees: ax[...,3] = np.degrees(ax[...,3])
        return (ax[...,:3],ax[...,3]) if pair else ax

    def as_matrix(self) -> np.ndarray:
        """
        Represent as rotation matrix.

        Returns
        -------
        R : numpy.ndarray, shape (...,3,3)
            Rotation matrix R with det(R) = 1, R.T ∙ R = I.

        """
        return conversion.qu2om(self.quaternion)

    def as_Rodrigues_vector(self,
                            compact: bool = False) -> np.ndarray:
        """
        Represent as Rodrigues–Frank vector with separate axis and angle argument.

        Parameters
        ----------
        compact : bool, optional
            Return three-component Rodrigues–Frank vector,
            i.e. axis and angle argument are not separated.

        Returns
        -------
        rho : numpy.ndarray, shape (...,4) or (...,3) if compact == True
            Rodrigues–Frank vector [n_1, n_2, n_3, tan(ω/2)] with ǀnǀ = 1 and ω ∈ [0,π]
            or [n_1, n_2, n_3] with ǀnǀ = tan(ω/2) if compact == True.
            For ω = π, tan(ω/2) is replaced by RODRIGUES_SENTINEL.

        """
        ro = conversion.qu2ro(self.quaternion)
        return conversion.compact_ro(ro) if compact else ro

    def as_homochoric(self) -> np.ndarray:
        """
        Represent as homochoric vector.

        Returns
        -------
        h : numpy.ndarray, shape (...,3)
            Homochoric vector (h_1, h_2, h_3) with ǀhǀ < (3/4*π)^(1/3).

        """
        return conversion.qu2ho(self.quaternion)

    def as_cubochoric(self) -> np.ndarray:
        """
        Represent as cubochoric vector.

        Returns
        -------
        x : numpy.ndarray, shape (...,3)
            Cubochoric vector (x_1, x_2, x_3) with max(x_i) < 1/2*π^(2/3).

        """
        return conversion.qu2cu(self.quaternion)

    ################################################################################################
    # Static constructors. The input data needs to follow the conventions, options allow to
    # relax the conventions.
    @staticmethod
    def from_quaternion(q: Union[Sequence[FloatSequence], np.ndarray],
                        order: QuaternionOrder = 'wxyz',
                        accept_homomorph: bool = False,
                        normalize: bool = False,
                        P: Literal[1, -1] = -1) -> 'Rotation':
        """
        Initialize from quaternion.

        Parameters
        ----------
        q : numpy.ndarray, shape (...,4)
            Unit quaternion in positive real hemisphere, i.e. ǀqǀ = 1 and w ≥ 0.
        order : {'wxyz', 'xyzw'}, optional
            Component order of q, scalar-first or scalar-last.
            Defaults to 'wxyz'.
        accept_homomorph : bool, optional
            Allow homomorphic variants, i.e. w < 0 (negative real hemisphere).
            Defaults to False.
        normalize: bool, optional
            Allow ǀqǀ ≠ 1. Defaults to False.
        P : int ∈ {-1,1}, optional
            Sign convention. Defaults to -1.

        Returns
        -------
        new : Rotation

        """
        qu = np.array(q,dtype=float)
        if qu.shape[:-2:-1] != (4,): raise ValueError('invalid shape')
        if abs(P) != 1: raise ValueError('P ∉ {-1,1}')

        qu = conversion.reorder(qu,order,'wxyz')
        qu[...,1:4] *= -P

        if accept_homomorph:
            qu[qu[...,0]<0.] *= -1.
        elif np.any(qu[...,0] < 0.):
            raise ValueError('quaternion with negative first (real) component')
        if normalize:
            qu /= np.linalg.norm(qu,axis=-1,keepdims=True)
        elif not np.allclose(np.linalg.norm(qu,axis=-1),1.,rtol=1.e-8):
            raise ValueError('quaternion is not of unit length')

        return Rotation(qu)

    @staticmethod
    def from_Euler_angles(phi: FloatSequence,
                          degrees: bool = False) -> 'Rotation':
        """
        Initialize from Bunge Euler angles.

        Parameters
        ----------
        phi : numpy.ndarray, shape (...,3)
            Euler angles (φ_1 ∈ [0,2π], ϕ ∈ [0,π], φ_2 ∈ [0,2π])
            or (φ_1 ∈ [0,360], ϕ ∈ [0,180], φ_2 ∈ [0,360]) if degrees == True.
        degrees : bool, optional
            Euler angles are given in degrees. Defaults to False.

        Returns
        -------
        new : Rotation

        Notes
        -----
        Bunge Euler angles correspond to a rotation axis sequence of z–x'–z''.

        """
        eu = np.array(phi,dtype=float)
        if eu.shape[:-2:-1] != (3,): raise ValueError('invalid shape')

        eu = np.radians(eu) if degrees else eu
        if np.any(eu < 0.) or np.any(eu > np.pi*np.array([2.,1.,2.])+1.e-9):
            raise ValueError('Euler angles outside of [0..2π],[0..π],[0..2π]')

        return Rotation(conversion.eu2qu(eu))

    @staticmethod
    def from_axis_angle(n_omega: FloatSequence,
                        degrees: bool = False,
                        normalize: bool = False,
                        P: Literal[1, -1] = -1) -> 'Rotation':
        """
        Initialize from axis–angle pair.

        Parameters
        ----------
        n_omega : numpy.ndarray, shape (...,4)
            Axis and angle (n_1, n_2, n_3, ω) with ǀnǀ = 1 and ω ∈ [0,π]
            or ω ∈ [0,180] if degrees == True.
        degrees : bool, optional
            Angle ω is given in degrees. Defaults to False.
        normalize: bool, optional
            Allow ǀnǀ ≠ 1. Defaults to False.
        P : int ∈ {-1,1}, optional
            Sign convention. Defaults to -1.

        Returns
        -------
        new : Rotation

        """
        ax = np.array(n_omega,dtype=float)
        if ax.shape[:-2:-1] != (4,): raise ValueError('invalid shape')
        if abs(P) != 1: raise ValueError('P ∉ {-1,1}')

        ax[...,0:3] *= -P
        if degrees: ax[...,  3] = np.radians(ax[...,3])
        if np.any(ax[...,3] < 0.) or np.any(ax[...,3] > np.pi+1.e-9):
            raise ValueError('axis–angle rotation angle outside of [0..π]')

        if normalize:
            ax[...,0:3] /= np.linalg.norm(ax[...,0:3],axis=-1,keepdims=True)
        elif not np.allclose(np.linalg.norm(ax[...,0:3],axis=-1),1.):
            raise ValueError('axis–angle rotation axis is not of unit length')

        return Rotation(conversion.ax2qu(ax))

    @staticmethod
    def from_matrix(R: FloatSequence,
                    normalize: bool = False) -> 'Rotation':
        """
        Initialize from rotation matrix.

        Parameters
        ----------
        R : numpy.ndarray, shape (...,3,3)
            Rotation matrix with det(R) = 1 and R.T ∙ R = I.
        normalize : bool, optional
            Rescales rotation matrix to unit determinant. Defaults to False.

        Returns
        -------
        new : Rotation

        """
        om = np.array(R,dtype=float)
        if om.shape[-2:] != (3,3): raise ValueError('invalid shape')
        if normalize:
            om *= (np.linalg.det(om)**(-1./3.))[...,np.newaxis,np.newaxis]

        if not np.allclose(np.einsum('...ji,...jk',om,om),np.eye(3),atol=1.e-6):
            raise ValueError('rotation matrix is not orthogonal')
        if not np.allclose(np.linalg.det(om),1.):
            raise ValueError('rotation matrix has determinant ≠ 1')

        return Rotation(conversion.om2qu(om))

    @staticmethod
    def from_Rodrigues_vector(rho: FloatSequence,
                              normalize: bool = False,
                              P: Literal[1, -1] = -1) -> 'Rotation':
        """
        Initialize from Rodrigues–Frank vector (with angle separated from axis).

        Parameters
        ----------
        rho : numpy.ndarray, shape (...,4)
            Rodrigues–Frank vector (n_1, n_2, n_3, tan(ω/2)) with ǀnǀ = 1 and ω ∈ [0,π].
            Magnitudes of RODRIGUES_SENTINEL or larger denote ω = π.
        normalize : bool, optional
            Allow ǀnǀ ≠ 1. Defaults to False.
        P : int ∈ {-1,1}, optional
            Sign convention. Defaults to -1.

        Returns
        -------
        new : Rotation

        """
        ro = np.array(rho,dtype=float)
        if ro.shape[:-2:-1] != (4,): raise ValueError('invalid shape')
        if abs(P) != 1: raise ValueError('P ∉ {-1,1}')

        ro[...,0:3] *= -P
        if np.any(ro[...,3] < 0.): raise ValueError('Rodrigues vector rotation angle is negative')

        if normalize:
            ro[...,0:3] /= np.linalg.norm(ro[...,0:3],axis=-1,keepdims=True)
        elif not np.allclose(np.linalg.norm(ro[...,0:3],axis=-1),1.):
            raise ValueError('Rodrigues vector rotation axis is not of unit length')

        return Rotation(conversion.ro2qu(ro))

    @staticmethod
    def from_homochoric(h: FloatSequence,
                        P: Literal[1, -1] = -1) -> 'Rotation':
        """
        Initialize from homochoric vector.

        Parameters
        ----------
        h : numpy.ndarray, shape (...,3)
            Homochoric vector (h_1, h_2, h_3) with ǀhǀ < (3/4*π)^(1/3).
        P : int ∈ {-1,1}, optional
            Sign convention. Defaults to -1.

        Returns
        -------
        new : Rotation

        """
        ho = np.array(h,dtype=float)
        if ho.shape[:-2:-1] != (3,): raise ValueError('invalid shape')
        if abs(P) != 1: raise ValueError('P ∉ {-1,1}')

        ho *= -P

        if np.any(np.linalg.norm(ho,axis=-1) > conversion._R1+1.e-9):
            raise ValueError('homochoric coordinate outside of the sphere')

        return Rotation(conversion.ho2qu(ho))

    @staticmethod
    def from_cubochoric(x: FloatSequence,
                        P: Literal[1, -1] = -1) -> 'Rotation':
        """
        Initialize from cubochoric vector.

        Parameters
        ----------
        x : numpy.ndarray, shape (...,3)
            Cubochoric vector (x_1, x_2, x_3) with max(x_i) < 1/2*π^(2/3).
        P : int ∈ {-1,1}, optional
            Sign convention. Defaults to -1.

        Returns
        -------
        new : Rotation

        """
        cu = np.array(x,dtype=float)
        if cu.shape[:-2:-1] != (3,): raise ValueError('invalid shape')
        if abs(P) != 1: raise ValueError('P ∉ {-1,1}')
        if np.max(np.abs(cu)) > np.pi**(2./3.) * 0.5+1.e-9:
            raise ValueError('cubochoric coordinate outside of the cube')

        return Rotation(conversion.ho2qu(-P*conversion.cu2ho(cu)))


    @staticmethod
    def from_random(shape: Union[None, int, IntSequence] = None,
                    rng_seed: Optional[NumpyRngSeed] = None) -> 'Rotation':
        """
        Initialize with samples from a uniform distribution.

        Parameters
        ----------
        shape : (sequence of) int, optional
            Shape of the returned array. Defaults to None, which gives a scalar.
        rng_seed : {None, int, array_like[ints], SeedSequence, BitGenerator, Generator}, optional
            A seed to initialize the BitGenerator.
            Defaults to None, i.e. unpredictable entropy will be pulled from the OS.

        Returns
        -------
        new : Rotation

        """
        rng = np.random.default_rng(rng_seed)
        r = rng.random(3 if shape is None else tuple(shape)+(3,) if hasattr(shape, '__iter__') else (shape,3)) # type: ignore

        A = np.sqrt(r[...,2])
        B = np.sqrt(1.-r[...,2])
        q = np.stack([np.cos(2.*np.pi*r[...,0])*A,
                      np.sin(2.*np.pi*r[...,1])*B,
                      np.cos(2.*np.pi*r[...,1])*B,
                      np.sin(2.*np.pi*r[...,0])*A],axis=-1)

        return Rotation(q)._standardize()
