"""
Conversions between orientation representations.

All functions operate on numpy arrays of shape (...,k) and return
new arrays of the same leading shape. Angles are in radians.

Representations
---------------
eu : Bunge Euler angles (φ_1, Φ, φ_2), shape (...,3).
qu : Unit quaternion (q_0, q_1, q_2, q_3), scalar-first, shape (...,4).
om : Rotation matrix, shape (...,3,3).
ax : Axis–angle pair (n_1, n_2, n_3, ω), shape (...,4).
ro : Rodrigues–Frank vector (n_1, n_2, n_3, tan(ω/2)), shape (...,4).
ho : Homochoric vector, shape (...,3).
cu : Cubochoric vector, shape (...,3).

Notes
-----
The passive rotation convention (P = -1) is used throughout.
For the identity, axis–angle and Rodrigues–Frank vectors refer to
the default axis [0,0,1]. The magnitude of the Rodrigues–Frank vector
of a rotation by π is RODRIGUES_SENTINEL instead of infinity.

References
----------
D. Rowenhorst et al., Modelling and Simulation in Materials Science and Engineering 23:083501, 2015
https://doi.org/10.1088/0965-0393/23/8/083501

"""
import numpy as _np

from ._typehints import QuaternionOrder as _QuaternionOrder

P = -1
RODRIGUES_SENTINEL = 1.0e10

# parameters for conversion from/to cubochoric
_sc   = _np.pi**(1./6.)/6.**(1./6.)
_beta = _np.pi**(5./6.)/6.**(1./6.)/2.
_R1   = (3.*_np.pi/4.)**(1./3.)

_DEFAULT_AXIS = _np.array([0.,0.,1.,0.])


def reorder(qu: _np.ndarray,
            source: _QuaternionOrder,
            target: _QuaternionOrder) -> _np.ndarray:
    """
    Change the component order of quaternions.

    Parameters
    ----------
    qu : numpy.ndarray, shape (...,4)
        Quaternions in 'source' order.
    source : {'wxyz', 'xyzw'}
        Order of the input, scalar-vector ('wxyz') or vector-scalar ('xyzw').
    target : {'wxyz', 'xyzw'}
        Order of the output.

    Returns
    -------
    qu : numpy.ndarray, shape (...,4)
        Quaternions in 'target' order.

    """
    for o in (source,target):
        if o not in ('wxyz','xyzw'):
            raise ValueError(f'invalid quaternion order "{o}"')
    qu_ = _np.array(qu,dtype=float)
    if source == target:
        return qu_
    return _np.roll(qu_,-1 if source == 'wxyz' else 1,axis=-1)


def compact_ro(ro: _np.ndarray) -> _np.ndarray:
    """Four-component Rodrigues–Frank vector to n·tan(ω/2)."""
    return ro[...,:3]*ro[...,3:4]

def expand_ro(rho: _np.ndarray) -> _np.ndarray:
    """Three-component Rodrigues–Frank vector n·tan(ω/2) to (n, tan(ω/2))."""
    rho_ = _np.asarray(rho,dtype=float)
    t = _np.linalg.norm(rho_,axis=-1,keepdims=True)
    with _np.errstate(invalid='ignore',divide='ignore'):
        ro = _np.block([rho_/t,_np.minimum(t,RODRIGUES_SENTINEL)])
    ro[t[...,0] < 1.e-12] = _DEFAULT_AXIS
    return ro


def _skew(v: _np.ndarray) -> _np.ndarray:
    """Cross product matrix of v."""
    z = _np.zeros_like(v[...,0])
    return _np.stack([_np.stack([ z,        -v[...,2], v[...,1]],-1),
                      _np.stack([ v[...,2],  z,       -v[...,0]],-1),
                      _np.stack([-v[...,1],  v[...,0], z       ],-1)],-2)


####################################################################################################
# Code below is based on https://github.com/MarDiehl/3Drotations and available under the
# following conditions
####################################################################################################
# Copyright (c) 2017-2020, Martin Diehl/Max-Planck-Institut für Eisenforschung GmbH
# Copyright (c) 2013-2014, Marc De Graef/Carnegie Mellon University
# All rights reserved.
#
# Redistribution and use in source and binary forms, with or without modification, are
# permitted provided that the following conditions are met:
#
#     - Redistributions of source code must retain the above copyright notice, this list
#        of conditions and the following disclaimer.
#     - Redistributions in binary form must reproduce the above copyright notice, this
#        list of conditions and the following disclaimer in the documentation and/or
#        other materials provided with the distribution.
#     - Neither the names of Marc De Graef, Carnegie Mellon University nor the names
#        of its contributors may be used to endorse or promote products derived from
#        this software without specific prior written permission.
#
# THIS SOFTWARE IS PROVIDED BY THE COPYRIGHT HOLDERS AND CONTRIBUTORS "AS IS"
# AND ANY EXPRESS OR IMPLIED WARRANTIES, INCLUDING, BUT NOT LIMITED TO, THE
# IMPLIED WARRANTIES OF MERCHANTABILITY AND FITNESS FOR A PARTICULAR PURPOSE
# ARE DISCLAIMED. IN NO EVENT SHALL THE COPYRIGHT HOLDER OR CONTRIBUTORS BE
# LIABLE FOR ANY DIRECT, INDIRECT, INCIDENTAL, SPECIAL, EXEMPLARY, OR CONSEQUENTIAL
# DAMAGES (INCLUDING, BUT NOT LIMITED TO, PROCUREMENT OF SUBSTITUTE GOODS OR
# SERVICES; LOSS OF USE, DATA, OR PROFITS; OR BUSINESS INTERRUPTION) HOWEVER
# CAUSED AND ON ANY THEORY OF LIABILITY, WHETHER IN CONTRACT, STRICT LIABILITY,
# OR TORT (INCLUDING NEGLIGENCE OR OTHERWISE) ARISING IN ANY WAY OUT OF THE
# USE OF THIS SOFTWARE, EVEN IF ADVISED OF THE POSSIBILITY OF SUCH DAMAGE.
####################################################################################################

#---------- Quaternion ----------
def qu2om(qu: _np.ndarray) -> _np.ndarray:
    """Quaternion to rotation matrix."""
    w = qu[...,0]
    v = qu[...,1:4]
    qq = w**2 - _np.sum(v**2,axis=-1)
    return qq[...,_np.newaxis,_np.newaxis]*_np.eye(3) \
         + 2.*v[...,:,_np.newaxis]*v[...,_np.newaxis,:] \
         + 2.*P*w[...,_np.newaxis,_np.newaxis]*_skew(v)

def qu2eu(qu: _np.ndarray) -> _np.ndarray:
    """Quaternion to Bunge Euler angles."""
    w,x,y,z = (qu[...,i] for i in range(4))
    q03 = w**2+z**2
    q12 = x**2+y**2

    eu = _np.stack([_np.arctan2(-P*w*y+x*z,-P*w*x-y*z),
                    _np.arctan2(2.*_np.sqrt(q03*q12),q03-q12),
                    _np.arctan2( P*w*y+x*z,-P*w*x+y*z)],axis=-1)

    degenerate_0  = _np.abs(q12) < 1.e-8
    degenerate_pi = _np.logical_and(_np.abs(q03) < 1.e-8,~degenerate_0)
    eu[degenerate_0]  = _np.stack([_np.arctan2(-2.*P*w*z,w**2-z**2),
                                   _np.zeros_like(w),_np.zeros_like(w)],axis=-1)[degenerate_0]
    eu[degenerate_pi] = _np.stack([_np.arctan2(2.*x*y,x**2-y**2),
                                   _np.full_like(w,_np.pi),_np.zeros_like(w)],axis=-1)[degenerate_pi]

    eu[_np.abs(eu) < 1.e-6] = 0.
    return _np.where(eu < 0.,(eu+2.*_np.pi)%(_np.pi*_np.array([2.,1.,2.])),eu)

def qu2ax(qu: _np.ndarray) -> _np.ndarray:
    """Quaternion to axis–angle pair."""
    with _np.errstate(invalid='ignore',divide='ignore'):
        n = qu[...,1:4]/_np.linalg.norm(qu[...,1:4],axis=-1,keepdims=True)
        omega = 2.*_np.arccos(_np.clip(qu[...,0:1],-1.,1.))
        ax = _np.where(qu[...,0:1] < 1.e-8,
                       _np.block([qu[...,1:4],_np.broadcast_to(_np.pi,qu[...,0:1].shape)]),
                       _np.block([n,omega]))
    ax[_np.isclose(qu[...,0],1.,rtol=0.)] = _DEFAULT_AXIS
    return ax

def qu2ro(qu: _np.ndarray) -> _np.ndarray:
    """Quaternion to Rodrigues–Frank vector."""
    with _np.errstate(invalid='ignore',divide='ignore'):
        s = _np.linalg.norm(qu[...,1:4],axis=-1,keepdims=True)
        ro = _np.block([qu[...,1:4]/s,
                        _np.where(_np.abs(qu[...,0:1]) < 1.e-12,
                                  RODRIGUES_SENTINEL,
                                  _np.minimum(_np.tan(_np.arccos(_np.clip(qu[...,0:1],-1.,1.))),
                                              RODRIGUES_SENTINEL))])
    ro[s[...,0] < 1.e-12] = _DEFAULT_AXIS
    return ro

def qu2ho(qu: _np.ndarray) -> _np.ndarray:
    """Quaternion to homochoric vector."""
    with _np.errstate(invalid='ignore',divide='ignore'):
        omega = 2.*_np.arccos(_np.clip(qu[...,0:1],-1.,1.))
        ho = _np.where(_np.abs(omega) < 1.e-12,
                       _np.zeros(3),
                       qu[...,1:4]/_np.linalg.norm(qu[...,1:4],axis=-1,keepdims=True)
                       *(0.75*(omega-_np.sin(omega)))**(1./3.))
    return ho

def qu2cu(qu: _np.ndarray) -> _np.ndarray:
    """Quaternion to cubochoric vector."""
    return ho2cu(qu2ho(qu))


#---------- Rotation matrix ----------
def om2qu(om: _np.ndarray) -> _np.ndarray:
    """
    Rotation matrix to quaternion.

    The largest of the four quaternion components is determined from the
    diagonal and used as divisor for the remaining three.
    """
    m = om
    trace = m[...,0,0]+m[...,1,1]+m[...,2,2]
    sq = _np.stack([1.+trace,
                    1.+m[...,0,0]-m[...,1,1]-m[...,2,2],
                    1.+m[...,1,1]-m[...,2,2]-m[...,0,0],
                    1.+m[...,2,2]-m[...,0,0]-m[...,1,1]],axis=-1)
    largest = _np.argmax(sq,axis=-1)

    d = 0.5*_np.sqrt(_np.clip(sq,0.,None))
    w_x = P*(m[...,2,1]-m[...,1,2])
    w_y = P*(m[...,0,2]-m[...,2,0])
    w_z = P*(m[...,1,0]-m[...,0,1])
    xy = m[...,0,1]+m[...,1,0]
    xz = m[...,0,2]+m[...,2,0]
    yz = m[...,1,2]+m[...,2,1]

    with _np.errstate(invalid='ignore',divide='ignore'):
        candidates = _np.stack([
            _np.stack([d[...,0],         w_x/(4.*d[...,0]), w_y/(4.*d[...,0]), w_z/(4.*d[...,0])],-1),
            _np.stack([w_x/(4.*d[...,1]), d[...,1],         xy/(4.*d[...,1]),  xz/(4.*d[...,1])],-1),
            _np.stack([w_y/(4.*d[...,2]), xy/(4.*d[...,2]),  d[...,2],         yz/(4.*d[...,2])],-1),
            _np.stack([w_z/(4.*d[...,3]), xz/(4.*d[...,3]),  yz/(4.*d[...,3]),  d[...,3]],-1),
            ],axis=-2)
    qu = _np.take_along_axis(candidates,largest[...,_np.newaxis,_np.newaxis],-2)[...,0,:]
    qu /= _np.linalg.norm(qu,axis=-1,keepdims=True)
    qu[qu[...,0] < 0.] *= -1.
    return qu

def om2eu(om: _np.ndarray) -> _np.ndarray:
    """Rotation matrix to Bunge Euler angles."""
    with _np.errstate(invalid='ignore',divide='ignore'):
        zeta = 1./_np.sqrt(1.-om[...,2,2:3]**2)
        eu = _np.where(_np.isclose(_np.abs(om[...,2,2:3]),1.,0.),
                       _np.block([_np.arctan2(om[...,0,1:2],om[...,0,0:1]),
                                  _np.pi*0.5*(1.-om[...,2,2:3]),
                                  _np.zeros(om.shape[:-2]+(1,))]),
                       _np.block([_np.arctan2(om[...,2,0:1]*zeta,-om[...,2,1:2]*zeta),
                                  _np.arccos(_np.clip(om[...,2,2:3],-1.,1.)),
                                  _np.arctan2(om[...,0,2:3]*zeta,+om[...,1,2:3]*zeta)]))
    eu[_np.abs(eu) < 1.e-8] = 0.
    return _np.where(eu < 0.,eu%(_np.pi*_np.array([2.,1.,2.])),eu)

def om2ax(om: _np.ndarray) -> _np.ndarray:
    """Rotation matrix to axis–angle pair."""
    return qu2ax(om2qu(om))

def om2ro(om: _np.ndarray) -> _np.ndarray:
    """Rotation matrix to Rodrigues–Frank vector."""
    return qu2ro(om2qu(om))

def om2ho(om: _np.ndarray) -> _np.ndarray:
    """Rotation matrix to homochoric vector."""
    return qu2ho(om2qu(om))

def om2cu(om: _np.ndarray) -> _np.ndarray:
    """Rotation matrix to cubochoric vector."""
    return ho2cu(om2ho(om))


#---------- Bunge Euler angles ----------
def eu2qu(eu: _np.ndarray) -> _np.ndarray:
    """Bunge Euler angles to quaternion."""
    half = 0.5*_np.asarray(eu,dtype=float)
    c_Phi = _np.cos(half[...,1])
    s_Phi = _np.sin(half[...,1])
    sigma = half[...,0]+half[...,2]
    delta = half[...,0]-half[...,2]
    qu = _np.stack([    c_Phi*_np.cos(sigma),
                    -P*s_Phi*_np.cos(delta),
                    -P*s_Phi*_np.sin(delta),
                    -P*c_Phi*_np.sin(sigma)],axis=-1)
    qu[qu[...,0] < 0.] *= -1.
    return qu

def eu2om(eu: _np.ndarray) -> _np.ndarray:
    """Bunge Euler angles to rotation matrix."""
    c = _np.cos(eu)
    s = _np.sin(eu)
    c1,C,c2 = c[...,0],c[...,1],c[...,2]
    s1,S,s2 = s[...,0],s[...,1],s[...,2]
    om = _np.stack([_np.stack([ c1*c2-s1*s2*C,  s1*c2+c1*s2*C, s2*S],-1),
                    _np.stack([-c1*s2-s1*c2*C, -s1*s2+c1*c2*C, c2*S],-1),
                    _np.stack([ s1*S,          -c1*S,          C   ],-1)],-2)
    om[_np.abs(om) < 1.e-12] = 0.
    return om

def eu2ax(eu: _np.ndarray) -> _np.ndarray:
    """Bunge Euler angles to axis–angle pair."""
    return qu2ax(eu2qu(eu))

def eu2ro(eu: _np.ndarray) -> _np.ndarray:
    """Bunge Euler angles to Rodrigues–Frank vector."""
    return ax2ro(eu2ax(eu))

def eu2ho(eu: _np.ndarray) -> _np.ndarray:
    """Bunge Euler angles to homochoric vector."""
    return ax2ho(eu2ax(eu))

def eu2cu(eu: _np.ndarray) -> _np.ndarray:
    """Bunge Euler angles to cubochoric vector."""
    return ho2cu(eu2ho(eu))


#---------- Axis angle pair ----------
def ax2qu(ax: _np.ndarray) -> _np.ndarray:
    """Axis–angle pair to quaternion."""
    c = _np.cos(ax[...,3:4]*.5)
    s = _np.sin(ax[...,3:4]*.5)
    qu = _np.where(_np.abs(ax[...,3:4]) < 1.e-12,[1.,0.,0.,0.],_np.block([c,ax[...,:3]*s]))
    qu[qu[...,0] < 0.] *= -1.
    return qu

def ax2om(ax: _np.ndarray) -> _np.ndarray:
    """Axis–angle pair to rotation matrix."""
    n = ax[...,:3]
    c = _np.cos(ax[...,3])[...,_np.newaxis,_np.newaxis]
    s = _np.sin(ax[...,3])[...,_np.newaxis,_np.newaxis]
    return c*_np.eye(3) \
         + (1.-c)*n[...,:,_np.newaxis]*n[...,_np.newaxis,:] \
         + P*s*_skew(n)

def ax2eu(ax: _np.ndarray) -> _np.ndarray:
    """Axis–angle pair to Bunge Euler angles."""
    return om2eu(ax2om(ax))

def ax2ro(ax: _np.ndarray) -> _np.ndarray:
    """Axis–angle pair to Rodrigues–Frank vector."""
    with _np.errstate(invalid='ignore',over='ignore'):
        t = _np.where(_np.isclose(ax[...,3:4],_np.pi,atol=1.e-12,rtol=0.),
                      RODRIGUES_SENTINEL,
                      _np.minimum(_np.tan(ax[...,3:4]*.5),RODRIGUES_SENTINEL))
    ro = _np.block([ax[...,:3],t])
    ro[_np.abs(ax[...,3]) < 1.e-12] = _DEFAULT_AXIS
    return ro

def ax2ho(ax: _np.ndarray) -> _np.ndarray:
    """Axis–angle pair to homochoric vector."""
    return ax[...,:3]*(0.75*(ax[...,3:4]-_np.sin(ax[...,3:4])))**(1./3.)

def ax2cu(ax: _np.ndarray) -> _np.ndarray:
    """Axis–angle pair to cubochoric vector."""
    return ho2cu(ax2ho(ax))


#---------- Rodrigues-Frank vector ----------
def ro2qu(ro: _np.ndarray) -> _np.ndarray:
    """Rodrigues–Frank vector to quaternion."""
    return ax2qu(ro2ax(ro))

def ro2om(ro: _np.ndarray) -> _np.ndarray:
    """Rodrigues–Frank vector to rotation matrix."""
    return ax2om(ro2ax(ro))

def ro2eu(ro: _np.ndarray) -> _np.ndarray:
    """Rodrigues–Frank vector to Bunge Euler angles."""
    return om2eu(ro2om(ro))

def ro2ax(ro: _np.ndarray) -> _np.ndarray:
    """
    Rodrigues–Frank vector to axis–angle pair.

    Magnitudes at or beyond RODRIGUES_SENTINEL (including infinity)
    are interpreted as rotations by π.
    """
    t = ro[...,3:4]
    with _np.errstate(invalid='ignore',divide='ignore'):
        n = ro[...,:3]/_np.linalg.norm(ro[...,:3],axis=-1,keepdims=True)
        omega = _np.where(_np.abs(t) >= RODRIGUES_SENTINEL,_np.pi*_np.sign(t),2.*_np.arctan(t))
    ax = _np.block([n,omega])
    ax[ax[...,3] < 0.] *= -1.
    ax[_np.abs(t[...,0]) < 1.e-12] = _DEFAULT_AXIS
    return ax

def ro2ho(ro: _np.ndarray) -> _np.ndarray:
    """Rodrigues–Frank vector to homochoric vector."""
    return ax2ho(ro2ax(ro))

def ro2cu(ro: _np.ndarray) -> _np.ndarray:
    """Rodrigues–Frank vector to cubochoric vector."""
    return ho2cu(ro2ho(ro))


#---------- Homochoric vector----------
def ho2qu(ho: _np.ndarray) -> _np.ndarray:
    """Homochoric vector to quaternion."""
    return ax2qu(ho2ax(ho))

def ho2om(ho: _np.ndarray) -> _np.ndarray:
    """Homochoric vector to rotation matrix."""
    return ax2om(ho2ax(ho))

def ho2eu(ho: _np.ndarray) -> _np.ndarray:
    """Homochoric vector to Bunge Euler angles."""
    return ax2eu(ho2ax(ho))

def ho2ax(ho: _np.ndarray) -> _np.ndarray:
    """Homochoric vector to axis–angle pair."""
    tfit = _np.array([+0.9999999999999968,     -0.49999999999986866,     -0.025000000000632055,
                      -0.003928571496460683,   -0.0008164666077062752,   -0.00019411896443261646,
                      -0.00004985822229871769, -0.000014164962366386031, -1.9000248160936107e-6,
                      -5.72184549898506e-6,    +7.772149920658778e-6,    -0.00001053483452909705,
                      +9.528014229335313e-6,   -5.660288876265125e-6,    +1.2844901692764126e-6,
                      +1.1255185726258763e-6,  -1.3834391419956455e-6,   +7.513691751164847e-7,
                      -2.401996891720091e-7,   +4.386887017466388e-8,    -3.5917775353564864e-9])
    ho_ = _np.asarray(ho,dtype=float)
    h2 = _np.sum(ho_**2,axis=-1,keepdims=True)
    s = _np.sum(tfit*h2**_np.arange(len(tfit)),axis=-1,keepdims=True)
    with _np.errstate(invalid='ignore',divide='ignore'):
        ax = _np.block([ho_/_np.sqrt(h2),2.*_np.arccos(_np.clip(s,-1.,1.))])
    ax[h2[...,0] < 1.e-12] = _DEFAULT_AXIS
    return ax

def ho2ro(ho: _np.ndarray) -> _np.ndarray:
    """Homochoric vector to Rodrigues–Frank vector."""
    return ax2ro(ho2ax(ho))

def ho2cu(ho: _np.ndarray) -> _np.ndarray:
    """
    Homochoric vector to cubochoric vector.

    References
    ----------
    D. Roşca et al., Modelling and Simulation in Materials Science and Engineering 22:075013, 2014
    https://doi.org/10.1088/0965-0393/22/7/075013

    """
    ho_ = _np.asarray(ho,dtype=float)
    rs = _np.linalg.norm(ho_,axis=-1,keepdims=True)
    xyz3 = _np.take_along_axis(ho_,_pyramid_order(ho_,'forward'),-1)

    with _np.errstate(invalid='ignore',divide='ignore'):
        # inverse M_3
        xyz2 = xyz3[...,0:2]*_np.sqrt(2.*rs/(rs+_np.abs(xyz3[...,2:3])))
        qxy = _np.sum(xyz2**2,axis=-1,keepdims=True)
        a_max = _np.max(_np.abs(xyz2),axis=-1,keepdims=True)
        a_min = _np.min(_np.abs(xyz2),axis=-1,keepdims=True)

        # inverse M_2
        q2 = qxy + a_max**2
        sq2 = _np.sqrt(q2)
        q = (_beta/_np.sqrt(2.)/_R1)*_np.sqrt(q2*qxy/(q2-a_max*sq2))
        tt = _np.clip((a_min**2+a_max*sq2)/_np.sqrt(2.)/qxy,-1.,1.)
        T_inv = _np.where(_np.abs(xyz2[...,1:2]) <= _np.abs(xyz2[...,0:1]),
                          _np.block([_np.ones_like(tt),_np.arccos(tt)/_np.pi*12.]),
                          _np.block([_np.arccos(tt)/_np.pi*12.,_np.ones_like(tt)]))*q
        T_inv[xyz2 < 0.] *= -1.
        T_inv[_np.broadcast_to(_np.isclose(qxy,0.,rtol=0.,atol=1.e-12),T_inv.shape)] = 0.

        # inverse M_1
        cu = _np.block([T_inv,_np.where(xyz3[...,2:3] < 0.,-1.,1.)*rs/_np.sqrt(6./_np.pi)])/_sc

    cu[_np.isclose(_np.sum(_np.abs(ho_),axis=-1),0.,rtol=0.,atol=1.e-16)] = 0.
    return _np.take_along_axis(cu,_pyramid_order(ho_,'backward'),-1)

#---------- Cubochoric ----------
def cu2qu(cu: _np.ndarray) -> _np.ndarray:
    """Cubochoric vector to quaternion."""
    return ho2qu(cu2ho(cu))

def cu2om(cu: _np.ndarray) -> _np.ndarray:
    """Cubochoric vector to rotation matrix."""
    return ho2om(cu2ho(cu))

def cu2eu(cu: _np.ndarray) -> _np.ndarray:
    """Cubochoric vector to Bunge Euler angles."""
    return ho2eu(cu2ho(cu))

def cu2ax(cu: _np.ndarray) -> _np.ndarray:
    """Cubochoric vector to axis–angle pair."""
    return ho2ax(cu2ho(cu))

def cu2ro(cu: _np.ndarray) -> _np.ndarray:
    """Cubochoric vector to Rodrigues–Frank vector."""
    return ho2ro(cu2ho(cu))

def cu2ho(cu: _np.ndarray) -> _np.ndarray:
    """
    Cubochoric vector to homochoric vector.

    References
    ----------
    D. Roşca et al., Modelling and Simulation in Materials Science and Engineering 22:075013, 2014
    https://doi.org/10.1088/0965-0393/22/7/075013

    """
    cu_ = _np.asarray(cu,dtype=float)
    with _np.errstate(invalid='ignore',divide='ignore'):
        # get pyramid and scale by grid parameter ratio
        XYZ = _np.take_along_axis(cu_,_pyramid_order(cu_,'forward'),-1)*_sc
        swap = _np.abs(XYZ[...,1:2]) <= _np.abs(XYZ[...,0:1])
        a = _np.where(swap,XYZ[...,0:1],XYZ[...,1:2])
        b = _np.where(swap,XYZ[...,1:2],XYZ[...,0:1])

        q = _np.pi/12.*b/a
        c = _np.cos(q)
        s = _np.sin(q)
        q = _R1*2.**0.25/_beta/_np.sqrt(_np.sqrt(2.)-c)*a
        T = _np.block([(_np.sqrt(2.)*c-1.),_np.sqrt(2.)*s])*q

        # transform to sphere grid (inverse Lambert)
        c = _np.sum(T**2,axis=-1,keepdims=True)
        s = c*_np.pi/24./XYZ[...,2:3]**2
        c = c*_np.sqrt(_np.pi/24.)/XYZ[...,2:3]
        q = _np.sqrt(1.-s)

        ho = _np.where(_np.isclose(_np.sum(_np.abs(XYZ[...,0:2]),axis=-1,keepdims=True),0.,rtol=0.,atol=1.e-16),
                       _np.block([_np.zeros_like(XYZ[...,0:2]),_np.sqrt(6./_np.pi)*XYZ[...,2:3]]),
                       _np.block([_np.where(swap,T[...,0:1],T[...,1:2])*q,
                                  _np.where(swap,T[...,1:2],T[...,0:1])*q,
                                  _np.sqrt(6./_np.pi)*XYZ[...,2:3]-c]))

    ho[_np.isclose(_np.sum(_np.abs(cu_),axis=-1),0.,rtol=0.,atol=1.e-16)] = 0.
    return _np.take_along_axis(ho,_pyramid_order(cu_,'backward'),-1)


def _pyramid_order(xyz: _np.ndarray,
                   direction: str) -> _np.ndarray:
    """
    Get order of the coordinates.

    Depending on the pyramid in which the point is located, the order need to be adjusted.

    Parameters
    ----------
    xyz : numpy.ndarray, shape (...,3)
       Coordinates of a point on a uniform refinable grid on a ball or
       in a uniform refinable cubical grid.
    direction : {'forward', 'backward'}
       Direction of the permutation.

    """
    order = {'forward': _np.array([[0,1,2],[1,2,0],[2,0,1]]),
             'backward':_np.array([[0,1,2],[2,0,1],[1,2,0]])}

    p = _np.where(_np.maximum(_np.abs(xyz[...,0]),_np.abs(xyz[...,1])) <= _np.abs(xyz[...,2]),0,
                  _np.where(_np.maximum(_np.abs(xyz[...,1]),_np.abs(xyz[...,2])) <= _np.abs(xyz[...,0]),1,2))

    return order[direction][p]
