import pytest
import numpy as np

from oricore import LaueOps
from oricore import Rotation
from oricore import BulkArray
from oricore import conversion
from oricore import symmetry


@pytest.fixture
def cubic():
    return LaueOps.from_key('cubic_high')

@pytest.fixture
def random_orientations(np_rng):
    return Rotation.from_random(50,rng_seed=np_rng)


class TestLaueOps:

    def test_from_key_cached(self):
        assert LaueOps.from_key('hexagonal_high') is LaueOps.from_key('hexagonal_high')

    def test_init_key(self):
        assert LaueOps('cubic_low').table is symmetry.get('cubic_low')

    def test_invalid_key(self):
        with pytest.raises(KeyError):
            LaueOps.from_key('cubic_medium')

    def test_repr(self,cubic):
        assert repr(cubic) == 'LaueOps: Cubic m3m'

    @pytest.mark.parametrize('key,N',[('triclinic',1),('monoclinic',2),('orthorhombic',4),
                                      ('tetragonal_low',4),('tetragonal_high',8),
                                      ('trigonal_low',3),('trigonal_high',6),
                                      ('hexagonal_low',6),('hexagonal_high',12),
                                      ('cubic_low',12),('cubic_high',24)])
    def test_num_sym_ops(self,key,N):
        assert LaueOps.from_key(key).num_sym_ops == N

    def test_properties(self,cubic):
        assert cubic.key == 'cubic_high' and cubic.has_inversion \
           and cubic.odf_size == cubic.mdf_size == 18**3

    def test_operators(self,laue_ops):
        for i in range(laue_ops.num_sym_ops):
            q = laue_ops.quaternion_operator(i)
            assert np.allclose(laue_ops.matrix_operator(i),conversion.qu2om(q))
            if q[0] > 1.e-12:
                assert np.allclose(laue_ops.Rodrigues_operator(i),q[1:]/q[0])

    def test_operator_copy(self,cubic):
        q = cubic.quaternion_operator(3)
        q[:] = 0.
        assert np.allclose(cubic.quaternion_operator(3),[0.,0.,0.,1.])

    @pytest.mark.parametrize('accessor',['quaternion_operator','matrix_operator','Rodrigues_operator'])
    @pytest.mark.parametrize('i',[-1,24])
    def test_operator_invalid(self,cubic,accessor,i):
        with pytest.raises(ValueError):
            getattr(cubic,accessor)(i)


    def test_misorientation_identical(self,laue_ops,random_orientations):
        ax = laue_ops.misorientation(random_orientations,random_orientations)
        assert ax.shape == (50,4) and np.allclose(ax[...,3],0.,atol=1.e-6)

    def test_misorientation_brute_force(self,laue_ops,np_rng):
        R = Rotation.from_random(2,rng_seed=np_rng)
        S = [Rotation(laue_ops.quaternion_operator(i)) for i in range(laue_ops.num_sym_ops)]
        angles = [(s_i*(R[1]*~R[0])*~s_j).as_axis_angle()[3] for s_i in S for s_j in S]
        assert np.isclose(laue_ops.misorientation(R[0],R[1])[3],min(angles),atol=1.e-6)

    def test_misorientation_symmetric(self,laue_ops,random_orientations):
        a = random_orientations[:25]
        b = random_orientations[25:]
        assert np.allclose(laue_ops.misorientation(a,b)[...,3],laue_ops.misorientation(b,a)[...,3])

    def test_misorientation_invariant(self,laue_ops,random_orientations,np_rng):
        a = random_orientations[:25]
        b = random_orientations[25:]
        k = np_rng.integers(laue_ops.num_sym_ops)
        S = Rotation(laue_ops.quaternion_operator(k))
        assert np.allclose(laue_ops.misorientation(a,S*b)[...,3],laue_ops.misorientation(a,b)[...,3])
        assert np.allclose(laue_ops.misorientation(S*a,b)[...,3],laue_ops.misorientation(a,b)[...,3])

    def test_misorientation_bounded(self,laue_ops,random_orientations):
        ax = laue_ops.misorientation(random_orientations[:25],random_orientations[25:])
        assert np.all(ax[...,3] >= 0.) and np.all(ax[...,3] <= np.pi+1.e-9) \
           and np.allclose(np.linalg.norm(ax[...,:3],axis=-1),1.)

    def test_misorientation_array(self,cubic):
        ax = cubic.misorientation(np.array([1.,0.,0.,0.]),Rotation.from_random((3,2)).quaternion)
        assert ax.shape == (3,2,4)

    def test_misorientation_cubic_low_operators(self):
        ops = LaueOps.from_key('cubic_low')
        identity = np.array([1.,0.,0.,0.])
        for i in range(ops.num_sym_ops):
            assert np.isclose(ops.misorientation(identity,ops.quaternion_operator(i))[3],0.,atol=1.e-6)

    def test_misorientation_cubic_low_fourfold(self):
        ops = LaueOps.from_key('cubic_low')
        fourfold = Rotation.from_axis_angle([0,0,1,90],degrees=True)
        assert np.isclose(ops.misorientation(Rotation(),fourfold)[3],np.pi/2.)

    def test_misorientation_cubic_high_fourfold(self,cubic):
        fourfold = Rotation.from_axis_angle([0,0,1,90],degrees=True)
        assert np.isclose(cubic.misorientation(Rotation(),fourfold)[3],0.,atol=1.e-6)

    def test_misorientation_invalid(self,cubic):
        with pytest.raises(ValueError):
            cubic.misorientation(np.ones(3),np.ones(4))


    def test_nearest_quaternion(self,laue_ops,random_orientations,np_rng):
        k = np_rng.integers(laue_ops.num_sym_ops)
        S = Rotation(laue_ops.quaternion_operator(k))
        q = random_orientations.quaternion
        assert np.allclose(laue_ops.nearest_quaternion(q,(S*random_orientations).quaternion),q)

    def test_nearest_quaternion_closest(self,laue_ops,random_orientations):
        q1 = random_orientations[:25].quaternion
        q2 = random_orientations[25:]
        nearest = laue_ops.nearest_quaternion(q1,q2)
        for i in range(laue_ops.num_sym_ops):
            other = (Rotation(laue_ops.quaternion_operator(i))*q2).quaternion
            assert np.all(np.abs(np.sum(q1*nearest,axis=-1)) >= np.abs(np.sum(q1*other,axis=-1))-1.e-12)


    def test_ODF_FZ_idempotent(self,laue_ops,random_orientations):
        rho = laue_ops.ODF_FZ_Rodrigues(random_orientations.as_Rodrigues_vector())
        assert np.allclose(conversion.compact_ro(laue_ops.ODF_FZ_Rodrigues(rho)),
                           conversion.compact_ro(rho))

    def test_ODF_FZ_equivalent(self,laue_ops,random_orientations):
        rho = laue_ops.ODF_FZ_Rodrigues(random_orientations.as_Rodrigues_vector())
        ax = laue_ops.misorientation(random_orientations,conversion.ro2qu(rho))
        assert np.allclose(ax[...,3],0.,atol=1.e-5)

    def test_ODF_FZ_closest(self,laue_ops,random_orientations):
        rho = random_orientations.as_Rodrigues_vector()
        rho_FZ = laue_ops.ODF_FZ_Rodrigues(rho)
        assert np.all(rho_FZ[...,3] <= rho[...,3]+1.e-9)

    def test_ODF_FZ_identity(self,laue_ops):
        assert np.allclose(laue_ops.ODF_FZ_Rodrigues([0.,0.,1.,0.]),[0.,0.,1.,0.])

    def test_ODF_FZ_cubic(self,cubic):
        rho = Rotation.from_axis_angle([0,0,1,80],degrees=True).as_Rodrigues_vector()
        assert np.allclose(cubic.ODF_FZ_Rodrigues(rho),[0.,0.,-1.,np.tan(np.radians(5.))])

    def test_ODF_FZ_half_turn(self):
        ops = LaueOps.from_key('triclinic')
        rho = np.array([1.,0.,0.,conversion.RODRIGUES_SENTINEL])
        assert np.allclose(ops.ODF_FZ_Rodrigues(rho),rho)

    def test_ODF_FZ_invalid(self,cubic):
        with pytest.raises(ValueError):
            cubic.ODF_FZ_Rodrigues(np.ones(3))

    def test_MDF_FZ_sorted(self,laue_ops,random_orientations):
        ax = conversion.ro2ax(laue_ops.MDF_FZ_Rodrigues(random_orientations.as_Rodrigues_vector()))
        assert np.all(ax[...,0] >= ax[...,1]) and np.all(ax[...,1] >= ax[...,2]) \
           and np.all(ax[...,2] >= 0.)

    def test_MDF_FZ_angle(self,laue_ops,random_orientations):
        rho = random_orientations.as_Rodrigues_vector()
        assert np.allclose(laue_ops.MDF_FZ_Rodrigues(rho)[...,3],laue_ops.ODF_FZ_Rodrigues(rho)[...,3])


    def test_ODF_bin_range(self,laue_ops,random_orientations):
        b = laue_ops.ODF_bin(laue_ops.ODF_FZ_Rodrigues(random_orientations.as_Rodrigues_vector()))
        assert b.shape == (50,) and np.all(b >= 0) and np.all(b < laue_ops.odf_size)

    def test_ODF_bin_clamped(self,laue_ops):
        b = laue_ops.ODF_bin([1.,0.,0.,conversion.RODRIGUES_SENTINEL])
        assert 0 <= b < laue_ops.odf_size

    def test_ODF_bin_invalid(self,cubic):
        with pytest.raises(ValueError):
            cubic.ODF_bin(np.ones(3))

    def test_Euler_angles_from_bin(self,laue_ops,np_rng):
        n = laue_ops.table.odf_num_bins
        c = [n//2-1,n//2]
        bins = np.array([c[i][0] + c[j][1]*n[0] + c[k][2]*n[0]*n[1]
                         for i in (0,1) for j in (0,1) for k in (0,1)])
        random3 = 0.1 + 0.8*np_rng.random((8,3))
        eu = laue_ops.Euler_angles_from_bin(random3,bins)
        assert eu.shape == (8,3) and np.all(laue_ops.ODF_bin(conversion.eu2ro(eu)) == bins)

    def test_Euler_angles_from_bin_degrees(self,cubic):
        b = int(np.sum(cubic.table.odf_num_bins//2*np.array([1,18,18**2])))
        assert np.allclose(cubic.Euler_angles_from_bin([.5,.5,.5],b,degrees=True),
                           np.degrees(cubic.Euler_angles_from_bin([.5,.5,.5],b)))

    def test_Euler_angles_from_bin_outside_FZ(self,cubic,np_rng):
        eu = cubic.Euler_angles_from_bin(0.25+0.5*np_rng.random((4,3)),np.zeros(4,dtype=int))
        assert eu.shape == (4,3) and np.all(np.isfinite(eu)) \
           and np.all(cubic.ODF_bin(conversion.eu2ro(eu)) != 0)

    @pytest.mark.parametrize('key',['cubic_low','cubic_high'])
    def test_Rodrigues_from_bin(self,key,np_rng):
        ops = LaueOps.from_key(key)
        n = ops.table.odf_num_bins
        b = n[0]//2 + n[1]//2*n[0] + n[2]//2*n[0]*n[1]
        random3 = -np.sort(-(0.1 + 0.8*np_rng.random((5,3))),axis=-1)
        rho = ops.Rodrigues_from_bin(random3,np.full(5,b))
        assert rho.shape == (5,4) and np.all(ops.MDF_bin(rho) == b)

    @pytest.mark.parametrize('function',['Euler_angles_from_bin','Rodrigues_from_bin'])
    def test_from_bin_invalid(self,cubic,function):
        for b in [-1,cubic.odf_size]:
            with pytest.raises(ValueError):
                getattr(cubic,function)([.5,.5,.5],b)


    @pytest.mark.parametrize('degrees',[True,False])
    def test_randomize_Euler_angles(self,laue_ops,random_orientations,degrees):
        phi = random_orientations.as_Euler_angles(degrees)
        phi_r = laue_ops.randomize_Euler_angles(phi,rng_seed=20191102,degrees=degrees)
        phi_r_ = np.radians(phi_r) if degrees else phi_r
        ax = laue_ops.misorientation(random_orientations,conversion.eu2qu(phi_r_))
        assert phi_r.shape == phi.shape and np.allclose(ax[...,3],0.,atol=1.e-5)

    def test_randomize_Euler_angles_reproducible(self,cubic,random_orientations):
        phi = random_orientations.as_Euler_angles()
        assert np.allclose(cubic.randomize_Euler_angles(phi,rng_seed=1),
                           cubic.randomize_Euler_angles(phi,rng_seed=1))


    @pytest.mark.parametrize('ref_dir',[(0,0,1),(0,0,-1)])
    def test_IPF_color_identity(self,laue_ops,ref_dir):
        rgb = laue_ops.IPF_color([0.,0.,0.],ref_dir)
        assert rgb.dtype == np.uint8 and np.all(rgb == [255,0,0])

    def test_IPF_color_shape(self,laue_ops,random_orientations):
        rgb = laue_ops.IPF_color(random_orientations.as_Euler_angles().reshape(5,10,3))
        assert rgb.shape == (5,10,3) and rgb.dtype == np.uint8

    @pytest.mark.parametrize('ref_dir',[(0,0,1),(1,0,0),(1,2,3)])
    def test_IPF_color_equivalent(self,laue_ops,random_orientations,ref_dir):
        phi = random_orientations.as_Euler_angles()
        phi_r = laue_ops.randomize_Euler_angles(phi,rng_seed=42)
        assert np.all(np.abs(laue_ops.IPF_color(phi,ref_dir).astype(int)
                           - laue_ops.IPF_color(phi_r,ref_dir).astype(int)) <= 1)

    def test_IPF_color_degrees(self,cubic,random_orientations):
        phi = random_orientations.as_Euler_angles()
        assert np.all(cubic.IPF_color(phi) == cubic.IPF_color(np.degrees(phi),degrees=True))

    @pytest.mark.parametrize('eta,chi,inside',[(0.,0.,True),
                                               (np.radians(30.),np.radians(40.),True),
                                               (np.radians(30.),np.radians(60.),False),
                                               (np.radians(50.),np.radians(10.),False),
                                               (-.1,np.radians(10.),False)])
    def test_in_unit_triangle(self,cubic,eta,chi,inside):
        assert cubic.in_unit_triangle(eta,chi) == inside

    def test_in_unit_triangle_hemisphere(self):
        ops = LaueOps.from_key('triclinic')
        assert ops.in_unit_triangle(np.radians(300.),np.radians(89.)) \
           and not ops.in_unit_triangle(np.radians(300.),np.radians(91.))

    def test_IPF_triangle_legend(self,laue_ops):
        legend = laue_ops.IPF_triangle_legend(65)
        rgba = legend.as_array().reshape(65,65,4)
        assert isinstance(legend,BulkArray) and legend.name == f'{laue_ops.name} IPF legend' \
           and legend.dtype == np.uint8 and legend.num_tuples == 65**2 and legend.component_dims == (4,)
        assert np.all(rgba[32,32] == [255,0,0,255])
        assert np.all(rgba[0,0] == 255)

    def test_IPF_triangle_legend_invalid(self,cubic):
        with pytest.raises(ValueError):
            cubic.IPF_triangle_legend(0)

    def test_Rodrigues_color(self,cubic):
        assert np.all(cubic.Rodrigues_color(-cubic.table.odf_dim) == 0)

    def test_Rodrigues_color_shape(self,laue_ops,random_orientations):
        rho = conversion.compact_ro(laue_ops.ODF_FZ_Rodrigues(random_orientations.as_Rodrigues_vector()))
        rgb = laue_ops.Rodrigues_color(rho)
        assert rgb.shape == (50,3) and rgb.dtype == np.uint8

    def test_misorientation_color(self,cubic):
        with pytest.raises(NotImplementedError):
            cubic.misorientation_color(Rotation(),Rotation())


    def test_Schmid_factor(self,cubic):
        m = cubic.Schmid_factor([0,0,1])
        assert np.isclose(m.factor,1./np.sqrt(6.)) and m.slip_system == 0 \
           and np.allclose(m.angles,[np.arccos(1./np.sqrt(3.)),np.pi/4.])

    def test_Schmid_factor_vectorized(self,cubic,np_rng):
        load = np_rng.random((5,3))
        m = cubic.Schmid_factor(load)
        assert m.factor.shape == (5,) and m.angles.shape == (5,2) and m.slip_system.shape == (5,)
        for i in range(5):
            assert np.isclose(cubic.Schmid_factor(load[i]).factor,m.factor[i])

    def test_Schmid_factor_bounds(self,cubic,np_rng):
        m = cubic.Schmid_factor(np_rng.random((100,3))-.5)
        assert np.all(m.factor > 0.27) and np.all(m.factor <= 0.5+1.e-9)

    def test_Schmid_factor_plane_direction(self,cubic):
        m = cubic.Schmid_factor([0,0,1],plane=[1,1,1],direction=[1,-1,0])
        assert np.isclose(m.factor,1./np.sqrt(6.)) and 0 <= m.slip_system < 24

    def test_Schmid_factor_no_valid_plane(self):
        m = LaueOps.from_key('triclinic').Schmid_factor([0,0,1],plane=[0,0,-1],direction=[1,0,0])
        assert m.factor == 0. and np.all(m.angles == 0.) and m.slip_system == 0

    @pytest.mark.parametrize('kwargs',[{'plane':[1,1,1]},{'direction':[1,-1,0]}])
    def test_Schmid_factor_incomplete(self,cubic,kwargs):
        with pytest.raises(ValueError):
            cubic.Schmid_factor([0,0,1],**kwargs)

    @pytest.mark.parametrize('key',['cubic_low','hexagonal_high','triclinic'])
    def test_Schmid_factor_not_tabulated(self,key):
        with pytest.raises(NotImplementedError):
            LaueOps.from_key(key).Schmid_factor([0,0,1])

    def test_m_prime_identical(self,cubic,random_orientations):
        assert np.allclose(cubic.m_prime(random_orientations,random_orientations,[0,0,1]),1.)

    def test_m_prime_symmetric(self,cubic,random_orientations):
        a = random_orientations[:25]
        b = random_orientations[25:]
        m = cubic.m_prime(a,b,[1,2,3])
        assert m.shape == (25,) and np.all(m >= 0.) and np.all(m <= 1.+1.e-9) \
           and np.allclose(m,cubic.m_prime(b,a,[1,2,3]))

    def test_m_prime_not_tabulated(self):
        with pytest.raises(NotImplementedError):
            LaueOps.from_key('hexagonal_high').m_prime(Rotation(),Rotation(),[0,0,1])

    @pytest.mark.parametrize('parameter',['F1','F1spt','F7'])
    def test_slip_transmission_not_available(self,cubic,parameter):
        with pytest.raises(NotImplementedError):
            getattr(cubic,parameter)(Rotation(),Rotation(),[0,0,1])
