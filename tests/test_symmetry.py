import pytest
import numpy as np

from oricore import symmetry
from oricore import conversion
from oricore import Rotation


class TestSymmetry:

    def test_keys(self):
        assert symmetry.keys() == ['triclinic','monoclinic','orthorhombic',
                                   'tetragonal_low','tetragonal_high',
                                   'trigonal_low','trigonal_high',
                                   'hexagonal_low','hexagonal_high',
                                   'cubic_low','cubic_high']

    def test_invalid_key(self):
        with pytest.raises(KeyError):
            symmetry.get('hexagonal_medium')

    @pytest.mark.parametrize('key,N',[('triclinic',1),('monoclinic',2),('orthorhombic',4),
                                      ('tetragonal_low',4),('tetragonal_high',8),
                                      ('trigonal_low',3),('trigonal_high',6),
                                      ('hexagonal_low',6),('hexagonal_high',12),
                                      ('cubic_low',12),('cubic_high',24)])
    def test_num_sym_ops(self,key,N):
        table = symmetry.get(key)
        assert table.num_sym_ops == N and table.sym_quats.shape == (N,4) \
           and table.sym_matrices.shape == (N,3,3) and table.sym_rods.shape == (N,3)

    @pytest.mark.parametrize('key',symmetry.keys())
    def test_identity_first(self,key):
        assert np.allclose(symmetry.get(key).sym_quats[0],[1.,0.,0.,0.])

    @pytest.mark.parametrize('key',symmetry.keys())
    def test_unit_positive(self,key):
        q = symmetry.get(key).sym_quats
        assert np.allclose(np.linalg.norm(q,axis=-1),1.) and np.all(q[:,0] >= 0.)

    @pytest.mark.parametrize('key',symmetry.keys())
    def test_closure(self,key):
        q = symmetry.get(key).sym_quats
        for a in q:
            for b in q:
                ab = (Rotation(a)*Rotation(b)).quaternion
                assert np.isclose(np.max(np.abs(q@ab)),1.)

    @pytest.mark.parametrize('key',symmetry.keys())
    def test_unique(self,key):
        q = symmetry.get(key).sym_quats
        assert np.count_nonzero(np.isclose(np.abs(q@q.T),1.)) == len(q)

    @pytest.mark.parametrize('key',symmetry.keys())
    def test_matrices(self,key):
        table = symmetry.get(key)
        assert np.allclose(table.sym_matrices,conversion.qu2om(table.sym_quats))

    @pytest.mark.parametrize('key',symmetry.keys())
    def test_Rodrigues(self,key):
        table = symmetry.get(key)
        finite = table.sym_quats[:,0] > 1.e-12
        assert np.allclose(table.sym_rods[finite],
                           table.sym_quats[finite,1:]/table.sym_quats[finite,0:1])
        assert np.all(np.linalg.norm(table.sym_rods[~finite],axis=-1) > 1.e9)

    @pytest.mark.parametrize('key',symmetry.keys())
    def test_read_only(self,key):
        table = symmetry.get(key)
        for a in [table.sym_quats,table.sym_matrices,table.sym_rods,table.odf_num_bins]:
            with pytest.raises(ValueError):
                a[0] = 0

    @pytest.mark.parametrize('key',symmetry.keys())
    def test_pole_families(self,key):
        families = symmetry.get(key).pole_families
        assert len(families) == 3
        for label,d in families:
            assert label.startswith('<') and label.endswith('>') \
               and np.allclose(np.linalg.norm(d,axis=-1),1.)

    @pytest.mark.parametrize('key',symmetry.keys())
    def test_inversion(self,key):
        assert symmetry.get(key).has_inversion

    @pytest.mark.parametrize('key',symmetry.keys())
    def test_odf_step(self,key):
        table = symmetry.get(key)
        assert np.allclose(table.odf_step*table.odf_num_bins,2.*table.odf_dim) \
           and table.odf_size == table.mdf_size == np.prod(table.odf_num_bins)

    @pytest.mark.parametrize('key',symmetry.keys())
    def test_ipf_eta_range(self,key):
        table = symmetry.get(key)
        area = np.radians(table.ipf_eta_range[1]-table.ipf_eta_range[0])
        if table.ipf_chi_kind == 'hemisphere':
            assert np.isclose(area,4.*np.pi/(2*table.num_sym_ops))

    def test_cubic_low(self):
        table = symmetry.get('cubic_low')
        assert table.name == 'Cubic m3 (Tetrahedral)' and table.point_group == 'm-3' \
           and table.odf_size == 46656 and table.ipf_eta_range == (0.,90.) \
           and table.ipf_chi_kind == 'cubic_low' and table.slip_systems is None
        assert np.allclose(table.odf_dim,(0.75*(np.pi/2.-1.))**(1./3.))

    def test_cubic_high(self):
        table = symmetry.get('cubic_high')
        assert table.name == 'Cubic m3m' and table.point_group == 'm-3m' \
           and table.odf_size == 5832 and table.ipf_eta_range == (0.,45.) \
           and table.ipf_chi_kind == 'cubic_high'
        assert np.allclose(table.odf_dim,(0.75*(np.pi/4.-np.sin(np.pi/4.)))**(1./3.))

    def test_cubic_families(self):
        labels = [label for label,_ in symmetry.get('cubic_high').pole_families]
        counts = [len(d) for _,d in symmetry.get('cubic_high').pole_families]
        assert labels == ['<001>','<011>','<111>'] and counts == [3,6,4]

    def test_hexagonal_families(self):
        assert [label for label,_ in symmetry.get('hexagonal_high').pole_families] \
            == ['<0001>','<10-10>','<2-1-10>']

    def test_slip_systems(self):
        ss = symmetry.get('cubic_high').slip_systems
        assert ss.shape == (12,2,3) \
           and np.allclose(np.linalg.norm(ss,axis=-1),1.) \
           and np.allclose(np.sum(ss[:,0]*ss[:,1],axis=-1),0.)

    def test_trigonal_twofold_axes(self):
        q = symmetry.get('trigonal_high').sym_quats
        axes = q[np.isclose(q[:,0],0.),1:]
        eta = np.sort(np.degrees(np.arctan2(axes[:,1],axes[:,0]))%180.)
        assert np.allclose(eta,[30.,90.,150.])

    def test_repr(self):
        assert repr(symmetry.get('cubic_high')) == \
            'Cubic m3m (cubic_high): 24 symmetry operators, 5832 ODF bins'
