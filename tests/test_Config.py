import pytest
import numpy as np
import yaml

from oricore import Config
from oricore import PoleFigureConfig
from oricore import Rotation
from oricore import BulkArray


@pytest.fixture
def pole_figure_yaml():
    return """
    eulers:
      - [0.0, 0.5, 1.0]
      - [1.5, 0.25, 3.0]
    image_dim: 128
    labels: ['<001>', '<011>', '<111>']
    order: [2, 0, 1]
    """


class TestConfig:

    def test_yaml_entries(self,pole_figure_yaml):
        cfg = PoleFigureConfig(pole_figure_yaml)
        assert cfg['eulers'] == [[0.,.5,1.],[1.5,.25,3.]] and cfg['order'] == [2,0,1] \
           and cfg['image_dim'] == 128 and cfg['lambert_dim'] == 64

    def test_yaml_equals_dict(self,pole_figure_yaml):
        assert PoleFigureConfig(pole_figure_yaml) == PoleFigureConfig(yaml.safe_load(pole_figure_yaml))

    @pytest.mark.parametrize('config',[{'image_dim':32},'image_dim: 32'])
    def test_keyword_precedence(self,config):
        assert Config(config,image_dim=16) == {'image_dim':16}

    @pytest.mark.parametrize('config',[None,'',{}])
    def test_empty(self,config):
        assert Config(config) == {}

    @pytest.mark.parametrize('flow_style',[None,True,False])
    def test_save_load(self,tmp_path,pole_figure_yaml,flow_style):
        cfg = PoleFigureConfig(pole_figure_yaml)
        cfg.save(tmp_path/'pole_figure.yaml',default_flow_style=flow_style)
        loaded = PoleFigureConfig.load(tmp_path/'pole_figure.yaml')
        assert type(loaded) is PoleFigureConfig and loaded == cfg

    def test_save_load_handle(self,tmp_path,pole_figure_yaml):
        cfg = PoleFigureConfig(pole_figure_yaml)
        with open(tmp_path/'pole_figure.yaml','w') as f:
            cfg.save(f)
        with open(tmp_path/'pole_figure.yaml') as f:
            assert PoleFigureConfig.load(f) == cfg

    def test_repr(self,pole_figure_yaml):
        cfg = PoleFigureConfig(pole_figure_yaml)
        assert PoleFigureConfig(repr(cfg)) == cfg

    def test_repr_order(self):
        assert repr(Config(image_dim=16,eulers=[[0,0,0]])).splitlines()[0] == 'image_dim: 16'

    def test_unicode_label(self):
        assert 'φ' in repr(Config(labels=['φ1']))

    def test_numpy_eulers(self,np_rng):
        eu = np_rng.random((3,3))
        cfg = PoleFigureConfig(eulers=eu,image_dim=np.int64(16),sphere_radius=np.float32(1.))
        assert PoleFigureConfig(repr(cfg)) == PoleFigureConfig(eulers=eu.tolist(),image_dim=16)

    def test_BulkArray_eulers(self):
        eu = BulkArray.wrap(np.arange(6.).reshape(2,3),'EulerAngles')
        assert Config(repr(Config(eulers=eu)))['eulers'] == [[0.,1.,2.],[3.,4.,5.]]

    def test_Rotation(self):
        R = Rotation.from_Euler_angles([[0.,.5,1.],[1.5,.25,3.]])
        assert np.allclose(Config(repr(Config(orientations=R)))['orientations'],R.as_quaternion())

    def test_no_anchors(self):
        d = [0,0,0]
        assert '&' not in repr(Config(eulers=[d,d]))

    def test_abstract_is_valid(self):
        with pytest.raises(NotImplementedError):
            Config().is_valid

    def test_abstract_is_complete(self):
        with pytest.raises(NotImplementedError):
            Config().is_complete
