import pytest
import numpy as np

from oricore import util


@pytest.mark.parametrize('input,glue,quote,output',
                        [
                         (None,'',False,'None'),
                         ([None,None],'\n',False,'None\nNone'),
                         ([-0.5,0.5],'=',False,'-0.5=0.5'),
                         ([1,2,3],'_',False,'1_2_3'),
                         ([1,2,3],'/',True,'"1"/"2"/"3"'),
                         ('abc',',',True,'"abc"'),
                        ])
def test_srepr(input,glue,quote,output):
    assert output == util.srepr(input,glue,quote)


@pytest.mark.parametrize('env,N',[({},4),
                                  ({'OMP_NUM_THREADS':'3'},3),
                                  ({'ORICORE_NUM_THREADS':'8','OMP_NUM_THREADS':'3'},8),
                                  ({'ORICORE_NUM_THREADS':'0'},1),
                                  ({'ORICORE_NUM_THREADS':'many','OMP_NUM_THREADS':'5'},5)])
def test_num_threads(monkeypatch,env,N):
    for var in ['ORICORE_NUM_THREADS','OMP_NUM_THREADS']:
        monkeypatch.delenv(var,raising=False)
    for var,value in env.items():
        monkeypatch.setenv(var,value)
    assert util.num_threads() == N


def test_parallel_chunks():
    assert util.parallel_chunks(10,3) == [(0,3),(3,7),(7,10)]

@pytest.mark.parametrize('N',[0,1,7,100,1001])
@pytest.mark.parametrize('N_workers',[1,2,3,16])
def test_parallel_chunks_cover(N,N_workers):
    chunks = util.parallel_chunks(N,N_workers)
    assert len(chunks) <= N_workers \
       and all(s < e for s,e in chunks) \
       and [i for s,e in chunks for i in range(s,e)] == list(range(N))


@pytest.mark.parametrize('point,direction,normalize,answer',
                         [
                          ([1,0,0],'z',False,[1,0]),
                          ([1,0,0],'z',True, [1,0]),
                          ([0,1,1],'z',False,[0,0.5]),
                          ([0,1,1],'y',True, [0.41421356,0]),
                          ([1,1,0],'x',False,[0.5,0]),
                          ([1,1,1],'y',True, [0.3660254,0.3660254]),
                         ])
def test_project_equal_angle(point,direction,normalize,answer):
    assert np.allclose(util.project_equal_angle(np.array(point),direction=direction,
                                                normalize=normalize),answer)

@pytest.mark.parametrize('point,direction,normalize,answer',
                         [
                          ([1,0,0],'z',False,[1,0]),
                          ([1,0,0],'z',True, [1,0]),
                          ([0,1,1],'z',False,[0,0.70710678]),
                          ([0,1,1],'y',True, [0.5411961,0]),
                          ([1,1,0],'x',False,[0.70710678,0]),
                          ([1,1,1],'y',True, [0.45970084,0.45970084]),
                         ])
def test_project_equal_area(point,direction,normalize,answer):
    assert np.allclose(util.project_equal_area(np.array(point),direction=direction,
                                               normalize=normalize),answer)

def test_unproject_equal_area(np_rng):
    v = np_rng.random((100,3))*2.-1.
    v[:,2] = np.abs(v[:,2])
    v /= np.linalg.norm(v,axis=-1,keepdims=True)
    assert np.allclose(util.unproject_equal_area(util.project_equal_area(v)),v)

def test_unproject_equal_area_outside():
    v = util.unproject_equal_area(np.array([[0.,0.],[1.,1.]]))
    assert np.allclose(v[0],[0.,0.,1.]) and np.all(np.isnan(v[1]))


@pytest.mark.parametrize('fname',['test.txt','~/test.txt'])
def test_open_text_path(tmp_path,monkeypatch,fname):
    monkeypatch.setenv('HOME',str(tmp_path))
    path = tmp_path/'test.txt' if fname.startswith('~') else tmp_path/fname
    with util.open_text(str(path) if not fname.startswith('~') else fname,'w') as f:
        f.write('a\nb\n')
    with util.open_text(path) as f:
        assert f.read() == 'a\nb\n'

def test_open_text_handle(tmp_path):
    with open(tmp_path/'test.txt','w') as f:
        with util.open_text(f,'w') as g:
            assert g is f
        assert not f.closed


@pytest.mark.parametrize('fro,to,mode,answer',
                         [
                          ((),(7,8),'right',(1,1)),
                          ((1,),(7,),'left',(1,)),
                          ((4,2),(4,2,6),'right',(4,2,1)),
                          ((4,2),(6,4,2),'left',(1,4,2)),
                          ((1,3),(5,3),'right',(1,3)),
                          ((2,2,3),(2,2,2,3,4),'left',(1,2,2,3,1)),
                          ((2,2,3),(2,2,2,3,4),'right',(2,2,1,3,1)),
                         ])
def test_shapeshifter(fro,to,mode,answer):
    assert util.shapeshifter(fro,to,mode) == answer
    np.broadcast_to(np.empty(fro).reshape(answer),to)

@pytest.mark.parametrize('fro,to,mode',
                         [
                          ((10,3,4),(10,3,2,2),'left'),
                          ((2,3),(10,3,2,2),'right'),
                          ((4,2),(4,),'right'),
                          ((4,2),(4,2,6),'center'),
                         ])
def test_shapeshifter_invalid(fro,to,mode):
    with pytest.raises(ValueError):
        util.shapeshifter(fro,to,mode)
