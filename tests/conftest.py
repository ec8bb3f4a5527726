import os
import itertools

import numpy as np
import pytest
import matplotlib as mpl
if os.name == 'posix' and 'DISPLAY' not in os.environ:
    mpl.use('Agg')

import oricore


def pytest_addoption(parser):
    parser.addoption('--rng-entropy',
                     help='Entropy for random seed generator.')

@pytest.fixture
def np_rng(request):
    """Instance of numpy.random.Generator."""
    e = request.config.getoption('--rng-entropy')
    print('\nrng entropy: ',sq := np.random.SeedSequence(e if e is None else int(e)).entropy)
    return np.random.default_rng(seed=sq)


@pytest.fixture(autouse=True)
def serial(monkeypatch):
    """Keep thread pools small."""
    monkeypatch.setenv('ORICORE_NUM_THREADS','2')


@pytest.fixture
def set_of_quaternions(np_rng):
    """
    600 unit quaternions with non-negative real part.

    Contains all distinct rotations with components in {-1,0,1} before normalization
    (e.g. half turns about <100>, <110>, <111>), a slightly disturbed copy of them,
    and random rotations.
    """
    specials = np.array([q for q in itertools.product([-1.,0.,1.],repeat=4)
                         if any(q) and q[np.flatnonzero(q)[0]] > 0.])
    specials /= np.linalg.norm(specials,axis=1,keepdims=True)

    disturbed = specials + (np_rng.random(4)*2.-1.)*1.e-2
    disturbed /= np.linalg.norm(disturbed,axis=1,keepdims=True)
    disturbed[disturbed[:,0]<0.] *= -1.

    random = oricore.Rotation.from_random(600-2*len(specials),rng_seed=np_rng).as_quaternion()

    return np.vstack((specials,disturbed,random))


@pytest.fixture(params=oricore.symmetry.keys())
def laue_ops(request):
    """Symmetry engine of each Laue class."""
    return oricore.LaueOps.from_key(request.param)


@pytest.fixture
def set_of_rotations(set_of_quaternions):
    """A set of n rotations."""
    return [oricore.Rotation.from_quaternion(s) for s in set_of_quaternions]
