import setuptools
from pathlib import Path
import re

# https://www.python.org/dev/peps/pep-0440
with open(Path(__file__).parent/'oricore/VERSION') as f:
    version = re.sub(r'(-([^-]*)).*$',r'.\2',re.sub(r'^v(\d+\.\d+(\.\d+)?)',r'\1',f.readline().strip()))

setuptools.setup(
    name='oricore',
    version=version,
    author='The oricore developers',
    description='Crystallographic orientations and Laue class symmetry',
    long_description='Python library for orientation conversion, fundamental zone reduction, '
                     'misorientation, ODF/MDF binning, and (inverse) pole figures',
    packages=setuptools.find_packages(include=['oricore','oricore.*']),
    include_package_data=True,
    package_data={'oricore':['VERSION']},
    python_requires = '>=3.9',
    install_requires = [
        'numpy>=1.21',
        'pandas>=1.1',                                                                              # requires numpy
        'scipy>=1.5',
        'h5py>=3.0',                                                                                # requires numpy
        'matplotlib>=3.5',                                                                          # requires numpy, pillow
        'pillow>=8.0',
        'PyYAML>=5.1',
    ],
    extras_require = {
        'test': ['pytest>=6.0'],
    },
    classifiers = [
        'Intended Audience :: Science/Research',
        'Topic :: Scientific/Engineering',
        'Programming Language :: Python :: 3',
        'Operating System :: OS Independent',
    ],
)
