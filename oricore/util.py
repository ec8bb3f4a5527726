"""Miscellaneous helper functionality."""

import os as _os
import contextlib as _contextlib
from pathlib import Path as _Path
import logging
from typing import Literal as _Literal, List as _List, Tuple as _Tuple, \
                   TextIO as _TextIO, Generator as _Generator

import numpy as _np

from ._typehints import FileHandle as _FileHandle


logger = logging.getLogger(__name__)


####################################################################################################
# Functions
####################################################################################################
def srepr(msg,
          glue: str = '\n',
          quote: bool = False) -> str:
    r"""
    Join (quoted) items with glue string.

    Parameters
    ----------
    msg : (sequence of) object with __repr__
        Items to join.
    glue : str, optional
        Glue used for joining operation. Defaults to '\n'.
    quote : bool, optional
        Quote items. Defaults to False.

    Returns
    -------
    joined : str
        String representation of the joined and quoted items.
    """
    q = '"' if quote else ''
    if (not hasattr(msg, 'strip') and
           (hasattr(msg, '__getitem__') or
            hasattr(msg, '__iter__'))):
        return glue.join(q+str(x)+q for x in msg)
    else:
        return q+(msg if isinstance(msg,str) else repr(msg))+q


def num_threads() -> int:
    """
    Number of worker threads for parallel tasks.

    Taken from the environment variable 'ORICORE_NUM_THREADS',
    falling back to 'OMP_NUM_THREADS' and finally to 4.

    Returns
    -------
    N : int
        Number of threads, at least 1.
    """
    for var in ['ORICORE_NUM_THREADS','OMP_NUM_THREADS']:
        try:
            return max(1,int(_os.environ[var]))
        except (KeyError,ValueError):
            continue
    return 4


def parallel_chunks(N: int,
                    N_workers: int) -> _List[_Tuple[int, int]]:
    """
    Split the index range [0,N) into contiguous, disjoint chunks.

    Parameters
    ----------
    N : int
        Number of items.
    N_workers : int
        Number of workers. The number of chunks does not exceed this value.

    Returns
    -------
    chunks : list of tuple(int, int)
        Start (inclusive) and end (exclusive) index of each chunk.

    Examples
    --------
    >>> parallel_chunks(10,3)
    [(0, 3), (3, 7), (7, 10)]
    """
    if N <= 0: return []
    bounds = _np.linspace(0,N,min(N,max(1,N_workers))+1).round().astype(int)
    return [(int(s),int(e)) for s,e in zip(bounds[:-1],bounds[1:])]


def project_equal_angle(vector: _np.ndarray,
                        direction: _Literal['x', 'y', 'z'] = 'z',                                   # noqa
                        normalize: bool = True) -> _np.ndarray:
    """
    Apply equal-angle (stereographic) projection to vector.

    Parameters
    ----------
    vector : numpy.ndarray, shape (...,3)
        Vector coordinates to be projected.
    direction : {'x', 'y', 'z'}
        Projection direction. Defaults to 'z'.
    normalize : bool
        Ensure unit length of input vector. Defaults to True.

    Returns
    -------
    coordinates : numpy.ndarray, shape (...,2)
        Projected coordinates, inside the unit disc for the upper hemisphere.

    Examples
    --------
    >>> project_equal_angle(np.ones(3))
    array([0.3660, 0.3660])
    """
    shift = 'zyx'.index(direction)
    v_ = _np.asarray(vector,dtype=float)
    v = _np.roll(v_/_np.linalg.norm(v_,axis=-1,keepdims=True) if normalize else v_,
                 shift,axis=-1)
    return v[...,:2]/(1.0+_np.abs(v[...,2:3]))

def project_equal_area(vector: _np.ndarray,
                       direction: _Literal['x', 'y', 'z'] = 'z',                                    # noqa
                       normalize: bool = True) -> _np.ndarray:
    """
    Apply equal-area (Lambert) projection to vector.

    The upper hemisphere maps onto the unit disc.

    Parameters
    ----------
    vector : numpy.ndarray, shape (...,3)
        Vector coordinates to be projected.
    direction : {'x', 'y', 'z'}
        Projection direction. Defaults to 'z'.
    normalize : bool
        Ensure unit length of input vector. Defaults to True.

    Returns
    -------
    coordinates : numpy.ndarray, shape (...,2)
        Projected coordinates.

    Examples
    --------
    >>> project_equal_area([0,0,1])
    array([0., 0.])
    >>> project_equal_area([1,0,0])
    array([1., 0.])
    """
    shift = 'zyx'.index(direction)
    v_ = _np.asarray(vector,dtype=float)
    v = _np.roll(v_/_np.linalg.norm(v_,axis=-1,keepdims=True) if normalize else v_,
                 shift,axis=-1)
    return v[...,:2]/_np.sqrt(1.0+_np.abs(v[...,2:3]))

def unproject_equal_area(xy: _np.ndarray) -> _np.ndarray:
    """
    Invert the equal-area projection onto the upper hemisphere.

    Parameters
    ----------
    xy : numpy.ndarray, shape (...,2)
        Projected coordinates inside the unit disc.

    Returns
    -------
    vector : numpy.ndarray, shape (...,3)
        Unit vectors with non-negative z component.
        Points outside the unit disc give NaN.
    """
    xy_ = _np.asarray(xy,dtype=float)
    r2 = _np.sum(xy_**2,axis=-1,keepdims=True)
    with _np.errstate(invalid='ignore'):
        v = _np.block([xy_*_np.sqrt(2.0-r2),1.0-r2])
    v[r2[...,0] > 1.0] = _np.nan
    return v


@_contextlib.contextmanager
def open_text(fname: _FileHandle,
              mode: _Literal['r','w'] = 'r') -> _Generator[_TextIO, None, None]:                    # noqa
    """
    Open a text file with Unix line endings.

    If a path or string is given, a context manager ensures that
    the file handle is closed.
    If a file handle is given, it remains unmodified.

    Parameters
    ----------
    fname : file, str, or pathlib.Path
        Name or handle of file.
    mode : {'r','w'}, optional
        Access mode: 'r'ead or 'w'rite, defaults to 'r'.

    Returns
    -------
    f : file handle
        File handle for a text file.
    """
    if isinstance(fname, (str,_Path)):
        with open(_Path(fname).expanduser(),mode,newline=('\n' if mode == 'w' else None)) as fhandle:
            yield fhandle
    else:
        yield fname



def shapeshifter(fro: _Tuple[int, ...],
                 to: _Tuple[int, ...],
                 mode: _Literal['left','right'] = 'left') -> _Tuple[int, ...]:
    """
    Insert unit dimensions so that 'fro' becomes broadcastable to 'to'.

    Parameters
    ----------
    fro : tuple
        Original shape of array.
    to : tuple
        Target shape of array after broadcasting.
    mode : {'left', 'right'}, optional
        Where to preferentially insert the unit dimensions.
        'left' keeps the trailing axes of 'fro' aligned with 'to',
        'right' keeps the leading ones aligned. Defaults to 'left'.

    Returns
    -------
    new_dims : tuple
        Shape of 'fro' with unit dimensions inserted.

    Examples
    --------
    >>> shapeshifter((4,2),(4,2,6),'right')
    (4, 2, 1)
    >>> shapeshifter((4,2),(6,4,2),'left')
    (1, 4, 2)
    """
    if mode not in ('left','right'):
        raise ValueError(f'invalid mode "{mode}"')
    fro_,to_ = (list(fro)[::-1],list(to)[::-1]) if mode == 'left' else (list(fro),list(to))

    new_dims = []
    i = 0
    for n in to_:
        if i < len(fro_) and fro_[i] in (n,1):
            new_dims.append(fro_[i])
            i += 1
        else:
            new_dims.append(1)
    if i != len(fro_):
        raise ValueError(f'shapes cannot be shifted {fro} --> {to}')

    return tuple(new_dims[::-1] if mode == 'left' else new_dims)
