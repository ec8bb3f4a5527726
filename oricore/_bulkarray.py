import logging
from pathlib import Path
from typing import Optional, Union, Tuple, Sequence, Any, TypeVar

import numpy as np
import h5py
import pandas as pd

from ._typehints import IntSequence


logger = logging.getLogger(__name__)

MyType = TypeVar('MyType', bound='BulkArray')


class AllocationError(MemoryError):
    """Buffer of a BulkArray cannot be allocated."""


class BulkArray:
    """
    Named, typed, resizable array of tuples.

    Each tuple consists of the same number of components,
    which are laid out according to the component dimensions.
    Data are stored contiguously, tuple after tuple.

    A BulkArray either owns its buffer or borrows it from
    a numpy array given to 'wrap'. Operations that need to
    reallocate (resizing, erasing) always result in an owned buffer.

    Examples
    --------
    Three Bunge Euler angle triplets, initialized to zero.

    >>> import oricore
    >>> eu = oricore.BulkArray(3,(3,),'EulerAngles',0.0,'f4')
    >>> eu.size
    9
    >>> eu.as_array().shape
    (3, 3)

    """

    def __init__(self,
                 num_tuples: int,
                 component_dims: Union[int, IntSequence] = (1,),
                 name: str = '',
                 init_value: Any = 0,
                 dtype: Union[str, np.dtype, type] = np.float64):
        """
        New BulkArray.

        Parameters
        ----------
        num_tuples : int
            Number of tuples.
        component_dims : (sequence of) int, optional
            Shape of each tuple. Defaults to (1,).
        name : str, optional
            Name of the array. Defaults to ''.
        init_value : scalar, optional
            Value of new elements. Defaults to 0.
        dtype : numpy.dtype, optional
            Data type of the elements. Defaults to numpy.float64.

        """
        self.name = name
        self._component_dims = BulkArray._as_dims(component_dims)
        self._dtype = np.dtype(dtype)
        self.init_value = init_value
        if num_tuples < 0:
            raise ValueError(f'negative number of tuples "{num_tuples}"')
        self._data = BulkArray._allocate(int(num_tuples)*self.num_components,init_value,self._dtype)
        self._owns_data = True


    @staticmethod
    def _as_dims(component_dims: Union[int, IntSequence]) -> Tuple[int, ...]:
        dims = (int(component_dims),) if isinstance(component_dims,(int,np.integer)) else \
               tuple(int(d) for d in component_dims)
        if len(dims) == 0 or any(d < 1 for d in dims):
            raise ValueError(f'invalid component dimensions "{dims}"')
        return dims

    @staticmethod
    def _allocate(N: int,
                  value: Any,
                  dtype: np.dtype) -> np.ndarray:
        try:
            return np.full(N,value,dtype=dtype)
        except MemoryError as e:
            raise AllocationError(f'cannot allocate {N} elements of type {dtype}') from e


    @classmethod
    def wrap(cls,
             array: np.ndarray,
             name: str = '',
             owns_data: bool = False,
             component_dims: Optional[Union[int, IntSequence]] = None) -> 'BulkArray':
        """
        Wrap an existing numpy array without copying it.

        Parameters
        ----------
        array : numpy.ndarray, shape (N,...)
            C-contiguous data, first axis runs over tuples.
        name : str, optional
            Name of the array. Defaults to ''.
        owns_data : bool, optional
            Transfer responsibility for the buffer to the new BulkArray.
            Defaults to False, i.e. the buffer is borrowed.
        component_dims : (sequence of) int, optional
            Shape of each tuple. Defaults to array.shape[1:] or (1,) for one-dimensional arrays.

        Returns
        -------
        wrapped : oricore.BulkArray
            BulkArray that shares memory with 'array'.

        """
        if not isinstance(array,np.ndarray) or not array.flags['C_CONTIGUOUS']:
            raise ValueError('can only wrap C-contiguous numpy arrays')
        dims = cls._as_dims(component_dims if component_dims is not None else
                            (array.shape[1:] if array.ndim > 1 else (1,)))
        if array.size % int(np.prod(dims)) != 0:
            raise ValueError(f'size {array.size} not compatible with component dimensions {dims}')

        dup = cls.__new__(cls)
        dup.name = name
        dup._component_dims = dims
        dup._dtype = array.dtype
        dup.init_value = array.dtype.type(0)
        dup._data = array.reshape(-1)
        dup._owns_data = owns_data
        return dup


    def __repr__(self) -> str:
        """
        Return repr(self).

        Give short, human-readable summary.

        """
        return f'BulkArray "{self.name}" ({"owned" if self._owns_data else "borrowed"}), '\
               f'{self.num_tuples} tuple{"" if self.num_tuples == 1 else "s"} of shape {self._component_dims}, '\
               f'dtype {self._dtype}'

    def __len__(self) -> int:
        """Number of tuples."""
        return self.num_tuples

    def __copy__(self: MyType) -> MyType:
        """
        Return deepcopy(self).

        Create deep copy, which always owns its data.

        """
        dup = self.__class__.__new__(self.__class__)
        dup.name = self.name
        dup._component_dims = self._component_dims
        dup._dtype = self._dtype
        dup.init_value = self.init_value
        dup._data = self._data.copy()
        dup._owns_data = True
        return dup

    copy = __copy__


    @property
    def dtype(self) -> np.dtype:
        return self._dtype

    @property
    def type_size(self) -> int:
        """Size of one element in bytes."""
        return self._dtype.itemsize

    @property
    def component_dims(self) -> Tuple[int, ...]:
        return self._component_dims

    @property
    def num_components(self) -> int:
        return int(np.prod(self._component_dims))

    @property
    def num_tuples(self) -> int:
        return self._data.size//self.num_components

    @property
    def size(self) -> int:
        """Total number of elements, i.e. num_tuples*num_components."""
        return self._data.size

    @property
    def owns_data(self) -> bool:
        return self._owns_data


    def take_ownership(self):
        """
        Become responsible for the buffer.

        A borrowed buffer is copied, changes are not visible to the original array anymore.
        """
        if not self._owns_data:
            self._data = self._data.copy()
            self._owns_data = True
            logger.debug(f'BulkArray "{self.name}" took ownership of {self.size} elements')

    def release_ownership(self) -> np.ndarray:
        """
        Give up responsibility for the buffer.

        Returns
        -------
        data : numpy.ndarray, shape (num_tuples,component_dims)
            View on the buffer, which stays valid after release.
        """
        self._owns_data = False
        logger.debug(f'BulkArray "{self.name}" released ownership of {self.size} elements')
        return self.as_array()


    def _check_tuple(self, i: int):
        if not 0 <= i < self.num_tuples:
            raise IndexError(f'tuple index {i} out of range [0,{self.num_tuples})')


    def get_value(self, i: int) -> Any:
        """Element at flat index i."""
        if not 0 <= i < self.size:
            raise IndexError(f'index {i} out of range [0,{self.size})')
        return self._data[i]

    def set_value(self, i: int, value: Any):
        """Set element at flat index i."""
        if not 0 <= i < self.size:
            raise IndexError(f'index {i} out of range [0,{self.size})')
        self._data[i] = value

    def get_tuple(self, i: int) -> np.ndarray:
        """Copy of the components of tuple i."""
        self._check_tuple(i)
        N = self.num_components
        return self._data[i*N:(i+1)*N].copy()

    def set_tuple(self, i: int, values: Sequence[Any]):
        """Set the components of tuple i."""
        self._check_tuple(i)
        N = self.num_components
        v = np.asarray(values,dtype=self._dtype).reshape(-1)
        if v.size != N:
            raise ValueError(f'expected {N} components, got {v.size}')
        self._data[i*N:(i+1)*N] = v

    def get_component(self, i: int, j: int) -> Any:
        """Component j of tuple i."""
        self._check_tuple(i)
        if not 0 <= j < self.num_components:
            raise IndexError(f'component index {j} out of range [0,{self.num_components})')
        return self._data[i*self.num_components+j]

    def set_component(self, i: int, j: int, value: Any):
        """Set component j of tuple i."""
        self._check_tuple(i)
        if not 0 <= j < self.num_components:
            raise IndexError(f'component index {j} out of range [0,{self.num_components})')
        self._data[i*self.num_components+j] = value


    def initialize_with_value(self,
                              value: Any,
                              offset: int = 0):
        """
        Set all elements from flat index 'offset' onwards.

        Parameters
        ----------
        value : scalar
            New value.
        offset : int, optional
            First flat index to set. Defaults to 0.

        """
        self._data[offset:] = value

    def initialize_with_zeros(self):
        """Set all elements to zero."""
        self._data[:] = 0


    def resize_tuples(self, num_tuples: int):
        """
        Change the number of tuples.

        Existing tuples are kept up to the new size,
        new tuples are filled with the initialization value.

        Parameters
        ----------
        num_tuples : int
            New number of tuples.

        """
        if num_tuples < 0:
            raise ValueError(f'negative number of tuples "{num_tuples}"')
        new = BulkArray._allocate(int(num_tuples)*self.num_components,self.init_value,self._dtype)
        N = min(new.size,self.size)
        new[:N] = self._data[:N]
        self._data = new
        self._owns_data = True


    def copy_tuple(self,
                   current: int,
                   new: int):
        """
        Copy tuple 'current' onto tuple 'new'.

        Parameters
        ----------
        current : int
            Index of source tuple.
        new : int
            Index of destination tuple.

        """
        self._check_tuple(current)
        self._check_tuple(new)
        N = self.num_components
        self._data[new*N:(new+1)*N] = self._data[current*N:(current+1)*N]


    def copy_from(self,
                  dest_offset: int,
                  source: 'BulkArray',
                  src_offset: int = 0,
                  count: Optional[int] = None):
        """
        Copy tuples from another BulkArray.

        Parameters
        ----------
        dest_offset : int
            First destination tuple.
        source : oricore.BulkArray
            Array to copy from. Needs the same number of components.
        src_offset : int, optional
            First source tuple. Defaults to 0.
        count : int, optional
            Number of tuples to copy. Defaults to all tuples from src_offset onwards.

        """
        if source.num_components != self.num_components:
            raise ValueError(f'component mismatch: {source.num_components} != {self.num_components}')
        count_ = source.num_tuples - src_offset if count is None else count
        if src_offset < 0 or count_ < 0 or src_offset + count_ > source.num_tuples:
            raise IndexError(f'source range [{src_offset},{src_offset+count_}) out of [0,{source.num_tuples})')
        if dest_offset < 0 or dest_offset + count_ > self.num_tuples:
            raise IndexError(f'destination range [{dest_offset},{dest_offset+count_}) out of [0,{self.num_tuples})')
        N = self.num_components
        self._data[dest_offset*N:(dest_offset+count_)*N] = source._data[src_offset*N:(src_offset+count_)*N]


    def erase_tuples(self, indices: IntSequence):
        """
        Remove tuples.

        Parameters
        ----------
        indices : sequence of int
            Sorted indices of the tuples to remove.
            If at least as many indices as tuples are given, all tuples are removed.

        """
        idx = np.asarray(indices,dtype=np.int64).reshape(-1)
        if idx.size == 0: return
        if idx.size >= self.num_tuples:
            self.resize_tuples(0)
            return
        if np.any(idx < 0) or np.any(idx >= self.num_tuples):
            raise IndexError(f'tuple indices out of range [0,{self.num_tuples})')

        keep = np.ones(self.num_tuples,dtype=bool)
        keep[idx] = False
        self._data = self._data.reshape(self.num_tuples,self.num_components)[keep].reshape(-1)
        self._owns_data = True


    def byteswap(self):
        """
        Swap the byte order of every element in place.

        One-byte types are left unchanged.
        """
        if self.type_size == 1:
            return
        if self.type_size not in (2,4,8):
            raise TypeError(f'cannot swap bytes of {self.type_size}-byte type {self._dtype}')
        self._data.byteswap(inplace=True)


    def as_array(self) -> np.ndarray:
        """
        View on the data.

        Returns
        -------
        data : numpy.ndarray, shape (num_tuples,component_dims)
            Shares memory with the BulkArray.

        """
        return self._data.reshape((self.num_tuples,)+self._component_dims)


    def to_pandas(self) -> pd.DataFrame:
        """
        Represent as pandas DataFrame.

        Returns
        -------
        df : pandas.DataFrame
            One row per tuple, one column per component.
            Multi-component columns are labeled '<index>_<name>'.

        """
        data = self._data.reshape(self.num_tuples,self.num_components)
        labels = [self.name] if self.num_components == 1 else \
                 [f'{i+1}_{self.name}' for i in range(self.num_components)]
        return pd.DataFrame(data=data,columns=labels)


    def save(self,
             fname: Union[str, Path],
             path: str = '/'):
        """
        Save to HDF5 file.

        Parameters
        ----------
        fname : str or pathlib.Path
            Filename of the HDF5 file. Existing datasets of the same name are overwritten.
        path : str, optional
            Group within the file. Defaults to '/'.

        """
        if not self.name:
            raise ValueError('cannot save unnamed BulkArray')
        with h5py.File(Path(fname).expanduser(),'a') as f:
            group = f.require_group(path)
            if self.name in group: del group[self.name]
            dataset = group.create_dataset(self.name,data=self.as_array())
            dataset.attrs['ComponentDimensions'] = np.array(self._component_dims,dtype=np.uint64)
            dataset.attrs['TupleDimensions'] = np.array([self.num_tuples],dtype=np.uint64)
        logger.debug(f'saved BulkArray "{self.name}" to {fname}:{path}')

    @classmethod
    def load(cls,
             fname: Union[str, Path],
             name: str,
             path: str = '/') -> 'BulkArray':
        """
        Load from HDF5 file.

        Parameters
        ----------
        fname : str or pathlib.Path
            Filename of the HDF5 file.
        name : str
            Name of the dataset.
        path : str, optional
            Group within the file. Defaults to '/'.

        Returns
        -------
        loaded : oricore.BulkArray
            Owned array with the contents of the dataset.

        """
        with h5py.File(Path(fname).expanduser(),'r') as f:
            dataset = f[path][name]
            data = np.ascontiguousarray(dataset[()])
            dims = tuple(int(d) for d in dataset.attrs['ComponentDimensions']) \
                   if 'ComponentDimensions' in dataset.attrs else None
        logger.debug(f'loaded BulkArray "{name}" from {fname}:{path}')
        return cls.wrap(data,name,True,dims)
