from io import StringIO
from typing import Optional, Union, Any, Dict, Type, TypeVar

import numpy as np
import yaml
try:
    from yaml import CSafeLoader as SafeLoader
    from yaml import CSafeDumper as SafeDumper
except ImportError:
    from yaml import SafeLoader                                                                     # type: ignore[assignment]
    from yaml import SafeDumper                                                                     # type: ignore[assignment]

from ._typehints import FileHandle
from ._rotation import Rotation
from ._bulkarray import BulkArray
from . import util


MyType = TypeVar('MyType', bound='Config')

class ConfigDumper(SafeDumper):
    """Write configurations as plain YAML without anchors or tags."""

    def ignore_aliases(self,
                       data: Any) -> bool:
        return True


ConfigDumper.add_multi_representer(dict,       lambda d,x: d.represent_dict(dict(x)))
ConfigDumper.add_multi_representer(np.ndarray, lambda d,x: d.represent_list(x.tolist()))
ConfigDumper.add_multi_representer(np.generic, lambda d,x: d.represent_data(x.item()))
ConfigDumper.add_multi_representer(BulkArray,  lambda d,x: d.represent_list(x.as_array().tolist()))
ConfigDumper.add_multi_representer(Rotation,   lambda d,x: d.represent_list(x.quaternion.tolist()))


class Config(dict):
    """
    YAML-based configuration.

    Subclasses fill in defaults and decide whether
    the content is complete and valid.
    """

    def __init__(self,
                 config: Optional[Union[str, Dict[str, Any]]] = None,
                 **kwargs):
        """
        New YAML-based configuration.

        Parameters
        ----------
        config : dict or str, optional
            Configuration. String needs to be valid YAML.
        **kwargs : arbitrary key–value pairs, optional
            Top-level entries of the configuration.
            They take precedence over entries of 'config'.
        """
        super().__init__((yaml.load(config,Loader=SafeLoader) if isinstance(config,str) else config) or {})
        self.update(kwargs)


    def __repr__(self) -> str:
        """Show as in file."""
        with StringIO() as f:
            self.save(f)
            return f.getvalue()


    @classmethod
    def load(cls: Type[MyType],
             fname: FileHandle) -> MyType:
        """
        Load from YAML file.

        Parameters
        ----------
        fname : file, str, or pathlib.Path
            Filename or file to read.

        Returns
        -------
        loaded : oricore.Config
            Configuration from file, of the same type as the calling class.
        """
        with util.open_text(fname) as f:
            return cls(yaml.load(f,Loader=SafeLoader))


    def save(self,
             fname: FileHandle,
             **kwargs):
        """
        Save to YAML file.

        Parameters
        ----------
        fname : file, str, or pathlib.Path
            Filename or file to write.
        **kwargs : dict
            Keyword arguments parsed to yaml.dump.
            Flow style is chosen per node and keys keep their order unless overridden.
        """
        options = dict(width=256,default_flow_style=None,sort_keys=False,allow_unicode=True,
                       Dumper=ConfigDumper) | kwargs
        with util.open_text(fname,'w') as f:
            yaml.dump(self,f,**options)


    @property
    def is_complete(self) -> bool:
        """Check for completeness."""
        raise NotImplementedError


    @property
    def is_valid(self) -> bool:
        """Check for valid content."""
        raise NotImplementedError
