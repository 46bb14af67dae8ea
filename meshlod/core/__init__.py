from .bounds import BoundingExtent, extent
from .errors import (
    AttributeMismatchError,
    InvalidTargetError,
    MeshLODError,
    SimplificationStalledError,
    ZeroExtentError,
)
from .mesh import MeshBuffer, index_dtype_for

__all__ = [
    "BoundingExtent",
    "extent",
    "MeshBuffer",
    "index_dtype_for",
    "MeshLODError",
    "AttributeMismatchError",
    "InvalidTargetError",
    "SimplificationStalledError",
    "ZeroExtentError",
]
