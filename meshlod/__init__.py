# meshlod/__init__.py

"""
meshlod

Build a single simplified, height-normalized stand-in for a mesh or a set of
sub-meshes.

Pipeline:
- Merge independently indexed buffers (indices re-based, width widened past 16 bit)
- Decimate in bounded steps around a pluggable single-step simplifier
- Recover from degenerate steps, fail with a typed error when the simplifier stalls
- Center, rotate and rescale the result back to the original height

Design principles:
- numpy buffers in, numpy buffers out; inputs are never modified
- trimesh / fast_simplification / scipy are imported lazily where needed
- Material correspondence is not preserved across a merge
"""

from .core.bounds import BoundingExtent, extent
from .core.errors import (
    AttributeMismatchError,
    InvalidTargetError,
    MeshLODError,
    SimplificationStalledError,
    ZeroExtentError,
)
from .core.mesh import MeshBuffer
from .ops.decimate import IterativeDecimator, decimate, iter_decimate
from .ops.merge import merge, merge_all
from .ops.normalize import center, normalize
from .ops.simplify import QuadricStepSimplifier, StepResult
from .pipeline import LODOptions, LODResult, process

__all__ = [
    "MeshBuffer",
    "BoundingExtent",
    "extent",
    "merge",
    "merge_all",
    "StepResult",
    "QuadricStepSimplifier",
    "IterativeDecimator",
    "decimate",
    "iter_decimate",
    "center",
    "normalize",
    "LODOptions",
    "LODResult",
    "process",
    "MeshLODError",
    "AttributeMismatchError",
    "InvalidTargetError",
    "SimplificationStalledError",
    "ZeroExtentError",
]
