from __future__ import annotations

from typing import Iterable

import numpy as np

from meshlod.core.errors import AttributeMismatchError
from meshlod.core.mesh import MeshBuffer, index_dtype_for

# attribute name -> (MeshBuffer field, required arity)
_MERGED_ATTRIBUTES = (
    ("position", "positions", 3),
    ("normal", "normals", 3),
    ("uv", "uv", 2),
)


def _check_attributes(a: MeshBuffer, b: MeshBuffer) -> None:
    for name, field, arity in _MERGED_ATTRIBUTES:
        for label, buf in (("first", a), ("second", b)):
            arr = getattr(buf, field)
            if arr is None:
                raise AttributeMismatchError(name, f"missing on the {label} buffer")
            if arr.shape[1] != arity:
                raise AttributeMismatchError(
                    name, f"{label} buffer has arity {arr.shape[1]}, expected {arity}"
                )


def merge(a: MeshBuffer, b: MeshBuffer) -> MeshBuffer:
    """
    Concatenate two buffers into a new one.

    Vertices of `b` follow those of `a` (no welding), and every index coming
    from `b` is shifted by `a.n_vertices`. Inputs are left untouched.

    Both buffers must carry positions, normals and UVs; otherwise
    AttributeMismatchError is raised. Material assignment is not preserved.
    """
    _check_attributes(a, b)

    offset = a.n_vertices
    n_idx = a.indices.size + b.indices.size
    max_idx = max(
        int(a.indices.max()) if a.indices.size else 0,
        int(b.indices.max()) + offset if b.indices.size else 0,
    )
    dtype = index_dtype_for(n_idx, max_idx)

    indices = np.empty(n_idx, dtype=dtype)
    indices[: a.indices.size] = a.indices
    indices[a.indices.size :] = b.indices.astype(dtype) + dtype.type(offset)

    return MeshBuffer(
        positions=np.concatenate([a.positions, b.positions], axis=0),
        normals=np.concatenate([a.normals, b.normals], axis=0),
        uv=np.concatenate([a.uv, b.uv], axis=0),
        indices=indices,
    )


def merge_all(buffers: Iterable[MeshBuffer]) -> MeshBuffer:
    """Fold `merge` over `buffers` left to right; a single buffer is copied."""
    merged = None
    for buf in buffers:
        merged = buf.copy() if merged is None else merge(merged, buf)
    if merged is None:
        raise ValueError("merge_all() needs at least one buffer.")
    return merged
