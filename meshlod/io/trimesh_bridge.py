from __future__ import annotations

from pathlib import Path
from typing import List, Union

import numpy as np

from meshlod.core.mesh import MeshBuffer


def from_trimesh(tm) -> MeshBuffer:
    """
    trimesh.Trimesh -> MeshBuffer.

    Vertex normals are always available (trimesh computes them on demand);
    UVs only when the visual carries texture coordinates.
    """
    uv = getattr(getattr(tm, "visual", None), "uv", None)
    if uv is not None:
        uv = np.asarray(uv)
        if uv.shape[0] != len(tm.vertices):
            uv = None
    return MeshBuffer(
        positions=tm.vertices.view(np.ndarray),
        indices=tm.faces.view(np.ndarray).reshape(-1),
        normals=tm.vertex_normals.view(np.ndarray),
        uv=uv,
    )


def to_trimesh(mesh: MeshBuffer):
    import trimesh

    visual = None
    if mesh.uv is not None:
        visual = trimesh.visual.TextureVisuals(uv=mesh.uv)
    return trimesh.Trimesh(
        vertices=mesh.positions.astype(np.float64),
        faces=mesh.faces.astype(np.int64),
        vertex_normals=None if mesh.normals is None else mesh.normals.astype(np.float64),
        visual=visual,
        process=False,
    )


def buffers_from_scene(loaded) -> List[MeshBuffer]:
    """
    Flatten a trimesh Scene (or a single Trimesh) into MeshBuffers.

    Scene graph transforms are applied, so parts end up in world space.
    Materials are dropped.
    """
    import trimesh

    if isinstance(loaded, trimesh.Trimesh):
        return [from_trimesh(loaded)]
    if isinstance(loaded, trimesh.Scene):
        return [from_trimesh(g) for g in loaded.dump() if isinstance(g, trimesh.Trimesh)]
    raise TypeError(f"Unsupported geometry type: {type(loaded).__name__}")


def load_mesh_buffers(path: Union[str, Path]) -> List[MeshBuffer]:
    """Load any file trimesh understands (GLB/GLTF/OBJ/STL/PLY...)."""
    import trimesh

    path = Path(path).expanduser().resolve()
    if not path.exists():
        raise FileNotFoundError(path)
    buffers = buffers_from_scene(trimesh.load(path, force="scene"))
    if not buffers:
        raise ValueError(f"No triangle meshes found in {path}")
    return buffers
