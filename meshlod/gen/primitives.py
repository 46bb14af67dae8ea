from __future__ import annotations

from typing import Any, Tuple

import numpy as np

from meshlod.core.mesh import MeshBuffer
from meshlod.ops.features import compute_vertex_normals

# 8 shared corners, 12 outward-facing triangles
_CUBE_FACES = np.array(
    [
        [0, 2, 1], [0, 3, 2],  # -z
        [4, 5, 6], [4, 6, 7],  # +z
        [0, 1, 5], [0, 5, 4],  # -y
        [3, 7, 6], [3, 6, 2],  # +y
        [0, 4, 7], [0, 7, 3],  # -x
        [1, 2, 6], [1, 6, 5],  # +x
    ],
    dtype=np.int64,
)


def _as_3tuple(v: Any, default: Tuple[float, float, float]) -> Tuple[float, float, float]:
    if v is None:
        return default
    if isinstance(v, (int, float)):
        x = float(v)
        return (x, x, x)
    if isinstance(v, (list, tuple)) and len(v) == 3:
        return (float(v[0]), float(v[1]), float(v[2]))
    raise TypeError(f"Expected a scalar or 3-tuple, got: {type(v).__name__} {v}")


def _with_planar_uv(positions: np.ndarray, faces: np.ndarray) -> MeshBuffer:
    # uv = xy of the bounding box, mapped to [0,1]
    lo = positions.min(axis=0)
    span = np.maximum(positions.max(axis=0) - lo, 1e-12)
    uv = (positions[:, :2] - lo[:2]) / span[:2]
    mesh = MeshBuffer(positions=positions, indices=faces.reshape(-1), uv=uv)
    mesh.normals = compute_vertex_normals(mesh).astype(np.float32)
    return mesh


def _tm_to_buffer(tm) -> MeshBuffer:
    return _with_planar_uv(tm.vertices.view(np.ndarray), tm.faces.view(np.ndarray))


def build_primitive(name: str, **params) -> MeshBuffer:
    """
    Build simple test meshes with normals and planar UVs.

    Supported primitives:
      - "box":    extents=(x,y,z) or side=s, center=(x,y,z)
                  indexed, 8 vertices / 12 triangles; aliases "cube", "cuboid"
      - "grid":   n=cells per side, size=(x,z); flat in XZ, y=0
      - "sphere": radius=..., subdivisions=...  (needs trimesh)
    """
    key = (name or "").lower().strip()

    if key in {"box", "cube", "cuboid"}:
        if "side" in params and params.get("extents") is None:
            extents = _as_3tuple(params.get("side"), (1.0, 1.0, 1.0))
        else:
            extents = _as_3tuple(params.get("extents"), (1.0, 1.0, 1.0))
        c = np.array(_as_3tuple(params.get("center"), (0.0, 0.0, 0.0)))
        corners = np.array(
            [[x, y, z] for z in (-0.5, 0.5) for (x, y) in ((-0.5, -0.5), (0.5, -0.5), (0.5, 0.5), (-0.5, 0.5))],
            dtype=np.float64,
        )
        return _with_planar_uv(corners * np.array(extents) + c, _CUBE_FACES)

    if key == "grid":
        n = int(params.get("n", 10))
        sx, sz = params.get("size") or (1.0, 1.0)
        xs = np.linspace(-0.5 * sx, 0.5 * sx, n + 1)
        zs = np.linspace(-0.5 * sz, 0.5 * sz, n + 1)
        gx, gz = np.meshgrid(xs, zs, indexing="ij")
        v = np.stack([gx.ravel(), np.zeros(gx.size), gz.ravel()], axis=1)

        i, j = np.meshgrid(np.arange(n), np.arange(n), indexing="ij")
        a = (i * (n + 1) + j).ravel()
        b, c, d = a + (n + 1), a + (n + 2), a + 1
        f = np.concatenate([np.stack([a, d, c], 1), np.stack([a, c, b], 1)])
        mesh = MeshBuffer(positions=v, indices=f.reshape(-1), uv=v[:, [0, 2]])
        mesh.normals = np.tile(np.array([[0.0, 1.0, 0.0]], dtype=np.float32), (v.shape[0], 1))
        return mesh

    if key == "sphere":
        import trimesh

        radius = float(params.get("radius", 1.0))
        subdivisions = int(params.get("subdivisions", 3))
        return _tm_to_buffer(trimesh.creation.icosphere(subdivisions=subdivisions, radius=radius))

    raise ValueError(f"Unsupported primitive '{name}'. Supported: box/cube, grid, sphere.")
