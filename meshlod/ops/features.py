from __future__ import annotations

import numpy as np

from meshlod.core.mesh import MeshBuffer


def compute_face_normals(mesh: MeshBuffer) -> np.ndarray:
    """Unit face normals (M,3); degenerate faces get a zero normal."""
    v = mesh.positions.astype(np.float64)
    f = mesh.faces.astype(np.int64)
    n = np.cross(v[f[:, 1]] - v[f[:, 0]], v[f[:, 2]] - v[f[:, 0]])
    length = np.linalg.norm(n, axis=1, keepdims=True)
    return np.divide(n, length, out=np.zeros_like(n), where=length > 0)


def compute_vertex_normals(mesh: MeshBuffer) -> np.ndarray:
    """
    Area-weighted vertex normals (N,3).

    Accumulates unnormalized face normals onto their corners, so larger
    triangles weigh more. Vertices without faces get a zero normal.
    """
    v = mesh.positions.astype(np.float64)
    f = mesh.faces.astype(np.int64)
    fn = np.cross(v[f[:, 1]] - v[f[:, 0]], v[f[:, 2]] - v[f[:, 0]])

    acc = np.zeros_like(v)
    for k in range(3):
        np.add.at(acc, f[:, k], fn)
    length = np.linalg.norm(acc, axis=1, keepdims=True)
    return np.divide(acc, length, out=np.zeros_like(acc), where=length > 0)


def with_vertex_normals(mesh: MeshBuffer) -> MeshBuffer:
    out = mesh.copy()
    out.normals = compute_vertex_normals(mesh).astype(np.float32)
    return out
