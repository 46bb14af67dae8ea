from __future__ import annotations

import logging
from typing import Any, Optional

import numpy as np

from meshlod.core.bounds import extent
from meshlod.core.errors import ZeroExtentError
from meshlod.core.mesh import MeshBuffer

logger = logging.getLogger(__name__)

# Source assets are stored rotated relative to the target scene: 90 deg about X.
DEFAULT_ROTATION = (np.pi / 2, 0.0, 0.0)

_EPS = 1e-12


def _rotation_matrix_xyz(rx, ry, rz):
    cx, sx = np.cos(rx), np.sin(rx)
    cy, sy = np.cos(ry), np.sin(ry)
    cz, sz = np.cos(rz), np.sin(rz)

    Rx = np.array([[1,0,0,0],[0,cx,-sx,0],[0,sx,cx,0],[0,0,0,1]])
    Ry = np.array([[cy,0,sy,0],[0,1,0,0],[-sy,0,cy,0],[0,0,0,1]])
    Rz = np.array([[cz,-sz,0,0],[sz,cz,0,0],[0,0,1,0],[0,0,0,1]])
    return Rx @ Ry @ Rz


def rotation_matrix(rotation: Any = None) -> np.ndarray:
    """
    4x4 rotation from Euler angles (rx, ry, rz) in radians, or from a
    3x3 / 4x4 matrix. None gives the default 90 deg about X.

    Euler angles use intrinsic XYZ order, R = Rx @ Ry @ Rz (the three.js
    default), so z is applied to the vertex first.
    """
    if rotation is None:
        rotation = DEFAULT_ROTATION
    r = np.asarray(rotation, dtype=np.float64)
    if r.shape == (3,):
        return _rotation_matrix_xyz(*r)
    if r.shape == (3, 3):
        m = np.eye(4)
        m[:3, :3] = r
        return m
    if r.shape == (4, 4):
        return r
    raise ValueError(f"rotation must be Euler (3,), a 3x3 or a 4x4 matrix, got shape {r.shape}")


def _translation(t) -> np.ndarray:
    m = np.eye(4)
    m[:3, 3] = t
    return m


def _checked_height(mesh: MeshBuffer) -> float:
    if mesh.n_vertices == 0:
        raise ZeroExtentError("mesh has no vertices; cannot rescale")
    h = extent(mesh).height
    if not np.isfinite(h) or h <= _EPS:
        raise ZeroExtentError(f"mesh height is {h!r}; cannot rescale")
    return h


def center(mesh: MeshBuffer) -> MeshBuffer:
    """Copy of `mesh` translated so its bounding-box center is the origin."""
    out = mesh.copy()
    out.apply_transform(_translation(-extent(mesh).center))
    return out


def rotate(mesh: MeshBuffer, rotation: Any = None) -> MeshBuffer:
    out = mesh.copy()
    out.apply_transform(rotation_matrix(rotation))
    return out


def scale(mesh: MeshBuffer, factor: float) -> MeshBuffer:
    out = mesh.copy()
    out.apply_transform(np.diag([factor, factor, factor, 1.0]))
    return out


def rescale_to_height(mesh: MeshBuffer, height: float) -> MeshBuffer:
    """Uniformly scale `mesh` so its Y extent equals `height`."""
    return scale(mesh, float(height) / _checked_height(mesh))


def normalize(
    mesh: MeshBuffer,
    baseline_height: float,
    rotation: Any = None,
    *,
    restore_position: bool = True,
) -> MeshBuffer:
    """
    Rotate, then rescale uniformly so the height matches `baseline_height`.

    The height is measured after the rotation. With `restore_position` the
    result is shifted vertically so its center sits at half the baseline
    height, which puts the bottom of the mesh on y=0.

    Raises ZeroExtentError when the rotated mesh has no height, or when
    `baseline_height` is not positive.
    """
    if not np.isfinite(baseline_height) or baseline_height <= _EPS:
        raise ZeroExtentError(f"baseline height is {baseline_height!r}; cannot rescale")
    out = rotate(mesh, rotation)
    post_height = _checked_height(out)
    factor = float(baseline_height) / post_height
    logger.debug("height %.6g -> %.6g (scale %.6g)", post_height, baseline_height, factor)
    out.apply_transform(np.diag([factor, factor, factor, 1.0]))

    if restore_position:
        cy = extent(out).center[1]
        out.apply_transform(_translation([0.0, 0.5 * float(baseline_height) - cy, 0.0]))
    return out
