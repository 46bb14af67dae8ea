from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Union

import numpy as np

from meshlod.core.mesh import MeshBuffer
from meshlod.ops.features import compute_vertex_normals

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StepResult:
    """
    Outcome of one single-step simplification.

    Either `geometry` holds the reduced buffer, or the step was degenerate
    (the simplifier found nothing valid to collapse) and `reason` says why.
    """
    geometry: Optional[MeshBuffer] = None
    reason: Optional[str] = None

    @property
    def is_degenerate(self) -> bool:
        return self.geometry is None

    @classmethod
    def ok(cls, geometry: MeshBuffer) -> "StepResult":
        return cls(geometry=geometry)

    @classmethod
    def degenerate(cls, reason: str) -> "StepResult":
        return cls(geometry=None, reason=reason)


# simplify_step(geometry, faces_to_remove) -> StepResult | MeshBuffer
SimplifyStep = Callable[[MeshBuffer, int], Union[StepResult, MeshBuffer]]


def as_step_result(value: Union[StepResult, MeshBuffer, None]) -> StepResult:
    """
    Normalize whatever a simplifier returned.

    None and non-finite positions count as degenerate. An empty buffer is a
    valid result; the decimator rejects steps that remove nothing.
    """
    if isinstance(value, StepResult):
        return value
    if value is None:
        return StepResult.degenerate("simplifier returned no geometry")
    if not isinstance(value, MeshBuffer):
        raise TypeError(f"Simplifier must return StepResult or MeshBuffer, got {type(value).__name__}")
    if not np.isfinite(value.positions).all():
        return StepResult.degenerate("simplifier returned non-finite positions")
    return StepResult.ok(value)


def _carry_attributes(source: MeshBuffer, positions: np.ndarray) -> dict:
    """
    Copy UV/normals of the nearest source vertex onto each surviving vertex.

    Collapses move vertices, so an exact match is not guaranteed.
    """
    from scipy.spatial import cKDTree

    out = {}
    if source.uv is None and source.normals is None:
        return out
    _, nearest = cKDTree(source.positions).query(positions, k=1)
    if source.uv is not None:
        out["uv"] = source.uv[nearest]
    if source.normals is not None:
        out["normals"] = source.normals[nearest]
    return out


class QuadricStepSimplifier:
    """
    Default single-step simplifier backed by `fast_simplification`.

    Each call removes up to `faces_to_remove` triangles with quadric edge
    collapses. UVs follow the nearest original vertex; normals are either
    carried the same way or recomputed (`recompute_normals=True`).
    """

    def __init__(self, aggression: int = 7, recompute_normals: bool = True):
        self.aggression = int(aggression)
        self.recompute_normals = bool(recompute_normals)

    def __call__(self, geometry: MeshBuffer, faces_to_remove: int) -> StepResult:
        import fast_simplification

        if faces_to_remove <= 0:
            return StepResult.ok(geometry.copy())

        target = geometry.n_faces - int(faces_to_remove)
        if target <= 0:
            empty = np.zeros((0, 3), dtype=np.float32)
            return StepResult.ok(MeshBuffer(
                positions=empty,
                indices=np.zeros(0, dtype=np.int64),
                normals=None if geometry.normals is None else empty,
                uv=None if geometry.uv is None else np.zeros((0, 2), dtype=np.float32),
            ))

        points, faces = fast_simplification.simplify(
            geometry.positions.astype(np.float32),
            geometry.faces.astype(np.int64),
            target_count=target,
            agg=self.aggression,
        )
        points = np.asarray(points, dtype=np.float32).reshape(-1, 3)
        faces = np.asarray(faces, dtype=np.int64).reshape(-1, 3)
        if faces.shape[0] == 0 or not np.isfinite(points).all():
            return StepResult.degenerate("no valid collapse found")
        if faces.shape[0] >= geometry.n_faces:
            return StepResult.degenerate("no face could be collapsed")

        out = MeshBuffer(positions=points, indices=faces.reshape(-1), **_carry_attributes(geometry, points))
        if self.recompute_normals:
            out.normals = compute_vertex_normals(out).astype(np.float32)
        logger.debug("quadric step: %d -> %d faces", geometry.n_faces, out.n_faces)
        return StepResult.ok(out)
