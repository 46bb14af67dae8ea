from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, Iterable, Optional, Union

from meshlod.core.bounds import extent
from meshlod.core.errors import InvalidTargetError
from meshlod.core.mesh import MeshBuffer
from meshlod.ops.decimate import (
    DEFAULT_MAX_DEGENERATE_STEPS,
    DEFAULT_MAX_FACES_PER_STEP,
    DecimationParameters,
    IterativeDecimator,
)
from meshlod.ops.features import with_vertex_normals
from meshlod.ops.merge import merge_all
from meshlod.ops.normalize import center, normalize, rescale_to_height
from meshlod.ops.simplify import SimplifyStep

logger = logging.getLogger(__name__)

MeshInput = Union[MeshBuffer, Iterable[MeshBuffer]]


@dataclass
class LODOptions:
    """
    Options for building a simplified stand-in mesh.

    target_height:        resize the original to this height first (None keeps it)
    simplification_ratio: fraction of faces to remove, in [0,1]
    max_faces_per_step:   upper bound on faces removed per simplifier call
    max_degenerate_steps: consecutive degenerate steps tolerated
    rotation:             Euler (rx, ry, rz) radians or matrix; None = 90 deg about X
    recompute_normals:    rebuild vertex normals before decimation
    restore_position:     put the result's bottom on y=0
    """
    target_height: Optional[float] = None
    simplification_ratio: float = 0.5
    max_faces_per_step: int = DEFAULT_MAX_FACES_PER_STEP
    max_degenerate_steps: int = DEFAULT_MAX_DEGENERATE_STEPS
    rotation: Any = None
    recompute_normals: bool = True
    restore_position: bool = True


@dataclass
class LODResult:
    """
    Both meshes of one run, so a caller can show either.

    original_mesh:   merged input, resized when target_height was given
    simplified_mesh: decimated, rotated and height-normalized copy
    """
    original_mesh: MeshBuffer
    simplified_mesh: MeshBuffer
    baseline_height: float
    decimated_faces: int
    meta: Dict[str, Any] = field(default_factory=dict)

    def summary(self) -> Dict[str, Any]:
        return {
            "original_faces": self.original_mesh.n_faces,
            "original_vertices": self.original_mesh.n_vertices,
            "simplified_faces": self.simplified_mesh.n_faces,
            "simplified_vertices": self.simplified_mesh.n_vertices,
            "decimated_faces": self.decimated_faces,
            "baseline_height": self.baseline_height,
            "simplified_height": extent(self.simplified_mesh).height,
        }


def _as_single_buffer(meshes: MeshInput) -> MeshBuffer:
    if isinstance(meshes, MeshBuffer):
        return meshes.copy()
    return merge_all(meshes)


def process(
    meshes: MeshInput,
    target_height: Optional[float] = None,
    simplification_ratio: Optional[float] = None,
    max_faces_per_step: Optional[int] = None,
    rotation: Any = None,
    *,
    options: Optional[LODOptions] = None,
    simplifier: Optional[SimplifyStep] = None,
    step_callback: Optional[Callable[[MeshBuffer], None]] = None,
    **overrides: Any,
) -> LODResult:
    """
    Merge, decimate and height-normalize a mesh (or a set of sub-meshes).

    Explicit arguments that are not None, and any keyword overrides, are
    applied on top of `options`, e.g.
    `process(parts, 1.5, 0.9)` or `process(parts, simplification_ratio=0.9)`.
    A ratio of 1.0 empties the mesh and ends in ZeroExtentError.

    Steps:
      1) merge sub-meshes into one buffer
      2) measure the baseline height (after the optional resize)
      3) center the geometry and rebuild normals
      4) remove floor(n_faces * ratio) faces in bounded steps
      5) rotate, rescale to the baseline height, place on y=0

    Inputs are never modified.
    """
    explicit = dict(
        target_height=target_height,
        simplification_ratio=simplification_ratio,
        max_faces_per_step=max_faces_per_step,
        rotation=rotation,
    )
    overrides.update({k: v for k, v in explicit.items() if v is not None})
    opts = replace(options or LODOptions(), **overrides)

    ratio = float(opts.simplification_ratio)
    if not 0.0 <= ratio <= 1.0:
        raise InvalidTargetError(f"simplification_ratio must be in [0,1], got {ratio}")

    original = _as_single_buffer(meshes)
    if opts.target_height is not None:
        original = rescale_to_height(original, opts.target_height)
    baseline_height = extent(original).height
    logger.info("baseline height %.6g (%d faces, %d vertices)", baseline_height, original.n_faces, original.n_vertices)

    working = center(original)
    if opts.recompute_normals:
        working = with_vertex_normals(working)

    if simplifier is None:
        from meshlod.ops.simplify import QuadricStepSimplifier
        simplifier = QuadricStepSimplifier(recompute_normals=opts.recompute_normals)

    count = int(math.floor(working.n_faces * ratio))
    logger.info("removing %d of %d faces", count, working.n_faces)
    decimator = IterativeDecimator(
        simplifier,
        DecimationParameters(opts.max_faces_per_step, opts.max_degenerate_steps),
    )
    decimated = decimator.run(working, count, step_callback)

    simplified = normalize(
        decimated,
        baseline_height,
        opts.rotation,
        restore_position=opts.restore_position,
    )
    logger.info(
        "simplified %d -> %d faces, height %.6g",
        original.n_faces, simplified.n_faces, extent(simplified).height,
    )
    return LODResult(
        original_mesh=original,
        simplified_mesh=simplified,
        baseline_height=baseline_height,
        decimated_faces=original.n_faces - simplified.n_faces,
        meta={"simplification_ratio": ratio, "max_faces_per_step": opts.max_faces_per_step},
    )
