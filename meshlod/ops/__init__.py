from .merge import merge, merge_all
from .features import compute_face_normals, compute_vertex_normals, with_vertex_normals
from .simplify import StepResult, SimplifyStep, QuadricStepSimplifier, as_step_result
from .decimate import (
    DecimationParameters,
    IterativeDecimator,
    decimate,
    iter_decimate,
)
from .normalize import (
    DEFAULT_ROTATION,
    center,
    normalize,
    rescale_to_height,
    rotate,
    rotation_matrix,
    scale,
)

__all__ = [
    "merge",
    "merge_all",
    "compute_face_normals",
    "compute_vertex_normals",
    "with_vertex_normals",
    "StepResult",
    "SimplifyStep",
    "QuadricStepSimplifier",
    "as_step_result",
    "DecimationParameters",
    "IterativeDecimator",
    "decimate",
    "iter_decimate",
    "DEFAULT_ROTATION",
    "center",
    "normalize",
    "rescale_to_height",
    "rotate",
    "rotation_matrix",
    "scale",
]
