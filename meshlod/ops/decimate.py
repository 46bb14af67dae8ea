from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Iterator, Optional, Tuple

from meshlod.core.errors import InvalidTargetError, SimplificationStalledError
from meshlod.core.mesh import MeshBuffer
from meshlod.ops.simplify import SimplifyStep, StepResult, as_step_result

logger = logging.getLogger(__name__)

DEFAULT_MAX_FACES_PER_STEP = 2500
DEFAULT_MAX_DEGENERATE_STEPS = 8


@dataclass
class DecimationParameters:
    """
    Bounds for one decimation run.

    max_faces_per_step:   largest request made to the simplifier in one call
    max_degenerate_steps: consecutive degenerate results tolerated before
                          SimplificationStalledError
    """
    max_faces_per_step: int = DEFAULT_MAX_FACES_PER_STEP
    max_degenerate_steps: int = DEFAULT_MAX_DEGENERATE_STEPS

    def __post_init__(self):
        if int(self.max_faces_per_step) < 1:
            raise ValueError("max_faces_per_step must be >= 1")
        if int(self.max_degenerate_steps) < 0:
            raise ValueError("max_degenerate_steps must be >= 0")
        self.max_faces_per_step = int(self.max_faces_per_step)
        self.max_degenerate_steps = int(self.max_degenerate_steps)


def _progress(total: int, remaining: int) -> int:
    if total <= 0:
        return 100
    done = min(max(total - remaining, 0), total)
    return (100 * done) // total


class IterativeDecimator:
    """
    Drive a single-step simplifier in bounded increments.

    Each call asks the simplifier for at most `max_faces_per_step` faces; the
    last call asks for exactly the remaining shortfall, so the run lands on
    the target face count instead of a multiple of the step size.

    A degenerate step (see `StepResult`) is discarded and retried on the
    previous geometry. `progress`, `in_progress` and `target_face_count`
    can be read from another thread while `run` is executing.
    """

    def __init__(self, simplifier: SimplifyStep, params: Optional[DecimationParameters] = None):
        self.simplifier = simplifier
        self.params = params or DecimationParameters()
        self.progress = 0
        self.in_progress = False
        self.target_face_count: Optional[int] = None

    def steps(self, geometry: MeshBuffer, decimation_face_count: int) -> Iterator[Tuple[MeshBuffer, int]]:
        """
        Yield `(geometry, progress)` after every successful step.

        Arguments are validated before the first step is requested. The input
        buffer is never modified.
        """
        decimation_face_count = int(decimation_face_count)
        start = geometry.n_faces
        target = start - decimation_face_count
        if decimation_face_count < 0:
            raise InvalidTargetError(f"decimation_face_count must be >= 0, got {decimation_face_count}")
        if target < 0:
            raise InvalidTargetError(
                f"cannot remove {decimation_face_count} faces from a mesh with {start} faces"
            )
        self.target_face_count = target
        logger.debug("decimating %d -> %d faces (step <= %d)", start, target, self.params.max_faces_per_step)
        return self._loop(geometry, target, decimation_face_count)

    def _loop(self, geometry: MeshBuffer, target: int, total: int) -> Iterator[Tuple[MeshBuffer, int]]:
        step = self.params.max_faces_per_step
        current = geometry
        remaining = current.n_faces - target
        degenerate_run = 0

        self.progress = 0
        self.in_progress = True
        try:
            while remaining > 0:
                request = min(step, remaining)
                result = as_step_result(self.simplifier(current, request))

                if not result.is_degenerate and result.geometry.n_faces >= current.n_faces:
                    result = StepResult.degenerate("step removed no faces")

                if result.is_degenerate:
                    degenerate_run += 1
                    logger.warning(
                        "skipping degenerate simplification step (%s); %d faces remaining, attempt %d/%d",
                        result.reason, remaining, degenerate_run, self.params.max_degenerate_steps,
                    )
                    if degenerate_run > self.params.max_degenerate_steps:
                        raise SimplificationStalledError(degenerate_run, remaining)
                    continue

                degenerate_run = 0
                current = result.geometry
                remaining = current.n_faces - target
                self.progress = max(self.progress, _progress(total, remaining))
                logger.debug("step removed up to %d faces: %d faces left, %d%%", request, current.n_faces, self.progress)
                yield current, self.progress

            self.progress = 100
        finally:
            self.in_progress = False

    def run(
        self,
        geometry: MeshBuffer,
        decimation_face_count: int,
        step_callback: Optional[Callable[[MeshBuffer], None]] = None,
    ) -> MeshBuffer:
        current = None
        for current, _ in self.steps(geometry, decimation_face_count):
            if step_callback is not None:
                step_callback(current)
        return geometry.copy() if current is None else current


def iter_decimate(
    geometry: MeshBuffer,
    decimation_face_count: int,
    simplifier: SimplifyStep,
    *,
    max_faces_per_step: int = DEFAULT_MAX_FACES_PER_STEP,
    max_degenerate_steps: int = DEFAULT_MAX_DEGENERATE_STEPS,
) -> Iterator[Tuple[MeshBuffer, int]]:
    """Generator form of `decimate`, for running the loop from a worker."""
    params = DecimationParameters(max_faces_per_step, max_degenerate_steps)
    return IterativeDecimator(simplifier, params).steps(geometry, decimation_face_count)


def decimate(
    geometry: MeshBuffer,
    decimation_face_count: int,
    step_callback: Optional[Callable[[MeshBuffer], None]] = None,
    *,
    simplifier: Optional[SimplifyStep] = None,
    max_faces_per_step: int = DEFAULT_MAX_FACES_PER_STEP,
    max_degenerate_steps: int = DEFAULT_MAX_DEGENERATE_STEPS,
) -> MeshBuffer:
    """
    Remove `decimation_face_count` triangles from `geometry`.

    Returns a new buffer with exactly `n_faces - decimation_face_count`
    faces unless the simplifier overshoots. `step_callback` receives each
    intermediate geometry; raising from it aborts the run.

    Raises:
      InvalidTargetError          count is negative or larger than n_faces
      SimplificationStalledError  too many consecutive degenerate steps
    """
    if simplifier is None:
        from meshlod.ops.simplify import QuadricStepSimplifier
        simplifier = QuadricStepSimplifier()
    params = DecimationParameters(max_faces_per_step, max_degenerate_steps)
    return IterativeDecimator(simplifier, params).run(geometry, decimation_face_count, step_callback)
