import os

import numpy as np
import pytest

from meshlod.core.mesh import MeshBuffer
from meshlod.gen.primitives import build_primitive
from meshlod.ops.simplify import StepResult


@pytest.fixture(scope="session")
def rng_seed():
    return int(os.environ.get("MESHLOD_TEST_SEED", "1234"))


class TruncatingSimplifier:
    """
    Deterministic stand-in for a real simplifier.

    Drops the last `faces_to_remove` triangles and compacts unused vertices.
    Calls listed in `degenerate_calls` (1-based) report a degenerate step.
    """

    def __init__(self, degenerate_calls=()):
        self.degenerate_calls = set(degenerate_calls)
        self.calls = []

    def __call__(self, geometry, faces_to_remove):
        self.calls.append(int(faces_to_remove))
        if len(self.calls) in self.degenerate_calls:
            return StepResult.degenerate("injected")
        faces = geometry.faces[: geometry.n_faces - int(faces_to_remove)].astype(np.int64)
        used, inverse = np.unique(faces.reshape(-1), return_inverse=True)
        return StepResult.ok(
            MeshBuffer(
                positions=geometry.positions[used],
                normals=None if geometry.normals is None else geometry.normals[used],
                uv=None if geometry.uv is None else geometry.uv[used],
                indices=inverse.reshape(-1),
            )
        )


@pytest.fixture
def truncating_simplifier():
    return TruncatingSimplifier


@pytest.fixture
def unit_cube():
    return build_primitive("cube")


@pytest.fixture
def two_cubes():
    return build_primitive("cube"), build_primitive("cube", center=(3.0, 0.0, 0.0))


@pytest.fixture
def grid_mesh():
    # 20x20 cells -> 800 triangles
    return build_primitive("grid", n=20, size=(2.0, 3.0))
