import pytest

pytest.importorskip("fast_simplification")
pytest.importorskip("scipy")
pytest.importorskip("trimesh")

from meshlod import process
from meshlod.core.bounds import extent
from meshlod.gen.primitives import build_primitive
from meshlod.ops.decimate import decimate
from meshlod.ops.simplify import QuadricStepSimplifier


@pytest.fixture(scope="module")
def sphere():
    return build_primitive("sphere", radius=1.0, subdivisions=3)  # 1280 faces


def test_single_step_removes_faces_and_keeps_attributes(sphere):
    res = QuadricStepSimplifier()(sphere, 200)
    assert not res.is_degenerate
    g = res.geometry
    assert g.n_faces < sphere.n_faces
    assert g.uv.shape == (g.n_vertices, 2)
    assert g.normals.shape == (g.n_vertices, 3)


def test_removing_everything_yields_empty_mesh(sphere):
    res = QuadricStepSimplifier()(sphere, sphere.n_faces)
    assert not res.is_degenerate
    assert res.geometry.n_faces == 0
    assert res.geometry.uv.shape == (0, 2)


def test_iterative_decimation_reduces_sphere(sphere):
    out = decimate(sphere, 640, max_faces_per_step=200, max_degenerate_steps=3)
    assert out.n_faces <= sphere.n_faces - 640


def test_process_preserves_height(sphere):
    res = process(sphere, simplification_ratio=0.5, max_faces_per_step=300)
    assert extent(res.simplified_mesh).height == pytest.approx(extent(sphere).height, abs=1e-4)
    assert res.simplified_mesh.n_faces < sphere.n_faces
