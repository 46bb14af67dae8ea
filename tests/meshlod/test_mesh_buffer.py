import numpy as np
import pytest

from meshlod.core.bounds import extent
from meshlod.core.mesh import MeshBuffer, index_dtype_for


def test_from_attributes_flat_arrays():
    m = MeshBuffer.from_attributes(
        {
            "position": [0, 0, 0, 1, 0, 0, 0, 1, 0],
            "normal": [0, 0, 1] * 3,
            "uv": [0, 0, 1, 0, 0, 1],
        },
        indices=[0, 1, 2],
    )
    assert m.n_vertices == 3
    assert m.n_faces == 1
    assert m.uv.shape == (3, 2)
    assert m.index_width == 16


def test_from_attributes_non_indexed_generates_sequential_indices():
    m = MeshBuffer.from_attributes({"position": np.zeros(18)})
    assert m.n_faces == 2
    assert m.indices.tolist() == list(range(6))


def test_index_width_rule():
    assert index_dtype_for(65535, 100) == np.uint16
    assert index_dtype_for(65536, 100) == np.uint32
    assert index_dtype_for(3, 70000) == np.uint32


@pytest.mark.parametrize(
    "kwargs",
    [
        dict(positions=np.zeros((3, 2)), indices=[0, 1, 2]),
        dict(positions=np.zeros((3, 3)), indices=[0, 1]),
        dict(positions=np.zeros((3, 3)), indices=[0, 1, 3]),
        dict(positions=np.zeros((3, 3)), indices=[0, 1, 2], uv=np.zeros((2, 2))),
    ],
)
def test_invalid_buffers_rejected(kwargs):
    with pytest.raises(ValueError):
        MeshBuffer(**kwargs)


def test_apply_transform_rotates_normals(unit_cube):
    m = unit_cube.copy()
    rot = np.eye(4)
    rot[:3, :3] = [[0, -1, 0], [1, 0, 0], [0, 0, 1]]
    m.apply_transform(rot)
    np.testing.assert_allclose(m.normals, unit_cube.normals @ rot[:3, :3].T, atol=1e-6)
    np.testing.assert_allclose(np.linalg.norm(m.normals, axis=1), 1.0, atol=1e-6)


def test_extent_is_recomputed(unit_cube):
    e = extent(unit_cube)
    assert e.height == pytest.approx(1.0)
    np.testing.assert_allclose(e.center, 0.0, atol=1e-7)

    m = unit_cube.copy()
    m.positions = m.positions * 2.0
    assert extent(m).height == pytest.approx(2.0)
    assert e.height == pytest.approx(1.0)
