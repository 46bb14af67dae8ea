import numpy as np
import pytest

from meshlod.core.errors import AttributeMismatchError
from meshlod.core.mesh import MeshBuffer
from meshlod.gen.primitives import build_primitive
from meshlod.ops.merge import merge, merge_all


def test_merge_sizes_and_rebased_indices(two_cubes):
    a, b = two_cubes
    m = merge(a, b)

    assert m.n_vertices == a.n_vertices + b.n_vertices == 16
    assert m.n_faces == 24

    tail = m.faces[a.n_faces:]
    np.testing.assert_array_equal(m.positions[tail], b.positions[b.faces])
    np.testing.assert_array_equal(m.uv[tail], b.uv[b.faces])
    np.testing.assert_array_equal(m.normals[tail], b.normals[b.faces])
    np.testing.assert_array_equal(m.faces[: a.n_faces], a.faces)


def test_merge_leaves_inputs_untouched(two_cubes):
    a, b = two_cubes
    a0, b0 = a.copy(), b.copy()
    merge(a, b)
    np.testing.assert_array_equal(a.indices, a0.indices)
    np.testing.assert_array_equal(b.indices, b0.indices)
    np.testing.assert_array_equal(b.positions, b0.positions)


def _triangle_soup(n_faces):
    n = 3 * n_faces
    return MeshBuffer(
        positions=np.zeros((n, 3)),
        normals=np.zeros((n, 3)),
        uv=np.zeros((n, 2)),
        indices=np.arange(n),
    )


def test_merge_widens_index_type_past_16_bit():
    small = merge(_triangle_soup(10), _triangle_soup(10))
    assert small.indices.dtype == np.uint16

    # 3 * 10923 = 32769 indices each -> 65538 combined
    big = merge(_triangle_soup(10923), _triangle_soup(10923))
    assert big.indices.dtype == np.uint32
    assert int(big.indices.max()) == 65537


def test_merge_requires_uv(unit_cube):
    no_uv = MeshBuffer(positions=unit_cube.positions, normals=unit_cube.normals, indices=unit_cube.indices)
    with pytest.raises(AttributeMismatchError) as exc:
        merge(unit_cube, no_uv)
    assert exc.value.attribute == "uv"


def test_merge_rejects_arity_mismatch(unit_cube):
    odd = unit_cube.copy()
    odd.uv = np.zeros((odd.n_vertices, 3), dtype=np.float32)
    with pytest.raises(AttributeMismatchError):
        merge(odd, unit_cube)


def test_merge_all():
    parts = [build_primitive("cube", center=(float(i), 0.0, 0.0)) for i in range(3)]
    m = merge_all(parts)
    assert m.n_vertices == 24
    assert m.n_faces == 36

    single = merge_all(parts[:1])
    assert single is not parts[0]
    np.testing.assert_array_equal(single.indices, parts[0].indices)

    with pytest.raises(ValueError):
        merge_all([])
