import numpy as np
import pytest

trimesh = pytest.importorskip("trimesh")

from meshlod.io.trimesh_bridge import buffers_from_scene, from_trimesh, load_mesh_buffers, to_trimesh


def test_roundtrip_box():
    tm = trimesh.creation.box(extents=(1.0, 2.0, 3.0))
    buf = from_trimesh(tm)
    assert buf.n_vertices == len(tm.vertices)
    assert buf.n_faces == len(tm.faces)
    assert buf.uv is None

    back = to_trimesh(buf)
    np.testing.assert_allclose(back.bounds, tm.bounds, atol=1e-6)
    assert len(back.faces) == len(tm.faces)


def test_scene_is_flattened_with_transforms():
    scene = trimesh.Scene()
    scene.add_geometry(trimesh.creation.box(extents=(1, 1, 1)), node_name="a")
    scene.add_geometry(
        trimesh.creation.box(extents=(1, 1, 1)),
        node_name="b",
        transform=trimesh.transformations.translation_matrix([5.0, 0.0, 0.0]),
    )
    parts = buffers_from_scene(scene)
    assert len(parts) == 2
    xs = sorted(float(p.positions[:, 0].mean()) for p in parts)
    assert xs == pytest.approx([0.0, 5.0], abs=1e-6)


def test_load_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_mesh_buffers(tmp_path / "missing.glb")


def test_load_stl(tmp_path):
    path = tmp_path / "box.stl"
    trimesh.creation.box(extents=(1, 1, 1)).export(path)
    parts = load_mesh_buffers(path)
    assert len(parts) == 1
    assert parts[0].n_faces == 12
