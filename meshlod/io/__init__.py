from .trimesh_bridge import buffers_from_scene, from_trimesh, load_mesh_buffers, to_trimesh

__all__ = [
    "from_trimesh",
    "to_trimesh",
    "buffers_from_scene",
    "load_mesh_buffers",
]
