from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Tuple

import numpy as np

UINT16_LIMIT = 65535


def index_dtype_for(count: int, max_value: int) -> np.dtype:
    """Smallest unsigned index type able to hold `count` indices up to `max_value`."""
    if count > UINT16_LIMIT or max_value > UINT16_LIMIT:
        return np.dtype(np.uint32)
    return np.dtype(np.uint16)


def _as_attribute(values: Any, name: str) -> Optional[np.ndarray]:
    if values is None:
        return None
    arr = np.ascontiguousarray(values, dtype=np.float32)
    if arr.ndim != 2:
        raise ValueError(f"Attribute '{name}' must be a 2-D array, got shape {arr.shape}")
    return arr


@dataclass
class MeshBuffer:
    """
    Flat-array triangle mesh as handed around by the LOD pipeline.

    positions: (N,3) float32
    normals:   (N,3) float32, optional (may be recomputed)
    uv:        (N,2) float32, optional
    indices:   (3M,) uint16 or uint32, three per triangle

    The index width is derived from the data on every construction, see
    `index_dtype_for`.
    """
    positions: np.ndarray
    indices: np.ndarray
    normals: Optional[np.ndarray] = None
    uv: Optional[np.ndarray] = None

    def __post_init__(self):
        self.positions = _as_attribute(self.positions, "position")
        if self.positions.shape[1] != 3:
            raise ValueError(f"positions must be (N,3), got {self.positions.shape}")
        self.normals = _as_attribute(self.normals, "normal")
        self.uv = _as_attribute(self.uv, "uv")

        n = self.positions.shape[0]
        for name, arr in (("normal", self.normals), ("uv", self.uv)):
            if arr is not None and arr.shape[0] != n:
                raise ValueError(f"Attribute '{name}' has {arr.shape[0]} rows, expected {n}")

        idx = np.asarray(self.indices).reshape(-1)
        if idx.size % 3 != 0:
            raise ValueError(f"Index count must be a multiple of 3, got {idx.size}")
        if idx.size:
            if not np.issubdtype(idx.dtype, np.integer):
                raise TypeError(f"indices must be integers, got {idx.dtype}")
            lo, hi = int(idx.min()), int(idx.max())
            if lo < 0 or hi >= n:
                raise ValueError(f"Index out of range [0,{n}): min={lo} max={hi}")
        else:
            hi = 0
        self.indices = np.ascontiguousarray(idx, dtype=index_dtype_for(idx.size, hi))

    @classmethod
    def from_attributes(
        cls,
        attributes: Mapping[str, Any],
        indices: Optional[Any] = None,
    ) -> "MeshBuffer":
        """
        Build from the loader's attribute mapping.

        attributes: {"position": flat xyz..., "normal": flat xyz..., "uv": flat uv...}
        indices:    flat triangle indices; None means a non-indexed buffer
                    (every three consecutive vertices form a triangle).
        """
        if "position" not in attributes:
            raise ValueError("Attribute mapping must contain 'position'.")
        pos = np.asarray(attributes["position"], dtype=np.float32).reshape(-1, 3)
        normals = attributes.get("normal")
        uv = attributes.get("uv")
        if normals is not None:
            normals = np.asarray(normals, dtype=np.float32).reshape(-1, 3)
        if uv is not None:
            uv = np.asarray(uv, dtype=np.float32).reshape(-1, 2)
        if indices is None:
            indices = np.arange(pos.shape[0], dtype=np.int64)
        return cls(positions=pos, indices=np.asarray(indices), normals=normals, uv=uv)

    @property
    def n_vertices(self) -> int:
        return int(self.positions.shape[0])

    @property
    def n_faces(self) -> int:
        return int(self.indices.shape[0] // 3)

    @property
    def faces(self) -> np.ndarray:
        return self.indices.reshape(-1, 3)

    @property
    def index_width(self) -> int:
        return 8 * self.indices.dtype.itemsize

    def attributes(self) -> Dict[str, np.ndarray]:
        out = {"position": self.positions}
        if self.normals is not None:
            out["normal"] = self.normals
        if self.uv is not None:
            out["uv"] = self.uv
        return out

    def bounds(self) -> Tuple[np.ndarray, np.ndarray]:
        return self.positions.min(axis=0), self.positions.max(axis=0)

    def apply_transform(self, matrix: np.ndarray) -> None:
        """
        Apply 4x4 homogeneous transform in-place.

        Normals follow the inverse-transpose of the linear part and are
        renormalized.
        """
        matrix = np.asarray(matrix, dtype=np.float64)
        if matrix.shape != (4, 4):
            raise ValueError("Transform matrix must be 4x4")
        v = np.ones((self.positions.shape[0], 4), dtype=np.float64)
        v[:, :3] = self.positions
        vt = (matrix @ v.T).T
        self.positions = np.ascontiguousarray(vt[:, :3], dtype=np.float32)

        if self.normals is not None:
            lin = matrix[:3, :3]
            try:
                nmat = np.linalg.inv(lin).T
            except np.linalg.LinAlgError:
                nmat = lin
            n = self.normals.astype(np.float64) @ nmat.T
            length = np.linalg.norm(n, axis=1, keepdims=True)
            n = np.divide(n, length, out=np.zeros_like(n), where=length > 0)
            self.normals = np.ascontiguousarray(n, dtype=np.float32)

    def copy(self) -> "MeshBuffer":
        return MeshBuffer(
            positions=self.positions.copy(),
            indices=self.indices.copy(),
            normals=None if self.normals is None else self.normals.copy(),
            uv=None if self.uv is None else self.uv.copy(),
        )
