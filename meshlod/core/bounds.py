from __future__ import annotations

from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class BoundingExtent:
    """
    Axis-aligned min/max over the vertex positions of a mesh.

    Captured once, never updated: call `extent()` again after any step that
    changes the geometry.
    """
    min: np.ndarray
    max: np.ndarray

    @property
    def size(self) -> np.ndarray:
        return self.max - self.min

    @property
    def center(self) -> np.ndarray:
        return 0.5 * (self.min + self.max)

    @property
    def height(self) -> float:
        return float(self.max[1] - self.min[1])


def extent(mesh) -> BoundingExtent:
    """Compute the extent of `mesh` (anything exposing `positions` or `vertices`)."""
    pts = getattr(mesh, "positions", None)
    if pts is None:
        pts = mesh.vertices
    pts = np.asarray(pts, dtype=np.float64)
    if pts.shape[0] == 0:
        raise ValueError("Cannot compute the extent of a mesh without vertices.")
    return BoundingExtent(min=pts.min(axis=0), max=pts.max(axis=0))
