from __future__ import annotations


class MeshLODError(Exception):
    """Base class for failures raised by the LOD pipeline."""


class AttributeMismatchError(MeshLODError, ValueError):
    """A merge input lacks a required attribute or its arity differs."""

    def __init__(self, attribute: str, message: str):
        super().__init__(f"{attribute}: {message}")
        self.attribute = attribute


class InvalidTargetError(MeshLODError, ValueError):
    """Requested reduction would leave a negative face count."""


class SimplificationStalledError(MeshLODError, RuntimeError):
    """Too many consecutive degenerate results from the single-step simplifier."""

    def __init__(self, attempts: int, remaining: int):
        super().__init__(
            f"simplifier stalled after {attempts} consecutive degenerate steps "
            f"({remaining} faces still to remove)"
        )
        self.attempts = attempts
        self.remaining = remaining


class ZeroExtentError(MeshLODError, ValueError):
    """Mesh height is zero (or not finite), so it cannot be rescaled."""
