"""Engine exception types.

Only conditions the caller must act on are exceptions. The region capacity
cutoff and degenerate geometry are reported through data, not raised.
"""

from __future__ import annotations


class CueError(Exception):
    """Base class for engine errors."""


class CompositorNotInitializedError(CueError):
    """The compositor was invoked before ``init()``."""

    def __init__(self) -> None:
        super().__init__("GlassCompositor not initialized. Call init() first.")


class SurfaceAllocationError(CueError):
    """A render surface or output buffer of the requested size could not be allocated."""

    def __init__(self, width: int, height: int, reason: str = "") -> None:
        self.width = width
        self.height = height
        msg = f"Failed to allocate {width}x{height} render surface"
        if reason:
            msg = f"{msg}: {reason}"
        super().__init__(msg)


class ExportCancelledError(CueError):
    """A tiled export was aborted; partial output has been discarded."""
