"""Port for the off-screen surface decoded pictures are drawn onto and encoded from."""
from __future__ import annotations
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class RenderSurfacePort(Protocol):
    width: int
    height: int

    def draw(self, picture: Any) -> None: ...
    def encode_jpeg(self, quality: float) -> bytes: ...
    def release(self) -> None: ...


@runtime_checkable
class FrameRendererPort(Protocol):
    def create_surface(self, width: int, height: int) -> RenderSurfacePort: ...
