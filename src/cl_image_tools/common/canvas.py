"""Scoped drawing surface backed by Pillow.

A Canvas owns one transparent RGBA buffer of ``size * scale`` pixels. Drawing
goes through an explicit current transform (user space -> device pixels) and an
optional clip mask, both saved / restored with ``save_state()``.

Always acquire a canvas through ``open_canvas`` (or ``draw_with_canvas``) so the
buffer is released on every exit path.
"""

import math
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, replace
from typing import Literal

import cv2
import numpy as np
from loguru import logger
from PIL import Image, ImageChops, ImageDraw
from pydantic import BaseModel, ConfigDict, Field

from .errors import SurfaceAllocationError
from .geometry import Affine, Path, Polyline
from .raster import RASTER_MODE, Raster
from .schemas import TRANSPARENT, Rect, Size, round_half_away

# Linear part sign pattern (a, b, c, d) -> Pillow transpose turning the source
# grid into the orientation it has on the device.
_TRANSPOSE_BY_SIGNS: dict[tuple[int, int, int, int], Image.Transpose | None] = {
    (1, 0, 0, 1): None,
    (-1, 0, 0, 1): Image.Transpose.FLIP_LEFT_RIGHT,
    (1, 0, 0, -1): Image.Transpose.FLIP_TOP_BOTTOM,
    (-1, 0, 0, -1): Image.Transpose.ROTATE_180,
    (0, 1, -1, 0): Image.Transpose.ROTATE_90,
    (0, -1, 1, 0): Image.Transpose.ROTATE_270,
    (0, 1, 1, 0): Image.Transpose.TRANSPOSE,
    (0, -1, -1, 0): Image.Transpose.TRANSVERSE,
}

_RESAMPLING: dict[str, Image.Resampling] = {
    "nearest": Image.Resampling.NEAREST,
    "bilinear": Image.Resampling.BILINEAR,
    "bicubic": Image.Resampling.BICUBIC,
    "lanczos": Image.Resampling.LANCZOS,
}


class CanvasConfig(BaseModel):
    """Rendering knobs shared by every operation."""

    model_config = ConfigDict(frozen=True)

    resample: Literal["nearest", "bilinear", "bicubic", "lanczos"] = Field(
        default="lanczos",
        description="Filter used when a raster is drawn at a different size",
    )
    curve_segments: int = Field(
        default=32,
        ge=1,
        le=1024,
        description="Line segments used to approximate each curve segment of a path",
    )
    supersample: int = Field(
        default=1,
        ge=1,
        le=8,
        description="Anti-aliasing factor for clip shapes and strokes (1 = hard edges)",
    )

    @property
    def resample_filter(self) -> Image.Resampling:
        return _RESAMPLING[self.resample]


DEFAULT_CANVAS_CONFIG = CanvasConfig()


@dataclass(frozen=True)
class _GraphicsState:
    transform: Affine
    clip: Image.Image | None = None


class Canvas:
    """Drawing surface of a fixed logical size and device scale."""

    def __init__(self, size: Size, scale: float = 1.0, config: CanvasConfig | None = None):
        self.config: CanvasConfig = config or DEFAULT_CANVAS_CONFIG

        if not size.is_valid or not np.isfinite(scale) or scale <= 0:
            raise SurfaceAllocationError(
                f"Cannot allocate canvas of {size.width}x{size.height} at scale {scale}"
            )

        width, height = size.scaled(scale).as_pixels()
        if width <= 0 or height <= 0:
            raise SurfaceAllocationError(f"Canvas would have no pixels: {width}x{height}")

        try:
            self._buffer: Image.Image | None = Image.new(RASTER_MODE, (width, height), TRANSPARENT)
        except (MemoryError, ValueError) as exc:
            raise SurfaceAllocationError(f"Cannot allocate {width}x{height} canvas: {exc}") from exc

        self._size: Size = size
        self._scale: float = scale
        self._state: _GraphicsState = _GraphicsState(transform=Affine.from_scale(scale, scale))
        self._saved: list[_GraphicsState] = []

    # ─────────────────────────────────────────────────────────────
    # Surface
    # ─────────────────────────────────────────────────────────────

    @property
    def size(self) -> Size:
        return self._size

    @property
    def device_scale(self) -> float:
        return self._scale

    @property
    def pixel_size(self) -> tuple[int, int]:
        return self._require_buffer().size

    @property
    def bounds(self) -> Rect:
        return Rect.from_size(self._size)

    @property
    def is_released(self) -> bool:
        return self._buffer is None

    def snapshot(self) -> Raster:
        """Current content as a new raster at the canvas device scale."""
        return Raster(image=self._require_buffer().copy(), scale=self._scale)

    def release(self) -> None:
        if self._buffer is not None:
            self._buffer.close()
            self._buffer = None
        self._saved.clear()

    def _require_buffer(self) -> Image.Image:
        if self._buffer is None:
            raise SurfaceAllocationError("Canvas has already been released")
        return self._buffer

    # ─────────────────────────────────────────────────────────────
    # Transform & state
    # ─────────────────────────────────────────────────────────────

    @property
    def transform(self) -> Affine:
        """Current user space -> device pixel transform."""
        return self._state.transform

    def concat(self, affine: Affine) -> None:
        self._state = replace(self._state, transform=self._state.transform.concat(affine))

    def translate_by(self, tx: float, ty: float) -> None:
        self.concat(Affine.from_translation(tx, ty))

    def rotate_by(self, radians: float) -> None:
        self.concat(Affine.from_rotation(radians))

    def scale_by(self, sx: float, sy: float) -> None:
        self.concat(Affine.from_scale(sx, sy))

    @contextmanager
    def save_state(self) -> Iterator["Canvas"]:
        self._saved.append(self._state)
        try:
            yield self
        finally:
            self._state = self._saved.pop()

    # ─────────────────────────────────────────────────────────────
    # Clipping
    # ─────────────────────────────────────────────────────────────

    def clip_path(self, path: Path) -> None:
        """Intersect the clip region with ``path`` (in user space)."""
        mask = self._coverage(path, stroke_width=None)
        clip = mask if self._state.clip is None else ImageChops.multiply(self._state.clip, mask)
        self._state = replace(self._state, clip=clip)

    def clip_rect(self, rect: Rect) -> None:
        self.clip_path(Path.rect(rect))

    def clip_ellipse(self, rect: Rect) -> None:
        self.clip_path(Path.ellipse(rect))

    def clip_rounded_rect(self, rect: Rect, radius: float) -> None:
        self.clip_path(Path.rounded_rect(rect, radius))

    # ─────────────────────────────────────────────────────────────
    # Drawing
    # ─────────────────────────────────────────────────────────────

    def draw_raster(self, raster: Raster, rect: Rect) -> None:
        """Draw the stored pixels of ``raster`` stretched into ``rect`` (source over)."""
        if rect.width == 0 or rect.height == 0:
            return

        source = Rect(x=0.0, y=0.0, width=raster.pixel_width, height=raster.pixel_height)
        device = self._state.transform.concat(Affine.from_rect_to_rect(source, rect))

        signs = tuple(int(v) for v in np.sign(np.round(device.linear, 9)).flatten())
        if device.is_axis_aligned and signs in _TRANSPOSE_BY_SIGNS:
            transpose = _TRANSPOSE_BY_SIGNS[signs]  # type: ignore[index]
            layer = self._place_axis_aligned(raster.image, device, transpose)
        else:
            layer = self._warp(raster.image, device)

        if layer is not None:
            self._composite(layer)

    def fill_path(self, path: Path, color: tuple[int, int, int, int]) -> None:
        self._paint(self._coverage(path, stroke_width=None), color)

    def stroke_path(self, path: Path, width: float, color: tuple[int, int, int, int]) -> None:
        """Stroke ``path`` with a line ``width`` user units wide, centered on the path."""
        if width <= 0:
            return
        self._paint(self._coverage(path, stroke_width=width), color)

    def stroke_ellipse(self, rect: Rect, width: float, color: tuple[int, int, int, int]) -> None:
        self.stroke_path(Path.ellipse(rect), width, color)

    def stroke_rounded_rect(
        self, rect: Rect, radius: float, width: float, color: tuple[int, int, int, int]
    ) -> None:
        self.stroke_path(Path.rounded_rect(rect, radius), width, color)

    # ─────────────────────────────────────────────────────────────
    # Internals
    # ─────────────────────────────────────────────────────────────

    def _place_axis_aligned(
        self, image: Image.Image, device: Affine, transpose: Image.Transpose | None
    ) -> Image.Image | None:
        buffer = self._require_buffer()
        box = device.apply_rect(Rect(x=0.0, y=0.0, width=image.width, height=image.height))
        # origin rounds half up, size is the rounded box size
        x0, y0 = math.floor(box.x + 0.5), math.floor(box.y + 0.5)
        width, height = round_half_away(box.width), round_half_away(box.height)
        x1, y1 = x0 + width, y0 + height
        if width <= 0 or height <= 0:
            return None
        if x0 >= buffer.width or y0 >= buffer.height or x1 <= 0 or y1 <= 0:
            return None

        placed = image.transpose(transpose) if transpose is not None else image
        if placed.size != (width, height):
            placed = placed.resize((width, height), self.config.resample_filter)

        layer = Image.new(RASTER_MODE, buffer.size, TRANSPARENT)
        layer.paste(placed, (x0, y0))
        return layer

    def _warp(self, image: Image.Image, device: Affine) -> Image.Image:
        buffer = self._require_buffer()
        # cv2 samples at integer pixel centers, user space puts them at +0.5
        centered = Affine.from_translation(-0.5, -0.5).concat(device).translated(0.5, 0.5)
        warped = cv2.warpAffine(
            np.asarray(image),
            centered.matrix[:2],
            buffer.size,
            flags=cv2.INTER_LINEAR,
            borderMode=cv2.BORDER_CONSTANT,
            borderValue=(0, 0, 0, 0),
        )
        logger.debug(f"Warped {image.size} raster with non axis-aligned transform {device}")
        return Image.fromarray(np.ascontiguousarray(warped))

    def _coverage(self, path: Path, stroke_width: float | None) -> Image.Image:
        """L mask (device size) covered by the path fill (even-odd), or by its stroke."""
        buffer = self._require_buffer()
        factor = self.config.supersample
        width, height = buffer.size
        mask = Image.new("L", (width * factor, height * factor), 0)

        # Pillow addresses pixels by their centers, user space by their corners
        to_mask = Affine.from_translation(-0.5, -0.5).concat(
            Affine.from_scale(factor, factor).concat(self._state.transform)
        )
        polylines: list[Polyline] = path.flatten(self.config.curve_segments)

        if stroke_width is None:
            # even-odd rule: a contour inside another one cuts a hole
            for polyline in polylines:
                points = to_mask.apply(polyline.points)
                if len(points) < 3:
                    continue
                contour = Image.new("L", mask.size, 0)
                ImageDraw.Draw(contour).polygon([tuple(p) for p in points], fill=255)
                mask = ImageChops.difference(mask, contour)
        else:
            draw = ImageDraw.Draw(mask)
            line_scale = float(np.sqrt(abs(np.linalg.det(self._state.transform.linear))))
            line_width = max(1, round_half_away(stroke_width * line_scale * factor))
            for polyline in polylines:
                points = to_mask.apply(polyline.points)
                if polyline.closed:
                    points = np.vstack([points, points[:1]])
                draw.line([tuple(p) for p in points], fill=255, width=line_width, joint="curve")

        if factor > 1:
            mask = mask.resize((width, height), Image.Resampling.BOX)
        return mask

    def _paint(self, coverage: Image.Image, color: tuple[int, int, int, int]) -> None:
        buffer = self._require_buffer()
        red, green, blue, alpha = color
        layer = Image.new(RASTER_MODE, buffer.size, (red, green, blue, 0))
        if alpha < 255:
            coverage = coverage.point(lambda v: v * alpha // 255)
        layer.putalpha(coverage)
        self._composite(layer)

    def _composite(self, layer: Image.Image) -> None:
        buffer = self._require_buffer()
        if self._state.clip is not None:
            layer.putalpha(ImageChops.multiply(layer.getchannel("A"), self._state.clip))
        self._buffer = Image.alpha_composite(buffer, layer)
        buffer.close()


@contextmanager
def open_canvas(
    size: Size,
    scale: float = 1.0,
    config: CanvasConfig | None = None,
) -> Iterator[Canvas]:
    """Allocate a canvas for the duration of the ``with`` block."""
    canvas = Canvas(size, scale, config)
    try:
        yield canvas
    finally:
        canvas.release()


def draw_with_canvas(
    size: Size,
    scale: float,
    draw: Callable[[Size, Canvas], None],
    config: CanvasConfig | None = None,
) -> Raster:
    """Run ``draw`` on a fresh canvas and return what it drew."""
    with open_canvas(size, scale, config) as canvas:
        draw(canvas.size, canvas)
        return canvas.snapshot()
