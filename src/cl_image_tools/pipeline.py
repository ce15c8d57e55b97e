"""Chainable wrapper threading one raster result through successive operations.

Example::

    from cl_image_tools import ImagePipeline, FitMode

    avatar = (
        ImagePipeline.from_image(photo)
        .resize((256, 256), FitMode.CROP)
        .mask_with_ellipse(border_width=4, border_color="yellow")
        .raster
    )

Each call returns a new pipeline. Once a step fails, later steps are skipped
and ``failure`` keeps the reason of the first failure.
"""

from collections.abc import Callable, Sequence
from dataclasses import dataclass, replace

from loguru import logger
from PIL import Image

from .common.canvas import CanvasConfig
from .common.errors import RasterError
from .common.geometry import Path
from .common.raster import Raster
from .common.result import Absent, Present, RasterResult
from .common.schemas import WHITE, BorderSpec, Color, FitMode, Rect, Size
from .plugins.image_layer.algo.overlay import overlay_image
from .plugins.image_mask.algo.image_mask import mask_with_image
from .plugins.image_mask.algo.shape_mask import (
    PathBuilder,
    mask_with_ellipse,
    mask_with_path,
    mask_with_path_builder,
    mask_with_rounded_rect,
)
from .plugins.image_resize.algo.image_resize import image_resize
from .plugins.orientation.algo.orientation_normalize import normalize_orientation

SizeLike = Size | tuple[float, float] | Sequence[float]
RectLike = Rect | tuple[float, float, float, float] | Sequence[float]


def as_size(value: SizeLike) -> Size:
    if isinstance(value, Size):
        return value
    width, height = value
    return Size(width=width, height=height)


def as_rect(value: RectLike) -> Rect:
    if isinstance(value, Rect):
        return value
    x, y, width, height = value
    return Rect(x=x, y=y, width=width, height=height)


@dataclass(frozen=True)
class ImagePipeline:
    """Immutable holder of the current raster result."""

    result: RasterResult
    config: CanvasConfig | None = None

    @classmethod
    def from_raster(cls, raster: Raster, *, config: CanvasConfig | None = None) -> "ImagePipeline":
        return cls(result=Present(raster), config=config)

    @classmethod
    def from_image(
        cls,
        image: Image.Image,
        *,
        scale: float = 1.0,
        config: CanvasConfig | None = None,
    ) -> "ImagePipeline":
        """Start from a decoded Pillow image (orientation read from EXIF)."""
        try:
            raster = Raster.from_image(image, scale=scale)
        except RasterError as exc:
            logger.warning(f"Cannot start pipeline: {exc}")
            return cls(result=exc.as_absent(), config=config)
        return cls.from_raster(raster, config=config)

    # ─────────────────────────────────────────────────────────────
    # State
    # ─────────────────────────────────────────────────────────────

    @property
    def raster(self) -> Raster | None:
        return self.result.raster_or_none()

    @property
    def image(self) -> Image.Image | None:
        raster = self.raster
        return raster.image if raster is not None else None

    @property
    def failure(self) -> Absent | None:
        return self.result if isinstance(self.result, Absent) else None

    @property
    def is_present(self) -> bool:
        return self.result.is_present

    # ─────────────────────────────────────────────────────────────
    # Steps
    # ─────────────────────────────────────────────────────────────

    def apply(
        self, operation: Callable[[Raster], RasterResult], name: str | None = None
    ) -> "ImagePipeline":
        """Run ``operation`` on the current raster, or pass an absent result through."""
        step = name or getattr(operation, "__name__", "operation")
        if isinstance(self.result, Absent):
            logger.debug(f"Skipping {step}: pipeline already failed ({self.result.reason.value})")
            return self
        return replace(self, result=self.result.then(operation))

    def normalize_orientation(self) -> "ImagePipeline":
        return self.apply(
            lambda r: normalize_orientation(r, config=self.config), "normalize_orientation"
        )

    def resize(self, size: SizeLike, fit_mode: FitMode = FitMode.CLIP) -> "ImagePipeline":
        target = as_size(size)
        return self.apply(lambda r: image_resize(r, target, fit_mode, config=self.config), "resize")

    def resize_by_clipping(self, size: SizeLike) -> "ImagePipeline":
        return self.resize(size, FitMode.CLIP)

    def resize_by_cropping(self, size: SizeLike) -> "ImagePipeline":
        return self.resize(size, FitMode.CROP)

    def resize_by_scaling(self, size: SizeLike) -> "ImagePipeline":
        return self.resize(size, FitMode.SCALE)

    def mask_with_ellipse(
        self, border_width: float = 0, border_color: Color | str = WHITE
    ) -> "ImagePipeline":
        def step(raster: Raster) -> RasterResult:
            border = BorderSpec(width=border_width, color=border_color)
            return mask_with_ellipse(raster, border, config=self.config)

        return self.apply(step, "mask_with_ellipse")

    def mask_with_rounded_rect(
        self, corner_radius: float, border_width: float = 0, border_color: Color | str = WHITE
    ) -> "ImagePipeline":
        def step(raster: Raster) -> RasterResult:
            border = BorderSpec(width=border_width, color=border_color)
            return mask_with_rounded_rect(raster, corner_radius, border, config=self.config)

        return self.apply(step, "mask_with_rounded_rect")

    def mask_with_path(self, path: Path) -> "ImagePipeline":
        return self.apply(lambda r: mask_with_path(r, path, config=self.config), "mask_with_path")

    def mask_with_path_builder(self, build: PathBuilder) -> "ImagePipeline":
        return self.apply(
            lambda r: mask_with_path_builder(r, build, config=self.config), "mask_with_path_builder"
        )

    def mask_with_image(self, mask: Raster) -> "ImagePipeline":
        return self.apply(lambda r: mask_with_image(r, mask, config=self.config), "mask_with_image")

    def layer_with_overlay(self, overlay: Raster, frame: RectLike) -> "ImagePipeline":
        target = as_rect(frame)
        return self.apply(
            lambda r: overlay_image(r, overlay, target, config=self.config), "layer_with_overlay"
        )
