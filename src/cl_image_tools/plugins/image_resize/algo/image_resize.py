"""Aspect-ratio aware resizing with clip / crop / scale fit modes."""

from collections.abc import Callable, Mapping
from types import MappingProxyType

from loguru import logger

from ....common.canvas import CanvasConfig, open_canvas
from ....common.errors import InvalidDimensionError, failure_boundary
from ....common.raster import Raster
from ....common.result import RasterResult
from ....common.schemas import FitMode, Rect, Size, round_half_away
from ....utils.profiling import timed
from ...orientation.algo.orientation_normalize import corrected_raster

# CLIP must fit inside the bounds (smaller ratio); CROP and SCALE must cover them.
SCALE_RATIO_POLICY: Mapping[FitMode, Callable[[float, float], float]] = MappingProxyType(
    {
        FitMode.CLIP: min,
        FitMode.CROP: max,
        FitMode.SCALE: max,
    }
)


def scale_ratio(original: tuple[int, int], target: Size, fit_mode: FitMode) -> float:
    """Uniform ratio applied to ``original`` (pixels) for ``fit_mode``."""
    width_ratio = target.width / original[0]
    height_ratio = target.height / original[1]
    return SCALE_RATIO_POLICY[fit_mode](width_ratio, height_ratio)


def scaled_dimensions(original: tuple[int, int], ratio: float) -> tuple[int, int]:
    """``original * ratio`` rounded half away from zero, at least 1 pixel per side."""
    width = max(1, round_half_away(original[0] * ratio))
    height = max(1, round_half_away(original[1] * ratio))
    return width, height


def crop_rect(scaled: tuple[int, int], target: Size) -> Rect:
    """Centered window of ``target`` inside ``scaled``.

    The origin is negative on an axis where the scaled image is smaller than the
    target; drawing through it leaves that margin transparent.
    """
    return Rect(
        x=(scaled[0] - target.width) / 2,
        y=(scaled[1] - target.height) / 2,
        width=target.width,
        height=target.height,
    )


@timed
@failure_boundary
def image_resize(
    raster: Raster,
    size: Size,
    fit_mode: FitMode = FitMode.CLIP,
    *,
    config: CanvasConfig | None = None,
) -> Raster:
    """
    Resize a raster to ``size`` (logical units) under ``fit_mode``.

    Args:
        raster: Source raster, orientation is corrected first
        size: Target size, both sides must be positive
        fit_mode: CLIP, CROP or SCALE (see FitMode)
        config: Rendering configuration

    Returns:
        Present(resized raster at the source device scale), or
        Absent(INVALID_DIMENSION / SURFACE_ALLOCATION)
    """
    if not size.is_valid:
        raise InvalidDimensionError(
            f"Target size must be positive, got {size.width}x{size.height}"
        )

    fit_mode = FitMode(fit_mode)
    upright = corrected_raster(raster, config=config)
    original = upright.pixel_size

    ratio = scale_ratio(original, size, fit_mode)
    scaled = scaled_dimensions(original, ratio)
    logger.debug(
        f"Resizing {original[0]}x{original[1]} to {size.width}x{size.height} "
        f"({fit_mode.value}, ratio={ratio:.4f}, scaled={scaled[0]}x{scaled[1]})"
    )

    match fit_mode:
        case FitMode.CLIP:
            canvas_size = Size(width=scaled[0], height=scaled[1])
            placement = Rect.from_size(canvas_size)
        case FitMode.CROP:
            window = crop_rect(scaled, size)
            canvas_size = size
            placement = Rect(x=-window.x, y=-window.y, width=scaled[0], height=scaled[1])
        case FitMode.SCALE:
            canvas_size = size
            placement = Rect.from_size(size)

    with open_canvas(canvas_size, upright.scale, config) as canvas:
        canvas.draw_raster(upright, placement)
        return canvas.snapshot()


def resize_by_clipping(
    raster: Raster, size: Size, *, config: CanvasConfig | None = None
) -> RasterResult:
    """Fit within ``size`` without cropping or distorting."""
    return image_resize(raster, size, FitMode.CLIP, config=config)


def resize_by_cropping(
    raster: Raster, size: Size, *, config: CanvasConfig | None = None
) -> RasterResult:
    """Fill ``size`` and crop the centered excess."""
    return image_resize(raster, size, FitMode.CROP, config=config)


def resize_by_scaling(
    raster: Raster, size: Size, *, config: CanvasConfig | None = None
) -> RasterResult:
    """Stretch to ``size`` exactly."""
    return image_resize(raster, size, FitMode.SCALE, config=config)
