"""Geometric masks: ellipse, rounded rect and arbitrary paths."""

from collections.abc import Callable

from loguru import logger

from ....common.canvas import DEFAULT_CANVAS_CONFIG, Canvas, CanvasConfig, draw_with_canvas
from ....common.errors import InvalidDimensionError, failure_boundary
from ....common.geometry import Affine, Path
from ....common.raster import Raster
from ....common.schemas import BorderSpec, Rect, Size
from ....utils.profiling import timed
from ...orientation.algo.orientation_normalize import corrected_raster

PathBuilder = Callable[[Rect], Path]


@timed
@failure_boundary
def mask_with_ellipse(
    raster: Raster,
    border: BorderSpec | None = None,
    *,
    config: CanvasConfig | None = None,
) -> Raster:
    """
    Clip a raster to the ellipse inscribed in its bounds.

    For a circle the raster has to be square (resize with FitMode.CROP first).

    Args:
        raster: Source raster
        border: Optional border stroked inside the ellipse edge
        config: Rendering configuration

    Returns:
        Present(masked raster) or Absent(SURFACE_ALLOCATION)
    """
    border = border or BorderSpec()
    upright = corrected_raster(raster, config=config)

    def draw(size: Size, canvas: Canvas) -> None:
        rect = Rect.from_size(size)
        canvas.clip_ellipse(rect)
        canvas.draw_raster(upright, rect)

        if border.is_visible:
            inset = border.width / 2
            canvas.stroke_ellipse(rect.inset(inset, inset), border.width, border.color)

    return draw_with_canvas(upright.size, upright.scale, draw, config)


@timed
@failure_boundary
def mask_with_rounded_rect(
    raster: Raster,
    corner_radius: float,
    border: BorderSpec | None = None,
    *,
    config: CanvasConfig | None = None,
) -> Raster:
    """
    Clip a raster to a rounded rectangle spanning its bounds.

    The border is stroked along the clip edge at twice its width; the outer half
    falls outside the clip, leaving ``border.width`` visible.

    Args:
        raster: Source raster
        corner_radius: Corner radius in logical units
        border: Optional border
        config: Rendering configuration

    Returns:
        Present(masked raster) or Absent(SURFACE_ALLOCATION)
    """
    border = border or BorderSpec()
    upright = corrected_raster(raster, config=config)

    def draw(size: Size, canvas: Canvas) -> None:
        rect = Rect.from_size(size)
        canvas.clip_rounded_rect(rect, corner_radius)
        canvas.draw_raster(upright, rect)

        if border.is_visible:
            canvas.stroke_rounded_rect(rect, corner_radius, border.width * 2, border.color)

    return draw_with_canvas(upright.size, upright.scale, draw, config)


def fit_path_to_rect(path: Path, size: Size, curve_segments: int = 32) -> Path:
    """Scale ``path`` uniformly into ``size`` and center it on the other axis.

    Wider-than-image paths are scaled by width and centered vertically, the
    others by height and centered horizontally. Returns a new path.

    Raises:
        InvalidDimensionError: if the path bounds have no width or height
    """
    bounds = path.bounds(curve_segments)
    if bounds.width <= 0 or bounds.height <= 0:
        raise InvalidDimensionError(
            f"Mask path bounds must have an area, got {bounds.width}x{bounds.height}"
        )

    path_ratio = bounds.width / bounds.height
    image_ratio = size.width / size.height

    if path_ratio > image_ratio:
        scale = size.width / bounds.width
        offset_x, offset_y = 0.0, (size.height - bounds.height * scale) / 2
    else:
        scale = size.height / bounds.height
        offset_x, offset_y = (size.width - bounds.width * scale) / 2, 0.0

    fit = (
        Affine.from_translation(offset_x, offset_y)
        .scaled(scale, scale)
        .translated(-bounds.x, -bounds.y)
    )
    return path.transformed(fit)


def _mask_with_fitted_path(
    raster: Raster, build: PathBuilder, config: CanvasConfig | None
) -> Raster:
    upright = corrected_raster(raster, config=config)
    segments = (config or DEFAULT_CANVAS_CONFIG).curve_segments
    size = upright.size

    fitted = fit_path_to_rect(build(Rect.from_size(size)), size, segments)
    logger.debug(f"Masking {upright.pixel_size} raster with path bounds {fitted.bounds(segments)}")

    def draw(size: Size, canvas: Canvas) -> None:
        canvas.clip_path(fitted)
        canvas.draw_raster(upright, Rect.from_size(size))

    return draw_with_canvas(size, upright.scale, draw, config)


@timed
@failure_boundary
def mask_with_path(raster: Raster, path: Path, *, config: CanvasConfig | None = None) -> Raster:
    """
    Clip a raster to ``path`` fitted into its bounds (aspect ratio kept).

    Args:
        raster: Source raster
        path: Mask shape in any coordinate space; it is not modified
        config: Rendering configuration

    Returns:
        Present(masked raster) or Absent(INVALID_DIMENSION / SURFACE_ALLOCATION)
    """
    return _mask_with_fitted_path(raster, lambda _rect: path, config)


@timed
@failure_boundary
def mask_with_path_builder(
    raster: Raster, build: PathBuilder, *, config: CanvasConfig | None = None
) -> Raster:
    """
    Like mask_with_path, with the path built from the output rect.

    ``build`` receives the rect of the (upright) raster in logical units, so
    size dependent shapes can be constructed before fitting.
    """
    return _mask_with_fitted_path(raster, build, config)
