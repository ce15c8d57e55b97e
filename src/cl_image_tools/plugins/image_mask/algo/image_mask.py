"""Masking a raster with the luminance of another raster."""

from loguru import logger
from PIL import Image, ImageChops, ImageOps

from ....common.canvas import CanvasConfig, open_canvas
from ....common.errors import MalformedMaskImageError, failure_boundary
from ....common.raster import RASTER_MODE, Raster
from ....common.schemas import WHITE, Rect
from ....utils.profiling import timed
from ...orientation.algo.orientation_normalize import corrected_raster


def stencil_from_mask(mask: Raster, size: tuple[int, int]) -> Image.Image:
    """
    Coverage (L image of ``size``) described by a mask raster.

    Black reveals (255), white hides (0), gray ``g`` gives ``255 - g``.
    Transparent mask pixels count as white. The mask's stored pixels are used
    as they are (its orientation tag is ignored) and stretched to ``size``.

    Raises:
        MalformedMaskImageError: if the mask pixels cannot be read
    """
    try:
        backdrop = Image.new(RASTER_MODE, mask.image.size, WHITE)
        luminance = Image.alpha_composite(backdrop, mask.image.convert(RASTER_MODE)).convert("L")
    except (OSError, ValueError) as exc:
        raise MalformedMaskImageError(f"Mask image has no readable pixel data: {exc}") from exc

    coverage = ImageOps.invert(luminance)
    if coverage.size != size:
        coverage = coverage.resize(size, Image.Resampling.BILINEAR)
    return coverage


@timed
@failure_boundary
def mask_with_image(
    raster: Raster,
    mask: Raster,
    *,
    config: CanvasConfig | None = None,
) -> Raster:
    """
    Hide the parts of ``raster`` that are white in ``mask``.

    Args:
        raster: Source raster, orientation corrected first
        mask: Stencil raster, stretched over the source
        config: Rendering configuration

    Returns:
        Present(masked raster) or Absent(MALFORMED_MASK_IMAGE / SURFACE_ALLOCATION)
    """
    upright = corrected_raster(raster, config=config)
    coverage = stencil_from_mask(mask, upright.pixel_size)
    logger.debug(f"Masking {upright.pixel_size} raster with {mask.pixel_size} image mask")

    masked_image = upright.image.copy()
    masked_image.putalpha(ImageChops.multiply(upright.image.getchannel("A"), coverage))
    masked = Raster(image=masked_image, scale=upright.scale)

    with open_canvas(upright.size, upright.scale, config) as canvas:
        canvas.draw_raster(masked, Rect.from_size(canvas.size))
        return canvas.snapshot()
