"""Layer compositing: draw one raster over another."""

from loguru import logger

from ....common.canvas import CanvasConfig, open_canvas
from ....common.errors import InvalidDimensionError, failure_boundary
from ....common.raster import Raster
from ....common.schemas import Rect
from ....utils.profiling import timed
from ...orientation.algo.orientation_normalize import corrected_raster


@timed
@failure_boundary
def overlay_image(
    base: Raster,
    overlay: Raster,
    frame: Rect,
    *,
    config: CanvasConfig | None = None,
) -> Raster:
    """
    Draw ``overlay`` stretched into ``frame`` on top of ``base``.

    The output has the base's size and device scale. ``frame`` is in the base's
    logical units and may extend past its bounds; the part outside is dropped.
    Blending is plain source-over using the overlay's alpha.

    Args:
        base: Bottom layer
        overlay: Top layer
        frame: Where the overlay goes
        config: Rendering configuration

    Returns:
        Present(composited raster) or Absent(INVALID_DIMENSION / SURFACE_ALLOCATION)
    """
    if not frame.size.is_valid:
        raise InvalidDimensionError(f"Overlay frame must have positive size, got {frame}")

    upright_base = corrected_raster(base, config=config)
    upright_overlay = corrected_raster(overlay, config=config)
    logger.debug(
        f"Overlaying {upright_overlay.pixel_size} raster at {frame} "
        f"on {upright_base.pixel_size}"
    )

    with open_canvas(upright_base.size, upright_base.scale, config) as canvas:
        canvas.draw_raster(upright_base, canvas.bounds)
        canvas.draw_raster(upright_overlay, frame)
        return canvas.snapshot()
