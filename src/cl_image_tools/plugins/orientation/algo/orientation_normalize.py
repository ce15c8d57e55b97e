"""Orientation correction: rewrite pixels so the orientation tag becomes UP."""

import math

from loguru import logger

from ....common.canvas import CanvasConfig, open_canvas
from ....common.errors import failure_boundary
from ....common.geometry import Affine
from ....common.raster import Raster
from ....common.schemas import Orientation, Rect, Size
from ....utils.profiling import timed


def orientation_transform(orientation: Orientation, width: int, height: int) -> Affine:
    """Transform mapping stored pixel coordinates onto the upright buffer.

    ``width`` / ``height`` are the stored pixel dimensions. The rotation part
    (translate, then rotate) comes first, the mirror part (translate, then
    scale x by -1) is applied on top of it.
    """
    transform = Affine.identity()

    match orientation:
        case Orientation.RIGHT | Orientation.RIGHT_MIRRORED:
            transform = transform.translated(height, 0).rotated(math.pi / 2)
        case Orientation.LEFT | Orientation.LEFT_MIRRORED:
            transform = transform.translated(0, width).rotated(-math.pi / 2)
        case Orientation.DOWN | Orientation.DOWN_MIRRORED:
            transform = transform.translated(width, height).rotated(math.pi)
        case _:
            pass

    if orientation.is_mirrored:
        transform = transform.translated(width, 0).scaled(-1, 1)

    return transform


def upright_dimensions(orientation: Orientation, width: int, height: int) -> tuple[int, int]:
    if orientation.swaps_dimensions:
        return height, width
    return width, height


def corrected_raster(raster: Raster, *, config: CanvasConfig | None = None) -> Raster:
    """Upright copy of ``raster``; the raster itself when it is already UP.

    Raises:
        SurfaceAllocationError: if the upright buffer cannot be allocated
    """
    if raster.is_upright:
        return raster

    width, height = raster.pixel_size
    out_width, out_height = upright_dimensions(raster.orientation, width, height)
    logger.debug(
        f"Normalizing {raster.orientation.name} raster {width}x{height} -> {out_width}x{out_height}"
    )

    with open_canvas(Size(width=out_width, height=out_height), 1.0, config) as canvas:
        canvas.concat(orientation_transform(raster.orientation, width, height))
        canvas.draw_raster(raster, Rect(x=0, y=0, width=width, height=height))
        upright = canvas.snapshot()

    return Raster(image=upright.image, scale=raster.scale, orientation=Orientation.UP)


@timed
@failure_boundary
def normalize_orientation(raster: Raster, *, config: CanvasConfig | None = None) -> Raster:
    """Present(upright raster) or Absent(SURFACE_ALLOCATION)."""
    return corrected_raster(raster, config=config)
