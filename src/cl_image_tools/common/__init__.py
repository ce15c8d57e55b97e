from .canvas import DEFAULT_CANVAS_CONFIG, Canvas, CanvasConfig, draw_with_canvas, open_canvas
from .errors import (
    InvalidDimensionError,
    MalformedMaskImageError,
    RasterError,
    SurfaceAllocationError,
    failure_boundary,
)
from .geometry import Affine, Path
from .raster import Raster
from .result import Absent, FailureReason, Present, RasterResult
from .schemas import BorderSpec, FitMode, Orientation, Point, Rect, Size

__all__ = [
    "Absent",
    "Affine",
    "BorderSpec",
    "Canvas",
    "CanvasConfig",
    "DEFAULT_CANVAS_CONFIG",
    "FailureReason",
    "FitMode",
    "InvalidDimensionError",
    "MalformedMaskImageError",
    "Orientation",
    "Path",
    "Point",
    "Present",
    "Raster",
    "RasterError",
    "RasterResult",
    "Rect",
    "Size",
    "SurfaceAllocationError",
    "draw_with_canvas",
    "failure_boundary",
    "open_canvas",
]
