"""cl_image_tools - Resize, mask and layer raster images."""

from .common.canvas import DEFAULT_CANVAS_CONFIG, CanvasConfig
from .common.errors import (
    InvalidDimensionError,
    MalformedMaskImageError,
    RasterError,
    SurfaceAllocationError,
)
from .common.geometry import Affine, Path
from .common.raster import Raster
from .common.result import Absent, FailureReason, Present, RasterResult
from .common.schemas import BorderSpec, FitMode, Orientation, Point, Rect, Size
from .pipeline import ImagePipeline

__version__ = "0.1.0"

__all__ = [
    "Absent",
    "Affine",
    "BorderSpec",
    "CanvasConfig",
    "DEFAULT_CANVAS_CONFIG",
    "FailureReason",
    "FitMode",
    "ImagePipeline",
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
    "__version__",
]
