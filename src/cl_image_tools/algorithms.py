"""Public algorithm API for cl_image_tools.

Every operation is a plain function taking a Raster and returning a
RasterResult: ``Present(raster)`` on success, ``Absent(reason, message)`` when
no raster could be produced. Nothing here raises for those failures.

Example:
    Resize and mask::

        from PIL import Image

        from cl_image_tools.algorithms import (
            FitMode,
            Raster,
            Size,
            image_resize,
            mask_with_ellipse,
        )

        raster = Raster.from_image(Image.open("portrait.jpg"))
        result = image_resize(raster, Size(width=500, height=500), FitMode.CROP)
        if result.is_present:
            circle = mask_with_ellipse(result.raster)

    Compositing::

        from cl_image_tools.algorithms import Rect, overlay_image

        badge = overlay_image(base, logo, Rect(x=450, y=400, width=200, height=200))
"""

# Data model
from .common.geometry import Affine, Path
from .common.raster import Raster
from .common.result import Absent, FailureReason, Present, RasterResult
from .common.schemas import BorderSpec, FitMode, Orientation, Rect, Size

# Compositing
from .plugins.image_layer.algo.overlay import overlay_image

# Masking
from .plugins.image_mask.algo.image_mask import mask_with_image, stencil_from_mask
from .plugins.image_mask.algo.shape_mask import (
    fit_path_to_rect,
    mask_with_ellipse,
    mask_with_path,
    mask_with_path_builder,
    mask_with_rounded_rect,
)

# Resizing
from .plugins.image_resize.algo.image_resize import (
    SCALE_RATIO_POLICY,
    image_resize,
    resize_by_clipping,
    resize_by_cropping,
    resize_by_scaling,
    scale_ratio,
)

# Orientation
from .plugins.orientation.algo.orientation_normalize import (
    normalize_orientation,
    orientation_transform,
)

__all__ = [
    # Orientation
    "normalize_orientation",
    "orientation_transform",
    # Resizing
    "image_resize",
    "resize_by_clipping",
    "resize_by_cropping",
    "resize_by_scaling",
    "scale_ratio",
    "SCALE_RATIO_POLICY",
    # Masking
    "mask_with_ellipse",
    "mask_with_rounded_rect",
    "mask_with_path",
    "mask_with_path_builder",
    "mask_with_image",
    "fit_path_to_rect",
    "stencil_from_mask",
    # Compositing
    "overlay_image",
    # Data model
    "Raster",
    "Size",
    "Rect",
    "FitMode",
    "Orientation",
    "BorderSpec",
    "Path",
    "Affine",
    "Present",
    "Absent",
    "FailureReason",
    "RasterResult",
]
