"""Raster: an immutable RGBA pixel buffer plus device scale and orientation tag."""

from dataclasses import dataclass, field

from PIL import ExifTags, Image

from .errors import InvalidDimensionError, SurfaceAllocationError
from .schemas import TRANSPARENT, Orientation, Size

RASTER_MODE = "RGBA"


def read_exif_orientation(image: Image.Image) -> Orientation:
    """Orientation from the EXIF tag of a decoded image, UP when missing or invalid."""
    try:
        value = image.getexif().get(ExifTags.Base.Orientation)
    except (OSError, ValueError, SyntaxError):
        return Orientation.UP

    try:
        return Orientation(int(value)) if value is not None else Orientation.UP
    except (TypeError, ValueError):
        return Orientation.UP


@dataclass(frozen=True)
class Raster:
    """In-memory pixel buffer.

    The buffer is always 8-bit RGBA with straight alpha. ``scale`` is the device
    scale (pixels per logical unit) and ``orientation`` tells how the pixels must
    be rotated / mirrored to be presented upright.

    A raster is never modified after construction: operations return new ones.
    """

    image: Image.Image
    scale: float = 1.0
    orientation: Orientation = field(default=Orientation.UP)

    def __post_init__(self) -> None:
        width, height = self.image.size
        if width <= 0 or height <= 0:
            raise InvalidDimensionError(
                f"Raster must have positive dimensions, got {width}x{height}"
            )
        if not self.scale > 0:
            raise InvalidDimensionError(f"Device scale must be positive, got {self.scale}")
        if self.image.mode != RASTER_MODE:
            object.__setattr__(self, "image", self.image.convert(RASTER_MODE))
        object.__setattr__(self, "orientation", Orientation(self.orientation))

    @classmethod
    def from_image(
        cls,
        image: Image.Image,
        *,
        scale: float = 1.0,
        orientation: Orientation | None = None,
    ) -> "Raster":
        """Wrap a decoded Pillow image; orientation defaults to its EXIF tag."""
        if orientation is None:
            orientation = read_exif_orientation(image)
        return cls(image=image, scale=scale, orientation=orientation)

    @classmethod
    def new(
        cls,
        size: Size,
        *,
        scale: float = 1.0,
        color: tuple[int, int, int, int] = TRANSPARENT,
    ) -> "Raster":
        """A solid raster of ``size`` logical units at ``scale``."""
        if not size.is_valid:
            raise InvalidDimensionError(f"Invalid raster size: {size.width}x{size.height}")
        try:
            image = Image.new(RASTER_MODE, size.scaled(scale).as_pixels(), color)
        except (MemoryError, ValueError) as exc:
            raise SurfaceAllocationError(f"Could not allocate raster: {exc}") from exc
        return cls(image=image, scale=scale)

    # ─────────────────────────────────────────────────────────────
    # Dimensions
    # ─────────────────────────────────────────────────────────────

    @property
    def pixel_width(self) -> int:
        return self.image.width

    @property
    def pixel_height(self) -> int:
        return self.image.height

    @property
    def pixel_size(self) -> tuple[int, int]:
        return self.image.size

    @property
    def upright_pixel_size(self) -> tuple[int, int]:
        """Pixel size once the orientation tag has been applied."""
        if self.orientation.swaps_dimensions:
            return self.pixel_height, self.pixel_width
        return self.pixel_width, self.pixel_height

    @property
    def size(self) -> Size:
        """Logical, upright size (pixels divided by device scale)."""
        width, height = self.upright_pixel_size
        return Size(width=width / self.scale, height=height / self.scale)

    @property
    def is_upright(self) -> bool:
        return self.orientation == Orientation.UP

    def pixel(self, x: int, y: int) -> tuple[int, int, int, int]:
        """RGBA value of the stored pixel at (x, y)."""
        value = self.image.getpixel((x, y))
        return tuple(value)  # type: ignore[arg-type, return-value]
