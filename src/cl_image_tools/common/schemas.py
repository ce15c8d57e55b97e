"""Pydantic value types shared by every image operation."""

import math
from enum import IntEnum, StrEnum
from typing import Annotated

from PIL import ImageColor
from pydantic import BaseModel, BeforeValidator, ConfigDict, Field

# ─────────────────────────────────────────────────────────────
# Numeric helpers
# ─────────────────────────────────────────────────────────────


def round_half_away(value: float) -> int:
    """Round to the nearest integer, halves away from zero (2.5 -> 3, -2.5 -> -3)."""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


# ─────────────────────────────────────────────────────────────
# Colors
# ─────────────────────────────────────────────────────────────


def _coerce_color(value: object) -> tuple[int, int, int, int]:
    if isinstance(value, str):
        rgb = ImageColor.getcolor(value, "RGBA")
        return tuple(rgb)  # type: ignore[return-value]

    if isinstance(value, (tuple, list)):
        channels = [int(c) for c in value]
        if len(channels) == 3:
            channels.append(255)
        if len(channels) != 4:
            raise ValueError("Color must have 3 (RGB) or 4 (RGBA) channels")
        if any(c < 0 or c > 255 for c in channels):
            raise ValueError("Color channels must be within 0..255")
        return (channels[0], channels[1], channels[2], channels[3])

    raise ValueError(f"Unsupported color value: {value!r}")


Color = Annotated[tuple[int, int, int, int], BeforeValidator(_coerce_color)]

WHITE: tuple[int, int, int, int] = (255, 255, 255, 255)
TRANSPARENT: tuple[int, int, int, int] = (0, 0, 0, 0)


# ─────────────────────────────────────────────────────────────
# Geometry values
# ─────────────────────────────────────────────────────────────


class Point(BaseModel):
    """A 2D point, top-left origin, y grows downward."""

    model_config = ConfigDict(frozen=True)

    x: float
    y: float


class Size(BaseModel):
    """Width x height in logical units.

    Non-positive sizes are representable on purpose: operations report them
    as an absent result instead of failing at construction time.
    """

    model_config = ConfigDict(frozen=True)

    width: float
    height: float

    @property
    def is_valid(self) -> bool:
        return (
            math.isfinite(self.width)
            and math.isfinite(self.height)
            and self.width > 0
            and self.height > 0
        )

    @property
    def aspect_ratio(self) -> float:
        return self.width / self.height

    def scaled(self, factor: float) -> "Size":
        return Size(width=self.width * factor, height=self.height * factor)

    def as_pixels(self) -> tuple[int, int]:
        return round_half_away(self.width), round_half_away(self.height)


class Rect(BaseModel):
    """Origin plus size; used for crop windows, overlay frames and border bounds."""

    model_config = ConfigDict(frozen=True)

    x: float = 0.0
    y: float = 0.0
    width: float
    height: float

    @classmethod
    def from_size(cls, size: Size) -> "Rect":
        return cls(x=0.0, y=0.0, width=size.width, height=size.height)

    @property
    def origin(self) -> Point:
        return Point(x=self.x, y=self.y)

    @property
    def size(self) -> Size:
        return Size(width=self.width, height=self.height)

    @property
    def max_x(self) -> float:
        return self.x + self.width

    @property
    def max_y(self) -> float:
        return self.y + self.height

    def inset(self, dx: float, dy: float) -> "Rect":
        return Rect(
            x=self.x + dx,
            y=self.y + dy,
            width=self.width - 2 * dx,
            height=self.height - 2 * dy,
        )


# ─────────────────────────────────────────────────────────────
# Enumerations
# ─────────────────────────────────────────────────────────────


class FitMode(StrEnum):
    """How a resize fits the source into the target bounds.

    - CLIP:  fit within the bounds, keeping the aspect ratio. One side matches
             the target, the other is smaller or equal.
    - CROP:  fill the bounds keeping the aspect ratio, crop the centered excess.
    - SCALE: stretch to the bounds exactly, ignoring the aspect ratio.
    """

    CLIP = "clip"
    CROP = "crop"
    SCALE = "scale"


class Orientation(IntEnum):
    """Orientation tag, using the EXIF Orientation (0x0112) values."""

    UP = 1
    UP_MIRRORED = 2
    DOWN = 3
    DOWN_MIRRORED = 4
    LEFT_MIRRORED = 5
    RIGHT = 6
    RIGHT_MIRRORED = 7
    LEFT = 8

    @property
    def is_mirrored(self) -> bool:
        return self in (
            Orientation.UP_MIRRORED,
            Orientation.DOWN_MIRRORED,
            Orientation.LEFT_MIRRORED,
            Orientation.RIGHT_MIRRORED,
        )

    @property
    def swaps_dimensions(self) -> bool:
        return self in (
            Orientation.LEFT,
            Orientation.LEFT_MIRRORED,
            Orientation.RIGHT,
            Orientation.RIGHT_MIRRORED,
        )


# ─────────────────────────────────────────────────────────────
# Operation parameters
# ─────────────────────────────────────────────────────────────


class BorderSpec(BaseModel):
    """Border stroked on top of a masked raster. A width of 0 draws nothing."""

    model_config = ConfigDict(frozen=True)

    width: float = Field(default=0.0, ge=0.0, description="Border line width (logical units)")
    color: Color = Field(default=WHITE, description="Border color (RGBA)")

    @property
    def is_visible(self) -> bool:
        return self.width > 0
