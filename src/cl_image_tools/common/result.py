"""Present / Absent results returned by every image operation."""

from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .raster import Raster


class FailureReason(StrEnum):
    INVALID_DIMENSION = "invalid_dimension"
    SURFACE_ALLOCATION = "surface_allocation"
    MALFORMED_MASK_IMAGE = "malformed_mask_image"


@dataclass(frozen=True)
class Present:
    """A successfully produced raster."""

    raster: "Raster"

    @property
    def is_present(self) -> bool:
        return True

    def raster_or_none(self) -> "Raster | None":
        return self.raster

    def then(self, fn: Callable[["Raster"], "RasterResult"]) -> "RasterResult":
        return fn(self.raster)


@dataclass(frozen=True)
class Absent:
    """No raster; `reason` says why so it survives later pipeline steps."""

    reason: FailureReason
    message: str = ""

    @property
    def is_present(self) -> bool:
        return False

    def raster_or_none(self) -> "Raster | None":
        return None

    def then(self, fn: Callable[["Raster"], "RasterResult"]) -> "RasterResult":
        _ = fn
        return self


RasterResult = Present | Absent
