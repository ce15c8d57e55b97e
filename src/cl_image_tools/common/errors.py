"""Exceptions raised inside the raster layer, and the boundary that turns them into results."""

from collections.abc import Callable
from functools import wraps
from typing import TYPE_CHECKING, ParamSpec, override

from loguru import logger

from .result import Absent, FailureReason, Present, RasterResult

if TYPE_CHECKING:
    from .raster import Raster

P = ParamSpec("P")


class RasterError(Exception):
    """Base class for failures that surface to callers as an absent result."""

    reason: FailureReason = FailureReason.SURFACE_ALLOCATION

    def __init__(self, message: str = "Raster operation failed."):
        self.message: str = message
        super().__init__(self.message)

    @override
    def __str__(self):
        return f"{self.reason.value}: {self.message}"

    def as_absent(self) -> Absent:
        return Absent(reason=self.reason, message=self.message)


class InvalidDimensionError(RasterError):
    """A requested size has a zero, negative or non-finite side."""

    reason = FailureReason.INVALID_DIMENSION


class SurfaceAllocationError(RasterError):
    """The drawing surface could not be created."""

    reason = FailureReason.SURFACE_ALLOCATION


class MalformedMaskImageError(RasterError):
    """A mask raster has no usable pixel data."""

    reason = FailureReason.MALFORMED_MASK_IMAGE


def failure_boundary(func: Callable[P, "Raster"]) -> Callable[P, RasterResult]:
    """Wrap an operation returning a Raster so it returns Present / Absent instead.

    Only RasterError is converted; anything else is a bug and propagates.
    """

    @wraps(func)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> RasterResult:
        try:
            return Present(func(*args, **kwargs))
        except RasterError as exc:
            logger.warning(f"{func.__qualname__} produced no raster: {exc}")
            return exc.as_absent()

    return wrapper
