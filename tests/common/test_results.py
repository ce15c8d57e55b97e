"""Unit tests for Present / Absent results and the error boundary."""

import pytest
from PIL import Image

from cl_image_tools.common.errors import (
    InvalidDimensionError,
    MalformedMaskImageError,
    RasterError,
    SurfaceAllocationError,
    failure_boundary,
)
from cl_image_tools.common.raster import Raster
from cl_image_tools.common.result import Absent, FailureReason, Present

# ============================================================================
# RESULT TESTS
# ============================================================================


def test_present_result():
    """Test a present result exposes its raster and runs continuations."""
    raster = Raster(image=Image.new("RGBA", (4, 4)))
    other = Raster(image=Image.new("RGBA", (2, 2)))
    result = Present(raster)

    assert result.is_present
    assert result.raster_or_none() is raster
    assert result.then(lambda r: Present(other)) == Present(other)


def test_absent_result_skips_continuations():
    """Test an absent result returns itself without calling the continuation."""
    result = Absent(FailureReason.INVALID_DIMENSION, "zero width")
    calls: list[Raster] = []

    def record(raster: Raster) -> Present:
        calls.append(raster)
        return Present(raster)

    assert not result.is_present
    assert result.raster_or_none() is None
    assert result.then(record) is result
    assert calls == []


# ============================================================================
# ERROR TESTS
# ============================================================================


@pytest.mark.parametrize(
    ("error_class", "reason"),
    [
        (InvalidDimensionError, FailureReason.INVALID_DIMENSION),
        (SurfaceAllocationError, FailureReason.SURFACE_ALLOCATION),
        (MalformedMaskImageError, FailureReason.MALFORMED_MASK_IMAGE),
    ],
)
def test_raster_errors_map_to_reasons(error_class: type[RasterError], reason: FailureReason):
    """Test every raster error carries its failure reason."""
    error = error_class("boom")

    assert error.reason is reason
    assert error.as_absent() == Absent(reason, "boom")
    assert str(error) == f"{reason.value}: boom"


def test_failure_boundary_wraps_success():
    """Test a returned raster becomes Present."""
    raster = Raster(image=Image.new("RGBA", (4, 4)))

    @failure_boundary
    def produce() -> Raster:
        return raster

    assert produce() == Present(raster)


def test_failure_boundary_converts_raster_errors(log_messages: list[str]):
    """Test raster errors become Absent and are logged as warnings."""

    @failure_boundary
    def produce() -> Raster:
        raise InvalidDimensionError("no pixels")

    result = produce()

    assert isinstance(result, Absent)
    assert result.reason is FailureReason.INVALID_DIMENSION
    assert result.message == "no pixels"
    assert any("WARNING" in m and "no pixels" in m for m in log_messages)


def test_failure_boundary_propagates_other_errors():
    """Test unexpected exceptions are not swallowed."""

    @failure_boundary
    def produce() -> Raster:
        raise KeyError("bug")

    with pytest.raises(KeyError):
        _ = produce()
