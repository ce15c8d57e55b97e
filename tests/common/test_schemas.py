"""Unit tests for the shared value types (sizes, rects, colors, enums, border spec)."""

import math

import pytest
from pydantic import ValidationError

from cl_image_tools.common.schemas import (
    WHITE,
    BorderSpec,
    FitMode,
    Orientation,
    Rect,
    Size,
    round_half_away,
)

# ============================================================================
# NUMERIC HELPERS
# ============================================================================


@pytest.mark.parametrize(
    ("value", "expected"),
    [(2.5, 3), (-2.5, -3), (2.4999, 2), (0.4, 0), (334.7, 335), (368.58, 369), (500.0, 500)],
)
def test_round_half_away(value: float, expected: int):
    """Test halves are rounded away from zero."""
    assert round_half_away(value) == expected


# ============================================================================
# SIZE / RECT TESTS
# ============================================================================


def test_size_is_valid():
    """Test only finite, strictly positive sizes are valid."""
    assert Size(width=10, height=0.5).is_valid
    assert not Size(width=0, height=10).is_valid
    assert not Size(width=10, height=-1).is_valid
    assert not Size(width=math.nan, height=10).is_valid
    assert not Size(width=math.inf, height=10).is_valid


def test_size_helpers():
    """Test aspect ratio, scaling and pixel rounding."""
    size = Size(width=300, height=200)

    assert size.aspect_ratio == pytest.approx(1.5)
    assert size.scaled(2) == Size(width=600, height=400)
    assert Size(width=10.5, height=3.2).as_pixels() == (11, 3)


def test_size_is_immutable():
    """Test value types are frozen."""
    size = Size(width=1, height=1)

    with pytest.raises(ValidationError):
        size.width = 5  # type: ignore[misc]


def test_rect_properties():
    """Test derived rect properties."""
    rect = Rect(x=450, y=400, width=200, height=150)

    assert rect.max_x == 650
    assert rect.max_y == 550
    assert rect.size == Size(width=200, height=150)
    assert rect.origin.x == 450
    assert rect.origin.y == 400


def test_rect_from_size_and_inset():
    """Test rect construction from a size and insetting on both axes."""
    rect = Rect.from_size(Size(width=100, height=80))
    assert (rect.x, rect.y, rect.width, rect.height) == (0, 0, 100, 80)

    inset = rect.inset(5, 10)
    assert (inset.x, inset.y, inset.width, inset.height) == (5, 10, 90, 60)


# ============================================================================
# COLOR / BORDER TESTS
# ============================================================================


def test_border_spec_defaults():
    """Test the default border is invisible and white."""
    border = BorderSpec()

    assert border.width == 0
    assert border.color == WHITE
    assert not border.is_visible


@pytest.mark.parametrize(
    ("color", "expected"),
    [
        ("yellow", (255, 255, 0, 255)),
        ("#800080", (128, 0, 128, 255)),
        ((1, 2, 3), (1, 2, 3, 255)),
        ([10, 20, 30, 40], (10, 20, 30, 40)),
    ],
)
def test_border_spec_color_coercion(color: object, expected: tuple[int, int, int, int]):
    """Test names, hex strings, RGB and RGBA sequences become RGBA tuples."""
    assert BorderSpec(width=2, color=color).color == expected  # type: ignore[arg-type]


@pytest.mark.parametrize("color", [(300, 0, 0), (1, 2), "not-a-color", 42])
def test_border_spec_rejects_bad_colors(color: object):
    """Test invalid colors raise a validation error."""
    with pytest.raises(ValidationError):
        _ = BorderSpec(width=2, color=color)  # type: ignore[arg-type]


def test_border_spec_rejects_negative_width():
    """Test negative border widths are rejected."""
    with pytest.raises(ValidationError):
        _ = BorderSpec(width=-1)


# ============================================================================
# ENUM TESTS
# ============================================================================


def test_fit_mode_values():
    """Test fit modes accept their string values."""
    assert FitMode("clip") is FitMode.CLIP
    assert FitMode("crop") is FitMode.CROP
    assert FitMode("scale") is FitMode.SCALE


def test_orientation_uses_exif_values():
    """Test orientation values match the EXIF Orientation tag."""
    assert Orientation(1) is Orientation.UP
    assert Orientation(3) is Orientation.DOWN
    assert Orientation(6) is Orientation.RIGHT
    assert Orientation(8) is Orientation.LEFT


@pytest.mark.parametrize("orientation", list(Orientation))
def test_orientation_flags(orientation: Orientation):
    """Test mirrored / dimension swapping flags for every orientation."""
    assert orientation.is_mirrored == (orientation.value in (2, 4, 5, 7))
    assert orientation.swaps_dimensions == (orientation.value >= 5)
