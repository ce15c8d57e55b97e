"""Affine transforms and vector paths in top-left, y-down coordinates."""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import StrEnum

import numpy as np
from numpy.typing import NDArray

from .schemas import Point, Rect

# Control point distance for a quarter circle drawn with one cubic Bezier.
KAPPA = 0.5522847498

PointLike = Point | tuple[float, float] | Sequence[float]


def _xy(point: PointLike) -> tuple[float, float]:
    if isinstance(point, Point):
        return point.x, point.y
    return float(point[0]), float(point[1])


# ─────────────────────────────────────────────────────────────
# Affine
# ─────────────────────────────────────────────────────────────


class Affine:
    """2D affine transform stored as a 3x3 matrix acting on column vectors.

    ``translated``, ``rotated`` and ``scaled`` return a transform that applies the
    new operation *before* this one, so chained calls read in drawing order:
    ``Affine.identity().translated(w, 0).scaled(-1, 1)`` mirrors, then shifts.
    Positive angles rotate clockwise on screen because y grows downward.
    """

    __slots__ = ("matrix",)

    def __init__(self, matrix: NDArray[np.float64] | None = None):
        self.matrix: NDArray[np.float64] = (
            np.eye(3, dtype=np.float64) if matrix is None else np.asarray(matrix, dtype=np.float64)
        )

    @classmethod
    def identity(cls) -> Affine:
        return cls()

    @classmethod
    def from_translation(cls, tx: float, ty: float) -> Affine:
        return cls(np.array([[1.0, 0.0, tx], [0.0, 1.0, ty], [0.0, 0.0, 1.0]]))

    @classmethod
    def from_scale(cls, sx: float, sy: float) -> Affine:
        return cls(np.array([[sx, 0.0, 0.0], [0.0, sy, 0.0], [0.0, 0.0, 1.0]]))

    @classmethod
    def from_rotation(cls, radians: float) -> Affine:
        cos, sin = math.cos(radians), math.sin(radians)
        matrix = np.array([[cos, -sin, 0.0], [sin, cos, 0.0], [0.0, 0.0, 1.0]])
        # quarter turns must stay exact so pixel grids map onto pixel grids
        snapped = np.round(matrix)
        matrix = np.where(np.abs(matrix - snapped) < 1e-12, snapped, matrix)
        return cls(matrix)

    @classmethod
    def from_rect_to_rect(cls, source: Rect, target: Rect) -> Affine:
        """Maps ``source`` onto ``target`` with independent x / y scaling."""
        return (
            cls.from_translation(target.x, target.y)
            .scaled(target.width / source.width, target.height / source.height)
            .translated(-source.x, -source.y)
        )

    def concat(self, other: Affine) -> Affine:
        """``other`` applied first, then self."""
        return Affine(self.matrix @ other.matrix)

    def translated(self, tx: float, ty: float) -> Affine:
        return self.concat(Affine.from_translation(tx, ty))

    def scaled(self, sx: float, sy: float) -> Affine:
        return self.concat(Affine.from_scale(sx, sy))

    def rotated(self, radians: float) -> Affine:
        return self.concat(Affine.from_rotation(radians))

    def inverted(self) -> Affine:
        return Affine(np.linalg.inv(self.matrix))

    @property
    def linear(self) -> NDArray[np.float64]:
        return self.matrix[:2, :2]

    @property
    def translation(self) -> tuple[float, float]:
        return float(self.matrix[0, 2]), float(self.matrix[1, 2])

    @property
    def is_axis_aligned(self) -> bool:
        """True when the transform only permutes, flips, scales and shifts axes."""
        a, b = self.linear[0]
        c, d = self.linear[1]
        eps = 1e-9
        return (abs(b) < eps and abs(c) < eps) or (abs(a) < eps and abs(d) < eps)

    def apply(self, points: NDArray[np.float64] | Iterable[PointLike]) -> NDArray[np.float64]:
        """Transform an (N, 2) array of points."""
        pts = np.asarray(
            points if isinstance(points, np.ndarray) else [_xy(p) for p in points],
            dtype=np.float64,
        ).reshape(-1, 2)
        homogeneous = np.hstack([pts, np.ones((pts.shape[0], 1))])
        return (homogeneous @ self.matrix.T)[:, :2]

    def apply_rect(self, rect: Rect) -> Rect:
        """Bounding box of the transformed rect."""
        corners = self.apply(
            [(rect.x, rect.y), (rect.max_x, rect.y), (rect.x, rect.max_y), (rect.max_x, rect.max_y)]
        )
        x0, y0 = corners.min(axis=0)
        x1, y1 = corners.max(axis=0)
        return Rect(x=float(x0), y=float(y0), width=float(x1 - x0), height=float(y1 - y0))

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Affine) and bool(np.allclose(self.matrix, other.matrix))

    def __repr__(self) -> str:
        return f"Affine({self.matrix[:2].tolist()})"


# ─────────────────────────────────────────────────────────────
# Path
# ─────────────────────────────────────────────────────────────


class SegmentKind(StrEnum):
    MOVE = "move"
    LINE = "line"
    QUAD = "quad"
    CUBIC = "cubic"
    CLOSE = "close"


@dataclass(frozen=True)
class PathSegment:
    kind: SegmentKind
    points: tuple[tuple[float, float], ...] = ()


@dataclass(frozen=True)
class Polyline:
    points: NDArray[np.float64]
    closed: bool


class Path:
    """Ordered line / curve segments forming one or more contours.

    Builder methods append a segment and return the path, so contours can be
    written fluently::

        Path().move_to((0, 50)).line_to((50, 0)).line_to((100, 50)).close()
    """

    def __init__(self, segments: Iterable[PathSegment] = ()):
        self.segments: list[PathSegment] = list(segments)

    # Builders ------------------------------------------------------------

    def move_to(self, point: PointLike) -> Path:
        self.segments.append(PathSegment(SegmentKind.MOVE, (_xy(point),)))
        return self

    def line_to(self, point: PointLike) -> Path:
        self.segments.append(PathSegment(SegmentKind.LINE, (_xy(point),)))
        return self

    def quad_to(self, control: PointLike, point: PointLike) -> Path:
        self.segments.append(PathSegment(SegmentKind.QUAD, (_xy(control), _xy(point))))
        return self

    def curve_to(self, control1: PointLike, control2: PointLike, point: PointLike) -> Path:
        self.segments.append(
            PathSegment(SegmentKind.CUBIC, (_xy(control1), _xy(control2), _xy(point)))
        )
        return self

    def close(self) -> Path:
        self.segments.append(PathSegment(SegmentKind.CLOSE))
        return self

    # Shapes --------------------------------------------------------------

    @classmethod
    def polygon(cls, points: Iterable[PointLike]) -> Path:
        path = cls()
        for index, point in enumerate(points):
            if index == 0:
                path.move_to(point)
            else:
                path.line_to(point)
        return path.close()

    @classmethod
    def rect(cls, rect: Rect) -> Path:
        return cls.polygon(
            [(rect.x, rect.y), (rect.max_x, rect.y), (rect.max_x, rect.max_y), (rect.x, rect.max_y)]
        )

    @classmethod
    def ellipse(cls, rect: Rect) -> Path:
        """Ellipse inscribed in ``rect``."""
        rx, ry = rect.width / 2, rect.height / 2
        cx, cy = rect.x + rx, rect.y + ry
        kx, ky = KAPPA * rx, KAPPA * ry
        return (
            cls()
            .move_to((cx + rx, cy))
            .curve_to((cx + rx, cy + ky), (cx + kx, cy + ry), (cx, cy + ry))
            .curve_to((cx - kx, cy + ry), (cx - rx, cy + ky), (cx - rx, cy))
            .curve_to((cx - rx, cy - ky), (cx - kx, cy - ry), (cx, cy - ry))
            .curve_to((cx + kx, cy - ry), (cx + rx, cy - ky), (cx + rx, cy))
            .close()
        )

    @classmethod
    def rounded_rect(cls, rect: Rect, radius: float) -> Path:
        """Rect with circular corners; radius is clamped to half the shorter side."""
        r = max(0.0, min(radius, rect.width / 2, rect.height / 2))
        if r == 0:
            return cls.rect(rect)

        k = KAPPA * r
        x0, y0, x1, y1 = rect.x, rect.y, rect.max_x, rect.max_y
        return (
            cls()
            .move_to((x0 + r, y0))
            .line_to((x1 - r, y0))
            .curve_to((x1 - r + k, y0), (x1, y0 + r - k), (x1, y0 + r))
            .line_to((x1, y1 - r))
            .curve_to((x1, y1 - r + k), (x1 - r + k, y1), (x1 - r, y1))
            .line_to((x0 + r, y1))
            .curve_to((x0 + r - k, y1), (x0, y1 - r + k), (x0, y1 - r))
            .line_to((x0, y0 + r))
            .curve_to((x0, y0 + r - k), (x0 + r - k, y0), (x0 + r, y0))
            .close()
        )

    # Geometry ------------------------------------------------------------

    @property
    def is_empty(self) -> bool:
        return not any(s.kind != SegmentKind.CLOSE for s in self.segments)

    def transformed(self, affine: Affine) -> Path:
        """A new path with every point (control points included) transformed."""
        segments: list[PathSegment] = []
        for segment in self.segments:
            if segment.points:
                moved = affine.apply(np.array(segment.points))
                points = tuple((float(x), float(y)) for x, y in moved)
            else:
                points = ()
            segments.append(PathSegment(segment.kind, points))
        return Path(segments)

    def flatten(self, segments_per_curve: int = 32) -> list[Polyline]:
        """Approximate curves with line segments; one polyline per contour."""
        contours: list[Polyline] = []
        current: list[tuple[float, float]] = []
        start: tuple[float, float] | None = None

        def finish(closed: bool) -> None:
            if len(current) > 1 or (current and closed):
                contours.append(Polyline(np.array(current, dtype=np.float64), closed))

        steps = np.linspace(0.0, 1.0, max(1, segments_per_curve) + 1)[1:]

        for segment in self.segments:
            match segment.kind:
                case SegmentKind.MOVE:
                    finish(False)
                    current = [segment.points[0]]
                    start = segment.points[0]
                case SegmentKind.LINE:
                    if not current:
                        current = [segment.points[0]]
                        start = segment.points[0]
                    else:
                        current.append(segment.points[0])
                case SegmentKind.QUAD | SegmentKind.CUBIC:
                    origin = current[-1] if current else segment.points[0]
                    if not current:
                        current = [origin]
                        start = origin
                    control = np.array((origin, *segment.points), dtype=np.float64)
                    current.extend(
                        (float(x), float(y)) for x, y in _bezier(control, steps)
                    )
                case SegmentKind.CLOSE:
                    finish(True)
                    current = [start] if start is not None else []

        finish(False)
        return contours

    def bounds(self, segments_per_curve: int = 32) -> Rect:
        """Bounding box of the contour (curves measured on the flattened shape)."""
        polylines = self.flatten(segments_per_curve)
        if not polylines:
            return Rect(x=0.0, y=0.0, width=0.0, height=0.0)
        points = np.vstack([p.points for p in polylines])
        x0, y0 = points.min(axis=0)
        x1, y1 = points.max(axis=0)
        return Rect(x=float(x0), y=float(y0), width=float(x1 - x0), height=float(y1 - y0))

    def __repr__(self) -> str:
        return f"Path({len(self.segments)} segments)"


def _bezier(control: NDArray[np.float64], t: NDArray[np.float64]) -> NDArray[np.float64]:
    """Evaluate a quadratic (3 points) or cubic (4 points) Bezier at ``t``."""
    t = t[:, None]
    u = 1.0 - t
    if len(control) == 3:
        p0, p1, p2 = control
        return u**2 * p0 + 2 * u * t * p1 + t**2 * p2
    p0, p1, p2, p3 = control
    return u**3 * p0 + 3 * u**2 * t * p1 + 3 * u * t**2 * p2 + t**3 * p3
