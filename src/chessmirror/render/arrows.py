"""Arrow geometry in board pixel space.

Straight arrows are a single seven-point polygon (shaft plus head);
knight arrows are drawn as an L: a plain leg along the longer axis
followed by a headed leg.
"""

from __future__ import annotations

import math

from chessmirror.core.enums import Color
from chessmirror.core.types import Square, is_knight_hop, parse_square

Point = tuple[float, float]

SHAFT_WIDTH = 20.0
HEAD_LENGTH = 35.0
HEAD_WIDTH = 40.0
KNIGHT_HEAD_LENGTH = 30.0
KNIGHT_HEAD_WIDTH = 38.0
SHORTEN_BY = 15.0


def square_center(square: Square, tile: float, orientation: Color) -> Point:
    file, rank = parse_square(square)
    if orientation is Color.BLACK:
        col, row = 7 - file, rank
    else:
        col, row = file, 7 - rank
    return col * tile + tile / 2, row * tile + tile / 2


def _transform(points: list[Point], origin: Point, angle: float) -> list[Point]:
    cos_a, sin_a = math.cos(angle), math.sin(angle)
    ox, oy = origin
    return [(ox + x * cos_a - y * sin_a, oy + x * sin_a + y * cos_a) for x, y in points]


def _headed_leg(
    start: Point,
    end: Point,
    head_length: float,
    head_width: float,
    tail_extension: float = 0.0,
) -> list[Point]:
    dx, dy = end[0] - start[0], end[1] - start[1]
    length = math.hypot(dx, dy)
    effective = length - SHORTEN_BY
    shaft = effective - head_length
    half_shaft = SHAFT_WIDTH / 2
    points = [
        (-tail_extension, -half_shaft),
        (shaft, -half_shaft),
        (shaft, -head_width / 2),
        (effective, 0.0),
        (shaft, head_width / 2),
        (shaft, half_shaft),
        (-tail_extension, half_shaft),
    ]
    return _transform(points, start, math.atan2(dy, dx))


def straight_arrow(start: Point, end: Point) -> list[Point]:
    return _headed_leg(start, end, HEAD_LENGTH, HEAD_WIDTH)


def knight_arrow(start: Point, end: Point) -> list[list[Point]]:
    """Two polygons forming an L-shaped arrow (the first may be absent)."""
    x1, y1 = start
    x2, y2 = end
    corner = (x2, y1) if abs(x2 - x1) > abs(y2 - y1) else (x1, y2)

    polygons: list[list[Point]] = []
    leg_length = math.hypot(corner[0] - x1, corner[1] - y1)
    if leg_length > 0:
        half = SHAFT_WIDTH / 2
        leg = [
            (0.0, -half),
            (leg_length + half, -half),
            (leg_length + half, half),
            (0.0, half),
        ]
        polygons.append(_transform(leg, start, math.atan2(corner[1] - y1, corner[0] - x1)))
    if math.hypot(x2 - corner[0], y2 - corner[1]) > 0:
        polygons.append(
            _headed_leg(
                corner,
                end,
                KNIGHT_HEAD_LENGTH,
                KNIGHT_HEAD_WIDTH,
                tail_extension=SHAFT_WIDTH / 2,
            )
        )
    return polygons


def arrow_polygons(
    from_sq: Square, to_sq: Square, tile: float, orientation: Color
) -> list[list[Point]]:
    """Polygons drawing an arrow between two squares."""
    start = square_center(from_sq, tile, orientation)
    end = square_center(to_sq, tile, orientation)
    if from_sq == to_sq:
        return []
    if is_knight_hop(from_sq, to_sq):
        return knight_arrow(start, end)
    return [straight_arrow(start, end)]
