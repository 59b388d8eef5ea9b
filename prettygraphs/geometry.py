"""
Geometry Kernel

Pure 2D helpers used by the layout energy: distances, the
counter-clockwise orientation test for segment crossings, and the
slope-based angle between two lines.

Points are plain ``(x, y)`` tuples.
"""

import math
from typing import Tuple

Point = Tuple[float, float]

# Slope returned for vertical lines so the angle math stays finite
VERTICAL_SLOPE = 999.0


def distance(a: Point, b: Point) -> float:
    """Euclidean distance between two points."""
    return math.sqrt((a[0] - b[0]) ** 2 + (a[1] - b[1]) ** 2)


def ccw(p: Point, q: Point, r: Point) -> bool:
    """True if p -> q -> r turns counter-clockwise (strictly)."""
    return (r[1] - p[1]) * (q[0] - p[0]) > (q[1] - p[1]) * (r[0] - p[0])


def segments_intersect(a: Point, b: Point, c: Point, d: Point) -> bool:
    """
    Check whether segment AB crosses segment CD.

    Uses the orientation test: the segments cross when C and D lie on
    different sides of AB and A and B lie on different sides of CD.

    Collinear overlaps are not handled specially; the result for them is
    whatever the strict orientation comparisons yield (usually False).
    Segments that share an endpoint can report True depending on
    traversal direction, see ``share_endpoint``.
    """
    return ccw(a, c, d) != ccw(b, c, d) and ccw(a, b, c) != ccw(a, b, d)


def share_endpoint(a: Point, b: Point, c: Point, d: Point) -> bool:
    """True if segments AB and CD have a coincident endpoint."""
    return a == c or a == d or b == c or b == d


def slope(x1: float, y1: float, x2: float, y2: float) -> float:
    """Slope of the line through (x1, y1) and (x2, y2).

    Vertical lines return ``VERTICAL_SLOPE`` instead of infinity.
    """
    if x2 - x1 != 0:
        return (y2 - y1) / (x2 - x1)
    return VERTICAL_SLOPE


def angle_between_slopes(m1: float, m2: float) -> float:
    """Acute angle in degrees between two lines given by their slopes."""
    denominator = 1 + m1 * m2
    if denominator == 0:
        # Perpendicular lines
        return 90.0
    return math.degrees(math.atan(abs((m2 - m1) / denominator)))


def neighbor_angle(center: Point, p1: Point, p2: Point, exact: bool = False) -> float:
    """
    Acute angle in degrees between lines center->p1 and center->p2.

    Args:
        center: Shared vertex
        p1, p2: The two neighbor positions
        exact: Use direction vectors instead of slopes, so vertical lines
            are represented exactly rather than through ``VERTICAL_SLOPE``

    Returns:
        Angle in [0, 90]
    """
    if not exact:
        m1 = slope(center[0], center[1], p1[0], p1[1])
        m2 = slope(center[0], center[1], p2[0], p2[1])
        return angle_between_slopes(m1, m2)

    theta1 = math.atan2(p1[1] - center[1], p1[0] - center[0])
    theta2 = math.atan2(p2[1] - center[1], p2[0] - center[0])
    # Fold the directed difference onto the acute angle between the lines
    diff = abs(math.degrees(theta2 - theta1)) % 180.0
    return min(diff, 180.0 - diff)

