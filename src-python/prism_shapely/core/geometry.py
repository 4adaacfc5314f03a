"""
Copyright 2026 prism-shapely authors and contributors

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at

    http://www.apache.org/licenses/LICENSE-2.0

Unless required by applicable law or agreed to in writing, software
distributed under the License is distributed on an "AS IS" BASIS,
WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
See the License for the specific language governing permissions and
limitations under the License.
"""

import math
from typing import Dict, List, Sequence, Tuple, Union

from shapely.geometry import Point as ShapelyPoint
from shapely.geometry.base import BaseGeometry

TWO_PI = 2 * math.pi


class Point:
    """
    A point in 2D space.
    Can be converted to/from Shapely Point objects.
    """
    __slots__ = ('x', 'y')

    def __init__(self, x: float, y: float):
        self.x = float(x)
        self.y = float(y)

    def to_shapely(self) -> ShapelyPoint:
        """Convert to Shapely Point."""
        return ShapelyPoint(self.x, self.y)

    @classmethod
    def from_shapely(cls, sp: ShapelyPoint) -> 'Point':
        """Create Point from Shapely Point."""
        return cls(sp.x, sp.y)

    def as_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)

    def to_dict(self) -> Dict[str, float]:
        """Convert to dictionary representation."""
        return {'x': self.x, 'y': self.y}

    def __iter__(self):
        yield self.x
        yield self.y

    def __eq__(self, other) -> bool:
        if not isinstance(other, Point):
            return NotImplemented
        return self.x == other.x and self.y == other.y

    def __hash__(self) -> int:
        return hash((self.x, self.y))

    def __repr__(self) -> str:
        return f"Point(x={self.x}, y={self.y})"


PointLike = Union[Point, Tuple[float, float], Sequence[float]]


def as_point(p: PointLike) -> Point:
    """Coerce a Point, (x, y) tuple or dict into a Point."""
    if isinstance(p, Point):
        return p
    if isinstance(p, dict):
        return Point(p['x'], p['y'])
    x, y = p
    return Point(x, y)


# =============================================================================
# Angles
# =============================================================================

def wrap_pi(angle: float) -> float:
    """
    Wrap an angle into the signed range (-pi, pi].

    Args:
        angle: Angle in radians (any finite value).

    Returns:
        Equivalent angle in (-pi, pi].
    """
    wrapped = math.fmod(angle, TWO_PI)
    if wrapped > math.pi:
        wrapped -= TWO_PI
    elif wrapped <= -math.pi:
        wrapped += TWO_PI
    return wrapped


def wrap_2pi(angle: float) -> float:
    """
    Wrap an angle into the unsigned range [0, 2*pi).

    Args:
        angle: Angle in radians (any finite value).

    Returns:
        Equivalent angle in [0, 2*pi).
    """
    wrapped = math.fmod(angle, TWO_PI)
    if wrapped < 0:
        wrapped += TWO_PI
    # fmod of a tiny negative value can round up to exactly 2*pi
    if wrapped >= TWO_PI:
        wrapped -= TWO_PI
    return wrapped


def angle_between(p_from: PointLike, p_to: PointLike) -> float:
    """Direction (signed) of the vector from p_from to p_to."""
    a = as_point(p_from)
    b = as_point(p_to)
    return math.atan2(b.y - a.y, b.x - a.x)


def angle_difference(a: float, b: float) -> float:
    """Smallest signed difference a - b, wrapped to (-pi, pi]."""
    return wrap_pi(a - b)


# =============================================================================
# Vectors and frames
# =============================================================================

def advance(p: Point, direction: float, distance: float) -> Point:
    """Move a point by distance along a direction angle."""
    return Point(p.x + distance * math.cos(direction),
                 p.y + distance * math.sin(direction))


def distance(p1: PointLike, p2: PointLike) -> float:
    a = as_point(p1)
    b = as_point(p2)
    return math.hypot(a.x - b.x, a.y - b.y)


def rotate_vec(p: PointLike, angle: float) -> Point:
    """
    Rotate the given point as if it were a vector by the given angle in radians.

    Args:
        p: Point (as vector)
        angle: Rotation angle in radians

    Returns:
        Rotated vector
    """
    v = as_point(p)
    c = math.cos(angle)
    s = math.sin(angle)
    return Point(v.x * c - v.y * s, v.x * s + v.y * c)


def to_local(p: PointLike, center: PointLike, rotation: float) -> Point:
    """
    Express a world point in a body frame.

    Undoes the translation to `center`, then the rotation.
    """
    w = as_point(p)
    c = as_point(center)
    return rotate_vec(Point(w.x - c.x, w.y - c.y), -rotation)


def to_world(p: PointLike, center: PointLike, rotation: float) -> Point:
    """Inverse of to_local()."""
    r = rotate_vec(p, rotation)
    c = as_point(center)
    return Point(r.x + c.x, r.y + c.y)


def geometry_points(geom: BaseGeometry) -> List[Point]:
    """
    Flatten a Shapely intersection result into a list of points.

    Line intersections of a segment with a polygon outline come back as
    Point, MultiPoint, LineString (when the segment runs along an edge) or a
    GeometryCollection of those. Linear pieces contribute their endpoints.
    """
    if geom is None or geom.is_empty:
        return []
    kind = geom.geom_type
    if kind == 'Point':
        return [Point(geom.x, geom.y)]
    if kind in ('LineString', 'LinearRing'):
        return [Point(x, y) for x, y in geom.coords]
    if kind in ('MultiPoint', 'MultiLineString', 'GeometryCollection'):
        points: List[Point] = []
        for part in geom.geoms:
            points.extend(geometry_points(part))
        return points
    return []
