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
from typing import List, Optional, Sequence, Tuple

import numpy as np
from shapely.geometry import MultiPoint, Polygon

from . import geometry
from .geometry import Point, PointLike
from .constants import AREA_TOLERANCE


class PolygonShape:
    """
    An immutable convex polygon in local (unrotated) body coordinates.

    The vertices are stored in ascending order of their angle as seen from
    the centroid (unsigned, 0..2*pi). In the math convention (y up) that is
    counterclockwise; on a y-down screen the same list reads clockwise,
    starting from the vertex nearest local east.

    Edge i joins vertex i-1 to vertex i, so edge 0 is the wrap-around edge
    from the last vertex back to the first. Each edge owns the half-open
    angular interval (angle[i-1], angle[i]] and carries the direction of its
    inward-pointing unit normal.

    Attributes:
        vertices (list): Vertices as Point objects, sorted by centroid angle.
        vertex_angles (list): Unsigned centroid angle of each vertex (ascending).
        normal_directions (list): Inward normal angle of each edge, signed range,
            or None where the edge is degenerate (zero length / zero area).
        centroid (Point): Area centroid (vertex mean for zero-area outlines).
        polygon (shapely.geometry.Polygon): Shapely polygon in local coordinates.
    """

    def __init__(self, vertices: Sequence[PointLike]):
        """
        Build a shape from its outline.

        Args:
            vertices: At least three (x, y) vertices of a convex outline, in
                traversal order (either orientation).

        Raises:
            ValueError: If fewer than three vertices are given, a coordinate
                is not finite, or the outline is not convex and simple.
        """
        coords = np.asarray([tuple(geometry.as_point(v)) for v in vertices], dtype=float)
        if coords.ndim != 2 or len(coords) < 3:
            raise ValueError(f"A polygon shape needs at least 3 vertices, got {len(coords)}")
        if not np.all(np.isfinite(coords)):
            raise ValueError("Polygon vertices must have finite coordinates")

        hull = MultiPoint([tuple(c) for c in coords]).convex_hull
        self._degenerate = hull.area <= AREA_TOLERANCE

        if not self._degenerate:
            outline = Polygon(coords)
            if not outline.is_valid:
                raise ValueError("Polygon outline is self-intersecting")
            if abs(outline.area - hull.area) > AREA_TOLERANCE * max(1.0, hull.area):
                raise ValueError("Polygon outline is not convex")
            c = outline.centroid
            centroid = (c.x, c.y)
        else:
            centroid = tuple(coords.mean(axis=0))

        self._centroid = Point(*centroid)

        # Same atan2 as the boundary-point queries, so vertex hits tie-break exactly
        angles = [
            geometry.wrap_2pi(math.atan2(y - centroid[1], x - centroid[0]))
            for x, y in coords.tolist()
        ]
        order = sorted(range(len(angles)), key=lambda i: angles[i])

        self._vertices: Tuple[Point, ...] = tuple(Point(*coords[i]) for i in order)
        self._vertex_angles: Tuple[float, ...] = tuple(angles[i] for i in order)
        self._polygon = Polygon([v.as_tuple() for v in self._vertices])
        self._normal_directions: Tuple[Optional[float], ...] = tuple(
            self._inward_normal(i) for i in range(len(self._vertices))
        )

    # =========================================================================
    # Derived geometry
    # =========================================================================

    def _inward_normal(self, edge_index: int) -> Optional[float]:
        """Inward normal angle of edge (vertex[i-1] -> vertex[i]), or None."""
        start = self._vertices[edge_index - 1]
        end = self._vertices[edge_index]
        dx = end.x - start.x
        dy = end.y - start.y
        if math.hypot(dx, dy) <= AREA_TOLERANCE:
            return None

        # Perpendicular to the edge, flipped to face the centroid
        nx, ny = -dy, dx
        to_centroid_x = self._centroid.x - (start.x + end.x) / 2
        to_centroid_y = self._centroid.y - (start.y + end.y) / 2
        facing = nx * to_centroid_x + ny * to_centroid_y
        if abs(facing) <= AREA_TOLERANCE:
            return None
        if facing < 0:
            nx, ny = -nx, -ny
        return math.atan2(ny, nx)

    @property
    def vertices(self) -> List[Point]:
        return list(self._vertices)

    @property
    def vertex_angles(self) -> List[float]:
        return list(self._vertex_angles)

    @property
    def normal_directions(self) -> List[Optional[float]]:
        return list(self._normal_directions)

    @property
    def centroid(self) -> Point:
        return self._centroid

    @property
    def polygon(self) -> Polygon:
        return self._polygon

    @property
    def area(self) -> float:
        return 0.0 if self._degenerate else self._polygon.area

    @property
    def is_degenerate(self) -> bool:
        """True for zero-area outlines (all vertices collinear)."""
        return self._degenerate

    @property
    def bounding_radius(self) -> float:
        """Radius of the smallest centroid-centred circle holding every vertex."""
        return max(geometry.distance(self._centroid, v) for v in self._vertices)

    def __len__(self) -> int:
        return len(self._vertices)

    def __repr__(self) -> str:
        verts = ', '.join(f"({v.x:.3g}, {v.y:.3g})" for v in self._vertices)
        return f"PolygonShape([{verts}])"

    # =========================================================================
    # Queries
    # =========================================================================

    def contains(self, point: PointLike) -> bool:
        """
        Test whether a local point lies in the closed polygon.

        Points on the outline count as inside.
        """
        p = geometry.as_point(point)
        if self._degenerate:
            return False
        return self._polygon.covers(p.to_shapely())

    def edge_index_for_angle(self, angle: float) -> int:
        """
        Index of the edge owning a centroid angle.

        The angle is located in the circular interval between two consecutive
        vertex angles. An angle equal to a vertex angle belongs to the edge
        whose interval it closes; angles past the last vertex wrap to edge 0.
        """
        a = geometry.wrap_2pi(angle)
        for index, vertex_angle in enumerate(self._vertex_angles):
            if a <= vertex_angle:
                return index
        return 0

    def surface_normal_toward_interior(self, angle: float) -> Optional[float]:
        """
        Inward normal direction of the edge seen at a given centroid angle.

        Args:
            angle: Angle (local frame) from the centroid to a boundary point.

        Returns:
            The inward unit-normal angle in (-pi, pi], or None when the edge
            is degenerate or the angle is not a number.
        """
        if math.isnan(angle):
            return None
        normal = self._normal_directions[self.edge_index_for_angle(angle)]
        if normal is None:
            return None
        return geometry.wrap_pi(normal)

    def surface_normal_at(self, point: PointLike) -> Optional[float]:
        """Inward normal at a local boundary point (see surface_normal_toward_interior)."""
        p = geometry.as_point(point)
        if geometry.distance(p, self._centroid) == 0.0:
            return None
        return self.surface_normal_toward_interior(geometry.angle_between(self._centroid, p))

    def edge_endpoints(self, edge_index: int) -> Tuple[Point, Point]:
        """Start and end vertex of an edge."""
        n = len(self._vertices)
        return self._vertices[(edge_index - 1) % n], self._vertices[edge_index % n]


# =============================================================================
# Standard outlines
# =============================================================================

def triangle(base: float, height: float) -> PolygonShape:
    """
    Isosceles triangle with its base on the bottom, centred on the bounding box.

    This is the prism shape of a dispersing prism laid flat on its base.
    """
    if base <= 0 or height <= 0:
        raise ValueError(f"Triangle base and height must be > 0, got {base}, {height}")
    return PolygonShape([
        (base / 2, -height / 2),
        (0.0, height / 2),
        (-base / 2, -height / 2),
    ])


def equilateral_triangle(side: float) -> PolygonShape:
    """Equilateral triangle (60-60-60) with a horizontal base."""
    if side <= 0:
        raise ValueError(f"Side length must be > 0, got {side}")
    return triangle(side, side * math.sqrt(3) / 2)


def rectangle(width: float, height: float) -> PolygonShape:
    """Axis-aligned rectangle centred on the origin."""
    if width <= 0 or height <= 0:
        raise ValueError(f"Rectangle width and height must be > 0, got {width}, {height}")
    w = width / 2
    h = height / 2
    return PolygonShape([(w, -h), (w, h), (-w, h), (-w, -h)])
