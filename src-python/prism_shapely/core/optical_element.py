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
import uuid as uuid_module
from typing import Any, Dict, List, Optional, Tuple

from shapely import affinity
from shapely.geometry import Polygon

from . import geometry
from .geometry import Point, PointLike
from .polygon_shape import PolygonShape
from .dispersion import DispersionModel, GLASS


class OpticalElement:
    """
    A polygonal optical body placed in the scene.

    Wraps a PolygonShape (local coordinates) with a world pose and a material
    kind. The pose is mutable so that an interaction layer can move and rotate
    the body between traces; the shape never changes.

    Attributes:
        shape (PolygonShape): Outline in local coordinates.
        kind (str): 'prism', 'slab' (both refract) or 'mirror' (reflects only).
        center (Point): World position of the local origin.
        rotation (float): Counterclockwise rotation in radians.
        element_id (str): Identifier, unique within a scene.
        name (str or None): Optional display name.
        dispersion (DispersionModel): Index model for transparent kinds.

    Notes:
        - Queries are pure: they read the current pose and never modify it.
        - A mirror's reflecting face normal points along its rotation angle,
          so an unrotated mirror is a vertical plate.
    """

    # Valid material kinds
    VALID_KINDS = ('prism', 'slab', 'mirror')
    TRANSPARENT_KINDS = ('prism', 'slab')

    def __init__(
        self,
        shape: PolygonShape,
        kind: str = 'prism',
        center: PointLike = (0.0, 0.0),
        rotation: float = 0.0,
        element_id: Optional[str] = None,
        dispersion: Optional[DispersionModel] = None,
        name: Optional[str] = None
    ):
        if not isinstance(shape, PolygonShape):
            raise ValueError(f"shape must be a PolygonShape, got {type(shape).__name__}")
        self.shape = shape
        self.kind = kind
        self.center = geometry.as_point(center)
        self.rotation = float(rotation)
        self.element_id = element_id if element_id is not None else str(uuid_module.uuid4())
        self.dispersion = dispersion if dispersion is not None else GLASS
        self.name = name
        self._world_polygon_cache: Optional[Tuple[Tuple[float, float, float], Polygon]] = None

    @property
    def kind(self) -> str:
        """Get the material kind."""
        return self._kind

    @kind.setter
    def kind(self, value: str) -> None:
        """Set the material kind with validation."""
        if value not in self.VALID_KINDS:
            raise ValueError(
                f"Invalid kind '{value}'. "
                f"Valid options: {self.VALID_KINDS}"
            )
        self._kind = value

    @property
    def is_mirror(self) -> bool:
        return self._kind == 'mirror'

    @property
    def is_transparent(self) -> bool:
        return self._kind in self.TRANSPARENT_KINDS

    def set_pose(self, center: PointLike, rotation: float) -> None:
        """Move the element to a new world pose."""
        c = geometry.as_point(center)
        if not (math.isfinite(c.x) and math.isfinite(c.y) and math.isfinite(rotation)):
            raise ValueError(f"Pose must be finite, got center={c}, rotation={rotation}")
        self.center = c
        self.rotation = float(rotation)

    # =========================================================================
    # World-space queries
    # =========================================================================

    def to_local(self, point: PointLike) -> Point:
        return geometry.to_local(point, self.center, self.rotation)

    def to_world(self, point: PointLike) -> Point:
        return geometry.to_world(point, self.center, self.rotation)

    def contains_world_point(self, point: PointLike) -> bool:
        """True if a world point lies inside the element (outline included)."""
        return self.shape.contains(self.to_local(point))

    def surface_normal_at_world_point(self, point: PointLike) -> Optional[float]:
        """
        Inward surface normal at a world boundary point.

        The point is taken into the local frame, the edge is found from its
        angle about the shape centroid, and the edge normal is rotated back
        into the world frame.

        Returns:
            Normal direction in (-pi, pi], or None if no edge normal exists.
        """
        local_normal = self.shape.surface_normal_at(self.to_local(point))
        if local_normal is None:
            return None
        return geometry.wrap_pi(local_normal + self.rotation)

    def world_vertices(self) -> List[Point]:
        return [self.to_world(v) for v in self.shape.vertices]

    def world_center(self) -> Point:
        """World position of the shape centroid."""
        return self.to_world(self.shape.centroid)

    def world_polygon(self) -> Polygon:
        """
        The outline as a Shapely polygon in world coordinates.

        Cached per pose, since the tracer queries it on every step.
        """
        key = (self.center.x, self.center.y, self.rotation)
        if self._world_polygon_cache is not None and self._world_polygon_cache[0] == key:
            return self._world_polygon_cache[1]
        poly = affinity.rotate(self.shape.polygon, self.rotation, origin=(0, 0), use_radians=True)
        poly = affinity.translate(poly, xoff=self.center.x, yoff=self.center.y)
        self._world_polygon_cache = (key, poly)
        return poly

    # =========================================================================
    # Material
    # =========================================================================

    def refractive_index(self, wavelength_nm: float) -> float:
        """
        Index of the element material at a wavelength.

        Raises:
            ValueError: For mirrors, which do not transmit light.
        """
        if self.is_mirror:
            raise ValueError(f"Element '{self.element_id}' is a mirror and has no refractive index")
        return self.dispersion.refractive_index(wavelength_nm)

    def to_dict(self) -> Dict[str, Any]:
        """Layout entry for this element (see Scene.to_layout)."""
        return {
            'id': self.element_id,
            'kind': self._kind,
            'name': self.name,
            'vertices': [v.as_tuple() for v in self.shape.vertices],
            'center': self.center.as_tuple(),
            'rotation': self.rotation,
            'dispersion': self.dispersion.to_dict(),
        }

    def __repr__(self) -> str:
        return (f"OpticalElement(id={self.element_id!r}, kind={self._kind!r}, "
                f"center=({self.center.x:.4g}, {self.center.y:.4g}), rotation={self.rotation:.4g})")
