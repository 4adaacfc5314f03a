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

from . import geometry
from .geometry import PointLike
from .constants import DEFAULT_BOUNDS, DEFAULT_STEP_SIZE, MIN_STEP_SIZE, MAX_STEPS_CEILING
from .dispersion import DispersionModel
from .optical_element import OpticalElement
from .polygon_shape import PolygonShape, triangle, equilateral_triangle, rectangle


class LightSource:
    """
    The single light source of a scene.

    Attributes:
        position (Point): World point the ray leaves from.
        direction (float): Emission direction in (-pi, pi].
    """

    def __init__(self, position: PointLike = (0.0, 0.0), direction: float = 0.0):
        self.position = geometry.as_point(position)
        self.direction = geometry.wrap_pi(direction)

    def set_pose(self, position: PointLike, direction: float) -> None:
        p = geometry.as_point(position)
        if not (math.isfinite(p.x) and math.isfinite(p.y) and math.isfinite(direction)):
            raise ValueError(f"Pose must be finite, got position={p}, direction={direction}")
        self.position = p
        self.direction = geometry.wrap_pi(direction)

    def to_dict(self) -> Dict[str, Any]:
        return {'position': self.position.as_tuple(), 'direction': self.direction}

    def __repr__(self) -> str:
        return (f"LightSource(position=({self.position.x:.4g}, {self.position.y:.4g}), "
                f"direction={self.direction:.4g})")


class Scene:
    """
    Container for the optical elements, the light source and trace settings.

    Elements are kept in insertion order. Order has no physical meaning; it
    only decides which element is reported first when bodies overlap.

    Attributes:
        light_source (LightSource): The one light source.
        bounds (tuple): (xmin, ymin, xmax, ymax); a ray leaving this box is done.
        step_size (float): Propagation step length.
        max_steps (int or None): Cap on propagation steps per trace. None
            derives the cap from the bounds and step size.
        error (str or None): Error message from the most recent trace.
        warning (str or None): Warning message from the most recent trace.
        name (str or None): Optional name for the scene.

    Properties:
        elements (tuple): Elements in insertion order.
        crossing_bound (int): Boundary events allowed per trace
            (two per element: one in, one out).
        step_limit (int): Effective step cap (explicit or derived).
    """

    def __init__(
        self,
        bounds: Tuple[float, float, float, float] = DEFAULT_BOUNDS,
        step_size: float = DEFAULT_STEP_SIZE,
        max_steps: Optional[int] = None
    ):
        """Initialize an empty scene."""
        self._elements: Dict[str, OpticalElement] = {}
        self.light_source = LightSource()
        self.bounds = bounds
        self.step_size = step_size
        self.max_steps = max_steps
        self.error: Optional[str] = None
        self.warning: Optional[str] = None
        self.name: Optional[str] = None
        self._uuid: str = str(uuid_module.uuid4())

    # =========================================================================
    # Settings
    # =========================================================================

    @property
    def uuid(self) -> str:
        return self._uuid

    @property
    def bounds(self) -> Tuple[float, float, float, float]:
        """Get the scene bounds."""
        return self._bounds

    @bounds.setter
    def bounds(self, value) -> None:
        """Set the scene bounds with validation."""
        try:
            xmin, ymin, xmax, ymax = (float(v) for v in value)
        except (TypeError, ValueError):
            raise ValueError(f"bounds must be (xmin, ymin, xmax, ymax), got {value!r}")
        if not all(math.isfinite(v) for v in (xmin, ymin, xmax, ymax)):
            raise ValueError(f"bounds must be finite, got {value!r}")
        if xmin >= xmax or ymin >= ymax:
            raise ValueError(
                f"Invalid bounds {value!r}: need xmin < xmax and ymin < ymax"
            )
        self._bounds = (xmin, ymin, xmax, ymax)

    @property
    def step_size(self) -> float:
        """Get the propagation step length."""
        return self._step_size

    @step_size.setter
    def step_size(self, value: float) -> None:
        """Set the propagation step length with validation."""
        if not isinstance(value, (int, float)) or not math.isfinite(value) or value < MIN_STEP_SIZE:
            raise ValueError(
                f"step_size must be a finite number >= {MIN_STEP_SIZE}, got {value}"
            )
        self._step_size = float(value)

    @property
    def max_steps(self) -> Optional[int]:
        """Get the explicit step cap (None = automatic)."""
        return self._max_steps

    @max_steps.setter
    def max_steps(self, value: Optional[int]) -> None:
        """Set the step cap with validation."""
        if value is not None:
            if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
                raise ValueError(f"max_steps must be a positive integer or None, got {value}")
        self._max_steps = value

    @property
    def crossing_bound(self) -> int:
        return 2 * len(self._elements)

    @property
    def step_limit(self) -> int:
        """
        Effective cap on propagation steps for one trace.

        When max_steps is None, this allows crossing the bounds diagonal once
        per permitted boundary event plus once more, never above
        MAX_STEPS_CEILING. The cap is what stops a ray trapped by repeated
        total internal reflection.
        """
        if self._max_steps is not None:
            return self._max_steps
        xmin, ymin, xmax, ymax = self._bounds
        diagonal = math.hypot(xmax - xmin, ymax - ymin)
        per_leg = math.ceil(diagonal / self._step_size) + 1
        return min(MAX_STEPS_CEILING, per_leg * (self.crossing_bound + 2))

    def is_in_bounds(self, point: PointLike) -> bool:
        p = geometry.as_point(point)
        xmin, ymin, xmax, ymax = self._bounds
        return xmin <= p.x <= xmax and ymin <= p.y <= ymax

    # =========================================================================
    # Elements
    # =========================================================================

    @property
    def elements(self) -> Tuple[OpticalElement, ...]:
        return tuple(self._elements.values())

    def add_element(self, element: OpticalElement) -> str:
        """
        Add an element to the scene.

        Returns:
            The element id.

        Raises:
            ValueError: If another element already uses the same id.
        """
        if element.element_id in self._elements:
            raise ValueError(f"Duplicate element id '{element.element_id}'")
        self._elements[element.element_id] = element
        return element.element_id

    def get_element(self, element_id: str) -> OpticalElement:
        """
        Look up an element by id.

        Raises:
            KeyError: If no element has that id.
        """
        try:
            return self._elements[element_id]
        except KeyError:
            raise KeyError(f"No element with id '{element_id}'") from None

    def elements_containing(self, point: PointLike) -> List[OpticalElement]:
        """All elements whose closed outline holds the point, in scene order."""
        return [e for e in self._elements.values() if e.contains_world_point(point)]

    def set_element_pose(self, element_id: str, center: PointLike, rotation: float) -> None:
        """Move and rotate one element (called between traces)."""
        self.get_element(element_id).set_pose(center, rotation)

    def set_light_source_pose(self, position: PointLike, direction: float) -> None:
        """Move and aim the light source (called between traces)."""
        self.light_source.set_pose(position, direction)

    # =========================================================================
    # Layout
    # =========================================================================

    @classmethod
    def from_layout(cls, layout: Dict[str, Any]) -> 'Scene':
        """
        Build a scene from an in-memory layout description.

        Layout keys:
            bounds, step_size, max_steps, name (all optional)
            light_source: {'position': (x, y), 'direction': radians}
            elements: list of {
                'kind': 'prism' | 'slab' | 'mirror',
                'shape': {'type': 'triangle', 'base': b, 'height': h}
                       | {'type': 'equilateral', 'side': s}
                       | {'type': 'rectangle', 'width': w, 'height': h},
                  or 'vertices': [(x, y), ...],
                'center': (x, y), 'rotation': radians,
                'id', 'name', 'dispersion' (all optional)
            }

        Raises:
            ValueError: On an unknown shape type or invalid values.
        """
        scene = cls(
            bounds=layout.get('bounds', DEFAULT_BOUNDS),
            step_size=layout.get('step_size', DEFAULT_STEP_SIZE),
            max_steps=layout.get('max_steps'),
        )
        scene.name = layout.get('name')

        source = layout.get('light_source')
        if source is not None:
            scene.set_light_source_pose(source['position'], source.get('direction', 0.0))

        for entry in layout.get('elements', []):
            dispersion = entry.get('dispersion')
            element = OpticalElement(
                _shape_from_layout(entry),
                kind=entry.get('kind', 'prism'),
                center=entry.get('center', (0.0, 0.0)),
                rotation=entry.get('rotation', 0.0),
                element_id=entry.get('id'),
                dispersion=DispersionModel.from_dict(dispersion) if dispersion else None,
                name=entry.get('name'),
            )
            scene.add_element(element)
        return scene

    def to_layout(self) -> Dict[str, Any]:
        """Layout description that from_layout() turns back into this scene."""
        return {
            'name': self.name,
            'bounds': self._bounds,
            'step_size': self._step_size,
            'max_steps': self._max_steps,
            'light_source': self.light_source.to_dict(),
            'elements': [e.to_dict() for e in self._elements.values()],
        }

    def __repr__(self) -> str:
        return f"Scene(elements={len(self._elements)}, bounds={self._bounds}, step_size={self._step_size})"


def _shape_from_layout(entry: Dict[str, Any]) -> PolygonShape:
    if 'vertices' in entry:
        return PolygonShape(entry['vertices'])
    spec = entry.get('shape')
    if not spec:
        raise ValueError("Layout element needs 'vertices' or 'shape'")
    shape_type = spec.get('type')
    if shape_type == 'triangle':
        return triangle(spec['base'], spec['height'])
    if shape_type == 'equilateral':
        return equilateral_triangle(spec['side'])
    if shape_type == 'rectangle':
        return rectangle(spec['width'], spec['height'])
    raise ValueError(f"Unknown shape type '{shape_type}'")
