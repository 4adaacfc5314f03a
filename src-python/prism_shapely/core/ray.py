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

from typing import List, Optional, Dict, Any

from .geometry import Point, wrap_pi, advance


class Ray:
    """
    State of a single-wavelength ray while it is being traced.

    A Ray lives for one trace only: it is created at the light source,
    stepped through the scene, and discarded once its polyline has been
    handed over in a TraceResult.

    Attributes:
        point (Point): Current position.
        direction (float): Current direction in (-pi, pi].
        wavelength (float): Wavelength in nm.
        polyline (list): Visited points in time order (append-only).
        medium (str or None): element_id of the body the ray is inside,
            or None while in air.
        steps (int): Number of propagation steps taken so far.
    """

    def __init__(self, origin: Point, direction: float, wavelength: float):
        self.point = origin
        self.direction = wrap_pi(direction)
        self.wavelength = wavelength
        self.polyline: List[Point] = [origin]
        self.medium: Optional[str] = None
        self.steps = 0

    @property
    def in_air(self) -> bool:
        return self.medium is None

    def peek(self, step_size: float) -> Point:
        """The point one step ahead, without moving."""
        return advance(self.point, self.direction, step_size)

    def move_to(self, point: Point) -> None:
        """Advance to a point and record it."""
        self.point = point
        self.polyline.append(point)

    def turn(self, direction: float) -> None:
        self.direction = wrap_pi(direction)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'point': self.point.to_dict(),
            'direction': self.direction,
            'wavelength': self.wavelength,
            'medium': self.medium,
            'steps': self.steps,
            'points': len(self.polyline),
        }

    def __repr__(self) -> str:
        where = 'air' if self.medium is None else self.medium
        return (f"Ray(point=({self.point.x:.4f}, {self.point.y:.4f}), "
                f"direction={self.direction:.4f}, wavelength={self.wavelength}, in={where})")
