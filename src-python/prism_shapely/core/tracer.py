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
import numbers
from dataclasses import dataclass, field
from typing import Iterable, List, NamedTuple, Optional, Union, TYPE_CHECKING

from shapely.geometry import LineString, Polygon

from . import geometry
from .geometry import Point
from .constants import N_AIR, MIN_CROSSING_DISTANCE
from .ray import Ray
from .refraction import refracted_direction, mirror_reflection, reflect_about_normal

if TYPE_CHECKING:
    from .scene import Scene
    from .optical_element import OpticalElement


class TerminalReason:
    """Why a trace stopped."""
    OFF_SCREEN = 'off_screen'
    OVERLAP_DETECTED = 'overlap_detected'
    NO_SURFACE_NORMAL = 'no_surface_normal'
    CROSSING_LIMIT = 'crossing_limit'
    STEP_LIMIT = 'step_limit'
    STARTS_INSIDE = 'starts_inside'

    # Reasons that signal a broken scene rather than a finished ray
    ERRORS = (OVERLAP_DETECTED, NO_SURFACE_NORMAL)
    # Reasons where the path was cut short by a safety cap
    TRUNCATED = (CROSSING_LIMIT, STEP_LIMIT)


@dataclass
class TraceEvent:
    """
    One interaction of the ray with an element boundary.

    Attributes:
        kind: 'enter', 'exit', 'tir' (reflected inside the element),
            'reflect' (reflected off the outside of a transparent element)
            or 'mirror'.
        element_id: The element whose boundary was hit.
        point: Boundary point.
        direction_in: Direction before the event.
        direction_out: Direction after the event.
    """
    kind: str
    element_id: str
    point: Point
    direction_in: float
    direction_out: float

    @property
    def deviation(self) -> float:
        """Signed change of direction at this event, in (-pi, pi]."""
        return geometry.angle_difference(self.direction_out, self.direction_in)


@dataclass
class TraceResult:
    """
    Outcome of tracing one wavelength through a scene.

    Attributes:
        wavelength: Wavelength in nm.
        polyline: Points visited, in time order. Empty when the ray starts
            inside an element.
        reason: A TerminalReason value.
        events: Boundary interactions in time order.
        final_direction: Ray direction when the trace stopped.
        error: Human-readable message for error and truncation reasons.
    """
    wavelength: float
    polyline: List[Point]
    reason: str
    events: List[TraceEvent] = field(default_factory=list)
    final_direction: Optional[float] = None
    error: Optional[str] = None

    @property
    def is_error(self) -> bool:
        return self.reason in TerminalReason.ERRORS

    @property
    def succeeded(self) -> bool:
        """True when the ray produced a usable path (possibly truncated)."""
        return not self.is_error and self.reason != TerminalReason.STARTS_INSIDE

    @property
    def is_visible(self) -> bool:
        return len(self.polyline) > 1

    def events_of_kind(self, kind: str) -> List[TraceEvent]:
        return [e for e in self.events if e.kind == kind]

    def to_dict(self) -> dict:
        return {
            'wavelength': self.wavelength,
            'reason': self.reason,
            'error': self.error,
            'final_direction': self.final_direction,
            'polyline': [p.as_tuple() for p in self.polyline],
            'events': [
                {
                    'kind': e.kind,
                    'element_id': e.element_id,
                    'point': e.point.as_tuple(),
                    'direction_in': e.direction_in,
                    'direction_out': e.direction_out,
                }
                for e in self.events
            ],
        }


class _Boundary(NamedTuple):
    element: 'OpticalElement'
    point: Point


class Tracer:
    """
    Steps a single-wavelength ray through a scene.

    The ray alternates between two phases: propagation through a homogeneous
    medium (air, or the inside of one element) in fixed steps, and a boundary
    event where the direction changes by refraction, total internal
    reflection or mirror reflection.

    Each step is a short segment; the first place where the segment crosses
    an element outline is found with Shapely, so boundary points are exact
    rather than the nearest step point.

    Two caps keep the walk finite:
    - crossing_bound: boundary events (enter, exit, mirror) allowed per trace,
      two per element. TIR inside an element does not count.
    - step_limit: propagation steps per trace, independent of the crossings.

    Attributes:
        scene (Scene): The scene to trace through. Poses are read-only while
            a trace runs.
        verbose (int): Verbosity level
            0 = silent
            1 = boundary events and terminal reason
            2 = every propagation step
    """

    def __init__(self, scene: 'Scene', verbose: int = 0) -> None:
        self.scene: 'Scene' = scene
        self.verbose: int = verbose

    # =========================================================================
    # Public entry points
    # =========================================================================

    def trace(self, wavelength: float) -> TraceResult:
        """
        Trace the light source's ray at one wavelength.

        Args:
            wavelength: Wavelength in nm.

        Returns:
            TraceResult with the polyline and terminal reason. Geometric
            problems are reported through the result, never raised.

        Raises:
            ValueError: If the wavelength is not a positive finite number.
        """
        if isinstance(wavelength, bool) or not isinstance(wavelength, numbers.Real):
            raise ValueError(f"Wavelength must be a positive number of nm, got {wavelength!r}")
        if not math.isfinite(float(wavelength)) or wavelength <= 0:
            raise ValueError(f"Wavelength must be a positive number of nm, got {wavelength}")

        scene = self.scene
        scene.error = None
        scene.warning = None
        source = scene.light_source

        if self.verbose >= 1:
            print(f"\n### TRACER wavelength={wavelength} nm")
            print(f"  source=({source.position.x:.4f}, {source.position.y:.4f}) "
                  f"direction={source.direction:.4f}")

        if scene.elements_containing(source.position):
            return self._finish(
                TraceResult(wavelength, [], TerminalReason.STARTS_INSIDE,
                            final_direction=source.direction)
            )

        ray = Ray(source.position, source.direction, wavelength)
        events: List[TraceEvent] = []

        if not scene.is_in_bounds(ray.point):
            return self._result(ray, events, TerminalReason.OFF_SCREEN)

        crossings = 0
        bound = scene.crossing_bound
        step_limit = scene.step_limit

        while True:
            if ray.in_air:
                outcome = self._propagate_in_air(ray, step_limit)
            else:
                outcome = self._propagate_inside(ray, step_limit)

            if isinstance(outcome, str):
                return self._result(ray, events, outcome)

            if crossings >= bound:
                ray.move_to(outcome.point)
                return self._result(
                    ray, events, TerminalReason.CROSSING_LIMIT,
                    f"Stopped after {crossings} boundary crossings (limit {bound})"
                )

            terminal = self._cross_boundary(ray, outcome, events)
            if terminal is not None:
                reason, message = terminal
                return self._result(ray, events, reason, message)
            if events[-1].kind != 'tir':
                crossings += 1

    def trace_spectrum(self, wavelengths: Iterable[float]) -> List[TraceResult]:
        """
        Trace the same scene once per wavelength.

        Each wavelength is independent: an error in one trace does not stop
        the others. scene.error / scene.warning keep the first message seen.

        Returns:
            One TraceResult per wavelength, in the order given.
        """
        results: List[TraceResult] = []
        first_error = None
        first_warning = None
        for wavelength in wavelengths:
            result = self.trace(wavelength)
            results.append(result)
            if first_error is None and self.scene.error:
                first_error = self.scene.error
            if first_warning is None and self.scene.warning:
                first_warning = self.scene.warning
        self.scene.error = first_error
        self.scene.warning = first_warning
        return results

    # =========================================================================
    # Propagation
    # =========================================================================

    def _propagate_in_air(self, ray: Ray, step_limit: int) -> Union[str, _Boundary]:
        """Step through air until an element is hit or the ray leaves the scene."""
        scene = self.scene
        step = scene.step_size
        while ray.steps < step_limit:
            target = ray.peek(step)
            ray.steps += 1
            hit = self._first_entry(ray.point, target)
            if hit is not None and scene.is_in_bounds(hit.point):
                return hit
            ray.move_to(target)
            if self.verbose >= 2:
                print(f"    air step {ray.steps}: ({target.x:.4f}, {target.y:.4f})")
            if not scene.is_in_bounds(target):
                return TerminalReason.OFF_SCREEN
        return TerminalReason.STEP_LIMIT

    def _propagate_inside(self, ray: Ray, step_limit: int) -> Union[str, _Boundary]:
        """Step through the current element until the ray reaches its outline."""
        scene = self.scene
        step = scene.step_size
        element = scene.get_element(ray.medium)
        poly = element.world_polygon()
        while ray.steps < step_limit:
            target = ray.peek(step)
            ray.steps += 1
            exit_point = _first_crossing(poly, ray.point, target)
            if exit_point is None and not poly.covers(target.to_shapely()):
                # Already heading out from the boundary point itself
                exit_point = ray.point
            if exit_point is not None:
                return _Boundary(element, exit_point)
            ray.move_to(target)
            if self.verbose >= 2:
                print(f"    step {ray.steps} in '{element.element_id}': ({target.x:.4f}, {target.y:.4f})")
            if not scene.is_in_bounds(target):
                return TerminalReason.OFF_SCREEN
        return TerminalReason.STEP_LIMIT

    def _first_entry(self, start: Point, end: Point) -> Optional[_Boundary]:
        """Nearest element outline crossed by the step segment, if any."""
        step = geometry.distance(start, end)
        best: Optional[_Boundary] = None
        best_distance = math.inf
        for element in self.scene.elements:
            reach = element.shape.bounding_radius + step
            if geometry.distance(start, element.world_center()) > reach:
                continue
            poly = element.world_polygon()
            point = _first_crossing(poly, start, end)
            if point is None and element.contains_world_point(end):
                # Sitting on the outline and pointing inward
                point = start
            if point is None:
                continue
            d = geometry.distance(start, point)
            if d < best_distance:
                best = _Boundary(element, point)
                best_distance = d
        return best

    # =========================================================================
    # Boundary events
    # =========================================================================

    def _cross_boundary(self, ray: Ray, boundary: _Boundary, events: List[TraceEvent]):
        """
        Apply the boundary rule for the element that was reached.

        Updates the ray direction and medium in place and appends a
        TraceEvent. Returns None to continue, or (reason, message) to stop.
        """
        element, point = boundary
        if point != ray.point:
            ray.move_to(point)

        others = [e for e in self.scene.elements_containing(point) if e is not element]
        if others:
            if ray.in_air:
                message = (f"Ray entered '{element.element_id}' inside "
                           f"'{others[0].element_id}' at ({point.x:.4f}, {point.y:.4f})")
            else:
                message = (f"Ray left '{element.element_id}' directly into "
                           f"'{others[0].element_id}' at ({point.x:.4f}, {point.y:.4f})")
            return TerminalReason.OVERLAP_DETECTED, message

        direction_in = ray.direction

        if ray.in_air and element.is_mirror:
            direction_out = mirror_reflection(direction_in, element.rotation)
            normal = element.surface_normal_at_world_point(point)
            if normal is not None and math.cos(direction_out - normal) > 0:
                # Hit on an end of the plate: reflect off that edge instead
                direction_out = reflect_about_normal(direction_in, normal)
            ray.turn(direction_out)
            self._record(events, 'mirror', element, point, direction_in, ray.direction)
            return None

        normal = element.surface_normal_at_world_point(point)
        if normal is None:
            return (TerminalReason.NO_SURFACE_NORMAL,
                    f"No surface normal on '{element.element_id}' at ({point.x:.4f}, {point.y:.4f})")

        n_glass = element.refractive_index(ray.wavelength)

        if ray.in_air:
            outcome = refracted_direction(direction_in, normal, N_AIR / n_glass, True)
            ray.turn(outcome.direction)
            if outcome.is_tir:
                # Only possible for a material optically thinner than air
                self._record(events, 'reflect', element, point, direction_in, ray.direction)
            else:
                ray.medium = element.element_id
                self._record(events, 'enter', element, point, direction_in, ray.direction)
        else:
            outcome = refracted_direction(direction_in, normal, n_glass / N_AIR, False)
            ray.turn(outcome.direction)
            if outcome.is_tir:
                self._record(events, 'tir', element, point, direction_in, ray.direction)
            else:
                ray.medium = None
                self._record(events, 'exit', element, point, direction_in, ray.direction)

        if self.verbose >= 2:
            print(f"    normal={normal:.4f} n={n_glass:.5f}")
        return None

    def _record(self, events: List[TraceEvent], kind: str, element: 'OpticalElement',
                point: Point, direction_in: float, direction_out: float) -> None:
        events.append(TraceEvent(kind, element.element_id, point, direction_in, direction_out))
        if self.verbose >= 1:
            print(f"  {kind:>7} '{element.element_id}' at ({point.x:.4f}, {point.y:.4f}): "
                  f"{direction_in:.4f} -> {direction_out:.4f}")

    # =========================================================================
    # Results
    # =========================================================================

    def _result(self, ray: Ray, events: List[TraceEvent], reason: str,
                message: Optional[str] = None) -> TraceResult:
        if message is None and reason == TerminalReason.STEP_LIMIT:
            message = f"Stopped after {ray.steps} propagation steps"
        return self._finish(TraceResult(
            wavelength=ray.wavelength,
            polyline=ray.polyline,
            reason=reason,
            events=events,
            final_direction=ray.direction,
            error=message,
        ))

    def _finish(self, result: TraceResult) -> TraceResult:
        if result.is_error:
            self.scene.error = result.error
        elif result.reason in TerminalReason.TRUNCATED:
            self.scene.warning = result.error
        if self.verbose >= 1:
            print(f"  -> {result.reason} ({len(result.polyline)} points, {len(result.events)} events)")
            if result.error:
                print(f"     {result.error}")
        return result


def _first_crossing(poly: Polygon, start: Point, end: Point) -> Optional[Point]:
    """
    First point where the segment start->end meets the polygon outline.

    Points within MIN_CROSSING_DISTANCE of start are ignored: that is the
    boundary the ray is currently sitting on.
    """
    segment = LineString([start.as_tuple(), end.as_tuple()])
    outline = poly.exterior
    if not segment.intersects(outline):
        return None
    best = None
    best_distance = math.inf
    for p in geometry.geometry_points(segment.intersection(outline)):
        d = geometry.distance(start, p)
        if MIN_CROSSING_DISTANCE < d < best_distance:
            best = p
            best_distance = d
    return best


# =============================================================================
# Module-level entry points
# =============================================================================

def trace(scene: 'Scene', wavelength: float, verbose: int = 0) -> TraceResult:
    """Trace the scene's light source at one wavelength."""
    return Tracer(scene, verbose=verbose).trace(wavelength)


def trace_spectrum(scene: 'Scene', wavelengths: Iterable[float], verbose: int = 0) -> List[TraceResult]:
    """Trace the scene's light source once per wavelength."""
    return Tracer(scene, verbose=verbose).trace_spectrum(wavelengths)
