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

"""
Snell's law and the reflection laws in angle form.

Directions and normals are plain angles in radians. Every result is wrapped
to (-pi, pi] so that comparisons stay well defined across the +/-pi seam.
"""

import math
from typing import NamedTuple

from .geometry import wrap_pi

REFRACTED = 'refracted'
TIR = 'total_internal_reflection'


class RefractionOutcome(NamedTuple):
    """
    Result of a boundary crossing attempt.

    Attributes:
        direction: Outgoing direction in (-pi, pi].
        kind: REFRACTED or TIR.
    """
    direction: float
    kind: str

    @property
    def is_tir(self) -> bool:
        return self.kind == TIR


def angle_of_incidence(incoming: float, normal: float) -> float:
    """
    Signed angle between the surface normal and the incoming direction.

    The normal must point along the direction of travel (into the medium
    being entered). Zero means normal incidence.
    """
    return wrap_pi(wrap_pi(normal) - wrap_pi(incoming))


def reflect_about_normal(incoming: float, normal: float) -> float:
    """
    Specular reflection of a direction off a surface with the given normal.

    The normal component of the direction is reversed and the tangential
    component kept: outgoing = pi - incoming + 2 * normal.
    """
    return wrap_pi(math.pi - wrap_pi(incoming) + 2 * wrap_pi(normal))


def mirror_reflection(incoming: float, mirror_rotation: float) -> float:
    """
    Reflection off a mirror element.

    The mirror face normal lies along the element rotation, so the rotation
    is used directly as the reflecting normal.
    """
    return reflect_about_normal(incoming, mirror_rotation)


def critical_angle(n_from: float, n_to: float) -> float:
    """
    Critical angle in radians for light going from n_from into n_to.

    Raises:
        ValueError: If n_from <= n_to (TIR impossible).
    """
    if n_from <= n_to:
        raise ValueError(
            f"TIR impossible: n_from ({n_from}) must be > n_to ({n_to})"
        )
    return math.asin(n_to / n_from)


def refracted_direction(
    incoming: float,
    surface_normal: float,
    relative_index: float,
    is_entering: bool
) -> RefractionOutcome:
    """
    Outgoing direction of a ray crossing a boundary (Snell's law in 2D).

    Args:
        incoming: Direction of the incoming ray.
        surface_normal: Inward normal of the element at the boundary point.
        relative_index: n_from / n_to for this crossing
            (n_air / n_glass when entering, n_glass / n_air when exiting).
        is_entering: True when the ray goes into the element. When exiting,
            the inward normal is flipped so it faces along the travel.

    Returns:
        RefractionOutcome with the new direction. When
        |relative_index * sin(incidence)| > 1 the ray is totally internally
        reflected and the outcome is tagged TIR.

    Raises:
        ValueError: If relative_index is not a positive finite number.
    """
    if not math.isfinite(relative_index) or relative_index <= 0:
        raise ValueError(f"relative_index must be > 0, got {relative_index}")

    normal = wrap_pi(surface_normal if is_entering else surface_normal + math.pi)
    incidence = angle_of_incidence(incoming, normal)
    sin_refraction = relative_index * math.sin(incidence)

    if abs(sin_refraction) > 1.0:
        return RefractionOutcome(reflect_about_normal(incoming, normal), TIR)

    return RefractionOutcome(wrap_pi(normal - math.asin(sin_refraction)), REFRACTED)
