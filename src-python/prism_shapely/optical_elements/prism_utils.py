"""
Copyright 2026 prism-shapely authors and contributors

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at

    http://www.apache.org/licenses/LICENSE-2.0

===============================================================================
PRISM UTILITIES
===============================================================================
Closed-form prism optics, in radians:
- Deviation at arbitrary incidence (Snell's law applied at both faces)
- Minimum deviation and the index it implies
- Angular spread of a spectrum through a prism

These let a designer predict what the tracer should produce without
running a trace.
===============================================================================
"""

from __future__ import annotations

import math
from typing import Dict, Iterable

from ..core.dispersion import DispersionModel, GLASS
from ..core.refraction import critical_angle


def exit_angle_through_prism(apex_angle: float, n: float, theta_i: float) -> float:
    """
    Angle of the emerging ray from the exit-face normal.

    Args:
        apex_angle: Prism apex angle in radians.
        n: Refractive index of the prism (surrounded by air).
        theta_i: Angle of incidence at the entry face.

    Returns:
        Exit angle in radians, or float('nan') when the ray is totally
        internally reflected at the exit face.
    """
    r1 = math.asin(math.sin(theta_i) / n)
    sin_theta_t = n * math.sin(apex_angle - r1)
    if abs(sin_theta_t) > 1.0:
        return float('nan')
    return math.asin(sin_theta_t)


def deviation_at_incidence(apex_angle: float, n: float, theta_i: float) -> float:
    """
    Total deviation for a ray crossing a prism at a given incidence.

    Applies Snell's law at the entry face and again at the exit face.

    Args:
        apex_angle: Prism apex angle in radians.
        n: Refractive index of the prism (surrounded by air).
        theta_i: Angle of incidence at the entry face, from its normal.

    Returns:
        Total deviation in radians (theta_i + theta_t - apex_angle).
        Returns float('nan') if the ray is totally internally reflected at
        the exit face.

    Example:
        >>> math.degrees(deviation_at_incidence(math.radians(60), 1.5, math.radians(48.59)))
        37.18...
    """
    return theta_i + exit_angle_through_prism(apex_angle, n, theta_i) - apex_angle


def minimum_deviation(apex_angle: float, n: float) -> float:
    """
    Minimum deviation angle (radians) of a prism.

    Formula: D_min = 2 * arcsin(n * sin(A/2)) - A

    Raises:
        ValueError: If n * sin(A/2) > 1 (no ray gets through symmetrically).
    """
    arg = n * math.sin(apex_angle / 2)
    if arg > 1.0:
        raise ValueError(
            f"Minimum deviation impossible: n * sin(A/2) = {arg:.4f} > 1. "
            f"Try a smaller apex angle or lower refractive index."
        )
    return 2 * math.asin(arg) - apex_angle


def refractive_index_from_deviation(apex_angle: float, d_min: float) -> float:
    """
    Invert minimum_deviation().

    Formula: n = sin((D_min + A) / 2) / sin(A / 2)
    """
    return math.sin((d_min + apex_angle) / 2) / math.sin(apex_angle / 2)


def spectrum_deviations(
    apex_angle: float,
    theta_i: float,
    wavelengths: Iterable[float],
    dispersion: DispersionModel = GLASS
) -> Dict[float, float]:
    """
    Deviation per wavelength for a fixed geometry.

    Returns:
        Mapping wavelength (nm) -> deviation (radians, nan where TIR).
    """
    return {
        w: deviation_at_incidence(apex_angle, dispersion.refractive_index(w), theta_i)
        for w in wavelengths
    }


def angular_spread(
    apex_angle: float,
    theta_i: float,
    shortest_nm: float,
    longest_nm: float,
    dispersion: DispersionModel = GLASS
) -> float:
    """
    Angle between the deviated rays at the two ends of a band.

    Positive when the shorter wavelength is bent more, as in normal glass.
    """
    d_short = deviation_at_incidence(apex_angle, dispersion.refractive_index(shortest_nm), theta_i)
    d_long = deviation_at_incidence(apex_angle, dispersion.refractive_index(longest_nm), theta_i)
    return d_short - d_long


__all__ = [
    'exit_angle_through_prism',
    'deviation_at_incidence',
    'minimum_deviation',
    'refractive_index_from_deviation',
    'spectrum_deviations',
    'angular_spread',
    'critical_angle',
]
