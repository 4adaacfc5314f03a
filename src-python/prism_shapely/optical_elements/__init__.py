"""
Copyright 2026 prism-shapely authors and contributors

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at

    http://www.apache.org/licenses/LICENSE-2.0

===============================================================================
OPTICAL ELEMENTS MODULE
===============================================================================
Convenience constructors for the standard bodies of the prism scene, so users
never have to specify raw vertex coordinates:

- triangle_prism(): isosceles dispersing prism standing on its base
- equilateral_prism(): 60-60-60 dispersing prism
- rectangular_slab(): parallel-sided glass block
- mirror(): thin reflecting plate

Utility modules:
- prism_utils: analytic deviation and critical-angle formulas
===============================================================================
"""

from typing import Optional, Tuple

from ..core.optical_element import OpticalElement
from ..core.polygon_shape import triangle, equilateral_triangle, rectangle
from ..core.dispersion import DispersionModel
from . import prism_utils


def triangle_prism(
    base: float,
    height: float,
    center: Tuple[float, float] = (0.0, 0.0),
    rotation: float = 0.0,
    dispersion: Optional[DispersionModel] = None,
    element_id: Optional[str] = None,
    name: Optional[str] = None
) -> OpticalElement:
    """
    Create an isosceles triangular prism.

    Args:
        base: Length of the base (bottom edge when unrotated).
        height: Distance from base to apex.
        center: World position of the bounding-box centre.
        rotation: Counterclockwise rotation in radians.
        dispersion: Material model (default: the quadratic glass).
        element_id: Optional id (auto-generated when omitted).
        name: Optional display name.

    Returns:
        A new OpticalElement of kind 'prism'.
    """
    return OpticalElement(triangle(base, height), kind='prism', center=center,
                          rotation=rotation, dispersion=dispersion,
                          element_id=element_id, name=name)


def equilateral_prism(
    side: float,
    center: Tuple[float, float] = (0.0, 0.0),
    rotation: float = 0.0,
    dispersion: Optional[DispersionModel] = None,
    element_id: Optional[str] = None,
    name: Optional[str] = None
) -> OpticalElement:
    """Create an equilateral (60-60-60) dispersing prism with a horizontal base."""
    return OpticalElement(equilateral_triangle(side), kind='prism', center=center,
                          rotation=rotation, dispersion=dispersion,
                          element_id=element_id, name=name)


def rectangular_slab(
    width: float,
    height: float,
    center: Tuple[float, float] = (0.0, 0.0),
    rotation: float = 0.0,
    dispersion: Optional[DispersionModel] = None,
    element_id: Optional[str] = None,
    name: Optional[str] = None
) -> OpticalElement:
    """
    Create a rectangular glass slab.

    A ray crossing two parallel faces leaves in its original direction,
    shifted sideways.
    """
    return OpticalElement(rectangle(width, height), kind='slab', center=center,
                          rotation=rotation, dispersion=dispersion,
                          element_id=element_id, name=name)


def mirror(
    length: float,
    thickness: float = 4.0,
    center: Tuple[float, float] = (0.0, 0.0),
    rotation: float = 0.0,
    element_id: Optional[str] = None,
    name: Optional[str] = None
) -> OpticalElement:
    """
    Create a flat mirror plate.

    Unrotated, the plate is vertical and its reflecting normal points along
    +x; rotating the element turns the normal by the same angle.

    Args:
        length: Length of the reflecting face.
        thickness: Plate thickness.
    """
    return OpticalElement(rectangle(thickness, length), kind='mirror', center=center,
                          rotation=rotation, element_id=element_id, name=name)


__all__ = [
    'triangle_prism',
    'equilateral_prism',
    'rectangular_slab',
    'mirror',
    'prism_utils',
]
