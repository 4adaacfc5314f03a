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

from . import constants
from . import geometry
from .geometry import Point, wrap_pi, wrap_2pi
from .polygon_shape import PolygonShape, triangle, equilateral_triangle, rectangle
from .dispersion import (
    DispersionModel, QuadraticDispersion, CauchyDispersion, ConstantIndex,
    GLASS, refractive_index, sample_wavelengths
)
from .refraction import refracted_direction, mirror_reflection, RefractionOutcome
from .optical_element import OpticalElement
from .ray import Ray
from .scene import Scene, LightSource
from .tracer import Tracer, TraceResult, TraceEvent, TerminalReason, trace, trace_spectrum
from .svg_renderer import SVGRenderer

__all__ = [
    'constants', 'geometry', 'Point', 'wrap_pi', 'wrap_2pi',
    'PolygonShape', 'triangle', 'equilateral_triangle', 'rectangle',
    'DispersionModel', 'QuadraticDispersion', 'CauchyDispersion', 'ConstantIndex',
    'GLASS', 'refractive_index', 'sample_wavelengths',
    'refracted_direction', 'mirror_reflection', 'RefractionOutcome',
    'OpticalElement',
    'Ray',
    'Scene', 'LightSource',
    'Tracer', 'TraceResult', 'TraceEvent', 'TerminalReason', 'trace', 'trace_spectrum',
    'SVGRenderer'
]
