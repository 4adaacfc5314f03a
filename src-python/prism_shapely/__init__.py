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

Prism Shapely
=============

A 2D prism and mirror ray tracer with dispersion, using Shapely for the
boundary geometry.

Main modules:
- core: Scene, optical elements, refraction, dispersion and the tracer
- optical_elements: Prism, slab and mirror constructors; analytic prism formulas
- examples: Demonstrations

Quick start:
    from prism_shapely.core.scene import Scene
    from prism_shapely.optical_elements import triangle_prism
    from prism_shapely.core.tracer import Tracer
"""

__version__ = "0.1.0"

# Convenience imports for common usage
from .core.scene import Scene, LightSource
from .core.tracer import Tracer, TraceResult, TerminalReason
from .core.ray import Ray

__all__ = [
    'Scene',
    'LightSource',
    'Tracer',
    'TraceResult',
    'TerminalReason',
    'Ray',
    '__version__',
]
