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
Constants used throughout the prism simulation.

Kept in one module so that the geometry, element and tracer modules can share
them without circular imports.
"""

# Refractive index of the surrounding medium
N_AIR = 1.0

# Minimum distance along a step segment for a boundary crossing to count.
# Crossings closer than this to the segment start are the boundary the ray
# is currently sitting on.
MIN_CROSSING_DISTANCE = 1e-7

# Tolerance used when comparing polygon areas (convexity check)
AREA_TOLERANCE = 1e-9

# Stepping
DEFAULT_STEP_SIZE = 1.0
MIN_STEP_SIZE = 1e-6
MAX_STEPS_CEILING = 2_000_000

# Default scene bounds (xmin, ymin, xmax, ymax)
DEFAULT_BOUNDS = (0.0, 0.0, 1000.0, 800.0)

# Wavelengths (in nanometers)
VIOLET_WAVELENGTH = 400
RED_WAVELENGTH = 680
SODIUM_D_WAVELENGTH = 589
DEFAULT_WAVELENGTH_STEP = 20

# Quadratic glass dispersion n = a + b*lambda + c*lambda^2 (lambda in nm)
GLASS_DISPERSION_A = 1.61
GLASS_DISPERSION_B = -0.00024121
GLASS_DISPERSION_C = 0.00000016
