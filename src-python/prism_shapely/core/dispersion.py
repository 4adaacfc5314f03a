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

===============================================================================
DISPERSION MODELS
===============================================================================
Wavelength -> refractive index mappings for transparent materials.

- QuadraticDispersion: n = a + b*lambda + c*lambda^2 (lambda in nm), the
  default glass of the simulation
- CauchyDispersion: n = A + B / lambda^2 (lambda in micrometers)
- ConstantIndex: no dispersion

All models are pure and stateless: the same wavelength always gives the
same index.
===============================================================================
"""

from __future__ import annotations

import math
from typing import List

import numpy as np

from .constants import (
    GLASS_DISPERSION_A,
    GLASS_DISPERSION_B,
    GLASS_DISPERSION_C,
    VIOLET_WAVELENGTH,
    RED_WAVELENGTH,
    DEFAULT_WAVELENGTH_STEP,
)


def _check_wavelength(wavelength_nm: float) -> None:
    if not math.isfinite(wavelength_nm) or wavelength_nm <= 0:
        raise ValueError(f"Wavelength must be a positive number of nm, got {wavelength_nm}")


class DispersionModel:
    """Base class for wavelength-dependent refractive index models."""

    def refractive_index(self, wavelength_nm: float) -> float:
        raise NotImplementedError

    def __call__(self, wavelength_nm: float) -> float:
        return self.refractive_index(wavelength_nm)

    def to_dict(self) -> dict:
        raise NotImplementedError

    @staticmethod
    def from_dict(data: dict) -> 'DispersionModel':
        """Rebuild a model from the output of to_dict()."""
        kind = data.get('model')
        if kind == 'quadratic':
            return QuadraticDispersion(data['a'], data['b'], data['c'])
        if kind == 'cauchy':
            return CauchyDispersion(data['A'], data['B'])
        if kind == 'constant':
            return ConstantIndex(data['n'])
        raise ValueError(f"Unknown dispersion model '{kind}'")


class QuadraticDispersion(DispersionModel):
    """
    Empirical quadratic fit of glass index against wavelength.

    n(lambda) = a + b * lambda + c * lambda^2, lambda in nanometers.

    With the default coefficients this gives about 1.539 at 400 nm and
    1.520 at 680 nm, decreasing over the whole visible range.
    """

    def __init__(self,
                 a: float = GLASS_DISPERSION_A,
                 b: float = GLASS_DISPERSION_B,
                 c: float = GLASS_DISPERSION_C):
        self.a = a
        self.b = b
        self.c = c

    def refractive_index(self, wavelength_nm: float) -> float:
        _check_wavelength(wavelength_nm)
        return self.a + self.b * wavelength_nm + self.c * wavelength_nm * wavelength_nm

    def to_dict(self) -> dict:
        return {'model': 'quadratic', 'a': self.a, 'b': self.b, 'c': self.c}

    def __repr__(self) -> str:
        return f"QuadraticDispersion(a={self.a}, b={self.b}, c={self.c})"


class CauchyDispersion(DispersionModel):
    """
    Refractive index from Cauchy's equation.

    n(lambda) = A + B / lambda^2, with lambda in micrometers.

    Example:
        >>> CauchyDispersion(1.5046, 0.00420)(589.0)  # BK7 at sodium D line
        1.5167...
    """

    def __init__(self, A: float, B: float):
        self.A = A
        self.B = B

    def refractive_index(self, wavelength_nm: float) -> float:
        _check_wavelength(wavelength_nm)
        wavelength_um = wavelength_nm / 1000.0
        return self.A + self.B / (wavelength_um ** 2)

    def to_dict(self) -> dict:
        return {'model': 'cauchy', 'A': self.A, 'B': self.B}

    def __repr__(self) -> str:
        return f"CauchyDispersion(A={self.A}, B={self.B})"


class ConstantIndex(DispersionModel):
    """A material whose index does not depend on wavelength."""

    def __init__(self, n: float):
        if not math.isfinite(n) or n <= 0:
            raise ValueError(f"Refractive index must be > 0, got {n}")
        self.n = n

    def refractive_index(self, wavelength_nm: float) -> float:
        _check_wavelength(wavelength_nm)
        return self.n

    def to_dict(self) -> dict:
        return {'model': 'constant', 'n': self.n}

    def __repr__(self) -> str:
        return f"ConstantIndex(n={self.n})"


GLASS = QuadraticDispersion()


def refractive_index(wavelength_nm: float) -> float:
    """Refractive index of the default glass at a wavelength in nm."""
    return GLASS.refractive_index(wavelength_nm)


def sample_wavelengths(
    start: float = VIOLET_WAVELENGTH,
    stop: float = RED_WAVELENGTH,
    step: float = DEFAULT_WAVELENGTH_STEP
) -> List[float]:
    """
    Evenly spaced wavelengths for approximating a continuous spectrum.

    Args:
        start: First wavelength in nm.
        stop: Last wavelength in nm (included when it falls on the grid).
        step: Spacing in nm.

    Returns:
        List of wavelengths in nm, ascending.

    Raises:
        ValueError: If step is not positive or start > stop.

    Example:
        >>> sample_wavelengths(400, 480, 40)
        [400.0, 440.0, 480.0]
    """
    if step <= 0:
        raise ValueError(f"Wavelength step must be > 0, got {step}")
    if start > stop:
        raise ValueError(f"start ({start}) must not exceed stop ({stop})")
    _check_wavelength(start)
    samples = np.arange(start, stop + step / 2, step, dtype=float)
    return [float(w) for w in samples if w <= stop + 1e-9]
