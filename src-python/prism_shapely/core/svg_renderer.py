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

import numpy as np
import svgwrite

from .constants import SODIUM_D_WAVELENGTH


# Colour stops of the visible spectrum: wavelength (nm) -> (r, g, b)
_SPECTRUM_NM = (380, 440, 490, 510, 580, 645, 780)
_SPECTRUM_RGB = (
    (1.0, 0.0, 0.0, 0.0, 1.0, 1.0, 1.0),
    (0.0, 0.0, 1.0, 1.0, 1.0, 0.0, 0.0),
    (1.0, 1.0, 1.0, 0.0, 0.0, 0.0, 0.0),
)
# Brightness dims toward both ends of the visible range
_FADE_NM = (380, 420, 700, 780)
_FADE = (0.3, 1.0, 1.0, 0.3)


def wavelength_to_rgb(wavelength):
    """
    Approximate display colour of a wavelength in nm, as an (r, g, b) tuple
    of 0-255 ints. Piecewise linear between colour stops; wavelengths outside
    380-780 nm take the colour of the nearest end.
    """
    if wavelength is None:
        wavelength = SODIUM_D_WAVELENGTH
    factor = np.interp(wavelength, _FADE_NM, _FADE)
    return tuple(
        int(round(255 * factor * float(np.interp(wavelength, _SPECTRUM_NM, channel))))
        for channel in _SPECTRUM_RGB
    )


def rgb_to_hex(rgb):
    return '#{:02x}{:02x}{:02x}'.format(*rgb)


class SVGRenderer:
    """
    Render a scene and its traced polylines to SVG.

    Attributes:
        width (int): Canvas width in pixels
        height (int): Canvas height in pixels
        viewbox (tuple): SVG viewBox (min_x, min_y, width, height), already
            flipped for SVG's Y-down system
        dwg (svgwrite.Drawing): The SVG drawing object
        layer_objects (svgwrite.Group): Group for optical elements
        layer_rays (svgwrite.Group): Group for traced rays
        layer_labels (svgwrite.Group): Group for labels
    """

    def __init__(self, width=800, height=600, viewbox=None):
        """
        Initialize the SVG renderer.

        Args:
            width (int): Canvas width in pixels (default: 800)
            height (int): Canvas height in pixels (default: 600)
            viewbox (tuple or None): SVG viewBox as (min_x, min_y, width, height)
                                    If None, uses (0, 0, width, height)

        Note:
            The viewbox coordinates use a Y-up system (positive Y goes up).
            Internally, this is converted to SVG's Y-down system with a transform.
        """
        self.width = width
        self.height = height
        self.user_viewbox = viewbox if viewbox is not None else (0, 0, width, height)

        min_x, min_y, vb_width, vb_height = self.user_viewbox
        self.viewbox = (min_x, -(min_y + vb_height), vb_width, vb_height)

        self.dwg = svgwrite.Drawing(size=(f'{width}px', f'{height}px'),
                                    profile='full', debug=False)
        self.dwg.viewbox(*self.viewbox)

        self.dwg.add(self.dwg.rect(
            insert=(self.viewbox[0], self.viewbox[1]),
            size=(self.viewbox[2], self.viewbox[3]),
            fill='white'
        ))

        # Layers bottom to top, flipped so that positive Y points upward
        self.layer_objects = self.dwg.add(self.dwg.g(id='layer-objects', transform='scale(1, -1)'))
        self.layer_rays = self.dwg.add(self.dwg.g(id='layer-rays', transform='scale(1, -1)'))
        self.layer_labels = self.dwg.add(self.dwg.g(id='layer-labels', transform='scale(1, -1)'))

    @classmethod
    def for_scene(cls, scene, width=800):
        """Renderer whose viewbox matches the scene bounds."""
        xmin, ymin, xmax, ymax = scene.bounds
        height = int(round(width * (ymax - ymin) / (xmax - xmin)))
        return cls(width=width, height=height, viewbox=(xmin, ymin, xmax - xmin, ymax - ymin))

    @staticmethod
    def _normalize_coord(value):
        # Handle negative zero and very small values
        if value == 0.0 or abs(value) < 1e-10:
            return 0.0
        return value

    def _xy(self, point):
        return (self._normalize_coord(point.x), self._normalize_coord(point.y))

    def draw_element(self, element, label=None):
        """
        Draw an optical element outline.

        Transparent bodies are drawn as a light cyan fill with a thin outline;
        mirrors as a solid dark plate.

        Args:
            element (OpticalElement): The element to draw.
            label (str or None): Optional text at the element centroid.
                Defaults to the element name.
        """
        points = [self._xy(v) for v in element.world_vertices()]
        if element.is_mirror:
            style = {'fill': 'black', 'stroke': 'lightgray', 'stroke_width': 2}
        else:
            style = {'fill': 'cyan', 'fill_opacity': 0.2, 'stroke': 'darkcyan', 'stroke_width': 1}
        polygon = self.dwg.polygon(points=points, **style)
        polygon['id'] = f'element-{element.element_id}'
        polygon['class'] = element.kind
        self.layer_objects.add(polygon)

        label = label if label is not None else element.name
        if label:
            c = element.world_center()
            self.layer_labels.add(self.dwg.text(
                label,
                insert=(c.x, -c.y),
                fill='navy',
                font_size='10px',
                font_family='sans-serif',
                text_anchor='middle',
                transform='scale(1, -1)'  # Flip text back to be readable
            ))

    def draw_light_source(self, light_source, length=30, color='black'):
        """Draw the light source as a short thick bar ending at the emission point."""
        p = light_source.position
        back = (p.x - length * math.cos(light_source.direction),
                p.y - length * math.sin(light_source.direction))
        self.layer_objects.add(self.dwg.line(
            start=back,
            end=self._xy(p),
            stroke=color,
            stroke_width=6
        ))

    def draw_trace(self, result, color=None, opacity=1.0, stroke_width=1.5):
        """
        Draw a traced polyline.

        Args:
            result (TraceResult): Output of Tracer.trace().
            color (str or None): Stroke color. Defaults to the color of the
                result's wavelength.
            opacity (float): Stroke opacity.
            stroke_width (float): Line width.

        Returns:
            bool: False when the result has nothing to draw.
        """
        if len(result.polyline) < 2:
            return False
        if color is None:
            color = rgb_to_hex(wavelength_to_rgb(result.wavelength))
        polyline = self.dwg.polyline(
            points=[self._xy(p) for p in result.polyline],
            stroke=color,
            stroke_opacity=opacity,
            stroke_width=stroke_width,
            fill='none'
        )
        polyline['data-wavelength'] = str(result.wavelength)
        polyline['data-reason'] = result.reason
        self.layer_rays.add(polyline)
        return True

    def draw_scene(self, scene, results=None, **trace_kwargs):
        """
        Draw every element, the light source and any traced results.

        Args:
            scene (Scene): The scene.
            results (list or None): TraceResults to draw on top.
            **trace_kwargs: Passed to draw_trace().

        Returns:
            int: Number of polylines drawn.
        """
        for element in scene.elements:
            self.draw_element(element)
        self.draw_light_source(scene.light_source)
        drawn = 0
        for result in results or []:
            if self.draw_trace(result, **trace_kwargs):
                drawn += 1
        return drawn

    def save(self, filename=None):
        """
        Save the SVG to a file.

        Args:
            filename (str): Output filename (e.g., 'output.svg')
        """
        if filename is None:
            filename = "output.svg"
        self.dwg.saveas(filename)

    def to_string(self):
        """
        Get the SVG as a string.

        Returns:
            str: SVG content as XML string
        """
        return self.dwg.tostring()
