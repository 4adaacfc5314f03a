import sys
import os
import math

# Add parent directories to path to import prism_shapely modules
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', '..', '..'))

from prism_shapely.core.scene import Scene
from prism_shapely.core.tracer import Tracer, TerminalReason
from prism_shapely.core.dispersion import sample_wavelengths, refractive_index
from prism_shapely.core.svg_renderer import SVGRenderer
from prism_shapely.optical_elements import triangle_prism, rectangular_slab, mirror, prism_utils


def rainbow_demo(verbose=0):
    """Dispersion of a white ray by a triangular prism.

    Setup
    A horizontal ray enters the left face of a 200 x 200 isosceles prism
    30% of the way up. Each wavelength from 400 to 680 nm is traced
    separately; violet leaves with the largest deviation, red with the
    smallest.

    Check
    The traced exit direction at each wavelength is compared with the
    two-face Snell's law formula from prism_utils."""

    output_dir = os.path.join(os.path.dirname(__file__), 'output')
    if not os.path.exists(output_dir):
        os.makedirs(output_dir)
    print("Setting up the dispersing prism...\n")

    scene = Scene(bounds=(0, 0, 1000, 800), step_size=1.0)
    scene.name = 'rainbow'
    scene.add_element(triangle_prism(200, 200, center=(500, 400), element_id='prism', name='Prism'))
    scene.set_light_source_pose((200, 360), 0.0)

    wavelengths = sample_wavelengths(400, 680, 20)
    results = Tracer(scene, verbose=verbose).trace_spectrum(wavelengths)

    apex = 2 * math.atan(0.5)
    theta_i = math.atan(0.5)
    print(f"{'nm':>5} {'n':>9} {'traced':>10} {'formula':>10}  reason")
    for result in results:
        n = refractive_index(result.wavelength)
        expected = -prism_utils.deviation_at_incidence(apex, n, theta_i)
        print(f"{result.wavelength:5.0f} {n:9.5f} {math.degrees(result.final_direction):10.4f} "
              f"{math.degrees(expected):10.4f}  {result.reason}")

    spread = results[-1].final_direction - results[0].final_direction
    print(f"\nAngular spread 400-680 nm: {math.degrees(spread):.3f} deg")

    renderer = SVGRenderer.for_scene(scene, width=1000)
    drawn = renderer.draw_scene(scene, results)
    output_file = os.path.join(output_dir, 'rainbow.svg')
    renderer.save(output_file)
    print(f"Drew {drawn} rays. Saved to: {output_file}")

    return results


def periscope_demo(verbose=0):
    """A slab between two 45 degree mirrors.

    The ray is folded down by the first mirror, shifted sideways by the
    tilted slab, and folded back to horizontal by the second mirror."""

    output_dir = os.path.join(os.path.dirname(__file__), 'output')
    if not os.path.exists(output_dir):
        os.makedirs(output_dir)

    scene = Scene(bounds=(0, 0, 1000, 800))
    scene.add_element(mirror(120, center=(300, 600), rotation=-3 * math.pi / 4, element_id='upper'))
    scene.add_element(rectangular_slab(120, 60, center=(300, 400), rotation=0.4, element_id='slab'))
    scene.add_element(mirror(120, center=(300, 200), rotation=math.pi / 4, element_id='lower'))
    scene.set_light_source_pose((50, 600), 0.0)

    result = Tracer(scene, verbose=verbose).trace(589)
    print(f"\nPeriscope: {' -> '.join(e.kind for e in result.events)} ({result.reason})")
    print(f"Final direction {math.degrees(result.final_direction):.4f} deg, "
          f"exit height {result.polyline[-1].y:.2f}")
    if result.reason != TerminalReason.OFF_SCREEN:
        print(f"Warning: {result.error}")

    renderer = SVGRenderer.for_scene(scene, width=1000)
    renderer.draw_scene(scene, [result], color='darkorange')
    output_file = os.path.join(output_dir, 'periscope.svg')
    renderer.save(output_file)
    print(f"Saved to: {output_file}")

    return result


if __name__ == '__main__':
    rainbow_demo()
    periscope_demo()
