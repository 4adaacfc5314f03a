"""
===============================================================================
SVG RENDERER TESTS
===============================================================================

Run with:
    python developer_tests/test_svg_renderer.py
===============================================================================
"""

import sys
import os
import tempfile

# Ensure the package is importable when running directly
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', '..'))

from prism_shapely.core.scene import Scene
from prism_shapely.core.tracer import TraceResult, TerminalReason, trace_spectrum
from prism_shapely.core.svg_renderer import SVGRenderer, wavelength_to_rgb, rgb_to_hex
from prism_shapely.optical_elements import triangle_prism, mirror


def build_scene():
    scene = Scene(bounds=(0, 0, 1000, 800))
    scene.add_element(triangle_prism(200, 200, center=(500, 400), element_id='prism', name='Prism'))
    scene.add_element(mirror(100, center=(900, 700), element_id='m'))
    scene.set_light_source_pose((300, 360), 0.0)
    return scene


def test_wavelength_colors():
    assert wavelength_to_rgb(700) == (255, 0, 0)
    assert wavelength_to_rgb(450) == (0, 51, 255)
    assert wavelength_to_rgb(530)[1] == 255
    assert rgb_to_hex((255, 0, 0)) == '#ff0000'
    assert rgb_to_hex(wavelength_to_rgb(None)) == rgb_to_hex(wavelength_to_rgb(589))
    assert wavelength_to_rgb(900) == wavelength_to_rgb(780)
    assert wavelength_to_rgb(300) == wavelength_to_rgb(380)
    r, g, b = wavelength_to_rgb(400)
    assert 0 < r < b < 255 and g == 0, "violet fades toward the edge"
    print("  wavelength colors - PASS")


def test_draw_scene():
    """Elements, source and one polyline per visible trace end up in the SVG."""
    print("\n" + "=" * 60)
    print("TEST: SVGRenderer.draw_scene()")
    print("=" * 60)

    scene = build_scene()
    results = trace_spectrum(scene, [400, 540, 680])
    renderer = SVGRenderer.for_scene(scene, width=500)
    assert renderer.height == 400
    assert renderer.viewbox == (0.0, -800.0, 1000.0, 800.0)

    drawn = renderer.draw_scene(scene, results)
    assert drawn == 3

    svg = renderer.to_string()
    assert svg.count('<polyline') == 3
    assert 'id="element-prism"' in svg
    assert 'id="element-m"' in svg
    assert 'data-wavelength="540"' in svg
    assert 'Prism' in svg
    assert rgb_to_hex(wavelength_to_rgb(680)) in svg
    print(f"  {drawn} polylines, {len(svg)} bytes - PASS")


def test_invisible_trace_skipped():
    renderer = SVGRenderer()
    empty = TraceResult(589, [], TerminalReason.STARTS_INSIDE)
    assert renderer.draw_trace(empty) is False
    assert '<polyline' not in renderer.to_string()


def test_save():
    scene = build_scene()
    renderer = SVGRenderer.for_scene(scene)
    renderer.draw_scene(scene, trace_spectrum(scene, [589]), color='black')
    with tempfile.TemporaryDirectory() as tmp:
        path = os.path.join(tmp, 'scene.svg')
        renderer.save(path)
        with open(path, 'r') as f:
            content = f.read()
    assert content.startswith('<?xml')
    assert 'stroke="black"' in content
    print("  saved SVG file - PASS")


def run_all_tests():
    """Run all tests and report results."""
    print("=" * 78)
    print("SVG RENDERER TESTS")
    print("=" * 78)

    tests = [
        ("Wavelength colors", test_wavelength_colors),
        ("draw_scene()", test_draw_scene),
        ("Invisible trace", test_invisible_trace_skipped),
        ("save()", test_save),
    ]

    passed = 0
    errors = []

    for name, test_func in tests:
        try:
            test_func()
            passed += 1
        except Exception as e:
            errors.append((name, str(e)))
            print(f"\n  FAILED: {name}")
            print(f"    Error: {e}")

    print("\n" + "=" * 78)
    print(f"SUMMARY: {passed}/{len(tests)} tests passed")
    print("=" * 78)

    if errors:
        print("\nFailed tests:")
        for name, error in errors:
            print(f"  - {name}: {error}")
        return False

    print("\nAll tests passed!")
    return True


if __name__ == "__main__":
    success = run_all_tests()
    sys.exit(0 if success else 1)
