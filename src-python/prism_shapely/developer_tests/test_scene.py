"""
===============================================================================
SCENE TESTS - Settings, Elements, Poses and Layouts
===============================================================================

Run with:
    python developer_tests/test_scene.py
===============================================================================
"""

import sys
import os
import math

# Ensure the package is importable when running directly
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', '..'))

from prism_shapely.core.geometry import Point
from prism_shapely.core.constants import MAX_STEPS_CEILING
from prism_shapely.core.dispersion import ConstantIndex
from prism_shapely.core.scene import Scene
from prism_shapely.core.tracer import trace
from prism_shapely.optical_elements import triangle_prism, rectangular_slab, mirror, equilateral_prism


def expect_error(exc_type, func, *args, **kwargs):
    try:
        func(*args, **kwargs)
    except exc_type:
        return
    raise AssertionError(f"expected {exc_type.__name__}")


LAYOUT = {
    'name': 'bench',
    'bounds': (0, 0, 1000, 800),
    'step_size': 0.5,
    'light_source': {'position': (100, 400), 'direction': 0.0},
    'elements': [
        {'id': 'p', 'kind': 'prism', 'shape': {'type': 'triangle', 'base': 200, 'height': 200},
         'center': (400, 400), 'rotation': 0.0},
        {'id': 's', 'kind': 'slab', 'shape': {'type': 'rectangle', 'width': 80, 'height': 300},
         'center': (700, 400), 'rotation': 0.2, 'dispersion': {'model': 'constant', 'n': 1.4}},
        {'id': 'e', 'kind': 'prism', 'shape': {'type': 'equilateral', 'side': 60},
         'center': (900, 700)},
        {'id': 'm', 'kind': 'mirror', 'vertices': [(-2, -50), (2, -50), (2, 50), (-2, 50)],
         'center': (950, 100), 'rotation': math.pi},
    ],
}


# =============================================================================
# SETTINGS
# =============================================================================

def test_settings_validation():
    """Bad bounds, step sizes and step caps are rejected."""
    print("\n" + "=" * 60)
    print("TEST: Scene settings validation")
    print("=" * 60)

    scene = Scene()
    assert scene.bounds == (0.0, 0.0, 1000.0, 800.0)
    assert scene.step_size == 1.0
    assert scene.max_steps is None

    expect_error(ValueError, setattr, scene, 'bounds', (0, 0, 0, 10))
    expect_error(ValueError, setattr, scene, 'bounds', (0, 0, 10))
    expect_error(ValueError, setattr, scene, 'bounds', (0, 0, float('inf'), 10))
    expect_error(ValueError, setattr, scene, 'step_size', 0)
    expect_error(ValueError, setattr, scene, 'step_size', float('nan'))
    expect_error(ValueError, setattr, scene, 'max_steps', 0)
    expect_error(ValueError, setattr, scene, 'max_steps', 2.5)
    expect_error(ValueError, setattr, scene, 'max_steps', True)
    print("  invalid settings rejected - PASS")


def test_bounds_and_limits():
    scene = Scene(bounds=(0, 0, 300, 400), step_size=2.0)
    assert scene.is_in_bounds((0, 0)) and scene.is_in_bounds(Point(300, 400))
    assert not scene.is_in_bounds((300.5, 10))

    assert scene.crossing_bound == 0
    assert scene.step_limit == (math.ceil(500 / 2.0) + 1) * 2

    scene.add_element(rectangular_slab(10, 10, center=(100, 100)))
    assert scene.crossing_bound == 2
    assert scene.step_limit == 251 * 4

    scene.max_steps = 17
    assert scene.step_limit == 17

    tiny = Scene(step_size=1e-6)
    assert tiny.step_limit == MAX_STEPS_CEILING
    print("  bounds, crossing bound and step limit - PASS")


# =============================================================================
# ELEMENTS AND POSES
# =============================================================================

def test_elements():
    """Elements keep insertion order and unique ids."""
    print("\n" + "=" * 60)
    print("TEST: Element management")
    print("=" * 60)

    scene = Scene()
    first = scene.add_element(triangle_prism(100, 100, center=(200, 200), element_id='a'))
    scene.add_element(mirror(50, center=(600, 200), element_id='b'))
    generated = scene.add_element(equilateral_prism(40, center=(800, 200)))

    assert first == 'a'
    assert [e.element_id for e in scene.elements] == ['a', 'b', generated]
    assert scene.get_element('b').is_mirror
    expect_error(ValueError, scene.add_element, rectangular_slab(5, 5, element_id='a'))
    expect_error(KeyError, scene.get_element, 'missing')
    expect_error(KeyError, scene.set_element_pose, 'missing', (0, 0), 0.0)

    assert [e.element_id for e in scene.elements_containing((200, 200))] == ['a']
    assert scene.elements_containing((50, 50)) == []
    print("  add / get / containment - PASS")


def test_poses():
    scene = Scene()
    scene.add_element(triangle_prism(100, 100, element_id='a'))
    scene.set_element_pose('a', (300, 250), 0.25)
    element = scene.get_element('a')
    assert element.center == Point(300, 250)
    assert element.rotation == 0.25

    scene.set_light_source_pose((10, 20), 3 * math.pi)
    assert scene.light_source.position == Point(10, 20)
    assert -math.pi < scene.light_source.direction <= math.pi
    expect_error(ValueError, scene.set_light_source_pose, (10, float('nan')), 0.0)
    print("  element and light source poses - PASS")


# =============================================================================
# LAYOUT
# =============================================================================

def test_from_layout():
    """A layout dict builds the described scene."""
    print("\n" + "=" * 60)
    print("TEST: Scene.from_layout()")
    print("=" * 60)

    scene = Scene.from_layout(LAYOUT)
    assert scene.name == 'bench'
    assert scene.step_size == 0.5
    assert [e.element_id for e in scene.elements] == ['p', 's', 'e', 'm']
    assert [e.kind for e in scene.elements] == ['prism', 'slab', 'prism', 'mirror']
    assert isinstance(scene.get_element('s').dispersion, ConstantIndex)
    assert scene.get_element('s').refractive_index(450) == 1.4
    assert scene.get_element('m').rotation == math.pi
    assert scene.light_source.position == Point(100, 400)
    print("  four elements built - PASS")


def test_layout_round_trip_traces_the_same():
    """to_layout() output rebuilds a scene that traces identically."""
    original = Scene.from_layout(LAYOUT)
    rebuilt = Scene.from_layout(original.to_layout())

    assert [e.element_id for e in rebuilt.elements] == ['p', 's', 'e', 'm']
    a = trace(original, 500)
    b = trace(rebuilt, 500)
    assert a.reason == b.reason
    assert [e.kind for e in a.events] == [e.kind for e in b.events]
    assert len(a.polyline) == len(b.polyline)
    assert abs(a.final_direction - b.final_direction) < 1e-9
    print(f"  {a.reason} with {len(a.events)} events in both - PASS")


def test_layout_errors():
    expect_error(ValueError, Scene.from_layout, {'elements': [{'kind': 'prism'}]})
    expect_error(ValueError, Scene.from_layout,
                 {'elements': [{'shape': {'type': 'hexagon'}}]})
    expect_error(ValueError, Scene.from_layout,
                 {'elements': [{'kind': 'lens', 'shape': {'type': 'equilateral', 'side': 5}}]})


# =============================================================================
# TEST RUNNER
# =============================================================================

def run_all_tests():
    """Run all tests and report results."""
    print("=" * 78)
    print("SCENE TESTS")
    print("=" * 78)

    tests = [
        ("Settings validation", test_settings_validation),
        ("Bounds and limits", test_bounds_and_limits),
        ("Elements", test_elements),
        ("Poses", test_poses),
        ("from_layout()", test_from_layout),
        ("Layout round trip", test_layout_round_trip_traces_the_same),
        ("Layout errors", test_layout_errors),
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
