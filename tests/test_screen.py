import numpy as np
import pytest

from markerglobe.markers import GeoLocation
from markerglobe.screen import ScreenProjector


def _add(registry, anchor, name='x'):
    return registry.add(GeoLocation(0.0, 0.0, name), np.asarray(anchor, dtype=float))


def test_target_maps_to_center(registry, camera):
    _add(registry, (0.0, 0.0, 0.0))
    ScreenProjector(registry).update_screen_positions(registry.all(), camera, 800, 600)
    x, y = registry.get(1).element.offset
    assert x == pytest.approx(0.0, abs=1e-9)
    assert y == pytest.approx(0.0, abs=1e-9)


def test_screen_axes(registry, camera):
    _add(registry, (0.0, 1.0, 0.0), 'up')
    _add(registry, (1.0, 0.0, 0.0), 'right')
    ScreenProjector(registry).update_screen_positions(registry.all(), camera, 800, 600)
    # pixel y grows downward
    assert registry.get(1).element.offset[1] < 0.0
    assert registry.get(2).element.offset[0] > 0.0


def test_offset_scales_with_viewport(registry, camera):
    _add(registry, (0.5, 0.5, 0.0))
    projector = ScreenProjector(registry)
    projector.update_screen_positions(registry.all(), camera, 400, 300)
    small = registry.get(1).element.offset
    projector.update_screen_positions(registry.all(), camera, 800, 600)
    large = registry.get(1).element.offset
    assert large == pytest.approx((small[0] * 2.0, small[1] * 2.0))


def test_same_frame_twice_is_stable(registry, camera, facing_anchor):
    _add(registry, facing_anchor)
    projector = ScreenProjector(registry)
    projector.update_screen_positions(registry.all(), camera, 800, 600)
    first = registry.get(1).element.offset
    projector.update_screen_positions(registry.all(), camera, 800, 600)
    assert registry.get(1).element.offset == first


def test_visibility_untouched(registry, camera, facing_anchor):
    _add(registry, -facing_anchor)
    element = registry.get(1).element
    element.occlusion_visible = True
    ScreenProjector(registry).update_screen_positions(registry.all(), camera, 800, 600)
    assert element.occlusion_visible is True
