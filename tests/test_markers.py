import math

import numpy as np
import pytest

from markerglobe.config import DEFAULT_SEED_LOCATIONS
from markerglobe.coord_utils import latlon_to_local
from markerglobe.markers import GeoLocation
from markerglobe.scene import LineSceneObject


def _add(registry, lat, lon, name='x'):
    return registry.add(GeoLocation(lat, lon, name), latlon_to_local(lat, lon, 2.0))


def test_identifiers_are_sequential(registry):
    assert [_add(registry, 0, i) for i in range(3)] == [1, 2, 3]
    assert [entry.identifier for entry in registry.all()] == [1, 2, 3]
    assert len(registry) == 3


def test_entries_keep_insertion_order(registry):
    _add(registry, 10, 10, 'a')
    _add(registry, 20, 20, 'b')
    assert [entry.location.name for entry in registry] == ['a', 'b']
    assert [entry.element.identifier for entry in registry] == [1, 2]


def test_all_is_a_snapshot(registry):
    _add(registry, 0, 0)
    snapshot = registry.all()
    _add(registry, 1, 1)
    assert len(snapshot) == 1
    assert len(registry.all()) == 2


def test_new_element_starts_hidden_and_centered(registry):
    _add(registry, 0, 0)
    element = registry.get(1).element
    assert element.occlusion_visible is False
    assert element.offset == (0.0, 0.0)


def test_duplicates_are_allowed(registry):
    _add(registry, 5, 5)
    _add(registry, 5, 5)
    first, second = registry.all()
    np.testing.assert_array_equal(first.anchor, second.anchor)
    assert first.identifier != second.identifier


def test_add_attaches_stem_to_globe(registry, earth):
    _add(registry, 55.755864, 37.617698)
    stems = [child for child in earth.children if isinstance(child, LineSceneObject)]
    assert len(stems) == 1
    stem = stems[0]
    np.testing.assert_array_equal(stem.start, np.zeros(3))
    assert np.linalg.norm(stem.end) == pytest.approx(2.5)
    anchor = registry.get(1).anchor
    np.testing.assert_allclose(np.cross(stem.end, anchor), np.zeros(3), atol=1e-12)


def test_get_unknown_identifier(registry):
    _add(registry, 0, 0)
    with pytest.raises(KeyError):
        registry.get(0)
    with pytest.raises(KeyError):
        registry.get(2)


def test_selection_is_exclusive(registry):
    for i in range(3):
        _add(registry, 0, i * 10)
    assert registry.selected_id is None

    assert registry.toggle_selection(2) == 2
    assert registry.is_selected(2)

    assert registry.toggle_selection(3) == 3
    assert not registry.is_selected(2)
    assert registry.is_selected(3)

    assert registry.toggle_selection(3) is None
    assert registry.selected_id is None


def test_toggle_unknown_marker(registry):
    with pytest.raises(KeyError):
        registry.toggle_selection(7)
    assert registry.selected_id is None


def test_added_signal(registry):
    received = []
    registry.sigMarkerAdded.connect(received.append)
    _add(registry, 1, 2, 'here')
    assert [entry.location.name for entry in received] == ['here']


def test_world_position_follows_globe_rotation(registry, earth):
    _add(registry, 0, 0)
    entry = registry.get(1)
    np.testing.assert_allclose(registry.world_position(entry), [0.0, 0.0, 2.0], atol=1e-12)

    earth.rotation_y = math.pi / 2
    np.testing.assert_allclose(registry.world_position(entry), [2.0, 0.0, 0.0], atol=1e-12)
    # anchors themselves never change
    np.testing.assert_allclose(entry.anchor, [0.0, 0.0, 2.0], atol=1e-12)


def test_seed_locations_end_to_end(intake, registry):
    assert intake.seed(DEFAULT_SEED_LOCATIONS) == [1, 2, 3]
    entries = registry.all()
    assert [entry.location.name for entry in entries] == ['Moscow', 'Melbourne', 'Beijing']
    for entry in entries:
        assert np.linalg.norm(entry.anchor) == pytest.approx(2.0)
