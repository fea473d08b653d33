import numpy as np

from markerglobe.markers import GeoLocation
from markerglobe.occlusion import OcclusionResolver
from markerglobe.scene import GLOBE_LABEL, Intersection, SceneObject


class FakeScene:
    '''Returns canned hits and records the rays it was asked about'''

    def __init__(self, hits):
        self.hits = hits
        self.rays = []

    def intersect(self, ray_origin, ray_direction, recursive=True):
        self.rays.append((ray_origin, ray_direction, recursive))
        return list(self.hits)


def _hit(distance, label):
    return Intersection(distance, np.zeros(3), SceneObject(label))


def _distance(camera, anchor):
    return float(np.linalg.norm(anchor - camera.position))


def test_no_hits_is_visible(registry, camera, facing_anchor):
    resolver = OcclusionResolver(registry, tolerance=0.0)
    assert resolver.is_visible(facing_anchor, camera, FakeScene([]))


def test_only_non_globe_hits_is_visible(registry, camera, facing_anchor):
    resolver = OcclusionResolver(registry, tolerance=0.0)
    scene = FakeScene([_hit(0.5, 'atmosphere'), _hit(1.0, 'stem_1')])
    assert resolver.is_visible(facing_anchor, camera, scene)


def test_globe_closer_than_anchor_is_hidden(registry, camera, facing_anchor):
    resolver = OcclusionResolver(registry, tolerance=0.0)
    d = _distance(camera, facing_anchor)
    scene = FakeScene([_hit(0.1, 'atmosphere'), _hit(d - 0.5, GLOBE_LABEL)])
    assert not resolver.is_visible(facing_anchor, camera, scene)


def test_globe_farther_than_anchor_is_visible(registry, camera, facing_anchor):
    resolver = OcclusionResolver(registry, tolerance=0.0)
    d = _distance(camera, facing_anchor)
    assert resolver.is_visible(facing_anchor, camera, FakeScene([_hit(d + 0.5, GLOBE_LABEL)]))


def test_equal_distance_is_visible(registry, camera, facing_anchor):
    resolver = OcclusionResolver(registry, tolerance=0.0)
    d = _distance(camera, facing_anchor)
    assert resolver.is_visible(facing_anchor, camera, FakeScene([_hit(d, GLOBE_LABEL)]))


def test_first_globe_hit_decides(registry, camera, facing_anchor):
    resolver = OcclusionResolver(registry, tolerance=0.0)
    d = _distance(camera, facing_anchor)
    scene = FakeScene([_hit(1.0, 'stem_2'), _hit(d + 1.0, GLOBE_LABEL), _hit(1.0, GLOBE_LABEL)])
    assert resolver.is_visible(facing_anchor, camera, scene)


def test_ray_is_cast_from_camera_toward_anchor(registry, camera, facing_anchor):
    resolver = OcclusionResolver(registry)
    scene = FakeScene([])
    resolver.is_visible(facing_anchor, camera, scene)
    (origin, direction, recursive), = scene.rays
    np.testing.assert_allclose(origin, camera.position)
    expected = (facing_anchor - camera.position) / _distance(camera, facing_anchor)
    np.testing.assert_allclose(direction, expected, atol=1e-9)
    assert recursive is True


def test_real_globe_front_visible_back_hidden(registry, camera, scene, facing_anchor):
    resolver = OcclusionResolver(registry)
    assert resolver.is_visible(facing_anchor, camera, scene)
    assert not resolver.is_visible(-facing_anchor, camera, scene)


def test_update_visibility_sets_every_element(intake, registry, camera, scene, config):
    # One marker straight toward the camera, one on the opposite side
    facing = camera.position / np.linalg.norm(camera.position) * config.radius
    for name, anchor in (('front', facing), ('back', -facing)):
        registry.add(GeoLocation(0.0, 0.0, name), anchor)
    # lat 0 lon 0 sits on +Z, on the camera side of the globe
    intake.submit('0', '0', 'lon zero')

    resolver = OcclusionResolver(registry, tolerance=config.occlusion_tolerance)
    resolver.update_visibility(registry.all(), camera, scene)

    flags = [entry.element.occlusion_visible for entry in registry.all()]
    assert flags == [True, False, True]


def test_update_visibility_can_unhide(registry, camera, scene, earth, facing_anchor):
    registry.add(GeoLocation(0.0, 0.0, 'spin'), -facing_anchor)
    resolver = OcclusionResolver(registry)
    resolver.update_visibility(registry.all(), camera, scene)
    assert registry.get(1).element.occlusion_visible is False

    # half a turn about +Y brings it round to the camera side
    earth.rotation_y = np.pi
    resolver.update_visibility(registry.all(), camera, scene)
    assert registry.get(1).element.occlusion_visible is True
