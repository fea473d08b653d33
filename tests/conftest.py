import numpy as np
import pytest

from markerglobe.camera import PerspectiveCamera
from markerglobe.config import GlobeConfig
from markerglobe.intake import LocationIntake
from markerglobe.markers import MarkerRegistry
from markerglobe.scene import build_globe_scene


@pytest.fixture
def config():
    return GlobeConfig()


@pytest.fixture
def scene_and_earth(config):
    return build_globe_scene(config.radius, atmosphere_scale=config.atmosphere_scale)


@pytest.fixture
def scene(scene_and_earth):
    return scene_and_earth[0]


@pytest.fixture
def earth(scene_and_earth):
    return scene_and_earth[1]


@pytest.fixture
def camera(config):
    cam = PerspectiveCamera(config.fov, 1.5, config.near, config.far, position=config.camera_position)
    cam.look_at((0.0, 0.0, 0.0))
    return cam


@pytest.fixture
def registry(earth, config):
    return MarkerRegistry(earth, stem_extension=config.stem_extension,
                          stem_pick_radius=config.stem_pick_threshold)


@pytest.fixture
def notifications():
    return []


@pytest.fixture
def intake(registry, config, notifications):
    return LocationIntake(registry, config.radius, notify=notifications.append)


@pytest.fixture
def facing_anchor(camera, config):
    """Point on the globe straight between the center and the camera"""
    return camera.position / np.linalg.norm(camera.position) * config.radius
