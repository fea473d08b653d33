import math

import numpy as np
import pytest

from markerglobe.coord_utils import (latlon_to_local, radial_extend, spherical_to_vector,
                                     sun_direction, vector_to_spherical)


@pytest.mark.parametrize('lat, lon', [
    (0.0, 0.0), (90.0, 0.0), (-90.0, 0.0), (45.0, -120.0),
    (-33.3, 179.9), (12.5, -180.0), (55.755864, 37.617698),
])
def test_anchor_lies_on_sphere(lat, lon):
    anchor = latlon_to_local(lat, lon, 2.0)
    assert np.linalg.norm(anchor) == pytest.approx(2.0)


@pytest.mark.parametrize('lon', [-180.0, -73.0, 0.0, 37.6, 180.0])
def test_north_pole_is_on_the_polar_axis(lon):
    x, y, z = latlon_to_local(90.0, lon, 2.0)
    assert x == pytest.approx(0.0, abs=1e-12)
    assert z == pytest.approx(0.0, abs=1e-12)
    assert y == pytest.approx(2.0)


def test_axis_conventions():
    # lon 0 on +Z, lon 90 on +X, south pole on -Y
    np.testing.assert_allclose(latlon_to_local(0.0, 0.0, 3.0), [0.0, 0.0, 3.0], atol=1e-12)
    np.testing.assert_allclose(latlon_to_local(0.0, 90.0, 3.0), [3.0, 0.0, 0.0], atol=1e-12)
    np.testing.assert_allclose(latlon_to_local(-90.0, 10.0, 3.0), [0.0, -3.0, 0.0], atol=1e-12)


def test_out_of_range_and_nan_do_not_raise():
    far = latlon_to_local(200.0, 500.0, 2.0)
    assert np.linalg.norm(far) == pytest.approx(2.0)

    bad = latlon_to_local(math.nan, 10.0, 2.0)
    assert np.isnan(bad).any()


def test_radial_extend():
    anchor = latlon_to_local(39.90185, 116.391441, 2.0)
    end = radial_extend(anchor, 0.5)
    assert np.linalg.norm(end) == pytest.approx(2.5)
    np.testing.assert_allclose(end / 2.5, anchor / 2.0)


def test_radial_extend_origin():
    np.testing.assert_array_equal(radial_extend(np.zeros(3), 0.5), np.zeros(3))


def test_vector_to_spherical_inverts_spherical_to_vector():
    vec = spherical_to_vector(4.0, 1.1, -2.3)
    radius, phi, theta = vector_to_spherical(vec)
    assert radius == pytest.approx(4.0)
    assert phi == pytest.approx(1.1)
    assert theta == pytest.approx(-2.3)


def test_sun_direction_default_is_unit_and_on_equator():
    sun = sun_direction(math.pi * 0.5, 0.5)
    assert np.linalg.norm(sun) == pytest.approx(1.0)
    assert sun[1] == pytest.approx(0.0, abs=1e-12)
