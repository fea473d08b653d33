import numpy as np

def spherical_to_vector(radius: float, phi: float, theta: float) -> np.ndarray:
    """Convert spherical coordinates to a cartesian vector

    The polar axis is +Y ("up").  theta is measured around +Y starting at +Z.

    Parameters
    ----------
    radius : float
        Distance from the origin
    phi : float
        Polar angle from +Y in radians
    theta : float
        Azimuth around +Y in radians

    Returns
    -------
    vec : np.ndarray
        [x, y, z]
    """
    sin_phi = np.sin(phi)
    x = radius * sin_phi * np.sin(theta)
    y = radius * np.cos(phi)
    z = radius * sin_phi * np.cos(theta)
    return np.array([x, y, z], dtype=np.float64)

def vector_to_spherical(vec: np.ndarray) -> tuple[float, float, float]:
    """Inverse of spherical_to_vector

    Parameters
    ----------
    vec : np.ndarray
        [x, y, z]

    Returns
    -------
    radius : float
    phi : float
        Polar angle from +Y in radians
    theta : float
        Azimuth around +Y in radians
    """
    x, y, z = (float(v) for v in vec)
    radius = float(np.sqrt(x * x + y * y + z * z))
    if radius == 0.0:
        return 0.0, 0.0, 0.0
    theta = float(np.arctan2(x, z))
    phi = float(np.arccos(np.clip(y / radius, -1.0, 1.0)))
    return radius, phi, theta

def latlon_to_local(lat: float, lon: float, radius: float) -> np.ndarray:
    """Convert latitude/longitude to a point on the globe in its local frame

    Latitude and longitude are not range checked, out of range values (or NaN)
    still produce a point.

    Parameters
    ----------
    lat : float
        Latitude in degrees
    lon : float
        Longitude in degrees
    radius : float
        Globe radius in scene units

    Returns
    -------
    anchor : np.ndarray
        [x, y, z] in the globe's local frame
    """
    phi = np.radians(90.0 - lat)
    theta = np.radians(lon)
    return spherical_to_vector(radius, phi, theta)

def radial_extend(point: np.ndarray, extra: float) -> np.ndarray:
    """Push a point further away from the origin along its own direction

    Parameters
    ----------
    point : np.ndarray
        [x, y, z]
    extra : float
        Distance to add beyond the point

    Returns
    -------
    end : np.ndarray
        [x, y, z]
    """
    point = np.asarray(point, dtype=np.float64)
    length = np.linalg.norm(point)
    if length == 0.0:
        return point.copy()
    return point + point / length * extra

def sun_direction(phi: float, theta: float) -> np.ndarray:
    """Unit vector pointing at the sun for the shading stage"""
    return spherical_to_vector(1.0, phi, theta)
