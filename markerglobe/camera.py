import math
import numpy as np

from markerglobe.coord_utils import spherical_to_vector, vector_to_spherical


def perspective_matrix(fov_deg: float, aspect: float, near: float, far: float) -> np.ndarray:
    """OpenGL style perspective projection, fov is vertical"""
    f = 1.0 / math.tan(math.radians(fov_deg) / 2.0)
    proj = np.zeros((4, 4), dtype=np.float64)
    proj[0, 0] = f / max(aspect, 1e-6)
    proj[1, 1] = f
    proj[2, 2] = (far + near) / (near - far)
    proj[2, 3] = (2 * far * near) / (near - far)
    proj[3, 2] = -1.0
    return proj


def look_at_matrix(eye: np.ndarray, target: np.ndarray, up: np.ndarray) -> np.ndarray:
    """World to camera transform"""
    forward = target - eye
    forward = forward / np.linalg.norm(forward)
    right = np.cross(forward, up)
    if np.linalg.norm(right) < 1e-9:
        # looking straight along up
        right = np.array([1.0, 0.0, 0.0])
    else:
        right = right / np.linalg.norm(right)
    real_up = np.cross(right, forward)
    view = np.identity(4, dtype=np.float64)
    view[0, :3] = right
    view[1, :3] = real_up
    view[2, :3] = -forward
    view[:3, 3] = -view[:3, :3] @ eye
    return view


class PerspectiveCamera:
    """Perspective camera that always looks at a target point

    Attributes
    ----------
    position : np.ndarray
        World position of the eye
    target : np.ndarray
        Point the camera looks at
    up : np.ndarray
        World up vector, +Y
    """

    def __init__(self, fov: float = 25.0, aspect: float = 1.0, near: float = 0.1, far: float = 100.0,
                 position=(0.0, 0.0, 10.0)):
        self.fov = fov
        self.aspect = aspect
        self.near = near
        self.far = far
        self.position = np.array(position, dtype=np.float64)
        self.target = np.zeros(3)
        self.up = np.array([0.0, 1.0, 0.0])
        self.projection_matrix = np.eye(4)
        self.update_projection_matrix()

    def update_projection_matrix(self) -> None:
        """Recompute the projection after fov/aspect/near/far change"""
        self.projection_matrix = perspective_matrix(self.fov, self.aspect, self.near, self.far)

    def look_at(self, target) -> None:
        self.target = np.array(target, dtype=np.float64)

    @property
    def view_matrix(self) -> np.ndarray:
        return look_at_matrix(self.position, self.target, self.up)

    def project(self, point) -> np.ndarray:
        """
        World point to normalized device coordinates.

        Parameters
        ----------
            point: np.ndarray
                [x, y, z] in world space

        Returns
        -------
            ndc: np.ndarray
                [x, y, z], x and y in -1:1 when the point is in view
        """
        clip = self.projection_matrix @ self.view_matrix @ np.append(np.asarray(point, dtype=np.float64), 1.0)
        return clip[:3] / clip[3]

    def unproject(self, ndc) -> np.ndarray:
        """Normalized device coordinates to a world point"""
        inv = np.linalg.inv(self.projection_matrix @ self.view_matrix)
        world = inv @ np.append(np.asarray(ndc, dtype=np.float64), 1.0)
        return world[:3] / world[3]

    def ray_from_ndc(self, ndc_x: float, ndc_y: float) -> tuple[np.ndarray, np.ndarray]:
        """
        Ray from the eye through a point on screen.

        Parameters
        ----------
            ndc_x, ndc_y: float
                Normalized device coordinates

        Returns
        -------
            (ray_origin, ray_direction): Both as numpy arrays in world coordinates
        """
        through = self.unproject([ndc_x, ndc_y, 0.5])
        direction = through - self.position
        direction = direction / np.linalg.norm(direction)
        return self.position.copy(), direction


class OrbitControls:
    """Orbit the camera around its target with mouse drags and the wheel

    Input only accumulates deltas, update() applies them.  With damping
    enabled the deltas decay over several updates so motion eases out.
    """

    EPS = 1e-6

    def __init__(self, camera: PerspectiveCamera, enable_damping: bool = True,
                 damping_factor: float = 0.05, rotate_speed: float = 1.0, zoom_speed: float = 1.0,
                 min_distance: float = 0.0, max_distance: float = math.inf):
        self.camera = camera
        self.target = camera.target.copy()
        self.enable_damping = enable_damping
        self.damping_factor = damping_factor
        self.rotate_speed = rotate_speed
        self.zoom_speed = zoom_speed
        self.min_distance = min_distance
        self.max_distance = max_distance

        self._delta_theta = 0.0
        self._delta_phi = 0.0
        self._scale = 1.0

    def rotate(self, dx: float, dy: float, viewport_height: float) -> None:
        """Queue a rotation for a mouse drag of (dx, dy) pixels"""
        if viewport_height <= 0:
            return
        self._delta_theta -= 2 * math.pi * dx / viewport_height * self.rotate_speed
        self._delta_phi -= 2 * math.pi * dy / viewport_height * self.rotate_speed

    def dolly(self, wheel_delta: float) -> None:
        """Queue a zoom, positive wheel_delta moves the camera closer"""
        if wheel_delta == 0:
            return
        factor = math.pow(0.95, self.zoom_speed)
        if wheel_delta > 0:
            self._scale *= factor
        else:
            self._scale /= factor

    def update(self) -> bool:
        """
        Apply queued motion to the camera.

        Returns
        -------
            changed: bool
                True if the camera moved
        """
        offset = self.camera.position - self.target
        radius, phi, theta = vector_to_spherical(offset)

        if self.enable_damping:
            theta += self._delta_theta * self.damping_factor
            phi += self._delta_phi * self.damping_factor
        else:
            theta += self._delta_theta
            phi += self._delta_phi

        phi = float(np.clip(phi, self.EPS, math.pi - self.EPS))
        radius = float(np.clip(radius * self._scale, self.min_distance, self.max_distance))

        new_position = self.target + spherical_to_vector(radius, phi, theta)
        moved = float(np.linalg.norm(new_position - self.camera.position))
        self.camera.position = new_position
        self.camera.look_at(self.target)

        if self.enable_damping:
            self._delta_theta *= (1 - self.damping_factor)
            self._delta_phi *= (1 - self.damping_factor)
        else:
            self._delta_theta = 0.0
            self._delta_phi = 0.0
        self._scale = 1.0

        return moved > self.EPS
