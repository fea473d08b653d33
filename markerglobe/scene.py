from dataclasses import dataclass
import numpy as np


@dataclass
class Intersection:
    """A single ray hit

    Attributes
    ----------
    distance : float
        Distance from the ray origin to the hit point
    point : np.ndarray
        World space hit point
    object : SceneObject
        The object that was hit
    """
    distance: float
    point: np.ndarray
    object: 'SceneObject'


class SceneObject:
    """Base class for all scene objects

    Objects form a tree.  Each object has a transform relative to its parent
    made of a translation, a rotation about +Y and a uniform scale.

    Attributes
    ----------
    label : str
        Name for this object, used to pick objects out of ray hits
    """

    def __init__(self, label: str = '', position=(0.0, 0.0, 0.0), scale: float = 1.0):
        self.label = label
        self.position = np.array(position, dtype=np.float64)
        self.rotation_y = 0.0
        self.scale = float(scale)
        self.parent = None
        self.children = []

    def add(self, child: 'SceneObject') -> None:
        """Attach a child object"""
        if child.parent is not None:
            child.parent.children.remove(child)
        child.parent = self
        self.children.append(child)

    def traverse(self):
        """Yield this object and all descendants, depth first"""
        yield self
        for child in self.children:
            yield from child.traverse()

    @property
    def matrix(self) -> np.ndarray:
        """Local 4x4 transform"""
        c = np.cos(self.rotation_y)
        s = np.sin(self.rotation_y)
        m = np.eye(4)
        m[:3, :3] = np.array([
            [c, 0, s],
            [0, 1, 0],
            [-s, 0, c]
        ]) * self.scale
        m[:3, 3] = self.position
        return m

    @property
    def matrix_world(self) -> np.ndarray:
        """4x4 transform from this object's frame to world"""
        if self.parent is None:
            return self.matrix
        return self.parent.matrix_world @ self.matrix

    def local_to_world(self, point: np.ndarray) -> np.ndarray:
        p = np.append(np.asarray(point, dtype=np.float64), 1.0)
        return (self.matrix_world @ p)[:3]

    def intersect_ray(self, ray_origin: np.ndarray, ray_direction: np.ndarray) -> list[Intersection]:
        """
        Test if ray intersects this object (children are not tested).

        Parameters
        ----------
            ray_origin: np.ndarray
                numpy array [x, y, z] in world space
            ray_direction: np.ndarray
                normalized numpy array [x, y, z] in world space

        Returns
        -------
            hits: list[Intersection]
                empty if the ray misses
        """
        return []

    def __str__(self):
        return f'{self.__class__.__name__} : {self.label}'


# =============================================================================
# Sphere
# =============================================================================

class SphereSceneObject(SceneObject):
    """Sphere centered on its own origin

    side selects which faces a ray can hit, like a material's side:
    'front' hits only where the ray enters, 'back' only where it leaves,
    'double' both.
    """

    def __init__(self, label: str, radius: float, side: str = 'front', scale: float = 1.0,
                 color=(1.0, 1.0, 1.0), alpha: float = 1.0):
        '''
        Parameters
        ----------
        label : str
            Name of this object
        radius : float
            Radius before scaling
        side : str
            'front', 'back' or 'double'
        scale : float
            Uniform scale applied on top of radius
        color : [float,float,float]
            Color (0:1, 0:1, 0:1)
        alpha : float
            Transparency (0=totally transparent, 1=not transparent)
        '''
        super().__init__(label, scale=scale)
        if side not in ('front', 'back', 'double'):
            raise ValueError(f"side must be 'front', 'back' or 'double', got {side!r}")
        self.radius = float(radius)
        self.side = side
        self.color = color
        self.alpha = alpha

    def intersect_ray(self, ray_origin: np.ndarray, ray_direction: np.ndarray) -> list[Intersection]:
        # Solve in local space.  The local direction is left unnormalized so
        # the ray parameter stays a world space distance.
        inv = np.linalg.inv(self.matrix_world)
        origin = (inv @ np.append(ray_origin, 1.0))[:3]
        direction = inv[:3, :3] @ ray_direction

        a = np.dot(direction, direction)
        b = 2.0 * np.dot(origin, direction)
        c = np.dot(origin, origin) - self.radius ** 2

        discriminant = b * b - 4 * a * c
        if a == 0.0 or discriminant < 0:
            return []

        root = np.sqrt(discriminant)
        t_enter = (-b - root) / (2 * a)
        t_exit = (-b + root) / (2 * a)

        if self.side == 'front':
            candidates = [t_enter]
        elif self.side == 'back':
            candidates = [t_exit]
        else:
            candidates = [t_enter, t_exit]

        return [
            Intersection(float(t), ray_origin + t * ray_direction, self)
            for t in candidates if t >= 0
        ]


# =============================================================================
# Line segment
# =============================================================================

class LineSceneObject(SceneObject):
    """Straight line segment between two points in the parent's frame"""

    def __init__(self, label: str, start, end, color=(1.0, 1.0, 0.0), width: float = 1.0,
                 pick_radius: float = 1.0):
        '''
        Parameters
        ----------
        label : str
            Name of this object
        start : [float,float,float]
            First end point
        end : [float,float,float]
            Second end point
        color : [float,float,float]
            Color (0:1, 0:1, 0:1)
        width : float
            Width to draw the line
        pick_radius : float
            Distance around the segment that counts as a hit
        '''
        super().__init__(label)
        self.start = np.array(start, dtype=np.float64)
        self.end = np.array(end, dtype=np.float64)
        self.color = color
        self.width = width
        self.pick_radius = pick_radius

    def intersect_ray(self, ray_origin: np.ndarray, ray_direction: np.ndarray) -> list[Intersection]:
        p0 = self.local_to_world(self.start)
        p1 = self.local_to_world(self.end)
        t = self._ray_cylinder_intersect(ray_origin, ray_direction, p0, p1, self.pick_radius)
        if t is None:
            return []
        return [Intersection(float(t), ray_origin + t * ray_direction, self)]

    def _ray_cylinder_intersect(self, ray_origin, ray_dir, cyl_p0, cyl_p1, radius):
        """Intersect ray with cylinder around line segment"""
        cyl_axis = cyl_p1 - cyl_p0
        cyl_len = np.linalg.norm(cyl_axis)
        if cyl_len < 1e-9:
            return None
        cyl_axis = cyl_axis / cyl_len

        delta = ray_origin - cyl_p0
        dot_ray_axis = np.dot(ray_dir, cyl_axis)
        dot_delta_axis = np.dot(delta, cyl_axis)

        a = 1 - dot_ray_axis ** 2
        if a < 1e-12:
            # parallel to the segment
            return None
        b = 2 * (np.dot(delta, ray_dir) - dot_ray_axis * dot_delta_axis)
        c = np.dot(delta, delta) - dot_delta_axis ** 2 - radius ** 2

        discriminant = b * b - 4 * a * c
        if discriminant < 0:
            return None

        t = (-b - np.sqrt(discriminant)) / (2 * a)
        if t < 0:
            t = (-b + np.sqrt(discriminant)) / (2 * a)
        if t < 0:
            return None

        hit_point = ray_origin + t * ray_dir
        projection = np.dot(hit_point - cyl_p0, cyl_axis)

        if 0 <= projection <= cyl_len:
            return t
        return None


# =============================================================================
# Scene Container
# =============================================================================

class Scene:
    """Container for all top level scene objects"""

    def __init__(self):
        self.objects = []

    def add(self, obj: SceneObject) -> None:
        """Add an object to the scene"""
        self.objects.append(obj)

    def find(self, label: str) -> SceneObject | None:
        """First object in the tree with this label"""
        for obj in self.traverse():
            if obj.label == label:
                return obj
        return None

    def traverse(self):
        for obj in self.objects:
            yield from obj.traverse()

    def intersect(self, ray_origin, ray_direction, recursive: bool = True) -> list[Intersection]:
        """
        Every hit of a ray against the scene.

        Parameters
        ----------
            ray_origin: np.ndarray
                [x, y, z] in world space
            ray_direction: np.ndarray
                [x, y, z] in world space, normalized here
            recursive: bool
                Also test the children of top level objects

        Returns
        -------
            hits: list[Intersection]
                Sorted by ascending distance from the ray origin
        """
        ray_origin = np.asarray(ray_origin, dtype=np.float64)
        ray_direction = np.asarray(ray_direction, dtype=np.float64)
        ray_direction = ray_direction / np.linalg.norm(ray_direction)

        objects = self.traverse() if recursive else iter(self.objects)
        hits = []
        for obj in objects:
            hits.extend(obj.intersect_ray(ray_origin, ray_direction))
        hits.sort(key=lambda hit: hit.distance)
        return hits


GLOBE_LABEL = 'earth'


def build_globe_scene(radius: float, atmosphere_scale: float = 1.04, globe_color=(0.15, 0.35, 0.6),
                      atmosphere_color=(0.0, 0.67, 1.0), atmosphere_alpha: float = 0.15):
    """Globe plus atmosphere shell

    Returns
    -------
    scene : Scene
    earth : SphereSceneObject
        The globe surface, parent of the marker stems
    """
    scene = Scene()
    earth = SphereSceneObject(GLOBE_LABEL, radius, side='front', color=globe_color)
    scene.add(earth)

    # Same sphere scaled up, only its inside faces are hit/drawn
    atmosphere = SphereSceneObject('atmosphere', radius, side='back', scale=atmosphere_scale,
                                   color=atmosphere_color, alpha=atmosphere_alpha)
    scene.add(atmosphere)
    return scene, earth
