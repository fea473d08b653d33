from dataclasses import dataclass
import logging

logger = logging.getLogger(__name__)


@dataclass
class Viewport:
    """Size of the drawing surface in logical pixels"""
    width: int
    height: int
    pixel_ratio: float = 1.0

    @property
    def aspect(self) -> float:
        return self.width / self.height if self.height > 0 else 1.0

    def resize(self, width: int, height: int, device_pixel_ratio: float = 1.0,
               max_pixel_ratio: float = 2.0) -> None:
        self.width = width
        self.height = height
        self.pixel_ratio = min(device_pixel_ratio, max_pixel_ratio)


def apply_resize(camera, viewport: Viewport, width: int, height: int,
                 device_pixel_ratio: float = 1.0, max_pixel_ratio: float = 2.0) -> None:
    """Bring the viewport and the camera projection up to date with a new size"""
    viewport.resize(width, height, device_pixel_ratio, max_pixel_ratio)
    camera.aspect = viewport.aspect
    camera.update_projection_matrix()
    logger.debug("Viewport resized to %dx%d @%.2f", width, height, viewport.pixel_ratio)


class FrameDriver:
    '''One step of the render loop

    tick() advances the globe rotation and the camera controls, then resolves
    marker visibility, then moves the markers, then renders.

    Parameters
    ----------
    registry : MarkerRegistry
    scene : Scene
    controls : OrbitControls
    occlusion : OcclusionResolver
    projector : ScreenProjector
    renderer : object with render(scene, camera)
    rotation_speed : float
        Globe spin about +Y in radians per second of elapsed time
    '''

    def __init__(self, registry, scene, controls, occlusion, projector, renderer,
                 rotation_speed: float = 0.0):
        self.registry = registry
        self.scene = scene
        self.controls = controls
        self.occlusion = occlusion
        self.projector = projector
        self.renderer = renderer
        self.rotation_speed = rotation_speed
        self.frame_count = 0

    def tick(self, camera, viewport: Viewport, elapsed: float = 0.0) -> None:
        """
        Run one frame.

        Parameters
        ----------
            camera: PerspectiveCamera
            viewport: Viewport
            elapsed: float
                Seconds since the loop started
        """
        if self.rotation_speed:
            self.registry.globe.rotation_y = elapsed * self.rotation_speed

        self.controls.update()

        entries = self.registry.all()
        self.occlusion.update_visibility(entries, camera, self.scene)
        self.projector.update_screen_positions(entries, camera, viewport.width, viewport.height)

        self.renderer.render(self.scene, camera)
        self.frame_count += 1
