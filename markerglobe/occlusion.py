"""Hide markers that sit on the far side of the globe.

Each frame a ray is cast from the camera toward every anchor.  If the globe
surface is hit before the ray reaches the anchor, the anchor is behind the
globe.  This stands in for reading back the depth buffer.
"""
import logging

import numpy as np

from markerglobe.scene import GLOBE_LABEL

logger = logging.getLogger(__name__)


class OcclusionResolver:
    '''Per frame visibility of every marker

    Parameters
    ----------
    registry : MarkerRegistry
        Supplies the world position of each entry
    globe_label : str
        Label of the object whose hits count as occluding
    tolerance : float
        Hits closer than the anchor by no more than this are ties, and ties
        are visible
    '''

    def __init__(self, registry, globe_label: str = GLOBE_LABEL, tolerance: float = 1e-6):
        self.registry = registry
        self.globe_label = globe_label
        self.tolerance = tolerance

    def is_visible(self, anchor: np.ndarray, camera, scene) -> bool:
        """
        Whether the globe leaves the anchor in view of the camera.

        Parameters
        ----------
            anchor: np.ndarray
                [x, y, z] in world space
            camera: PerspectiveCamera
            scene: Scene

        Returns
        -------
            visible: bool
        """
        ndc = camera.project(anchor)
        ray_origin, ray_direction = camera.ray_from_ndc(ndc[0], ndc[1])
        hits = scene.intersect(ray_origin, ray_direction, recursive=True)

        if not hits:
            return True

        globe_hit = next((hit for hit in hits if hit.object.label == self.globe_label), None)
        if globe_hit is None:
            return True

        anchor_distance = float(np.linalg.norm(anchor - camera.position))
        return not (globe_hit.distance < anchor_distance - self.tolerance)

    def update_visibility(self, entries, camera, scene) -> None:
        """Set occlusion_visible on every entry's element, in order"""
        for entry in entries:
            anchor = self.registry.world_position(entry)
            visible = self.is_visible(anchor, camera, scene)
            if visible != entry.element.occlusion_visible:
                logger.debug("Marker %d %s", entry.identifier, 'shown' if visible else 'hidden')
            entry.element.occlusion_visible = visible
