"""
Configuration
=============
All tunable constants for the globe, camera, markers and frame loop live in
GlobeConfig.  The defaults reproduce the stock scene: a radius 2 globe seen
from (12, 5, 4) through a 25 degree lens.
"""
from dataclasses import dataclass, field, replace
from typing import Optional
import math

from markerglobe.markers import GeoLocation


DEFAULT_SEED_LOCATIONS = (
    GeoLocation(55.755864, 37.617698, 'Moscow'),
    GeoLocation(-37.813747, 144.963033, 'Melbourne'),
    GeoLocation(39.901850, 116.391441, 'Beijing'),
)


@dataclass
class GlobeConfig:
    # Globe
    radius: float = 2.0
    sphere_segments: int = 64
    rotation_speed: float = 0.0  # rad/s, 0 disables rotation
    day_texture: Optional[str] = None
    globe_color: tuple = (0.15, 0.35, 0.6)

    # Atmosphere
    atmosphere_scale: float = 1.04
    atmosphere_day_color: str = '#00aaff'
    atmosphere_alpha: float = 0.15

    # Markers
    stem_extension: float = 0.5
    stem_color: tuple = (1.0, 1.0, 0.0)
    stem_pick_threshold: float = 1.0
    occlusion_tolerance: float = 1e-6

    # Sun
    sun_phi: float = math.pi * 0.5
    sun_theta: float = 0.5

    # Camera
    fov: float = 25.0
    near: float = 0.1
    far: float = 100.0
    camera_position: tuple = (12.0, 5.0, 4.0)
    enable_damping: bool = True
    damping_factor: float = 0.05

    # Renderer / loop
    clear_color: str = '#000011'
    frame_interval_ms: int = 16
    max_pixel_ratio: float = 2.0

    seed_locations: tuple = field(default=DEFAULT_SEED_LOCATIONS)

    def from_args(self, args) -> 'GlobeConfig':
        """Return a copy with any CLI options that were given applied

        Parameters
        ----------
        args : argparse.Namespace
            Parsed command line
        """
        changes = {}
        if getattr(args, 'texture', None):
            changes['day_texture'] = args.texture
        if getattr(args, 'rotation_speed', None) is not None:
            changes['rotation_speed'] = args.rotation_speed
        if getattr(args, 'no_seed', False):
            changes['seed_locations'] = ()
        return replace(self, **changes)


def hex_to_rgb(value: str) -> tuple[float, float, float]:
    """'#rrggbb' to an (r, g, b) tuple in 0:1"""
    value = value.lstrip('#')
    if len(value) != 6:
        raise ValueError(f"Expected hex color RRGGBB, got {value!r}")
    r = int(value[0:2], 16) / 255.0
    g = int(value[2:4], 16) / 255.0
    b = int(value[4:6], 16) / 255.0
    return (r, g, b)
