"""Application shell: builds the scene, marker pipeline and main window."""
import argparse
import logging
import sys
import time

from PySide6.QtWidgets import QApplication, QMainWindow, QWidget, QHBoxLayout
from PySide6.QtCore import QTimer

from markerglobe.camera import OrbitControls, PerspectiveCamera
from markerglobe.config import GlobeConfig, hex_to_rgb
from markerglobe.form import LocationForm
from markerglobe.frame import FrameDriver
from markerglobe.globe import GlobeWidget
from markerglobe.intake import LocationIntake
from markerglobe.log import setup_logging
from markerglobe.markers import MarkerRegistry
from markerglobe.occlusion import OcclusionResolver
from markerglobe.scene import build_globe_scene
from markerglobe.screen import ScreenProjector

logger = logging.getLogger(__name__)


def build_scene(config: GlobeConfig):
    """Globe and atmosphere configured from config, see build_globe_scene"""
    return build_globe_scene(
        config.radius,
        atmosphere_scale=config.atmosphere_scale,
        globe_color=config.globe_color,
        atmosphere_color=hex_to_rgb(config.atmosphere_day_color),
        atmosphere_alpha=config.atmosphere_alpha
    )


class MainWindow(QMainWindow):
    '''Globe on the left, location form on the right'''

    def __init__(self, config: GlobeConfig):
        super().__init__()
        self.setWindowTitle("Marker Globe")
        self.config = config

        self.scene, self.earth = build_scene(config)

        self.camera = PerspectiveCamera(config.fov, 1.0, config.near, config.far,
                                        position=config.camera_position)
        self.camera.look_at((0.0, 0.0, 0.0))
        self.controls = OrbitControls(self.camera, enable_damping=config.enable_damping,
                                      damping_factor=config.damping_factor)

        self.registry = MarkerRegistry(self.earth, stem_extension=config.stem_extension,
                                       stem_color=config.stem_color,
                                       stem_pick_radius=config.stem_pick_threshold)
        self.intake = LocationIntake(self.registry, config.radius)

        central = QWidget()
        hbox = QHBoxLayout()
        self.globe = GlobeWidget(config, self.scene, self.camera, self.controls, self.registry)
        hbox.addWidget(self.globe, stretch=1)
        self.form = LocationForm(self.intake)
        self.form.setFixedWidth(240)
        hbox.addWidget(self.form)
        central.setLayout(hbox)
        self.setCentralWidget(central)
        self.intake.notify = self.form.alert

        self.driver = FrameDriver(
            self.registry,
            self.scene,
            self.controls,
            OcclusionResolver(self.registry, tolerance=config.occlusion_tolerance),
            ScreenProjector(self.registry),
            self.globe,
            rotation_speed=config.rotation_speed
        )

        self.intake.seed(config.seed_locations)
        logger.info("Seeded %d locations", len(self.registry))

        self.start_time = time.perf_counter()
        self.frame_timer = QTimer(self)
        self.frame_timer.timeout.connect(self.on_frame)
        self.frame_timer.start(config.frame_interval_ms)

        self.statusBar().showMessage('Left click/drag to orbit, wheel to zoom, click a marker for details')

    def on_frame(self):
        elapsed = time.perf_counter() - self.start_time
        self.driver.tick(self.camera, self.globe.viewport, elapsed)

    def closeEvent(self, event):
        self.frame_timer.stop()
        self.globe.close()
        super().closeEvent(event)


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog='markerglobe', description='Globe with geographic markers')
    parser.add_argument('--texture', help='Equirectangular day texture for the globe')
    parser.add_argument('--rotation-speed', type=float, default=None,
                        help='Globe spin in radians per second (default: no spin)')
    parser.add_argument('--no-seed', action='store_true', help='Start without the seed locations')
    parser.add_argument('--log-level', default='INFO',
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'])
    parser.add_argument('--log-file', default=None)
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    setup_logging(getattr(logging, args.log_level), args.log_file)
    config = GlobeConfig().from_args(args)

    app = QApplication(sys.argv[:1])
    window = MainWindow(config)
    window.resize(1200, 800)
    window.show()
    return app.exec()
