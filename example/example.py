import sys
import pathlib
import logging
from PySide6.QtWidgets import QApplication

from markerglobe import app
from markerglobe.config import GlobeConfig
from markerglobe.log import setup_logging
from markerglobe.markers import GeoLocation


EXTRA_LOCATIONS = [
    GeoLocation(40.7128, -74.0060, 'New York'),
    GeoLocation(-33.8688, 151.2093, 'Sydney'),
    GeoLocation(-22.9068, -43.1729, 'Rio de Janeiro'),
    GeoLocation(64.1466, -21.9426, 'Reykjavik'),
    GeoLocation(-54.8019, -68.3030, 'Ushuaia'),
]


class ExampleWindow(app.MainWindow):

    def __init__(self, config: GlobeConfig):
        super().__init__(config)
        # Goes through the same path as the form, including validation
        for location in EXTRA_LOCATIONS:
            self.intake.submit(str(location.latitude), str(location.longitude), location.name)


if __name__ == '__main__':
    setup_logging(logging.DEBUG if '-v' in sys.argv else logging.INFO)

    this_dir = pathlib.Path(__file__).resolve().parent
    texture = this_dir / 'assets' / 'day.jpg'

    config = GlobeConfig(
        day_texture=str(texture) if texture.exists() else None,
        rotation_speed=0.1
    )
    if config.day_texture is None:
        logging.getLogger(__name__).warning("Texture not found: %s", texture)

    qapp = QApplication(sys.argv)
    window = ExampleWindow(config)
    window.resize(1200, 800)
    window.show()
    sys.exit(qapp.exec())
