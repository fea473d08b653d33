# STDLIB Imports
import logging
import os
import numpy as np

# Pyside Imports
from PySide6.QtWidgets import QFrame, QHBoxLayout, QVBoxLayout, QLabel, QWidget
from PySide6.QtOpenGLWidgets import QOpenGLWidget
from PySide6.QtCore import Qt, QPointF
from PySide6.QtGui import QImage

# OpenGL Imports
from OpenGL.GL import *

# This Project Imports
from markerglobe.config import GlobeConfig, hex_to_rgb
from markerglobe.coord_utils import latlon_to_local, sun_direction
from markerglobe.frame import Viewport, apply_resize
from markerglobe.markers import MarkerEntry, MarkerRegistry
from markerglobe.scene import GLOBE_LABEL, LineSceneObject, Scene, SceneObject, SphereSceneObject

logger = logging.getLogger(__name__)

DOT_SIZE = 14


def sphere_mesh(radius: float, segments: int) -> list[list[tuple]]:
    """Latitude bands of (position, normal, texcoord) pairs for quad strips

    Vertices come from the same lat/lon projection as the marker anchors so
    texture and markers line up.
    """
    bands = []
    lats = np.linspace(-90.0, 90.0, segments + 1)
    lons = np.linspace(-180.0, 180.0, segments + 1)
    for i in range(segments):
        strip = []
        for lon in lons:
            for lat in (lats[i + 1], lats[i]):
                p = latlon_to_local(lat, lon, radius)
                n = p / radius
                uv = ((lon + 180.0) / 360.0, (lat + 90.0) / 180.0)
                strip.append((p, n, uv))
        bands.append(strip)
    return bands


class MarkerLabel(QFrame):
    '''Overlay widget for one marker: a dot plus a details box while selected'''

    def __init__(self, entry: MarkerEntry, registry: MarkerRegistry, parent=None):
        super().__init__(parent)
        self.entry = entry
        self.registry = registry
        self.setAttribute(Qt.WA_TranslucentBackground)
        self.setCursor(Qt.PointingHandCursor)

        hbox = QHBoxLayout()
        hbox.setContentsMargins(0, 0, 0, 0)
        hbox.setSpacing(6)

        self.dot = QLabel()
        self.dot.setFixedSize(DOT_SIZE, DOT_SIZE)
        self.dot.setStyleSheet(
            f'background: #ffcc00; border: 2px solid white; border-radius: {DOT_SIZE // 2}px;'
        )
        hbox.addWidget(self.dot, alignment=Qt.AlignTop)

        self.info = QWidget()
        self.info.setStyleSheet('background: rgba(0, 0, 17, 200); color: white; border-radius: 4px;')
        vbox = QVBoxLayout(self.info)
        vbox.setContentsMargins(6, 4, 6, 4)
        location = entry.location
        vbox.addWidget(QLabel(f'<b>{location.name}</b>'))
        vbox.addWidget(QLabel(f'{location.latitude}'))
        vbox.addWidget(QLabel(f'{location.longitude}'))
        hbox.addWidget(self.info)

        self.setLayout(hbox)
        self.refresh_selection()
        self.hide()

    def refresh_selection(self) -> None:
        self.info.setVisible(self.registry.is_selected(self.entry.identifier))
        self.adjustSize()

    def sync(self, center: QPointF) -> None:
        """Follow the element state, center is the middle of the viewport"""
        element = self.entry.element
        if not element.occlusion_visible:
            self.hide()
            return
        ox, oy = element.offset
        x = center.x() + ox - DOT_SIZE / 2
        y = center.y() + oy - DOT_SIZE / 2
        self.move(int(round(x)), int(round(y)))
        self.show()
        self.raise_()

    def mousePressEvent(self, event):
        if event.button() == Qt.LeftButton:
            self.registry.toggle_selection(self.entry.identifier)
            event.accept()
        else:
            super().mousePressEvent(event)


class GlobeWidget(QOpenGLWidget):
    '''PySide6 OpenGL Widget drawing the scene and hosting the marker overlays'''

    def __init__(self, config: GlobeConfig, scene: Scene, camera, controls,
                 registry: MarkerRegistry, parent=None):
        super().__init__(parent)
        self.setMinimumSize(800, 600)
        self.config = config
        self.scene = scene
        self.camera = camera
        self.controls = controls
        self.registry = registry
        self.viewport = Viewport(self.width(), self.height())
        self.last_pos = None # For mouse dragging

        self.texture_id = None
        self.sphere_bands = {}
        self.labels = {}

        self.registry.sigMarkerAdded.connect(self.on_marker_added)
        self.registry.sigSelectionChanged.connect(self.on_selection_changed)
        for entry in self.registry.all():
            self.on_marker_added(entry)

    def initializeGL(self):
        glEnable(GL_DEPTH_TEST)
        glEnable(GL_LIGHTING)
        glEnable(GL_LIGHT0)
        glEnable(GL_COLOR_MATERIAL)
        glColorMaterial(GL_FRONT_AND_BACK, GL_AMBIENT_AND_DIFFUSE)
        glLightfv(GL_LIGHT0, GL_AMBIENT, [0.15, 0.15, 0.2, 1.0])
        glLightfv(GL_LIGHT0, GL_DIFFUSE, [1.0, 1.0, 1.0, 1.0])

        glClearColor(*hex_to_rgb(self.config.clear_color), 1.0)

        if self.config.day_texture:
            self._load_texture(self.config.day_texture)

    def resizeGL(self, w, h):
        dpr = self.devicePixelRatio()
        apply_resize(self.camera, self.viewport, w, h, dpr, self.config.max_pixel_ratio)
        glViewport(0, 0, int(w * dpr), int(h * dpr))

    def paintGL(self):
        glClear(GL_COLOR_BUFFER_BIT | GL_DEPTH_BUFFER_BIT)

        glMatrixMode(GL_PROJECTION)
        glLoadMatrixd(self.camera.projection_matrix.T.flatten())
        glMatrixMode(GL_MODELVIEW)
        glLoadMatrixd(self.camera.view_matrix.T.flatten())

        # Directional light, stationary in world space
        sun = sun_direction(self.config.sun_phi, self.config.sun_theta)
        glLightfv(GL_LIGHT0, GL_POSITION, [*sun, 0.0])

        # Opaque objects first so the atmosphere blends over them
        objects = sorted(self.scene.objects, key=lambda obj: getattr(obj, 'alpha', 1.0) < 1.0)
        for obj in objects:
            self.draw_object(obj)

    def render(self, scene: Scene, camera) -> None:
        """Renderer hook for the frame driver: move overlays, schedule a repaint"""
        self.sync_labels()
        self.update()

    #------------------------------------------------
    # Drawing
    #------------------------------------------------
    def draw_object(self, obj: SceneObject) -> None:
        glPushMatrix()
        glMultMatrixd(obj.matrix.T.flatten())
        if isinstance(obj, SphereSceneObject):
            self.draw_sphere(obj)
        elif isinstance(obj, LineSceneObject):
            self.draw_line(obj)
        for child in obj.children:
            self.draw_object(child)
        glPopMatrix()

    def _bands(self, radius: float):
        key = (radius, self.config.sphere_segments)
        if key not in self.sphere_bands:
            self.sphere_bands[key] = sphere_mesh(radius, self.config.sphere_segments)
        return self.sphere_bands[key]

    def draw_sphere(self, obj: SphereSceneObject) -> None:
        textured = obj.label == GLOBE_LABEL and self.texture_id is not None
        translucent = obj.alpha < 1.0

        if textured:
            glEnable(GL_TEXTURE_2D)
            glBindTexture(GL_TEXTURE_2D, self.texture_id)
            glColor4f(1.0, 1.0, 1.0, 1.0)
        else:
            glDisable(GL_TEXTURE_2D)
            glColor4f(*obj.color, obj.alpha)

        if translucent:
            glEnable(GL_BLEND)
            glBlendFunc(GL_SRC_ALPHA, GL_ONE_MINUS_SRC_ALPHA)
            glDepthMask(GL_FALSE)
        if obj.side != 'double':
            glEnable(GL_CULL_FACE)
            glCullFace(GL_FRONT if obj.side == 'back' else GL_BACK)

        for strip in self._bands(obj.radius):
            glBegin(GL_QUAD_STRIP)
            for p, n, uv in strip:
                glTexCoord2f(*uv)
                glNormal3f(*n)
                glVertex3f(*p)
            glEnd()

        glDisable(GL_CULL_FACE)
        if translucent:
            glDepthMask(GL_TRUE)
            glDisable(GL_BLEND)
        if textured:
            glBindTexture(GL_TEXTURE_2D, 0)
            glDisable(GL_TEXTURE_2D)

    def draw_line(self, obj: LineSceneObject) -> None:
        glDisable(GL_LIGHTING)
        glColor3f(*obj.color)
        glLineWidth(obj.width)
        glBegin(GL_LINES)
        glVertex3f(*obj.start)
        glVertex3f(*obj.end)
        glEnd()
        glEnable(GL_LIGHTING)

    def _load_texture(self, image_path: str) -> None:
        """Load image as OpenGL texture"""
        if not os.path.exists(image_path):
            logger.warning("Texture not found: %s", image_path)
            return

        image = QImage(image_path)
        if image.isNull():
            logger.warning("Failed to load texture: %s", image_path)
            return

        image = image.convertToFormat(QImage.Format_RGBA8888)
        image = image.mirrored()

        self.texture_id = glGenTextures(1)
        glBindTexture(GL_TEXTURE_2D, self.texture_id)
        glTexParameteri(GL_TEXTURE_2D, GL_TEXTURE_MIN_FILTER, GL_LINEAR)
        glTexParameteri(GL_TEXTURE_2D, GL_TEXTURE_MAG_FILTER, GL_LINEAR)
        glTexParameteri(GL_TEXTURE_2D, GL_TEXTURE_WRAP_S, GL_REPEAT)
        glTexParameteri(GL_TEXTURE_2D, GL_TEXTURE_WRAP_T, GL_CLAMP_TO_EDGE)
        glTexImage2D(GL_TEXTURE_2D, 0, GL_RGBA, image.width(), image.height(),
                     0, GL_RGBA, GL_UNSIGNED_BYTE, image.bits())
        glBindTexture(GL_TEXTURE_2D, 0)
        logger.info("Loaded texture %s (%dx%d)", image_path, image.width(), image.height())

    #------------------------------------------------
    # Marker overlays
    #------------------------------------------------
    def on_marker_added(self, entry: MarkerEntry) -> None:
        self.labels[entry.identifier] = MarkerLabel(entry, self.registry, self)

    def on_selection_changed(self, selected_id) -> None:
        for label in self.labels.values():
            label.refresh_selection()

    def sync_labels(self) -> None:
        center = QPointF(self.viewport.width / 2, self.viewport.height / 2)
        for label in self.labels.values():
            label.sync(center)

    #-------------------------------------------------------
    # EVENT HANDLERS
    #-------------------------------------------------------
    def mousePressEvent(self, event):
        if event.button() == Qt.LeftButton:
            self.last_pos = event.position()

    def mouseMoveEvent(self, event):
        if self.last_pos is None or not (event.buttons() & Qt.LeftButton):
            return
        pos = event.position()
        dx = pos.x() - self.last_pos.x()
        dy = pos.y() - self.last_pos.y()
        self.controls.rotate(dx, dy, self.viewport.height)
        self.last_pos = pos

    def mouseReleaseEvent(self, event):
        if event.button() == Qt.LeftButton:
            self.last_pos = None

    def wheelEvent(self, event):
        self.controls.dolly(event.angleDelta().y())

    def close(self):
        self.makeCurrent()
        if self.texture_id is not None:
            glDeleteTextures([self.texture_id])
            self.texture_id = None
        self.doneCurrent()


# end class GlobeWidget
