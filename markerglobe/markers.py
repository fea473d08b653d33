from dataclasses import dataclass, field
import logging

import numpy as np
from PySide6.QtCore import QObject, Signal

from markerglobe.coord_utils import radial_extend
from markerglobe.scene import LineSceneObject, SceneObject

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GeoLocation:
    """A named geographic coordinate, degrees, not range checked"""
    latitude: float
    longitude: float
    name: str


@dataclass
class OverlayElement:
    """Screen space state of one marker

    Attributes
    ----------
    identifier : int
        Registry identifier of the marker
    location : GeoLocation
        What the element describes
    occlusion_visible : bool
        False while the globe hides the anchor from the camera
    offset : tuple[float, float]
        Pixel translation from the viewport center, +y is down
    """
    identifier: int
    location: GeoLocation
    occlusion_visible: bool = False
    offset: tuple = (0.0, 0.0)


@dataclass
class MarkerEntry:
    identifier: int
    location: GeoLocation
    anchor: np.ndarray = field(repr=False)
    element: OverlayElement


class MarkerRegistry(QObject):
    """Append-only, ordered collection of markers on one globe

    Identifiers start at 1 and are never reused.  The registry also owns the
    selection: at most one marker is selected at a time.

    Signals
    -------
    sigMarkerAdded : MarkerEntry
        A marker was registered
    sigSelectionChanged : int | None
        The selected identifier changed
    """

    sigMarkerAdded = Signal(object)
    sigSelectionChanged = Signal(object)

    def __init__(self, globe: SceneObject, stem_extension: float = 0.5,
                 stem_color=(1.0, 1.0, 0.0), stem_pick_radius: float = 1.0):
        '''
        Parameters
        ----------
        globe : SceneObject
            Node the anchors are expressed in, stems are attached to it
        stem_extension : float
            How far stems reach past the surface
        stem_color : [float,float,float]
            Color of the stems
        stem_pick_radius : float
            Ray hit tolerance for the stems
        '''
        super().__init__()
        self.globe = globe
        self.stem_extension = stem_extension
        self.stem_color = stem_color
        self.stem_pick_radius = stem_pick_radius
        self._entries = []
        self._next_id = 1
        self._selected_id = None

    def add(self, location: GeoLocation, anchor: np.ndarray) -> int:
        """Register a marker and return its identifier"""
        identifier = self._next_id
        self._next_id += 1

        anchor = np.array(anchor, dtype=np.float64)
        entry = MarkerEntry(identifier, location, anchor, OverlayElement(identifier, location))
        self._entries.append(entry)

        stem = LineSceneObject(
            f'stem_{identifier}',
            start=(0.0, 0.0, 0.0),
            end=radial_extend(anchor, self.stem_extension),
            color=self.stem_color,
            pick_radius=self.stem_pick_radius
        )
        self.globe.add(stem)

        logger.info("Marker %d added: %s (%s, %s)", identifier, location.name,
                    location.latitude, location.longitude)
        self.sigMarkerAdded.emit(entry)
        return identifier

    def all(self) -> tuple[MarkerEntry, ...]:
        """Entries in identifier order"""
        return tuple(self._entries)

    def get(self, identifier: int) -> MarkerEntry:
        # identifiers are dense and 1-based
        if isinstance(identifier, int) and 1 <= identifier <= len(self._entries):
            return self._entries[identifier - 1]
        raise KeyError(identifier)

    def world_position(self, entry: MarkerEntry) -> np.ndarray:
        """Anchor of entry under the globe's current transform"""
        return self.globe.local_to_world(entry.anchor)

    #--------------------------------------------------------------
    # Selection
    #--------------------------------------------------------------
    @property
    def selected_id(self) -> int | None:
        return self._selected_id

    def is_selected(self, identifier: int) -> bool:
        return self._selected_id == identifier

    def toggle_selection(self, identifier: int) -> int | None:
        """Select a marker, or deselect it if it already is

        Returns
        -------
        selected_id : int | None
            The new selection
        """
        self.get(identifier)
        if self._selected_id == identifier:
            self._selected_id = None
        else:
            self._selected_id = identifier
        self.sigSelectionChanged.emit(self._selected_id)
        return self._selected_id

    def __len__(self):
        return len(self._entries)

    def __iter__(self):
        return iter(self.all())
