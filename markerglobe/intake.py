from dataclasses import dataclass
import logging
import math
import re
from typing import Callable, Optional

from markerglobe.coord_utils import latlon_to_local
from markerglobe.markers import GeoLocation, MarkerRegistry

logger = logging.getLogger(__name__)

INCOMPLETE_MESSAGE = 'Please fill in all fields!'

# Longest leading number, the rest of the text is ignored
_NUMBER_PREFIX = re.compile(
    r'\s*([+-]?(?:Infinity|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?))'
)


class IncompleteLocationError(ValueError):
    """Raised when a submitted location is missing a field"""


@dataclass
class SubmitResult:
    accepted: bool
    identifier: Optional[int] = None
    message: str = ''


def parse_coordinate(text) -> float:
    """
    Read a coordinate from user text.

    Leading whitespace is skipped and the longest numeric prefix is used, so
    '12.5abc' reads as 12.5.  Text without a numeric prefix reads as NaN.

    Parameters
    ----------
        text: str | float

    Returns
    -------
        value: float
    """
    if isinstance(text, (int, float)):
        return float(text)
    match = _NUMBER_PREFIX.match(str(text))
    if match is None:
        return math.nan
    return float(match.group(1))


def _is_empty(value) -> bool:
    return value is None or value == ''


def validate_fields(latitude, longitude, name) -> None:
    """Raise IncompleteLocationError if any field is empty"""
    missing = [label for label, value in (('latitude', latitude),
                                          ('longitude', longitude),
                                          ('name', name)) if _is_empty(value)]
    if missing:
        raise IncompleteLocationError(f"missing fields: {', '.join(missing)}")


def _log_notify(message: str) -> None:
    logger.warning(message)


class LocationIntake:
    '''Turns user and seed locations into registered markers

    Parameters
    ----------
    registry : MarkerRegistry
        Where markers are registered
    radius : float
        Globe radius used to project anchors
    notify : Callable[[str], None]
        Blocking user notification, shown when a submission is rejected
    '''

    def __init__(self, registry: MarkerRegistry, radius: float,
                 notify: Callable[[str], None] = _log_notify):
        self.registry = registry
        self.radius = radius
        self.notify = notify
        self.locations = {}

    def _register(self, location: GeoLocation) -> int:
        anchor = latlon_to_local(location.latitude, location.longitude, self.radius)
        identifier = self.registry.add(location, anchor)
        self.locations[f'location{len(self.locations) + 1}'] = location
        logger.debug("Locations: %s", self.locations)
        return identifier

    def seed(self, locations) -> list[int]:
        """Register locations without field validation"""
        return [self._register(location) for location in locations]

    def submit(self, latitude, longitude, name, fields=None) -> SubmitResult:
        """
        Register a location entered by the user.

        Parameters
        ----------
            latitude, longitude: str | float
                Coordinate text, parsed leniently
            name: str
            fields: object with clear(), optional
                Input fields to clear once the location is accepted

        Returns
        -------
            result: SubmitResult
        """
        try:
            validate_fields(latitude, longitude, name)
        except IncompleteLocationError as e:
            logger.info("Location rejected: %s", e)
            self.notify(INCOMPLETE_MESSAGE)
            return SubmitResult(False, message=INCOMPLETE_MESSAGE)

        location = GeoLocation(parse_coordinate(latitude), parse_coordinate(longitude), name)
        if math.isnan(location.latitude) or math.isnan(location.longitude):
            logger.warning("Location %r has a non-numeric coordinate (%r, %r)",
                           name, latitude, longitude)

        identifier = self._register(location)
        if fields is not None:
            fields.clear()
        return SubmitResult(True, identifier=identifier)
