"""
Location step: resolve the user's campus building from their position.
"""

import logging
from typing import Protocol

from .errors import LocationUnavailableError
from .geo import distance_meters, nearest_item
from .state import CampusBuilding, Coordinate

logger = logging.getLogger(__name__)


class GeolocationProvider(Protocol):
    """
    Device position source.

    Raises GeolocationUnsupportedError, PermissionDeniedError or
    LocationUnavailableError. Timeouts are the provider's concern.
    """

    async def get_current_position(self) -> Coordinate:
        ...


class FixedPositionProvider:
    """Provider for a position the client already measured and sent us."""

    def __init__(self, latitude: float | None, longitude: float | None):
        self._latitude = latitude
        self._longitude = longitude

    async def get_current_position(self) -> Coordinate:
        if self._latitude is None or self._longitude is None:
            raise LocationUnavailableError()
        return Coordinate(float(self._latitude), float(self._longitude))


def find_nearest_building(point: Coordinate, buildings: list[CampusBuilding]) -> CampusBuilding:
    """Nearest building to `point`; NoCandidatesError when none are loaded."""
    return nearest_item(point, buildings, lambda b: b.coordinate)


async def locate_nearest_building(
    provider: GeolocationProvider,
    buildings: list[CampusBuilding],
) -> CampusBuilding:
    """Ask the provider for a position and match it to the closest building."""
    position = await provider.get_current_position()
    building = find_nearest_building(position, buildings)
    logger.info(
        f"Located {building.name} "
        f"({distance_meters(position, building.coordinate):.0f} m away)"
    )
    return building
