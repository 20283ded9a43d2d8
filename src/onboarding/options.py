"""
Reference data for the wizard: interests, clubs and campus buildings.

Fetched once per session. A failed load degrades the session to empty
lists with a single notice instead of blocking onboarding.
"""

import logging
from dataclasses import dataclass, field

from campus_match.db.adapter import (
    CAMPUS_BUILDINGS_TABLE,
    CLUBS_TABLE,
    INTERESTS_TABLE,
    DatabaseAdapter,
)

from .forms import get_form_options
from .state import CampusBuilding

logger = logging.getLogger(__name__)

LOAD_FAILED_NOTICE = "Failed to load options"


@dataclass
class ReferenceData:
    """Options the user picks from."""
    interests: list[str] = field(default_factory=list)
    clubs: list[str] = field(default_factory=list)
    buildings: list[CampusBuilding] = field(default_factory=list)
    notice: str | None = None

    def get_building(self, building_id) -> CampusBuilding | None:
        for building in self.buildings:
            if str(building.id) == str(building_id):
                return building
        return None

    def to_dict(self) -> dict:
        return {
            **get_form_options(),
            "interests": self.interests,
            "clubs": self.clubs,
            "buildings": [b.to_dict() for b in self.buildings],
            "notice": self.notice,
        }


async def load_reference_data(db: DatabaseAdapter) -> ReferenceData:
    """Load all interests, clubs and buildings, each ordered by name."""
    try:
        interests = db.table(INTERESTS_TABLE).select("name").order("name").execute()
        clubs = db.table(CLUBS_TABLE).select("name").order("name").execute()
        buildings = db.table(CAMPUS_BUILDINGS_TABLE).select("*").order("name").execute()

        return ReferenceData(
            interests=[row["name"] for row in interests.data or []],
            clubs=[row["name"] for row in clubs.data or []],
            buildings=[CampusBuilding.from_row(row) for row in buildings.data or []],
        )
    except Exception as e:
        logger.warning(f"Failed to load onboarding options: {e}")
        return ReferenceData(notice=LOAD_FAILED_NOTICE)
