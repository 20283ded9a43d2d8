"""
Onboarding State Management.

Holds the wizard's step enum, the campus reference types and the mutable
ProfileDraft that accumulates answers until commit.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .errors import ValidationError
from .forms import (
    MAX_CLUBS,
    MAX_INTERESTS,
    MAX_PHOTOS,
    MAX_PHOTO_SIZE_BYTES,
    MAX_PHOTO_SIZE_MB,
    VALID_GENDER_PREFERENCES,
    VALID_GENDERS,
    VALID_VIBE_IDS,
    get_vibe_label,
)


class OnboardingStep(Enum):
    """Wizard steps, in order."""
    BASICS = "basics"
    PHOTOS = "photos"
    GENDER = "gender"
    INTERESTS = "interests"
    LOCATION = "location"
    REVIEW = "review"


STEP_ORDER: list[OnboardingStep] = list(OnboardingStep)


@dataclass(frozen=True)
class Coordinate:
    """A point on the globe, in decimal degrees."""
    latitude: float
    longitude: float


@dataclass(frozen=True)
class CampusBuilding:
    """Read-only reference row from campus_buildings."""
    id: Any
    name: str
    latitude: float
    longitude: float

    @property
    def coordinate(self) -> Coordinate:
        return Coordinate(self.latitude, self.longitude)

    @classmethod
    def from_row(cls, row: dict) -> "CampusBuilding":
        return cls(
            id=row["id"],
            name=row["name"],
            latitude=float(row["latitude"]),
            longitude=float(row["longitude"]),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "latitude": self.latitude,
            "longitude": self.longitude,
        }


@dataclass
class PhotoAsset:
    """
    A photo picked during onboarding but not yet uploaded.

    The draft owns the binary until commit; release() drops it when the
    photo is removed or the session ends.
    """
    content: bytes
    filename: str = "photo.jpg"
    content_type: str = "image/jpeg"
    preview_url: str = ""
    released: bool = False

    @property
    def size(self) -> int:
        return len(self.content)

    def release(self) -> None:
        self.content = b""
        self.preview_url = ""
        self.released = True


@dataclass
class ProfileDraft:
    """
    In-memory answers for one onboarding session.

    Single owner: only the active wizard mutates it. Edit methods raise
    ValidationError and leave the draft untouched when a rule is broken.
    """

    # Basics
    name: str = ""
    class_year: str = ""
    major: str = ""
    bio: str = ""
    contact_preference: str = "email"

    # Photos (draft order = upload order)
    photos: list[PhotoAsset] = field(default_factory=list)

    # Gender & vibe
    gender: str = ""
    gender_preference: str = "everyone"
    vibe: str | None = None

    # Interests & clubs (unique, insertion order kept for display)
    interests: list[str] = field(default_factory=list)
    clubs: list[str] = field(default_factory=list)
    custom_interests: list[str] = field(default_factory=list)

    # Location
    building: CampusBuilding | None = None

    @property
    def vibe_label(self) -> str | None:
        return get_vibe_label(self.vibe)

    # -------------------------------------------------------------------------
    # Photos
    # -------------------------------------------------------------------------

    def add_photo(self, photo: PhotoAsset) -> None:
        if len(self.photos) >= MAX_PHOTOS:
            raise ValidationError(f"Max {MAX_PHOTOS} photos")
        if photo.size > MAX_PHOTO_SIZE_BYTES:
            raise ValidationError(f"Each photo must be under {MAX_PHOTO_SIZE_MB}MB")
        self.photos.append(photo)

    def remove_photo(self, index: int) -> PhotoAsset:
        photo = self.photos.pop(index)
        photo.release()
        return photo

    def release_photos(self) -> None:
        for photo in self.photos:
            photo.release()

    # -------------------------------------------------------------------------
    # Gender & vibe
    # -------------------------------------------------------------------------

    def select_gender(self, gender: str, preference: str | None = None) -> None:
        if gender not in VALID_GENDERS:
            raise ValidationError(f"Unknown gender: {gender}")
        if preference is not None and preference not in VALID_GENDER_PREFERENCES:
            raise ValidationError(f"Unknown preference: {preference}")
        self.gender = gender
        if preference is not None:
            self.gender_preference = preference

    def select_vibe(self, vibe_id: str) -> None:
        if vibe_id not in VALID_VIBE_IDS:
            raise ValidationError(f"Unknown vibe: {vibe_id}")
        self.vibe = vibe_id

    # -------------------------------------------------------------------------
    # Interests & clubs
    # -------------------------------------------------------------------------

    def toggle_interest(self, name: str, available: list[str]) -> bool:
        """
        Select or deselect an interest.

        Returns True if the interest is now selected.
        """
        if name in self.interests:
            self.interests.remove(name)
            return False
        if name not in available and name not in self.custom_interests:
            raise ValidationError(f"Unknown interest: {name}")
        if len(self.interests) >= MAX_INTERESTS:
            raise ValidationError(f"Max {MAX_INTERESTS} interests")
        self.interests.append(name)
        return True

    def toggle_club(self, name: str, available: list[str]) -> bool:
        """Select or deselect a club. Returns True if now selected."""
        if name in self.clubs:
            self.clubs.remove(name)
            return False
        if name not in available:
            raise ValidationError(f"Unknown club: {name}")
        if len(self.clubs) >= MAX_CLUBS:
            raise ValidationError(f"Max {MAX_CLUBS} clubs")
        self.clubs.append(name)
        return True

    def add_custom_interest(self, name: str, available: list[str]) -> str:
        """
        Add a newly typed interest and select it.

        Matching is exact: "hiking" and "Hiking" are different interests.
        """
        name = name.strip()
        if not name:
            raise ValidationError("Enter an interest")
        if name in available or name in self.interests or name in self.custom_interests:
            raise ValidationError("Already exists")
        if len(self.interests) >= MAX_INTERESTS:
            raise ValidationError(f"Max {MAX_INTERESTS} interests")
        self.custom_interests.append(name)
        self.interests.append(name)
        return name

    # -------------------------------------------------------------------------
    # Location
    # -------------------------------------------------------------------------

    def select_building(self, building: CampusBuilding, buildings: list[CampusBuilding]) -> None:
        if not any(b.id == building.id for b in buildings):
            raise ValidationError("Select a building from the list")
        self.building = building

    def to_dict(self) -> dict:
        """Serialize for previews. Photo binaries are left out."""
        return {
            "name": self.name,
            "class_year": self.class_year,
            "major": self.major,
            "bio": self.bio,
            "contact_preference": self.contact_preference,
            "photos": [
                {"filename": p.filename, "size": p.size, "preview_url": p.preview_url}
                for p in self.photos
            ],
            "gender": self.gender,
            "gender_preference": self.gender_preference,
            "vibe": self.vibe,
            "vibe_label": self.vibe_label,
            "interests": list(self.interests),
            "clubs": list(self.clubs),
            "building": self.building.to_dict() if self.building else None,
        }
