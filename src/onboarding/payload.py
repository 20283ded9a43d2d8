"""
Onboarding Payload Definition.

ProfilePayload is the contract between the wizard and the users table:
it defines which draft fields are persisted and under what column names.
"""

from dataclasses import asdict, dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict

from .state import ProfileDraft


@dataclass
class ProfilePayload:
    """
    Columns written to `users` on every commit.

    `role` is deliberately absent: it is only set when the row is first
    inserted, so re-onboarding never resets it.
    """

    auth_id: str
    name: str
    class_year: str
    major: str
    bio: str
    vibe: str | None
    gender: str
    gender_preference: str
    contact_preference: str

    # Denormalized from the selected campus building
    building: str | None = None
    location: str | None = None
    latitude: float | None = None
    longitude: float | None = None

    # Hosted URLs in draft order; None when no upload succeeded
    photo_urls: list[str] | None = None

    profile_complete: bool = True

    def to_dict(self) -> dict:
        """Serialize to a users row."""
        return asdict(self)


def build_profile_payload(
    draft: ProfileDraft,
    auth_id: str,
    photo_urls: list[str],
) -> ProfilePayload:
    """Build the users row from a finished draft and its uploaded photo URLs."""
    building = draft.building

    return ProfilePayload(
        auth_id=auth_id,
        name=draft.name,
        class_year=draft.class_year,
        major=draft.major,
        bio=draft.bio,
        vibe=draft.vibe_label,
        gender=draft.gender,
        gender_preference=draft.gender_preference,
        contact_preference=draft.contact_preference,
        building=building.name if building else None,
        location=building.name if building else None,
        latitude=building.latitude if building else None,
        longitude=building.longitude if building else None,
        photo_urls=list(photo_urls) if photo_urls else None,
        profile_complete=True,
    )


class UserProfileRecord(BaseModel):
    """A persisted users row as returned by the store."""

    model_config = ConfigDict(extra="allow")

    id: Any
    auth_id: str
    name: str = ""
    class_year: str = ""
    major: str = ""
    bio: str | None = None
    vibe: str | None = None
    gender: str | None = None
    gender_preference: str | None = None
    contact_preference: str | None = None
    role: str | None = None
    building: str | None = None
    location: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    photo_urls: list[str] | None = None
    profile_complete: bool = False

    @property
    def primary_photo_url(self) -> str | None:
        """First uploaded photo, by draft order."""
        return self.photo_urls[0] if self.photo_urls else None
