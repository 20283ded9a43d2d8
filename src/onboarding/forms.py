"""
Onboarding Forms - closed option catalogs and the basics step form.

Catalogs are fixed; interests, clubs and buildings are reference data
loaded from the store (see options.py).
"""

from typing import Literal

from pydantic import BaseModel, field_validator


# =============================================================================
# Limits
# =============================================================================

MAX_PHOTOS = 6
MAX_PHOTO_SIZE_MB = 5
MAX_PHOTO_SIZE_BYTES = MAX_PHOTO_SIZE_MB * 1024 * 1024
MAX_INTERESTS = 5
MAX_CLUBS = 3


# =============================================================================
# Closed Catalogs
# =============================================================================

# The label (not the id) is what gets stored on the user row
VIBE_OPTIONS = [
    {"id": "party", "label": "Looking to Party", "emoji": "🍻"},
    {"id": "catch-up", "label": "Looking to Catch Up", "emoji": "💬"},
    {"id": "roam", "label": "Down to Roam", "emoji": "🧡"},
    {"id": "hook-up", "label": "Looking for a Hook-Up", "emoji": "❤️"},
    {"id": "night", "label": "🌙 Let's Just See Where the Night Takes Us", "emoji": "🌙"},
    {"id": "deeper", "label": "💑 Looking for Something Deeper", "emoji": "💑"},
]

VALID_VIBE_IDS = {v["id"] for v in VIBE_OPTIONS}

GENDER_OPTIONS = [
    {"value": "male", "label": "Male"},
    {"value": "female", "label": "Female"},
    {"value": "non-binary", "label": "Non-binary"},
    {"value": "other", "label": "Other"},
]

VALID_GENDERS = {g["value"] for g in GENDER_OPTIONS}

PREFERENCE_OPTIONS = [
    {"value": "male", "label": "Men"},
    {"value": "female", "label": "Women"},
    {"value": "everyone", "label": "Everyone"},
]

VALID_GENDER_PREFERENCES = {p["value"] for p in PREFERENCE_OPTIONS}

CONTACT_OPTIONS = [
    {"value": "email", "label": "Email"},
    {"value": "phone", "label": "Phone"},
    {"value": "both", "label": "Both"},
]

ContactPreference = Literal["email", "phone", "both"]
GenderPreference = Literal["male", "female", "everyone"]


def get_vibe_label(vibe_id: str | None) -> str | None:
    """Resolve a vibe id to its display label."""
    for option in VIBE_OPTIONS:
        if option["id"] == vibe_id:
            return option["label"]
    return None


# =============================================================================
# Form Model
# =============================================================================

class BasicsForm(BaseModel):
    """
    Basics step input.

    Name, class year and major are required to leave the step; the form
    itself accepts blanks so a partially filled draft can be saved.
    """

    name: str = ""
    class_year: str = ""
    major: str = ""
    bio: str = ""
    contact_preference: ContactPreference = "email"

    @field_validator("name", "class_year", "major", "bio", mode="before")
    @classmethod
    def strip_text(cls, v: str | None) -> str:
        if v is None:
            return ""
        return str(v).strip()

    @property
    def missing_fields(self) -> list[str]:
        return [f for f in ("name", "class_year", "major") if not getattr(self, f)]


# =============================================================================
# API Response Helpers
# =============================================================================

def get_form_options() -> dict:
    """
    Get every closed catalog and limit for frontend rendering.

    Reference data (interests, clubs, buildings) is merged in by the caller.
    """
    return {
        "vibes": VIBE_OPTIONS,
        "genders": GENDER_OPTIONS,
        "gender_preferences": PREFERENCE_OPTIONS,
        "contact_preferences": CONTACT_OPTIONS,
        "limits": {
            "max_photos": MAX_PHOTOS,
            "max_photo_size_mb": MAX_PHOTO_SIZE_MB,
            "max_interests": MAX_INTERESTS,
            "max_clubs": MAX_CLUBS,
        },
    }
