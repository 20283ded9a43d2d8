"""
Campus Match Onboarding.

Six-step profile wizard for new users:
basics → photos → gender & vibe → interests & clubs → location → review.

Forward transitions are gated by per-step validation; leaving the review
step commits the profile (photo upload, users upsert, interest and club
links). See wizard.py for the state machine and commit.py for the commit.
"""

from .errors import OnboardingError, ValidationError
from .payload import ProfilePayload, UserProfileRecord
from .state import CampusBuilding, Coordinate, OnboardingStep, PhotoAsset, ProfileDraft

__all__ = [
    "CampusBuilding",
    "Coordinate",
    "OnboardingError",
    "OnboardingStep",
    "PhotoAsset",
    "ProfileDraft",
    "ProfilePayload",
    "UserProfileRecord",
    "ValidationError",
]
