"""
Onboarding API Endpoints.

Thin HTTP surface over the wizard. The client walks the steps locally and
submits the whole draft once; the server replays every step gate through
a WizardStateMachine before committing, so the same rules apply either way.
"""

import base64
import binascii
import logging

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from campus_match.config import settings
from campus_match.db.adapter import DatabaseAdapter
from campus_match.db.client import get_service_client
from campus_match.media import CloudinaryUploader
from campus_match.web.auth import AuthenticatedUser, StaticIdentity, get_current_user

from .commit import ProfileCommitter
from .errors import NoCandidatesError, NotAuthenticatedError, ValidationError
from .forms import BasicsForm, ContactPreference, GenderPreference
from .geo import distance_meters
from .location import find_nearest_building
from .options import ReferenceData, load_reference_data
from .state import Coordinate, OnboardingStep, PhotoAsset, ProfileDraft
from .wizard import TransitionOutcome, WizardStateMachine

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/onboarding", tags=["onboarding"])


# =============================================================================
# Dependencies
# =============================================================================

def get_db() -> DatabaseAdapter:
    return get_service_client()


def get_committer(db: DatabaseAdapter = Depends(get_db)) -> ProfileCommitter:
    return ProfileCommitter(
        db,
        CloudinaryUploader.from_settings(),
        default_role=settings.default_member_role,
    )


# =============================================================================
# Request/Response Models
# =============================================================================

class NearestBuildingRequest(BaseModel):
    """Position measured by the client's geolocation."""
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)


class PhotoUpload(BaseModel):
    """One photo, base64-encoded."""
    filename: str = "photo.jpg"
    content_type: str = "image/jpeg"
    data: str


class ProfileSubmissionRequest(BaseModel):
    """Full draft submitted from the review step."""
    name: str = ""
    class_year: str = ""
    major: str = ""
    bio: str = ""
    contact_preference: ContactPreference = "email"
    photos: list[PhotoUpload] = Field(default_factory=list)
    gender: str = ""
    gender_preference: GenderPreference = "everyone"
    vibe: str | None = None
    interests: list[str] = Field(default_factory=list)
    clubs: list[str] = Field(default_factory=list)
    building_id: int | str | None = None


class CompleteResponse(BaseModel):
    success: bool
    message: str
    profile: dict


# =============================================================================
# Draft Assembly
# =============================================================================

def decode_photo(photo: PhotoUpload) -> PhotoAsset:
    try:
        content = base64.b64decode(photo.data, validate=True)
    except (binascii.Error, ValueError):
        raise ValidationError(f"{photo.filename} is not valid base64")
    return PhotoAsset(content=content, filename=photo.filename, content_type=photo.content_type)


def build_draft(request: ProfileSubmissionRequest, reference: ReferenceData) -> ProfileDraft:
    """
    Rebuild a ProfileDraft through the same edit rules the wizard uses.

    Raises ValidationError on the first broken rule.
    """
    basics = BasicsForm(
        name=request.name,
        class_year=request.class_year,
        major=request.major,
        bio=request.bio,
        contact_preference=request.contact_preference,
    )
    draft = ProfileDraft(
        name=basics.name,
        class_year=basics.class_year,
        major=basics.major,
        bio=basics.bio,
        contact_preference=basics.contact_preference,
    )

    for photo in request.photos:
        draft.add_photo(decode_photo(photo))

    if request.gender:
        draft.select_gender(request.gender, request.gender_preference)
    if request.vibe:
        draft.select_vibe(request.vibe)

    for name in dict.fromkeys(request.interests):
        if name in reference.interests:
            draft.toggle_interest(name, reference.interests)
        else:
            draft.add_custom_interest(name, reference.interests)
    for name in dict.fromkeys(request.clubs):
        draft.toggle_club(name, reference.clubs)

    if request.building_id is not None:
        building = reference.get_building(request.building_id)
        if building is None:
            raise ValidationError("Select a building from the list")
        draft.select_building(building, reference.buildings)

    return draft


# =============================================================================
# Endpoints
# =============================================================================

@router.get("/options")
async def get_onboarding_options(db: DatabaseAdapter = Depends(get_db)):
    """
    Get every option the wizard renders.

    Catalogs (vibes, genders, preferences, contact) plus interests, clubs
    and buildings from the store. A failed load returns empty lists and
    a `notice`.
    """
    reference = await load_reference_data(db)
    return reference.to_dict()


@router.post("/location/nearest")
async def get_nearest_building(
    request: NearestBuildingRequest,
    db: DatabaseAdapter = Depends(get_db),
):
    """Match a client-measured position to the closest campus building."""
    reference = await load_reference_data(db)
    point = Coordinate(request.latitude, request.longitude)

    try:
        building = find_nearest_building(point, reference.buildings)
    except NoCandidatesError as e:
        raise HTTPException(status_code=404, detail=reference.notice or e.user_message)

    return {
        "building": building.to_dict(),
        "distance_meters": round(distance_meters(point, building.coordinate), 1),
    }


@router.post("/complete", response_model=CompleteResponse)
async def complete_onboarding(
    request: ProfileSubmissionRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    db: DatabaseAdapter = Depends(get_db),
    committer: ProfileCommitter = Depends(get_committer),
) -> CompleteResponse:
    """
    Validate and commit a finished profile.

    422 names the first step whose requirements are not met; 401 means the
    session is gone; 502 means the store rejected the write and the whole
    submission may be retried.
    """
    reference = await load_reference_data(db)

    try:
        draft = build_draft(request, reference)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=e.user_message)

    wizard = WizardStateMachine(committer, StaticIdentity(user), reference=reference, draft=draft)
    try:
        while wizard.step != OnboardingStep.REVIEW:
            result = await wizard.forward()
            if result.outcome == TransitionOutcome.BLOCKED:
                raise HTTPException(
                    status_code=422,
                    detail={"step": result.step.value, "message": result.message},
                )

        result = await wizard.forward()
    finally:
        wizard.close()

    if result.outcome == TransitionOutcome.COMMIT_FAILED:
        status = 401 if isinstance(result.error, NotAuthenticatedError) else 502
        raise HTTPException(status_code=status, detail=result.message)

    logger.info(f"Onboarding completed for user {user.id}")
    return CompleteResponse(
        success=True,
        message=result.message,
        profile=result.record.model_dump(),
    )
