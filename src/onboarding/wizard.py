"""
Onboarding wizard state machine.

Fixed, linear flow driven by a table: each step has a validation gate
that must pass before forward() leaves it. Leaving REVIEW commits the
profile. back() never validates.

The machine runs on one control flow. While a commit is awaited no other
transition is accepted (WizardBusyError), so the UI can keep "Continue"
disabled without the machine relying on it.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable

from campus_match.db.adapter import DatabaseAdapter
from campus_match.web.auth import IdentityAccessor

from .commit import ProfileCommitter
from .errors import (
    CommitError,
    GeolocationUnsupportedError,
    LocationUnavailableError,
    NoCandidatesError,
    OnboardingError,
    PermissionDeniedError,
    ValidationError,
    WizardBusyError,
)
from .location import GeolocationProvider, locate_nearest_building
from .options import ReferenceData, load_reference_data
from .payload import UserProfileRecord
from .state import STEP_ORDER, OnboardingStep, ProfileDraft

logger = logging.getLogger(__name__)


# =============================================================================
# Step Table
# =============================================================================

@dataclass(frozen=True)
class StepGate:
    """What a step requires before forward() may leave it."""
    is_satisfied: Callable[[ProfileDraft], bool]
    message: str


STEP_GATES: dict[OnboardingStep, StepGate | None] = {
    OnboardingStep.BASICS: StepGate(
        lambda d: bool(d.name and d.class_year and d.major),
        "Please complete all required fields",
    ),
    OnboardingStep.PHOTOS: StepGate(
        lambda d: len(d.photos) > 0,
        "Add at least one photo",
    ),
    OnboardingStep.GENDER: StepGate(
        lambda d: bool(d.gender and d.vibe),
        "Select gender & vibe",
    ),
    OnboardingStep.INTERESTS: StepGate(
        lambda d: bool(d.interests and d.clubs),
        "Select at least one interest and one club",
    ),
    OnboardingStep.LOCATION: StepGate(
        lambda d: d.building is not None,
        "Select your location",
    ),
    OnboardingStep.REVIEW: None,  # advancing commits
}


def get_next_step(step: OnboardingStep) -> OnboardingStep | None:
    """Step after `step`, or None for the last one."""
    idx = STEP_ORDER.index(step)
    return STEP_ORDER[idx + 1] if idx + 1 < len(STEP_ORDER) else None


def get_previous_step(step: OnboardingStep) -> OnboardingStep | None:
    """Step before `step`, or None for the first one."""
    idx = STEP_ORDER.index(step)
    return STEP_ORDER[idx - 1] if idx > 0 else None


def check_gate(step: OnboardingStep, draft: ProfileDraft) -> ValidationError | None:
    """The gate violation for `step`, if any."""
    gate = STEP_GATES[step]
    if gate is None or gate.is_satisfied(draft):
        return None
    return ValidationError(gate.message)


def first_unmet_gate(draft: ProfileDraft) -> tuple[OnboardingStep, ValidationError] | None:
    """First step, in order, whose gate the draft does not satisfy."""
    for step in STEP_ORDER:
        error = check_gate(step, draft)
        if error is not None:
            return step, error
    return None


# =============================================================================
# Transition Results
# =============================================================================

class TransitionOutcome(Enum):
    ADVANCED = "advanced"
    BLOCKED = "blocked"
    COMPLETED = "completed"
    COMMIT_FAILED = "commit_failed"
    MOVED_BACK = "moved_back"
    EXITED = "exited"
    LOCATED = "located"
    LOCATION_FAILED = "location_failed"


@dataclass
class StepResult:
    """Outcome of one wizard action, with the notice to show the user."""
    outcome: TransitionOutcome
    step: OnboardingStep
    message: str = ""
    error: OnboardingError | None = None
    record: UserProfileRecord | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


# =============================================================================
# State Machine
# =============================================================================

class WizardStateMachine:
    """
    One onboarding session.

    Session context (reference data, identity, committer) is passed in, not
    looked up globally.
    """

    def __init__(
        self,
        committer: ProfileCommitter,
        identity: IdentityAccessor,
        reference: ReferenceData | None = None,
        draft: ProfileDraft | None = None,
        geolocation: GeolocationProvider | None = None,
    ):
        self.committer = committer
        self.identity = identity
        self.reference = reference or ReferenceData()
        self.draft = draft or ProfileDraft()
        self.geolocation = geolocation
        self.record: UserProfileRecord | None = None
        self._step = OnboardingStep.BASICS
        self._committing = False
        self._complete = False

    @classmethod
    async def create(
        cls,
        db: DatabaseAdapter,
        committer: ProfileCommitter,
        identity: IdentityAccessor,
        geolocation: GeolocationProvider | None = None,
    ) -> "WizardStateMachine":
        """Start a session, fetching reference data first."""
        reference = await load_reference_data(db)
        return cls(committer, identity, reference=reference, geolocation=geolocation)

    @property
    def step(self) -> OnboardingStep:
        return self._step

    @property
    def step_number(self) -> int:
        return STEP_ORDER.index(self._step) + 1

    @property
    def total_steps(self) -> int:
        return len(STEP_ORDER)

    @property
    def is_committing(self) -> bool:
        return self._committing

    @property
    def is_complete(self) -> bool:
        return self._complete

    def _ensure_idle(self) -> None:
        if self._committing:
            raise WizardBusyError()
        if self._complete:
            raise OnboardingError("Onboarding already complete")

    # -------------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------------

    async def forward(self) -> StepResult:
        """Validate the current step and move on, committing from REVIEW."""
        self._ensure_idle()

        error = check_gate(self._step, self.draft)
        if error is not None:
            logger.debug(f"Blocked at {self._step.value}: {error.user_message}")
            return StepResult(TransitionOutcome.BLOCKED, self._step, error.user_message, error=error)

        next_step = get_next_step(self._step)
        if next_step is None:
            return await self._commit()

        self._step = next_step
        return StepResult(TransitionOutcome.ADVANCED, self._step)

    def back(self) -> StepResult:
        """Go to the previous step; from BASICS, signal exit."""
        self._ensure_idle()

        previous = get_previous_step(self._step)
        if previous is None:
            return StepResult(TransitionOutcome.EXITED, self._step)

        self._step = previous
        return StepResult(TransitionOutcome.MOVED_BACK, self._step)

    async def _commit(self) -> StepResult:
        self._committing = True
        try:
            identity = await self.identity.current_identity()
            record = await self.committer.commit(self.draft, identity)
        except CommitError as e:
            logger.warning(f"Profile commit failed: {e}")
            return StepResult(TransitionOutcome.COMMIT_FAILED, self._step, e.user_message, error=e)
        finally:
            self._committing = False

        self.record = record
        self._complete = True
        self.close()
        return StepResult(TransitionOutcome.COMPLETED, self._step, "Profile complete!", record=record)

    # -------------------------------------------------------------------------
    # Location step
    # -------------------------------------------------------------------------

    async def locate(self, provider: GeolocationProvider | None = None) -> StepResult:
        """
        Select the building nearest to the user's current position.

        Failures leave the selection as it was; the user may retry or pick
        a building by hand.
        """
        self._ensure_idle()

        provider = provider or self.geolocation
        if provider is None:
            error = GeolocationUnsupportedError()
            return StepResult(TransitionOutcome.LOCATION_FAILED, self._step, error.user_message, error=error)

        try:
            building = await locate_nearest_building(provider, self.reference.buildings)
        except (LocationUnavailableError, PermissionDeniedError, NoCandidatesError) as e:
            logger.info(f"Location lookup failed: {e}")
            return StepResult(TransitionOutcome.LOCATION_FAILED, self._step, e.user_message, error=e)

        self.draft.select_building(building, self.reference.buildings)
        return StepResult(TransitionOutcome.LOCATED, self._step, f"Location: {building.name}")

    def choose_building(self, building_id) -> None:
        """Manual building pick from the loaded list."""
        building = self.reference.get_building(building_id)
        if building is None:
            raise ValidationError("Select a building from the list")
        self.draft.select_building(building, self.reference.buildings)

    def close(self) -> None:
        """End of session: drop every photo binary the draft still holds."""
        self.draft.release_photos()
