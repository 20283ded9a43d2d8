"""
Onboarding error taxonomy.

Every error carries a `user_message`: the single notice shown to the user.
Validation errors are user-correctable and only block a transition; I/O
errors surface at the step or commit boundary and leave the wizard where it is.
"""


class OnboardingError(Exception):
    """Base class for onboarding failures."""

    default_message = "Something went wrong"

    def __init__(self, message: str | None = None):
        self.user_message = message or self.default_message
        super().__init__(self.user_message)


class ValidationError(OnboardingError):
    """A step gate or draft edit rule was violated."""

    default_message = "Please check your answers"


class NotAuthenticatedError(OnboardingError):
    """No authenticated identity is available for the commit."""

    default_message = "Login required"


class LocationUnavailableError(OnboardingError):
    """The device position could not be determined."""

    default_message = "Could not get location"


class GeolocationUnsupportedError(LocationUnavailableError):
    """The client has no geolocation capability at all."""

    default_message = "Geolocation unsupported"


class PermissionDeniedError(OnboardingError):
    """The user refused access to their position."""

    default_message = "Location permission denied"


class NoCandidatesError(OnboardingError):
    """Nearest-match was asked to choose from an empty list."""

    default_message = "No campus buildings available"


class UploadError(OnboardingError):
    """A single photo could not be uploaded to the asset host."""

    default_message = "Photo upload failed"


class StoreError(OnboardingError):
    """A backing store read or write failed."""

    default_message = "Error completing profile"


class WizardBusyError(OnboardingError):
    """A transition was requested while a commit is in flight."""

    default_message = "Please wait, your profile is being saved"


# Errors ProfileCommitter.commit() may raise
CommitError = (NotAuthenticatedError, StoreError)
