"""
Profile commit: persist a finished ProfileDraft.

Order of work:
1. Require an authenticated identity.
2. Upload photos in draft order. Upload is best effort: a photo that fails
   is logged and left out, and the commit carries on with the rest.
3. Build the users payload.
4. Update the user's row if one exists for this auth id, else insert it
   with the default member role.
5. Reconcile interests, then clubs.

Steps 4 and 5 are each safe to repeat, so a failed commit can simply be
retried. They are not joined atomically: if step 5 fails the row is
already marked profile_complete and the links are fixed by the retry.
"""

import logging
from typing import Any

from campus_match.db.adapter import USERS_TABLE, DatabaseAdapter
from campus_match.media import AssetUploader
from campus_match.web.auth import AuthenticatedUser

from .associations import CLUB, INTEREST, AssociationReconciler
from .errors import NotAuthenticatedError, OnboardingError, StoreError
from .payload import ProfilePayload, UserProfileRecord, build_profile_payload
from .state import PhotoAsset, ProfileDraft

logger = logging.getLogger(__name__)

DEFAULT_MEMBER_ROLE = "current_student"


class ProfileCommitter:
    """Runs the create-or-update submission for one draft."""

    def __init__(
        self,
        db: DatabaseAdapter,
        uploader: AssetUploader,
        default_role: str = DEFAULT_MEMBER_ROLE,
    ):
        self.db = db
        self.uploader = uploader
        self.default_role = default_role
        self.reconciler = AssociationReconciler(db)

    async def commit(self, draft: ProfileDraft, identity: AuthenticatedUser | None) -> UserProfileRecord:
        """
        Persist the draft for `identity`.

        Raises NotAuthenticatedError without an identity and StoreError when
        the profile upsert or either association reconcile fails.
        """
        if identity is None or not identity.id:
            raise NotAuthenticatedError()

        photo_urls = await self.upload_photos(draft.photos)
        payload = build_profile_payload(draft, identity.id, photo_urls)

        row = await self.upsert_profile(payload)
        record = UserProfileRecord.model_validate(row)

        await self.reconciler.reconcile(record.id, INTEREST, draft.interests)
        await self.reconciler.reconcile(record.id, CLUB, draft.clubs)

        logger.info(
            f"Profile committed for {identity.id}: "
            f"{len(photo_urls)}/{len(draft.photos)} photos, "
            f"{len(draft.interests)} interests, {len(draft.clubs)} clubs"
        )
        return record

    async def upload_photos(self, photos: list[PhotoAsset]) -> list[str]:
        """
        Upload each photo once, in order, skipping any that fail.

        The first URL in the result is the primary profile photo.
        """
        urls = []
        for index, photo in enumerate(photos):
            try:
                url = await self.uploader.upload(photo)
            except Exception as e:
                # Partial photo failure degrades the profile, it does not abort it
                logger.warning(f"Photo {index + 1} ({photo.filename}) not uploaded: {e}")
                continue
            if url:
                urls.append(url)
        return urls

    async def upsert_profile(self, payload: ProfilePayload) -> dict[str, Any]:
        """Update the row keyed by auth_id, or insert it with the default role."""
        row = payload.to_dict()

        try:
            existing = (
                self.db.table(USERS_TABLE)
                .select("id")
                .eq("auth_id", payload.auth_id)
                .limit(1)
                .execute()
            )

            if existing.data:
                result = (
                    self.db.table(USERS_TABLE)
                    .update(row)
                    .eq("auth_id", payload.auth_id)
                    .execute()
                )
            else:
                result = (
                    self.db.table(USERS_TABLE)
                    .insert({**row, "role": self.default_role})
                    .execute()
                )
        except OnboardingError:
            raise
        except Exception as e:
            logger.error(f"Failed to save profile for {payload.auth_id}: {e}")
            raise StoreError() from e

        if not result.data:
            logger.error(f"Profile upsert for {payload.auth_id} returned no row")
            raise StoreError()

        return result.data[0]
