"""
Association reconciliation for user interests and clubs.

Makes the set of user↔tag links for one kind exactly equal to a desired
set of tag names, creating missing tags on first use.

PostgREST gives us no multi-statement transaction, so instead of
delete-all-then-reinsert we apply only the delta: insert the links that
are missing, then delete the stale ones. A failure part-way leaves the
user with a superset of old and new links rather than with none.
"""

import logging
from dataclasses import dataclass
from typing import Any, Iterable

from postgrest.exceptions import APIError

from campus_match.db.adapter import (
    CLUBS_TABLE,
    INTERESTS_TABLE,
    USER_CLUBS_TABLE,
    USER_INTERESTS_TABLE,
    DatabaseAdapter,
)

from .errors import OnboardingError, StoreError

logger = logging.getLogger(__name__)

# Postgres unique_violation
UNIQUE_VIOLATION = "23505"


@dataclass(frozen=True)
class AssociationKind:
    """Where one kind of tag and its user links live."""
    name: str
    tag_table: str
    link_table: str
    tag_fk: str


INTEREST = AssociationKind("interest", INTERESTS_TABLE, USER_INTERESTS_TABLE, "interest_id")
CLUB = AssociationKind("club", CLUBS_TABLE, USER_CLUBS_TABLE, "club_id")

ASSOCIATION_KINDS: dict[str, AssociationKind] = {
    INTEREST.name: INTEREST,
    CLUB.name: CLUB,
}


def get_association_kind(kind: str | AssociationKind) -> AssociationKind:
    if isinstance(kind, AssociationKind):
        return kind
    try:
        return ASSOCIATION_KINDS[kind]
    except KeyError:
        raise ValueError(f"Unknown association kind: {kind}") from None


class AssociationReconciler:
    """Keeps user_interests / user_clubs in line with a desired name set."""

    def __init__(self, db: DatabaseAdapter):
        self.db = db

    async def reconcile(
        self,
        user_id: Any,
        kind: str | AssociationKind,
        desired_names: Iterable[str],
    ) -> dict[str, Any]:
        """
        Replace the user's links of `kind` with exactly `desired_names`.

        Names match exactly (case-sensitive). Returns name -> tag id for the
        desired set. Raises StoreError if any store call fails.
        """
        kind = get_association_kind(kind)
        names = list(dict.fromkeys(desired_names))

        try:
            tag_ids = {}
            for name in names:
                tag_ids[name] = await self.resolve_tag_id(kind, name)

            existing = set(await self.linked_tag_ids(user_id, kind))
            wanted = list(dict.fromkeys(tag_ids.values()))

            missing = [tag_id for tag_id in wanted if tag_id not in existing]
            stale = [tag_id for tag_id in existing if tag_id not in tag_ids.values()]

            if missing:
                self.db.table(kind.link_table).insert(
                    [{"user_id": user_id, kind.tag_fk: tag_id} for tag_id in missing]
                ).execute()

            if stale:
                (
                    self.db.table(kind.link_table)
                    .delete()
                    .eq("user_id", user_id)
                    .in_(kind.tag_fk, stale)
                    .execute()
                )
        except OnboardingError:
            raise
        except Exception as e:
            logger.error(f"Failed to reconcile {kind.name}s for user {user_id}: {e}")
            raise StoreError() from e

        logger.debug(
            f"Reconciled {kind.name}s for user {user_id}: "
            f"+{len(missing)} -{len(stale)}"
        )
        return tag_ids

    async def resolve_tag_id(self, kind: AssociationKind, name: str) -> Any:
        """
        Look up a tag by exact name, creating it if absent.

        A unique-violation on create means another session created the same
        tag first; the lookup is retried once.
        """
        tag_id = self._find_tag_id(kind, name)
        if tag_id is not None:
            return tag_id

        try:
            result = self.db.table(kind.tag_table).insert({"name": name}).execute()
        except APIError as e:
            if e.code != UNIQUE_VIOLATION:
                raise
            logger.info(f"{kind.name} '{name}' created concurrently, retrying lookup")
            tag_id = self._find_tag_id(kind, name)
            if tag_id is None:
                raise StoreError() from e
            return tag_id

        if not result.data:
            raise StoreError()
        logger.info(f"Created {kind.name} '{name}'")
        return result.data[0]["id"]

    async def linked_tag_ids(self, user_id: Any, kind: str | AssociationKind) -> list[Any]:
        """Tag ids the user is currently linked to for `kind`."""
        kind = get_association_kind(kind)
        result = (
            self.db.table(kind.link_table)
            .select(kind.tag_fk)
            .eq("user_id", user_id)
            .execute()
        )
        return [row[kind.tag_fk] for row in result.data or []]

    def _find_tag_id(self, kind: AssociationKind, name: str) -> Any:
        result = (
            self.db.table(kind.tag_table)
            .select("id")
            .eq("name", name)
            .limit(1)
            .execute()
        )
        if result.data:
            return result.data[0]["id"]
        return None
