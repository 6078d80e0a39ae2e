"""
Badge rule engine.

Evaluates the badge catalog against a BadgeCheckData snapshot and persists
each newly unlocked badge through an injected BadgeStore. The engine holds no
per-user state, so one instance can evaluate any number of users.
"""

import logging
import uuid
from datetime import datetime
from typing import Callable, Iterable, List, Optional, Protocol, Sequence, Set

from reflector.core.datetime_utils import utc_now
from reflector.schemas.activity import BadgeCheckData
from reflector.schemas.badges import Badge

from .catalog import BADGE_DEFINITIONS, BadgeDefinition

logger = logging.getLogger(__name__)


class BadgeStore(Protocol):
    """
    Persistence port for unlocked badges.

    Implementations must enforce at most one badge per (user_id, badge_id).
    """

    def unlock_badge(self, badge: Badge) -> bool:
        """
        Persist a newly unlocked badge.

        Args:
            badge: Badge to store

        Returns:
            True if stored, False if the user already owned this badge
        """
        ...


def _new_badge_id() -> str:
    return str(uuid.uuid4())


class BadgeEngine:
    """
    Declarative badge evaluation.

    For every catalog entry not already unlocked, the entry's predicate is
    invoked against the snapshot. Each predicate that holds yields exactly
    one Badge with a fresh id and the current time, written once to the
    store. Re-evaluating an unlocked badge never creates a duplicate.
    """

    def __init__(
        self,
        store: BadgeStore,
        catalog: Sequence[BadgeDefinition] = BADGE_DEFINITIONS,
        clock: Callable[[], datetime] = utc_now,
        id_factory: Callable[[], str] = _new_badge_id,
    ):
        self.store = store
        self.catalog = catalog
        self.clock = clock
        self.id_factory = id_factory

    def evaluate(
        self,
        user_id: str,
        data: BadgeCheckData,
        already_unlocked_ids: Optional[Iterable[str]] = None,
    ) -> List[Badge]:
        """
        Unlock every badge whose condition now holds.

        Args:
            user_id: Owner of the snapshot
            data: Activity snapshot assembled for this pass
            already_unlocked_ids: Badge ids the user owns. Defaults to the
                ids carried by the snapshot.

        Returns:
            Newly unlocked badges, in catalog order
        """
        if already_unlocked_ids is None:
            already_unlocked_ids = data.unlocked_badge_ids
        unlocked: Set[str] = set(already_unlocked_ids)

        newly_unlocked: List[Badge] = []
        for definition in self.catalog:
            if definition.id in unlocked:
                continue
            if not definition.condition(data):
                continue

            badge = Badge(
                id=self.id_factory(),
                badge_id=definition.id,
                user_id=user_id,
                name=definition.name,
                description=definition.description,
                icon=definition.icon,
                unlocked_at=self.clock(),
            )
            unlocked.add(definition.id)

            if not self.store.unlock_badge(badge):
                logger.info(
                    f"Badge '{definition.id}' already stored, skipping",
                    extra={"user_id": user_id, "badge_id": definition.id},
                )
                continue

            logger.info(
                f"Unlocked badge '{definition.id}'",
                extra={"user_id": user_id, "badge_id": definition.id},
            )
            newly_unlocked.append(badge)

        return newly_unlocked
