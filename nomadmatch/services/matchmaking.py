"""
Matchmaking Service - Completeness gate, pool, ranking and match cards

Pipeline:
    profile --gate--> (complete?) --build_pool--> candidates
            --rank--> MatchResult list --fetch_profiles--> match cards

Ranking failures are contained by the ranking client and surface as an
empty match list. Profile store failures propagate, because they lose
data the user typed in.

Usage:
    service = MatchmakingService(store, get_ranking_client("mock"))
    bundle = await service.find_matches(uid)
    for match, profile in bundle.pairs():
        ...
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence, Tuple

from nomadmatch.services.candidate_pool import build_pool
from nomadmatch.services.completeness import WizardSession, missing_fields
from nomadmatch.services.normalizer import MatchResult
from nomadmatch.services.profile_store import ProfileNotFoundError, ProfileStore
from nomadmatch.services.questions import DATING_QUESTIONS, WizardQuestion
from nomadmatch.services.ranking import RankingClient

logger = logging.getLogger(__name__)

DEFAULT_POOL_SIZE = 20


class WizardIncompleteError(Exception):
    """Raised when fewer answers are supplied than there are missing questions."""

    def __init__(self, remaining: Sequence[WizardQuestion]) -> None:
        fields = ", ".join(q.field for q in remaining)
        super().__init__(f"Unanswered dating questions: {fields}")
        self.remaining = list(remaining)


@dataclass
class MatchBundle:
    """
    Result of one match-fetch cycle.

    Attributes:
        matches: Ranked results, best first
        profiles: Full profiles of matched users, keyed by uid
    """
    matches: List[MatchResult] = field(default_factory=list)
    profiles: Dict[str, Dict[str, Any]] = field(default_factory=dict)

    def pairs(self) -> List[Tuple[MatchResult, Dict[str, Any]]]:
        """Matches whose profile could be loaded, in ranking order."""
        return [(m, self.profiles[m.uid]) for m in self.matches if m.uid in self.profiles]


class MatchmakingService:
    """
    Orchestrates the dating flow for one user at a time.

    Attributes:
        store: Profile store collaborator
        ranking_client: Ranking provider
        catalog: Ordered dating questions
        pool_size: Maximum candidates sent for ranking
    """

    def __init__(
        self,
        store: ProfileStore,
        ranking_client: RankingClient,
        catalog: Sequence[WizardQuestion] = DATING_QUESTIONS,
        pool_size: int = DEFAULT_POOL_SIZE
    ) -> None:
        self.store = store
        self.ranking_client = ranking_client
        self.catalog = tuple(catalog)
        self.pool_size = pool_size

    async def _require_profile(self, uid: str) -> Dict[str, Any]:
        profile = await self.store.get(uid)
        if profile is None:
            raise ProfileNotFoundError(uid)
        return profile

    async def missing_questions(self, uid: str) -> List[WizardQuestion]:
        profile = await self._require_profile(uid)
        return missing_fields(profile, self.catalog)

    async def set_dating_enabled(self, uid: str, enabled: bool) -> List[WizardQuestion]:
        """
        Persist the dating toggle.

        Returns:
            Questions the user must answer before matching (empty when
            disabling or when the profile is already complete)
        """
        profile = await self.store.update(uid, {"enable_dating": enabled})
        if not enabled:
            return []
        return missing_fields(profile, self.catalog)

    async def complete_wizard(self, uid: str, raw_answers: Sequence[str]) -> Dict[str, Any]:
        """
        Answer the missing questions in order and persist the result.

        Args:
            uid: User answering the wizard
            raw_answers: Raw text answers, one per missing question

        Returns:
            The stored profile after the answers were merged

        Raises:
            WizardIncompleteError: If answers run out before the questions do
            ProfileStoreError: If the profile cannot be read or saved
        """
        profile = await self._require_profile(uid)
        session = WizardSession(missing_fields(profile, self.catalog))

        for raw in raw_answers:
            if session.is_complete:
                break
            session.set_input(raw)
            session.advance()

        if not session.is_complete:
            raise WizardIncompleteError(session.questions[session.step:])

        if not session.answers:
            return profile

        updated = await self.store.update(uid, session.answers)
        logger.info(f"Saved {len(session.answers)} wizard answers for {uid}")
        return updated

    async def fetch_profiles(self, uids: Sequence[str]) -> Dict[str, Dict[str, Any]]:
        """
        Load matched profiles concurrently.

        Missing profiles and failed lookups are left out; the rest of the
        batch still comes back.
        """
        results = await asyncio.gather(
            *(self.store.get(uid) for uid in uids),
            return_exceptions=True
        )

        profiles: Dict[str, Dict[str, Any]] = {}
        for uid, result in zip(uids, results):
            if isinstance(result, BaseException):
                logger.warning(f"Could not load matched profile {uid}: {result}")
            elif result is None:
                logger.warning(f"Matched profile {uid} no longer exists")
            else:
                profiles[uid] = result
        return profiles

    async def find_matches(self, uid: str) -> MatchBundle:
        """
        Run the whole matching pipeline for a user.

        Returns an empty bundle when dating is off or the profile is
        still missing answers.
        """
        profile = await self._require_profile(uid)

        if profile.get("enable_dating") is not True:
            return MatchBundle()

        if missing_fields(profile, self.catalog):
            logger.info(f"Profile {uid} has unanswered dating questions, skipping ranking")
            return MatchBundle()

        population = await self.store.list_all()
        pool = build_pool(profile, population, self.pool_size)
        if not pool:
            return MatchBundle()

        ranked = await self.ranking_client.rank(profile, pool)
        matches = self._filter_ranked(ranked, {c.get("uid") for c in pool})

        profiles = await self.fetch_profiles([m.uid for m in matches])
        return MatchBundle(matches=matches, profiles=profiles)

    @staticmethod
    def _filter_ranked(ranked: Sequence[MatchResult], pool_uids: set) -> List[MatchResult]:
        """Drop duplicates and uids the model invented."""
        seen = set()
        matches = []
        for match in ranked:
            if match.uid in seen:
                continue
            if match.uid not in pool_uids:
                logger.warning(f"Ranking returned uid outside the candidate pool: {match.uid}")
                continue
            seen.add(match.uid)
            matches.append(match)
        return matches
