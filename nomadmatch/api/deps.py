"""FastAPI dependency providers for the matching services."""

from functools import lru_cache
from fastapi import Depends

from nomadmatch.config import get_settings
from nomadmatch.database import async_session
from nomadmatch.services.matchmaking import MatchmakingService
from nomadmatch.services.profile_store import ProfileStore, SQLAlchemyProfileStore
from nomadmatch.services.questions import get_catalog
from nomadmatch.services.ranking import RankingClient, get_ranking_client


def get_profile_store() -> ProfileStore:
    return SQLAlchemyProfileStore(async_session)


async def get_or_create_profile(store: ProfileStore, uid: str) -> dict:
    """Load the caller's profile, creating an empty one on first use."""
    profile = await store.get(uid)
    if profile is None:
        profile = await store.create(uid, {})
    return profile


@lru_cache
def get_configured_ranking_client() -> RankingClient:
    """Shared ranking client so the underlying HTTP pool is reused."""
    settings = get_settings()
    return get_ranking_client(
        provider=settings.ranking_provider,
        api_key=settings.openai_api_key,
        model_name=settings.ranking_model,
        temperature=settings.ranking_temperature,
        timeout=settings.ranking_timeout_seconds,
    )


def get_matchmaking_service(
    store: ProfileStore = Depends(get_profile_store),
    ranking_client: RankingClient = Depends(get_configured_ranking_client),
) -> MatchmakingService:
    return MatchmakingService(
        store=store,
        ranking_client=ranking_client,
        catalog=get_catalog(),
        pool_size=get_settings().candidate_pool_size,
    )
