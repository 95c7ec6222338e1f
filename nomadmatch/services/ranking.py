"""
Match Ranking Service - Language-model matchmaking over a candidate pool

The target profile and its candidate pool are written into a single
natural-language prompt. A chat completion model picks the most
compatible candidates and answers (ideally) with a JSON array that the
normalizer turns into MatchResult objects.

Failure Policy:
    Ranking is advisory. A missing API key, a timeout, a transport error
    or an unusable reply all yield an empty list instead of an exception.
    Callers treat "no matches" as a normal state.

Provider Options:
    - OpenAI: chat completions via the async OpenAI client
    - Mock: deterministic shared-interest ranking for tests and local dev

Key Classes:
    - RankingClient: Abstract interface for all ranking providers
    - OpenAIRankingClient: Chat completion backed ranking
    - MockRankingClient: Offline ranking by shared interests
    - get_ranking_client(): Factory function for creating clients
"""

import asyncio
import logging
import time
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Mapping, Optional, Sequence

from openai import AsyncOpenAI

from nomadmatch.middleware.metrics import record_ranking_latency, record_ranking_outcome
from nomadmatch.services.normalizer import MatchResult, normalize_matches

logger = logging.getLogger(__name__)

DEFAULT_RANKING_MODEL = "gpt-3.5-turbo"
DEFAULT_TEMPERATURE = 0.7
DEFAULT_TIMEOUT_SECONDS = 30.0
TOP_MATCH_COUNT = 5

RANKING_PROMPT = """You are a matchmaking assistant.
Here is the target user's data:

{target}

Below are candidate user profiles:

{candidates}

Please pick the top {count} most compatible candidates based on age, city, orientation, and shared interests. Return a JSON array of objects with "uid" and "reason"."""


def _text(value: Any) -> str:
    """Render a profile value for the prompt; absent values become ''."""
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return ", ".join(str(item) for item in value if item is not None)
    return str(value)


def describe_target(profile: Mapping[str, Any]) -> str:
    return "\n".join([
        "Target user:",
        f"Name: {_text(profile.get('name'))}",
        f"Age: {_text(profile.get('age'))}",
        f"City: {_text(profile.get('city'))}",
        f"Orientation: {_text(profile.get('orientation'))}",
        f"Gender: {_text(profile.get('gender'))}",
        f"Interests: {_text(profile.get('interests'))}",
    ])


def describe_candidate(index: int, profile: Mapping[str, Any]) -> str:
    return (
        f"{index}) UID: {_text(profile.get('uid'))}, "
        f"Name: {_text(profile.get('name'))}, "
        f"Age: {_text(profile.get('age'))}, "
        f"City: {_text(profile.get('city'))},\n"
        f"Orientation: {_text(profile.get('orientation'))},\n"
        f"Gender: {_text(profile.get('gender'))},\n"
        f"Interests: {_text(profile.get('interests'))}"
    )


def build_prompt(
    target: Mapping[str, Any],
    candidates: Sequence[Mapping[str, Any]]
) -> str:
    """
    Build the ranking prompt for one request.

    Args:
        target: Profile of the user looking for matches
        candidates: Pool produced by build_pool()

    Returns:
        Prompt text asking for a JSON array of uid/reason objects
    """
    lines = ["Candidates:"]
    for index, candidate in enumerate(candidates, start=1):
        lines.append(describe_candidate(index, candidate))

    return RANKING_PROMPT.format(
        target=describe_target(target),
        candidates="\n".join(lines),
        count=TOP_MATCH_COUNT,
    )


class RankingClient(ABC):
    """
    Abstract base class for ranking providers.

    Implementations must never raise for provider-side failures; they
    return an empty list instead.
    """

    @abstractmethod
    async def rank(
        self,
        target: Mapping[str, Any],
        candidates: Sequence[Mapping[str, Any]]
    ) -> List[MatchResult]:
        """
        Rank candidates for the target user.

        Args:
            target: Profile of the user looking for matches
            candidates: Candidate profiles, each carrying a uid

        Returns:
            Best matches first (possibly empty)
        """
        pass


class OpenAIRankingClient(RankingClient):
    """
    Ranking via OpenAI chat completions.

    Each call sends exactly one user message; nothing is cached, so
    identical inputs can produce different rankings.

    Attributes:
        api_key: OpenAI API key (empty disables ranking)
        model: Chat model name
        temperature: Sampling temperature
        timeout: Seconds to wait for a completion

    Example:
        >>> client = OpenAIRankingClient(api_key="sk-...")
        >>> matches = await client.rank(me, pool)
    """

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_RANKING_MODEL,
        temperature: float = DEFAULT_TEMPERATURE,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        client: Optional[Any] = None
    ) -> None:
        """
        Initialize the OpenAI ranking client.

        Args:
            api_key: OpenAI API key
            model: Chat model name
            temperature: Sampling temperature
            timeout: Seconds before a call counts as failed
            client: Pre-built async client (used by tests)
        """
        self.api_key = api_key
        self.model = model
        self.temperature = temperature
        self.timeout = timeout
        self._client = client

    def _get_client(self) -> Any:
        """Get or create the async OpenAI client."""
        if self._client is None:
            self._client = AsyncOpenAI(api_key=self.api_key, timeout=self.timeout)
        return self._client

    async def _complete(self, prompt: str) -> str:
        response = await self._get_client().chat.completions.create(
            model=self.model,
            messages=[{"role": "user", "content": prompt}],
            temperature=self.temperature,
        )
        return response.choices[0].message.content

    async def rank(
        self,
        target: Mapping[str, Any],
        candidates: Sequence[Mapping[str, Any]]
    ) -> List[MatchResult]:
        if not self.api_key:
            logger.warning("No OpenAI API key configured, returning no matches")
            record_ranking_outcome("no_credentials")
            return []

        if not candidates:
            return []

        prompt = build_prompt(target, candidates)
        start = time.perf_counter()

        try:
            content = await asyncio.wait_for(self._complete(prompt), timeout=self.timeout)
        except asyncio.TimeoutError:
            logger.error(f"Ranking request timed out after {self.timeout}s")
            record_ranking_outcome("error")
            return []
        except Exception as e:
            logger.error(f"Ranking request failed: {e}")
            record_ranking_outcome("error")
            return []
        finally:
            record_ranking_latency(time.perf_counter() - start)

        matches = normalize_matches(content)
        record_ranking_outcome("success" if matches else "malformed")
        logger.info(f"Ranked {len(candidates)} candidates into {len(matches)} matches")
        return matches


class MockRankingClient(RankingClient):
    """
    Mock ranking client for tests and offline development.

    Orders candidates by the number of interests shared with the target
    (ties keep pool order) and returns the top five.
    """

    def __init__(self, top_k: int = TOP_MATCH_COUNT) -> None:
        self.top_k = top_k

    async def rank(
        self,
        target: Mapping[str, Any],
        candidates: Sequence[Mapping[str, Any]]
    ) -> List[MatchResult]:
        mine = {i.strip().lower() for i in target.get("interests") or [] if isinstance(i, str)}

        scored = []
        for candidate in candidates:
            theirs = {
                i.strip().lower() for i in candidate.get("interests") or []
                if isinstance(i, str)
            }
            shared = sorted(mine & theirs)
            scored.append((len(shared), candidate, shared))

        # sort() is stable, so equal scores keep pool order
        scored.sort(key=lambda x: -x[0])

        results = []
        for _, candidate, shared in scored[:self.top_k]:
            reason = (
                f"Shared interests: {', '.join(shared)}" if shared
                else "Nearby traveller worth meeting"
            )
            results.append(MatchResult(
                uid=str(candidate.get("uid")),
                name=candidate.get("name"),
                reason=reason,
            ))
        return results


def get_ranking_client(
    provider: str = "openai",
    api_key: Optional[str] = None,
    model_name: Optional[str] = None,
    **kwargs: Any
) -> RankingClient:
    """
    Factory function to create ranking clients.

    Args:
        provider: "openai" or "mock"
        api_key: OpenAI API key (may be empty; ranking then returns [])
        model_name: Optional model name override
        **kwargs: Provider-specific arguments (temperature, timeout)

    Returns:
        RankingClient instance

    Raises:
        ValueError: If provider is unknown
    """
    provider = provider.lower()

    if provider == "openai":
        return OpenAIRankingClient(
            api_key=api_key or "",
            model=model_name or DEFAULT_RANKING_MODEL,
            **kwargs
        )

    elif provider == "mock":
        return MockRankingClient()

    else:
        raise ValueError(
            f"Unknown ranking provider: {provider}. "
            f"Supported: openai, mock"
        )
