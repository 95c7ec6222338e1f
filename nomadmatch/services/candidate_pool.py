"""
Candidate Pool Builder - Bounded set of profiles sent for ranking

The pool keeps the order the profile store returned. When the target user
is straight and has a gender, candidates are narrowed to the opposite
gender; every other orientation passes the population through untouched.
"""

from itertools import islice
from typing import Any, Dict, Iterable, List, Mapping, Optional


def _lower(value: Any) -> Optional[str]:
    if isinstance(value, str):
        return value.lower()
    return None


def opposite_gender(gender: str) -> str:
    """male -> female, anything else -> male."""
    return "female" if gender.lower() == "male" else "male"


def build_pool(
    target: Mapping[str, Any],
    population: Iterable[Mapping[str, Any]],
    max_size: int
) -> List[Dict[str, Any]]:
    """
    Select candidates for one ranking request.

    Args:
        target: Profile of the user looking for matches
        population: Other profiles, in store order
        max_size: Maximum pool size

    Returns:
        Up to max_size candidate profiles in population order
    """
    if max_size <= 0:
        return []

    target_uid = target.get("uid")
    candidates: Iterable[Mapping[str, Any]] = (
        p for p in population
        if target_uid is None or p.get("uid") != target_uid
    )

    target_gender = _lower(target.get("gender"))
    if _lower(target.get("orientation")) == "straight" and target_gender:
        wanted = opposite_gender(target_gender)
        candidates = (c for c in candidates if _lower(c.get("gender")) == wanted)

    return [dict(c) for c in islice(candidates, max_size)]
