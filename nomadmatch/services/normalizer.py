"""
Response Normalizer - Completion text to MatchResult list

The ranking model is asked for a JSON array of {"uid", "reason"} objects,
but nothing forces it to comply. This module is the only place its raw
text is turned into typed results, and it never raises: anything it
cannot use becomes an empty list.

Accepted Shapes:
    - [{"uid": ..., "reason": ...}, ...]
    - {"matches": [...]} or any object with a list-valued field
    - either of the above wrapped in ``` or ```json fences
"""

import json
import logging
import re
from dataclasses import dataclass
from typing import Any, List, Optional

logger = logging.getLogger(__name__)

_OPENING_FENCE = re.compile(r"^```[a-zA-Z]*\s*")
_CLOSING_FENCE = re.compile(r"\s*```$")

MATCHES_KEY = "matches"


@dataclass(frozen=True)
class MatchResult:
    """
    One ranked candidate.

    Attributes:
        uid: Candidate identifier
        name: Display name, if the model echoed one
        reason: Model's explanation for the match
    """
    uid: str
    name: Optional[str] = None
    reason: Optional[str] = None


def strip_code_fences(text: str) -> str:
    """Remove a leading ```/```json fence and a trailing ``` fence."""
    text = text.strip()
    text = _OPENING_FENCE.sub("", text, count=1)
    text = _CLOSING_FENCE.sub("", text, count=1)
    return text.strip()


def _extract_entries(data: Any) -> Optional[List[Any]]:
    if isinstance(data, list):
        return data
    if isinstance(data, dict):
        if isinstance(data.get(MATCHES_KEY), list):
            return data[MATCHES_KEY]
        for value in data.values():
            if isinstance(value, list):
                return value
    return None


def _to_match(entry: Any) -> Optional[MatchResult]:
    if not isinstance(entry, dict):
        return None

    uid = entry.get("uid")
    # bool is an int subclass but never a valid uid
    if isinstance(uid, bool) or not isinstance(uid, (str, int)):
        return None
    uid = str(uid).strip()
    if not uid:
        return None

    name = entry.get("name")
    reason = entry.get("reason")
    return MatchResult(
        uid=uid,
        name=name if isinstance(name, str) else None,
        reason=reason if isinstance(reason, str) else None,
    )


def normalize_matches(raw: Any) -> List[MatchResult]:
    """
    Parse ranking model output into match results.

    Args:
        raw: Completion text (anything else yields an empty list)

    Returns:
        MatchResult list in the order the model gave them
    """
    if not isinstance(raw, str) or not raw.strip():
        return []

    content = strip_code_fences(raw)

    try:
        data = json.loads(content)
    except (ValueError, RecursionError):
        logger.warning(f"Failed to parse ranking response as JSON: {raw[:200]!r}")
        return []

    entries = _extract_entries(data)
    if entries is None:
        logger.warning(f"Ranking response held no match list: {raw[:200]!r}")
        return []

    matches = []
    for entry in entries:
        match = _to_match(entry)
        if match is not None:
            matches.append(match)
    return matches
